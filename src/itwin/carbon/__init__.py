#  Copyright © 2025 Bentley Systems, Incorporated
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#      http://www.apache.org/licenses/LICENSE-2.0
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.

"""iTwin Carbon Calculation SDK
==============================
"""

from .client import EC3ConfigurationsClient, EC3JobsClient
from .data import (
    CarbonUploadState,
    EC3Configuration,
    EC3ConfigurationCreate,
    EC3ConfigurationLabel,
    EC3ConfigurationMaterial,
    EC3ConfigurationUpdate,
    EC3Job,
    EC3JobCreate,
    EC3JobStatus,
)

__all__ = [
    "CarbonUploadState",
    "EC3Configuration",
    "EC3ConfigurationCreate",
    "EC3ConfigurationLabel",
    "EC3ConfigurationMaterial",
    "EC3ConfigurationUpdate",
    "EC3ConfigurationsClient",
    "EC3Job",
    "EC3JobCreate",
    "EC3JobStatus",
    "EC3JobsClient",
]
