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

"""iTwin Reporting SDK
=====================
"""

from ._utils import is_valid_ec_property
from .data import (
    CalculatedProperty,
    CalculatedPropertyCreate,
    CalculatedPropertyType,
    CalculatedPropertyUpdate,
    CustomCalculation,
    CustomCalculationCreate,
    CustomCalculationUpdate,
    DataType,
    ECProperty,
    ExtractionLog,
    ExtractionRun,
    ExtractionStatus,
    ExtractorState,
    Group,
    GroupCreate,
    GroupProperty,
    GroupPropertyCreate,
    GroupPropertyUpdate,
    GroupUpdate,
    Mapping,
    MappingCopy,
    MappingCreate,
    MappingUpdate,
    ODataEntityResponse,
    ODataItem,
    ODataResponse,
    QuantityType,
    Report,
    ReportCreate,
    ReportMapping,
    ReportMappingCreate,
    ReportUpdate,
)
from .extraction import ExtractionClient
from .mappings import MappingsClient
from .odata import ODataClient
from .reports import ReportsClient

__all__ = [
    "CalculatedProperty",
    "CalculatedPropertyCreate",
    "CalculatedPropertyType",
    "CalculatedPropertyUpdate",
    "CustomCalculation",
    "CustomCalculationCreate",
    "CustomCalculationUpdate",
    "DataType",
    "ECProperty",
    "ExtractionClient",
    "ExtractionLog",
    "ExtractionRun",
    "ExtractionStatus",
    "ExtractorState",
    "Group",
    "GroupCreate",
    "GroupProperty",
    "GroupPropertyCreate",
    "GroupPropertyUpdate",
    "GroupUpdate",
    "Mapping",
    "MappingCopy",
    "MappingCreate",
    "MappingUpdate",
    "MappingsClient",
    "ODataClient",
    "ODataEntityResponse",
    "ODataItem",
    "ODataResponse",
    "QuantityType",
    "Report",
    "ReportCreate",
    "ReportMapping",
    "ReportMappingCreate",
    "ReportUpdate",
    "ReportsClient",
    "is_valid_ec_property",
]
