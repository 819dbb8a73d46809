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

from __future__ import annotations

import enum
from datetime import datetime

from pydantic import Field

from itwin.common.data import CollectionResponse, Link, SDKModel

__all__ = [
    "CarbonUploadState",
    "EC3Configuration",
    "EC3ConfigurationCollection",
    "EC3ConfigurationCreate",
    "EC3ConfigurationLabel",
    "EC3ConfigurationMaterial",
    "EC3ConfigurationSingle",
    "EC3ConfigurationUpdate",
    "EC3Job",
    "EC3JobCreate",
    "EC3JobSingle",
    "EC3JobStatus",
    "EC3JobStatusSingle",
]


class CarbonUploadState(str, enum.Enum):
    """State of an EC3 export job."""

    QUEUED = "Queued"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"

    @property
    def is_pending(self) -> bool:
        """Whether the job has not finished yet."""
        return self in (CarbonUploadState.QUEUED, CarbonUploadState.RUNNING)


class EC3ConfigurationMaterial(SDKModel):
    name_column: str | None = None
    """Report column holding the material name."""


class EC3ConfigurationLabel(SDKModel):
    """Maps the rows of a report table to EC3 elements."""

    name: str | None = None
    report_table: str | None = None
    element_name_column: str | None = None
    element_quantity_column: str | None = None
    materials: list[EC3ConfigurationMaterial] = Field(default_factory=list)


class EC3Configuration(SDKModel):
    id: str
    display_name: str
    description: str | None = None
    labels: list[EC3ConfigurationLabel] = Field(default_factory=list)
    created_on: datetime | None = None
    created_by: str | None = None
    modified_on: datetime | None = None
    modified_by: str | None = None
    links: dict[str, Link | None] = Field(default_factory=dict, alias="_links")


class EC3ConfigurationCollection(CollectionResponse):
    configurations: list[EC3Configuration] = Field(default_factory=list)


class EC3ConfigurationSingle(SDKModel):
    configuration: EC3Configuration


class EC3ConfigurationCreate(SDKModel):
    """Properties of a new EC3 configuration. `report_id`, `display_name` and at least one label are required."""

    report_id: str | None = None
    display_name: str | None = None
    description: str | None = None
    labels: list[EC3ConfigurationLabel] | None = None


class EC3ConfigurationUpdate(SDKModel):
    """Replacement properties of an EC3 configuration."""

    display_name: str | None = None
    description: str | None = None
    labels: list[EC3ConfigurationLabel] | None = None


class EC3JobCreate(SDKModel):
    """Export report data to an EC3 project. All fields are required."""

    configuration_id: str | None = None
    project_name: str | None = None
    ec3_bearer_token: str | None = None
    """Access token for the EC3 API."""


class EC3Job(SDKModel):
    id: str
    links: dict[str, Link | None] = Field(default_factory=dict, alias="_links")


class EC3JobSingle(SDKModel):
    job: EC3Job


class EC3JobStatus(SDKModel):
    id: str | None = None
    status: CarbonUploadState
    message: str | None = None
    links: dict[str, Link | None] = Field(default_factory=dict, alias="_links")


class EC3JobStatusSingle(SDKModel):
    job: EC3JobStatus
