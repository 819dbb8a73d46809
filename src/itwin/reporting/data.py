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
from typing import Any

from pydantic import Field

from itwin.common.data import CollectionResponse, Link, SDKModel

__all__ = [
    "CalculatedProperty",
    "CalculatedPropertyCollection",
    "CalculatedPropertyCreate",
    "CalculatedPropertySingle",
    "CalculatedPropertyType",
    "CalculatedPropertyUpdate",
    "CustomCalculation",
    "CustomCalculationCollection",
    "CustomCalculationCreate",
    "CustomCalculationSingle",
    "CustomCalculationUpdate",
    "DataType",
    "ECProperty",
    "ExtractionLog",
    "ExtractionLogCollection",
    "ExtractionRun",
    "ExtractionRunSingle",
    "ExtractionStatus",
    "ExtractionStatusSingle",
    "ExtractorState",
    "Group",
    "GroupCollection",
    "GroupCreate",
    "GroupProperty",
    "GroupPropertyCollection",
    "GroupPropertyCreate",
    "GroupPropertySingle",
    "GroupPropertyUpdate",
    "GroupSingle",
    "GroupUpdate",
    "Mapping",
    "MappingCollection",
    "MappingCopy",
    "MappingCreate",
    "MappingSingle",
    "MappingUpdate",
    "ODataEntityResponse",
    "ODataItem",
    "ODataResponse",
    "QuantityType",
    "Report",
    "ReportCollection",
    "ReportCreate",
    "ReportMapping",
    "ReportMappingCollection",
    "ReportMappingCreate",
    "ReportMappingSingle",
    "ReportSingle",
    "ReportUpdate",
]


class DataType(str, enum.Enum):
    """Data type of a group property or an ECProperty."""

    BOOLEAN = "Boolean"
    NUMBER = "Number"
    STRING = "String"
    INTEGER = "Integer"
    UNDEFINED = "Undefined"


class QuantityType(str, enum.Enum):
    """Quantity type of a property, used for unit conversion."""

    AREA = "Area"
    DISTANCE = "Distance"
    FORCE = "Force"
    MASS = "Mass"
    MONETARY = "Monetary"
    TIME = "Time"
    VOLUME = "Volume"
    UNDEFINED = "Undefined"


class CalculatedPropertyType(str, enum.Enum):
    """Geometric quantity computed by a calculated property."""

    AREA = "Area"
    LENGTH = "Length"
    VOLUME = "Volume"
    BOUNDING_BOX_LONGEST_EDGE_LENGTH = "BoundingBoxLongestEdgeLength"
    BOUNDING_BOX_INTERMEDIATE_EDGE_LENGTH = "BoundingBoxIntermediateEdgeLength"
    BOUNDING_BOX_SHORTEST_EDGE_LENGTH = "BoundingBoxShortestEdgeLength"
    BOUNDING_BOX_DIAGONAL_LENGTH = "BoundingBoxDiagonalLength"
    BOUNDING_BOX_LONGEST_FACE_DIAGONAL_LENGTH = "BoundingBoxLongestFaceDiagonalLength"
    BOUNDING_BOX_INTERMEDIATE_FACE_DIAGONAL_LENGTH = "BoundingBoxIntermediateFaceDiagonalLength"
    BOUNDING_BOX_SHORTEST_FACE_DIAGONAL_LENGTH = "BoundingBoxShortestFaceDiagonalLength"
    UNDEFINED = "Undefined"


class ExtractorState(str, enum.Enum):
    """State of an extraction run."""

    QUEUED = "Queued"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"

    @property
    def is_pending(self) -> bool:
        """Whether the extraction run has not finished yet."""
        return self in (ExtractorState.QUEUED, ExtractorState.RUNNING)


# Mappings


class Mapping(SDKModel):
    """Defines how data of an iModel is mapped into groups."""

    id: str
    mapping_name: str
    description: str | None = None
    extraction_enabled: bool | None = None
    created_on: datetime | None = None
    created_by: str | None = None
    modified_on: datetime | None = None
    modified_by: str | None = None
    links: dict[str, Link | None] = Field(default_factory=dict, alias="_links")


class MappingCollection(CollectionResponse):
    mappings: list[Mapping] = Field(default_factory=list)


class MappingSingle(SDKModel):
    mapping: Mapping


class MappingCreate(SDKModel):
    """Properties of a new mapping. `mapping_name` is required."""

    mapping_name: str | None = None
    description: str | None = None
    extraction_enabled: bool | None = None


class MappingUpdate(SDKModel):
    """Properties to change on a mapping. At least one field must be set."""

    mapping_name: str | None = None
    description: str | None = None
    extraction_enabled: bool | None = None


class MappingCopy(SDKModel):
    """Copy a mapping to another iModel. `target_imodel_id` is required."""

    target_imodel_id: str | None = Field(default=None, alias="targetiModelId")
    mapping_name: str | None = None


# Groups


class Group(SDKModel):
    """A subset of a mapping, defined by an ECSQL query."""

    id: str
    group_name: str
    description: str | None = None
    query: str | None = None
    links: dict[str, Link | None] = Field(default_factory=dict, alias="_links")


class GroupCollection(CollectionResponse):
    groups: list[Group] = Field(default_factory=list)


class GroupSingle(SDKModel):
    group: Group


class GroupCreate(SDKModel):
    """Properties of a new group. `group_name` and `query` are required."""

    group_name: str | None = None
    description: str | None = None
    query: str | None = None


class GroupUpdate(SDKModel):
    """Properties to change on a group. At least one field must be set."""

    group_name: str | None = None
    description: str | None = None
    query: str | None = None


# Group properties


class ECProperty(SDKModel):
    """Reference to a property of an EC class, used as the source of a group property."""

    ec_schema_name: str | None = None
    ec_class_name: str | None = None
    ec_property_name: str | None = None
    ec_property_type: DataType | None = None


class GroupProperty(SDKModel):
    id: str
    property_name: str
    data_type: DataType | None = None
    quantity_type: QuantityType | None = None
    ec_properties: list[ECProperty] = Field(default_factory=list)
    links: dict[str, Link | None] = Field(default_factory=dict, alias="_links")


class GroupPropertyCollection(CollectionResponse):
    properties: list[GroupProperty] = Field(default_factory=list)


class GroupPropertySingle(SDKModel):
    property: GroupProperty


class GroupPropertyCreate(SDKModel):
    """Properties of a new group property.

    `property_name`, `data_type` and at least one valid `ECProperty` are required.
    """

    property_name: str | None = None
    data_type: DataType | None = None
    quantity_type: QuantityType | None = None
    ec_properties: list[ECProperty] | None = None


class GroupPropertyUpdate(GroupPropertyCreate):
    """Replacement properties of a group property. The same fields as on creation are required."""


# Calculated properties


class CalculatedProperty(SDKModel):
    id: str
    property_name: str
    type: CalculatedPropertyType | None = None
    quantity_type: QuantityType | None = None
    links: dict[str, Link | None] = Field(default_factory=dict, alias="_links")


class CalculatedPropertyCollection(CollectionResponse):
    properties: list[CalculatedProperty] = Field(default_factory=list)


class CalculatedPropertySingle(SDKModel):
    property: CalculatedProperty


class CalculatedPropertyCreate(SDKModel):
    """Properties of a new calculated property. `property_name` and `type` are required."""

    property_name: str | None = None
    type: CalculatedPropertyType | None = None


class CalculatedPropertyUpdate(SDKModel):
    """Properties to change on a calculated property. At least one field must be set."""

    property_name: str | None = None
    type: CalculatedPropertyType | None = None


# Custom calculations


class CustomCalculation(SDKModel):
    id: str
    property_name: str
    formula: str | None = None
    data_type: DataType | None = None
    quantity_type: QuantityType | None = None
    links: dict[str, Link | None] = Field(default_factory=dict, alias="_links")


class CustomCalculationCollection(CollectionResponse):
    custom_calculations: list[CustomCalculation] = Field(default_factory=list)


class CustomCalculationSingle(SDKModel):
    custom_calculation: CustomCalculation


class CustomCalculationCreate(SDKModel):
    """Properties of a new custom calculation. `property_name` and `formula` are required."""

    property_name: str | None = None
    formula: str | None = None
    data_type: DataType | None = None
    quantity_type: QuantityType | None = None


class CustomCalculationUpdate(SDKModel):
    """Properties to change on a custom calculation. At least one field must be set."""

    property_name: str | None = None
    formula: str | None = None
    data_type: DataType | None = None
    quantity_type: QuantityType | None = None


# Reports


class Report(SDKModel):
    id: str
    display_name: str
    description: str | None = None
    deleted: bool = False
    links: dict[str, Link | None] = Field(default_factory=dict, alias="_links")


class ReportCollection(CollectionResponse):
    reports: list[Report] = Field(default_factory=list)


class ReportSingle(SDKModel):
    report: Report


class ReportCreate(SDKModel):
    """Properties of a new report. `display_name` and `project_id` are required."""

    display_name: str | None = None
    description: str | None = None
    project_id: str | None = None


class ReportUpdate(SDKModel):
    """Properties to change on a report. At least one field must be set."""

    display_name: str | None = None
    description: str | None = None
    deleted: bool | None = None


class ReportMapping(SDKModel):
    report_id: str | None = None
    mapping_id: str
    imodel_id: str | None = None
    links: dict[str, Link | None] = Field(default_factory=dict, alias="_links")


class ReportMappingCollection(CollectionResponse):
    mappings: list[ReportMapping] = Field(default_factory=list)


class ReportMappingSingle(SDKModel):
    mapping: ReportMapping


class ReportMappingCreate(SDKModel):
    """Link a mapping to a report. `mapping_id` and `imodel_id` are required."""

    mapping_id: str | None = None
    imodel_id: str | None = None


# OData


class ODataItem(SDKModel):
    """Reference to a table exported to a report."""

    name: str
    url: str
    """Relative URL of the entity, with three segments."""


class ODataResponse(SDKModel):
    odata_context: str | None = Field(default=None, alias="@odata.context")
    value: list[ODataItem] = Field(default_factory=list)


class ODataEntityResponse(SDKModel):
    odata_context: str | None = Field(default=None, alias="@odata.context")
    value: list[dict[str, Any]] | None = None
    """The rows of the page. The service may send `null` for a page without rows."""
    odata_next_link: str | None = Field(default=None, alias="@odata.nextLink")


# Extraction


class ExtractionRun(SDKModel):
    id: str
    links: dict[str, Link | None] = Field(default_factory=dict, alias="_links")


class ExtractionRunSingle(SDKModel):
    run: ExtractionRun


class ExtractionStatus(SDKModel):
    state: ExtractorState
    reason: str | None = None
    contains_issues: bool | None = None
    links: dict[str, Link | None] = Field(default_factory=dict, alias="_links")


class ExtractionStatusSingle(SDKModel):
    status: ExtractionStatus


class ExtractionLog(SDKModel):
    state: ExtractorState | None = None
    reason: str | None = None
    contains_issues: bool | None = None
    log_type: str | None = None
    date_time: datetime | None = None
    context_type: str | None = None
    context_id: str | None = None


class ExtractionLogCollection(CollectionResponse):
    logs: list[ExtractionLog] = Field(default_factory=list)
