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

from itwin.common import APIConnector, EmptyResponse, EntityListIterator, OperationsBase, RequestMethod, page_size
from itwin.common.validation import require, require_any_field, require_value

from ._utils import is_valid_ec_property, require_identifier
from .data import (
    CalculatedProperty,
    CalculatedPropertyCollection,
    CalculatedPropertyCreate,
    CalculatedPropertySingle,
    CalculatedPropertyType,
    CalculatedPropertyUpdate,
    CustomCalculation,
    CustomCalculationCollection,
    CustomCalculationCreate,
    CustomCalculationSingle,
    CustomCalculationUpdate,
    DataType,
    Group,
    GroupCollection,
    GroupCreate,
    GroupProperty,
    GroupPropertyCollection,
    GroupPropertyCreate,
    GroupPropertySingle,
    GroupPropertyUpdate,
    GroupSingle,
    GroupUpdate,
    Mapping,
    MappingCollection,
    MappingCopy,
    MappingCreate,
    MappingSingle,
    MappingUpdate,
)

__all__ = ["MappingsClient"]

_MAPPINGS = "datasources/imodels/{imodelId}/mappings"
_MAPPING = _MAPPINGS + "/{mappingId}"
_GROUPS = _MAPPING + "/groups"
_GROUP = _GROUPS + "/{groupId}"
_GROUP_PROPERTIES = _GROUP + "/properties"
_CALCULATED_PROPERTIES = _GROUP + "/calculatedProperties"
_CUSTOM_CALCULATIONS = _GROUP + "/customCalculations"


def _validate_group_property(prop: GroupPropertyCreate, operation: str) -> None:
    require_identifier(prop.property_name, "property_name", operation)
    require(
        prop.data_type is not None and prop.data_type != DataType.UNDEFINED,
        "data_type",
        operation,
        "was missing or undefined",
    )
    require(bool(prop.ec_properties), "ec_properties", operation, "was null or empty")
    require(
        all(is_valid_ec_property(ec_property) for ec_property in prop.ec_properties),
        "ec_properties",
        operation,
        "contained an ECProperty with a missing name or an undefined type",
    )


class MappingsClient(OperationsBase):
    """Client for the mappings of iModel data sources, and the groups and properties they define.

    All operations take the access token to send in the `Authorization` header, e.g., `Bearer <token>`, with scope
    `insights:read` for reads and `insights:modify` for writes.
    """

    def __init__(self, connector: APIConnector) -> None:
        """
        :param connector: Connector targeting the Reporting API, e.g., `https://api.bentley.com/insights/reporting`.
        """
        super().__init__(connector)

    # Mappings

    async def get_mappings(self, access_token: str, imodel_id: str, top: int | None = None) -> list[Mapping]:
        """Get all mappings of an iModel.

        :param access_token: The value of the `Authorization` header.
        :param imodel_id: The iModel ID.
        :param top: The maximum number of mappings per page.

        :return: All mappings, in server order.
        """
        return await self.get_mappings_iterator(access_token, imodel_id, top).to_list()

    def get_mappings_iterator(
        self, access_token: str, imodel_id: str, top: int | None = None
    ) -> EntityListIterator[Mapping]:
        """Get a lazy iterator over the mappings of an iModel.

        :param access_token: The value of the `Authorization` header.
        :param imodel_id: The iModel ID.
        :param top: The maximum number of mappings per page.

        :return: An iterator that fetches pages as they are consumed.
        """
        return self.get_entity_collection_iterator(
            _MAPPINGS,
            self.create_request(RequestMethod.GET, access_token),
            MappingCollection,
            lambda response: response.mappings,
            path_params={"imodelId": imodel_id},
            query_params={"$top": page_size(top)},
        )

    async def get_mapping(self, access_token: str, imodel_id: str, mapping_id: str) -> Mapping:
        """Get a mapping.

        :raises NotFoundException: If the mapping does not exist.
        """
        response = await self.fetch_data(
            _MAPPING,
            self.create_request(RequestMethod.GET, access_token),
            MappingSingle,
            path_params={"imodelId": imodel_id, "mappingId": mapping_id},
        )
        return response.mapping

    async def create_mapping(self, access_token: str, imodel_id: str, mapping: MappingCreate) -> Mapping:
        """Create a mapping for an iModel.

        :param access_token: The value of the `Authorization` header.
        :param imodel_id: The iModel ID.
        :param mapping: The new mapping. The name must be a simple identifier.

        :return: The created mapping.

        :raises RequiredError: If the mapping name is missing or invalid. No request is sent.
        """
        require_identifier(mapping.mapping_name, "mapping_name", "create_mapping")
        response = await self.fetch_data(
            _MAPPINGS,
            self.create_request(RequestMethod.POST, access_token, mapping),
            MappingSingle,
            path_params={"imodelId": imodel_id},
        )
        return response.mapping

    async def update_mapping(
        self, access_token: str, imodel_id: str, mapping_id: str, mapping: MappingUpdate
    ) -> Mapping:
        """Update a mapping.

        :raises RequiredError: If no field is set, or the new name is not a simple identifier. No request is sent.
        """
        require_any_field(mapping, "mapping", "update_mapping")
        require_identifier(mapping.mapping_name, "mapping_name", "update_mapping", optional=True)
        response = await self.fetch_data(
            _MAPPING,
            self.create_request(RequestMethod.PATCH, access_token, mapping),
            MappingSingle,
            path_params={"imodelId": imodel_id, "mappingId": mapping_id},
        )
        return response.mapping

    async def delete_mapping(self, access_token: str, imodel_id: str, mapping_id: str) -> EmptyResponse:
        """Delete a mapping, and all of its groups and properties.

        :return: The `204 No Content` response.
        """
        return await self.fetch_data(
            _MAPPING,
            self.create_request(RequestMethod.DELETE, access_token),
            path_params={"imodelId": imodel_id, "mappingId": mapping_id},
        )

    async def copy_mapping(
        self, access_token: str, imodel_id: str, mapping_id: str, mapping_copy: MappingCopy
    ) -> Mapping:
        """Copy a mapping, with all of its groups and properties, to a target iModel.

        :param access_token: The value of the `Authorization` header.
        :param imodel_id: The ID of the source mapping's iModel.
        :param mapping_id: The ID of the source mapping.
        :param mapping_copy: The target iModel, and optionally a new name for the copy.

        :return: The new mapping.

        :raises RequiredError: If the target iModel is missing, or the new name is invalid. No request is sent.
        """
        require_value(mapping_copy.target_imodel_id, "target_imodel_id", "copy_mapping")
        require_identifier(mapping_copy.mapping_name, "mapping_name", "copy_mapping", optional=True)
        response = await self.fetch_data(
            _MAPPING + "/copy",
            self.create_request(RequestMethod.POST, access_token, mapping_copy),
            MappingSingle,
            path_params={"imodelId": imodel_id, "mappingId": mapping_id},
        )
        return response.mapping

    # Groups

    async def get_groups(
        self, access_token: str, imodel_id: str, mapping_id: str, top: int | None = None
    ) -> list[Group]:
        """Get all groups of a mapping."""
        return await self.get_groups_iterator(access_token, imodel_id, mapping_id, top).to_list()

    def get_groups_iterator(
        self, access_token: str, imodel_id: str, mapping_id: str, top: int | None = None
    ) -> EntityListIterator[Group]:
        """Get a lazy iterator over the groups of a mapping."""
        return self.get_entity_collection_iterator(
            _GROUPS,
            self.create_request(RequestMethod.GET, access_token),
            GroupCollection,
            lambda response: response.groups,
            path_params={"imodelId": imodel_id, "mappingId": mapping_id},
            query_params={"$top": page_size(top)},
        )

    async def get_group(self, access_token: str, imodel_id: str, mapping_id: str, group_id: str) -> Group:
        response = await self.fetch_data(
            _GROUP,
            self.create_request(RequestMethod.GET, access_token),
            GroupSingle,
            path_params={"imodelId": imodel_id, "mappingId": mapping_id, "groupId": group_id},
        )
        return response.group

    async def create_group(self, access_token: str, imodel_id: str, mapping_id: str, group: GroupCreate) -> Group:
        """Create a group in a mapping.

        :raises RequiredError: If the group name is not a simple identifier, or the query is empty.
        """
        require_identifier(group.group_name, "group_name", "create_group")
        require_value(group.query, "query", "create_group")
        response = await self.fetch_data(
            _GROUPS,
            self.create_request(RequestMethod.POST, access_token, group),
            GroupSingle,
            path_params={"imodelId": imodel_id, "mappingId": mapping_id},
        )
        return response.group

    async def update_group(
        self, access_token: str, imodel_id: str, mapping_id: str, group_id: str, group: GroupUpdate
    ) -> Group:
        """Update a group.

        :raises RequiredError: If no field is set, the new name is invalid, or the new query is empty.
        """
        require_any_field(group, "group", "update_group")
        require_identifier(group.group_name, "group_name", "update_group", optional=True)
        require_value(group.query, "query", "update_group", optional=True)
        response = await self.fetch_data(
            _GROUP,
            self.create_request(RequestMethod.PATCH, access_token, group),
            GroupSingle,
            path_params={"imodelId": imodel_id, "mappingId": mapping_id, "groupId": group_id},
        )
        return response.group

    async def delete_group(self, access_token: str, imodel_id: str, mapping_id: str, group_id: str) -> EmptyResponse:
        return await self.fetch_data(
            _GROUP,
            self.create_request(RequestMethod.DELETE, access_token),
            path_params={"imodelId": imodel_id, "mappingId": mapping_id, "groupId": group_id},
        )

    # Group properties

    async def get_group_properties(
        self, access_token: str, imodel_id: str, mapping_id: str, group_id: str, top: int | None = None
    ) -> list[GroupProperty]:
        """Get all properties of a group."""
        return await self.get_group_properties_iterator(access_token, imodel_id, mapping_id, group_id, top).to_list()

    def get_group_properties_iterator(
        self, access_token: str, imodel_id: str, mapping_id: str, group_id: str, top: int | None = None
    ) -> EntityListIterator[GroupProperty]:
        """Get a lazy iterator over the properties of a group."""
        return self.get_entity_collection_iterator(
            _GROUP_PROPERTIES,
            self.create_request(RequestMethod.GET, access_token),
            GroupPropertyCollection,
            lambda response: response.properties,
            path_params={"imodelId": imodel_id, "mappingId": mapping_id, "groupId": group_id},
            query_params={"$top": page_size(top)},
        )

    async def get_group_property(
        self, access_token: str, imodel_id: str, mapping_id: str, group_id: str, property_id: str
    ) -> GroupProperty:
        response = await self.fetch_data(
            _GROUP_PROPERTIES + "/{propertyId}",
            self.create_request(RequestMethod.GET, access_token),
            GroupPropertySingle,
            path_params={"imodelId": imodel_id, "mappingId": mapping_id, "groupId": group_id, "propertyId": property_id},
        )
        return response.property

    async def create_group_property(
        self, access_token: str, imodel_id: str, mapping_id: str, group_id: str, group_property: GroupPropertyCreate
    ) -> GroupProperty:
        """Create a property in a group.

        :raises RequiredError: If the property name is invalid, the data type is missing or undefined, or the
            ECProperties are missing or incomplete.
        """
        _validate_group_property(group_property, "create_group_property")
        response = await self.fetch_data(
            _GROUP_PROPERTIES,
            self.create_request(RequestMethod.POST, access_token, group_property),
            GroupPropertySingle,
            path_params={"imodelId": imodel_id, "mappingId": mapping_id, "groupId": group_id},
        )
        return response.property

    async def update_group_property(
        self,
        access_token: str,
        imodel_id: str,
        mapping_id: str,
        group_id: str,
        property_id: str,
        group_property: GroupPropertyUpdate,
    ) -> GroupProperty:
        """Replace a property of a group.

        The property is replaced as a whole, so the same fields as on creation are required.
        """
        _validate_group_property(group_property, "update_group_property")
        response = await self.fetch_data(
            _GROUP_PROPERTIES + "/{propertyId}",
            self.create_request(RequestMethod.PUT, access_token, group_property),
            GroupPropertySingle,
            path_params={"imodelId": imodel_id, "mappingId": mapping_id, "groupId": group_id, "propertyId": property_id},
        )
        return response.property

    async def delete_group_property(
        self, access_token: str, imodel_id: str, mapping_id: str, group_id: str, property_id: str
    ) -> EmptyResponse:
        return await self.fetch_data(
            _GROUP_PROPERTIES + "/{propertyId}",
            self.create_request(RequestMethod.DELETE, access_token),
            path_params={"imodelId": imodel_id, "mappingId": mapping_id, "groupId": group_id, "propertyId": property_id},
        )

    # Calculated properties

    async def get_calculated_properties(
        self, access_token: str, imodel_id: str, mapping_id: str, group_id: str, top: int | None = None
    ) -> list[CalculatedProperty]:
        """Get all calculated properties of a group."""
        return await self.get_calculated_properties_iterator(
            access_token, imodel_id, mapping_id, group_id, top
        ).to_list()

    def get_calculated_properties_iterator(
        self, access_token: str, imodel_id: str, mapping_id: str, group_id: str, top: int | None = None
    ) -> EntityListIterator[CalculatedProperty]:
        """Get a lazy iterator over the calculated properties of a group."""
        return self.get_entity_collection_iterator(
            _CALCULATED_PROPERTIES,
            self.create_request(RequestMethod.GET, access_token),
            CalculatedPropertyCollection,
            lambda response: response.properties,
            path_params={"imodelId": imodel_id, "mappingId": mapping_id, "groupId": group_id},
            query_params={"$top": page_size(top)},
        )

    async def get_calculated_property(
        self, access_token: str, imodel_id: str, mapping_id: str, group_id: str, property_id: str
    ) -> CalculatedProperty:
        response = await self.fetch_data(
            _CALCULATED_PROPERTIES + "/{propertyId}",
            self.create_request(RequestMethod.GET, access_token),
            CalculatedPropertySingle,
            path_params={"imodelId": imodel_id, "mappingId": mapping_id, "groupId": group_id, "propertyId": property_id},
        )
        return response.property

    async def create_calculated_property(
        self,
        access_token: str,
        imodel_id: str,
        mapping_id: str,
        group_id: str,
        calculated_property: CalculatedPropertyCreate,
    ) -> CalculatedProperty:
        """Create a calculated property in a group.

        :raises RequiredError: If the property name is invalid, or the type is missing or undefined.
        """
        require_identifier(calculated_property.property_name, "property_name", "create_calculated_property")
        require(
            calculated_property.type is not None and calculated_property.type != CalculatedPropertyType.UNDEFINED,
            "type",
            "create_calculated_property",
            "was missing or undefined",
        )
        response = await self.fetch_data(
            _CALCULATED_PROPERTIES,
            self.create_request(RequestMethod.POST, access_token, calculated_property),
            CalculatedPropertySingle,
            path_params={"imodelId": imodel_id, "mappingId": mapping_id, "groupId": group_id},
        )
        return response.property

    async def update_calculated_property(
        self,
        access_token: str,
        imodel_id: str,
        mapping_id: str,
        group_id: str,
        property_id: str,
        calculated_property: CalculatedPropertyUpdate,
    ) -> CalculatedProperty:
        require_any_field(calculated_property, "calculated_property", "update_calculated_property")
        require_identifier(
            calculated_property.property_name, "property_name", "update_calculated_property", optional=True
        )
        response = await self.fetch_data(
            _CALCULATED_PROPERTIES + "/{propertyId}",
            self.create_request(RequestMethod.PATCH, access_token, calculated_property),
            CalculatedPropertySingle,
            path_params={"imodelId": imodel_id, "mappingId": mapping_id, "groupId": group_id, "propertyId": property_id},
        )
        return response.property

    async def delete_calculated_property(
        self, access_token: str, imodel_id: str, mapping_id: str, group_id: str, property_id: str
    ) -> EmptyResponse:
        return await self.fetch_data(
            _CALCULATED_PROPERTIES + "/{propertyId}",
            self.create_request(RequestMethod.DELETE, access_token),
            path_params={"imodelId": imodel_id, "mappingId": mapping_id, "groupId": group_id, "propertyId": property_id},
        )

    # Custom calculations

    async def get_custom_calculations(
        self, access_token: str, imodel_id: str, mapping_id: str, group_id: str, top: int | None = None
    ) -> list[CustomCalculation]:
        """Get all custom calculations of a group."""
        return await self.get_custom_calculations_iterator(
            access_token, imodel_id, mapping_id, group_id, top
        ).to_list()

    def get_custom_calculations_iterator(
        self, access_token: str, imodel_id: str, mapping_id: str, group_id: str, top: int | None = None
    ) -> EntityListIterator[CustomCalculation]:
        """Get a lazy iterator over the custom calculations of a group."""
        return self.get_entity_collection_iterator(
            _CUSTOM_CALCULATIONS,
            self.create_request(RequestMethod.GET, access_token),
            CustomCalculationCollection,
            lambda response: response.custom_calculations,
            path_params={"imodelId": imodel_id, "mappingId": mapping_id, "groupId": group_id},
            query_params={"$top": page_size(top)},
        )

    async def get_custom_calculation(
        self, access_token: str, imodel_id: str, mapping_id: str, group_id: str, property_id: str
    ) -> CustomCalculation:
        response = await self.fetch_data(
            _CUSTOM_CALCULATIONS + "/{propertyId}",
            self.create_request(RequestMethod.GET, access_token),
            CustomCalculationSingle,
            path_params={"imodelId": imodel_id, "mappingId": mapping_id, "groupId": group_id, "propertyId": property_id},
        )
        return response.custom_calculation

    async def create_custom_calculation(
        self,
        access_token: str,
        imodel_id: str,
        mapping_id: str,
        group_id: str,
        custom_calculation: CustomCalculationCreate,
    ) -> CustomCalculation:
        """Create a custom calculation in a group.

        :raises RequiredError: If the property name is invalid, or the formula is empty.
        """
        require_identifier(custom_calculation.property_name, "property_name", "create_custom_calculation")
        require_value(custom_calculation.formula, "formula", "create_custom_calculation")
        response = await self.fetch_data(
            _CUSTOM_CALCULATIONS,
            self.create_request(RequestMethod.POST, access_token, custom_calculation),
            CustomCalculationSingle,
            path_params={"imodelId": imodel_id, "mappingId": mapping_id, "groupId": group_id},
        )
        return response.custom_calculation

    async def update_custom_calculation(
        self,
        access_token: str,
        imodel_id: str,
        mapping_id: str,
        group_id: str,
        property_id: str,
        custom_calculation: CustomCalculationUpdate,
    ) -> CustomCalculation:
        require_any_field(custom_calculation, "custom_calculation", "update_custom_calculation")
        require_identifier(
            custom_calculation.property_name, "property_name", "update_custom_calculation", optional=True
        )
        require_value(custom_calculation.formula, "formula", "update_custom_calculation", optional=True)
        response = await self.fetch_data(
            _CUSTOM_CALCULATIONS + "/{propertyId}",
            self.create_request(RequestMethod.PATCH, access_token, custom_calculation),
            CustomCalculationSingle,
            path_params={"imodelId": imodel_id, "mappingId": mapping_id, "groupId": group_id, "propertyId": property_id},
        )
        return response.custom_calculation

    async def delete_custom_calculation(
        self, access_token: str, imodel_id: str, mapping_id: str, group_id: str, property_id: str
    ) -> EmptyResponse:
        return await self.fetch_data(
            _CUSTOM_CALCULATIONS + "/{propertyId}",
            self.create_request(RequestMethod.DELETE, access_token),
            path_params={"imodelId": imodel_id, "mappingId": mapping_id, "groupId": group_id, "propertyId": property_id},
        )
