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

from .data import (
    Report,
    ReportCollection,
    ReportCreate,
    ReportMapping,
    ReportMappingCollection,
    ReportMappingCreate,
    ReportMappingSingle,
    ReportSingle,
    ReportUpdate,
)

__all__ = ["ReportsClient"]

_REPORTS = "reports"
_REPORT = "reports/{reportId}"
_REPORT_MAPPINGS = _REPORT + "/datasources/imodelMappings"


class ReportsClient(OperationsBase):
    """Client for reports, and the mappings that feed data into them."""

    def __init__(self, connector: APIConnector) -> None:
        """
        :param connector: Connector targeting the Reporting API, e.g., `https://api.bentley.com/insights/reporting`.
        """
        super().__init__(connector)

    async def get_reports(self, access_token: str, project_id: str, top: int | None = None) -> list[Report]:
        """Get all reports of a project that have not been deleted.

        :param access_token: The value of the `Authorization` header.
        :param project_id: The project ID.
        :param top: The maximum number of reports per page.

        :return: All reports, in server order.
        """
        return await self.get_reports_iterator(access_token, project_id, top).to_list()

    def get_reports_iterator(
        self, access_token: str, project_id: str, top: int | None = None
    ) -> EntityListIterator[Report]:
        """Get a lazy iterator over the reports of a project that have not been deleted."""
        return self.get_entity_collection_iterator(
            _REPORTS,
            self.create_request(RequestMethod.GET, access_token),
            ReportCollection,
            lambda response: response.reports,
            query_params={"projectId": project_id, "deleted": False, "$top": page_size(top)},
        )

    async def get_report(self, access_token: str, report_id: str) -> Report:
        response = await self.fetch_data(
            _REPORT,
            self.create_request(RequestMethod.GET, access_token),
            ReportSingle,
            path_params={"reportId": report_id},
        )
        return response.report

    async def create_report(self, access_token: str, report: ReportCreate) -> Report:
        """Create a report in a project.

        :param access_token: The value of the `Authorization` header.
        :param report: The new report.

        :return: The created report.

        :raises RequiredError: If the display name or the project ID is missing or empty. No request is sent.
        """
        require_value(report.display_name, "display_name", "create_report")
        require_value(report.project_id, "project_id", "create_report")
        response = await self.fetch_data(
            _REPORTS,
            self.create_request(RequestMethod.POST, access_token, report),
            ReportSingle,
        )
        return response.report

    async def update_report(self, access_token: str, report_id: str, report: ReportUpdate) -> Report:
        """Update a report.

        :raises RequiredError: If no field is set, or the display name is set to an empty string.
        """
        require_any_field(report, "report", "update_report")
        require(report.display_name != "", "display_name", "update_report", "was empty")
        response = await self.fetch_data(
            _REPORT,
            self.create_request(RequestMethod.PATCH, access_token, report),
            ReportSingle,
            path_params={"reportId": report_id},
        )
        return response.report

    async def delete_report(self, access_token: str, report_id: str) -> EmptyResponse:
        """Mark a report as deleted.

        :return: The `204 No Content` response.
        """
        return await self.fetch_data(
            _REPORT,
            self.create_request(RequestMethod.DELETE, access_token),
            path_params={"reportId": report_id},
        )

    async def get_report_mappings(
        self, access_token: str, report_id: str, top: int | None = None
    ) -> list[ReportMapping]:
        """Get all mappings linked to a report."""
        return await self.get_report_mappings_iterator(access_token, report_id, top).to_list()

    def get_report_mappings_iterator(
        self, access_token: str, report_id: str, top: int | None = None
    ) -> EntityListIterator[ReportMapping]:
        """Get a lazy iterator over the mappings linked to a report."""
        return self.get_entity_collection_iterator(
            _REPORT_MAPPINGS,
            self.create_request(RequestMethod.GET, access_token),
            ReportMappingCollection,
            lambda response: response.mappings,
            path_params={"reportId": report_id},
            query_params={"$top": page_size(top)},
        )

    async def create_report_mapping(
        self, access_token: str, report_id: str, report_mapping: ReportMappingCreate
    ) -> ReportMapping:
        """Link a mapping to a report.

        :raises RequiredError: If the iModel ID or the mapping ID is missing or empty. No request is sent.
        """
        require_value(report_mapping.imodel_id, "imodel_id", "create_report_mapping")
        require_value(report_mapping.mapping_id, "mapping_id", "create_report_mapping")
        response = await self.fetch_data(
            _REPORT_MAPPINGS,
            self.create_request(RequestMethod.POST, access_token, report_mapping),
            ReportMappingSingle,
            path_params={"reportId": report_id},
        )
        return response.mapping

    async def delete_report_mapping(self, access_token: str, report_id: str, report_mapping_id: str) -> EmptyResponse:
        return await self.fetch_data(
            _REPORT_MAPPINGS + "/{reportMappingId}",
            self.create_request(RequestMethod.DELETE, access_token),
            path_params={"reportId": report_id, "reportMappingId": report_mapping_id},
        )
