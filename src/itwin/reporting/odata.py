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

from typing import Any

from itwin import logging
from itwin.common import APIConnector, HTTPResponse, OperationsBase, RequestMethod
from itwin.common.exceptions import ClientValueError

from .data import ODataEntityResponse, ODataItem, ODataResponse

logger = logging.getLogger("reporting.odata")

__all__ = ["ODataClient"]

_ODATA = "odata/{reportId}"


def _split_item_url(odata_item: ODataItem) -> tuple[str, str, str]:
    """Split the relative URL of an OData item into its three segments.

    :raises ClientValueError: If the URL does not have exactly three segments.
    """
    segments = odata_item.url.split("/") if odata_item.url else []
    if len(segments) != 3:
        raise ClientValueError(f"OData item URL {odata_item.url!r} must have exactly three segments.")
    return segments[0], segments[1], segments[2]


class ODataClient(OperationsBase):
    """Client for the OData export of reports.

    Entity tables are paginated with a `sequence` counter. A response carrying `@odata.nextLink` has a following page.
    """

    def __init__(self, connector: APIConnector) -> None:
        """
        :param connector: Connector targeting the Reporting API, e.g., `https://api.bentley.com/insights/reporting`.
        """
        super().__init__(connector)

    async def get_odata_report(self, access_token: str, report_id: str) -> ODataResponse:
        """List the entity sets exported to a report.

        :param access_token: The value of the `Authorization` header.
        :param report_id: The report ID.

        :return: The OData service document.
        """
        return await self.fetch_data(
            _ODATA,
            self.create_request(RequestMethod.GET, access_token),
            ODataResponse,
            path_params={"reportId": report_id},
        )

    async def get_odata_report_metadata(self, access_token: str, report_id: str) -> HTTPResponse:
        """Get the schemas of all entities tied to a report.

        The metadata document is returned as the raw response. The caller decodes the body.

        :param access_token: The value of the `Authorization` header.
        :param report_id: The report ID.

        :return: The raw response.

        :raises ITwinAPIException: If the server responds with a status code outside the 2xx range.
        """
        return await self.fetch_data(
            _ODATA + "/$metadata",
            self.create_request(RequestMethod.GET, access_token),
            HTTPResponse,
            path_params={"reportId": report_id},
        )

    async def get_odata_report_entity_page(
        self, access_token: str, report_id: str, odata_item: ODataItem, sequence: int
    ) -> ODataEntityResponse:
        """Get one page of the rows of a report entity.

        :param access_token: The value of the `Authorization` header.
        :param report_id: The report ID.
        :param odata_item: The entity, as listed by `get_odata_report`.
        :param sequence: The zero-based page number.

        :return: The page, including the `@odata.nextLink` if there is a following page.

        :raises ClientValueError: If the item URL does not have exactly three segments. No request is sent.
        """
        region, manifest, entity = _split_item_url(odata_item)
        return await self.fetch_data(
            _ODATA + "/{region}/{manifest}/{entity}",
            self.create_request(RequestMethod.GET, access_token),
            ODataEntityResponse,
            path_params={"reportId": report_id, "region": region, "manifest": manifest, "entity": entity},
            query_params={"sequence": sequence},
        )

    async def get_odata_report_entities(
        self, access_token: str, report_id: str, odata_item: ODataItem
    ) -> list[dict[str, Any]]:
        """Get all rows of a report entity.

        Pages are requested with an increasing `sequence`, starting at 0, while the response carries
        `@odata.nextLink`. The rows of all pages are concatenated in order.

        :param access_token: The value of the `Authorization` header.
        :param report_id: The report ID.
        :param odata_item: The entity, as listed by `get_odata_report`.

        :return: The rows of the entity.

        :raises ClientValueError: If the item URL does not have exactly three segments. No request is sent.
        """
        _split_item_url(odata_item)
        rows: list[dict[str, Any]] = []
        sequence = 0
        while True:
            page = await self.get_odata_report_entity_page(access_token, report_id, odata_item, sequence)
            page_rows = page.value or []
            rows.extend(page_rows)
            logger.debug(f"Fetched OData page {sequence} of {odata_item.name} with {len(page_rows)} row(s)")
            if not page.odata_next_link:
                return rows
            sequence += 1
