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

from parameterized import parameterized

from itwin.common import RequestMethod
from itwin.common.exceptions import RequiredError
from itwin.common.test_tools import ACCESS_TOKEN, MockResponse, TestWithConnector
from itwin.reporting import ReportCreate, ReportMappingCreate, ReportsClient, ReportUpdate

from ..data import load_test_data


class TestReportsClient(TestWithConnector):
    def setUp(self) -> None:
        super().setUp()
        self.client = ReportsClient(self.connector)
        self.setup_universal_headers(
            {"Authorization": ACCESS_TOKEN, "Accept": "application/vnd.bentley.itwin-platform.v1+json"}
        )

    async def test_get_reports(self) -> None:
        self.transport.request.return_value = MockResponse.from_json(200, load_test_data("reports.json"))

        reports = await self.client.get_reports(ACCESS_TOKEN, "project-1", top=5)

        self.assertEqual(["Wall report"], [report.display_name for report in reports])
        self.assertFalse(reports[0].deleted)
        self.assert_request_made(RequestMethod.GET, "reports?projectId=project-1&deleted=false&%24top=5")

    async def test_get_reports_zero_top_uses_service_default(self) -> None:
        self.transport.request.return_value = MockResponse.from_json(200, load_test_data("reports.json"))

        await self.client.get_reports(ACCESS_TOKEN, "project-1", top=0)

        self.assert_request_made(RequestMethod.GET, "reports?projectId=project-1&deleted=false")

    async def test_create_report(self) -> None:
        self.transport.request.return_value = MockResponse.from_json(
            201, {"report": {"id": "report-1", "displayName": "Walls", "description": "", "deleted": False}}
        )

        report = await self.client.create_report(
            ACCESS_TOKEN, ReportCreate(display_name="Walls", project_id="project-1")
        )

        self.assertEqual("report-1", report.id)
        self.assert_request_made(
            RequestMethod.POST,
            "reports",
            headers={"Content-Type": "application/json"},
            body={"displayName": "Walls", "projectId": "project-1"},
        )

    @parameterized.expand(
        [
            ("missing name", ReportCreate(project_id="project-1"), "display_name"),
            ("blank name", ReportCreate(display_name=" ", project_id="project-1"), "display_name"),
            ("missing project", ReportCreate(display_name="Walls"), "project_id"),
        ]
    )
    async def test_create_report_validation(self, _: str, report: ReportCreate, field: str) -> None:
        with self.assertRaises(RequiredError) as ctx:
            await self.client.create_report(ACCESS_TOKEN, report)
        self.assertEqual(field, ctx.exception.field)
        self.transport.assert_no_requests()

    @parameterized.expand(
        [
            ("no fields", ReportUpdate(), "report"),
            ("empty name", ReportUpdate(display_name=""), "display_name"),
        ]
    )
    async def test_update_report_validation(self, _: str, report: ReportUpdate, field: str) -> None:
        with self.assertRaises(RequiredError) as ctx:
            await self.client.update_report(ACCESS_TOKEN, "report-1", report)
        self.assertEqual(field, ctx.exception.field)
        self.transport.assert_no_requests()

    async def test_update_report(self) -> None:
        self.transport.request.return_value = MockResponse.from_json(
            200, {"report": {"id": "report-1", "displayName": "Walls", "deleted": True}}
        )

        report = await self.client.update_report(ACCESS_TOKEN, "report-1", ReportUpdate(deleted=True))

        self.assertTrue(report.deleted)
        self.assert_request_made(
            RequestMethod.PATCH,
            "reports/report-1",
            headers={"Content-Type": "application/json"},
            body={"deleted": True},
        )

    async def test_delete_report(self) -> None:
        self.transport.request.return_value = MockResponse(status_code=204)
        response = await self.client.delete_report(ACCESS_TOKEN, "report-1")
        self.assertEqual(204, response.status)
        self.assert_request_made(RequestMethod.DELETE, "reports/report-1")

    async def test_create_report_mapping(self) -> None:
        self.transport.request.return_value = MockResponse.from_json(
            201, {"mapping": {"reportId": "report-1", "mappingId": "mapping-1", "imodelId": "imodel-1"}}
        )

        report_mapping = await self.client.create_report_mapping(
            ACCESS_TOKEN, "report-1", ReportMappingCreate(mapping_id="mapping-1", imodel_id="imodel-1")
        )

        self.assertEqual("mapping-1", report_mapping.mapping_id)
        self.assert_request_made(
            RequestMethod.POST,
            "reports/report-1/datasources/imodelMappings",
            headers={"Content-Type": "application/json"},
            body={"mappingId": "mapping-1", "imodelId": "imodel-1"},
        )

    @parameterized.expand(
        [
            ("missing imodel", ReportMappingCreate(mapping_id="mapping-1"), "imodel_id"),
            ("missing mapping", ReportMappingCreate(imodel_id="imodel-1"), "mapping_id"),
        ]
    )
    async def test_create_report_mapping_validation(self, _: str, mapping: ReportMappingCreate, field: str) -> None:
        with self.assertRaises(RequiredError) as ctx:
            await self.client.create_report_mapping(ACCESS_TOKEN, "report-1", mapping)
        self.assertEqual(field, ctx.exception.field)
        self.transport.assert_no_requests()

    async def test_get_report_mappings(self) -> None:
        self.transport.request.return_value = MockResponse.from_json(
            200,
            {
                "mappings": [{"reportId": "report-1", "mappingId": "mapping-1", "imodelId": "imodel-1"}],
                "_links": {"next": None},
            },
        )

        mappings = await self.client.get_report_mappings(ACCESS_TOKEN, "report-1")

        self.assertEqual(["mapping-1"], [mapping.mapping_id for mapping in mappings])
        self.assert_request_made(RequestMethod.GET, "reports/report-1/datasources/imodelMappings")

    async def test_delete_report_mapping(self) -> None:
        self.transport.request.return_value = MockResponse(status_code=204)
        await self.client.delete_report_mapping(ACCESS_TOKEN, "report-1", "mapping-1")
        self.assert_request_made(RequestMethod.DELETE, "reports/report-1/datasources/imodelMappings/mapping-1")
