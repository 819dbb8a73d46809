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

from unittest import mock

from itwin.common import RequestMethod
from itwin.common.exceptions import PollingTimeoutError
from itwin.common.test_tools import ACCESS_TOKEN, MockResponse, TestWithConnector
from itwin.reporting import ExtractionClient, ExtractorState

from ..data import load_test_data


class TestExtractionClient(TestWithConnector):
    def setUp(self) -> None:
        super().setUp()
        self.client = ExtractionClient(self.connector)
        self.setup_universal_headers(
            {"Authorization": ACCESS_TOKEN, "Accept": "application/vnd.bentley.itwin-platform.v1+json"}
        )

    async def test_run_extraction(self) -> None:
        self.transport.request.return_value = MockResponse.from_json(
            200, {"run": {"id": "job-1", "_links": {"status": {"href": "https://example.com/status/job-1"}}}}
        )

        run = await self.client.run_extraction(ACCESS_TOKEN, "imodel-1")

        self.assertEqual("job-1", run.id)
        self.assert_request_made(RequestMethod.POST, "datasources/imodels/imodel-1/extraction/run")

    async def test_get_extraction_status(self) -> None:
        self.transport.request.return_value = MockResponse.from_json(
            200, load_test_data("extraction_status_succeeded.json")
        )

        status = await self.client.get_extraction_status(ACCESS_TOKEN, "job-1")

        self.assertEqual(ExtractorState.SUCCEEDED, status.state)
        self.assertFalse(status.contains_issues)
        self.assert_request_made(RequestMethod.GET, "datasources/extraction/status/job-1")

    async def test_get_extraction_logs(self) -> None:
        self.transport.request.return_value = MockResponse.from_json(
            200,
            {
                "logs": [
                    {"state": "Running", "logType": "StateChange", "dateTime": "2024-03-01T10:15:00Z"},
                    {"state": "Succeeded", "logType": "StateChange", "dateTime": "2024-03-01T10:16:00Z"},
                ],
                "_links": {"next": None},
            },
        )

        logs = await self.client.get_extraction_logs(ACCESS_TOKEN, "job-1")

        self.assertEqual([ExtractorState.RUNNING, ExtractorState.SUCCEEDED], [log.state for log in logs])
        self.assert_request_made(RequestMethod.GET, "datasources/extraction/status/job-1/logs")

    async def test_wait_for_extraction(self) -> None:
        self.transport.request.side_effect = [
            MockResponse.from_json(200, load_test_data("extraction_status_running.json")),
            MockResponse.from_json(200, load_test_data("extraction_status_running.json")),
            MockResponse.from_json(200, load_test_data("extraction_status_succeeded.json")),
        ]

        with mock.patch("asyncio.sleep", new_callable=mock.AsyncMock) as mock_sleep:
            status = await self.client.wait_for_extraction(ACCESS_TOKEN, "job-1", polling_interval=0.5)

        self.assertEqual(ExtractorState.SUCCEEDED, status.state)
        self.transport.assert_n_requests_made(3)
        mock_sleep.assert_has_awaits([mock.call(0.5), mock.call(0.5)])

    async def test_wait_for_extraction_timeout(self) -> None:
        self.transport.request.return_value = MockResponse.from_json(
            200, load_test_data("extraction_status_running.json")
        )

        with mock.patch("asyncio.sleep", new_callable=mock.AsyncMock):
            with self.assertRaises(PollingTimeoutError):
                await self.client.wait_for_extraction(ACCESS_TOKEN, "job-1", polling_interval=3, timeout=0)

        self.transport.assert_n_requests_made(1)
