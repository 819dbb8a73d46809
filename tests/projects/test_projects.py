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

from itwin.common import APIConnector, RequestMethod
from itwin.common.test_tools import ACCESS_TOKEN, MockResponse, TestWithConnector, static_authorization
from itwin.projects import ProjectsClient

_HEADERS = {"Authorization": ACCESS_TOKEN, "Accept": "application/vnd.bentley.itwin-platform.v1+json"}


class TestProjectsClient(TestWithConnector):
    def setUp(self) -> None:
        super().setUp()
        self.connector = APIConnector("http://unittest.localhost/projects", self.transport)
        self.client = ProjectsClient(self.connector)
        self.setup_universal_headers(_HEADERS)

    async def test_existing_project(self) -> None:
        self.transport.request.return_value = MockResponse.from_json(
            200,
            {
                "projects": [
                    {"id": "project-1", "displayName": "Tower", "projectNumber": "Tower 1"},
                    {"id": "project-2", "displayName": "Tower", "projectNumber": "Tower 2"},
                ]
            },
        )

        project_id = await self.client.get_or_create_project(static_authorization(), "Tower")

        self.assertEqual("project-1", project_id)
        self.transport.assert_n_requests_made(1)
        self.assert_request_made(RequestMethod.GET, "projects?displayName=Tower")

    async def test_creates_missing_project(self) -> None:
        self.transport.request.side_effect = [
            MockResponse.from_json(200, {"projects": []}),
            MockResponse.from_json(201, {"project": {"id": "project-3", "displayName": "Tower"}}),
        ]

        project_id = await self.client.get_or_create_project(static_authorization(), "Tower")

        self.assertEqual("project-3", project_id)
        self.transport.assert_n_requests_made(2)
        self.assert_any_request_made(RequestMethod.GET, "projects?displayName=Tower")

        create = self.transport.request.call_args
        self.assertEqual(RequestMethod.POST, create.kwargs["method"])
        self.assertEqual("http://unittest.localhost/projects", create.kwargs["url"])
        self.assertEqual("Tower", create.kwargs["body"]["displayName"])
        self.assertTrue(create.kwargs["body"]["projectNumber"].startswith("Tower "))
        self.assertEqual("application/json", create.kwargs["headers"]["Content-Type"])
