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

from datetime import datetime, timezone

from pydantic import Field

from itwin import logging
from itwin.common import AuthorizationCallback, OperationsBase, RequestMethod, SDKModel

logger = logging.getLogger("projects.client")

__all__ = [
    "Project",
    "ProjectsClient",
]


class Project(SDKModel):
    id: str
    display_name: str | None = None
    project_number: str | None = None


class _ProjectCollection(SDKModel):
    projects: list[Project] = Field(default_factory=list)


class _ProjectSingle(SDKModel):
    project: Project


class ProjectsClient(OperationsBase):
    """Minimal client for the Projects API."""

    async def get_or_create_project(self, authorization: AuthorizationCallback, project_name: str) -> str:
        """Find a project by display name, creating it if there is none.

        :param authorization: Called to get the `Authorization` header value.
        :param project_name: The project display name.

        :return: The id of the first matching project, or of the new project.
        """
        info = await authorization()
        access_token = info.to_header()

        response = await self.fetch_data(
            "",
            self.create_request(RequestMethod.GET, access_token),
            _ProjectCollection,
            query_params={"displayName": project_name},
        )
        if response.projects:
            return response.projects[0].id

        logger.debug(f"No project named {project_name}, creating one")
        body = {
            "displayName": project_name,
            "projectNumber": f"{project_name} {datetime.now(timezone.utc).isoformat()}",
        }
        created = await self.fetch_data("", self.create_request(RequestMethod.POST, access_token, body), _ProjectSingle)
        return created.project.id
