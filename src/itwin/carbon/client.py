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
from itwin.common.polling import poll_until
from itwin.common.validation import require, require_value

from .data import (
    EC3Configuration,
    EC3ConfigurationCollection,
    EC3ConfigurationCreate,
    EC3ConfigurationSingle,
    EC3ConfigurationUpdate,
    EC3Job,
    EC3JobCreate,
    EC3JobSingle,
    EC3JobStatus,
    EC3JobStatusSingle,
)

__all__ = [
    "EC3ConfigurationsClient",
    "EC3JobsClient",
]

_JOBS = "ec3/jobs"
_CONFIGURATIONS = "ec3/configurations"


class EC3JobsClient(OperationsBase):
    """Client for jobs that export report data to EC3 projects."""

    def __init__(self, connector: APIConnector) -> None:
        """
        :param connector: Connector targeting the Carbon Calculation API, e.g.,
            `https://api.bentley.com/insights/carbon-calculation`.
        """
        super().__init__(connector)

    async def create_job(self, access_token: str, job: EC3JobCreate) -> EC3Job:
        """Start an EC3 export job.

        :param access_token: The value of the `Authorization` header.
        :param job: The job to start.

        :return: The job. Its ID is used to query the status.

        :raises RequiredError: If the configuration ID, project name or EC3 token is missing. No request is sent.
        """
        require_value(job.configuration_id, "configuration_id", "create_job")
        require_value(job.project_name, "project_name", "create_job")
        require_value(job.ec3_bearer_token, "ec3_bearer_token", "create_job")
        response = await self.fetch_data(
            _JOBS, self.create_request(RequestMethod.POST, access_token, job), EC3JobSingle
        )
        return response.job

    async def get_ec3_job_status(self, access_token: str, job_id: str) -> EC3JobStatus:
        response = await self.fetch_data(
            _JOBS + "/{jobId}",
            self.create_request(RequestMethod.GET, access_token),
            EC3JobStatusSingle,
            path_params={"jobId": job_id},
        )
        return response.job

    async def wait_for_ec3_job(
        self,
        access_token: str,
        job_id: str,
        polling_interval: float = 3.0,
        timeout: float = 360.0,
    ) -> EC3JobStatus:
        """Poll the status of an EC3 job until it is no longer queued or running.

        :param access_token: The value of the `Authorization` header.
        :param job_id: The job ID.
        :param polling_interval: Seconds to wait between status requests.
        :param timeout: Seconds to wait in total.

        :return: The final status.

        :raises PollingTimeoutError: If the job has not finished within the timeout.
        """
        return await poll_until(
            lambda: self.get_ec3_job_status(access_token, job_id),
            lambda status: not status.status.is_pending,
            f"EC3 job {job_id}",
            polling_interval,
            timeout,
        )


class EC3ConfigurationsClient(OperationsBase):
    """Client for EC3 configurations, which describe how report tables map to EC3 elements."""

    def __init__(self, connector: APIConnector) -> None:
        """
        :param connector: Connector targeting the Carbon Calculation API, e.g.,
            `https://api.bentley.com/insights/carbon-calculation`.
        """
        super().__init__(connector)

    async def get_configurations(
        self, access_token: str, report_id: str, top: int | None = None
    ) -> list[EC3Configuration]:
        """Get all EC3 configurations of a report."""
        return await self.get_configurations_iterator(access_token, report_id, top).to_list()

    def get_configurations_iterator(
        self, access_token: str, report_id: str, top: int | None = None
    ) -> EntityListIterator[EC3Configuration]:
        """Get a lazy iterator over the EC3 configurations of a report."""
        return self.get_entity_collection_iterator(
            _CONFIGURATIONS,
            self.create_request(RequestMethod.GET, access_token),
            EC3ConfigurationCollection,
            lambda response: response.configurations,
            query_params={"reportId": report_id, "$top": page_size(top)},
        )

    async def get_configuration(self, access_token: str, configuration_id: str) -> EC3Configuration:
        response = await self.fetch_data(
            _CONFIGURATIONS + "/{configurationId}",
            self.create_request(RequestMethod.GET, access_token),
            EC3ConfigurationSingle,
            path_params={"configurationId": configuration_id},
        )
        return response.configuration

    async def create_configuration(
        self, access_token: str, configuration: EC3ConfigurationCreate
    ) -> EC3Configuration:
        """Create an EC3 configuration for a report.

        :raises RequiredError: If the report ID or display name is missing, or there are no labels. No request is
            sent.
        """
        require_value(configuration.report_id, "report_id", "create_configuration")
        require_value(configuration.display_name, "display_name", "create_configuration")
        require(bool(configuration.labels), "labels", "create_configuration", "was null or empty")
        response = await self.fetch_data(
            _CONFIGURATIONS,
            self.create_request(RequestMethod.POST, access_token, configuration),
            EC3ConfigurationSingle,
        )
        return response.configuration

    async def update_configuration(
        self, access_token: str, configuration_id: str, configuration: EC3ConfigurationUpdate
    ) -> EC3Configuration:
        """Update an EC3 configuration.

        :raises RequiredError: If the display name is empty, or the labels are empty. No request is sent.
        """
        require_value(configuration.display_name, "display_name", "update_configuration")
        require(bool(configuration.labels), "labels", "update_configuration", "was null or empty")
        response = await self.fetch_data(
            _CONFIGURATIONS + "/{configurationId}",
            self.create_request(RequestMethod.PUT, access_token, configuration),
            EC3ConfigurationSingle,
            path_params={"configurationId": configuration_id},
        )
        return response.configuration

    async def delete_configuration(self, access_token: str, configuration_id: str) -> EmptyResponse:
        return await self.fetch_data(
            _CONFIGURATIONS + "/{configurationId}",
            self.create_request(RequestMethod.DELETE, access_token),
            path_params={"configurationId": configuration_id},
        )
