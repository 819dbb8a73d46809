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

from itwin import logging
from itwin.common import APIConnector, EntityListIterator, OperationsBase, RequestMethod, page_size
from itwin.common.polling import poll_until

from .data import ExtractionLog, ExtractionLogCollection, ExtractionRun, ExtractionRunSingle, ExtractionStatus
from .data import ExtractionStatusSingle

logger = logging.getLogger("reporting.extraction")

__all__ = ["ExtractionClient"]

_STATUS = "datasources/extraction/status/{jobId}"


class ExtractionClient(OperationsBase):
    """Client for extraction runs, which materialize report data from an iModel."""

    def __init__(self, connector: APIConnector) -> None:
        """
        :param connector: Connector targeting the Reporting API, e.g., `https://api.bentley.com/insights/reporting`.
        """
        super().__init__(connector)

    async def run_extraction(self, access_token: str, imodel_id: str) -> ExtractionRun:
        """Start an extraction of data from an iModel.

        :param access_token: The value of the `Authorization` header.
        :param imodel_id: The iModel ID.

        :return: The extraction run. Its ID is the job ID used to query the status.
        """
        response = await self.fetch_data(
            "datasources/imodels/{imodelId}/extraction/run",
            self.create_request(RequestMethod.POST, access_token),
            ExtractionRunSingle,
            path_params={"imodelId": imodel_id},
        )
        return response.run

    async def get_extraction_status(self, access_token: str, job_id: str) -> ExtractionStatus:
        response = await self.fetch_data(
            _STATUS,
            self.create_request(RequestMethod.GET, access_token),
            ExtractionStatusSingle,
            path_params={"jobId": job_id},
        )
        return response.status

    async def get_extraction_logs(self, access_token: str, job_id: str, top: int | None = None) -> list[ExtractionLog]:
        """Get all logs of an extraction run."""
        return await self.get_extraction_logs_iterator(access_token, job_id, top).to_list()

    def get_extraction_logs_iterator(
        self, access_token: str, job_id: str, top: int | None = None
    ) -> EntityListIterator[ExtractionLog]:
        """Get a lazy iterator over the logs of an extraction run."""
        return self.get_entity_collection_iterator(
            _STATUS + "/logs",
            self.create_request(RequestMethod.GET, access_token),
            ExtractionLogCollection,
            lambda response: response.logs,
            path_params={"jobId": job_id},
            query_params={"$top": page_size(top)},
        )

    async def wait_for_extraction(
        self,
        access_token: str,
        job_id: str,
        polling_interval: float = 3.0,
        timeout: float = 360.0,
    ) -> ExtractionStatus:
        """Poll the status of an extraction run until it is no longer queued or running.

        :param access_token: The value of the `Authorization` header.
        :param job_id: The ID of the extraction run.
        :param polling_interval: Seconds to wait between status requests.
        :param timeout: Seconds to wait in total.

        :return: The final status, either succeeded or failed.

        :raises PollingTimeoutError: If the extraction run has not finished within the timeout.
        """
        status = await poll_until(
            lambda: self.get_extraction_status(access_token, job_id),
            lambda status: not status.state.is_pending,
            f"Extraction {job_id}",
            polling_interval,
            timeout,
        )
        logger.debug(f"Extraction {job_id} finished with state {status.state.value}")
        return status
