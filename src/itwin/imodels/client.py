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

from itwin.common import APIConnector, IFileHandler

from .operations import (
    BriefcaseOperations,
    ChangesetOperations,
    CheckpointOperations,
    IModelOperations,
    LockOperations,
    NamedVersionOperations,
)

__all__ = ["IModelsClient"]


class IModelsClient:
    """Client for the iModels API.

    Operations are grouped by resource, e.g., `client.briefcases.acquire(...)`. All groups share one connector.
    """

    def __init__(self, connector: APIConnector, file_handler: IFileHandler | None = None) -> None:
        """
        :param connector: Connector targeting the iModels API, e.g., `https://api.bentley.com/imodels`.
        :param file_handler: Used to upload changeset files. Only needed to create changesets.
        """
        self._connector = connector
        self.imodels = IModelOperations(connector)
        self.briefcases = BriefcaseOperations(connector)
        self.locks = LockOperations(connector)
        self.changesets = ChangesetOperations(connector, file_handler)
        self.named_versions = NamedVersionOperations(connector)
        self.checkpoints = CheckpointOperations(connector)

    @property
    def connector(self) -> APIConnector:
        return self._connector
