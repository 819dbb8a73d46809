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

from collections.abc import Callable, Mapping, Sequence
from typing import Any, ClassVar, TypeVar

from itwin import logging
from itwin.common import (
    APIConnector,
    AuthorizationCallback,
    CollectionResponse,
    EmptyResponse,
    EntityListIterator,
    EntityPage,
    IFileHandler,
    OperationsBase,
    RequestMethod,
    RequestSpec,
    UploadFileParams,
    page_size,
)
from itwin.common.exceptions import CheckpointGenerationFailed, ClientValueError
from itwin.common.polling import poll_until

from .data import (
    Briefcase,
    BriefcaseCollection,
    BriefcaseSingle,
    Changeset,
    ChangesetCollection,
    ChangesetSingle,
    ChangesetState,
    Checkpoint,
    CheckpointSingle,
    CheckpointState,
    IModel,
    IModelSingle,
    Lock,
    LockCollection,
    LockSingle,
    NamedVersion,
    NamedVersionCollection,
    NamedVersionSingle,
)
from .params import (
    AcquireBriefcaseParams,
    AuthorizationParams,
    BriefcaseParams,
    ChangesetParams,
    CreateChangesetParams,
    CreateEmptyIModelParams,
    CreateNamedVersionParams,
    GetChangesetListParams,
    GetListParams,
    GetLockListParams,
    IModelParams,
    NamedVersionParams,
    UpdateLockParams,
    UpdateNamedVersionParams,
)

logger = logging.getLogger("imodels.operations")

__all__ = [
    "BriefcaseOperations",
    "ChangesetOperations",
    "CheckpointOperations",
    "IModelOperations",
    "LockOperations",
    "NamedVersionOperations",
]

T = TypeVar("T")
C = TypeVar("C", bound=CollectionResponse)

_IMODELS = "imodels"
_IMODEL = "imodels/{imodelId}"
_BRIEFCASES = _IMODEL + "/briefcases"
_LOCKS = _IMODEL + "/locks"
_CHANGESETS = _IMODEL + "/changesets"
_NAMED_VERSIONS = _IMODEL + "/namedversions"


def _is_checkpoint_ready(checkpoint: Checkpoint) -> bool:
    if (
        checkpoint.state == CheckpointState.SUCCESSFUL
        and checkpoint.download_href is not None
        and checkpoint.container_access_info is not None
    ):
        return True
    if checkpoint.state not in (CheckpointState.SCHEDULED, CheckpointState.SUCCESSFUL):
        raise CheckpointGenerationFailed(f"Checkpoint generation failed with state: {checkpoint.state.value}.")
    return False


class _IModelsOperationsBase(OperationsBase):
    """Requests against the iModels API, which is versioned separately from the other iTwin Platform APIs."""

    ACCEPT: ClassVar[str] = "application/vnd.bentley.itwin-platform.v2+json"

    _PREFER_REPRESENTATION: ClassVar[Mapping[str, str]] = {"Prefer": "return=representation"}

    async def _authorized_request(
        self,
        method: RequestMethod,
        authorization: AuthorizationCallback,
        body: object | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> RequestSpec:
        info = await authorization()
        return self.create_request(method, info.to_header(), body, headers)

    def _get_list(
        self,
        params: AuthorizationParams,
        resource_path: str,
        response_type: type[C],
        accessor: Callable[[C], Sequence[T]],
        path_params: Mapping[str, Any] | None = None,
        query_params: Mapping[str, Any] | None = None,
    ) -> EntityListIterator[T]:
        """Create a lazy iterator over a collection, requesting the full representation of each entity.

        The authorization callback is awaited for every page.
        """

        async def fetch_page(next_link: str | None) -> EntityPage[T]:
            request = await self._authorized_request(
                RequestMethod.GET, params.authorization, headers=self._PREFER_REPRESENTATION
            )
            if next_link is None:
                return await self.get_entity_collection_page(
                    resource_path, request, response_type, accessor, path_params=path_params, query_params=query_params
                )
            return await self.get_entity_collection_page(next_link, request, response_type, accessor)

        return EntityListIterator(fetch_page)


class IModelOperations(_IModelsOperationsBase):
    async def create_empty(self, params: CreateEmptyIModelParams) -> IModel:
        """Create an iModel without any changesets.

        :param params: Parameters for this operation.

        :return: The new iModel.
        """
        request = await self._authorized_request(RequestMethod.POST, params.authorization, params.imodel_properties)
        response = await self.fetch_data(_IMODELS, request, IModelSingle)
        return response.imodel

    async def get_single(self, params: IModelParams) -> IModel:
        request = await self._authorized_request(RequestMethod.GET, params.authorization)
        response = await self.fetch_data(_IMODEL, request, IModelSingle, path_params={"imodelId": params.imodel_id})
        return response.imodel

    async def delete(self, params: IModelParams) -> EmptyResponse:
        request = await self._authorized_request(RequestMethod.DELETE, params.authorization)
        return await self.fetch_data(_IMODEL, request, path_params={"imodelId": params.imodel_id})


class BriefcaseOperations(_IModelsOperationsBase):
    async def acquire(self, params: AcquireBriefcaseParams) -> Briefcase:
        """Acquire a new briefcase of an iModel.

        :param params: Parameters for this operation. The request has no body unless `device_name` is set.

        :return: The acquired briefcase.
        """
        body = {"deviceName": params.device_name} if params.device_name is not None else None
        request = await self._authorized_request(RequestMethod.POST, params.authorization, body)
        response = await self.fetch_data(
            _BRIEFCASES, request, BriefcaseSingle, path_params={"imodelId": params.imodel_id}
        )
        return response.briefcase

    def get_list(self, params: GetListParams) -> EntityListIterator[Briefcase]:
        return self._get_list(
            params,
            _BRIEFCASES,
            BriefcaseCollection,
            lambda response: response.briefcases,
            path_params={"imodelId": params.imodel_id},
            query_params={"$top": page_size(params.top)},
        )

    async def get_single(self, params: BriefcaseParams) -> Briefcase:
        request = await self._authorized_request(RequestMethod.GET, params.authorization)
        response = await self.fetch_data(
            _BRIEFCASES + "/{briefcaseId}",
            request,
            BriefcaseSingle,
            path_params={"imodelId": params.imodel_id, "briefcaseId": params.briefcase_id},
        )
        return response.briefcase

    async def release(self, params: BriefcaseParams) -> EmptyResponse:
        """Release a briefcase. The locks it holds are released too."""
        request = await self._authorized_request(RequestMethod.DELETE, params.authorization)
        return await self.fetch_data(
            _BRIEFCASES + "/{briefcaseId}",
            request,
            path_params={"imodelId": params.imodel_id, "briefcaseId": params.briefcase_id},
        )


class LockOperations(_IModelsOperationsBase):
    def get_list(self, params: GetLockListParams) -> EntityListIterator[Lock]:
        return self._get_list(
            params,
            _LOCKS,
            LockCollection,
            lambda response: response.locks,
            path_params={"imodelId": params.imodel_id},
            query_params={"briefcaseId": params.briefcase_id, "$top": page_size(params.top)},
        )

    async def update(self, params: UpdateLockParams) -> Lock:
        """Acquire locks for a briefcase, or change the level of locks it already holds.

        :param params: Parameters for this operation.

        :return: All locks held by the briefcase after the update.
        """
        body = {
            "briefcaseId": params.briefcase_id,
            "changesetId": params.changeset_id,
            "lockedObjects": params.locked_objects,
        }
        request = await self._authorized_request(
            RequestMethod.PATCH, params.authorization, {key: value for key, value in body.items() if value is not None}
        )
        response = await self.fetch_data(_LOCKS, request, LockSingle, path_params={"imodelId": params.imodel_id})
        return response.lock


class ChangesetOperations(_IModelsOperationsBase):
    def __init__(self, connector: APIConnector, file_handler: IFileHandler | None = None) -> None:
        """
        :param connector: The connector to use for API calls.
        :param file_handler: Used to upload changeset files. Required by `create`.
        """
        super().__init__(connector)
        self._file_handler = file_handler

    def get_list(self, params: GetChangesetListParams) -> EntityListIterator[Changeset]:
        return self._get_list(
            params,
            _CHANGESETS,
            ChangesetCollection,
            lambda response: response.changesets,
            path_params={"imodelId": params.imodel_id},
            query_params={
                "afterIndex": params.after_index,
                "lastIndex": params.last_index,
                "$top": page_size(params.top),
            },
        )

    async def get_single(self, params: ChangesetParams) -> Changeset:
        """Get a changeset by id or by index."""
        request = await self._authorized_request(RequestMethod.GET, params.authorization)
        response = await self.fetch_data(
            _CHANGESETS + "/{changesetId}",
            request,
            ChangesetSingle,
            path_params={"imodelId": params.imodel_id, "changesetId": params.changeset_id},
        )
        return response.changeset

    async def create(self, params: CreateChangesetParams) -> Changeset:
        """Push a changeset.

        The changeset metadata is created first, then the changeset file is uploaded to the url returned by the
        service, and finally the changeset is marked as uploaded.

        :param params: Parameters for this operation.

        :return: The changeset in the `fileUploaded` state.

        :raises ClientValueError: If the client has no file handler, or the service did not return an upload url.
        """
        if self._file_handler is None:
            raise ClientValueError("A file handler is required to create changesets.")

        properties = params.changeset_properties
        body = {
            "id": properties.id,
            "description": properties.description,
            "parentId": properties.parent_id,
            "briefcaseId": properties.briefcase_id,
            "containingChanges": properties.containing_changes,
            "fileSize": self._file_handler.get_file_size(properties.file_path),
            "synchronizationInfo": properties.synchronization_info,
        }
        request = await self._authorized_request(
            RequestMethod.POST, params.authorization, {key: value for key, value in body.items() if value is not None}
        )
        response = await self.fetch_data(
            _CHANGESETS, request, ChangesetSingle, path_params={"imodelId": params.imodel_id}
        )

        upload = response.changeset.links.get("upload")
        if upload is None or upload.href is None:
            raise ClientValueError(f"The service did not return an upload url for changeset {properties.id}.")

        logger.debug(f"Uploading changeset {properties.id} from {properties.file_path}")
        await self._file_handler.upload_file(
            UploadFileParams(
                upload_url=upload.href,
                source_file_path=properties.file_path,
                progress_callback=params.progress_callback,
            )
        )

        request = await self._authorized_request(
            RequestMethod.PATCH,
            params.authorization,
            {"state": ChangesetState.FILE_UPLOADED, "briefcaseId": properties.briefcase_id},
        )
        response = await self.fetch_data(
            _CHANGESETS + "/{changesetId}",
            request,
            ChangesetSingle,
            path_params={"imodelId": params.imodel_id, "changesetId": properties.id},
        )
        return response.changeset


class NamedVersionOperations(_IModelsOperationsBase):
    async def create(self, params: CreateNamedVersionParams) -> NamedVersion:
        request = await self._authorized_request(
            RequestMethod.POST, params.authorization, params.named_version_properties
        )
        response = await self.fetch_data(
            _NAMED_VERSIONS, request, NamedVersionSingle, path_params={"imodelId": params.imodel_id}
        )
        return response.named_version

    def get_list(self, params: GetListParams) -> EntityListIterator[NamedVersion]:
        return self._get_list(
            params,
            _NAMED_VERSIONS,
            NamedVersionCollection,
            lambda response: response.named_versions,
            path_params={"imodelId": params.imodel_id},
            query_params={"$top": page_size(params.top)},
        )

    async def get_single(self, params: NamedVersionParams) -> NamedVersion:
        request = await self._authorized_request(RequestMethod.GET, params.authorization)
        response = await self.fetch_data(
            _NAMED_VERSIONS + "/{namedVersionId}",
            request,
            NamedVersionSingle,
            path_params={"imodelId": params.imodel_id, "namedVersionId": params.named_version_id},
        )
        return response.named_version

    async def update(self, params: UpdateNamedVersionParams) -> NamedVersion:
        request = await self._authorized_request(
            RequestMethod.PATCH, params.authorization, params.named_version_properties
        )
        response = await self.fetch_data(
            _NAMED_VERSIONS + "/{namedVersionId}",
            request,
            NamedVersionSingle,
            path_params={"imodelId": params.imodel_id, "namedVersionId": params.named_version_id},
        )
        return response.named_version


class CheckpointOperations(_IModelsOperationsBase):
    async def get_named_version_checkpoint(self, params: NamedVersionParams) -> Checkpoint:
        request = await self._authorized_request(RequestMethod.GET, params.authorization)
        response = await self.fetch_data(
            _NAMED_VERSIONS + "/{namedVersionId}/checkpoint",
            request,
            CheckpointSingle,
            path_params={"imodelId": params.imodel_id, "namedVersionId": params.named_version_id},
        )
        return response.checkpoint

    async def wait_for_named_version_checkpoint(
        self,
        params: NamedVersionParams,
        polling_interval: float = 1.0,
        timeout: float = 300.0,
    ) -> Checkpoint:
        """Poll the checkpoint of a named version until it has been generated.

        :param params: Parameters for this operation.
        :param polling_interval: Seconds to wait between requests.
        :param timeout: Seconds to wait in total.

        :return: The successful checkpoint, with a download link.

        :raises CheckpointGenerationFailed: If the checkpoint state is neither `scheduled` nor `successful`.
        :raises PollingTimeoutError: If the checkpoint has not been generated within the timeout.
        """
        return await poll_until(
            lambda: self.get_named_version_checkpoint(params),
            _is_checkpoint_ready,
            f"Checkpoint of named version {params.named_version_id}",
            polling_interval,
            timeout,
        )
