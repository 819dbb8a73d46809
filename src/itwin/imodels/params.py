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

"""Parameters of the iModels operations.

Each operation takes one frozen params object carrying the authorization callback and the identifiers of the
resource. The callback is awaited once per request, so long-running flows always send a fresh token.
"""

from __future__ import annotations

from dataclasses import dataclass

from itwin.common import AuthorizationCallback, ProgressCallback

from .data import ContainingChanges, IModelCreate, LockedObjects, NamedVersionCreate, NamedVersionUpdate

__all__ = [
    "AcquireBriefcaseParams",
    "AuthorizationParams",
    "BriefcaseParams",
    "ChangesetParams",
    "ChangesetProperties",
    "CreateChangesetParams",
    "CreateEmptyIModelParams",
    "CreateNamedVersionParams",
    "GetChangesetListParams",
    "GetListParams",
    "GetLockListParams",
    "IModelParams",
    "NamedVersionParams",
    "UpdateLockParams",
    "UpdateNamedVersionParams",
]


@dataclass(frozen=True, kw_only=True)
class AuthorizationParams:
    authorization: AuthorizationCallback
    """Called before each request to get the `Authorization` header value."""


@dataclass(frozen=True, kw_only=True)
class CreateEmptyIModelParams(AuthorizationParams):
    imodel_properties: IModelCreate


@dataclass(frozen=True, kw_only=True)
class IModelParams(AuthorizationParams):
    imodel_id: str


@dataclass(frozen=True, kw_only=True)
class GetListParams(IModelParams):
    top: int | None = None
    """Page size of the underlying list requests."""


@dataclass(frozen=True, kw_only=True)
class AcquireBriefcaseParams(IModelParams):
    device_name: str | None = None
    """Name of the device the briefcase is acquired on. The request has no body when omitted."""


@dataclass(frozen=True, kw_only=True)
class BriefcaseParams(IModelParams):
    briefcase_id: int


@dataclass(frozen=True, kw_only=True)
class GetLockListParams(GetListParams):
    briefcase_id: int | None = None
    """Only list the locks held by this briefcase."""


@dataclass(frozen=True, kw_only=True)
class UpdateLockParams(IModelParams):
    briefcase_id: int
    changeset_id: str | None = None
    locked_objects: list[LockedObjects]


@dataclass(frozen=True, kw_only=True)
class GetChangesetListParams(GetListParams):
    after_index: int | None = None
    last_index: int | None = None


@dataclass(frozen=True, kw_only=True)
class ChangesetParams(IModelParams):
    changeset_id: str


@dataclass(frozen=True, kw_only=True)
class ChangesetProperties:
    """Properties of a changeset to push."""

    id: str
    briefcase_id: int
    file_path: str
    """Path of the local changeset file."""
    description: str | None = None
    parent_id: str | None = None
    containing_changes: ContainingChanges | int | None = None
    synchronization_info: dict[str, object] | None = None


@dataclass(frozen=True, kw_only=True)
class CreateChangesetParams(IModelParams):
    changeset_properties: ChangesetProperties
    progress_callback: ProgressCallback | None = None


@dataclass(frozen=True, kw_only=True)
class CreateNamedVersionParams(IModelParams):
    named_version_properties: NamedVersionCreate


@dataclass(frozen=True, kw_only=True)
class NamedVersionParams(IModelParams):
    named_version_id: str


@dataclass(frozen=True, kw_only=True)
class UpdateNamedVersionParams(NamedVersionParams):
    named_version_properties: NamedVersionUpdate
