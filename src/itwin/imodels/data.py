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

import enum
from datetime import datetime

from pydantic import Field

from itwin.common.data import CollectionResponse, Link, SDKModel

__all__ = [
    "Briefcase",
    "BriefcaseCollection",
    "BriefcaseSingle",
    "Changeset",
    "ChangesetCollection",
    "ChangesetSingle",
    "ChangesetState",
    "Checkpoint",
    "CheckpointSingle",
    "CheckpointState",
    "ContainerAccessInfo",
    "ContainingChanges",
    "IModel",
    "IModelCreate",
    "IModelSingle",
    "IModelState",
    "Lock",
    "LockCollection",
    "LockLevel",
    "LockSingle",
    "LockedObjects",
    "NamedVersion",
    "NamedVersionCollection",
    "NamedVersionCreate",
    "NamedVersionSingle",
    "NamedVersionState",
    "NamedVersionUpdate",
    "SynchronizationInfo",
]


class IModelState(str, enum.Enum):
    INITIALIZED = "initialized"
    NOT_INITIALIZED = "notInitialized"


class IModel(SDKModel):
    id: str
    display_name: str | None = None
    name: str
    description: str | None = None
    state: IModelState | None = None
    created_date_time: datetime | None = None
    project_id: str | None = None
    links: dict[str, Link | None] = Field(default_factory=dict, alias="_links")


class IModelSingle(SDKModel):
    imodel: IModel = Field(alias="iModel")


class IModelCreate(SDKModel):
    """Properties of a new empty iModel."""

    project_id: str
    name: str
    description: str | None = None


class Briefcase(SDKModel):
    id: str
    briefcase_id: int
    display_name: str | None = None
    owner_id: str | None = None
    acquired_date_time: datetime | None = None
    file_size: int | None = None
    device_name: str | None = None
    links: dict[str, Link | None] = Field(default_factory=dict, alias="_links")


class BriefcaseCollection(CollectionResponse):
    briefcases: list[Briefcase] = Field(default_factory=list)


class BriefcaseSingle(SDKModel):
    briefcase: Briefcase


class LockLevel(str, enum.Enum):
    NONE = "none"
    SHARED = "shared"
    EXCLUSIVE = "exclusive"


class LockedObjects(SDKModel):
    """Objects locked at a common lock level."""

    lock_level: LockLevel
    object_ids: list[str]


class Lock(SDKModel):
    """The locks held by a briefcase."""

    briefcase_id: int
    locked_objects: list[LockedObjects] = Field(default_factory=list)


class LockCollection(CollectionResponse):
    locks: list[Lock] = Field(default_factory=list)


class LockSingle(SDKModel):
    lock: Lock


class ChangesetState(str, enum.Enum):
    WAITING_FOR_FILE = "waitingForFile"
    FILE_UPLOADED = "fileUploaded"


class ContainingChanges(enum.IntFlag):
    """Kinds of changes contained in a changeset."""

    REGULAR = 0
    SCHEMA = 1
    DEFINITION = 2
    SPATIAL_DATA = 4
    SHEETS_AND_DRAWINGS = 8
    VIEWS_AND_MODELS = 16
    GLOBAL_PROPERTIES = 32


class SynchronizationInfo(SDKModel):
    task_id: str
    changed_files: list[str] | None = None


class Changeset(SDKModel):
    id: str
    display_name: str | None = None
    description: str | None = None
    index: int
    parent_id: str | None = None
    creator_id: str | None = None
    pushed_date_time: datetime | None = None
    state: ChangesetState | None = None
    containing_changes: int | None = None
    file_size: int | None = None
    briefcase_id: int | None = None
    synchronization_info: SynchronizationInfo | None = None
    links: dict[str, Link | None] = Field(default_factory=dict, alias="_links")


class ChangesetCollection(CollectionResponse):
    changesets: list[Changeset] = Field(default_factory=list)


class ChangesetSingle(SDKModel):
    changeset: Changeset


class NamedVersionState(str, enum.Enum):
    VISIBLE = "visible"
    HIDDEN = "hidden"


class NamedVersion(SDKModel):
    id: str
    display_name: str | None = None
    name: str
    description: str | None = None
    changeset_id: str | None = None
    changeset_index: int | None = None
    created_date_time: datetime | None = None
    state: NamedVersionState | None = None
    links: dict[str, Link | None] = Field(default_factory=dict, alias="_links")


class NamedVersionCollection(CollectionResponse):
    named_versions: list[NamedVersion] = Field(default_factory=list)


class NamedVersionSingle(SDKModel):
    named_version: NamedVersion


class NamedVersionCreate(SDKModel):
    """Properties of a new named version. Without a changeset id the version is created on the baseline."""

    name: str
    description: str | None = None
    changeset_id: str | None = None


class NamedVersionUpdate(SDKModel):
    name: str | None = None
    description: str | None = None
    state: NamedVersionState | None = None


class CheckpointState(str, enum.Enum):
    SCHEDULED = "scheduled"
    SUCCESSFUL = "successful"
    FAILED = "failed"
    NOT_GENERATED = "notGenerated"


class ContainerAccessInfo(SDKModel):
    """Access details of the blob container that holds a checkpoint."""

    account: str
    sas: str
    container: str
    db_name: str


class Checkpoint(SDKModel):
    changeset_index: int | None = None
    changeset_id: str | None = None
    state: CheckpointState
    container_access_info: ContainerAccessInfo | None = None
    links: dict[str, Link | None] = Field(default_factory=dict, alias="_links")

    @property
    def download_href(self) -> str | None:
        """The checkpoint download url, once the checkpoint has been generated."""
        download = self.links.get("download")
        return download.href if download is not None else None


class CheckpointSingle(SDKModel):
    checkpoint: Checkpoint
