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

"""iTwin iModels SDK
=====================
"""

from .client import IModelsClient
from .data import (
    Briefcase,
    Changeset,
    ChangesetState,
    Checkpoint,
    CheckpointState,
    ContainerAccessInfo,
    ContainingChanges,
    IModel,
    IModelCreate,
    IModelState,
    Lock,
    LockedObjects,
    LockLevel,
    NamedVersion,
    NamedVersionCreate,
    NamedVersionState,
    NamedVersionUpdate,
    SynchronizationInfo,
)
from .operations import (
    BriefcaseOperations,
    ChangesetOperations,
    CheckpointOperations,
    IModelOperations,
    LockOperations,
    NamedVersionOperations,
)
from .params import (
    AcquireBriefcaseParams,
    AuthorizationParams,
    BriefcaseParams,
    ChangesetParams,
    ChangesetProperties,
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

__all__ = [
    "AcquireBriefcaseParams",
    "AuthorizationParams",
    "Briefcase",
    "BriefcaseOperations",
    "BriefcaseParams",
    "Changeset",
    "ChangesetOperations",
    "ChangesetParams",
    "ChangesetProperties",
    "ChangesetState",
    "Checkpoint",
    "CheckpointOperations",
    "CheckpointState",
    "ContainerAccessInfo",
    "ContainingChanges",
    "CreateChangesetParams",
    "CreateEmptyIModelParams",
    "CreateNamedVersionParams",
    "GetChangesetListParams",
    "GetListParams",
    "GetLockListParams",
    "IModel",
    "IModelCreate",
    "IModelOperations",
    "IModelParams",
    "IModelState",
    "IModelsClient",
    "Lock",
    "LockLevel",
    "LockedObjects",
    "NamedVersion",
    "NamedVersionCreate",
    "NamedVersionOperations",
    "NamedVersionParams",
    "NamedVersionState",
    "NamedVersionUpdate",
    "SynchronizationInfo",
    "UpdateLockParams",
    "UpdateNamedVersionParams",
]
