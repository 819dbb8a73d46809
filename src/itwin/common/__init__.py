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

from .config import ServiceUrls
from .connector import APIConnector
from .data import (
    AuthorizationCallback,
    AuthorizationInfo,
    CollectionResponse,
    EmptyResponse,
    ErrorDetails,
    ErrorResponse,
    HTTPHeaderDict,
    HTTPResponse,
    Link,
    ModelError,
    PagedResponseLinks,
    RequestMethod,
    SDKModel,
)
from .files import StorageFileHandler
from .interfaces import IFileHandler, ITransport, ProgressCallback, ProgressData, UploadFileParams
from .operations import OperationsBase, RequestSpec, is_null_or_whitespace, is_simple_identifier, page_size
from .pagination import EntityListIterator, EntityPage, PageFetcher

__all__ = [
    "APIConnector",
    "AuthorizationCallback",
    "AuthorizationInfo",
    "CollectionResponse",
    "EmptyResponse",
    "EntityListIterator",
    "EntityPage",
    "ErrorDetails",
    "ErrorResponse",
    "HTTPHeaderDict",
    "HTTPResponse",
    "IFileHandler",
    "ITransport",
    "Link",
    "ModelError",
    "OperationsBase",
    "PageFetcher",
    "PagedResponseLinks",
    "ProgressCallback",
    "ProgressData",
    "RequestMethod",
    "RequestSpec",
    "SDKModel",
    "ServiceUrls",
    "StorageFileHandler",
    "UploadFileParams",
    "is_null_or_whitespace",
    "is_simple_identifier",
    "page_size",
]
