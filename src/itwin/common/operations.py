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

import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from types import GenericAlias
from typing import Any, ClassVar, TypeVar

from itwin import logging

from .connector import APIConnector
from .data import CollectionResponse, HTTPHeaderDict, RequestMethod
from .pagination import EntityListIterator, EntityPage

logger = logging.getLogger("operations")

__all__ = [
    "OperationsBase",
    "RequestSpec",
    "is_null_or_whitespace",
    "is_simple_identifier",
    "page_size",
]

T = TypeVar("T")
C = TypeVar("C", bound=CollectionResponse)

_RE_SIMPLE_IDENTIFIER = re.compile(r"^[a-zA-Z_][0-9a-zA-Z_]*$")
_MAX_IDENTIFIER_LENGTH = 128


def is_simple_identifier(name: str | None) -> bool:
    """Check whether a name may be used as a mapping, group or property name.

    A simple identifier starts with a letter or underscore, contains only letters, digits and underscores, and is at
    most 128 characters long.
    """
    return name is not None and len(name) <= _MAX_IDENTIFIER_LENGTH and bool(_RE_SIMPLE_IDENTIFIER.match(name))


def is_null_or_whitespace(value: str | None) -> bool:
    """Check whether a string is missing, empty, or contains only whitespace."""
    return value is None or not value.strip()


def page_size(top: int | None) -> int | None:
    """The `$top` query value for a list request. Zero means the service default page size."""
    return top or None


@dataclass(frozen=True, kw_only=True)
class RequestSpec:
    """A prepared request, without the URL."""

    method: RequestMethod
    """HTTP request method."""

    headers: HTTPHeaderDict = field(default_factory=HTTPHeaderDict)
    """Request headers, including `Authorization` and `Accept`."""

    body: Any | None = None
    """Request body, sanitized to JSON-compatible data."""


class OperationsBase:
    """Shared request building, response unwrapping and pagination for resource clients."""

    ACCEPT: ClassVar[str] = "application/vnd.bentley.itwin-platform.v1+json"
    """The versioned media type sent in the `Accept` header."""

    def __init__(self, connector: APIConnector) -> None:
        """
        :param connector: The connector to use for API calls.
        """
        self._connector = connector

    @property
    def connector(self) -> APIConnector:
        return self._connector

    def create_request(
        self,
        method: RequestMethod,
        access_token: str,
        body: object | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> RequestSpec:
        """Build a request with the standard iTwin Platform headers.

        :param method: HTTP request method.
        :param access_token: The value of the `Authorization` header, e.g., `Bearer <token>`. It is sent as given.
        :param body: Optional request body. It is serialized as JSON.
        :param headers: Additional headers for this request.

        :return: The prepared request.
        """
        request_headers = HTTPHeaderDict({"Authorization": access_token, "Accept": self.ACCEPT})
        request_body = None
        if body is not None:
            request_headers["Content-Type"] = "application/json"
            request_body = APIConnector._sanitize_for_serialization(body)
        if headers:
            request_headers.update(headers)
        return RequestSpec(method=method, headers=request_headers, body=request_body)

    async def fetch_data(
        self,
        resource_path: str,
        request: RequestSpec,
        response_type: type[T] | GenericAlias | None = None,
        path_params: Mapping[str, Any] | None = None,
        query_params: Mapping[str, Any] | None = None,
    ) -> T:
        """Send a prepared request and unwrap the response.

        :param resource_path: The resource path template, relative to the connector base URL, or an absolute URL.
        :param request: The prepared request.
        :param response_type: The type to deserialize a successful response into.
        :param path_params: Path parameters to embed in the url.
        :param query_params: Query parameters to embed in the url.

        :return: The deserialized response, or an `EmptyResponse` for `204 No Content`.

        :raises ITwinAPIException: If the server responds with a status code outside the 2xx range.
        """
        return await self._connector.call_api(
            request.method,
            resource_path,
            path_params=path_params,
            query_params=query_params,
            header_params=request.headers,
            body=request.body,
            response_type=response_type,
        )

    async def get_entity_collection_page(
        self,
        resource_path: str,
        request: RequestSpec,
        response_type: type[C],
        accessor: Callable[[C], Sequence[T]],
        path_params: Mapping[str, Any] | None = None,
        query_params: Mapping[str, Any] | None = None,
    ) -> EntityPage[T]:
        """Fetch one page of a collection.

        :param resource_path: The resource path template, or the absolute `next` link of a previous page.
        :param request: The prepared request.
        :param response_type: The collection response model.
        :param accessor: Selects the resource array from the collection response.
        :param path_params: Path parameters to embed in the url.
        :param query_params: Query parameters to embed in the url.

        :return: The page.
        """
        response = await self.fetch_data(
            resource_path, request, response_type, path_params=path_params, query_params=query_params
        )
        return EntityPage(accessor(response), response.links.next_href)

    def get_entity_collection_iterator(
        self,
        resource_path: str,
        request: RequestSpec,
        response_type: type[C],
        accessor: Callable[[C], Sequence[T]],
        path_params: Mapping[str, Any] | None = None,
        query_params: Mapping[str, Any] | None = None,
    ) -> EntityListIterator[T]:
        """Create a lazy iterator over a collection.

        No request is sent until the first item or page is requested. Following pages are requested with the same
        request, using the `next` link of the previous page as the URL.

        :param resource_path: The resource path template of the first page.
        :param request: The prepared request.
        :param response_type: The collection response model.
        :param accessor: Selects the resource array from the collection response.
        :param path_params: Path parameters to embed in the url of the first page.
        :param query_params: Query parameters to embed in the url of the first page.

        :return: The iterator.
        """

        async def fetch_page(next_link: str | None) -> EntityPage[T]:
            if next_link is None:
                return await self.get_entity_collection_page(
                    resource_path, request, response_type, accessor, path_params=path_params, query_params=query_params
                )
            return await self.get_entity_collection_page(next_link, request, response_type, accessor)

        return EntityListIterator(fetch_page)
