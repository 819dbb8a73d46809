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

import copy
import enum
from collections.abc import Awaitable, Callable, ItemsView, Iterator, KeysView, Mapping, MutableMapping, Sequence
from collections.abc import ValuesView
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

__all__ = [
    "AuthorizationCallback",
    "AuthorizationInfo",
    "CollectionResponse",
    "EmptyResponse",
    "ErrorDetails",
    "ErrorResponse",
    "HTTPHeaderDict",
    "HTTPResponse",
    "Link",
    "ModelError",
    "PagedResponseLinks",
    "RequestMethod",
    "SDKModel",
]


class RequestMethod(str, enum.Enum):
    """HTTP request method."""

    GET = "GET"
    """HTTP [`GET`](https://developer.mozilla.org/en-US/docs/Web/HTTP/Methods/GET)"""

    POST = "POST"
    """HTTP [`POST`](https://developer.mozilla.org/en-US/docs/Web/HTTP/Methods/POST)"""

    PUT = "PUT"
    """HTTP [`PUT`](https://developer.mozilla.org/en-US/docs/Web/HTTP/Methods/PUT)"""

    DELETE = "DELETE"
    """HTTP [`DELETE`](https://developer.mozilla.org/en-US/docs/Web/HTTP/Methods/DELETE)"""

    PATCH = "PATCH"
    """HTTP [`PATCH`](https://developer.mozilla.org/en-US/docs/Web/HTTP/Methods/PATCH)"""

    def __str__(self) -> str:
        return self.value


class HTTPHeaderDict(MutableMapping[str, str]):
    def __init__(self, seq: Mapping[str, str] | Sequence[tuple[str, str]] | None = None, **kwargs: str) -> None:
        self.__values: dict[str, str] = {}
        self.update(seq, **kwargs)

    def update(self, seq: Mapping[str, str] | Sequence[tuple[str, str]] | None = None, **kwargs: str) -> None:
        if isinstance(seq, Mapping):
            self.__update_from_mapping(seq)
        elif isinstance(seq, Sequence):
            self.__update_from_sequence(seq)

        self.__update_from_mapping(kwargs)

    def __update_from_mapping(self, mapping: Mapping[str, str]) -> None:
        for key, value in mapping.items():
            self.__setitem__(key, value)

    def __update_from_sequence(self, seq: Sequence[tuple[str, str]]) -> None:
        for key, value in seq:
            self.__setitem__(key, value)

    def __setitem__(self, key: str, value: str) -> None:
        lookup = key.title()
        if lookup in self.__values and lookup != "Set-Cookie":
            # RFC 7230 section 3.2.2: repeated fields are combined into a comma separated list.
            # Set-Cookie cannot be combined, so the latest value wins.
            self.__values[lookup] += "," + value
        else:
            self.__values[lookup] = value

    def __delitem__(self, key: str) -> None:
        del self.__values[key.title()]

    def __getitem__(self, key: str) -> str:
        return self.__values[key.title()]

    def __len__(self) -> int:
        return len(self.__values)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __contains__(self, item: object) -> bool:
        return isinstance(item, str) and item.title() in self.__values

    def __repr__(self) -> str:
        repr_data = {}
        for key, value in self.items():
            if key in ("Authorization", "Proxy-Authorization", "Cookie", "Set-Cookie"):
                # Do not expose sensitive information.
                value = "*****"
            repr_data[key] = value

        return f"{self.__class__.__name__}({repr_data!r})"

    def items(self) -> ItemsView[str, str]:
        return ItemsView(self)

    def keys(self) -> KeysView[str]:
        return KeysView(self.__values)

    def values(self) -> ValuesView[str]:
        return ValuesView(self.__values)

    def copy(self) -> HTTPHeaderDict:
        return copy.deepcopy(self)


@dataclass(frozen=True, kw_only=True)
class EmptyResponse:
    """A successful response without content, e.g., `204 No Content` from a delete operation."""

    status: int
    reason: str | None = None
    headers: HTTPHeaderDict = field(default_factory=HTTPHeaderDict)

    def getheaders(self) -> HTTPHeaderDict:
        return self.headers.copy()

    def getheader(self, key: str, default: str | None = None) -> str | None:
        return self.headers.get(key, default)


@dataclass(frozen=True, kw_only=True)
class HTTPResponse(EmptyResponse):
    data: bytes


@dataclass(frozen=True, kw_only=True)
class AuthorizationInfo:
    """Authorization details returned by an authorization callback."""

    scheme: str
    """The authorization scheme, usually `Bearer`."""

    token: str
    """The access token."""

    def to_header(self) -> str:
        """Format the value of the `Authorization` header."""
        return f"{self.scheme} {self.token}"


AuthorizationCallback: TypeAlias = Callable[[], Awaitable[AuthorizationInfo]]
"""An async callable that provides a fresh access token for each request."""


class SDKModel(BaseModel):
    """Base class for API models.

    Attributes use python naming, while the JSON representation uses the camelCase names of the iTwin Platform APIs.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class Link(SDKModel):
    """Hyperlink container."""

    href: str | None = None


class PagedResponseLinks(SDKModel):
    """URLs for redoing the current request, getting to the previous or next page of results, if applicable."""

    next: Link | None = None
    prev: Link | None = None
    self_: Link | None = Field(default=None, alias="self")

    @property
    def next_href(self) -> str | None:
        """The URL of the next page, if there is one."""
        return self.next.href if self.next is not None else None


class ErrorDetails(SDKModel):
    """Contains error information."""

    code: str
    """One of a server-defined set of error codes."""

    message: str
    """A human-readable representation of the error."""


class ModelError(ErrorDetails):
    """Contains error information and an optional array of more specific errors."""

    details: list[ErrorDetails] | None = None
    """Optional array of more specific errors."""


class ErrorResponse(SDKModel):
    """Gives details for an error that occurred while handling the request.

    Clients must not assume that every failed request produces an object of this schema.
    """

    error: ModelError


class CollectionResponse(SDKModel):
    """Base class for paginated collection responses.

    Subclasses declare the field that holds the resource array, e.g., `mappings` or `groups`.
    """

    links: PagedResponseLinks = Field(default_factory=PagedResponseLinks, alias="_links")

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        """Read an explicit `null` resource array or link block as a missing one."""
        if isinstance(data, Mapping):
            return {key: value for key, value in data.items() if value is not None}
        return data
