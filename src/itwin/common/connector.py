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

import datetime
import functools
import json
import re
from collections.abc import Mapping
from enum import Enum
from inspect import isclass
from types import GenericAlias, NoneType, TracebackType
from typing import Any, TypeVar
from urllib.parse import quote, urlencode, urlsplit
from uuid import UUID

from dateutil.parser import parse
from pydantic import BaseModel

from itwin import logging

from .data import EmptyResponse, HTTPHeaderDict, HTTPResponse, RequestMethod
from .exceptions import ClientTypeError, ClientValueError, ITwinClientException, exception_type_for
from .interfaces import ITransport

logger = logging.getLogger("connector")

__all__ = ["APIConnector"]

T = TypeVar("T")


def _with_open_transport(func):  # No type annotation to prevent hiding the signature of the decorated function.
    @functools.wraps(func)
    async def wrapper(self: APIConnector, *args, **kwargs):
        # ITransport implementations are re-entrant, so the transport may already be open elsewhere in client code.
        async with self:
            try:
                return await func(self, *args, **kwargs)
            except Exception:
                logger.debug("An error occurred while calling the API.", exc_info=True)
                raise

    return wrapper


class APIConnector:
    """Generic client for facilitating API requests.

    The connector never stores credentials. Authorization headers are provided with each call.
    """

    def __init__(
        self,
        base_url: str,
        transport: ITransport,
        additional_headers: Mapping[str, Any] | None = None,
    ) -> None:
        """
        :param base_url: The host URL of the API, e.g., `https://api.bentley.com/insights/reporting`.
        :param transport: The transport to use for sending requests.
        :param additional_headers: Additional headers to include in each request.
        """
        self._base_url = base_url.rstrip("/")
        self._transport = transport
        self._additional_headers = additional_headers

    @property
    def base_url(self) -> str:
        """The base_url of the connected API."""
        return self._base_url + "/"

    @property
    def transport(self) -> ITransport:
        """The transport used to send requests."""
        return self._transport

    async def open(self) -> None:
        """Open the HTTP transport."""
        await self._transport.open()

    async def close(self) -> None:
        """Close the HTTP transport."""
        await self._transport.close()

    async def __aenter__(self) -> APIConnector:
        await self.open()
        return self

    async def __aexit__(
        self, exc_type: type[Exception] | None, exc_val: Exception | None, exc_tb: TracebackType | None
    ) -> None:
        await self.close()

    def build_url(
        self,
        resource_path: str,
        path_params: Mapping[str, Any] | None = None,
        query_params: Mapping[str, Any] | None = None,
    ) -> str:
        """Build a request URL from a resource path template.

        Path parameters replace `{name}` placeholders in the resource path and are percent-encoded, including any `/`
        characters. Query parameters with a value of None are omitted.

        :param resource_path: Path to the API endpoint, relative to the base URL, or an absolute URL.
        :param path_params: Path parameters to embed in the url.
        :param query_params: Query parameters to append to the url.

        :return: An absolute URL.
        """
        if urlsplit(resource_path).scheme:
            resource_url = resource_path
        elif resource_path:
            resource_url = self._base_url + "/" + resource_path.lstrip("/")
        else:
            resource_url = self._base_url

        if path_params:
            for key, value in self._parameters_to_tuples(path_params):
                resource_url = resource_url.replace(f"{{{key}}}", quote(str(value), safe=""))

        if query_params:
            query = urlencode([(key, value) for key, value in self._parameters_to_tuples(query_params) if value is not None])
            if query:
                separator = "&" if "?" in resource_url else "?"
                resource_url += separator + query

        return resource_url

    @_with_open_transport
    async def call_api(
        self,
        method: RequestMethod,
        resource_path: str,
        path_params: Mapping[str, Any] | None = None,
        query_params: Mapping[str, Any] | None = None,
        header_params: Mapping[str, Any] | None = None,
        body: object | str | bytes | None = None,
        response_type: type[T] | GenericAlias | None = None,
        request_timeout: int | float | tuple[int | float, int | float] | None = None,
    ) -> T:
        """Call the API with the given parameters and deserialize the response.

        Errors raised by `ITransport.request` are not handled by this method.

        :param method: HTTP request method.
        :param resource_path: Path to the API endpoint, or an absolute URL such as a pagination link.
        :param path_params: Path parameters to embed in the url.
        :param query_params: Query parameters to embed in the url.
        :param header_params: Header parameters to be placed in the request header.
        :param body: Body to send with the request.
        :param response_type: The type to deserialize a successful response into. `HTTPResponse` returns the raw
            response, and None returns the decoded JSON data.
        :param request_timeout: Timeout setting for this request. If one number is provided, it will be the
            total request timeout. It can also be a pair (tuple) of (connection, read) timeouts.

        :return: The deserialized response. A `204 No Content` response is always returned as an `EmptyResponse`.

        :raise ITwinAPIException: If the server responds with a status code outside the 2xx range. A subclass is
            raised for status codes with a generalized meaning, e.g., `NotFoundException` for 404.
        :raise ClientValueError: If the response could not be deserialized.
        """
        resource_url = self.build_url(resource_path, path_params, query_params)

        # Process request headers.
        headers = HTTPHeaderDict()
        if self._additional_headers:
            headers.update(self._additional_headers)
        if header_params is not None:
            for key, value in header_params.items():
                if isinstance(value, (list, tuple)):
                    raise ClientValueError(f"Multiple values not supported in header '{key}'")
                headers[key] = str(value)

        # Sanitize body
        body = self._sanitize_for_serialization(body) if body is not None else None

        # Perform request.
        logger.debug(f"Making {method} request to {resource_url}")
        response = await self._transport.request(
            method=method,
            url=resource_url,
            headers=headers,
            body=body,
            request_timeout=request_timeout,
        )
        logger.debug(f"Received {response.status} response from {resource_url}")

        return self._unwrap(response, response_type)

    @classmethod
    def _unwrap(cls, response: HTTPResponse, response_type: type[T] | GenericAlias | None) -> T:
        """Classify the response by status code and decode it.

        :param response: The raw response.
        :param response_type: Target type for a successful response.

        :return: The deserialized response.
        """
        if not 200 <= response.status < 300:
            raise exception_type_for(response.status)(
                status=response.status,
                reason=response.reason,
                content=cls._decode(response),
                headers=response.headers,
                response=response,
            )

        if response.status == 204:
            return EmptyResponse(status=response.status, reason=response.reason, headers=response.getheaders())

        if isclass(response_type) and issubclass(response_type, HTTPResponse):
            # Return the response object directly.
            return response

        response_data = cls._decode(response)
        if response_type is None:  # Return decoded data for a known response without a schema.
            return response_data

        try:
            return cls.__deserialize(response_data, response_type)
        except ITwinClientException:
            raise
        except Exception as e:
            raise ClientValueError(msg="Could not deserialize result", caused_by=e)

    @staticmethod
    def _decode(response: HTTPResponse) -> Any:
        """Decode the response body as JSON, falling back to text."""
        match = None
        content_type = response.getheader("content-type")
        if content_type is not None:
            match = re.search(r"charset=([a-zA-Z\-\d]+)[\s;]?", content_type)
        encoding = match.group(1) if match else "utf-8"
        response_data = response.data.decode(encoding)

        try:
            return json.loads(response_data)
        except ValueError:
            return response_data  # data must not be JSON formatted.

    @classmethod
    def _sanitize_for_serialization(cls, obj: Any | None) -> Any | None:
        """Builds a JSON object for serialization.

        If obj is None return None.
        If obj is an Enum sanitize the value.
        If obj is a primitive return directly.
        If obj is a date or datetime convert to string in iso8601 format.
        If obj is a UUID convert to string.
        If obj is a list or tuple, sanitize each element.
        If obj is a dict, sanitize the dict.
        If obj is an API model, convert to dict using the API field names.

        :param obj: The data to serialize.

        :return: The serialized form of data.
        """
        if obj is None:
            return None
        if isinstance(obj, Enum):
            return cls._sanitize_for_serialization(obj.value)
        elif isinstance(obj, (str, int, float, bool, bytes)):
            return obj
        elif isinstance(obj, (datetime.date, datetime.datetime)):
            return obj.isoformat()
        elif isinstance(obj, UUID):
            return str(obj)
        elif isinstance(obj, list):
            return [cls._sanitize_for_serialization(sub_obj) for sub_obj in obj]
        elif isinstance(obj, tuple):
            return tuple(cls._sanitize_for_serialization(sub_obj) for sub_obj in obj)

        if isinstance(obj, Mapping):
            obj_dict = obj
        elif isinstance(obj, BaseModel):
            obj_dict = obj.model_dump(mode="json", by_alias=True, exclude_unset=True)
        else:
            raise ClientTypeError(
                msg=f"{type(obj)} could not be serialized.",
                valid_classes=(NoneType, str, int, float, bool, bytes, list, tuple, dict, BaseModel),
            )

        return {str(key): cls._sanitize_for_serialization(val) for key, val in obj_dict.items()}

    @classmethod
    def _parameters_to_tuples(cls, params: Mapping[str, Any]) -> list[tuple[str, Any]]:
        """Get parameters as a list of tuples, joining collections with commas.

        :param params: Parameters as a mapping.

        :return: Parameters as list of tuples.
        """
        params = cls._sanitize_for_serialization(params)
        new_params = []
        for key, value in params.items():
            if isinstance(value, (list, tuple)):
                new_params.append((key, ",".join(str(v) for v in value)))
            elif isinstance(value, bool):
                new_params.append((key, str(value).lower()))
            else:
                new_params.append((key, value))
        return new_params

    @classmethod
    def __deserialize(cls, data: Any, response_type: type[T] | GenericAlias) -> T:
        """Deserializes dict, list, or str into an object.

        :param data: Value as dict, list, or str.
        :param response_type: Target type to deserialize data to. Can be class literal, list[T], or dict[str, T].

        :return: The deserialized object.
        """
        if data is None:
            return None

        if isinstance(response_type, GenericAlias):  # list[T], dict[str, T].
            return cls.__deserialize_generic(data, response_type)
        elif response_type in {str, int, float, bool, dict}:
            return cls.__deserialize_primitive(data, response_type)
        elif response_type is datetime.datetime:
            return cls.__deserialize_datetime(data)
        elif response_type is datetime.date:
            return cls.__deserialize_datetime(data).date()
        elif issubclass(response_type, BaseModel):  # API Models.
            return response_type.model_validate(data)
        else:
            raise ClientValueError("Could not parse content.")

    @classmethod
    def __deserialize_generic(cls, data: list | dict, klass: GenericAlias) -> list | dict[str, Any]:
        """Deserializes list or dict into a list or dict of objects.

        :param data: Value as list or dict.
        :param klass: Target type to deserialize data to. Can be list[T] or dict[str, T].

        :return: The deserialized object.

        :raises ClientTypeError: If the data could not be deserialized.
        """
        if klass.__origin__ is list and isinstance(data, list):
            (inner_klass,) = klass.__args__
            return [cls.__deserialize(sub_data, inner_klass) for sub_data in data]

        elif klass.__origin__ is dict and klass.__args__[0] is str and isinstance(data, dict):
            _, value_klass = klass.__args__
            return {str(key): cls.__deserialize(value, value_klass) for key, value in data.items()}

        else:
            raise ClientTypeError(msg=f"Could not deserialize '{type(data)}' as '{klass}'.")

    @staticmethod
    def __deserialize_primitive(data: Any, klass: type):
        """Deserializes data to a primitive type.

        :raises ClientTypeError: If the data could not be deserialized.
        """
        try:
            return klass(data)
        except (TypeError, ValueError) as e:
            raise ClientTypeError(msg="Could not deserialize primitive", caused_by=e)

    @staticmethod
    def __deserialize_datetime(string: str) -> datetime.datetime:
        """Deserializes string to datetime.

        :raises ClientTypeError: If the string could not be parsed as datetime.
        """
        try:
            return parse(string)
        except ValueError as e:
            raise ClientTypeError(msg="Could not deserialize datetime", caused_by=e)
