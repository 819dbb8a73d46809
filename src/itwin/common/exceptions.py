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

from typing import TYPE_CHECKING, ClassVar

from pydantic import ValidationError

from .data import ErrorResponse, ModelError

if TYPE_CHECKING:
    from .data import HTTPHeaderDict, HTTPResponse

__all__ = [
    "BadRequestException",
    "CheckpointGenerationFailed",
    "ClientTypeError",
    "ClientValueError",
    "ConflictException",
    "ForbiddenException",
    "ITwinAPIException",
    "ITwinClientException",
    "NotFoundException",
    "PollingTimeoutError",
    "RequiredError",
    "TransportError",
    "UnauthorizedException",
    "UnprocessableEntityException",
]


class ITwinClientException(Exception):
    """The base exception class for all iTwin client exceptions."""


class _WrappedError(ITwinClientException):
    """Wrapper for standard exceptions that occur while preparing requests or parsing service responses."""

    def __init__(self, msg: str, caused_by: Exception | None = None):
        """
        :param msg: The exception message.
        :param caused_by: The original error.
        """
        self.caused_by = caused_by
        full_msg = msg
        if caused_by:
            full_msg = f"{msg}: {str(caused_by)}"
        super(_WrappedError, self).__init__(full_msg)


class TransportError(_WrappedError):
    """Wraps errors raised by the underlying HTTP transport."""


class ClientTypeError(_WrappedError, TypeError):
    """Raised when an operation or function is applied to an object of inappropriate type."""

    def __init__(
        self,
        msg: str,
        caused_by: Exception | None = None,
        valid_classes: tuple[type, ...] | None = None,
    ):
        """
        :param msg: The exception message.
        :param caused_by: The original error.
        :param valid_classes: The classes that the object should have been an instance of.
        """
        super(ClientTypeError, self).__init__(msg, caused_by)
        self.valid_classes = valid_classes


class ClientValueError(_WrappedError, ValueError):
    """Raised when an operation or function receives an argument that has the right type but an inappropriate value."""


class RequiredError(ClientValueError):
    """Raised before any request is sent, when a required field is missing or empty."""

    def __init__(self, field: str, msg: str):
        """
        :param field: The name of the offending field.
        :param msg: A description of the failure, naming the operation.
        """
        super(RequiredError, self).__init__(msg)
        self.field = field


class PollingTimeoutError(TimeoutError, ITwinClientException):
    """Raised when a polling helper gives up waiting for a long-running server-side job."""


class CheckpointGenerationFailed(ITwinClientException):
    """Raised when checkpoint generation for a named version ends in a failed state."""


class ITwinAPIException(ITwinClientException):
    """Raised for any response with a status code outside the 2xx range.

    The raw response is kept as-is. Callers inspect `status` and `content` to distinguish failures.
    """

    def __init__(
        self,
        status: int,
        reason: str | None,
        content: object | None,
        headers: HTTPHeaderDict | None,
        response: HTTPResponse | None = None,
    ):
        """
        :param status: HTTP status code.
        :param reason: Reason.
        :param content: Deserialized content from the response.
        :param headers: Response headers.
        :param response: The raw response.
        """
        self.status = status
        self.reason = reason
        self.content = content
        self.headers = headers
        self.response = response

    @property
    def error(self) -> ModelError | None:
        """The structured error from the response body, if the body follows the iTwin Platform error schema."""
        try:
            return ErrorResponse.model_validate(self.content).error
        except ValidationError:
            return None

    def __str__(self) -> str:
        error_message = f"({self.status})"
        if reason := self.reason:
            error_message += f" {reason}"
        if (error := self.error) is not None:
            error_message += f"\n{error.code}: {error.message}"
            for detail in error.details or []:
                error_message += f"\n  {detail.code}: {detail.message}"
        elif content := self.content:
            error_message += f"\n{content}"
        return error_message


class _StatusError(ITwinAPIException):
    """Base class for errors that are generalized by status code.

    Subclasses define `STATUS_CODE`, which registers them for that status code.
    """

    __STATUS_TYPES: dict[int, type[_StatusError]] = {}

    STATUS_CODE: ClassVar[int]

    @classmethod
    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        status_code = getattr(cls, "STATUS_CODE")
        if existing_cls := _StatusError.__STATUS_TYPES.get(status_code):
            raise ValueError(f"Duplicated STATUS_CODE between {cls} and {existing_cls}")
        _StatusError.__STATUS_TYPES[status_code] = cls

    @staticmethod
    def from_status_code(status_code: int) -> type[ITwinAPIException]:
        """Get the exception type for a status code.

        :param status_code: The status code of the error response.

        :return: The registered type, or `ITwinAPIException` if no type is registered for the status code.
        """
        return _StatusError.__STATUS_TYPES.get(status_code, ITwinAPIException)


class BadRequestException(_StatusError):
    """The service cannot process the request due to a client error (400 - Bad Request)."""

    STATUS_CODE = 400


class UnauthorizedException(_StatusError):
    """The access token is missing, invalid or expired (401 - Unauthorized)."""

    STATUS_CODE = 401


class ForbiddenException(_StatusError):
    """The client does not have access rights to the content (403 - Forbidden)."""

    STATUS_CODE = 403


class NotFoundException(_StatusError):
    """The API could not find the requested resource (404 - Not Found)."""

    STATUS_CODE = 404


class ConflictException(_StatusError):
    """The request conflicts with the current state of the resource (409 - Conflict)."""

    STATUS_CODE = 409


class UnprocessableEntityException(_StatusError):
    """The request body is well-formed but invalid (422 - Unprocessable Entity)."""

    STATUS_CODE = 422


def exception_type_for(status_code: int) -> type[ITwinAPIException]:
    """Get the exception type to raise for a non-2xx status code."""
    return _StatusError.from_status_code(status_code)
