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

from collections.abc import Callable
from dataclasses import dataclass
from types import TracebackType

from pure_interface import Interface

from .data import HTTPHeaderDict, HTTPResponse, RequestMethod

__all__ = [
    "IFileHandler",
    "ITransport",
    "ProgressCallback",
    "ProgressData",
    "UploadFileParams",
]


class ITransport(Interface):
    """Interface for HTTP Transport.

    ITransport is responsible for sending HTTP requests and receiving responses. The open and close methods are
    used to manage the connection state. The request method is used to send an HTTP request and receive a response.

    An internal counter should be incremented when open is called and decremented when close is called. The transport
    should only release resources when the counter reaches zero.
    """

    async def open(self) -> None:
        """Open the HTTP transport.

        ITransport implementations should be reentrant. Resources that are consumed by the transport should be
        retained until the close method is called the same number of times as open.
        """
        ...  # pragma: no cover

    async def close(self) -> None:
        """Close the transport.

        Calling close does not guarantee that the transport is closed immediately. Resources should be retained as
        long as there is an open call that has not been matched by a close call.
        """
        ...  # pragma: no cover

    async def __aenter__(self) -> ITransport:
        """Open the transport when entered."""
        ...

    async def __aexit__(
        self, exc_type: type[Exception] | None, exc_val: Exception | None, exc_tb: TracebackType | None
    ) -> None:
        """Close the transport when exited."""
        ...

    async def request(
        self,
        method: RequestMethod,
        url: str,
        headers: HTTPHeaderDict | None = None,
        body: object | str | bytes | None = None,
        request_timeout: int | float | tuple[int | float, int | float] | None = None,
    ) -> HTTPResponse:
        """Send an asynchronous request.

        The request is attempted exactly once. ITransport implementations *MUST NOT* retry failed requests or
        automatically follow redirects.

        :param method: HTTP request method.
        :param url: HTTP request url.
        :param headers: Http request headers.
        :param body: Request body.
        :param request_timeout: Timeout setting for this request. If one number provided, it will be total request
            timeout. It can also be a pair (tuple) of (connection, read) timeouts.

        :return: The HTTP response object, whatever its status code.

        :raise TransportError: If the underlying implementation encounters an error.
        """
        ...  # pragma: no cover


@dataclass(frozen=True, kw_only=True)
class ProgressData:
    """Data reported on each file transfer iteration."""

    bytes_transferred: int
    """Bytes that have been transferred."""

    bytes_total: int
    """Total size in bytes of the file being transferred."""


ProgressCallback = Callable[[ProgressData], None]


@dataclass(frozen=True, kw_only=True)
class UploadFileParams:
    """Parameters for an upload file operation."""

    upload_url: str
    """Remote storage url where to upload the file."""

    source_file_path: str
    """Path to the local file to be uploaded."""

    progress_callback: ProgressCallback | None = None
    """Called to report progress on each transfer iteration."""


class IFileHandler(Interface):
    """Handler for file system operations used by operations that transfer files, e.g., changeset creation."""

    async def upload_file(self, params: UploadFileParams) -> None:
        """Upload a file from the local source to the remote target, reporting progress via the callback.

        :param params: Parameters for this operation.
        """
        ...  # pragma: no cover

    def get_file_size(self, file_path: str) -> int:
        """Determine the size of the specified file.

        :param file_path: Path of the file.

        :return: The file size in bytes.
        """
        ...  # pragma: no cover
