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

import os

from itwin import logging

from .connector import APIConnector
from .data import HTTPHeaderDict, HTTPResponse, RequestMethod
from .interfaces import IFileHandler, ITransport, ProgressData, UploadFileParams

logger = logging.getLogger("files")

__all__ = ["StorageFileHandler"]


class StorageFileHandler(IFileHandler):
    """Upload files to blob storage urls issued by the iModels API, using an `ITransport`.

    The file is sent in a single `PUT` request as a block blob.
    """

    def __init__(self, transport: ITransport) -> None:
        """
        :param transport: The transport to use for the upload requests.
        """
        self._transport = transport

    def get_file_size(self, file_path: str) -> int:
        return os.path.getsize(file_path)

    async def upload_file(self, params: UploadFileParams) -> None:
        """Upload a local file to a remote storage url.

        :param params: Parameters for this operation.

        :raises ValueError: If the source file does not exist.
        :raises ITwinAPIException: If the storage service rejects the upload.
        """
        if not os.path.isfile(params.source_file_path):
            raise ValueError(f"file {params.source_file_path} does not exist")

        size = self.get_file_size(params.source_file_path)
        if params.progress_callback is not None:
            params.progress_callback(ProgressData(bytes_transferred=0, bytes_total=size))

        with open(params.source_file_path, "rb") as input_:
            data = input_.read()

        # Upload urls are absolute and pre-signed.
        connector = APIConnector(params.upload_url, self._transport)
        logger.debug(f"Uploading {size} bytes from {params.source_file_path}")
        await connector.call_api(
            RequestMethod.PUT,
            params.upload_url,
            header_params=HTTPHeaderDict({"x-ms-blob-type": "BlockBlob", "Content-Type": "application/octet-stream"}),
            body=data,
            response_type=HTTPResponse,
        )

        if params.progress_callback is not None:
            params.progress_callback(ProgressData(bytes_transferred=size, bytes_total=size))
