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

import asyncio
from dataclasses import dataclass
from typing import Any

import aiohttp
from aiohttp.typedefs import StrOrURL

from itwin.common.data import HTTPHeaderDict, HTTPResponse
from itwin.common.exceptions import TransportError

__all__ = ["Config", "Context"]


@dataclass(frozen=True, kw_only=True)
class Config:
    user_agent: str
    """The value to provide in the `User-Agent` header."""

    num_pools: int
    """Number of connection pools to cache before discarding the least recently used pool."""

    verify_ssl: bool
    """Verify SSL certificates."""

    proxy: StrOrURL | None
    """Proxy server to use for the request."""

    close_grace_period_ms: int
    """Grace period (in milliseconds) to wait for connections to close gracefully."""

    async def create_context(self) -> Context:
        return Context(
            num_pools=self.num_pools,
            verify_ssl=self.verify_ssl,
            proxy=self.proxy,
            close_grace_period_ms=self.close_grace_period_ms,
        )


class Context:
    """Inner class to manage the aiohttp session."""

    def __init__(self, num_pools: int, verify_ssl: bool, proxy: StrOrURL | None, close_grace_period_ms: int) -> None:
        """
        :param num_pools: Number of connection pools to cache before discarding the least recently used pool.
        :param verify_ssl: Verify SSL certificates.
        :param proxy: Proxy server to use for the request.
        :param close_grace_period_ms: Grace period (in milliseconds) to wait for connections to close.
        """
        connector = aiohttp.TCPConnector(ssl=None if verify_ssl else False, limit=num_pools)
        self.__session: aiohttp.ClientSession | None = aiohttp.ClientSession(
            connector=connector, skip_auto_headers=["Accept", "Accept-Encoding"]
        )
        self.__proxy = proxy
        self._close_grace_period_ms = close_grace_period_ms

    async def close(self) -> None:
        """Close the aiohttp session."""

        session = self.__session
        self.__session = None
        await session.close()

        # Wait for the underlying SSL connections to close
        # https://docs.aiohttp.org/en/stable/client_advanced.html#graceful-shutdown
        await asyncio.sleep(self._close_grace_period_ms / 1000)

    async def request(
        self,
        method: str,
        url: StrOrURL,
        headers: HTTPHeaderDict,
        body: str | bytes | None,
        timeout: aiohttp.ClientTimeout | None,
    ) -> HTTPResponse:
        """Submit a single HTTP request.

        :param method: HTTP method.
        :param url: Request URL.
        :param headers: Request headers.
        :param body: Serialized request body.
        :param timeout: Request timeout.

        :return: The server response.
        """
        if self.__session is None:
            raise TransportError("Cannot make a request after the transport has been closed.")

        kwargs: dict[str, Any] = dict(method=method, url=url, headers=headers, data=body, proxy=self.__proxy)
        if timeout is not None:
            kwargs["timeout"] = timeout

        # The URL is already percent-encoded by the connector.
        async with self.__session.request(allow_redirects=False, **kwargs) as resp:
            return HTTPResponse(
                status=resp.status,
                data=await resp.read(),
                reason=resp.reason,
                headers=HTTPHeaderDict(resp.headers),
            )
