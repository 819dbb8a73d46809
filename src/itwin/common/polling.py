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
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

from itwin import logging

from .exceptions import PollingTimeoutError

logger = logging.getLogger("polling")

__all__ = ["poll_until"]

T = TypeVar("T")


async def poll_until(
    fetch: Callable[[], Awaitable[T]],
    is_done: Callable[[T], bool],
    description: str,
    polling_interval: float,
    timeout: float,
) -> T:
    """Fetch the state of a long-running server-side job until it is done.

    The state is fetched once immediately, then again after each `polling_interval`. No sleep is started that would
    end past the deadline.

    :param fetch: Fetches the current state.
    :param is_done: Decides whether the state is final. It may raise to stop polling early, e.g., on a failed state.
    :param description: Names the job in log records and in the timeout message.
    :param polling_interval: Seconds to wait between requests.
    :param timeout: Seconds to wait in total.

    :return: The final state.

    :raises PollingTimeoutError: If the job is not done within the timeout.
    """
    deadline = time.monotonic() + timeout
    while True:
        state = await fetch()
        if is_done(state):
            logger.debug(f"{description} is done")
            return state
        if time.monotonic() + polling_interval > deadline:
            raise PollingTimeoutError(f"{description} did not finish within {timeout} seconds.")
        logger.debug(f"{description} is not done, checking again in {polling_interval}s")
        await asyncio.sleep(polling_interval)
