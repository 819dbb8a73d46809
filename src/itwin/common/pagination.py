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

from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from typing import Generic, TypeVar, overload

from itwin import logging

logger = logging.getLogger("pagination")

__all__ = [
    "EntityListIterator",
    "EntityPage",
    "PageFetcher",
]

T = TypeVar("T")


class EntityPage(Sequence[T]):
    """One page of a paginated collection response.

    The page exposes the items of the resource array in server order, and the link to the next page, if any.
    """

    def __init__(self, values: Sequence[T], next_link: str | None = None) -> None:
        """
        :param values: The items in the page.
        :param next_link: The absolute URL of the next page, or None if this is the last page.
        """
        self._values = list(values)
        self._next_link = next_link

    @property
    def values(self) -> list[T]:
        """The items in the page."""
        return list(self._values)

    @property
    def next_link(self) -> str | None:
        """The absolute URL of the next page, or None if this is the last page."""
        return self._next_link

    @property
    def is_last(self) -> bool:
        """Whether this is the last page of the collection."""
        return self._next_link is None

    def __len__(self) -> int:
        return len(self._values)

    @overload
    def __getitem__(self, key: int) -> T: ...

    @overload
    def __getitem__(self, key: slice) -> list[T]: ...

    def __getitem__(self, key: int | slice) -> T | list[T]:
        return self._values[key]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(values={self._values!r}, next_link={self._next_link!r})"


PageFetcher = Callable[[str | None], Awaitable[EntityPage[T]]]
"""Fetch one page of a collection.

The fetcher is called with None for the first page, and with the `next` link of the previous page for every
following page.
"""


class EntityListIterator(AsyncIterator[T], Generic[T]):
    """Lazy, single-pass iterator over a paginated collection.

    Items are yielded in the order the server returns them, page by page. A further page is only requested when the
    items of the current page have been consumed. Iteration ends after the first page without a `next` link, even
    if that page is empty. An empty page that does have a `next` link does not end iteration.

    The iterator is not restartable. Call the list operation again to iterate the collection from the start.

    ```python
    async for mapping in client.get_mappings_iterator(access_token, imodel_id):
        print(mapping.mapping_name)

    async for page in client.get_mappings_iterator(access_token, imodel_id).by_page():
        print(len(page))
    ```
    """

    def __init__(self, page_fetcher: PageFetcher[T]) -> None:
        """
        :param page_fetcher: Async callable that fetches a page, given the `next` link of the previous page.
        """
        self._fetch_page = page_fetcher
        self._current_page: list[T] = []
        self._cursor = 0
        self._next_link: str | None = None
        self._started = False

    @property
    def exhausted(self) -> bool:
        """Whether the last page has been fetched and all of its items have been consumed."""
        return self._started and self._next_link is None and self._cursor >= len(self._current_page)

    async def _advance(self) -> bool:
        """Replace the current page with the next one.

        :return: False if there are no more pages, True otherwise.
        """
        if self._started and self._next_link is None:
            return False

        page = await self._fetch_page(self._next_link)
        self._started = True
        self._current_page = page.values
        self._cursor = 0
        self._next_link = page.next_link
        logger.debug(f"Fetched page with {len(self._current_page)} item(s), has next page: {not page.is_last}")
        return True

    async def next_item(self) -> T:
        """Get the next item, fetching further pages as needed.

        :return: The next item.

        :raises StopAsyncIteration: If there are no more items.
        """
        while self._cursor >= len(self._current_page):
            if not await self._advance():
                raise StopAsyncIteration
        item = self._current_page[self._cursor]
        self._cursor += 1
        return item

    async def next_page(self) -> list[T]:
        """Get the items of the next page.

        If some items of the current page have not been consumed yet, those items are returned instead. The returned
        list may be empty, if the server returned an empty page.

        :return: The items of the page.

        :raises StopAsyncIteration: If there are no more pages.
        """
        if self._cursor >= len(self._current_page) and not await self._advance():
            raise StopAsyncIteration
        batch = self._current_page[self._cursor :]
        self._cursor = len(self._current_page)
        return batch

    def __aiter__(self) -> EntityListIterator[T]:
        return self

    async def __anext__(self) -> T:
        return await self.next_item()

    async def by_page(self) -> AsyncIterator[list[T]]:
        """Iterate over the remaining pages, one list of items per page."""
        while True:
            try:
                page = await self.next_page()
            except StopAsyncIteration:
                return
            yield page

    async def to_list(self) -> list[T]:
        """Drain the iterator into a list.

        :return: All remaining items, in server order.
        """
        return [item async for item in self]
