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

import json
import unittest

from parameterized import parameterized
from pydantic import Field

from itwin.common import CollectionResponse, OperationsBase, RequestMethod, SDKModel, is_simple_identifier, page_size
from itwin.common.test_tools import ACCESS_TOKEN, MockResponse, TestWithConnector


class _Item(SDKModel):
    item_name: str


class _ItemCollection(CollectionResponse):
    items: list[_Item] = Field(default_factory=list)


def _page(names: list[str], next_link: str | None) -> MockResponse:
    return MockResponse.from_json(
        200,
        {
            "items": [{"itemName": name} for name in names],
            "_links": {"next": {"href": next_link} if next_link else None, "self": {"href": "ignored"}},
        },
    )


class TestSimpleIdentifier(unittest.TestCase):
    @parameterized.expand(
        [
            ("Test1", True),
            ("_private", True),
            ("a" * 128, True),
            ("a" * 129, False),
            ("1Test", False),
            ("has space", False),
            ("dash-name", False),
            ("", False),
            (None, False),
        ]
    )
    def test_is_simple_identifier(self, name: str | None, expected: bool) -> None:
        self.assertEqual(expected, is_simple_identifier(name))


class TestPageSize(unittest.TestCase):
    @parameterized.expand([(None, None), (0, None), (1, 1), (1000, 1000)])
    def test_page_size(self, top: int | None, expected: int | None) -> None:
        self.assertEqual(expected, page_size(top))


class TestOperationsBase(TestWithConnector):
    def setUp(self) -> None:
        super().setUp()
        self.operations = OperationsBase(self.connector)

    def test_create_request_without_body(self) -> None:
        request = self.operations.create_request(RequestMethod.GET, ACCESS_TOKEN)
        self.assertEqual(RequestMethod.GET, request.method)
        self.assertEqual(
            {"Authorization": ACCESS_TOKEN, "Accept": "application/vnd.bentley.itwin-platform.v1+json"},
            dict(request.headers),
        )
        self.assertIsNone(request.body)

    def test_create_request_with_body(self) -> None:
        request = self.operations.create_request(
            RequestMethod.POST, ACCESS_TOKEN, _Item(item_name="x"), headers={"Prefer": "return=representation"}
        )
        self.assertEqual("application/json", request.headers["content-type"])
        self.assertEqual("return=representation", request.headers["Prefer"])
        self.assertEqual({"itemName": "x"}, request.body)

    async def test_iterator_uses_next_links(self) -> None:
        next_link = "https://api.example.com/items?%24top=2&%24continuationToken=abc"
        self.transport.request.side_effect = [_page(["a", "b"], next_link), _page(["c"], None)]
        request = self.operations.create_request(RequestMethod.GET, ACCESS_TOKEN)
        iterator = self.operations.get_entity_collection_iterator(
            "groups/{groupId}/items",
            request,
            _ItemCollection,
            lambda response: response.items,
            path_params={"groupId": "g1"},
            query_params={"$top": 2},
        )

        items = await iterator.to_list()

        self.assertEqual(["a", "b", "c"], [item.item_name for item in items])
        self.transport.assert_n_requests_made(2)
        headers = {"Authorization": ACCESS_TOKEN, "Accept": "application/vnd.bentley.itwin-platform.v1+json"}
        self.assert_any_request_made(RequestMethod.GET, "groups/g1/items?%24top=2", headers=headers)
        self.assert_request_made(RequestMethod.GET, next_link, headers=headers)

    async def test_page_without_links(self) -> None:
        self.transport.request.return_value = MockResponse(
            status_code=200, content=json.dumps({"items": []}), headers={"Content-Type": "application/json"}
        )
        page = await self.operations.get_entity_collection_page(
            "items",
            self.operations.create_request(RequestMethod.GET, ACCESS_TOKEN),
            _ItemCollection,
            lambda response: response.items,
        )
        self.assertEqual(0, len(page))
        self.assertTrue(page.is_last)

    async def test_page_with_null_array_and_links(self) -> None:
        self.transport.request.return_value = MockResponse.from_json(200, {"items": None, "_links": None})
        page = await self.operations.get_entity_collection_page(
            "items",
            self.operations.create_request(RequestMethod.GET, ACCESS_TOKEN),
            _ItemCollection,
            lambda response: response.items,
        )
        self.assertEqual(0, len(page))
        self.assertTrue(page.is_last)

    async def test_iterator_continues_past_null_array(self) -> None:
        next_link = "https://api.example.com/items?%24continuationToken=abc"
        self.transport.request.side_effect = [
            MockResponse.from_json(200, {"items": None, "_links": {"next": {"href": next_link}}}),
            _page(["a"], None),
        ]
        iterator = self.operations.get_entity_collection_iterator(
            "items",
            self.operations.create_request(RequestMethod.GET, ACCESS_TOKEN),
            _ItemCollection,
            lambda response: response.items,
        )

        items = await iterator.to_list()

        self.assertEqual(["a"], [item.item_name for item in items])
        self.transport.assert_n_requests_made(2)
