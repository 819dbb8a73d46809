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
from urllib.parse import parse_qs, urlencode, urlparse
from uuid import uuid4

from parameterized import parameterized

from itwin.common import EmptyResponse, HTTPHeaderDict, RequestMethod
from itwin.common.exceptions import NotFoundException, RequiredError
from itwin.common.test_tools import (
    ACCESS_TOKEN,
    BASE_URL,
    AbstractTestRequestHandler,
    MockResponse,
    TestWithConnector,
    utc_datetime,
)
from itwin.reporting import (
    CalculatedPropertyCreate,
    CalculatedPropertyType,
    CustomCalculationCreate,
    DataType,
    ECProperty,
    GroupCreate,
    GroupPropertyCreate,
    GroupUpdate,
    MappingCopy,
    MappingCreate,
    MappingsClient,
    MappingUpdate,
    QuantityType,
)

from ..data import load_test_data

IMODEL_ID = "imodel-1"
ACCEPT = "application/vnd.bentley.itwin-platform.v1+json"


class MappingsRequestHandler(AbstractTestRequestHandler):
    """In-memory mappings endpoint, paginated with continuation tokens."""

    def __init__(self) -> None:
        self.mappings: dict[str, dict] = {}

    def _mappings_url(self, **query: object) -> str:
        url = f"{BASE_URL}datasources/imodels/{IMODEL_ID}/mappings"
        return url + "?" + urlencode(query) if query else url

    def _list(self, query: dict[str, list[str]]) -> MockResponse:
        values = list(self.mappings.values())
        top = int(query.get("$top", ["100"])[0])
        start = int(query.get("$continuationToken", ["0"])[0])
        end = start + top
        links = {"self": {"href": self._mappings_url()}, "next": None}
        if end < len(values):
            links["next"] = {"href": self._mappings_url(**{"$top": top, "$continuationToken": end})}
        return MockResponse.from_json(200, {"mappings": values[start:end], "_links": links})

    async def request(
        self,
        method: RequestMethod,
        url: str,
        headers: HTTPHeaderDict | None = None,
        body: object | str | bytes | None = None,
        request_timeout: int | float | tuple[int | float, int | float] | None = None,
    ) -> MockResponse:
        parsed = urlparse(url)
        segments = parsed.path.strip("/").split("/")
        match method, segments:
            case RequestMethod.GET, ["datasources", "imodels", _, "mappings"]:
                return self._list(parse_qs(parsed.query))
            case RequestMethod.POST, ["datasources", "imodels", _, "mappings"]:
                mapping = {"id": str(uuid4()), "extractionEnabled": True, "_links": {}, **body}
                self.mappings[mapping["id"]] = mapping
                return MockResponse.from_json(201, {"mapping": mapping})
            case RequestMethod.GET, ["datasources", "imodels", _, "mappings", mapping_id] if mapping_id in self.mappings:
                return MockResponse.from_json(200, {"mapping": self.mappings[mapping_id]})
            case RequestMethod.PATCH, ["datasources", "imodels", _, "mappings", mapping_id] if mapping_id in self.mappings:
                self.mappings[mapping_id].update(body)
                return MockResponse.from_json(200, {"mapping": self.mappings[mapping_id]})
            case RequestMethod.DELETE, ["datasources", "imodels", _, "mappings", mapping_id] if mapping_id in self.mappings:
                del self.mappings[mapping_id]
                return MockResponse(status_code=204, reason="No Content")
            case _:
                return MockResponse.from_json(
                    404, {"error": {"code": "MappingNotFound", "message": "Requested Mapping is not available."}}
                )


class TestMappingsClient(TestWithConnector):
    def setUp(self) -> None:
        super().setUp()
        self.client = MappingsClient(self.connector)
        self.handler = MappingsRequestHandler()
        self.transport.set_request_handler(self.handler)
        self.setup_universal_headers({"Authorization": ACCESS_TOKEN, "Accept": ACCEPT})

    @property
    def base_path(self) -> str:
        return f"datasources/imodels/{IMODEL_ID}/mappings"

    async def create_three_mappings(self) -> None:
        for name in ("Test1", "Test2", "Test3"):
            await self.client.create_mapping(ACCESS_TOKEN, IMODEL_ID, MappingCreate(mapping_name=name))

    async def test_get_mappings(self) -> None:
        await self.create_three_mappings()

        mappings = await self.client.get_mappings(ACCESS_TOKEN, IMODEL_ID)

        self.assertEqual({"Test1", "Test2", "Test3"}, {mapping.mapping_name for mapping in mappings})
        self.assert_request_made(RequestMethod.GET, self.base_path)

    async def test_get_mappings_top(self) -> None:
        await self.create_three_mappings()

        mappings = await self.client.get_mappings(ACCESS_TOKEN, IMODEL_ID, top=2)

        self.assertEqual(3, len(mappings))
        self.assert_any_request_made(RequestMethod.GET, self.base_path + "?%24top=2")
        self.assert_request_made(RequestMethod.GET, self.base_path + "?%24top=2&%24continuationToken=2")

    async def test_get_mappings_iterator(self) -> None:
        await self.create_three_mappings()

        iterator = self.client.get_mappings_iterator(ACCESS_TOKEN, IMODEL_ID, top=2)
        names = []
        while True:
            try:
                names.append((await iterator.next_item()).mapping_name)
            except StopAsyncIteration:
                break

        self.assertEqual(["Test1", "Test2", "Test3"], names)

    async def test_get_mappings_by_page(self) -> None:
        await self.create_three_mappings()

        pages = [page async for page in self.client.get_mappings_iterator(ACCESS_TOKEN, IMODEL_ID, top=2).by_page()]

        self.assertEqual([2, 1], [len(page) for page in pages])

    async def test_create_and_get_mapping(self) -> None:
        created = await self.client.create_mapping(
            ACCESS_TOKEN, IMODEL_ID, MappingCreate(mapping_name="Walls", description="All walls")
        )
        self.assert_request_made(
            RequestMethod.POST,
            self.base_path,
            headers={"Content-Type": "application/json"},
            body={"mappingName": "Walls", "description": "All walls"},
        )

        fetched = await self.client.get_mapping(ACCESS_TOKEN, IMODEL_ID, created.id)

        self.assertEqual(created.id, fetched.id)
        self.assertEqual("Walls", fetched.mapping_name)
        self.assertEqual("All walls", fetched.description)

    async def test_update_mapping(self) -> None:
        created = await self.client.create_mapping(ACCESS_TOKEN, IMODEL_ID, MappingCreate(mapping_name="Walls"))

        updated = await self.client.update_mapping(
            ACCESS_TOKEN, IMODEL_ID, created.id, MappingUpdate(extraction_enabled=False)
        )

        self.assertFalse(updated.extraction_enabled)
        self.assert_request_made(
            RequestMethod.PATCH,
            f"{self.base_path}/{created.id}",
            headers={"Content-Type": "application/json"},
            body={"extractionEnabled": False},
        )

    async def test_delete_mapping(self) -> None:
        created = await self.client.create_mapping(ACCESS_TOKEN, IMODEL_ID, MappingCreate(mapping_name="Walls"))

        response = await self.client.delete_mapping(ACCESS_TOKEN, IMODEL_ID, created.id)

        self.assertIsInstance(response, EmptyResponse)
        self.assertEqual(204, response.status)
        with self.assertRaises(NotFoundException):
            await self.client.get_mapping(ACCESS_TOKEN, IMODEL_ID, created.id)

    async def test_get_unknown_mapping(self) -> None:
        with self.assertRaises(NotFoundException) as ctx:
            await self.client.get_mapping(ACCESS_TOKEN, IMODEL_ID, "-")
        self.assertEqual(404, ctx.exception.status)
        self.assertEqual("MappingNotFound", ctx.exception.error.code)
        self.assert_request_made(RequestMethod.GET, f"{self.base_path}/-")

    @parameterized.expand(
        [
            ("missing name", MappingCreate()),
            ("empty name", MappingCreate(mapping_name="")),
            ("name with spaces", MappingCreate(mapping_name="Not valid")),
            ("name starting with digit", MappingCreate(mapping_name="1Mapping")),
            ("name too long", MappingCreate(mapping_name="a" * 129)),
        ]
    )
    async def test_create_mapping_validation(self, _: str, mapping: MappingCreate) -> None:
        with self.assertRaises(RequiredError) as ctx:
            await self.client.create_mapping(ACCESS_TOKEN, IMODEL_ID, mapping)
        self.assertEqual("mapping_name", ctx.exception.field)
        self.assertIn("create_mapping", str(ctx.exception))
        self.transport.assert_no_requests()

    @parameterized.expand(
        [
            ("no fields", MappingUpdate(), "mapping"),
            ("invalid name", MappingUpdate(mapping_name="Not valid"), "mapping_name"),
        ]
    )
    async def test_update_mapping_validation(self, _: str, mapping: MappingUpdate, field: str) -> None:
        with self.assertRaises(RequiredError) as ctx:
            await self.client.update_mapping(ACCESS_TOKEN, IMODEL_ID, "mapping-1", mapping)
        self.assertEqual(field, ctx.exception.field)
        self.transport.assert_no_requests()


class TestMappingsClientRequests(TestWithConnector):
    """Request and response handling of the group and property operations."""

    def setUp(self) -> None:
        super().setUp()
        self.client = MappingsClient(self.connector)
        self.setup_universal_headers({"Authorization": ACCESS_TOKEN, "Accept": ACCEPT})

    @property
    def group_path(self) -> str:
        return f"datasources/imodels/{IMODEL_ID}/mappings/mapping-1/groups/group-1"

    async def test_get_mapping_parses_response(self) -> None:
        self.transport.request.return_value = MockResponse.from_json(200, load_test_data("mapping.json"))

        mapping = await self.client.get_mapping(ACCESS_TOKEN, IMODEL_ID, "5d6a8d8e-0d5c-4a5e-9f8a-2b1d0f4f8c01")

        self.assertEqual("Test1", mapping.mapping_name)
        self.assertTrue(mapping.extraction_enabled)
        self.assertEqual(utc_datetime(2024, 3, 1, 10, 15), mapping.created_on)
        self.assertEqual("https://api.bentley.com/imodels/imodel-1", mapping.links["imodel"].href)

    async def test_get_mappings_follows_next_link(self) -> None:
        self.transport.request.side_effect = [
            MockResponse.from_json(200, load_test_data("mappings_page_0.json")),
            MockResponse.from_json(200, load_test_data("mappings_page_1.json")),
        ]

        mappings = await self.client.get_mappings(ACCESS_TOKEN, IMODEL_ID, top=2)

        self.assertEqual(["mapping-1", "mapping-2", "mapping-3"], [mapping.id for mapping in mappings])
        self.transport.assert_n_requests_made(2)
        self.assert_request_made(
            RequestMethod.GET,
            f"datasources/imodels/{IMODEL_ID}/mappings?%24top=2&%24continuationToken=abc",
        )

    async def test_copy_mapping(self) -> None:
        self.transport.request.return_value = MockResponse.from_json(201, load_test_data("mapping.json"))

        await self.client.copy_mapping(
            ACCESS_TOKEN, IMODEL_ID, "mapping-1", MappingCopy(target_imodel_id="imodel-2", mapping_name="Copy")
        )

        self.assert_request_made(
            RequestMethod.POST,
            f"datasources/imodels/{IMODEL_ID}/mappings/mapping-1/copy",
            headers={"Content-Type": "application/json"},
            body={"targetiModelId": "imodel-2", "mappingName": "Copy"},
        )

    async def test_copy_mapping_requires_target(self) -> None:
        with self.assertRaises(RequiredError) as ctx:
            await self.client.copy_mapping(ACCESS_TOKEN, IMODEL_ID, "mapping-1", MappingCopy(mapping_name="Copy"))
        self.assertEqual("target_imodel_id", ctx.exception.field)
        self.transport.assert_no_requests()

    @parameterized.expand(
        [
            ("missing name", GroupCreate(query="SELECT 1"), "group_name"),
            ("invalid name", GroupCreate(group_name="Not valid", query="SELECT 1"), "group_name"),
            ("missing query", GroupCreate(group_name="Walls"), "query"),
            ("blank query", GroupCreate(group_name="Walls", query="  "), "query"),
        ]
    )
    async def test_create_group_validation(self, _: str, group: GroupCreate, field: str) -> None:
        with self.assertRaises(RequiredError) as ctx:
            await self.client.create_group(ACCESS_TOKEN, IMODEL_ID, "mapping-1", group)
        self.assertEqual(field, ctx.exception.field)
        self.transport.assert_no_requests()

    @parameterized.expand(
        [
            ("no fields", GroupUpdate(), "group"),
            ("empty query", GroupUpdate(query=""), "query"),
        ]
    )
    async def test_update_group_validation(self, _: str, group: GroupUpdate, field: str) -> None:
        with self.assertRaises(RequiredError) as ctx:
            await self.client.update_group(ACCESS_TOKEN, IMODEL_ID, "mapping-1", "group-1", group)
        self.assertEqual(field, ctx.exception.field)
        self.transport.assert_no_requests()

    async def test_create_group_property(self) -> None:
        self.transport.request.return_value = MockResponse.from_json(201, load_test_data("group_property.json"))
        prop = GroupPropertyCreate(
            property_name="Volume",
            data_type=DataType.NUMBER,
            quantity_type=QuantityType.VOLUME,
            ec_properties=[
                ECProperty(
                    ec_schema_name="BisCore",
                    ec_class_name="PhysicalElement",
                    ec_property_name="Volume",
                    ec_property_type=DataType.NUMBER,
                )
            ],
        )

        created = await self.client.create_group_property(ACCESS_TOKEN, IMODEL_ID, "mapping-1", "group-1", prop)

        self.assertEqual("property-1", created.id)
        self.assertEqual(DataType.NUMBER, created.ec_properties[0].ec_property_type)
        self.assert_request_made(
            RequestMethod.POST,
            f"{self.group_path}/properties",
            headers={"Content-Type": "application/json"},
            body={
                "propertyName": "Volume",
                "dataType": "Number",
                "quantityType": "Volume",
                "ecProperties": [
                    {
                        "ecSchemaName": "BisCore",
                        "ecClassName": "PhysicalElement",
                        "ecPropertyName": "Volume",
                        "ecPropertyType": "Number",
                    }
                ],
            },
        )

    @parameterized.expand(
        [
            ("undefined data type", {"data_type": DataType.UNDEFINED}, "data_type"),
            ("missing data type", {"data_type": None}, "data_type"),
            ("no ec properties", {"ec_properties": []}, "ec_properties"),
            (
                "ec property without class",
                {
                    "ec_properties": [
                        ECProperty(ec_schema_name="S", ec_property_name="P", ec_property_type=DataType.STRING)
                    ]
                },
                "ec_properties",
            ),
            (
                "ec property with undefined type",
                {
                    "ec_properties": [
                        ECProperty(
                            ec_schema_name="S",
                            ec_class_name="C",
                            ec_property_name="P",
                            ec_property_type=DataType.UNDEFINED,
                        )
                    ]
                },
                "ec_properties",
            ),
            ("invalid name", {"property_name": "1st"}, "property_name"),
        ]
    )
    async def test_group_property_validation(self, _: str, overrides: dict, field: str) -> None:
        values = {
            "property_name": "Volume",
            "data_type": DataType.NUMBER,
            "ec_properties": [
                ECProperty(
                    ec_schema_name="S", ec_class_name="C", ec_property_name="P", ec_property_type=DataType.NUMBER
                )
            ],
        }
        values.update(overrides)
        with self.assertRaises(RequiredError) as ctx:
            await self.client.create_group_property(
                ACCESS_TOKEN, IMODEL_ID, "mapping-1", "group-1", GroupPropertyCreate(**values)
            )
        self.assertEqual(field, ctx.exception.field)
        self.transport.assert_no_requests()

    async def test_create_calculated_property(self) -> None:
        self.transport.request.return_value = MockResponse.from_json(
            201,
            {"property": {"id": "calc-1", "propertyName": "Length", "type": "Length", "_links": {}}},
        )

        created = await self.client.create_calculated_property(
            ACCESS_TOKEN,
            IMODEL_ID,
            "mapping-1",
            "group-1",
            CalculatedPropertyCreate(property_name="Length", type=CalculatedPropertyType.LENGTH),
        )

        self.assertEqual(CalculatedPropertyType.LENGTH, created.type)
        self.assert_request_made(
            RequestMethod.POST,
            f"{self.group_path}/calculatedProperties",
            headers={"Content-Type": "application/json"},
            body={"propertyName": "Length", "type": "Length"},
        )

    @parameterized.expand(
        [
            ("missing type", CalculatedPropertyCreate(property_name="Length"), "type"),
            (
                "undefined type",
                CalculatedPropertyCreate(property_name="Length", type=CalculatedPropertyType.UNDEFINED),
                "type",
            ),
            (
                "invalid name",
                CalculatedPropertyCreate(property_name="", type=CalculatedPropertyType.AREA),
                "property_name",
            ),
        ]
    )
    async def test_calculated_property_validation(self, _: str, prop: CalculatedPropertyCreate, field: str) -> None:
        with self.assertRaises(RequiredError) as ctx:
            await self.client.create_calculated_property(ACCESS_TOKEN, IMODEL_ID, "mapping-1", "group-1", prop)
        self.assertEqual(field, ctx.exception.field)
        self.transport.assert_no_requests()

    async def test_custom_calculation_requires_formula(self) -> None:
        with self.assertRaises(RequiredError) as ctx:
            await self.client.create_custom_calculation(
                ACCESS_TOKEN, IMODEL_ID, "mapping-1", "group-1", CustomCalculationCreate(property_name="Total")
            )
        self.assertEqual("formula", ctx.exception.field)
        self.transport.assert_no_requests()

    async def test_get_custom_calculations(self) -> None:
        content = {
            "customCalculations": [
                {"id": "cc-1", "propertyName": "Total", "formula": "Volume * 2", "dataType": "Number", "_links": {}}
            ],
            "_links": {"next": None},
        }
        self.transport.request.return_value = MockResponse(
            status_code=200, content=json.dumps(content), headers={"Content-Type": "application/json"}
        )

        calculations = await self.client.get_custom_calculations(ACCESS_TOKEN, IMODEL_ID, "mapping-1", "group-1")

        self.assertEqual(["Volume * 2"], [calculation.formula for calculation in calculations])
        self.assert_request_made(RequestMethod.GET, f"{self.group_path}/customCalculations")

    async def test_delete_group(self) -> None:
        self.transport.request.return_value = MockResponse(status_code=204)

        response = await self.client.delete_group(ACCESS_TOKEN, IMODEL_ID, "mapping-1", "group-1")

        self.assertEqual(204, response.status)
        self.assert_request_made(RequestMethod.DELETE, self.group_path)
