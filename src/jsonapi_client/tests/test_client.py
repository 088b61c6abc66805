import httpx
import pytest

from ..deserializer import ResourceCollection
from ..models import GenericResource, Request
from .testing import Cat, Dog, Owner, Person, RecordingTransport


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def target(transport):
    from ..client import Client

    client = Client("http://anyapi.com", transport=transport)
    client.define(Dog)
    client.define(Cat)
    return client


@pytest.fixture
def puppy():
    return Dog(1, 2)


@pytest.fixture
def kitten(puppy):
    return Cat(1, 2, puppy)


class TestBuildRequest:
    def test_content_type(self, target):
        request = target.build_request()
        assert request.headers["Content-Type"] == "application/vnd.api+json"

    def test_base_url(self, target):
        assert target.build_request().url == "http://anyapi.com/"

    def test_always_sends_data(self, target):
        assert "data" in target.build_request().data

    def test_custom_header(self, target):
        target.set_header("Authorization", "mytoken")
        assert target.build_request().headers["Authorization"] == "mytoken"

    def test_headers_are_copied(self, target):
        request = target.build_request()
        request.headers["X-Debug"] = "1"
        assert "X-Debug" not in target.headers

    def test_constructor_headers(self, transport):
        from ..client import Client

        client = Client("http://anyapi.com", transport=transport, headers={"Accept": "*/*"})
        assert client.headers == {
            "Content-Type": "application/vnd.api+json",
            "Accept": "*/*",
        }


class TestMethods:
    def test_find(self, target):
        assert target.build_request_find().method == "GET"

    def test_find_all(self, target):
        assert target.build_request_find_all(type="dog").method == "GET"

    def test_update(self, target):
        assert target.build_request_update(type="whatever").method == "PATCH"

    def test_create(self, target, puppy):
        assert target.build_request_create(resource=puppy).method == "POST"

    def test_delete(self, target):
        assert target.build_request_delete(type="whatever").method == "DELETE"

    def test_get_has_no_body(self, target):
        assert target.build_request_find(type="dog", id=1).data is None
        assert target.build_request_find_all(type="dog").data is None


class TestDocuments:
    def test_resource_as_data(self, target, puppy):
        request = target.build_request_update(resource=puppy, type="dogs")
        assert request.data["data"] == {"type": "dogs", "id": "1", "attributes": {"age": 2}}

    def test_inferred_type(self, target, puppy):
        request = target.build_request_update(resource=puppy)
        assert request.data["data"] == {"type": "dogs", "id": "1", "attributes": {"age": 2}}

    def test_meta(self, target):
        request = target.build_request_find(type="dog", id=1, meta={"metaField": "metaValue"})
        assert request.meta == {"metaField": "metaValue"}

    def test_serialize_whitelist(self, target, kitten):
        request = target.build_request_update(resource=kitten, attributes=["age"])
        assert request.data["data"] == {"type": "cats", "id": "1", "attributes": {"age": 2}}

    @pytest.mark.parametrize("method", ["build_request_update", "build_request_create"])
    def test_relationships(self, target, kitten, method):
        request = getattr(target, method)(resource=kitten)
        assert request.data["data"]["relationships"] == {
            "friend": {"data": {"type": "dogs", "id": "1", "attributes": {"age": 2}}},
        }


class TestUrls:
    def test_fields_on_find(self, target):
        request = target.build_request_find(type="cat", id=1, attributes=["age", "color"])
        assert "fields[cat]=age,color" in request.url

    def test_fields_on_find_all(self, target):
        request = target.build_request_find_all(type="cat", attributes=["age", "color"])
        assert "fields[cat]=age,color" in request.url

    def test_type(self, target):
        assert target.build_request_find_all(type="dog").url == "http://anyapi.com/dog/"

    def test_id(self, target):
        assert target.build_request_find(type="dog", id=1).url == "http://anyapi.com/dog/1/"

    def test_id_on_update(self, target, puppy):
        assert target.build_request_update(resource=puppy).url == "http://anyapi.com/dogs/1/"

    def test_id_on_delete(self, target, puppy):
        assert target.build_request_delete(resource=puppy).url == "http://anyapi.com/dogs/1/"

    def test_no_plural(self, target, puppy):
        target.use_plural = False
        assert target.build_request_delete(resource=puppy).url == "http://anyapi.com/dog/1/"

    def test_sort(self, target):
        sort = [{"attribute": "age", "orientation": "desc"}, {"attribute": "color"}]
        assert "sort=-age,color" in target.build_request_find_all(type="cat", sort=sort).url

    def test_raw_filter(self, target):
        assert "filter=age>2" in target.build_request_find_all(type="cat", filter="age>2").url

    def test_mapping_filter(self, target):
        request = target.build_request_find_all(type="cat", filter={"age": 2})
        assert request.url == "http://anyapi.com/cat/?filter[age]=2"

    def test_custom_params(self, target):
        request = target.build_request_find(type="cat", custom_params={"scope": "this_scope"})
        assert "scope=this_scope" in request.url

    def test_custom_path(self, target):
        request = target.build_request_find(type=Owner, id="1", dog_id="2")
        assert request.url == "http://anyapi.com/dogs/2/owner/1/"

    def test_registered_class_as_type(self, target):
        assert target.build_request_find_all(type=Cat).url == "http://anyapi.com/cats/"

    def test_declared_type_name(self, target):
        target.define(Person)
        request = target.build_request_create(resource=Person(first_name="Ann"))
        assert request.url == "http://anyapi.com/people/"
        assert request.data["data"]["type"] == "people"


class TestCustomAction:
    def test_collection(self, target, puppy):
        request = target.build_request_custom_action(
            type="dogs", action="walk", resource=[puppy, Dog(2, 3)]
        )
        assert request.url == "http://anyapi.com/dogs/walk/"
        assert request.method == "POST"
        assert request.data == [
            {"data": {"type": "dogs", "id": "1", "attributes": {"age": 2}}},
            {"data": {"type": "dogs", "id": "2", "attributes": {"age": 3}}},
        ]

    def test_collection_path_from_first_element(self, target, puppy):
        request = target.build_request_custom_action(action="walk", resource=[puppy])
        assert request.url == "http://anyapi.com/dogs/walk/"

    def test_individual(self, target, puppy):
        request = target.build_request_custom_action(resource=puppy, action="eat", method="PATCH")
        assert request.url == "http://anyapi.com/dogs/1/eat/"
        assert request.method == "PATCH"
        assert request.data["data"] == {"type": "dogs", "id": "1", "attributes": {"age": 2}}

    def test_filter_and_params(self, target):
        request = target.build_request_custom_action(
            type="dogs", action="feed", filter={"hungry": "true"}, custom_params={"dry_run": 1}
        )
        assert request.url == "http://anyapi.com/dogs/feed/?filter[hungry]=true&dry_run=1"


class TestDefine:
    def test_decorator(self, target):
        @target.define
        class Parrot:
            pass

        assert Parrot in target.registry

    def test_decorator_with_overrides(self, target):
        @target.define(type_name="birds")
        class Parrot:
            pass

        assert target.describe(Parrot).type_name == "birds"
        assert target.resolver.resolve_class("birds").class_ is Parrot

    def test_clients_do_not_share_registries(self, target):
        from ..client import Client

        other = Client("http://otherapi.com", transport=RecordingTransport())
        assert Dog in target.registry
        assert Dog not in other.registry


class TestOperations:
    @pytest.mark.asyncio
    async def test_find(self, target, transport):
        transport.responses.append({"data": {"type": "dogs", "id": 1, "attributes": {"age": 2}}})
        result = await target.find(type="dogs", id=1)
        assert result == Dog(1, 2)
        assert transport.requests == [
            Request(
                url="http://anyapi.com/dogs/1/",
                method="GET",
                headers={"Content-Type": "application/vnd.api+json"},
                data=None,
                meta={},
            )
        ]

    @pytest.mark.asyncio
    async def test_find_whitelist(self, target, transport):
        transport.responses.append(
            {"data": {"type": "cats", "id": 1, "attributes": {"age": 2, "color": "white"}}}
        )
        result = await target.find(type="cats", id=1, attributes=["age"])
        assert result == Cat(1, 2)
        assert not hasattr(result, "color")

    @pytest.mark.asyncio
    async def test_find_all_and_paginate(self, target, transport):
        transport.responses.append(
            {
                "links": {"next": "http://anyapi.com/cats/?page=2"},
                "data": [{"type": "cats", "id": 2, "attributes": {"age": 2}}],
            }
        )
        transport.responses.append({"data": []})
        target.set_header("Authorization", "mytoken")

        result = await target.find_all(type="cats")
        assert isinstance(result, ResourceCollection)
        assert result == [Cat(2, 2)]

        assert await result.next() == {"data": []}
        assert transport.requests[1].url == "http://anyapi.com/cats/?page=2"
        assert transport.requests[1].method == "GET"
        assert transport.requests[1].headers["Authorization"] == "mytoken"

    @pytest.mark.asyncio
    async def test_update(self, target, transport, puppy):
        transport.responses.append({"data": {"type": "dogs", "id": "1", "attributes": {"age": 3}}})
        result = await target.update(resource=puppy)
        assert result == Dog("1", 3)
        assert transport.requests[0].method == "PATCH"
        assert transport.requests[0].data == {
            "data": {"type": "dogs", "id": "1", "attributes": {"age": 2}},
        }

    @pytest.mark.asyncio
    async def test_update_keeps_fetched_attributes(self, target, transport):
        transport.responses.append(
            {"data": {"type": "cats", "id": "1", "attributes": {"age": 2, "color": "white"}}}
        )
        cat = await target.find(type="cats", id=1)
        cat.age = 3
        request = target.build_request_update(resource=cat)
        assert request.data["data"]["attributes"] == {"age": 3, "friend": None, "color": "white"}

    @pytest.mark.asyncio
    async def test_create_unknown_type(self, target, transport):
        transport.responses.append({"data": {"type": "horse", "id": 1, "attributes": {"age": 2}}})
        result = await target.create(type="horses", resource=GenericResource(type="horse", age=2))
        assert result == {"type": "horse", "id": 1, "age": 2}
        assert transport.requests[0].url == "http://anyapi.com/horses/"

    @pytest.mark.asyncio
    async def test_delete_returns_body(self, target, transport, puppy):
        transport.responses.append(None)
        assert await target.delete(resource=puppy) is None
        assert transport.requests[0].method == "DELETE"

    @pytest.mark.asyncio
    async def test_custom_action_returns_body(self, target, transport, puppy):
        transport.responses.append({"meta": {"walked": True}})
        assert await target.custom_action(resource=puppy, action="walk") == {
            "meta": {"walked": True}
        }

    @pytest.mark.asyncio
    async def test_custom_request_mapping(self, target, transport):
        transport.responses.append("pong")
        assert await target.custom_request({"url": "http://anyapi.com/ping"}) == "pong"
        assert transport.requests == [Request(url="http://anyapi.com/ping")]

    @pytest.mark.asyncio
    async def test_transport_errors_propagate(self, target, transport):
        error = httpx.ConnectError("boom")
        transport.responses.append(error)
        with pytest.raises(httpx.ConnectError) as e:
            await target.find(type="dogs", id=1)
        assert e.value is error


@pytest.mark.asyncio
async def test_default_transport():
    from ..client import Client
    from ..transport import HttpxTransport

    async def handler(request):
        assert request.url == "http://anyapi.com/dogs/1/"
        assert request.headers["Content-Type"] == "application/vnd.api+json"
        return httpx.Response(200, json={"data": {"type": "dogs", "id": "1"}})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        client = Client("http://anyapi.com", transport=HttpxTransport(http))
        client.define(Dog)
        assert await client.find(type="dogs", id=1) == Dog("1")

    assert isinstance(Client("http://anyapi.com").transport, HttpxTransport)
