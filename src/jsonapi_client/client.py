"""
:py:mod:`jsonapi_client.client` assembles JSON:API requests and runs them through a transport.

Synopsis
--------

.. code-block:: python

   client = Client("https://api.example.com")

   @client.define
   class Dog:
       def __init__(self, id=None, age=None):
           self.id = id
           self.age = age

   client.set_header("Authorization", "Bearer ...")

   dog = await client.find(type="dogs", id=1)
   dogs = await client.find_all(type="dogs", sort=[{"attribute": "age", "orientation": "desc"}])
   more_dogs = await dogs.next()

Every operation has a synchronous ``build_request_*`` counterpart that returns the
:py:class:`Request` it would send, without touching the network.
"""

import collections.abc
import dataclasses
import logging
import typing

from .deserializer import DocumentDeserializer
from .models import ModelDescriptor, Request
from .registry import ModelRegistry
from .resolver import TypeOverride, TypeResolver
from .serializer import DocumentSerializer, get_field
from .transport import HttpxTransport, Transport
from .types import JSONValue
from .urls import FilterSpec, SortSpec, UrlBuilder
from .utils import is_plain_sequence

logger = logging.getLogger(__name__)

JSONAPI_MEDIA_TYPE = "application/vnd.api+json"


class Client:
    """
    A JSON:API client.

    :param str base_url: the URL every request path is appended to.
    :param bool use_plural: pluralize class names when inferring wire type names.
    :param bool use_snake_case: snake-case inferred type names and attribute keys.
    :param Optional[Transport] transport: sends requests; an :py:class:`HttpxTransport`
                                          is used when omitted.
    :param Optional[Mapping[str, str]] headers: headers sent along with every request,
                                                on top of the JSON:API ``Content-Type``.
    """

    registry: ModelRegistry
    resolver: TypeResolver
    serializer: DocumentSerializer
    deserializer: DocumentDeserializer
    transport: Transport
    headers: typing.Dict[str, str]
    _urls: UrlBuilder

    @property
    def base_url(self) -> str:
        return self._urls.base_url

    @property
    def use_plural(self) -> bool:
        return self.resolver.use_plural

    @use_plural.setter
    def use_plural(self, value: bool) -> None:
        self.resolver.use_plural = value

    @property
    def use_snake_case(self) -> bool:
        return self.resolver.use_snake_case

    @use_snake_case.setter
    def use_snake_case(self, value: bool) -> None:
        self.resolver.use_snake_case = value

    def define(self, class_: typing.Optional[type] = None, **overrides: typing.Any):
        """
        Registers a domain class. Usable as a plain call, as a class decorator, or as a
        decorator factory taking the same keyword overrides as :py:func:`describe`:

        .. code-block:: python

           client.define(Dog)

           @client.define(type_name="people")
           class Person:
               ...

        :return: the class itself, or a decorator when ``class_`` is omitted.
        """
        if class_ is None:

            def decorator(class_: type) -> type:
                self.registry.define(class_, **overrides)
                return class_

            return decorator

        self.registry.define(class_, **overrides)
        return class_

    def describe(self, class_: type) -> ModelDescriptor:
        return self.resolver.descriptor_for(class_)

    def set_header(self, key: str, value: str) -> None:
        self.headers[key] = value

    def build_request(
        self,
        method: str = "",
        document: JSONValue = None,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
        url_params: typing.Optional[typing.Mapping[str, typing.Any]] = None,
    ) -> Request:
        """
        Builds a request descriptor.

        :param str method: the HTTP method.
        :param JSONValue document: the request document; it drives the URL, and is dropped
                                   from the request body for ``GET``. Defaults to ``{"data": {}}``.
        :param Optional[Dict[str, Any]] meta: opaque data handed over to the transport.
        :param Optional[Mapping[str, Any]] url_params: keyword arguments for
                                                       :py:meth:`UrlBuilder.build`.
        :return: the request descriptor.
        """
        if document is None:
            document = {"data": {}}
        url = self._urls.build(document, **(url_params or {}))
        if method == "GET":
            document = None
        logger.debug("built request %s %s", method, url)
        return Request(
            url=url,
            method=method,
            headers=dict(self.headers),
            data=document,
            meta=meta if meta is not None else {},
        )

    def build_request_find(
        self,
        type: TypeOverride = None,
        id: typing.Any = 0,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
        attributes: typing.Optional[typing.Sequence[str]] = None,
        custom_params: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        **extra: typing.Any,
    ) -> Request:
        document = self.serializer.serialize(type_override=type)
        if id:
            document["data"]["id"] = str(id)
        path = self.resolver.resolve_path(type_override=type, extra=extra)
        url_params = {"attributes": attributes, "custom_params": custom_params, "path": path}
        return self.build_request("GET", document, meta, url_params)

    def build_request_find_all(
        self,
        type: TypeOverride = None,
        attributes: typing.Optional[typing.Sequence[str]] = None,
        sort: typing.Optional[SortSpec] = None,
        filter: FilterSpec = None,
        custom_params: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
        **extra: typing.Any,
    ) -> Request:
        document = self.serializer.serialize(type_override=type)
        path = self.resolver.resolve_path(type_override=type, extra=extra)
        url_params = {
            "attributes": attributes,
            "sort": sort,
            "filter": filter,
            "custom_params": custom_params,
            "path": path,
        }
        return self.build_request("GET", document, meta, url_params)

    def _build_request_with_body(
        self,
        method: str,
        resource: typing.Any,
        type: TypeOverride,
        attributes: typing.Optional[typing.Sequence[str]],
        meta: typing.Optional[typing.Dict[str, typing.Any]],
        extra: typing.Mapping[str, typing.Any],
    ) -> Request:
        document = self.serializer.serialize(resource, type, attributes)
        path = self.resolver.resolve_path(resource, type, extra)
        url_params = {"attributes": attributes, "path": path}
        return self.build_request(method, document, meta, url_params)

    def build_request_update(
        self,
        resource: typing.Any = None,
        type: TypeOverride = None,
        attributes: typing.Optional[typing.Sequence[str]] = None,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
        **extra: typing.Any,
    ) -> Request:
        return self._build_request_with_body("PATCH", resource, type, attributes, meta, extra)

    def build_request_create(
        self,
        resource: typing.Any = None,
        type: TypeOverride = None,
        attributes: typing.Optional[typing.Sequence[str]] = None,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
        **extra: typing.Any,
    ) -> Request:
        return self._build_request_with_body("POST", resource, type, attributes, meta, extra)

    def build_request_delete(
        self,
        resource: typing.Any = None,
        type: TypeOverride = None,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
        **extra: typing.Any,
    ) -> Request:
        document = self.serializer.serialize(resource, type)
        path = self.resolver.resolve_path(resource, type, extra)
        return self.build_request("DELETE", document, meta, {"path": path})

    def build_request_custom_action(
        self,
        resource: typing.Any = None,
        type: TypeOverride = None,
        action: typing.Optional[str] = None,
        filter: FilterSpec = None,
        method: str = "POST",
        custom_params: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
        **extra: typing.Any,
    ) -> Request:
        """
        Builds a request for an arbitrary action on a resource or a collection.

        :param Any resource: a domain object, or a list of domain objects serialized
                             one document each. A list contributes no id to the URL.
        :param Union[str, type, None] type: the wire type name (or a class).
        :param Optional[str] action: the trailing path segment naming the action.
        :param FilterSpec filter: an optional filter.
        :param str method: the HTTP method.
        :return: the request descriptor.
        """
        document: JSONValue
        if is_plain_sequence(resource):
            document = self.serializer.serialize_many(resource, type)
            path_resource = resource[0] if resource else None
            resource_id = None
        else:
            document = self.serializer.serialize(resource, type)
            path_resource = resource
            resource_id = get_field(resource, "id") if resource is not None else None
        path = self.resolver.resolve_path(path_resource, type, extra)
        url_params = {
            "path": path,
            "action": action,
            "resource_id": resource_id,
            "filter": filter,
            "custom_params": custom_params,
        }
        return self.build_request(method, document, meta, url_params)

    async def custom_request(
        self, request: typing.Union[Request, typing.Mapping[str, typing.Any]]
    ) -> JSONValue:
        """
        Sends a request through the transport as is, whether or not it speaks JSON:API.

        :param Union[Request, Mapping[str, Any]] request: a request descriptor, or a mapping
                                                          of its fields.
        :return: the raw response body.
        """
        if isinstance(request, collections.abc.Mapping):
            request = Request(**request)
        return await self.transport(request)

    async def _follow_link(self, request: Request) -> JSONValue:
        if not request.headers:
            request = dataclasses.replace(request, headers=dict(self.headers))
        return await self.custom_request(request)

    async def find(self, **params: typing.Any) -> typing.Any:
        """
        Fetches a single resource. Takes the arguments of :py:meth:`build_request_find`.
        """
        body = await self.custom_request(self.build_request_find(**params))
        return self.deserializer.deserialize(body, params.get("attributes"))

    async def find_all(self, **params: typing.Any) -> typing.Any:
        """
        Fetches a collection. Takes the arguments of :py:meth:`build_request_find_all`.

        :return: a :py:class:`ResourceCollection` carrying pagination commands.
        """
        body = await self.custom_request(self.build_request_find_all(**params))
        return self.deserializer.deserialize_array(body, params.get("attributes"))

    async def update(self, **params: typing.Any) -> typing.Any:
        body = await self.custom_request(self.build_request_update(**params))
        return self.deserializer.deserialize(body, params.get("attributes"))

    async def create(self, **params: typing.Any) -> typing.Any:
        body = await self.custom_request(self.build_request_create(**params))
        return self.deserializer.deserialize(body, params.get("attributes"))

    async def delete(self, **params: typing.Any) -> JSONValue:
        return await self.custom_request(self.build_request_delete(**params))

    async def custom_action(self, **params: typing.Any) -> JSONValue:
        return await self.custom_request(self.build_request_custom_action(**params))

    def __init__(
        self,
        base_url: str,
        *,
        use_plural: bool = True,
        use_snake_case: bool = True,
        transport: typing.Optional[Transport] = None,
        headers: typing.Optional[typing.Mapping[str, str]] = None,
    ):
        self._urls = UrlBuilder(base_url)
        self.registry = ModelRegistry()
        self.resolver = TypeResolver(self.registry, use_plural, use_snake_case)
        self.serializer = DocumentSerializer(self.resolver)
        self.deserializer = DocumentDeserializer(self.resolver, self._follow_link)
        self.transport = transport if transport is not None else HttpxTransport()
        self.headers = {"Content-Type": JSONAPI_MEDIA_TYPE}
        if headers:
            self.headers.update(headers)
