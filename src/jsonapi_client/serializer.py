"""
:py:mod:`jsonapi_client.serializer` turns domain objects into JSON:API request documents.

Synopsis
--------

.. code-block:: python

   registry = ModelRegistry()
   registry.define(Dog)
   registry.define(Cat)

   serializer = DocumentSerializer(TypeResolver(registry))
   serializer.serialize(resource=Cat(id=1, age=2, friend=Dog(id=1, age=2)))
   # {
   #     "data": {
   #         "type": "cats",
   #         "id": "1",
   #         "attributes": {"age": 2},
   #         "relationships": {
   #             "friend": {
   #                 "data": {"type": "dogs", "id": "1", "attributes": {"age": 2}},
   #             },
   #         },
   #     },
   # }

"""

import collections.abc
import dataclasses
import typing

from .links import LinkCommand, Links
from .models import GenericResource, ModelDescriptor, RelationshipType
from .resolver import TypeOverride, TypeResolver
from .types import Document, MutableJSONObject
from .utils import is_plain_sequence


def get_field(resource: typing.Any, name: str, default: typing.Any = None) -> typing.Any:
    if isinstance(resource, collections.abc.Mapping):
        return resource.get(name, default)
    return getattr(resource, name, default)


class DocumentSerializer:
    resolver: TypeResolver

    def _fields(
        self, resource: typing.Any, descr: ModelDescriptor
    ) -> typing.Iterable[typing.Tuple[str, typing.Any]]:
        if isinstance(resource, collections.abc.Mapping):
            items: typing.Iterable[typing.Tuple[str, typing.Any]] = resource.items()
        elif descr.attributes is not None:
            names = list(descr.attributes)
            names.extend(n for n in descr.relationships if n not in names)
            items = ((n, getattr(resource, n, None)) for n in names)
        elif dataclasses.is_dataclass(resource):
            fields = {f.name: getattr(resource, f.name) for f in dataclasses.fields(resource)}
            # attributes set beyond the declared fields, e.g. by the deserializer
            for name, value in getattr(resource, "__dict__", {}).items():
                fields.setdefault(name, value)
            items = fields.items()
        else:
            items = vars(resource).items()

        for name, value in items:
            if name == "id" or name.startswith("_"):
                continue
            if name == "type" and isinstance(resource, GenericResource):
                continue
            if isinstance(value, (Links, LinkCommand)):
                continue
            yield name, value

    def _is_model_instance(self, value: typing.Any) -> bool:
        return value is not None and type(value) in self.resolver.registry

    def serialize(
        self,
        resource: typing.Any = None,
        type_override: TypeOverride = None,
        attributes: typing.Optional[typing.Sequence[str]] = None,
    ) -> Document:
        """
        Serializes a domain object into a JSON:API document.

        :param Any resource: the domain object. When omitted, the document only carries
                             the resource type.
        :param Union[str, type, None] type_override: the wire type name, or a class to infer
                                                     it from.
        :param Optional[Sequence[str]] attributes: native field names to serialize.
                                                   Every field is serialized when empty.
        :return: the document.
        """
        data: MutableJSONObject = {"type": self.resolver.infer_type_name(resource, type_override)}
        document: Document = {"data": data}
        if resource is None:
            return document

        id_ = get_field(resource, "id")
        if id_:
            data["id"] = str(id_)

        descr = self.resolver.descriptor_for(type(resource))
        attrs: MutableJSONObject = {}
        relationships: MutableJSONObject = {}

        for name, value in self._fields(resource, descr):
            if attributes and name not in attributes:
                continue
            key = self.resolver.wire_key(name)
            cardinality = descr.relationships.get(name)
            if self._is_model_instance(value):
                relationships[key] = self.serialize(resource=value)
            elif cardinality is RelationshipType.TO_MANY and is_plain_sequence(value):
                relationships[key] = {"data": [self.serialize(resource=v)["data"] for v in value]}
            elif cardinality is not None and value is None:
                relationships[key] = {"data": None}
            else:
                attrs[key] = value

        data["attributes"] = attrs
        if relationships:
            data["relationships"] = relationships
        return document

    def serialize_many(
        self, resources: typing.Iterable[typing.Any], type_override: TypeOverride = None
    ) -> typing.List[Document]:
        return [self.serialize(resource=r, type_override=type_override) for r in resources]

    def __init__(self, resolver: TypeResolver):
        self.resolver = resolver
