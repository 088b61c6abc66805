import copy
import logging
import typing

from .links import LinkCommand, Requester, split_links
from .models import GenericResource, RelationshipType
from .resolver import TypeResolver
from .types import JSONObject
from .utils import is_plain_sequence

logger = logging.getLogger(__name__)


def has_own_field(obj: typing.Any, name: str) -> bool:
    if isinstance(obj, GenericResource):
        return name in obj
    try:
        return name in vars(obj)
    except TypeError:
        return hasattr(obj, name)


class ResourceCollection(list):
    """
    A list of deserialized resources. Pagination links found in the response
    are set on it as :py:class:`LinkCommand` attributes (``first``, ``last``,
    ``prev`` and ``next``); absent links are left unset.
    """


class DocumentDeserializer:
    """
    Turns JSON:API response documents into domain objects.

    :param TypeResolver resolver: resolves wire type names to registered classes.
    :param Requester requester: issues the GET requests of ``refresh`` and pagination commands.
    """

    resolver: TypeResolver
    requester: Requester

    def _new_target(
        self, type_: str
    ) -> typing.Tuple[typing.Any, typing.Mapping[str, RelationshipType]]:
        try:
            descr = self.resolver.resolve_class(type_)
            return descr.new_instance(), descr.relationships
        except Exception as e:
            logger.debug("deserializing %r as an untyped resource: %s", type_, e)
            return GenericResource(type=type_), {}

    def _find_included(
        self, ref: JSONObject, included: typing.Sequence[JSONObject]
    ) -> typing.Optional[JSONObject]:
        for candidate in included:
            if candidate.get("type") == ref.get("type") and str(candidate.get("id")) == str(
                ref.get("id")
            ):
                return candidate
        return None

    def _deserialize_relationship(
        self, ref: typing.Optional[JSONObject], included: typing.Sequence[JSONObject]
    ) -> typing.Any:
        if ref is None:
            return None
        found = self._find_included(ref, included)
        if found is not None:
            ref = dict(ref, attributes=copy.deepcopy(found.get("attributes", {})))
        return self.deserialize({"data": ref})

    def deserialize(
        self,
        document: JSONObject,
        attributes: typing.Optional[typing.Sequence[str]] = None,
    ) -> typing.Any:
        """
        Deserializes a single resource document.

        :param JSONObject document: a document with a single resource under ``data`` and
                                    optionally an ``included`` array.
        :param Optional[Sequence[str]] attributes: wire attribute names to keep.
                                                   Every attribute is kept when omitted.
        :return: an instance of the registered class matching the resource type,
                 or a :py:class:`GenericResource` if none does.
        """
        data = document["data"]
        included = document.get("included") or ()

        obj, declared = self._new_target(data["type"])
        obj.id = data.get("id")

        for key, value in (data.get("attributes") or {}).items():
            if not attributes or key in attributes:
                setattr(obj, self.resolver.native_key(key), value)

        links = data.get("links") or {}
        if links:
            others, _ = split_links(links)
            obj.links = others
            if links.get("self"):
                obj.refresh = LinkCommand(links["self"], self.requester)

        for key, linkage in (data.get("relationships") or {}).items():
            name = self.resolver.native_key(key)
            cardinality = declared.get(name)
            if cardinality is None:
                if not has_own_field(obj, name):
                    continue
                cardinality = (
                    RelationshipType.TO_MANY
                    if is_plain_sequence(getattr(obj, name))
                    else RelationshipType.TO_ONE
                )
            if linkage is not None and "data" not in linkage:
                continue
            ref = linkage.get("data") if linkage is not None else None
            if cardinality is RelationshipType.TO_MANY:
                value: typing.Any = [
                    self._deserialize_relationship(r, included) for r in (ref or ())
                ]
            else:
                value = self._deserialize_relationship(ref, included)
            setattr(obj, name, value)

        return obj

    def deserialize_array(
        self,
        document: JSONObject,
        attributes: typing.Optional[typing.Sequence[str]] = None,
    ) -> typing.Any:
        """
        Deserializes a collection document, or a single resource document.

        :param JSONObject document: a document whose ``data`` is either a list or a single resource.
        :param Optional[Sequence[str]] attributes: wire attribute names to keep.
        :return: a :py:class:`ResourceCollection` for a list, a single object otherwise.
                 Pagination links become :py:class:`LinkCommand` attributes on the result.
        """
        data = document["data"]
        included = document.get("included") or ()

        result: typing.Any
        if is_plain_sequence(data):
            result = ResourceCollection(
                self.deserialize({"data": elem, "included": included}, attributes)
                for elem in data
            )
        else:
            result = self.deserialize({"data": data, "included": included}, attributes)

        _, pagination = split_links(document.get("links") or {})
        for key, url in pagination.items():
            if url:
                setattr(result, key, LinkCommand(url, self.requester))
        return result

    def __init__(self, resolver: TypeResolver, requester: Requester):
        self.resolver = resolver
        self.requester = requester
