"""
Value objects shared by the registry, the resolver, the URL composer and the client.
"""

import dataclasses
import enum
import typing

from .types import JSONValue, PathBuilder


class RelationshipType(enum.Enum):
    TO_ONE = "to_one"
    TO_MANY = "to_many"


class Orientation(enum.Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: typing.Union["Orientation", str, None]) -> "Orientation":
        """
        Interprets a sort orientation. Anything but a case-insensitive ``"desc"``
        is ascending.
        """
        if isinstance(value, Orientation):
            return value
        if isinstance(value, str) and value.lower() == cls.DESC.value:
            return cls.DESC
        return cls.ASC


@dataclasses.dataclass
class Sort:
    """
    A single sort criterion for a collection request.
    """

    attribute: str
    orientation: Orientation = Orientation.ASC

    @property
    def expression(self) -> str:
        """
        Returns the criterion as it appears in the ``sort`` query parameter,
        where a leading ``-`` marks descending order.
        """
        if self.orientation is Orientation.DESC:
            return "-" + self.attribute
        return self.attribute

    @classmethod
    def coerce(cls, value: typing.Union["Sort", typing.Mapping[str, typing.Any]]) -> "Sort":
        if isinstance(value, Sort):
            return value
        return cls(
            attribute=value["attribute"],
            orientation=Orientation.parse(value.get("orientation")),
        )


@dataclasses.dataclass
class ModelDescriptor:
    """
    A :py:class:`ModelDescriptor` describes how a domain class maps onto JSON:API resources.

    :param type class_: the domain class.
    :param Optional[str] type_name: an explicit wire type name. When given, it is used
                                    as the ``type`` of serialized resources and is matched
                                    verbatim when resolving incoming documents.
    :param Optional[PathBuilder] path: a callable building a custom request path from
                                      the extra keyword arguments of an operation.
    :param Optional[Sequence[str]] attributes: the native field names to serialize.
                                               Own public fields are introspected when omitted.
    :param Mapping[str, RelationshipType] relationships: declared relationship fields and
                                                         their cardinality.
    :param Optional[Callable[[], Any]] factory: builds a blank instance; defaults to ``class_``.
    """

    class_: type
    type_name: typing.Optional[str] = None
    path: typing.Optional[PathBuilder] = None
    attributes: typing.Optional[typing.Sequence[str]] = None
    relationships: typing.Mapping[str, RelationshipType] = dataclasses.field(
        default_factory=dict
    )
    factory: typing.Optional[typing.Callable[[], typing.Any]] = None

    @property
    def name(self) -> str:
        return self.class_.__name__

    def new_instance(self) -> typing.Any:
        return (self.factory or self.class_)()

    def matches(self, class_name: str, wire_type_name: str) -> bool:
        return self.name == class_name or self.type_name == wire_type_name


@dataclasses.dataclass
class Request:
    """
    A request descriptor handed over to the transport.
    """

    url: str
    method: str = "GET"
    headers: typing.Dict[str, str] = dataclasses.field(default_factory=dict)
    data: JSONValue = None
    meta: typing.Dict[str, typing.Any] = dataclasses.field(default_factory=dict)


class GenericResource(dict):
    """
    An untyped resource, produced when an incoming wire type matches no registered class.

    It is a plain dictionary keyed by native field names that also allows attribute access,
    so it can be populated exactly like an instance of a registered class.
    """

    def __getattr__(self, name: str) -> typing.Any:
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name)

    def __setattr__(self, name: str, value: typing.Any) -> None:
        self[name] = value

    def __delattr__(self, name: str) -> None:
        try:
            del self[name]
        except KeyError:
            raise AttributeError(name)
