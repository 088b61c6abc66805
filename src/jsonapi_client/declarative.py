"""
Domain classes may carry an inner ``Meta`` class declaring how they map onto JSON:API:

.. code-block:: python

   class Owner:
       class Meta:
           type = "people"
           path = staticmethod(lambda dog_id, **_: f"dogs/{dog_id}/owner")
           relationships = {"pets": RelationshipType.TO_MANY}

       def __init__(self, id=None, name=None, pets=None):
           self.id = id
           self.name = name
           self.pets = pets or []

Every member is optional. Classes without ``Meta`` are described by convention.
"""

import collections.abc
import dataclasses
import typing

from .exceptions import InvalidDeclarationError
from .models import ModelDescriptor, RelationshipType
from .types import PathBuilder
from .utils import english_enumerate


@dataclasses.dataclass
class Meta:
    type: typing.Optional[str] = None
    path: typing.Optional[PathBuilder] = None
    attributes: typing.Optional[typing.Sequence[str]] = None
    relationships: typing.Mapping[str, RelationshipType] = dataclasses.field(
        default_factory=dict
    )
    factory: typing.Optional[typing.Callable[[], typing.Any]] = None


KNOWN_MEMBERS = frozenset(f.name for f in dataclasses.fields(Meta))


def _coerce_relationships(
    class_name: str, relationships: typing.Any
) -> typing.Mapping[str, RelationshipType]:
    if isinstance(relationships, collections.abc.Mapping):
        retval: typing.Dict[str, RelationshipType] = {}
        for name, type_ in relationships.items():
            try:
                retval[name] = RelationshipType(type_)
            except ValueError:
                raise InvalidDeclarationError(
                    f"{class_name}: relationship {name} has an invalid cardinality {type_!r}"
                )
        return retval
    elif isinstance(relationships, collections.abc.Iterable) and not isinstance(
        relationships, str
    ):
        return {name: RelationshipType.TO_ONE for name in relationships}
    raise InvalidDeclarationError(
        f"{class_name}: relationships must be a mapping or a sequence of names"
    )


def handle_meta(class_name: str, meta: typing.Type) -> Meta:
    attrs = {k: v for k, v in vars(meta).items() if not k.startswith("__")}
    unknown = set(attrs) - KNOWN_MEMBERS
    if unknown:
        raise InvalidDeclarationError(
            f"{class_name}: unknown Meta members {english_enumerate(sorted(unknown))}"
        )

    path = attrs.get("path")
    if isinstance(path, (staticmethod, classmethod)):
        path = getattr(meta, "path")
    if path is not None and not callable(path):
        raise InvalidDeclarationError(f"{class_name}: Meta.path must be callable")

    attributes = attrs.get("attributes")
    if attributes is not None:
        if isinstance(attributes, str) or not isinstance(attributes, collections.abc.Iterable):
            raise InvalidDeclarationError(
                f"{class_name}: Meta.attributes must be a sequence of names"
            )
        attributes = tuple(attributes)

    factory = attrs.get("factory")
    if isinstance(factory, (staticmethod, classmethod)):
        factory = getattr(meta, "factory")

    return Meta(
        type=attrs.get("type"),
        path=path,
        attributes=attributes,
        relationships=_coerce_relationships(class_name, attrs.get("relationships", {})),
        factory=factory,
    )


def describe(class_: type, **overrides: typing.Any) -> ModelDescriptor:
    """
    Builds a :py:class:`ModelDescriptor` for ``class_`` from its ``Meta`` declaration,
    if any, with keyword ``overrides`` taking precedence.

    :param type class_: the domain class.
    :param overrides: any of ``type_name``, ``path``, ``attributes``, ``relationships``
                      and ``factory``.
    :return: the descriptor.
    """
    meta_class = getattr(class_, "Meta", None)
    meta = handle_meta(class_.__name__, meta_class) if meta_class is not None else Meta()

    unknown = set(overrides) - {"type_name", "path", "attributes", "relationships", "factory"}
    if unknown:
        raise TypeError(f"unexpected keyword arguments {english_enumerate(sorted(unknown))}")

    relationships = overrides.get("relationships")
    return ModelDescriptor(
        class_=class_,
        type_name=overrides.get("type_name", meta.type),
        path=overrides.get("path", meta.path),
        attributes=overrides.get("attributes", meta.attributes),
        relationships=(
            _coerce_relationships(class_.__name__, relationships)
            if relationships is not None
            else meta.relationships
        ),
        factory=overrides.get("factory", meta.factory),
    )
