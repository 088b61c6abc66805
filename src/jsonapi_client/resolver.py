import logging
import typing

import inflection

from .declarative import describe
from .exceptions import UnknownResourceTypeError
from .models import GenericResource, ModelDescriptor
from .registry import ModelRegistry

logger = logging.getLogger(__name__)

TypeOverride = typing.Union[str, type, None]


class TypeResolver:
    """
    Maps domain classes to wire type names and request paths, and wire type names back
    to registered classes.

    :param ModelRegistry registry: the models known to the client.
    :param bool use_plural: pluralize class names when inferring wire type names.
    :param bool use_snake_case: snake-case inferred type names and attribute keys;
                                inferred type names are merely lower-cased otherwise.
    """

    registry: ModelRegistry
    use_plural: bool
    use_snake_case: bool

    def descriptor_for(self, class_: type) -> ModelDescriptor:
        """
        Returns the registered descriptor for ``class_``, or one built from its ``Meta``
        if the class was never registered.
        """
        descr = self.registry.descriptor_for(class_)
        if descr is None:
            descr = describe(class_)
        return descr

    def infer_type_name(self, resource: typing.Any, type_override: TypeOverride = None) -> str:
        if isinstance(type_override, str):
            return type_override
        if isinstance(resource, GenericResource):
            return resource.get("type", "")

        class_: typing.Optional[type]
        if resource is not None:
            class_ = type(resource)
        elif isinstance(type_override, type):
            class_ = type_override
        else:
            class_ = None

        if class_ is None:
            name = ""
        else:
            descr = self.descriptor_for(class_)
            if descr.type_name is not None:
                return descr.type_name
            name = class_.__name__

        if self.use_plural:
            name = inflection.pluralize(name)
        return inflection.underscore(name) if self.use_snake_case else name.lower()

    def resolve_class(self, wire_type_name: str) -> ModelDescriptor:
        """
        Finds the registered model for a wire type name.

        The type name is singularized and turned into a class name (``dog_owners`` becomes
        ``DogOwner``); the first descriptor whose class bears that name or that declares
        the wire type name verbatim wins.

        :param str wire_type_name: the ``type`` of an incoming resource.
        :return: the matching descriptor.
        :raises UnknownResourceTypeError: if no registered model matches.
        """
        candidate = inflection.camelize(
            inflection.singularize(inflection.underscore(wire_type_name))
        )
        descr = self.registry.find(lambda d: d.matches(candidate, wire_type_name))
        if descr is None:
            raise UnknownResourceTypeError(wire_type_name, candidate)
        return descr

    def resolve_path(
        self,
        resource: typing.Any = None,
        type_override: TypeOverride = None,
        extra: typing.Optional[typing.Mapping[str, typing.Any]] = None,
    ) -> str:
        """
        Builds the path segment of a request URL.

        :param Any resource: a domain object whose class may declare a custom path builder.
        :param Union[str, type, None] type_override: a string taken as the path itself, or
                                                     a class that may declare a path builder.
        :param Optional[Mapping[str, Any]] extra: keyword arguments for the path builder.
        :return: the path, without leading or trailing slashes. May be empty.
        """
        extra = extra or {}
        if isinstance(type_override, str):
            return type_override
        if resource is not None:
            descr = self.descriptor_for(type(resource))
            if descr.path is not None:
                return descr.path(**extra)
        if type_override is None:
            return self.infer_type_name(resource)
        if isinstance(type_override, type):
            descr = self.descriptor_for(type_override)
            if descr.path is not None:
                return descr.path(**extra)
            if type_override in self.registry:
                return self.infer_type_name(descr.new_instance())
        logger.debug("no path could be derived for type %r", type_override)
        return ""

    def wire_key(self, name: str) -> str:
        return inflection.underscore(name) if self.use_snake_case else name

    def native_key(self, key: str) -> str:
        return inflection.underscore(key)

    def __init__(
        self, registry: ModelRegistry, use_plural: bool = True, use_snake_case: bool = True
    ):
        self.registry = registry
        self.use_plural = use_plural
        self.use_snake_case = use_snake_case
