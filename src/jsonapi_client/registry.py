import typing

from .declarative import describe
from .models import ModelDescriptor


class ModelRegistry:
    """
    An ordered list of the domain classes known to a client.

    Registration order only matters as a tie-break: scans always return the first match.
    Registering a class twice is allowed; the later descriptor never wins over the earlier one.
    """

    _descriptors: typing.List[ModelDescriptor]

    def define(self, class_: type, **overrides: typing.Any) -> ModelDescriptor:
        descr = describe(class_, **overrides)
        self._descriptors.append(descr)
        return descr

    def descriptor_for(self, class_: type) -> typing.Optional[ModelDescriptor]:
        for descr in self._descriptors:
            if descr.class_ is class_:
                return descr
        return None

    def find(
        self, predicate: typing.Callable[[ModelDescriptor], bool]
    ) -> typing.Optional[ModelDescriptor]:
        for descr in self._descriptors:
            if predicate(descr):
                return descr
        return None

    def __contains__(self, class_: object) -> bool:
        return isinstance(class_, type) and self.descriptor_for(class_) is not None

    def __iter__(self) -> typing.Iterator[ModelDescriptor]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __init__(self):
        self._descriptors = []
