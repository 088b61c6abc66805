import abc
import typing


class JSONAPIClientException(Exception, metaclass=abc.ABCMeta):
    @property
    @abc.abstractmethod
    def message(self) -> str:
        ...  # pragma: nocover

    def __str__(self):
        return self.message


class InvalidDeclarationError(JSONAPIClientException):
    """
    Raised when a model's ``Meta`` declaration cannot be understood.
    """

    _message: str

    @property
    def message(self) -> str:
        return self._message

    def __init__(self, message: str):
        super().__init__(message)
        self._message = message


class UnknownResourceTypeError(JSONAPIClientException):
    """
    Raised when no registered model corresponds to a wire type name.

    The deserializer treats this as a resolution miss and falls back
    to an untyped resource.
    """

    name: str
    candidate: typing.Optional[str]

    @property
    def message(self) -> str:
        if self.candidate is not None:
            return f'no resource known as "{self.name}" (looked for class {self.candidate})'
        return f'no resource known as "{self.name}"'

    def __init__(self, name: str, candidate: typing.Optional[str] = None):
        super().__init__(name)
        self.name = name
        self.candidate = candidate
