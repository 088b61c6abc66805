from .client import Client  # noqa: F401
from .declarative import describe  # noqa: F401
from .deserializer import DocumentDeserializer, ResourceCollection  # noqa: F401
from .exceptions import (  # noqa: F401
    InvalidDeclarationError,
    JSONAPIClientException,
    UnknownResourceTypeError,
)
from .links import LinkCommand, Links  # noqa: F401
from .models import (  # noqa: F401
    GenericResource,
    ModelDescriptor,
    Orientation,
    RelationshipType,
    Request,
    Sort,
)
from .registry import ModelRegistry  # noqa: F401
from .resolver import TypeResolver  # noqa: F401
from .serializer import DocumentSerializer  # noqa: F401
from .transport import HttpxTransport, Transport  # noqa: F401
from .urls import UrlBuilder  # noqa: F401
