"""Declarative JSON:API v1.1 resource and error serialization."""

from .core.context import BindingContext
from .core.document import DocumentBuilder
from .core.fields import attribute, link, relationship, source, value
from .exceptions import DeclarationError, SerializationError, ShapeError, UnboundNameError
from .serializers.error import Error, ErrorSource
from .serializers.link import Link
from .serializers.relationship import Relationship
from .serializers.resource import Resource

__all__ = [
    "BindingContext",
    "DeclarationError",
    "DocumentBuilder",
    "Error",
    "ErrorSource",
    "Link",
    "Relationship",
    "Resource",
    "SerializationError",
    "ShapeError",
    "UnboundNameError",
    "attribute",
    "link",
    "relationship",
    "source",
    "value",
]
