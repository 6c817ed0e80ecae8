"""Resource, relationship, error and link serializers."""

from .error import Error, ErrorSource
from .link import Link
from .relationship import Relationship
from .resource import Resource

__all__ = ["Error", "ErrorSource", "Link", "Relationship", "Resource"]
