"""Pydantic schemas for JSON:API."""

from .resource import (
    Document,
    ErrorObject,
    LinkObject,
    LinkValue,
    RelationshipObject,
    ResourceIdentifier,
    ResourceObject,
)

__all__ = [
    "Document",
    "ErrorObject",
    "LinkObject",
    "LinkValue",
    "RelationshipObject",
    "ResourceIdentifier",
    "ResourceObject",
]
