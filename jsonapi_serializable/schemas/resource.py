"""Pydantic schemas for the JSON:API v1.1 objects produced by the engine."""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, StrictStr


class ResourceIdentifier(BaseModel):
    """Resource identifier object: type + id."""

    model_config = ConfigDict(extra="forbid")

    type: StrictStr
    id: StrictStr
    meta: Optional[Dict[str, Any]] = None


class LinkObject(BaseModel):
    """Link object: href plus optional meta."""

    model_config = ConfigDict(extra="forbid")

    href: StrictStr
    meta: Optional[Dict[str, Any]] = None


LinkValue = Union[str, LinkObject, None]


class RelationshipObject(BaseModel):
    """Relationship object with links, meta and resource linkage."""

    model_config = ConfigDict(extra="forbid")

    links: Optional[Dict[str, LinkValue]] = None
    meta: Optional[Dict[str, Any]] = None
    data: Union[ResourceIdentifier, List[ResourceIdentifier], None] = None


class ResourceObject(BaseModel):
    """Resource object with attributes and relationships."""

    model_config = ConfigDict(extra="forbid")

    type: str
    id: str
    attributes: Optional[Dict[str, Any]] = None
    relationships: Optional[Dict[str, RelationshipObject]] = None
    links: Optional[Dict[str, LinkValue]] = None
    meta: Optional[Dict[str, Any]] = None


class ErrorObject(BaseModel):
    """Error object."""

    model_config = ConfigDict(extra="forbid")

    links: Optional[Dict[str, LinkValue]] = None
    id: Optional[str] = None
    status: Optional[str] = None
    code: Optional[str] = None
    title: Optional[str] = None
    detail: Optional[str] = None
    meta: Optional[Dict[str, Any]] = None
    source: Optional[Dict[str, Any]] = None


class Document(BaseModel):
    """Top-level JSON:API document."""

    model_config = ConfigDict(extra="forbid")

    data: Union[ResourceObject, List[ResourceObject], None] = None
    included: Optional[List[ResourceObject]] = None
    errors: Optional[List[ErrorObject]] = None
    links: Optional[Dict[str, LinkValue]] = None
    meta: Optional[Dict[str, Any]] = None
    jsonapi: Optional[Dict[str, Any]] = None
