"""Declarative serializer producing JSON:API resource objects."""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Iterable, Mapping

from jsonapi_serializable.core.context import BindingContext
from jsonapi_serializable.core.descriptor import (
    EMPTY_DESCRIPTOR,
    TypeDescriptor,
    build_class_descriptor,
)
from jsonapi_serializable.core.fields import AttributeField, LinkField, RelationshipField, ValueField
from jsonapi_serializable.exceptions import DeclarationError, ShapeError
from jsonapi_serializable.serializers.link import render_links
from jsonapi_serializable.serializers.relationship import Relationship

logger = logging.getLogger(__name__)

RESOURCE_VALUES = ("type", "id", "meta")


def _as_names(names: Iterable[str] | Mapping[str, Any] | None) -> Any:
    if names is None:
        return frozenset()
    if isinstance(names, (Mapping, frozenset, set)):
        return names
    if isinstance(names, str):
        return frozenset((names,))
    return frozenset(names)


class Resource:
    """Serialize bound domain objects into a JSON:API resource object.

    Subclasses declare fields in their body::

        class UserResource(Resource):
            class Meta:
                type_ = "users"

            id = value(compute=lambda ctx: str(ctx.user.id))
            name = attribute(lambda ctx: ctx.user.name)
            posts = relationship(
                lambda ctx: [PostResource(post=p) for p in ctx.user.posts],
                links={"related": lambda ctx, link: f"/users/{ctx.user.id}/posts"},
            )

        UserResource(user=user).render(fields={"name"}, include={"posts"})

    ``id``, ``type``, ``meta`` and links are resolved when the instance is
    created; attributes and relationship data are resolved on first render
    and cached for the lifetime of the instance.
    """

    class Meta:
        """Serializer metadata (fixed type, linkage validation)."""

        type_: str | None = None
        validate_linkage: bool = True

    _descriptor: ClassVar[TypeDescriptor] = EMPTY_DESCRIPTOR

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._descriptor = build_class_descriptor(
            cls,
            reserved=RESOURCE_VALUES,
            allowed=(ValueField, AttributeField, RelationshipField, LinkField),
        )

    def __init__(self, context: Mapping[str, Any] | None = None, **names: Any) -> None:
        self._context = BindingContext.coerce(context, **names)
        descriptor = self._descriptor
        self._id = self._resolve_identity("id", descriptor.value("id"))
        self._type = self._resolve_identity(
            "type", self._type_declaration(descriptor.value("type"))
        )
        self._meta = descriptor.value("meta").resolve(self._context)
        self._attributes: dict[str, Any] = {}
        validate_linkage = getattr(self.Meta, "validate_linkage", True)
        self._relationships = {
            name: Relationship(declaration, self._context, validate_linkage=validate_linkage)
            for name, declaration in descriptor.relationships.items()
        }
        self._links = render_links(self._context, descriptor.links)
        logger.debug("Bound %s %s:%s", type(self).__name__, self._type, self._id)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._type}:{self._id}>"

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        """Declared attribute and relationship names (the default fieldset)."""
        return cls._descriptor.field_names

    @property
    def context(self) -> BindingContext:
        return self._context

    def type_of(self) -> str:
        return self._type

    def id_of(self) -> str:
        return self._id

    def identifier(self) -> dict[str, str]:
        """Return the resource identifier object ``{type, id}``."""
        return {"type": self._type, "id": self._id}

    def attribute(self, name: str) -> Any:
        """Return one attribute value, computing it on first access."""
        if name not in self._attributes:
            declaration = self._descriptor.attributes[name]
            self._attributes[name] = declaration.compute(self._context)
        return self._attributes[name]

    def relationship(self, name: str) -> Relationship:
        return self._relationships[name]

    def render(
        self,
        fields: Iterable[str] | None = None,
        include: Iterable[str] | Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Return the resource object.

        ``fields`` restricts attributes and relationships (all by default);
        ``include`` names the relationships whose linkage data is emitted.
        Empty members are left out rather than rendered as ``{}``.
        """
        fields = self.field_names() if fields is None else _as_names(fields)
        include = _as_names(include)

        resource: dict[str, Any] = {"id": self._id, "type": self._type}
        attributes = {
            name: self.attribute(name)
            for name in self._descriptor.attributes
            if name in fields
        }
        if attributes:
            resource["attributes"] = attributes
        relationships = {
            name: relationship.render(name in include)
            for name, relationship in self._relationships.items()
            if name in fields
        }
        if relationships:
            resource["relationships"] = relationships
        if self._links:
            resource["links"] = self._links
        if self._meta:
            resource["meta"] = self._meta
        return resource

    def related(self, include: Iterable[str] | Mapping[str, Any]) -> dict[str, list["Resource"]]:
        """Return the related resources of every included relationship."""
        include = _as_names(include)
        return {
            name: relationship.related()
            for name, relationship in self._relationships.items()
            if name in include
        }

    def _type_declaration(self, declared: ValueField) -> ValueField:
        if declared.declared:
            return declared
        return ValueField(value=getattr(self.Meta, "type_", None))

    def _resolve_identity(self, name: str, declared: ValueField) -> str:
        if not declared.declared:
            raise DeclarationError(
                f"{type(self).__name__} declares no {name}: give it a fixed value "
                "or a computation"
            )
        resolved = declared.resolve(self._context)
        if not isinstance(resolved, str):
            raise ShapeError(
                f"{type(self).__name__} {name} must be a string, got {resolved!r}"
            )
        return resolved
