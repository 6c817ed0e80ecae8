"""Type descriptors: the declarations of one resource or error type."""

from __future__ import annotations

import dataclasses
import inspect
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from jsonapi_serializable.core.fields import (
    AttributeField,
    LinkField,
    RelationshipField,
    SourceField,
    ValueField,
    as_value,
)
from jsonapi_serializable.exceptions import DeclarationError


@dataclass(frozen=True)
class TypeDescriptor:
    """Declarations collected from a class body, plus everything inherited."""

    values: Mapping[str, ValueField] = field(default_factory=dict)
    attributes: Mapping[str, AttributeField] = field(default_factory=dict)
    relationships: Mapping[str, RelationshipField] = field(default_factory=dict)
    links: Mapping[str, LinkField] = field(default_factory=dict)
    source: SourceField | None = None

    @property
    def field_names(self) -> tuple[str, ...]:
        """Attribute and relationship names, in declaration order."""
        return tuple(self.attributes) + tuple(self.relationships)

    def value(self, name: str) -> ValueField:
        return self.values.get(name) or ValueField()


EMPTY_DESCRIPTOR = TypeDescriptor()


def merge_descriptors(parent: TypeDescriptor, overrides: TypeDescriptor) -> TypeDescriptor:
    """Overlay ``overrides`` on ``parent`` without touching either.

    Maps are merged key by key with the override winning; an overridden key
    keeps the position it had in the parent.
    """
    return TypeDescriptor(
        values={**parent.values, **overrides.values},
        attributes={**parent.attributes, **overrides.attributes},
        relationships={**parent.relationships, **overrides.relationships},
        links={**parent.links, **overrides.links},
        source=overrides.source if overrides.source is not None else parent.source,
    )


def _named(declaration: Any, key: str) -> Any:
    if declaration.name is None:
        return dataclasses.replace(declaration, name=key)
    return declaration


def _is_plain_value(candidate: Any) -> bool:
    if callable(candidate):
        return False
    return not isinstance(candidate, (classmethod, staticmethod, property))


def _is_method(candidate: Any) -> bool:
    if isinstance(candidate, (type, classmethod, staticmethod, property)):
        return True
    if not inspect.isfunction(candidate):
        return False
    parameters = list(inspect.signature(candidate).parameters)
    return bool(parameters) and parameters[0] in ("self", "cls")


def collect_declarations(
    namespace: Mapping[str, Any],
    *,
    reserved: Iterable[str],
    allowed: tuple[type, ...],
    owner: str = "",
) -> tuple[TypeDescriptor, list[str]]:
    """Collect the field declarations of a class namespace.

    Returns the descriptor and the namespace keys it consumed. Under a
    reserved name, a plain value counts as a fixed value and a function of
    the context as a computation; methods taking ``self`` are left alone.
    """
    reserved = frozenset(reserved)
    values: dict[str, ValueField] = {}
    attributes: dict[str, AttributeField] = {}
    relationships: dict[str, RelationshipField] = {}
    links: dict[str, LinkField] = {}
    source = None
    consumed: list[str] = []

    for key, candidate in namespace.items():
        if key.startswith("_"):
            continue
        if isinstance(candidate, (ValueField, AttributeField, RelationshipField, LinkField, SourceField)):
            if not isinstance(candidate, allowed):
                raise DeclarationError(
                    f"{owner}.{key}: {type(candidate).__name__} is not allowed here"
                )
        if isinstance(candidate, ValueField):
            if key not in reserved:
                raise DeclarationError(
                    f"{owner}.{key}: value() is only valid for {', '.join(sorted(reserved))}"
                )
            values[key] = candidate
        elif isinstance(candidate, AttributeField):
            candidate = _named(candidate, key)
            attributes[candidate.name] = candidate
        elif isinstance(candidate, RelationshipField):
            candidate = _named(candidate, key)
            relationships[candidate.name] = candidate
        elif isinstance(candidate, LinkField):
            candidate = _named(candidate, key)
            links[candidate.name] = candidate
        elif isinstance(candidate, SourceField):
            source = candidate
        elif key in reserved and _is_plain_value(candidate):
            values[key] = ValueField(value=candidate)
        elif key in reserved and callable(candidate) and not _is_method(candidate):
            values[key] = as_value(candidate)
        else:
            continue
        consumed.append(key)

    descriptor = TypeDescriptor(
        values=values,
        attributes=attributes,
        relationships=relationships,
        links=links,
        source=source,
    )
    return descriptor, consumed


def build_class_descriptor(
    cls: type, *, reserved: Iterable[str], allowed: tuple[type, ...]
) -> TypeDescriptor:
    """Build the descriptor of ``cls`` and strip its declarations from the class.

    Bases are merged right to left so the leftmost base wins, then the
    class's own declarations are overlaid.
    """
    inherited = EMPTY_DESCRIPTOR
    for base in reversed(cls.__bases__):
        base_descriptor = getattr(base, "_descriptor", None)
        if isinstance(base_descriptor, TypeDescriptor):
            inherited = merge_descriptors(inherited, base_descriptor)

    own, consumed = collect_declarations(
        vars(cls), reserved=reserved, allowed=allowed, owner=cls.__qualname__
    )
    for key in consumed:
        delattr(cls, key)
    return merge_descriptors(inherited, own)
