"""Field declarations used in resource and error class bodies.

Declarations only capture computations; nothing is evaluated until an
instance is bound to a context.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from jsonapi_serializable.exceptions import DeclarationError

Computation = Callable[[Any], Any]
BuilderComputation = Callable[[Any, Any], Any]


def _check_callable(compute: Any, what: str) -> None:
    if compute is not None and not callable(compute):
        raise DeclarationError(f"{what} computation must be callable, got {compute!r}")


@dataclass(frozen=True)
class ValueField:
    """A scalar field with an optional fixed value and an optional computation."""

    value: Any = None
    compute: Computation | None = None

    def __post_init__(self) -> None:
        _check_callable(self.compute, "value")

    @property
    def declared(self) -> bool:
        return self.value is not None or self.compute is not None

    def resolve(self, context: Any) -> Any:
        """Return the fixed value, falling back to the computation.

        Fixed values are copied so rendered output never aliases the class
        declaration.
        """
        if self.value is not None:
            return copy.deepcopy(self.value)
        if self.compute is not None:
            return self.compute(context)
        return None


@dataclass(frozen=True)
class AttributeField:
    compute: Computation
    name: str | None = None

    def __post_init__(self) -> None:
        if self.compute is None:
            raise DeclarationError("attribute requires a computation")
        _check_callable(self.compute, "attribute")


@dataclass(frozen=True)
class LinkField:
    compute: BuilderComputation
    name: str | None = None

    def __post_init__(self) -> None:
        if self.compute is None:
            raise DeclarationError("link requires a computation")
        _check_callable(self.compute, "link")


@dataclass(frozen=True)
class SourceField:
    compute: BuilderComputation

    def __post_init__(self) -> None:
        _check_callable(self.compute, "source")


@dataclass(frozen=True)
class RelationshipField:
    """Declaration of one relationship of a resource type."""

    data: Computation | None = None
    linkage_data: Computation | None = None
    links: Mapping[str, BuilderComputation] = field(default_factory=dict)
    meta: ValueField = field(default_factory=ValueField)
    name: str | None = None

    def __post_init__(self) -> None:
        _check_callable(self.data, "relationship data")
        _check_callable(self.linkage_data, "relationship linkage")
        for link_name, compute in self.links.items():
            _check_callable(compute, f"relationship link {link_name!r}")

    @property
    def has_linkage(self) -> bool:
        """True when linkage can be emitted for this relationship."""
        return self.data is not None or self.linkage_data is not None


def as_value(declared: Any) -> ValueField:
    """Normalize a fixed value, a computation or a field into a ``ValueField``."""
    if isinstance(declared, ValueField):
        return declared
    if declared is None:
        return ValueField()
    if callable(declared):
        return ValueField(compute=declared)
    return ValueField(value=declared)


def value(fixed: Any = None, *, compute: Computation | None = None) -> ValueField:
    """Declare a scalar field (``type``, ``id``, ``meta``, error members).

    Example::

        type = value("users")
        id = value(compute=lambda ctx: str(ctx.user.id))
    """
    return ValueField(value=fixed, compute=compute)


def attribute(compute: Computation | None = None, *, name: str | None = None):
    """Declare an attribute; usable directly or as a decorator.

    Example::

        name = attribute(lambda ctx: ctx.user.name)

        @attribute(name="full-name")
        def full_name(ctx):
            return f"{ctx.user.first} {ctx.user.last}"
    """
    if compute is None:
        return lambda fn: AttributeField(fn, name)
    return AttributeField(compute, name)


def link(compute: BuilderComputation | None = None, *, name: str | None = None):
    """Declare a link; usable directly or as a decorator.

    The computation receives ``(ctx, link)``. It either returns the link value
    or calls ``link.href(...)`` / ``link.meta(...)``.
    """
    if compute is None:
        return lambda fn: LinkField(fn, name)
    return LinkField(compute, name)


def source(compute: BuilderComputation) -> SourceField:
    """Declare the ``source`` member of an error; usable as a decorator."""
    return SourceField(compute)


def relationship(
    data: Computation | None = None,
    *,
    linkage_data: Computation | None = None,
    links: Mapping[str, BuilderComputation] | None = None,
    meta: Any = None,
    name: str | None = None,
) -> RelationshipField:
    """Declare a relationship.

    ``data`` returns ``None``, a resource, or a list of resources.
    ``linkage_data`` returns identifiers directly, sparing the cost of
    building related resources only to read their type and id.
    """
    return RelationshipField(
        data=data,
        linkage_data=linkage_data,
        links=dict(links or {}),
        meta=as_value(meta),
        name=name,
    )
