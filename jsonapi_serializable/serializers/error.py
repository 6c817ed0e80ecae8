"""Declarative serializer producing JSON:API error objects."""

from __future__ import annotations

import logging
from typing import Any, Callable, ClassVar, Mapping

from jsonapi_serializable.core.context import BindingContext
from jsonapi_serializable.core.descriptor import (
    EMPTY_DESCRIPTOR,
    TypeDescriptor,
    build_class_descriptor,
)
from jsonapi_serializable.core.fields import LinkField, SourceField, ValueField
from jsonapi_serializable.exceptions import ShapeError
from jsonapi_serializable.serializers.link import render_links

logger = logging.getLogger(__name__)

ERROR_VALUES = ("id", "status", "code", "title", "detail", "meta")

_UNSET = object()


class ErrorSource:
    """Builder handed to a ``source`` computation as its second argument.

    Every call adds one member, so the source is not limited to a fixed set
    of keys::

        @source
        def source(ctx, src):
            src.pointer("/data/attributes/title")
            src.set("line", ctx.line)
    """

    __slots__ = ("_data",)

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}

    def set(self, name: str, value: Any) -> "ErrorSource":
        self._data[name] = value
        return self

    def pointer(self, value: str) -> "ErrorSource":
        return self.set("pointer", value)

    def parameter(self, value: str) -> "ErrorSource":
        return self.set("parameter", value)

    def header(self, value: str) -> "ErrorSource":
        return self.set("header", value)

    def as_jsonapi(self) -> dict[str, Any]:
        return dict(self._data)

    @classmethod
    def render(
        cls, context: Any, computation: Callable[[Any, "ErrorSource"], Any]
    ) -> dict[str, Any] | None:
        """Evaluate ``computation``; ``None`` when it set nothing."""
        builder = cls()
        result = computation(context, builder)
        if builder._data:
            return builder.as_jsonapi()
        if result is None or result is builder:
            return None
        if isinstance(result, Mapping):
            return dict(result) or None
        raise ShapeError(f"error source must be a mapping, got {type(result).__name__}")


class Error:
    """Serialize one JSON:API error object.

    Members are declared on the class with a fixed value, a computation, or
    both. A member passed when the error is created wins over both::

        class NotFound(Error):
            status = "404"
            title = "Not Found"
            detail = value(compute=lambda ctx: f"No {ctx.kind} with id {ctx.key}")

        NotFound(kind="user", key="7").render()
        NotFound(kind="user", key="7", status="410").render()

    Each member is resolved on first use and cached.
    """

    _descriptor: ClassVar[TypeDescriptor] = EMPTY_DESCRIPTOR

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._descriptor = build_class_descriptor(
            cls, reserved=ERROR_VALUES, allowed=(ValueField, LinkField, SourceField)
        )

    def __init__(self, context: Mapping[str, Any] | None = None, **names: Any) -> None:
        self._context = BindingContext.coerce(context, **names)
        self._values: dict[str, Any] = {}
        self._links: Any = _UNSET
        self._source: Any = _UNSET

    def __repr__(self) -> str:
        return f"<{type(self).__name__} bound={', '.join(sorted(self._context))}>"

    @property
    def context(self) -> BindingContext:
        return self._context

    def resolve(self, name: str) -> Any:
        """Return a member: instance value, else fixed value, else computation."""
        if name not in ERROR_VALUES:
            raise KeyError(name)
        if name not in self._values:
            if name in self._context:
                self._values[name] = self._context[name]
            else:
                self._values[name] = self._descriptor.value(name).resolve(self._context)
        return self._values[name]

    def links(self) -> dict[str, Any]:
        if self._links is _UNSET:
            self._links = render_links(self._context, self._descriptor.links)
        return self._links

    def source(self) -> dict[str, Any] | None:
        if self._source is _UNSET:
            declared = self._descriptor.source
            self._source = (
                ErrorSource.render(self._context, declared.compute) if declared else None
            )
        return self._source

    def render(self) -> dict[str, Any]:
        """Return the error object, leaving out members that resolved to ``None``."""
        logger.debug("Rendering error %s", type(self).__name__)
        error: dict[str, Any] = {}
        links = self.links()
        if links:
            error["links"] = links
        for name in ERROR_VALUES:
            resolved = self.resolve(name)
            if resolved is not None:
                error[name] = resolved
        source = self.source()
        if source is not None:
            error["source"] = source
        return error
