"""Rendering of single link entries."""

from __future__ import annotations

from typing import Any, Callable, Mapping

from pydantic import ValidationError

from jsonapi_serializable.core.fields import LinkField
from jsonapi_serializable.exceptions import ShapeError
from jsonapi_serializable.schemas.resource import LinkObject

_UNSET = object()


class Link:
    """Builder handed to a link computation as its second argument.

    A computation either returns the link value (a string, a mapping or
    ``None``), or calls :meth:`href` and :meth:`meta` to build a link object::

        def related(ctx, link):
            link.href(f"{ctx.base_url}/users/{ctx.user.id}/posts")
            link.meta({"count": len(ctx.user.posts)})
    """

    __slots__ = ("_href", "_meta")

    def __init__(self) -> None:
        self._href: Any = _UNSET
        self._meta: Any = _UNSET

    def href(self, value: str) -> "Link":
        self._href = value
        return self

    def meta(self, value: Mapping[str, Any]) -> "Link":
        self._meta = value
        return self

    @property
    def built(self) -> bool:
        """True when a setter was called."""
        return self._href is not _UNSET or self._meta is not _UNSET

    def as_jsonapi(self) -> dict[str, Any]:
        if self._href is _UNSET:
            raise ShapeError("link meta was set without an href")
        payload: dict[str, Any] = {"href": self._href}
        if self._meta is not _UNSET and self._meta is not None:
            payload["meta"] = self._meta
        try:
            LinkObject.model_validate(payload)
        except ValidationError as exc:
            raise ShapeError(f"invalid link object {payload!r}") from exc
        return payload

    @classmethod
    def render(cls, context: Any, computation: Callable[[Any, "Link"], Any]) -> Any:
        """Evaluate ``computation`` under ``context`` and return the link value."""
        builder = cls()
        result = computation(context, builder)
        if builder.built:
            return builder.as_jsonapi()
        if result is builder:
            return None
        return result


def render_links(context: Any, links: Mapping[str, Any]) -> dict[str, Any]:
    """Render a map of link declarations (fields or bare computations)."""
    rendered: dict[str, Any] = {}
    for name, declared in links.items():
        compute = declared.compute if isinstance(declared, LinkField) else declared
        rendered[name] = Link.render(context, compute)
    return rendered
