"""Relationship objects: related data, linkage, links and meta."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any, Mapping

from pydantic import ValidationError

from jsonapi_serializable.core.context import BindingContext
from jsonapi_serializable.core.fields import RelationshipField
from jsonapi_serializable.exceptions import ShapeError
from jsonapi_serializable.schemas.resource import ResourceIdentifier
from jsonapi_serializable.serializers.link import render_links

logger = logging.getLogger(__name__)

_UNSET = object()


def is_resource(candidate: Any) -> bool:
    """True for resource instances (anything exposing ``type_of``/``id_of``)."""
    if isinstance(candidate, type):
        return False
    return callable(getattr(candidate, "type_of", None)) and callable(
        getattr(candidate, "id_of", None)
    )


def _materialize(related: Any) -> Any:
    # One-shot iterables are drained once so render() and related() agree.
    if isinstance(related, Iterator):
        return list(related)
    return related


def _identifier(resource: Any) -> dict[str, str]:
    return {"type": resource.type_of(), "id": resource.id_of()}


class Relationship:
    """One relationship of a bound resource.

    Links are rendered when the relationship is constructed; data, linkage
    and meta are resolved on first use and cached.
    """

    def __init__(
        self,
        declaration: RelationshipField,
        context: Mapping[str, Any],
        *,
        validate_linkage: bool = True,
    ) -> None:
        self.name = declaration.name
        self._declaration = declaration
        self._context = BindingContext.coerce(context)
        self._validate_linkage = validate_linkage
        self._links = render_links(self._context, declaration.links)
        self._data: Any = _UNSET
        self._linkage: Any = _UNSET
        self._meta: Any = _UNSET

    def __repr__(self) -> str:
        return f"<Relationship {self.name!r}>"

    @property
    def links(self) -> dict[str, Any]:
        return self._links

    def data(self) -> Any:
        """Return ``None``, a related resource, or a list of related resources."""
        if self._data is _UNSET:
            compute = self._declaration.data
            logger.debug("Resolving data of relationship %r", self.name)
            self._data = _materialize(compute(self._context)) if compute else None
        return self._data

    def meta(self) -> Any:
        if self._meta is _UNSET:
            self._meta = self._declaration.meta.resolve(self._context)
        return self._meta

    def linkage_data(self) -> Any:
        """Return the resource linkage, preferring the explicit computation."""
        if self._linkage is _UNSET:
            explicit = self._declaration.linkage_data
            if explicit is not None:
                self._linkage = self._check_linkage(explicit(self._context))
            else:
                self._linkage = self._derive_linkage(self.data())
        return self._linkage

    def related(self) -> list[Any]:
        """Return the related resources as a list (empty for ``None``)."""
        related = self.data()
        if related is None:
            return []
        if is_resource(related):
            return [related]
        if isinstance(related, (list, tuple)):
            return list(related)
        raise ShapeError(
            f"relationship {self.name!r} data must be None, a resource or a list "
            f"of resources, got {type(related).__name__}"
        )

    def render(self, included: bool) -> dict[str, Any]:
        """Return the relationship object; ``data`` only when ``included``."""
        rendered: dict[str, Any] = {}
        if self._links:
            rendered["links"] = self._links
        meta = self.meta()
        if meta:
            rendered["meta"] = meta
        if included and self._declaration.has_linkage:
            rendered["data"] = self.linkage_data()
        return rendered

    def _derive_linkage(self, related: Any) -> Any:
        if related is None:
            return None
        if is_resource(related):
            return _identifier(related)
        if isinstance(related, (list, tuple)):
            linkage = []
            for item in related:
                if not is_resource(item):
                    raise ShapeError(
                        f"relationship {self.name!r} data contains a "
                        f"{type(item).__name__}, expected a resource"
                    )
                linkage.append(_identifier(item))
            return linkage
        raise ShapeError(
            f"relationship {self.name!r} data must be None, a resource or a list "
            f"of resources, got {type(related).__name__}"
        )

    def _check_linkage(self, linkage: Any) -> Any:
        if not self._validate_linkage or linkage is None:
            return linkage
        try:
            if isinstance(linkage, (list, tuple)):
                return [
                    ResourceIdentifier.model_validate(item).model_dump(exclude_none=True)
                    for item in linkage
                ]
            if isinstance(linkage, Mapping):
                return ResourceIdentifier.model_validate(dict(linkage)).model_dump(
                    exclude_none=True
                )
        except ValidationError as exc:
            raise ShapeError(
                f"relationship {self.name!r} linkage {linkage!r} is not a valid "
                "resource identifier"
            ) from exc
        raise ShapeError(
            f"relationship {self.name!r} linkage must be None, an identifier or a "
            f"list of identifiers, got {type(linkage).__name__}"
        )
