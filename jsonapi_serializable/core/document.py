"""JSON:API document assembly on top of the resource contract."""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Iterable, Mapping

from jsonapi_serializable.schemas.resource import Document
from jsonapi_serializable.utils.query_params import parse_include

logger = logging.getLogger(__name__)

IncludeTree = Mapping[str, "IncludeTree"]


def merge_include_trees(left: IncludeTree, right: IncludeTree) -> dict[str, Any]:
    """Return the union of two include trees."""
    merged: dict[str, Any] = {key: dict(value) for key, value in left.items()}
    for key, subtree in right.items():
        merged[key] = merge_include_trees(merged.get(key, {}), subtree)
    return merged


def _as_include_tree(include: Any) -> IncludeTree:
    if not include:
        return {}
    if isinstance(include, Mapping):
        return include
    if isinstance(include, str):
        return parse_include(include)
    return parse_include(",".join(include))


def _key(resource: Any) -> tuple[str, str]:
    return resource.type_of(), resource.id_of()


class DocumentBuilder:
    """Build JSON:API v1.1 documents from resources and errors.

    ``fields`` maps a resource type to its sparse fieldset. ``include`` is a
    tree of relationship names (``{"posts": {"author": {}}}``), a
    comma-separated string, or an iterable of dotted paths
    (``["posts.author"]``). Included
    resources are collected through ``Resource.related`` and deduplicated by
    ``(type, id)``; primary resources are never repeated in ``included``.
    """

    def __init__(self, *, validate: bool = False) -> None:
        self.validate = validate

    def build(
        self,
        data: Any,
        *,
        fields: Mapping[str, Iterable[str]] | None = None,
        include: IncludeTree | str | Iterable[str] | None = None,
        links: Mapping[str, Any] | None = None,
        meta: Mapping[str, Any] | None = None,
        jsonapi: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Return a document whose primary data is a resource, a list, or ``None``."""
        fields = fields or {}
        include = _as_include_tree(include)
        many = isinstance(data, (list, tuple))
        primary = list(data) if many else ([] if data is None else [data])

        nodes = self._collect(primary, include)
        primary_keys = {_key(resource) for resource in primary}
        rendered = {
            key: self._render(resource, fields, tree) for key, (resource, tree) in nodes.items()
        }

        document: dict[str, Any] = {}
        if many:
            document["data"] = [rendered[_key(resource)] for resource in primary]
        else:
            document["data"] = rendered[_key(data)] if data is not None else None
        included = [value for key, value in rendered.items() if key not in primary_keys]
        if included:
            document["included"] = included
        self._add_top_level(document, links=links, meta=meta, jsonapi=jsonapi)
        logger.debug(
            "Built document with %d primary and %d included resources",
            len(primary),
            len(included),
        )
        return self._finish(document)

    def build_errors(
        self,
        errors: Iterable[Any],
        *,
        links: Mapping[str, Any] | None = None,
        meta: Mapping[str, Any] | None = None,
        jsonapi: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Return a JSON:API error document from error instances."""
        document: dict[str, Any] = {"errors": [error.render() for error in errors]}
        self._add_top_level(document, links=links, meta=meta, jsonapi=jsonapi)
        return self._finish(document)

    def _collect(
        self, primary: list[Any], include: IncludeTree
    ) -> dict[tuple[str, str], tuple[Any, dict[str, Any]]]:
        # key -> (resource, include tree applying to it), in discovery order.
        nodes: dict[tuple[str, str], tuple[Any, dict[str, Any]]] = {}
        queue: deque[tuple[Any, IncludeTree]] = deque()
        for resource in primary:
            queue.append((resource, include))

        while queue:
            resource, tree = queue.popleft()
            key = _key(resource)
            if key in nodes:
                known, known_tree = nodes[key]
                merged = merge_include_trees(known_tree, tree)
                if merged == known_tree:
                    continue
                nodes[key] = (known, merged)
                resource, tree = known, merged
            else:
                nodes[key] = (resource, merge_include_trees({}, tree))
            if not tree:
                continue
            for name, related in resource.related(tree).items():
                for item in related:
                    queue.append((item, tree[name]))
        return nodes

    def _render(
        self, resource: Any, fields: Mapping[str, Iterable[str]], tree: IncludeTree
    ) -> dict[str, Any]:
        fieldset = fields.get(resource.type_of())
        return resource.render(fields=fieldset, include=tree)

    def _add_top_level(self, document: dict[str, Any], **members: Any) -> None:
        for name, value in members.items():
            if value:
                document[name] = dict(value)

    def _finish(self, document: dict[str, Any]) -> dict[str, Any]:
        if self.validate:
            Document.model_validate(document)
        return document
