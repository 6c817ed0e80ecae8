"""Helpers turning JSON:API query parameters into render arguments."""

from __future__ import annotations

from typing import Any, Mapping


def _split_csv(value: str) -> list[str]:
    return [item for item in (part.strip() for part in value.split(",")) if item]


def parse_include(value: str | None) -> dict[str, Any]:
    """Parse ``include=posts.author,comments`` into a nested include tree.

    ``"posts.author,comments"`` becomes
    ``{"posts": {"author": {}}, "comments": {}}``.
    """
    tree: dict[str, Any] = {}
    if not value:
        return tree
    for path in _split_csv(value):
        node = tree
        for part in (segment for segment in path.split(".") if segment):
            node = node.setdefault(part, {})
    return tree


def parse_fields(params: Mapping[str, Any]) -> dict[str, list[str]]:
    """Collect ``fields[type]=a,b`` parameters into ``{type: [a, b]}``."""
    fields: dict[str, list[str]] = {}
    for key, value in params.items():
        if value is None:
            continue
        if key.startswith("fields[") and key.endswith("]"):
            resource_type = key[len("fields[") : -1]
            fields[resource_type] = _split_csv(str(value))
    return fields


def parse_query_params(params: Mapping[str, Any]) -> dict[str, Any]:
    """Normalize the ``include`` and ``fields`` query parameter families."""
    include = params.get("include")
    return {
        "include": parse_include(None if include is None else str(include)),
        "fields": parse_fields(params),
    }
