"""Binding context handed to every computation."""

from __future__ import annotations

from typing import Any, Iterator, Mapping

from jsonapi_serializable.exceptions import UnboundNameError


class BindingContext(Mapping[str, Any]):
    """Read-only mapping of the names available to computations.

    Values can be looked up by item (``ctx["user"]``) or by attribute
    (``ctx.user``).
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, Any] | None = None, **names: Any) -> None:
        merged = dict(values or {})
        merged.update(names)
        object.__setattr__(self, "_values", merged)

    @classmethod
    def coerce(
        cls, context: Mapping[str, Any] | None = None, **names: Any
    ) -> "BindingContext":
        """Return ``context`` itself when no extra names are given."""
        if isinstance(context, cls) and not names:
            return context
        return cls(context, **names)

    def __getitem__(self, name: str) -> Any:
        try:
            return self._values[name]
        except KeyError:
            raise UnboundNameError(name, self._values) from None

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("BindingContext is read-only")

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __repr__(self) -> str:
        return f"BindingContext({', '.join(sorted(self._values))})"
