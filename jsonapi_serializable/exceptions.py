"""Exceptions raised by the serialization engine.

Errors raised by caller-supplied computations are never wrapped: they reach
the caller of ``render`` unchanged. The classes below cover problems the
engine itself detects.
"""


class SerializationError(Exception):
    """Base class for errors detected by the engine."""


class DeclarationError(SerializationError):
    """A resource or error type is declared incorrectly.

    Raised when a required field (``id``, ``type``) has neither a fixed value
    nor a computation, or when a declaration is malformed.
    """


class ShapeError(SerializationError, ValueError):
    """A computation returned a value of the wrong shape for its field."""


class UnboundNameError(SerializationError, AttributeError):
    """A computation asked the binding context for a name it does not hold."""

    def __init__(self, name: str, available=()) -> None:
        available = tuple(available)
        super().__init__(
            f"{name!r} is not bound in this context "
            f"(bound names: {', '.join(sorted(available)) or 'none'})"
        )
        self.name = name
        self.available = available
