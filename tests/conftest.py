from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import pytest


@dataclass
class User:
    id: int
    name: str
    email: str = ""


@dataclass
class Post:
    id: int
    title: str
    body: str = ""
    author: Optional[User] = None
    comments: list[Any] = field(default_factory=list)


class CallCounter:
    """Wrap a computation and count how often it runs."""

    def __init__(self, fn: Callable[..., Any]) -> None:
        self.fn = fn
        self.calls = 0

    def __call__(self, *args: Any) -> Any:
        self.calls += 1
        return self.fn(*args)


@pytest.fixture
def counter() -> Callable[[Callable[..., Any]], CallCounter]:
    return CallCounter


@pytest.fixture
def dan() -> User:
    return User(7, "Dan", "dan@example.com")


@pytest.fixture
def post(dan: User) -> Post:
    return Post(1, "Hello", "The shortest article. Ever.", author=dan)
