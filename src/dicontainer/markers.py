from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

CONSTRUCTOR_MARKER_ATTR = "__dicontainer_constructor__"


def constructor(func: F) -> F:
    """Mark a member as the constructor the container should use.

    Apply it to ``__init__`` or to a factory ``classmethod``/``staticmethod``
    (in either decorator order). A class must end up with at most one marked
    member; without any, the container calls the class itself.

    Usage:
        class Client:
            def __init__(self, url: str) -> None: ...

            @classmethod
            @constructor
            def from_settings(cls, settings: Settings) -> Client: ...

    """
    target = getattr(func, "__func__", func)
    setattr(target, CONSTRUCTOR_MARKER_ATTR, True)
    return func


def is_constructor(member: Any) -> bool:
    """Return true when a class member was marked with ``@constructor``."""
    target = getattr(member, "__func__", member)
    return bool(getattr(target, CONSTRUCTOR_MARKER_ATTR, False))


__all__ = ["CONSTRUCTOR_MARKER_ATTR", "constructor", "is_constructor"]
