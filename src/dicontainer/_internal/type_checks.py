from __future__ import annotations

import inspect
import types
from typing import Annotated, Any, TypeGuard, TypeVar, get_args, get_origin


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def is_protocol_class(candidate: object) -> bool:
    """Return true when candidate is a ``typing.Protocol`` subclass declaring a protocol."""
    return is_runtime_class(candidate) and bool(getattr(candidate, "_is_protocol", False))


def has_free_type_variables(candidate: object) -> bool:
    """Return true when a class or generic alias still has unbound type parameters.

    Args:
        candidate: Class or alias such as ``Box``, ``Box[T]`` or ``Box[int]``.

    """
    parameters = getattr(candidate, "__parameters__", ())
    if parameters:
        return True
    return any(isinstance(argument, TypeVar) for argument in get_args(candidate))


def runtime_origin(candidate: object) -> type[Any] | None:
    """Return the runtime class behind a class or a parametrized generic alias."""
    if is_runtime_class(candidate):
        return candidate
    origin = get_origin(candidate)
    if origin is Annotated:
        return runtime_origin(get_args(candidate)[0])
    if is_runtime_class(origin):
        return origin
    return None


def describe_key(key: Any) -> str:
    """Return a readable name for a capability key used in messages and logs."""
    if key is inspect.Parameter.empty:
        return "an unannotated value"
    if is_runtime_class(key):
        return key.__qualname__
    return repr(key)


__all__ = [
    "describe_key",
    "has_free_type_variables",
    "is_protocol_class",
    "is_runtime_class",
    "runtime_origin",
]
