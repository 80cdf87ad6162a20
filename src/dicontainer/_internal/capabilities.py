from __future__ import annotations

import abc
from typing import Any, Generic, Protocol, get_origin

from dicontainer._internal.type_checks import has_free_type_variables

_IGNORED_BASES: tuple[Any, ...] = (object, Generic, Protocol, abc.ABC)


def implemented_capabilities(concrete_type: type[Any]) -> tuple[Any, ...]:
    """Return capabilities implemented by a class, excluding the class itself.

    Base classes are listed in MRO order. Parametrized generic bases such as
    ``Repository[User]`` are listed right after the class that declares them,
    as long as they carry no free type variables.

    Args:
        concrete_type: Runtime class whose bases are enumerated.

    """
    capabilities: list[Any] = []
    for klass in concrete_type.__mro__:
        if klass is not concrete_type and klass not in _IGNORED_BASES:
            _append_unique(capabilities, klass)
        for base in vars(klass).get("__orig_bases__", ()):
            origin = get_origin(base)
            if origin is None or origin in _IGNORED_BASES:
                continue
            if has_free_type_variables(base):
                continue
            _append_unique(capabilities, base)
    return tuple(capabilities)


def _append_unique(capabilities: list[Any], capability: Any) -> None:
    if capability not in capabilities:
        capabilities.append(capability)


__all__ = ["implemented_capabilities"]
