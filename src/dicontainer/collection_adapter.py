from __future__ import annotations

import collections
import collections.abc
from dataclasses import dataclass
from typing import Any, get_args, get_origin

from dicontainer.registry import Capability, InstanceRegistry

# Read-only views resolve to a tuple; MutableSequence needs a real list to honor its contract.
_SUPPORTED_INTERFACES: dict[type[Any], type[Any]] = {
    collections.abc.Iterable: tuple,
    collections.abc.Collection: tuple,
    collections.abc.Sequence: tuple,
    collections.abc.MutableSequence: list,
}

_SUPPORTED_CONCRETE_TYPES: frozenset[type[Any]] = frozenset(
    {list, collections.deque, collections.UserList},
)

_HOMOGENEOUS_TUPLE_ARGUMENT_COUNT = 2


@dataclass(frozen=True, slots=True)
class CollectionRequest:
    """Describe an "all instances of capability" parameter shape."""

    element: Capability
    """The capability whose instances fill the collection."""
    container_type: type[Any]
    """The class used to build the resolved value."""


class CollectionAdapter:
    """Resolve collection-shaped annotations to every instance of a capability.

    Recognized shapes, checked in order:

    1. ``Iterable[X]``, ``Collection[X]``, ``Sequence[X]`` and ``MutableSequence[X]``
       (``collections.abc`` or ``typing`` spelling).
    2. ``list[X]``, ``collections.deque[X]`` and ``collections.UserList[X]``.
    3. ``tuple[X, ...]``.

    Any other annotation is not a collection request.
    """

    def __init__(self, registry: InstanceRegistry) -> None:
        self._registry = registry

    def match(self, annotation: Any) -> CollectionRequest | None:
        """Return the collection request described by an annotation, if any.

        Args:
            annotation: Parameter annotation to inspect.

        """
        origin = get_origin(annotation)
        if origin is None:
            return None
        args = get_args(annotation)

        interface_container = _SUPPORTED_INTERFACES.get(origin)
        if interface_container is not None and len(args) == 1:
            return CollectionRequest(element=args[0], container_type=interface_container)

        if origin in _SUPPORTED_CONCRETE_TYPES and len(args) == 1:
            return CollectionRequest(element=args[0], container_type=origin)

        if (
            origin is tuple
            and len(args) == _HOMOGENEOUS_TUPLE_ARGUMENT_COUNT
            and args[1] is Ellipsis
        ):
            return CollectionRequest(element=args[0], container_type=tuple)

        return None

    def matches(self, annotation: Any) -> bool:
        """Return true when an annotation requests all instances of a capability."""
        return self.match(annotation) is not None

    def build(self, request: CollectionRequest) -> Any:
        """Build the collection value for a matched request.

        Args:
            request: Request returned by ``match``.

        """
        instances = self._registry.get_all(request.element)
        if request.container_type is tuple:
            return instances
        return request.container_type(instances)
