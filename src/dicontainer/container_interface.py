from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, TypeVar, overload

T = TypeVar("T")


class IContainer(ABC):
    """Interface for container-like objects.

    ``Container`` registers itself under this interface, so any class declaring an
    ``IContainer`` parameter receives the container that instantiated it.
    """

    @abstractmethod
    def contains(self, capability: Any) -> bool:
        """Return true when at least one instance is registered under a capability."""

    @overload
    @abstractmethod
    def resolve(self, capability: type[T]) -> T: ...

    @overload
    @abstractmethod
    def resolve(self, capability: Any) -> Any: ...

    @abstractmethod
    def resolve(self, capability: Any) -> Any:
        """Return the single instance of a capability, raising when absent or ambiguous."""

    @overload
    @abstractmethod
    def try_resolve(self, capability: type[T]) -> T | None: ...

    @overload
    @abstractmethod
    def try_resolve(self, capability: Any) -> Any | None: ...

    @abstractmethod
    def try_resolve(self, capability: Any) -> Any | None:
        """Return the single instance of a capability, or ``None``."""

    @overload
    @abstractmethod
    def resolve_all(self, capability: type[T]) -> tuple[T, ...]: ...

    @overload
    @abstractmethod
    def resolve_all(self, capability: Any) -> tuple[Any, ...]: ...

    @abstractmethod
    def resolve_all(self, capability: Any) -> tuple[Any, ...]:
        """Return every instance registered under a capability."""

    @overload
    @abstractmethod
    def instantiate(self, concrete_type: type[T]) -> T: ...

    @overload
    @abstractmethod
    def instantiate(self, concrete_type: Any) -> Any: ...

    @abstractmethod
    def instantiate(self, concrete_type: Any) -> Any:
        """Create a new instance of a class from registered dependencies."""

    @abstractmethod
    def invoke(self, instance: Any, method: str | Callable[..., Any]) -> Any:
        """Call a method on an instance with arguments resolved from registrations."""
