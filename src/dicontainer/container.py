from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from dicontainer._internal.capabilities import implemented_capabilities
from dicontainer._internal.type_checks import describe_key
from dicontainer.collection_adapter import CollectionAdapter
from dicontainer.container_interface import IContainer
from dicontainer.instantiator import Instantiator
from dicontainer.parameters import ParameterInspector, ParameterResolver
from dicontainer.registry import Capability, InstanceRegistry

T = TypeVar("T")


class Container(IContainer):
    """Register instances by capability and build objects from them.

    Registrations are plain instances. ``add_instance`` stores an instance under
    one capability (its own class by default), ``add_interfaces`` stores it under
    every base class and closed generic base it implements, and
    ``add_interfaces_and_self`` does both. The ``add_concrete*`` variants first
    build the instance with ``instantiate`` from what is already registered, so
    dependencies must be registered before their dependents.

    Resolution reads the registry at call time. A parameter annotated with a
    single capability receives its only registered instance, falling back to the
    parameter default. Parameters annotated as ``tuple[X, ...]``, ``Sequence[X]``,
    ``list[X]`` and similar collection shapes receive every instance of ``X``.

    The container registers itself under ``IContainer`` when created, so
    instantiated classes can ask for the container itself.
    """

    def __init__(self, *, validate_registrations: bool = True) -> None:
        """Initialize an empty container and register it under its interfaces.

        Args:
            validate_registrations: Reject instances that are not instances of the
                class they are registered under.

        """
        self._registry = InstanceRegistry(validate_instances=validate_registrations)
        self._collection_adapter = CollectionAdapter(self._registry)
        self._parameter_resolver = ParameterResolver(self._registry, self._collection_adapter)
        self._instantiator = Instantiator(self._parameter_resolver, ParameterInspector())

        self.add_interfaces(self)

    @property
    def registry(self) -> InstanceRegistry:
        """Return the underlying instance registry."""
        return self._registry

    def add_instance(self, instance: T, *, provides: Capability | None = None) -> T:
        """Register an instance under one capability.

        Args:
            instance: Object to register.
            provides: Capability key; defaults to the instance's concrete class.

        """
        capability = type(instance) if provides is None else provides
        self._registry.add(capability, instance)
        return instance

    def add_interfaces(self, instance: T) -> T:
        """Register an instance under every capability its class implements.

        The concrete class itself is not registered.
        """
        for capability in implemented_capabilities(type(instance)):
            self._registry.add(capability, instance)
        return instance

    def add_interfaces_and_self(self, instance: T) -> T:
        """Register an instance under its concrete class and every implemented capability."""
        self._registry.add(type(instance), instance)
        return self.add_interfaces(instance)

    def add_concrete(self, concrete_type: type[T], *, provides: Capability | None = None) -> T:
        """Instantiate a class and register the result under one capability.

        Args:
            concrete_type: Class to build from current registrations.
            provides: Capability key; defaults to ``concrete_type``.

        """
        instance = self.instantiate(concrete_type)
        return self.add_instance(instance, provides=concrete_type if provides is None else provides)

    def add_concrete_interfaces(self, concrete_type: type[T]) -> T:
        """Instantiate a class and register the result under its implemented capabilities."""
        return self.add_interfaces(self.instantiate(concrete_type))

    def add_concrete_interfaces_and_self(self, concrete_type: type[T]) -> T:
        """Instantiate a class and register the result under its class and capabilities."""
        return self.add_interfaces_and_self(self.instantiate(concrete_type))

    def contains(self, capability: Any) -> bool:
        """Return true when at least one instance is registered under a capability."""
        return self._registry.contains(capability)

    def resolve(self, capability: Any) -> Any:
        """Return the only instance of a capability or raise ``DIContainerNotFoundError``."""
        return self._registry.get_single(capability)

    def try_resolve(self, capability: Any) -> Any | None:
        """Return the only instance of a capability, or ``None`` for zero or many."""
        return self._registry.find_single(capability)

    def resolve_all(self, capability: Any) -> tuple[Any, ...]:
        """Return every instance of a capability in registration order."""
        return self._registry.get_all(capability)

    def instantiate(self, concrete_type: Any) -> Any:
        """Create a new instance from registered dependencies without registering it."""
        return self._instantiator.instantiate(concrete_type)

    def invoke(self, instance: Any, method: str | Callable[..., Any]) -> Any:
        """Call a method on an instance, resolving its parameters at call time."""
        return self._instantiator.invoke(instance, method)

    def __repr__(self) -> str:
        capabilities = ", ".join(describe_key(key) for key in self._registry.capabilities())
        return f"{type(self).__name__}({capabilities})"
