from __future__ import annotations

import logging
from typing import Any, TypeAlias

from dicontainer._internal.type_checks import describe_key, is_protocol_class, runtime_origin
from dicontainer.exceptions import DIContainerInvalidRegistrationError, DIContainerNotFoundError

Capability: TypeAlias = Any
"""A class, protocol, or closed generic alias used as a lookup key."""

logger = logging.getLogger(__name__)


class InstanceRegistry:
    """Store registered instances indexed by capability.

    Each capability maps to an insertion-ordered set of instances. Membership is
    by identity, so adding the same instance twice under one capability keeps a
    single entry while distinct (even equal) instances are kept side by side.
    The registry only holds references; it never creates or disposes instances.
    """

    def __init__(self, *, validate_instances: bool = True) -> None:
        self._validate_instances = validate_instances
        self._instances_by_capability: dict[Capability, dict[int, Any]] = {}

    def add(self, capability: Capability, instance: Any) -> None:
        """Add an instance under a capability.

        Args:
            capability: Lookup key the instance is registered under.
            instance: Object to store. ``None`` is rejected.

        """
        if instance is None:
            msg = f"Cannot register None under {describe_key(capability)}."
            raise DIContainerInvalidRegistrationError(msg)
        if self._validate_instances:
            self._validate(capability, instance)

        instances = self._instances_by_capability.setdefault(capability, {})
        if id(instance) in instances:
            return
        instances[id(instance)] = instance
        logger.debug(
            "Registered %s under %s",
            type(instance).__qualname__,
            describe_key(capability),
        )

    def contains(self, capability: Capability) -> bool:
        """Return true when at least one instance is registered under a capability."""
        return bool(self._instances_by_capability.get(capability))

    def find_single(self, capability: Capability) -> Any | None:
        """Return the only instance of a capability, or ``None``.

        Zero and multiple registrations are both reported as ``None``.
        """
        instances = self._instances_by_capability.get(capability)
        if not instances or len(instances) != 1:
            return None
        return next(iter(instances.values()))

    def get_single(self, capability: Capability) -> Any:
        """Return the only instance of a capability or raise ``DIContainerNotFoundError``."""
        instance = self.find_single(capability)
        if instance is not None:
            return instance
        count = self.count(capability)
        msg = (
            f"No single instance found for {describe_key(capability)} "
            f"({count} registered)."
        )
        raise DIContainerNotFoundError(msg, capability=capability, count=count)

    def get_all(self, capability: Capability) -> tuple[Any, ...]:
        """Return every instance registered under a capability, in insertion order."""
        return tuple(self._instances_by_capability.get(capability, {}).values())

    def count(self, capability: Capability) -> int:
        """Return the number of instances registered under a capability."""
        return len(self._instances_by_capability.get(capability, ()))

    def capabilities(self) -> tuple[Capability, ...]:
        """Return registered capabilities in insertion order."""
        return tuple(self._instances_by_capability)

    def _validate(self, capability: Capability, instance: Any) -> None:
        expected_type = runtime_origin(capability)
        if expected_type is None or is_protocol_class(expected_type):
            return
        try:
            is_instance = isinstance(instance, expected_type)
        except TypeError:
            # Special forms such as ``typing.Any`` reject isinstance checks.
            return
        if is_instance:
            return
        msg = (
            f"Cannot register {type(instance).__qualname__} under "
            f"{describe_key(capability)}: it is not an instance of "
            f"{expected_type.__qualname__}."
        )
        raise DIContainerInvalidRegistrationError(msg)

    def __len__(self) -> int:
        return len(self._instances_by_capability)
