from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any

from dicontainer._internal.type_checks import (
    describe_key,
    has_free_type_variables,
    is_protocol_class,
    runtime_origin,
)
from dicontainer.exceptions import DIContainerConfigurationError, DIContainerNotFoundError
from dicontainer.markers import is_constructor
from dicontainer.parameters import ParameterDescriptor, ParameterInspector, ParameterResolver

logger = logging.getLogger(__name__)
_MISSING = object()


class Instantiator:
    """Construct objects and call methods with arguments resolved from the registry.

    A class exposes exactly one eligible constructor: the member marked with
    ``@constructor`` when there is one, otherwise the class call itself. Marking
    several members, or a class whose call signature cannot be inspected, is a
    configuration error reported when the class is instantiated.
    """

    def __init__(
        self,
        parameter_resolver: ParameterResolver,
        parameter_inspector: ParameterInspector | None = None,
    ) -> None:
        self._parameter_resolver = parameter_resolver
        self._parameter_inspector = parameter_inspector or ParameterInspector()

    def instantiate(self, concrete_type: Any) -> Any:
        """Create a new instance of a class using registered dependencies.

        Args:
            concrete_type: Class or closed generic alias (``Box[int]``) to construct.

        """
        origin = self._validate_instantiable(concrete_type)
        factory, parameters = self._eligible_constructor(concrete_type, origin)
        context = f"instantiating {describe_key(concrete_type)}"
        logger.debug("Instantiating %s", describe_key(concrete_type))
        return self._call(factory, parameters, context)

    def invoke(self, instance: Any, method: str | Callable[..., Any]) -> Any:
        """Call a method on an existing instance using registered dependencies.

        Args:
            instance: Object that owns the method.
            method: Method name (any visibility, including name-mangled private names)
                or a function/bound method to call. A plain function is bound to
                ``instance`` only when it is defined as a method on its class; static
                methods and free functions are called as they are.

        """
        if isinstance(method, str):
            method_name = method
            bound_method = self._find_method(instance, method_name)
        else:
            method_name = getattr(method, "__name__", repr(method))
            bound_method = method
            if inspect.isfunction(method) and _is_instance_method(type(instance), method):
                bound_method = method.__get__(instance, type(instance))

        context = f"invoking {method_name} on {type(instance).__qualname__}"
        logger.debug("Invoking %s on %s", method_name, type(instance).__qualname__)
        parameters = self._parameter_inspector.inspect_callable(bound_method)
        return self._call(bound_method, parameters, context)

    def _call(
        self,
        target: Callable[..., Any],
        parameters: tuple[ParameterDescriptor, ...],
        context: str,
    ) -> Any:
        values = self._parameter_resolver.resolve(parameters, context)
        args, kwargs = self._parameter_resolver.bind(parameters, values)
        return target(*args, **kwargs)

    def _validate_instantiable(self, concrete_type: Any) -> type[Any]:
        origin = runtime_origin(concrete_type)
        if origin is None:
            msg = f"Cannot instantiate {describe_key(concrete_type)}: it is not a class."
            raise DIContainerConfigurationError(msg, concrete_type=concrete_type)
        if inspect.isabstract(origin) or is_protocol_class(origin):
            msg = f"Cannot instantiate abstract type {describe_key(concrete_type)}."
            raise DIContainerConfigurationError(msg, concrete_type=concrete_type)
        if has_free_type_variables(concrete_type):
            msg = f"Cannot instantiate generic type {describe_key(concrete_type)}."
            raise DIContainerConfigurationError(msg, concrete_type=concrete_type)
        return origin

    def _eligible_constructor(
        self,
        concrete_type: Any,
        origin: type[Any],
    ) -> tuple[Callable[..., Any], tuple[ParameterDescriptor, ...]]:
        marked_names = self._marked_constructor_names(origin)
        if len(marked_names) > 1:
            names = ", ".join(marked_names)
            msg = (
                f"Type {describe_key(concrete_type)} has more than one eligible "
                f"constructor: {names}."
            )
            raise DIContainerConfigurationError(msg, concrete_type=concrete_type)

        if marked_names and marked_names[0] != "__init__":
            factory = getattr(origin, marked_names[0])
            return factory, self._parameter_inspector.inspect_callable(factory)

        try:
            parameters = self._parameter_inspector.inspect_class(origin)
        except (TypeError, ValueError) as error:
            msg = f"Type {describe_key(concrete_type)} has no eligible constructor."
            raise DIContainerConfigurationError(msg, concrete_type=concrete_type) from error
        return concrete_type, parameters

    def _marked_constructor_names(self, origin: type[Any]) -> list[str]:
        seen: set[str] = set()
        marked: list[str] = []
        for klass in origin.__mro__:
            for name, member in vars(klass).items():
                if name in seen:
                    continue
                seen.add(name)
                if is_constructor(member):
                    marked.append(name)
        return marked

    def _find_method(self, instance: Any, method_name: str) -> Callable[..., Any]:
        candidates = [method_name]
        if method_name.startswith("__") and not method_name.endswith("__"):
            candidates.extend(
                f"_{klass.__name__.lstrip('_')}{method_name}" for klass in type(instance).__mro__
            )

        for candidate in candidates:
            member = getattr(instance, candidate, _MISSING)
            if member is not _MISSING and callable(member):
                return member

        msg = f"Method {method_name} not found on {type(instance).__qualname__}."
        raise DIContainerNotFoundError(msg, method_name=method_name)


def _is_instance_method(owner: type[Any], function: Callable[..., Any]) -> bool:
    """Return true when ``function`` is a plain method defined along ``owner``'s MRO."""
    return any(member is function for klass in owner.__mro__ for member in vars(klass).values())
