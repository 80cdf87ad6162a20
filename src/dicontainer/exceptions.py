from __future__ import annotations

from typing import Any

from dicontainer._internal.type_checks import describe_key


class DIContainerError(Exception):
    """Represent a base class for all dicontainer-specific failures.

    Catch this type when you want to handle any container error path without
    matching each concrete exception class individually.
    """


class DIContainerNotFoundError(DIContainerError):
    """Signal that a strict lookup did not find exactly one match.

    Raised by ``Container.resolve`` when a capability has zero or more than one
    registered instance, and by ``Container.invoke`` when the named method does
    not exist on the target instance.

    Typical fixes include registering the capability before resolving it, or
    using ``resolve_all`` when several implementations are expected.
    """

    def __init__(
        self,
        msg: str,
        *,
        capability: Any = None,
        method_name: str | None = None,
        count: int = 0,
    ) -> None:
        super().__init__(msg)
        self.capability = capability
        self.method_name = method_name
        self.count = count


class DIContainerConfigurationError(DIContainerError):
    """Signal a type that cannot be constructed by the container.

    Raised by ``Container.instantiate`` (and the ``add_concrete*`` helpers) for
    abstract classes, protocols, unbound generics, and classes that expose zero
    or more than one eligible constructor.

    Typical fixes include registering a concrete implementation, closing the
    generic (``Box[int]`` instead of ``Box``), or marking exactly one
    constructor with ``@constructor``.
    """

    def __init__(self, msg: str, *, concrete_type: Any = None) -> None:
        super().__init__(msg)
        self.concrete_type = concrete_type


class DIContainerInvalidRegistrationError(DIContainerConfigurationError):
    """Signal an instance that cannot be registered under a capability.

    Raised by registration APIs when the instance is ``None`` or, with
    registration validation enabled, when it is not an instance of the class
    it is being registered under.
    """


class DIContainerResolutionError(DIContainerError):
    """Signal a constructor or method parameter that cannot be satisfied.

    The error carries the missing ``capability``, the ``parameter_name`` and a
    ``context`` string describing the enclosing instantiate/invoke call, so the
    message reads like
    ``Cannot resolve Logger for parameter 'logger' while instantiating Service``.

    When the parameter's string annotation could not be evaluated (for example a
    name imported only under ``TYPE_CHECKING``), ``capability`` is that string,
    ``reason`` explains the failure and the original error is chained as
    ``__cause__``.

    Typical fixes include registering the capability before the dependent class
    is instantiated, or giving the parameter a default value.
    """

    def __init__(
        self,
        capability: Any,
        parameter_name: str,
        context: str,
        *,
        reason: str | None = None,
    ) -> None:
        self.capability = capability
        self.parameter_name = parameter_name
        self.context = context
        self.reason = reason
        msg = (
            f"Cannot resolve {describe_key(capability)} for parameter '{parameter_name}' "
            f"while {context}"
        )
        if reason is not None:
            msg = f"{msg}: {reason}"
        super().__init__(msg)
