from __future__ import annotations

from collections.abc import Sequence
from inspect import Parameter
from typing import Annotated, Optional

import pytest

from dicontainer.collection_adapter import CollectionAdapter
from dicontainer.exceptions import DIContainerResolutionError
from dicontainer.parameters import ParameterDescriptor, ParameterInspector, ParameterResolver
from dicontainer.registry import InstanceRegistry


class _Logger:
    pass


class _Plugin:
    pass


_DEFAULT_LOGGER = _Logger()


@pytest.fixture()
def resolver(registry: InstanceRegistry) -> ParameterResolver:
    return ParameterResolver(registry, CollectionAdapter(registry))


def _positional_only(logger: _Logger, /, plugins: tuple[_Plugin, ...], *, name: str = "x") -> None:
    pass


def _variadic(logger: _Logger, *args: int, **kwargs: int) -> None:
    pass


def _unannotated(logger, value=3) -> None:  # type: ignore[no-untyped-def]  # noqa: ANN001
    pass


def test_single_capability_resolves_registered_instance(
    registry: InstanceRegistry,
    resolver: ParameterResolver,
) -> None:
    logger = _Logger()
    registry.add(_Logger, logger)

    values = resolver.resolve([ParameterDescriptor(name="logger", annotation=_Logger)], "testing")

    assert values == [logger]


def test_default_is_used_when_capability_is_missing(resolver: ParameterResolver) -> None:
    parameter = ParameterDescriptor(name="logger", annotation=_Logger, default=_DEFAULT_LOGGER)

    assert resolver.resolve([parameter], "testing") == [_DEFAULT_LOGGER]


def test_registered_instance_wins_over_default(
    registry: InstanceRegistry,
    resolver: ParameterResolver,
) -> None:
    logger = _Logger()
    registry.add(_Logger, logger)
    parameter = ParameterDescriptor(name="logger", annotation=_Logger, default=_DEFAULT_LOGGER)

    assert resolver.resolve([parameter], "testing") == [logger]


def test_default_is_used_when_capability_is_ambiguous(
    registry: InstanceRegistry,
    resolver: ParameterResolver,
) -> None:
    registry.add(_Logger, _Logger())
    registry.add(_Logger, _Logger())
    parameter = ParameterDescriptor(name="logger", annotation=_Logger, default=_DEFAULT_LOGGER)

    assert resolver.resolve([parameter], "testing") == [_DEFAULT_LOGGER]


def test_missing_capability_without_default_raises_with_context(
    resolver: ParameterResolver,
) -> None:
    parameter = ParameterDescriptor(name="logger", annotation=_Logger)

    with pytest.raises(DIContainerResolutionError) as exc_info:
        resolver.resolve([parameter], "instantiating Service")

    error = exc_info.value
    assert error.capability is _Logger
    assert error.parameter_name == "logger"
    assert error.context == "instantiating Service"
    assert str(error) == "Cannot resolve _Logger for parameter 'logger' while instantiating Service"


def test_collection_parameter_never_fails(resolver: ParameterResolver) -> None:
    parameters = [
        ParameterDescriptor(name="plugins", annotation=tuple[_Plugin, ...]),
        ParameterDescriptor(name="sequence", annotation=Sequence[_Plugin]),
        ParameterDescriptor(name="listed", annotation=list[_Plugin]),
    ]

    assert resolver.resolve(parameters, "testing") == [(), (), []]


def test_optional_capability_falls_back_to_none(
    registry: InstanceRegistry,
    resolver: ParameterResolver,
) -> None:
    parameters = [
        ParameterDescriptor(name="first", annotation=_Logger | None),
        ParameterDescriptor(name="second", annotation=Optional[_Logger]),  # noqa: UP007
    ]

    assert resolver.resolve(parameters, "testing") == [None, None]

    logger = _Logger()
    registry.add(_Logger, logger)

    assert resolver.resolve(parameters, "testing") == [logger, logger]


def test_optional_capability_prefers_declared_default(resolver: ParameterResolver) -> None:
    parameter = ParameterDescriptor(
        name="logger",
        annotation=_Logger | None,
        default=_DEFAULT_LOGGER,
    )

    assert resolver.resolve([parameter], "testing") == [_DEFAULT_LOGGER]


def test_resolution_is_fail_fast_in_declaration_order(
    registry: InstanceRegistry,
    resolver: ParameterResolver,
) -> None:
    registry.add(_Plugin, _Plugin())
    parameters = [
        ParameterDescriptor(name="plugin", annotation=_Plugin),
        ParameterDescriptor(name="logger", annotation=_Logger),
        ParameterDescriptor(name="other", annotation=int),
    ]

    with pytest.raises(DIContainerResolutionError) as exc_info:
        resolver.resolve(parameters, "testing")

    assert exc_info.value.parameter_name == "logger"


def test_resolution_reads_registry_at_call_time(
    registry: InstanceRegistry,
    resolver: ParameterResolver,
) -> None:
    parameters = [ParameterDescriptor(name="plugins", annotation=tuple[_Plugin, ...])]
    assert resolver.resolve(parameters, "testing") == [()]

    plugin = _Plugin()
    registry.add(_Plugin, plugin)

    assert resolver.resolve(parameters, "testing") == [(plugin,)]


def test_unannotated_parameter_uses_default_or_fails(resolver: ParameterResolver) -> None:
    parameters = ParameterInspector().inspect_callable(_unannotated)

    assert parameters[0].annotation is Parameter.empty
    assert resolver.resolve_parameter(parameters[1], "testing") == 3
    with pytest.raises(DIContainerResolutionError, match="unannotated value for parameter 'logger'"):
        resolver.resolve(parameters, "testing")


def test_inspector_skips_variadic_parameters() -> None:
    parameters = ParameterInspector().inspect_callable(_variadic)

    assert [parameter.name for parameter in parameters] == ["logger"]
    assert parameters[0].annotation is _Logger


def test_bind_passes_positional_only_parameters_positionally(
    registry: InstanceRegistry,
    resolver: ParameterResolver,
) -> None:
    logger = _Logger()
    registry.add(_Logger, logger)
    parameters = ParameterInspector().inspect_callable(_positional_only)

    values = resolver.resolve(parameters, "testing")
    args, kwargs = resolver.bind(parameters, values)

    assert args == (logger,)
    assert kwargs == {"plugins": (), "name": "x"}


def test_annotated_capability_is_unwrapped(
    registry: InstanceRegistry,
    resolver: ParameterResolver,
) -> None:
    logger = _Logger()
    registry.add(_Logger, logger)
    parameters = [
        ParameterDescriptor(name="logger", annotation=Annotated[_Logger, "primary"]),
        ParameterDescriptor(name="maybe", annotation=Annotated[_Logger, "primary"] | None),
        ParameterDescriptor(name="plugins", annotation=Annotated[tuple[_Plugin, ...], "all"]),
    ]

    assert resolver.resolve(parameters, "testing") == [logger, logger, ()]


def test_exact_annotated_registration_wins_over_unwrapped(
    registry: InstanceRegistry,
    resolver: ParameterResolver,
) -> None:
    primary = _Logger()
    registry.add(_Logger, _Logger())
    registry.add(Annotated[_Logger, "primary"], primary)
    parameter = ParameterDescriptor(name="logger", annotation=Annotated[_Logger, "primary"])

    assert resolver.resolve_parameter(parameter, "testing") is primary


def test_optional_collection_resolves_every_instance(
    registry: InstanceRegistry,
    resolver: ParameterResolver,
) -> None:
    first = _Plugin()
    second = _Plugin()
    registry.add(_Plugin, first)
    registry.add(_Plugin, second)
    parameters = [
        ParameterDescriptor(name="sequence", annotation=Optional[Sequence[_Plugin]]),  # noqa: UP007
        ParameterDescriptor(name="listed", annotation=list[_Plugin] | None),
    ]

    assert resolver.resolve(parameters, "testing") == [(first, second), [first, second]]
