from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence

import pytest

from dicontainer import (
    Container,
    DIContainerConfigurationError,
    DIContainerResolutionError,
    IContainer,
    constructor,
)


class Logger(ABC):
    @abstractmethod
    def log(self, message: str) -> None: ...


class MemoryLogger(Logger):
    def __init__(self) -> None:
        self.messages: list[str] = []

    def log(self, message: str) -> None:
        self.messages.append(message)


class Service:
    def __init__(self, logger: Logger) -> None:
        self.logger = logger


class Plugin(ABC):
    @abstractmethod
    def name(self) -> str: ...


class _NamedPlugin(Plugin):
    def __init__(self, label: str) -> None:
        self.label = label

    def name(self) -> str:
        return self.label


class PluginHost:
    def __init__(self, plugins: tuple[Plugin, ...], iterable: Iterable[Plugin]) -> None:
        self.plugins = plugins
        self.iterable = iterable


class Application:
    def __init__(self, container: IContainer, logger: Logger, timeout: float = 5.0) -> None:
        self.container = container
        self.logger = logger
        self.timeout = timeout
        self.started_with: Sequence[Plugin] = ()

    def start(self, plugins: Sequence[Plugin], logger: Logger) -> int:
        self.started_with = plugins
        logger.log("started")
        return len(plugins)


class Ambiguous:
    @constructor
    def __init__(self, logger: Logger) -> None:
        self.logger = logger

    @classmethod
    @constructor
    def create(cls) -> Ambiguous:
        return cls(MemoryLogger())


class Database:
    pass


class Repository:
    def __init__(self, database: Database) -> None:
        self.database = database


def test_service_receives_logger_registered_by_interface() -> None:
    container = Container()
    logger = MemoryLogger()
    container.add_interfaces(logger)

    container.add_concrete(Service)

    service = container.resolve(Service)
    assert service.logger is logger


def test_all_plugins_resolve_as_array_in_insertion_order() -> None:
    container = Container()
    plugins = [_NamedPlugin("a"), _NamedPlugin("b"), _NamedPlugin("c")]
    for plugin in plugins:
        container.add_interfaces(plugin)

    host = container.instantiate(PluginHost)

    assert isinstance(host.plugins, tuple)
    assert len(host.plugins) == 3
    assert all(resolved is plugin for resolved, plugin in zip(host.plugins, plugins))
    assert list(host.iterable) == plugins


def test_components_can_depend_on_the_container() -> None:
    container = Container()
    container.add_interfaces(MemoryLogger())

    application = container.instantiate(Application)

    assert application.container is container
    assert application.timeout == 5.0


def test_invoke_injects_late_registrations() -> None:
    container = Container()
    logger = MemoryLogger()
    container.add_interfaces(logger)
    application = container.add_concrete(Application)

    container.add_interfaces(_NamedPlugin("late"))
    started = container.invoke(application, "start")

    assert started == 1
    assert [plugin.name() for plugin in application.started_with] == ["late"]
    assert logger.messages == ["started"]


def test_registration_order_must_follow_dependencies() -> None:
    container = Container()

    with pytest.raises(DIContainerResolutionError) as exc_info:
        container.add_concrete(Repository)

    assert exc_info.value.capability is Database
    assert "while instantiating Repository" in str(exc_info.value)
    assert container.contains(Repository) is False

    container.add_concrete(Database)
    repository = container.add_concrete(Repository)
    assert repository.database is container.resolve(Database)


def test_configuration_errors_surface_at_instantiation() -> None:
    container = Container()
    container.add_interfaces(MemoryLogger())

    with pytest.raises(DIContainerConfigurationError):
        container.instantiate(Ambiguous)
    with pytest.raises(DIContainerConfigurationError):
        container.add_concrete(Logger)
