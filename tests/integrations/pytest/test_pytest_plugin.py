from __future__ import annotations

from dicontainer.container import Container
from dicontainer.container_interface import IContainer


pytest_plugins = ["dicontainer.integrations.pytest_plugin"]


class _Clock:
    pass


def test_fixture_provides_fresh_container(dicontainer_container: Container) -> None:
    assert isinstance(dicontainer_container, Container)
    assert dicontainer_container.resolve(IContainer) is dicontainer_container
    assert dicontainer_container.contains(_Clock) is False

    dicontainer_container.add_concrete(_Clock)


def test_registrations_do_not_leak_between_tests(dicontainer_container: Container) -> None:
    assert dicontainer_container.contains(_Clock) is False
