"""Shared pytest fixtures for dicontainer tests."""

import pytest

from dicontainer.container import Container
from dicontainer.registry import InstanceRegistry


@pytest.fixture()
def container() -> Container:
    """Default container with registration validation enabled."""
    return Container()


@pytest.fixture()
def registry() -> InstanceRegistry:
    """Empty instance registry."""
    return InstanceRegistry()
