"""Pytest fixtures for tests that build object graphs with a container.

Enable the plugin from a test module or the root ``conftest.py``::

    pytest_plugins = ["dicontainer.integrations.pytest_plugin"]
"""

from __future__ import annotations

import pytest

from dicontainer.container import Container


@pytest.fixture()
def dicontainer_container() -> Container:
    """Create a per-test container.

    The fixture is function-scoped, so registrations are isolated between tests
    unless users override fixture scope explicitly. Override the fixture in a
    ``conftest.py`` to pre-register shared test doubles.

    Returns:
        A new ``Container`` instance.

    """
    return Container()
