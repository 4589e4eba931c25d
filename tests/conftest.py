"""pytest configuration and fixtures for storescope tests."""

import pytest

from storescope import create_store, defaults, default_registry


@pytest.fixture(autouse=True)
def _clean_globals():
    """Each test starts with built-in settings and an empty global registry."""
    defaults.reset()
    default_registry.clear()
    yield
    defaults.reset()
    default_registry.clear()


def increment(by=1):
    def thunk(api, props):
        api.set_state(api.get_state() + by)
    return thunk


@pytest.fixture
def counter():
    """Counter store: initial 0, increment(by=1) adds to the state."""
    return create_store(0, {"increment": increment}, name="counter")
