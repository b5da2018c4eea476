"""Shared pytest fixtures for obytkem tests."""
import sys
sys.dont_write_bytecode = True

import pytest  # noqa: E402

from helpers import make_lifecycle, make_store  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_runtime():
    """Drop cached settings/lifecycle so tests never share process state."""
    from obytkem.api import runtime

    runtime.reset()
    yield
    runtime.reset()


@pytest.fixture
def store():
    return make_store()


@pytest.fixture
def lifecycle(store):
    return make_lifecycle(store)
