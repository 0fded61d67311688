"""Pytest configuration and fixtures for tycoon tests."""

import os

import pytest

import tycoon.systems  # noqa: F401 - register all systems
from tycoon import logging
from tycoon.core.registry import clear_registry
from tycoon.finance import Finance


@pytest.fixture
def clean_registry():
    """
    Save registry state, clear it for the test, then restore it.

    DO NOT use autouse=True, as it would interfere with integration tests
    that rely on the built-in systems being registered.
    """
    # noinspection PyProtectedMember
    from tycoon.core.registry import _SYSTEM_REGISTRY

    saved = dict(_SYSTEM_REGISTRY)
    clear_registry()

    yield

    _SYSTEM_REGISTRY.clear()
    _SYSTEM_REGISTRY.update(saved)


@pytest.fixture
def fin() -> Finance:
    """A fresh Finance with an empty wallet and no starter loan."""
    return Finance.init(starter_loan=None)


@pytest.fixture
def catalog(fin):
    return fin.catalog


@pytest.fixture(autouse=True)
def mute_tycoon_logs(caplog):
    # DEBUG on the coverage run so every logging branch executes
    if os.environ.get("COVERAGE_RUN") == "true":
        level = logging.DEBUG
    else:
        level = logging.ERROR

    caplog.set_level(level, logger="tycoon")
    logging.getLogger("tycoon").setLevel(level)
