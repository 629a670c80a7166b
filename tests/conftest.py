"""
Pytest configuration and fixtures for notifier tests.

Provides a manual scheduler, a store driven by it, and a Notifier bound to
that store. The process-wide store is reset around every test.
"""

from unittest.mock import MagicMock

import pytest

from notifier.config import NotifierConfig
from notifier.notify import Notifier
from notifier.store import NotificationStore, reset_store
from tests.mocks import ManualScheduler

# =============================
# Scheduler / Store Fixtures
# =============================


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Virtual clock starting at t=0 ms."""
    return ManualScheduler()


@pytest.fixture
def config() -> NotifierConfig:
    """Default configuration, isolated from NOTIFIER_ environment variables."""
    return NotifierConfig(_env_file=None)


@pytest.fixture
def store(config: NotifierConfig, scheduler: ManualScheduler) -> NotificationStore:
    """Store installed as the process-wide singleton, driven by the manual scheduler."""
    return reset_store(NotificationStore(config=config, scheduler=scheduler))


@pytest.fixture
def notifier(store: NotificationStore) -> Notifier:
    """Facade bound explicitly to the test store."""
    return Notifier(store)


@pytest.fixture
def listener(store: NotificationStore) -> MagicMock:
    """Listener subscribed to the test store."""
    mock = MagicMock()
    store.subscribe(mock)
    return mock


@pytest.fixture(autouse=True)
def _reset_global_store():
    yield
    reset_store()
