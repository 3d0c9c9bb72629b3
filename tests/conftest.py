"""
Global pytest fixtures for the LinkPulse test suite.

Responsibilities:
    - Provide isolated in-memory Storage fixtures for direct testing
    - Provide a LinkManager wired to the Storage fixture (unit/integration)
    - Provide a fresh FastAPI TestClient via the app factory for integration tests
    - Provide helpers to build click events on a fixed local calendar

Why an app factory?
    Using `create_app(storage)` ensures each test gets fresh in-memory state,
    eliminating cross-test flakiness.
"""

from datetime import date, datetime, time, timedelta

import pytest
from fastapi.testclient import TestClient

from linkpulse.manager.link_manager import LinkManager
from linkpulse.models import ClickEvent
from linkpulse.storage.storage import Storage
from main import create_app

TODAY = date(2024, 5, 7)
DEMO_AUTH = ("demo@linkpulse.local", "demo")


def local_ts(day: date, hour: int = 12) -> datetime:
    """Aware timestamp that falls on `day` in the process's local calendar."""
    return datetime.combine(day, time(hour)).astimezone()


def make_event(days_ago: int = 0, agent: str = "", address: str = "10.0.0.1") -> ClickEvent:
    return ClickEvent(
        timestamp=local_ts(TODAY - timedelta(days=days_ago)),
        agent_string=agent or None,
        address=address,
    )


@pytest.fixture
def storage() -> Storage:
    """Fresh in-memory Storage backend."""
    return Storage()


@pytest.fixture
def manager(storage: Storage) -> LinkManager:
    """LinkManager wired to the storage fixture, using the configured strategy."""
    return LinkManager(storage=storage)


@pytest.fixture
def app_storage() -> Storage:
    return Storage()


@pytest.fixture
def client(app_storage: Storage) -> TestClient:
    """
    Fresh TestClient around a new app instance backed by `app_storage`.

    Tests that need to inspect stored state can request `app_storage` too.
    """
    return TestClient(create_app(storage=app_storage))


@pytest.fixture
def auth():
    """Credentials of the default demo owner."""
    return DEMO_AUTH
