from datetime import datetime, timezone

import pytest

from linkpulse.errors import NotFound, StoreUnavailable
from linkpulse.manager.resolver import RedirectResolver
from linkpulse.models import Link
from linkpulse.storage.storage import Storage

NOW = datetime(2024, 5, 7, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def storage():
    s = Storage()
    s.insert_link(Link(code="abc12345", target="https://example.com", owner="ann"))
    return s


def test_resolve_records_event_and_returns_target(storage):
    resolver = RedirectResolver(storage, clock=lambda: NOW)
    assert resolver.resolve("abc12345", "Mozilla/5.0", "1.2.3.4") == "https://example.com"

    link = storage.get_link("abc12345")
    assert link.click_count == 1
    (event,) = link.events
    assert event.timestamp == NOW
    assert event.agent_string == "Mozilla/5.0"
    assert event.address == "1.2.3.4"
    assert event.location is None


def test_resolve_normalizes_empty_agent_and_address(storage):
    RedirectResolver(storage).resolve("abc12345", "", "")
    (event,) = storage.get_link("abc12345").events
    assert event.agent_string is None and event.address is None


def test_resolve_unknown_code_raises_and_writes_nothing(storage):
    with pytest.raises(NotFound):
        RedirectResolver(storage).resolve("missing", "ua", "1.2.3.4")
    assert storage.get_link("abc12345").click_count == 0


def test_resolve_is_case_sensitive(storage):
    with pytest.raises(NotFound):
        RedirectResolver(storage).resolve("ABC12345")


def test_store_failure_is_not_masked(storage, monkeypatch):
    def boom(code, event):
        raise StoreUnavailable("down")

    monkeypatch.setattr(storage, "append_event_and_increment", boom)
    with pytest.raises(StoreUnavailable):
        RedirectResolver(storage).resolve("abc12345")
