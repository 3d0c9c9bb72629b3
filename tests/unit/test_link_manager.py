"""
Unit tests for LinkManager.

Covers:
    - URL validation (valid/invalid)
    - Alias validation (allowed chars, max length)
    - Alias collisions
    - Owner normalization and topic handling
    - Generated code shape and uniqueness
    - Resolution and analytics delegation
"""

import re
from datetime import datetime, timezone

import pytest

from linkpulse.errors import AliasConflict, AllocationExhausted, NotFound
from linkpulse.manager.link_manager import LinkManager
from linkpulse.manager.strategies import BaseStrategy
from linkpulse.storage.storage import Storage

from tests.conftest import TODAY

BASE62 = re.compile(r"^[0-9a-zA-Z]{8}$")
NOW = datetime(2024, 5, 7, 10, 30, tzinfo=timezone.utc)


@pytest.fixture
def manager():
    """Fresh LinkManager with in-memory storage and a fixed clock."""
    return LinkManager(storage=Storage(), clock=lambda: NOW)


# -------------------------
# URL validation
# -------------------------

@pytest.mark.parametrize(
    "url,is_valid",
    [
        ("https://example.com", True),
        ("http://example.com/path?q=1", True),
        ("ftp://bad.example.com", False),
        ("not-a-url", False),
        ("https://", False),
        ("", False),
    ],
)
def test_validate_url_format(manager, url, is_valid):
    if is_valid:
        assert BASE62.match(manager.create_link(url, "ann").code)
    else:
        with pytest.raises(ValueError, match="Invalid URL format"):
            manager.create_link(url, "ann")


# -------------------------
# Alias validation
# -------------------------

@pytest.mark.parametrize("alias", ["OK123", "aBc009", "Z", "9" * 32])
def test_alias_valid_chars_and_length(manager, alias):
    link = manager.create_link("https://example.com", "ann", alias=alias)
    assert link.code == alias
    assert link.is_custom_alias is True


@pytest.mark.parametrize("alias", ["bad-alias", "has space", "🐍", "123*!", "a" * 33])
def test_alias_invalid_chars_or_too_long(manager, alias):
    expected = "Alias too long" if len(alias) > 32 else "Alias must contain only 0-9a-zA-Z"
    with pytest.raises(ValueError, match=expected):
        manager.create_link("https://example.com", "ann", alias=alias)


def test_alias_collision_raises_even_for_same_url(manager):
    manager.create_link("https://one.com", "ann", alias="Launch")
    with pytest.raises(AliasConflict):
        manager.create_link("https://one.com", "ann", alias="Launch")
    with pytest.raises(AliasConflict):
        manager.create_link("https://two.com", "bob", alias="Launch")


def test_alias_is_case_sensitive(manager):
    manager.create_link("https://one.com", "ann", alias="Launch")
    assert manager.create_link("https://two.com", "ann", alias="launch").code == "launch"


def test_alias_may_not_shadow_generated_code(manager):
    generated = manager.create_link("https://one.com", "ann").code
    with pytest.raises(AliasConflict):
        manager.create_link("https://two.com", "ann", alias=generated)


# -------------------------
# Creation details
# -------------------------

def test_create_link_fields(manager):
    link = manager.create_link("https://example.com", "  Ann@Example.COM ", topic="launch")
    stored = manager.storage.get_link(link.code)
    assert stored.owner == "ann@example.com"
    assert stored.topic == "launch"
    assert stored.is_custom_alias is False
    assert stored.click_count == 0 and stored.events == []
    assert stored.created_at == link.created_at == NOW


def test_empty_topic_is_stored_as_none(manager):
    link = manager.create_link("https://example.com", "ann", topic="")
    assert manager.storage.get_link(link.code).topic is None


def test_owner_is_required(manager):
    with pytest.raises(ValueError, match="Owner is required"):
        manager.create_link("https://example.com", "   ")


def test_same_url_gets_distinct_codes(manager):
    codes = {manager.create_link("https://same.com", "ann").code for _ in range(50)}
    assert len(codes) == 50


def test_generated_exhaustion_surfaces():
    class Stuck(BaseStrategy):
        def generate(self, *, length=None):
            return "stuck000"

    manager = LinkManager(storage=Storage(), code_strategy=Stuck(), max_attempts=3)
    manager.create_link("https://one.com", "ann")
    with pytest.raises(AllocationExhausted):
        manager.create_link("https://two.com", "ann")


# -------------------------
# Resolution & analytics delegation
# -------------------------

def test_resolve_and_link_analytics(manager):
    code = manager.create_link("https://example.com", "ann").code
    assert manager.resolve(code, "Mozilla/5.0 (Windows NT 10.0)", "1.2.3.4") == "https://example.com"

    stats = manager.get_link_analytics(code, today=TODAY)
    assert stats.total_clicks == 1
    assert stats.os_breakdown[0].name == "Windows"
    # NOW is 2024-05-07 10:30 UTC; the slot depends on the local calendar.
    assert sum(d.click_count for d in stats.clicks_by_date) in (0, 1)


def test_resolve_unknown_code(manager):
    with pytest.raises(NotFound):
        manager.resolve("nope", "ua", "1.2.3.4")


def test_topic_and_owner_analytics(manager):
    a = manager.create_link("https://a.com", "ann", topic="t1").code
    manager.create_link("https://b.com", "ann", topic="t1")
    manager.resolve(a, "ua", "1.1.1.1")

    topic = manager.get_topic_analytics("t1", today=TODAY)
    assert topic.total_clicks == 1 and len(topic.links) == 2

    owner = manager.get_owner_analytics("ANN", today=TODAY)
    assert owner.link_count == 2 and owner.total_clicks == 1
