"""
Domain records for LinkPulse.

A `Link` is one short-URL registration; every successful redirect appends a
`ClickEvent` to it. These are the logical shapes every storage backend must
be able to represent. Backends hand out copies, so callers may read a
Link freely without affecting stored state.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import List, Optional


def utcnow() -> datetime:
    """Timezone-aware current instant (UTC)."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Location:
    """Reserved geolocation pair; never populated or aggregated."""
    country: Optional[str] = None
    city: Optional[str] = None


@dataclass(frozen=True)
class ClickEvent:
    timestamp: datetime
    agent_string: Optional[str] = None
    address: Optional[str] = None
    location: Optional[Location] = None


@dataclass
class Link:
    """
    One registered mapping from a public code to a target URL.

    Invariants:
        - `code` is unique across all links (enforced by the store).
        - `click_count == len(events)`; both change only through the store's
          atomic append-and-increment.
    """
    code: str
    target: str
    owner: str
    is_custom_alias: bool = False
    topic: Optional[str] = None
    click_count: int = 0
    created_at: datetime = field(default_factory=utcnow)
    events: List[ClickEvent] = field(default_factory=list)

    def snapshot(self) -> "Link":
        """Return a copy whose event list is detached from this instance."""
        return replace(self, events=list(self.events))


def normalize_owner(owner: str) -> str:
    """Owners are case-insensitive identities (e-mail style); store them lower-cased."""
    return (owner or "").strip().lower()
