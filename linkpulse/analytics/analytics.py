"""
Analytics module for LinkPulse.

Responsibilities:
    - Fold stored click events into rollup statistics
    - Serve three scopes over the same algorithm: one link, one topic, one owner

Statistics (per scope):
    - total_clicks: number of events
    - unique_visitors: number of distinct client addresses
    - clicks_by_date: 7 slots, today and the 6 preceding local calendar days,
      oldest first; days without clicks are present with a count of 0
    - os_breakdown / device_breakdown: one record per category that occurred,
      with its raw click count and its distinct addresses

Design:
    - ClickAccumulator makes a single pass: each event updates every metric at once.
    - Dates use the local calendar of the process (`astimezone()`), not the
      viewer's timezone.
    - Reads work on snapshots returned by the store; nothing here writes.

LLM Prompt Example:
    "Explain how to compute totals, distinct counts, a zero-filled daily series
     and categorical breakdowns in one pass over an event stream."
"""

from dataclasses import asdict, dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Set

from ..errors import NoRecordsFound, NotFound
from ..models import ClickEvent, Link, normalize_owner
from ..storage.base import BaseStorage
from .base import BaseAnalytics
from .classifier import classify_device, classify_os

WINDOW_DAYS = 7


@dataclass
class CategoryStats:
    name: str
    unique_clicks: int
    unique_visitors: int


@dataclass
class DailyCount:
    date: date
    click_count: int


@dataclass
class LinkSummary:
    """Per-link line inside a topic rollup."""
    code: str
    total_clicks: int
    unique_visitors: int


@dataclass
class ClickStats:
    total_clicks: int
    unique_visitors: int
    clicks_by_date: List[DailyCount]
    os_breakdown: List[CategoryStats]
    device_breakdown: List[CategoryStats]

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation (dates as ISO strings)."""
        data = asdict(self)
        data["clicks_by_date"] = [
            {"date": d.date.isoformat(), "click_count": d.click_count} for d in self.clicks_by_date
        ]
        return data


@dataclass
class LinkStats(ClickStats):
    code: str = ""


@dataclass
class TopicStats(ClickStats):
    topic: str = ""
    links: List[LinkSummary] = field(default_factory=list)


@dataclass
class OwnerStats(ClickStats):
    owner: str = ""
    link_count: int = 0


class _Bucket:
    __slots__ = ("clicks", "visitors")

    def __init__(self):
        self.clicks = 0
        self.visitors: Set[Optional[str]] = set()


class ClickAccumulator:
    """
    Single-pass accumulator over click events.

    Usage:
        acc = ClickAccumulator(today=date(2024, 5, 7))
        acc.add_all(link.events)
        stats = acc.stats()
    """

    def __init__(self, today: Optional[date] = None, window_days: int = WINDOW_DAYS):
        today = today or date.today()
        self._by_date: Dict[date, int] = {
            today - timedelta(days=offset): 0 for offset in range(window_days - 1, -1, -1)
        }
        self.total_clicks = 0
        self._visitors: Set[Optional[str]] = set()
        self._os: Dict[str, _Bucket] = {}
        self._device: Dict[str, _Bucket] = {}

    @property
    def unique_visitors(self) -> int:
        return len(self._visitors)

    def add(self, event: ClickEvent) -> None:
        address = event.address
        self.total_clicks += 1
        self._visitors.add(address)

        day = event.timestamp.astimezone().date()
        if day in self._by_date:
            self._by_date[day] += 1

        for buckets, category in (
            (self._os, classify_os(event.agent_string)),
            (self._device, classify_device(event.agent_string)),
        ):
            bucket = buckets.get(category)
            if bucket is None:
                bucket = buckets[category] = _Bucket()
            bucket.clicks += 1
            bucket.visitors.add(address)

    def add_all(self, events: Iterable[ClickEvent]) -> "ClickAccumulator":
        for event in events:
            self.add(event)
        return self

    def stats(self, cls=ClickStats, **extra) -> ClickStats:
        """Materialize the accumulated state as `cls` (ClickStats or a subclass)."""
        return cls(
            total_clicks=self.total_clicks,
            unique_visitors=self.unique_visitors,
            clicks_by_date=[DailyCount(date=d, click_count=n) for d, n in self._by_date.items()],
            os_breakdown=_breakdown(self._os),
            device_breakdown=_breakdown(self._device),
            **extra,
        )


def _breakdown(buckets: Dict[str, _Bucket]) -> List[CategoryStats]:
    return [
        CategoryStats(name=name, unique_clicks=b.clicks, unique_visitors=len(b.visitors))
        for name, b in buckets.items()
    ]


class Analytics(BaseAnalytics):
    """Storage-backed analytics: fetch the scope's links, then fold their events."""

    def __init__(self, storage: BaseStorage):
        self.storage = storage

    def link_stats(self, code: str, today: Optional[date] = None) -> LinkStats:
        link = self.storage.get_link(code)
        if link is None:
            raise NotFound(f"Short URL not found: {code}")
        return ClickAccumulator(today).add_all(link.events).stats(LinkStats, code=link.code)

    def topic_stats(self, topic: str, today: Optional[date] = None) -> TopicStats:
        links = self.storage.find_by_topic(topic)
        if not links:
            raise NoRecordsFound(f"No URLs found for topic: {topic}")

        overall = ClickAccumulator(today)
        summaries: List[LinkSummary] = []
        for link in links:
            own = ClickAccumulator(today)
            for event in link.events:
                overall.add(event)
                own.add(event)
            summaries.append(LinkSummary(
                code=link.code,
                total_clicks=own.total_clicks,
                unique_visitors=own.unique_visitors,
            ))
        return overall.stats(TopicStats, topic=topic, links=summaries)

    def owner_stats(self, owner: str, today: Optional[date] = None) -> OwnerStats:
        owner = normalize_owner(owner)
        links = self.storage.find_by_owner(owner)
        if not links:
            raise NoRecordsFound(f"No URLs found for owner: {owner}")
        return _fold(links, today).stats(OwnerStats, owner=owner, link_count=len(links))


def _fold(links: Iterable[Link], today: Optional[date]) -> ClickAccumulator:
    acc = ClickAccumulator(today)
    for link in links:
        acc.add_all(link.events)
    return acc
