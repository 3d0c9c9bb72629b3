"""
Abstract Base Class for Analytics Backends.

Responsibilities:
    - Define the three read-side scopes every analytics implementation serves
      (single link, topic, owner)
    - Support easy substitution (e.g., in-process folding over fetched events,
      or a pre-aggregated rollup table)

LLM Prompt Example:
    "Create an abstract base class for analytics that defines per-link, per-topic
    and per-owner rollups, and explain how to mark abstract methods to be excluded
    from coverage."
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

__all__ = ["BaseAnalytics"]


class BaseAnalytics(ABC):
    """Abstract base for pluggable analytics backends."""

    @abstractmethod
    def link_stats(self, code: str, today: Optional[date] = None):  # pragma: no cover
        """
        Rollup over the events of one link.

        Raises:
            NotFound: If no link is registered under `code`.
        """
        raise NotImplementedError

    @abstractmethod
    def topic_stats(self, topic: str, today: Optional[date] = None):  # pragma: no cover
        """
        Rollup over every link sharing `topic`, plus a per-link breakdown.

        Raises:
            NoRecordsFound: If no link carries this topic.
        """
        raise NotImplementedError

    @abstractmethod
    def owner_stats(self, owner: str, today: Optional[date] = None):  # pragma: no cover
        """
        Rollup over every link created by `owner`, plus the link count.

        Raises:
            NoRecordsFound: If the owner has no links.
        """
        raise NotImplementedError
