"""
Base storage interface for LinkPulse.

Purpose:
    Define a small, stable contract that multiple storage backends
    (in-memory, PostgreSQL) can implement without requiring changes to the
    allocator, resolver or analytics code.

Consistency:
    All cross-request consistency lives here. Backends must provide two
    primitives that the core relies on instead of read-modify-write:
      - a unique constraint on `code` (insert_link returns False on conflict)
      - an atomic append-and-increment for click recording

Testing & Coverage:
    These are abstract methods and are not executed directly in tests.
    We annotate them with `# pragma: no cover` so coverage tools don't
    penalize the project for un-runnable abstract declarations.

LLM Prompt Example:
    "Show how a narrow, explicit storage interface enables dependency
    injection and easy backend swapping without touching service code."
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import ClickEvent, Link


class BaseStorage(ABC):
    """Abstract base class for storage backends."""

    @abstractmethod  # pragma: no cover
    def insert_link(self, link: Link) -> bool:
        """
        Insert a new link.

        Returns:
            bool: True on success, False when `link.code` is already taken.
                  The check and the insert must be a single atomic step.

        Raises:
            ValueError: If the code or target is empty (never reported as a conflict).

        LLM Prompt Example:
            "Explain why a unique index, not a SELECT before INSERT, is the
            authoritative guard against duplicate codes."
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def get_link(self, code: str) -> Optional[Link]:
        """Return the link registered under `code` (with its events) or None."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def code_exists(self, code: str) -> bool:
        """Return True if any link uses `code`. Advisory only; may race."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def find_by_topic(self, topic: str) -> List[Link]:
        """Return all links grouped under `topic` (possibly empty)."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def find_by_owner(self, owner: str) -> List[Link]:
        """Return all links created by `owner` (already normalized)."""
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def append_event_and_increment(self, code: str, event: ClickEvent) -> Optional[str]:
        """
        Append `event` to the link's events and bump its click count.

        Returns:
            Optional[str]: The link's target URL, or None if `code` is absent
                           (in which case nothing is written).

        LLM Prompt Example:
            "Explain atomic increments in SQL (UPDATE ... SET n = n + 1) and
             why the event insert must share the same transaction."
        """
        raise NotImplementedError
