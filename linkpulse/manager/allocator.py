"""
Alias allocation for LinkPulse.

Responsibilities:
    - Reserve a caller-chosen alias, rejecting one that is already registered
    - Otherwise produce a random (or sequential) candidate code
    - Insert the new link, treating the store's unique constraint as the
      authoritative guard against duplicates

Design notes:
    - The existence check in `allocate` is a fast path only. Between the check
      and the insert another request may claim the same code, so a rejected
      insert is handled exactly like a failed check: `AliasConflict` for a
      custom alias, a fresh candidate for a generated one.
    - Retries for generated codes are bounded by `max_attempts`.

LLM Prompt Example:
    "Explain why a check-then-insert flow needs the database's unique index to
     be race-free, and how bounded retries keep random allocation predictable."
"""

import logging
from typing import Callable, Optional

from ..errors import AliasConflict, AllocationExhausted
from ..models import Link
from ..storage.base import BaseStorage
from .strategies import BaseStrategy, get_strategy_from_config

log = logging.getLogger(__name__)

LinkBuilder = Callable[[str, bool], Link]  # (code, is_custom_alias) -> Link


class AliasAllocator:
    """Allocates collision-free public codes against a storage backend."""

    def __init__(
        self,
        storage: BaseStorage,
        strategy: Optional[BaseStrategy] = None,
        max_attempts: int = 5,
    ):
        self.storage = storage
        self.strategy = strategy or get_strategy_from_config()
        self.max_attempts = max(1, max_attempts)

    def allocate(self, requested_alias: Optional[str] = None) -> str:
        """
        Return a code for a new link.

        Args:
            requested_alias (Optional[str]): Caller-chosen code.

        Returns:
            str: The alias when one was requested, else a generated candidate.

        Raises:
            AliasConflict: If the requested alias is already registered.
        """
        if requested_alias:
            if self.storage.code_exists(requested_alias):
                raise AliasConflict(f"Custom alias already in use: {requested_alias}")
            return requested_alias
        return self.strategy.generate()

    def register(self, build_link: LinkBuilder, requested_alias: Optional[str] = None) -> Link:
        """
        Allocate a code, build the link and insert it.

        Raises:
            AliasConflict: Custom alias taken (at pre-check or at insert).
            AllocationExhausted: Every generated candidate collided.
        """
        if requested_alias:
            code = self.allocate(requested_alias)
            link = build_link(code, True)
            if not self.storage.insert_link(link):
                # Lost the race to a concurrent request for the same alias.
                raise AliasConflict(f"Custom alias already in use: {requested_alias}")
            return link

        for attempt in range(1, self.max_attempts + 1):
            link = build_link(self.allocate(), False)
            if self.storage.insert_link(link):
                return link
            log.warning("Generated code collided (attempt %d/%d)", attempt, self.max_attempts)

        log.error("Code allocation exhausted after %d attempts", self.max_attempts)
        raise AllocationExhausted(f"No free code after {self.max_attempts} attempts")
