"""
LinkManager module for LinkPulse.

Responsibilities:
    - Create links under a generated code or a caller-chosen alias
    - Validate target URLs and aliases
    - Resolve codes for redirects while recording click events
    - Serve per-link, per-topic and per-owner analytics

Design notes:
    - This is the single entry point for the HTTP layer; it owns no state beyond
      its collaborators (storage, allocator, resolver, analytics).
    - Aliases act as "vanity codes": case-sensitive, Base62, at most 32 chars.
    - Uniqueness and click atomicity are delegated to the storage backend.
    - Extensible: code strategy is pluggable; storage is an injected dependency.

LLM Prompt Example:
    "Explain how a thin manager can compose an allocator, a resolver and an
    analytics service over one injected storage backend, keeping each concern
    testable in isolation."
"""

import logging
import re
from datetime import date
from typing import Callable, Optional
from urllib.parse import urlparse

from ..analytics.analytics import Analytics, LinkStats, OwnerStats, TopicStats
from ..config import settings
from ..models import Link, normalize_owner, utcnow
from ..storage.base import BaseStorage
from .allocator import AliasAllocator
from .resolver import RedirectResolver
from .strategies import BaseStrategy

Base62Pattern = re.compile(r"^[0-9a-zA-Z]+$")
MAX_ALIAS_LENGTH = 32

log = logging.getLogger(__name__)


class LinkManager:
    """
    Coordinates creation, resolution and analytics for links.

    LLM Prompt Example:
        "Show how DI enables swapping storage backends and code strategies
        without touching business logic or routes."
    """

    def __init__(
        self,
        storage: BaseStorage,
        code_strategy: Optional[BaseStrategy] = None,
        max_attempts: Optional[int] = None,
        clock: Callable = utcnow,
    ):
        """
        Initialize LinkManager with a storage backend.

        Args:
            storage (BaseStorage): Backend storage instance.
            code_strategy (Optional[BaseStrategy]): Code generation (defaults to config).
            max_attempts (Optional[int]): Insert attempts for generated codes (defaults to config).
            clock (Callable): Returns the current aware datetime; injectable for tests.
        """
        self.storage = storage
        self.clock = clock
        self.allocator = AliasAllocator(
            storage,
            strategy=code_strategy,
            max_attempts=max_attempts if max_attempts is not None else settings.MAX_ATTEMPTS,
        )
        self.resolver = RedirectResolver(storage, clock=clock)
        self.analytics = Analytics(storage)

    # ---------------------------------------------------------------------
    # Validation Helpers
    # ---------------------------------------------------------------------
    def _validate_url(self, url: str) -> None:
        """
        Validate that a URL has an http/https scheme and a netloc.

        Raises:
            ValueError: If the URL is malformed.
        """
        parsed = urlparse(url or "")
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError("Invalid URL format")

    def _validate_alias(self, alias: str) -> None:
        """
        Validate alias characters and length (max 32, Base62 only).

        Raises:
            ValueError: If alias contains invalid characters or is too long.
        """
        if not Base62Pattern.match(alias):
            raise ValueError("Alias must contain only 0-9a-zA-Z")
        if len(alias) > MAX_ALIAS_LENGTH:
            raise ValueError("Alias too long")

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    def create_link(
        self,
        target: str,
        owner: str,
        alias: Optional[str] = None,
        topic: Optional[str] = None,
    ) -> Link:
        """
        Register a new link for `target` on behalf of `owner`.

        Rules:
            - Validate URL format (http/https, netloc).
            - Owner is normalized to lower case and must be non-empty.
            - If alias provided: must be Base62 and <= 32 chars, and must be free.
            - If no alias: a random code is generated and retried on collision.

        Returns:
            Link: The stored link; `code` and `created_at` are what callers report.

        Raises:
            ValueError: On invalid URL, alias or owner.
            AliasConflict: If the alias is already registered.
            AllocationExhausted: If no free generated code was found.
        """
        self._validate_url(target)
        owner = normalize_owner(owner)
        if not owner:
            raise ValueError("Owner is required")
        if alias:
            self._validate_alias(alias)
        topic = topic or None
        created_at = self.clock()

        def build(code: str, is_custom: bool) -> Link:
            return Link(
                code=code,
                target=target,
                owner=owner,
                is_custom_alias=is_custom,
                topic=topic,
                created_at=created_at,
            )

        link = self.allocator.register(build, requested_alias=alias or None)
        log.info("Link created: code=%s owner=%s custom=%s", link.code, owner, link.is_custom_alias)
        return link

    def resolve(self, code: str, agent_string: Optional[str] = None, address: Optional[str] = None) -> str:
        """Record a click and return the target URL (raises NotFound)."""
        return self.resolver.resolve(code, agent_string, address)

    def get_link_analytics(self, code: str, today: Optional[date] = None) -> LinkStats:
        return self.analytics.link_stats(code, today=today)

    def get_topic_analytics(self, topic: str, today: Optional[date] = None) -> TopicStats:
        return self.analytics.topic_stats(topic, today=today)

    def get_owner_analytics(self, owner: str, today: Optional[date] = None) -> OwnerStats:
        return self.analytics.owner_stats(owner, today=today)
