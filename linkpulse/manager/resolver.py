"""
Redirect resolution for LinkPulse.

The hot path: every inbound short link goes through `RedirectResolver.resolve`,
which records a click and hands back the destination. Recording is a single
atomic store call, so concurrent redirects of the same code each add exactly
one event and one count. A failed write propagates; it is never reported as a
successful redirect.
"""

import logging
from typing import Callable, Optional

from ..errors import NotFound
from ..models import ClickEvent, utcnow
from ..storage.base import BaseStorage

log = logging.getLogger(__name__)


class RedirectResolver:
    def __init__(self, storage: BaseStorage, clock: Callable = utcnow):
        self.storage = storage
        self.clock = clock

    def resolve(self, code: str, agent_string: Optional[str] = None, address: Optional[str] = None) -> str:
        """
        Record a click on `code` and return its target URL.

        Raises:
            NotFound: If no link is registered under `code` (nothing is written).
        """
        event = ClickEvent(timestamp=self.clock(), agent_string=agent_string or None, address=address or None)
        target = self.storage.append_event_and_increment(code, event)
        if target is None:
            log.info("Unknown code requested: %r", code)
            raise NotFound(f"Short URL not found: {code}")
        return target
