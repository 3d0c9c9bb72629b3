"""
Storage module for LinkPulse (in-memory implementation).

Responsibilities:
    - Register links under unique codes
    - Record click events together with the denormalized click count
    - Provide lookups by code, topic and owner

Design:
    - This is an in-memory reference implementation that satisfies the BaseStorage contract.
    - One lock guards every mutation, which gives the same guarantees a database
      offers through its unique index and single-statement updates.
    - Reads return snapshots (copies), so a caller never sees a link whose
      click count and event list disagree.
    - For production, use the PostgreSQL backend (see db_storage.py).

LLM Prompt Example:
    "Explain how this in-memory storage can be swapped for a database-backed layer
     without changing the manager or API code, by adhering to a narrow,
     explicit BaseStorage interface."
"""

import threading
from typing import Dict, List, Optional

from ..models import ClickEvent, Link
from .base import BaseStorage


class Storage(BaseStorage):
    def __init__(self):
        """
        Initialize empty storage.

        Internal schema:
            self.links = { code: Link }
        """
        self.links: Dict[str, Link] = {}
        self._lock = threading.Lock()

    def insert_link(self, link: Link) -> bool:
        """
        Insert a link if its code is free.

        Rules:
            - Empty code or target is rejected.
            - An existing code is never overwritten (unique constraint).

        Returns:
            bool: True on success, False on collision.

        Raises:
            ValueError: If the code or target is empty.
        """
        if not link.code or not link.target:
            raise ValueError("Link code and target are required")
        with self._lock:
            if link.code in self.links:
                return False
            self.links[link.code] = link.snapshot()
            return True

    def get_link(self, code: str) -> Optional[Link]:
        with self._lock:
            link = self.links.get(code)
            return link.snapshot() if link else None

    def code_exists(self, code: str) -> bool:
        return code in self.links

    def find_by_topic(self, topic: str) -> List[Link]:
        with self._lock:
            return [link.snapshot() for link in self.links.values() if link.topic == topic]

    def find_by_owner(self, owner: str) -> List[Link]:
        with self._lock:
            return [link.snapshot() for link in self.links.values() if link.owner == owner]

    def append_event_and_increment(self, code: str, event: ClickEvent) -> Optional[str]:
        """
        Record a click atomically.

        Returns:
            Optional[str]: Target URL, or None if the code is not registered.

        LLM Prompt Example:
            "Show why holding one lock across both writes prevents lost updates
             under concurrent redirects."
        """
        with self._lock:
            link = self.links.get(code)
            if link is None:
                return None
            link.events.append(event)
            link.click_count += 1
            return link.target
