"""
Storage factory: switch storage backend from config
===================================================

This module centralizes selection of the storage backend (in-memory vs DB)
so the rest of the app can stay ignorant of where data lives.

- Reads `settings` **at call time**, so tests can patch it per case.
- Imports the DB backend **only if** the selected backend is "postgres".

Settings used
-------------
- settings.STORAGE_BACKEND (env LINKPULSE_STORAGE_BACKEND): "memory" (default) or "postgres"
- settings.DB_DSN          (env LINKPULSE_DB_DSN):          DSN string if backend=="postgres"
"""

import logging
from typing import Optional

from linkpulse.config import settings
from linkpulse.storage.base import BaseStorage
from linkpulse.storage.storage import Storage

log = logging.getLogger(__name__)


def get_storage(backend: Optional[str] = None, **kwargs) -> BaseStorage:
    """
    Return a storage backend based on configuration.

    Parameters
    ----------
    backend : str, optional
        "memory" (default) or "postgres". If omitted, uses settings.STORAGE_BACKEND.
    kwargs : dict
        Extra args passed to the backend constructor. For postgres, use dsn="...".

    Returns
    -------
    BaseStorage-compatible instance
    """
    be = (backend or settings.STORAGE_BACKEND or "memory").strip().lower()
    log.info("Selected storage backend: %r", be)

    if be == "memory":
        return Storage()

    if be == "postgres":
        dsn = kwargs.get("dsn") or settings.DB_DSN
        if not dsn:
            raise ValueError("DB_DSN is required for postgres backend (env LINKPULSE_DB_DSN)")
        # Local import to avoid hard dependency when not using postgres
        from linkpulse.storage.db_storage import DBStorage
        return DBStorage(dsn=dsn)

    raise ValueError(f"Unknown storage backend: {be!r}")
