"""
Configuration for the auth module.

Users are loaded from LINKPULSE_USERS as comma-separated "name:password"
pairs, e.g. "alice@example.com:s3cret,bob@example.com:hunter2".
When unset, a single demo account is available.
"""

import os
from typing import Dict


def load_users(raw: str) -> Dict[str, str]:
    users: Dict[str, str] = {}
    for pair in raw.split(","):
        name, sep, password = pair.strip().partition(":")
        if sep and name:
            users[name.strip().lower()] = password
    return users


USERS: Dict[str, str] = load_users(os.getenv("LINKPULSE_USERS", "demo@linkpulse.local:demo"))
