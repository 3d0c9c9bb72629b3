"""
Core authentication logic.

Validates credentials against the configured user map and returns the
normalized owner identity used by the link core.
"""

import hmac

from fastapi import HTTPException, status

from .config import USERS


def authenticate_user(username: str, password: str) -> str:
    """
    Authenticate a user by validating their username and password.

    Returns:
        str: The lower-cased username, used as the link owner.

    Raises:
        HTTPException: If authentication fails (401 Unauthorized).
    """
    owner = (username or "").strip().lower()
    stored_password = USERS.get(owner)

    if stored_password is None or not hmac.compare_digest(
        stored_password.encode("utf-8"), (password or "").encode("utf-8")
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )
    return owner
