"""
FastAPI dependency functions for authentication.

Use `Depends(get_current_owner)` in routes that act on behalf of a link owner.
"""

from fastapi import Depends
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from .service import authenticate_user

# HTTP Basic authentication scheme
security = HTTPBasic()


def get_current_owner(credentials: HTTPBasicCredentials = Depends(security)) -> str:
    """Return the authenticated, normalized owner identity."""
    return authenticate_user(credentials.username, credentials.password)
