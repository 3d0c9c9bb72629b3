"""
Main API module for LinkPulse.

Responsibilities:
    - Expose REST endpoints for creating short links and redirecting
    - Record a click event for every successful redirect
    - Serve per-link, per-topic and per-owner analytics

Architecture:
    - App Factory pattern (create_app) for test isolation and DI.
    - In-memory Storage by default; set LINKPULSE_STORAGE_BACKEND=postgres for the DB backend.
    - LinkManager owns every rule (allocation, resolution, aggregation); routes only
      translate HTTP to manager calls and typed errors back to status codes.

LLM Prompt Example:
    "Explain how to structure a FastAPI service with an application factory,
    injected dependencies, and a clean separation between API and business logic."
"""

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from auth.dependencies import get_current_owner
from linkpulse.config import settings
from linkpulse.errors import (
    AliasConflict,
    AllocationExhausted,
    NoRecordsFound,
    NotFound,
    StoreUnavailable,
)
from linkpulse.manager.link_manager import LinkManager
from linkpulse.storage.base import BaseStorage
from linkpulse.storage.storage_factory import get_storage


class ShortenRequest(BaseModel):
    """Request payload for creating a new short link."""
    long_url: str
    custom_alias: Optional[str] = None
    topic: Optional[str] = None


def client_address(request: Request) -> Optional[str]:
    """
    Best-effort client address: first X-Forwarded-For hop, else the socket peer.

    LLM Prompt Example:
        "Explain why the left-most X-Forwarded-For entry is the original client
        and when it can be spoofed."
    """
    forwarded = request.headers.get("x-forwarded-for", "")
    first_hop = forwarded.split(",")[0].strip()
    if first_hop:
        return first_hop
    return request.client.host if request.client else None


def create_app(storage: Optional[BaseStorage] = None) -> FastAPI:
    """
    Factory function to build and configure a new FastAPI app instance.

    Args:
        storage (Optional[BaseStorage]): Backend to use; chosen from config when omitted.

    Returns:
        FastAPI: A fully configured application instance with its own manager.

    Why an app factory?
        - Enables per-test isolation in pytest.
        - Encourages dependency injection and easy swapping of implementations.
        - Avoids accidental global state across workers/processes.
    """
    if not logging.getLogger().handlers:
        logging.basicConfig(level=settings.LOG_LEVEL)
    log = logging.getLogger("linkpulse")

    app = FastAPI(
        title="LinkPulse",
        description="URL shortener with per-link, per-topic and per-owner click analytics",
        docs_url="/docs",
    )

    storage = storage if storage is not None else get_storage()
    manager = LinkManager(storage=storage)
    app.state.manager = manager
    log.info("LinkPulse storage backend: %s", type(storage).__name__)

    # ----------------------------------------------------------------
    # Error mapping
    # ----------------------------------------------------------------
    async def _error(request: Request, status_code: int, detail: str):
        return await http_exception_handler(request, HTTPException(status_code=status_code, detail=detail))

    @app.exception_handler(ValueError)
    async def _invalid_input(request: Request, exc: ValueError):
        return await _error(request, status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(AliasConflict)
    async def _alias_conflict(request: Request, exc: AliasConflict):
        return await _error(request, status.HTTP_400_BAD_REQUEST, "Custom alias already in use")

    @app.exception_handler(NotFound)
    async def _not_found(request: Request, exc: NotFound):
        return await _error(request, status.HTTP_404_NOT_FOUND, "Short URL not found")

    @app.exception_handler(NoRecordsFound)
    async def _no_records(request: Request, exc: NoRecordsFound):
        return await _error(request, status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(AllocationExhausted)
    async def _exhausted(request: Request, exc: AllocationExhausted):
        return await _error(
            request, status.HTTP_503_SERVICE_UNAVAILABLE, "Could not allocate a short code; try again"
        )

    @app.exception_handler(StoreUnavailable)
    async def _store_down(request: Request, exc: StoreUnavailable):
        return await _error(request, status.HTTP_503_SERVICE_UNAVAILABLE, "Storage unavailable")

    # ----------------------------------------------------------------
    # Routes
    # ----------------------------------------------------------------
    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post("/api/shorten", status_code=status.HTTP_201_CREATED)
    def shorten(
        req: ShortenRequest,
        request: Request,
        owner: str = Depends(get_current_owner),
    ) -> Dict[str, Any]:
        """
        Create a short link for the authenticated owner.

        Returns:
            dict: short_url (absolute), code and created_at (ISO 8601).
        """
        link = manager.create_link(req.long_url, owner, alias=req.custom_alias, topic=req.topic)
        if settings.BASE_URL:
            short_url = f"{settings.BASE_URL}/{link.code}"
        else:
            short_url = str(request.url_for("redirect_link", code=link.code))
        return {
            "short_url": short_url,
            "code": link.code,
            "created_at": link.created_at.isoformat(),
        }

    @app.get("/api/analytics/overall")
    def overall_analytics(owner: str = Depends(get_current_owner)) -> Dict[str, Any]:
        return manager.get_owner_analytics(owner).to_dict()

    @app.get("/api/analytics/topic/{topic}")
    def topic_analytics(topic: str) -> Dict[str, Any]:
        return manager.get_topic_analytics(topic).to_dict()

    @app.get("/api/analytics/{code}")
    def link_analytics(code: str) -> Dict[str, Any]:
        return manager.get_link_analytics(code).to_dict()

    @app.get("/api/{code}", name="redirect_link")
    def redirect_link(code: str, request: Request) -> RedirectResponse:
        """Record the click, then send the client to the target (302)."""
        target = manager.resolve(
            code,
            agent_string=request.headers.get("user-agent"),
            address=client_address(request),
        )
        return RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)

    return app


# `uvicorn main:app --reload` and `from main import app` continue to work.
app = create_app()
