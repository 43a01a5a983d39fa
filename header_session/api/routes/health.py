"""
Health Router

This module implements the health check endpoints.

- GET /health: liveness, always 200 while the process serves requests
- GET /health/ready: readiness, pings the session store
"""

import logging

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from header_session import __version__
from header_session.api.deps import get_session_manager
from header_session.sessions.manager import SessionManager


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


# =============================================================================
# Response Models
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    checks: dict[str, bool]


# =============================================================================
# Endpoints
# =============================================================================


@router.get("", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness probe."""
    return HealthResponse(status="healthy", version=__version__)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness(
    response: Response,
    manager: SessionManager = Depends(get_session_manager),
) -> ReadinessResponse:
    """
    Readiness probe.

    Returns 503 when the session store does not answer a ping.
    """
    redis_ok = await manager.store.ping()
    if not redis_ok:
        logger.warning("Readiness check failed: session store unreachable")
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ReadinessResponse(status="not_ready", checks={"redis": False})

    return ReadinessResponse(status="ready", checks={"redis": True})
