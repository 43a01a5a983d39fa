"""
API Dependencies

This module provides FastAPI dependency injection functions for handlers
that need the session layer.

All dependencies read from app.state / request.state and can be overridden
in tests using FastAPI's dependency_overrides mechanism.
"""

import logging
from typing import Any, Optional

from fastapi import HTTPException, Request, status

from header_session.sessions.manager import SessionManager


logger = logging.getLogger(__name__)


def get_session_manager(request: Request) -> SessionManager:
    """
    Get the SessionManager created by the application lifespan.

    Raises:
        HTTPException: 503 if the session layer is not initialized.
    """
    manager = getattr(request.app.state, "session_manager", None)
    if manager is None:
        logger.warning("session manager requested before initialization")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Session layer not initialized",
        )
    return manager


def get_session(request: Request) -> Optional[dict[str, Any]]:
    """
    Get the session attached by SessionMiddleware.

    Returns:
        The session mapping, or None when the request has no session.
    """
    return getattr(request.state, "session", None)


__all__ = [
    "get_session_manager",
    "get_session",
]
