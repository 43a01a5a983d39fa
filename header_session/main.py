"""
header-session - Application Entry Point

This module wires the session layer into a FastAPI application:
- lifespan creates the SessionManager from settings, connects to Redis and
  disconnects on shutdown
- SessionMiddleware attaches a session to every request
- GET / echoes the attached session
- /health, /health/ready and /metrics are served without sessions

Run with:
    uvicorn header_session.main:app
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from fastapi import Depends, FastAPI

from header_session import __version__
from header_session.api.deps import get_session
from header_session.api.middleware.session import SessionMiddleware
from header_session.api.routes.health import router as health_router
from header_session.core.config import SessionSettings, get_settings
from header_session.core.exceptions import StoreError
from header_session.observability.logging import configure_logging
from header_session.observability.metrics import get_metrics_app
from header_session.sessions.manager import SessionManager


APP_NAME = "header-session"
APP_DESCRIPTION = "Cookie-less sessions carried in a request header"

UNTRACKED_PATHS = ["/health", "/health/ready", "/metrics", "/metrics/"]

logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan Context Manager
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager for startup/shutdown events.

    A manager injected through create_app() is used as-is and left open;
    otherwise one is built from settings here and disconnected on shutdown.
    """
    manager: Optional[SessionManager] = app.state.session_manager
    owned = manager is None

    if owned:
        settings: SessionSettings = app.state.settings or get_settings()
        configure_logging(level=settings.effective_log_level)
        manager = SessionManager.from_settings(settings)
        try:
            await manager.connect()
        except StoreError as e:
            # Requests still get served; the middleware fails open per request
            logger.error(f"{APP_NAME}: Redis unavailable at startup: {e}")
        app.state.session_manager = manager

    logger.info(f"{APP_NAME} v{__version__} started")

    yield

    if owned:
        await manager.disconnect()
        app.state.session_manager = None
    logger.info(f"{APP_NAME} shutting down")


# =============================================================================
# Application Factory
# =============================================================================


def create_app(
    manager: Optional[SessionManager] = None,
    settings: Optional[SessionSettings] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        manager: Pre-built SessionManager (tests, embedding). When omitted
            the lifespan builds one from settings.
        settings: Settings used when the lifespan builds the manager.

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(
        title=APP_NAME,
        description=APP_DESCRIPTION,
        version=__version__,
        lifespan=lifespan,
    )
    app.state.session_manager = manager
    app.state.settings = settings

    app.add_middleware(SessionMiddleware, exclude_paths=UNTRACKED_PATHS)

    app.include_router(health_router)
    app.mount("/metrics", get_metrics_app())

    @app.get("/", tags=["Session"])
    async def root(
        session: Optional[dict[str, Any]] = Depends(get_session),
    ) -> dict[str, Any]:
        """Return the session attached to this request."""
        return {"success": True, "session": session}

    return app


app = create_app()
