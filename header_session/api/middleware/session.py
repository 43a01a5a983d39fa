"""
Session Middleware

This module implements the request-processing step that attaches a session
to every request using a custom header instead of a cookie.

Flow per request:
1. Read the configured sid header (case-insensitive)
2. Resolve the session through SessionResolver
3. On success expose it as request.state.session and echo the sid in the
   response header; on failure set request.state.session to None and leave
   the response header unset

The downstream app is always called exactly once. Store failures never
reject a request.

Pattern: BaseHTTPMiddleware for request/response interception
"""

import logging
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from header_session.observability.logging import session_id_context
from header_session.sessions.manager import SessionManager
from header_session.sessions.resolver import SessionResolver


logger = logging.getLogger(__name__)


class SessionMiddleware(BaseHTTPMiddleware):
    """
    Middleware managing header-based sessions.

    The manager may be passed directly, or left out and looked up on
    app.state.session_manager at request time (set by the app lifespan).
    """

    def __init__(
        self,
        app,
        manager: Optional[SessionManager] = None,
        exclude_paths: Optional[list[str]] = None,
    ):
        """
        Initialize the middleware.

        Args:
            app: FastAPI/Starlette application
            manager: SessionManager to use; defaults to app.state.session_manager
            exclude_paths: Paths served without session handling (e.g. probes)
        """
        super().__init__(app)
        self._manager = manager
        self.exclude_paths = exclude_paths or []

    def _get_manager(self, request: Request) -> Optional[SessionManager]:
        if self._manager is not None:
            return self._manager
        return getattr(request.app.state, "session_manager", None)

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        """
        Attach the session, run the handler, echo the sid header.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler in chain

        Returns:
            Response from the handler
        """
        if request.url.path in self.exclude_paths:
            request.state.session = None
            return await call_next(request)

        manager = self._get_manager(request)
        if manager is None:
            logger.error(
                f"{request.method} {request.url.path}: no session manager configured, "
                "continuing without session"
            )
            request.state.session = None
            return await call_next(request)

        settings = manager.settings

        if settings.debug:
            manager.logger.debug(f"{manager.name}: request url: {request.url}")

        inbound_sid = request.headers.get(settings.sid_header)
        resolved = await SessionResolver(manager).resolve(inbound_sid)

        if resolved is None:
            request.state.session = None
            logger.debug(f"{request.method} {request.url.path} continuing without session")
            return await call_next(request)

        request.state.session = resolved.data
        with session_id_context(resolved.sid):
            response = await call_next(request)

        response.headers[settings.sid_header] = resolved.sid
        return response
