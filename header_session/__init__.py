"""header-session - cookie-less sessions for FastAPI/Starlette backed by Redis.

Note: Import `create_app` directly from `header_session.main` to avoid circular imports.
"""

__version__ = "1.0.0"

__all__ = ["main", "api", "core", "sessions", "observability"]
