"""API Package - FastAPI routes, middleware, and dependencies.

Components:
- routes: health endpoints
- middleware: header-based session middleware
- deps: FastAPI dependency injection functions
"""

__all__ = ["routes", "middleware", "deps"]
