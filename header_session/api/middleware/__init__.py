"""
API Middleware Package

Middleware Components:
- session: header-based session attachment
"""

from header_session.api.middleware.session import SessionMiddleware

__all__ = [
    "SessionMiddleware",
]
