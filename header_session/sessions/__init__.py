"""
Sessions Package - Session Layer

This package provides header-based session management: Redis storage,
identifier generation, record operations and per-request resolution.
"""

from header_session.sessions.identifiers import SID_ALPHABET, SidGenerator
from header_session.sessions.manager import SessionManager
from header_session.sessions.resolver import ResolvedSession, SessionResolver
from header_session.sessions.store import RedisSessionStore

__all__ = [
    "RedisSessionStore",
    "SidGenerator",
    "SID_ALPHABET",
    "SessionManager",
    "SessionResolver",
    "ResolvedSession",
]
