"""
Core module for header-session.

This module contains configuration and exceptions.
"""

from header_session.core.config import ConnectionSettings, SessionSettings, get_settings
from header_session.core.exceptions import (
    ErrorCode,
    HeaderSessionException,
    InvalidArgumentError,
    OperationNotPermittedError,
    StoreError,
)

__all__ = [
    # Config
    "ConnectionSettings",
    "SessionSettings",
    "get_settings",
    # Exceptions
    "ErrorCode",
    "HeaderSessionException",
    "InvalidArgumentError",
    "StoreError",
    "OperationNotPermittedError",
]
