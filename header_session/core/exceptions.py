"""
Custom exceptions for header-session.

This module provides the exception hierarchy for session operations.
All exceptions inherit from HeaderSessionException and include error codes for
consistent error handling and logging.

Session operations raise these exceptions to their caller; the request
middleware catches HeaderSessionException and lets the request continue
without a session.
"""

from enum import Enum
from typing import Any, Optional


# =============================================================================
# Error Codes Enum
# =============================================================================


class ErrorCode(str, Enum):
    """
    Error codes for header-session exceptions.

    These codes provide a consistent way to identify error types in logs.
    """

    SESSION_ERROR = "SESSION_ERROR"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    STORE_ERROR = "STORE_ERROR"
    OPERATION_NOT_PERMITTED = "OPERATION_NOT_PERMITTED"


# =============================================================================
# Base Exception
# =============================================================================


class HeaderSessionException(Exception):
    """
    Base exception for all session errors.

    Attributes:
        message: Human-readable error message.
        error_code: Machine-readable error code from ErrorCode enum.
    """

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCode.SESSION_ERROR,
        **kwargs: Any,
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Human-readable error message.
            error_code: Machine-readable error code.
            **kwargs: Additional attributes to set on the exception.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code

        for key, value in kwargs.items():
            setattr(self, key, value)


# =============================================================================
# InvalidArgumentError
# =============================================================================


class InvalidArgumentError(HeaderSessionException):
    """
    Raised when an operation that needs a session identifier gets none.

    Attributes:
        argument: Name of the offending argument.
    """

    def __init__(
        self,
        message: str = "no sid given",
        argument: str = "sid",
        error_code: str = ErrorCode.INVALID_ARGUMENT,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_code, **kwargs)
        self.argument = argument


# =============================================================================
# StoreError
# =============================================================================


class StoreError(HeaderSessionException):
    """
    Exception for session store failures.

    Raised when a Redis operation fails because of connection issues,
    timeouts, or server errors. The original redis exception is chained
    as __cause__.

    Attributes:
        operation: Store operation that failed (e.g. "get", "setex").
        key: Store key involved, if any.
    """

    def __init__(
        self,
        message: str,
        operation: str,
        key: Optional[str] = None,
        error_code: str = ErrorCode.STORE_ERROR,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_code, **kwargs)
        self.operation = operation
        self.key = key


# =============================================================================
# OperationNotPermittedError
# =============================================================================


class OperationNotPermittedError(HeaderSessionException):
    """
    Raised when an administrative operation runs outside admin mode.

    Attributes:
        operation: Name of the refused operation.
    """

    def __init__(
        self,
        message: str,
        operation: str,
        error_code: str = ErrorCode.OPERATION_NOT_PERMITTED,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_code, **kwargs)
        self.operation = operation
