"""
Structured Logging Module

This module provides structured JSON logging with session ID support.

Pattern: Structured logging for observability
Pattern: Singleton configuration (configure once at startup)

Components:
- configure_logging(): structlog JSON pipeline, configured once
- get_logger(): named structlog logger
- session_id_context(): binds the current session ID to every log event
- resolve_logger(): adapts host-supplied loggers exposing only log()
"""

import contextvars
import logging
import sys
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Generator, Optional, TextIO

import structlog
from structlog.types import EventDict, Processor


_configured: bool = False


# =============================================================================
# Session ID Context
# =============================================================================

_session_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "session_id", default=None
)


def get_session_id() -> Optional[str]:
    """
    Get the current session ID.

    Returns:
        Session ID if set, None otherwise
    """
    return _session_id_var.get()


@contextmanager
def session_id_context(session_id: str) -> Generator[None, None, None]:
    """
    Context manager for setting the session ID.

    Args:
        session_id: Identifier of the session handled by this request

    Example:
        >>> with session_id_context("ViS5pHE5n8McblTATbyFUJTGJyzVFeXOcAEZ41Zs"):
        ...     logger.info("session reused")
    """
    token = _session_id_var.set(session_id)
    try:
        yield
    finally:
        _session_id_var.reset(token)


# =============================================================================
# Custom Processors
# =============================================================================


def add_session_id(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add session ID to log event if set and not already bound."""
    session_id = get_session_id()
    if session_id is not None:
        event_dict.setdefault("sid", session_id)
    return event_dict


def add_timestamp(
    logger: logging.Logger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add ISO 8601 timestamp to log event."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def rename_level(
    logger: logging.Logger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Rename log_level to level for cleaner output."""
    if "log_level" in event_dict:
        event_dict["level"] = event_dict.pop("log_level")
    return event_dict


# =============================================================================
# Singleton Configuration
# =============================================================================


def configure_logging(
    level: str = "INFO",
    stream: Optional[TextIO] = None,
    force: bool = False,
) -> None:
    """
    Configure structlog for the application.

    This should be called once at application startup. Subsequent calls
    are no-ops to avoid reconfiguration overhead, unless force=True.

    Args:
        level: Default log level (DEBUG, INFO, WARNING, ERROR)
        stream: Output stream (default: sys.stdout)
        force: Force reconfiguration (for testing only)
    """
    global _configured

    if _configured and not force:
        return

    processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        add_timestamp,
        add_session_id,
        rename_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_level_to_int(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stdout),
        cache_logger_on_first_use=False,
    )

    _configured = True


def reset_logging() -> None:
    """
    Reset logging configuration state.

    WARNING: This should only be used in tests.
    """
    global _configured
    _configured = False


# =============================================================================
# Logger Factory
# =============================================================================


def get_logger(
    name: str,
    stream: Optional[TextIO] = None,
    level: Optional[str] = None,
) -> structlog.BoundLogger:
    """
    Get a configured structured logger.

    Args:
        name: Logger name (typically module name)
        stream: Output stream (default: sys.stdout) - used for initial config
        level: Minimum level for this logger. Applies even when logging was
            already configured at another level. Defaults to the configured
            level.

    Returns:
        Configured structlog BoundLogger

    Example:
        >>> logger = get_logger("header_session.sessions")
        >>> logger.info("session created", sid="abc")
    """
    configure_logging(level=level or "INFO", stream=stream)
    if level is None:
        return structlog.get_logger().bind(logger=name)
    return structlog.wrap_logger(
        None, wrapper_class=structlog.make_filtering_bound_logger(_level_to_int(level))
    ).bind(logger=name)


class _LogMethodFallback:
    """Routes debug/info/error to log() on loggers that lack them."""

    def __init__(self, target: Any) -> None:
        self._target = target

    def __getattr__(self, name: str) -> Any:
        if name in ("debug", "info", "error"):
            method = getattr(self._target, name, None)
            if callable(method):
                return method
            return self._target.log
        return getattr(self._target, name)


def resolve_logger(logger: Any) -> Any:
    """
    Return a logger exposing debug, info and error.

    Loggers already providing all three are returned unchanged. Loggers
    missing any of them but exposing log() are wrapped so that the missing
    methods fall back to log().

    Raises:
        TypeError: If the logger has neither the methods nor log().
    """
    if all(callable(getattr(logger, m, None)) for m in ("debug", "info", "error")):
        return logger
    if not callable(getattr(logger, "log", None)):
        raise TypeError("logger must expose debug/info/error or a log method")
    return _LogMethodFallback(logger)


def _level_to_int(level: str) -> int:
    """Convert level string to logging int."""
    levels = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return levels.get(level.upper(), logging.INFO)
