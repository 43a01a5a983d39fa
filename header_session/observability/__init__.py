"""
Observability Package

This package provides observability infrastructure including:
- Structured JSON logging with session ID context
- Prometheus metrics for session outcomes and store failures
"""

from header_session.observability.logging import (
    configure_logging,
    get_logger,
    get_session_id,
    resolve_logger,
    session_id_context,
)

from header_session.observability.metrics import (
    get_metrics_app,
    record_admin_operation,
    record_session_failure,
    record_session_outcome,
    record_store_error,
)

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    "resolve_logger",
    "get_session_id",
    "session_id_context",
    # Metrics
    "get_metrics_app",
    "record_session_outcome",
    "record_session_failure",
    "record_store_error",
    "record_admin_operation",
]
