"""
Prometheus Metrics Module

This module provides Prometheus metrics for the session lifecycle.

Metrics:
- header_session_requests_total: resolver outcome per request
  (created, reused, none)
- header_session_failures_total: resolver steps that failed open
  (exists, load, create, save)
- header_session_admin_operations_total: destroy_all/get_all_keys calls,
  labelled by whether they were permitted
- header_session_store_errors_total: Redis failures per store operation

The /metrics endpoint is exposed with prometheus_client.make_asgi_app().
"""

from typing import Any, Callable

from prometheus_client import Counter, make_asgi_app


# =============================================================================
# Resolver Outcomes
# =============================================================================

SESSION_REQUESTS_TOTAL = Counter(
    name="header_session_requests_total",
    documentation="Requests processed by the session middleware, by outcome",
    labelnames=["outcome"],
)

SESSION_FAILURES_TOTAL = Counter(
    name="header_session_failures_total",
    documentation="Session resolution steps that failed open",
    labelnames=["stage"],
)

# =============================================================================
# Store and Administration
# =============================================================================

STORE_ERRORS_TOTAL = Counter(
    name="header_session_store_errors_total",
    documentation="Redis operation failures",
    labelnames=["operation"],
)

ADMIN_OPERATIONS_TOTAL = Counter(
    name="header_session_admin_operations_total",
    documentation="Administrative session operations",
    labelnames=["operation", "permitted"],
)


# =============================================================================
# Helper Functions
# =============================================================================


def record_session_outcome(outcome: str) -> None:
    """
    Record how a request's session was resolved.

    Args:
        outcome: "created", "reused" or "none"
    """
    SESSION_REQUESTS_TOTAL.labels(outcome=outcome).inc()


def record_session_failure(stage: str) -> None:
    """
    Record a resolution step that failed.

    Args:
        stage: "exists", "load", "create" or "save"
    """
    SESSION_FAILURES_TOTAL.labels(stage=stage).inc()


def record_store_error(operation: str) -> None:
    """Record a failed Redis operation."""
    STORE_ERRORS_TOTAL.labels(operation=operation).inc()


def record_admin_operation(operation: str, permitted: bool) -> None:
    """Record an administrative operation attempt."""
    ADMIN_OPERATIONS_TOTAL.labels(
        operation=operation,
        permitted=str(permitted).lower(),
    ).inc()


# =============================================================================
# Metrics Endpoint
# =============================================================================


def get_metrics_app() -> Callable[..., Any]:
    """
    Get ASGI app for /metrics endpoint.

    Returns:
        ASGI application that serves Prometheus metrics
    """
    return make_asgi_app()
