"""
Tests for Prometheus Metrics
"""

import pytest
from prometheus_client import REGISTRY


def _sample(name: str, labels: dict[str, str]) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


class TestMetricHelpers:
    """Each helper increments its labelled counter."""

    def test_record_session_outcome(self) -> None:
        from header_session.observability.metrics import record_session_outcome

        before = _sample("header_session_requests_total", {"outcome": "reused"})
        record_session_outcome("reused")

        assert _sample("header_session_requests_total", {"outcome": "reused"}) == before + 1

    def test_record_store_error(self) -> None:
        from header_session.observability.metrics import record_store_error

        before = _sample("header_session_store_errors_total", {"operation": "get"})
        record_store_error("get")

        assert _sample("header_session_store_errors_total", {"operation": "get"}) == before + 1

    def test_record_admin_operation_labels_permission(self) -> None:
        from header_session.observability.metrics import record_admin_operation

        labels = {"operation": "destroy_all", "permitted": "false"}
        before = _sample("header_session_admin_operations_total", labels)
        record_admin_operation("destroy_all", permitted=False)

        assert _sample("header_session_admin_operations_total", labels) == before + 1


class TestResolverMetrics:
    """The resolver reports its outcome for every request."""

    @pytest.mark.asyncio
    async def test_created_then_reused(self, session_manager) -> None:
        from header_session.sessions.resolver import SessionResolver

        created = _sample("header_session_requests_total", {"outcome": "created"})
        reused = _sample("header_session_requests_total", {"outcome": "reused"})

        resolver = SessionResolver(session_manager)
        first = await resolver.resolve(None)
        await resolver.resolve(first.sid)

        assert _sample("header_session_requests_total", {"outcome": "created"}) == created + 1
        assert _sample("header_session_requests_total", {"outcome": "reused"}) == reused + 1

    @pytest.mark.asyncio
    async def test_failure_reports_none(self, broken_manager) -> None:
        from header_session.sessions.resolver import SessionResolver

        before = _sample("header_session_requests_total", {"outcome": "none"})
        await SessionResolver(broken_manager).resolve("abc")

        assert _sample("header_session_requests_total", {"outcome": "none"}) == before + 1
