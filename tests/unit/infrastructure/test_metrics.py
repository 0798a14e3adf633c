"""Tests for RenderMetrics and GracefulShutdown."""

from __future__ import annotations

import asyncio

import pytest

from pdfgate.domain.exceptions import RenderFailedError, ResourceUnavailableError
from pdfgate.infrastructure.graceful_shutdown import GracefulShutdown
from pdfgate.infrastructure.metrics import RenderMetrics, RenderStats


class TestRenderStats:
    def test_empty_snapshot(self) -> None:
        snap = RenderStats().snapshot()
        assert snap["renders"] == 0
        assert snap["avg_render_ms"] == 0.0
        assert snap["avg_queue_ms"] == 0.0


class TestRenderMetrics:
    def test_records_success(self) -> None:
        metrics = RenderMetrics()
        metrics.record_render(queue_ns=2_000_000, render_ns=50_000_000, size=4096)

        renders = metrics.snapshot()["renders"]
        assert renders["renders"] == 1
        assert renders["successes"] == 1
        assert renders["failures"] == 0
        assert renders["total_bytes"] == 4096
        assert renders["avg_render_ms"] == 50.0
        assert renders["avg_queue_ms"] == 2.0

    def test_records_failures_by_class(self) -> None:
        metrics = RenderMetrics()
        metrics.record_render(queue_ns=0, render_ns=0, error=RenderFailedError("x"))
        metrics.record_render(queue_ns=0, render_ns=0, error=RenderFailedError("y"))
        metrics.record_render(queue_ns=0, render_ns=0, error=ResourceUnavailableError())

        renders = metrics.snapshot()["renders"]
        assert renders["failures"] == 3
        assert renders["successes"] == 0
        assert renders["total_bytes"] == 0
        assert renders["failures_by_error"] == {
            "RenderFailedError": 2,
            "ResourceUnavailableError": 1,
        }

    def test_uptime_present(self) -> None:
        assert RenderMetrics().snapshot()["uptime_seconds"] >= 0


class TestGracefulShutdown:
    def test_not_ready_until_marked(self) -> None:
        gs = GracefulShutdown()
        assert not gs.is_ready
        gs.mark_ready()
        assert gs.is_ready

    def test_request_counting_never_negative(self) -> None:
        gs = GracefulShutdown()
        gs.request_started()
        gs.request_finished()
        gs.request_finished()
        assert gs.active_requests == 0

    @pytest.mark.asyncio
    async def test_drain_immediate_when_idle(self) -> None:
        gs = GracefulShutdown()
        gs.mark_ready()
        assert await gs.wait_for_drain(timeout=0.1) is True
        assert gs.is_shutting_down
        assert not gs.is_ready

    @pytest.mark.asyncio
    async def test_drain_waits_for_active_requests(self) -> None:
        gs = GracefulShutdown()
        gs.request_started()

        async def finish_later() -> None:
            await asyncio.sleep(0.01)
            gs.request_finished()

        task = asyncio.create_task(finish_later())
        assert await gs.wait_for_drain(timeout=1.0) is True
        await task

    @pytest.mark.asyncio
    async def test_drain_timeout(self) -> None:
        gs = GracefulShutdown()
        gs.request_started()
        assert await gs.wait_for_drain(timeout=0.01) is False
        assert gs.snapshot() == {
            "is_ready": False,
            "is_shutting_down": True,
            "active_requests": 1,
        }
