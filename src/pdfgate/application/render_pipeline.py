"""Composed render flow: admission permit → shared browser → render.

The permit is held for the whole render and released on every exit path.
Failures that show the browser died retire the handle before the error
reaches the caller, so the next request starts a fresh browser.
"""

from __future__ import annotations

import time
from typing import Protocol

import structlog

from pdfgate.domain.exceptions import RenderFailedError
from pdfgate.domain.ports.admission import AdmissionPort
from pdfgate.domain.ports.browser import BrowserPoolPort, DocumentRendererPort

log = structlog.get_logger(__name__)


class _MetricsRecorder(Protocol):
    """Records render timings and outcomes."""

    def record_render(
        self,
        *,
        queue_ns: int,
        render_ns: int,
        size: int = ...,
        error: BaseException | None = ...,
    ) -> None: ...


class RenderPipeline:
    """Bounded, crash-tolerant HTML → PDF rendering.

    Args:
        admission: Gate bounding concurrent renders.
        browser_pool: Owner of the shared browser.
        renderer: Turns HTML into PDF bytes on a handle.
        metrics: Optional render counters.
        acquire_timeout: Seconds to wait for a permit; ``None`` waits forever.
    """

    def __init__(
        self,
        *,
        admission: AdmissionPort,
        browser_pool: BrowserPoolPort,
        renderer: DocumentRendererPort,
        metrics: _MetricsRecorder | None = None,
        acquire_timeout: float | None = None,
    ) -> None:
        self._admission = admission
        self._pool = browser_pool
        self._renderer = renderer
        self._metrics = metrics
        self._acquire_timeout = acquire_timeout

    async def render(self, html: str) -> bytes:
        """Render *html* to PDF bytes.

        Raises:
            AdmissionTimeoutError: no permit within ``acquire_timeout``.
            ResourceUnavailableError: the browser could not be started.
            RenderFailedError: the render itself failed.
        """
        queued_at = time.perf_counter_ns()
        async with self._admission.slot(timeout=self._acquire_timeout):
            started_at = time.perf_counter_ns()
            try:
                handle = await self._pool.get_handle()
                try:
                    pdf = await self._renderer.render(handle, html)
                except Exception as exc:
                    lost = isinstance(exc, RenderFailedError) and exc.handle_lost
                    if lost or not handle.is_connected():
                        log.warning(
                            "render_browser_lost",
                            generation=handle.generation,
                            error=str(exc),
                        )
                        self._pool.invalidate(handle)
                    raise
            except Exception as exc:
                self._record(queued_at, started_at, error=exc)
                log.warning(
                    "render_failed",
                    error_type=type(exc).__name__,
                    error=str(exc),
                )
                raise

        self._record(queued_at, started_at, size=len(pdf))
        log.info("render_completed", size=len(pdf))
        return pdf

    def _record(
        self,
        queued_at: int,
        started_at: int,
        *,
        size: int = 0,
        error: BaseException | None = None,
    ) -> None:
        if self._metrics is None:
            return
        now = time.perf_counter_ns()
        self._metrics.record_render(
            queue_ns=started_at - queued_at,
            render_ns=now - started_at,
            size=size,
            error=error,
        )
