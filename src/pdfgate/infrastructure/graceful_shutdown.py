"""Graceful shutdown: track in-flight HTTP requests and drain them on stop.

The browser is closed only after the drain, so renders that already hold a
permit get a chance to finish against a live browser.
"""

from __future__ import annotations

import asyncio

import structlog

log = structlog.get_logger(__name__)


class GracefulShutdown:
    """Readiness flag plus an in-flight request counter with a drain event.

    Usage::

        gs = GracefulShutdown()

        # In middleware:
        gs.request_started()
        try:
            ...
        finally:
            gs.request_finished()

        # In lifespan finally, before closing the browser:
        await gs.wait_for_drain(timeout=10.0)
    """

    def __init__(self) -> None:
        self._active = 0
        self._ready = False
        self._shutting_down = False
        self._drained = asyncio.Event()
        self._drained.set()

    @property
    def active_requests(self) -> int:
        return self._active

    @property
    def is_shutting_down(self) -> bool:
        return self._shutting_down

    @property
    def is_ready(self) -> bool:
        """True between startup completion and the start of shutdown."""
        return self._ready and not self._shutting_down

    def mark_ready(self) -> None:
        self._ready = True

    def request_started(self) -> None:
        self._active += 1
        self._drained.clear()

    def request_finished(self) -> None:
        self._active = max(0, self._active - 1)
        if self._active == 0:
            self._drained.set()

    async def wait_for_drain(self, *, timeout: float = 10.0) -> bool:
        """Stop reporting ready and wait for in-flight requests.

        Returns ``True`` when everything drained, ``False`` on timeout.
        """
        self._shutting_down = True
        if self._active == 0:
            return True
        log.info("graceful_shutdown_draining", active_requests=self._active)
        try:
            await asyncio.wait_for(self._drained.wait(), timeout=timeout)
        except TimeoutError:
            log.warning(
                "graceful_shutdown_timeout",
                remaining_requests=self._active,
                timeout=timeout,
            )
            return False
        log.info("graceful_shutdown_drained")
        return True

    def snapshot(self) -> dict[str, object]:
        return {
            "is_ready": self.is_ready,
            "is_shutting_down": self._shutting_down,
            "active_requests": self._active,
        }
