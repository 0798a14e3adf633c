"""Bounded admission for render work with strict FIFO hand-off.

At most ``max_concurrent`` permits are outstanding at any time.  Callers
arriving while the gate is saturated park on a future in a FIFO deque.
Releasing a permit hands the freed slot straight to the oldest live
waiter, so the outstanding count never dips while anyone is queued and a
newcomer can never overtake a queued caller.

All state lives on the event loop thread; there are no awaits between the
check and the mutation in ``acquire``/``_release``.
"""

from __future__ import annotations

import asyncio
from collections import deque
from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog

from pdfgate.domain.exceptions import AdmissionTimeoutError

log = structlog.get_logger(__name__)


class Permit:
    """Capability for one unit of render concurrency.

    Created by :meth:`AdmissionController.acquire`, not instantiated
    directly.  ``release()`` is idempotent.
    """

    __slots__ = ("_controller", "_released")

    def __init__(self, controller: AdmissionController) -> None:
        self._controller = controller
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._controller._release()

    def __repr__(self) -> str:
        state = "released" if self._released else "held"
        return f"<Permit {state}>"


class AdmissionController:
    """Counting semaphore with an explicit FIFO waiter queue.

    Parameters:
        max_concurrent: Maximum number of permits outstanding at once.
    """

    def __init__(self, *, max_concurrent: int = 2) -> None:
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be >= 1")
        self._max_concurrent = max_concurrent
        self._outstanding = 0
        self._waiters: deque[asyncio.Future[None]] = deque()
        self._timeouts = 0

    @property
    def max_concurrent(self) -> int:
        return self._max_concurrent

    @property
    def outstanding(self) -> int:
        return self._outstanding

    @property
    def queued(self) -> int:
        return len(self._waiters)

    async def acquire(self, *, timeout: float | None = None) -> Permit:
        """Return a permit, waiting in FIFO order while saturated.

        Raises:
            AdmissionTimeoutError: *timeout* seconds passed without a grant.
                The waiter is removed from the queue and never granted later.
        """
        if self._outstanding < self._max_concurrent and not self._waiters:
            self._outstanding += 1
            return Permit(self)

        waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        log.debug(
            "admission_queued",
            queued=len(self._waiters),
            outstanding=self._outstanding,
        )
        try:
            await asyncio.wait_for(waiter, timeout)
        except TimeoutError:
            self._abandon(waiter)
            self._timeouts += 1
            assert timeout is not None
            log.warning("admission_timeout", timeout=timeout, queued=len(self._waiters))
            raise AdmissionTimeoutError(timeout) from None
        except asyncio.CancelledError:
            self._abandon(waiter)
            raise
        # Slot was transferred by _release(); outstanding already accounts for it.
        return Permit(self)

    @asynccontextmanager
    async def slot(self, *, timeout: float | None = None) -> AsyncIterator[Permit]:
        """Hold a permit for the body of an ``async with`` block."""
        permit = await self.acquire(timeout=timeout)
        try:
            yield permit
        finally:
            permit.release()

    def snapshot(self) -> dict[str, int]:
        """Return a JSON-serializable view of the gate."""
        return {
            "max_concurrent": self._max_concurrent,
            "outstanding": self._outstanding,
            "available": max(0, self._max_concurrent - self._outstanding),
            "queued": len(self._waiters),
            "timeouts": self._timeouts,
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _release(self) -> None:
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)
                return
        self._outstanding -= 1

    def _abandon(self, waiter: asyncio.Future[None]) -> None:
        """Clean up after a waiter that stopped waiting.

        A waiter granted in the same tick it gave up owns a transferred
        slot; pass it on instead of leaking it.
        """
        if waiter.done() and not waiter.cancelled():
            self._release()
            return
        try:
            self._waiters.remove(waiter)
        except ValueError:
            pass
