"""Shared Chromium browser owned by a single pool.

Manages one browser process shared by every render.  Each render opens
its own page for isolation while sharing the same underlying browser,
which avoids paying the Chromium startup cost per request.

Concurrent ``get_handle()`` calls while no browser exists all await the
same creation task, so a race never spawns duplicate processes.  A failed
creation is reported to every caller awaiting that attempt and then
forgotten; the next call starts over.
"""

from __future__ import annotations

import asyncio

import structlog

from pdfgate.domain.exceptions import ResourceUnavailableError
from pdfgate.domain.ports.browser import BrowserHandlePort, BrowserLauncher

log = structlog.get_logger(__name__)


class SharedBrowserPool:
    """Owns the single shared browser handle and its lifecycle.

    Usage::

        pool = SharedBrowserPool(launcher=PlaywrightLauncher(...))

        handle = await pool.get_handle()
        ...
        pool.invalidate(handle)   # after observing the browser died

        # At shutdown:
        await pool.shutdown()
    """

    def __init__(self, *, launcher: BrowserLauncher) -> None:
        self._launcher = launcher
        self._handle: BrowserHandlePort | None = None
        self._creating: asyncio.Task[BrowserHandlePort] | None = None
        self._retired: list[BrowserHandlePort] = []
        self._shut_down = False

        self._generation = 0
        self._launches = 0
        self._launch_failures = 0
        self._invalidations = 0
        self._close_errors = 0

    @property
    def is_running(self) -> bool:
        """Whether the shared browser is currently connected."""
        return self._handle is not None and self._handle.is_connected()

    @property
    def generation(self) -> int:
        return self._generation

    async def get_handle(self) -> BrowserHandlePort:
        """Return the live browser, launching it if absent or dead.

        Raises:
            ResourceUnavailableError: launch failed, or the pool is shut down.
        """
        if self._shut_down:
            raise ResourceUnavailableError("browser pool is shut down")

        handle = self._handle
        if handle is not None:
            if handle.is_connected():
                return handle
            log.warning("browser_disconnected", generation=handle.generation)
            self._retire(handle)

        if self._creating is None:
            self._creating = asyncio.create_task(self._create())
            self._creating.add_done_callback(_consume_result)
        # shield: a cancelled caller must not abort the launch others await
        return await asyncio.shield(self._creating)

    def invalidate(self, handle: BrowserHandlePort | None = None) -> None:
        """Retire the current handle so the next caller gets a fresh browser.

        When *handle* is given and is no longer the current one, the call is
        ignored: it was already replaced.
        """
        current = self._handle
        if current is None:
            return
        if handle is not None and handle is not current:
            log.debug(
                "browser_invalidate_stale",
                generation=handle.generation,
                current_generation=current.generation,
            )
            return
        self._invalidations += 1
        log.info("browser_invalidated", generation=current.generation)
        self._retire(current)

    async def shutdown(self) -> None:
        """Close the shared browser and refuse further launches. Idempotent.

        Waits for an in-flight launch to settle first so its process is not
        leaked.  Permits held by callers are not revoked.
        """
        self._shut_down = True
        creating = self._creating
        if creating is not None:
            await asyncio.wait({creating})

        if self._handle is not None:
            self._retire(self._handle)
        await self._close_retired()
        log.info("browser_pool_shut_down", close_errors=self._close_errors)

    def snapshot(self) -> dict[str, object]:
        """Return a JSON-serializable view of the pool."""
        return {
            "running": self.is_running,
            "generation": self._generation,
            "launches": self._launches,
            "launch_failures": self._launch_failures,
            "invalidations": self._invalidations,
            "close_errors": self._close_errors,
            "creating": self._creating is not None,
            "shut_down": self._shut_down,
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _retire(self, handle: BrowserHandlePort) -> None:
        if self._handle is handle:
            self._handle = None
        self._retired.append(handle)

    async def _create(self) -> BrowserHandlePort:
        try:
            # Stale processes from crashed/invalidated handles go first
            await self._close_retired()

            self._generation += 1
            generation = self._generation
            try:
                handle = await self._launcher(generation)
            except Exception as exc:
                self._launch_failures += 1
                log.error(
                    "browser_launch_failed",
                    generation=generation,
                    error=str(exc),
                    exc_info=True,
                )
                raise ResourceUnavailableError(
                    f"Could not start the browser: {exc}"
                ) from exc

            self._launches += 1
            if self._shut_down:
                self._retired.append(handle)
                await self._close_retired()
                raise ResourceUnavailableError("browser pool is shut down")

            self._handle = handle
            log.info("browser_launched", generation=generation)
            return handle
        finally:
            self._creating = None

    async def _close_retired(self) -> None:
        while self._retired:
            handle = self._retired.pop()
            try:
                await handle.close()
            except Exception:  # noqa: BLE001
                self._close_errors += 1
                log.warning(
                    "browser_close_failed",
                    generation=handle.generation,
                    exc_info=True,
                )


def _consume_result(task: asyncio.Task[BrowserHandlePort]) -> None:
    # Every awaiting caller already received the outcome; this keeps asyncio
    # from reporting an unretrieved exception when all callers were cancelled.
    if not task.cancelled():
        task.exception()
