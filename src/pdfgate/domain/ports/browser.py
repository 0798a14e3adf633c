"""Ports for the shared browser process and the renderer using it."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Awaitable, Callable, Protocol, runtime_checkable


@runtime_checkable
class BrowserHandlePort(Protocol):
    """A live (or formerly live) browser process shared by many renders."""

    generation: int

    def is_connected(self) -> bool: ...

    async def new_page(self) -> Any: ...

    async def close(self) -> None: ...


BrowserLauncher = Callable[[int], Awaitable[BrowserHandlePort]]
"""Async factory: ``await launcher(generation) -> handle``."""


@runtime_checkable
class BrowserPoolPort(Protocol):
    """Owner of the single shared browser handle."""

    async def get_handle(self) -> BrowserHandlePort:
        """Return the live handle, creating it if absent or dead.

        Raises ``ResourceUnavailableError`` when creation fails.
        """
        ...

    def invalidate(self, handle: BrowserHandlePort | None = None) -> None:
        """Retire the current handle so the next caller gets a fresh one."""
        ...

    async def shutdown(self) -> None:
        """Close the browser; idempotent."""
        ...


@runtime_checkable
class DocumentRendererPort(Protocol):
    """Turns resolved HTML into PDF bytes using a browser handle."""

    async def render(self, handle: BrowserHandlePort, html: str) -> bytes:
        """Raises ``RenderFailedError`` on any failure."""
        ...


@runtime_checkable
class ExecutableProbePort(Protocol):
    """Locates a runnable Chromium binary."""

    def locate_executable(self) -> Path:
        """Raises ``ExecutableNotFoundError`` when nothing usable is found."""
        ...
