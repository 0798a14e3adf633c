"""Admission ports for bounding concurrent render work."""

from __future__ import annotations

from typing import AsyncContextManager, Protocol, runtime_checkable


@runtime_checkable
class PermitPort(Protocol):
    """One granted unit of concurrency.

    ``release()`` must be called exactly once on every exit path; further
    calls are no-ops.
    """

    @property
    def released(self) -> bool: ...

    def release(self) -> None: ...


@runtime_checkable
class AdmissionPort(Protocol):
    """Counting gate with FIFO queueing of excess callers."""

    async def acquire(self, *, timeout: float | None = None) -> PermitPort:
        """Return a permit, suspending while the gate is saturated.

        Raises ``AdmissionTimeoutError`` if *timeout* expires first.
        """
        ...

    def slot(self, *, timeout: float | None = None) -> AsyncContextManager[PermitPort]:
        """Acquire a permit for the duration of an ``async with`` block."""
        ...
