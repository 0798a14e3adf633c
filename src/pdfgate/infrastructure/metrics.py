"""Zero-impact in-memory render metrics.

All counters are plain Python integers manipulated inside the single-threaded
async event loop: no locks, no I/O, no external dependencies.

``time.perf_counter_ns()`` is used for timing (monotonic, nanosecond
resolution, near-zero overhead).
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass
class RenderStats:
    """Accumulated statistics for PDF renders."""

    renders: int = 0
    successes: int = 0
    failures: int = 0
    total_bytes: int = 0
    total_render_ns: int = 0
    total_queue_ns: int = 0
    failures_by_error: dict[str, int] = field(default_factory=dict)

    def snapshot(self) -> dict[str, object]:
        """Return a JSON-serializable summary."""
        avg_render_ms = (
            round(self.total_render_ns / self.renders / 1_000_000, 1)
            if self.renders
            else 0.0
        )
        avg_queue_ms = (
            round(self.total_queue_ns / self.renders / 1_000_000, 1)
            if self.renders
            else 0.0
        )
        return {
            "renders": self.renders,
            "successes": self.successes,
            "failures": self.failures,
            "total_bytes": self.total_bytes,
            "avg_render_ms": avg_render_ms,
            "avg_queue_ms": avg_queue_ms,
            "failures_by_error": dict(sorted(self.failures_by_error.items())),
        }


@dataclass
class RenderMetrics:
    """Collects render counters for the ``/stats/metrics`` endpoint."""

    _renders: RenderStats = field(default_factory=RenderStats)
    _start_ns: int = field(default_factory=time.perf_counter_ns)

    def record_render(
        self,
        *,
        queue_ns: int,
        render_ns: int,
        size: int = 0,
        error: BaseException | None = None,
    ) -> None:
        """Record one render attempt (successful when *error* is ``None``)."""
        stats = self._renders
        stats.renders += 1
        stats.total_queue_ns += queue_ns
        stats.total_render_ns += render_ns

        if error is None:
            stats.successes += 1
            stats.total_bytes += size
            return

        stats.failures += 1
        name = type(error).__name__
        stats.failures_by_error[name] = stats.failures_by_error.get(name, 0) + 1

    def snapshot(self) -> dict[str, object]:
        """Return a JSON-serializable snapshot of all metrics."""
        uptime_ns = time.perf_counter_ns() - self._start_ns
        return {
            "uptime_seconds": round(uptime_ns / 1_000_000_000, 1),
            "renders": self._renders.snapshot(),
        }
