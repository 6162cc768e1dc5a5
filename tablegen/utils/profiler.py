"""
Phase timing for generation runs.

Measures wall-clock duration (perf_counter) and the RSS delta of the client
process (psutil) around a block, so a run summary can report per-phase
durations and rows/s.

Usage examples:
    from tablegen.utils.profiler import profile_block

    with profile_block("insert") as stats:
        executor.run_insert(plan)

    print(stats.duration_seconds, stats.rows_per_second)
"""

from __future__ import annotations

import contextlib
import time
from dataclasses import dataclass, field
from typing import Any, Generator, Optional

import psutil


@dataclass
class ProfileStats:
    """
    Container for one phase's measurements.
    """

    label: str
    start_ts: float = field(default=0.0)
    end_ts: float = field(default=0.0)
    duration_seconds: float = field(default=0.0)
    rows: int = field(default=0)
    rss_delta_bytes: Optional[int] = field(default=None)
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def rows_per_second(self) -> float:
        return self.rows / self.duration_seconds if self.duration_seconds > 0 else 0.0

    def as_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "rows": self.rows,
            "duration_seconds": round(self.duration_seconds, 3),
            "rows_per_second": round(self.rows_per_second, 1),
            "rss_delta_bytes": self.rss_delta_bytes,
            **self.extra,
        }


@contextlib.contextmanager
def profile_block(label: str) -> Generator[ProfileStats, None, None]:
    """
    Context manager timing a block of code.

    The caller records the affected row count on ``stats.rows``. Timings are
    recorded even when the block raises.
    """
    stats = ProfileStats(label=label)
    process = psutil.Process()
    rss_before = process.memory_info().rss

    stats.start_ts = time.perf_counter()
    try:
        yield stats
    finally:
        stats.end_ts = time.perf_counter()
        stats.duration_seconds = stats.end_ts - stats.start_ts
        stats.rss_delta_bytes = process.memory_info().rss - rss_before


__all__ = ["ProfileStats", "profile_block"]
