from __future__ import annotations

import statistics
from dataclasses import dataclass, field
from datetime import datetime

"""Import result models for the driver import.

ImportResult aggregates what a completed (non-aborted) commit run did.
Aborted runs surface as CommitError instead; see services.importer.
"""

__all__ = [
    "ImportContext",
    "ImportResult",
    "CommitStatsAccumulator",
]


@dataclass(frozen=True)
class ImportContext:
    """Organization/actor context attached to every created driver."""
    organization_id: str
    actor_id: str


@dataclass(frozen=True)
class ImportResult:
    """Aggregated results of a sequential commit run.

    Contains the numbers needed for the SUMMARY output line.
    """
    attempted: int  # 試行行数
    committed: int  # コミット済行数
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_rows_per_sec: float
    created_ids: list[str] = field(default_factory=list)
    # Commit latency statistics
    avg_commit_seconds: float = 0.0
    p95_commit_seconds: float = 0.0


class CommitStatsAccumulator:
    """Collects per-commit latencies and derives summary statistics."""

    def __init__(self) -> None:
        self.commit_times: list[float] = []

    def add_commit_time(self, elapsed_seconds: float) -> None:
        self.commit_times.append(elapsed_seconds)

    def get_stats(self) -> tuple[int, float, float]:
        """Calculate commit statistics.

        Returns:
            tuple: (total_commits, avg_commit_seconds, p95_commit_seconds)
        """
        if not self.commit_times:
            return (0, 0.0, 0.0)

        total = len(self.commit_times)
        avg = statistics.mean(self.commit_times)
        if total == 1:
            p95 = self.commit_times[0]
        else:
            # 20分位の19番目 = p95
            p95 = statistics.quantiles(self.commit_times, n=20, method="inclusive")[18]
        return (total, avg, p95)
