"""
BatchSummary - Aggregate statistics for one batch run.
"""

import time
from dataclasses import dataclass, field
from typing import List, Optional

from .item_outcome import ItemOutcome


@dataclass
class BatchSummary:
    """
    Statistics for a batch run.

    Attributes:
        total: Items submitted for processing
        succeeded: Items converted and uploaded
        failed: Items that failed at any stage
        bytes_uploaded: Total bytes of WebP data uploaded
        start_time: Start timestamp
        end_time: Set by finish()
        outcomes: Every recorded outcome, in completion order
        interrupted: True if the batch was stopped early
    """
    total: int = 0
    succeeded: int = 0
    failed: int = 0
    bytes_uploaded: int = 0
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None
    outcomes: List[ItemOutcome] = field(default_factory=list)
    interrupted: bool = False

    def record(self, outcome: ItemOutcome) -> None:
        """Add one outcome to the running totals."""
        self.outcomes.append(outcome)
        if outcome.success:
            self.succeeded += 1
            self.bytes_uploaded += outcome.size or 0
        else:
            self.failed += 1

    def finish(self) -> None:
        """Freeze the elapsed time."""
        if self.end_time is None:
            self.end_time = time.time()

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds (up to finish() if called)."""
        end = self.end_time if self.end_time is not None else time.time()
        return end - self.start_time

    @property
    def completed_count(self) -> int:
        """Total completed (succeeded + failed)."""
        return self.succeeded + self.failed

    @property
    def remaining_count(self) -> int:
        return self.total - self.completed_count

    @property
    def rate_per_second(self) -> float:
        """Completed items per second."""
        if self.elapsed_seconds > 0:
            return self.completed_count / self.elapsed_seconds
        return 0.0

    @property
    def has_failures(self) -> bool:
        return self.failed > 0

    @property
    def failures(self) -> List[ItemOutcome]:
        return [o for o in self.outcomes if not o.success]
