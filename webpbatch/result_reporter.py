"""
ResultReporter - Prints per-item results and the final batch summary.
"""

import sys
from typing import Optional, TextIO

from .batch_summary import BatchSummary
from .item_outcome import ItemOutcome


class ResultReporter:
    """
    Human-readable output for a batch run.

    Success lines go to output (stdout), failure lines to error_output
    (stderr). The reporter only observes outcomes.
    """

    def __init__(
        self,
        output: Optional[TextIO] = None,
        error_output: Optional[TextIO] = None,
        quiet: bool = False
    ):
        """
        Initialize reporter.

        Args:
            output: Stream for success lines and the summary (default: stdout)
            error_output: Stream for failure lines (default: stderr)
            quiet: Suppress per-item success lines
        """
        self.output = output or sys.stdout
        self.error_output = error_output or sys.stderr
        self.quiet = quiet

    def _print(self, text: str = "", stream: Optional[TextIO] = None) -> None:
        """Print to output stream."""
        print(text, file=stream or self.output, flush=True)

    def on_outcome(self, outcome: ItemOutcome) -> None:
        """Called as each item completes."""
        if outcome.success:
            if not self.quiet:
                self._print(
                    f"  [OK] {outcome.item.relative_path} -> {outcome.key} "
                    f"({self._format_bytes(outcome.size)})"
                )
        else:
            self._print(
                f"  [ERROR] {outcome.item.relative_path} -> {outcome.stage.value} failed: "
                f"{outcome.error_message}",
                stream=self.error_output,
            )

    def __call__(self, outcome: ItemOutcome) -> None:
        """Allow use as the orchestrator's outcome callback."""
        self.on_outcome(outcome)

    def report_plan(self, items, key_builder) -> int:
        """Print what a run would upload without doing it. Returns the item count."""
        count = 0
        for item in items:
            count += 1
            self._print(f"  [DRY RUN] {item.relative_path} -> {key_builder.build(item)}")
        self._print()
        self._print(f"Would convert and upload {count:,} images")
        return count

    def report_summary(self, summary: BatchSummary) -> None:
        """Print the final summary block."""
        self._print()
        self._print("=" * 60)
        self._print("BATCH SUMMARY")
        self._print("=" * 60)
        self._print(f"  Images:      {summary.total:,}")
        self._print(f"  Uploaded:    {summary.succeeded:,}")
        self._print(f"  Failed:      {summary.failed:,}")
        self._print(f"  Data:        {self._format_bytes(summary.bytes_uploaded)}")
        self._print(f"  Rate:        {summary.rate_per_second:.1f} images/s")
        if summary.interrupted:
            self._print("  Status:      INTERRUPTED")

        failures = summary.failures
        if failures:
            self._print()
            self._print("Failed images:")
            for outcome in failures:
                self._print(f"  [{outcome.stage.value}] {outcome.item.relative_path}: {outcome.error_message}")

        self._print()
        self._print(f"Completed in: {self._format_duration(summary.elapsed_seconds)}")

    @staticmethod
    def _format_bytes(bytes_val: Optional[int]) -> str:
        """Format bytes as human-readable string."""
        if bytes_val is None:
            return "unknown"
        for unit in ['B', 'KB', 'MB', 'GB']:
            if bytes_val < 1024:
                return f"{bytes_val:.1f} {unit}"
            bytes_val /= 1024
        return f"{bytes_val:.1f} TB"

    @staticmethod
    def _format_duration(seconds: float) -> str:
        """Format duration as human-readable string."""
        if seconds < 60:
            return f"{seconds:.2f} seconds"
        elif seconds < 3600:
            return f"{seconds / 60:.1f} minutes"
        else:
            return f"{seconds / 3600:.1f} hours"
