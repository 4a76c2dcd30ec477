"""
Orchestrator - Runs the item pipeline over many items on a worker pool.
"""

import logging
import threading
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Callable, Dict, Iterable, Optional

from .batch_config import DEFAULT_WORKERS
from .batch_summary import BatchSummary
from .item_outcome import ItemOutcome, Stage
from .item_pipeline import ItemPipeline
from .source_item import SourceItem


OutcomeCallback = Callable[[ItemOutcome], None]


class Orchestrator:
    """
    Scatter/gather over a bounded thread pool.

    One unit of work is submitted per item. Outcomes are gathered on the
    calling thread as they complete, exactly once per submitted item. A
    failing unit never stops the others.
    """

    def __init__(
        self,
        pipeline: ItemPipeline,
        max_workers: int = DEFAULT_WORKERS,
        max_pending: Optional[int] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize orchestrator.

        Args:
            pipeline: Pipeline run for each item
            max_workers: Maximum number of items in flight
            max_pending: Maximum number of submitted but uncollected items
                (default: twice max_workers)
            logger: Optional logger instance
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1 (got {max_workers})")
        self.pipeline = pipeline
        self.max_workers = max_workers
        self.max_pending = max(max_pending or 2 * max_workers, max_workers)
        self.logger = logger or logging.getLogger(__name__)
        self.summary = BatchSummary()

    @property
    def cancel_event(self) -> threading.Event:
        return self.pipeline.cancel_event

    def stop(self) -> None:
        """Request cancellation; items not yet past a stage boundary fail as cancelled."""
        self.cancel_event.set()

    def run(
        self,
        items: Iterable[SourceItem],
        on_outcome: Optional[OutcomeCallback] = None
    ) -> BatchSummary:
        """
        Process every item and block until all units have completed.

        At most max_pending units are queued at a time, so outcomes are
        reported while the items iterable is still being consumed.

        Args:
            items: Items to process (consumed once, lazily)
            on_outcome: Called on this thread for each outcome as it arrives

        Returns:
            Finished BatchSummary
        """
        self.summary = BatchSummary()
        seen_keys: Dict[str, str] = {}
        source = iter(items)
        exhausted = False
        pending: Dict[Future, SourceItem] = {}

        self.logger.info(f"Processing images with {self.max_workers} workers")

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix='webpbatch') as executor:
            while True:
                try:
                    while not exhausted and not self.summary.interrupted and len(pending) < self.max_pending:
                        item = next(source, None)
                        if item is None:
                            exhausted = True
                            break
                        pending[executor.submit(self.pipeline.run, item)] = item
                        self.summary.total += 1
                    if not pending:
                        break
                    done, _ = wait(pending, return_when=FIRST_COMPLETED)
                    for future in done:
                        self._record(future, pending.pop(future), seen_keys, on_outcome)
                except KeyboardInterrupt:
                    # Keep draining: every submitted item still gets an outcome
                    self._interrupt()

        self.summary.finish()
        self.logger.info(
            f"Batch complete: {self.summary.succeeded} uploaded, "
            f"{self.summary.failed} failed ({self.summary.elapsed_seconds:.1f}s)"
        )
        return self.summary

    def _record(
        self,
        future: Future,
        item: SourceItem,
        seen_keys: Dict[str, str],
        on_outcome: Optional[OutcomeCallback]
    ) -> None:
        outcome = self._collect(future, item)
        if outcome.success:
            self._check_collision(outcome, seen_keys)
        self.summary.record(outcome)
        if on_outcome:
            on_outcome(outcome)

    def _collect(self, future: Future, item: SourceItem) -> ItemOutcome:
        try:
            return future.result()
        except Exception as e:
            # ItemPipeline handles expected failures; anything here is a bug
            self.logger.exception(f"Unexpected error processing {item.relative_path}: {e}")
            return ItemOutcome.failed(item, Stage.INTERNAL, e)

    def _interrupt(self) -> None:
        if not self.summary.interrupted:
            self.logger.warning("Interrupted, cancelling remaining items")
        self.summary.interrupted = True
        self.stop()

    def _check_collision(self, outcome: ItemOutcome, seen_keys: Dict[str, str]) -> None:
        previous = seen_keys.get(outcome.key)
        if previous is not None and previous != outcome.item.path:
            self.logger.warning(
                f"Key collision: {outcome.key} from {outcome.item.relative_path} "
                f"replaced the object uploaded from {previous}"
            )
        seen_keys[outcome.key] = outcome.item.path
