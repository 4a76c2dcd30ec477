"""
ItemOutcome - Result of running one source image through the pipeline.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .source_item import SourceItem


class Stage(str, Enum):
    """Pipeline stage at which an item failed."""
    SCAN = 'scan'
    DECODE = 'decode'
    ENCODE = 'encode'
    READ = 'read'
    UPLOAD = 'upload'
    CANCELLED = 'cancelled'
    INTERNAL = 'internal'


@dataclass(frozen=True)
class ItemOutcome:
    """
    Tagged result for a single SourceItem.

    Attributes:
        item: The source item this outcome belongs to
        success: True if the item was converted and uploaded
        key: Upload key (success only)
        stage: Failing stage (failure only)
        cause: The exception that ended the item (failure only)
        size: Size of the converted artifact in bytes, if one was produced
        duration_seconds: Wall-clock time spent on this item
    """
    item: SourceItem
    success: bool
    key: Optional[str] = None
    stage: Optional[Stage] = None
    cause: Optional[BaseException] = None
    size: Optional[int] = None
    duration_seconds: float = 0.0

    @classmethod
    def succeeded(
        cls,
        item: SourceItem,
        key: str,
        size: int,
        duration_seconds: float = 0.0
    ) -> 'ItemOutcome':
        return cls(
            item=item,
            success=True,
            key=key,
            size=size,
            duration_seconds=duration_seconds,
        )

    @classmethod
    def failed(
        cls,
        item: SourceItem,
        stage: Stage,
        cause: BaseException,
        size: Optional[int] = None,
        duration_seconds: float = 0.0
    ) -> 'ItemOutcome':
        return cls(
            item=item,
            success=False,
            stage=stage,
            cause=cause,
            size=size,
            duration_seconds=duration_seconds,
        )

    @property
    def error_message(self) -> Optional[str]:
        """Readable description of the failure cause, or None on success."""
        if self.success or self.cause is None:
            return None
        return str(self.cause) or type(self.cause).__name__
