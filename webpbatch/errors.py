"""
Exceptions raised by webpbatch.

Per-item failures derive from PipelineError and never escape ItemPipeline.run().
ConfigError is a startup failure and ends the process before scanning.
"""

from typing import List, Optional

from .item_outcome import Stage


class WebpBatchError(Exception):
    """Base class for all webpbatch errors."""


class ConfigError(WebpBatchError):
    """Missing or invalid settings, or an unreachable store."""

    def __init__(self, message: str, problems: Optional[List[str]] = None):
        super().__init__(message)
        self.problems = problems or []


class PipelineError(WebpBatchError):
    """
    Failure of one item at one stage.

    Attributes:
        path: File the failure relates to
        cause: Underlying exception, if any
    """
    stage: Stage = Stage.INTERNAL

    def __init__(self, path: str, cause: Optional[BaseException] = None, message: Optional[str] = None):
        self.path = path
        self.cause = cause
        if message is None:
            message = f"{path}: {cause}" if cause is not None else path
        super().__init__(message)


class SourceUnavailableError(PipelineError):
    """Source file vanished or could not be read after it was scanned."""
    stage = Stage.SCAN


class DecodeError(PipelineError):
    """Source file is not a decodable image."""
    stage = Stage.DECODE


class EncodeError(PipelineError):
    """WebP encoding or writing the output file failed."""
    stage = Stage.ENCODE


class ReadError(PipelineError):
    """Converted artifact could not be reread for upload."""
    stage = Stage.READ


class TransportError(PipelineError):
    """The put-object request failed."""
    stage = Stage.UPLOAD


class CancelledError(PipelineError):
    """The batch was stopped before this item finished."""
    stage = Stage.CANCELLED
