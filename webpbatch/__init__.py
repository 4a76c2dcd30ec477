"""
WebP batch conversion and upload for local image trees.

Single-pass operation:
    1. Scan: walk the source tree for jpg/jpeg/png/gif files
    2. Convert: write a .webp next to each image
    3. Upload: put each .webp into the configured S3 bucket

Items are processed concurrently on a bounded worker pool; one failing
image never stops the rest of the batch.
"""

__version__ = "1.0.0"

from .batch_config import BatchConfig
from .s3_client import S3Client
from .source_item import SourceItem, ConvertedArtifact
from .item_outcome import ItemOutcome, Stage
from .errors import (
    WebpBatchError,
    ConfigError,
    PipelineError,
    SourceUnavailableError,
    DecodeError,
    EncodeError,
    ReadError,
    TransportError,
    CancelledError,
)
from .scanner import Scanner
from .webp_converter import WebPConverter
from .uploader import KeyBuilder, Uploader
from .item_pipeline import ItemPipeline
from .batch_summary import BatchSummary
from .orchestrator import Orchestrator
from .result_reporter import ResultReporter

__all__ = [
    "BatchConfig",
    "S3Client",
    "SourceItem",
    "ConvertedArtifact",
    "ItemOutcome",
    "Stage",
    "WebpBatchError",
    "ConfigError",
    "PipelineError",
    "SourceUnavailableError",
    "DecodeError",
    "EncodeError",
    "ReadError",
    "TransportError",
    "CancelledError",
    "Scanner",
    "WebPConverter",
    "KeyBuilder",
    "Uploader",
    "ItemPipeline",
    "BatchSummary",
    "Orchestrator",
    "ResultReporter",
]
