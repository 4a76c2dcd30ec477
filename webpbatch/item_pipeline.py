"""
ItemPipeline - Converts and uploads a single image.
"""

import logging
import os
import threading
import time
from typing import Optional

from .errors import CancelledError, PipelineError
from .item_outcome import ItemOutcome
from .source_item import SourceItem
from .uploader import KeyBuilder, Uploader
from .webp_converter import WebPConverter


class ItemPipeline:
    """
    Runs conversion then upload for one SourceItem.

    A conversion failure short-circuits the upload. Every PipelineError is
    turned into a failed ItemOutcome here; callers never see them.
    """

    def __init__(
        self,
        converter: WebPConverter,
        uploader: Uploader,
        key_builder: Optional[KeyBuilder] = None,
        delete_converted: bool = False,
        cancel_event: Optional[threading.Event] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize pipeline.

        Args:
            converter: Converter producing the WebP artifact
            uploader: Uploader sending the artifact to the store
            key_builder: Derives upload keys (default: flat file name)
            delete_converted: Remove the local WebP file after a successful upload
            cancel_event: When set, items not yet past a stage boundary are cancelled
            logger: Optional logger instance
        """
        self.converter = converter
        self.uploader = uploader
        self.key_builder = key_builder or KeyBuilder()
        self.delete_converted = delete_converted
        self.cancel_event = cancel_event or threading.Event()
        self.logger = logger or logging.getLogger(__name__)

    def run(self, item: SourceItem) -> ItemOutcome:
        """Process one item and return its outcome."""
        start = time.monotonic()
        artifact = None
        try:
            self._check_cancelled(item)
            artifact = self.converter.convert(item)

            self._check_cancelled(item)
            key = self.key_builder.build(item)
            self.uploader.upload(artifact, key)
        except PipelineError as e:
            self.logger.debug(f"Failed ({e.stage.value}) {item.relative_path}: {e}")
            return ItemOutcome.failed(
                item,
                e.stage,
                e.cause or e,
                size=artifact.size if artifact else None,
                duration_seconds=time.monotonic() - start,
            )

        if self.delete_converted:
            self._delete_artifact(artifact.output_path)

        return ItemOutcome.succeeded(
            item,
            key,
            artifact.size,
            duration_seconds=time.monotonic() - start,
        )

    def _check_cancelled(self, item: SourceItem) -> None:
        if self.cancel_event.is_set():
            raise CancelledError(item.path, message=f"{item.relative_path}: batch stopped")

    def _delete_artifact(self, path: str) -> None:
        try:
            os.remove(path)
        except OSError as e:
            self.logger.warning(f"Could not delete converted file {path}: {e}")
