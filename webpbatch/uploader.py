"""
Uploader - Sends converted artifacts to the object store.
"""

import logging
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from .errors import ReadError, TransportError
from .source_item import ConvertedArtifact, SourceItem


class KeyBuilder:
    """
    Derives the upload key for an item.

    By default the key is the converted file name only, so the source
    directory structure is flattened. With preserve_paths the key is the
    artifact path relative to the source root.
    """

    def __init__(self, prefix: str = '', preserve_paths: bool = False):
        self.prefix = prefix.strip('/')
        self.preserve_paths = preserve_paths

    def build(self, item: SourceItem) -> str:
        if self.preserve_paths:
            name = item.output_relative_path
        else:
            name = item.output_relative_path.rsplit('/', 1)[-1]
        if self.prefix:
            return f"{self.prefix}/{name}"
        return name


class Uploader:
    """
    Uploads one converted artifact with a single put-object request.

    No retries: a failed request is final for that item.
    """

    def __init__(self, storage_client, logger: Optional[logging.Logger] = None):
        """
        Initialize uploader.

        Args:
            storage_client: Object exposing put_object(key, data, content_type)
            logger: Optional logger instance
        """
        self.storage = storage_client
        self.logger = logger or logging.getLogger(__name__)

    def upload(self, artifact: ConvertedArtifact, key: str) -> dict:
        """
        Upload an artifact under key.

        Returns:
            The store's response

        Raises:
            ReadError: The artifact could not be reread from disk
            TransportError: The request to the store failed
        """
        try:
            with open(artifact.output_path, 'rb') as f:
                data = f.read()
        except OSError as e:
            raise ReadError(artifact.output_path, e) from e

        self.logger.debug(f"Uploading: {key} ({len(data)} bytes)")
        try:
            return self.storage.put_object(key, data, artifact.content_type)
        except (ClientError, BotoCoreError) as e:
            raise TransportError(artifact.output_path, e, message=f"upload of {key} failed: {e}") from e
