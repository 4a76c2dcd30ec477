"""
SourceItem - Records for a discovered image and its converted artifact.
"""

import os
from dataclasses import dataclass


WEBP_EXTENSION = '.webp'
WEBP_CONTENT_TYPE = 'image/webp'


@dataclass(frozen=True)
class SourceItem:
    """
    A single image file discovered under the source root.

    Attributes:
        path: Absolute path of the file
        extension: Extension without the leading dot, case preserved (e.g. 'png')
        relative_path: POSIX-style path relative to the source root
    """
    path: str
    extension: str
    relative_path: str

    @property
    def filename(self) -> str:
        """Base filename of the source image."""
        return os.path.basename(self.path)

    @property
    def output_path(self) -> str:
        """Sibling path with the extension replaced by .webp."""
        root, _ = os.path.splitext(self.path)
        return root + WEBP_EXTENSION

    @property
    def output_relative_path(self) -> str:
        """Relative path of the converted artifact."""
        root, _ = os.path.splitext(self.relative_path)
        return root + WEBP_EXTENSION


@dataclass(frozen=True)
class ConvertedArtifact:
    """
    A WebP file written next to its source image.

    Attributes:
        source: The item this artifact was converted from
        output_path: Where the WebP file was written
        size: Size of the WebP file in bytes
    """
    source: SourceItem
    output_path: str
    size: int
    format: str = 'WEBP'
    content_type: str = WEBP_CONTENT_TYPE

    @property
    def filename(self) -> str:
        return os.path.basename(self.output_path)
