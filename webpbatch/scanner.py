"""
Scanner - Walks a source tree and yields the images to convert.
"""

import logging
import os
from typing import FrozenSet, Iterable, Iterator, Optional

from .source_item import SourceItem


class Scanner:
    """
    Recursively enumerates image files under a root directory.

    Extensions are matched case-sensitively. Entries that cannot be read
    (permission errors, broken symlinks) are skipped without failing the scan.
    """

    ACCEPTED_EXTENSIONS: FrozenSet[str] = frozenset({'jpg', 'jpeg', 'png', 'gif'})

    def __init__(
        self,
        extensions: Optional[Iterable[str]] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize scanner.

        Args:
            extensions: Accepted extensions without dots (default: jpg, jpeg, png, gif)
            logger: Optional logger instance
        """
        self.extensions = frozenset(extensions) if extensions is not None else self.ACCEPTED_EXTENSIONS
        self.logger = logger or logging.getLogger(__name__)
        self.skipped_entries = 0

    def scan(self, root: str) -> Iterator[SourceItem]:
        """
        Lazily yield a SourceItem for every accepted file under root.

        Each call performs a fresh traversal. Order is not guaranteed.

        Args:
            root: Directory to scan

        Raises:
            NotADirectoryError: If root is not a directory
        """
        root = os.path.abspath(root)
        if not os.path.isdir(root):
            raise NotADirectoryError(f"Source path is not a directory: {root}")

        self.skipped_entries = 0
        self.logger.debug(f"Scanning {root}")

        for dirpath, _dirnames, filenames in os.walk(root, onerror=self._on_walk_error):
            for name in filenames:
                ext = self.get_extension(name)
                if ext not in self.extensions:
                    continue

                path = os.path.join(dirpath, name)
                # isfile follows symlinks, so broken links drop out here
                if not os.path.isfile(path):
                    self.skipped_entries += 1
                    self.logger.debug(f"Skipping unreadable entry: {path}")
                    continue

                relative = os.path.relpath(path, root).replace(os.sep, '/')
                yield SourceItem(path=path, extension=ext, relative_path=relative)

    def _on_walk_error(self, error: OSError) -> None:
        self.skipped_entries += 1
        self.logger.debug(f"Skipping unreadable entry: {error.filename} ({error.strerror})")

    @staticmethod
    def get_extension(filename: str) -> str:
        """Extension without the dot, case preserved ('' when there is none)."""
        return os.path.splitext(filename)[1][1:]
