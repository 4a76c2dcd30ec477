"""
WebPConverter - Decodes a source image and writes it next to the original as WebP.
"""

import io
import logging
import os
import tempfile
from typing import Optional

from PIL import Image

from .errors import DecodeError, EncodeError, SourceUnavailableError
from .source_item import ConvertedArtifact, SourceItem


class WebPConverter:
    """
    Converts images to WebP using Pillow.

    The input format is detected from the file content, not its extension.
    The source file is only ever read.
    """

    def __init__(
        self,
        quality: int = 80,
        lossless: bool = False,
        method: int = 4,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize converter.

        Args:
            quality: WebP quality 0-100 (default: 80)
            lossless: Use lossless WebP compression
            method: Encoder effort 0 (fast) to 6 (slow, smaller output)
            logger: Optional logger instance
        """
        self.quality = quality
        self.lossless = lossless
        self.method = method
        self.logger = logger or logging.getLogger(__name__)

    def convert(self, item: SourceItem) -> ConvertedArtifact:
        """
        Convert one source image.

        Args:
            item: The image to convert

        Returns:
            ConvertedArtifact describing the written WebP file

        Raises:
            SourceUnavailableError: The source could not be read
            DecodeError: The source is not a valid image
            EncodeError: Encoding or writing the WebP file failed
        """
        try:
            with open(item.path, 'rb') as f:
                image_data = f.read()
        except OSError as e:
            raise SourceUnavailableError(item.path, e) from e

        img = self.decode(item.path, image_data)
        webp_data = self.encode(item.path, img)

        output_path = item.output_path
        self._write(output_path, webp_data)

        self.logger.debug(f"Converted {item.filename} -> {os.path.basename(output_path)} ({len(webp_data)} bytes)")
        return ConvertedArtifact(source=item, output_path=output_path, size=len(webp_data))

    def decode(self, path: str, image_data: bytes) -> Image.Image:
        """Decode image bytes, forcing the pixel data to load."""
        try:
            img = Image.open(io.BytesIO(image_data))
            img.load()
        except (Image.DecompressionBombError, OSError, ValueError, SyntaxError, EOFError) as e:
            # UnidentifiedImageError is an OSError; truncated files raise OSError too
            raise DecodeError(path, e) from e
        return img

    def encode(self, path: str, img: Image.Image) -> bytes:
        """Encode a decoded image to WebP bytes."""
        try:
            img = self._convert_color_mode(img)
            output = io.BytesIO()
            img.save(
                output,
                format='WEBP',
                quality=self.quality,
                lossless=self.lossless,
                method=self.method,
            )
        except (OSError, ValueError, KeyError) as e:
            raise EncodeError(path, e) from e
        return output.getvalue()

    def _write(self, output_path: str, data: bytes) -> None:
        """Write data to a temp file beside output_path, then move it into place."""
        directory, filename = os.path.split(output_path)
        try:
            fd, temp_path = tempfile.mkstemp(prefix=f".{filename}.", suffix='.tmp', dir=directory or '.')
        except OSError as e:
            raise EncodeError(output_path, e) from e
        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(data)
            # Readers of output_path only ever see a complete file
            os.replace(temp_path, output_path)
        except OSError as e:
            self._remove_partial(temp_path)
            raise EncodeError(output_path, e) from e

    def _remove_partial(self, path: str) -> None:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            self.logger.warning(f"Could not remove partial output {path}: {e}")

    def _convert_color_mode(self, img: Image.Image) -> Image.Image:
        """Convert image to a color mode WebP can store (RGB or RGBA)."""
        if img.mode in ('RGB', 'RGBA'):
            return img
        if img.mode in ('P', 'PA', 'LA') or 'transparency' in img.info:
            return img.convert('RGBA')
        return img.convert('RGB')
