"""Thumbnail previews for image transfers."""

import base64
import io
import logging
from pathlib import Path
from typing import Optional, Union

from PIL import Image

from ..config import PreviewConfig

logger = logging.getLogger(__name__)


def scale_to_height(image: Image.Image, height: int) -> Image.Image:
    """Resize keeping the aspect ratio so the result is ``height`` pixels tall."""
    width = max(1, round(image.width * height / image.height))
    return image.resize((width, height), Image.Resampling.LANCZOS)


def load_preview_from_bytes(data: bytes, height: int = 50) -> Optional[Image.Image]:
    """
    Decode image bytes into a thumbnail.

    Args:
        data: Raw file contents
        height: Thumbnail height in pixels

    Returns:
        Scaled image, or None if the data is not a decodable image
    """
    if not data:
        return None
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            if image.height == 0:
                return None
            return scale_to_height(image.convert("RGBA"), height)
    except Exception as e:
        logger.debug(f"No preview: {e}")
        return None


def load_preview_from_file(
    path: Union[str, Path],
    config: Optional[PreviewConfig] = None,
) -> Optional[Image.Image]:
    """
    Decode a file on disk into a thumbnail.

    Files larger than ``config.max_file_size`` are skipped without being read.
    Every failure yields None.
    """
    config = config or PreviewConfig()
    if not config.enabled or not path:
        return None

    preview_path = Path(path)
    try:
        size = preview_path.stat().st_size
        if size > config.max_file_size:
            logger.debug(f"Skipping preview of {preview_path.name}: {size} bytes")
            return None
        data = preview_path.read_bytes()
    except OSError as e:
        logger.debug(f"Cannot read {preview_path} for preview: {e}")
        return None

    return load_preview_from_bytes(data, config.thumbnail_height)


def image_to_base64(image: Image.Image) -> str:
    """Encode an image as base64 PNG text for a data: URI."""
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return base64.b64encode(buffer.getvalue()).decode("ascii")
