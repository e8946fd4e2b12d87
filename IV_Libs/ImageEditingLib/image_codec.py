"""
Image file reading and writing for Image Viewer.

Converts between image files on disk, PIL Images and PixelBuffers.
Loading reports an unreadable file with a ``None`` sentinel so the caller
can tell the user; the strict ``read_image`` variant raises instead.

Functions:
    from_pil_image: Convert a PIL Image to a PixelBuffer
    to_pil_image: Convert a PixelBuffer to an RGB PIL Image
    read_image: Decode a file, raising InvalidFormatError on failure
    load_image: Decode a file, returning None on failure
    save_image: Encode a buffer to a file, returning success
"""

import logging
from pathlib import Path
from typing import Any, Optional, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from IV_Libs.ImageEditingLib.image_models import InvalidFormatError, PixelBuffer
from IV_Libs.constants import DEFAULT_OUTPUT_FORMAT, EXTENSION_FORMATS

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def from_pil_image(image: Any) -> PixelBuffer:
    """
    Convert a PIL Image of any mode to a PixelBuffer.

    Raises:
        TypeError: If image is not a PIL Image
    """
    if not hasattr(image, "convert"):
        raise TypeError(f"Expected PIL Image, got {type(image)}")

    return PixelBuffer.from_array(np.asarray(image.convert("RGB")))


def to_pil_image(buffer: PixelBuffer) -> Any:
    return Image.fromarray(buffer.pixels.copy())


def read_image(path: PathLike) -> PixelBuffer:
    """
    Decode an image file into a PixelBuffer.

    Raises:
        InvalidFormatError: If the file is missing or not a recognized image
    """
    path = Path(path)
    try:
        with Image.open(path) as image:
            buffer = from_pil_image(image)
    except (UnidentifiedImageError, OSError) as exc:
        raise InvalidFormatError(f"Cannot read image {path}: {exc}") from exc

    logger.info(f"Loaded {path} ({buffer.width}x{buffer.height})")
    return buffer


def load_image(path: PathLike) -> Optional[PixelBuffer]:
    """
    Decode an image file, returning None if it cannot be read.

    Args:
        path: File to decode

    Returns:
        The decoded buffer, or None when the file is not a valid image
    """
    try:
        return read_image(path)
    except InvalidFormatError as exc:
        logger.warning(str(exc))
        return None


def output_format_for(path: PathLike) -> str:
    return EXTENSION_FORMATS.get(Path(path).suffix.lower(), DEFAULT_OUTPUT_FORMAT)


def save_image(buffer: PixelBuffer, path: PathLike) -> bool:
    """
    Write a buffer to disk, choosing the format from the file extension.

    Unknown extensions are written as PNG.

    Returns:
        True if the file was written, False otherwise
    """
    path = Path(path)
    try:
        to_pil_image(buffer).save(path, format=output_format_for(path))
    except (OSError, ValueError) as exc:
        logger.warning(f"Cannot save image to {path}: {exc}")
        return False

    logger.info(f"Saved {path} ({buffer.width}x{buffer.height})")
    return True
