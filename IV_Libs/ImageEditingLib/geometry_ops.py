"""
Geometry operations for Image Viewer.

These operations change the dimensions of an image, so each one returns a
new PixelBuffer and leaves its input untouched.

Functions:
    enlarge: Double both dimensions with nearest-neighbour copies
    shrink: Halve both dimensions by averaging 2x2 blocks
    crop: Remove margins from the four sides
    validate_crop_margins: Check that a crop leaves a non-empty image
"""

import numpy as np

from IV_Libs.ImageEditingLib.image_models import CropMargins, InvalidGeometryError, PixelBuffer


def enlarge(buffer: PixelBuffer) -> PixelBuffer:
    """
    Return a copy twice as wide and twice as tall.

    Each source pixel (x, y) fills the 2x2 block starting at (2x, 2y).

    Raises:
        InvalidGeometryError: If the buffer has no pixels
    """
    if buffer.width == 0 or buffer.height == 0:
        raise InvalidGeometryError(f"Cannot enlarge an empty {buffer.width}x{buffer.height} buffer")

    enlarged = np.repeat(np.repeat(buffer.pixels, 2, axis=0), 2, axis=1)
    return PixelBuffer.from_array(enlarged)


def shrink(buffer: PixelBuffer) -> PixelBuffer:
    """
    Return a copy half as wide and half as tall.

    Each output pixel is the per-channel mean, rounded down, of the source
    pixels (2x, 2y), (2x+1, 2y), (2x, 2y+1) and (2x+1, 2y+1). An odd trailing
    row or column is dropped.

    Raises:
        InvalidGeometryError: If either dimension would become zero
    """
    width = buffer.width // 2
    height = buffer.height // 2
    if width == 0 or height == 0:
        raise InvalidGeometryError(
            f"Cannot shrink a {buffer.width}x{buffer.height} buffer: result would be {width}x{height}"
        )

    source = buffer.pixels[:height * 2, :width * 2].astype(np.int32)
    totals = (
        source[0::2, 0::2]
        + source[0::2, 1::2]
        + source[1::2, 0::2]
        + source[1::2, 1::2]
    )
    return PixelBuffer.from_array(totals // 4)


def validate_crop_margins(buffer: PixelBuffer, margins: CropMargins) -> None:
    """
    Check that margins are non-negative and leave at least one pixel.

    Raises:
        InvalidGeometryError: If any margin is negative or the result is empty
    """
    if min(margins.as_tuple()) < 0:
        raise InvalidGeometryError(f"Crop margins must be non-negative, got {margins.as_tuple()}")

    width = buffer.width - margins.left - margins.right
    height = buffer.height - margins.top - margins.bottom
    if width <= 0 or height <= 0:
        raise InvalidGeometryError(
            f"Cropping {margins.as_tuple()} from a {buffer.width}x{buffer.height} buffer "
            f"would leave {width}x{height}"
        )


def crop(buffer: PixelBuffer, margins: CropMargins) -> PixelBuffer:
    """
    Return the region left after removing the margins.

    Output pixel (x, y) is source pixel (x + left, y + top).

    Raises:
        InvalidGeometryError: If the margins are invalid for this buffer
    """
    validate_crop_margins(buffer, margins)

    bottom_edge = buffer.height - margins.bottom
    right_edge = buffer.width - margins.right
    return PixelBuffer.from_array(buffer.pixels[margins.top:bottom_edge, margins.left:right_edge])
