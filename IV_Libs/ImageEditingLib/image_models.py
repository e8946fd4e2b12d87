"""
Image editing data models for Image Viewer.

This module defines core data structures used throughout the editing engine.

Classes:
    PixelBuffer: Mutable, bounds-checked grid of RGB colors backed by numpy
    CropMargins: The four margins removed by a crop
    ImageEditingError: Base class of the editing error taxonomy

Type Aliases:
    RgbColor: A tuple of 3 integers representing RGB color values (0-255)
"""

from dataclasses import dataclass
from typing import Any, Iterator, Sequence, Tuple

import numpy as np

from IV_Libs.constants import CHANNEL_MAX, CHANNEL_MIN, DEFAULT_FILL_COLOR

RgbColor = Tuple[int, int, int]


class ImageEditingError(Exception):
    """Base class for all editing engine errors."""


class OutOfRangeError(ImageEditingError, IndexError):
    """Pixel access outside the buffer bounds."""


class InvalidGeometryError(ImageEditingError, ValueError):
    """A resize or crop would produce non-positive dimensions."""


class InvalidFormatError(ImageEditingError, ValueError):
    """A file could not be decoded into a pixel buffer."""


class PreviewInProgressError(ImageEditingError, RuntimeError):
    """An edit was requested while an uncommitted preview is shown."""


class PreviewClosedError(ImageEditingError, RuntimeError):
    """A preview session was used after it was committed or discarded."""


def _coerce_color(color: Sequence[int]) -> RgbColor:
    if len(color) != 3:
        raise ValueError(f"Expected an (r, g, b) color, got {color!r}")
    r, g, b = (min(max(int(channel), CHANNEL_MIN), CHANNEL_MAX) for channel in color)
    return r, g, b


class PixelBuffer:
    """
    A rectangular grid of RGB colors.

    Pixels are stored as a ``(height, width, 3)`` uint8 array, so every
    in-range coordinate always holds a color. Access outside
    ``[0, width) x [0, height)`` raises :class:`OutOfRangeError`.

    Example:
        >>> buffer = PixelBuffer(4, 3)
        >>> buffer.set(1, 2, (255, 0, 0))
        >>> buffer.get(1, 2)
        (255, 0, 0)
    """

    def __init__(self, width: int, height: int, fill: Sequence[int] = DEFAULT_FILL_COLOR) -> None:
        """
        Allocate a buffer with every pixel set to ``fill``.

        Raises:
            InvalidGeometryError: If width or height is negative
        """
        width = int(width)
        height = int(height)
        if width < 0 or height < 0:
            raise InvalidGeometryError(f"Buffer dimensions must be >= 0, got {width}x{height}")

        self._pixels = np.empty((height, width, 3), dtype=np.uint8)
        self._pixels[:, :] = _coerce_color(fill)

    @classmethod
    def from_array(cls, array: Any) -> "PixelBuffer":
        """
        Build a buffer from an array-like of shape ``(height, width, 3)``.

        The data is copied and clipped into [0, 255].

        Raises:
            ValueError: If the array does not have three channels
        """
        data = np.asarray(array)
        if data.ndim != 3 or data.shape[2] != 3:
            raise ValueError(f"Expected an array of shape (height, width, 3), got {data.shape}")

        buffer = cls(0, 0)
        buffer._pixels = np.clip(data, CHANNEL_MIN, CHANNEL_MAX).astype(np.uint8)
        return buffer

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def pixels(self) -> np.ndarray:
        """The underlying ``(height, width, 3)`` array, shared with the buffer."""
        return self._pixels

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise OutOfRangeError(
                f"Pixel ({x}, {y}) is outside a {self.width}x{self.height} buffer"
            )

    def get(self, x: int, y: int) -> RgbColor:
        self._check_bounds(x, y)
        r, g, b = self._pixels[y, x]
        return int(r), int(g), int(b)

    def set(self, x: int, y: int, color: Sequence[int]) -> None:
        self._check_bounds(x, y)
        self._pixels[y, x] = _coerce_color(color)

    def clone(self) -> "PixelBuffer":
        """Return an independent deep copy with the same size and content."""
        copy = PixelBuffer(0, 0)
        copy._pixels = self._pixels.copy()
        return copy

    def replace_pixels(self, array: np.ndarray) -> None:
        """
        Overwrite every pixel in place from a same-shaped array.

        Raises:
            ValueError: If the array shape differs from the buffer's
        """
        if array.shape != self._pixels.shape:
            raise ValueError(
                f"Replacement shape {array.shape} does not match buffer shape {self._pixels.shape}"
            )
        self._pixels[...] = np.clip(array, CHANNEL_MIN, CHANNEL_MAX)

    def iter_coordinates(self) -> Iterator[Tuple[int, int]]:
        for y in range(self.height):
            for x in range(self.width):
                yield x, y

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self._pixels.shape == other._pixels.shape and bool(
            np.array_equal(self._pixels, other._pixels)
        )

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height})"


@dataclass(frozen=True)
class CropMargins:
    left: int = 0
    right: int = 0
    bottom: int = 0
    top: int = 0

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return self.left, self.right, self.bottom, self.top
