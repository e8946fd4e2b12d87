"""
Pixel Filters and the Filter Catalog.

Provides the eleven built-in filters of the viewer's Filter menu:
- Point filters: Darker, Lighter, Threshold, Invert, Solarize, Grayscale
- Neighbourhood filters: Smooth, Edge Detection (3x3 window)
- Spatial filters: Pixelize, Mirror, Fish Eye

Every filter mutates a PixelBuffer in place, keeps its dimensions and is
deterministic. Neighbourhood and spatial filters read from a copy of the
original pixels and never address a coordinate outside the buffer.

Example:
    >>> catalog = get_default_catalog()
    >>> catalog.list_filter_names()[:3]
    ['Darker', 'Lighter', 'Threshold']
    >>> catalog.apply("Invert", buffer)
"""

import logging
import math
from typing import Callable, Dict, List, Optional

import numpy as np

from IV_Libs.ImageEditingLib.image_models import PixelBuffer
from IV_Libs.constants import (
    BRIGHTNESS_FACTOR,
    CHANNEL_MAX,
    EDGE_TOLERANCE,
    FILTER_DARKER,
    FILTER_EDGE_DETECTION,
    FILTER_FISH_EYE,
    FILTER_GRAYSCALE,
    FILTER_INVERT,
    FILTER_LIGHTER,
    FILTER_MIRROR,
    FILTER_PIXELIZE,
    FILTER_SMOOTH,
    FILTER_SOLARIZE,
    FILTER_THRESHOLD,
    FISH_EYE_SCALE,
    PIXELIZE_BLOCK_SIZE,
    SOLARIZE_LIMIT,
    THRESHOLD_GRAY,
    THRESHOLD_HIGH,
    THRESHOLD_LOW,
)

logger = logging.getLogger(__name__)

# Type alias for filter function
FilterFunction = Callable[[PixelBuffer], None]

_NEIGHBOUR_OFFSETS = [(dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1)]


def _is_empty(buffer: PixelBuffer) -> bool:
    return buffer.width == 0 or buffer.height == 0


def _channels(buffer: PixelBuffer) -> np.ndarray:
    return buffer.pixels.astype(np.int32)


# ============================================================================
# Point filters
# ============================================================================

def apply_darker(buffer: PixelBuffer) -> None:
    """Scale every channel by 0.7, rounding down."""
    darker = (buffer.pixels * BRIGHTNESS_FACTOR).astype(np.int32)
    buffer.replace_pixels(darker)


def apply_lighter(buffer: PixelBuffer) -> None:
    """
    Brighten every pixel by dividing its channels by 0.7.

    Black pixels become a dark gray so repeated application still lightens
    them, and channels just above zero are lifted to the same floor first.
    """
    channels = _channels(buffer)
    floor = int(1.0 / (1.0 - BRIGHTNESS_FACTOR))

    black = np.all(channels == 0, axis=2)
    lifted = np.where((channels > 0) & (channels < floor), floor, channels)
    lighter = np.minimum((lifted / BRIGHTNESS_FACTOR).astype(np.int32), CHANNEL_MAX)
    lighter[black] = floor

    buffer.replace_pixels(lighter)


def apply_threshold(buffer: PixelBuffer) -> None:
    """Reduce the image to black, gray and white by average brightness."""
    brightness = _channels(buffer).sum(axis=2) // 3

    result = np.full(buffer.pixels.shape, CHANNEL_MAX, dtype=np.int32)
    result[brightness <= THRESHOLD_HIGH] = THRESHOLD_GRAY
    result[brightness <= THRESHOLD_LOW] = 0

    buffer.replace_pixels(result)


def apply_invert(buffer: PixelBuffer) -> None:
    buffer.replace_pixels(CHANNEL_MAX - _channels(buffer))


def apply_solarize(buffer: PixelBuffer) -> None:
    """Invert only the channels at or below the midpoint."""
    channels = _channels(buffer)
    buffer.replace_pixels(np.where(channels <= SOLARIZE_LIMIT, CHANNEL_MAX - channels, channels))


def apply_grayscale(buffer: PixelBuffer) -> None:
    average = _channels(buffer).sum(axis=2) // 3
    buffer.replace_pixels(np.repeat(average[:, :, np.newaxis], 3, axis=2))


# ============================================================================
# Neighbourhood filters
# ============================================================================

def apply_smooth(buffer: PixelBuffer) -> None:
    """
    Replace every pixel with the mean of its 3x3 neighbourhood.

    Only neighbours inside the buffer take part, so edge pixels average
    fewer samples (six at a border, four at a corner).
    """
    if _is_empty(buffer):
        return

    height, width = buffer.height, buffer.width
    padded = np.pad(_channels(buffer), ((1, 1), (1, 1), (0, 0)))
    inside = np.pad(np.ones((height, width), dtype=np.int32), 1)

    totals = np.zeros((height, width, 3), dtype=np.int32)
    counts = np.zeros((height, width), dtype=np.int32)
    for dx, dy in _NEIGHBOUR_OFFSETS:
        totals += padded[1 + dy:1 + dy + height, 1 + dx:1 + dx + width]
        counts += inside[1 + dy:1 + dy + height, 1 + dx:1 + dx + width]

    buffer.replace_pixels(totals // counts[:, :, np.newaxis])


def apply_edge_detection(buffer: PixelBuffer) -> None:
    """
    Highlight edges as dark lines on a white background.

    Each channel becomes ``255 - max(0, spread - 20)`` where spread is the
    difference between the largest and smallest value in the in-bounds 3x3
    neighbourhood.
    """
    if _is_empty(buffer):
        return

    height, width = buffer.height, buffer.width
    # Edge padding repeats in-bounds pixels, which leaves max and min unchanged.
    padded = np.pad(_channels(buffer), ((1, 1), (1, 1), (0, 0)), mode="edge")
    windows = [
        padded[1 + dy:1 + dy + height, 1 + dx:1 + dx + width]
        for dx, dy in _NEIGHBOUR_OFFSETS
    ]
    spread = np.max(windows, axis=0) - np.min(windows, axis=0)
    difference = np.maximum(spread - EDGE_TOLERANCE, 0)

    buffer.replace_pixels(CHANNEL_MAX - difference)


# ============================================================================
# Spatial filters
# ============================================================================

def apply_pixelize(buffer: PixelBuffer) -> None:
    """Paint each 5x5 block with the color of its top-left pixel."""
    if _is_empty(buffer):
        return

    rows = (np.arange(buffer.height) // PIXELIZE_BLOCK_SIZE) * PIXELIZE_BLOCK_SIZE
    cols = (np.arange(buffer.width) // PIXELIZE_BLOCK_SIZE) * PIXELIZE_BLOCK_SIZE
    buffer.replace_pixels(buffer.pixels[rows[:, np.newaxis], cols[np.newaxis, :]])


def apply_mirror(buffer: PixelBuffer) -> None:
    buffer.replace_pixels(buffer.pixels[:, ::-1].copy())


def _fish_eye_offsets(length: int) -> np.ndarray:
    positions = np.arange(length)
    return (np.sin(positions / length * 2 * math.pi) * FISH_EYE_SCALE).astype(np.int32)


def apply_fish_eye(buffer: PixelBuffer) -> None:
    """
    Distort the image with a sine-shaped displacement along both axes.

    Source coordinates that fall outside the buffer are clamped to its edge.
    """
    if _is_empty(buffer):
        return

    height, width = buffer.height, buffer.width
    cols = np.clip(np.arange(width) + _fish_eye_offsets(width), 0, width - 1)
    rows = np.clip(np.arange(height) + _fish_eye_offsets(height), 0, height - 1)
    buffer.replace_pixels(buffer.pixels[rows[:, np.newaxis], cols[np.newaxis, :]])


# ============================================================================
# Filter Catalog
# ============================================================================

class FilterCatalog:
    """
    Ordered registry of named filters.

    Names are the labels shown in the Filter menu and in status messages.
    Filters are listed in the order they were registered.

    Example:
        >>> catalog = FilterCatalog()
        >>> catalog.register("Invert", apply_invert)
        >>> catalog.apply("Invert", buffer)
    """

    def __init__(self) -> None:
        self._filters: Dict[str, FilterFunction] = {}

    def register(self, name: str, function: FilterFunction) -> None:
        """
        Register a filter under a display name.

        Raises:
            ValueError: If name is empty or function is not callable
            RuntimeError: If name is already registered
        """
        name = str(name).strip()

        if not name:
            raise ValueError("filter name cannot be empty")

        if not callable(function):
            raise ValueError(f"filter must be callable, got {type(function)}")

        if name in self._filters:
            raise RuntimeError(f"Filter '{name}' is already registered")

        self._filters[name] = function
        logger.debug(f"Registered filter: {name}")

    def get_filter(self, name: str) -> FilterFunction:
        """
        Look up a filter by name.

        Raises:
            KeyError: If no filter is registered under name
        """
        name = str(name).strip()

        if name not in self._filters:
            available = ", ".join(self.list_filter_names())
            raise KeyError(f"No filter named '{name}'. Available filters: {available}")

        return self._filters[name]

    def has_filter(self, name: str) -> bool:
        return str(name).strip() in self._filters

    def list_filter_names(self) -> List[str]:
        return list(self._filters.keys())

    def apply(self, name: str, buffer: PixelBuffer) -> None:
        self.get_filter(name)(buffer)

    def __len__(self) -> int:
        return len(self._filters)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has_filter(name)


BUILTIN_FILTERS = [
    (FILTER_DARKER, apply_darker),
    (FILTER_LIGHTER, apply_lighter),
    (FILTER_THRESHOLD, apply_threshold),
    (FILTER_INVERT, apply_invert),
    (FILTER_SOLARIZE, apply_solarize),
    (FILTER_SMOOTH, apply_smooth),
    (FILTER_PIXELIZE, apply_pixelize),
    (FILTER_MIRROR, apply_mirror),
    (FILTER_GRAYSCALE, apply_grayscale),
    (FILTER_EDGE_DETECTION, apply_edge_detection),
    (FILTER_FISH_EYE, apply_fish_eye),
]

_default_catalog: Optional[FilterCatalog] = None


def create_default_catalog() -> FilterCatalog:
    """Build a new catalog holding the built-in filters in menu order."""
    catalog = FilterCatalog()
    for name, function in BUILTIN_FILTERS:
        catalog.register(name, function)
    return catalog


def get_default_catalog() -> FilterCatalog:
    """
    Get the shared catalog of built-in filters.

    The catalog is created on first use.
    """
    global _default_catalog

    if _default_catalog is None:
        _default_catalog = create_default_catalog()
        logger.info("Registered built-in filters")

    return _default_catalog
