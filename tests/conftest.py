"""
Pytest configuration and shared fixtures for Image Viewer tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import numpy as np
import pytest

from IV_Libs.EditorLib.image_engine import ImageEngine
from IV_Libs.ImageEditingLib.image_models import PixelBuffer


def make_gradient(width: int, height: int) -> PixelBuffer:
    """Build a buffer whose pixels all differ, for exact-content comparisons."""
    ys, xs = np.mgrid[0:height, 0:width]
    array = np.stack(
        [
            (xs * 37 + ys * 11) % 256,
            (xs * 5 + ys * 53) % 256,
            (xs * ys * 7 + 19) % 256,
        ],
        axis=2,
    )
    return PixelBuffer.from_array(array)


@pytest.fixture
def sample_rgb_colors():
    """
    Provide a list of sample RGB color tuples for testing.

    Returns:
        List of (R, G, B) tuples with common test colors
    """
    return [
        (255, 0, 0),      # Red
        (0, 255, 0),      # Green
        (0, 0, 255),      # Blue
        (255, 255, 255),  # White
        (0, 0, 0),        # Black
        (128, 128, 128),  # Gray
    ]


@pytest.fixture
def gradient_buffer():
    """A 12x9 buffer with varied pixel content."""
    return make_gradient(12, 9)


@pytest.fixture
def red_buffer():
    """A uniform 4x4 red buffer."""
    return PixelBuffer(4, 4, fill=(255, 0, 0))


@pytest.fixture
def engine(gradient_buffer):
    """An engine with the gradient buffer loaded."""
    engine = ImageEngine()
    engine.load(gradient_buffer, filename="gradient.png")
    return engine
