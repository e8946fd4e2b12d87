"""
EditorLib - Editing engine and user interface

This module provides the engine that owns the current image, the crop
preview session and the Qt main window.

The window is not imported here so the engine can be used without Qt.
"""

from IV_Libs.EditorLib.image_engine import ImageEngine
from IV_Libs.EditorLib.preview_session import PreviewSession

__all__ = [
    "ImageEngine",
    "PreviewSession",
]
