"""
Preview sessions for Image Viewer.

A preview session shows a transient crop of the current image while the
user adjusts margins. Nothing is recorded in the edit history until the
session is committed, and discarding it restores the image exactly as it
was when the session began.
"""

import logging
from typing import TYPE_CHECKING

from IV_Libs.ImageEditingLib.geometry_ops import crop
from IV_Libs.ImageEditingLib.image_models import CropMargins, PixelBuffer, PreviewClosedError

if TYPE_CHECKING:
    from IV_Libs.EditorLib.image_engine import ImageEngine

logger = logging.getLogger(__name__)


class PreviewSession:
    """
    A single-use crop preview over an engine's current image.

    Created by :meth:`ImageEngine.begin_crop_preview`. Margins start at zero,
    so the preview initially shows the unmodified image.

    Example:
        >>> session = engine.begin_crop_preview()
        >>> session.update(10, 10, 0, 0)
        >>> session.update(12, 8, 0, 0)
        >>> session.commit()  # one crop edit, margins (12, 8, 0, 0)
    """

    def __init__(self, engine: "ImageEngine", original: PixelBuffer) -> None:
        self._engine = engine
        self._original = original.clone()
        self.margins = CropMargins()
        self._closed = False

    @property
    def is_open(self) -> bool:
        return not self._closed

    @property
    def original(self) -> PixelBuffer:
        """The image as it was before the preview began."""
        return self._original

    def _check_open(self) -> None:
        if self._closed:
            raise PreviewClosedError("This preview session has already been closed")

    def update(self, left: int, right: int, bottom: int, top: int) -> PixelBuffer:
        """
        Show the original cropped by new margins.

        Each update starts from the original image, never from the previous
        preview.

        Returns:
            The preview buffer now shown as the current image

        Raises:
            InvalidGeometryError: If the margins are invalid; the last valid
                preview stays shown
            PreviewClosedError: If the session is closed
        """
        self._check_open()

        margins = CropMargins(int(left), int(right), int(bottom), int(top))
        preview = crop(self._original, margins)
        self.margins = margins
        self._engine._show_preview(preview)
        logger.debug(f"Previewing crop {margins.as_tuple()}")
        return preview

    def commit(self) -> str:
        """
        Record the previewed crop as exactly one edit.

        Returns:
            The engine status message
        """
        self._check_open()
        self._closed = True
        self._engine._end_preview(self._original)
        return self._engine.crop(*self.margins.as_tuple())

    def _detach(self) -> None:
        # Used by the engine when the image is replaced under an open preview.
        self._closed = True

    def discard(self) -> str:
        """
        Drop the preview and restore the original image.

        Returns:
            The engine status message
        """
        self._check_open()
        self._closed = True
        return self._engine._end_preview(self._original, discarded=True)
