"""
Image editing engine for Image Viewer.

ImageEngine owns the current image and its edit history. Every edit that
changes the image is recorded in the history first, so it can be undone
and redone. Calls made with no image loaded change nothing and report
"No image loaded." through the returned status message.

Example:
    >>> engine = ImageEngine()
    >>> engine.open_file("photo.png")
    True
    >>> engine.apply_filter("Invert")
    'Applied: Invert'
    >>> engine.undo()
    'Undo: Invert'
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional, Union

from IV_Libs.EditorLib.preview_session import PreviewSession
from IV_Libs.HistoryLib.edit_history import CommandKind, EditHistory, ReversibleCommand
from IV_Libs.ImageEditingLib.geometry_ops import crop, enlarge, shrink
from IV_Libs.ImageEditingLib.image_codec import load_image, save_image
from IV_Libs.ImageEditingLib.image_models import (
    CropMargins,
    InvalidGeometryError,
    PixelBuffer,
    PreviewInProgressError,
)
from IV_Libs.ImageEditingLib.pixel_filters import FilterCatalog, get_default_catalog
from IV_Libs.constants import (
    STATUS_APPLIED_PREFIX,
    STATUS_CLOSED,
    STATUS_CROPPED,
    STATUS_ENLARGED,
    STATUS_FILE_LOADED,
    STATUS_FILE_SAVED,
    STATUS_INVALID_FORMAT,
    STATUS_NO_IMAGE,
    STATUS_NOTHING_TO_REDO,
    STATUS_NOTHING_TO_UNDO,
    STATUS_PREVIEW_DISCARDED,
    STATUS_REDO_PREFIX,
    STATUS_SAVE_FAILED,
    STATUS_SHRUNK,
    STATUS_UNDO_PREFIX,
    UNDO_LIMIT,
)

logger = logging.getLogger(__name__)

GeometryOperation = Callable[[PixelBuffer], PixelBuffer]


class ImageEngine:
    """
    Composition root of the editor: current image, filters and history.

    Attributes:
        current: The image being edited, or None when nothing is loaded
        filename: Path of the file the image came from or was saved to
        status: The most recent status message
        history: Undo/redo history of edits to the current image
        catalog: Filters available to apply_filter
    """

    def __init__(
        self,
        catalog: Optional[FilterCatalog] = None,
        history_limit: int = UNDO_LIMIT,
    ) -> None:
        self.catalog = catalog if catalog is not None else get_default_catalog()
        self.current: Optional[PixelBuffer] = None
        self.filename: Optional[str] = None
        self.status = ""
        self.history = EditHistory(
            restore=self._install,
            replay=self._replay,
            limit=history_limit,
        )
        self._preview: Optional[PreviewSession] = None

    @property
    def has_image(self) -> bool:
        return self.current is not None

    @property
    def preview(self) -> Optional[PreviewSession]:
        return self._preview

    def filter_names(self) -> List[str]:
        return self.catalog.list_filter_names()

    def _set_status(self, text: str) -> str:
        self.status = text
        logger.debug(f"Status: {text}")
        return text

    def _require_no_preview(self) -> None:
        if self._preview is not None:
            raise PreviewInProgressError("Commit or discard the crop preview first")

    def _drop_preview(self) -> None:
        if self._preview is not None:
            self._preview._detach()
            self._preview = None

    def _install(self, buffer: PixelBuffer) -> None:
        self.current = buffer

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def load(self, buffer: Optional[PixelBuffer], filename: Optional[str] = None) -> bool:
        """
        Install a decoded image as the current image.

        A None buffer is the codec's invalid-format signal: nothing changes
        and the status tells the user the file was not recognized.

        Returns:
            True if an image was installed
        """
        if buffer is None:
            self._set_status(STATUS_INVALID_FORMAT)
            return False

        self._drop_preview()
        self.current = buffer
        self.filename = filename
        self.history.clear()
        logger.info(f"Loaded image {buffer.width}x{buffer.height}")
        self._set_status(STATUS_FILE_LOADED)
        return True

    def open_file(self, path: Union[str, Path]) -> bool:
        return self.load(load_image(path), filename=str(path))

    def save_as(self, path: Union[str, Path]) -> bool:
        """
        Write the current image to path.

        Returns:
            True if the file was written
        """
        if self.current is None:
            self._set_status(STATUS_NO_IMAGE)
            return False

        if not save_image(self.current, path):
            self._set_status(STATUS_SAVE_FAILED)
            return False

        self.filename = str(path)
        self._set_status(STATUS_FILE_SAVED)
        return True

    def close(self) -> str:
        self._drop_preview()
        self.current = None
        self.filename = None
        self.history.clear()
        return self._set_status(STATUS_CLOSED)

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def _record(self, command: ReversibleCommand, mutation: Callable[[], None]) -> None:
        try:
            self.history.record_and_apply(command, mutation)
        except Exception:
            self.current = command.backup.clone()
            raise

    def apply_filter(self, name: str) -> str:
        """
        Apply a catalog filter to the current image.

        Raises:
            KeyError: If name is not in the catalog
        """
        if self.current is None:
            return self._set_status(STATUS_NO_IMAGE)

        self._require_no_preview()
        function = self.catalog.get_filter(name)
        target = self.current
        command = ReversibleCommand.for_filter(target, name)
        self._record(command, lambda: function(target))
        return self._set_status(STATUS_APPLIED_PREFIX + name)

    def _apply_geometry(
        self,
        command_factory: Callable[[PixelBuffer], ReversibleCommand],
        operation: GeometryOperation,
        status: str,
    ) -> str:
        if self.current is None:
            return self._set_status(STATUS_NO_IMAGE)

        self._require_no_preview()
        try:
            result = operation(self.current)
        except InvalidGeometryError as exc:
            logger.warning(f"Rejected edit: {exc}")
            self._set_status(str(exc))
            raise

        command = command_factory(self.current)
        self._record(command, lambda: self._install(result))
        return self._set_status(status)

    def enlarge(self) -> str:
        return self._apply_geometry(ReversibleCommand.for_enlarge, enlarge, STATUS_ENLARGED)

    def shrink(self) -> str:
        """
        Halve the current image.

        Raises:
            InvalidGeometryError: If the image is narrower or shorter than 2 pixels
        """
        return self._apply_geometry(ReversibleCommand.for_shrink, shrink, STATUS_SHRUNK)

    def crop(self, left: int, right: int, bottom: int, top: int) -> str:
        """
        Remove margins from the current image.

        Raises:
            InvalidGeometryError: If a margin is negative or nothing would remain
        """
        margins = CropMargins(int(left), int(right), int(bottom), int(top))
        return self._apply_geometry(
            lambda before: ReversibleCommand.for_crop(before, margins),
            lambda buffer: crop(buffer, margins),
            STATUS_CROPPED,
        )

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def undo(self) -> str:
        self._require_no_preview()
        command = self.history.undo()
        if command is None:
            return self._set_status(STATUS_NOTHING_TO_UNDO)
        return self._set_status(STATUS_UNDO_PREFIX + command.label)

    def redo(self) -> str:
        self._require_no_preview()
        command = self.history.redo()
        if command is None:
            return self._set_status(STATUS_NOTHING_TO_REDO)
        return self._set_status(STATUS_REDO_PREFIX + command.label)

    def _replay(self, command: ReversibleCommand) -> None:
        if self.current is None:
            raise RuntimeError("Cannot redo an edit without a current image")

        try:
            if command.kind is CommandKind.FILTER:
                self.catalog.apply(command.filter_name, self.current)
            elif command.kind is CommandKind.ENLARGE:
                self.current = enlarge(self.current)
            elif command.kind is CommandKind.SHRINK:
                self.current = shrink(self.current)
            elif command.kind is CommandKind.CROP:
                self.current = crop(self.current, command.margins)
            else:
                raise ValueError(f"Unsupported command kind: {command.kind}")
        except Exception:
            self.current = command.backup.clone()
            raise

    # ------------------------------------------------------------------
    # Preview
    # ------------------------------------------------------------------

    def begin_crop_preview(self) -> Optional[PreviewSession]:
        """
        Start a crop preview over the current image.

        Returns:
            The new session, or None if no image is loaded

        Raises:
            PreviewInProgressError: If another preview is still open
        """
        if self.current is None:
            self._set_status(STATUS_NO_IMAGE)
            return None

        self._require_no_preview()
        self._preview = PreviewSession(self, self.current)
        return self._preview

    def _show_preview(self, buffer: PixelBuffer) -> None:
        self.current = buffer

    def _end_preview(self, original: PixelBuffer, discarded: bool = False) -> str:
        self._preview = None
        self.current = original.clone()
        if discarded:
            logger.debug("Crop preview discarded")
            return self._set_status(STATUS_PREVIEW_DISCARDED)
        return self.status
