"""
Reversible Commands and Edit History.

Every edit made to the current image is recorded as a ReversibleCommand
holding a snapshot of the image before the edit plus whatever is needed to
perform the edit again. EditHistory keeps two stacks of these commands:

- undo stack: applied commands, most recent last
- redo stack: undone commands, most recently undone last

Recording a new command discards the redo stack.

Classes:
    CommandKind: The kinds of edit that can be recorded
    ReversibleCommand: One undoable edit
    EditHistory: Undo/redo stacks with restore and replay callbacks
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional

from IV_Libs.ImageEditingLib.image_models import CropMargins, PixelBuffer
from IV_Libs.constants import UNDO_LIMIT

logger = logging.getLogger(__name__)


class CommandKind(Enum):
    FILTER = "filter"
    ENLARGE = "enlarge"
    SHRINK = "shrink"
    CROP = "crop"


@dataclass
class ReversibleCommand:
    """
    A record of one edit, sufficient to undo and redo it.

    Attributes:
        kind: Which edit this is
        backup: Independent copy of the image as it was before the edit
        filter_name: Catalog name of the filter (FILTER commands only)
        margins: Crop margins (CROP commands only)
    """

    kind: CommandKind
    backup: PixelBuffer
    filter_name: Optional[str] = None
    margins: Optional[CropMargins] = None

    def __post_init__(self) -> None:
        if self.kind is CommandKind.FILTER and not self.filter_name:
            raise ValueError("A filter command needs a filter_name")
        if self.kind is CommandKind.CROP and self.margins is None:
            raise ValueError("A crop command needs margins")

    @classmethod
    def for_filter(cls, before: PixelBuffer, filter_name: str) -> "ReversibleCommand":
        return cls(CommandKind.FILTER, before.clone(), filter_name=filter_name)

    @classmethod
    def for_enlarge(cls, before: PixelBuffer) -> "ReversibleCommand":
        return cls(CommandKind.ENLARGE, before.clone())

    @classmethod
    def for_shrink(cls, before: PixelBuffer) -> "ReversibleCommand":
        return cls(CommandKind.SHRINK, before.clone())

    @classmethod
    def for_crop(cls, before: PixelBuffer, margins: CropMargins) -> "ReversibleCommand":
        return cls(CommandKind.CROP, before.clone(), margins=margins)

    @property
    def label(self) -> str:
        if self.kind is CommandKind.FILTER:
            return str(self.filter_name)
        return self.kind.value.capitalize()


RestoreCallback = Callable[[PixelBuffer], None]
ReplayCallback = Callable[[ReversibleCommand], None]


class EditHistory:
    """
    Command-pattern undo/redo history.

    The history does not own the image. ``restore`` installs a snapshot as
    the current image and ``replay`` performs a command's edit again on the
    current image; both are supplied by the owner of the image.

    Example:
        >>> history = EditHistory(restore=engine_restore, replay=engine_replay)
        >>> command = ReversibleCommand.for_filter(current, "Invert")
        >>> history.record_and_apply(command, lambda: catalog.apply("Invert", current))
        >>> history.undo()
    """

    def __init__(
        self,
        restore: RestoreCallback,
        replay: ReplayCallback,
        limit: int = UNDO_LIMIT,
    ) -> None:
        """
        Raises:
            ValueError: If limit is less than 1
        """
        if limit < 1:
            raise ValueError(f"History limit must be >= 1, got {limit}")

        self._restore = restore
        self._replay = replay
        self.limit = limit
        self._undo_stack: List[ReversibleCommand] = []
        self._redo_stack: List[ReversibleCommand] = []

    @property
    def undo_count(self) -> int:
        return len(self._undo_stack)

    @property
    def redo_count(self) -> int:
        return len(self._redo_stack)

    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    def undo_label(self) -> Optional[str]:
        return self._undo_stack[-1].label if self._undo_stack else None

    def redo_label(self) -> Optional[str]:
        return self._redo_stack[-1].label if self._redo_stack else None

    def clear(self) -> None:
        self._undo_stack.clear()
        self._redo_stack.clear()
        logger.debug("Edit history cleared")

    def record_and_apply(self, command: ReversibleCommand, mutation: Callable[[], Any]) -> Any:
        """
        Record a command, discard the redo stack, then run the edit.

        If the edit raises, the command is dropped, the redo stack is put
        back and the exception propagates.

        Args:
            command: The command describing the edit
            mutation: Zero-argument callable that performs the edit

        Returns:
            Whatever mutation returns
        """
        discarded_redo = self._redo_stack
        self._undo_stack.append(command)
        self._redo_stack = []

        try:
            result = mutation()
        except Exception:
            self._undo_stack.pop()
            self._redo_stack = discarded_redo
            raise

        if discarded_redo:
            logger.debug(f"Discarded {len(discarded_redo)} redoable edit(s)")
        self._trim()
        logger.debug(f"Recorded edit: {command.label}")
        return result

    def undo(self) -> Optional[ReversibleCommand]:
        """
        Restore the image saved by the most recent command.

        Returns:
            The undone command, or None if there was nothing to undo
        """
        if not self._undo_stack:
            return None

        command = self._undo_stack.pop()
        # The snapshot must stay untouched for later undos of a redone edit.
        self._restore(command.backup.clone())
        self._redo_stack.append(command)
        logger.debug(f"Undid edit: {command.label}")
        return command

    def redo(self) -> Optional[ReversibleCommand]:
        """
        Perform the most recently undone command again.

        Returns:
            The redone command, or None if there was nothing to redo
        """
        if not self._redo_stack:
            return None

        command = self._redo_stack.pop()
        try:
            self._replay(command)
        except Exception:
            self._redo_stack.append(command)
            raise

        self._undo_stack.append(command)
        self._trim()
        logger.debug(f"Redid edit: {command.label}")
        return command

    def _trim(self) -> None:
        while len(self._undo_stack) > self.limit:
            evicted = self._undo_stack.pop(0)
            logger.debug(f"Evicted oldest edit: {evicted.label}")
