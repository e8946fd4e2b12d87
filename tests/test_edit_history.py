"""
Unit tests for edit_history module.

Exercises EditHistory against a minimal document holding one buffer, so
the stack behaviour is tested independently of the engine.
"""

import pytest

from conftest import make_gradient
from IV_Libs.HistoryLib.edit_history import CommandKind, EditHistory, ReversibleCommand
from IV_Libs.ImageEditingLib.geometry_ops import crop, enlarge
from IV_Libs.ImageEditingLib.image_models import CropMargins, PixelBuffer
from IV_Libs.ImageEditingLib.pixel_filters import get_default_catalog


class Document:
    """Holds a current buffer and replays commands the way the engine does."""

    def __init__(self, buffer, limit=100):
        self.current = buffer
        self.replayed = []
        self.history = EditHistory(restore=self.restore, replay=self.replay, limit=limit)

    def restore(self, snapshot):
        self.current = snapshot

    def replay(self, command):
        self.replayed.append(command.label)
        if command.kind is CommandKind.FILTER:
            get_default_catalog().apply(command.filter_name, self.current)
        elif command.kind is CommandKind.ENLARGE:
            self.current = enlarge(self.current)
        elif command.kind is CommandKind.CROP:
            self.current = crop(self.current, command.margins)

    def apply_filter(self, name):
        command = ReversibleCommand.for_filter(self.current, name)
        target = self.current
        self.history.record_and_apply(command, lambda: get_default_catalog().apply(name, target))

    def enlarge(self):
        command = ReversibleCommand.for_enlarge(self.current)
        self.history.record_and_apply(command, lambda: setattr(self, "current", enlarge(self.current)))


@pytest.fixture
def document():
    return Document(make_gradient(6, 4))


class TestReversibleCommand:
    """Tests for the command value."""

    def test_backup_is_independent_copy(self, gradient_buffer):
        command = ReversibleCommand.for_filter(gradient_buffer, "Invert")
        gradient_buffer.set(0, 0, (1, 2, 3))

        assert command.backup.get(0, 0) != (1, 2, 3)
        assert command.kind is CommandKind.FILTER

    def test_labels(self, gradient_buffer):
        assert ReversibleCommand.for_filter(gradient_buffer, "Fish Eye").label == "Fish Eye"
        assert ReversibleCommand.for_enlarge(gradient_buffer).label == "Enlarge"
        assert ReversibleCommand.for_shrink(gradient_buffer).label == "Shrink"
        assert ReversibleCommand.for_crop(gradient_buffer, CropMargins()).label == "Crop"

    def test_crop_keeps_margins(self, gradient_buffer):
        command = ReversibleCommand.for_crop(gradient_buffer, CropMargins(1, 2, 3, 4))
        assert command.margins == CropMargins(1, 2, 3, 4)

    def test_missing_parameters_rejected(self, gradient_buffer):
        with pytest.raises(ValueError):
            ReversibleCommand(CommandKind.FILTER, gradient_buffer)
        with pytest.raises(ValueError):
            ReversibleCommand(CommandKind.CROP, gradient_buffer)


class TestUndoRedo:
    """Tests for undo/redo stack behaviour."""

    def test_fresh_history_is_empty(self, document):
        history = document.history
        assert not history.can_undo()
        assert not history.can_redo()
        assert history.undo_label() is None
        assert history.redo_label() is None

    def test_undo_restores_exact_content(self, document):
        original = document.current.clone()
        document.apply_filter("Smooth")
        assert document.current != original

        command = document.history.undo()

        assert command.label == "Smooth"
        assert document.current == original
        assert document.history.can_redo()

    def test_redo_reproduces_exact_content(self, document):
        document.apply_filter("Edge Detection")
        after = document.current.clone()

        document.history.undo()
        document.history.redo()

        assert document.current == after
        assert document.replayed == ["Edge Detection"]
        assert document.history.undo_label() == "Edge Detection"

    def test_restored_buffer_is_not_the_snapshot(self, document):
        """Should keep the snapshot intact when the restored image is edited."""
        original = document.current.clone()
        document.apply_filter("Invert")

        document.history.undo()
        document.history.redo()
        document.history.undo()

        assert document.current == original

    def test_multiple_undos_then_redos(self, document):
        states = [document.current.clone()]
        for name in ("Invert", "Mirror", "Pixelize"):
            document.apply_filter(name)
            states.append(document.current.clone())

        for expected in reversed(states[:-1]):
            document.history.undo()
            assert document.current == expected

        for expected in states[1:]:
            document.history.redo()
            assert document.current == expected

    def test_geometry_undo_restores_dimensions(self, document):
        document.enlarge()
        assert document.current.size == (12, 8)

        document.history.undo()
        assert document.current.size == (6, 4)

        document.history.redo()
        assert document.current.size == (12, 8)

    def test_new_edit_discards_redo(self, document):
        document.apply_filter("Invert")
        document.apply_filter("Mirror")
        document.history.undo()
        assert document.history.redo_label() == "Mirror"

        document.apply_filter("Darker")

        assert not document.history.can_redo()
        assert document.history.redo() is None
        assert document.history.undo_count == 2

    def test_empty_undo_is_noop(self, document):
        before = document.current.clone()

        assert document.history.undo() is None

        assert document.current == before
        assert document.history.undo_count == 0
        assert document.history.redo_count == 0

    def test_empty_redo_is_noop(self, document):
        document.apply_filter("Invert")
        after = document.current.clone()

        assert document.history.redo() is None
        assert document.current == after
        assert document.history.undo_count == 1

    def test_clear(self, document):
        document.apply_filter("Invert")
        document.apply_filter("Mirror")
        document.history.undo()

        document.history.clear()

        assert document.history.undo_count == 0
        assert document.history.redo_count == 0


class TestRecordAndApply:
    """Tests for transactional recording."""

    def test_returns_mutation_result(self, document):
        command = ReversibleCommand.for_enlarge(document.current)
        assert document.history.record_and_apply(command, lambda: "done") == "done"

    def test_failed_mutation_is_not_recorded(self, document):
        document.apply_filter("Invert")
        document.apply_filter("Mirror")
        document.history.undo()

        def explode():
            raise RuntimeError("boom")

        command = ReversibleCommand.for_filter(document.current, "Darker")
        with pytest.raises(RuntimeError):
            document.history.record_and_apply(command, explode)

        assert document.history.undo_label() == "Invert"
        assert document.history.redo_label() == "Mirror"

    def test_failed_redo_stays_redoable(self):
        buffer = PixelBuffer(4, 4)
        history = EditHistory(restore=lambda snapshot: None, replay=lambda command: 1 / 0)
        history.record_and_apply(ReversibleCommand.for_enlarge(buffer), lambda: None)
        history.undo()

        with pytest.raises(ZeroDivisionError):
            history.redo()

        assert history.can_redo()
        assert not history.can_undo()


class TestLimit:
    """Tests for the history size limit."""

    def test_oldest_edit_evicted(self):
        document = Document(make_gradient(4, 4), limit=2)
        original = document.current.clone()
        document.apply_filter("Invert")
        after_first = document.current.clone()
        document.apply_filter("Mirror")
        document.apply_filter("Darker")

        assert document.history.undo_count == 2
        document.history.undo()
        document.history.undo()
        assert document.history.undo() is None
        assert document.current == after_first
        assert document.current != original

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            EditHistory(restore=lambda snapshot: None, replay=lambda command: None, limit=0)
