"""
Tests for the ImageEngine composition root.

Tests cover:
- Loading, closing and the invalid-format signal
- Filters, enlarge, shrink and crop through the engine
- Undo/redo round trips, including redo-stack invalidation
- No-image and empty-history no-ops
- Rejected geometry leaving image and history untouched
"""

import pytest

from conftest import make_gradient
from IV_Libs.EditorLib.image_engine import ImageEngine
from IV_Libs.ImageEditingLib.image_models import InvalidGeometryError, PixelBuffer
from IV_Libs.ImageEditingLib.pixel_filters import FilterCatalog, apply_invert, get_default_catalog


class TestDocuments:
    """Tests for load and close."""

    def test_new_engine_has_no_image(self):
        engine = ImageEngine()
        assert not engine.has_image
        assert engine.current is None

    def test_load(self, gradient_buffer):
        engine = ImageEngine()

        assert engine.load(gradient_buffer, filename="a.png") is True

        assert engine.current is gradient_buffer
        assert engine.filename == "a.png"
        assert engine.status == "File loaded."

    def test_load_invalid_format_keeps_state(self, engine):
        before = engine.current.clone()
        engine.apply_filter("Invert")

        assert engine.load(None) is False

        assert engine.status == "The file was not in a recognized image file format."
        assert engine.current != before
        assert engine.history.undo_count == 1

    def test_load_clears_history(self, engine):
        engine.apply_filter("Invert")
        engine.load(PixelBuffer(2, 2))

        assert engine.history.undo_count == 0
        assert engine.undo() == "Nothing to undo."

    def test_close(self, engine):
        engine.apply_filter("Invert")

        assert engine.close() == "Image closed."

        assert engine.current is None
        assert engine.filename is None
        assert not engine.history.can_undo()

    def test_filter_names_follow_catalog(self):
        assert ImageEngine().filter_names() == get_default_catalog().list_filter_names()


class TestNoImage:
    """Every edit with no image loaded is a no-op with a status message."""

    @pytest.mark.parametrize("name", get_default_catalog().list_filter_names())
    def test_apply_filter(self, name):
        engine = ImageEngine()

        assert engine.apply_filter(name) == "No image loaded."

        assert engine.current is None
        assert engine.history.undo_count == 0

    def test_geometry(self):
        engine = ImageEngine()

        assert engine.enlarge() == "No image loaded."
        assert engine.shrink() == "No image loaded."
        assert engine.crop(1, 1, 1, 1) == "No image loaded."
        assert engine.current is None
        assert engine.history.undo_count == 0

    def test_save(self, tmp_path):
        engine = ImageEngine()
        assert engine.save_as(tmp_path / "out.png") is False
        assert engine.status == "No image loaded."
        assert not (tmp_path / "out.png").exists()

    def test_preview(self):
        engine = ImageEngine()
        assert engine.begin_crop_preview() is None
        assert engine.status == "No image loaded."


class TestEdits:
    """Tests for filter and geometry edits."""

    def test_apply_filter(self, engine):
        expected = engine.current.clone()
        apply_invert(expected)

        assert engine.apply_filter("Invert") == "Applied: Invert"

        assert engine.current == expected
        assert engine.history.undo_label() == "Invert"

    def test_unknown_filter_changes_nothing(self, engine):
        before = engine.current.clone()

        with pytest.raises(KeyError):
            engine.apply_filter("Sepia")

        assert engine.current == before
        assert engine.history.undo_count == 0

    def test_enlarge_and_shrink(self, engine):
        assert engine.enlarge() == "Enlarged."
        assert engine.current.size == (24, 18)

        assert engine.shrink() == "Shrunk."
        assert engine.current.size == (12, 9)
        assert engine.history.undo_count == 2

    def test_crop(self, engine):
        source = engine.current.clone()

        assert engine.crop(1, 2, 3, 4) == "Cropped."

        assert engine.current.size == (9, 2)
        assert engine.current.get(0, 0) == source.get(1, 4)

    @pytest.mark.parametrize(
        "margins",
        [(6, 6, 0, 0), (0, 12, 0, 0), (0, 0, 5, 4), (-1, 0, 0, 0), (0, 0, 0, -3)],
    )
    def test_invalid_crop_rejected(self, engine, margins):
        engine.apply_filter("Mirror")
        before = engine.current.clone()

        with pytest.raises(InvalidGeometryError):
            engine.crop(*margins)

        assert engine.current == before
        assert engine.history.undo_count == 1
        assert engine.history.undo_label() == "Mirror"

    def test_invalid_shrink_rejected(self):
        engine = ImageEngine()
        engine.load(PixelBuffer(1, 5))

        with pytest.raises(InvalidGeometryError):
            engine.shrink()

        assert engine.current.size == (1, 5)
        assert engine.history.undo_count == 0

    def test_failing_filter_restores_image(self, engine):
        def half_broken(buffer):
            buffer.set(0, 0, (1, 2, 3))
            buffer.get(buffer.width, 0)

        catalog = FilterCatalog()
        catalog.register("Broken", half_broken)
        engine.catalog = catalog
        before = engine.current.clone()

        with pytest.raises(IndexError):
            engine.apply_filter("Broken")

        assert engine.current == before
        assert engine.history.undo_count == 0


class TestHistory:
    """Tests for undo/redo through the engine."""

    def test_invert_grayscale_scenario(self, engine):
        """Two filters undone twice restore the loaded image; redone twice restore the result."""
        original = engine.current.clone()
        engine.apply_filter("Invert")
        engine.apply_filter("Grayscale")
        final = engine.current.clone()

        assert engine.undo() == "Undo: Grayscale"
        assert engine.undo() == "Undo: Invert"
        assert engine.current == original

        assert engine.redo() == "Redo: Invert"
        assert engine.redo() == "Redo: Grayscale"
        assert engine.current == final

    @pytest.mark.parametrize("name", get_default_catalog().list_filter_names())
    def test_every_filter_round_trips(self, engine, name):
        original = engine.current.clone()
        engine.apply_filter(name)
        after = engine.current.clone()

        engine.undo()
        assert engine.current == original

        engine.redo()
        assert engine.current == after

    def test_geometry_round_trips(self, engine):
        states = [engine.current.clone()]
        engine.enlarge()
        states.append(engine.current.clone())
        engine.crop(3, 1, 2, 5)
        states.append(engine.current.clone())
        engine.shrink()
        states.append(engine.current.clone())

        for expected in reversed(states[:-1]):
            engine.undo()
            assert engine.current == expected

        for expected in states[1:]:
            engine.redo()
            assert engine.current == expected

    def test_redo_replays_crop_margins(self, engine):
        engine.crop(2, 0, 0, 1)
        cropped = engine.current.clone()

        engine.undo()
        assert engine.redo() == "Redo: Crop"

        assert engine.current == cropped

    def test_new_edit_after_undo_discards_redo(self, engine):
        engine.apply_filter("Invert")
        engine.undo()
        engine.apply_filter("Darker")

        assert engine.redo() == "Nothing to redo."
        assert engine.history.undo_label() == "Darker"

    def test_empty_undo_and_redo(self, engine):
        before = engine.current.clone()

        assert engine.undo() == "Nothing to undo."
        assert engine.redo() == "Nothing to redo."

        assert engine.current == before
        assert engine.history.undo_count == 0
        assert engine.history.redo_count == 0

    def test_undo_with_no_image(self):
        engine = ImageEngine()
        assert engine.undo() == "Nothing to undo."

    def test_history_limit(self, gradient_buffer):
        engine = ImageEngine(history_limit=1)
        engine.load(gradient_buffer)
        engine.apply_filter("Invert")
        engine.apply_filter("Mirror")

        assert engine.history.undo_count == 1

    def test_engines_are_independent(self):
        first = ImageEngine()
        second = ImageEngine()
        first.load(make_gradient(3, 3))
        second.load(make_gradient(3, 3))

        first.apply_filter("Invert")

        assert second.undo() == "Nothing to undo."
        assert first.history is not second.history
