"""
Unit tests for edit_session module.

Tests session ownership, mode gating of edit controls, drag handling,
the reset control and applying/cancelling a session.
"""

import pytest
from PIL import Image

from MR_Libs.errors import SessionError
from MR_Libs.ImageEditingLib.compositor import JPEG_MAGIC, decode_image
from MR_Libs.ImageEditingLib.edit_models import EditorMode, FilterSettings, Transform
from MR_Libs.ImageEditingLib.edit_session import EditSession, SessionRegistry


@pytest.fixture
def registry():
    return SessionRegistry()


@pytest.fixture
def session(registry, split_image):
    return EditSession(split_image, registry, ("ACTIF", 0))


class TestSessionRegistry:
    """Tests for one-session-per-record ownership."""

    def test_second_session_on_same_record_is_rejected(self, registry, session, split_image):
        with pytest.raises(SessionError):
            EditSession(split_image, registry, ("ACTIF", 0))

    def test_other_records_can_be_edited(self, registry, session, split_image):
        other = EditSession(split_image, registry, ("ACTIF", 1))
        assert other.is_open

    def test_record_is_released_after_apply(self, registry, session, split_image):
        session.apply()
        assert not registry.is_active(("ACTIF", 0))
        assert EditSession(split_image, registry, ("ACTIF", 0)).is_open

    def test_record_is_released_after_cancel(self, registry, session):
        session.cancel()
        assert not registry.is_active(("ACTIF", 0))


class TestModeGating:
    """Tests that each control group is only writable in its mode."""

    def test_starts_in_filters_mode(self, session):
        assert session.mode is EditorMode.FILTERS

    def test_filter_controls(self, session):
        session.set_brightness(150)
        session.set_contrast(80)
        session.toggle_grayscale()

        assert session.state.filters == FilterSettings(brightness=150.0, contrast=80.0, grayscale=100.0)

    def test_filter_values_are_clamped(self, session):
        session.set_brightness(500)
        session.set_contrast(0)
        assert session.state.filters.brightness == 200.0
        assert session.state.filters.contrast == 50.0

    def test_crop_controls_rejected_in_filters_mode(self, session):
        with pytest.raises(SessionError):
            session.set_zoom(2.0)
        with pytest.raises(SessionError):
            session.set_aspect("1:1")

    def test_text_rejected_outside_text_mode(self, session):
        with pytest.raises(SessionError):
            session.set_text("INDEX")

    def test_filters_rejected_in_crop_mode(self, session):
        session.set_mode(EditorMode.CROP)
        with pytest.raises(SessionError):
            session.set_brightness(120)

    def test_mode_changes_keep_state(self, session):
        """Any transition is allowed and nothing is reset."""
        session.set_brightness(120)
        session.set_mode(EditorMode.TEXT)
        session.set_text("COMPTEUR 7")
        session.set_mode(EditorMode.CROP)
        session.set_zoom(2.0)
        session.set_aspect("4:3")
        session.set_mode(EditorMode.FILTERS)

        state = session.state
        assert state.filters.brightness == 120.0
        assert state.annotation_text == "COMPTEUR 7"
        assert state.transform.zoom == 2.0
        assert state.crop_aspect == pytest.approx(4 / 3)

    def test_zoom_is_clamped(self, session):
        session.set_mode(EditorMode.CROP)
        assert session.set_zoom(5.0).transform.zoom == 3.0
        assert session.set_zoom(0.2).transform.zoom == 1.0

    def test_clear_text(self, session):
        session.set_mode(EditorMode.TEXT)
        session.set_text("A")
        assert session.clear_text().annotation_text == ""


class TestDragging:
    """Tests for pan drags routed through the session."""

    def test_drag_ignored_outside_crop_mode(self, session):
        assert session.press(0, 0) is False
        session.move(50, 50)
        session.release()
        assert session.state.transform == Transform()

    def test_drag_updates_offset_continuously(self, session):
        session.set_mode(EditorMode.CROP)
        assert session.press(10, 10) is True

        assert session.move(60, 30).transform.offset_x == 50.0
        state = session.move(70, 40)
        assert (state.transform.offset_x, state.transform.offset_y) == (60.0, 30.0)

        session.release()
        session.move(500, 500)
        assert session.state.transform.offset_x == 60.0

    def test_second_drag_starts_from_current_offset(self, session):
        session.set_mode(EditorMode.CROP)
        session.press(0, 0)
        session.move(20, 0)
        session.release()
        session.press(100, 100)
        session.move(105, 100)
        assert session.state.transform.offset_x == 25.0

    def test_cancel_drag_restores_offset(self, session):
        session.set_mode(EditorMode.CROP)
        session.press(0, 0)
        session.move(40, 40)
        state = session.cancel_drag()
        assert (state.transform.offset_x, state.transform.offset_y) == (0.0, 0.0)

    def test_drag_preserves_zoom(self, session):
        session.set_mode(EditorMode.CROP)
        session.set_zoom(2.5)
        session.press(0, 0)
        session.move(10, 0)
        assert session.state.transform.zoom == 2.5


class TestReset:
    """Tests for the reset control."""

    def test_reset_restores_geometry_only(self, session):
        session.set_brightness(140)
        session.set_mode(EditorMode.TEXT)
        session.set_text("NOTE")
        session.set_mode(EditorMode.CROP)
        session.set_zoom(2.0)
        session.set_aspect("16:9")
        session.press(0, 0)
        session.move(30, 30)
        session.release()

        state = session.reset()

        assert state.transform == Transform()
        assert state.crop_aspect is None
        assert state.filters.brightness == 140.0
        assert state.annotation_text == "NOTE"

    def test_reset_requires_crop_mode(self, session):
        with pytest.raises(SessionError):
            session.reset()


class TestApplyAndCancel:
    """Tests for closing a session."""

    def test_preview_has_frame_size(self, session):
        assert session.preview().size == (800, 600)

    def test_apply_returns_cropped_jpeg(self, session):
        session.set_mode(EditorMode.CROP)
        session.set_aspect("1:1")

        data = session.apply()

        assert data[:3] == JPEG_MAGIC
        assert decode_image(data).size == (800, 800)
        assert not session.is_open

    def test_operations_after_apply_are_rejected(self, session):
        session.apply()
        with pytest.raises(SessionError):
            session.state
        with pytest.raises(SessionError):
            session.preview()
        with pytest.raises(SessionError):
            session.apply()
        with pytest.raises(SessionError):
            session.set_mode(EditorMode.CROP)

    def test_operations_after_cancel_are_rejected(self, session):
        session.cancel()
        with pytest.raises(SessionError):
            session.set_brightness(120)
        with pytest.raises(SessionError):
            session.cancel()

    def test_source_is_not_modified(self, registry):
        source = Image.new("RGB", (40, 30), (90, 90, 90))
        before = source.tobytes()
        session = EditSession(source, registry, "photo")
        session.set_brightness(200)
        session.apply()
        assert source.tobytes() == before
