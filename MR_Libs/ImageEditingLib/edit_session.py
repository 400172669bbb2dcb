"""
Editing sessions: one open EditState per photo record.

A session owns the current EditState and the active EditorMode. The mode
only gates which setters are writable; switching modes never resets state.
Applying or cancelling closes the session, after which every operation is
rejected with SessionError.

Classes:
    SessionRegistry: Tracks which record keys have an open session
    EditSession: Mode-gated editing of one photo
"""

import logging
from dataclasses import replace
from typing import Any, Hashable, Optional, Set

from MR_Libs.constants import FILTER_PERCENT_MAX, FILTER_PERCENT_MIN, ZOOM_MAX, ZOOM_MIN
from MR_Libs.errors import SessionError
from MR_Libs.ImageEditingLib.compositor import preview_frame, render_output
from MR_Libs.ImageEditingLib.drag_tracker import DragTracker
from MR_Libs.ImageEditingLib.edit_models import (
    CompositorConfig,
    EditorMode,
    EditState,
    Transform,
    parse_aspect,
)

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Rejects a second session on a record that is already being edited."""

    def __init__(self) -> None:
        self._active: Set[Hashable] = set()

    def acquire(self, record_key: Hashable) -> None:
        if record_key in self._active:
            raise SessionError(f"An edit session is already open for {record_key!r}")
        self._active.add(record_key)
        logger.debug(f"Opened edit session for {record_key!r}")

    def release(self, record_key: Hashable) -> None:
        self._active.discard(record_key)
        logger.debug(f"Closed edit session for {record_key!r}")

    def is_active(self, record_key: Hashable) -> bool:
        return record_key in self._active


class EditSession:
    """
    Interactive edit of one photo.

    Example:
        >>> registry = SessionRegistry()
        >>> session = EditSession(photo, registry, ("ETP", 0))
        >>> session.set_brightness(120)
        >>> session.set_mode(EditorMode.CROP)
        >>> session.set_aspect("4:3")
        >>> jpeg_bytes = session.apply()
    """

    def __init__(
        self,
        source: Any,
        registry: SessionRegistry,
        record_key: Hashable,
        config: Optional[CompositorConfig] = None,
        state: Optional[EditState] = None,
    ) -> None:
        registry.acquire(record_key)
        self.source = source
        self.registry = registry
        self.record_key = record_key
        self.config = config or CompositorConfig()
        self.mode = EditorMode.FILTERS
        self._state = state or EditState()
        self._drag = DragTracker()
        self._open = True

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def state(self) -> EditState:
        self._require_open()
        return self._state

    def _require_open(self) -> None:
        if not self._open:
            raise SessionError(f"Edit session for {self.record_key!r} is closed")

    def _require_mode(self, mode: EditorMode) -> None:
        self._require_open()
        if self.mode is not mode:
            raise SessionError(
                f"Operation requires {mode.name} mode, editor is in {self.mode.name} mode"
            )

    def set_mode(self, mode: EditorMode) -> None:
        self._require_open()
        if self._drag.is_dragging:
            self._apply_offset(self._drag.cancel())
        self.mode = EditorMode(mode)

    # Filters ---------------------------------------------------------------

    def set_brightness(self, value: float) -> EditState:
        self._require_mode(EditorMode.FILTERS)
        value = max(FILTER_PERCENT_MIN, min(FILTER_PERCENT_MAX, float(value)))
        self._state = replace(self._state, filters=replace(self._state.filters, brightness=value))
        return self._state

    def set_contrast(self, value: float) -> EditState:
        self._require_mode(EditorMode.FILTERS)
        value = max(FILTER_PERCENT_MIN, min(FILTER_PERCENT_MAX, float(value)))
        self._state = replace(self._state, filters=replace(self._state.filters, contrast=value))
        return self._state

    def toggle_grayscale(self) -> EditState:
        self._require_mode(EditorMode.FILTERS)
        grayscale = 0.0 if self._state.filters.grayscale else 100.0
        self._state = replace(self._state, filters=replace(self._state.filters, grayscale=grayscale))
        return self._state

    # Crop ------------------------------------------------------------------

    def set_zoom(self, value: float) -> EditState:
        self._require_mode(EditorMode.CROP)
        zoom = max(ZOOM_MIN, min(ZOOM_MAX, float(value)))
        self._state = replace(self._state, transform=replace(self._state.transform, zoom=zoom))
        return self._state

    def set_aspect(self, aspect: Any) -> EditState:
        self._require_mode(EditorMode.CROP)
        self._state = replace(self._state, crop_aspect=parse_aspect(aspect))
        return self._state

    def reset(self) -> EditState:
        """Restore pan, zoom and crop; filters and text are kept."""
        self._require_mode(EditorMode.CROP)
        if self._drag.is_dragging:
            self._drag.cancel()
        self._state = self._state.reset_geometry()
        return self._state

    def press(self, x: float, y: float) -> bool:
        """Start a pan drag. Returns False when the editor is not in CROP mode."""
        self._require_open()
        if self.mode is not EditorMode.CROP:
            return False
        transform = self._state.transform
        self._drag.press(x, y, (transform.offset_x, transform.offset_y))
        return True

    def move(self, x: float, y: float) -> EditState:
        self._require_open()
        if self.mode is EditorMode.CROP:
            self._apply_offset(self._drag.move(x, y))
        return self._state

    def release(self) -> EditState:
        self._require_open()
        self._apply_offset(self._drag.release())
        return self._state

    def cancel_drag(self) -> EditState:
        self._require_open()
        self._apply_offset(self._drag.cancel())
        return self._state

    def _apply_offset(self, offset: Optional[tuple]) -> None:
        if offset is None:
            return
        transform: Transform = replace(self._state.transform, offset_x=offset[0], offset_y=offset[1])
        self._state = replace(self._state, transform=transform)

    # Text ------------------------------------------------------------------

    def set_text(self, text: str) -> EditState:
        self._require_mode(EditorMode.TEXT)
        self._state = replace(self._state, annotation_text=str(text or ""))
        return self._state

    def clear_text(self) -> EditState:
        return self.set_text("")

    # Output ----------------------------------------------------------------

    def preview(self) -> Any:
        self._require_open()
        return preview_frame(self.source, self._state, self.config)

    def apply(self) -> bytes:
        """Render, crop and encode the photo, then close the session."""
        self._require_open()
        output = render_output(self.source, self._state, self.config)
        self._close()
        logger.info(f"Applied edits to {self.record_key!r} ({len(output)} bytes)")
        return output

    def cancel(self) -> None:
        """Discard pending edits and close the session."""
        self._require_open()
        self._close()

    def _close(self) -> None:
        self._open = False
        self.registry.release(self.record_key)
