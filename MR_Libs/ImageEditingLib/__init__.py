"""
ImageEditingLib - Non-destructive photo compositor

This module provides the edit state models, the pure rendering pipeline
and mode-gated editing sessions for the Meter Report project.
"""

from MR_Libs.ImageEditingLib.edit_models import (
    CompositorConfig,
    EditorMode,
    EditState,
    FilterSettings,
    Transform,
    parse_aspect,
)
from MR_Libs.ImageEditingLib.compositor import (
    apply_crop,
    apply_filters,
    decode_image,
    finalize,
    frame_size,
    preview_frame,
    render_output,
)
from MR_Libs.ImageEditingLib.drag_tracker import DragPhase, DragTracker, pointer_position
from MR_Libs.ImageEditingLib.edit_session import EditSession, SessionRegistry

__all__ = [
    "CompositorConfig",
    "EditorMode",
    "EditState",
    "FilterSettings",
    "Transform",
    "parse_aspect",
    "apply_crop",
    "apply_filters",
    "decode_image",
    "finalize",
    "frame_size",
    "preview_frame",
    "render_output",
    "DragPhase",
    "DragTracker",
    "pointer_position",
    "EditSession",
    "SessionRegistry",
]
