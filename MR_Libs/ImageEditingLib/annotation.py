"""
Annotation badge overlay.

The badge is drawn last, in frame coordinates, so pan, zoom and filters
never move or recolor it.
"""

from functools import lru_cache
from typing import Any, Optional, Tuple

from PIL import ImageDraw, ImageFont

from MR_Libs.constants import (
    BADGE_BACKGROUND,
    BADGE_BOTTOM_OFFSET,
    BADGE_FONT_CANDIDATES,
    BADGE_FOREGROUND,
    BADGE_HEIGHT,
    BADGE_LEFT,
    BADGE_PADDING_X,
)

Box = Tuple[int, int, int, int]


@lru_cache(maxsize=8)
def load_badge_font(font_path: Optional[str], size: int) -> Any:
    """
    Load the badge font, trying the configured path then common bold fonts.

    Falls back to Pillow's bundled default font at the requested size.
    """
    candidates = ((font_path,) if font_path else ()) + BADGE_FONT_CANDIDATES
    for candidate in candidates:
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


def badge_box(frame_height: int, text_width: float) -> Box:
    """Badge rectangle (left, top, right, bottom) anchored near the bottom-left."""
    left = BADGE_LEFT
    top = frame_height - BADGE_BOTTOM_OFFSET
    right = left + int(round(text_width)) + 2 * BADGE_PADDING_X
    return left, top, right, top + BADGE_HEIGHT


def draw_annotation_badge(frame: Any, text: str, font_path: Optional[str], font_size: int) -> Optional[Box]:
    """
    Draw an opaque text badge onto the frame in place.

    Args:
        frame: RGB PIL Image owned by the caller
        text: Annotation text; empty text draws nothing
        font_path: Optional TrueType font path
        font_size: Text size in pixels

    Returns:
        The badge box, or None when no badge was drawn
    """
    if not text:
        return None

    font = load_badge_font(font_path, font_size)
    draw = ImageDraw.Draw(frame)
    text_width = draw.textlength(text, font=font)
    box = badge_box(frame.height, text_width)
    draw.rectangle((box[0], box[1], box[2] - 1, box[3] - 1), fill=BADGE_BACKGROUND)

    # Vertically center the glyph box inside the badge
    bbox = draw.textbbox((0, 0), text, font=font)
    text_height = bbox[3] - bbox[1]
    text_y = box[1] + (BADGE_HEIGHT - text_height) / 2 - bbox[1]
    draw.text((box[0] + BADGE_PADDING_X, text_y), text, font=font, fill=BADGE_FOREGROUND)
    return box
