"""
Edit state models for the Meter Report compositor.

This module defines the value types describing pending edits to one photo.
An EditState is immutable; editing sessions replace it on every change so
rendering functions can treat it as a plain input.

Classes:
    Transform: Pan/zoom applied before cropping
    FilterSettings: Brightness/contrast/grayscale percentages
    EditState: Complete description of pending edits
    EditorMode: Which group of controls is currently writable
    CompositorConfig: Rendering configuration

Functions:
    parse_aspect: Convert an aspect label such as "16:9" into a ratio
"""

from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from MR_Libs.constants import (
    ASPECT_PRESETS,
    BADGE_FONT_SIZE,
    BASE_FRAME_WIDTH,
    DEFAULT_BACKGROUND,
    DEFAULT_JPEG_QUALITY,
    FILTER_PERCENT_IDENTITY,
    FILTER_PERCENT_MAX,
    FILTER_PERCENT_MIN,
    GRAYSCALE_VALUES,
    ZOOM_MIN,
)


class EditorMode(Enum):
    FILTERS = "filters"
    CROP = "crop"
    TEXT = "text"


@dataclass(frozen=True)
class Transform:
    """Pan offsets are in frame pixels; zoom pivots around the frame center."""
    zoom: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0

    def __post_init__(self) -> None:
        if self.zoom < ZOOM_MIN:
            raise ValueError(f"zoom must be >= {ZOOM_MIN}, got {self.zoom}")

    @property
    def is_identity(self) -> bool:
        return self.zoom == 1.0 and self.offset_x == 0.0 and self.offset_y == 0.0


@dataclass(frozen=True)
class FilterSettings:
    """Filter percentages where 100 is the identity."""
    brightness: float = FILTER_PERCENT_IDENTITY
    contrast: float = FILTER_PERCENT_IDENTITY
    grayscale: float = 0.0

    def __post_init__(self) -> None:
        for name in ("brightness", "contrast"):
            value = getattr(self, name)
            if not (FILTER_PERCENT_MIN <= value <= FILTER_PERCENT_MAX):
                raise ValueError(
                    f"{name} must be {FILTER_PERCENT_MIN:g}-{FILTER_PERCENT_MAX:g}, got {value}"
                )
        if self.grayscale not in GRAYSCALE_VALUES:
            raise ValueError(f"grayscale must be 0 or 100, got {self.grayscale}")

    @property
    def is_identity(self) -> bool:
        return (
            self.brightness == FILTER_PERCENT_IDENTITY
            and self.contrast == FILTER_PERCENT_IDENTITY
            and self.grayscale == 0.0
        )


def parse_aspect(value: Any) -> Optional[float]:
    """
    Convert an aspect ratio description into a width/height ratio.

    Accepts None, a preset label ("Free", "1:1", "16:9", ...), any "W:H"
    string, or a positive number.

    Returns:
        The ratio, or None for a free crop

    Raises:
        ValueError: If the value is not a positive ratio
    """
    if value is None:
        return None

    if isinstance(value, str):
        text = value.strip()
        for label, ratio in ASPECT_PRESETS.items():
            if text.lower() == label.lower():
                return ratio
        if ":" in text:
            width_text, height_text = text.split(":", 1)
            try:
                width, height = float(width_text), float(height_text)
            except ValueError:
                raise ValueError(f"Invalid aspect ratio: {value!r}")
            if height <= 0:
                raise ValueError(f"Invalid aspect ratio: {value!r}")
            value = width / height
        else:
            try:
                value = float(text)
            except ValueError:
                raise ValueError(f"Invalid aspect ratio: {value!r}")

    ratio = float(value)
    if ratio <= 0:
        raise ValueError(f"aspect ratio must be positive, got {ratio}")
    return ratio


@dataclass(frozen=True)
class EditState:
    transform: Transform = field(default_factory=Transform)
    filters: FilterSettings = field(default_factory=FilterSettings)
    crop_aspect: Optional[float] = None
    annotation_text: str = ""

    def __post_init__(self) -> None:
        if self.crop_aspect is not None and self.crop_aspect <= 0:
            raise ValueError(f"crop_aspect must be positive or None, got {self.crop_aspect}")

    @property
    def has_annotation(self) -> bool:
        return bool(self.annotation_text)

    def reset_geometry(self) -> "EditState":
        """Restore transform and crop defaults; filters and text are kept."""
        return replace(self, transform=Transform(), crop_aspect=None)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditState":
        """Create from dictionary."""
        transform_data = data.get("transform") or {}
        filter_data = data.get("filters") or {}
        return cls(
            transform=Transform(**{
                k: float(v) for k, v in transform_data.items()
                if k in Transform.__dataclass_fields__
            }),
            filters=FilterSettings(**{
                k: float(v) for k, v in filter_data.items()
                if k in FilterSettings.__dataclass_fields__
            }),
            crop_aspect=parse_aspect(data.get("crop_aspect")),
            annotation_text=str(data.get("annotation_text") or ""),
        )


@dataclass
class CompositorConfig:
    """Configuration for frame rendering and encoding.

    Attributes:
        base_width: Width of the working canvas in pixels (default: 800)
        jpeg_quality: JPEG quality 1-100 used by finalize (default: 90)
        background: RGB fill for frame areas not covered by the photo
        font_path: Optional TrueType font for the annotation badge
        badge_font_size: Badge text size in pixels (default: 28)
    """
    base_width: int = BASE_FRAME_WIDTH
    jpeg_quality: int = DEFAULT_JPEG_QUALITY
    background: Tuple[int, int, int] = DEFAULT_BACKGROUND
    font_path: Optional[str] = None
    badge_font_size: int = BADGE_FONT_SIZE

    def __post_init__(self) -> None:
        if self.base_width <= 0:
            raise ValueError(f"base_width must be positive, got {self.base_width}")
        self.background = tuple(self.background)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompositorConfig":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)
