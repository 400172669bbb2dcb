"""
Unified pointer/touch drag handling for panning the crop frame.

Mouse and touch events are reduced to one press -> move -> release contract
by pointer_position(). DragTracker is a two-state machine (IDLE, DRAGGING)
so that a cancelled drag (pointer left the canvas) has a defined result:
the offset captured at press time is restored.
"""

from enum import Enum
from typing import Any, Dict, Optional, Tuple

Point = Tuple[float, float]


class DragPhase(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


def pointer_position(event: Dict[str, Any]) -> Point:
    """
    Extract client coordinates from a mouse or touch event payload.

    Touch payloads carry a "touches" list; the first touch point is used.

    Raises:
        ValueError: If the event has no usable coordinates
    """
    touches = event.get("touches")
    if touches:
        event = touches[0]
    try:
        return float(event["clientX"]), float(event["clientY"])
    except (KeyError, TypeError, ValueError):
        raise ValueError(f"Event has no client coordinates: {event!r}")


class DragTracker:
    """Accumulates pointer deltas into pan offsets."""

    def __init__(self) -> None:
        self.phase = DragPhase.IDLE
        self._anchor: Point = (0.0, 0.0)
        self._origin: Point = (0.0, 0.0)
        self._current: Point = (0.0, 0.0)

    @property
    def is_dragging(self) -> bool:
        return self.phase is DragPhase.DRAGGING

    def press(self, x: float, y: float, origin: Point) -> None:
        """Start dragging from pointer (x, y) with the offset currently applied."""
        self._anchor = (float(x), float(y))
        self._origin = (float(origin[0]), float(origin[1]))
        self._current = self._origin
        self.phase = DragPhase.DRAGGING

    def move(self, x: float, y: float) -> Optional[Point]:
        """Return the new offset, or None when no drag is in progress."""
        if not self.is_dragging:
            return None
        self._current = (
            self._origin[0] + float(x) - self._anchor[0],
            self._origin[1] + float(y) - self._anchor[1],
        )
        return self._current

    def release(self) -> Optional[Point]:
        """Finish the drag, keeping the last offset."""
        if not self.is_dragging:
            return None
        self.phase = DragPhase.IDLE
        return self._current

    def cancel(self) -> Optional[Point]:
        """Abort the drag and return the offset captured at press time."""
        if not self.is_dragging:
            return None
        self.phase = DragPhase.IDLE
        self._current = self._origin
        return self._origin
