"""
Millimetre, top-left-origin drawing helpers over a reportlab canvas.

Page templates are written in the same coordinate system as a printed A4
sheet is measured (x to the right, y downward, millimetres). PageCanvas
converts to PDF user space and records the rectangle of every named
landmark so builds can be compared without rasterizing the PDF.
"""

from typing import Any, Dict, Optional, Sequence, Tuple

from reportlab.lib.units import mm

from MR_Libs.constants import PAGE_HEIGHT_MM
from MR_Libs.ReportLib.report_models import Rect

Color = Tuple[int, int, int]

# Helvetica ascent/descent as a fraction of the font size
_ASCENT = 0.75
_DESCENT = 0.25
POINT_MM = 25.4 / 72.0


class PageCanvas:
    def __init__(self, canvas: Any) -> None:
        self.canvas = canvas
        self.landmarks: Dict[str, Rect] = {}

    def start_page(self) -> None:
        self.landmarks = {}

    def _y(self, y: float) -> float:
        return (PAGE_HEIGHT_MM - y) * mm

    def _mark(self, name: Optional[str], rect: Rect) -> Rect:
        if name:
            self.landmarks[name] = rect
        return rect

    def fill_color(self, color: Color, alpha: float = 1.0) -> None:
        self.canvas.setFillColorRGB(color[0] / 255.0, color[1] / 255.0, color[2] / 255.0)
        self.canvas.setFillAlpha(alpha)

    def stroke_color(self, color: Color, width_mm: float) -> None:
        self.canvas.setStrokeColorRGB(color[0] / 255.0, color[1] / 255.0, color[2] / 255.0)
        self.canvas.setLineWidth(width_mm * mm)

    def rect(self, x: float, y: float, w: float, h: float, color: Color,
             alpha: float = 1.0, radius: float = 0.0, name: Optional[str] = None) -> Rect:
        self.fill_color(color, alpha)
        if radius:
            self.canvas.roundRect(x * mm, self._y(y + h), w * mm, h * mm, radius * mm, stroke=0, fill=1)
        else:
            self.canvas.rect(x * mm, self._y(y + h), w * mm, h * mm, stroke=0, fill=1)
        self.fill_color(color)
        return self._mark(name, Rect(x, y, w, h))

    def outline(self, rect: Rect, color: Color, width_mm: float) -> None:
        self.stroke_color(color, width_mm)
        self.canvas.rect(rect.x * mm, self._y(rect.bottom), rect.w * mm, rect.h * mm, stroke=1, fill=0)

    def polygon(self, points: Sequence[Tuple[float, float]], color: Color, name: Optional[str] = None) -> Rect:
        self.fill_color(color)
        path = self.canvas.beginPath()
        path.moveTo(points[0][0] * mm, self._y(points[0][1]))
        for x, y in points[1:]:
            path.lineTo(x * mm, self._y(y))
        path.close()
        self.canvas.drawPath(path, stroke=0, fill=1)
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        return self._mark(name, Rect(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys)))

    def circle(self, cx: float, cy: float, r: float, color: Color, fill: bool = True,
               width_mm: float = 0.5, alpha: float = 1.0) -> Rect:
        if fill:
            self.fill_color(color, alpha)
            self.canvas.circle(cx * mm, self._y(cy), r * mm, stroke=0, fill=1)
            self.fill_color(color)
        else:
            self.stroke_color(color, width_mm)
            self.canvas.circle(cx * mm, self._y(cy), r * mm, stroke=1, fill=0)
        return Rect(cx - r, cy - r, 2 * r, 2 * r)

    def line(self, x1: float, y1: float, x2: float, y2: float, color: Color, width_mm: float) -> None:
        self.stroke_color(color, width_mm)
        self.canvas.line(x1 * mm, self._y(y1), x2 * mm, self._y(y2))

    def text_width(self, text: str, font: str, size: float) -> float:
        """Rendered width in millimetres."""
        return self.canvas.stringWidth(text, font, size) * POINT_MM

    def centered_text(self, text: str, cx: float, baseline: float, font: str, size: float,
                      color: Color, name: Optional[str] = None) -> Rect:
        self.fill_color(color)
        self.canvas.setFont(font, size)
        self.canvas.drawCentredString(cx * mm, self._y(baseline), text)
        width = self.text_width(text, font, size)
        size_mm = size * POINT_MM
        rect = Rect(cx - width / 2.0, baseline - size_mm * _ASCENT, width, size_mm * (_ASCENT + _DESCENT))
        return self._mark(name, rect)

    def fit_font_size(self, text: str, font: str, size: float, max_width: float) -> float:
        """Largest size <= size at which text fits max_width millimetres."""
        width = self.text_width(text, font, size)
        if width <= max_width or width == 0:
            return size
        return size * max_width / width

    def image(self, reader: Any, rect: Rect, name: Optional[str] = None) -> Rect:
        self.canvas.drawImage(reader, rect.x * mm, self._y(rect.bottom), rect.w * mm, rect.h * mm)
        return self._mark(name, rect)
