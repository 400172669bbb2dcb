"""
Cover page template.

Fixed layout in millimetres on an A4 sheet. Landmark names recorded on the
page: wedge, panel, icon, title_1, title_2, subtitle, kind, date_caption,
date, reference_caption, reference, signature_left, signature_right, footer.
"""

import math
from datetime import date
from typing import Dict

from MR_Libs.constants import (
    COLOR_DARK,
    COLOR_MUTED,
    COLOR_RULE,
    COLOR_SIGNATURE,
    COLOR_WHITE,
    MONTH_NAMES,
    PAGE_HEIGHT_MM,
    PAGE_WIDTH_MM,
    REPORT_TITLE_LINES,
    SIGNATURE_CAPTIONS,
    WEEKDAY_NAMES,
)
from MR_Libs.ReportLib.page_canvas import PageCanvas
from MR_Libs.ReportLib.report_models import Rect, ReportConfig, ReportDocument

BOLD = "Helvetica-Bold"
REGULAR = "Helvetica"

CENTER_X = PAGE_WIDTH_MM / 2.0
ICON_CENTER_Y = 72.0
ICON_RADIUS = 22.0
PANEL = Rect(10.0, 40.0, 190.0, 235.0)

CAPTIONS = {
    "fr": {
        "subtitle": "DÉPARTEMENT TECHNIQUE",
        "date": "DATE D'INSPECTION CERTIFIÉE",
        "reference": "RÉFÉRENCE UNIQUE DE L'INTERVENTION",
    },
    "en": {
        "subtitle": "TECHNICAL DEPARTMENT",
        "date": "CERTIFIED INSPECTION DATE",
        "reference": "UNIQUE INTERVENTION REFERENCE",
    },
}


def format_long_date(value: date, locale: str = "fr") -> str:
    """Upper-case long date, e.g. 'LUNDI 5 JANVIER 2026'."""
    weekday = WEEKDAY_NAMES[locale][value.weekday()]
    month = MONTH_NAMES[locale][value.month - 1]
    return f"{weekday} {value.day} {month} {value.year}"


def _draw_icon(page: PageCanvas, accent) -> Rect:
    cx, cy = CENTER_X, ICON_CENTER_Y
    page.circle(cx + 1.5, cy + 1.5, ICON_RADIUS, COLOR_DARK, alpha=0.3)
    rect = page.circle(cx, cy, ICON_RADIUS, COLOR_WHITE)
    page.circle(cx, cy, ICON_RADIUS - 3.0, accent, fill=False, width_mm=0.7)

    # Gauge dial: tick ring, hub and needle
    for step in range(12):
        angle = math.radians(step * 30)
        page.line(
            cx + math.cos(angle) * 8.0, cy + math.sin(angle) * 8.0,
            cx + math.cos(angle) * 12.0, cy + math.sin(angle) * 12.0,
            accent, 0.4,
        )
    page.circle(cx, cy, 4.0, accent, fill=False, width_mm=0.5)
    page.line(cx - 9.0, cy - 9.0, cx + 9.0, cy + 9.0, COLOR_DARK, 0.9)
    page.circle(cx - 9.0, cy - 9.0, 1.5, COLOR_DARK, fill=False, width_mm=0.5)
    page.landmarks["icon"] = rect
    return rect


def draw_cover(page: PageCanvas, document: ReportDocument, config: ReportConfig) -> Dict[str, Rect]:
    """Draw the cover page and return its landmarks."""
    page.start_page()
    accent = document.kind.accent
    captions = CAPTIONS[config.date_locale]

    page.rect(0.0, 0.0, PAGE_WIDTH_MM, PAGE_HEIGHT_MM, COLOR_DARK, name="background")
    page.polygon([(0.0, 0.0), (140.0, 0.0), (0.0, 170.0)], accent, name="wedge")
    page.rect(PANEL.x, PANEL.y, PANEL.w, PANEL.h, COLOR_WHITE, radius=8.0, name="panel")

    _draw_icon(page, accent)

    page.centered_text(REPORT_TITLE_LINES[0], CENTER_X, 118.0, BOLD, 34, COLOR_DARK, name="title_1")
    page.centered_text(REPORT_TITLE_LINES[1], CENTER_X, 134.0, BOLD, 34, COLOR_DARK, name="title_2")
    page.centered_text(captions["subtitle"], CENTER_X, 148.0, BOLD, 16, COLOR_MUTED, name="subtitle")
    page.line(30.0, 156.0, 180.0, 156.0, COLOR_RULE, 0.35)

    page.centered_text(document.kind.label, CENTER_X, 172.0, BOLD, 28, accent, name="kind")

    page.centered_text(captions["date"], CENTER_X, 188.0, REGULAR, 12, COLOR_MUTED, name="date_caption")
    long_date = format_long_date(document.date, config.date_locale)
    size = page.fit_font_size(long_date, BOLD, 18, PANEL.w - 20.0)
    page.centered_text(long_date, CENTER_X, 199.0, BOLD, size, COLOR_DARK, name="date")

    page.centered_text(captions["reference"], CENTER_X, 215.0, REGULAR, 10, COLOR_MUTED, name="reference_caption")
    reference = document.id.upper()
    size = page.fit_font_size(reference, BOLD, 11, PANEL.w - 20.0)
    page.centered_text(reference, CENTER_X, 222.0, BOLD, size, accent, name="reference")

    for name, left, caption in (
        ("signature_left", 35.0, SIGNATURE_CAPTIONS[0]),
        ("signature_right", 115.0, SIGNATURE_CAPTIONS[1]),
    ):
        page.line(left, 250.0, left + 60.0, 250.0, COLOR_SIGNATURE, 0.2)
        page.centered_text(caption, left + 30.0, 256.0, REGULAR, 8, COLOR_MUTED)
        page.landmarks[name] = Rect(left, 249.0, 60.0, 9.0)

    footer = f"{config.organisation} | {document.kind.token} | OFFICIAL DOCUMENT"
    page.centered_text(footer, CENTER_X, 288.0, BOLD, 9, COLOR_WHITE, name="footer")
    return dict(page.landmarks)
