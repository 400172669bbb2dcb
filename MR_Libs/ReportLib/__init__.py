"""
ReportLib - Paginated inspection report builder

This module lays out a cover page and one page per photo as a PDF
document for the Meter Report project.
"""

from MR_Libs.ReportLib.report_models import (
    BuiltReport,
    PageLayout,
    PhotoRecord,
    Rect,
    ReportConfig,
    ReportDocument,
    ReportKind,
)
from MR_Libs.ReportLib.cover_page import format_long_date
from MR_Libs.ReportLib.report_builder import (
    ReportBuilder,
    build_report_file,
    report_filename,
    save_report,
    summarize_layout,
)

__all__ = [
    "BuiltReport",
    "PageLayout",
    "PhotoRecord",
    "Rect",
    "ReportConfig",
    "ReportDocument",
    "ReportKind",
    "format_long_date",
    "ReportBuilder",
    "build_report_file",
    "report_filename",
    "save_report",
    "summarize_layout",
]
