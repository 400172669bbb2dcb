"""
ReportBuilder: lays out a ReportDocument as a paginated PDF.

Page 1 is the cover; every PhotoRecord then gets exactly one page with a
category header band, the photo fitted into the content rectangle, and a
footer carrying the running page number and the attachment counter local
to the category.

Failure handling is deliberately asymmetric:
- The document as a whole is validated before anything is drawn; an
  unusable document raises InputError.
- A photo that cannot be decoded or drawn only affects its own page, which
  is still emitted with a placeholder message. Failed pages are reported
  in BuiltReport.failed_pages.

The PDF is produced in memory; save_report() writes it atomically.

Example:
    >>> builder = ReportBuilder()
    >>> report = builder.build(document)
    >>> path = save_report(report, Path("out"))
"""

import io
import logging
import os
import tempfile
from datetime import date
from pathlib import Path
from typing import Dict, Optional

from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from MR_Libs.constants import (
    COLOR_DARK,
    COLOR_PLACEHOLDER,
    COLOR_RULE,
    COLOR_WHITE,
    FOOTER_HEIGHT_MM,
    HEADER_HEIGHT_MM,
    HEADER_INSET_MM,
    PAGE_HEIGHT_MM,
    PAGE_WIDTH_MM,
    PHOTO_BOTTOM_MM,
    PHOTO_MARGIN_MM,
    PHOTO_TOP_MM,
    PLACEHOLDER_MESSAGE,
    REPORT_FILE_TOKEN,
)
from MR_Libs.errors import AssetError, InputError
from MR_Libs.ImageEditingLib.compositor import decode_image, finalize
from MR_Libs.ReportLib.cover_page import BOLD, REGULAR, draw_cover
from MR_Libs.ReportLib.page_canvas import PageCanvas
from MR_Libs.ReportLib.report_models import (
    BuiltReport,
    PageLayout,
    PhotoRecord,
    Rect,
    ReportConfig,
    ReportDocument,
    ReportKind,
)

logger = logging.getLogger(__name__)

CONTENT_RECT = Rect(
    PHOTO_MARGIN_MM,
    PHOTO_TOP_MM,
    PAGE_WIDTH_MM - 2 * PHOTO_MARGIN_MM,
    PAGE_HEIGHT_MM - PHOTO_TOP_MM - PHOTO_BOTTOM_MM,
)


def report_filename(kind: ReportKind, report_date: date, extension: str = "pdf") -> str:
    """REPORT_<KIND>_<YYYY-MM-DD>.<extension>"""
    return f"{REPORT_FILE_TOKEN}_{kind.token}_{report_date.strftime('%Y-%m-%d')}.{extension}"


def fit_rect(image_size, area: Rect) -> Rect:
    """Largest rectangle with the image aspect ratio, centered in area."""
    width, height = image_size
    scale = min(area.w / width, area.h / height)
    fitted_w, fitted_h = width * scale, height * scale
    return Rect(
        area.x + (area.w - fitted_w) / 2.0,
        area.y + (area.h - fitted_h) / 2.0,
        fitted_w,
        fitted_h,
    )


def validate_document(document: ReportDocument) -> None:
    """
    Reject documents that cannot produce a report.

    Raises:
        InputError: If id, date or kind are missing, or there are no photos
    """
    if not isinstance(document, ReportDocument):
        raise InputError(f"Expected ReportDocument, got {type(document).__name__}")
    if not isinstance(document.id, str) or not document.id.strip():
        raise InputError("Report document has no id")
    if not isinstance(document.date, date):
        raise InputError(f"Report document {document.id!r} has no valid date")
    if not isinstance(document.kind, ReportKind):
        raise InputError(f"Report document {document.id!r} has an unknown kind: {document.kind!r}")
    if not document.photos_by_category or document.photo_count == 0:
        raise InputError(f"Report document {document.id!r} has no photos")
    for category, records in document.photos_by_category.items():
        for record in records:
            if record.category != category:
                raise InputError(
                    f"Photo filed under {category!r} belongs to category {record.category!r}"
                )


class ReportBuilder:
    """Builds one PDF per call; callers serialize builds of the same document."""

    def __init__(self, config: Optional[ReportConfig] = None) -> None:
        self.config = config or ReportConfig()

    def build(self, document: ReportDocument) -> BuiltReport:
        """
        Build the report for a document snapshot.

        Args:
            document: Snapshot of the reading and its photos

        Returns:
            BuiltReport with the PDF bytes, file name and per-page landmarks

        Raises:
            InputError: If the document is empty or missing required fields
        """
        validate_document(document)

        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=A4, invariant=1, pageCompression=1)
        pdf.setTitle(f"{REPORT_FILE_TOKEN} {document.kind.token} {document.date.strftime('%Y-%m-%d')}")
        pdf.setAuthor(self.config.organisation)
        page = PageCanvas(pdf)

        pages = [PageLayout(number=1, role="cover", landmarks=draw_cover(page, document, self.config))]
        pdf.showPage()

        for category, index, count, record in document.ordered_pages():
            number = len(pages) + 1
            layout = self._draw_photo_page(page, document, category, index, count, record, number)
            pages.append(layout)
            pdf.showPage()

        pdf.save()
        report = BuiltReport(
            filename=report_filename(document.kind, document.date, self.config.output_extension),
            data=buffer.getvalue(),
            pages=pages,
        )

        if report.failed_count:
            logger.warning(
                f"Report {report.filename}: {report.failed_count} of {report.page_count - 1} "
                f"photo page(s) rendered with a placeholder"
            )
        logger.info(f"Built report {report.filename} ({report.page_count} pages, {len(report.data)} bytes)")
        return report

    def _draw_photo_page(
        self,
        page: PageCanvas,
        document: ReportDocument,
        category: str,
        index: int,
        count: int,
        record: PhotoRecord,
        number: int,
    ) -> PageLayout:
        page.start_page()
        accent = document.kind.accent

        page.rect(0.0, 0.0, PAGE_WIDTH_MM, HEADER_HEIGHT_MM, accent, name="header")
        inset = HEADER_INSET_MM
        page.rect(inset, inset, PAGE_WIDTH_MM - 2 * inset, HEADER_HEIGHT_MM - 2 * inset,
                  COLOR_WHITE, alpha=0.2, radius=4.0)
        title = category.upper()
        size = page.fit_font_size(title, BOLD, 36, PAGE_WIDTH_MM - 4 * inset)
        page.centered_text(title, PAGE_WIDTH_MM / 2.0, 32.0, BOLD, size, COLOR_WHITE, name="category")

        failed = False
        try:
            self._draw_photo(page, record)
        except AssetError as e:
            failed = True
            logger.warning(
                f"Photo {index}/{count} in {category!r} could not be drawn on page {number}: {e}",
                exc_info=True,
            )
            page.centered_text(
                PLACEHOLDER_MESSAGE,
                PAGE_WIDTH_MM / 2.0,
                CONTENT_RECT.y + CONTENT_RECT.h / 2.0,
                REGULAR,
                12,
                COLOR_PLACEHOLDER,
                name="placeholder",
            )
        page.outline(CONTENT_RECT, COLOR_RULE, 0.2)
        page.landmarks["content"] = CONTENT_RECT

        footer_top = PAGE_HEIGHT_MM - FOOTER_HEIGHT_MM
        page.rect(0.0, footer_top, PAGE_WIDTH_MM, FOOTER_HEIGHT_MM, COLOR_DARK, name="footer")
        footer = (
            f"PAGE {number} | ATTACHMENT {index}/{count} - {document.kind.token} | "
            f"{self.config.organisation}"
        )
        page.centered_text(footer, PAGE_WIDTH_MM / 2.0, footer_top + 6.5, BOLD, 9, COLOR_WHITE,
                           name="footer_text")

        logger.debug(f"Page {number}: {category} {index}/{count} failed={failed}")
        return PageLayout(
            number=number,
            role="photo",
            landmarks=dict(page.landmarks),
            category=category,
            attachment=(index, count),
            failed=failed,
        )

    def _draw_photo(self, page: PageCanvas, record: PhotoRecord) -> None:
        image = decode_image(record.raster_data)
        target = fit_rect(image.size, CONTENT_RECT)
        try:
            reader = ImageReader(io.BytesIO(finalize(image, self.config.jpeg_quality)))
            page.canvas.saveState()
            try:
                page.image(reader, target, name="photo")
            finally:
                page.canvas.restoreState()
        except (OSError, ValueError) as e:
            raise AssetError(f"Cannot draw image: {e}", category=record.category) from e


def save_report(report: BuiltReport, output_dir: Path, overwrite: bool = True) -> Path:
    """
    Write a built report into output_dir under its deterministic file name.

    The file is written to a temporary sibling and moved into place, so a
    failed write never leaves a partial report behind.

    Raises:
        ValueError: If the file exists and overwrite=False
        OSError: If the file cannot be written
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_file = output_dir / report.filename

    if output_file.exists() and not overwrite:
        raise ValueError(f"Output file already exists: {output_file}. Set overwrite=True to replace.")

    fd, temp_name = tempfile.mkstemp(dir=output_dir, prefix=".", suffix=".part")
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(report.data)
        os.replace(temp_name, output_file)
    except OSError as e:
        Path(temp_name).unlink(missing_ok=True)
        raise OSError(f"Failed to save report to {output_file}: {e}") from e

    logger.info(f"Saved report to {output_file}")
    return output_file


def build_report_file(document: ReportDocument, output_dir: Path,
                      config: Optional[ReportConfig] = None) -> Path:
    """Build and save in one step; nothing is written when the build fails."""
    report = ReportBuilder(config).build(document)
    return save_report(report, output_dir)


def summarize_layout(report: BuiltReport) -> Dict[str, object]:
    """Compact description of a build for logs and regression comparisons."""
    return {
        "filename": report.filename,
        "page_count": report.page_count,
        "failed_pages": report.failed_pages,
        "attachments": [page.attachment for page in report.pages if page.role == "photo"],
    }
