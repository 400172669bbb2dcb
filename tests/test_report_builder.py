"""
Tests for the report builder.

Tests cover:
- Document validation (empty and incomplete documents)
- Page count and running page numbers
- Per-category attachment counters
- Placeholder pages for undecodable photos
- Deterministic output and landmark geometry
- File naming and atomic saving
"""

import io
from datetime import date, datetime

import pytest
from PyPDF2 import PdfReader

from MR_Libs.errors import BuildError, InputError
from MR_Libs.ReportLib.cover_page import PANEL, format_long_date
from MR_Libs.ReportLib.report_builder import (
    CONTENT_RECT,
    ReportBuilder,
    build_report_file,
    fit_rect,
    report_filename,
    save_report,
    summarize_layout,
)
from MR_Libs.ReportLib.report_models import PhotoRecord, Rect, ReportConfig, ReportDocument, ReportKind

COVER_CONTENT = [
    "icon", "title_1", "title_2", "subtitle", "kind", "date_caption", "date",
    "reference_caption", "reference", "signature_left", "signature_right",
]


@pytest.fixture
def builder():
    return ReportBuilder()


def pdf_page_count(data):
    return len(PdfReader(io.BytesIO(data)).pages)


class TestValidation:
    """Tests for document-level input errors."""

    def test_empty_document_raises_input_error(self, builder):
        document = ReportDocument(id="r1", date=date(2026, 1, 5), kind=ReportKind.WATER)
        with pytest.raises(InputError):
            builder.build(document)

    def test_input_error_is_a_build_error(self, builder):
        document = ReportDocument(id="r1", date=date(2026, 1, 5), kind=ReportKind.WATER,
                                  photos_by_category={"ETP": []})
        with pytest.raises(BuildError):
            builder.build(document)

    def test_missing_id(self, builder, sample_document):
        sample_document.id = "  "
        with pytest.raises(InputError):
            builder.build(sample_document)

    def test_non_string_id(self, builder, sample_document):
        sample_document.id = 5
        with pytest.raises(InputError):
            builder.build(sample_document)

    def test_missing_date(self, builder, sample_document):
        sample_document.date = None
        with pytest.raises(InputError):
            builder.build(sample_document)

    def test_record_in_wrong_category(self, builder, jpeg_bytes):
        document = ReportDocument(
            id="r1", date=date(2026, 1, 5), kind=ReportKind.WATER,
            photos_by_category={"ETP": [PhotoRecord("HANK", jpeg_bytes, 0)]},
        )
        with pytest.raises(InputError):
            builder.build(document)

    def test_failed_build_writes_nothing(self, tmp_path):
        document = ReportDocument(id="r1", date=date(2026, 1, 5), kind=ReportKind.WATER)
        with pytest.raises(InputError):
            build_report_file(document, tmp_path / "out")
        assert not (tmp_path / "out").exists()


class TestPagination:
    """Tests for page count, numbering and attachment counters."""

    def test_one_cover_plus_one_page_per_photo(self, builder, sample_document):
        report = builder.build(sample_document)

        assert report.page_count == 1 + 5
        assert pdf_page_count(report.data) == 6
        assert [page.number for page in report.pages] == [1, 2, 3, 4, 5, 6]
        assert report.pages[0].role == "cover"
        assert all(page.role == "photo" for page in report.pages[1:])

    def test_attachment_counters_are_per_category(self, builder, sample_document):
        report = builder.build(sample_document)

        pages = report.pages[1:]
        assert [page.category for page in pages] == ["ACTIF", "ACTIF", "ACTIF", "ETP", "ETP"]
        assert [page.attachment for page in pages] == [(1, 3), (2, 3), (3, 3), (1, 2), (2, 2)]

    def test_records_follow_order_field(self, jpeg_bytes):
        document = ReportDocument(
            id="r1", date=date(2026, 1, 5), kind=ReportKind.WATER,
            photos_by_category={"ETP": [
                PhotoRecord("ETP", b"c", 2), PhotoRecord("ETP", b"a", 0), PhotoRecord("ETP", b"b", 1),
            ]},
        )
        assert [record.raster_data for _, _, _, record in document.ordered_pages()] == [b"a", b"b", b"c"]

    def test_summary(self, builder, sample_document):
        summary = summarize_layout(builder.build(sample_document))
        assert summary["page_count"] == 6
        assert summary["failed_pages"] == []
        assert summary["filename"] == "REPORT_ELECTRICITY_2026-01-05.pdf"


class TestAssetFailures:
    """Tests for page-level tolerance of bad photos."""

    def test_corrupt_photo_gets_placeholder_page(self, builder, jpeg_bytes):
        records = [PhotoRecord("HANK", jpeg_bytes, order) for order in range(5)]
        records[2] = PhotoRecord("HANK", b"\xff\xd8\xffcorrupt", 2)
        document = ReportDocument(id="r2", date=date(2026, 3, 1), kind=ReportKind.WATER,
                                  photos_by_category={"HANK": records})

        report = builder.build(document)

        assert report.page_count == 6
        assert pdf_page_count(report.data) == 6
        assert report.failed_pages == [4]
        assert report.failed_count == 1
        assert [page.attachment for page in report.pages[1:]] == [(i, 5) for i in range(1, 6)]

        failed = report.pages[3]
        assert "placeholder" in failed.landmarks
        assert "photo" not in failed.landmarks
        assert {"header", "footer", "footer_text", "category"} <= set(failed.landmarks)

    def test_all_photos_corrupt_still_builds(self, builder):
        document = ReportDocument(id="r3", date=date(2026, 3, 1), kind=ReportKind.WATER,
                                  photos_by_category={"ETP": [PhotoRecord("ETP", b"", 0)]})
        report = builder.build(document)
        assert report.page_count == 2
        assert report.failed_pages == [2]


class TestDeterminism:
    """Tests that identical snapshots give identical documents."""

    def test_two_builds_are_identical(self, builder, sample_document):
        first = builder.build(sample_document)
        second = ReportBuilder().build(sample_document)

        assert first.data == second.data
        assert [page.landmarks for page in first.pages] == [page.landmarks for page in second.pages]


class TestLayout:
    """Tests for landmark geometry."""

    def test_cover_landmarks_do_not_overlap(self, builder, sample_document):
        landmarks = builder.build(sample_document).pages[0].landmarks

        for name in COVER_CONTENT:
            assert PANEL.contains(landmarks[name]), name
        for i, first in enumerate(COVER_CONTENT):
            for second in COVER_CONTENT[i + 1:]:
                assert not landmarks[first].overlaps(landmarks[second]), (first, second)

    def test_photo_page_bands_do_not_overlap(self, builder, sample_document):
        landmarks = builder.build(sample_document).pages[1].landmarks

        assert not landmarks["header"].overlaps(landmarks["content"])
        assert not landmarks["content"].overlaps(landmarks["footer"])
        assert landmarks["content"].contains(landmarks["photo"])

    def test_photo_keeps_aspect_ratio(self, builder, sample_document):
        pages = builder.build(sample_document).pages
        landscape = pages[1].landmarks["photo"]
        portrait = pages[4].landmarks["photo"]

        assert landscape.w / landscape.h == pytest.approx(64 / 48)
        assert portrait.w / portrait.h == pytest.approx(48 / 64)

    def test_fit_rect_centers_in_area(self):
        area = Rect(0.0, 0.0, 100.0, 100.0)
        assert fit_rect((200, 100), area) == Rect(0.0, 25.0, 100.0, 50.0)
        assert fit_rect((50, 100), area) == Rect(25.0, 0.0, 50.0, 100.0)

    def test_content_rect_geometry(self):
        assert CONTENT_RECT == Rect(12.0, 55.0, 186.0, 217.0)


class TestNaming:
    """Tests for file names and cover text helpers."""

    def test_report_filename(self):
        assert report_filename(ReportKind.WATER, date(2026, 2, 28)) == "REPORT_WATER_2026-02-28.pdf"

    def test_datetime_names_file_by_calendar_date(self, builder, jpeg_bytes):
        """A timestamp must not leak the time of day into the file name."""
        assert report_filename(ReportKind.WATER, datetime(2026, 1, 5, 10, 30)) == "REPORT_WATER_2026-01-05.pdf"

        document = ReportDocument(id="r1", date=datetime(2026, 1, 5, 10, 30), kind=ReportKind.WATER,
                                  photos_by_category={"ETP": [PhotoRecord("ETP", jpeg_bytes, 0)]})
        assert builder.build(document).filename == "REPORT_WATER_2026-01-05.pdf"

    def test_long_date(self):
        assert format_long_date(date(2026, 1, 5), "fr") == "LUNDI 5 JANVIER 2026"
        assert format_long_date(date(2026, 1, 5), "en") == "MONDAY 5 JANUARY 2026"

    def test_english_locale_builds(self, sample_document):
        report = ReportBuilder(ReportConfig(date_locale="en")).build(sample_document)
        assert report.page_count == 6

    def test_unknown_locale_rejected(self):
        with pytest.raises(ValueError):
            ReportConfig(date_locale="de")


class TestSaveReport:
    """Tests for save_report function."""

    def test_writes_named_file(self, builder, sample_document, tmp_path):
        report = builder.build(sample_document)

        path = save_report(report, tmp_path)

        assert path.name == "REPORT_ELECTRICITY_2026-01-05.pdf"
        assert path.read_bytes() == report.data
        assert [entry.name for entry in tmp_path.iterdir()] == [path.name]

    def test_refuses_overwrite_when_disabled(self, builder, sample_document, tmp_path):
        report = builder.build(sample_document)
        save_report(report, tmp_path)
        with pytest.raises(ValueError):
            save_report(report, tmp_path, overwrite=False)
