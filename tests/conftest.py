"""
Pytest configuration and shared fixtures for Meter Report tests.

This module provides synthetic photos, encoded image bytes and sample
report documents used across multiple test modules.
"""

import io
from datetime import date

import pytest
from PIL import Image

from MR_Libs.ReportLib.report_models import PhotoRecord, ReportDocument, ReportKind


def encode_jpeg(image, quality=90):
    """Encode a PIL Image as JPEG bytes."""
    output = io.BytesIO()
    image.convert("RGB").save(output, format="JPEG", quality=quality)
    return output.getvalue()


@pytest.fixture
def solid_white():
    """A 400x300 pure white photo."""
    return Image.new("RGB", (400, 300), (255, 255, 255))


@pytest.fixture
def split_image():
    """
    A 400x300 photo whose left half is black and right half is white.

    At the 800px working width the boundary sits at x=400.
    """
    image = Image.new("RGB", (400, 300), (0, 0, 0))
    image.paste((255, 255, 255), (200, 0, 400, 300))
    return image


@pytest.fixture
def jpeg_bytes():
    """Encoded JPEG bytes of a small landscape photo."""
    return encode_jpeg(Image.new("RGB", (64, 48), (30, 140, 200)))


@pytest.fixture
def sample_document(jpeg_bytes):
    """
    An electricity reading with 3 photos in ACTIF and 2 in ETP.

    Returns:
        ReportDocument with 5 PhotoRecords across 2 categories
    """
    portrait = encode_jpeg(Image.new("RGB", (48, 64), (200, 60, 60)))
    return ReportDocument(
        id="rel-0001",
        date=date(2026, 1, 5),
        kind=ReportKind.ELECTRICITY,
        photos_by_category={
            "ACTIF": [PhotoRecord("ACTIF", jpeg_bytes, order) for order in range(3)],
            "ETP": [PhotoRecord("ETP", portrait, 0), PhotoRecord("ETP", jpeg_bytes, 1)],
        },
    )
