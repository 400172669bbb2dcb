"""
Report data models.

Classes:
    ReportKind: Reading type driving accent color and department vocabulary
    PhotoRecord: One finalized photo with its category and order
    ReportDocument: Snapshot of everything needed to build one report
    Rect: Page rectangle in millimetres, top-left origin
    PageLayout: Landmarks emitted for one page
    BuiltReport: Result of a build
    ReportConfig: Report rendering configuration
"""

from dataclasses import asdict, dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from MR_Libs.constants import (
    ACCENT_ELECTRICITY,
    ACCENT_WATER,
    DEFAULT_DATE_LOCALE,
    DEFAULT_JPEG_QUALITY,
    DEFAULT_ORGANISATION,
    DEFAULT_REPORT_EXTENSION,
    DEPARTMENTS_ELECTRICITY,
    DEPARTMENTS_WATER,
    MONTH_NAMES,
)


class ReportKind(Enum):
    ELECTRICITY = "ELECTRICITY"
    WATER = "WATER"

    @property
    def token(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        return {"ELECTRICITY": "ÉLECTRICITÉ", "WATER": "EAU"}[self.value]

    @property
    def accent(self) -> Tuple[int, int, int]:
        return ACCENT_ELECTRICITY if self is ReportKind.ELECTRICITY else ACCENT_WATER

    @property
    def departments(self) -> Tuple[str, ...]:
        return DEPARTMENTS_ELECTRICITY if self is ReportKind.ELECTRICITY else DEPARTMENTS_WATER

    @classmethod
    def parse(cls, value: Any) -> "ReportKind":
        """Accept a ReportKind, its token, or its display label (case-insensitive)."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().upper()
        for kind in cls:
            if text in (kind.token, kind.label):
                return kind
        raise ValueError(f"Unknown report kind: {value!r}")


@dataclass(frozen=True)
class PhotoRecord:
    category: str
    raster_data: bytes
    order: int = 0


@dataclass
class ReportDocument:
    id: str
    date: Optional[date]
    kind: ReportKind
    photos_by_category: Dict[str, List[PhotoRecord]] = field(default_factory=dict)

    @property
    def photo_count(self) -> int:
        return sum(len(records) for records in self.photos_by_category.values())

    def ordered_pages(self) -> Iterator[Tuple[str, int, int, PhotoRecord]]:
        """
        Yield (category, attachment_index, attachment_count, record) per photo.

        Categories keep document order; records within a category are sorted
        by their order field (stable for ties). attachment_index is 1-based.
        """
        for category, records in self.photos_by_category.items():
            ordered = sorted(records, key=lambda record: record.order)
            for index, record in enumerate(ordered, start=1):
                yield category, index, len(ordered), record

    @classmethod
    def from_records(
        cls,
        report_id: str,
        report_date: Optional[date],
        kind: Any,
        records: Iterable[PhotoRecord],
    ) -> "ReportDocument":
        """Group records by category, keeping first-seen category order."""
        grouped: Dict[str, List[PhotoRecord]] = {}
        for record in records:
            grouped.setdefault(record.category, []).append(record)
        return cls(id=report_id, date=report_date, kind=ReportKind.parse(kind), photos_by_category=grouped)


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    w: float
    h: float

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    def overlaps(self, other: "Rect") -> bool:
        return (
            self.x < other.right and other.x < self.right
            and self.y < other.bottom and other.y < self.bottom
        )

    def contains(self, other: "Rect") -> bool:
        return (
            self.x <= other.x and self.y <= other.y
            and other.right <= self.right + 1e-9 and other.bottom <= self.bottom + 1e-9
        )


@dataclass
class PageLayout:
    number: int
    role: str
    landmarks: Dict[str, Rect] = field(default_factory=dict)
    category: Optional[str] = None
    attachment: Optional[Tuple[int, int]] = None
    failed: bool = False


@dataclass
class BuiltReport:
    filename: str
    data: bytes
    pages: List[PageLayout] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def failed_pages(self) -> List[int]:
        return [page.number for page in self.pages if page.failed]

    @property
    def failed_count(self) -> int:
        return len(self.failed_pages)


@dataclass
class ReportConfig:
    """Configuration for report rendering.

    Attributes:
        date_locale: Language of the long cover date ("fr" or "en")
        organisation: Organisation label printed in page footers
        jpeg_quality: Quality used when embedding photos (default: 90)
        output_extension: Report file extension (default: "pdf")
    """
    date_locale: str = DEFAULT_DATE_LOCALE
    organisation: str = DEFAULT_ORGANISATION
    jpeg_quality: int = DEFAULT_JPEG_QUALITY
    output_extension: str = DEFAULT_REPORT_EXTENSION

    def __post_init__(self) -> None:
        if self.date_locale not in MONTH_NAMES:
            raise ValueError(
                f"date_locale must be one of {sorted(MONTH_NAMES)}, got {self.date_locale!r}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReportConfig":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)
