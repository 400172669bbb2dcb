"""
Reading storage for Meter Report.

Readings are stored as one JSON file per reading under <base>/Readings,
with photos embedded as base64-encoded JPEG data. A single in-progress
reading can be kept as a draft; saving or deleting that reading clears it.

The report builder never reads files directly: get_photo_records() takes
a snapshot of a stored reading and returns it as a ReportDocument.

Functions:
    get_readings_dir: Return (and create) the Readings directory
    new_reading: Create an empty reading payload
    add_photo: Append an encoded photo to a reading payload
    save_reading: Persist a reading and clear a matching draft
    load_reading: Load one reading with validation
    list_readings: Load all readings, newest first
    delete_reading: Remove a reading and a matching draft
    save_draft / load_draft / clear_draft: Single draft slot
    group_photos_by_category: Photo bytes grouped by department
    get_photo_records: Snapshot a reading as a ReportDocument
"""

import base64
import binascii
import json
import logging
import os
import tempfile
import time
import uuid
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from MR_Libs.constants import (
    DRAFT_FILE_NAME,
    FIELD_CREATED_AT,
    FIELD_DATA,
    FIELD_DATE,
    FIELD_DEPARTMENT,
    FIELD_ID,
    FIELD_PHOTOS,
    FIELD_SCHEMA_VERSION,
    FIELD_TIMESTAMP,
    FIELD_TYPE,
    READING_EXTENSION,
    READINGS_DIR_NAME,
    SCHEMA_VERSION,
)
from MR_Libs.errors import InputError
from MR_Libs.ReportLib.report_models import PhotoRecord, ReportDocument, ReportKind

logger = logging.getLogger(__name__)


def get_readings_dir(base_dir: Path) -> Path:
    readings_dir = base_dir / READINGS_DIR_NAME
    readings_dir.mkdir(parents=True, exist_ok=True)
    return readings_dir


def _reading_path(base_dir: Path, reading_id: str) -> Path:
    # Ids map to file names one-to-one; anything that would need escaping is refused
    text = str(reading_id or "")
    if not text.strip("_-") or not all(c.isascii() and (c.isalnum() or c in "-_") for c in text):
        raise InputError(f"Invalid reading id: {reading_id!r}")
    return get_readings_dir(base_dir) / f"{text}{READING_EXTENSION}"


def new_reading(reading_date: date, kind: Any, reading_id: Optional[str] = None) -> Dict[str, Any]:
    """Create an empty reading payload."""
    return {
        FIELD_SCHEMA_VERSION: SCHEMA_VERSION,
        FIELD_ID: reading_id or uuid.uuid4().hex[:12],
        FIELD_DATE: reading_date.isoformat(),
        FIELD_TYPE: ReportKind.parse(kind).token,
        FIELD_CREATED_AT: datetime.now().isoformat(timespec="seconds"),
        FIELD_PHOTOS: [],
    }


def add_photo(reading: Dict[str, Any], department: str, data: bytes,
              timestamp: Optional[float] = None) -> Dict[str, Any]:
    """Append a finalized photo to the reading under a department."""
    reading.setdefault(FIELD_PHOTOS, []).append({
        FIELD_DEPARTMENT: str(department),
        FIELD_DATA: base64.b64encode(data).decode("ascii"),
        FIELD_TIMESTAMP: time.time() if timestamp is None else float(timestamp),
    })
    return reading


def _normalize_photo(photo: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(photo, dict):
        return None
    department = str(photo.get(FIELD_DEPARTMENT) or "").strip()
    if not department:
        return None
    try:
        timestamp = float(photo.get(FIELD_TIMESTAMP, 0.0))
    except (TypeError, ValueError):
        timestamp = 0.0
    return {
        FIELD_DEPARTMENT: department,
        FIELD_DATA: str(photo.get(FIELD_DATA) or ""),
        FIELD_TIMESTAMP: timestamp,
    }


def _normalize_reading(payload: Any, fallback_id: str) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        payload = {}

    photos = payload.get(FIELD_PHOTOS)
    normalized_photos: List[Dict[str, Any]] = []
    if isinstance(photos, list):
        for photo in photos:
            normalized = _normalize_photo(photo)
            if normalized is not None:
                normalized_photos.append(normalized)

    payload.setdefault(FIELD_SCHEMA_VERSION, SCHEMA_VERSION)
    payload[FIELD_ID] = str(payload.get(FIELD_ID) or fallback_id)
    payload.setdefault(FIELD_CREATED_AT, "")
    payload[FIELD_PHOTOS] = normalized_photos
    return payload


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        return None


def _write_json(path: Path, payload: Dict[str, Any]) -> None:
    fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=".", suffix=".part")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(json.dumps(payload, indent=2))
        os.replace(temp_name, path)
    except OSError:
        Path(temp_name).unlink(missing_ok=True)
        raise


def save_reading(base_dir: Path, reading: Dict[str, Any]) -> Path:
    reading_id = str(reading.get(FIELD_ID) or "")
    path = _reading_path(base_dir, reading_id)
    reading[FIELD_SCHEMA_VERSION] = SCHEMA_VERSION
    _write_json(path, reading)
    clear_draft(base_dir)
    logger.info(f"Saved reading {reading_id} ({len(reading.get(FIELD_PHOTOS, []))} photo(s))")
    return path


def load_reading(base_dir: Path, reading_id: str) -> Dict[str, Any]:
    """
    Load a stored reading.

    Raises:
        InputError: If the reading does not exist or cannot be parsed
    """
    path = _reading_path(base_dir, reading_id)
    payload = _read_json(path)
    if not isinstance(payload, dict):
        raise InputError(f"Reading not found or unreadable: {reading_id!r}")
    return _normalize_reading(payload, str(reading_id))


def list_readings(base_dir: Path) -> List[Dict[str, Any]]:
    """All readable readings, newest created_at first."""
    readings: List[Dict[str, Any]] = []
    for path in sorted(get_readings_dir(base_dir).glob(f"*{READING_EXTENSION}")):
        payload = _read_json(path)
        if not isinstance(payload, dict):
            logger.warning(f"Skipping unreadable reading file {path}")
            continue
        readings.append(_normalize_reading(payload, path.stem))
    return sorted(readings, key=lambda reading: str(reading.get(FIELD_CREATED_AT, "")), reverse=True)


def delete_reading(base_dir: Path, reading_id: str) -> bool:
    path = _reading_path(base_dir, reading_id)
    if not path.exists():
        return False
    path.unlink()
    draft = load_draft(base_dir)
    if draft is not None and draft.get(FIELD_ID) == reading_id:
        clear_draft(base_dir)
    logger.info(f"Deleted reading {reading_id}")
    return True


def save_draft(base_dir: Path, reading: Dict[str, Any]) -> Path:
    path = base_dir / DRAFT_FILE_NAME
    base_dir.mkdir(parents=True, exist_ok=True)
    _write_json(path, reading)
    return path


def load_draft(base_dir: Path) -> Optional[Dict[str, Any]]:
    payload = _read_json(base_dir / DRAFT_FILE_NAME)
    if not isinstance(payload, dict):
        return None
    return _normalize_reading(payload, "draft")


def clear_draft(base_dir: Path) -> None:
    (base_dir / DRAFT_FILE_NAME).unlink(missing_ok=True)


def _decode_photo_data(text: str) -> bytes:
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError):
        # Kept as an empty record so the report flags the page instead of dropping it
        return b""


def group_photos_by_category(reading: Dict[str, Any]) -> Dict[str, List[bytes]]:
    """Photo bytes per department, in first-seen department order."""
    grouped: Dict[str, List[bytes]] = {}
    for photo in reading.get(FIELD_PHOTOS, []):
        grouped.setdefault(photo[FIELD_DEPARTMENT], []).append(_decode_photo_data(photo[FIELD_DATA]))
    return grouped


def get_photo_records(base_dir: Path, reading_id: str) -> ReportDocument:
    """
    Snapshot a stored reading as a ReportDocument.

    Record order within a category is the stored insertion order.

    Raises:
        InputError: If the reading is missing or has an invalid date or type
    """
    reading = load_reading(base_dir, reading_id)
    try:
        reading_date = date.fromisoformat(str(reading.get(FIELD_DATE) or ""))
    except ValueError:
        raise InputError(f"Reading {reading_id!r} has an invalid date: {reading.get(FIELD_DATE)!r}")
    try:
        kind = ReportKind.parse(reading.get(FIELD_TYPE))
    except ValueError as e:
        raise InputError(f"Reading {reading_id!r}: {e}")

    photos_by_category = {
        category: [PhotoRecord(category=category, raster_data=data, order=order)
                   for order, data in enumerate(items)]
        for category, items in group_photos_by_category(reading).items()
    }
    return ReportDocument(
        id=reading[FIELD_ID],
        date=reading_date,
        kind=kind,
        photos_by_category=photos_by_category,
    )
