"""
ReadingStoreLib - Reading storage and report snapshots

This module handles persistence of meter readings and their photos,
and converts stored readings into ReportDocument snapshots.
"""

from MR_Libs.ReadingStoreLib.reading_store import (
    add_photo,
    clear_draft,
    delete_reading,
    get_photo_records,
    get_readings_dir,
    group_photos_by_category,
    list_readings,
    load_draft,
    load_reading,
    new_reading,
    save_draft,
    save_reading,
)

__all__ = [
    "add_photo",
    "clear_draft",
    "delete_reading",
    "get_photo_records",
    "get_readings_dir",
    "group_photos_by_category",
    "list_readings",
    "load_draft",
    "load_reading",
    "new_reading",
    "save_draft",
    "save_reading",
]
