"""
Constants and configuration values for Meter Report.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the application.
"""

# Compositor canvas
BASE_FRAME_WIDTH = 800
DEFAULT_JPEG_QUALITY = 90
DEFAULT_BACKGROUND = (0, 0, 0)

# Edit ranges
ZOOM_MIN = 1.0
ZOOM_MAX = 3.0
FILTER_PERCENT_MIN = 50.0
FILTER_PERCENT_MAX = 200.0
FILTER_PERCENT_IDENTITY = 100.0
GRAYSCALE_VALUES = (0.0, 100.0)

# Aspect ratio presets (label -> width/height, None = free)
ASPECT_FREE_LABEL = "Free"
ASPECT_PRESETS = {
    ASPECT_FREE_LABEL: None,
    "1:1": 1.0,
    "4:3": 4 / 3,
    "16:9": 16 / 9,
    "4:16": 4 / 16,
}

# Annotation badge (canvas pixels)
BADGE_FONT_SIZE = 28
BADGE_LEFT = 20
BADGE_BOTTOM_OFFSET = 70
BADGE_HEIGHT = 50
BADGE_PADDING_X = 15
BADGE_BACKGROUND = (0, 0, 0)
BADGE_FOREGROUND = (255, 255, 255)
BADGE_FONT_CANDIDATES = ("DejaVuSans-Bold.ttf", "Arial Bold.ttf", "arialbd.ttf")

# Report page geometry (mm, top-left origin, A4 portrait)
PAGE_WIDTH_MM = 210.0
PAGE_HEIGHT_MM = 297.0
HEADER_HEIGHT_MM = 50.0
HEADER_INSET_MM = 10.0
PHOTO_MARGIN_MM = 12.0
PHOTO_TOP_MM = 55.0
PHOTO_BOTTOM_MM = 25.0
FOOTER_HEIGHT_MM = 10.0

# Report colours (RGB 0-255)
COLOR_DARK = (15, 23, 42)
COLOR_WHITE = (255, 255, 255)
COLOR_RULE = (220, 220, 220)
COLOR_MUTED = (120, 120, 120)
COLOR_SIGNATURE = (200, 200, 200)
COLOR_PLACEHOLDER = (150, 150, 150)
ACCENT_ELECTRICITY = (37, 99, 235)
ACCENT_WATER = (16, 185, 129)

# Report text
REPORT_FILE_TOKEN = "REPORT"
DEFAULT_REPORT_EXTENSION = "pdf"
DEFAULT_ORGANISATION = "JIRAMA TECHNICAL INSPECTION"
DEFAULT_DATE_LOCALE = "fr"
REPORT_TITLE_LINES = ("METER READING", "REPORT")
PLACEHOLDER_MESSAGE = "ERROR: unable to load the high resolution image."
SIGNATURE_CAPTIONS = ("RESPONSIBLE TECHNICIAN", "EXECUTIVE MANAGEMENT")

# Department vocabularies per reading kind
DEPARTMENTS_ELECTRICITY = (
    "JIRAMA JOUR", "JIRAMA NUIT", "JIRAMA POINT", "ACTIF", "REACTIF", "ETP",
    "HANK", "CHAUDIERE HFO", "CHAUDIERE BOIS", "COMPRESSEUR", "GENERATEUR",
    "LAVAGE", "BUREAU", "FIN 01", "FIN 02", "MUP 01", "MUP 02",
    "KNIT 01", "KNIT 02", "KNIT 03", "KNIT 04", "KNIT 05",
)
DEPARTMENTS_WATER = (
    "JIRAMA 01", "JIRAMA 02", "JIRAMA 03", "ETP", "CHAUDIERE", "HANK", "LAVAGE",
)

# Long date name tables (Monday first, January first)
WEEKDAY_NAMES = {
    "fr": ("LUNDI", "MARDI", "MERCREDI", "JEUDI", "VENDREDI", "SAMEDI", "DIMANCHE"),
    "en": ("MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY"),
}
MONTH_NAMES = {
    "fr": ("JANVIER", "FÉVRIER", "MARS", "AVRIL", "MAI", "JUIN", "JUILLET",
           "AOÛT", "SEPTEMBRE", "OCTOBRE", "NOVEMBRE", "DÉCEMBRE"),
    "en": ("JANUARY", "FEBRUARY", "MARCH", "APRIL", "MAY", "JUNE", "JULY",
           "AUGUST", "SEPTEMBER", "OCTOBER", "NOVEMBER", "DECEMBER"),
}

# Reading store
READINGS_DIR_NAME = "Readings"
READING_EXTENSION = ".json"
DRAFT_FILE_NAME = "draft.json"
SCHEMA_VERSION = 1

# Reading field names
FIELD_SCHEMA_VERSION = "schema_version"
FIELD_ID = "id"
FIELD_DATE = "date"
FIELD_TYPE = "type"
FIELD_CREATED_AT = "created_at"
FIELD_PHOTOS = "photos"
FIELD_DEPARTMENT = "department"
FIELD_DATA = "data"
FIELD_TIMESTAMP = "timestamp"
