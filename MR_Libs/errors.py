"""
Error taxonomy for Meter Report.

Classes:
    MeterReportError: Base class for all library errors
    BuildError: A whole-document report build was refused or failed
    InputError: The report input is empty or missing required fields
    AssetError: A single photo could not be decoded or drawn
    SessionError: An editing operation was rejected by the session
"""

from typing import Optional


class MeterReportError(Exception):
    """Base class for Meter Report errors."""


class BuildError(MeterReportError):
    """Raised when a report cannot be built at all."""


class InputError(BuildError, ValueError):
    """Raised before any page is emitted when the document is unusable."""


class AssetError(MeterReportError):
    """Raised when one photo fails to decode or draw."""

    def __init__(self, message: str, category: Optional[str] = None, index: Optional[int] = None):
        super().__init__(message)
        self.category = category
        self.index = index


class SessionError(MeterReportError):
    """Raised when an edit operation is not allowed in the current session state."""
