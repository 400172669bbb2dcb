"""
MR_Libs - Meter Report Library Modules

This package contains core functionality for the Meter Report project,
organized into specialized sub-packages:

- ImageEditingLib: Non-destructive photo compositor and editing sessions
- ReportLib: Paginated PDF inspection report builder
- ReadingStoreLib: JSON reading storage and report snapshots
"""

__version__ = "0.1.0"
