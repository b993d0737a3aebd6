"""Export format registry."""

from app.db.enums import DataExportFormat
from app.services.export_formats.base import ExportColumn, ExportFormat
from app.services.export_formats.breeze import BREEZE_FORMAT
from app.services.export_formats.generic import GENERIC_FORMAT
from app.services.export_formats.planning_center import PLANNING_CENTER_FORMAT

EXPORT_FORMATS: dict[DataExportFormat, ExportFormat] = {
    DataExportFormat.PLANNING_CENTER_CSV: PLANNING_CENTER_FORMAT,
    DataExportFormat.BREEZE_CSV: BREEZE_FORMAT,
    DataExportFormat.GENERIC_CSV: GENERIC_FORMAT,
}


def get_export_format(format: DataExportFormat | str) -> ExportFormat:
    """Look up a format by enum or value. Raises ValueError for unknown formats."""
    return EXPORT_FORMATS[DataExportFormat(format)]


__all__ = [
    "EXPORT_FORMATS",
    "ExportColumn",
    "ExportFormat",
    "get_export_format",
]
