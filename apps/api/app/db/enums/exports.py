"""Data export enums."""

from enum import Enum


class DataExportFormat(str, Enum):
    """Target system for a connect card export."""

    PLANNING_CENTER_CSV = "PLANNING_CENTER_CSV"
    BREEZE_CSV = "BREEZE_CSV"
    GENERIC_CSV = "GENERIC_CSV"
