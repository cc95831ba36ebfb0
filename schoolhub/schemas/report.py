"""Report schemas."""

from enum import Enum


class ReportFormat(str, Enum):
    """Downloadable report formats."""

    CSV = "csv"
    XLSX = "xlsx"

    @property
    def media_type(self) -> str:
        if self is ReportFormat.CSV:
            return "text/csv"
        return "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
