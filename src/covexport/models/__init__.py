"""Data models for covexport."""

from covexport.models.coverage import (
    Expansion,
    FileCoverageData,
    FunctionRecord,
    Region,
    RegionKind,
    Segment,
)
from covexport.models.report import (
    EXPORT_FORMAT_TYPE,
    EXPORT_FORMAT_VERSION,
    FileReport,
    ReportDocument,
)
from covexport.models.summary import TOTALS_FILENAME, CoverageStat, FileSummary

__all__ = [
    "EXPORT_FORMAT_TYPE",
    "EXPORT_FORMAT_VERSION",
    "TOTALS_FILENAME",
    "CoverageStat",
    "Expansion",
    "FileCoverageData",
    "FileReport",
    "FileSummary",
    "FunctionRecord",
    "Region",
    "RegionKind",
    "ReportDocument",
    "Segment",
]
