"""Report document produced by the export pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from covexport.models.coverage import Expansion, FunctionRecord, Segment
    from covexport.models.summary import FileSummary

EXPORT_FORMAT_VERSION = "2.0.0"
EXPORT_FORMAT_TYPE = "llvm.coverage.json.export"


@dataclass
class FileReport:
    """Rendered coverage for a single file.

    ``None`` for ``segments`` or ``expansions`` means the field is omitted
    from the document, which is distinct from an empty list.
    """

    filename: str
    summary: FileSummary
    segments: list[Segment] | None = None
    expansions: list[Expansion] | None = None


@dataclass
class ReportDocument:
    """Root of an exported coverage report."""

    files: list[FileReport]
    """File reports sorted by filename."""

    totals: FileSummary
    """Summary over every file in ``files``."""

    functions: list[FunctionRecord] | None = None
    """Flattened function listing, or None when omitted."""

    version: str = EXPORT_FORMAT_VERSION
    type: str = EXPORT_FORMAT_TYPE
