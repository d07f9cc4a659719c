"""Assemble sorted file reports into the final report document."""

from __future__ import annotations

from typing import TYPE_CHECKING

from covexport.models.report import ReportDocument

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from covexport.config import ExportOptions
    from covexport.models.coverage import FunctionRecord
    from covexport.models.report import FileReport
    from covexport.models.summary import FileSummary


def sort_file_reports(file_reports: Iterable[FileReport]) -> list[FileReport]:
    """Sort reports by filename using code point order (not locale-aware)."""
    return sorted(file_reports, key=lambda report: report.filename)


def assemble(
    file_reports: Iterable[FileReport],
    totals: FileSummary,
    functions: Sequence[FunctionRecord] | None,
    options: ExportOptions,
) -> ReportDocument:
    """Build the report document from unordered file reports.

    The function listing is dropped under ``summary_only`` or
    ``skip_functions``, whatever *functions* holds.
    """
    if options.summary_only or options.skip_functions:
        functions = None
    return ReportDocument(
        files=sort_file_reports(file_reports),
        totals=totals,
        functions=list(functions) if functions is not None else None,
    )
