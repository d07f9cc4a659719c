"""Render one file's coverage data into a ``FileReport``."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from covexport.errors import CoverageDataError
from covexport.models.report import FileReport

if TYPE_CHECKING:
    from covexport.adapters.base import CoverageModel
    from covexport.config import ExportOptions
    from covexport.models.summary import FileSummary

logger = logging.getLogger(__name__)


def render_file(
    filename: str,
    model: CoverageModel,
    summary: FileSummary,
    options: ExportOptions,
) -> FileReport:
    """Build the report for a single file.

    Under ``summary_only`` the model is not consulted and both detail fields
    are omitted. Under ``skip_expansions`` only the expansions are omitted.
    Safe to call concurrently for different files: it only reads the model
    and returns a fresh value.

    Raises:
        CoverageDataError: If the model cannot produce data for *filename*.
    """
    report = FileReport(filename=filename, summary=summary)
    if options.summary_only:
        return report

    try:
        data = model.get_coverage_for_file(filename)
    except CoverageDataError:
        raise
    except Exception as exc:
        raise CoverageDataError(filename, exc) from exc

    report.segments = list(data.segments)
    if not options.skip_expansions:
        report.expansions = list(data.expansions)

    logger.debug(
        "Rendered %s (%d segments, %d expansions)",
        filename,
        len(report.segments),
        len(report.expansions or []),
    )
    return report
