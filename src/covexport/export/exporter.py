"""Export pipeline: aggregate, render concurrently, sort and assemble."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from covexport.config import ExportOptions, validate_options
from covexport.errors import ConfigurationError
from covexport.export.aggregator import collect_functions, compute_summaries
from covexport.export.assembler import assemble
from covexport.export.dispatcher import render_all
from covexport.reporters.json_reporter import JSONReporter

if TYPE_CHECKING:
    import threading
    from collections.abc import Sequence

    from covexport.adapters.base import CoverageModel
    from covexport.filters import CoverageFilter
    from covexport.models.report import ReportDocument

logger = logging.getLogger(__name__)


class CoverageExporter:
    """Produce a report document from a coverage model.

    Every call is a single linear pass and keeps no state between calls, so
    one exporter can serve concurrent exports as long as the model allows
    concurrent reads.
    """

    def __init__(self, model: CoverageModel, options: ExportOptions | None = None) -> None:
        self.model = model
        self.options = options or ExportOptions()

    def source_files(self, ignore_filters: CoverageFilter | None = None) -> list[str]:
        """Return the model's source files that no ignore filter matches."""
        files = self.model.unique_source_files()
        if ignore_filters is None:
            return list(files)
        kept = [f for f in files if not ignore_filters.matches_filename(f)]
        if len(kept) != len(files):
            logger.info("Ignoring %d of %d files", len(files) - len(kept), len(files))
        return kept

    def render_root(
        self,
        ignore_filters: CoverageFilter | None = None,
        *,
        cancel_event: threading.Event | None = None,
    ) -> ReportDocument:
        """Render every (non-ignored) source file of the model."""
        return self.render_files(self.source_files(ignore_filters), cancel_event=cancel_event)

    def render_files(
        self,
        files: Sequence[str],
        *,
        cancel_event: threading.Event | None = None,
    ) -> ReportDocument:
        """Render the given files into a report document.

        Raises:
            ConfigurationError: If the export options are invalid.
            CoverageDataError: If a file cannot be summarized or rendered.
            ExportCancelledError: If *cancel_event* was set during rendering.
        """
        errors = validate_options(self.options)
        if errors:
            raise ConfigurationError(errors)

        summaries, totals = compute_summaries(files, self.model)
        reports = render_all(
            files,
            summaries,
            self.model,
            self.options,
            worker_count=self.options.num_threads,
            cancel_event=cancel_event,
        )

        functions = None
        if not (self.options.summary_only or self.options.skip_functions):
            functions = collect_functions(self.model)

        document = assemble(reports, totals, functions, self.options)
        logger.info(
            "Exported %d files (line coverage %.2f%%)",
            len(document.files),
            document.totals.line_stat.percent,
        )
        return document

    def export(
        self,
        files: Sequence[str] | None = None,
        *,
        ignore_filters: CoverageFilter | None = None,
        indent: int | None = 2,
    ) -> str:
        """Render and serialize a report to a JSON string."""
        if files is None:
            document = self.render_root(ignore_filters)
        else:
            document = self.render_files(files)
        return JSONReporter(indent=indent).generate_string(document)


def export_coverage(
    model: CoverageModel,
    options: ExportOptions | None = None,
    *,
    files: Sequence[str] | None = None,
    ignore_filters: CoverageFilter | None = None,
) -> ReportDocument:
    """Render a report document in one call."""
    exporter = CoverageExporter(model, options)
    if files is None:
        return exporter.render_root(ignore_filters)
    return exporter.render_files(files)
