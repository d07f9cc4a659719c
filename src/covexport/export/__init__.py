"""Report export pipeline."""

from covexport.export.aggregator import collect_functions, compute_summaries
from covexport.export.assembler import assemble, sort_file_reports
from covexport.export.dispatcher import render_all, resolve_worker_count
from covexport.export.exporter import CoverageExporter, export_coverage
from covexport.export.renderer import render_file

__all__ = [
    "CoverageExporter",
    "assemble",
    "collect_functions",
    "compute_summaries",
    "export_coverage",
    "render_all",
    "render_file",
    "resolve_worker_count",
    "sort_file_reports",
]
