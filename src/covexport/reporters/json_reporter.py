"""JSON reporter: serializes a report document into the export JSON format.

Layout of the produced document::

    {"version": ..., "type": ...,
     "data": [{"files": [{"filename", "segments", "expansions", "summary"}],
               "totals": {...},
               "functions": [{"name", "count", "regions", "filenames"}]}]}

Segments and regions are written as flat arrays. Nothing in the output
depends on when or where it was produced, so identical inputs give
byte-identical output.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path

    from covexport.models.coverage import Expansion, FunctionRecord, Region, Segment
    from covexport.models.report import FileReport, ReportDocument
    from covexport.models.summary import CoverageStat, FileSummary

logger = logging.getLogger(__name__)


class JSONReporter:
    """Write report documents as JSON."""

    def __init__(self, indent: int | None = 2) -> None:
        self.indent = indent or None

    def generate(self, output_path: Path, document: ReportDocument) -> Path:
        """Write a JSON report file.

        Args:
            output_path: Path to write the JSON file.
            document: The assembled report document.

        Returns:
            The path to the generated JSON file.
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.generate_string(document) + "\n", encoding="utf-8")
        logger.info("JSON report written to %s", output_path)
        return output_path

    def generate_string(self, document: ReportDocument) -> str:
        """Return the JSON report as a string."""
        return json.dumps(serialize_document(document), indent=self.indent, ensure_ascii=False)


def serialize_document(document: ReportDocument) -> dict[str, Any]:
    """Convert a ``ReportDocument`` into JSON-compatible nested structures."""
    export: dict[str, Any] = {
        "files": [serialize_file(f) for f in document.files],
        "totals": serialize_summary(document.totals),
    }
    if document.functions is not None:
        export["functions"] = [serialize_function(f) for f in document.functions]

    return {
        "version": document.version,
        "type": document.type,
        "data": [export],
    }


def serialize_file(report: FileReport) -> dict[str, Any]:
    """Serialize one file report, leaving out omitted detail fields."""
    result: dict[str, Any] = {"filename": report.filename}
    if report.segments is not None:
        result["segments"] = [serialize_segment(s) for s in report.segments]
    if report.expansions is not None:
        result["expansions"] = [serialize_expansion(e) for e in report.expansions]
    result["summary"] = serialize_summary(report.summary)
    return result


def serialize_segment(segment: Segment) -> list[Any]:
    return [
        segment.line,
        segment.column,
        segment.count,
        segment.has_count,
        segment.is_region_entry,
    ]


def serialize_region(region: Region) -> list[int]:
    return [
        region.line_start,
        region.column_start,
        region.line_end,
        region.column_end,
        region.execution_count,
        region.file_id,
        region.expanded_file_id,
        int(region.kind),
    ]


def serialize_expansion(expansion: Expansion) -> dict[str, Any]:
    return {
        "filenames": list(expansion.target_filenames),
        "source_region": serialize_region(expansion.source_region),
        "target_regions": [serialize_region(r) for r in expansion.target_regions],
    }


def serialize_function(function: FunctionRecord) -> dict[str, Any]:
    return {
        "name": function.name,
        "count": function.execution_count,
        "regions": [serialize_region(r) for r in function.regions],
        "filenames": list(function.filenames),
    }


def _serialize_stat(stat: CoverageStat) -> dict[str, Any]:
    return {"count": stat.count, "covered": stat.covered, "percent": stat.percent}


def serialize_summary(summary: FileSummary) -> dict[str, Any]:
    """Serialize the four coverage dimensions of a summary."""
    region_stat = summary.region_stat
    return {
        "lines": _serialize_stat(summary.line_stat),
        "functions": _serialize_stat(summary.function_stat),
        "instantiations": _serialize_stat(summary.instantiation_stat),
        "regions": {
            "count": region_stat.count,
            "covered": region_stat.covered,
            "notcovered": region_stat.not_covered,
            "percent": region_stat.percent,
        },
    }
