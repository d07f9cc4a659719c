"""Per-file coverage summaries and program-wide totals."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from covexport.errors import CoverageDataError
from covexport.models.coverage import RegionKind
from covexport.models.summary import CoverageStat, FileSummary

if TYPE_CHECKING:
    from collections.abc import Sequence

    from covexport.adapters.base import CoverageModel
    from covexport.models.coverage import FunctionRecord, Segment

logger = logging.getLogger(__name__)


def compute_summaries(
    files: Sequence[str], model: CoverageModel
) -> tuple[list[FileSummary], FileSummary]:
    """Summarize every requested file and fold the results into totals.

    Totals are built by summing covered/count pairs per dimension, never by
    averaging percentages.

    Args:
        files: Filenames to summarize.
        model: Coverage model to read from.

    Returns:
        A ``(summaries, totals)`` pair; ``summaries`` is parallel to *files*.
    """
    functions_by_file: dict[str, list[FunctionRecord]] = {}
    for func in model.get_covered_functions():
        functions_by_file.setdefault(func.main_filename, []).append(func)

    totals = FileSummary.totals()
    summaries: list[FileSummary] = []
    for filename in files:
        try:
            data = model.get_coverage_for_file(filename)
        except CoverageDataError:
            raise
        except Exception as exc:
            raise CoverageDataError(filename, exc) from exc
        summary = summarize_file(filename, data.segments, functions_by_file.get(filename, []))
        totals.add(summary)
        summaries.append(summary)

    logger.debug(
        "Summarized %d files (%d/%d lines covered)",
        len(summaries),
        totals.line_stat.covered,
        totals.line_stat.count,
    )
    return summaries, totals


def collect_functions(model: CoverageModel) -> list[FunctionRecord]:
    """Return every function record exactly once, in model order."""
    return list(model.get_covered_functions())


def summarize_file(
    filename: str,
    segments: Sequence[Segment],
    functions: Sequence[FunctionRecord],
) -> FileSummary:
    """Compute the four coverage dimensions for a single file."""
    groups = _group_instantiations(functions)

    function_stat = CoverageStat(
        covered=sum(1 for group in groups if any(f.is_covered for f in group)),
        count=len(groups),
    )
    instantiation_stat = CoverageStat(
        covered=sum(1 for f in functions if f.is_covered),
        count=len(functions),
    )

    region_stat = CoverageStat()
    for group in groups:
        region_stat += _group_region_stat(group)

    return FileSummary(
        filename=filename,
        line_stat=line_stat(segments),
        function_stat=function_stat,
        instantiation_stat=instantiation_stat,
        region_stat=region_stat,
    )


def line_stat(segments: Sequence[Segment]) -> CoverageStat:
    """Count mapped and executed lines from a file's segments.

    Lines are walked from the first to the last segment. The segment that
    was active at the end of the previous line "wraps" into the current one.
    """
    if not segments:
        return CoverageStat()

    mapped = 0
    covered = 0
    wrapped: Segment | None = None
    index = 0

    for line in range(segments[0].line, segments[-1].line + 1):
        line_segments: list[Segment] = []
        while index < len(segments) and segments[index].line == line:
            line_segments.append(segments[index])
            index += 1

        is_mapped, count = _line_execution(wrapped, line_segments)
        if is_mapped:
            mapped += 1
            if count > 0:
                covered += 1

        if line_segments:
            wrapped = line_segments[-1]

    return CoverageStat(covered=covered, count=mapped)


def _line_execution(wrapped: Segment | None, line_segments: list[Segment]) -> tuple[bool, int]:
    region_starts = [s for s in line_segments if s.has_count and s.is_region_entry]

    # A skipped region starting at the head of the line hides the whole line.
    if line_segments and not line_segments[0].has_count and line_segments[0].is_region_entry:
        return False, 0

    wrapped_counts = wrapped is not None and wrapped.has_count
    if not wrapped_counts and not region_starts:
        return False, 0

    count = wrapped.count if wrapped_counts else 0
    for segment in region_starts:
        count = max(count, segment.count)
    return True, count


def _group_instantiations(functions: Sequence[FunctionRecord]) -> list[list[FunctionRecord]]:
    """Group instantiations of the same source function by their start position."""
    groups: dict[tuple[object, ...], list[FunctionRecord]] = {}
    for func in functions:
        key: tuple[object, ...] = (func.regions[0].start,) if func.regions else (func.name,)
        groups.setdefault(key, []).append(func)
    return list(groups.values())


def _code_region_stat(func: FunctionRecord) -> CoverageStat:
    regions = [r for r in func.regions if r.file_id == 0 and r.kind == RegionKind.CODE]
    return CoverageStat(covered=sum(1 for r in regions if r.is_covered), count=len(regions))


def _group_region_stat(group: list[FunctionRecord]) -> CoverageStat:
    stats = [_code_region_stat(f) for f in group]
    return CoverageStat(covered=max(s.covered for s in stats), count=stats[0].count)
