"""In-memory coverage model and its JSON loader."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from covexport.adapters.base import CoverageModel
from covexport.errors import CoverageDataError
from covexport.models.coverage import (
    Expansion,
    FileCoverageData,
    FunctionRecord,
    Region,
    RegionKind,
    Segment,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

logger = logging.getLogger(__name__)

_SEGMENT_FIELDS = 5
_REGION_FIELDS = 8


class InMemoryCoverageModel(CoverageModel):
    """Coverage model backed by plain Python containers.

    The model is never mutated after construction, which makes concurrent
    reads from worker threads safe.
    """

    def __init__(
        self,
        files: Mapping[str, FileCoverageData] | None = None,
        functions: Iterable[FunctionRecord] = (),
    ) -> None:
        self._files: dict[str, FileCoverageData] = dict(files or {})
        self._functions: tuple[FunctionRecord, ...] = tuple(functions)

    def unique_source_files(self) -> list[str]:
        names = set(self._files)
        names.update(f.main_filename for f in self._functions if f.main_filename)
        return sorted(names)

    def get_coverage_for_file(self, filename: str) -> FileCoverageData:
        data = self._files.get(filename)
        if data is None:
            if any(f.main_filename == filename for f in self._functions):
                return FileCoverageData(filename=filename)
            raise CoverageDataError(filename, "file is not part of the coverage model")
        return data

    def get_covered_functions(self) -> list[FunctionRecord]:
        return list(self._functions)


def load_coverage_model(path: Path) -> InMemoryCoverageModel:
    """Load a coverage model from a JSON file.

    Args:
        path: Path to the coverage model JSON file.

    Returns:
        The parsed model.

    Raises:
        CoverageDataError: If the file cannot be read or is malformed.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise CoverageDataError(str(path), exc) from exc

    model = parse_coverage_model(data, source=str(path))
    logger.info(
        "Loaded coverage model from %s (%d files, %d functions)",
        path,
        len(model.unique_source_files()),
        len(model.get_covered_functions()),
    )
    return model


def parse_coverage_model(data: Any, *, source: str = "<memory>") -> InMemoryCoverageModel:
    """Build an ``InMemoryCoverageModel`` from decoded JSON data."""
    if not isinstance(data, dict):
        raise CoverageDataError(source, "top-level value must be an object")

    files_raw = data.get("files", {})
    if not isinstance(files_raw, dict):
        raise CoverageDataError(source, "'files' must be an object")

    files: dict[str, FileCoverageData] = {}
    for filename, file_raw in files_raw.items():
        try:
            files[filename] = _parse_file(filename, file_raw)
        except (TypeError, ValueError, KeyError) as exc:
            raise CoverageDataError(filename, exc) from exc

    functions_raw = data.get("functions", [])
    if not isinstance(functions_raw, list):
        raise CoverageDataError(source, "'functions' must be an array")

    functions: list[FunctionRecord] = []
    for index, func_raw in enumerate(functions_raw):
        try:
            functions.append(_parse_function(func_raw))
        except (TypeError, ValueError, KeyError) as exc:
            raise CoverageDataError(source, f"function #{index}: {exc}") from exc

    return InMemoryCoverageModel(files, functions)


def _parse_file(filename: str, raw: Any) -> FileCoverageData:
    if not isinstance(raw, dict):
        raise TypeError("file entry must be an object")
    segments = tuple(_parse_segment(s) for s in raw.get("segments", []))
    expansions = tuple(_parse_expansion(e) for e in raw.get("expansions", []))
    return FileCoverageData(filename=filename, segments=segments, expansions=expansions)


def _parse_segment(raw: Any) -> Segment:
    if not isinstance(raw, list) or len(raw) != _SEGMENT_FIELDS:
        raise ValueError(f"segment must be an array of {_SEGMENT_FIELDS} values: {raw!r}")
    line, column, count, has_count, is_region_entry = raw
    return Segment(
        line=int(line),
        column=int(column),
        count=_parse_count(count),
        has_count=bool(has_count),
        is_region_entry=bool(is_region_entry),
    )


def _parse_region(raw: Any) -> Region:
    if not isinstance(raw, list) or len(raw) != _REGION_FIELDS:
        raise ValueError(f"region must be an array of {_REGION_FIELDS} integers: {raw!r}")
    line_start, col_start, line_end, col_end, count, file_id, expanded_file_id, kind = raw
    return Region(
        line_start=int(line_start),
        column_start=int(col_start),
        line_end=int(line_end),
        column_end=int(col_end),
        execution_count=_parse_count(count),
        file_id=int(file_id),
        expanded_file_id=int(expanded_file_id),
        kind=RegionKind(int(kind)),
    )


def _parse_expansion(raw: Any) -> Expansion:
    if not isinstance(raw, dict):
        raise TypeError("expansion must be an object")
    return Expansion(
        source_region=_parse_region(raw["source_region"]),
        target_filenames=tuple(str(name) for name in raw.get("filenames", [])),
        target_regions=tuple(_parse_region(r) for r in raw.get("target_regions", [])),
    )


def _parse_function(raw: Any) -> FunctionRecord:
    if not isinstance(raw, dict):
        raise TypeError("function must be an object")
    return FunctionRecord(
        name=str(raw["name"]),
        execution_count=_parse_count(raw.get("count", 0)),
        regions=tuple(_parse_region(r) for r in raw.get("regions", [])),
        filenames=tuple(str(name) for name in raw.get("filenames", [])),
    )


def _parse_count(value: Any) -> int:
    count = int(value)
    if count < 0:
        raise ValueError(f"execution count must be non-negative (got: {count})")
    return count
