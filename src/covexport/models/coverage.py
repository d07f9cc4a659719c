"""Coverage model data: segments, regions, expansions and function records."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum


class RegionKind(IntEnum):
    """Kind of a counted source region."""

    CODE = 0
    EXPANSION = 1
    SKIPPED = 2
    GAP = 3
    BRANCH = 4


@dataclass(frozen=True)
class Segment:
    """A point in a file where the active execution count changes."""

    line: int
    column: int
    count: int
    has_count: bool
    is_region_entry: bool


@dataclass(frozen=True)
class Region:
    """A source span with an execution count."""

    line_start: int
    column_start: int
    line_end: int
    column_end: int
    execution_count: int
    file_id: int = 0
    expanded_file_id: int = 0
    kind: RegionKind = RegionKind.CODE

    @property
    def is_covered(self) -> bool:
        """Return True if this region was executed at least once."""
        return self.execution_count > 0

    @property
    def start(self) -> tuple[int, int]:
        return (self.line_start, self.column_start)


@dataclass(frozen=True)
class Expansion:
    """A macro, template or include site and the regions it expands into."""

    source_region: Region
    """Marks the beginning and end of the expansion in the source file."""

    target_filenames: tuple[str, ...] = ()
    """Filenames referenced by ``target_regions`` (indexed by ``file_id``)."""

    target_regions: tuple[Region, ...] = ()
    """Counted regions of the expanded code, in source order."""


@dataclass(frozen=True)
class FunctionRecord:
    """Coverage for a single function instantiation."""

    name: str
    execution_count: int
    regions: tuple[Region, ...] = ()
    filenames: tuple[str, ...] = ()

    @property
    def main_filename(self) -> str:
        """Return the file the function is defined in (empty if unknown)."""
        return self.filenames[0] if self.filenames else ""

    @property
    def is_covered(self) -> bool:
        """Return True if this function was executed at least once."""
        return self.execution_count > 0


@dataclass(frozen=True)
class FileCoverageData:
    """Segments and expansions for one source file, ordered by position."""

    filename: str
    segments: tuple[Segment, ...] = field(default_factory=tuple)
    expansions: tuple[Expansion, ...] = field(default_factory=tuple)
