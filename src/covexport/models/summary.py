"""Coverage summary statistics per file and for the whole program."""

from __future__ import annotations

from dataclasses import dataclass, field

TOTALS_FILENAME = "Totals"


@dataclass(frozen=True)
class CoverageStat:
    """A covered/count pair for one coverage dimension.

    The percentage is derived on every access rather than stored, so it can
    never drift from the counts. A dimension with nothing to count reports
    ``0.0`` percent.
    """

    covered: int = 0
    count: int = 0

    @property
    def not_covered(self) -> int:
        return self.count - self.covered

    @property
    def percent(self) -> float:
        """Return coverage as a percentage (0.0-100.0)."""
        if self.count == 0:
            return 0.0
        return (self.covered / self.count) * 100.0

    def __add__(self, other: CoverageStat) -> CoverageStat:
        return CoverageStat(covered=self.covered + other.covered, count=self.count + other.count)


@dataclass
class FileSummary:
    """Line, function, instantiation and region statistics for one file."""

    filename: str
    """Source file name, or ``Totals`` for the program-wide summary."""

    line_stat: CoverageStat = field(default_factory=CoverageStat)
    """Mapped lines that were executed."""

    function_stat: CoverageStat = field(default_factory=CoverageStat)
    """Functions (instantiation groups) executed at least once."""

    instantiation_stat: CoverageStat = field(default_factory=CoverageStat)
    """Individual function instantiations executed at least once."""

    region_stat: CoverageStat = field(default_factory=CoverageStat)
    """Code regions executed at least once."""

    @classmethod
    def totals(cls) -> FileSummary:
        """Return an empty summary to accumulate program totals into."""
        return cls(filename=TOTALS_FILENAME)

    def add(self, other: FileSummary) -> None:
        """Fold *other* into this summary, dimension by dimension."""
        self.line_stat += other.line_stat
        self.function_stat += other.function_stat
        self.instantiation_stat += other.instantiation_stat
        self.region_stat += other.region_stat
