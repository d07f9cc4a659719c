"""Filename filters used to narrow the set of exported files."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class CoverageFilter(ABC):
    """Predicate over source filenames."""

    @abstractmethod
    def matches_filename(self, filename: str) -> bool:
        """Return True if *filename* is selected by this filter."""


class NameRegexFilter(CoverageFilter):
    """Match filenames containing a regular expression match."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        self._regex = re.compile(pattern)

    def matches_filename(self, filename: str) -> bool:
        return self._regex.search(filename) is not None

    def __repr__(self) -> str:
        return f"NameRegexFilter({self.pattern!r})"


class CoverageFilters(CoverageFilter):
    """Matches when any of the contained filters matches. Empty matches nothing."""

    def __init__(self, filters: Iterable[CoverageFilter] = ()) -> None:
        self._filters: list[CoverageFilter] = list(filters)

    @classmethod
    def from_patterns(cls, patterns: Iterable[str]) -> CoverageFilters:
        """Build a filter set from regular expression strings."""
        return cls(NameRegexFilter(p) for p in patterns)

    def matches_filename(self, filename: str) -> bool:
        return any(f.matches_filename(filename) for f in self._filters)
