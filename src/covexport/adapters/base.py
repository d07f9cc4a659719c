"""Base class for coverage model collaborators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from covexport.models.coverage import FileCoverageData, FunctionRecord


class CoverageModel(ABC):
    """Read-only view over already-computed coverage data.

    The export pipeline calls these methods from several worker threads at
    once, so implementations must be safe for concurrent reads.
    """

    @abstractmethod
    def unique_source_files(self) -> list[str]:
        """Return every source file that has coverage data, without duplicates."""

    @abstractmethod
    def get_coverage_for_file(self, filename: str) -> FileCoverageData:
        """Return segments and expansions for *filename*, ordered by source position.

        Args:
            filename: A name returned by ``unique_source_files()``.

        Returns:
            The file's coverage data.
        """

    @abstractmethod
    def get_covered_functions(self) -> list[FunctionRecord]:
        """Return every function record in the model, in model order."""
