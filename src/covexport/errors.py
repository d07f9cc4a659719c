"""Exceptions raised by the export pipeline."""

from __future__ import annotations


class ExportError(Exception):
    """Base class for every terminal failure of an export call."""


class CoverageDataError(ExportError):
    """The coverage model could not produce data for a file."""

    def __init__(self, filename: str, cause: BaseException | str) -> None:
        self.filename = filename
        self.cause = cause
        super().__init__(f"Failed to read coverage data for {filename}: {cause}")


class ConfigurationError(ExportError):
    """Export options are invalid or contradictory."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("Invalid export configuration: " + "; ".join(self.errors))


class WorkerPoolError(ExportError):
    """The rendering worker pool could not be created."""


class ExportCancelledError(ExportError):
    """The caller cancelled the export before it completed."""
