"""Reporters for exported coverage documents."""

from __future__ import annotations

from covexport.reporters.json_reporter import JSONReporter, serialize_document
from covexport.reporters.terminal import CLIReporter, reporter

__all__ = [
    "CLIReporter",
    "JSONReporter",
    "reporter",
    "serialize_document",
]
