"""Coverage model collaborators."""

from covexport.adapters.base import CoverageModel
from covexport.adapters.memory import (
    InMemoryCoverageModel,
    load_coverage_model,
    parse_coverage_model,
)

__all__ = [
    "CoverageModel",
    "InMemoryCoverageModel",
    "load_coverage_model",
    "parse_coverage_model",
]
