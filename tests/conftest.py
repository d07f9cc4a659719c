"""Shared fixtures for covexport tests."""

from __future__ import annotations

import pytest

from covexport.adapters.memory import InMemoryCoverageModel
from covexport.models.coverage import (
    Expansion,
    FileCoverageData,
    FunctionRecord,
    Region,
    RegionKind,
    Segment,
)


def make_fully_covered_file(
    filename: str, function_name: str
) -> tuple[FileCoverageData, FunctionRecord]:
    """One covered line containing one function executed once."""
    data = FileCoverageData(
        filename=filename,
        segments=(
            Segment(line=1, column=1, count=1, has_count=True, is_region_entry=True),
            Segment(line=1, column=20, count=0, has_count=False, is_region_entry=False),
        ),
    )
    function = FunctionRecord(
        name=function_name,
        execution_count=1,
        regions=(Region(1, 1, 1, 20, 1),),
        filenames=(filename,),
    )
    return data, function


@pytest.fixture
def two_file_model() -> InMemoryCoverageModel:
    """``a.c`` and ``b.c``, each with one fully covered line and function."""
    a_data, a_func = make_fully_covered_file("a.c", "main")
    b_data, b_func = make_fully_covered_file("b.c", "helper")
    return InMemoryCoverageModel({"b.c": b_data, "a.c": a_data}, [b_func, a_func])


@pytest.fixture
def macro_model() -> InMemoryCoverageModel:
    """A file with a partially covered function and a macro expansion."""
    macro_region = Region(3, 5, 3, 12, 2, file_id=0, expanded_file_id=1, kind=RegionKind.EXPANSION)
    expansion = Expansion(
        source_region=macro_region,
        target_filenames=("m.c", "m.h"),
        target_regions=(Region(1, 1, 1, 30, 2, file_id=1),),
    )
    data = FileCoverageData(
        filename="m.c",
        segments=(
            Segment(1, 1, 2, True, True),
            Segment(3, 5, 2, True, True),
            Segment(4, 1, 0, True, True),
            Segment(5, 2, 0, False, False),
        ),
        expansions=(expansion,),
    )
    function = FunctionRecord(
        name="compute",
        execution_count=2,
        regions=(
            Region(1, 1, 5, 2, 2),
            macro_region,
            Region(4, 1, 4, 20, 0),
            Region(1, 1, 1, 30, 2, file_id=1),
        ),
        filenames=("m.c", "m.h"),
    )
    return InMemoryCoverageModel({"m.c": data}, [function])


@pytest.fixture
def one_file_model() -> InMemoryCoverageModel:
    data, function = make_fully_covered_file("a.c", "main")
    return InMemoryCoverageModel({"a.c": data}, [function])
