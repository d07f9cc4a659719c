"""Tests for covexport.adapters.memory."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from covexport.adapters.memory import (
    InMemoryCoverageModel,
    load_coverage_model,
    parse_coverage_model,
)
from covexport.errors import CoverageDataError
from covexport.models.coverage import FileCoverageData, FunctionRecord, RegionKind, Segment

if TYPE_CHECKING:
    from pathlib import Path


def _model_json() -> dict[str, object]:
    return {
        "files": {
            "src/main.c": {
                "segments": [[1, 1, 4, True, True], [3, 2, 0, False, False]],
                "expansions": [
                    {
                        "source_region": [2, 3, 2, 10, 4, 0, 1, 1],
                        "filenames": ["src/main.c", "src/macros.h"],
                        "target_regions": [[5, 1, 5, 20, 4, 1, 0, 0]],
                    }
                ],
            }
        },
        "functions": [
            {
                "name": "main",
                "count": 4,
                "regions": [[1, 1, 3, 2, 4, 0, 0, 0]],
                "filenames": ["src/main.c", "src/macros.h"],
            }
        ],
    }


class TestInMemoryCoverageModel:
    def test_unique_source_files_sorted(self) -> None:
        model = InMemoryCoverageModel(
            {"z.c": FileCoverageData("z.c"), "a.c": FileCoverageData("a.c")}
        )
        assert model.unique_source_files() == ["a.c", "z.c"]

    def test_function_only_file_is_listed(self) -> None:
        model = InMemoryCoverageModel({}, [FunctionRecord("f", 1, filenames=("only.c",))])
        assert model.unique_source_files() == ["only.c"]
        assert model.get_coverage_for_file("only.c").segments == ()

    def test_unknown_file_raises(self) -> None:
        model = InMemoryCoverageModel()
        with pytest.raises(CoverageDataError) as exc_info:
            model.get_coverage_for_file("missing.c")
        assert exc_info.value.filename == "missing.c"

    def test_functions_in_model_order(self) -> None:
        funcs = [FunctionRecord("b", 0), FunctionRecord("a", 1)]
        model = InMemoryCoverageModel({}, funcs)
        assert [f.name for f in model.get_covered_functions()] == ["b", "a"]


class TestParseCoverageModel:
    def test_parses_files_and_functions(self) -> None:
        model = parse_coverage_model(_model_json())
        data = model.get_coverage_for_file("src/main.c")

        assert data.segments[0] == Segment(1, 1, 4, True, True)
        assert len(data.expansions) == 1
        expansion = data.expansions[0]
        assert expansion.source_region.kind is RegionKind.EXPANSION
        assert expansion.target_filenames == ("src/main.c", "src/macros.h")
        assert expansion.target_regions[0].file_id == 1

        (func,) = model.get_covered_functions()
        assert func.name == "main"
        assert func.execution_count == 4
        assert func.main_filename == "src/main.c"

    def test_rejects_non_object(self) -> None:
        with pytest.raises(CoverageDataError):
            parse_coverage_model([1, 2, 3])

    def test_rejects_short_segment(self) -> None:
        data = {"files": {"a.c": {"segments": [[1, 1, 0]]}}}
        with pytest.raises(CoverageDataError) as exc_info:
            parse_coverage_model(data)
        assert exc_info.value.filename == "a.c"

    def test_rejects_negative_count(self) -> None:
        data = {"files": {}, "functions": [{"name": "f", "count": -1}]}
        with pytest.raises(CoverageDataError, match="non-negative"):
            parse_coverage_model(data)

    def test_rejects_unknown_region_kind(self) -> None:
        data = {"functions": [{"name": "f", "regions": [[1, 1, 1, 1, 0, 0, 0, 9]]}]}
        with pytest.raises(CoverageDataError):
            parse_coverage_model(data)


class TestLoadCoverageModel:
    def test_load_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "model.json"
        path.write_text(json.dumps(_model_json()), encoding="utf-8")
        model = load_coverage_model(path)
        assert model.unique_source_files() == ["src/main.c"]

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "model.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CoverageDataError) as exc_info:
            load_coverage_model(path)
        assert exc_info.value.filename == str(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(CoverageDataError):
            load_coverage_model(tmp_path / "nope.json")
