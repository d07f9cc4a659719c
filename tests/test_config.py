"""Tests for config.py — .covexport.yml parsing and validation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import yaml

from covexport.config import (
    CovexportConfig,
    ExportOptions,
    FilterConfig,
    OutputConfig,
    _resolve_dict,
    _resolve_env_vars,
    load_config,
    validate_config,
    validate_options,
)

if TYPE_CHECKING:
    from pathlib import Path

    import pytest


def _write_config(root: Path, data: dict[str, Any]) -> None:
    """Write .covexport.yml with given data."""
    (root / ".covexport.yml").write_text(yaml.dump(data), encoding="utf-8")


# ── _resolve_env_vars / _resolve_dict ─────────────────────────────────


class TestResolveEnvVars:
    def test_resolves_existing_var(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MY_VAR", "hello")
        assert _resolve_env_vars("${MY_VAR}") == "hello"

    def test_missing_var_returns_empty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MISSING_VAR", raising=False)
        assert _resolve_env_vars("${MISSING_VAR}") == ""

    def test_no_vars_unchanged(self) -> None:
        assert _resolve_env_vars("plain text") == "plain text"


class TestResolveDict:
    def test_resolves_nested_dicts(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OUT_DIR", "build")
        result = _resolve_dict({"output": {"path": "${OUT_DIR}/cov.json"}})
        assert result["output"]["path"] == "build/cov.json"

    def test_resolves_list_items(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ITEM", "x")
        result = _resolve_dict({"items": ["${ITEM}", 42]})
        assert result["items"] == ["x", 42]

    def test_passes_non_string_values(self) -> None:
        assert _resolve_dict({"n": 4, "flag": True}) == {"n": 4, "flag": True}


# ── load_config ───────────────────────────────────────────────────────


class TestLoadConfig:
    def test_defaults_without_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("COVEXPORT_NUM_THREADS", raising=False)
        config = load_config(tmp_path)

        assert config.export == ExportOptions()
        assert config.filters == FilterConfig()
        assert config.output == OutputConfig()
        assert config.unknown_export_keys == []
        assert config.raw == {}

    def test_full_file(self, tmp_path: Path) -> None:
        _write_config(
            tmp_path,
            {
                "export": {
                    "summary_only": True,
                    "skip_expansions": "yes",
                    "skip_functions": False,
                    "num_threads": 3,
                },
                "filters": {"ignore_filename_regex": ["^/usr/", "_test\\.c$"]},
                "output": {"path": "out/coverage.json", "indent": 0},
            },
        )
        config = load_config(tmp_path)

        assert config.export == ExportOptions(
            summary_only=True, skip_expansions=True, skip_functions=False, num_threads=3
        )
        assert config.filters.ignore_filename_regex == ["^/usr/", "_test\\.c$"]
        assert config.output == OutputConfig(path="out/coverage.json", indent=0)

    def test_single_pattern_string(self, tmp_path: Path) -> None:
        _write_config(tmp_path, {"filters": {"ignore_filename_regex": "vendor/"}})
        assert load_config(tmp_path).filters.ignore_filename_regex == ["vendor/"]

    def test_num_threads_from_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("COVEXPORT_NUM_THREADS", "6")
        assert load_config(tmp_path).export.num_threads == 6

    def test_file_overrides_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("COVEXPORT_NUM_THREADS", "6")
        _write_config(tmp_path, {"export": {"num_threads": 2}})
        assert load_config(tmp_path).export.num_threads == 2

    def test_env_placeholders_resolved(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("REPORT_DIR", "reports")
        _write_config(tmp_path, {"output": {"path": "${REPORT_DIR}/cov.json"}})
        assert load_config(tmp_path).output.path == "reports/cov.json"

    def test_unknown_export_keys_recorded(self, tmp_path: Path) -> None:
        _write_config(tmp_path, {"export": {"summary_only": True, "timestamp": True}})
        assert load_config(tmp_path).unknown_export_keys == ["timestamp"]

    def test_empty_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("COVEXPORT_NUM_THREADS", raising=False)
        (tmp_path / ".covexport.yml").write_text("", encoding="utf-8")
        assert load_config(tmp_path).export == ExportOptions()

    def test_malformed_values_kept_for_validation(self, tmp_path: Path) -> None:
        _write_config(
            tmp_path,
            {
                "export": {"summary_only": "ture", "skip_functions": 2, "num_threads": "abc"},
                "output": {"indent": "wide"},
            },
        )
        config = load_config(tmp_path)

        assert config.export.summary_only == "ture"
        assert config.export.skip_functions == 2
        assert config.export.num_threads == "abc"
        assert config.output.indent == "wide"

    def test_non_integer_env_threads(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("COVEXPORT_NUM_THREADS", "many")
        config = load_config(tmp_path)
        assert validate_config(config) == [
            "export.num_threads must be an integer (got: 'many')"
        ]

    def test_boolean_spellings(self, tmp_path: Path) -> None:
        _write_config(
            tmp_path,
            {"export": {"summary_only": "On", "skip_expansions": 0, "skip_functions": "no"}},
        )
        export = load_config(tmp_path).export
        assert export.summary_only is True
        assert export.skip_expansions is False
        assert export.skip_functions is False


# ── validation ────────────────────────────────────────────────────────


class TestValidateOptions:
    def test_defaults_valid(self) -> None:
        assert validate_options(ExportOptions()) == []

    def test_negative_num_threads(self) -> None:
        errors = validate_options(ExportOptions(num_threads=-1))
        assert len(errors) == 1
        assert "num_threads" in errors[0]

    def test_bool_num_threads_rejected(self) -> None:
        errors = validate_options(ExportOptions(num_threads=True))
        assert errors == ["export.num_threads must be an integer (got: True)"]

    def test_unrecognized_bool_rejected(self) -> None:
        errors = validate_options(ExportOptions(summary_only="ture"))  # type: ignore[arg-type]
        assert errors == ["export.summary_only must be a boolean (got: 'ture')"]

    def test_loaded_bool_num_threads_rejected(self, tmp_path: Path) -> None:
        _write_config(tmp_path, {"export": {"summary_only": "ture", "num_threads": True}})
        errors = validate_config(load_config(tmp_path))
        assert errors == [
            "export.summary_only must be a boolean (got: 'ture')",
            "export.num_threads must be an integer (got: True)",
        ]


class TestValidateConfig:
    def test_valid_config(self) -> None:
        assert validate_config(CovexportConfig()) == []

    def test_collects_all_errors(self) -> None:
        config = CovexportConfig(
            export=ExportOptions(num_threads=-4),
            filters=FilterConfig(ignore_filename_regex=["(unclosed"]),
            output=OutputConfig(indent=-1),
            unknown_export_keys=["colour"],
        )
        errors = validate_config(config)

        assert len(errors) == 4
        assert errors[0] == "export.colour is not a recognized option"
        assert "num_threads" in errors[1]
        assert "(unclosed" in errors[2]
        assert "output.indent" in errors[3]

    def test_non_integer_indent(self) -> None:
        config = CovexportConfig(output=OutputConfig(indent="wide"))  # type: ignore[arg-type]
        errors = validate_config(config)
        assert errors == ["output.indent must be an integer (got: 'wide')"]
