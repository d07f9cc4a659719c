"""Configuration parsing from ``.covexport.yml``."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".covexport.yml"

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")

_EXPORT_KEYS = frozenset({"summary_only", "skip_expansions", "skip_functions", "num_threads"})
_BOOL_OPTIONS = ("summary_only", "skip_expansions", "skip_functions")
_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})
_FALSE_STRINGS = frozenset({"false", "0", "no", "off"})


def _resolve_env_vars(value: str) -> str:
    """Replace ``${VAR_NAME}`` placeholders with environment variable values."""

    def _replace(match: re.Match[str]) -> str:
        var = match.group(1)
        resolved = os.environ.get(var)
        if resolved is None:
            logger.warning("Environment variable %s is not set (referenced in config)", var)
            return ""
        return resolved

    return _ENV_VAR_RE.sub(_replace, value)


def _resolve_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively resolve environment variables in a dictionary."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            result[key] = _resolve_env_vars(value)
        elif isinstance(value, dict):
            result[key] = _resolve_dict(value)
        elif isinstance(value, list):
            result[key] = [
                _resolve_env_vars(item) if isinstance(item, str) else item for item in value
            ]
        else:
            result[key] = value
    return result


def _parse_bool(value: Any) -> Any:
    """Coerce recognized boolean spellings; anything else is left for validation."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    return value


def _parse_int(value: Any) -> Any:
    """Coerce integer strings; anything else is left for validation."""
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return value
    return value


@dataclass
class ExportOptions:
    """Detail level and parallelism for one export call."""

    summary_only: bool = False
    """Emit totals and per-file summaries only; no segments, expansions or functions."""

    skip_expansions: bool = False
    """Omit the expansion list of every file."""

    skip_functions: bool = False
    """Omit the flattened function list."""

    num_threads: int = 0
    """Rendering worker count (0 = auto-select)."""


@dataclass
class FilterConfig:
    """Filename filtering configuration."""

    ignore_filename_regex: list[str] = field(default_factory=list)
    """Files matching any of these patterns are excluded from the report."""


@dataclass
class OutputConfig:
    """Report output configuration."""

    path: str = ""
    """Output file path (empty = standard output)."""

    indent: int = 2
    """JSON indentation width (0 = compact)."""


@dataclass
class CovexportConfig:
    """Complete covexport configuration from ``.covexport.yml``."""

    export: ExportOptions = field(default_factory=ExportOptions)
    """Export detail level and parallelism."""

    filters: FilterConfig = field(default_factory=FilterConfig)
    """Filename filters."""

    output: OutputConfig = field(default_factory=OutputConfig)
    """Output configuration."""

    unknown_export_keys: list[str] = field(default_factory=list)
    """Keys in the ``export`` section that are not recognized."""

    raw: dict[str, Any] = field(default_factory=dict)
    """Raw parsed YAML for extension/debugging."""


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    value = raw.get(name, {})
    return value if isinstance(value, dict) else {}


def _parse_export_options(raw: dict[str, Any]) -> ExportOptions:
    """Parse export options from raw YAML."""
    export_raw = _section(raw, "export")
    return ExportOptions(
        summary_only=_parse_bool(export_raw.get("summary_only", False)),
        skip_expansions=_parse_bool(export_raw.get("skip_expansions", False)),
        skip_functions=_parse_bool(export_raw.get("skip_functions", False)),
        num_threads=_parse_int(
            export_raw.get("num_threads", os.environ.get("COVEXPORT_NUM_THREADS", "0") or 0)
        ),
    )


def _parse_filter_config(raw: dict[str, Any]) -> FilterConfig:
    """Parse filename filter configuration from raw YAML."""
    filters_raw = _section(raw, "filters")
    patterns_raw = filters_raw.get("ignore_filename_regex", [])
    if isinstance(patterns_raw, str):
        patterns_raw = [patterns_raw]
    patterns = [str(p) for p in patterns_raw] if isinstance(patterns_raw, list) else []
    return FilterConfig(ignore_filename_regex=patterns)


def _parse_output_config(raw: dict[str, Any]) -> OutputConfig:
    """Parse output configuration from raw YAML."""
    output_raw = _section(raw, "output")
    return OutputConfig(
        path=str(output_raw.get("path", "")),
        indent=_parse_int(output_raw.get("indent", 2)),
    )


def load_config(root: str | Path) -> CovexportConfig:
    """Load and parse the ``.covexport.yml`` configuration.

    Falls back to defaults and environment variables when the YAML file is
    missing or incomplete.
    """
    config_path = Path(root).resolve() / CONFIG_FILENAME

    raw: dict[str, Any] = {}
    if config_path.is_file():
        parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        if isinstance(parsed, dict):
            raw = _resolve_dict(parsed)
        logger.debug("Loaded configuration from %s", config_path)

    unknown = sorted(set(_section(raw, "export")) - _EXPORT_KEYS)

    return CovexportConfig(
        export=_parse_export_options(raw),
        filters=_parse_filter_config(raw),
        output=_parse_output_config(raw),
        unknown_export_keys=unknown,
        raw=raw,
    )


def validate_options(options: ExportOptions) -> list[str]:
    """Validate export options and return a list of error messages."""
    errors: list[str] = [
        f"export.{name} must be a boolean (got: {getattr(options, name)!r})"
        for name in _BOOL_OPTIONS
        if not isinstance(getattr(options, name), bool)
    ]

    if not isinstance(options.num_threads, int) or isinstance(options.num_threads, bool):
        errors.append(f"export.num_threads must be an integer (got: {options.num_threads!r})")
    elif options.num_threads < 0:
        errors.append(f"export.num_threads must be non-negative (got: {options.num_threads})")

    return errors


def _validate_filter_config(filters: FilterConfig) -> list[str]:
    """Validate that every ignore pattern compiles."""
    errors: list[str] = []
    for pattern in filters.ignore_filename_regex:
        try:
            re.compile(pattern)
        except re.error as exc:
            errors.append(f"filters.ignore_filename_regex: invalid pattern {pattern!r} ({exc})")
    return errors


def _validate_output_config(output: OutputConfig) -> list[str]:
    errors: list[str] = []
    if not isinstance(output.indent, int) or isinstance(output.indent, bool):
        errors.append(f"output.indent must be an integer (got: {output.indent!r})")
    elif output.indent < 0:
        errors.append(f"output.indent must be non-negative (got: {output.indent})")
    return errors


def validate_config(config: CovexportConfig) -> list[str]:
    """Validate the configuration and return a list of error messages.

    Returns an empty list if the configuration is valid.
    """
    errors: list[str] = [
        f"export.{key} is not a recognized option" for key in config.unknown_export_keys
    ]
    errors.extend(validate_options(config.export))
    errors.extend(_validate_filter_config(config.filters))
    errors.extend(_validate_output_config(config.output))
    return errors
