"""covexport CLI: top-level command group."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import asdict, replace
from pathlib import Path
from typing import Any

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler

from covexport import __version__
from covexport.adapters.memory import load_coverage_model
from covexport.config import CovexportConfig, load_config, validate_config
from covexport.errors import ExportError
from covexport.export.exporter import CoverageExporter
from covexport.filters import CoverageFilters
from covexport.reporters.json_reporter import JSONReporter
from covexport.reporters.terminal import reporter

logger = logging.getLogger(__name__)
console = Console()


def _configure_logging(*, verbose: bool) -> None:
    """Route log records through rich when verbose output is requested."""
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _config_to_dict(config: CovexportConfig) -> dict[str, Any]:
    """Convert CovexportConfig to dictionary for display."""
    result = asdict(config)
    result.pop("raw", None)
    result.pop("unknown_export_keys", None)
    return result


def _load_config_or_abort(root: str) -> CovexportConfig:
    try:
        return load_config(root)
    except (OSError, ValueError, yaml.YAMLError) as e:
        reporter.print_error(f"Failed to load configuration: {e}")
        raise click.Abort from e


def _load_valid_config(root: str) -> CovexportConfig:
    config = _load_config_or_abort(root)
    errors = validate_config(config)
    if errors:
        for error in errors:
            reporter.print_error(error)
        raise click.Abort
    return config


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging on stderr.")
@click.version_option(version=__version__, prog_name="covexport")
@click.pass_context
def cli(ctx: click.Context, *, verbose: bool) -> None:
    """covexport: export coverage data as a structured report."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose=verbose)


@cli.command("export")
@click.argument("model_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--summary-only/--no-summary-only",
    default=None,
    help="Export only summary information for each file and the totals.",
)
@click.option(
    "--skip-expansions/--no-skip-expansions",
    default=None,
    help="Do not export expansion data.",
)
@click.option(
    "--skip-functions/--no-skip-functions",
    default=None,
    help="Do not export the per-function listing.",
)
@click.option(
    "-j",
    "--num-threads",
    type=int,
    default=None,
    help="Number of rendering threads (0 = one per CPU, capped at the file count).",
)
@click.option(
    "--ignore-filename-regex",
    multiple=True,
    help="Skip source files whose names match this regular expression (repeatable).",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the JSON report to this file instead of standard output.",
)
@click.option("--table", is_flag=True, help="Print a coverage summary table instead of JSON.")
@click.option(
    "--config-root",
    default=".",
    type=click.Path(exists=True, file_okay=False),
    help="Directory containing .covexport.yml.",
)
def export_cmd(
    model_file: Path,
    *,
    summary_only: bool | None,
    skip_expansions: bool | None,
    skip_functions: bool | None,
    num_threads: int | None,
    ignore_filename_regex: tuple[str, ...],
    output: Path | None,
    table: bool,
    config_root: str,
) -> None:
    """Export the coverage model in MODEL_FILE as a JSON report."""
    config = _load_valid_config(config_root)

    overrides: dict[str, Any] = {
        "summary_only": summary_only,
        "skip_expansions": skip_expansions,
        "skip_functions": skip_functions,
        "num_threads": num_threads,
    }
    options = replace(config.export, **{k: v for k, v in overrides.items() if v is not None})
    patterns = [*config.filters.ignore_filename_regex, *ignore_filename_regex]

    try:
        ignore_filters = CoverageFilters.from_patterns(patterns)
        model = load_coverage_model(model_file)
        document = CoverageExporter(model, options).render_root(ignore_filters)
    except ExportError as exc:
        reporter.print_error(str(exc))
        raise click.Abort from exc
    except re.error as exc:
        reporter.print_error(f"Invalid filter: {exc}")
        raise click.Abort from exc

    if table:
        reporter.print_info(f"Coverage model: {model_file}")
        if not document.files:
            reporter.print_warning("No source files left to report after filtering")
        reporter.print_coverage_summary(document)
        return

    json_reporter = JSONReporter(indent=config.output.indent)
    output_path = output or (Path(config.output.path) if config.output.path else None)
    if output_path is not None:
        json_reporter.generate(output_path, document)
        reporter.print_success(f"Report for {len(document.files)} files written to {output_path}")
    else:
        click.echo(json_reporter.generate_string(document))


@cli.group("config")
def config_group() -> None:
    """Inspect and validate .covexport.yml."""


@config_group.command("show")
@click.option(
    "--path",
    default=".",
    type=click.Path(exists=True, file_okay=False),
    help="Project root containing .covexport.yml.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the configuration as JSON.")
def config_show(path: str, *, as_json: bool) -> None:
    """Show the effective configuration."""
    config_dict = _config_to_dict(_load_config_or_abort(path))
    if as_json:
        click.echo(json.dumps(config_dict, indent=2))
        return

    for section, values in config_dict.items():
        console.print(f"[bold cyan]{section}[/bold cyan]")
        for key, value in values.items():
            console.print(f"  {key}: {value}")


@config_group.command("validate")
@click.option(
    "--path",
    default=".",
    type=click.Path(exists=True, file_okay=False),
    help="Project root containing .covexport.yml.",
)
def config_validate(path: str) -> None:
    """Validate .covexport.yml and report any errors."""
    config = _load_config_or_abort(path)
    errors = validate_config(config)
    if not errors:
        reporter.print_success("Configuration is valid!")
        return

    reporter.print_error(f"Found {len(errors)} configuration error(s):")
    for idx, error in enumerate(errors, start=1):
        console.print(f"  {idx}. [red]{error}[/red]")
    raise click.Abort


def main() -> None:
    """Console script entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
