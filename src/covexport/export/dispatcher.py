"""Concurrent per-file rendering across a bounded thread pool."""

from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import TYPE_CHECKING

from covexport.errors import (
    ConfigurationError,
    CoverageDataError,
    ExportCancelledError,
    ExportError,
    WorkerPoolError,
)
from covexport.export.renderer import render_file

if TYPE_CHECKING:
    from collections.abc import Sequence

    from covexport.adapters.base import CoverageModel
    from covexport.config import ExportOptions
    from covexport.models.report import FileReport
    from covexport.models.summary import FileSummary

logger = logging.getLogger(__name__)


def resolve_worker_count(requested: int, file_count: int, available: int | None = None) -> int:
    """Return the number of rendering workers to start.

    ``0`` selects automatically: one worker per available CPU, but never
    more workers than files. The result is always at least 1.

    Args:
        requested: Caller-requested worker count (0 = auto).
        file_count: Number of files to render.
        available: Available parallelism; defaults to ``os.cpu_count()``.
    """
    if requested < 0:
        raise ConfigurationError([f"num_threads must be non-negative (got: {requested})"])

    if requested == 0:
        cpus = available if available is not None else (os.cpu_count() or 1)
        return max(1, min(cpus, file_count))
    return max(1, min(requested, file_count))


def render_all(
    files: Sequence[str],
    summaries: Sequence[FileSummary],
    model: CoverageModel,
    options: ExportOptions,
    *,
    worker_count: int = 0,
    cancel_event: threading.Event | None = None,
) -> list[FileReport]:
    """Render every file concurrently and return the reports.

    The order of the returned list follows completion order and is
    unspecified; callers must sort it. The call returns only after every
    worker has finished.

    Failure policy is fail-fast: the first rendering error stops scheduling,
    in-flight renders are awaited and the error is re-raised. No partial
    result is ever returned.

    Args:
        files: Filenames to render.
        summaries: Precomputed summaries, parallel to *files*.
        model: Coverage model to read from.
        options: Detail level for each file report.
        worker_count: Requested worker count (0 = auto).
        cancel_event: When set by the caller, no further file is rendered
            and ``ExportCancelledError`` is raised once workers drain.

    Raises:
        CoverageDataError: A file could not be rendered.
        ExportCancelledError: *cancel_event* was set.
        WorkerPoolError: The thread pool could not be created.
    """
    if len(files) != len(summaries):
        raise ConfigurationError(
            [f"got {len(files)} files but {len(summaries)} summaries; they must be parallel"]
        )
    if not files:
        return []

    workers = resolve_worker_count(worker_count, len(files))
    logger.info("Rendering %d files across %d workers", len(files), workers)

    results: list[FileReport] = []
    results_lock = threading.Lock()
    stop = threading.Event()

    def _stopped() -> bool:
        return stop.is_set() or (cancel_event is not None and cancel_event.is_set())

    def _render(filename: str, summary: FileSummary) -> None:
        if _stopped():
            return
        report = render_file(filename, model, summary, options)
        with results_lock:
            results.append(report)

    try:
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="covexport-render")
    except (RuntimeError, ValueError) as exc:
        raise WorkerPoolError(f"Could not start {workers} rendering workers: {exc}") from exc

    futures: dict[Future[None], str] = {}
    with executor:
        try:
            for filename, summary in zip(files, summaries, strict=True):
                futures[executor.submit(_render, filename, summary)] = filename
        except RuntimeError as exc:
            stop.set()
            raise WorkerPoolError(f"Could not schedule rendering work: {exc}") from exc

        done, pending = wait(futures, return_when=FIRST_EXCEPTION)
        if any(f.exception() is not None for f in done):
            stop.set()
            for future in pending:
                future.cancel()
    # Leaving the executor block waits for every in-flight render.

    failure = _first_failure(futures)
    if failure is not None:
        logger.error("Export aborted: %s", failure)
        raise failure

    if cancel_event is not None and cancel_event.is_set():
        rendered = len(results)
        logger.warning("Export cancelled after rendering %d of %d files", rendered, len(files))
        raise ExportCancelledError(f"Export cancelled ({rendered} of {len(files)} files rendered)")

    return results


def _first_failure(futures: dict[Future[None], str]) -> ExportError | None:
    """Return the error of the earliest-submitted failed render, if any."""
    for future, filename in futures.items():
        if future.cancelled():
            continue
        exc = future.exception()
        if exc is None:
            continue
        if isinstance(exc, ExportError):
            return exc
        error = CoverageDataError(filename, exc)
        error.__cause__ = exc
        return error
    return None
