"""Batch export: many files in, three correlated output files out.

Given a prefix ``P`` the batch writes:

- ``P.json``: one JSON array of node records per accepted file
- ``P.txt``: the relative path of the file on the same line of ``P.json``
- ``P_failed.txt``: ``<path>\\t<reason>`` for every rejected file
"""

from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from pathlib import Path
from types import TracebackType
from typing import TextIO

from astgen.config import BatchOptions, load_options
from astgen.core.admission import Admission, admit
from astgen.core.ast import default_parser, parse_file
from astgen.core.discovery import find_files
from astgen.core.export import dump_records
from astgen.core.flatten import flatten
from astgen.core.ports.parser import SourceParser
from astgen.exceptions import ParseFailure, SerializationError, SinkOpenError
from astgen.models import Accepted, BatchResult, FileOutcome, Rejected, RejectionKind

logger = logging.getLogger(__name__)

_ADMISSION_REJECTIONS = {
    Admission.TOO_FEW: RejectionKind.TOO_FEW_NODES,
    Admission.TOO_MANY: RejectionKind.TOO_MANY_NODES,
}


def sink_paths(prefix: str | Path) -> tuple[Path, Path, Path]:
    base = str(prefix)
    return Path(base + ".json"), Path(base + ".txt"), Path(base + "_failed.txt")


def _open_sink(path: Path) -> TextIO:
    try:
        return path.open("w", encoding="utf-8", newline="\n")
    except OSError as e:
        raise SinkOpenError(str(path), e.strerror or str(e)) from e


def _one_line(text: str) -> str:
    return " ".join(text.split())


def _has_line_break(path: str) -> bool:
    return "\n" in path or "\r" in path


def _escape_path(path: str) -> str:
    return path.replace("\\", "\\\\").replace("\n", "\\n").replace("\r", "\\r").replace("\t", "\\t")


class OutputSinks:
    """Shared writers for a batch run.

    The AST line and the path line of an accepted file are written under one
    lock so line *i* of both files always describes the same input.
    """

    def __init__(self, paths: tuple[Path, Path, Path], ast: TextIO, files: TextIO, failed: TextIO) -> None:
        self.ast_path, self.files_path, self.failed_path = paths
        self._ast = ast
        self._files = files
        self._failed = failed
        self._pair_lock = threading.Lock()
        self._failure_lock = threading.Lock()

    @classmethod
    def open(cls, prefix: str | Path) -> OutputSinks:
        paths = sink_paths(prefix)
        handles: list[TextIO] = []
        try:
            for path in paths:
                handles.append(_open_sink(path))
        except SinkOpenError:
            for handle in handles:
                handle.close()
            raise
        return cls(paths, *handles)

    def write_accepted(self, path: str, ast_json: str) -> None:
        with self._pair_lock:
            self._ast.write(ast_json + "\n")
            self._files.write(path + "\n")

    def write_failure(self, path: str, reason: str) -> None:
        line = f"{path}\t{_one_line(reason)}\n"
        with self._failure_lock:
            self._failed.write(line)

    def close(self) -> None:
        for handle in (self._ast, self._files, self._failed):
            handle.close()

    def __enter__(self) -> OutputSinks:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def relative_path(path: Path, root: Path) -> str:
    try:
        return Path(os.path.relpath(path.absolute(), root)).as_posix()
    except ValueError:
        # different drive on Windows
        return path.absolute().as_posix()


def process_path(path: Path, parser: SourceParser, options: BatchOptions, root: Path) -> FileOutcome:
    """Parse, flatten and admit one file without writing anything."""
    relative = relative_path(path, root)
    # P.txt holds one path per line
    if _has_line_break(relative):
        return Rejected(_escape_path(relative), RejectionKind.INVALID_PATH, "path contains a line break")
    try:
        tree = parse_file(path, parser, options.method_only, options.language)
    except ParseFailure as e:
        return Rejected(relative, RejectionKind.PARSE_FAILED, e.message)

    records = flatten(tree)
    admission = admit(records, options.min_nodes, options.max_nodes)
    if not admission.accepted:
        return Rejected(relative, _ADMISSION_REJECTIONS[admission], admission.reason)
    return Accepted(relative, records)


def _export_one(
    path: Path,
    sinks: OutputSinks,
    parser: SourceParser,
    options: BatchOptions,
    root: Path,
) -> FileOutcome:
    outcome = process_path(path, parser, options, root)
    if isinstance(outcome, Accepted):
        try:
            ast_json = dump_records(outcome.records)
        except SerializationError as e:
            logger.error("skipping %s: %s", outcome.path, e)
            outcome = Rejected(outcome.path, RejectionKind.SERIALIZATION_FAILED, str(e))
        else:
            sinks.write_accepted(outcome.path, ast_json)
            return outcome

    logger.debug("rejected %s (%s): %s", outcome.path, outcome.kind.value, outcome.reason)
    sinks.write_failure(outcome.path, outcome.reason)
    return outcome


def _tally(result: BatchResult, outcome: FileOutcome, progress_interval: int) -> None:
    if isinstance(outcome, Accepted):
        result.accepted_count += 1
    else:
        result.rejected_count += 1
    processed = result.accepted_count + result.rejected_count
    if processed % progress_interval == 0:
        logger.info("progress: %d/%d", processed, result.total_files)


def _dispatch(
    files: list[Path],
    sinks: OutputSinks,
    parser: SourceParser,
    options: BatchOptions,
    result: BatchResult,
) -> None:
    root = Path.cwd()
    with ThreadPoolExecutor(max_workers=options.workers, thread_name_prefix="astgen") as executor:
        in_flight: set[Future[FileOutcome]] = set()
        try:
            for path in files:
                if len(in_flight) >= options.workers:
                    done, in_flight = wait(in_flight, return_when=FIRST_COMPLETED)
                    for future in done:
                        _tally(result, future.result(), options.progress_interval)
                in_flight.add(executor.submit(_export_one, path, sinks, parser, options, root))

            for future in wait(in_flight).done:
                _tally(result, future.result(), options.progress_interval)
        except KeyboardInterrupt:
            logger.warning("interrupted, finishing %d in-flight file(s)", len(in_flight))
            executor.shutdown(wait=True, cancel_futures=True)
            raise


def run_batch(
    pattern: str,
    output_prefix: str | Path,
    options: BatchOptions | None = None,
    parser: SourceParser | None = None,
) -> BatchResult:
    """Export the AST of every file matching ``pattern``.

    Per-file failures are written to the failure log and never abort the run.
    ``DiscoveryError`` and ``SinkOpenError`` are raised before any file is
    processed.
    """
    options = options or load_options()
    files = sorted(find_files(pattern))
    result = BatchResult(total_files=len(files))
    logger.info("starting to process %d input file(s)", len(files))

    with OutputSinks.open(output_prefix) as sinks:
        if files:
            _dispatch(files, sinks, parser or default_parser(), options, result)
        else:
            logger.warning("no files match %r", pattern)

    logger.info("accepted %d/%d file(s)", result.accepted_count, result.total_files)
    return result
