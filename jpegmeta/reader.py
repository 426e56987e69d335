"""Top-level entry points -- in-memory parsing, single files and batches.

Batches run sequentially or on a thread pool; either way the results come
back in file order.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Tuple

from jpegmeta.config import ReaderConfig
from jpegmeta.cursor import ByteCursor, BytesLike
from jpegmeta.models import (
    BatchResult,
    FatalParseError,
    Metadata,
    ParseResult,
    ReadResult,
)
from jpegmeta.segments import scan_segments

logger = logging.getLogger(__name__)

# Suffixes picked up when scanning directories (compared lower-case)
JPEG_EXTENSIONS = {'.jpg', '.jpeg', '.jpe', '.jfif'}

ProgressCallback = Callable[[int, int, Path, ReadResult], None]


def parse_jpeg(data: BytesLike, config: Optional[ReaderConfig] = None) -> ParseResult:
    """Extract metadata from the bytes of a JPEG file.

    Never raises for malformed input: fatal problems are reported through
    ``ParseResult.error`` with empty metadata, and non-fatal ones are skipped.

    Args:
        data: Complete JPEG file content.
        config: Optional extra tag names / text encoding. None uses defaults.

    Returns:
        ParseResult with success flag, error kind and metadata.
    """
    metadata = Metadata()
    try:
        scan_segments(metadata, ByteCursor(data), config)
    except FatalParseError as e:
        logger.debug("parse failed: %s", e.kind.value)
        return ParseResult(success=False, error=e.kind)
    return ParseResult(success=True, metadata=metadata)


def read_file(filepath: Path, config: Optional[ReaderConfig] = None) -> ReadResult:
    """Read a file from disk and parse it.

    I/O problems are recorded in ``ReadResult.error`` rather than raised.
    """
    filepath = Path(filepath)
    started = time.monotonic()
    try:
        data = filepath.read_bytes()
    except OSError as e:
        logger.debug("cannot read %s: %s", filepath, e)
        return ReadResult(filepath=filepath, error=f'{type(e).__name__}: {e}')

    parsed = parse_jpeg(data, config)
    return ReadResult(
        filepath=filepath,
        file_size=len(data),
        read_time_ms=(time.monotonic() - started) * 1000,
        result=parsed,
    )


def collect_jpeg_files(path: Path) -> List[Path]:
    """A single file as-is, or every JPEG below a directory in sorted order."""
    path = Path(path)
    if path.is_file():
        return [path]
    return sorted(p for p in path.rglob('*')
                  if p.is_file() and p.suffix.lower() in JPEG_EXTENSIONS)


def read_batch(
    input_path: Path,
    config: Optional[ReaderConfig] = None,
    progress_callback: Optional[ProgressCallback] = None,
    workers: int = 1,
) -> BatchResult:
    """Read and parse every JPEG under ``input_path``.

    Args:
        input_path: File or directory containing JPEG files.
        config: Reader configuration shared by every file.
        progress_callback: Called with (done, total, filepath, result) after each file.
        workers: Thread pool size. 1 reads sequentially.

    Returns:
        BatchResult with per-file results in file order and summary counts.
    """
    started = time.monotonic()
    files = collect_jpeg_files(Path(input_path))
    batch = BatchResult(total_files=len(files))
    results: List[Optional[ReadResult]] = [None] * len(files)

    if workers > 1 and len(files) > 1:
        outcomes = _read_parallel(files, config, workers)
    else:
        outcomes = _read_sequential(files, config)

    for done, (index, result) in enumerate(outcomes, start=1):
        results[index] = result
        _count(batch, result)
        if progress_callback:
            progress_callback(done, len(files), result.filepath, result)

    batch.results = results
    batch.total_time_seconds = time.monotonic() - started
    return batch


def _read_sequential(files: List[Path],
                     config: Optional[ReaderConfig]) -> Iterator[Tuple[int, ReadResult]]:
    for index, filepath in enumerate(files):
        yield index, read_file(filepath, config)


def _read_parallel(files: List[Path], config: Optional[ReaderConfig],
                   workers: int) -> Iterator[Tuple[int, ReadResult]]:
    """Yield (index, result) pairs as the pool finishes them.

    The consumer stores each result at its index, so completion order does
    not leak into the batch. Stats and progress run on the calling thread.
    """
    with ThreadPoolExecutor(max_workers=workers) as pool:
        pending = {pool.submit(read_file, filepath, config): index
                   for index, filepath in enumerate(files)}
        for future in as_completed(pending):
            yield pending[future], future.result()


def _count(batch: BatchResult, result: ReadResult):
    if result.error:
        batch.files_errored += 1
    elif result.success:
        batch.files_parsed += 1
    else:
        batch.files_failed += 1
