"""Split large delimited files using a record index for random access."""
from __future__ import annotations

import logging
import sys
from concurrent.futures import ThreadPoolExecutor, as_completed
from itertools import islice
from pathlib import Path
from typing import Dict, List, Tuple

from tqdm import tqdm

from tablesplit.index.record_index import RecordIndex
from tablesplit.shared.config import SplitConfig
from tablesplit.shared.errors import SourceReadFailure, SplitError
from tablesplit.split.chunks import Chunk, plan_chunks
from tablesplit.split.writer import new_writer

LOG = logging.getLogger("tablesplit.split.indexed_csv_splitter")


def process_single_chunk(config: SplitConfig, index_path: Path, chunk: Chunk) -> Path:
    """
    Write one chunk file from its own positioned reader.

    Each call opens its own RecordIndex (each thread needs its own cursor),
    so no state is shared with other chunk tasks.

    Args:
        config: Read-only split settings
        index_path: Path to the record index of config.input_path
        chunk: Record range to write

    Returns:
        Path of the chunk file written

    Raises:
        SourceReadFailure: If the data holds fewer records than the index promised
    """
    with RecordIndex.open(
        config.input_path,
        index_path,
        delimiter=config.delimiter,
        no_headers=config.no_headers,
    ) as idx:
        headers = idx.byte_headers()
        with new_writer(config, headers, chunk.start) as wtr:
            idx.seek(chunk.start)
            for row in islice(idx.records(), chunk.size):
                wtr.write_record(row)

    if wtr.records_written != chunk.size:
        raise SourceReadFailure(
            f"Chunk {wtr.path.name} holds {wtr.records_written} record(s) but the index "
            f"promised {chunk.size}; the index does not match {config.input_path.name}"
        )
    LOG.info("Created %s with %d record(s)", wtr.path.name, wtr.records_written)
    return wtr.path


def parallel_split(config: SplitConfig, index_path: Path) -> Tuple[List[Path], int]:
    """
    Split an indexed input with a pool of `config.jobs` worker threads.

    One task is submitted per chunk. Every task is joined before returning.
    When tasks fail, pending tasks are cancelled, each failure is logged and
    the failure with the lowest start index is raised once all tasks have
    settled.

    Args:
        config: Validated split settings (input_path must be a file)
        index_path: Path to the record index of config.input_path

    Returns:
        Tuple of (chunk files written, ordered by start index; number of data records)

    Raises:
        SplitError: If any chunk task failed
    """
    with RecordIndex.open(
        config.input_path,
        index_path,
        delimiter=config.delimiter,
        no_headers=config.no_headers,
    ) as idx:
        count = idx.count()

    chunks = plan_chunks(count, config.size)
    if not chunks:
        LOG.info("Input %s has no data records; no chunk files written", config.input_path)
        return [], 0

    max_workers = min(config.jobs, len(chunks))
    LOG.info(
        "Splitting %s (%d record(s)) into %d chunk(s) with %d worker(s)...",
        config.input_path,
        count,
        len(chunks),
        max_workers,
    )

    written: Dict[int, Path] = {}
    failures: Dict[int, BaseException] = {}

    pbar = tqdm(
        desc=f"Splitting {config.input_path.name}",
        total=len(chunks),
        unit=" chunks",
        file=sys.stderr,
        mininterval=1.0,
        disable=not config.show_progress,
    )
    try:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_chunk = {
                executor.submit(process_single_chunk, config, index_path, chunk): chunk
                for chunk in chunks
            }

            for future in as_completed(future_to_chunk):
                chunk = future_to_chunk[future]
                if future.cancelled():
                    continue
                try:
                    written[chunk.start] = future.result()
                    pbar.update(1)
                except Exception as exc:  # noqa: BLE001
                    LOG.error("Chunk starting at record %d failed: %s", chunk.start, exc, exc_info=True)
                    if not failures:
                        cancelled = sum(1 for f in future_to_chunk if f.cancel())
                        if cancelled:
                            LOG.warning("Cancelled %d pending chunk task(s) after failure", cancelled)
                    failures[chunk.start] = exc
    finally:
        pbar.close()

    if failures:
        first_start = min(failures)
        first = failures[first_start]
        error_type = type(first) if isinstance(first, SplitError) else SplitError
        raise error_type(
            f"{len(failures)} of {len(chunks)} chunk task(s) failed; "
            f"first failure at record {first_start}: {first}"
        ) from first

    LOG.info("Parallel split complete: %d record(s) into %d file(s)", count, len(written))
    return [written[start] for start in sorted(written)], count
