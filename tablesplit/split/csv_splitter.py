"""Sequential split: stream the input once, starting a new file at every chunk boundary."""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from tqdm import tqdm

from tablesplit.shared.config import SplitConfig
from tablesplit.shared.csv_reader import decode_lines, iter_records, open_binary_source, split_headers
from tablesplit.shared.errors import WriterFailure
from tablesplit.split.writer import ChunkWriter, new_writer

LOG = logging.getLogger("tablesplit.split.csv_splitter")


def _finish(wtr: ChunkWriter) -> None:
    wtr.flush()
    wtr.close()
    LOG.info("Created %s with %d record(s)", wtr.path.name, wtr.records_written)


def sequential_split(config: SplitConfig) -> Tuple[List[Path], int]:
    """
    Split the input in a single pass.

    The current file is closed before the next one is opened. An empty input
    produces no files. On error, files already finished are left on disk and
    the file in progress may be truncated.

    Args:
        config: Validated split settings

    Returns:
        Tuple of (chunk files written in order, number of data records)
    """
    source_name = "<stdin>" if config.reads_stdin else str(config.input_path)
    LOG.info("Splitting %s sequentially (%d record(s) per chunk)...", source_name, config.size)

    src = open_binary_source(None if config.reads_stdin else config.input_path)
    files: List[Path] = []
    wtr: Optional[ChunkWriter] = None
    records_seen = 0

    pbar = tqdm(
        desc=f"Splitting {Path(source_name).name}",
        unit=" records",
        file=sys.stderr,
        mininterval=1.0,
        disable=not config.show_progress,
    )
    try:
        records = iter_records(decode_lines(src), config.delimiter, source_name)
        headers = split_headers(records, config.no_headers)

        for i, row in enumerate(records):
            if wtr is None:
                wtr = new_writer(config, headers, 0)
                files.append(wtr.path)
            elif i % config.size == 0:
                _finish(wtr)
                wtr = new_writer(config, headers, i)
                files.append(wtr.path)
            wtr.write_record(row)
            records_seen = i + 1
            pbar.update(1)

        if wtr is not None:
            _finish(wtr)
            wtr = None
    finally:
        pbar.close()
        if wtr is not None:
            try:
                wtr.close()
            except WriterFailure:
                LOG.debug("Ignoring close failure on %s after an earlier error", wtr.path)
        if src is not sys.stdin.buffer:
            src.close()

    if not files:
        LOG.info("Input %s has no data records; no chunk files written", source_name)

    LOG.info("Sequential split complete: %d record(s) into %d file(s)", records_seen, len(files))
    return files, records_seen
