"""Entry point of the split engine: validate, pick a mode, report a result."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from tablesplit.index.record_index import find_index
from tablesplit.shared.config import SplitConfig
from tablesplit.shared.errors import IndexUnavailable, SplitError
from tablesplit.shared.path_helper import ensure_output_directory
from tablesplit.split.csv_splitter import sequential_split
from tablesplit.split.indexed_csv_splitter import parallel_split

LOG = logging.getLogger("tablesplit.split.orchestrator")

MODE_SEQUENTIAL = "sequential"
MODE_PARALLEL = "parallel"


@dataclass
class SplitResult:
    ok: bool
    mode: Optional[str] = None
    files: List[Path] = field(default_factory=list)
    records: int = 0
    error: Optional[SplitError] = None


def _select_index(config: SplitConfig) -> Optional[Path]:
    """Index path for parallel mode, or None to stream sequentially."""
    if config.reads_stdin:
        return None
    try:
        return find_index(config.input_path, config.index_path)
    except IndexUnavailable as exc:
        LOG.warning("%s Falling back to sequential split.", exc)
        return None


def split_csv(config: SplitConfig) -> SplitResult:
    """
    Split the configured input into chunk files.

    Runs the parallel splitter when the input has a usable index and the
    sequential splitter otherwise. Failures are returned in the result
    rather than raised; chunk files already written stay on disk.
    """
    try:
        config.validate()
    except SplitError as exc:
        return SplitResult(ok=False, error=exc)

    mode = None
    try:
        ensure_output_directory(config.output_dir)

        index_path = _select_index(config)
        if index_path is not None:
            mode = MODE_PARALLEL
            LOG.info("Using index %s; splitting with up to %d job(s)", index_path, config.jobs)
            files, records = parallel_split(config, index_path)
        else:
            mode = MODE_SEQUENTIAL
            LOG.info("No usable index; splitting sequentially")
            files, records = sequential_split(config)
    except SplitError as exc:
        LOG.error("Split failed: %s", exc)
        return SplitResult(ok=False, mode=mode, error=exc)

    return SplitResult(ok=True, mode=mode, files=files, records=records)
