#!/usr/bin/env python3
"""
Split the given CSV data into chunks.

The files are written to the directory given with the name '{start}.csv',
where {start} is the index of the first record of the chunk (starting at 0).

When the input has a record index (see tablesplit-index), chunks are written
in parallel by --jobs worker threads, each with its own file handle.
Otherwise the input is streamed once.

Usage:
    tablesplit-split [options] <outdir> [<input>]
    tablesplit-split --config config.yaml <outdir> [<input>]
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from tablesplit.shared.config import (
    DEFAULT_JOBS,
    DEFAULT_SIZE,
    build_split_config,
    configure_logging,
    get_log_file_path,
    load_config,
)
from tablesplit.shared.errors import SplitError
from tablesplit.split.orchestrator import split_csv

LOG = logging.getLogger("tablesplit.commands.split")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tablesplit-split",
        description="Split the given CSV data into chunks named '{start}.csv'.",
    )
    parser.add_argument("outdir", type=Path, help="Directory to write chunk files to")
    parser.add_argument("input", nargs="?", type=Path, default=None, help="Input CSV (default: stdin)")
    parser.add_argument(
        "-s", "--size", type=int, default=None,
        help=f"The number of records to write into each chunk (default: {DEFAULT_SIZE})",
    )
    parser.add_argument(
        "-j", "--jobs", type=int, default=None,
        help=(
            "The number of splitting jobs to run in parallel. This only works when "
            "the input has an index already created; a file handle is opened for "
            f"each job (default: {DEFAULT_JOBS})"
        ),
    )
    parser.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Accepted for compatibility with other commands; split writes to <outdir>",
    )
    parser.add_argument(
        "-n", "--no-headers", action="store_true", default=None,
        help="When set, the first row will NOT be interpreted as column names",
    )
    parser.add_argument(
        "-d", "--delimiter", default=None,
        help=r"The field delimiter for reading CSV data. Must be a single character (\t for tab)",
    )
    parser.add_argument("-i", "--index", type=Path, default=None, help="Index path (default: <input>.idx)")
    parser.add_argument("--progress", action="store_true", default=None, help="Show progress bars on stderr")
    parser.add_argument("--config", type=Path, default=None, help="Optional YAML config file")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entrypoint for the split command."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config) if args.config else {}
    except SplitError as exc:
        configure_logging({})
        LOG.error("%s", exc)
        return 1

    configure_logging(config, log_file=get_log_file_path(config, "split"))

    if args.output is not None:
        LOG.debug("Ignoring --output %s; chunks are written to %s", args.output, args.outdir)

    try:
        split_config = build_split_config(
            config,
            output_dir=args.outdir,
            input_path=args.input,
            size=args.size,
            jobs=args.jobs,
            no_headers=args.no_headers,
            delimiter=args.delimiter,
            index_path=args.index,
            show_progress=args.progress,
        )
    except SplitError as exc:
        LOG.error("%s", exc)
        return 1

    LOG.info(
        "Split configuration: size=%d, jobs=%d, no_headers=%s, delimiter=%r",
        split_config.size,
        split_config.jobs,
        split_config.no_headers,
        split_config.delimiter,
    )

    result = split_csv(split_config)
    if not result.ok:
        LOG.error("Split failed (%s mode): %s", result.mode or "no", result.error)
        return 1

    LOG.info(
        "Split complete (%s mode): %d record(s) into %d file(s) in %s",
        result.mode,
        result.records,
        len(result.files),
        split_config.output_dir,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
