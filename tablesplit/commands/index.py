#!/usr/bin/env python3
"""
Create an index for a CSV file.

The index lets tablesplit-split seek straight to any record, which is what
enables splitting in parallel. The index is written to '<input>.idx' unless
--output is given, and must be recreated whenever the data changes.

Usage:
    tablesplit-index [options] <input>
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from tablesplit.index.record_index import build_and_export_index
from tablesplit.shared.config import configure_logging, get_log_file_path, load_config, parse_delimiter
from tablesplit.shared.errors import SplitError

LOG = logging.getLogger("tablesplit.commands.index")


def main(argv: Optional[List[str]] = None) -> int:
    """Entrypoint for the index command."""
    parser = argparse.ArgumentParser(prog="tablesplit-index", description="Create an index for a CSV file.")
    parser.add_argument("input", type=Path, help="CSV file to index (stdin cannot be indexed)")
    parser.add_argument("-o", "--output", type=Path, default=None, help="Index path (default: <input>.idx)")
    parser.add_argument(
        "-d", "--delimiter", default=",",
        help=r"The field delimiter for reading CSV data. Must be a single character (\t for tab)",
    )
    parser.add_argument("--progress", action="store_true", help="Show a progress bar on stderr")
    parser.add_argument("--config", type=Path, default=None, help="Optional YAML config file")
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config) if args.config else {}
    except SplitError as exc:
        configure_logging({})
        LOG.error("%s", exc)
        return 1

    configure_logging(config, log_file=get_log_file_path(config, "index"))

    if not args.input.is_file():
        LOG.error("Input file not found: %s", args.input)
        return 1

    try:
        build_and_export_index(
            args.input,
            args.output,
            delimiter=parse_delimiter(args.delimiter),
            show_progress=args.progress,
        )
    except SplitError as exc:
        LOG.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
