"""Utility functions for reading delimited record streams (files or stdin)."""
from __future__ import annotations

import csv
import sys
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, List, Optional

from tablesplit.shared.errors import SourceReadFailure

# Undecodable bytes survive a read/write round trip unchanged.
ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"

Record = List[str]


def open_binary_source(input_path: Optional[Path]) -> BinaryIO:
    """
    Open the input for binary reading.

    A missing path or "-" means standard input.

    Raises:
        SourceReadFailure: If the file cannot be opened
    """
    if input_path is None or str(input_path) == "-":
        return sys.stdin.buffer
    try:
        return open(input_path, "rb")
    except OSError as exc:
        raise SourceReadFailure(f"Can't open '{input_path}': {exc}") from exc


def decode_lines(binary: BinaryIO) -> Iterator[str]:
    """
    Decode physical lines from the handle's current position.

    Line endings are left in place so the csv module can see quoted newlines.
    """
    for line in binary:
        yield line.decode(ENCODING, ENCODING_ERRORS)


def iter_records(
    lines: Iterable[str],
    delimiter: str,
    source_name: str = "<input>",
) -> Iterator[Record]:
    """
    Yield records from decoded lines, one list of fields per row.

    Raises:
        SourceReadFailure: On a malformed record or a read error
    """
    reader = csv.reader(lines, delimiter=delimiter)
    try:
        for row in reader:
            yield row
    except csv.Error as exc:
        raise SourceReadFailure(
            f"Malformed record in {source_name} near line {reader.line_num}: {exc}"
        ) from exc
    except OSError as exc:
        raise SourceReadFailure(f"Error reading {source_name}: {exc}") from exc


def split_headers(records: Iterator[Record], no_headers: bool) -> Optional[Record]:
    """
    Consume the header record from the front of `records`.

    Returns None when headers are disabled or the source is empty.
    """
    if no_headers:
        return None
    return next(records, None)
