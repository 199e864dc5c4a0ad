"""Chunk file creation: one output file per chunk, named by its start record."""
from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Iterable, Optional

from tablesplit.shared.config import SplitConfig
from tablesplit.shared.csv_reader import ENCODING, ENCODING_ERRORS, Record
from tablesplit.shared.errors import WriterFailure
from tablesplit.shared.path_helper import chunk_path

LOG = logging.getLogger("tablesplit.split.writer")

LINE_TERMINATOR = "\n"


class ChunkWriter:
    """Writes the records of one chunk to its own file."""

    def __init__(self, path: Path, delimiter: str) -> None:
        self.path = path
        self.records_written = 0
        try:
            # "x": a chunk file is created once and never reopened
            self._handle = open(
                path,
                "x",
                encoding=ENCODING,
                errors=ENCODING_ERRORS,
                newline="",
            )
        except OSError as exc:
            raise WriterFailure(f"Failed to create {path}: {exc}") from exc
        self._writer = csv.writer(
            self._handle,
            delimiter=delimiter,
            lineterminator=LINE_TERMINATOR,
        )

    def _write(self, row: Iterable[str]) -> None:
        try:
            self._writer.writerow(row)
        except (OSError, csv.Error) as exc:
            raise WriterFailure(f"Failed to write to {self.path}: {exc}") from exc

    def write_header(self, headers: Record) -> None:
        self._write(headers)

    def write_record(self, row: Record) -> None:
        self._write(row)
        self.records_written += 1

    def flush(self) -> None:
        try:
            self._handle.flush()
        except OSError as exc:
            raise WriterFailure(f"Failed to flush {self.path}: {exc}") from exc

    def close(self) -> None:
        if self._handle.closed:
            return
        try:
            self._handle.close()
        except OSError as exc:
            raise WriterFailure(f"Failed to close {self.path}: {exc}") from exc

    def __enter__(self) -> "ChunkWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.flush()
            self.close()
            return
        try:
            self.close()
        except WriterFailure:
            LOG.debug("Ignoring close failure on %s after an earlier error", self.path)


def new_writer(config: SplitConfig, headers: Optional[Record], start: int) -> ChunkWriter:
    """
    Create the chunk file for the chunk beginning at data record `start`.

    Unless headers are disabled, the header record is written first.

    Raises:
        WriterFailure: If the file already exists or cannot be created
    """
    wtr = ChunkWriter(chunk_path(config.output_dir, start), config.delimiter)
    if not config.no_headers and headers is not None:
        try:
            wtr.write_header(headers)
        except WriterFailure:
            wtr.close()
            raise
    return wtr
