"""Random-access record index for large delimited files.

The index file (``<input>.idx`` by default) is a flat sequence of 8-byte
big-endian unsigned integers, one per physical record of the input in file
order, each holding the byte offset where that record starts. The header row,
when present, is physical record 0.
"""
from __future__ import annotations

import csv
import logging
import struct
import sys
import time
from pathlib import Path
from typing import BinaryIO, Callable, Iterator, Optional

from tqdm import tqdm

from tablesplit.shared.csv_reader import (
    ENCODING,
    ENCODING_ERRORS,
    Record,
    decode_lines,
    iter_records,
)
from tablesplit.shared.errors import IndexUnavailable, SourceReadFailure

LOG = logging.getLogger("tablesplit.index.record_index")

OFFSET = struct.Struct(">Q")
INDEX_SUFFIX = ".idx"


def index_path_for(csv_path: Path) -> Path:
    """Default index location: the input path with '.idx' appended."""
    return csv_path.with_name(csv_path.name + INDEX_SUFFIX)


class _OffsetLines:
    """Decoded line iterator that remembers the byte offset of the next line."""

    def __init__(self, binary: BinaryIO, on_line: Callable[[int], None]) -> None:
        self._lines = iter(binary)
        self._on_line = on_line
        self.offset = 0

    def __iter__(self) -> "_OffsetLines":
        return self

    def __next__(self) -> str:
        line = next(self._lines)
        self.offset += len(line)
        self._on_line(len(line))
        return line.decode(ENCODING, ENCODING_ERRORS)


def build_and_export_index(
    csv_path: Path,
    index_path: Optional[Path] = None,
    delimiter: str = ",",
    show_progress: bool = False,
) -> int:
    """
    Build a full record index over a delimited file and export it to disk.

    Records are found with the same csv tokenizer that later reads them back,
    so quoted newlines and stray quotes inside unquoted fields split exactly
    as they do when the file is streamed. csv.reader pulls one line at a time,
    so the offset of the next unread line is where the next record begins.

    Args:
        csv_path: Path to the delimited input file
        index_path: Where to write the index (default: <csv_path>.idx)
        delimiter: Field delimiter of the input
        show_progress: Show a tqdm progress bar on stderr

    Returns:
        Number of physical records indexed (header included)

    Raises:
        SourceReadFailure: On a malformed record or an I/O failure
    """
    if index_path is None:
        index_path = index_path_for(csv_path)

    try:
        total_bytes = csv_path.stat().st_size
    except OSError as exc:
        raise SourceReadFailure(f"Can't open '{csv_path}': {exc}") from exc
    start_time = time.time()

    LOG.info("Building record index for %s...", csv_path.name)

    records = 0

    pbar = tqdm(
        desc=f"Indexing {csv_path.name}",
        total=total_bytes,
        unit="B",
        unit_scale=True,
        file=sys.stderr,
        mininterval=1.0,
        disable=not show_progress,
    )
    try:
        with open(csv_path, "rb") as src, open(index_path, "wb") as out:
            lines = _OffsetLines(src, pbar.update)
            reader = csv.reader(lines, delimiter=delimiter)
            while True:
                start = lines.offset
                try:
                    next(reader)
                except StopIteration:
                    break
                out.write(OFFSET.pack(start))
                records += 1
    except csv.Error as exc:
        raise SourceReadFailure(
            f"Malformed record in {csv_path.name} near line {reader.line_num}: {exc}"
        ) from exc
    except OSError as exc:
        raise SourceReadFailure(f"Failed to index {csv_path}: {exc}") from exc
    finally:
        pbar.close()

    LOG.info(
        "Index saved to %s (%d record(s), %.1fs elapsed)",
        index_path,
        records,
        time.time() - start_time,
    )
    return records


def find_index(csv_path: Optional[Path], index_path: Optional[Path] = None) -> Optional[Path]:
    """
    Locate a usable index for the input.

    Returns:
        Path to the index, or None when the input has no index (or is stdin)

    Raises:
        IndexUnavailable: If an index exists but is older than the data or corrupt
    """
    if csv_path is None or str(csv_path) == "-":
        return None

    if index_path is None:
        index_path = index_path_for(csv_path)

    if not index_path.exists():
        LOG.debug("No index found at %s", index_path)
        return None

    try:
        data_mtime = csv_path.stat().st_mtime
    except OSError as exc:
        raise SourceReadFailure(f"Can't open '{csv_path}': {exc}") from exc

    index_stat = index_path.stat()
    if index_stat.st_mtime < data_mtime:
        raise IndexUnavailable(
            f"The index {index_path} is older than the data {csv_path}; re-run the index command."
        )
    if index_stat.st_size % OFFSET.size != 0:
        raise IndexUnavailable(
            f"The index {index_path} is corrupt (size {index_stat.st_size} is not a multiple of {OFFSET.size})."
        )

    return index_path


class RecordIndex:
    """
    Positioned reader over an indexed delimited file.

    Each instance owns its own handles on the data and the index, so several
    instances over the same file can be read concurrently without locking.
    """

    def __init__(
        self,
        data: BinaryIO,
        index: BinaryIO,
        delimiter: str = ",",
        no_headers: bool = False,
        name: str = "<input>",
    ) -> None:
        self._data = data
        self._index = index
        self._delimiter = delimiter
        self._no_headers = no_headers
        self._name = name
        self._headers: Optional[Record] = None

        index.seek(0, 2)
        self._physical = index.tell() // OFFSET.size
        index.seek(0)

    @classmethod
    def open(
        cls,
        csv_path: Path,
        index_path: Optional[Path] = None,
        delimiter: str = ",",
        no_headers: bool = False,
    ) -> "RecordIndex":
        """Open independent handles on the data file and its index."""
        if index_path is None:
            index_path = index_path_for(csv_path)
        try:
            data = open(csv_path, "rb")
        except OSError as exc:
            raise SourceReadFailure(f"Can't open '{csv_path}': {exc}") from exc
        try:
            index = open(index_path, "rb")
        except OSError as exc:
            data.close()
            raise IndexUnavailable(f"Can't open index '{index_path}': {exc}") from exc
        return cls(data, index, delimiter=delimiter, no_headers=no_headers, name=csv_path.name)

    @property
    def _header_rows(self) -> int:
        if self._no_headers or self._physical == 0:
            return 0
        return 1

    def count(self) -> int:
        """Number of data records (the header row is not counted)."""
        return self._physical - self._header_rows

    def _offset(self, physical: int) -> int:
        if physical >= self._physical:
            self._data.seek(0, 2)
            return self._data.tell()
        self._index.seek(physical * OFFSET.size)
        raw = self._index.read(OFFSET.size)
        if len(raw) != OFFSET.size:
            raise SourceReadFailure(f"Truncated index entry {physical} for {self._name}")
        return OFFSET.unpack(raw)[0]

    def byte_headers(self) -> Optional[Record]:
        """Header record, read once from the start of the data and cached."""
        if self._header_rows == 0:
            return None
        if self._headers is None:
            self._data.seek(0)
            self._headers = next(self.records(), None)
        return self._headers

    def seek(self, position: int) -> None:
        """Move the cursor to data record `position` (0-based)."""
        if position < 0 or position > self.count():
            raise SourceReadFailure(
                f"Record {position} is out of range for {self._name} ({self.count()} records)"
            )
        try:
            self._data.seek(self._offset(position + self._header_rows))
        except OSError as exc:
            raise SourceReadFailure(f"Failed to seek {self._name} to record {position}: {exc}") from exc

    def records(self) -> Iterator[Record]:
        """Iterate records forward from the current cursor."""
        return iter_records(decode_lines(self._data), self._delimiter, self._name)

    def close(self) -> None:
        self._data.close()
        self._index.close()

    def __enter__(self) -> "RecordIndex":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
