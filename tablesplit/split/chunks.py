"""Chunk planning: how a record range is divided into output files."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from tablesplit.shared.errors import InvalidConfiguration


@dataclass(frozen=True)
class Chunk:
    """Half-open range [start, start + size) of data record positions."""
    start: int
    size: int

    @property
    def end(self) -> int:
        return self.start + self.size


def num_of_chunks(count: int, size: int) -> int:
    """Number of chunks needed to cover `count` records, `size` at a time."""
    if size <= 0:
        raise InvalidConfiguration("--size must be greater than 0.")
    return -(-count // size)


def plan_chunks(count: int, size: int) -> List[Chunk]:
    """Contiguous chunks covering [0, count); only the last may be short."""
    return [
        Chunk(start=i * size, size=min(size, count - i * size))
        for i in range(num_of_chunks(count, size))
    ]
