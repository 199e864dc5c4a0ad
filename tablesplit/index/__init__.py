"""Record index construction and positioned reading."""
from tablesplit.index.record_index import (
    RecordIndex,
    build_and_export_index,
    find_index,
    index_path_for,
)

__all__ = [
    "RecordIndex",
    "build_and_export_index",
    "find_index",
    "index_path_for",
]
