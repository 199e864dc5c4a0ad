"""Error kinds raised by the split engine."""
from __future__ import annotations


class SplitError(RuntimeError):
    """Base class for every failure the split engine reports."""


class InvalidConfiguration(SplitError):
    """Raised before any I/O when the split settings are unusable."""


class DirectoryCreationFailure(SplitError):
    """Raised when the output directory cannot be created."""


class SourceReadFailure(SplitError):
    """Raised on a malformed record or an I/O failure on the input."""


class IndexUnavailable(SplitError):
    """Raised when an index exists but cannot be trusted (stale or corrupt)."""


class WriterFailure(SplitError):
    """Raised when a chunk file cannot be created, written or flushed."""
