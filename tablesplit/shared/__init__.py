"""Shared utility modules used across multiple commands."""
from tablesplit.shared.config import (
    SplitConfig,
    build_split_config,
    configure_logging,
    get_log_file_path,
    load_config,
)
from tablesplit.shared.errors import (
    DirectoryCreationFailure,
    IndexUnavailable,
    InvalidConfiguration,
    SourceReadFailure,
    SplitError,
    WriterFailure,
)
from tablesplit.shared.path_helper import ensure_output_directory

__all__ = [
    "SplitConfig",
    "build_split_config",
    "configure_logging",
    "get_log_file_path",
    "load_config",
    "DirectoryCreationFailure",
    "IndexUnavailable",
    "InvalidConfiguration",
    "SourceReadFailure",
    "SplitError",
    "WriterFailure",
    "ensure_output_directory",
]
