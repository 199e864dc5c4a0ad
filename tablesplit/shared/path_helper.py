"""Helper functions for creating output directories and naming chunk files."""
from __future__ import annotations

import logging
from pathlib import Path

from tablesplit.shared.errors import DirectoryCreationFailure

LOG = logging.getLogger("tablesplit.shared.path_helper")


def ensure_output_directory(output_dir: Path) -> Path:
    """
    Create the output directory (including parents) if it doesn't exist.

    Args:
        output_dir: Directory that will receive the chunk files

    Returns:
        The same directory path

    Raises:
        DirectoryCreationFailure: If the path exists as a file or cannot be created
    """
    if output_dir.exists() and not output_dir.is_dir():
        raise DirectoryCreationFailure(f"Output path exists and is not a directory: {output_dir}")

    if output_dir.is_dir():
        LOG.debug("Directory already exists: %s", output_dir)
        return output_dir

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryCreationFailure(f"Failed to create directory {output_dir}: {exc}") from exc

    LOG.debug("Created directory: %s", output_dir)
    return output_dir


def chunk_path(output_dir: Path, start: int) -> Path:
    """Name of the chunk file whose first data record is record `start`."""
    return output_dir / f"{start}.csv"
