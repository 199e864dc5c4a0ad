"""Helpers for loading YAML configs, configuring logging and building split settings."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from tablesplit.shared.errors import InvalidConfiguration

LOG = logging.getLogger("tablesplit.shared.config")

DEFAULT_SIZE = 500
DEFAULT_JOBS = 12
DEFAULT_DELIMITER = ","

VARIABLE_PATTERN = re.compile(r"\$\{(\w+)\}")


def _expand_run_config(node: Any, run_config: Dict[str, Any]) -> Any:
    # Unknown ${names} are left as written.
    if isinstance(node, str):
        return VARIABLE_PATTERN.sub(
            lambda m: str(run_config[m.group(1)]) if m.group(1) in run_config else m.group(0),
            node,
        )
    if isinstance(node, dict):
        return {key: _expand_run_config(item, run_config) for key, item in node.items()}
    if isinstance(node, list):
        return [_expand_run_config(item, run_config) for item in node]
    return node


def load_config(path: Path) -> Dict[str, Any]:
    """
    Load the YAML config file from disk and substitute variables.

    Every scalar in the 'run_config' section is available throughout the
    config as ${variable_name} (e.g. ${base_directory}, ${run_date}).

    Raises:
        InvalidConfiguration: If the file is missing or is not a YAML mapping
    """
    if not path.exists():
        raise InvalidConfiguration(f"Config file not found: {path}")

    try:
        config = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise InvalidConfiguration(f"Config file {path} is not valid YAML: {exc}") from exc

    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise InvalidConfiguration(f"Config file {path} must contain a mapping at the top level")

    run_config = config.get("run_config") or {}
    if not isinstance(run_config, dict):
        raise InvalidConfiguration(f"'run_config' in {path} must be a mapping")

    scalars = {name: value for name, value in run_config.items() if not isinstance(value, (dict, list))}
    return _expand_run_config(config, scalars) if scalars else config


def get_log_file_path(config: Dict[str, Any], command_name: str) -> Optional[Path]:
    """
    Get the log file path for a command based on configuration.

    Args:
        config: Configuration dictionary
        command_name: Name of the command (e.g., "split", "index")

    Returns:
        Path to log file if file logging is enabled, None otherwise
    """
    logger_cfg = config.get("logging", config.get("logger", {})) or {}
    file_logging_cfg = logger_cfg.get("file_logging", {}) or {}

    if not file_logging_cfg.get("enabled", False):
        return None

    log_directory = Path(file_logging_cfg.get("log_directory", "logs"))

    log_files = file_logging_cfg.get("log_files", {}) or {}
    log_filename = log_files.get(command_name)

    if not log_filename:
        default_names = {
            "index": "01_index.log",
            "split": "02_split.log",
        }
        log_filename = default_names.get(command_name, f"{command_name}.log")

    return log_directory / log_filename


def configure_logging(config: Dict[str, Any], log_file: Optional[Path] = None) -> None:
    """
    Configure logging using the logging block from the YAML config.

    Args:
        config: Configuration dictionary
        log_file: Optional path to log file. If provided, logs will be written to file.
                 If None, logs will be written to console (default).
    """
    logger_cfg = config.get("logging", config.get("logger", {})) or {}
    level_name = str(logger_cfg.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    format_str = logger_cfg.get("format", "%(asctime)s %(levelname)s %(name)s - %(message)s")
    datefmt = logger_cfg.get("datefmt")

    # Clear any existing handlers
    logging.root.handlers = []

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler()

    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(format_str, datefmt=datefmt))
    logging.root.addHandler(handler)
    logging.root.setLevel(level)


def parse_delimiter(value: str) -> str:
    """Parse a delimiter argument; the escape "\\t" stands for a tab."""
    if value == r"\t":
        return "\t"
    if len(value) != 1:
        raise InvalidConfiguration(
            f"Could not convert '{value}' to a single character delimiter."
        )
    return value


@dataclass(frozen=True)
class SplitConfig:
    """Read-only settings for one split run, shared by every worker task."""
    output_dir: Path
    input_path: Optional[Path] = None
    size: int = DEFAULT_SIZE
    jobs: int = DEFAULT_JOBS
    no_headers: bool = False
    delimiter: str = DEFAULT_DELIMITER
    index_path: Optional[Path] = None
    show_progress: bool = False

    @property
    def reads_stdin(self) -> bool:
        return self.input_path is None or str(self.input_path) == "-"

    def validate(self) -> None:
        """Reject unusable settings before any I/O happens."""
        if self.size <= 0:
            raise InvalidConfiguration("--size must be greater than 0.")
        if self.jobs <= 0:
            raise InvalidConfiguration("--jobs must be greater than 0.")
        if len(self.delimiter) != 1:
            raise InvalidConfiguration(
                f"Could not convert '{self.delimiter}' to a single character delimiter."
            )


def build_split_config(config: Dict[str, Any], **overrides: Any) -> SplitConfig:
    """
    Merge the 'split' section of a YAML config with command-line overrides.

    Overrides that are None fall back to the config value, then to the
    built-in default. 'jobs: null' in the config auto-detects the CPU count.

    Args:
        config: Configuration dictionary (may be empty)
        **overrides: SplitConfig field values taken from the command line

    Returns:
        Validated SplitConfig
    """
    split_cfg = config.get("split", {}) or {}

    def pick(name: str, default: Any) -> Any:
        value = overrides.get(name)
        if value is not None:
            return value
        return split_cfg.get(name, default)

    output_dir = pick("output_dir", None)
    if output_dir is None:
        raise InvalidConfiguration("An output directory is required.")

    input_path = pick("input_path", None)
    index_path = pick("index_path", None)

    jobs = pick("jobs", DEFAULT_JOBS)
    if jobs is None:
        jobs = max(1, os.cpu_count() or 1)
        LOG.info("Auto-detected CPU count: %d jobs", jobs)

    try:
        size = int(pick("size", DEFAULT_SIZE))
        jobs = int(jobs)
    except (TypeError, ValueError) as exc:
        raise InvalidConfiguration(f"--size and --jobs must be integers: {exc}") from exc

    split_config = SplitConfig(
        output_dir=Path(output_dir),
        input_path=Path(input_path) if input_path is not None else None,
        size=size,
        jobs=jobs,
        no_headers=bool(pick("no_headers", False)),
        delimiter=parse_delimiter(str(pick("delimiter", DEFAULT_DELIMITER))),
        index_path=Path(index_path) if index_path is not None else None,
        show_progress=bool(pick("show_progress", False)),
    )
    split_config.validate()
    return split_config
