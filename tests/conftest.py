import csv
import os
import sys
from pathlib import Path

# Ensure project root is in sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest

from tablesplit.shared.config import SplitConfig


def make_rows(n, width=3):
    return [[f"r{i}c{j}" for j in range(width)] for i in range(n)]


def write_csv(path, rows, header=("a", "b", "c"), delimiter=","):
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f, delimiter=delimiter, lineterminator="\n")
        if header is not None:
            writer.writerow(header)
        writer.writerows(rows)
    return path


def read_csv(path, delimiter=","):
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.reader(f, delimiter=delimiter))


def chunk_names(outdir):
    return sorted((p.name for p in Path(outdir).iterdir()), key=lambda n: int(n.split(".")[0]))


@pytest.fixture
def split_config(tmp_path):
    def _make(input_path, **kwargs):
        kwargs.setdefault("output_dir", tmp_path / "out")
        return SplitConfig(input_path=input_path, **kwargs)

    return _make
