from tablesplit.commands import index as index_command
from tablesplit.commands import split as split_command

from conftest import chunk_names, make_rows, read_csv, write_csv


def test_split_command_sequential(tmp_path):
    csv_path = write_csv(tmp_path / "data.csv", make_rows(1000))
    outdir = tmp_path / "out"

    assert split_command.main([str(outdir), str(csv_path)]) == 0
    assert chunk_names(outdir) == ["0.csv", "500.csv"]


def test_index_then_split_in_parallel(tmp_path):
    rows = make_rows(10)
    csv_path = write_csv(tmp_path / "data.csv", rows)
    outdir = tmp_path / "out"

    assert index_command.main([str(csv_path)]) == 0
    assert (tmp_path / "data.csv.idx").exists()
    assert split_command.main([str(outdir), str(csv_path), "--size", "4", "--jobs", "2"]) == 0

    assert chunk_names(outdir) == ["0.csv", "4.csv", "8.csv"]
    assert read_csv(outdir / "8.csv") == [["a", "b", "c"]] + rows[8:]


def test_split_command_zero_size(tmp_path):
    csv_path = write_csv(tmp_path / "data.csv", make_rows(3))
    outdir = tmp_path / "out"

    assert split_command.main([str(outdir), str(csv_path), "--size", "0"]) == 1
    assert not outdir.exists()


def test_split_command_no_headers_and_delimiter(tmp_path):
    rows = make_rows(3)
    csv_path = write_csv(tmp_path / "data.tsv", rows, header=None, delimiter="\t")
    outdir = tmp_path / "out"

    assert split_command.main([str(outdir), str(csv_path), "-n", "-d", r"\t", "-s", "2"]) == 0
    assert read_csv(outdir / "0.csv", delimiter="\t") == rows[:2]


def test_split_command_reads_config(tmp_path):
    csv_path = write_csv(tmp_path / "data.csv", make_rows(9))
    config_path = tmp_path / "config.yaml"
    config_path.write_text("split:\n  size: 3\n  jobs: 2\n")
    outdir = tmp_path / "out"

    assert split_command.main(["--config", str(config_path), str(outdir), str(csv_path)]) == 0
    assert chunk_names(outdir) == ["0.csv", "3.csv", "6.csv"]


def test_split_command_missing_config(tmp_path):
    assert split_command.main(["--config", str(tmp_path / "nope.yaml"), str(tmp_path / "out")]) == 1


def test_split_command_missing_input(tmp_path):
    assert split_command.main([str(tmp_path / "out"), str(tmp_path / "nope.csv")]) == 1


def test_index_command_missing_input(tmp_path):
    assert index_command.main([str(tmp_path / "nope.csv")]) == 1
