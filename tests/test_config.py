from pathlib import Path

import pytest

from tablesplit.shared.config import (
    SplitConfig,
    build_split_config,
    get_log_file_path,
    load_config,
    parse_delimiter,
)
from tablesplit.shared.errors import InvalidConfiguration


def test_defaults(tmp_path):
    config = build_split_config({}, output_dir=tmp_path)

    assert config == SplitConfig(output_dir=tmp_path, size=500, jobs=12, delimiter=",")
    assert config.reads_stdin


def test_overrides_win_over_yaml(tmp_path):
    config = build_split_config(
        {"split": {"size": 10, "jobs": 3, "no_headers": True}},
        output_dir=tmp_path,
        size=20,
        no_headers=None,
    )

    assert config.size == 20
    assert config.jobs == 3
    assert config.no_headers is True


def test_null_jobs_auto_detects(tmp_path, monkeypatch):
    monkeypatch.setattr("os.cpu_count", lambda: None)

    assert build_split_config({"split": {"jobs": None}}, output_dir=tmp_path).jobs == 1


@pytest.mark.parametrize("kwargs", [{"size": 0}, {"size": -1}, {"jobs": 0}, {"delimiter": "ab"}])
def test_invalid_settings(tmp_path, kwargs):
    with pytest.raises(InvalidConfiguration):
        build_split_config({}, output_dir=tmp_path, **kwargs)


def test_output_dir_required():
    with pytest.raises(InvalidConfiguration):
        build_split_config({})


def test_parse_delimiter():
    assert parse_delimiter(r"\t") == "\t"
    assert parse_delimiter(";") == ";"
    with pytest.raises(InvalidConfiguration):
        parse_delimiter("")


def test_load_config_substitutes_run_config_variables(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "run_config:\n"
        "  base_directory: /data\n"
        "split:\n"
        "  input_path: ${base_directory}/in.csv\n"
        "  size: 7\n"
    )

    config = load_config(path)

    assert config["split"] == {"input_path": "/data/in.csv", "size": 7}


def test_load_config_leaves_unknown_variables(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "run_config:\n"
        "  base_directory: /data\n"
        "split:\n"
        "  output_dir: ${base_directory}/${run_date}\n"
    )

    assert load_config(path)["split"]["output_dir"] == "/data/${run_date}"


def test_load_config_missing(tmp_path):
    with pytest.raises(InvalidConfiguration):
        load_config(tmp_path / "missing.yaml")


def test_load_config_rejects_non_mapping(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- a\n- b\n")

    with pytest.raises(InvalidConfiguration):
        load_config(path)


def test_log_file_path():
    assert get_log_file_path({}, "split") is None
    config = {"logging": {"file_logging": {"enabled": True, "log_directory": "logs"}}}
    assert get_log_file_path(config, "split") == Path("logs") / "02_split.log"
