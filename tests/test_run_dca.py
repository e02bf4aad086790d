import json
import logging

import pytest

import run_dca
from dca_system.data.binance_file import BinanceFileStreamer
from dca_system.data.frame_streamer import DataFrameStreamer
from dca_system.utils.config import Config


@pytest.fixture(autouse=True)
def reset_root_logger(monkeypatch):
    for key in ("DCA_LOG_LEVEL", "DCA_LOG_DIR", "DCA_SYMBOL", "DCA_SOURCE", "DCA_DATA_DIR"):
        monkeypatch.delenv(key, raising=False)
    yield
    logger = logging.getLogger("dca_system")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


@pytest.fixture
def config_file(tmp_path):
    def _write(**data):
        body = {
            "strategy": {"name": "dca", "params": {"min_transaction_span": "2 days"}},
            "data": {"source": "sample", "start_date": "2024-01-01", "end_date": "2024-03-31"},
            "log_dir": str(tmp_path / "logs"),
        }
        for key, value in data.items():
            body.setdefault(key, {})
            if isinstance(value, dict):
                body[key].update(value)
            else:
                body[key] = value
        path = tmp_path / "config.json"
        path.write_text(json.dumps(body), encoding="utf-8")
        return str(path)
    return _write


@pytest.mark.parametrize("raw, expected", [
    ("target_value=2000", ("target_value", 2000)),
    ("single_buy_limit_perc=0.25", ("single_buy_limit_perc", 0.25)),
    ('min_transaction_span="2 days"', ("min_transaction_span", "2 days")),
    ("flag=yes", ("flag", True)),
    ("flag=False", ("flag", False)),
    (" symbol = SOL ", ("symbol", "SOL")),
])
def test_parse_param(raw, expected):
    assert run_dca.parse_param(raw) == expected


def test_list(capsys):
    assert run_dca.main(["--list"]) == 0
    assert "- dca" in capsys.readouterr().out


def test_sample_run_prints_rows_and_summary(config_file, capsys):
    assert run_dca.main(["--config", config_file()]) == 0
    out = capsys.readouterr().out
    lines = out.splitlines()

    assert lines[0].startswith("date, price, transaction_amount")
    assert len(lines[1].split(", ")) == len(lines[0].split(", "))
    assert "DCA 전략" in out
    assert "DCA 성과 리포트" in out


def test_no_csv_and_param_override(config_file, capsys):
    code = run_dca.main(["--config", config_file(), "--no-csv", "-p", "target_value=500"])
    assert code == 0
    out = capsys.readouterr().out
    assert "date, price" not in out
    assert "$500.00" in out


def test_binance_file_run(config_file, tmp_path, capsys):
    row = [1609459200000, "10", "10", "10", "10", "1", 1609545599999, "1", 1, "1", "1", "0"]
    (tmp_path / "SOLUSDT.json").write_text(json.dumps([row]), encoding="utf-8")

    path = config_file(data={"source": "binance_file", "data_dir": str(tmp_path)})
    assert run_dca.main(["--config", path]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[1].split(", ")[1] == "10.000000"


def test_missing_binance_file_fails(config_file, tmp_path):
    path = config_file(data={"source": "binance_file", "data_dir": str(tmp_path / "none")})
    assert run_dca.main(["--config", path]) == 1


def test_stop_on_insufficient_budget(config_file):
    path = config_file(
        strategy={"params": {"min_transaction_span": 0, "total_buy_limit_perc": 0.10}},
        run={"stop_on_insufficient_budget": True},
    )
    assert run_dca.main(["--config", path, "--no-csv"]) == 1


def test_build_streamer(tmp_path):
    config = Config()
    assert isinstance(run_dca.build_streamer(config), DataFrameStreamer)

    config.data.source = "binance_file"
    config.data.data_dir = str(tmp_path)
    streamer = run_dca.build_streamer(config)
    assert isinstance(streamer, BinanceFileStreamer)
    assert streamer.path == tmp_path / f"{config.data.symbol}.json"

    config.data.source = "ftp"
    with pytest.raises(ValueError):
        run_dca.build_streamer(config)
