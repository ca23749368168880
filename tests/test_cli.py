from pathlib import Path

import pytest

from nav_analytics.cli import main

CSV_TEXT = "date,nav\n01-01-2023,100.00\n01-02-2023,102.00\n01-03-2023,105.00\n"


@pytest.fixture
def nav_file(tmp_path: Path) -> Path:
    path = tmp_path / "alpha.csv"
    path.write_text(CSV_TEXT)
    return path


def test_sip_command(nav_file: Path, tmp_path: Path, capsys):
    out_csv = tmp_path / "sample.csv"
    code = main(
        [
            "--file",
            str(nav_file),
            "sip",
            "100",
            "--amount",
            "5000",
            "--from",
            "2023-01-01",
            "--to",
            "2023-03-01",
            "--csv",
            str(out_csv),
        ]
    )

    output = capsys.readouterr().out
    assert code == 0
    assert "SIP for alpha" in output
    assert "15000.00" in output
    assert "WARNING" not in output
    assert out_csv.read_text().startswith("date,status")


def test_returns_command(nav_file: Path, capsys):
    code = main(["--file", str(nav_file), "returns", "100", "--period", "1m"])

    assert code == 0
    assert "Simple return %" in capsys.readouterr().out


def test_lumpsum_before_history_prints_hint(nav_file: Path, capsys):
    code = main(["--file", str(nav_file), "lumpsum", "100", "--amount", "1000", "--date", "2022-06-01"])

    output = capsys.readouterr().out
    assert code == 1
    assert "Insufficient NAV data" in output
    assert "2023-01-01" in output


def test_invalid_request_exits_with_error(nav_file: Path, capsys):
    code = main(
        ["--file", str(nav_file), "sip", "100", "--amount", "-5", "--from", "2023-01-01", "--to", "2023-03-01"]
    )

    assert code == 1
    assert "Amount must be greater than 0" in capsys.readouterr().out


def test_one_day_sip_command_prints_result(tmp_path: Path, capsys):
    path = tmp_path / "short.csv"
    path.write_text("date,nav\n01-01-2023,100.00\n02-01-2023,200.00\n")

    code = main(
        ["--file", str(path), "sip", "100", "--amount", "100", "--frequency", "daily", "--from", "2023-01-01", "--to", "2023-01-02"]
    )

    output = capsys.readouterr().out
    assert code == 0
    assert "Annualized return %" in output
    assert "300.00" in output
