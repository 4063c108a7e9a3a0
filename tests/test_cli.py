from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import pytest

from nss_lab import __version__
from nss_lab.cli import main


def test_version(capsys):
    assert main(["version"]) == 0
    assert capsys.readouterr().out.strip() == __version__


def test_evaluate_table(capsys):
    assert main(["evaluate", "--curve-type", "pre", "--tenors", "1"]) == 0
    out = capsys.readouterr().out
    assert "pre @ 2025-08-07" in out
    assert "14.4666" in out  # spot at 1y, percent


def test_evaluate_json_with_override(capsys):
    rc = main(
        ["evaluate", "--curve-type", "ipca", "--preset", "br", "--b1", "0.07", "--format", "json"]
    )
    assert rc == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["curve_type"] == "ipca"
    assert payload["params"]["b1"] == 0.07
    assert [p["tenor"] for p in payload["points"]] == [0.25, 0.5, 1, 2, 3, 4, 5, 10]


def test_evaluate_writes_csv(tmp_path: Path):
    out = tmp_path / "out" / "curve.csv"
    assert main(["evaluate", "--tenors", "0, 1, 10", "--out", str(out)]) == 0

    df = pd.read_csv(out)
    assert list(df.columns) == ["tenor", "spot", "forward"]
    assert df["tenor"].tolist() == [0.0, 1.0, 10.0]
    assert df["spot"].iloc[0] == pytest.approx(0.060553 + 0.082648, abs=1e-6)


def test_evaluate_zero_decay_rate_fails(capsys):
    assert main(["evaluate", "--l2", "0", "--tenors", "1"]) == 1


def test_evaluate_unknown_curve_type_fails():
    assert main(["evaluate", "--curve-type", "selic"]) == 1


def test_grid_commands(capsys):
    assert main(["grid", "--tenors", "1, 2, 2, 0.5"]) == 0
    assert capsys.readouterr().out.strip() == "0.5, 1, 2"

    assert main(["grid", "--max-years", "10", "--points-per-year", "252"]) == 0
    values = capsys.readouterr().out.strip().split(", ")
    assert len(values) == 2520
    assert values[-1] == "10"

    assert main(["grid", "--preset", "classic"]) == 0
    assert capsys.readouterr().out.startswith("0.08, 0.25")


@pytest.mark.parametrize(
    "argv", [["--max-years", "0"], ["--points-per-year", "0"], ["--max-years", "-1"]]
)
def test_grid_rejects_non_positive_sizes(argv, capsys):
    assert main(["grid", *argv]) == 1
    assert capsys.readouterr().out == ""


def test_snapshots_with_config(tmp_path: Path, capsys):
    cfg = tmp_path / "settings.yaml"
    cfg.write_text(
        """
snapshots:
  - curve_type: pre
    date: "2025-08-08"
    params: {b1: 0.06, b2: 0.08, b3: 0.1, b4: 0.2, l1: 1.9, l2: 0.17}
"""
    )
    assert main(["snapshots", "--config", str(cfg)]) == 0
    out = capsys.readouterr().out
    assert "pre : 2 snapshot(s), 2025-08-07 … 2025-08-08" in out
    assert "ipca : 1 snapshot(s)" in out
