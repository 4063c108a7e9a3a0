from __future__ import annotations

import json
from pathlib import Path

import pytest

from nss_lab.config.loader import build_store, default_tenors, load_settings
from nss_lab.config.models import AppSettings
from nss_lab.data import feed as feed_module
from nss_lab.grids.tenors import CLASSIC_TENORS, DEFAULT_TENORS, TauPreset


def np_equal(a, b) -> bool:
    return list(a) == list(b)


def test_defaults_without_path():
    cfg = load_settings()
    assert isinstance(cfg, AppSettings)
    assert cfg.curve_type == "pre"
    assert cfg.grid.preset is TauPreset.SMOOTH
    assert cfg.feed.enabled is False
    assert cfg.feed.url == feed_module.DEFAULT_FEED_URL
    assert np_equal(default_tenors(cfg), DEFAULT_TENORS)


def test_load_settings_yaml(tmp_path: Path):
    cfg_path = tmp_path / "settings.yaml"
    cfg_path.write_text(
        """
curve_type: ipca
grid:
  preset: classic
feed:
  enabled: false
  timeout_seconds: 5
snapshots:
  - curve_type: pre
    date: "2025-08-08"
    params: {b1: 0.06, b2: 0.08, b3: 0.1, b4: 0.2, l1: 1.9, l2: 0.17}
"""
    )
    cfg = load_settings(cfg_path)
    assert cfg.curve_type == "ipca"
    assert cfg.grid.preset is TauPreset.CLASSIC
    assert cfg.feed.timeout_seconds == 5
    assert np_equal(default_tenors(cfg), CLASSIC_TENORS)

    store = build_store(cfg)
    assert store.latest_date("pre") == "2025-08-08"
    assert store.get("pre", "2025-08-07").b1 == 0.060553
    assert store.latest("ipca").date == "2025-08-07"


def test_load_settings_json_with_tenor_text(tmp_path: Path):
    cfg_path = tmp_path / "settings.json"
    data = {
        "grid": {"tenors": "5, 1, 1, x", "max_years": 2, "points_per_year": 4},
        "log_level": "DEBUG",
    }
    cfg_path.write_text(json.dumps(data))
    cfg = load_settings(cfg_path)
    assert cfg.log_level == "DEBUG"
    assert np_equal(default_tenors(cfg), [1.0, 5.0])


def test_dense_grid_from_settings():
    cfg = AppSettings(grid={"max_years": 2, "points_per_year": 4})
    assert np_equal(default_tenors(cfg), [0.25, 0.5, 0.75, 1.0, 1.25, 1.5, 1.75, 2.0])


def test_empty_yaml_gives_defaults(tmp_path: Path):
    cfg_path = tmp_path / "empty.yml"
    cfg_path.write_text("")
    assert load_settings(cfg_path) == AppSettings()


def test_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "nope.yaml")


def test_bad_suffix(tmp_path: Path):
    p = tmp_path / "settings.toml"
    p.write_text("curve_type = 'pre'")
    with pytest.raises(ValueError, match="YAML or JSON"):
        load_settings(p)


def test_unparseable_yaml(tmp_path: Path):
    p = tmp_path / "bad.yaml"
    p.write_text("grid: [unclosed")
    with pytest.raises(ValueError, match="Failed to parse"):
        load_settings(p)


def test_schema_violation(tmp_path: Path):
    p = tmp_path / "bad.json"
    p.write_text(json.dumps({"grid": {"points_per_year": 0}}))
    with pytest.raises(ValueError, match="Invalid AppSettings"):
        load_settings(p)

    p.write_text(json.dumps({"unknown_key": 1}))
    with pytest.raises(ValueError):
        load_settings(p)


def test_build_store_with_feed(monkeypatch):
    from nss_lab.params.store import ParameterStore

    seen = {}

    def fake_feed_store(url, timeout):
        seen["args"] = (url, timeout)
        return ParameterStore.from_rows(
            [{"type": "selic", "date": "2025-08-07", "b1": 0.15, "b2": 0.0, "b3": 0.0, "b4": 0.0, "l1": 1.0, "l2": 1.0}]
        )

    monkeypatch.setattr("nss_lab.config.loader.load_feed_store", fake_feed_store)

    cfg = AppSettings(feed={"enabled": True, "url": "https://example.com/f.feather"})
    store = build_store(cfg)
    assert seen["args"] == ("https://example.com/f.feather", 30.0)
    assert "selic" in store and "pre" in store

    assert "selic" not in build_store(cfg, use_feed=False)
