from __future__ import annotations

import json
import logging
from pathlib import Path

import numpy as np
import yaml
from pydantic import ValidationError

from nss_lab.config.models import AppSettings
from nss_lab.data.feed import load_feed_store
from nss_lab.grids.tenors import TauPreset, dense_grid, get_preset, parse_tenors
from nss_lab.params.store import ParameterStore, default_store

LOGGER = logging.getLogger(__name__)


def load_settings(path: str | Path | None = None) -> AppSettings:
    """
    Load AppSettings from YAML or JSON; defaults when `path` is None.

    Automatically validates using Pydantic v2.
    """
    if path is None:
        return AppSettings()

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    LOGGER.info("Loading settings: %s", path)
    text = path.read_text()

    try:
        if path.suffix.lower() in {".yaml", ".yml"}:
            raw = yaml.safe_load(text)
        elif path.suffix.lower() == ".json":
            raw = json.loads(text)
        else:
            raise ValueError("Config path must be YAML or JSON.")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ValueError(f"Failed to parse config: {e}") from e

    try:
        return AppSettings.model_validate(raw or {})
    except ValidationError as e:
        raise ValueError(f"Invalid AppSettings: {e}") from e


def build_store(settings: AppSettings, use_feed: bool | None = None) -> ParameterStore:
    """
    Defaults, then the feed (if enabled), then config snapshots on top.

    Feed failures propagate as FeedError.
    """
    store = default_store()
    enabled = settings.feed.enabled if use_feed is None else use_feed

    if enabled:
        LOGGER.info("Loading parameter feed: %s", settings.feed.url)
        store = store.merged(
            load_feed_store(settings.feed.url, settings.feed.timeout_seconds)
        )

    if settings.snapshots:
        LOGGER.info("Applying %d snapshot(s) from config", len(settings.snapshots))
        store = store.merged(ParameterStore.from_snapshots(settings.snapshots))

    return store


def default_tenors(settings: AppSettings) -> np.ndarray:
    """Grid selected by the config: explicit text, else preset."""
    grid = settings.grid
    if grid.tenors:
        return parse_tenors(
            grid.tenors, default=dense_grid(grid.max_years, grid.points_per_year)
        )
    if grid.preset is TauPreset.SMOOTH:
        return dense_grid(grid.max_years, grid.points_per_year)
    return get_preset(grid.preset)
