from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from nss_lab.data.feed import DEFAULT_FEED_URL
from nss_lab.grids.tenors import TauPreset
from nss_lab.params.store import ParameterSnapshot


# ============================================================
# Maturity grid
# ============================================================


class GridSettings(BaseModel):
    """
    Default maturity grid.

    `tenors`, when given, is free text parsed like the dashboard input and
    takes precedence over `preset`.
    """

    model_config = ConfigDict(extra="forbid")

    preset: TauPreset = TauPreset.SMOOTH
    max_years: float = Field(default=10.0, gt=0.0)
    points_per_year: int = Field(default=52, ge=1)
    tenors: str | None = None


# ============================================================
# Remote parameter feed
# ============================================================


class FeedSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    enabled: bool = False
    url: str = DEFAULT_FEED_URL
    timeout_seconds: float = Field(default=30.0, gt=0.0)


# ============================================================
# Top-level AppSettings
# ============================================================


class AppSettings(BaseModel):
    """
    Application configuration (YAML / JSON).

    `snapshots` are merged over the built-in defaults; a snapshot with the
    same (curve_type, date) as a default replaces it.
    """

    model_config = ConfigDict(extra="forbid")

    curve_type: str = "pre"
    grid: GridSettings = Field(default_factory=GridSettings)
    feed: FeedSettings = Field(default_factory=FeedSettings)
    snapshots: List[ParameterSnapshot] = Field(default_factory=list)
    log_level: str = "INFO"
