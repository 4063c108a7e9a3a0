# src/nss_lab/grids/tenors.py
"""
Maturity grids (tenors in years) for the curve evaluator.

Three presets plus free-text input:
    - br:      short discrete set up to 10y
    - classic: wider discrete set up to 30y
    - smooth:  dense evenly-spaced grid (see `dense_grid`)
"""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import Iterable, Optional, Sequence

import numpy as np

BR_TENORS = (0.25, 0.5, 1.0, 2.0, 3.0, 4.0, 5.0, 10.0)
CLASSIC_TENORS = (0.08, 0.25, 0.5, 1.0, 2.0, 3.0, 5.0, 7.0, 10.0, 15.0, 20.0, 30.0)

# free text may separate values by commas, semicolons or whitespace
_SEPARATORS = re.compile(r"[,;\s]+")


class TauPreset(str, Enum):
    SMOOTH = "smooth"
    CLASSIC = "classic"
    BR = "br"


PRESET_LABELS = {
    TauPreset.SMOOTH: "Smooth (50 pts/year, 10y)",
    TauPreset.CLASSIC: "Classic (0.08…30y)",
    TauPreset.BR: "Brazil-ish (0.25…10y)",
}


def dense_grid(max_years: float = 10, points_per_year: int = 52) -> np.ndarray:
    """
    Evenly spaced grid k / points_per_year, k = 1..points_per_year * max_years.

    Starts one step above zero; values are rounded to 6 decimals so that the
    grid prints cleanly in text inputs.
    """
    if max_years <= 0:
        raise ValueError("max_years must be positive")
    if points_per_year <= 0:
        raise ValueError("points_per_year must be positive")

    n = int(round(points_per_year * max_years))
    k = np.arange(1, n + 1, dtype=float)
    return np.round(k / float(points_per_year), 6)


DEFAULT_TENORS = dense_grid(10, 52)


def get_preset(key: TauPreset | str) -> np.ndarray:
    preset = TauPreset(key)
    if preset is TauPreset.CLASSIC:
        return np.asarray(CLASSIC_TENORS, dtype=float)
    if preset is TauPreset.BR:
        return np.asarray(BR_TENORS, dtype=float)
    return dense_grid(10, 50)


def _parse_token(token: str) -> Optional[float]:
    try:
        v = float(token)
    except ValueError:
        return None
    if not math.isfinite(v) or v < 0:
        return None
    return v


def parse_tenors(
    text: Optional[str], default: Optional[Sequence[float]] = None
) -> np.ndarray:
    """
    Parse user text into an ascending, de-duplicated tenor grid.

    Non-numeric, non-finite and negative entries are dropped. If nothing
    usable remains, the default grid is returned instead of an empty array.
    """
    fallback = DEFAULT_TENORS if default is None else default

    values = set()
    for token in _SEPARATORS.split(text or ""):
        if not token:
            continue
        v = _parse_token(token)
        if v is not None:
            values.add(v)

    if not values:
        return np.asarray(fallback, dtype=float).copy()
    return np.asarray(sorted(values), dtype=float)


def format_tenors(values: Iterable[float]) -> str:
    """Comma-joined text for a grid (inverse of `parse_tenors` for clean input)."""
    return ", ".join(format(float(v), ".10g") for v in values)
