# src/nss_lab/data/schemas.py
from __future__ import annotations

import datetime as _dt
import math
from typing import Any

from pydantic import BaseModel, Field, field_validator

REQUIRED_COLUMNS = ("type", "date", "b1", "b2", "b3", "b4", "l1", "l2")


def normalize_date(value: Any) -> str:
    """
    Normalize a feed date to YYYY-MM-DD.

    Accepts ISO strings (anything after the first 10 chars is dropped),
    date / datetime objects, and numeric epoch timestamps in milliseconds.
    """
    if isinstance(value, str):
        return value.strip()[:10]
    if isinstance(value, _dt.datetime):
        if value.tzinfo is not None:
            value = value.astimezone(_dt.timezone.utc)
        return value.date().isoformat()
    if isinstance(value, _dt.date):
        return value.isoformat()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if not math.isfinite(value):
            raise ValueError(f"Non-finite timestamp: {value}")
        ts = _dt.datetime.fromtimestamp(value / 1000.0, tz=_dt.timezone.utc)
        return ts.date().isoformat()
    raise ValueError(f"Unsupported date value: {value!r}")


class NssRow(BaseModel):
    """
    One row of the historical NSS parameter feed.

    - type: curve type tag ('pre', 'ipca', ...)
    - date: normalized to YYYY-MM-DD
    - b1..b4, l1, l2: NSS parameters (decimal rates, decay per year)
    """

    type: str = Field(..., min_length=1)
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")
    b1: float
    b2: float
    b3: float
    b4: float
    l1: float
    l2: float

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, v: Any) -> str:
        return str(v)

    @field_validator("date", mode="before")
    @classmethod
    def _normalize_date(cls, v: Any) -> str:
        return normalize_date(v)
