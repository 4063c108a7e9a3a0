# src/nss_lab/curves/schemas.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

import numpy as np
import pandas as pd
from pydantic import BaseModel, ConfigDict


class NSSParameters(BaseModel):
    """
    Nelson–Siegel–Svensson parameters.

    - b1: level (long-run rate)
    - b2: slope
    - b3: curvature around 1 / l1
    - b4: curvature around 1 / l2
    - l1, l2: decay rates (per year)

    No range constraints: NaN / Inf are accepted and flow through evaluation.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    b1: float
    b2: float
    b3: float
    b4: float
    l1: float
    l2: float

    def replace(self, **changes: float) -> "NSSParameters":
        data = self.model_dump()
        data.update(changes)
        return NSSParameters(**data)

    def as_dict(self) -> Dict[str, float]:
        return self.model_dump()


PARAM_NAMES = tuple(NSSParameters.model_fields.keys())


@dataclass(frozen=True)
class CurveResult:
    """Spot and instantaneous-forward rates aligned with the input tenors."""

    tenors: np.ndarray
    spot: np.ndarray
    forward: np.ndarray

    def __post_init__(self) -> None:
        n = len(self.tenors)
        if len(self.spot) != n or len(self.forward) != n:
            raise ValueError(
                f"CurveResult arrays must have equal length "
                f"(tenors={n}, spot={len(self.spot)}, forward={len(self.forward)})"
            )

    def __len__(self) -> int:
        return len(self.tenors)

    def is_finite(self) -> bool:
        return bool(
            np.all(np.isfinite(self.spot)) and np.all(np.isfinite(self.forward))
        )

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {"tenor": self.tenors, "spot": self.spot, "forward": self.forward}
        )

    def to_records(self) -> list[Dict[str, Any]]:
        return self.to_frame().to_dict(orient="records")
