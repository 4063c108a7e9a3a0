# src/nss_lab/params/store.py
from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Tuple

from pydantic import BaseModel, ConfigDict, Field

from nss_lab.curves.schemas import NSSParameters

LOGGER = logging.getLogger(__name__)


class CurveType(str, Enum):
    """Curve families published with NSS parameters."""

    PRE = "pre"  # nominal fixed-rate (prefixado)
    IPCA = "ipca"  # inflation-linked (IPCA+)


# ============================================================
# Snapshot
# ============================================================


class ParameterSnapshot(BaseModel):
    """NSS parameters of one curve type as of one date."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    curve_type: str = Field(..., min_length=1)
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$", description="YYYY-MM-DD")
    params: NSSParameters


DEFAULT_SNAPSHOTS: Tuple[ParameterSnapshot, ...] = (
    ParameterSnapshot(
        curve_type=CurveType.PRE.value,
        date="2025-08-07",
        params=NSSParameters(
            b1=0.060553,
            b2=0.082648,
            b3=0.102802,
            b4=0.229391,
            l1=1.965289,
            l2=0.16948,
        ),
    ),
    ParameterSnapshot(
        curve_type=CurveType.IPCA.value,
        date="2025-08-07",
        params=NSSParameters(
            b1=0.067369,
            b2=0.07412,
            b3=-0.068101,
            b4=0.026559,
            l1=0.997333,
            l2=0.516151,
        ),
    ),
)


def curve_type_key(curve_type: CurveType | str) -> str:
    return curve_type.value if isinstance(curve_type, CurveType) else str(curve_type)


# ============================================================
# Store
# ============================================================


class ParameterStore:
    """
    Immutable lookup table: curve type -> date -> NSSParameters.

    Built once (defaults, config, or feed rows); never mutated afterwards.
    Combining sources produces a new store via `merged`.
    """

    def __init__(self, snapshots: Iterable[ParameterSnapshot] = ()) -> None:
        table: Dict[str, Dict[str, NSSParameters]] = {}
        for snap in snapshots:
            by_date = table.setdefault(snap.curve_type, {})
            if snap.date in by_date:
                LOGGER.warning(
                    "Duplicate snapshot for %s on %s; keeping the last one",
                    snap.curve_type,
                    snap.date,
                )
            by_date[snap.date] = snap.params

        # ISO dates sort lexicographically
        self._table: Dict[str, Dict[str, NSSParameters]] = {
            ct: dict(sorted(by_date.items())) for ct, by_date in table.items()
        }

    # ---------------------------------------------------------------
    # Constructors
    # ---------------------------------------------------------------
    @classmethod
    def from_snapshots(cls, snapshots: Iterable[ParameterSnapshot]) -> "ParameterStore":
        return cls(snapshots)

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping | BaseModel]) -> "ParameterStore":
        """
        Build from feed rows with keys type, date, b1..b4, l1, l2
        (dicts or NssRow models).
        """
        snapshots: List[ParameterSnapshot] = []
        for row in rows:
            r = row.model_dump() if isinstance(row, BaseModel) else dict(row)
            snapshots.append(
                ParameterSnapshot(
                    curve_type=str(r["type"]),
                    date=str(r["date"]),
                    params=NSSParameters(
                        b1=r["b1"],
                        b2=r["b2"],
                        b3=r["b3"],
                        b4=r["b4"],
                        l1=r["l1"],
                        l2=r["l2"],
                    ),
                )
            )
        LOGGER.info("Built parameter store from %d rows", len(snapshots))
        return cls(snapshots)

    def merged(self, other: "ParameterStore") -> "ParameterStore":
        """New store with `other` overriding identical (type, date) keys."""
        combined: Dict[Tuple[str, str], ParameterSnapshot] = {}
        for snap in list(self.snapshots()) + list(other.snapshots()):
            combined[(snap.curve_type, snap.date)] = snap
        return ParameterStore(combined.values())

    # ---------------------------------------------------------------
    # Lookups
    # ---------------------------------------------------------------
    def curve_types(self) -> List[str]:
        return list(self._table.keys())

    def dates(self, curve_type: CurveType | str) -> List[str]:
        return list(self._by_type(curve_type).keys())

    def latest_date(self, curve_type: CurveType | str) -> str:
        return self.dates(curve_type)[-1]

    def latest(self, curve_type: CurveType | str) -> ParameterSnapshot:
        key = curve_type_key(curve_type)
        date = self.latest_date(key)
        return ParameterSnapshot(curve_type=key, date=date, params=self._table[key][date])

    def get(self, curve_type: CurveType | str, date: str) -> NSSParameters:
        by_date = self._by_type(curve_type)
        if date not in by_date:
            raise KeyError(
                f"No '{curve_type_key(curve_type)}' snapshot on {date}. "
                f"Available: {list(by_date.keys())[-5:]} (latest 5)"
            )
        return by_date[date]

    def reset(self, curve_type: CurveType | str) -> NSSParameters:
        """Parameters to restore when the user resets a curve type."""
        return self.latest(curve_type).params

    def snapshots(self) -> Iterable[ParameterSnapshot]:
        for ct, by_date in self._table.items():
            for date, params in by_date.items():
                yield ParameterSnapshot(curve_type=ct, date=date, params=params)

    def _by_type(self, curve_type: CurveType | str) -> Dict[str, NSSParameters]:
        key = curve_type_key(curve_type)
        if key not in self._table or not self._table[key]:
            raise KeyError(
                f"Unknown curve type '{key}'. Available: {self.curve_types()}"
            )
        return self._table[key]

    def __contains__(self, curve_type: object) -> bool:
        if isinstance(curve_type, (CurveType, str)):
            return curve_type_key(curve_type) in self._table
        return False

    def __len__(self) -> int:
        return sum(len(by_date) for by_date in self._table.values())

    def __repr__(self) -> str:
        counts = {ct: len(d) for ct, d in self._table.items()}
        return f"ParameterStore({counts})"


def default_store() -> ParameterStore:
    return ParameterStore(DEFAULT_SNAPSHOTS)
