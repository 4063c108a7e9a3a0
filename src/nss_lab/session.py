from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from nss_lab.curves.nss import evaluate
from nss_lab.curves.schemas import PARAM_NAMES, CurveResult, NSSParameters
from nss_lab.grids.tenors import (
    DEFAULT_TENORS,
    TauPreset,
    format_tenors,
    get_preset,
    parse_tenors,
)
from nss_lab.params.store import (
    CurveType,
    ParameterStore,
    curve_type_key,
    default_store,
)

LOGGER = logging.getLogger(__name__)


class CurveSession:
    """
    Editable state behind the dashboard: curve type, parameters, tenor text.

    There is no observer machinery. Every mutator recomputes and returns the
    fresh CurveResult; `result` always reflects the current state.
    """

    def __init__(
        self,
        store: Optional[ParameterStore] = None,
        curve_type: CurveType | str = CurveType.PRE,
        tenors_text: Optional[str] = None,
        default_tenors: Optional[np.ndarray] = None,
    ) -> None:
        self.store = store if store is not None else default_store()
        self.default_tenors = (
            np.asarray(default_tenors, dtype=float)
            if default_tenors is not None
            else DEFAULT_TENORS
        )
        self.curve_type = curve_type_key(curve_type)
        self.params: NSSParameters = self.store.reset(self.curve_type)
        self.preset = TauPreset.SMOOTH
        self.tenors_text = (
            tenors_text if tenors_text is not None else format_tenors(self.default_tenors)
        )
        self.result: CurveResult = self.recompute()

    # ---------------------------------------------------------------
    # Derived state
    # ---------------------------------------------------------------
    @property
    def tenors(self) -> np.ndarray:
        return parse_tenors(self.tenors_text, default=self.default_tenors)

    @property
    def latest_date(self) -> str:
        return self.store.latest_date(self.curve_type)

    def recompute(self) -> CurveResult:
        self.result = evaluate(self.params, self.tenors)
        return self.result

    def _commit(self, params: NSSParameters) -> CurveResult:
        # evaluate first: a rejected parameter set leaves the session unchanged
        result = evaluate(params, self.tenors)
        self.params = params
        self.result = result
        return result

    # ---------------------------------------------------------------
    # Mutators
    # ---------------------------------------------------------------
    def set_curve_type(self, curve_type: CurveType | str) -> CurveResult:
        """Switch curve type and load its latest snapshot."""
        key = curve_type_key(curve_type)
        result = self._commit(self.store.reset(key))
        self.curve_type = key
        LOGGER.debug("Curve type -> %s", key)
        return result

    def reset(self) -> CurveResult:
        return self._commit(self.store.reset(self.curve_type))

    def set_param(self, name: str, value: float) -> CurveResult:
        if name not in PARAM_NAMES:
            raise KeyError(f"Unknown NSS parameter '{name}'. Available: {PARAM_NAMES}")
        return self._commit(self.params.replace(**{name: float(value)}))

    def set_params(self, params: NSSParameters) -> CurveResult:
        return self._commit(params)

    def set_preset(self, preset: TauPreset | str) -> None:
        """Select a preset without touching the tenor text (see apply_preset)."""
        self.preset = TauPreset(preset)

    def apply_preset(self, preset: TauPreset | str | None = None) -> CurveResult:
        """Replace the tenor text with the selected (or given) preset grid."""
        if preset is not None:
            self.set_preset(preset)
        self.tenors_text = format_tenors(get_preset(self.preset))
        return self.recompute()

    def set_tenors_text(self, text: str) -> CurveResult:
        self.tenors_text = text
        return self.recompute()
