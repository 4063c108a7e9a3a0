# src/nss_lab/curves/nss.py
"""
Nelson–Siegel–Svensson spot and instantaneous-forward curves.

    y(t) = b1
         + b2 * (1 - e^{-l1 t}) / (l1 t)
         + b3 * [(1 - e^{-l1 t}) / (l1 t) - e^{-l1 t}]
         + b4 * [(1 - e^{-l2 t}) / (l2 t) - e^{-l2 t}]

    f(t) = b1 + b2 e^{-l1 t} + b3 l1 t e^{-l1 t} + b4 l2 t e^{-l2 t}

f(t) = y(t) + t * dy/dt. The closed form above is the canonical forward;
`forward_rates_via_derivative` computes the same quantity through dy/dt and
is kept as a cross-check.

Tenors equal to 0 are evaluated at TENOR_EPSILON (removable singularity,
y(0+) = f(0+) = b1 + b2). Reported tenors are never altered.
"""

from __future__ import annotations

from typing import Sequence, Tuple, Union

import numpy as np

from nss_lab.curves.schemas import CurveResult, NSSParameters

TENOR_EPSILON = 1e-12

TenorsLike = Union[Sequence[float], np.ndarray]


class DecayRateError(ValueError):
    """Raised when a decay rate is exactly zero (model undefined)."""


class TenorDomainError(ValueError):
    """Raised when a tenor is negative."""


# ------------------------------------------------------------
# Input guards
# ------------------------------------------------------------
def _check_decay_rates(params: NSSParameters) -> None:
    for name in ("l1", "l2"):
        if getattr(params, name) == 0.0:
            raise DecayRateError(
                f"Decay rate {name} must be non-zero "
                f"(got {name}=0; the NSS loadings divide by {name} * tau)"
            )


def _as_tenor_array(tenors: TenorsLike) -> np.ndarray:
    t = np.asarray(tenors, dtype=float)
    if t.ndim == 0:
        t = t.reshape(1)
    if t.ndim != 1:
        raise ValueError(f"tenors must be one-dimensional (got shape {t.shape})")

    # NaN compares False here and is left to propagate
    negative = t < 0
    if np.any(negative):
        raise TenorDomainError(
            f"Tenors must be non-negative; got {t[negative].tolist()}"
        )
    return t


def _safe_tenors(t: np.ndarray) -> np.ndarray:
    return np.where(t == 0.0, TENOR_EPSILON, t)


def _prepare(params: NSSParameters, tenors: TenorsLike) -> Tuple[np.ndarray, np.ndarray]:
    _check_decay_rates(params)
    t = _as_tenor_array(tenors)
    return t, _safe_tenors(t)


# ------------------------------------------------------------
# Loadings (all take already-safe tenors)
# ------------------------------------------------------------
def _loadings(
    params: NSSParameters, t: np.ndarray
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    l1, l2 = params.l1, params.l2
    e1 = np.exp(-l1 * t)
    e2 = np.exp(-l2 * t)
    # 1 - e^{-x} via expm1 keeps full precision at t = TENOR_EPSILON
    slope = -np.expm1(-l1 * t) / (l1 * t)
    curvature1 = slope - e1
    curvature2 = -np.expm1(-l2 * t) / (l2 * t) - e2
    return e1, e2, slope, curvature1, curvature2


def _spot(params: NSSParameters, t: np.ndarray) -> np.ndarray:
    _, _, slope, curvature1, curvature2 = _loadings(params, t)
    return params.b1 + params.b2 * slope + params.b3 * curvature1 + params.b4 * curvature2


def _forward(params: NSSParameters, t: np.ndarray) -> np.ndarray:
    e1 = np.exp(-params.l1 * t)
    e2 = np.exp(-params.l2 * t)
    return (
        params.b1
        + params.b2 * e1
        + params.b3 * params.l1 * t * e1
        + params.b4 * params.l2 * t * e2
    )


def _spot_derivative(params: NSSParameters, t: np.ndarray) -> np.ndarray:
    l1, l2 = params.l1, params.l2
    e1 = np.exp(-l1 * t)
    e2 = np.exp(-l2 * t)
    d_slope = (l1 * t * e1 + np.expm1(-l1 * t)) / (l1 * t * t)
    d_curvature1 = d_slope + l1 * e1
    d_curvature2 = (l2 * t * e2 + np.expm1(-l2 * t)) / (l2 * t * t) + l2 * e2
    return params.b2 * d_slope + params.b3 * d_curvature1 + params.b4 * d_curvature2


# ------------------------------------------------------------
# Public API
# ------------------------------------------------------------
def spot_rates(params: NSSParameters, tenors: TenorsLike) -> np.ndarray:
    """Continuously-compounded spot yields (decimal) at each tenor."""
    _, t_safe = _prepare(params, tenors)
    with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
        return _spot(params, t_safe)


def forward_rates(params: NSSParameters, tenors: TenorsLike) -> np.ndarray:
    """Instantaneous forward rates (decimal), closed form."""
    _, t_safe = _prepare(params, tenors)
    with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
        return _forward(params, t_safe)


def spot_derivative(params: NSSParameters, tenors: TenorsLike) -> np.ndarray:
    """Analytic dy/dtau of the spot curve."""
    _, t_safe = _prepare(params, tenors)
    with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
        return _spot_derivative(params, t_safe)


def forward_rates_via_derivative(
    params: NSSParameters, tenors: TenorsLike
) -> np.ndarray:
    """
    Instantaneous forward rates as y(t) + t * dy/dt.

    Near t = 0 the derivative terms lose precision (1/t^2 cancellation);
    prefer `forward_rates` for anything but cross-checking.
    """
    _, t_safe = _prepare(params, tenors)
    with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
        return _spot(params, t_safe) + t_safe * _spot_derivative(params, t_safe)


def discount_factors(params: NSSParameters, tenors: TenorsLike) -> np.ndarray:
    """DF(t) = exp(-y(t) * t), exactly 1 at t = 0."""
    t, t_safe = _prepare(params, tenors)
    with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
        y = _spot(params, t_safe)
        df = np.exp(-y * t)
    return np.where(t == 0.0, 1.0, df)


def short_rate_limit(params: NSSParameters) -> float:
    """lim_{t -> 0} y(t) = lim_{t -> 0} f(t) = b1 + b2."""
    return float(params.b1 + params.b2)


def long_rate_limit(params: NSSParameters) -> float:
    """lim_{t -> inf} y(t) = b1 (for positive decay rates)."""
    return float(params.b1)


def evaluate(params: NSSParameters, tenors: TenorsLike) -> CurveResult:
    """
    Evaluate spot and forward curves on a maturity grid.

    Each point is computed independently; unsorted or duplicate tenors are
    returned in the order given. Non-finite results are not filtered.
    """
    t, t_safe = _prepare(params, tenors)
    with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
        spot = _spot(params, t_safe)
        forward = _forward(params, t_safe)
    return CurveResult(tenors=t.copy(), spot=spot, forward=forward)
