# src/nss_lab/curves/validation.py

from typing import List

import numpy as np

from nss_lab.curves.schemas import CurveResult


def finite_mask(result: CurveResult) -> np.ndarray:
    """Boolean mask of points where tenor, spot and forward are all finite."""
    return (
        np.isfinite(result.tenors)
        & np.isfinite(result.spot)
        & np.isfinite(result.forward)
    )


def drop_non_finite(result: CurveResult) -> CurveResult:
    """
    Return a copy of `result` without non-finite points.

    The evaluator never filters its output; renderers call this before
    drawing so that overflow (e.g. huge decay rates) does not break axes.
    """
    mask = finite_mask(result)
    if mask.all():
        return result
    return CurveResult(
        tenors=result.tenors[mask],
        spot=result.spot[mask],
        forward=result.forward[mask],
    )


def validate_curve_result(result: CurveResult) -> List[str]:
    """
    Diagnostic checks on an evaluated curve.

    Returns a list of warnings:
        - non-finite spot / forward values
        - unsorted tenors
        - duplicate tenors

    NOTE:
        Unsorted and duplicate tenors are legal evaluator inputs, so these
        are informational only. Nothing here raises except a length mismatch,
        which CurveResult itself already prevents.
    """
    warnings: List[str] = []

    if not (len(result.tenors) == len(result.spot) == len(result.forward)):
        raise ValueError("CurveResult arrays have different lengths")

    if len(result) == 0:
        return warnings

    # ---- 1. Non-finite output ----
    bad = ~finite_mask(result)
    n_bad = int(bad.sum())
    if n_bad:
        where = result.tenors[bad][:5].tolist()
        warnings.append(
            f"{n_bad} non-finite curve point(s), first at tenors {where}"
        )

    # ---- 2. Ordering ----
    t = result.tenors
    if np.any(np.diff(t) < 0):
        warnings.append("Tenors are not sorted ascending")

    # ---- 3. Duplicates ----
    n_dup = len(t) - len(np.unique(t))
    if n_dup > 0:
        warnings.append(f"{n_dup} duplicate tenor(s)")

    return warnings
