# examples/curve_demo.py
import numpy as np

from nss_lab.curves.nss import evaluate, forward_rates_via_derivative, short_rate_limit
from nss_lab.grids.tenors import CLASSIC_TENORS
from nss_lab.params.store import default_store

store = default_store()

# -------------------------------
# Latest snapshot per curve type
# -------------------------------
for curve_type in store.curve_types():
    snap = store.latest(curve_type)
    tenors = np.array((0.0,) + CLASSIC_TENORS)
    result = evaluate(snap.params, tenors)

    print(f"\n{curve_type} @ {snap.date}")
    print((result.to_frame().set_index("tenor") * 100).round(4))

    # -------------------------------
    # Sanity checks
    # -------------------------------
    print(f"short-rate limit b1 + b2 : {short_rate_limit(snap.params) * 100:.4f}%")
    gap = np.max(
        np.abs(result.forward[1:] - forward_rates_via_derivative(snap.params, tenors[1:]))
    )
    print(f"closed-form vs derivative forward, max gap: {gap:.2e}")
