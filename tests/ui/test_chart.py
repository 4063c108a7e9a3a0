# tests/ui/test_chart.py
import numpy as np

from nss_lab.curves.nss import evaluate
from nss_lab.curves.schemas import CurveResult
from nss_lab.params.store import default_store
from nss_lab.ui.chart import SERIES_COLORS, build_curve_figure, curve_long_frame


def test_figure_has_spot_and_forward_in_percent():
    params = default_store().latest("pre").params
    result = evaluate(params, [0.25, 0.5, 1.0, 2.0])
    fig = build_curve_figure(result, title="pre")

    names = [tr.name for tr in fig.data]
    assert names == ["spot", "forward"]
    spot_trace = fig.data[0]
    assert np.allclose(np.asarray(spot_trace.y), result.spot * 100)
    assert spot_trace.line.color == SERIES_COLORS["spot"]
    assert fig.layout.yaxis.ticksuffix == "%"


def test_non_finite_points_are_skipped_per_series():
    result = CurveResult(
        tenors=np.array([1.0, 2.0, 3.0]),
        spot=np.array([0.05, 0.06, 0.07]),
        forward=np.array([0.05, np.inf, np.nan]),
    )
    long = curve_long_frame(result)
    assert len(long[long["curve"] == "spot"]) == 3
    assert len(long[long["curve"] == "forward"]) == 1
    assert np.all(np.isfinite(long["rate_pct"]))

    fig = build_curve_figure(result)
    forward_trace = [tr for tr in fig.data if tr.name == "forward"][0]
    assert list(forward_trace.x) == [1.0]
