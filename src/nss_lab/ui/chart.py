from __future__ import annotations

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from nss_lab.curves.schemas import CurveResult

SERIES_COLORS = {
    "spot": "#38bdf8",  # cyan-400
    "forward": "#a78bfa",  # violet-400
}

X_LABEL = "Maturity τ (years)"
Y_LABEL = "Yield (%)"


def curve_long_frame(result: CurveResult) -> pd.DataFrame:
    """
    Long-format frame (tenor, curve, rate_pct) for plotting.

    Non-finite points are dropped per series, so an overflowing forward
    does not hide a finite spot at the same tenor.
    """
    wide = result.to_frame()
    long = wide.melt(
        id_vars="tenor",
        value_vars=["spot", "forward"],
        var_name="curve",
        value_name="rate",
    )
    long = long[np.isfinite(long["tenor"]) & np.isfinite(long["rate"])].copy()
    long["rate_pct"] = long["rate"] * 100.0
    return long[["tenor", "curve", "rate_pct"]]


def build_curve_figure(result: CurveResult, title: str | None = None) -> go.Figure:
    """Spot + forward line chart; non-finite points are skipped."""
    df = curve_long_frame(result)

    fig = px.line(
        df,
        x="tenor",
        y="rate_pct",
        color="curve",
        color_discrete_map=SERIES_COLORS,
        category_orders={"curve": ["spot", "forward"]},
        markers=len(result) <= 40,
        title=title,
        labels={"tenor": X_LABEL, "rate_pct": Y_LABEL, "curve": ""},
    )
    fig.update_traces(
        hovertemplate="τ = %{x:.2f} yr<br>y = %{y:.2f}%<extra>%{fullData.name}</extra>"
    )
    fig.update_layout(
        hovermode="closest",
        legend={"orientation": "h", "y": 1.02, "x": 0.0},
        template="plotly_dark",
    )
    fig.update_xaxes(tickformat=".1f")
    fig.update_yaxes(ticksuffix="%", tickformat=".1f")
    return fig
