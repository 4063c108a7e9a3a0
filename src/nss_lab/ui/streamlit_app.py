from __future__ import annotations

import os
from typing import Dict, Tuple

import streamlit as st

from nss_lab.config.loader import build_store, default_tenors, load_settings
from nss_lab.config.models import AppSettings
from nss_lab.curves.nss import DecayRateError
from nss_lab.curves.schemas import PARAM_NAMES
from nss_lab.curves.validation import validate_curve_result
from nss_lab.data.feed import FeedError
from nss_lab.grids.tenors import PRESET_LABELS, TauPreset
from nss_lab.session import CurveSession
from nss_lab.ui.chart import build_curve_figure

CONFIG_ENV = "NSS_LAB_CONFIG"

# label, min, max per parameter
PARAM_WIDGETS: Dict[str, Tuple[str, float, float]] = {
    "b1": ("β1 (level)", -0.5, 0.5),
    "b2": ("β2 (slope)", -0.5, 0.5),
    "b3": ("β3 (curv.1)", -0.5, 0.5),
    "b4": ("β4 (curv.2)", -0.5, 0.5),
    "l1": ("λ1 (shape 1)", 0.01, 5.0),
    "l2": ("λ2 (shape 2)", 0.01, 5.0),
}

SPOT_FORMULA = (
    "y(τ) = β1 + β2·[(1 - e^(-λ1·τ))/(λ1·τ)] "
    "+ β3·([(1 - e^(-λ1·τ))/(λ1·τ) - e^(-λ1·τ)]) "
    "+ β4·([(1 - e^(-λ2·τ))/(λ2·τ) - e^(-λ2·τ)])"
)
FORWARD_FORMULA = "f(τ) = β1 + β2·e^(-λ1·τ) + β3·λ1·τ·e^(-λ1·τ) + β4·λ2·τ·e^(-λ2·τ)"


# ============================================================
# Session bootstrap
# ============================================================


@st.cache_resource
def _settings() -> AppSettings:
    return load_settings(os.environ.get(CONFIG_ENV))


def _get_session() -> CurveSession:
    if "curve_session" not in st.session_state:
        settings = _settings()
        st.session_state.curve_session = CurveSession(
            store=build_store(settings, use_feed=False),
            curve_type=settings.curve_type,
            default_tenors=default_tenors(settings),
        )
    return st.session_state.curve_session


# ============================================================
# Sections
# ============================================================


def sidebar_feed(session: CurveSession) -> None:
    st.sidebar.header("🗄️ Parameter Feed")
    st.sidebar.caption("Historical NSS parameters (Feather).")

    if st.sidebar.button("Load from feed"):
        settings = _settings()
        try:
            with st.spinner("Fetching parameter feed…"):
                session.store = build_store(settings, use_feed=True)
        except FeedError as e:
            st.sidebar.error(f"Feed error: {e}")
            return
        session.reset()
        _sync_param_widgets(session)
        st.sidebar.success(f"Loaded {len(session.store)} snapshots.")


def render_tau_controls(session: CurveSession) -> None:
    st.subheader("Pick maturities (τ)")

    presets = list(TauPreset)
    col_sel, col_btn = st.columns([3, 1])
    with col_sel:
        preset = st.selectbox(
            "τ Preset",
            options=presets,
            index=presets.index(session.preset),
            format_func=lambda p: PRESET_LABELS[p],
        )
    session.set_preset(preset)
    with col_btn:
        st.write("")
        if st.button("Apply preset", help="Replace the custom list with the preset values"):
            session.apply_preset()
            st.session_state.tenors_text = session.tenors_text

    if "tenors_text" not in st.session_state:
        st.session_state.tenors_text = session.tenors_text

    text = st.text_area("Custom τ (years, comma-separated)", key="tenors_text", height=120)
    session.set_tenors_text(text)


def render_param_controls(session: CurveSession) -> None:
    st.subheader("Choose parameters")

    types = session.store.curve_types()
    col_type, col_reset, col_date = st.columns([2, 1, 2])
    with col_type:
        curve_type = st.selectbox(
            "Parameter set",
            options=types,
            index=types.index(session.curve_type) if session.curve_type in types else 0,
        )
    if curve_type != session.curve_type:
        session.set_curve_type(curve_type)
        _sync_param_widgets(session)
    with col_reset:
        st.write("")
        if st.button("Reset to latest"):
            session.reset()
            _sync_param_widgets(session)
    with col_date:
        st.write("")
        st.caption(f"Latest: {session.latest_date}")

    st.caption(
        "Tip: increase λ to pull curvature toward the short end; "
        "decrease to move humps out the curve."
    )

    if "param_b1" not in st.session_state:
        _sync_param_widgets(session)

    cols = st.columns(3)
    for i, name in enumerate(PARAM_NAMES):
        label, lo, hi = PARAM_WIDGETS[name]
        # stored snapshots may sit outside the slider range; widen rather than clip
        current = float(getattr(session.params, name))
        with cols[i % 3]:
            value = st.number_input(
                label,
                min_value=min(lo, current),
                max_value=max(hi, current),
                step=0.0001,
                format="%.6f",
                key=f"param_{name}",
            )
        try:
            session.set_param(name, value)
        except DecayRateError as e:
            st.error(str(e))


def _sync_param_widgets(session: CurveSession) -> None:
    for name in PARAM_WIDGETS:
        st.session_state[f"param_{name}"] = float(getattr(session.params, name))


def render_chart(session: CurveSession) -> None:
    result = session.result
    st.plotly_chart(build_curve_figure(result), use_container_width=True)

    for msg in validate_curve_result(result):
        st.warning(msg)

    st.code(SPOT_FORMULA, language=None)
    st.code(FORWARD_FORMULA, language=None)

    st.download_button(
        "Download curve (CSV)",
        data=result.to_frame().to_csv(index=False),
        file_name=f"nss_{session.curve_type}.csv",
        mime="text/csv",
    )


# ============================================================
# Main page
# ============================================================


def main() -> None:
    st.set_page_config(page_title="NSS Curve Lab", layout="wide")
    st.title("📈 Nelson–Siegel–Svensson Curve Lab")
    st.markdown(
        "Set parameters **β1…β4, λ1, λ2**, choose a maturity grid **τ**, and "
        "see the **spot curve** y(τ) and the **instantaneous forward curve** "
        "f(τ) = y(τ) + τ·dy/dτ."
    )

    session = _get_session()

    sidebar_feed(session)
    render_tau_controls(session)
    render_param_controls(session)
    render_chart(session)


if __name__ == "__main__":
    main()
