# tests/test_session.py
import numpy as np
import pytest

from nss_lab.curves.nss import DecayRateError, evaluate
from nss_lab.grids.tenors import BR_TENORS, DEFAULT_TENORS, TauPreset
from nss_lab.params.store import default_store
from nss_lab.session import CurveSession


def test_initial_state_uses_latest_snapshot_and_default_grid():
    session = CurveSession()
    store = default_store()

    assert session.curve_type == "pre"
    assert session.params == store.reset("pre")
    assert session.latest_date == "2025-08-07"
    assert np.array_equal(session.tenors, DEFAULT_TENORS)
    assert len(session.result) == len(DEFAULT_TENORS)


def test_every_mutation_recomputes():
    session = CurveSession(tenors_text="1, 2, 5")
    before = session.result.spot.copy()

    res = session.set_param("b1", session.params.b1 + 0.01)
    assert res is session.result
    assert np.allclose(res.spot, before + 0.01)

    res = session.set_tenors_text("10, 0.5, 0.5")
    assert res.tenors.tolist() == [0.5, 10.0]

    res = session.apply_preset(TauPreset.BR)
    assert res.tenors.tolist() == list(BR_TENORS)
    assert session.tenors_text.startswith("0.25, 0.5, 1")


def test_switch_curve_type_and_reset():
    session = CurveSession(tenors_text="1")
    session.set_curve_type("ipca")
    assert session.curve_type == "ipca"
    assert session.result.spot[0] == pytest.approx(0.101193403627327, abs=1e-9)

    session.set_param("l2", 2.0)
    assert session.params.l2 == 2.0
    session.reset()
    assert session.params == default_store().reset("ipca")


def test_zero_decay_rate_leaves_session_unchanged():
    session = CurveSession(tenors_text="1, 2")
    params, result = session.params, session.result

    with pytest.raises(DecayRateError):
        session.set_param("l1", 0.0)

    assert session.params == params
    assert session.result is result


def test_unknown_param_and_curve_type():
    session = CurveSession()
    with pytest.raises(KeyError):
        session.set_param("b5", 0.1)
    with pytest.raises(KeyError):
        session.set_curve_type("selic")
    assert session.curve_type == "pre"


def test_invalid_text_falls_back_to_session_default():
    session = CurveSession(default_tenors=np.array([1.0, 3.0]))
    res = session.set_tenors_text("oops")
    assert res.tenors.tolist() == [1.0, 3.0]


def test_result_matches_direct_evaluation():
    session = CurveSession(tenors_text="0, 0.25, 7")
    direct = evaluate(session.params, [0.0, 0.25, 7.0])
    assert np.array_equal(session.result.spot, direct.spot)
    assert np.array_equal(session.result.forward, direct.forward)
