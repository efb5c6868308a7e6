"""Tests for the MPC solve instance and its optimizer-facing contract."""

import numpy as np
import pytest

from windmpc.core.errors import (
    InconsistentScaleState,
    InvalidControlVectorLength,
    InvalidReference,
)
from windmpc.optimization.interface import TurbinesMPC
from windmpc.optimization.packing import pack_controls, unpack_controls, control_index

from helpers import make_mpc, make_model, perturb_controls


def test_initial_column_holds_operating_point():
    mpc = make_mpc(s=(250.0, 450.0))
    model = mpc.initial_model

    assert mpc.controls.beta.shape == (2, mpc.Nt)
    assert np.all(mpc.controls.beta == model.beta[:, None])
    assert np.all(mpc.controls.gen_torque == model.gen_torque[:, None])
    assert mpc.Pfarm[0] == pytest.approx(model.farm_power)
    assert mpc.controls.num_decisions == 2 * 2 * (mpc.Nt - 1)


def test_constructor_copies_wake_model():
    model = make_model()
    P0 = model.farm_power
    mpc = TurbinesMPC(model, 0.0, 7.0, 0.5, [0.0, 7.0], [P0, P0])

    mpc.run()

    assert mpc.initial_model is not model
    assert model.farm_power == P0


def test_reference_must_cover_realized_horizon():
    model = make_model()
    with pytest.raises(InvalidReference):
        # Nt = 5 reaches t = 6.25, beyond the last sample
        TurbinesMPC(model, 0.0, 7.0, 0.5, [0.0, 6.0], [1.0, 1.0])


def test_steady_tracking_needs_no_correction():
    model = make_model()
    P0 = model.farm_power
    mpc = TurbinesMPC(model, 0.0, 4.0, 0.5, [0.0, 4.0], [P0, P0])
    mpc.to_dimensionless()

    result = mpc.run()

    assert mpc.Nt == 3
    assert result.cost == pytest.approx(0.0, abs=1e-20)
    assert np.max(np.abs(result.grad_beta)) < 1e-10
    assert np.max(np.abs(result.grad_gen_torque)) < 1e-10


def test_cost_is_nonnegative(single_turbine, two_turbines):
    for mpc in (single_turbine, two_turbines):
        assert mpc.run().cost >= 0.0


def test_run_keeps_initial_column(two_turbines):
    beta0 = two_turbines.controls.beta[:, 0].copy()
    torque0 = two_turbines.controls.gen_torque[:, 0].copy()

    two_turbines.run()
    x = two_turbines.get_control_vector()
    two_turbines.evaluate(x + 0.01)

    assert np.array_equal(two_turbines.controls.beta[:, 0], beta0)
    assert np.array_equal(two_turbines.controls.gen_torque[:, 0], torque0)


def test_evaluate_round_trip(two_turbines):
    reference = two_turbines.clone().run()

    f, g = two_turbines.evaluate(two_turbines.get_control_vector())

    assert f == reference.cost
    assert np.array_equal(g, pack_controls(reference.grad_beta, reference.grad_gen_torque))


def test_evaluate_writes_decision_columns(single_turbine):
    x = single_turbine.get_control_vector() * 1.01
    single_turbine.evaluate(x)

    assert np.array_equal(single_turbine.get_control_vector(), x)


@pytest.mark.parametrize("bad", [np.zeros(3), np.zeros((2, 8)), np.zeros(0)])
def test_evaluate_rejects_wrong_length(single_turbine, bad):
    with pytest.raises(InvalidControlVectorLength):
        single_turbine.evaluate(bad)


def test_packing_layout():
    N, Nt = 2, 3
    beta = np.array([[0.0, 1.0, 2.0], [0.0, 3.0, 4.0]])
    gen_torque = 10.0 * beta

    x = pack_controls(beta, gen_torque)

    # Turbines contiguous within a step, pitch block before torque block
    assert np.array_equal(x, [1.0, 3.0, 2.0, 4.0, 10.0, 30.0, 20.0, 40.0])
    assert x[control_index("beta", 1, 2, N, Nt)] == beta[1, 2]
    assert x[control_index("gen_torque", 1, 2, N, Nt)] == gen_torque[1, 2]
    assert x[control_index("gen_torque", 0, 1, N, Nt)] == gen_torque[0, 1]

    unpacked_beta, unpacked_torque = unpack_controls(x, N, Nt)
    assert np.array_equal(unpacked_beta, beta[:, 1:])
    assert np.array_equal(unpacked_torque, gen_torque[:, 1:])


@pytest.mark.parametrize(
    "kind, turbine, step", [("pitch", 0, 1), ("beta", 2, 1), ("beta", 0, 0), ("beta", 0, 3)]
)
def test_control_index_rejects_non_decisions(kind, turbine, step):
    with pytest.raises((ValueError, IndexError)):
        control_index(kind, turbine, step, 2, 3)


def test_gradient_entry_predicts_cost_change():
    mpc = make_mpc(s=(250.0, 450.0), horizon=4.0)
    mpc.to_dimensionless()
    perturb_controls(mpc, seed=2)
    assert mpc.Nt == 3

    x = mpc.get_control_vector()
    f, g = mpc.evaluate(x)

    eps = 1e-7
    i = control_index("gen_torque", 1, 2, mpc.N, mpc.Nt)
    x_perturbed = x.copy()
    x_perturbed[i] += eps
    f_perturbed, _ = mpc.evaluate(x_perturbed)

    assert abs(g[i]) > 1e-6
    assert f_perturbed - f == pytest.approx(g[i] * eps, rel=1e-3, abs=1e-12)


def test_clone_shares_no_storage(two_turbines):
    two_turbines.run()
    cost = two_turbines.cost
    other = two_turbines.clone()

    other.controls.beta[:, 1:] += 1.0
    other.run()

    assert two_turbines.cost == cost
    assert other.cost != cost
    for a, b in [
        (two_turbines.controls.beta, other.controls.beta),
        (two_turbines.model.du, other.model.du),
        (two_turbines.initial_model.du, other.initial_model.du),
        (two_turbines.initial_adjoint.du_star, other.initial_adjoint.du_star),
        (two_turbines.history.fstar, other.history.fstar),
        (two_turbines.Pref, other.Pref),
        (two_turbines.t, other.t),
    ]:
        assert not np.shares_memory(a, b)


def test_finite_difference_leaves_solution_untouched(single_turbine):
    result = single_turbine.run()
    beta = single_turbine.controls.beta.copy()
    gen_torque = single_turbine.controls.gen_torque.copy()

    fd_beta, fd_torque = single_turbine.finite_difference_gradient()

    assert single_turbine.cost == result.cost
    assert np.array_equal(single_turbine.controls.beta, beta)
    assert np.array_equal(single_turbine.controls.gen_torque, gen_torque)
    assert np.array_equal(single_turbine.controls.grad_beta, result.grad_beta)
    assert np.array_equal(single_turbine.controls.grad_gen_torque, result.grad_gen_torque)
    assert np.array_equal(single_turbine.controls.fdgrad_beta, fd_beta)
    assert np.all(fd_torque[:, 0] == 0.0)


def test_release_frees_buffers():
    mpc = make_mpc()
    with mpc:
        mpc.run()

    assert mpc.history is None
    with pytest.raises(RuntimeError):
        mpc.run()


def test_failed_evaluate_keeps_trajectory():
    mpc = make_mpc(s=(250.0, 450.0))
    x0 = mpc.get_control_vector()

    mpc.adjoint.to_dimensionless()
    with pytest.raises(InconsistentScaleState):
        mpc.evaluate(x0 + 1.0)
    assert np.array_equal(mpc.get_control_vector(), x0)

    mpc.adjoint.to_dimensional()
    mpc.release()
    with pytest.raises(RuntimeError):
        mpc.evaluate(x0 + 1.0)
    assert np.array_equal(mpc.get_control_vector(), x0)
