"""Builders for wind-farm test problems."""

import numpy as np

from windmpc.optimization.interface import TurbinesMPC
from windmpc.wake.model import DynamicWakeModel
from windmpc.wake.parameters import WakeParameters


def make_params(s=(300.0,), Nx=41, Lx=1000.0):
    """Rotor of 100 m diameter in an 8 m/s free stream, dx = 25 m."""
    return WakeParameters(
        s=np.array(s, dtype=float),
        U_infty=8.0,
        Delta=25.0,
        k=0.1,
        Dia=100.0,
        rho=1.225,
        inertia=4.0e7,
        Lx=Lx,
        Nx=Nx,
    )


def make_model(s=(300.0,), beta=2.0, omega=1.0):
    return DynamicWakeModel(make_params(s), beta=beta, omega=omega)


def make_mpc(s=(300.0,), horizon=7.0, cfl=0.5, ramp=0.1, t0=0.0):
    """
    Problem tracking a linear ramp from the initial farm power.

    With dx = 25 m and U∞ = 8 m/s, dt = cfl * 3.125 s; the defaults give Nt = 5.
    """
    model = make_model(s)
    P0 = model.farm_power
    time = np.array([t0, t0 + horizon])
    Pref = P0 * np.array([1.0, 1.0 + ramp])
    return TurbinesMPC(model, t0, horizon, cfl, time, Pref)


def perturb_controls(mpc, seed=0):
    """Move every decision value away from the operating point."""
    rng = np.random.default_rng(seed)
    c = mpc.controls
    c.beta[:, 1:] += rng.uniform(-1.0, 1.0, size=c.beta[:, 1:].shape)
    c.gen_torque[:, 1:] *= 1.0 + 0.05 * rng.uniform(-1.0, 1.0, size=c.gen_torque[:, 1:].shape)
