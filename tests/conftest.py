"""Shared wind-farm fixtures for the test suite."""

import pytest

from helpers import make_mpc, perturb_controls


@pytest.fixture
def single_turbine():
    mpc = make_mpc()
    mpc.to_dimensionless()
    perturb_controls(mpc)
    return mpc


@pytest.fixture
def two_turbines():
    mpc = make_mpc(s=(250.0, 450.0), horizon=36.0, cfl=0.9)
    mpc.to_dimensionless()
    perturb_controls(mpc, seed=1)
    return mpc
