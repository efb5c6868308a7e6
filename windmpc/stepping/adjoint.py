"""Backward adjoint pass and gradient assembly."""

import numpy as np
from numpy.typing import NDArray

from windmpc.core.model import WakeModel, AdjointWakeModel
from windmpc.stepping.history import ForcingHistory


def backward_sweep(
    adjoint: AdjointWakeModel,
    model: WakeModel,
    history: ForcingHistory,
    dt: float,
) -> tuple[NDArray, NDArray]:
    """
    Integrate the adjoint backward and assemble the control gradients.

    For k = Nt-2, ..., 1:
        1. Retract the adjoint with the forcing of step k+1
        2. grad_beta[:, k] = Bw_k ω* dt + Bdu_k Σ_j (δu*_j G_j / d_j²) dx dt
        3. grad_gen_torque[:, k] = ω* dt / I

    The adjoint after step 1 is the multiplier of the state at k+1, which is
    where the controls of column k act. Column 0 is the fixed initial condition
    and is left at zero.

    Args:
        adjoint: Adjoint model at its terminal (zero) condition, mutated
        model: Forward model, supplies the kernel G, diameter d, dx and inertia
        history: Forcing captured by the forward pass
        dt: Step size

    Returns:
        grad_beta: Pitch gradient (N, Nt)
        grad_gen_torque: Adjoint torque contribution (N, Nt); the direct
            contribution from the forward pass is added by the caller
    """
    Nt, N = history.Nt, history.N
    grad_beta = np.zeros((N, Nt))
    grad_gen_torque = np.zeros((N, Nt))

    kernel = model.G / model.d**2 * model.dx

    for k in range(Nt - 2, 0, -1):
        adjoint.retract(history.at(k + 1), dt)

        grad_beta[:, k] = (
            history.Bw[k] * adjoint.omega_star * dt
            + history.Bdu[k] * np.sum(adjoint.du_star * kernel, axis=1) * dt
        )
        grad_gen_torque[:, k] = adjoint.omega_star / model.inertia * dt

    return grad_beta, grad_gen_torque
