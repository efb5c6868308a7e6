"""Forward pass of the tracking problem."""

from dataclasses import dataclass
import numpy as np
from numpy.typing import NDArray

from windmpc.core.model import WakeModel
from windmpc.stepping.history import ForcingHistory


@dataclass
class ForwardResult:
    """Output of the forward pass."""

    cost: float
    Pfarm: NDArray            # (Nt,) farm power at every step
    grad_gen_torque: NDArray  # (N, Nt) direct torque contribution to the gradient


def forward_sweep(
    model: WakeModel,
    beta: NDArray,
    gen_torque: NDArray,
    Pref: NDArray,
    dt: float,
    history: ForcingHistory,
) -> ForwardResult:
    """
    Advance the wake model over the horizon and accumulate the tracking cost.

    For k = 1, ..., Nt-1:
        1. Advance the model with controls of column k
        2. Store the adjoint forcing of step k in history
        3. cost += dt * (Pfarm_k - Pref_k)^2
        4. Direct torque gradient 2 (Pfarm_k - Pref_k) omega_k dt, since
           generator power is torque times rotor speed

    Column 0 is the initial condition; its forcing is stored but it adds
    nothing to the cost.

    Args:
        model: Wake model at the initial condition (mutated in place)
        beta: Pitch trajectory (N, Nt)
        gen_torque: Torque trajectory (N, Nt)
        Pref: Reference farm power (Nt,)
        dt: Step size
        history: Forcing buffer sized for this horizon (overwritten)

    Returns:
        Cost, farm power trajectory and direct torque gradient
    """
    N, Nt = beta.shape
    history.reset()

    Pfarm = np.zeros(Nt)
    grad_gen_torque = np.zeros((N, Nt))
    cost = 0.0

    Pfarm[0] = model.farm_power
    history.store(0, model.adjoint_values(Pref[0]))

    for k in range(1, Nt):
        model.advance(beta[:, k], gen_torque[:, k], dt)
        history.store(k, model.adjoint_values(Pref[k]))

        Pfarm[k] = model.farm_power
        error = Pfarm[k] - Pref[k]
        cost += dt * error**2
        grad_gen_torque[:, k] = 2.0 * error * model.omega * dt

    return ForwardResult(cost=cost, Pfarm=Pfarm, grad_gen_torque=grad_gen_torque)
