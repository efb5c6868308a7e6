"""Finite-difference verification of the adjoint gradient."""

from dataclasses import dataclass
import logging
from typing import Optional
import numpy as np
from numpy.typing import NDArray

logger = logging.getLogger(__name__)


@dataclass
class GradientCheck:
    """Adjoint and finite-difference gradients over the decision columns."""

    grad_beta: NDArray          # (N, Nt-1)
    grad_gen_torque: NDArray    # (N, Nt-1)
    fdgrad_beta: NDArray        # (N, Nt-1)
    fdgrad_gen_torque: NDArray  # (N, Nt-1)

    @property
    def max_error(self) -> float:
        """Largest absolute adjoint/finite-difference discrepancy."""
        return float(
            max(
                np.max(np.abs(self.grad_beta - self.fdgrad_beta)),
                np.max(np.abs(self.grad_gen_torque - self.fdgrad_gen_torque)),
            )
        )

    @property
    def max_gradient(self) -> float:
        return float(
            max(np.max(np.abs(self.grad_beta)), np.max(np.abs(self.grad_gen_torque)))
        )


def finite_difference_gradient(
    mpc, step: Optional[float] = None
) -> tuple[NDArray, NDArray]:
    """
    Forward-difference gradient of the tracking cost.

    Every decision value is perturbed on its own clone of the solve instance,
    so the trajectory and last solve result of mpc are left untouched. The
    differences are taken in dimensionless units, where controls and cost are
    O(1), and converted to the current units of mpc. The estimates are stored
    in mpc.controls.fdgrad_beta / fdgrad_gen_torque.

    Args:
        mpc: Solve instance providing clone(), run() and to_dimensionless()
        step: Dimensionless perturbation size; defaults to sqrt(machine epsilon)

    Returns:
        fdgrad_beta, fdgrad_gen_torque, each (N, Nt) with column 0 zero
    """
    if step is None:
        step = np.sqrt(np.finfo(float).eps)

    work = mpc.clone()
    work.to_dimensionless()

    N, Nt = work.controls.N, work.controls.Nt
    baseline = work.clone().run().cost

    fdgrad_beta = np.zeros((N, Nt))
    fdgrad_gen_torque = np.zeros((N, Nt))

    for n in range(N):
        for k in range(1, Nt):
            perturbed = work.clone()
            perturbed.controls.beta[n, k] += step
            fdgrad_beta[n, k] = (perturbed.run().cost - baseline) / step

    for n in range(N):
        for k in range(1, Nt):
            perturbed = work.clone()
            perturbed.controls.gen_torque[n, k] += step
            fdgrad_gen_torque[n, k] = (perturbed.run().cost - baseline) / step

    if not mpc.is_dimensionless:
        fdgrad_beta *= mpc.scale.unit(power=2, time=1)
        fdgrad_gen_torque *= mpc.scale.unit(power=2, time=1, torque=-1)

    mpc.controls.fdgrad_beta = fdgrad_beta
    mpc.controls.fdgrad_gen_torque = fdgrad_gen_torque
    return fdgrad_beta, fdgrad_gen_torque


def check_gradient(mpc, step: Optional[float] = None) -> GradientCheck:
    """Run the adjoint solve and compare it with finite differences."""
    mpc.run()
    finite_difference_gradient(mpc, step)

    c = mpc.controls
    check = GradientCheck(
        grad_beta=c.grad_beta[:, 1:].copy(),
        grad_gen_torque=c.grad_gen_torque[:, 1:].copy(),
        fdgrad_beta=c.fdgrad_beta[:, 1:].copy(),
        fdgrad_gen_torque=c.fdgrad_gen_torque[:, 1:].copy(),
    )
    logger.info(
        "gradient check: max |adjoint - fd| = %.3e, max |adjoint| = %.3e",
        check.max_error,
        check.max_gradient,
    )
    return check
