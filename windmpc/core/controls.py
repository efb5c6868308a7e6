"""Control trajectory storage."""

from dataclasses import dataclass
import numpy as np
from numpy.typing import NDArray, ArrayLike


@dataclass
class ControlTrajectory:
    """
    Decision variables over turbines x time steps.

    Column 0 holds the wake model's operating point at the start of the
    horizon and is never a decision variable.
    """

    beta: NDArray               # (N, Nt) blade pitch
    gen_torque: NDArray         # (N, Nt) generator torque
    grad_beta: NDArray          # (N, Nt) adjoint gradient
    grad_gen_torque: NDArray    # (N, Nt)
    fdgrad_beta: NDArray        # (N, Nt) finite-difference gradient
    fdgrad_gen_torque: NDArray  # (N, Nt)

    @classmethod
    def hold(cls, beta0: ArrayLike, gen_torque0: ArrayLike, Nt: int) -> "ControlTrajectory":
        """Trajectory holding the initial operating point over the whole horizon."""
        beta0 = np.asarray(beta0, dtype=float).ravel()
        gen_torque0 = np.asarray(gen_torque0, dtype=float).ravel()
        if beta0.shape != gen_torque0.shape:
            raise ValueError("pitch and torque operating points differ in length")

        shape = (beta0.size, Nt)
        return cls(
            beta=np.repeat(beta0[:, None], Nt, axis=1),
            gen_torque=np.repeat(gen_torque0[:, None], Nt, axis=1),
            grad_beta=np.zeros(shape),
            grad_gen_torque=np.zeros(shape),
            fdgrad_beta=np.zeros(shape),
            fdgrad_gen_torque=np.zeros(shape),
        )

    @property
    def N(self) -> int:
        """Number of turbines."""
        return self.beta.shape[0]

    @property
    def Nt(self) -> int:
        """Number of time steps."""
        return self.beta.shape[1]

    @property
    def num_decisions(self) -> int:
        """Length of the packed decision vector."""
        return 2 * self.N * (self.Nt - 1)

    def copy(self) -> "ControlTrajectory":
        return ControlTrajectory(
            beta=self.beta.copy(),
            gen_torque=self.gen_torque.copy(),
            grad_beta=self.grad_beta.copy(),
            grad_gen_torque=self.grad_gen_torque.copy(),
            fdgrad_beta=self.fdgrad_beta.copy(),
            fdgrad_gen_torque=self.fdgrad_gen_torque.copy(),
        )
