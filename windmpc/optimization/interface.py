"""Single-horizon MPC problem exposed to external optimizers."""

from dataclasses import dataclass, replace
import copy
import logging
from typing import Optional
import numpy as np
from numpy.typing import NDArray, ArrayLike

from windmpc.core.controls import ControlTrajectory
from windmpc.core.errors import InconsistentScaleState
from windmpc.core.horizon import build_time_grid, resample_reference
from windmpc.core.model import WakeModel
from windmpc.core.scaling import ScaleContext
from windmpc.stepping.history import ForcingHistory
from windmpc.stepping.forward import forward_sweep
from windmpc.stepping.adjoint import backward_sweep
from windmpc.optimization.packing import pack_controls, unpack_controls
from windmpc.optimization.verification import (
    GradientCheck,
    check_gradient,
    finite_difference_gradient,
)

logger = logging.getLogger(__name__)


@dataclass
class SolveResult:
    """Cost and gradients of one forward-backward run."""

    cost: float
    grad_beta: NDArray        # (N, Nt)
    grad_gen_torque: NDArray  # (N, Nt)


class TurbinesMPC:
    """
    Power-tracking problem over one control horizon.

    Provides J(u) and ∇J(u) for the pitch and generator-torque trajectories,

        J = Σ_{k=1}^{Nt-1} dt (Pfarm_k - Pref_k)²,

    computed by a forward pass of the wake model that stores the adjoint
    forcing followed by a backward pass of its adjoint.
    """

    def __init__(
        self,
        wake_model: WakeModel,
        t0: float,
        horizon: float,
        cfl: float,
        time: ArrayLike,
        Pref: ArrayLike,
    ):
        """
        Initialize the problem at the wake model's current operating point.

        Args:
            wake_model: Wake model at the start of the horizon (copied)
            t0: Start time
            horizon: Requested horizon length
            cfl: Courant number setting dt = cfl * dx / U∞
            time: Reference sample times
            Pref: Reference farm power at the sample times
        """
        self.initial_model = wake_model.copy()
        self.initial_model.to_dimensional()
        self.model = self.initial_model.copy()
        self.initial_adjoint = self.model.make_adjoint()
        self.adjoint = self.initial_adjoint.copy()
        self.scale = ScaleContext.from_model(self.model)

        self.N = self.model.N
        self.cfl = cfl
        self.grid = build_time_grid(t0, horizon, cfl, self.model.dx, self.model.U_infty)
        self.Pref = resample_reference(time, Pref, self.grid.t)

        self.controls = ControlTrajectory.hold(
            self.initial_model.beta, self.initial_model.gen_torque, self.grid.Nt
        )
        self.Pfarm = np.zeros(self.grid.Nt)
        self.Pfarm[0] = self.model.farm_power
        self.cost = 0.0

        # Forcing buffers live exactly as long as the instance (see release)
        self.history = ForcingHistory.allocate(self.grid.Nt, self.N, self.model.Nx)

        logger.debug(
            "horizon: N=%d, Nt=%d, dt=%.6g, t=[%.6g, %.6g]",
            self.N, self.Nt, self.dt, self.grid.t[0], self.grid.t[-1],
        )

    @property
    def Nt(self) -> int:
        return self.grid.Nt

    @property
    def dt(self) -> float:
        return self.grid.dt

    @property
    def t(self) -> NDArray:
        return self.grid.t

    @property
    def is_dimensionless(self) -> bool:
        return self.scale.is_dimensionless

    def _models(self) -> dict:
        return {
            "model": self.model,
            "initial_model": self.initial_model,
            "adjoint": self.adjoint,
            "initial_adjoint": self.initial_adjoint,
        }

    def _check_scale_state(self) -> None:
        mismatched = [
            name
            for name, m in self._models().items()
            if m.is_dimensionless != self.scale.is_dimensionless
        ]
        if mismatched:
            regime = "dimensionless" if self.scale.is_dimensionless else "dimensional"
            raise InconsistentScaleState(
                f"solve instance is {regime} but {', '.join(mismatched)} is not"
            )

    def _require_buffers(self) -> None:
        if self.history is None:
            raise RuntimeError("solve instance has been released")

    def to_dimensionless(self) -> None:
        """Express all owned state in nondimensional units (no-op if already)."""
        self._check_scale_state()
        if self.scale.is_dimensionless:
            return
        self._rescale(-1)
        for m in self._models().values():
            m.to_dimensionless()
        self.scale = self.scale.dimensionless()
        logger.debug("converted to dimensionless units")

    def to_dimensional(self) -> None:
        """Express all owned state in dimensional units (no-op if already)."""
        self._check_scale_state()
        if not self.scale.is_dimensionless:
            return
        self._rescale(1)
        for m in self._models().values():
            m.to_dimensional()
        self.scale = self.scale.dimensional()
        logger.debug("converted to dimensional units")

    def _rescale(self, exponent: int) -> None:
        """Multiply every owned dimensional quantity by its unit**exponent."""
        def factor(**exponents) -> float:
            return self.scale.unit(**exponents) ** exponent

        self.grid = self.grid.scaled(factor(time=1))
        self.Pref = self.Pref * factor(power=1)
        self.Pfarm = self.Pfarm * factor(power=1)
        self.cost = self.cost * factor(power=2, time=1)

        c = self.controls
        c.gen_torque = c.gen_torque * factor(torque=1)
        c.grad_beta = c.grad_beta * factor(power=2, time=1)
        c.fdgrad_beta = c.fdgrad_beta * factor(power=2, time=1)
        c.grad_gen_torque = c.grad_gen_torque * factor(power=2, time=1, torque=-1)
        c.fdgrad_gen_torque = c.fdgrad_gen_torque * factor(power=2, time=1, torque=-1)

    def run(self) -> SolveResult:
        """
        Forward-backward solve for the current control trajectory.

        Returns:
            Cost and gradients; also stored on the instance
        """
        self._require_buffers()
        self._check_scale_state()
        c = self.controls

        self.model = self.initial_model.copy()
        forward = forward_sweep(
            self.model, c.beta, c.gen_torque, self.Pref, self.dt, self.history
        )

        self.adjoint = self.initial_adjoint.copy()
        grad_beta, grad_gen_torque = backward_sweep(
            self.adjoint, self.model, self.history, self.dt
        )

        self.cost = forward.cost
        self.Pfarm = forward.Pfarm
        c.grad_beta = grad_beta
        c.grad_gen_torque = forward.grad_gen_torque + grad_gen_torque

        return SolveResult(
            cost=self.cost,
            grad_beta=c.grad_beta.copy(),
            grad_gen_torque=c.grad_gen_torque.copy(),
        )

    def evaluate(self, x: ArrayLike) -> tuple[float, NDArray]:
        """
        Objective and gradient for a packed decision vector.

        Args:
            x: Decision vector of length 2*N*(Nt-1), see pack_controls

        Returns:
            f: Tracking cost
            g: Gradient in the same layout as x
        """
        beta, gen_torque = unpack_controls(x, self.N, self.Nt)
        self._require_buffers()
        self._check_scale_state()
        self.controls.beta[:, 1:] = beta
        self.controls.gen_torque[:, 1:] = gen_torque

        self.run()
        logger.debug("evaluate: cost = %.10e", self.cost)

        g = pack_controls(self.controls.grad_beta, self.controls.grad_gen_torque)
        return self.cost, g

    def get_control_vector(self) -> NDArray:
        """Current decision vector, used to seed the optimizer."""
        return pack_controls(self.controls.beta, self.controls.gen_torque)

    def finite_difference_gradient(self, step: Optional[float] = None) -> tuple[NDArray, NDArray]:
        """Finite-difference gradient estimate; see verification module."""
        return finite_difference_gradient(self, step)

    def check_gradient(self, step: Optional[float] = None) -> GradientCheck:
        """Run the solver and compare its gradient with finite differences."""
        return check_gradient(self, step)

    def clone(self) -> "TurbinesMPC":
        """Independent copy sharing no mutable storage with this instance."""
        other = copy.copy(self)
        for name, m in self._models().items():
            setattr(other, name, m.copy())
        other.grid = replace(self.grid, t=self.grid.t.copy())
        other.Pref = self.Pref.copy()
        other.Pfarm = self.Pfarm.copy()
        other.controls = self.controls.copy()
        if self.history is not None:
            other.history = ForcingHistory.allocate(self.Nt, self.N, self.history.Nx)
        return other

    def release(self) -> None:
        """Free the forcing buffers; the instance can no longer be run."""
        self.history = None

    def __enter__(self) -> "TurbinesMPC":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
