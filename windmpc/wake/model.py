"""Dynamic wake model of a row of turbines."""

import copy
from typing import Optional
import numpy as np
from numpy.typing import NDArray, ArrayLike
from scipy.interpolate import CubicSpline

from windmpc.core.model import AdjointForcing
from windmpc.wake.adjoint import DynamicWakeModelAdjoint
from windmpc.wake.parameters import WakeParameters, WakeScales, WakeGeometry


class DynamicWakeModel:
    """
    Reduced-order wake model with rotor dynamics.

    Each turbine i carries a rotor speed ω_i and a streamwise velocity
    deficit δu_i(x) that is advected at U∞, recovers as the wake expands and
    is forced by the turbine's thrust:

        ∂δu_i/∂t + U∞ ∂δu_i/∂x = -w_i δu_i + f_i G_i / d_i²
        I dω_i/dt = P_i / ω_i - τ_i

    with f_i = ½ Ctp(β_i) u_d,i², P_i = ½ ρ A Cp(β_i) u_d,i³ and the rotor
    disk velocity u_d,i = U∞ - Σ_n M_ni ∫ G_i δu_n dx summed over upstream
    turbines. Generator power is τ_i ω_i.

    Time stepping is explicit Euler with first-order upwind advection.
    """

    def __init__(
        self,
        params: WakeParameters,
        beta: ArrayLike,
        omega: ArrayLike,
        gen_torque: Optional[ArrayLike] = None,
        du: Optional[ArrayLike] = None,
    ):
        """
        Build a dimensional model.

        Args:
            params: Dimensional parameters
            beta: Pitch per turbine (degrees), scalar or (N,)
            omega: Rotor speed per turbine, scalar or (N,), positive
            gen_torque: Generator torque per turbine; defaults to the torque
                balancing the aerodynamic torque
            du: Velocity deficit (N, Nx); defaults to the steady wake
        """
        self.params = params
        self.scales = WakeScales.from_parameters(params)
        self.is_dimensionless = False
        self._set_geometry()

        N = params.N
        self.beta = _per_turbine(beta, N, "beta")
        self.omega = _per_turbine(omega, N, "omega")
        if np.any(self.omega <= 0.0):
            raise ValueError("rotor speed must be positive")

        if du is None:
            self.du = self._steady_wake()
        else:
            self.du = np.array(du, dtype=float)
            if self.du.shape != (N, params.Nx):
                raise ValueError(f"du must have shape {(N, params.Nx)}, got {self.du.shape}")
        self.u_d = self._disk_velocity(self.du)

        if gen_torque is None:
            self.gen_torque = self.aerodynamic_power / self.omega
        else:
            self.gen_torque = _per_turbine(gen_torque, N, "gen_torque")

    def _set_geometry(self) -> None:
        self.geometry = WakeGeometry.from_parameters(self.params)
        self._Cp = CubicSpline(self.params.beta_table, self.params.Cp_table)
        self._Ctp = CubicSpline(self.params.beta_table, self.params.Ctp_table)
        self._dCp = self._Cp.derivative()
        self._dCtp = self._Ctp.derivative()

    @property
    def N(self) -> int:
        return self.params.N

    @property
    def Nx(self) -> int:
        return self.params.Nx

    @property
    def dx(self) -> float:
        return self.geometry.dx

    @property
    def U_infty(self) -> float:
        return self.params.U_infty

    @property
    def inertia(self) -> float:
        return self.params.inertia

    @property
    def G(self) -> NDArray:
        return self.geometry.G

    @property
    def d(self) -> NDArray:
        return self.geometry.d

    @property
    def time_scale(self) -> float:
        return self.scales.TIME

    @property
    def power_scale(self) -> float:
        return self.scales.POWER

    @property
    def torque_scale(self) -> float:
        return self.scales.TORQUE

    @property
    def aerodynamic_power(self) -> NDArray:
        """Rotor power extracted from the flow, (N,)."""
        return (
            0.5 * self.params.rho * self.geometry.area
            * self._Cp(self.beta) * self.u_d**3
        )

    @property
    def power(self) -> NDArray:
        """Generator power per turbine, (N,)."""
        return self.gen_torque * self.omega

    @property
    def farm_power(self) -> float:
        return float(np.sum(self.power))

    def _disk_velocity(self, du: NDArray) -> NDArray:
        geo = self.geometry
        # (du @ G.T)[n, i] = Σ_j δu_nj G_ij
        return self.params.U_infty - geo.dx * np.sum(geo.M * (du @ geo.G.T), axis=0)

    def _steady_wake(self) -> NDArray:
        """Steady deficit for the current pitch, solved upstream to downstream."""
        p, geo = self.params, self.geometry
        du = np.zeros((p.N, p.Nx))
        rate = p.U_infty / geo.dx

        for i in np.argsort(p.s, kind="stable"):
            u_d = self._disk_velocity(du)[i]
            f = 0.5 * self._Ctp(self.beta[i]) * u_d**2
            source = f * geo.G[i] / geo.d[i] ** 2
            upstream = 0.0
            for j in range(p.Nx):
                du[i, j] = (rate * upstream + source[j]) / (rate + geo.w[i, j])
                upstream = du[i, j]

        return du

    def advance(self, beta: ArrayLike, gen_torque: ArrayLike, dt: float) -> None:
        """
        Advance by dt, then latch the new controls.

        The step uses the controls latched by the previous call, so new
        controls act on the next step's dynamics and on the generator power
        right away.
        """
        p, geo = self.params, self.geometry

        f = 0.5 * self._Ctp(self.beta) * self.u_d**2
        upstream = np.zeros_like(self.du)
        upstream[:, 1:] = self.du[:, :-1]
        ddu_dt = (
            -p.U_infty * (self.du - upstream) / geo.dx
            - geo.w * self.du
            + f[:, None] * geo.G / geo.d**2
        )
        domega_dt = (self.aerodynamic_power / self.omega - self.gen_torque) / p.inertia

        self.du = self.du + dt * ddu_dt
        self.omega = self.omega + dt * domega_dt
        self.beta = _per_turbine(beta, p.N, "beta")
        self.gen_torque = _per_turbine(gen_torque, p.N, "gen_torque")
        self.u_d = self._disk_velocity(self.du)

    def adjoint_values(self, Pref: float) -> AdjointForcing:
        """
        Local sensitivities of the step leaving the current state.

        Args:
            Pref: Reference farm power at the current step

        Returns:
            Forcing for the adjoint retraction and the pitch gradient
        """
        p, geo = self.params, self.geometry
        u_d, omega = self.u_d, self.omega
        half_rho_A = 0.5 * p.rho * geo.area
        Cp = self._Cp(self.beta)
        Ctp = self._Ctp(self.beta)

        return AdjointForcing(
            fstar=(Ctp * u_d)[:, None] * geo.G / geo.d**2,
            Uw=3.0 * half_rho_A * Cp * u_d**2 / (p.inertia * omega),
            Ww=-self.aerodynamic_power / (p.inertia * omega**2),
            Wj=2.0 * (self.farm_power - Pref) * self.gen_torque,
            Bw=-half_rho_A * self._dCp(self.beta) * u_d**3 / (p.inertia * omega),
            Bdu=-0.5 * self._dCtp(self.beta) * u_d**2,
        )

    def make_adjoint(self) -> "DynamicWakeModelAdjoint":
        return DynamicWakeModelAdjoint(
            self.params, scales=self.scales, is_dimensionless=self.is_dimensionless
        )

    def copy(self) -> "DynamicWakeModel":
        return copy.deepcopy(self)

    def to_dimensionless(self) -> None:
        if not self.is_dimensionless:
            self._rescale(-1)
            self.is_dimensionless = True

    def to_dimensional(self) -> None:
        if self.is_dimensionless:
            self._rescale(1)
            self.is_dimensionless = False

    def _rescale(self, exponent: int) -> None:
        sc = self.scales
        self.params = self.params.rescaled(sc, exponent)
        self._set_geometry()
        self.omega = self.omega * sc.TIME ** (-exponent)
        self.du = self.du * sc.VELOCITY**exponent
        self.gen_torque = self.gen_torque * sc.TORQUE**exponent
        self.u_d = self._disk_velocity(self.du)


def _per_turbine(value: ArrayLike, N: int, name: str) -> NDArray:
    value = np.asarray(value, dtype=float)
    if value.ndim == 0:
        return np.full(N, float(value))
    value = value.ravel()
    if value.shape != (N,):
        raise ValueError(f"{name} must have {N} entries, got {value.size}")
    return value.copy()
