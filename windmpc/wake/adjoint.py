"""Discrete adjoint of the dynamic wake model."""

import copy
from typing import Optional
import numpy as np

from windmpc.core.model import AdjointForcing
from windmpc.wake.parameters import WakeParameters, WakeScales, WakeGeometry


class DynamicWakeModelAdjoint:
    """
    Adjoint of DynamicWakeModel.advance, stepped backward in time.

    Multipliers follow the convention L = J + Σ λ_{k+1}ᵀ (x_{k+1} - F(x_k, u_k)),
    so λ = -∂J/∂x at the terminal step. The deficit multiplier is stored per
    unit length: du_star = λ_δu / dx.
    """

    def __init__(
        self,
        params: WakeParameters,
        scales: Optional[WakeScales] = None,
        is_dimensionless: bool = False,
    ):
        self.params = params
        self.scales = WakeScales.from_parameters(params) if scales is None else scales
        self.is_dimensionless = is_dimensionless
        self.geometry = WakeGeometry.from_parameters(params)
        self.omega_star = np.zeros(params.N)
        self.du_star = np.zeros((params.N, params.Nx))

    def retract(self, forcing: AdjointForcing, dt: float) -> None:
        """
        λ_k = -∂J_k/∂x_k + (∂F/∂x)ᵀ λ_{k+1}, with the Jacobian of the step
        leaving x_k encoded in forcing.
        """
        p, geo = self.params, self.geometry
        courant = dt * p.U_infty / geo.dx

        # Sensitivity routed through each turbine's disk velocity
        via_disk = dt * (
            forcing.Uw * self.omega_star
            + geo.dx * np.sum(forcing.fstar * self.du_star, axis=1)
        )

        downstream = np.zeros_like(self.du_star)
        downstream[:, :-1] = self.du_star[:, 1:]

        self.du_star = (
            self.du_star * (1.0 - courant - dt * geo.w)
            + courant * downstream
            - geo.M @ (via_disk[:, None] * geo.G)
        )
        self.omega_star = self.omega_star * (1.0 + dt * forcing.Ww) - dt * forcing.Wj

    def copy(self) -> "DynamicWakeModelAdjoint":
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
        self.geometry = WakeGeometry.from_parameters(self.params)
        # λ_ω ~ cost / rotor speed, du_star ~ cost / (velocity * length)
        self.omega_star = self.omega_star * (sc.POWER**2 * sc.TIME**2) ** exponent
        self.du_star = self.du_star * (
            sc.POWER**2 * sc.TIME / (sc.VELOCITY * sc.LENGTH)
        ) ** exponent
