"""Physical parameters, scales and geometry of the dynamic wake model."""

from dataclasses import dataclass, field, replace
import numpy as np
from numpy.typing import NDArray
from scipy.special import expit


def _default_beta() -> NDArray:
    return np.array([-4.0, 0.0, 4.0, 8.0, 12.0, 16.0, 20.0, 24.0])


def _default_Cp() -> NDArray:
    return np.array([0.42, 0.47, 0.44, 0.38, 0.31, 0.24, 0.18, 0.13])


def _default_Ctp() -> NDArray:
    return np.array([1.45, 1.33, 1.15, 0.95, 0.76, 0.59, 0.45, 0.34])


@dataclass(frozen=True)
class WakeParameters:
    """Wake model parameters; pitch tables are in degrees."""

    s: NDArray        # (N,) streamwise turbine positions
    U_infty: float    # free-stream velocity
    Delta: float      # forcing kernel width
    k: float          # wake expansion coefficient
    Dia: float        # rotor diameter
    rho: float        # air density
    inertia: float    # rotor rotational inertia
    Lx: float         # streamwise domain length
    Nx: int           # grid points per wake
    beta_table: NDArray = field(default_factory=_default_beta)
    Cp_table: NDArray = field(default_factory=_default_Cp)
    Ctp_table: NDArray = field(default_factory=_default_Ctp)

    def __post_init__(self):
        for name in ("s", "beta_table", "Cp_table", "Ctp_table"):
            object.__setattr__(
                self, name, np.atleast_1d(np.asarray(getattr(self, name), dtype=float))
            )

        if self.Nx < 2:
            raise ValueError(f"Nx must be at least 2, got {self.Nx}")
        for name in ("U_infty", "Delta", "Dia", "rho", "inertia", "Lx"):
            if not getattr(self, name) > 0.0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)!r}")
        if self.k < 0.0:
            raise ValueError(f"k must be nonnegative, got {self.k!r}")
        if not (self.beta_table.shape == self.Cp_table.shape == self.Ctp_table.shape):
            raise ValueError("pitch, Cp and Ctp tables must have the same length")
        if self.beta_table.size < 2 or np.any(np.diff(self.beta_table) <= 0.0):
            raise ValueError("pitch table must be strictly increasing with 2+ entries")

    @property
    def N(self) -> int:
        return self.s.shape[0]

    def rescaled(self, scales: "WakeScales", exponent: int) -> "WakeParameters":
        """
        Parameters with every dimensional value multiplied by unit**exponent.

        exponent = -1 converts dimensional values to dimensionless ones and
        exponent = +1 converts back.
        """
        L = scales.LENGTH**exponent
        return replace(
            self,
            s=self.s * L,
            U_infty=self.U_infty * scales.VELOCITY**exponent,
            Delta=self.Delta * L,
            Dia=self.Dia * L,
            rho=self.rho * scales.DENSITY**exponent,
            inertia=self.inertia * scales.INERTIA**exponent,
            Lx=self.Lx * L,
        )


@dataclass(frozen=True)
class WakeScales:
    """Dimensional units, fixed when the model is built in dimensional form."""

    LENGTH: float
    VELOCITY: float
    TIME: float
    POWER: float
    TORQUE: float

    @classmethod
    def from_parameters(cls, params: WakeParameters) -> "WakeScales":
        LENGTH = params.Dia
        VELOCITY = params.U_infty
        TIME = LENGTH / VELOCITY
        POWER = 0.5 * params.rho * 0.25 * np.pi * params.Dia**2 * params.U_infty**3
        return cls(
            LENGTH=LENGTH,
            VELOCITY=VELOCITY,
            TIME=TIME,
            POWER=POWER,
            TORQUE=POWER * TIME,
        )

    @property
    def DENSITY(self) -> float:
        return self.POWER / (self.LENGTH**2 * self.VELOCITY**3)

    @property
    def INERTIA(self) -> float:
        return self.TORQUE * self.TIME**2


@dataclass(frozen=True)
class WakeGeometry:
    """Grid and time-invariant coefficient fields derived from the parameters."""

    x: NDArray    # (Nx,) streamwise grid
    dx: float
    G: NDArray    # (N, Nx) unit Gaussian forcing kernel
    d: NDArray    # (N, Nx) normalized wake diameter
    w: NDArray    # (N, Nx) wake recovery rate
    M: NDArray    # (N, N) M[n, i] = 1 if turbine n is upstream of turbine i
    area: float   # rotor area

    @classmethod
    def from_parameters(cls, params: WakeParameters) -> "WakeGeometry":
        x = np.linspace(0.0, params.Lx, params.Nx)
        dx = x[1] - x[0]

        offset = x[None, :] - params.s[:, None]
        xi = offset / params.Dia
        d = 1.0 + 2.0 * params.k * np.logaddexp(0.0, xi)
        dd_dx = 2.0 * params.k * expit(xi) / params.Dia
        w = 2.0 * params.U_infty * dd_dx / d

        G = np.exp(-0.5 * (offset / params.Delta) ** 2) / (
            np.sqrt(2.0 * np.pi) * params.Delta
        )
        M = (params.s[:, None] < params.s[None, :]).astype(float)

        return cls(
            x=x,
            dx=dx,
            G=G,
            d=d,
            w=w,
            M=M,
            area=0.25 * np.pi * params.Dia**2,
        )
