"""Wake model collaborator protocols."""

from dataclasses import dataclass
from typing import Protocol
import numpy as np
from numpy.typing import NDArray


@dataclass
class AdjointForcing:
    """
    Quantities captured after a forward step that drive the adjoint.

    All scalar series are per turbine, shape (N,).
    """

    fstar: NDArray  # (N, Nx) deficit forcing sensitivity to disk velocity
    Uw: NDArray     # rotor acceleration sensitivity to disk velocity
    Ww: NDArray     # rotor acceleration sensitivity to rotor speed
    Wj: NDArray     # tracking-error forcing on rotor speed
    Bw: NDArray     # rotor pitch sensitivity
    Bdu: NDArray    # wake forcing pitch sensitivity

    @classmethod
    def zeros(cls, N: int, Nx: int) -> "AdjointForcing":
        return cls(
            fstar=np.zeros((N, Nx)),
            Uw=np.zeros(N),
            Ww=np.zeros(N),
            Wj=np.zeros(N),
            Bw=np.zeros(N),
            Bdu=np.zeros(N),
        )


class WakeModel(Protocol):
    """Reduced-order wake model advanced forward in time."""

    @property
    def N(self) -> int:
        """Number of turbines."""
        ...

    @property
    def Nx(self) -> int:
        """Number of streamwise grid points per wake."""
        ...

    @property
    def dx(self) -> float:
        """Streamwise grid spacing."""
        ...

    @property
    def U_infty(self) -> float:
        """Free-stream velocity."""
        ...

    @property
    def inertia(self) -> float:
        """Rotor rotational inertia."""
        ...

    @property
    def G(self) -> NDArray:
        """Forcing kernel, shape (N, Nx)."""
        ...

    @property
    def d(self) -> NDArray:
        """Normalized wake diameter, shape (N, Nx)."""
        ...

    beta: NDArray        # (N,) latched pitch
    gen_torque: NDArray  # (N,) latched generator torque
    omega: NDArray       # (N,) rotor speed

    @property
    def farm_power(self) -> float:
        """Sum of generator power over all turbines."""
        ...

    @property
    def is_dimensionless(self) -> bool:
        ...

    @property
    def time_scale(self) -> float:
        ...

    @property
    def power_scale(self) -> float:
        ...

    @property
    def torque_scale(self) -> float:
        ...

    def advance(self, beta: NDArray, gen_torque: NDArray, dt: float) -> None:
        """Step the model forward by dt with the given controls."""
        ...

    def adjoint_values(self, Pref: float) -> AdjointForcing:
        """Adjoint forcing at the current state against reference power Pref."""
        ...

    def make_adjoint(self) -> "AdjointWakeModel":
        """Adjoint model sharing this model's parameters, at zero state."""
        ...

    def copy(self) -> "WakeModel":
        """Independent copy with disjoint storage."""
        ...

    def to_dimensionless(self) -> None:
        ...

    def to_dimensional(self) -> None:
        ...


class AdjointWakeModel(Protocol):
    """Discrete adjoint of a wake model, integrated backward in time."""

    omega_star: NDArray  # (N,) rotor speed adjoint
    du_star: NDArray     # (N, Nx) wake deficit adjoint per unit length

    @property
    def is_dimensionless(self) -> bool:
        ...

    def retract(self, forcing: AdjointForcing, dt: float) -> None:
        """Step the adjoint backward by dt using forcing of the later step."""
        ...

    def copy(self) -> "AdjointWakeModel":
        ...

    def to_dimensionless(self) -> None:
        ...

    def to_dimensional(self) -> None:
        ...
