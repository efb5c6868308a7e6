"""Full-horizon storage of adjoint forcing."""

from dataclasses import dataclass
import numpy as np
from numpy.typing import NDArray

from windmpc.core.model import AdjointForcing


@dataclass
class ForcingHistory:
    """Adjoint forcing captured at every step of the forward pass."""

    fstar: NDArray  # (Nt, N, Nx)
    Uw: NDArray     # (Nt, N)
    Ww: NDArray     # (Nt, N)
    Wj: NDArray     # (Nt, N)
    Bw: NDArray     # (Nt, N)
    Bdu: NDArray    # (Nt, N)

    @classmethod
    def allocate(cls, Nt: int, N: int, Nx: int) -> "ForcingHistory":
        return cls(
            fstar=np.zeros((Nt, N, Nx)),
            Uw=np.zeros((Nt, N)),
            Ww=np.zeros((Nt, N)),
            Wj=np.zeros((Nt, N)),
            Bw=np.zeros((Nt, N)),
            Bdu=np.zeros((Nt, N)),
        )

    @property
    def Nt(self) -> int:
        return self.fstar.shape[0]

    @property
    def N(self) -> int:
        return self.fstar.shape[1]

    @property
    def Nx(self) -> int:
        return self.fstar.shape[2]

    def reset(self) -> None:
        for buffer in (self.fstar, self.Uw, self.Ww, self.Wj, self.Bw, self.Bdu):
            buffer.fill(0.0)

    def store(self, k: int, forcing: AdjointForcing) -> None:
        self.fstar[k] = forcing.fstar
        self.Uw[k] = forcing.Uw
        self.Ww[k] = forcing.Ww
        self.Wj[k] = forcing.Wj
        self.Bw[k] = forcing.Bw
        self.Bdu[k] = forcing.Bdu

    def at(self, k: int) -> AdjointForcing:
        """Forcing of step k (views into the buffers)."""
        return AdjointForcing(
            fstar=self.fstar[k],
            Uw=self.Uw[k],
            Ww=self.Ww[k],
            Wj=self.Wj[k],
            Bw=self.Bw[k],
            Bdu=self.Bdu[k],
        )
