"""Forward and adjoint sweeps over the control horizon."""

from windmpc.stepping.history import ForcingHistory
from windmpc.stepping.forward import ForwardResult, forward_sweep
from windmpc.stepping.adjoint import backward_sweep

__all__ = [
    "ForcingHistory",
    "ForwardResult",
    "forward_sweep",
    "backward_sweep",
]
