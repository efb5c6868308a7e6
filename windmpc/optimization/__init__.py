"""Optimization interface for external optimizers."""

from windmpc.optimization.interface import TurbinesMPC, SolveResult
from windmpc.optimization.packing import pack_controls, unpack_controls, control_index
from windmpc.optimization.verification import (
    GradientCheck,
    check_gradient,
    finite_difference_gradient,
)
from windmpc.optimization.driver import optimize

__all__ = [
    "TurbinesMPC",
    "SolveResult",
    "pack_controls",
    "unpack_controls",
    "control_index",
    "GradientCheck",
    "check_gradient",
    "finite_difference_gradient",
    "optimize",
]
