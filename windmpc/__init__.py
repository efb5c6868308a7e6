"""
Windmpc: adjoint-based model predictive control for wind-farm power tracking.

This library computes, for one control horizon:
- The quadratic cost of tracking a farm power reference
- Its exact gradient with respect to blade pitch and generator torque, via a
  forward wake-model pass and a backward adjoint pass
- A finite-difference check of that gradient
"""

import logging

__version__ = "0.1.0"

from windmpc.core.errors import (
    MPCError,
    InvalidHorizon,
    InvalidReference,
    InvalidControlVectorLength,
    InconsistentScaleState,
)
from windmpc.optimization.interface import TurbinesMPC, SolveResult
from windmpc.optimization.driver import optimize
from windmpc.wake.model import DynamicWakeModel
from windmpc.wake.parameters import WakeParameters

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "MPCError",
    "InvalidHorizon",
    "InvalidReference",
    "InvalidControlVectorLength",
    "InconsistentScaleState",
    "TurbinesMPC",
    "SolveResult",
    "optimize",
    "DynamicWakeModel",
    "WakeParameters",
]
