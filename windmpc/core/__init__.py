"""Core abstractions for wind-farm MPC."""

from windmpc.core.controls import ControlTrajectory
from windmpc.core.errors import (
    MPCError,
    InvalidHorizon,
    InvalidReference,
    InvalidControlVectorLength,
    InconsistentScaleState,
)
from windmpc.core.horizon import TimeGrid, build_time_grid, resample_reference
from windmpc.core.model import AdjointForcing, WakeModel, AdjointWakeModel
from windmpc.core.problem import Evaluator
from windmpc.core.scaling import ScaleContext

__all__ = [
    "ControlTrajectory",
    "MPCError",
    "InvalidHorizon",
    "InvalidReference",
    "InvalidControlVectorLength",
    "InconsistentScaleState",
    "TimeGrid",
    "build_time_grid",
    "resample_reference",
    "AdjointForcing",
    "WakeModel",
    "AdjointWakeModel",
    "Evaluator",
    "ScaleContext",
]
