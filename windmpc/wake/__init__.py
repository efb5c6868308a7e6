"""Reference dynamic wake model and its discrete adjoint."""

from windmpc.wake.parameters import WakeParameters, WakeScales, WakeGeometry
from windmpc.wake.adjoint import DynamicWakeModelAdjoint
from windmpc.wake.model import DynamicWakeModel

__all__ = [
    "WakeParameters",
    "WakeScales",
    "WakeGeometry",
    "DynamicWakeModel",
    "DynamicWakeModelAdjoint",
]
