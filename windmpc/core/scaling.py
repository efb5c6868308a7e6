"""Dimensional scale context."""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class ScaleContext:
    """
    Scale constants of a solve instance and its current unit regime.

    The constants come from the wake model and never change. A new context is
    produced on each regime change, so a given instance describes exactly one
    regime.
    """

    TIME: float
    POWER: float
    TORQUE: float
    is_dimensionless: bool = False

    @classmethod
    def from_model(cls, model) -> "ScaleContext":
        """Scale constants of a wake model, in the model's current regime."""
        return cls(
            TIME=float(model.time_scale),
            POWER=float(model.power_scale),
            TORQUE=float(model.torque_scale),
            is_dimensionless=bool(model.is_dimensionless),
        )

    def unit(self, time: int = 0, power: int = 0, torque: int = 0) -> float:
        """Dimensional unit of a quantity with the given exponents."""
        return self.TIME**time * self.POWER**power * self.TORQUE**torque

    def dimensionless(self) -> "ScaleContext":
        return replace(self, is_dimensionless=True)

    def dimensional(self) -> "ScaleContext":
        return replace(self, is_dimensionless=False)
