"""Optimizer-facing problem protocol."""

from typing import Protocol
from numpy.typing import NDArray


class Evaluator(Protocol):
    """Provides (f, g) for a flat decision vector to an external optimizer."""

    def evaluate(self, x: NDArray) -> tuple[float, NDArray]:
        """
        Objective and gradient at x.

        Args:
            x: Flat decision vector

        Returns:
            f: Objective value
            g: Gradient, same shape as x
        """
        ...

    def get_control_vector(self) -> NDArray:
        """Current decision vector, used to seed the optimizer."""
        ...
