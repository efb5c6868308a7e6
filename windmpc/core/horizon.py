"""Control horizon discretization and reference resampling."""

from dataclasses import dataclass
import math
import numpy as np
from numpy.typing import NDArray, ArrayLike

from windmpc.core.errors import InvalidHorizon, InvalidReference


@dataclass(frozen=True)
class TimeGrid:
    """Uniform time grid of the control horizon."""

    t0: float
    dt: float
    t: NDArray  # (Nt,) sample times t0 + i*dt

    @property
    def Nt(self) -> int:
        """Number of time steps, including the fixed initial one."""
        return self.t.shape[0]

    def scaled(self, factor: float) -> "TimeGrid":
        """Same grid with every time multiplied by factor."""
        return TimeGrid(t0=self.t0 * factor, dt=self.dt * factor, t=self.t * factor)


def build_time_grid(
    t0: float,
    horizon: float,
    cfl: float,
    dx: float,
    U_infty: float,
) -> TimeGrid:
    """
    Discretize the horizon with the wake model's stable step.

    dt = cfl * dx / U_infty and Nt = ceil(horizon / dt), so the realized
    horizon may exceed the requested one by less than one step.

    Args:
        t0: Start time
        horizon: Requested horizon length
        cfl: Courant number
        dx: Wake model grid spacing
        U_infty: Free-stream velocity

    Returns:
        Time grid with Nt >= 2 samples

    Raises:
        InvalidHorizon: dt is not a positive finite number, or Nt < 2
    """
    dt = cfl * dx / U_infty
    if not (np.isfinite(dt) and dt > 0.0):
        raise InvalidHorizon(
            f"derived time step must be positive, got dt={dt!r} "
            f"(cfl={cfl!r}, dx={dx!r}, U_infty={U_infty!r})"
        )
    if not np.isfinite(horizon):
        raise InvalidHorizon(f"horizon length must be finite, got {horizon!r}")

    Nt = math.ceil(horizon / dt)
    if Nt < 2:
        raise InvalidHorizon(
            f"horizon {horizon!r} with dt={dt!r} gives Nt={Nt}; at least 2 steps needed"
        )

    t = t0 + dt * np.arange(Nt)
    return TimeGrid(t0=float(t0), dt=float(dt), t=t)


def resample_reference(time: ArrayLike, Pref: ArrayLike, t: NDArray) -> NDArray:
    """
    Piecewise-linear resampling of reference power onto the horizon grid.

    Reference times outside the sampled range are rejected rather than
    extrapolated.

    Args:
        time: Reference sample times, strictly increasing
        Pref: Reference power at each sample time
        t: Horizon grid times

    Returns:
        Reference power at every grid time (Nt,)

    Raises:
        InvalidReference: samples are empty, mismatched, unordered, or the grid
            extends beyond them
    """
    time = np.asarray(time, dtype=float).ravel()
    Pref = np.asarray(Pref, dtype=float).ravel()

    if time.size == 0:
        raise InvalidReference("reference signal has no samples")
    if time.shape != Pref.shape:
        raise InvalidReference(
            f"reference has {time.size} times but {Pref.size} power values"
        )
    if not (np.all(np.isfinite(time)) and np.all(np.isfinite(Pref))):
        raise InvalidReference("reference samples must be finite")
    if np.any(np.diff(time) <= 0.0):
        raise InvalidReference("reference sample times must be strictly increasing")
    if t[0] < time[0] or t[-1] > time[-1]:
        raise InvalidReference(
            f"reference covers [{time[0]!r}, {time[-1]!r}] but the horizon "
            f"spans [{t[0]!r}, {t[-1]!r}]"
        )

    return np.interp(t, time, Pref)
