"""Error taxonomy for the MPC solve instance."""


class MPCError(Exception):
    """Base class for precondition violations detected by the solver."""


class InvalidHorizon(MPCError, ValueError):
    """Nonpositive derived time step, or fewer than two horizon steps."""


class InvalidReference(MPCError, ValueError):
    """Reference samples are empty, malformed, or do not cover the horizon."""


class InvalidControlVectorLength(MPCError, ValueError):
    """Optimizer-supplied control vector does not match 2*N*(Nt-1)."""


class InconsistentScaleState(MPCError, RuntimeError):
    """Owned sub-states are not all in the same unit regime."""
