"""Flat decision-vector layout."""

import numpy as np
from numpy.typing import NDArray, ArrayLike

from windmpc.core.errors import InvalidControlVectorLength


def pack_controls(beta: NDArray, gen_torque: NDArray) -> NDArray:
    """
    Flatten columns 1..Nt-1 of two (N, Nt) arrays.

    Layout: all pitch values followed by all torque values; within each, steps
    in order with the turbines of a step contiguous.
    """
    return np.concatenate(
        [beta[:, 1:].ravel(order="F"), gen_torque[:, 1:].ravel(order="F")]
    )


def unpack_controls(x: ArrayLike, N: int, Nt: int) -> tuple[NDArray, NDArray]:
    """
    Inverse of pack_controls.

    Returns:
        beta: Pitch for columns 1..Nt-1, shape (N, Nt-1)
        gen_torque: Torque for columns 1..Nt-1, shape (N, Nt-1)

    Raises:
        InvalidControlVectorLength: x is not a vector of length 2*N*(Nt-1)
    """
    x = np.asarray(x, dtype=float)
    expected = 2 * N * (Nt - 1)
    if x.ndim != 1 or x.size != expected:
        raise InvalidControlVectorLength(
            f"control vector must have shape ({expected},) for N={N}, Nt={Nt}; "
            f"got {x.shape}"
        )

    half = N * (Nt - 1)
    beta = x[:half].reshape(Nt - 1, N).T
    gen_torque = x[half:].reshape(Nt - 1, N).T
    return beta, gen_torque


def control_index(kind: str, turbine: int, step: int, N: int, Nt: int) -> int:
    """
    Position of one control value in the packed vector.

    Args:
        kind: "beta" or "gen_torque"
        turbine: Turbine index, 0 <= turbine < N
        step: Column index, 1 <= step < Nt
    """
    if kind not in ("beta", "gen_torque"):
        raise ValueError(f"unknown control kind {kind!r}")
    if not (0 <= turbine < N and 1 <= step < Nt):
        raise IndexError(f"no decision variable at turbine={turbine}, step={step}")

    offset = 0 if kind == "beta" else N * (Nt - 1)
    return offset + (step - 1) * N + turbine
