"""Drive a gradient-based scipy optimizer with the MPC problem."""

import logging
from typing import Optional
from scipy.optimize import minimize, OptimizeResult

from windmpc.core.problem import Evaluator

logger = logging.getLogger(__name__)


def optimize(
    problem: Evaluator,
    method: str = "L-BFGS-B",
    maxiter: int = 100,
    tol: Optional[float] = None,
    bounds=None,
    options: Optional[dict] = None,
) -> OptimizeResult:
    """
    Minimize the problem's cost starting from its current controls.

    The problem is evaluated once more at the returned point, so its control
    trajectory, cost and gradient correspond to the optimizer's result.

    Args:
        problem: Provides evaluate(x) -> (f, g) and get_control_vector()
        method: scipy.optimize.minimize method using gradients
        maxiter: Iteration limit
        tol: Termination tolerance passed to scipy
        bounds: Optional bounds in the packed-vector layout
        options: Extra solver options

    Returns:
        scipy OptimizeResult
    """
    x0 = problem.get_control_vector()
    solver_options = {"maxiter": maxiter}
    if options:
        solver_options.update(options)

    logger.info("optimizing %d controls with %s", x0.size, method)
    result = minimize(
        problem.evaluate,
        x0,
        jac=True,
        method=method,
        bounds=bounds,
        tol=tol,
        options=solver_options,
    )
    problem.evaluate(result.x)

    logger.info(
        "optimizer finished (%s): cost %.6e after %d iterations, %d evaluations",
        result.message,
        result.fun,
        result.get("nit", -1),
        result.nfev,
    )
    return result
