"""
Unconstrained minimization of the evidence and divergence objectives.

The six mixture parameters are optimized jointly with scipy.optimize.minimize.
Means and log-variances start from independent U[0, 1) draws and the mixing
logits start at 0 (a 50/50 mixture). Several random starts can be run; the
one with the lowest final loss is returned.
"""

import logging
import time
from typing import Optional, Tuple

import numpy as np
from scipy.optimize import minimize

from .config import GridConfig, TargetConfig, OptimizerConfig
from .objectives import (
    MixtureParams,
    UnrecognizedObjectiveError,
    get_objective,
)

logger = logging.getLogger(__name__)

__all__ = [
    "UnrecognizedObjectiveError",
    "initial_params",
    "optimize_loss",
]


def initial_params(rng: np.random.Generator) -> np.ndarray:
    """
    Draw a starting parameter vector.

    Returns:
    --------
    np.ndarray
        (mean1, mean2, logvar1, logvar2) ~ U[0, 1) and (logit1, logit2) = 0
    """
    x0 = np.zeros(6)
    x0[:4] = rng.random(4)
    return x0


def optimize_loss(
    objective_name: str,
    grid_config: Optional[GridConfig] = None,
    target_config: Optional[TargetConfig] = None,
    optimizer_config: Optional[OptimizerConfig] = None,
) -> Tuple[MixtureParams, float, int]:
    """
    Fit the two-component mixture by minimizing the chosen objective.

    Parameters:
    -----------
    objective_name : str
        "divergence" or "evidence"
    grid_config : GridConfig, optional
        Evaluation grid (default: GridConfig())
    target_config : TargetConfig, optional
        Desire distribution constants (default: TargetConfig())
    optimizer_config : OptimizerConfig, optional
        Minimizer settings (default: OptimizerConfig(), i.e. five
        Nelder-Mead starts capped at 10000 iterations each)

    Returns:
    --------
    params : MixtureParams
        Minimizer estimate of the best run
    final_loss : float
        Objective value at params
    n_iter : int
        Iterations used by the best run

    Raises:
    ------
    UnrecognizedObjectiveError
        If objective_name is not a known objective. Raised before any
        random draw or objective evaluation.
    """
    loss_fn = get_objective(objective_name)

    grid_config = grid_config if grid_config is not None else GridConfig()
    target_config = target_config if target_config is not None else TargetConfig()
    optimizer_config = optimizer_config if optimizer_config is not None else OptimizerConfig()

    def objective(x: np.ndarray) -> float:
        return loss_fn(
            MixtureParams.from_vector(x),
            grid_config,
            target_config,
            optimizer_config.penalty_lambda,
        )

    options = {}
    if optimizer_config.max_iter is not None:
        options["maxiter"] = optimizer_config.max_iter
        if optimizer_config.method == "Nelder-Mead":
            options["maxfev"] = 2 * optimizer_config.max_iter

    rng = np.random.default_rng(optimizer_config.seed)

    best_x: Optional[np.ndarray] = None
    best_loss = np.inf
    best_iter = 0

    for trial in range(optimizer_config.n_init):
        x0 = initial_params(rng)
        logger.debug(f"[{objective_name}] start {trial + 1}/{optimizer_config.n_init}: x0={x0}")

        start_time = time.time()
        result = minimize(objective, x0, method=optimizer_config.method, options=options)
        elapsed = time.time() - start_time

        if not result.success:
            logger.warning(f"[{objective_name}] start {trial + 1} did not converge: {result.message}")
        logger.info(
            f"[{objective_name}] start {trial + 1}: loss={result.fun:.10f}, "
            f"iterations={result.get('nit', 0)}, time={elapsed:.3f}s"
        )

        # a finite loss always replaces a nan one
        if best_x is None or result.fun < best_loss or np.isnan(best_loss):
            best_x = result.x.copy()
            best_loss = float(result.fun)
            best_iter = int(result.get("nit", 0))

    return MixtureParams.from_vector(best_x), best_loss, best_iter
