"""
Configuration for the evidence vs. divergence experiment.

Holds the default constants of the fixed scenario (grid, desire distribution,
optimizer settings), the immutable value objects handed to each component,
and the JSON configuration loader used by main.py.
"""

import json
from dataclasses import dataclass
from typing import Dict, Optional

# ============================================================
# Constants
# ============================================================

# Grid: points i * step for i in round(z_min/step) .. round(z_max/step)
DEFAULT_Z_MIN = -5.0
DEFAULT_Z_MAX = 10.0
DEFAULT_Z_STEP = 0.01

# Desire distribution: 0.5 * N(mu_a, var_a) + 0.5 * N(mu_b, var_b)
DEFAULT_MU_A = 1.0
DEFAULT_MU_B = 4.0
DEFAULT_VAR_A = 1.0
DEFAULT_VAR_B = 0.4
DEFAULT_WEIGHT_A = 0.5
DEFAULT_WEIGHT_B = 0.5

# Penalty multiplier for the mixing-weight constraint sigmoid(a) + sigmoid(b) = 1
DEFAULT_PENALTY_LAMBDA = 1e6

DEFAULT_METHOD = "Nelder-Mead"
DEFAULT_MAX_ITER = 10000
DEFAULT_N_INIT = 5  # a single Nelder-Mead start can stall on one mode
DEFAULT_SEED = None
DEFAULT_OBJECTIVES = ["evidence", "divergence"]
DEFAULT_OUTPUT_DIR = "figures"

OBJECTIVE_NAMES = ("divergence", "evidence")


# ============================================================
# Value objects
# ============================================================

@dataclass(frozen=True)
class GridConfig:
    """
    Fixed evaluation grid shared by every density in a run.

    Attributes:
    -----------
    z_min : float
        Left end of the grid (inclusive)
    z_max : float
        Right end of the grid (inclusive)
    step : float
        Spacing between consecutive grid points (must be positive)
    """
    z_min: float = DEFAULT_Z_MIN
    z_max: float = DEFAULT_Z_MAX
    step: float = DEFAULT_Z_STEP

    def __post_init__(self):
        if self.step <= 0:
            raise ValueError(f"Grid step must be positive, got {self.step}")
        if self.z_max < self.z_min:
            raise ValueError(f"Grid range is empty: [{self.z_min}, {self.z_max}]")


@dataclass(frozen=True)
class TargetConfig:
    """Component constants of the two-Gaussian desire distribution."""
    mu_a: float = DEFAULT_MU_A
    mu_b: float = DEFAULT_MU_B
    var_a: float = DEFAULT_VAR_A
    var_b: float = DEFAULT_VAR_B
    weight_a: float = DEFAULT_WEIGHT_A
    weight_b: float = DEFAULT_WEIGHT_B

    def __post_init__(self):
        if self.var_a <= 0 or self.var_b <= 0:
            raise ValueError("Target variances must be positive")


@dataclass(frozen=True)
class OptimizerConfig:
    """
    Settings for the unconstrained minimizer.

    Attributes:
    -----------
    method : str
        Method name passed to scipy.optimize.minimize
    max_iter : int or None
        Iteration cap; None keeps the minimizer's own default
    n_init : int
        Number of random starts; the lowest final loss wins
    seed : int or None
        Seed for numpy.random.default_rng
    penalty_lambda : float
        Multiplier of the squared mixing-weight constraint violation
    """
    method: str = DEFAULT_METHOD
    max_iter: Optional[int] = DEFAULT_MAX_ITER
    n_init: int = DEFAULT_N_INIT
    seed: Optional[int] = DEFAULT_SEED
    penalty_lambda: float = DEFAULT_PENALTY_LAMBDA

    def __post_init__(self):
        if self.n_init < 1:
            raise ValueError("n_init must be >= 1")


# ============================================================
# Configuration loading
# ============================================================

def load_config(config_path: Optional[str] = None) -> Dict:
    """
    Load configuration from JSON file.

    Parameters:
    -----------
    config_path : str or None
        Path to JSON configuration file. None uses the defaults only.

    Returns:
    --------
    dict
        Configuration dictionary with default values applied

    Raises:
    ------
    json.JSONDecodeError
        If the file exists but is not valid JSON
    """
    config = {}
    if config_path is not None:
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except FileNotFoundError:
            print(f"Error: Configuration file '{config_path}' not found.")
            print("Using default parameters.")
            config = {}
        except json.JSONDecodeError as e:
            print(f"Error: Failed to parse JSON file: {e}")
            raise

    return {
        "z_min": config.get("z_min", DEFAULT_Z_MIN),
        "z_max": config.get("z_max", DEFAULT_Z_MAX),
        "z_step": config.get("z_step", DEFAULT_Z_STEP),
        "mu_a": config.get("mu_a", DEFAULT_MU_A),
        "mu_b": config.get("mu_b", DEFAULT_MU_B),
        "var_a": config.get("var_a", DEFAULT_VAR_A),
        "var_b": config.get("var_b", DEFAULT_VAR_B),
        "weight_a": config.get("weight_a", DEFAULT_WEIGHT_A),
        "weight_b": config.get("weight_b", DEFAULT_WEIGHT_B),
        "penalty_lambda": config.get("penalty_lambda", DEFAULT_PENALTY_LAMBDA),
        "method": config.get("method", DEFAULT_METHOD),
        "max_iter": config.get("max_iter", DEFAULT_MAX_ITER),
        "n_init": config.get("n_init", DEFAULT_N_INIT),
        "seed": config.get("seed", DEFAULT_SEED),
        "objectives": list(config.get("objectives", DEFAULT_OBJECTIVES)),
        "output_dir": config.get("output_dir", DEFAULT_OUTPUT_DIR),
    }


def make_grid_config(config: Dict) -> GridConfig:
    """Build the GridConfig described by a loaded configuration."""
    return GridConfig(
        z_min=float(config["z_min"]),
        z_max=float(config["z_max"]),
        step=float(config["z_step"]),
    )


def make_target_config(config: Dict) -> TargetConfig:
    """Build the TargetConfig described by a loaded configuration."""
    return TargetConfig(
        mu_a=float(config["mu_a"]),
        mu_b=float(config["mu_b"]),
        var_a=float(config["var_a"]),
        var_b=float(config["var_b"]),
        weight_a=float(config["weight_a"]),
        weight_b=float(config["weight_b"]),
    )


def make_optimizer_config(config: Dict) -> OptimizerConfig:
    """Build the OptimizerConfig described by a loaded configuration."""
    max_iter = config["max_iter"]
    return OptimizerConfig(
        method=config["method"],
        max_iter=int(max_iter) if max_iter is not None else None,
        n_init=int(config["n_init"]),
        seed=config["seed"],
        penalty_lambda=float(config["penalty_lambda"]),
    )
