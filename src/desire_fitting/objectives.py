"""
Desire distribution, candidate mixture and the two training objectives.

The desire distribution is a fixed two-component Gaussian mixture evaluated on
the grid. The candidate is a two-component mixture whose six parameters are
left unconstrained: variances live in log-space and mixing weights are
sigmoids of free logits. The weight constraint sigmoid(logit1) +
sigmoid(logit2) = 1 is enforced softly by a large quadratic penalty so that
an unconstrained minimizer can be used.

Two objectives compare the normalized candidate against the normalized
desire distribution:
- divergence loss: discrete KL(desire || candidate), mass-covering
- evidence loss: expected -log desire under the candidate, mode-seeking
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Dict, Tuple

import numpy as np

from .config import (
    GridConfig,
    TargetConfig,
    DEFAULT_PENALTY_LAMBDA,
)
from .density_utils import (
    make_grid,
    normal_pdf,
    normalize_pdf_on_grid,
    sigmoid,
)


class UnrecognizedObjectiveError(ValueError):
    """Exception raised when an objective name is neither 'divergence' nor 'evidence'."""
    pass


# ============================================================
# 1) Desire distribution
# ============================================================

@lru_cache(maxsize=None)
def build_desired_pdf(
    grid_config: GridConfig = GridConfig(),
    target_config: TargetConfig = TargetConfig(),
) -> np.ndarray:
    """
    Evaluate the desire distribution on the grid.

        f(z) = w_a N(z; μ_a, σ²_a) + w_b N(z; μ_b, σ²_b)

    No randomness is involved, so the result is cached per configuration and
    returned as a read-only array.

    Parameters:
    -----------
    grid_config : GridConfig
        Evaluation grid
    target_config : TargetConfig
        Component constants (defaults: μ_a=1, μ_b=4, σ²_a=1, σ²_b=0.4, w=0.5/0.5)

    Returns:
    --------
    np.ndarray
        Unnormalized desire density at the grid points
    """
    z = make_grid(grid_config)
    f = (target_config.weight_a * normal_pdf(z, target_config.mu_a, target_config.var_a)
         + target_config.weight_b * normal_pdf(z, target_config.mu_b, target_config.var_b))
    f.flags.writeable = False
    return f


# ============================================================
# 2) Candidate mixture
# ============================================================

@dataclass(frozen=True)
class MixtureParams:
    """
    Unconstrained parameters of the two-component candidate mixture.

    Attributes:
    -----------
    mean1, mean2 : float
        Component means
    logvar1, logvar2 : float
        Log-variances; the variances are exp(logvar)
    logit1, logit2 : float
        Mixing logits; the weights are sigmoid(logit) and are only pushed
        towards summing to 1 by the objective's penalty term
    """
    mean1: float
    mean2: float
    logvar1: float
    logvar2: float
    logit1: float = 0.0
    logit2: float = 0.0

    @classmethod
    def from_vector(cls, x) -> "MixtureParams":
        """Build from a length-6 vector ordered (mean1, mean2, logvar1, logvar2, logit1, logit2)."""
        x = np.asarray(x, dtype=float)
        if x.shape != (6,):
            raise ValueError(f"Expected a parameter vector of shape (6,), got {x.shape}")
        return cls(*(float(v) for v in x))

    def to_vector(self) -> np.ndarray:
        return np.array([self.mean1, self.mean2, self.logvar1, self.logvar2,
                         self.logit1, self.logit2])

    @property
    def weights(self) -> Tuple[float, float]:
        return float(sigmoid(self.logit1)), float(sigmoid(self.logit2))

    @property
    def variances(self) -> Tuple[float, float]:
        return float(np.exp(self.logvar1)), float(np.exp(self.logvar2))


def mixture_pdf(z: np.ndarray, params: MixtureParams) -> np.ndarray:
    """
    Evaluate the candidate mixture on the grid.

        f(z) = sigmoid(logit1) N(z; mean1, exp(logvar1)) + sigmoid(logit2) N(z; mean2, exp(logvar2))

    The result is not normalized; callers divide by its sum before comparing
    it to another grid density.
    """
    w1, w2 = params.weights
    var1, var2 = params.variances
    return w1 * normal_pdf(z, params.mean1, var1) + w2 * normal_pdf(z, params.mean2, var2)


def component_mass_shares(z: np.ndarray, params: MixtureParams) -> Tuple[float, float]:
    """
    Share of the fitted grid mass carried by each component.

    Share k is w_k Σ N(z; mean_k, var_k) over the total grid mass. A component
    whose variance shrinks below the grid step can keep half of the weight yet
    cover almost no grid point, so its share is close to 0.
    """
    w1, w2 = params.weights
    var1, var2 = params.variances
    masses = np.array([
        w1 * np.sum(normal_pdf(z, params.mean1, var1)),
        w2 * np.sum(normal_pdf(z, params.mean2, var2)),
    ])
    shares = normalize_pdf_on_grid(masses)
    return float(shares[0]), float(shares[1])


# ============================================================
# 3) Objectives
# ============================================================

def approximate_kl(p: np.ndarray, q: np.ndarray) -> float:
    """Discrete KL divergence Σ p_i log(p_i / q_i) between two probability vectors."""
    return float(np.sum(p * np.log(p / q)))


def approximate_evidence(p: np.ndarray, q: np.ndarray) -> float:
    """Cross-entropy Σ p_i (-log q_i): expected negative log of q under p."""
    return float(np.sum(p * -np.log(q)))


def constraint_penalty(params: MixtureParams, penalty_lambda: float = DEFAULT_PENALTY_LAMBDA) -> float:
    """Soft equality constraint λ (sigmoid(logit1) + sigmoid(logit2) - 1)²."""
    w1, w2 = params.weights
    return penalty_lambda * ((w1 + w2) - 1.0) ** 2


def _normalized_pair(
    params: MixtureParams,
    grid_config: GridConfig,
    target_config: TargetConfig,
) -> Tuple[np.ndarray, np.ndarray]:
    z = make_grid(grid_config)
    # Plain division: a candidate that underflows to all zeros yields nan
    # instead of raising, and the minimizer treats it as a bad point.
    candidate = mixture_pdf(z, params)
    candidate = candidate / np.sum(candidate)
    desired = normalize_pdf_on_grid(build_desired_pdf(grid_config, target_config))
    return candidate, desired


def compute_divergence_loss(
    params: MixtureParams,
    grid_config: GridConfig = GridConfig(),
    target_config: TargetConfig = TargetConfig(),
    penalty_lambda: float = DEFAULT_PENALTY_LAMBDA,
) -> float:
    """
    Probability-matching objective.

    KL(desire || candidate) on the normalized grid densities plus the mixing
    weight penalty. Any grid point where the desire has mass but the
    candidate has almost none is penalized heavily, so the minimizer is
    pushed to put mass under every mode.

    Returns nan or inf when the candidate underflows to exact zeros.
    """
    candidate, desired = _normalized_pair(params, grid_config, target_config)
    loss = approximate_kl(desired, candidate)
    # ensure that the weight constraint is respected
    loss += constraint_penalty(params, penalty_lambda)
    return loss


def compute_evidence_loss(
    params: MixtureParams,
    grid_config: GridConfig = GridConfig(),
    target_config: TargetConfig = TargetConfig(),
    penalty_lambda: float = DEFAULT_PENALTY_LAMBDA,
) -> float:
    """
    Evidence (peak-finding) objective.

    Expected -log desire density under the normalized candidate, plus the
    mixing weight penalty. Only grid points where the candidate places mass
    contribute, so the loss keeps falling as the candidate concentrates on
    the tallest desire mode and drops the other one.
    """
    candidate, desired = _normalized_pair(params, grid_config, target_config)
    loss = approximate_evidence(candidate, desired)
    # ensure that the weight constraint is respected
    loss += constraint_penalty(params, penalty_lambda)
    return loss


LossFunction = Callable[..., float]

OBJECTIVES: Dict[str, LossFunction] = {
    "divergence": compute_divergence_loss,
    "evidence": compute_evidence_loss,
}


def get_objective(objective_name: str) -> LossFunction:
    """
    Look up a loss function by name.

    Raises:
    ------
    UnrecognizedObjectiveError
        If objective_name is neither "divergence" nor "evidence"
    """
    try:
        return OBJECTIVES[objective_name]
    except (KeyError, TypeError):
        raise UnrecognizedObjectiveError(
            f"Loss function not recognized: {objective_name!r}. "
            f"Must be one of {sorted(OBJECTIVES)}"
        ) from None
