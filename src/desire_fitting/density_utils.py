"""
Grid and density utilities.

This module provides the discretization helpers shared by the desire
distribution, the candidate mixture and the reporting code: the fixed
evaluation grid, the Gaussian density, sum-normalization to a discrete
probability vector, and a few diagnostics computed on grid densities.
"""

import numpy as np
from scipy.special import expit, entr

from .config import GridConfig


# ============================================================
# Numerical Constants
# ============================================================

EPSILON = 1e-10
MIN_PDF_VALUE = 1e-10  # For log scale plotting
PEAK_HEIGHT_FRACTION = 1e-3  # Local maxima below this fraction of the peak are ignored


# ============================================================
# Grid and PDF Functions
# ============================================================

def make_grid(grid_config: GridConfig) -> np.ndarray:
    """
    Build the evaluation grid described by a GridConfig.

    Points are i * step for every integer i between round(z_min / step)
    and round(z_max / step) inclusive, so the defaults (-5, 10, 0.01)
    give 1501 points.

    Parameters:
    -----------
    grid_config : GridConfig
        Grid range and spacing

    Returns:
    --------
    np.ndarray
        Grid points, shape (N,)
    """
    i_lo = int(round(grid_config.z_min / grid_config.step))
    i_hi = int(round(grid_config.z_max / grid_config.step))
    return np.arange(i_lo, i_hi + 1, dtype=float) * grid_config.step


def sigmoid(x):
    """Logistic function mapping an unconstrained logit to (0, 1)."""
    return expit(x)


def normal_pdf(x: np.ndarray, mu: float, var: float) -> np.ndarray:
    """
    Compute the probability density function of a univariate normal distribution.

    Parameters:
    -----------
    x : np.ndarray
        Points at which to evaluate the PDF
    mu : float
        Mean of the normal distribution
    var : float
        Variance of the normal distribution (must be positive)

    Returns:
    --------
    np.ndarray
        PDF values at x: N(x; mu, var) = (1/sqrt(2πσ²)) * exp(-(x-μ)²/(2σ²))
    """
    x = np.asarray(x, dtype=float)
    return np.exp(-(x - mu) ** 2 / (2.0 * var)) / np.sqrt(2.0 * np.pi * var)


def normalize_pdf_on_grid(f: np.ndarray) -> np.ndarray:
    """
    Normalize grid density values into a discrete probability vector.

    The grid is a discrete stand-in for the continuous integral, so the
    values are divided by their sum rather than by a quadrature area.

    Parameters:
    -----------
    f : np.ndarray
        PDF values at grid points

    Returns:
    --------
    np.ndarray
        Values summing to 1

    Raises:
    ------
    ValueError
        If the sum of the values is non-positive
    """
    f = np.asarray(f, dtype=float)
    total = np.sum(f)
    if not total > 0:
        raise ValueError("PDF sum is non-positive.")
    return f / total


# ============================================================
# Diagnostics
# ============================================================

def compute_pdf_statistics(z: np.ndarray, f: np.ndarray) -> dict:
    """
    Compute statistical moments of a density sampled on a grid.

    The density is normalized to a discrete probability vector first and the
    moments are plain weighted sums over the grid points.

    Parameters:
    -----------
    z : np.ndarray
        Grid points
    f : np.ndarray
        PDF values at grid points (may be unnormalized)

    Returns:
    --------
    dict
        Dictionary containing:
        - 'mean': Mean E[X]
        - 'std': Standard deviation sqrt(Var[X])
        - 'skewness': E[((X-μ)/σ)³]
        - 'kurtosis': Excess kurtosis E[((X-μ)/σ)⁴] - 3
    """
    z = np.asarray(z, dtype=float)
    p = normalize_pdf_on_grid(f)

    mean = np.sum(z * p)
    variance = np.sum(z * z * p) - mean * mean

    # Degenerate case: all mass on a single grid point
    if variance <= 0:
        return {
            'mean': mean,
            'std': 0.0,
            'skewness': 0.0,
            'kurtosis': 0.0
        }

    std = np.sqrt(variance)
    z_std = (z - mean) / std
    skewness = np.sum(z_std**3 * p)
    kurtosis = np.sum(z_std**4 * p) - 3.0

    return {
        'mean': mean,
        'std': std,
        'skewness': skewness,
        'kurtosis': kurtosis
    }


def find_local_maxima(
    z: np.ndarray,
    f: np.ndarray,
    height_fraction: float = PEAK_HEIGHT_FRACTION,
) -> np.ndarray:
    """
    Locate the modes of a grid density.

    A grid point is a mode when it is strictly above its left neighbour and
    not below its right neighbour (so flat tops count once). Bumps lower than
    height_fraction * max(f) are ignored.

    Parameters:
    -----------
    z : np.ndarray
        Grid points, shape (N,)
    f : np.ndarray
        Density values, shape (N,)
    height_fraction : float
        Minimum height of a mode relative to the global maximum

    Returns:
    --------
    np.ndarray
        Grid locations of the modes, in increasing order
    """
    z = np.asarray(z, dtype=float)
    f = np.asarray(f, dtype=float)
    if len(z) != len(f):
        raise ValueError("z and f must have the same length")
    if len(f) < 3:
        return z[[int(np.argmax(f))]] if len(f) else z[:0]

    left = f[1:-1] > f[:-2]
    right = f[1:-1] >= f[2:]
    tall = f[1:-1] >= height_fraction * np.max(f)
    idx = np.where(left & right & tall)[0] + 1

    # Boundary maxima (mass piled against the end of the grid)
    if f[0] > f[1] and f[0] >= height_fraction * np.max(f):
        idx = np.concatenate([[0], idx])
    if f[-1] > f[-2] and f[-1] >= height_fraction * np.max(f):
        idx = np.concatenate([idx, [len(f) - 1]])
    return z[idx]


def approximate_entropy(p: np.ndarray) -> float:
    """Shannon entropy -Σ p_i log p_i of a discrete probability vector (0 log 0 = 0)."""
    return float(np.sum(entr(np.asarray(p, dtype=float))))


def gaussian_entropy(var: float) -> float:
    """Differential entropy of N(μ, var): log(sqrt(2πe var))."""
    return float(0.5 * np.log(2.0 * np.pi * np.e * var))


def gaussian_kl(mu1: float, var1: float, mu2: float, var2: float) -> float:
    """
    Closed-form KL(N(mu1, var1) || N(mu2, var2)).

    KL = log(σ₂/σ₁) + (σ₁² + (μ₁-μ₂)²) / (2σ₂²) - 1/2
    """
    return float(
        np.log(np.sqrt(var2) / np.sqrt(var1))
        + (var1 + (mu1 - mu2) ** 2) / (2.0 * var2)
        - 0.5
    )
