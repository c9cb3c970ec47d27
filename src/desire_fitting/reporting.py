"""
Reporting for fitted mixtures: comparison plots and console summaries.

The plot overlays the normalized fitted density on the desire distribution.
For the divergence objective the desire curve is normalized as well; for the
evidence objective the raw desire density is drawn so the collapsed fit and
the two modes stay visible on one axis.
"""

import os
from typing import Dict, Optional

import numpy as np
import matplotlib
matplotlib.use('Agg')  # Set backend (no GUI required)
import matplotlib.pyplot as plt

from .config import TargetConfig
from .density_utils import (
    normal_pdf,
    normalize_pdf_on_grid,
    compute_pdf_statistics,
    approximate_entropy,
    gaussian_entropy,
    gaussian_kl,
    find_local_maxima,
    EPSILON,
)
from .objectives import MixtureParams, component_mass_shares, get_objective

# Output formatting
SECTION_WIDTH = 70
COL_STAT_WIDTH = 15
COL_NUM_WIDTH = 18
COL_REL_WIDTH = 20

PLOT_TITLES = {
    "evidence": "Peak Finding with Evidence Objectives",
    "divergence": "Probability Matching with Divergence objective",
}


# ============================================================
# 1) Plotting
# ============================================================

def desired_curve_for_plot(objective_name: str, desired_pdf: np.ndarray) -> np.ndarray:
    """
    Desire density as drawn next to a fit for the given objective.

    Normalized for "divergence", raw for "evidence". This only affects the
    figure; the losses always compare normalized densities.
    """
    get_objective(objective_name)
    if objective_name == "evidence":
        return np.asarray(desired_pdf, dtype=float)
    return normalize_pdf_on_grid(desired_pdf)


def plot_density_comparison(
    z: np.ndarray,
    params: MixtureParams,
    desired_pdf: np.ndarray,
    objective_name: str,
    output_dir: str,
    component_threshold: float = 1e-8,
) -> str:
    """
    Plot the fitted mixture against the desire distribution and save it.

    Parameters:
    -----------
    z : np.ndarray
        Grid points
    params : MixtureParams
        Fitted mixture parameters
    desired_pdf : np.ndarray
        Unnormalized desire density on z
    objective_name : str
        "evidence" or "divergence"; selects title, desire curve and file name
    output_dir : str
        Directory receiving {objective_name}.png (created if missing)
    component_threshold : float, optional
        Components with weight below this are not drawn individually

    Returns:
    --------
    str
        Path of the saved figure

    Raises:
    -------
    ValueError
        If the fitted mixture underflows to zero on every grid point
    """
    desired_plot = desired_curve_for_plot(objective_name, desired_pdf)

    # Normalize the fitted components with the same constant as the mixture
    w1, w2 = params.weights
    var1, var2 = params.variances
    components = np.stack([
        w1 * normal_pdf(z, params.mean1, var1),
        w2 * normal_pdf(z, params.mean2, var2),
    ])
    predicted = normalize_pdf_on_grid(components.sum(axis=0))
    total = np.sum(components)

    plt.rcParams['font.family'] = 'DejaVu Sans'
    fig, ax = plt.subplots(figsize=(10, 6))

    ax.plot(z, predicted, 'r-', linewidth=2, label='Predicted Density')
    ax.plot(z, desired_plot, 'b--', linewidth=2, label='Desired Density')

    colors = plt.cm.tab10(np.linspace(0, 1, 2))
    for k, weight in enumerate((w1, w2)):
        if weight >= component_threshold:
            ax.plot(z, components[k] / total, ':', linewidth=1.5, color=colors[k], alpha=0.6,
                    label=f'Component {k+1} (π={weight:.3f})')

    ax.set_xlabel('X value', fontsize=12)
    ax.set_ylabel('Probability Density', fontsize=12)
    ax.set_title(PLOT_TITLES[objective_name], fontsize=13)
    ax.legend(fontsize=10)
    ax.grid(True, alpha=0.3)
    ax.set_xlim(z.min(), z.max())

    os.makedirs(output_dir, exist_ok=True)
    output_path = os.path.join(output_dir, f"{objective_name}.png")
    fig.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    return output_path


# ============================================================
# 2) Output formatting functions
# ============================================================

def print_section_header(title: str, width: int = SECTION_WIDTH) -> None:
    """Print a section header with separator lines."""
    print("\n" + "="*width)
    print(title)
    print("="*width)


def print_subsection_header(title: str, width: int = SECTION_WIDTH) -> None:
    """Print a subsection header with separator lines."""
    print("\n" + "-"*width)
    print(title)
    print("-"*width)


def print_optimization_results(objective_name: str, final_loss: float, n_iter: int,
                               elapsed_time: float) -> None:
    """Print the outcome of one optimization run."""
    print_section_header(f"{objective_name.upper()} OBJECTIVE RESULTS")
    print(f"Final loss:            {final_loss:.10f}")
    print(f"Iterations:            {n_iter}")
    print(f"Execution time:        {elapsed_time:>10.6f} seconds")


def print_mixture_parameters(params: MixtureParams, z: Optional[np.ndarray] = None) -> None:
    """
    Print fitted component parameters and the weight constraint residual.

    With a grid, each component also reports its share of the grid mass,
    which differs from its weight once its variance falls below the step.
    """
    print_section_header("MIXTURE PARAMETERS")
    w1, w2 = params.weights
    var1, var2 = params.variances
    print(f"  Component 1: π={w1:.8f}, μ={params.mean1:.8f}, σ={np.sqrt(var1):.8f}")
    print(f"  Component 2: π={w2:.8f}, μ={params.mean2:.8f}, σ={np.sqrt(var2):.8f}")
    if z is not None:
        share1, share2 = component_mass_shares(z, params)
        print(f"Grid mass share:       component 1={share1:.6f}, component 2={share2:.6f}")
    print(f"Weight sum - 1: {w1 + w2 - 1.0:+.6e}")


def calc_relative_error(true_val: float, approx_val: float) -> float:
    """
    Calculate relative error in percentage.

    Returns:
    --------
    float
        Relative error as percentage: 100 * (approx - true) / |true|
        Returns inf if true_val is near zero and approx_val is not
    """
    if abs(true_val) < EPSILON:
        return float('inf') if abs(approx_val) > EPSILON else 0.0
    return 100.0 * (approx_val - true_val) / abs(true_val)


def print_statistics_comparison(stats_true: Dict, stats_hat: Dict) -> None:
    """Print density statistics comparison table."""
    print_section_header("DENSITY STATISTICS COMPARISON")

    total_width = COL_STAT_WIDTH + COL_NUM_WIDTH * 2 + COL_REL_WIDTH
    rel_format = lambda x: f"{x:.4f}%" if not np.isinf(x) else "inf"

    print(f"{'Statistic':<{COL_STAT_WIDTH}} {'Desired':>{COL_NUM_WIDTH}} {'Predicted':>{COL_NUM_WIDTH}} {'Rel Error (%)':>{COL_REL_WIDTH}}")
    print("-" * total_width)

    for key, label in (('mean', 'Mean'), ('std', 'Std Dev'),
                       ('skewness', 'Skewness'), ('kurtosis', 'Kurtosis')):
        rel = calc_relative_error(stats_true[key], stats_hat[key])
        print(f"{label:<{COL_STAT_WIDTH}} {stats_true[key]:>{COL_NUM_WIDTH}.6f} {stats_hat[key]:>{COL_NUM_WIDTH}.6f} {rel_format(rel):>{COL_REL_WIDTH}}")


def print_density_diagnostics(
    z: np.ndarray,
    predicted_pdf: np.ndarray,
    desired_pdf: np.ndarray,
    params: MixtureParams,
    target_config: TargetConfig,
) -> None:
    """
    Print modes, entropies and per-component closed-form KL diagnostics.

    Each fitted component is compared with the nearest desire component by
    KL(fitted || desire component).
    """
    print_subsection_header("DENSITY DIAGNOSTICS")
    p_hat = normalize_pdf_on_grid(predicted_pdf)
    p_true = normalize_pdf_on_grid(desired_pdf)

    modes = find_local_maxima(z, p_hat)
    print(f"Predicted modes:       {', '.join(f'{m:.3f}' for m in modes)}")
    print(f"Desired modes:         {', '.join(f'{m:.3f}' for m in find_local_maxima(z, p_true))}")
    print(f"Grid entropy:          desired={approximate_entropy(p_true):.6f}, "
          f"predicted={approximate_entropy(p_hat):.6f}")

    targets = ((target_config.mu_a, target_config.var_a), (target_config.mu_b, target_config.var_b))
    means = (params.mean1, params.mean2)
    for k, (mu, var) in enumerate(zip(means, params.variances)):
        mu_t, var_t = min(targets, key=lambda t: abs(t[0] - mu))
        print(f"  Component {k+1}: H={gaussian_entropy(var):.6f}, "
              f"KL to N({mu_t:g}, {var_t:g})={gaussian_kl(mu, var, mu_t, var_t):.6e}")


def print_plot_output(output_path: str) -> None:
    """Print plot output information."""
    print_section_header("PLOT OUTPUT")
    print(f"Plot saved: {output_path}")
    print("="*SECTION_WIDTH)


def summarize_fit(
    z: np.ndarray,
    params: MixtureParams,
    predicted_pdf: np.ndarray,
    desired_pdf: np.ndarray,
    target_config: TargetConfig,
) -> None:
    """Print parameters, statistics and diagnostics for one fitted mixture."""
    print_mixture_parameters(params, z)
    print_statistics_comparison(
        compute_pdf_statistics(z, desired_pdf),
        compute_pdf_statistics(z, predicted_pdf),
    )
    print_density_diagnostics(z, predicted_pdf, desired_pdf, params, target_config)
