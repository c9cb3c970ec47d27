"""
Evidence vs. divergence objectives on a bimodal desire distribution.

Fits a two-component 1D Gaussian mixture to a fixed two-Gaussian desire
distribution on a grid, once with a mass-covering divergence objective and
once with a mode-seeking evidence objective, and plots both fits.
"""

from .config import (
    GridConfig,
    TargetConfig,
    OptimizerConfig,
    load_config,
    make_grid_config,
    make_target_config,
    make_optimizer_config,
    DEFAULT_Z_MIN,
    DEFAULT_Z_MAX,
    DEFAULT_Z_STEP,
    DEFAULT_MU_A,
    DEFAULT_MU_B,
    DEFAULT_VAR_A,
    DEFAULT_VAR_B,
    DEFAULT_PENALTY_LAMBDA,
    DEFAULT_METHOD,
    DEFAULT_N_INIT,
    DEFAULT_OBJECTIVES,
    DEFAULT_OUTPUT_DIR,
    OBJECTIVE_NAMES,
)
from .density_utils import (
    make_grid,
    sigmoid,
    normal_pdf,
    normalize_pdf_on_grid,
    compute_pdf_statistics,
    find_local_maxima,
    approximate_entropy,
    gaussian_entropy,
    gaussian_kl,
    EPSILON,
    MIN_PDF_VALUE,
)
from .objectives import (
    UnrecognizedObjectiveError,
    MixtureParams,
    build_desired_pdf,
    mixture_pdf,
    component_mass_shares,
    approximate_kl,
    approximate_evidence,
    constraint_penalty,
    compute_divergence_loss,
    compute_evidence_loss,
    get_objective,
    OBJECTIVES,
)
from .optimizer import initial_params, optimize_loss
from .reporting import (
    desired_curve_for_plot,
    plot_density_comparison,
    print_section_header,
    print_optimization_results,
    print_mixture_parameters,
    print_statistics_comparison,
    print_density_diagnostics,
    print_plot_output,
    summarize_fit,
)
