"""
Tests for plotting and output formatting functions.
"""
import os
import numpy as np
import pytest
from desire_fitting import (
    GridConfig,
    TargetConfig,
    MixtureParams,
    UnrecognizedObjectiveError,
    make_grid,
    build_desired_pdf,
    mixture_pdf,
    normalize_pdf_on_grid,
    desired_curve_for_plot,
    plot_density_comparison,
    print_section_header,
    print_optimization_results,
    print_mixture_parameters,
    print_statistics_comparison,
    print_density_diagnostics,
    print_plot_output,
    summarize_fit,
    compute_pdf_statistics,
)
from desire_fitting.reporting import calc_relative_error, print_subsection_header


PARAMS = MixtureParams(mean1=1.1, mean2=3.9, logvar1=0.05, logvar2=np.log(0.45),
                       logit1=0.1, logit2=-0.1)


class TestDesiredCurveForPlot:
    """Tests for desired_curve_for_plot function."""

    def test_divergence_is_normalized(self):
        """Test that the divergence figure uses the normalized desire density."""
        desired = build_desired_pdf()
        curve = desired_curve_for_plot("divergence", desired)

        assert np.isclose(np.sum(curve), 1.0)
        assert np.allclose(curve, normalize_pdf_on_grid(desired))

    def test_evidence_is_raw(self):
        """Test that the evidence figure uses the raw desire density."""
        desired = build_desired_pdf()
        curve = desired_curve_for_plot("evidence", desired)

        assert np.array_equal(curve, desired)

    def test_unknown_objective(self):
        """Test that unknown objective names are rejected."""
        with pytest.raises(UnrecognizedObjectiveError):
            desired_curve_for_plot("bogus", build_desired_pdf())


class TestPlotDensityComparison:
    """Tests for plot_density_comparison function."""

    @pytest.mark.parametrize("objective_name", ["evidence", "divergence"])
    def test_figure_named_after_objective(self, tmp_path, objective_name):
        """Test that one PNG named after the objective is written."""
        z = make_grid(GridConfig())
        output_dir = tmp_path / "figures"

        path = plot_density_comparison(z, PARAMS, build_desired_pdf(), objective_name, str(output_dir))

        assert path == os.path.join(str(output_dir), f"{objective_name}.png")
        assert os.path.isfile(path)
        assert os.path.getsize(path) > 0

    def test_collapsed_component_skipped(self, tmp_path):
        """Test plotting a fit whose second weight has collapsed."""
        z = make_grid(GridConfig())
        params = MixtureParams(mean1=4.0, mean2=1.0, logvar1=-3.0, logvar2=0.0,
                               logit1=30.0, logit2=-30.0)

        path = plot_density_comparison(z, params, build_desired_pdf(), "evidence", str(tmp_path))

        assert os.path.isfile(path)

    def test_underflowed_fit_raises(self, tmp_path):
        """Test that a fit with no mass on any grid point is rejected before plotting."""
        z = make_grid(GridConfig())
        params = MixtureParams(mean1=0.005, mean2=0.005, logvar1=-30.0, logvar2=-30.0)

        with pytest.raises(ValueError, match="non-positive"):
            plot_density_comparison(z, params, build_desired_pdf(), "divergence", str(tmp_path))

        assert not os.path.exists(os.path.join(str(tmp_path), "divergence.png"))


class TestOutputFormatting:
    """Tests for console output functions."""

    def test_print_section_header(self, capsys):
        """Test section header printing."""
        print_section_header("TEST SECTION")
        result = capsys.readouterr().out

        assert "TEST SECTION" in result
        assert "=" * 70 in result

    def test_print_subsection_header(self, capsys):
        """Test subsection header printing."""
        print_subsection_header("TEST SUBSECTION")
        result = capsys.readouterr().out

        assert "TEST SUBSECTION" in result
        assert "-" * 70 in result

    def test_print_optimization_results(self, capsys):
        """Test optimization result printing."""
        print_optimization_results("divergence", 0.0123, 42, 1.5)
        result = capsys.readouterr().out

        assert "DIVERGENCE OBJECTIVE RESULTS" in result
        assert "0.0123000000" in result
        assert "42" in result

    def test_print_mixture_parameters(self, capsys):
        """Test mixture parameter printing."""
        print_mixture_parameters(PARAMS)
        result = capsys.readouterr().out

        assert "Component 1" in result
        assert "Component 2" in result
        assert "μ=1.10000000" in result
        assert "Weight sum - 1" in result
        assert "Grid mass share" not in result

    def test_print_mixture_parameters_with_grid(self, capsys):
        """Test that a grid adds each component's share of the grid mass."""
        z = make_grid(GridConfig())
        params = MixtureParams(mean1=4.0, mean2=4.005, logvar1=np.log(0.1), logvar2=-30.0)
        print_mixture_parameters(params, z)
        result = capsys.readouterr().out

        assert "Grid mass share:       component 1=1.000000, component 2=0.000000" in result

    def test_calc_relative_error(self):
        """Test relative error in percent."""
        assert calc_relative_error(2.0, 2.2) == pytest.approx(10.0)
        assert calc_relative_error(0.0, 0.0) == 0.0
        assert np.isinf(calc_relative_error(0.0, 1.0))

    def test_print_statistics_comparison(self, capsys):
        """Test statistics table printing."""
        z = make_grid(GridConfig())
        stats_true = compute_pdf_statistics(z, build_desired_pdf())
        stats_hat = compute_pdf_statistics(z, mixture_pdf(z, PARAMS))

        print_statistics_comparison(stats_true, stats_hat)
        result = capsys.readouterr().out

        for label in ("Mean", "Std Dev", "Skewness", "Kurtosis", "Rel Error (%)"):
            assert label in result

    def test_print_density_diagnostics(self, capsys):
        """Test modes, entropies and component KL printing."""
        z = make_grid(GridConfig())
        print_density_diagnostics(z, mixture_pdf(z, PARAMS), build_desired_pdf(), PARAMS, TargetConfig())
        result = capsys.readouterr().out

        assert "Predicted modes" in result
        assert "Grid entropy" in result
        assert "KL to N(1, 1)" in result
        assert "KL to N(4, 0.4)" in result

    def test_summarize_fit(self, capsys):
        """Test the combined summary."""
        z = make_grid(GridConfig())
        summarize_fit(z, PARAMS, mixture_pdf(z, PARAMS), build_desired_pdf(), TargetConfig())
        result = capsys.readouterr().out

        assert "MIXTURE PARAMETERS" in result
        assert "DENSITY STATISTICS COMPARISON" in result
        assert "DENSITY DIAGNOSTICS" in result
        assert "Grid mass share" in result

    def test_print_plot_output(self, capsys):
        """Test plot output printing."""
        print_plot_output("figures/evidence.png")
        result = capsys.readouterr().out

        assert "Plot saved: figures/evidence.png" in result
