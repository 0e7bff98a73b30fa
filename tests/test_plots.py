"""
Tests for the frontier plots.
"""

import pytest
import numpy as np
import matplotlib.pyplot as plt

from markowitz_frontier.visualization import plot_risk_return_tradeoff, plot_allocations


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close('all')


class TestRiskReturnTradeoff:
    """Trade-off curve with single-asset points and gamma markers"""

    def test_artists(self, frontier, problem_data):
        mu, sigma, _ = problem_data
        fig = plot_risk_return_tradeoff(frontier, mu, sigma, markers_on=[29, 40])
        ax = fig.axes[0]

        # Curve plus one line per marker
        lines = ax.get_lines()
        assert len(lines) == 3
        np.testing.assert_allclose(lines[0].get_xdata(), frontier.risks)
        np.testing.assert_allclose(lines[0].get_ydata(), frontier.returns)

        offsets = ax.collections[0].get_offsets()
        np.testing.assert_allclose(offsets[:, 0], np.sqrt(np.diag(sigma)))
        np.testing.assert_allclose(offsets[:, 1], mu)

    def test_gamma_annotations(self, frontier, problem_data):
        mu, sigma, _ = problem_data
        fig = plot_risk_return_tradeoff(frontier, mu, sigma, markers_on=[29, 40])
        texts = [t.get_text() for t in fig.axes[0].texts]

        assert texts == [
            r"$\gamma = %.2f$" % frontier.gammas[29],
            r"$\gamma = %.2f$" % frontier.gammas[40],
        ]

    def test_asset_labels(self, frontier, problem_data):
        mu, sigma, names = problem_data
        fig = plot_risk_return_tradeoff(frontier, mu, sigma, markers_on=[], asset_names=names)
        texts = [t.get_text() for t in fig.axes[0].texts]

        assert texts == names

    def test_save(self, frontier, problem_data, tmp_path):
        mu, sigma, _ = problem_data
        path = tmp_path / "tradeoff.png"
        plot_risk_return_tradeoff(frontier, mu, sigma, save_path=str(path))

        assert path.exists()
        assert path.stat().st_size > 0


class TestAllocations:
    """Stacked allocation bars"""

    def test_one_segment_per_asset_and_bar(self, frontier, problem_data):
        _, _, names = problem_data
        fig = plot_allocations(frontier, [29, 40], names)
        ax = fig.axes[0]

        assert len(ax.patches) == len(names) * 2

    def test_bars_stack_to_budget(self, frontier):
        fig = plot_allocations(frontier, [0, 29, 99])
        ax = fig.axes[0]

        totals = {}
        for patch in ax.patches:
            x = round(patch.get_x() + patch.get_width() / 2, 6)
            totals[x] = totals.get(x, 0.0) + patch.get_height()

        assert len(totals) == 3
        for total in totals.values():
            assert total == pytest.approx(1.0, abs=1e-5)

    def test_labels(self, frontier, problem_data):
        _, _, names = problem_data
        fig = plot_allocations(frontier, [29, 40], names)
        ax = fig.axes[0]

        ticks = [t.get_text() for t in ax.get_xticklabels()]
        assert ticks == [r"$\gamma = %.2f$" % frontier.gammas[i] for i in (29, 40)]
        legend = [t.get_text() for t in ax.get_legend().get_texts()]
        assert legend == names

    def test_save(self, frontier, tmp_path):
        path = tmp_path / "allocations.png"
        plot_allocations(frontier, [10], save_path=str(path))

        assert path.exists()
