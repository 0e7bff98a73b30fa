"""
End-to-end tests for the mf-analyze runner.
"""

import logging

import pytest
import pandas as pd
import matplotlib.pyplot as plt

from markowitz_frontier.cli.main import main, run_frontier_analysis, setup_logger
from markowitz_frontier.config import FrontierConfig
from markowitz_frontier.core.data import generate_problem_data


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close('all')


def _base_args(tmp_path):
    return [
        "--output-dir", str(tmp_path / "out"),
        "--log-dir", str(tmp_path / "logs"),
    ]


class TestMain:
    """Command-line runs"""

    def test_default_run_writes_outputs(self, tmp_path):
        export = tmp_path / "frontier.csv"
        code = main(_base_args(tmp_path) + [
            "--assets", "5", "--samples", "45", "--export", str(export)
        ])

        assert code == 0
        assert (tmp_path / "out" / "risk_return_tradeoff.png").exists()
        assert (tmp_path / "out" / "allocations.png").exists()
        assert len(pd.read_csv(export)) == 45
        assert list((tmp_path / "logs").glob("log_frontier_analysis_*.txt"))

    def test_log_handlers_closed_after_run(self, tmp_path):
        code = main(_base_args(tmp_path) + ["--assets", "3", "--samples", "5", "--no-plots"])

        assert code == 0
        assert logging.getLogger("frontier_analysis").handlers == []

    def test_threaded_run(self, tmp_path):
        code = main(_base_args(tmp_path) + [
            "--assets", "4", "--samples", "10", "--markers", "2", "7",
            "--workers", "3", "--no-plots"
        ])

        assert code == 0

    def test_marker_out_of_range_fails(self, tmp_path):
        code = main(_base_args(tmp_path) + ["--assets", "4", "--samples", "20"])

        assert code == 1

    def test_invalid_config_fails(self, tmp_path):
        code = main(_base_args(tmp_path) + ["--assets", "0"])

        assert code == 1

    def test_returns_file(self, tmp_path):
        returns = pd.DataFrame({
            'Date': ['2024-01-31', '2024-02-29', '2024-03-31', '2024-04-30', '2024-05-31'],
            'AAA': [0.01, 0.03, -0.02, 0.04, 0.00],
            'BBB': [0.02, -0.01, 0.01, 0.00, 0.03],
            'CCC': [-0.01, 0.02, 0.03, 0.01, -0.02],
        })
        path = tmp_path / "returns.csv"
        returns.to_csv(path, index=False)
        export = tmp_path / "frontier.xlsx"

        code = main(_base_args(tmp_path) + [
            "--file", str(path), "--samples", "12", "--no-plots", "--export", str(export)
        ])

        assert code == 0
        table = pd.read_excel(export, sheet_name='Frontier')
        assert {'AAA', 'BBB', 'CCC'} <= set(table.columns)


class TestRunFrontierAnalysis:
    """The library-level runner"""

    def test_results(self, tmp_path):
        mu, sigma, names = generate_problem_data(6, seed=3)
        config = FrontierConfig()
        config.samples = 50
        logger = setup_logger("test_run", tmp_path / "logs")

        results = run_frontier_analysis(
            mu, sigma, names, config=config,
            output_dir=str(tmp_path / "out"), logger=logger
        )

        assert len(results['frontier']) == 50
        assert results['mvp']['weights'].shape == (6,)
        assert set(results['asset_stats']) == set(names)
        assert (tmp_path / "out" / "allocations.png").exists()


class TestSetupLogger:
    """File and console handlers"""

    def test_handlers_not_duplicated(self, tmp_path):
        setup_logger("dup_check", tmp_path)
        logger = setup_logger("dup_check", tmp_path)

        assert len(logger.handlers) == 2
        assert any(isinstance(h, logging.FileHandler) for h in logger.handlers)
        assert not logger.propagate
