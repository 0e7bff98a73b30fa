"""
Main Runner Script for the Risk-Aversion Frontier
=================================================

This script runs the full walkthrough:
1. Generating synthetic asset data (or loading a return file)
2. Sweeping risk aversion and solving one Markowitz problem per value
3. Comparing the high-risk-aversion end with the minimum variance portfolio
4. Plotting the trade-off curve and the allocations
5. Exporting the frontier table

Usage:
    mf-analyze                          # 10 synthetic assets, seed 1
    mf-analyze --assets 20 --seed 7     # Different synthetic universe
    mf-analyze --file returns.csv       # Use historical returns instead
    mf-analyze --workers 4              # Solve on a thread pool
    mf-analyze --export frontier.xlsx   # Save the frontier table
"""

import sys
import argparse
import logging
import traceback
from datetime import datetime
from typing import Optional, List
from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt

from markowitz_frontier.config import FrontierConfig
from markowitz_frontier.core.data import generate_problem_data
from markowitz_frontier.core.loader import DataLoader, export_frontier
from markowitz_frontier.core.optimizer import MarkowitzOptimizer
from markowitz_frontier.visualization import plot_risk_return_tradeoff, plot_allocations


PACKAGE_ROOT = Path(__file__).parent.parent.parent


# =============================================================================
# LOGGING SETUP
# =============================================================================

def setup_logger(
    script_name: str = "markowitz_frontier",
    log_dir: Optional[Path] = None
) -> logging.Logger:
    """
    Sets up a logger that writes to both file and console.

    Args:
        script_name: Name of the script (used in log filename)
        log_dir: Directory for log files (default: <project>/logs)

    Returns:
        Configured logger instance
    """
    log_dir = Path(log_dir) if log_dir is not None else PACKAGE_ROOT / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y_%m_%d_%H%M")
    log_filename = log_dir / f"log_{script_name}_{timestamp}.txt"

    logger = logging.getLogger(script_name)
    logger.setLevel(logging.INFO)
    logger.propagate = False

    # Clear existing handlers (prevent duplicates)
    if logger.hasHandlers():
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    file_handler = logging.FileHandler(log_filename, encoding='utf-8')
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


# =============================================================================
# ANALYSIS CHECKPOINTS
# =============================================================================

class AnalysisCheckpoint:
    """
    Tracks the progress of a frontier run.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.steps_completed = {}
        self.start_time = datetime.now()
        self.current_step = None

    def start_step(self, step_name: str):
        """Mark a step as started."""
        self.current_step = step_name
        self.logger.info(f"[CHECKPOINT] Starting: {step_name}")

    def complete_step(self, step_name: str):
        """Mark a step as completed."""
        self.steps_completed[step_name] = True
        self.logger.info(f"[CHECKPOINT] Completed: {step_name}")

    def get_progress_summary(self) -> dict:
        """Get summary of analysis progress."""
        elapsed = (datetime.now() - self.start_time).total_seconds()
        return {
            'steps_completed': list(self.steps_completed.keys()),
            'current_step': self.current_step,
            'elapsed_seconds': elapsed
        }

    def log_final_report(self):
        """Log final analysis report."""
        summary = self.get_progress_summary()
        self.logger.info("=" * 60)
        self.logger.info("  ANALYSIS COMPLETE")
        self.logger.info("=" * 60)
        self.logger.info(f"  Steps completed: {len(summary['steps_completed'])}")
        self.logger.info(f"  Total time: {summary['elapsed_seconds']:.2f} seconds")
        self.logger.info("=" * 60)


# =============================================================================
# MAIN ANALYSIS FUNCTIONS
# =============================================================================

def get_output_dir(output_dir: Optional[str] = None) -> Path:
    """Get (and create) the output directory path."""
    path = Path(output_dir) if output_dir is not None else PACKAGE_ROOT / "output"
    path.mkdir(parents=True, exist_ok=True)
    return path


def run_frontier_analysis(
    expected_returns: np.ndarray,
    cov_matrix: np.ndarray,
    asset_names: List[str],
    config: Optional[FrontierConfig] = None,
    save_plots: bool = True,
    output_dir: Optional[str] = None,
    export_path: Optional[str] = None,
    logger: Optional[logging.Logger] = None
) -> dict:
    """
    Run the risk-aversion sweep and everything built on it.

    This function performs:
    1. Optimizer setup and input validation
    2. The frontier sweep over the configured gamma grid
    3. A comparison of the sweep's ends with the max-return asset and the MVP
    4. Plot generation
    5. Optional export of the frontier table

    Args:
        expected_returns: Vector of expected asset returns
        cov_matrix: Covariance matrix
        asset_names: List of asset names
        config: Run configuration (default: FrontierConfig())
        save_plots: If True, save plots to files
        output_dir: Directory for output files
        export_path: If given, write the frontier table here (.csv or .xlsx)
        logger: Logger instance

    Returns:
        Dictionary containing all analysis results
    """
    if logger is None:
        logger = setup_logger()
    if config is None:
        config = FrontierConfig()
    config.validate()

    checkpoint = AnalysisCheckpoint(logger)
    results = {}

    logger.info("=" * 70)
    logger.info("  MARKOWITZ RISK-AVERSION FRONTIER")
    logger.info("=" * 70)
    for line in config.describe():
        logger.info(line)

    # Step 1: Create optimizer
    checkpoint.start_step("Initialize Optimizer")
    optimizer = MarkowitzOptimizer(
        expected_returns, cov_matrix, asset_names, solver=config.solver
    )
    logger.info(f"{'Asset':<12} {'Mean':>12} {'Std Dev':>12}")
    logger.info("-" * 40)
    for name, stats in optimizer.get_asset_stats().items():
        logger.info(f"{name:<12} {stats['mean']:>12.4f} {stats['std']:>12.4f}")
    results['asset_stats'] = optimizer.get_asset_stats()
    checkpoint.complete_step("Initialize Optimizer")

    # Step 2: Sweep risk aversion
    checkpoint.start_step("Solve Frontier")
    gammas = config.gamma_grid()
    frontier = optimizer.efficient_frontier(gammas, max_workers=config.max_workers)
    results['frontier'] = frontier
    logger.info(
        f"Solved {len(frontier)} problems for gamma in "
        f"[{gammas[0]:.4g}, {gammas[-1]:.4g}]"
    )
    checkpoint.complete_step("Solve Frontier")

    # Step 3: Check both ends of the sweep
    checkpoint.start_step("Compare Frontier Endpoints")
    low = frontier.point(0)
    best = optimizer.max_return_asset()
    logger.info(
        f"Lowest gamma ({low.gamma:.4g}): {low.weights[best]*100:.2f}% in "
        f"{asset_names[best]}, the highest-return asset"
    )

    mvp_weights, mvp_stats = optimizer.minimum_variance_portfolio()
    high = frontier.point(len(frontier) - 1)
    results['mvp'] = {'weights': mvp_weights, 'stats': mvp_stats}
    logger.info(
        f"Highest gamma ({high.gamma:.4g}): risk {high.risk:.4f} vs "
        f"MVP risk {mvp_stats['std']:.4f}, max weight gap "
        f"{np.abs(high.weights - mvp_weights).max():.4f}"
    )
    checkpoint.complete_step("Compare Frontier Endpoints")

    # Step 4: Generate plots
    if save_plots:
        checkpoint.start_step("Generate Plots")
        out_dir = get_output_dir(output_dir)
        markers = frontier.validate_indices(config.markers_on)

        plot_risk_return_tradeoff(
            frontier, optimizer.expected_returns, optimizer.cov_matrix,
            markers_on=markers,
            save_path=str(out_dir / "risk_return_tradeoff.png")
        )
        logger.info("Saved: risk_return_tradeoff.png")

        plot_allocations(
            frontier, markers, asset_names,
            save_path=str(out_dir / "allocations.png")
        )
        logger.info("Saved: allocations.png")

        results['output_dir'] = out_dir
        checkpoint.complete_step("Generate Plots")

    # Step 5: Export table
    if export_path:
        checkpoint.start_step("Export Frontier")
        written = export_frontier(frontier, export_path, asset_names)
        results['export_path'] = written
        logger.info(f"Saved: {written}")
        checkpoint.complete_step("Export Frontier")

    checkpoint.log_final_report()

    results['optimizer'] = optimizer
    return results


def load_input_data(config: FrontierConfig, file_path: Optional[str], logger: logging.Logger):
    """Synthetic data per the config, or statistics from a return file."""
    if not file_path:
        logger.info(f"Generating {config.n_assets} synthetic assets (seed {config.seed})")
        return generate_problem_data(config.n_assets, config.seed)

    logger.info(f"Loading returns from: {file_path}")
    loader = DataLoader()
    means, cov, names = loader.load_returns(file_path)

    validation = loader.validate_data(means, cov, names)
    for warning in validation['warnings']:
        logger.warning(warning)
    if not validation['is_valid']:
        for error in validation['errors']:
            logger.error(error)
        raise ValueError("Data validation failed")

    return means, cov, names


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Markowitz risk-aversion frontier',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mf-analyze                                  # Default walkthrough
  mf-analyze --samples 50 --markers 10 20     # Coarser sweep
  mf-analyze --file returns.csv --no-plots    # Historical data, no figures
        """
    )

    parser.add_argument('--assets', '-n', type=int,
                        help='Number of synthetic assets (default: 10)')
    parser.add_argument('--seed', type=int,
                        help='Random seed for synthetic data (default: 1)')
    parser.add_argument('--samples', '-k', type=int,
                        help='Number of risk-aversion values (default: 100)')
    parser.add_argument('--gamma-min-exp', type=float,
                        help='log10 of the smallest gamma (default: -2)')
    parser.add_argument('--gamma-max-exp', type=float,
                        help='log10 of the largest gamma (default: 3)')
    parser.add_argument('--markers', type=int, nargs='+',
                        help='Sample positions to highlight (default: 29 40)')
    parser.add_argument('--workers', '-w', type=int,
                        help='Solve on a thread pool of this size')
    parser.add_argument('--solver', type=str,
                        help='cvxpy solver name (default: CLARABEL)')
    parser.add_argument('--file', '-f', type=str,
                        help='CSV or Excel file of historical returns')
    parser.add_argument('--output-dir', '-o', type=str,
                        help='Directory for figures (default: ./output)')
    parser.add_argument('--log-dir', type=str,
                        help='Directory for log files (default: ./logs)')
    parser.add_argument('--export', '-e', type=str,
                        help='Write the frontier table to this .csv or .xlsx file')
    parser.add_argument('--no-plots', action='store_true',
                        help='Disable plot generation')
    parser.add_argument('--show-plots', action='store_true',
                        help='Show plots interactively (default: just save)')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the frontier script."""
    args = build_parser().parse_args(argv)

    logger = setup_logger("frontier_analysis", args.log_dir)

    try:
        config = FrontierConfig.from_args(args)
        config.validate()

        means, cov, names = load_input_data(config, args.file, logger)

        run_frontier_analysis(
            means, cov, names,
            config=config,
            save_plots=not args.no_plots,
            output_dir=args.output_dir,
            export_path=args.export,
            logger=logger
        )

        if args.show_plots and not args.no_plots:
            plt.show()

        logger.info("Analysis completed successfully!")
        return 0

    except Exception as e:
        logger.error(f"Analysis failed: {e}")
        logger.error(traceback.format_exc())
        return 1

    finally:
        if not args.show_plots:
            plt.close('all')
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)


if __name__ == "__main__":
    sys.exit(main())
