"""
Markowitz Frontier - Risk-Aversion Sweep of the Mean-Variance Problem
=====================================================================

Traces the long-only efficient frontier by solving one convex quadratic
program per risk-aversion value with cvxpy.

Usage:
    from markowitz_frontier import MarkowitzOptimizer, generate_problem_data
    from markowitz_frontier.visualization import plot_risk_return_tradeoff

Classes:
    MarkowitzOptimizer - Frontier sweep and portfolio statistics
    FrontierResult - Per-sample weights, returns and risks
    FrontierConfig - Run parameters
    DataLoader - Return files to solver inputs

Functions:
    generate_problem_data - Synthetic expected returns and covariance
    risk_aversion_grid - Log-spaced gamma values
    solve_one - Solve for a single gamma
"""

from markowitz_frontier.core.data import generate_problem_data, risk_aversion_grid
from markowitz_frontier.core.optimizer import (
    MarkowitzOptimizer,
    FrontierResult,
    FrontierSolveError,
    PortfolioPoint,
    solve_one
)
from markowitz_frontier.core.loader import DataLoader, compute_stats_from_returns, export_frontier
from markowitz_frontier.config import FrontierConfig

__version__ = "1.0.0"

__all__ = [
    "MarkowitzOptimizer",
    "FrontierResult",
    "FrontierSolveError",
    "PortfolioPoint",
    "FrontierConfig",
    "DataLoader",
    "generate_problem_data",
    "risk_aversion_grid",
    "solve_one",
    "compute_stats_from_returns",
    "export_frontier",
]
