"""Core computational modules for the frontier sweep."""

from markowitz_frontier.core.data import generate_problem_data, risk_aversion_grid
from markowitz_frontier.core.optimizer import (
    MarkowitzOptimizer,
    FrontierResult,
    FrontierSolveError,
    PortfolioPoint,
    solve_one
)
from markowitz_frontier.core.loader import DataLoader, compute_stats_from_returns, export_frontier

__all__ = [
    "MarkowitzOptimizer",
    "FrontierResult",
    "FrontierSolveError",
    "PortfolioPoint",
    "DataLoader",
    "generate_problem_data",
    "risk_aversion_grid",
    "solve_one",
    "compute_stats_from_returns",
    "export_frontier",
]
