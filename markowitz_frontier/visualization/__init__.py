"""Visualization modules for the frontier sweep."""

from markowitz_frontier.visualization.plots import (
    plot_risk_return_tradeoff,
    plot_allocations
)

__all__ = [
    "plot_risk_return_tradeoff",
    "plot_allocations",
]
