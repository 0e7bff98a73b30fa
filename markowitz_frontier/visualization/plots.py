"""
Plotting Module for the Risk-Aversion Frontier
==============================================

Two views of a solved frontier sweep:
- The risk/return trade-off curve, with single-asset portfolios for
  reference and a few samples highlighted by their gamma value
- A stacked bar chart of the allocation at those highlighted samples

Both functions return the matplotlib Figure and optionally save it. Sample
positions are expected to be valid; check them with
FrontierResult.validate_indices first.
"""

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from typing import Optional, Tuple, List, Sequence

from markowitz_frontier.core.optimizer import FrontierResult


def _gamma_label(gamma: float) -> str:
    return r"$\gamma = %.2f$" % gamma


def plot_risk_return_tradeoff(
    result: FrontierResult,
    expected_returns: np.ndarray,
    cov_matrix: np.ndarray,
    markers_on: Sequence[int] = (29, 40),
    asset_names: Optional[List[str]] = None,
    figsize: Tuple[int, int] = (10, 7),
    save_path: Optional[str] = None,
    title: str = "Risk-Return Trade-off Curve"
) -> Figure:
    """
    Plot risk (x) against return (y) for every sample of the sweep.

    Draws:
    - The trade-off curve through all samples
    - Single-asset portfolios at (sqrt(Sigma_ii), mu_i)
    - A marker at each of `markers_on`, annotated with its gamma

    Args:
        result: Solved frontier
        expected_returns: Vector of expected returns used for the sweep
        cov_matrix: Covariance matrix used for the sweep
        markers_on: Sample positions to highlight
        asset_names: Optional labels for the single-asset points
        figsize: Figure size (width, height)
        save_path: If provided, save the figure to this path
        title: Plot title

    Returns:
        matplotlib Figure object
    """
    expected_returns = np.asarray(expected_returns, dtype=float).flatten()
    cov_matrix = np.asarray(cov_matrix, dtype=float)

    fig, ax = plt.subplots(figsize=figsize)

    ax.plot(result.risks, result.returns, 'g-', linewidth=2,
            label='Optimal portfolios', zorder=2)

    asset_stds = np.sqrt(np.diag(cov_matrix))
    ax.scatter(asset_stds, expected_returns,
               c='red', s=60, marker='o', edgecolors='black',
               label='Single assets', zorder=4)
    if asset_names is not None:
        for i, name in enumerate(asset_names):
            ax.annotate(name, (asset_stds[i], expected_returns[i]),
                        xytext=(5, 5), textcoords='offset points', fontsize=8)

    for marker in markers_on:
        ax.plot(result.risks[marker], result.returns[marker], 'bs',
                markersize=8, zorder=5)
        ax.annotate(_gamma_label(result.gammas[marker]),
                    xy=(result.risks[marker], result.returns[marker]),
                    xytext=(10, -10), textcoords='offset points',
                    fontsize=11)

    ax.set_xlabel('Standard deviation', fontsize=12)
    ax.set_ylabel('Return', fontsize=12)
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.legend(loc='lower right', fontsize=10)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')

    return fig


def plot_allocations(
    result: FrontierResult,
    indices: Sequence[int] = (29, 40),
    asset_names: Optional[List[str]] = None,
    figsize: Tuple[int, int] = (8, 6),
    save_path: Optional[str] = None,
    title: str = "Portfolio Allocation"
) -> Figure:
    """
    Stacked bar chart of the weights at selected samples.

    One bar per sample position; each asset is one colored segment, so every
    bar stacks to the full budget.

    Args:
        result: Solved frontier
        indices: Sample positions to draw
        asset_names: Legend labels (default: Asset_1, Asset_2, ...)
        figsize: Figure size
        save_path: Optional path to save figure
        title: Plot title

    Returns:
        matplotlib Figure object
    """
    n_assets = result.weights.shape[1]
    if asset_names is None:
        asset_names = [f"Asset_{i+1}" for i in range(n_assets)]

    fig, ax = plt.subplots(figsize=figsize)

    x = np.arange(len(indices))
    selected = result.weights[list(indices)]
    colors = plt.cm.tab20(np.linspace(0, 1, n_assets))

    bottom = np.zeros(len(indices))
    for i in range(n_assets):
        # Solver noise can leave tiny negative weights
        heights = np.clip(selected[:, i], 0, None)
        ax.bar(x, heights, width=0.6, bottom=bottom, color=colors[i],
               edgecolor='black', linewidth=0.5, label=asset_names[i])
        bottom += heights

    ax.set_xticks(x)
    ax.set_xticklabels([_gamma_label(result.gammas[idx]) for idx in indices])
    ax.set_xlabel(r'$\gamma$', fontsize=12)
    ax.set_ylabel('Fraction of budget', fontsize=12)
    ax.set_ylim(0, 1.05)
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.legend(loc='center left', bbox_to_anchor=(1.0, 0.5), fontsize=9)
    ax.grid(True, axis='y', alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')

    return fig
