"""
Synthetic Problem Data
======================

Generates the toy problem instance used to illustrate the efficient
frontier: a vector of expected returns and a covariance matrix for a fixed
number of synthetic assets, plus the grid of risk-aversion values swept by
the frontier solver.

The covariance matrix is built as A^T A for a standard-normal matrix A, which
makes it symmetric and positive semi-definite by construction.
"""

import numpy as np
from typing import Tuple, List


def generate_problem_data(
    n_assets: int = 10,
    seed: int = 1
) -> Tuple[np.ndarray, np.ndarray, List[str]]:
    """
    Generate expected returns and a covariance matrix for synthetic assets.

    Draws, in order, from numpy's seeded global generator:
    - mu = |randn(n, 1)|, flattened to a length-n vector
    - A = randn(n, n), giving Sigma = A^T A

    The same seed always yields the same mu and Sigma.

    Args:
        n_assets: Number of assets (default: 10)
        seed: Random seed for reproducibility (default: 1)

    Returns:
        Tuple of (expected_returns, cov_matrix, asset_names)

    Raises:
        ValueError: If n_assets is not positive
    """
    if n_assets < 1:
        raise ValueError(f"n_assets must be positive, got {n_assets}")

    np.random.seed(seed)

    expected_returns = np.abs(np.random.randn(n_assets, 1)).flatten()

    A = np.random.randn(n_assets, n_assets)
    cov_matrix = A.T.dot(A)

    asset_names = [f"Asset_{i+1}" for i in range(n_assets)]

    return expected_returns, cov_matrix, asset_names


def risk_aversion_grid(
    samples: int = 100,
    low_exp: float = -2.0,
    high_exp: float = 3.0
) -> np.ndarray:
    """
    Log-spaced risk-aversion values from 10^low_exp to 10^high_exp.

    Raises:
        ValueError: If samples < 1 or low_exp > high_exp
    """
    if samples < 1:
        raise ValueError(f"samples must be positive, got {samples}")
    if low_exp > high_exp:
        raise ValueError(f"low_exp ({low_exp}) exceeds high_exp ({high_exp})")
    return np.logspace(low_exp, high_exp, num=samples)
