"""Shared fixtures for the frontier tests."""

import matplotlib
matplotlib.use("Agg")

import pytest

from markowitz_frontier import MarkowitzOptimizer, generate_problem_data, risk_aversion_grid


@pytest.fixture(scope="session")
def problem_data():
    """The walkthrough instance: 10 assets drawn with seed 1."""
    return generate_problem_data(10, seed=1)


@pytest.fixture(scope="session")
def optimizer(problem_data):
    mu, sigma, names = problem_data
    return MarkowitzOptimizer(mu, sigma, names)


@pytest.fixture(scope="session")
def gammas():
    return risk_aversion_grid(100, -2, 3)


@pytest.fixture(scope="session")
def frontier(optimizer, gammas):
    return optimizer.efficient_frontier(gammas)
