"""
Frontier Solver - Risk-Averse Markowitz Portfolios
===================================================

This module traces the long-only efficient frontier by solving, for each
risk-aversion value gamma, the convex quadratic program

    maximize:   mu^T w - gamma * w^T Sigma w
    subject to: sum(w) = 1
                w >= 0

through cvxpy. The solver is treated as a black box: it receives a problem
and hands back the optimal weights. Derived quantities (expected return,
risk) are computed from the weights with ordinary numpy.

Theory Background:
------------------
For gamma > 0 and a positive semi-definite Sigma the objective is concave and
the feasible set (the probability simplex) is compact, so an optimum always
exists. Sweeping gamma traces the efficient frontier:
1. Small gamma: the return term dominates, so all weight moves to the asset
   with the largest expected return
2. Large gamma: the risk term dominates, so the solution approaches the
   minimum variance portfolio (MVP), independent of mu
3. In between, risk and return both fall as gamma grows

Each solve is independent of the others, so a sweep can be spread across a
thread pool without changing its results.
"""

import warnings
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Tuple, List, Optional, Dict, Sequence

import cvxpy as cp
import numpy as np
import pandas as pd
from cvxpy.error import SolverError
from scipy.optimize import minimize


ACCEPTED_STATUSES = (cp.OPTIMAL, cp.OPTIMAL_INACCURATE)


class FrontierSolveError(RuntimeError):
    """Raised when the solver cannot produce an optimal portfolio for a gamma."""

    def __init__(self, gamma: float, status: str, detail: Optional[str] = None):
        self.gamma = gamma
        self.status = status
        message = f"Solve failed for gamma={gamma:.6g} (status: {status})"
        if detail:
            message += f": {detail}"
        super().__init__(message)


@dataclass
class PortfolioPoint:
    """One solved point of the frontier."""
    gamma: float
    weights: np.ndarray
    expected_return: float
    risk: float
    objective: float
    status: str = cp.OPTIMAL


@dataclass
class FrontierResult:
    """
    Parallel per-sample arrays produced by a frontier sweep.

    Row i of every array belongs to the i-th risk-aversion value.
    """
    gammas: np.ndarray
    weights: np.ndarray
    returns: np.ndarray
    risks: np.ndarray
    objectives: np.ndarray
    statuses: np.ndarray

    @classmethod
    def from_points(cls, points: Sequence[PortfolioPoint]) -> "FrontierResult":
        if not points:
            raise ValueError("Cannot build a frontier from zero points")
        return cls(
            gammas=np.array([p.gamma for p in points]),
            weights=np.vstack([p.weights for p in points]),
            returns=np.array([p.expected_return for p in points]),
            risks=np.array([p.risk for p in points]),
            objectives=np.array([p.objective for p in points]),
            statuses=np.array([p.status for p in points], dtype=object),
        )

    def __len__(self) -> int:
        return len(self.gammas)

    def point(self, index: int) -> PortfolioPoint:
        return PortfolioPoint(
            gamma=float(self.gammas[index]),
            weights=self.weights[index],
            expected_return=float(self.returns[index]),
            risk=float(self.risks[index]),
            objective=float(self.objectives[index]),
            status=str(self.statuses[index]),
        )

    def validate_indices(self, indices: Sequence[int]) -> List[int]:
        """
        Check that every sample position exists in this result.

        Negative positions are rejected rather than wrapped, and
        fractional positions are rejected rather than truncated.

        Raises:
            IndexError: If any position is not an integer in [0, len(self))
        """
        checked = []
        for idx in indices:
            if int(idx) != idx:
                raise IndexError(f"Sample index {idx} is not an integer")
            if not 0 <= idx < len(self):
                raise IndexError(
                    f"Sample index {idx} out of range for frontier with "
                    f"{len(self)} points"
                )
            checked.append(int(idx))
        return checked

    def to_frame(self, asset_names: Optional[List[str]] = None) -> pd.DataFrame:
        """
        Tabulate the frontier, one row per sample.

        Columns: gamma, return, risk, objective, status, then one weight
        column per asset.
        """
        n_assets = self.weights.shape[1]
        if asset_names is None:
            asset_names = [f"Asset_{i+1}" for i in range(n_assets)]
        frame = pd.DataFrame({
            'gamma': self.gammas,
            'return': self.returns,
            'risk': self.risks,
            'objective': self.objectives,
            'status': self.statuses,
        })
        weights = pd.DataFrame(self.weights, columns=list(asset_names))
        return pd.concat([frame, weights], axis=1)


def _check_gamma(gamma: float) -> float:
    gamma = float(gamma)
    if not np.isfinite(gamma) or gamma <= 0:
        raise ValueError(f"Risk aversion must be a positive finite number, got {gamma}")
    return gamma


def _check_covariance(cov_matrix: np.ndarray):
    """
    Reject a covariance matrix that is not positive semi-definite.

    Raises:
        ValueError: If the smallest eigenvalue is meaningfully negative
    """
    eigenvalues = np.linalg.eigvalsh((cov_matrix + cov_matrix.T) / 2)
    tolerance = 1e-8 * max(1.0, np.abs(eigenvalues).max())
    if eigenvalues.min() < -tolerance:
        raise ValueError(
            f"Covariance matrix is not positive semi-definite "
            f"(min eigenvalue {eigenvalues.min():.3e})"
        )


def _build_problem(
    expected_returns: np.ndarray,
    cov_matrix: np.ndarray
) -> Tuple[cp.Problem, cp.Variable, cp.Parameter]:
    """Parametrized long-only problem; gamma is left as a Parameter."""
    n_assets = len(expected_returns)
    w = cp.Variable(n_assets)
    gamma = cp.Parameter(nonneg=True)

    ret = expected_returns @ w
    # Callers run _check_covariance first; psd_wrap skips the check
    risk = cp.quad_form(w, cp.psd_wrap(cov_matrix))

    problem = cp.Problem(
        cp.Maximize(ret - gamma * risk),
        [cp.sum(w) == 1, w >= 0]
    )
    return problem, w, gamma


def _run_solver(
    problem: cp.Problem,
    w: cp.Variable,
    gamma: float,
    expected_returns: np.ndarray,
    cov_matrix: np.ndarray,
    solver: Optional[str]
) -> PortfolioPoint:
    try:
        if solver:
            problem.solve(solver=solver)
        else:
            problem.solve()
    except SolverError as e:
        raise FrontierSolveError(gamma, "solver_error", str(e)) from e

    status = problem.status
    if status not in ACCEPTED_STATUSES or w.value is None:
        raise FrontierSolveError(gamma, status)
    if status == cp.OPTIMAL_INACCURATE:
        warnings.warn(f"Solution for gamma={gamma:.6g} is inaccurate")

    weights = np.asarray(w.value, dtype=float).flatten()
    variance = max(float(weights @ cov_matrix @ weights), 0.0)

    return PortfolioPoint(
        gamma=gamma,
        weights=weights,
        expected_return=float(expected_returns @ weights),
        risk=float(np.sqrt(variance)),
        objective=float(problem.value),
        status=status,
    )


def solve_one(
    expected_returns: np.ndarray,
    cov_matrix: np.ndarray,
    gamma: float,
    solver: Optional[str] = None
) -> PortfolioPoint:
    """
    Solve the long-only Markowitz problem for a single risk aversion.

    Builds a fresh problem on every call and shares no state, so it is
    safe to call from several threads at once.

    Args:
        expected_returns: Vector of expected returns (length n)
        cov_matrix: Positive semi-definite covariance matrix (n x n)
        gamma: Risk-aversion value, must be positive
        solver: Optional cvxpy solver name (e.g. 'CLARABEL', 'OSQP')

    Returns:
        PortfolioPoint with the optimal weights, return and risk

    Raises:
        ValueError: If gamma is not positive or the covariance matrix
            is not positive semi-definite
        FrontierSolveError: If the solver fails or reports a non-optimal status
    """
    gamma = _check_gamma(gamma)
    expected_returns = np.asarray(expected_returns, dtype=float).flatten()
    cov_matrix = np.asarray(cov_matrix, dtype=float)
    _check_covariance(cov_matrix)

    problem, w, gamma_param = _build_problem(expected_returns, cov_matrix)
    gamma_param.value = gamma
    return _run_solver(problem, w, gamma, expected_returns, cov_matrix, solver)


class MarkowitzOptimizer:
    """
    Long-only mean-variance optimizer driven by a risk-aversion parameter.

    This class provides methods to:
    - Calculate portfolio statistics (return, variance, standard deviation)
    - Solve the risk-averse problem for one gamma
    - Sweep a grid of gammas to trace the efficient frontier
    - Find the minimum variance portfolio as an independent reference

    Attributes:
        expected_returns (np.ndarray): Vector of expected returns for each asset
        cov_matrix (np.ndarray): Covariance matrix of asset returns
        asset_names (List[str]): Names of the assets
        n_assets (int): Number of assets
        solver (Optional[str]): cvxpy solver name, None for cvxpy's default

    Example:
        >>> mu, sigma, names = generate_problem_data(10, seed=1)
        >>> optimizer = MarkowitzOptimizer(mu, sigma, names)
        >>> result = optimizer.efficient_frontier(risk_aversion_grid())
    """

    def __init__(
        self,
        expected_returns: np.ndarray,
        cov_matrix: np.ndarray,
        asset_names: Optional[List[str]] = None,
        solver: Optional[str] = "CLARABEL"
    ):
        """
        Initialize the optimizer.

        Args:
            expected_returns: Vector of expected returns for each asset
            cov_matrix: Covariance matrix of asset returns (n x n)
            asset_names: Optional list of asset names (default: Asset_1, Asset_2, ...)
            solver: cvxpy solver name (default: CLARABEL)

        Raises:
            ValueError: If dimensions don't match or the covariance matrix
                is not positive semi-definite
        """
        self.expected_returns = np.array(expected_returns, dtype=float).flatten()
        self.cov_matrix = np.array(cov_matrix, dtype=float)
        self.n_assets = len(self.expected_returns)
        self.solver = solver

        self._validate_inputs()

        if asset_names is None:
            self.asset_names = [f"Asset_{i+1}" for i in range(self.n_assets)]
        else:
            self.asset_names = list(asset_names)
            if len(self.asset_names) != self.n_assets:
                raise ValueError(
                    f"Got {len(self.asset_names)} asset names for {self.n_assets} assets"
                )

        # Built on first use and reused across solves
        self._problem = None

    def _validate_inputs(self):
        """Validate that inputs are properly formatted."""
        if self.n_assets < 1:
            raise ValueError("At least one asset is required")

        if self.cov_matrix.shape != (self.n_assets, self.n_assets):
            raise ValueError(
                f"Covariance matrix shape {self.cov_matrix.shape} doesn't match "
                f"number of assets {self.n_assets}"
            )

        if not (np.all(np.isfinite(self.expected_returns))
                and np.all(np.isfinite(self.cov_matrix))):
            raise ValueError("Expected returns and covariance must be finite")

        if not np.allclose(self.cov_matrix, self.cov_matrix.T):
            warnings.warn("Covariance matrix is not symmetric. Symmetrizing...")
        self.cov_matrix = (self.cov_matrix + self.cov_matrix.T) / 2

        _check_covariance(self.cov_matrix)

    def portfolio_return(self, weights: np.ndarray) -> float:
        """
        Calculate expected portfolio return.

        Formula: mu_p = w^T * mu
        """
        return float(np.dot(weights, self.expected_returns))

    def portfolio_variance(self, weights: np.ndarray) -> float:
        """
        Calculate portfolio variance using the quadratic form.

        Formula: sigma_p^2 = w^T * Sigma * w
        """
        return float(np.dot(weights, np.dot(self.cov_matrix, weights)))

    def portfolio_std(self, weights: np.ndarray) -> float:
        """Portfolio standard deviation, sqrt(w^T * Sigma * w)."""
        return float(np.sqrt(max(self.portfolio_variance(weights), 0.0)))

    def portfolio_stats(self, weights: np.ndarray) -> Dict[str, float]:
        """
        Calculate all portfolio statistics.

        Returns:
            Dictionary containing mean, std and variance
        """
        var = self.portfolio_variance(weights)
        return {
            'mean': self.portfolio_return(weights),
            'std': float(np.sqrt(max(var, 0.0))),
            'variance': var
        }

    def objective_value(self, weights: np.ndarray, gamma: float) -> float:
        """Risk-adjusted return mu^T w - gamma * w^T Sigma w."""
        return self.portfolio_return(weights) - gamma * self.portfolio_variance(weights)

    def solve(self, gamma: float) -> PortfolioPoint:
        """
        Find the optimal long-only portfolio for one risk aversion.

        Reuses a single parametrized problem, so repeated calls only
        update gamma. Not safe to call concurrently on the same instance;
        use solve_one for that.

        Args:
            gamma: Risk-aversion value, must be positive

        Returns:
            PortfolioPoint with weights, expected return and risk

        Raises:
            ValueError: If gamma is not positive
            FrontierSolveError: If the solve fails
        """
        gamma = _check_gamma(gamma)
        if self._problem is None:
            self._problem = _build_problem(self.expected_returns, self.cov_matrix)
        problem, w, gamma_param = self._problem
        gamma_param.value = gamma
        return _run_solver(
            problem, w, gamma, self.expected_returns, self.cov_matrix, self.solver
        )

    def efficient_frontier(
        self,
        gammas: Sequence[float],
        max_workers: Optional[int] = None
    ) -> FrontierResult:
        """
        Sweep risk aversion and solve one problem per value.

        Results keep the order of `gammas`. The first failing solve aborts
        the sweep and its FrontierSolveError propagates.

        Args:
            gammas: Risk-aversion values, each positive
            max_workers: If greater than 1, solve on a thread pool of this size

        Returns:
            FrontierResult with one row per gamma
        """
        gammas = np.asarray(gammas, dtype=float).flatten()
        if gammas.size == 0:
            raise ValueError("gammas must contain at least one value")

        if max_workers is not None and max_workers > 1:
            def task(gamma):
                return solve_one(self.expected_returns, self.cov_matrix, gamma, self.solver)

            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                points = list(executor.map(task, gammas))
        else:
            points = [self.solve(gamma) for gamma in gammas]

        return FrontierResult.from_points(points)

    def minimum_variance_portfolio(self) -> Tuple[np.ndarray, Dict[str, float]]:
        """
        Find the long-only Minimum Variance Portfolio (MVP).

        Solved with scipy's SLSQP rather than cvxpy so that it serves as an
        independent reference for the large-gamma end of the frontier.

        Optimization problem:
            minimize: w^T * Sigma * w
            subject to: sum(w) = 1, w >= 0

        Returns:
            Tuple of (weights, stats_dict)
        """
        # Initial guess: equal weights
        w0 = np.ones(self.n_assets) / self.n_assets

        constraints = [{'type': 'eq', 'fun': lambda w: np.sum(w) - 1}]
        bounds = [(0, 1) for _ in range(self.n_assets)]

        result = minimize(
            self.portfolio_variance,
            w0,
            jac=lambda w: 2 * np.dot(self.cov_matrix, w),
            method='SLSQP',
            bounds=bounds,
            constraints=constraints,
            options={'ftol': 1e-12, 'maxiter': 500}
        )

        if not result.success:
            warnings.warn(f"MVP optimization did not converge: {result.message}")

        weights = result.x
        return weights, self.portfolio_stats(weights)

    def max_return_asset(self) -> int:
        """Index of the asset with the largest expected return."""
        return int(np.argmax(self.expected_returns))

    def get_asset_stats(self) -> Dict[str, Dict[str, float]]:
        """
        Get individual asset statistics.

        Returns:
            Dictionary mapping asset names to their stats
        """
        stats = {}
        for i, name in enumerate(self.asset_names):
            stats[name] = {
                'mean': float(self.expected_returns[i]),
                'std': float(np.sqrt(self.cov_matrix[i, i])),
                'variance': float(self.cov_matrix[i, i])
            }
        return stats

    def summary_report(self, result: Optional[FrontierResult] = None) -> str:
        """
        Generate a plain-text summary of the assets, the MVP and,
        if given, the ends of a solved frontier.
        """
        lines = []
        lines.append("=" * 70)
        lines.append("EFFICIENT FRONTIER SUMMARY REPORT")
        lines.append("=" * 70)

        lines.append("\n--- Individual Asset Statistics ---")
        lines.append(f"{'Asset':<12} {'Mean':>12} {'Std Dev':>12} {'Variance':>12}")
        lines.append("-" * 50)
        for name, stats in self.get_asset_stats().items():
            lines.append(
                f"{name:<12} {stats['mean']:>12.6f} {stats['std']:>12.6f} "
                f"{stats['variance']:>12.6f}"
            )

        lines.append("\n--- Minimum Variance Portfolio (MVP) ---")
        mvp_w, mvp_stats = self.minimum_variance_portfolio()
        lines.append("Weights:")
        for i, name in enumerate(self.asset_names):
            lines.append(f"  {name}: {mvp_w[i]:.6f} ({mvp_w[i]*100:.2f}%)")
        lines.append(f"Expected Return: {mvp_stats['mean']:.6f}")
        lines.append(f"Standard Deviation: {mvp_stats['std']:.6f}")

        if result is not None:
            lines.append("\n--- Frontier Endpoints ---")
            for label, idx in (("Lowest gamma", 0), ("Highest gamma", len(result) - 1)):
                point = result.point(idx)
                top = int(np.argmax(point.weights))
                lines.append(
                    f"{label} ({point.gamma:.4g}): return {point.expected_return:.6f}, "
                    f"risk {point.risk:.6f}, largest holding {self.asset_names[top]} "
                    f"({point.weights[top]*100:.2f}%)"
                )

        lines.append("\n" + "=" * 70)

        return "\n".join(lines)
