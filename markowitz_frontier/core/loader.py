"""
Data Loader Module
==================

Alternative inputs and outputs for the frontier solver:
- Load historical returns from CSV or Excel and reduce them to the expected
  return vector and covariance matrix the solver needs
- Validate a (mu, Sigma) pair before solving
- Export a solved frontier as a CSV or Excel table

Return files hold one row per period and one column per asset. A leading
date column, or any other non-numeric column, is dropped.
"""

import numpy as np
import pandas as pd
from typing import Tuple, List, Optional, Dict, Any
from pathlib import Path

from markowitz_frontier.core.optimizer import FrontierResult


EXCEL_SUFFIXES = ('.xlsx', '.xls')


def compute_stats_from_returns(
    returns: np.ndarray,
    asset_names: Optional[List[str]] = None
) -> Tuple[np.ndarray, np.ndarray, List[str]]:
    """
    Compute expected returns and covariance matrix from historical returns.

    Uses the population covariance (divide by N, not N-1).

    Args:
        returns: 2D array of returns (rows = time periods, cols = assets)
        asset_names: Optional list of asset names

    Returns:
        Tuple of (expected_returns, cov_matrix, asset_names)
    """
    returns = np.array(returns, dtype=float)

    if returns.ndim == 1:
        returns = returns.reshape(-1, 1)

    n_periods, n_assets = returns.shape
    if n_periods < 2:
        raise ValueError(f"Need at least 2 periods of returns, got {n_periods}")

    expected_returns = np.mean(returns, axis=0)
    cov_matrix = np.cov(returns, rowvar=False, ddof=0).reshape(n_assets, n_assets)

    if asset_names is None:
        asset_names = [f"Asset_{i+1}" for i in range(n_assets)]

    return expected_returns, cov_matrix, list(asset_names)


class DataLoader:
    """
    Loads return histories from disk and turns them into solver inputs.

    Example:
        >>> loader = DataLoader()
        >>> means, cov, names = loader.load_returns("returns.csv")
    """

    def read_returns_frame(
        self,
        file_path: str,
        sheet: Optional[str] = None
    ) -> pd.DataFrame:
        """
        Read a return table, keeping only numeric asset columns.

        Args:
            file_path: Path to a .csv, .xlsx or .xls file
            sheet: Sheet name for Excel files (default: first sheet)

        Returns:
            DataFrame of returns with one column per asset

        Raises:
            ValueError: If the file type is unsupported or no numeric data remains
        """
        path = Path(file_path)
        suffix = path.suffix.lower()

        if suffix == '.csv':
            df = pd.read_csv(path)
        elif suffix in EXCEL_SUFFIXES:
            df = pd.read_excel(path, sheet_name=sheet if sheet is not None else 0)
        else:
            raise ValueError(f"Unsupported file type '{suffix}'. Use .csv, .xlsx or .xls")

        # Drop date and any other non-numeric columns. Real date cells would
        # otherwise coerce to integer nanoseconds.
        dates = [col for col in df.columns
                 if pd.api.types.is_datetime64_any_dtype(df[col])]
        df = df.drop(columns=dates)
        numeric = df.apply(pd.to_numeric, errors='coerce')
        keep = [col for col in df.columns if numeric[col].notna().any()]
        df = numeric[keep].dropna(how='any')

        if df.empty:
            raise ValueError(f"No numeric return data found in {path}")

        df.columns = [str(col).strip() for col in df.columns]
        return df

    def load_returns(
        self,
        file_path: str,
        sheet: Optional[str] = None
    ) -> Tuple[np.ndarray, np.ndarray, List[str]]:
        """
        Load a return file and compute its sample statistics.

        Returns:
            Tuple of (expected_returns, cov_matrix, asset_names)
        """
        df = self.read_returns_frame(file_path, sheet)
        return compute_stats_from_returns(df.values, list(df.columns))

    def validate_data(
        self,
        expected_returns: np.ndarray,
        cov_matrix: np.ndarray,
        asset_names: List[str]
    ) -> Dict[str, Any]:
        """
        Validate the loaded data and return diagnostics.

        Checks:
        - Dimensions match
        - No NaN or Inf values
        - Covariance matrix is symmetric
        - Covariance matrix is positive semi-definite

        Returns:
            Dictionary with validation results
        """
        results = {
            'is_valid': True,
            'warnings': [],
            'errors': [],
            'n_assets': len(expected_returns),
            'asset_names': asset_names
        }

        if cov_matrix.shape != (len(expected_returns), len(expected_returns)):
            results['errors'].append(
                f"Dimension mismatch: {len(expected_returns)} returns but "
                f"{cov_matrix.shape} covariance matrix"
            )
            results['is_valid'] = False
            return results

        if len(asset_names) != len(expected_returns):
            results['errors'].append(
                f"{len(asset_names)} asset names for {len(expected_returns)} assets"
            )
            results['is_valid'] = False

        if not np.all(np.isfinite(expected_returns)):
            results['errors'].append("Expected returns contain NaN or Inf")
            results['is_valid'] = False

        if not np.all(np.isfinite(cov_matrix)):
            results['errors'].append("Covariance matrix contains NaN or Inf")
            results['is_valid'] = False
            return results

        if not np.allclose(cov_matrix, cov_matrix.T):
            results['warnings'].append("Covariance matrix is not symmetric")

        eigenvalues = np.linalg.eigvalsh((cov_matrix + cov_matrix.T) / 2)
        if np.any(eigenvalues < -1e-10):
            results['errors'].append(
                f"Covariance matrix has negative eigenvalues: "
                f"min = {eigenvalues.min():.6e}"
            )
            results['is_valid'] = False

        return results


def export_frontier(
    result: FrontierResult,
    file_path: str,
    asset_names: Optional[List[str]] = None
) -> Path:
    """
    Write a solved frontier to CSV or Excel, one row per sample.

    Args:
        result: Solved frontier
        file_path: Destination ending in .csv or .xlsx
        asset_names: Column names for the weight columns

    Returns:
        Path that was written
    """
    path = Path(file_path)
    frame = result.to_frame(asset_names)
    suffix = path.suffix.lower()

    if suffix == '.csv':
        frame.to_csv(path, index=False)
    elif suffix == '.xlsx':
        frame.to_excel(path, sheet_name='Frontier', index=False)
    else:
        raise ValueError(f"Unsupported export type '{suffix}'. Use .csv or .xlsx")

    return path
