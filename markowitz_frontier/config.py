"""
Run Configuration
=================

Stores every user-configurable assumption of a frontier run. The defaults
reproduce the classic walkthrough: 10 synthetic assets drawn with seed 1,
100 risk-aversion samples log-spaced from 10^-2 to 10^3, and allocation
bars drawn at sample positions 29 and 40.
"""

from typing import List, Optional

import numpy as np

from markowitz_frontier.core.data import risk_aversion_grid


class FrontierConfig:
    """
    Stores all configurable assumptions for a frontier sweep.

    Attributes:
        n_assets: Number of synthetic assets to generate
        seed: Seed for the pseudo-random data generator
        samples: Number of risk-aversion values in the sweep
        gamma_min_exp: log10 of the smallest risk-aversion value
        gamma_max_exp: log10 of the largest risk-aversion value
        markers_on: Sample positions highlighted in the plots
        solver: cvxpy solver name (None lets cvxpy choose)
        max_workers: Thread pool size for the sweep (None or 1 = sequential)
    """

    DEFAULT_MARKERS = [29, 40]

    def __init__(self):
        """Initialize with the walkthrough defaults."""
        self.n_assets = 10
        self.seed = 1
        self.samples = 100
        self.gamma_min_exp = -2.0
        self.gamma_max_exp = 3.0
        self.markers_on: List[int] = list(self.DEFAULT_MARKERS)
        self.solver: Optional[str] = "CLARABEL"
        self.max_workers: Optional[int] = None

    @classmethod
    def from_args(cls, args) -> "FrontierConfig":
        """
        Build a configuration from an argparse namespace.

        Attributes missing from the namespace, or set to None, keep
        their defaults.
        """
        config = cls()
        mapping = {
            'assets': 'n_assets',
            'seed': 'seed',
            'samples': 'samples',
            'gamma_min_exp': 'gamma_min_exp',
            'gamma_max_exp': 'gamma_max_exp',
            'markers': 'markers_on',
            'solver': 'solver',
            'workers': 'max_workers',
        }
        for arg_name, attr in mapping.items():
            value = getattr(args, arg_name, None)
            if value is not None:
                setattr(config, attr, value)
        return config

    def validate(self):
        """
        Check that the configuration describes a runnable sweep.

        Raises:
            ValueError: If any parameter is out of range
        """
        if self.n_assets < 1:
            raise ValueError(f"n_assets must be positive, got {self.n_assets}")
        if self.samples < 1:
            raise ValueError(f"samples must be positive, got {self.samples}")
        if self.gamma_min_exp > self.gamma_max_exp:
            raise ValueError(
                f"gamma_min_exp ({self.gamma_min_exp}) exceeds "
                f"gamma_max_exp ({self.gamma_max_exp})"
            )
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be positive, got {self.max_workers}")

    def gamma_grid(self) -> np.ndarray:
        """Risk-aversion values for the sweep, smallest first."""
        return risk_aversion_grid(self.samples, self.gamma_min_exp, self.gamma_max_exp)

    def describe(self) -> List[str]:
        """Lines summarizing the configuration, ready for logging."""
        workers = self.max_workers if self.max_workers else 1
        return [
            "=" * 60,
            "CURRENT FRONTIER CONFIGURATION",
            "=" * 60,
            f"Assets: {self.n_assets} (seed {self.seed})",
            f"Risk aversion: {self.samples} samples, "
            f"10^{self.gamma_min_exp:g} .. 10^{self.gamma_max_exp:g}",
            f"Highlighted samples: {self.markers_on}",
            f"Solver: {self.solver or 'cvxpy default'}",
            f"Workers: {workers}",
            "=" * 60,
        ]
