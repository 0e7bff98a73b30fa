"""
Portfolio Optimization Walkthrough
10 synthetic assets, seed 1
Risk aversion swept from 10^-2 to 10^3

We pick the long-only, fully invested portfolio w that maximizes the
risk-adjusted return

    mu^T w - gamma * w^T Sigma w

for a range of gamma. The curve of (risk, return) pairs this traces is the
efficient frontier; no attainable portfolio lies above and to the left of it.
"""

from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt

from markowitz_frontier import MarkowitzOptimizer, generate_problem_data, risk_aversion_grid
from markowitz_frontier.visualization import plot_risk_return_tradeoff, plot_allocations

# Get the project root directory (parent of examples/)
PROJECT_ROOT = Path(__file__).parent.parent
OUTPUT_DIR = PROJECT_ROOT / 'output'
OUTPUT_DIR.mkdir(exist_ok=True)

# === Problem data ===
n = 10
mu, Sigma, names = generate_problem_data(n, seed=1)

# === Risk-aversion sweep ===
SAMPLES = 100
gamma_vals = risk_aversion_grid(SAMPLES, -2, 3)

optimizer = MarkowitzOptimizer(mu, Sigma, names)
frontier = optimizer.efficient_frontier(gamma_vals)

print("=" * 60)
print("RISK-AVERSION SWEEP")
print("=" * 60)
print(f"{'gamma':>10} {'Return':>10} {'Std Dev':>10}")
for i in range(0, SAMPLES, 11):
    print(f"{frontier.gammas[i]:>10.4f} {frontier.returns[i]:>10.4f} {frontier.risks[i]:>10.4f}")

# === Ends of the frontier ===
# Small gamma: everything goes into the best-returning asset
best = optimizer.max_return_asset()
print(f"\ngamma = {gamma_vals[0]:.2f}: {frontier.weights[0, best]*100:.1f}% in {names[best]}")

# Large gamma: the minimum variance portfolio, whatever mu is
mvp_w, mvp_stats = optimizer.minimum_variance_portfolio()
print(f"gamma = {gamma_vals[-1]:.0f}: risk {frontier.risks[-1]:.4f} "
      f"(MVP risk {mvp_stats['std']:.4f})")
print(f"Max weight difference from MVP: {np.abs(frontier.weights[-1] - mvp_w).max():.4f}")

# === Plots ===
markers_on = [29, 40]

plot_risk_return_tradeoff(frontier, mu, Sigma, markers_on=markers_on,
                          save_path=str(OUTPUT_DIR / 'walkthrough_tradeoff.png'))
plot_allocations(frontier, markers_on, names,
                 save_path=str(OUTPUT_DIR / 'walkthrough_allocations.png'))

print(f"\nFigures saved to: {OUTPUT_DIR}")
plt.show()
