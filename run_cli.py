"""
CLI entry point for the frontier sweep.

Usage:
    python run_cli.py                    # Default walkthrough
    python run_cli.py --assets 20        # More synthetic assets
    python run_cli.py --file returns.csv # Historical returns
    python run_cli.py --workers 4        # Parallel solves

For installed package, use: mf-analyze
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from markowitz_frontier.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
