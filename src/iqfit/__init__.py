"""IQ-Fit Puzzle Solver.

Enumerates every way to cover the 11x5 IQ-Fit board with its 12 pieces, each used
exactly once in any rotation or reflection.  Uses backtracking over precomputed
placements, with the placements of the first piece striped across worker processes.
"""

import sys
from sys import argv, exit

from .solutions import OutputWriteError
from .solver import solver


def main() -> None:
    """Main entry point for the IQ-Fit solver."""
    # Expect at most one argument: the number of worker ranks
    if len(argv) > 2:
        print("Usage: python -m iqfit [<n_workers>]")
        exit(1)
    n_workers = None
    if len(argv) == 2:
        try:
            n_workers = int(argv[1])
        except ValueError:
            n_workers = 0
        if n_workers < 1:
            print(f"Invalid number of workers: '{argv[1]}'")
            exit(1)

    try:
        solver.run(n_workers=n_workers)
    except OutputWriteError as e:
        print(f"Error: {e}", file=sys.stderr)
        exit(2)
