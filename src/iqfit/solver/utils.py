"""Utility functions for the IQ-Fit solver."""

import numpy as np

from iqfit.catalog import PieceCatalog
from iqfit.pieces import piece_letter

TIMESTAMP_FMT = "%Y-%m-%d %H:%M:%S.%f %Z%z"


def time_str(seconds: float) -> str:
    """Convert a time duration in seconds to a human-readable string.

    Args:
        seconds: Time duration in seconds.

    Returns:
        A string formatted as "HH:MM:SS.ss".
    """
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    return f"{int(hours):02}:{int(minutes):02}:{secs:05.2f}"


def int_comma(n: int) -> str:
    """Format an integer with commas as thousands separators."""
    return f"{n:,}"


def validate_solution(solution: str, catalog: PieceCatalog) -> bool:
    """Validate that a solution is an exact cover of the board.

    Every cell must hold a piece letter, every piece must appear, and the cells of each
    piece must match one of that piece's placements exactly.
    """
    if len(solution) != catalog.n_cells:
        return False

    grid = np.array(list(solution)).reshape(catalog.height, catalog.width)
    letters = {piece_letter(p) for p in range(catalog.n_pieces)}
    present = set(np.unique(grid).tolist())
    if present != letters:
        return False

    flat = grid.ravel()
    for piece in range(catalog.n_pieces):
        cells = np.flatnonzero(flat == piece_letter(piece))
        mask = 0
        for cell in cells.tolist():
            mask |= 1 << cell
        if all(p.mask != mask for p in catalog.placements[piece]):
            return False
    return True
