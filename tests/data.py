"""Small instances with known tilings."""

from iqfit.board import EMPTY, Board
from iqfit.pieces import piece_letter
from iqfit.solver.search import SearchState

L_PAIR_SHAPES = ("01 11 10", "01 11 10")
"""Two L trominoes, tiling a 3x2 board."""

L_PAIR_SOLUTIONS = {"AABABB", "ABBAAB", "BAABBA", "BBABAA"}
"""All labelled tilings of the 3x2 board by `L_PAIR_SHAPES`."""

L_PAIR_ORDER = {
    1: ["AABABB", "ABBAAB", "BAABBA", "BBABAA"],
    2: ["AABABB", "ABBAAB", "BAABBA", "BBABAA"],
    3: ["AABABB", "BBABAA", "ABBAAB", "BAABBA"],
}
"""Merged output order of the 3x2 instance for a given number of ranks."""

L_PAIR_COUNTS = {1: (4,), 2: (2, 2), 3: (1, 1, 2)}
"""Per-rank solution counts of the 3x2 instance for a given number of ranks."""

KNOWN_SOLUTION = (
    "HHHFKKKEIIA"
    "HJJFFKEEBIA"
    "HJJGFFEBBAA"
    "LJLGDDECBBA"
    "LLLGGDDCCCC"
)
"""One tiling of the 11x5 board by the standard pieces."""


def clear_pieces(solution: str, letters: str) -> str:
    """Return `solution` with every cell of the given pieces emptied."""
    return "".join(EMPTY if ch in letters else ch for ch in solution)


def state_from_board(catalog, text: str) -> SearchState:
    """Build the search state of a partially filled board."""
    state = SearchState.empty(catalog)
    state.board = Board(text, catalog.height, catalog.width)
    for cell, ch in enumerate(text):
        if ch != EMPTY:
            state.mask |= 1 << cell
    for piece in range(catalog.n_pieces):
        state.used[piece] = piece_letter(piece) in text
    return state
