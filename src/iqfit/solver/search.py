"""Backtracking exact-cover search over precomputed placements."""

from dataclasses import dataclass

from bitarray import bitarray
from bitarray.util import zeros

from iqfit.board import EMPTY, Board
from iqfit.catalog import PieceCatalog

_EMPTY_CODE = ord(EMPTY)


@dataclass
class SearchStats:
    """Statistics collected during a search."""

    nodes: int = 0
    """Number of search states visited."""

    solutions: int = 0
    """Number of complete boards found."""

    max_depth_reached: int = 0
    """Maximum recursion depth reached."""


@dataclass(kw_only=True)
class SearchState:
    """Mutable board state, owned by a single search for its whole duration."""

    mask: int
    """Occupancy bitmask of the board."""

    used: bitarray
    """`used[p]` is set once piece `p` is on the board."""

    board: Board
    """Letter of the piece covering each cell, or EMPTY."""

    @classmethod
    def empty(cls, catalog: PieceCatalog) -> "SearchState":
        """Create the state of an empty board with no pieces used."""
        return cls(
            mask=0,
            used=zeros(catalog.n_pieces),
            board=Board.empty(catalog.height, catalog.width),
        )

    def copy(self) -> "SearchState":
        """Generate an independent copy of the state."""
        return SearchState(mask=self.mask, used=self.used.copy(), board=self.board.copy())

    def place(self, catalog: PieceCatalog, piece: int, placement_id: int) -> None:
        """Commit a placement. The caller must have checked it does not overlap."""
        placement = catalog.placements[piece][placement_id]
        self.used[piece] = True
        self.mask |= placement.mask
        letter = catalog.letter_codes[piece]
        for cell in placement.cells:
            self.board.data[cell] = letter

    def remove(self, catalog: PieceCatalog, piece: int, placement_id: int) -> None:
        """Undo exactly the changes made by the matching `place` call."""
        placement = catalog.placements[piece][placement_id]
        self.used[piece] = False
        self.mask &= ~placement.mask
        for cell in placement.cells:
            self.board.data[cell] = _EMPTY_CODE


def first_empty_cell(mask: int, n_cells: int) -> int | None:
    """Return the lowest-indexed cell whose bit is unset, or None if the board is full."""
    free = ~mask & ((1 << n_cells) - 1)
    if not free:
        return None
    return (free & -free).bit_length() - 1


def search(
    catalog: PieceCatalog,
    state: SearchState,
    solutions: list[str],
    stats: SearchStats | None = None,
    depth: int = 0,
) -> None:
    """Find every way to place the unused pieces on the free cells of `state`.

    Each complete board is appended to `solutions` as a row-major string, in discovery
    order.  Only placements covering the first empty cell are tried: that cell must be
    covered by some piece, so no other branch can lead to a solution.

    IMPORTANT: `state` is mutated in place during the search, and is restored to its
    exact prior value before this function returns (or raises).

    Args:
        catalog (PieceCatalog): Placement tables for the board and pieces.
        state (SearchState): The current board state.
        solutions (list[str]): Output list, extended with each solution found.
        stats (SearchStats | None): Optional statistics, updated in place.
        depth (int): Recursion depth (0 = top-level call).
    """
    if stats is not None:
        stats.nodes += 1
        stats.max_depth_reached = max(stats.max_depth_reached, depth)

    if state.used.all():
        solutions.append(str(state.board))
        if stats is not None:
            stats.solutions += 1
        return

    cell = first_empty_cell(state.mask, catalog.n_cells)
    if cell is None:
        # Board full with pieces left over; unreachable when areas match.
        return

    for piece in range(catalog.n_pieces):
        if state.used[piece]:
            continue
        placements = catalog.placements[piece]
        for placement_id in catalog.placements_by_cell[piece][cell]:
            if placements[placement_id].mask & state.mask:
                continue  # Overlaps a placed piece
            state.place(catalog, piece, placement_id)
            try:
                search(catalog, state, solutions, stats, depth + 1)
            finally:
                state.remove(catalog, piece, placement_id)
