"""Precomputed placement tables for every piece on the board."""

from collections.abc import Sequence
from dataclasses import dataclass
from functools import cached_property

from iqfit.pieces import (
    BOARD_HEIGHT,
    BOARD_WIDTH,
    PIECE_SHAPES,
    Shape,
    generate_orientations,
    parse_shape,
    piece_letter,
)

MAX_CELLS = 64
"""Largest board whose occupancy still fits in a 64-bit mask."""

MAX_PIECES = 26
"""One letter A-Z per piece."""


@dataclass(frozen=True)
class Placement:
    """One orientation of a piece at one board offset."""

    mask: int
    """Occupancy bitmask; bit `i` is set if cell `i` is covered."""

    cells: tuple[int, ...]
    """Covered cell indices (row-major), in the order of the oriented shape."""


@dataclass(frozen=True)
class PieceCatalog:
    """Read-only placement tables for a board and a set of pieces.

    Built once per process by `build_catalog` and passed explicitly to the search and
    the partitioner.
    """

    width: int
    """Number of board columns."""

    height: int
    """Number of board rows."""

    orientations: tuple[tuple[Shape, ...], ...]
    """Distinct orientations of each piece, in canonical order."""

    placements: tuple[tuple[Placement, ...], ...]
    """`placements[p][i]` is placement `i` of piece `p`."""

    placements_by_cell: tuple[tuple[tuple[int, ...], ...], ...]
    """`placements_by_cell[p][c]` holds the ids of the placements of piece `p` covering cell `c`."""

    @property
    def n_cells(self) -> int:
        return self.width * self.height

    @property
    def n_pieces(self) -> int:
        return len(self.placements)

    @cached_property
    def full_mask(self) -> int:
        """Mask with a bit set for every board cell."""
        return (1 << self.n_cells) - 1

    @cached_property
    def letter_codes(self) -> tuple[int, ...]:
        """ASCII code of each piece's letter, as written into the board buffer."""
        return tuple(ord(piece_letter(p)) for p in range(self.n_pieces))

    def summary(self) -> dict[str, object]:
        """Return a dictionary-based summary of the catalog, for logging."""
        return {
            "board": f"{self.width}x{self.height}",
            "pieces": self.n_pieces,
            "orientations": [len(o) for o in self.orientations],
            "placements": [len(p) for p in self.placements],
        }


def build_catalog(
    shapes: Sequence[str] = PIECE_SHAPES,
    *,
    width: int = BOARD_WIDTH,
    height: int = BOARD_HEIGHT,
) -> PieceCatalog:
    """Compute every placement of every piece, and the per-cell placement index.

    Placements of a piece are numbered in orientation-then-offset order (offsets
    row-major), so ids are stable across processes.

    Args:
        shapes: Base shape string of each piece (see `parse_shape`).
        width: Number of board columns.
        height: Number of board rows.

    Returns:
        The catalog of placements.

    Raises:
        ValueError: If the board does not fit a 64-bit mask, there are too many pieces to
            label, or the pieces' total area differs from the board area.
    """
    n_cells = width * height
    if width <= 0 or height <= 0 or n_cells > MAX_CELLS:
        raise ValueError(f"Board must have between 1 and {MAX_CELLS} cells, got {width}x{height}.")
    if not 0 < len(shapes) <= MAX_PIECES:
        raise ValueError(f"Expected between 1 and {MAX_PIECES} pieces, got {len(shapes)}.")

    base_shapes = [parse_shape(s) for s in shapes]
    total_area = sum(len(base) for base in base_shapes)
    if total_area != n_cells:
        raise ValueError(
            f"Pieces cover {total_area} cells but the board has {n_cells}; no exact cover exists."
        )

    all_orientations: list[tuple[Shape, ...]] = []
    all_placements: list[tuple[Placement, ...]] = []
    all_by_cell: list[tuple[tuple[int, ...], ...]] = []

    for base in base_shapes:
        orientations = generate_orientations(base)
        placements: list[Placement] = []
        by_cell: list[list[int]] = [[] for _ in range(n_cells)]

        for shape in orientations:
            shape_w = max(x for x, _ in shape) + 1
            shape_h = max(y for _, y in shape) + 1

            # Slide the shape over every offset where it fits on the board
            for oy in range(height - shape_h + 1):
                for ox in range(width - shape_w + 1):
                    cells = tuple((oy + dy) * width + (ox + dx) for dx, dy in shape)
                    if any(not 0 <= idx < n_cells for idx in cells):
                        continue

                    mask = 0
                    for idx in cells:
                        mask |= 1 << idx

                    placement_id = len(placements)
                    placements.append(Placement(mask=mask, cells=cells))
                    for idx in cells:
                        by_cell[idx].append(placement_id)

        all_orientations.append(tuple(orientations))
        all_placements.append(tuple(placements))
        all_by_cell.append(tuple(tuple(ids) for ids in by_cell))

    return PieceCatalog(
        width=width,
        height=height,
        orientations=tuple(all_orientations),
        placements=tuple(all_placements),
        placements_by_cell=tuple(all_by_cell),
    )
