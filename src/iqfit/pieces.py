"""Piece definitions for the IQ-Fit board, and their rotations/reflections."""

import re
from collections.abc import Iterable, Sequence
from typing import TypeAlias

from sortedcontainers import SortedSet

BOARD_WIDTH = 11
"""Number of columns on the board."""

BOARD_HEIGHT = 5
"""Number of rows on the board."""

NUM_CELLS = BOARD_WIDTH * BOARD_HEIGHT
"""Number of cells on the board (55)."""

NUM_PIECES = 12
"""Number of pieces, each of which must be placed exactly once."""

PIECE_SHAPES: tuple[str, ...] = (
    "01 10 11 21 31",
    "01 10 11 21 22",
    "10 11 12 13 03",
    "01 11 10 02",
    "00 01 02 12 13",
    "02 12 11 21 20",
    "02 12 11 10",
    "02 12 22 21 20",
    "01 11 10",
    "01 02 11 12 10",
    "01 11 10 21",
    "00 01 11 21 20",
)
"""Base shape of each piece, as whitespace-separated "xy" coordinate tokens.

Piece `i` is labelled with letter `chr(ord("A") + i)` on solved boards.
"""

VALID_TOKEN_PATTERN = re.compile(r"^[0-9]{2}$")
"""Regex pattern for a single coordinate token: exactly two digits, x then y."""

Coord: TypeAlias = tuple[int, int]
Shape: TypeAlias = tuple[Coord, ...]

DIHEDRAL_TRANSFORMS: tuple[tuple[bool, int], ...] = tuple(
    (reflect, rotations) for reflect in (False, True) for rotations in range(4)
)
"""The 8 symmetries of the square, as (reflect, number of 90° rotations) pairs."""


def parse_shape(shape_str: str) -> list[Coord]:
    """Parse a shape string such as "01 10 11 21 31" into (x, y) pairs.

    Args:
        shape_str: Whitespace-separated tokens, each consisting of exactly two digits.

    Returns:
        The coordinates in the order given.

    Raises:
        ValueError: If a token is not exactly two digits, or the string holds no tokens.
    """
    coords: list[Coord] = []
    for token in shape_str.split():
        if not VALID_TOKEN_PATTERN.match(token):
            raise ValueError(f"Invalid coordinate token {token!r} in shape {shape_str!r}.")
        coords.append((int(token[0]), int(token[1])))
    if not coords:
        raise ValueError("Shape string contains no coordinates.")
    return coords


def normalize(coords: Iterable[Coord]) -> Shape:
    """Translate a shape so that min x and min y are 0, and sort its cells."""
    coords = list(coords)
    min_x = min(x for x, _ in coords)
    min_y = min(y for _, y in coords)
    return tuple(sorted((x - min_x, y - min_y) for x, y in coords))


def transform(coords: Iterable[Coord], *, reflect: bool, rotations: int) -> list[Coord]:
    """Apply an optional reflection (x -> -x), then `rotations` quarter turns (x, y) -> (y, -x)."""
    transformed: list[Coord] = []
    for x0, y0 in coords:
        x, y = (-x0 if reflect else x0), y0
        for _ in range(rotations):
            x, y = y, -x
        transformed.append((x, y))
    return transformed


def generate_orientations(base: Sequence[Coord]) -> list[Shape]:
    """Generate all distinct orientations of a shape.

    Symmetric shapes yield fewer than 8 orientations, since identical normalized
    shapes collapse in the set.

    Returns:
        The distinct normalized shapes, in ascending canonical order.
    """
    unique_shapes: SortedSet = SortedSet()
    for reflect, rotations in DIHEDRAL_TRANSFORMS:
        unique_shapes.add(normalize(transform(base, reflect=reflect, rotations=rotations)))
    return list(unique_shapes)


def piece_letter(piece: int) -> str:
    """Return the letter used to mark cells covered by `piece` (0 -> 'A')."""
    return chr(ord("A") + piece)
