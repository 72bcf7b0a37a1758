"""Classes and functions for representing the game board."""

from collections.abc import Iterator

EMPTY = "."
"""Marker for a cell not covered by any piece."""


class Board:
    """Store a 2D matrix of single-letter cells as a 1D buffer in row-major order.

    Cells are ASCII letters (one per piece) or `EMPTY`.
    """

    def __init__(self, data: str | bytes | bytearray, rows: int, cols: int) -> None:
        if len(data) != rows * cols:
            raise ValueError(f"Board data length {len(data)} does not match {rows}x{cols}.")
        self.data = bytearray(data, "ascii") if isinstance(data, str) else bytearray(data)
        self.n_rows = rows
        self.n_cols = cols

    @classmethod
    def empty(cls, rows: int, cols: int) -> "Board":
        """Create a board with every cell empty."""
        return cls(EMPTY * (rows * cols), rows, cols)

    def copy(self) -> "Board":
        """Generate a copy of the board."""
        return Board(self.data, self.n_rows, self.n_cols)

    def __str__(self) -> str:
        """Returns the board as a single row-major string."""
        return self.data.decode("ascii")

    def rows(self) -> Iterator[str]:
        """Yield each row of the board as a string, top to bottom."""
        text = str(self)
        for start in range(0, len(text), self.n_cols):
            yield text[start : start + self.n_cols]
