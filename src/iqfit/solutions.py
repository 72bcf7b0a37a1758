"""Serialization of solved boards: worker payloads, merged results and the output file."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

from iqfit.board import Board


class OutputWriteError(Exception):
    """Raised when the solutions file cannot be written."""

    pass


def encode_solutions(solutions: Iterable[str]) -> bytes:
    """Concatenate fixed-width solution strings into a single ASCII payload (no delimiters)."""
    return "".join(solutions).encode("ascii")


@dataclass(frozen=True)
class SolutionSet:
    """Solutions merged from all workers at the coordinator.

    Worker `rank` owns `counts[rank]` records of `record_size` bytes each, starting at
    byte offset `displacements[rank]` of `buffer`.
    """

    counts: tuple[int, ...]
    """Number of solutions found by each rank."""

    displacements: tuple[int, ...]
    """Byte offset of each rank's region in `buffer`."""

    buffer: bytes
    """All ranks' payloads, in rank order."""

    record_size: int
    """Length of one solution (number of board cells)."""

    width: int
    """Number of board columns, used to render each solution."""

    @property
    def total(self) -> int:
        """Total number of solutions across all ranks."""
        return sum(self.counts)

    def __len__(self) -> int:
        return self.total

    def for_rank(self, rank: int) -> list[str]:
        """Return the solutions found by one rank, in discovery order."""
        start = self.displacements[rank]
        return [
            self.buffer[offset : offset + self.record_size].decode("ascii")
            for offset in range(
                start, start + self.counts[rank] * self.record_size, self.record_size
            )
        ]

    def __iter__(self) -> Iterator[str]:
        """Iterate over solutions by ascending rank, then discovery order within a rank."""
        for rank in range(len(self.counts)):
            yield from self.for_rank(rank)


def render_solution(solution: str, width: int) -> str:
    """Render a solution as one line per board row, followed by a blank separator line."""
    board = Board(solution, len(solution) // width, width)
    return "\n".join(board.rows()) + "\n\n"


def write_solutions(path: PathLike | str, solutions: Iterable[str], *, width: int) -> Path:
    """Write all solutions to a text file, in iteration order.

    Args:
        path: Destination file; parent directories are created as needed.
        solutions: Row-major solution strings.
        width: Number of board columns.

    Returns:
        The path written.

    Raises:
        OutputWriteError: If the file cannot be opened or written.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            for solution in solutions:
                f.write(render_solution(solution, width))
    except OSError as e:
        raise OutputWriteError(f"Could not write solutions to {path}: {e}") from e
    return path
