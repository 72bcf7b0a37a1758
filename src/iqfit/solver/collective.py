"""Coordinator side of the collective operations used to merge worker results."""

from collections.abc import Iterable, Sequence
from typing import TypeVar

T = TypeVar("T")


class CollectiveError(Exception):
    """Raised when worker contributions do not match the collective protocol."""

    pass


def compute_displacements(sizes: Sequence[int]) -> list[int]:
    """Return the offset of each rank's region in a buffer holding all regions back to back."""
    displs: list[int] = []
    offset = 0
    for size in sizes:
        displs.append(offset)
        offset += size
    return displs


class Collective:
    """Collection point at the coordinator for a fixed number of worker ranks.

    Contributions arrive as `(rank, value)` pairs in any order (e.g. completion order).
    Each operation consumes the whole iterable, so it returns only once every rank has
    contributed, and the result is always ordered by rank.
    """

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError(f"Collective size must be positive, got {size}.")
        self.size = size
        """Number of participating ranks."""

    def _collect(self, contributions: Iterable[tuple[int, T]]) -> list[T]:
        slots: list[T | None] = [None] * self.size
        seen = [False] * self.size
        for rank, value in contributions:
            if not 0 <= rank < self.size:
                raise CollectiveError(f"Contribution from unknown rank {rank} (size {self.size}).")
            if seen[rank]:
                raise CollectiveError(f"Duplicate contribution from rank {rank}.")
            seen[rank] = True
            slots[rank] = value
        missing = [rank for rank, ok in enumerate(seen) if not ok]
        if missing:
            raise CollectiveError(f"No contribution from ranks {missing}.")
        return slots  # type: ignore[return-value]

    def gather(self, contributions: Iterable[tuple[int, T]]) -> list[T]:
        """Gather one value per rank; returns the values in rank order."""
        return self._collect(contributions)

    def gather_variable(
        self,
        contributions: Iterable[tuple[int, bytes]],
        sizes: Sequence[int],
    ) -> tuple[bytearray, list[int]]:
        """Gather a variable-length byte buffer from each rank into one combined buffer.

        Args:
            contributions: `(rank, payload)` pairs.
            sizes: Announced payload length of each rank, in rank order.

        Returns:
            The combined buffer and the byte offset of each rank's region in it.

        Raises:
            CollectiveError: If a payload length differs from its announced size, or the
                contributing ranks do not match the collective.
        """
        if len(sizes) != self.size:
            raise CollectiveError(f"Expected {self.size} sizes, got {len(sizes)}.")
        displs = compute_displacements(sizes)
        recv_buf = bytearray(sum(sizes))
        payloads = self._collect(contributions)
        for rank, payload in enumerate(payloads):
            if len(payload) != sizes[rank]:
                raise CollectiveError(
                    f"Rank {rank} sent {len(payload)} bytes, expected {sizes[rank]}."
                )
            recv_buf[displs[rank] : displs[rank] + sizes[rank]] = payload
        return recv_buf, displs
