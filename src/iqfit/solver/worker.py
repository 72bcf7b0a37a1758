"""Main module for worker tasks in the parallel solver."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from multiprocessing.sharedctypes import Synchronized
from time import time
from typing import Literal

from iqfit.catalog import PieceCatalog, build_catalog
from iqfit.solutions import encode_solutions
from iqfit.solver.config import config as solver_config
from iqfit.solver.search import SearchState, SearchStats, search
from iqfit.solver.utils import int_comma, time_str, validate_solution

FIRST_PIECE = 0
"""Piece whose placements are partitioned across worker ranks."""


@dataclass(kw_only=True)
class WorkerState:
    """Global state maintained by each worker process."""

    worker_idx: int
    """Index of the worker process."""

    start_time: float
    """Timestamp when the solver started, in seconds since the epoch."""

    catalog: PieceCatalog
    """Placement tables, rebuilt by each worker from the piece shapes."""

    n_ranks_run: int = 0
    """Number of ranks processed by this worker."""


worker_state: WorkerState | None = None
"""Global state for each worker process."""


def init_worker_globals(
    worker_ctr: Synchronized,
    start_time: float,
    shapes: Sequence[str],
    width: int,
    height: int,
) -> None:
    """Initialize global variables for worker processes.

    The catalog is deterministic, so each worker builds its own copy rather than
    receiving one from the coordinator.

    Args:
        worker_ctr (Synchronized[int]): Shared counter for workers.
        start_time (float): UNIX timestamp when the solver started.
        shapes (Sequence[str]): Base shape string of each piece.
        width (int): Number of board columns.
        height (int): Number of board rows.
    """
    global worker_state  # noqa: PLW0603
    with worker_ctr.get_lock():
        # Get and set the shared worker counter atomically, using the obtained value
        # as the worker index
        worker_idx = worker_ctr.value
        worker_ctr.value += 1

    worker_state = WorkerState(
        worker_idx=worker_idx,
        start_time=start_time,
        catalog=build_catalog(shapes, width=width, height=height),
    )
    print(f"Worker {worker_state.worker_idx} initialized.", flush=True)


def assigned_placements(total: int, rank: int, n_workers: int) -> range:
    """Return the first-piece placement ids searched by `rank`: those with `id % n_workers == rank`.

    Over all ranks this covers `range(total)` exactly once.
    """
    if n_workers < 1:
        raise ValueError(f"Number of workers must be positive, got {n_workers}.")
    if not 0 <= rank < n_workers:
        raise ValueError(f"Rank {rank} out of range for {n_workers} workers.")
    return range(rank, total, n_workers)


@dataclass
class WorkerResult:
    """Wrapper for worker task results."""

    rank: int
    status: Literal["success", "error"]
    count: int = 0
    payload: bytes = b""
    stats: SearchStats = field(default_factory=SearchStats)
    elapsed_sec: float = 0.0
    err_msg: str | None = None


class InvalidSolutionError(Exception):
    """Raised when a search yields a board that is not an exact cover."""

    pass


def run_worker(
    catalog: PieceCatalog,
    rank: int,
    n_workers: int,
    *,
    initial: SearchState | None = None,
    report_interval: int | None = None,
) -> WorkerResult:
    """Search the slice of the problem owned by `rank`.

    For each assigned placement of the first piece, starts from `initial` with that
    placement committed and searches for the remaining pieces.  Placements that overlap
    `initial` are skipped.  Every solution found is checked before it is returned.

    Args:
        catalog (PieceCatalog): Placement tables.
        rank (int): This worker's rank, in `[0, n_workers)`.
        n_workers (int): Total number of ranks.
        initial (SearchState | None): Board to start from, with the first piece not yet
            placed.  Defaults to the empty board.
        report_interval (int | None): If set, print progress every this many first-piece
            placements.

    Returns:
        A successful WorkerResult holding the solutions in discovery order.

    Raises:
        InvalidSolutionError: If the search produced a board that is not an exact cover.
    """
    start_time = time()
    placements = catalog.placements[FIRST_PIECE]
    assigned = assigned_placements(len(placements), rank, n_workers)
    if initial is None:
        initial = SearchState.empty(catalog)
    elif initial.used[FIRST_PIECE]:
        raise ValueError("The first piece must not be placed on the initial board.")

    solutions: list[str] = []
    stats = SearchStats()
    for n_done, placement_id in enumerate(assigned, start=1):
        if not placements[placement_id].mask & initial.mask:
            state = initial.copy()
            state.place(catalog, FIRST_PIECE, placement_id)
            search(catalog, state, solutions, stats, depth=1)

        if report_interval and n_done % report_interval == 0:
            print(
                f"Rank {rank}/{n_workers}: {n_done}/{len(assigned)} placements searched, "
                f"{int_comma(len(solutions))} solutions so far.",
                flush=True,
            )

    for solution in solutions:
        if not validate_solution(solution, catalog):
            raise InvalidSolutionError(f"Rank {rank} produced an invalid solution: {solution}")

    return WorkerResult(
        rank=rank,
        status="success",
        count=len(solutions),
        payload=encode_solutions(solutions),
        stats=stats,
        elapsed_sec=time() - start_time,
    )


def worker_task(rank: int, n_workers: int) -> WorkerResult:
    """Worker task to search the slice of the problem owned by `rank`.

    Args:
        rank (int): The rank to process.
        n_workers (int): Total number of ranks.

    Returns:
        The rank's WorkerResult.
    """
    # Ensure worker_state is initialized
    if not worker_state:
        raise RuntimeError("Worker state not initialized. Call init_worker_globals first.")

    print(f"Worker {worker_state.worker_idx} starting rank {rank}/{n_workers}.", flush=True)
    result = run_worker(
        worker_state.catalog,
        rank,
        n_workers,
        report_interval=solver_config.report_interval,
    )
    worker_state.n_ranks_run += 1
    uptime = time() - worker_state.start_time
    print(
        f"Worker {worker_state.worker_idx}, rank {rank}: "
        f"{int_comma(result.count)} solutions, {int_comma(result.stats.nodes)} nodes. "
        f"Ranks run: {worker_state.n_ranks_run}, uptime {time_str(uptime)}.",
        flush=True,
    )
    return result
