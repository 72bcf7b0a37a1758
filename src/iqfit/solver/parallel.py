"""Implementation of the parallel solver: task distribution and result aggregation."""

import traceback
from collections.abc import Iterable
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import TextIO

from iqfit.solutions import SolutionSet
from iqfit.solver.collective import Collective
from iqfit.solver.utils import int_comma, time_str
from iqfit.solver.worker import WorkerResult, worker_task


class WorkerError(Exception):
    """Raised when a worker rank fails; the whole run fails with it."""

    pass


def solve_with_partitioned_search(
    executor: ProcessPoolExecutor,
    n_workers: int,
    *,
    record_size: int,
    width: int,
    logf: TextIO,
) -> SolutionSet:
    """Search all ranks of the striped partition and merge their solutions.

    Args:
        executor (ProcessPoolExecutor): Executor whose processes were initialized with
            `init_worker_globals`.
        n_workers (int): Number of ranks to split the first piece's placements over.
        record_size (int): Length of one solution (number of board cells).
        width (int): Number of board columns.
        logf: File object to log the solving process.

    Returns:
        The merged solutions, ordered by rank then discovery order.

    Raises:
        WorkerError: If any rank fails.
    """
    print(f"Submitting {n_workers} ranks...", file=logf, flush=True)
    futures = [executor.submit(_worker_task, rank, n_workers) for rank in range(n_workers)]

    def _completed() -> Iterable[WorkerResult]:
        for future in as_completed(futures):
            result = future.result()
            if result.status == "error":
                print(f"Rank {result.rank} encountered an error:", file=logf, flush=True)
                print(result.err_msg, file=logf, flush=True)
                raise WorkerError(f"Worker rank {result.rank} failed:\n{result.err_msg}")
            print(
                f"Rank {result.rank} done: {int_comma(result.count)} solutions, "
                f"{int_comma(result.stats.nodes)} nodes, {time_str(result.elapsed_sec)}",
                file=logf,
                flush=True,
            )
            yield result

    return aggregate(_completed(), n_workers=n_workers, record_size=record_size, width=width)


def aggregate(
    results: Iterable[WorkerResult],
    *,
    n_workers: int,
    record_size: int,
    width: int,
) -> SolutionSet:
    """Merge per-rank results at the coordinator.

    Counts are gathered first, which fixes each rank's byte offset in the combined buffer;
    the payloads are then gathered into their regions.

    Args:
        results: One successful result per rank, in any order.
        n_workers (int): Number of ranks.
        record_size (int): Length of one solution (number of board cells).
        width (int): Number of board columns.

    Returns:
        The merged SolutionSet.
    """
    # Wait for every rank before either gather
    results = list(results)
    collective = Collective(n_workers)

    counts = collective.gather((r.rank, r.count) for r in results)
    sizes = [count * record_size for count in counts]
    buffer, displs = collective.gather_variable(((r.rank, r.payload) for r in results), sizes)

    return SolutionSet(
        counts=tuple(counts),
        displacements=tuple(displs),
        buffer=bytes(buffer),
        record_size=record_size,
        width=width,
    )


def _worker_task(rank: int, n_workers: int) -> WorkerResult:
    """Worker task to search one rank.

    Args:
        rank (int): The rank to process.
        n_workers (int): Total number of ranks.

    Returns:
        A WorkerResult; failures are reported with status "error" rather than raised.
    """
    try:
        return worker_task(rank, n_workers)
    except Exception as e:
        return WorkerResult(
            rank=rank,
            status="error",
            err_msg=f"Worker encountered an error: {str(e)}\n{traceback.format_exc()}",
        )
