"""Main solver module for the IQ-Fit puzzle."""

import os
import sys
from collections.abc import Sequence
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from multiprocessing import Value
from pathlib import Path
from pprint import pprint
from time import time
from typing import TextIO

from iqfit.catalog import build_catalog
from iqfit.pieces import BOARD_HEIGHT, BOARD_WIDTH, PIECE_SHAPES
from iqfit.solutions import SolutionSet, write_solutions
from iqfit.solver.config import config as solver_config
from iqfit.solver.parallel import solve_with_partitioned_search
from iqfit.solver.utils import TIMESTAMP_FMT, int_comma, time_str
from iqfit.solver.worker import init_worker_globals


@dataclass
class RunSummary:
    """Outcome of a full solver run."""

    n_workers: int
    total_solutions: int
    elapsed_sec: float
    output_path: Path


def default_n_workers() -> int:
    """Number of ranks to use when none is configured: one per CPU core, minus one."""
    cpus = os.cpu_count() or 1  # Fallback to 1 if os.cpu_count() is None
    return max(1, cpus - 1)  # Leave one core free


def get_executor(
    *,
    n_workers: int,
    max_processes: int | None = None,
    start_time: float,
    shapes: Sequence[str],
    width: int,
    height: int,
) -> ProcessPoolExecutor:
    """Get a ProcessPoolExecutor whose processes each hold their own piece catalog.

    Args:
        n_workers (int): Number of ranks; no more processes than this are started.
        max_processes (int | None): Upper bound on worker processes.  If None, defaults to
            the number of CPU cores.
        start_time (float): UNIX timestamp when the solver started.
        shapes (Sequence[str]): Base shape string of each piece.
        width (int): Number of board columns.
        height (int): Number of board rows.

    Returns:
        A ProcessPoolExecutor instance for worker processes.
    """
    worker_ctr = Value("i", 0)

    if max_processes is None:
        max_processes = os.cpu_count() or 1
    return ProcessPoolExecutor(
        max_workers=max(1, min(n_workers, max_processes)),
        initializer=init_worker_globals,
        initargs=(worker_ctr, start_time, tuple(shapes), width, height),
    )


def solve(
    *,
    n_workers: int,
    logf: TextIO,
    max_processes: int | None = None,
    shapes: Sequence[str] = PIECE_SHAPES,
    width: int = BOARD_WIDTH,
    height: int = BOARD_HEIGHT,
) -> SolutionSet:
    """Enumerate every tiling of the board using `n_workers` ranks.

    Args:
        n_workers (int): Number of ranks to split the search over.
        logf: File object to log the solving process.
        max_processes (int | None): Upper bound on worker processes.
        shapes (Sequence[str]): Base shape string of each piece.
        width (int): Number of board columns.
        height (int): Number of board rows.

    Returns:
        All solutions, ordered by rank then discovery order within each rank.
    """
    start_time = time()
    # Built here only to validate the pieces and log the table sizes; workers build their own.
    catalog = build_catalog(shapes, width=width, height=height)
    print("Catalog:", file=logf, flush=True)
    pprint(catalog.summary(), stream=logf, width=120)

    with get_executor(
        n_workers=n_workers,
        max_processes=max_processes,
        start_time=start_time,
        shapes=shapes,
        width=width,
        height=height,
    ) as executor:
        try:
            return solve_with_partitioned_search(
                executor,
                n_workers,
                record_size=catalog.n_cells,
                width=catalog.width,
                logf=logf,
            )
        except KeyboardInterrupt as e:
            executor.shutdown(wait=False, cancel_futures=True)
            raise e
        except Exception as e:
            executor.shutdown(wait=False, cancel_futures=True)
            raise e


def run(*, n_workers: int | None = None) -> RunSummary:
    """Run the solver on the IQ-Fit board and write all solutions to the configured file.

    Args:
        n_workers (int | None): Number of ranks.  Overrides the configured value if given.

    Raises:
        OutputWriteError: If the solutions file cannot be written.  The summary is still
            printed.
    """
    if n_workers is None:
        n_workers = solver_config.n_workers or default_n_workers()

    logfile = Path(solver_config.log_dir) / f"iqfit-{BOARD_WIDTH}x{BOARD_HEIGHT}-{n_workers}w.log"
    print(f"Log file: {logfile}")
    logfile.parent.mkdir(parents=True, exist_ok=True)

    start_time = time()
    with open(logfile, "w", encoding="utf-8") as logf:
        start_time_str = datetime.fromtimestamp(start_time).astimezone().strftime(TIMESTAMP_FMT)
        print(f"Start time: {start_time_str}", file=logf, flush=True)
        print("Solver config:", file=logf, flush=True)
        pprint(solver_config.model_dump(), stream=logf, width=120)
        print(f"Ranks: {n_workers}", file=logf, flush=True)

        try:
            solution_set = solve(
                n_workers=n_workers,
                logf=logf,
                max_processes=solver_config.max_processes,
            )
        except KeyboardInterrupt:
            print("Solver interrupted by user.", file=logf, flush=True)
            print("Solver interrupted by user.")
            sys.exit(1)

        output_path = Path(solver_config.output_path)
        try:
            write_solutions(output_path, solution_set, width=solution_set.width)
            print(f"Solutions written to {output_path}", file=logf, flush=True)
        finally:
            elapsed = time() - start_time
            for out in (logf, sys.stdout):
                print(f"Total solutions: {int_comma(solution_set.total)}", file=out, flush=True)
                print(f"Elapsed time: {time_str(elapsed)}", file=out, flush=True)

    return RunSummary(
        n_workers=n_workers,
        total_solutions=solution_set.total,
        elapsed_sec=elapsed,
        output_path=output_path,
    )
