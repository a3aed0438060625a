"""Budget sweep: solve the ward selection once per capacity level."""

import logging
import math
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

from ward_coverage.exceptions import CoverageError, InvalidInputError
from ward_coverage.models import SolveResult, SweepResult
from ward_coverage.solver import BinaryProgramSolver, KnapsackSolver
from ward_coverage.solver._types import Item

logger = logging.getLogger(__name__)

DEFAULT_SCHEDULE = {"start": 300_000, "end": 975_000, "step": 25_000}


def capacity_schedule(start: float, end: float, step: float) -> list[float]:
    """Build an inclusive arithmetic capacity schedule.

    Parameters
    ----------
    start : float
        First capacity (kg).
    end : float
        Last capacity (kg); included when it falls on the step grid.
    step : float
        Positive increment between levels.

    Returns
    -------
    list[float]
        Increasing capacities. The reference schedule
        ``capacity_schedule(300_000, 975_000, 25_000)`` has 28 levels.

    Raises
    ------
    InvalidInputError
        If ``step`` is not positive, ``start`` is negative or ``end < start``.
    """
    if not (math.isfinite(step) and step > 0):
        raise InvalidInputError(f"step must be positive, got {step!r}.")
    if not (math.isfinite(start) and start >= 0):
        raise InvalidInputError(f"start must be non-negative, got {start!r}.")
    if not math.isfinite(end) or end < start:
        raise InvalidInputError(f"end must not be below start, got {end!r}.")
    # Small slack so that float steps still land on ``end``.
    n_levels = int(math.floor((end - start) / step + 1e-9)) + 1
    return [start + k * step for k in range(n_levels)]


def validate_capacities(capacities: Sequence[float]) -> list[float]:
    """Check that capacities are finite, non-negative and strictly increasing."""
    values = [float(c) for c in capacities]
    for c in values:
        if not math.isfinite(c) or c < 0:
            raise InvalidInputError(f"Capacities must be finite and non-negative, got {c!r}.")
    for previous, current in zip(values, values[1:]):
        if current <= previous:
            raise InvalidInputError(
                f"Capacities must be strictly increasing, got {current!r} after {previous!r}."
            )
    return values


def sweep(
    items: Sequence[Item],
    capacities: Sequence[float],
    solver: KnapsackSolver | None = None,
    max_workers: int | None = None,
) -> SweepResult:
    """Solve the same items at every capacity in an increasing schedule.

    Each level is solved independently with the full, unchanged item list.
    With ``max_workers`` above one the solves run on a thread pool; every
    worker writes only its own pre-allocated slot, so the result order is
    that of ``capacities`` regardless of completion order.

    Parameters
    ----------
    items : Sequence[Item]
        Ward records or ``(cost, benefit)`` pairs, in a fixed order shared by
        every solve.
    capacities : Sequence[float]
        Strictly increasing, non-negative capacities (kg).
    solver : KnapsackSolver, optional
        Solver to use. Defaults to :class:`BinaryProgramSolver`.
    max_workers : int, optional
        Thread pool size. ``None`` or ``1`` solves serially.

    Returns
    -------
    SweepResult

    Raises
    ------
    CoverageError
        Whatever the solver raised for the first failing capacity, with the
        ``capacity`` attribute set. No partial sweep is returned, and in
        the threaded case levels that have not started are cancelled.
    """
    solver = solver or BinaryProgramSolver()
    levels = validate_capacities(capacities)
    items = list(items)

    logger.info(
        "Sweeping %d capacity levels over %d items with %s",
        len(levels),
        len(items),
        getattr(solver, "rule", type(solver).__name__),
    )
    slots: list[SolveResult | None] = [None] * len(levels)

    def _solve_level(k: int) -> None:
        capacity = levels[k]
        try:
            slots[k] = solver(items, capacity)
        except CoverageError as exc:
            logger.error("Sweep aborted at capacity %.0f kg: %s", capacity, exc.message)
            raise exc.at_capacity(capacity)

    if max_workers is None or max_workers <= 1:
        for k in range(len(levels)):
            _solve_level(k)
    else:
        pool = ThreadPoolExecutor(max_workers=max_workers)
        try:
            futures = [pool.submit(_solve_level, k) for k in range(len(levels))]
            # Surface the failure of the lowest failing capacity.
            for future in futures:
                future.result()
        finally:
            # Levels not yet started are dropped once one has failed.
            pool.shutdown(wait=True, cancel_futures=True)

    return SweepResult(results=tuple(slots))
