"""Dynamic programming solver over a discretized cost axis.

Costs are expressed in whole multiples of ``cost_unit`` kilograms and the
classic 0/1 knapsack table is filled one item row at a time with numpy.
Costs within ``tolerance`` units of the grid are snapped to it, and the
final capacity check allows for that snapping. Costs further off the grid
make the solver refuse with :class:`ScaleError` rather than round.

Ties resolve toward lower indices: an item only enters the table when it
strictly improves on the best benefit of the items before it. Items
that cost nothing are the exception and always enter.
"""

import logging
import math
import time
from collections.abc import Sequence

import numpy as np

from ward_coverage.exceptions import ScaleError, SolverTimeoutError
from ward_coverage.models import SolveResult
from ward_coverage.solver._common import (
    as_pairs,
    build_result,
    empty_solve_result,
    saturated_result,
    validate_capacity,
)
from ward_coverage.solver._types import Item

logger = logging.getLogger(__name__)


class DynamicProgrammingSolver:
    """Exact 0/1 knapsack via dynamic programming.

    Parameters
    ----------
    cost_unit : float
        Kilograms represented by one cell of the cost axis.
    tolerance : float
        Largest accepted distance, in units, between a scaled cost and the
        nearest integer.
    max_cells : int
        Upper bound on ``n_items * (capacity_units + 1)``; the keep table
        uses one byte per cell.
    time_limit : float, optional
        Wall-clock limit in seconds, checked after every item row.

    Raises
    ------
    ValueError
        If a parameter is out of range.
    """

    rule = "dynamic_program"

    def __init__(
        self,
        cost_unit: float = 1.0,
        tolerance: float = 1e-6,
        max_cells: int = 500_000_000,
        time_limit: float | None = None,
    ) -> None:
        if not (math.isfinite(cost_unit) and cost_unit > 0):
            raise ValueError("cost_unit must be positive and finite.")
        if not (0 <= tolerance < 0.5):
            raise ValueError("tolerance must be in [0, 0.5).")
        if max_cells <= 0:
            raise ValueError("max_cells must be positive.")
        if time_limit is not None and time_limit <= 0:
            raise ValueError("time_limit must be positive.")
        self.cost_unit = cost_unit
        self.tolerance = tolerance
        self.max_cells = max_cells
        self.time_limit = time_limit

    def _to_units(self, pairs: list[tuple[float, float]], capacity: float) -> list[int]:
        units = []
        for index, (cost, _) in enumerate(pairs):
            scaled = cost / self.cost_unit
            whole = round(scaled)
            if abs(scaled - whole) > self.tolerance:
                raise ScaleError(
                    f"Item {index}: cost {cost:g} kg is not a whole multiple of {self.cost_unit:g} kg "
                    f"(off by {abs(scaled - whole):.3g} units).",
                    capacity=capacity,
                )
            units.append(int(whole))
        return units

    def __call__(self, items: Sequence[Item], capacity: float) -> SolveResult:
        """Select the benefit-maximizing subset of items within ``capacity``.

        Parameters
        ----------
        items : Sequence[Item]
            Ward records or ``(cost, benefit)`` pairs.
        capacity : float
            Budget in kilograms.

        Returns
        -------
        SolveResult

        Raises
        ------
        InvalidInputError
            If a cost, benefit or the capacity is negative or non-finite.
        ScaleError
            If a cost does not sit on the cost axis, or the table is too large.
        SolverTimeoutError
            If ``time_limit`` elapsed before the table was complete.
        """
        capacity = validate_capacity(capacity)
        pairs = as_pairs(items)
        if not pairs:
            return empty_solve_result(capacity, self.rule)

        weights = self._to_units(pairs, capacity)
        saturated = saturated_result(pairs, capacity, self.rule)
        if saturated is not None:
            return saturated

        width = int(math.floor(capacity / self.cost_unit + self.tolerance)) + 1
        if len(pairs) * width > self.max_cells:
            raise ScaleError(
                f"Table of {len(pairs)} x {width} cells exceeds max_cells={self.max_cells}; "
                "use a coarser cost_unit.",
                capacity=capacity,
            )
        logger.debug("Filling knapsack table: %d items x %d cells", len(pairs), width)

        started = time.monotonic()
        best = np.zeros(width)
        keep = np.zeros((len(pairs), width), dtype=bool)
        for i, (w, (_, b)) in enumerate(zip(weights, pairs)):
            if w < width:
                candidate = best[: width - w] + b
                improves = candidate >= best[w:] if w == 0 else candidate > best[w:]
                keep[i, w:] = improves
                best[w:] = np.where(improves, candidate, best[w:])
            if self.time_limit is not None and time.monotonic() - started > self.time_limit:
                raise SolverTimeoutError(
                    f"Table incomplete after {self.time_limit}s ({i + 1}/{len(pairs)} items).",
                    capacity=capacity,
                )

        inclusion = [0] * len(pairs)
        remaining = width - 1
        for i in reversed(range(len(pairs))):
            if keep[i, remaining]:
                inclusion[i] = 1
                remaining -= weights[i]

        # Every snapped cost, and the floored capacity, may be off by up to tolerance units.
        slack = (len(pairs) + 1) * self.tolerance * self.cost_unit
        result = build_result(pairs, capacity, inclusion, self.rule, slack=slack)
        logger.info(
            "Capacity %.0f kg: selected %d/%d items, benefit %.2f, cost %.2f kg",
            capacity,
            result.n_selected,
            len(pairs),
            result.total_benefit,
            result.total_cost,
        )
        return result
