"""Shared utilities for knapsack solvers.

Contains input normalization and validation, result construction with a
feasibility check, and the degenerate empty-input result.
"""

import logging
import math
from collections.abc import Sequence

from ward_coverage.exceptions import InfeasibleError, InvalidInputError
from ward_coverage.models import SolveResult, WardRecord
from ward_coverage.solver._types import Item

logger = logging.getLogger(__name__)

FEASIBILITY_RTOL = 1e-9


def validate_capacity(capacity: float) -> float:
    """Check that a capacity is a finite, non-negative number.

    Parameters
    ----------
    capacity : float
        Budget in kilograms.

    Returns
    -------
    float
        The capacity as a float.

    Raises
    ------
    InvalidInputError
        If the capacity is negative, NaN or infinite.
    """
    capacity = float(capacity)
    if not math.isfinite(capacity) or capacity < 0:
        raise InvalidInputError(f"Capacity must be finite and non-negative, got {capacity!r}.")
    return capacity


def as_pairs(items: Sequence[Item]) -> list[tuple[float, float]]:
    """Normalize items to validated ``(cost, benefit)`` pairs.

    Parameters
    ----------
    items : Sequence[Item]
        Ward records or ``(cost, benefit)`` pairs.

    Returns
    -------
    list[tuple[float, float]]
        Pairs in input order.

    Raises
    ------
    InvalidInputError
        If an item is not a ward record or a two-element pair, or any cost or
        benefit is negative or non-finite.
    """
    pairs = []
    for index, item in enumerate(items):
        if isinstance(item, WardRecord):
            cost, benefit = float(item.cost), float(item.benefit)
        else:
            try:
                cost, benefit = item
                cost, benefit = float(cost), float(benefit)
            except (TypeError, ValueError) as exc:
                raise InvalidInputError(f"Item {index}: expected a (cost, benefit) pair, got {item!r}.") from exc
        if not (math.isfinite(cost) and cost >= 0):
            raise InvalidInputError(f"Item {index}: cost must be finite and non-negative, got {cost!r}.")
        if not (math.isfinite(benefit) and benefit >= 0):
            raise InvalidInputError(f"Item {index}: benefit must be finite and non-negative, got {benefit!r}.")
        pairs.append((cost, benefit))
    return pairs


def build_result(
    pairs: list[tuple[float, float]],
    capacity: float,
    inclusion: Sequence[int],
    rule: str,
    slack: float = 0.0,
) -> SolveResult:
    """Assemble a :class:`SolveResult` and verify it respects the capacity.

    Parameters
    ----------
    pairs : list[tuple[float, float]]
        Validated ``(cost, benefit)`` pairs.
    capacity : float
        Budget the selection was solved for.
    inclusion : Sequence[int]
        Binary inclusion vector aligned with ``pairs``.
    rule : str
        Solver identifier.
    slack : float
        Kilograms the selection may exceed the capacity by, for solvers that
        treat costs within a rounding tolerance as exact.

    Returns
    -------
    SolveResult

    Raises
    ------
    InfeasibleError
        If the selected items exceed the capacity plus ``slack``.
    """
    inclusion = tuple(int(flag) for flag in inclusion)
    total_cost = math.fsum(cost for (cost, _), flag in zip(pairs, inclusion) if flag)
    total_benefit = math.fsum(benefit for (_, benefit), flag in zip(pairs, inclusion) if flag)
    if total_cost > capacity * (1 + FEASIBILITY_RTOL) + slack:
        logger.error("Selection of %.2f kg exceeds capacity %.2f kg", total_cost, capacity)
        raise InfeasibleError(
            f"Selected items cost {total_cost:g} kg, above the capacity.",
            capacity=capacity,
        )
    return SolveResult(
        capacity=capacity,
        inclusion=inclusion,
        total_benefit=total_benefit,
        total_cost=total_cost,
        status="Optimal",
        rule=rule,
    )


def saturated_result(pairs: list[tuple[float, float]], capacity: float, rule: str) -> SolveResult | None:
    """Select every item when they all fit together, otherwise return ``None``.

    Including an item never lowers the benefit, so when the whole list fits
    the all-ones vector is optimal and is the one returned, zero-benefit
    items included.
    """
    if math.fsum(cost for cost, _ in pairs) > capacity:
        return None
    logger.debug("All %d items fit within %.2f kg", len(pairs), capacity)
    return build_result(pairs, capacity, [1] * len(pairs), rule)


def empty_solve_result(capacity: float, rule: str) -> SolveResult:
    """Build the zero-length result for an empty item list."""
    return SolveResult(
        capacity=capacity,
        inclusion=(),
        total_benefit=0.0,
        total_cost=0.0,
        status="Optimal",
        rule=rule,
    )
