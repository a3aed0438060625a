"""Type definitions for the knapsack solver protocol."""

from collections.abc import Sequence
from typing import Protocol

from ward_coverage.models import SolveResult, WardRecord

Item = WardRecord | tuple[float, float]
"""A ward record, or a bare ``(cost, benefit)`` pair."""


class KnapsackSolver(Protocol):
    """Protocol for exact 0/1 knapsack solvers.

    Implementations receive items in a fixed order and return a
    :class:`SolveResult` whose inclusion vector follows that order. The
    result must be a global optimum for the capacity, with ties broken
    deterministically.
    """

    rule: str

    def __call__(self, items: Sequence[Item], capacity: float) -> SolveResult: ...
