"""Knapsack solvers for ward selection.

Provides two exact 0/1 knapsack implementations, the shared input
validation, and the ``KnapsackSolver`` protocol both satisfy.

Convenience function ``solve`` validates the input and delegates to a
solver (by default :class:`BinaryProgramSolver`) in a single call.
"""

from collections.abc import Sequence

from ward_coverage.models import SolveResult
from ward_coverage.solver._common import as_pairs, build_result, empty_solve_result, validate_capacity
from ward_coverage.solver._types import Item, KnapsackSolver
from ward_coverage.solver.binary_program import BinaryProgramSolver
from ward_coverage.solver.dynamic_program import DynamicProgrammingSolver

__all__ = [
    "BinaryProgramSolver",
    "DynamicProgrammingSolver",
    "Item",
    "KnapsackSolver",
    "as_pairs",
    "build_result",
    "empty_solve_result",
    "solve",
    "validate_capacity",
]


def solve(
    items: Sequence[Item],
    capacity: float,
    solver: KnapsackSolver | None = None,
) -> SolveResult:
    """Solve a single 0/1 knapsack instance.

    Parameters
    ----------
    items : Sequence[Item]
        Ward records or ``(cost, benefit)`` pairs, in a fixed order.
    capacity : float
        Budget in kilograms.
    solver : KnapsackSolver, optional
        Solver to use. Defaults to :class:`BinaryProgramSolver`.

    Returns
    -------
    SolveResult
        Inclusion vector aligned with ``items`` plus totals.
    """
    solver = solver or BinaryProgramSolver()
    return solver(items, capacity)
