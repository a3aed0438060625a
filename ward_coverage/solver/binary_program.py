"""Binary integer program solver.

Formulates ward selection as a 0/1 knapsack: maximize the benefit of the
selected items subject to their total cost staying within the capacity.
Uses PuLP with the CBC solver at zero optimality gap.

Ties between equally good selections are broken by a second pass that
holds the optimal benefit fixed and minimizes the index-weighted number of
selected items, so the answer leans toward lower ward indices. Items
that cost nothing are always included, and when every item fits the whole
list is selected without calling CBC.
"""

import logging
from collections.abc import Sequence

import pulp as lp

from ward_coverage.exceptions import CoverageError, InfeasibleError, SolverTimeoutError
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

TIE_BREAK_ATOL = 1e-6
TIE_BREAK_RTOL = 1e-9


class BinaryProgramSolver:
    """Exact 0/1 knapsack via a binary integer program.

    Parameters
    ----------
    time_limit : float, optional
        Wall-clock limit in seconds for each CBC run. ``None`` disables it.
    prefer_lower_index : bool
        Run the tie-breaking pass. Without it, ties are left to CBC, which
        is still deterministic for identical input.

    Raises
    ------
    ValueError
        If ``time_limit`` is not positive. Invalid items and capacities
        raise :class:`~ward_coverage.exceptions.InvalidInputError` when the
        solver is called.
    """

    rule = "binary_program"

    def __init__(self, time_limit: float | None = None, prefer_lower_index: bool = True) -> None:
        if time_limit is not None and time_limit <= 0:
            raise ValueError("time_limit must be positive.")
        self.time_limit = time_limit
        self.prefer_lower_index = prefer_lower_index

    def _command(self) -> lp.LpSolver:
        return lp.PULP_CBC_CMD(msg=False, gapRel=0, timeLimit=self.time_limit)

    def _run(self, prob: lp.LpProblem, capacity: float) -> None:
        """Solve ``prob`` in place and raise unless CBC proved optimality."""
        try:
            prob.solve(self._command())
        except lp.PulpSolverError as exc:
            logger.exception("Error solving %s", prob.name)
            raise CoverageError(f"CBC failed on {prob.name}: {exc}", capacity=capacity) from exc

        status = lp.LpStatus[prob.status]
        if prob.status == lp.LpStatusOptimal and prob.sol_status == lp.LpSolutionOptimal:
            return
        if prob.status == lp.LpStatusInfeasible:
            raise InfeasibleError(f"{prob.name} is infeasible.", capacity=capacity)
        if self.time_limit is not None and prob.sol_status in (
            lp.LpSolutionIntegerFeasible,
            lp.LpSolutionNoSolutionFound,
        ):
            found = prob.sol_status == lp.LpSolutionIntegerFeasible
            logger.warning(
                "%s stopped after %ss without proving optimality (solution found: %s)",
                prob.name,
                self.time_limit,
                found,
            )
            raise SolverTimeoutError(
                f"No proven optimum within {self.time_limit}s "
                f"({'feasible selection found' if found else 'no selection found'}).",
                capacity=capacity,
            )
        raise CoverageError(f"{prob.name} ended with status {status}.", capacity=capacity)

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
        SolverTimeoutError
            If ``time_limit`` elapsed before optimality was proven.
        InfeasibleError
            If CBC reports the problem infeasible.
        """
        capacity = validate_capacity(capacity)
        pairs = as_pairs(items)
        if not pairs:
            return empty_solve_result(capacity, self.rule)
        saturated = saturated_result(pairs, capacity, self.rule)
        if saturated is not None:
            return saturated

        indices = range(len(pairs))
        logger.debug("Formulating ward selection problem: %d items, capacity %.2f kg", len(pairs), capacity)
        prob = lp.LpProblem("Ward_Selection", lp.LpMaximize)
        x = lp.LpVariable.dicts("Select", indices, 0, 1, lp.LpBinary)
        benefit = lp.lpSum(x[i] * pairs[i][1] for i in indices)
        prob += benefit
        prob += lp.lpSum(x[i] * pairs[i][0] for i in indices) <= capacity, "Capacity"
        for i in indices:
            if pairs[i][0] == 0:
                prob += x[i] == 1, f"Free_{i}"
        self._run(prob, capacity)

        if self.prefer_lower_index:
            best = lp.value(prob.objective) or 0.0
            prob += benefit >= best - max(TIE_BREAK_ATOL, TIE_BREAK_RTOL * abs(best)), "Optimal_Benefit"
            prob.sense = lp.LpMinimize
            prob.setObjective(lp.lpSum((i + 1) * x[i] for i in indices))
            self._run(prob, capacity)

        inclusion = [1 if (x[i].varValue or 0.0) > 0.5 else 0 for i in indices]
        result = build_result(pairs, capacity, inclusion, self.rule)
        logger.info(
            "Capacity %.0f kg: selected %d/%d items, benefit %.2f, cost %.2f kg",
            capacity,
            result.n_selected,
            len(pairs),
            result.total_benefit,
            result.total_cost,
        )
        return result
