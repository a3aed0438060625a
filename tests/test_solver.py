"""Unit tests for the knapsack solvers."""

import random

import pytest

from ward_coverage.exceptions import InvalidInputError
from ward_coverage.models import WardRecord
from ward_coverage.solver import BinaryProgramSolver, DynamicProgrammingSolver, as_pairs, solve, validate_capacity

SOLVERS = [BinaryProgramSolver, DynamicProgrammingSolver]


def _brute_force_benefit(items, capacity):
    # Subset sums built from the subset without its lowest set bit.
    costs = [0] * (1 << len(items))
    benefits = [0] * (1 << len(items))
    best = 0
    for mask in range(1, 1 << len(items)):
        low = mask & -mask
        cost, benefit = items[low.bit_length() - 1]
        costs[mask] = costs[mask ^ low] + cost
        benefits[mask] = benefits[mask ^ low] + benefit
        if costs[mask] <= capacity and benefits[mask] > best:
            best = benefits[mask]
    return best


def _random_instance(seed, n):
    rng = random.Random(seed)
    items = [(rng.randint(1, 50), rng.randint(1, 40)) for _ in range(n)]
    capacity = sum(c for c, _ in items) // 2
    return items, capacity


@pytest.fixture(params=SOLVERS, ids=["binary_program", "dynamic_program"])
def solver(request):
    return request.param()


class TestValidation:
    def test_negative_capacity_raises(self):
        with pytest.raises(InvalidInputError, match="non-negative"):
            validate_capacity(-1)

    def test_nan_capacity_raises(self):
        with pytest.raises(InvalidInputError):
            validate_capacity(float("nan"))

    def test_negative_cost_raises(self):
        with pytest.raises(InvalidInputError, match="Item 1: cost"):
            as_pairs([(1, 1), (-2, 1)])

    def test_infinite_benefit_raises(self):
        with pytest.raises(InvalidInputError, match="Item 0: benefit"):
            as_pairs([(1, float("inf"))])

    @pytest.mark.parametrize("item", [(1, 2, 3), (1,), 5, ("a", 1)])
    def test_malformed_item_raises(self, item):
        with pytest.raises(InvalidInputError, match="Item 1: expected a \\(cost, benefit\\) pair"):
            as_pairs([(1, 1), item])

    def test_ward_records_accepted(self, sample_wards):
        pairs = as_pairs(sample_wards)
        assert pairs[0] == (12_000.0, 850.0)
        assert len(pairs) == len(sample_wards)


class TestSolve:
    def test_concrete_scenario(self, solver, sample_items):
        result = solve(sample_items, 30, solver=solver)
        assert result.inclusion == (0, 0, 1)
        assert result.total_benefit == pytest.approx(25)
        assert result.total_cost == pytest.approx(30)
        assert result.status == "Optimal"

    def test_default_solver_is_binary_program(self, sample_items):
        result = solve(sample_items, 30)
        assert result.rule == "binary_program"
        assert result.inclusion == (0, 0, 1)

    @pytest.mark.parametrize("seed", range(6))
    def test_matches_brute_force(self, solver, seed):
        items, capacity = _random_instance(seed, 10 + seed)
        result = solver(items, capacity)
        assert result.total_benefit == pytest.approx(_brute_force_benefit(items, capacity))

    def test_matches_brute_force_twenty_items(self, solver):
        items, capacity = _random_instance(42, 20)
        result = solver(items, capacity)
        assert result.total_benefit == pytest.approx(_brute_force_benefit(items, capacity))

    @pytest.mark.parametrize("seed", range(4))
    def test_feasible(self, solver, seed):
        items, capacity = _random_instance(100 + seed, 12)
        result = solver(items, capacity)
        assert len(result.inclusion) == len(items)
        assert sum(c for (c, _), flag in zip(items, result.inclusion) if flag) <= capacity
        assert result.total_cost <= capacity

    def test_zero_capacity_selects_nothing(self, solver, sample_items):
        result = solver(sample_items, 0)
        assert result.inclusion == (0, 0, 0)
        assert result.total_benefit == 0

    def test_saturating_capacity_selects_everything(self, solver, sample_wards):
        capacity = sum(w.cost for w in sample_wards)
        result = solver(sample_wards, capacity)
        assert result.inclusion == (1,) * len(sample_wards)
        assert result.total_cost == pytest.approx(capacity)

    def test_empty_items(self, solver):
        result = solver([], 100)
        assert result.inclusion == ()
        assert result.total_benefit == 0.0

    def test_negative_capacity_raises(self, solver, sample_items):
        with pytest.raises(InvalidInputError):
            solver(sample_items, -5)

    def test_negative_cost_raises(self, solver):
        with pytest.raises(InvalidInputError):
            solver([(10, 5), (-1, 3)], 10)

    def test_ties_prefer_lower_index(self, solver):
        result = solver([(10, 5), (10, 5)], 10)
        assert result.inclusion == (1, 0)

    def test_tie_between_subsets_is_resolved_consistently(self, solver):
        result = solver([(10, 5), (20, 10), (10, 5)], 20)
        assert result.inclusion == (0, 1, 0)

    def test_saturating_capacity_includes_zero_benefit_wards(self, solver):
        wards = [WardRecord("W1", "A", 100, 50), WardRecord("W2", "A", 200, 0)]
        result = solver(wards, 300)
        assert result.inclusion == (1, 1)
        assert result.total_benefit == pytest.approx(50)

    def test_free_items_always_selected(self, solver):
        result = solver([(0, 0), (5, 3), (8, 4)], 10)
        assert result.inclusion == (1, 0, 1)

    def test_zero_capacity_keeps_free_items(self, solver):
        result = solver([(0, 2), (5, 3)], 0)
        assert result.inclusion == (1, 0)
        assert result.total_benefit == pytest.approx(2)

    def test_determinism(self, solver):
        items, capacity = _random_instance(7, 14)
        r1 = solver(items, capacity)
        r2 = solver(items, capacity)
        assert r1 == r2

    def test_solvers_agree_on_benefit(self, sample_wards):
        for capacity in (0, 25_000, 60_000, 100_000):
            bip = BinaryProgramSolver()(sample_wards, capacity)
            dp = DynamicProgrammingSolver(cost_unit=1_000)(sample_wards, capacity)
            assert bip.total_benefit == pytest.approx(dp.total_benefit)

    def test_selected_wards(self, solver, sample_wards):
        result = solver(sample_wards, 30_000)
        selected = result.selected(sample_wards)
        assert len(selected) == result.n_selected
        assert sum(w.cost for w in selected) <= 30_000
