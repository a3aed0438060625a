"""Unit tests for the coverage views."""

import pytest

from ward_coverage.aggregate import benefit_fraction, coverage_table, reached_by_district, total_reached
from ward_coverage.exceptions import MismatchedLengthError
from ward_coverage.models import SolveResult, SweepResult, WardRecord
from ward_coverage.solver import DynamicProgrammingSolver
from ward_coverage.sweep import capacity_schedule, sweep


@pytest.fixture()
def sample_sweep(sample_wards):
    return sweep(
        sample_wards,
        capacity_schedule(0, 160_000, 20_000),
        solver=DynamicProgrammingSolver(cost_unit=1_000),
    )


def _result(capacity, inclusion):
    return SolveResult(capacity=capacity, inclusion=inclusion, total_benefit=0.0, total_cost=0.0)


class TestTotalReached:
    def test_counts(self, sample_sweep):
        totals = total_reached(sample_sweep)
        assert list(totals) == sample_sweep.capacities
        assert totals[0] == 0
        assert totals[160_000] == 8

    def test_monotone(self, sample_sweep):
        counts = list(total_reached(sample_sweep).values())
        assert counts == sorted(counts)

    def test_length_checked_when_wards_given(self, sample_wards):
        bad = SweepResult(results=(_result(10, (1, 0)),))
        with pytest.raises(MismatchedLengthError):
            total_reached(bad, sample_wards)


class TestReachedByDistrict:
    def test_district_sum_law(self, sample_sweep, sample_wards):
        totals = total_reached(sample_sweep)
        by_district = reached_by_district(sample_sweep, sample_wards)
        for capacity, counts in by_district.items():
            assert sum(counts.values()) == totals[capacity]

    def test_all_districts_present(self, sample_sweep, sample_wards):
        by_district = reached_by_district(sample_sweep, sample_wards)
        assert by_district[0] == {"Chikwawa": 0, "Nsanje": 0, "Phalombe": 0}
        assert by_district[160_000] == {"Chikwawa": 2, "Nsanje": 3, "Phalombe": 3}

    def test_counts_match_inclusion(self):
        wards = [
            WardRecord("a", "North", 1, 1),
            WardRecord("b", "South", 1, 1),
            WardRecord("c", "North", 1, 1),
        ]
        result = SweepResult(results=(_result(2, (1, 0, 1)),))
        assert reached_by_district(result, wards) == {2: {"North": 2, "South": 0}}

    def test_mismatched_length_raises(self, sample_wards):
        bad = SweepResult(results=(_result(10, (0,) * 3),))
        with pytest.raises(MismatchedLengthError, match="3 entries but 8 wards") as excinfo:
            reached_by_district(bad, sample_wards)
        assert excinfo.value.capacity == 10


class TestBenefitFraction:
    def test_bounds_and_endpoints(self, sample_sweep, sample_wards):
        fractions = benefit_fraction(sample_sweep, sample_wards)
        assert fractions[0] == 0.0
        assert fractions[160_000] == pytest.approx(1.0)
        assert all(0.0 <= f <= 1.0 for f in fractions.values())

    def test_monotone(self, sample_sweep, sample_wards):
        values = list(benefit_fraction(sample_sweep, sample_wards).values())
        assert values == sorted(values)

    def test_fraction_value(self):
        wards = [WardRecord("a", "X", 1, 30), WardRecord("b", "X", 1, 10)]
        result = SweepResult(results=(_result(1, (1, 0)),))
        assert benefit_fraction(result, wards) == {1: pytest.approx(0.75)}

    def test_zero_total_benefit(self):
        wards = [WardRecord("a", "X", 1, 0)]
        result = SweepResult(results=(_result(1, (1,)),))
        assert benefit_fraction(result, wards) == {1: 0.0}

    def test_mismatched_length_raises(self, sample_wards):
        bad = SweepResult(results=(_result(10, (0,) * 9),))
        with pytest.raises(MismatchedLengthError):
            benefit_fraction(bad, sample_wards)


class TestCoverageTable:
    def test_table_shapes(self, sample_sweep, sample_wards):
        tables = coverage_table(sample_sweep, sample_wards)
        assert set(tables) == {"total", "by_district", "fraction"}
        assert list(tables["total"].columns) == ["capacity", "wards_reached"]
        assert list(tables["fraction"].columns) == ["capacity", "benefit_fraction"]
        assert len(tables["total"]) == len(sample_sweep)
        assert len(tables["by_district"]) == len(sample_sweep) * 3

    def test_long_table_sums_to_total(self, sample_sweep, sample_wards):
        tables = coverage_table(sample_sweep, sample_wards)
        summed = tables["by_district"].groupby("capacity")["wards_reached"].sum()
        expected = tables["total"].set_index("capacity")["wards_reached"]
        assert summed.to_dict() == expected.to_dict()
