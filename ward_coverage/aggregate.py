"""Coverage views over a budget sweep.

All views are read-only summaries keyed by capacity, built from the sweep's
inclusion vectors and the ward list they were solved for (matched by
position).
"""

import logging
import math
from collections.abc import Sequence

import pandas as pd

from ward_coverage.exceptions import MismatchedLengthError
from ward_coverage.models import SweepResult, WardRecord

logger = logging.getLogger(__name__)


def _check_lengths(sweep_result: SweepResult, n_wards: int) -> None:
    for capacity, result in sweep_result:
        if len(result.inclusion) != n_wards:
            raise MismatchedLengthError(
                f"inclusion vector has {len(result.inclusion)} entries but {n_wards} wards were given.",
                capacity=capacity,
            )


def total_reached(sweep_result: SweepResult, wards: Sequence[WardRecord] | None = None) -> dict[float, int]:
    """Count selected wards at each capacity.

    Parameters
    ----------
    sweep_result : SweepResult
        Output of :func:`ward_coverage.sweep.sweep`.
    wards : Sequence[WardRecord], optional
        When given, inclusion vector lengths are checked against it.

    Returns
    -------
    dict[float, int]
        Capacity to number of selected wards, in capacity order.
    """
    if wards is not None:
        _check_lengths(sweep_result, len(wards))
    return {capacity: result.n_selected for capacity, result in sweep_result}


def reached_by_district(
    sweep_result: SweepResult,
    wards: Sequence[WardRecord],
) -> dict[float, dict[str, int]]:
    """Count selected wards per district at each capacity.

    Every district present in ``wards`` appears at every capacity, with zero
    when none of its wards is selected, so the counts for a capacity always
    sum to :func:`total_reached` at that capacity.

    Parameters
    ----------
    sweep_result : SweepResult
        Output of :func:`ward_coverage.sweep.sweep`.
    wards : Sequence[WardRecord]
        Ward list the sweep was solved for.

    Returns
    -------
    dict[float, dict[str, int]]
        Capacity to ``{district: count}``, districts in first-seen order.

    Raises
    ------
    MismatchedLengthError
        If any inclusion vector length differs from ``len(wards)``.
    """
    _check_lengths(sweep_result, len(wards))
    districts = list(dict.fromkeys(ward.district for ward in wards))
    views: dict[float, dict[str, int]] = {}
    for capacity, result in sweep_result:
        counts = dict.fromkeys(districts, 0)
        for ward, flag in zip(wards, result.inclusion):
            counts[ward.district] += flag
        views[capacity] = counts
    return views


def benefit_fraction(sweep_result: SweepResult, wards: Sequence[WardRecord]) -> dict[float, float]:
    """Share of total affected beneficiaries covered at each capacity.

    Parameters
    ----------
    sweep_result : SweepResult
        Output of :func:`ward_coverage.sweep.sweep`.
    wards : Sequence[WardRecord]
        Ward list the sweep was solved for.

    Returns
    -------
    dict[float, float]
        Capacity to a fraction in [0, 1]. All zeros if the wards carry no
        benefit at all.

    Raises
    ------
    MismatchedLengthError
        If any inclusion vector length differs from ``len(wards)``.
    """
    _check_lengths(sweep_result, len(wards))
    total = math.fsum(ward.benefit for ward in wards)
    if total == 0:
        logger.warning("Total benefit over %d wards is zero; reporting zero coverage", len(wards))
        return {capacity: 0.0 for capacity in sweep_result.capacities}
    fractions = {}
    for capacity, result in sweep_result:
        covered = math.fsum(ward.benefit for ward, flag in zip(wards, result.inclusion) if flag)
        fractions[capacity] = min(covered / total, 1.0)
    return fractions


def coverage_table(sweep_result: SweepResult, wards: Sequence[WardRecord]) -> dict[str, pd.DataFrame]:
    """Return the three coverage views as tables for presentation.

    Returns
    -------
    dict[str, pd.DataFrame]
        ``"total"`` with columns ``capacity, wards_reached``;
        ``"by_district"`` in long format with ``capacity, district,
        wards_reached``; ``"fraction"`` with ``capacity, benefit_fraction``.
    """
    totals = total_reached(sweep_result, wards)
    by_district = reached_by_district(sweep_result, wards)
    fractions = benefit_fraction(sweep_result, wards)
    return {
        "total": pd.DataFrame(
            {"capacity": list(totals), "wards_reached": list(totals.values())},
        ),
        "by_district": pd.DataFrame(
            [
                {"capacity": capacity, "district": district, "wards_reached": count}
                for capacity, counts in by_district.items()
                for district, count in counts.items()
            ],
            columns=["capacity", "district", "wards_reached"],
        ),
        "fraction": pd.DataFrame(
            {"capacity": list(fractions), "benefit_fraction": list(fractions.values())},
        ),
    }
