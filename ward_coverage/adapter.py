"""COVERAGE component: ward selection and budget sweeps for a pipeline."""

import logging
from typing import Any, Protocol

from ward_coverage.aggregate import benefit_fraction, reached_by_district, total_reached
from ward_coverage.exceptions import InvalidInputError
from ward_coverage.models import WardRecord
from ward_coverage.solver import BinaryProgramSolver, KnapsackSolver
from ward_coverage.sweep import capacity_schedule, sweep

logger = logging.getLogger(__name__)


class PipelineComponent(Protocol):
    """Structural interface for pipeline stage components."""

    def execute(self, event: dict) -> dict:
        """Process event and return result."""
        ...


_FIELD_MAP_IN: dict[str, str] = {
    "ward_id": "ward_id",
    "district": "district",
    "cost_kg": "cost",
    "affected_beneficiaries": "benefit",
}


def _to_ward_record(ward: dict[str, Any]) -> WardRecord:
    """Map an orchestrator ward dict to a :class:`WardRecord`.

    Parameters
    ----------
    ward : dict[str, Any]
        Ward dict with orchestrator field names.

    Returns
    -------
    WardRecord

    Raises
    ------
    InvalidInputError
        If a required field is missing or a value is invalid.
    """
    missing = [key for key in _FIELD_MAP_IN if key not in ward]
    if missing:
        raise InvalidInputError(f"Ward is missing fields: {missing}")
    return WardRecord(**{_FIELD_MAP_IN[key]: ward[key] for key in _FIELD_MAP_IN})


class CoverageComponent(PipelineComponent):
    """Select wards for a single budget or sweep a budget schedule.

    Parameters
    ----------
    solver : KnapsackSolver, optional
        Solver to use. Defaults to :class:`BinaryProgramSolver`.
    max_workers : int, optional
        Thread pool size for sweeps. ``None`` solves serially.
    """

    def __init__(self, solver: KnapsackSolver | None = None, max_workers: int | None = None) -> None:
        self._solver = solver or BinaryProgramSolver()
        self.max_workers = max_workers

    def execute(self, event: dict) -> dict:
        """Run a single solve or a sweep, depending on the event.

        Parameters
        ----------
        event : dict
            Must contain ``wards`` (list of dicts with orchestrator field
            names) and one of ``capacity`` (float, single-solve mode),
            ``capacities`` (list of floats) or ``schedule`` (dict with
            ``start``, ``end`` and ``step``).

        Returns
        -------
        dict
            Single-solve mode: ``mode``, ``capacity``, ``inclusion``,
            ``selected_wards``, ``total_benefit``, ``total_cost`` and
            ``rule``. Sweep mode: ``mode``, ``capacities``,
            ``total_reached``, ``reached_by_district``,
            ``benefit_fraction`` and ``rule``.
        """
        wards = [_to_ward_record(w) for w in event["wards"]]

        if "capacity" in event:
            return self._solve_single(wards, event["capacity"])
        if "capacities" in event:
            capacities = list(event["capacities"])
        elif "schedule" in event:
            schedule = event["schedule"]
            capacities = capacity_schedule(schedule["start"], schedule["end"], schedule["step"])
        else:
            raise InvalidInputError("Event needs one of 'capacity', 'capacities' or 'schedule'.")
        return self._sweep(wards, capacities)

    def _solve_single(self, wards: list[WardRecord], capacity: float) -> dict:
        result = self._solver(wards, capacity)
        logger.info(
            "Single solve complete: capacity=%.0f kg, selected=%d wards",
            result.capacity,
            result.n_selected,
        )
        return {
            "mode": "single",
            "capacity": result.capacity,
            "inclusion": list(result.inclusion),
            "selected_wards": [w.ward_id for w in result.selected(wards)],
            "total_benefit": result.total_benefit,
            "total_cost": result.total_cost,
            "rule": result.rule,
        }

    def _sweep(self, wards: list[WardRecord], capacities: list[float]) -> dict:
        sweep_result = sweep(wards, capacities, solver=self._solver, max_workers=self.max_workers)
        logger.info("Sweep complete: %d capacity levels", len(sweep_result))
        return {
            "mode": "sweep",
            "capacities": sweep_result.capacities,
            "total_reached": total_reached(sweep_result, wards),
            "reached_by_district": reached_by_district(sweep_result, wards),
            "benefit_fraction": benefit_fraction(sweep_result, wards),
            "rule": getattr(self._solver, "rule", type(self._solver).__name__),
        }
