"""Budget-constrained ward selection and coverage sweeps."""

from ward_coverage.adapter import CoverageComponent
from ward_coverage.aggregate import benefit_fraction, coverage_table, reached_by_district, total_reached
from ward_coverage.exceptions import (
    CoverageError,
    InfeasibleError,
    InvalidInputError,
    MismatchedLengthError,
    ScaleError,
    SolverTimeoutError,
)
from ward_coverage.models import SolveResult, SweepResult, WardRecord
from ward_coverage.solver import BinaryProgramSolver, DynamicProgrammingSolver, solve
from ward_coverage.sweep import DEFAULT_SCHEDULE, capacity_schedule, sweep

__all__ = [
    "BinaryProgramSolver",
    "CoverageComponent",
    "CoverageError",
    "DEFAULT_SCHEDULE",
    "DynamicProgrammingSolver",
    "InfeasibleError",
    "InvalidInputError",
    "MismatchedLengthError",
    "ScaleError",
    "SolveResult",
    "SolverTimeoutError",
    "SweepResult",
    "WardRecord",
    "benefit_fraction",
    "capacity_schedule",
    "coverage_table",
    "reached_by_district",
    "solve",
    "sweep",
    "total_reached",
]
