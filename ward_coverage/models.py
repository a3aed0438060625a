"""Data models for ward selection and budget sweeps."""

import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from ward_coverage.exceptions import InvalidInputError, MismatchedLengthError


def _check_amount(name: str, value: float) -> None:
    if not math.isfinite(value):
        raise InvalidInputError(f"{name} must be finite, got {value!r}.")
    if value < 0:
        raise InvalidInputError(f"{name} must be non-negative, got {value!r}.")


@dataclass(frozen=True)
class WardRecord:
    """A ward eligible for the distribution program.

    Parameters
    ----------
    ward_id : str
        Unique ward identifier.
    district : str
        Enclosing administrative district.
    cost : float
        Kilograms of commodity required to serve the ward's eligible population.
    benefit : float
        Estimated number of directly flood-affected eligible beneficiaries.
    """

    ward_id: str
    district: str
    cost: float
    benefit: float

    def __post_init__(self) -> None:
        """Validate that cost and benefit are non-negative and finite."""
        _check_amount(f"cost of ward {self.ward_id!r}", self.cost)
        _check_amount(f"benefit of ward {self.ward_id!r}", self.benefit)


@dataclass(frozen=True)
class SolveResult:
    """Optimal selection for a single capacity.

    Parameters
    ----------
    capacity : float
        Budget (kg) used for the solve.
    inclusion : tuple[int, ...]
        Binary inclusion vector, one entry per item in input order.
    total_benefit : float
        Aggregate benefit of the included items.
    total_cost : float
        Aggregate cost (kg) of the included items.
    status : str
        Solver termination status, ``"Optimal"`` for every returned result.
    rule : str
        Identifier of the solver that produced the result.
    """

    capacity: float
    inclusion: tuple[int, ...]
    total_benefit: float
    total_cost: float
    status: str = "Optimal"
    rule: str = ""

    def __post_init__(self) -> None:
        """Validate that the inclusion vector is binary."""
        if any(flag not in (0, 1) for flag in self.inclusion):
            raise InvalidInputError("inclusion vector must contain only 0 and 1.")

    @property
    def n_selected(self) -> int:
        """Number of included items."""
        return sum(self.inclusion)

    def selected(self, wards: Sequence[WardRecord]) -> list[WardRecord]:
        """Return the wards included by this result.

        Raises
        ------
        MismatchedLengthError
            If ``wards`` does not match the inclusion vector length.
        """
        if len(wards) != len(self.inclusion):
            raise MismatchedLengthError(
                f"inclusion vector has {len(self.inclusion)} entries but {len(wards)} wards were given.",
                capacity=self.capacity,
            )
        return [ward for ward, flag in zip(wards, self.inclusion) if flag]


@dataclass(frozen=True)
class SweepResult:
    """Solve results across an increasing capacity schedule.

    Parameters
    ----------
    results : tuple[SolveResult, ...]
        One result per capacity level, in increasing capacity order.
    """

    results: tuple[SolveResult, ...]

    def __post_init__(self) -> None:
        """Validate ordering and a shared item count across results."""
        capacities = [r.capacity for r in self.results]
        if any(b <= a for a, b in zip(capacities, capacities[1:])):
            raise InvalidInputError("sweep results must be in strictly increasing capacity order.")
        lengths = {len(r.inclusion) for r in self.results}
        if len(lengths) > 1:
            raise MismatchedLengthError(f"sweep results disagree on item count: {sorted(lengths)}.")

    @property
    def capacities(self) -> list[float]:
        """Capacity levels of the sweep, in order."""
        return [r.capacity for r in self.results]

    @property
    def n_items(self) -> int:
        """Length of every inclusion vector in the sweep."""
        return len(self.results[0].inclusion) if self.results else 0

    def __iter__(self) -> Iterator[tuple[float, SolveResult]]:
        return ((r.capacity, r) for r in self.results)

    def __len__(self) -> int:
        return len(self.results)
