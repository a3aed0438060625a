"""Error types raised by the coverage solvers, sweep driver and aggregator."""


class CoverageError(Exception):
    """Base class for all ward coverage errors.

    Parameters
    ----------
    message : str
        Human-readable description of the failure.
    capacity : float, optional
        Capacity (kg) at which the failure occurred, when known.
    """

    def __init__(self, message: str, capacity: float | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.capacity = capacity

    def at_capacity(self, capacity: float) -> "CoverageError":
        """Attach the capacity that triggered this error and return ``self``."""
        self.capacity = capacity
        return self

    def __str__(self) -> str:
        if self.capacity is None:
            return self.message
        return f"{self.message} (capacity={self.capacity:g} kg)"


class InvalidInputError(CoverageError, ValueError):
    """Negative or non-finite cost, benefit or capacity, or a malformed schedule."""


class InfeasibleError(CoverageError):
    """No selection satisfies the capacity constraint."""


class ScaleError(CoverageError):
    """Costs cannot be represented on the chosen discretized cost axis."""


class MismatchedLengthError(CoverageError, ValueError):
    """Inclusion vector length disagrees with the ward list."""


class SolverTimeoutError(CoverageError, TimeoutError):
    """The solver ran out of time before proving optimality."""
