"""
Scalar simulation time.

Time is measured in years from the valuation date. The engine relies
only on three things: a total order, a difference between two times and
an offset of a time by a year fraction.
"""

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Time:
    """
    Point in simulated time.

    Attributes
    ----------
    years : float
        Year fraction from the valuation date
    """

    years: float

    @classmethod
    def zero(cls) -> "Time":
        """Valuation date, the default start of every trial."""
        return cls(0.0)

    def diff(self, later: "Time") -> float:
        """Year fraction from this time to `later`."""
        return later.years - self.years

    def offset(self, dt: float) -> "Time":
        """This time moved forward by `dt` years."""
        return Time(self.years + dt)

    def __float__(self) -> float:
        return self.years

    def __repr__(self) -> str:
        return f"Time({self.years!r})"


def time_diff(t1: Time, t2: Time) -> float:
    """Year fraction from t1 to t2 (non-negative when t2 >= t1)."""
    return t1.diff(t2)


def time_offset(t: Time, dt: float) -> Time:
    """Offset t by dt years."""
    return t.offset(dt)


def as_time(value: "Time | float") -> Time:
    """Coerce a year fraction or Time to Time."""
    if isinstance(value, Time):
        return value
    return Time(float(value))
