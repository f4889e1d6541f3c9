"""
Per-trial simulation state.

- Observables: immutable snapshot of a model's state variables
- ObservationHistory: fixings recorded during one trial, keyed by Time
- SimulationState: mutable (observables, time) pair owned by one trial
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

import numpy as np

from claim_pricing.core.time import Time, as_time
from claim_pricing.errors import ContractViolationError


@dataclass(frozen=True)
class Observables:
    """
    Immutable snapshot of simulated state variables at one instant.

    Attributes
    ----------
    values : tuple[float, ...]
        One value per state variable (e.g. spot, variance)
    """

    values: tuple[float, ...] = ()

    @classmethod
    def empty(cls) -> "Observables":
        """Snapshot with no state variables."""
        return cls(())

    @classmethod
    def of(cls, *values: float) -> "Observables":
        return cls(tuple(float(v) for v in values))

    def __getitem__(self, index: int) -> float:
        return self.values[index]

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[float]:
        return iter(self.values)


class ObservationHistory(Mapping):
    """
    Fixings recorded during one trial, ordered by time.

    Grows monotonically: each new key must be at or after the latest key.
    Recording at the latest key again overwrites it.

    Examples
    --------
    >>> history = ObservationHistory()
    >>> history.record(Time(0.5), Observables.of(101.0))
    >>> history[Time(0.5)][0]
    101.0
    """

    def __init__(self) -> None:
        self._fixings: dict[Time, Observables] = {}
        self._latest: Time | None = None

    def record(self, t: Time, observables: Observables) -> None:
        """Record the snapshot observed at time t."""
        if self._latest is not None and t < self._latest:
            raise ContractViolationError(
                f"CRITICAL: fixing at {t} recorded after fixing at {self._latest}"
            )
        self._fixings[t] = observables
        self._latest = t

    def __getitem__(self, t: "Time | float") -> Observables:
        return self._fixings[as_time(t)]

    def __iter__(self) -> Iterator[Time]:
        return iter(self._fixings)

    def __len__(self) -> int:
        return len(self._fixings)

    @property
    def times(self) -> tuple[Time, ...]:
        """Fixing times, ascending."""
        return tuple(self._fixings)

    @property
    def latest(self) -> Observables:
        """Most recently recorded snapshot."""
        if self._latest is None:
            raise KeyError("ObservationHistory is empty")
        return self._fixings[self._latest]

    def values_of(self, index: int = 0) -> np.ndarray:
        """One state variable across all fixings, in time order."""
        return np.array([obs[index] for obs in self._fixings.values()])

    def __repr__(self) -> str:
        return f"ObservationHistory({self._fixings!r})"


@dataclass
class SimulationState:
    """
    Mutable state of one trial.

    Attributes
    ----------
    observables : Observables
        Current snapshot of the model's state variables
    time : Time
        Current simulated time
    """

    observables: Observables
    time: Time

    @classmethod
    def initial(cls) -> "SimulationState":
        """Empty snapshot at the valuation date."""
        return cls(observables=Observables.empty(), time=Time.zero())

    def reset(self, observables: Observables, time: Time | None = None) -> None:
        """Start a fresh trial from `observables` at `time` (default zero)."""
        self.observables = observables
        self.time = Time.zero() if time is None else time

    def advance(self, observables: Observables, time: Time) -> None:
        """Move to a new snapshot at a later time."""
        self.observables = observables
        self.time = time
