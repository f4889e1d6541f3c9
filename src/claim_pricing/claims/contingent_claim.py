"""
Compiled contingent claims.

A contract's term sheet compiles to a time-ordered tuple of ClaimEvents.
At each event the engine records an observation; an event may carry a
payoff generator that turns the observation history so far into zero or
more CashFlows, which are queued until their payment time.

Ordering
--------
- ClaimEvents: non-decreasing by time. Checked by `validate()`.
- Pending cash flows: ascending by time, kept so by `insert_cash_flow`.
  Among equal times a new flow goes before the flows already queued.
"""

from bisect import bisect_left
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
import heapq

from claim_pricing.core.state import ObservationHistory
from claim_pricing.core.time import Time, as_time
from claim_pricing.errors import ClaimOrderError


@dataclass(frozen=True)
class CashFlow:
    """
    Deterministic payment awaiting discounting.

    Attributes
    ----------
    time : Time
        Payment time
    amount : float
        Undiscounted amount
    """

    time: Time
    amount: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "time", as_time(self.time))


#: Turns the fixings observed so far into zero or more cash flows.
PayoffGenerator = Callable[[ObservationHistory], Sequence[CashFlow]]


@dataclass(frozen=True)
class ClaimEvent:
    """
    One scheduled observation of a contingent claim.

    Attributes
    ----------
    time : Time
        Observation (fixing) time
    payoff : PayoffGenerator, optional
        Cash flow generator fired after the observation is recorded
    """

    time: Time
    payoff: PayoffGenerator | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "time", as_time(self.time))

    def generate(self, history: ObservationHistory) -> list[CashFlow]:
        """Cash flows produced from `history`; empty for pure fixings."""
        if self.payoff is None:
            return []
        return list(self.payoff(history))


@dataclass(frozen=True)
class ContingentClaim:
    """
    Compiled claim: ClaimEvents sorted ascending by time.

    Construction does not sort or check; call `validate()` (the engine
    does) to reject unsorted input.

    Examples
    --------
    >>> claim = ContingentClaim((ClaimEvent(Time(1.0)),))
    >>> len(claim)
    1
    """

    events: tuple[ClaimEvent, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "events", tuple(self.events))

    @classmethod
    def empty(cls) -> "ContingentClaim":
        return cls(())

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self):
        return iter(self.events)

    def __add__(self, other: "ContingentClaim") -> "ContingentClaim":
        return combine(self, other)

    @property
    def times(self) -> tuple[Time, ...]:
        """Observation times, in event order."""
        return tuple(event.time for event in self.events)

    @property
    def maturity(self) -> Time:
        """Time of the last event."""
        if not self.events:
            raise ValueError("CRITICAL: empty claim has no maturity")
        return self.events[-1].time

    def validate(self) -> None:
        """
        Check that events are non-decreasing by time and none precede the
        valuation date.

        Raises
        ------
        ClaimOrderError
            If an event is before Time.zero() or earlier than the one before it
        """
        if self.events and self.events[0].time < Time.zero():
            raise ClaimOrderError(
                f"CRITICAL: claim events must not precede the valuation date; "
                f"first event at {self.events[0].time}"
            )
        for i in range(1, len(self.events)):
            previous, current = self.events[i - 1].time, self.events[i].time
            if current < previous:
                raise ClaimOrderError(
                    f"CRITICAL: claim events must be sorted by time; "
                    f"event {i} at {current} follows event {i - 1} at {previous}"
                )


def combine(*claims: ContingentClaim) -> ContingentClaim:
    """
    Merge compiled claims into one basket, preserving time order.

    Each input must already be sorted. Events at equal times keep the
    order of the arguments.
    """
    for claim in claims:
        claim.validate()
    merged = heapq.merge(*(claim.events for claim in claims), key=lambda e: e.time)
    return ContingentClaim(tuple(merged))


def insert_cash_flow(queue: list[CashFlow], cash_flow: CashFlow) -> None:
    """
    Insert a cash flow into a queue sorted ascending by time.

    The new flow is placed before any queued flows with the same time.

    Parameters
    ----------
    queue : list[CashFlow]
        Pending cash flows, ascending by time; modified in place
    cash_flow : CashFlow
        Flow to insert
    """
    index = bisect_left(queue, cash_flow.time, key=lambda cf: cf.time)
    queue.insert(index, cash_flow)


def insert_cash_flows(queue: list[CashFlow], cash_flows: Iterable[CashFlow]) -> None:
    """Insert each flow in turn (left fold of `insert_cash_flow`)."""
    for cash_flow in cash_flows:
        insert_cash_flow(queue, cash_flow)
