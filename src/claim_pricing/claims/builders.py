"""
Builders for common contingent claims.

Each builder returns a compiled ContingentClaim (events sorted by time).
Claims combine into baskets with `combine` or `+`.

[T1] Call payoff: max(S(T) - K, 0); Put payoff: max(K - S(T), 0)
[T1] Forward payoff: S(T) - K
[T1] Arithmetic Asian payoff: max(±(mean(S(tᵢ)) - K), 0)
"""

from collections.abc import Callable, Sequence
from enum import Enum

import numpy as np

from claim_pricing.claims.contingent_claim import (
    CashFlow,
    ClaimEvent,
    ContingentClaim,
    PayoffGenerator,
    combine,
)
from claim_pricing.core.state import ObservationHistory
from claim_pricing.core.time import Time, as_time


class OptionType(Enum):
    """Option type enumeration."""

    CALL = "call"
    PUT = "put"


def _intrinsic(option_type: OptionType, underlying: float, strike: float) -> float:
    if option_type == OptionType.CALL:
        return max(underlying - strike, 0.0)
    return max(strike - underlying, 0.0)


def specify(
    fixings: Sequence["Time | float"],
    pay_time: "Time | float",
    payoff: Callable[[ObservationHistory], float],
) -> ContingentClaim:
    """
    Claim observed at `fixings` that pays `payoff(history)` at `pay_time`.

    The payment is generated at the last fixing, so `pay_time` must not be
    before it.

    Parameters
    ----------
    fixings : Sequence[Time | float]
        Observation times (sorted into order)
    pay_time : Time | float
        Payment time, >= last fixing
    payoff : Callable[[ObservationHistory], float]
        Amount as a function of the observation history

    Returns
    -------
    ContingentClaim
        Compiled claim
    """
    times = sorted(as_time(t) for t in fixings)
    if not times:
        raise ValueError("CRITICAL: a claim needs at least one fixing")
    pay_time = as_time(pay_time)
    if pay_time < times[-1]:
        raise ValueError(
            f"CRITICAL: pay_time {pay_time} is before the last fixing {times[-1]}"
        )

    def generate(history: ObservationHistory) -> list[CashFlow]:
        return [CashFlow(pay_time, payoff(history))]

    events = [ClaimEvent(t) for t in times[:-1]]
    events.append(ClaimEvent(times[-1], generate))
    return ContingentClaim(tuple(events))


def fixed_cash_flow(t: "Time | float", amount: float) -> ContingentClaim:
    """Known payment of `amount` at t."""
    return specify([t], t, lambda _: amount)


def zero_coupon_bond(t: "Time | float", face: float) -> ContingentClaim:
    """
    Zero-coupon bond paying `face` at maturity t.

    Examples
    --------
    >>> claim = zero_coupon_bond(1.0, 100.0)
    >>> claim.maturity
    Time(1.0)
    """
    if face < 0:
        raise ValueError(f"CRITICAL: face must be >= 0, got {face}")
    return fixed_cash_flow(t, face)


def fixed_coupon_bond(
    face: float,
    coupon: float,
    payment_times: Sequence["Time | float"],
) -> ContingentClaim:
    """
    Bullet bond paying `coupon × face` at each payment time and `face` at the last.

    Parameters
    ----------
    face : float
        Notional repaid at maturity
    coupon : float
        Coupon per period (decimal)
    payment_times : Sequence[Time | float]
        Coupon dates, the last being maturity
    """
    times = sorted(as_time(t) for t in payment_times)
    if not times:
        raise ValueError("CRITICAL: bond needs at least one payment time")
    coupons = [fixed_cash_flow(t, coupon * face) for t in times]
    return combine_all(coupons + [fixed_cash_flow(times[-1], face)])


def forward_contract(
    t: "Time | float",
    strike: float,
    index: int = 0,
) -> ContingentClaim:
    """Long forward: pays S(t) - strike at t."""
    t = as_time(t)
    return specify([t], t, lambda history: history[t][index] - strike)


def vanilla_option(
    option_type: OptionType,
    strike: float,
    t: "Time | float",
    index: int = 0,
) -> ContingentClaim:
    """European call or put on observable `index`, paid at expiry t."""
    if strike <= 0:
        raise ValueError(f"CRITICAL: strike must be > 0, got {strike}")
    t = as_time(t)
    return specify(
        [t], t, lambda history: _intrinsic(option_type, history[t][index], strike)
    )


def binary_option(
    option_type: OptionType,
    strike: float,
    t: "Time | float",
    payout: float = 1.0,
    index: int = 0,
) -> ContingentClaim:
    """Cash-or-nothing option: pays `payout` at t if in the money."""
    if strike <= 0:
        raise ValueError(f"CRITICAL: strike must be > 0, got {strike}")
    t = as_time(t)

    def payoff(history: ObservationHistory) -> float:
        underlying = history[t][index]
        if option_type == OptionType.CALL:
            return payout if underlying > strike else 0.0
        return payout if underlying < strike else 0.0

    return specify([t], t, payoff)


def arithmetic_asian(
    option_type: OptionType,
    strike: float,
    fixings: Sequence["Time | float"],
    pay_time: "Time | float | None" = None,
    index: int = 0,
) -> ContingentClaim:
    """
    Arithmetic-average Asian option.

    Parameters
    ----------
    option_type : OptionType
        CALL or PUT
    strike : float
        Strike on the average
    fixings : Sequence[Time | float]
        Averaging dates
    pay_time : Time | float, optional
        Payment time (default: last fixing)
    index : int, default 0
        Observable to average
    """
    if strike <= 0:
        raise ValueError(f"CRITICAL: strike must be > 0, got {strike}")
    times = sorted(as_time(t) for t in fixings)
    if not times:
        raise ValueError("CRITICAL: Asian option needs at least one fixing")
    if pay_time is None:
        pay_time = times[-1]

    def payoff(history: ObservationHistory) -> float:
        average = float(np.mean([history[t][index] for t in times]))
        return _intrinsic(option_type, average, strike)

    return specify(times, pay_time, payoff)


def _scaled(generator: PayoffGenerator, k: float) -> PayoffGenerator:
    def generate(history: ObservationHistory) -> list[CashFlow]:
        return [CashFlow(cf.time, k * cf.amount) for cf in generator(history)]

    return generate


def multiplier(k: float, claim: ContingentClaim) -> ContingentClaim:
    """Scale every cash flow of a claim by k."""
    return ContingentClaim(
        tuple(
            event if event.payoff is None else ClaimEvent(event.time, _scaled(event.payoff, k))
            for event in claim.events
        )
    )


def short(claim: ContingentClaim) -> ContingentClaim:
    """Short position: every cash flow negated."""
    return multiplier(-1.0, claim)


def combine_all(claims: Sequence[ContingentClaim]) -> ContingentClaim:
    """Basket of several claims."""
    return combine(*claims)
