"""
Event-merge engine: one Monte Carlo trial of a compiled claim.

Each trial merges two ascending streams:
- the claim's ClaimEvents (fixed in advance)
- a queue of pending CashFlows, fed by payoff generators as fixings occur

Merge rule, repeated until both are exhausted:
1. Next event at t, next cash flow at cft, t > cft: evolve to cft,
   discount the flow and add it to the running total.
2. Otherwise (t <= cft, or no cash flow pending): evolve to t, record
   the observation, fire the event's payoff generator and queue its flows.
3. Only cash flows left: realize them in order as in 1.

[T1] Trial value = Σ D(cft) × amount over realized flows
[T1] Estimator = (1/N) Σ trial values
"""

import logging

import numpy as np

from claim_pricing.claims.contingent_claim import CashFlow, ContingentClaim, insert_cash_flows
from claim_pricing.core.execution import MCContext
from claim_pricing.core.state import ObservationHistory
from claim_pricing.errors import InvalidTrialCountError
from claim_pricing.models.base import Discretize

logger = logging.getLogger(__name__)


def simulate_trial(
    model: Discretize,
    claim: ContingentClaim,
    ctx: MCContext,
    antithetic: bool = False,
) -> float:
    """
    Run one trial and return its discounted value.

    The claim is assumed validated (see `simulate_trials`).

    Parameters
    ----------
    model : Discretize
        Model to simulate
    claim : ContingentClaim
        Compiled claim, events sorted ascending by time
    ctx : MCContext
        Random stream and simulation state; the state is re-initialized
    antithetic : bool, default False
        Whether to use mirrored variates

    Returns
    -------
    float
        Sum of discounted cash flows realized on this path
    """
    model.initialize(ctx)

    events = claim.events
    next_event = 0
    pending: list[CashFlow] = []
    history = ObservationHistory()
    total = 0.0

    while next_event < len(events) or pending:
        if next_event < len(events) and (
            not pending or events[next_event].time <= pending[0].time
        ):
            event = events[next_event]
            next_event += 1
            model.evolve(ctx, event.time, antithetic)
            history.record(event.time, ctx.state.observables)
            insert_cash_flows(pending, event.generate(history))
        else:
            cash_flow = pending.pop(0)
            model.evolve(ctx, cash_flow.time, antithetic)
            total += model.discount_state(ctx, cash_flow.time) * cash_flow.amount

    return total


def simulate_trials(
    model: Discretize,
    claim: ContingentClaim,
    trials: int,
    antithetic: bool,
    ctx: MCContext,
) -> np.ndarray:
    """
    Run `trials` trials in sequence on one random stream.

    Parameters
    ----------
    model : Discretize
        Model to simulate
    claim : ContingentClaim
        Compiled claim
    trials : int
        Number of trials (>= 1)
    antithetic : bool
        Whether to use mirrored variates
    ctx : MCContext
        Shared random stream and simulation state

    Returns
    -------
    np.ndarray
        Discounted value of each trial, shape (trials,)

    Raises
    ------
    InvalidTrialCountError
        If trials < 1
    ClaimOrderError
        If claim events are not sorted by time
    """
    if trials < 1:
        raise InvalidTrialCountError(f"CRITICAL: trials must be >= 1, got {trials}")
    claim.validate()

    logger.debug(
        f"Simulating {trials} trials of {len(claim)} events "
        f"with {type(model).__name__} (antithetic={antithetic})"
    )

    values = np.empty(trials)
    for i in range(trials):
        values[i] = simulate_trial(model, claim, ctx, antithetic)
    return values


def simulate_state(
    model: Discretize,
    claim: ContingentClaim,
    trials: int,
    antithetic: bool,
    ctx: MCContext,
) -> float:
    """
    Monte Carlo estimate of a claim's present value.

    [T1] Arithmetic mean of `trials` discounted trial values.

    See `simulate_trials` for parameters and errors.
    """
    values = simulate_trials(model, claim, trials, antithetic, ctx)
    return float(values.sum() / trials)
