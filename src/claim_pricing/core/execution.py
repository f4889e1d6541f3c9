"""
Simulation execution layer.

A Monte Carlo computation is any callable taking an MCContext: the two
pieces of mutable context (random stream and simulation state) passed
explicitly down the call chain. `run_mc` runs one to completion.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from claim_pricing.core.random_stream import RandomStream
from claim_pricing.core.state import SimulationState

T = TypeVar("T")


@dataclass
class MCContext:
    """
    Mutable context threaded through a Monte Carlo computation.

    Attributes
    ----------
    rng : RandomStream
        Source of variates consumed by model steps
    state : SimulationState
        Current (observables, time) of the trial in progress
    """

    rng: RandomStream
    state: SimulationState


@dataclass(frozen=True)
class MCRun(Generic[T]):
    """
    Result of running a Monte Carlo computation.

    Attributes
    ----------
    value : T
        The computation's result
    rng_state : dict
        Random stream state after the run; resume with RandomStream.from_state
    """

    value: T
    rng_state: dict[str, Any]


def run_mc(
    computation: Callable[[MCContext], T],
    initial_state: SimulationState,
    rng: RandomStream,
) -> MCRun[T]:
    """
    Run a Monte Carlo computation to completion.

    Deterministic given identical initial state and random stream state.

    Parameters
    ----------
    computation : Callable[[MCContext], T]
        Computation that may draw variates and read/write the state
    initial_state : SimulationState
        Starting state; mutated in place by the computation
    rng : RandomStream
        Random stream; advanced in place by the computation

    Returns
    -------
    MCRun[T]
        Result and final random stream state
    """
    ctx = MCContext(rng=rng, state=initial_state)
    value = computation(ctx)
    return MCRun(value=value, rng_state=rng.state)
