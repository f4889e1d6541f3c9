"""
Simulation primitives: time, random stream, per-trial state, execution.
"""

from claim_pricing.core.execution import MCContext, MCRun, run_mc
from claim_pricing.core.random_stream import RandomStream
from claim_pricing.core.state import ObservationHistory, Observables, SimulationState
from claim_pricing.core.time import Time, as_time, time_diff, time_offset

__all__ = [
    # Time
    "Time",
    "as_time",
    "time_diff",
    "time_offset",
    # Randomness
    "RandomStream",
    # State
    "Observables",
    "ObservationHistory",
    "SimulationState",
    # Execution
    "MCContext",
    "MCRun",
    "run_mc",
]
