"""
Monte Carlo simulation of compiled claims.

Provides:
- Event-merge engine (one trial, many trials)
- Sequential, antithetic and parallel trial drivers
- Monte Carlo engine with error statistics and convergence analysis
"""

from claim_pricing.simulation.engine import (
    simulate_state,
    simulate_trial,
    simulate_trials,
)
from claim_pricing.simulation.monte_carlo import (
    MCResult,
    MonteCarloEngine,
    convergence_analysis,
    run_simulation,
    run_simulation_anti,
    run_simulation_parallel,
    simulate_trials_parallel,
)

__all__ = [
    # Engine
    "simulate_state",
    "simulate_trial",
    "simulate_trials",
    # Drivers
    "run_simulation",
    "run_simulation_anti",
    "run_simulation_parallel",
    "simulate_trials_parallel",
    # Monte Carlo
    "MCResult",
    "MonteCarloEngine",
    "convergence_analysis",
]
