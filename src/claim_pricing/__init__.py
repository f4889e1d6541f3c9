"""
claim-pricing: Monte Carlo valuation of path-dependent contingent claims.

Quick Start
-----------
>>> from claim_pricing import Black, FlatCurve, OptionType, run_simulation, vanilla_option
>>> model = Black(100.0, 0.20, FlatCurve(0.05), FlatCurve(0.05))
>>> claim = vanilla_option(OptionType.CALL, strike=100.0, t=1.0)
>>> price = run_simulation(model, claim, seed=42, trials=10_000)

Version: 0.1.0
"""

__version__ = "0.1.0"

# =============================================================================
# Core
# =============================================================================
from claim_pricing.core import (
    MCContext,
    ObservationHistory,
    Observables,
    RandomStream,
    SimulationState,
    Time,
    run_mc,
)

# =============================================================================
# Claims
# =============================================================================
from claim_pricing.claims import (
    CashFlow,
    ClaimEvent,
    ContingentClaim,
    OptionType,
    arithmetic_asian,
    binary_option,
    combine,
    combine_all,
    fixed_cash_flow,
    fixed_coupon_bond,
    forward_contract,
    multiplier,
    short,
    specify,
    vanilla_option,
    zero_coupon_bond,
)

# =============================================================================
# Curves, Models and Reference Prices
# =============================================================================
from claim_pricing.curves import FlatCurve, InterpolatedCurve, NetCurve, YieldCurve
from claim_pricing.models import Black, Discretize, Heston
from claim_pricing.pricing import binary_price, black_scholes_price, forward_value

# =============================================================================
# Simulation
# =============================================================================
from claim_pricing.simulation import (
    MCResult,
    MonteCarloEngine,
    convergence_analysis,
    run_simulation,
    run_simulation_anti,
    run_simulation_parallel,
    simulate_state,
)

# =============================================================================
# Configuration and Errors
# =============================================================================
from claim_pricing.config.settings import SETTINGS
from claim_pricing.errors import (
    ClaimOrderError,
    ClaimPricingError,
    ContractViolationError,
    InputValidationError,
    InvalidTrialCountError,
    TimeOrderError,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "MCContext",
    "ObservationHistory",
    "Observables",
    "RandomStream",
    "SimulationState",
    "Time",
    "run_mc",
    # Claims
    "CashFlow",
    "ClaimEvent",
    "ContingentClaim",
    "OptionType",
    "arithmetic_asian",
    "binary_option",
    "combine",
    "combine_all",
    "fixed_cash_flow",
    "fixed_coupon_bond",
    "forward_contract",
    "multiplier",
    "short",
    "specify",
    "vanilla_option",
    "zero_coupon_bond",
    # Curves and Models
    "FlatCurve",
    "InterpolatedCurve",
    "NetCurve",
    "YieldCurve",
    "Black",
    "Discretize",
    "Heston",
    # Reference prices
    "binary_price",
    "black_scholes_price",
    "forward_value",
    # Simulation
    "MCResult",
    "MonteCarloEngine",
    "convergence_analysis",
    "run_simulation",
    "run_simulation_anti",
    "run_simulation_parallel",
    "simulate_state",
    # Config
    "SETTINGS",
    # Errors
    "ClaimOrderError",
    "ClaimPricingError",
    "ContractViolationError",
    "InputValidationError",
    "InvalidTrialCountError",
    "TimeOrderError",
]
