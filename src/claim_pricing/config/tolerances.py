"""
Centralized tolerance framework for Monte Carlo valuation.

Tolerance Tiers:
    Tier 1 (Deterministic): Claims whose value involves no path randomness
    Tier 2 (Analytical): Closed-form reference prices
    Tier 3 (Stochastic): CLT-derived, simulated values

References:
    [T1] Higham (2002) "Accuracy and Stability of Numerical Algorithms"
    [T1] Glasserman (2003) Ch. 3-4 - Monte Carlo error bounds
"""

import numpy as np
from typing import Final

# =============================================================================
# Tier 1: Deterministic Tolerances
# =============================================================================
# A fixed cash flow discounted on a deterministic curve has zero variance;
# the only error is float64 accumulation in the trial average.

#: Discounted fixed cash flows: d(t) * A regardless of trial count
DETERMINISTIC_TOLERANCE: Final[float] = 1e-10

#: Time arithmetic: offsets accumulated over many max-size steps
TIME_TOLERANCE: Final[float] = 1e-12


# =============================================================================
# Tier 2: Analytical Tolerances
# =============================================================================

#: Closed-form vs closed-form identities (parity, forward price)
ANALYTICAL_TOLERANCE: Final[float] = 1e-8


# =============================================================================
# Tier 3: Stochastic Tolerances (CLT-Derived)
# =============================================================================
# Derived from Central Limit Theorem: 3σ/√N confidence interval


def mc_tolerance(n_trials: int, sigma: float = 0.20, confidence: float = 3.0) -> float:
    """
    Calculate CLT-derived Monte Carlo tolerance.

    [T1] Standard error of MC estimate is σ/√N.
    3σ gives 99.7% confidence interval.

    Parameters
    ----------
    n_trials : int
        Number of Monte Carlo trials
    sigma : float
        Estimated standard deviation of the trial value (relative)
    confidence : float
        Number of standard deviations (default 3 for 99.7% CI)

    Returns
    -------
    float
        Relative tolerance for MC vs analytical comparison

    Examples
    --------
    >>> mc_tolerance(10_000)
    0.006
    """
    if n_trials <= 0:
        raise ValueError(f"CRITICAL: n_trials must be > 0, got {n_trials}")
    return confidence * sigma / np.sqrt(n_trials)


#: MC tolerance for 10,000 trials: 3 * 0.20 / sqrt(10000) = 0.006
MC_10K_TOLERANCE: Final[float] = 0.006

#: MC tolerance for 2,000 trials, path-dependent claims
MC_2K_TOLERANCE: Final[float] = 0.03


# =============================================================================
# Tolerance Registry (For Dynamic Access)
# =============================================================================

TOLERANCE_REGISTRY: dict[str, float] = {
    "deterministic": DETERMINISTIC_TOLERANCE,
    "time": TIME_TOLERANCE,
    "analytical": ANALYTICAL_TOLERANCE,
    "mc_10k": MC_10K_TOLERANCE,
    "mc_2k": MC_2K_TOLERANCE,
}


def get_tolerance(name: str) -> float:
    """
    Get tolerance by name from registry.

    Parameters
    ----------
    name : str
        Tolerance name (see TOLERANCE_REGISTRY keys)

    Returns
    -------
    float
        Tolerance value

    Raises
    ------
    KeyError
        If tolerance name not found
    """
    if name not in TOLERANCE_REGISTRY:
        available = ", ".join(sorted(TOLERANCE_REGISTRY.keys()))
        raise KeyError(f"Unknown tolerance '{name}'. Available: {available}")
    return TOLERANCE_REGISTRY[name]
