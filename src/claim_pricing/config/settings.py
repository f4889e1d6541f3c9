"""
Frozen configuration settings for Monte Carlo valuation.

All configuration is immutable (frozen dataclasses) to ensure reproducibility.
See: config/tolerances.py for test and validation tolerances.
"""

import os
from dataclasses import dataclass

# =============================================================================
# Simulation Configuration
# =============================================================================

def _resolve_n_workers() -> int | None:
    """
    Resolve the default worker count for parallel simulation.

    Priority:
    1. CLAIM_PRICING_WORKERS environment variable (if set)
    2. Default: None (let concurrent.futures pick)

    Returns
    -------
    int | None
        Number of workers, or None for the executor default
    """
    env_workers = os.environ.get("CLAIM_PRICING_WORKERS")
    if env_workers:
        n_workers = int(env_workers)
        if n_workers <= 0:
            raise ValueError(
                f"CRITICAL: CLAIM_PRICING_WORKERS must be > 0, got {n_workers}"
            )
        return n_workers
    return None


@dataclass(frozen=True)
class SimulationConfig:
    """
    Immutable Monte Carlo configuration.

    Attributes
    ----------
    default_max_step : float
        Largest time increment (years) a model integrates in one step.
        One trading day in a 250-day year.
    default_trials : int
        Trial count used by MonteCarloEngine when none is given
    confidence_z : float
        Normal quantile for the reported confidence interval (95%)
    n_workers : int | None
        Worker count for the parallel driver. Override with
        CLAIM_PRICING_WORKERS environment variable.
    """

    default_max_step: float = 1.0 / 250.0
    default_trials: int = 10_000
    confidence_z: float = 1.96
    n_workers: int | None = None

    def __post_init__(self) -> None:
        """Initialize n_workers using resolver function."""
        # Frozen dataclass workaround: use object.__setattr__
        if self.n_workers is None:
            object.__setattr__(self, "n_workers", _resolve_n_workers())
        if self.default_max_step <= 0:
            raise ValueError(
                f"CRITICAL: default_max_step must be > 0, got {self.default_max_step}"
            )
        if self.default_trials <= 0:
            raise ValueError(
                f"CRITICAL: default_trials must be > 0, got {self.default_trials}"
            )


# =============================================================================
# Curve Configuration
# =============================================================================

@dataclass(frozen=True)
class CurveConfig:
    """
    Immutable yield curve configuration.

    Attributes
    ----------
    forward_bump : float
        Time bump (years) used to turn a zero-length forward request into
        an instantaneous rate by finite difference
    """

    forward_bump: float = 1e-6


# =============================================================================
# Master Configuration
# =============================================================================

@dataclass(frozen=True)
class Settings:
    """
    Master frozen configuration combining all sub-configs.

    Usage
    -----
    >>> from claim_pricing.config.settings import SETTINGS
    >>> SETTINGS.simulation.default_max_step
    0.004
    """

    simulation: SimulationConfig = SimulationConfig()
    curves: CurveConfig = CurveConfig()


# Singleton instance - import this
SETTINGS = Settings()
