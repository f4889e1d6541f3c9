"""
Centralized pytest fixtures for claim-pricing test suite.

Fixture Categories:
1. Curves and Models - Standard market conditions (Black, Heston)
2. Recording Model - Deterministic model that logs every engine call
3. Claims - Sample compiled claims
4. Tolerances - Tiered tolerance settings
"""

from dataclasses import dataclass, field

import numpy as np
import pytest

from claim_pricing.claims.builders import OptionType, vanilla_option, zero_coupon_bond
from claim_pricing.config import tolerances as tol
from claim_pricing.core.execution import MCContext
from claim_pricing.core.random_stream import RandomStream
from claim_pricing.core.state import Observables, SimulationState
from claim_pricing.core.time import Time
from claim_pricing.curves.yield_curve import FlatCurve
from claim_pricing.models.base import Discretize
from claim_pricing.models.black import Black
from claim_pricing.models.heston import Heston


# =============================================================================
# TOLERANCE TIERS
# =============================================================================

@dataclass(frozen=True)
class ToleranceTiers:
    """
    Tiered tolerance framework for different test types.

    See: claim_pricing/config/tolerances.py
    """

    deterministic: float = tol.DETERMINISTIC_TOLERANCE
    analytical: float = tol.ANALYTICAL_TOLERANCE
    mc_10k: float = tol.MC_10K_TOLERANCE
    mc_2k: float = tol.MC_2K_TOLERANCE


TOLERANCES = ToleranceTiers()


@pytest.fixture(scope="session")
def tolerances() -> ToleranceTiers:
    """Provide tiered tolerance settings for all tests."""
    return TOLERANCES


# =============================================================================
# RECORDING MODEL
# =============================================================================

@dataclass(frozen=True)
class RecordingModel(Discretize):
    """
    Deterministic model that logs engine calls.

    The single observable is the current time in years, so payoffs can see
    when they were fixed. Discounting is flat at `rate`. Every
    evolve_step target and discount_state time is appended to `log`.
    """

    rate: float = 0.05
    step: float = 0.25
    draws_per_step: int = 0
    log: list = field(default_factory=list, compare=False)

    def initialize(self, ctx: MCContext) -> None:
        self.log.append(("init", Time.zero()))
        ctx.state.reset(Observables.of(0.0), Time.zero())

    def discount(self, t: Time) -> float:
        return float(np.exp(-self.rate * t.years))

    def discount_state(self, ctx: MCContext, t: Time) -> float:
        self.log.append(("discount", t))
        return self.discount(t)

    def forward_gen(self, ctx: MCContext, t: Time) -> float:
        return self.rate

    def evolve_step(self, ctx: MCContext, t2: Time, antithetic: bool) -> None:
        for _ in range(self.draws_per_step):
            ctx.rng.standard_normal()
        self.log.append(("step", ctx.state.time, t2))
        ctx.state.advance(Observables.of(t2.years), t2)

    @property
    def max_step(self) -> float:
        return self.step

    def entries(self, kind: str) -> list[tuple]:
        return [entry for entry in self.log if entry[0] == kind]


@pytest.fixture
def recording_model() -> RecordingModel:
    """Recording model with dyadic max_step (exact float stepping)."""
    return RecordingModel()


@pytest.fixture
def recording_model_cls() -> type[RecordingModel]:
    """RecordingModel class, for custom step sizes or subclassing."""
    return RecordingModel


@pytest.fixture
def make_context():
    """Factory for a fresh MCContext."""

    def _make(seed: int = 42) -> MCContext:
        return MCContext(rng=RandomStream(seed), state=SimulationState.initial())

    return _make


# =============================================================================
# MARKET MODELS
# =============================================================================

@pytest.fixture
def flat_curve() -> FlatCurve:
    """5% flat curve."""
    return FlatCurve(0.05)


@pytest.fixture
def black_model(flat_curve: FlatCurve) -> Black:
    """Black model: S=100, σ=20%, r=5%, no dividend."""
    return Black(
        initial=100.0,
        vol=0.20,
        forward_curve=flat_curve,
        discount_curve=flat_curve,
    )


@pytest.fixture
def coarse_black_model(flat_curve: FlatCurve) -> Black:
    """
    Black model stepping in quarters.

    The lognormal step is exact, so coarse steps lose no accuracy and keep
    statistical tests fast.
    """

    @dataclass(frozen=True)
    class CoarseBlack(Black):
        @property
        def max_step(self) -> float:
            return 0.25

    return CoarseBlack(
        initial=100.0,
        vol=0.20,
        forward_curve=flat_curve,
        discount_curve=flat_curve,
    )


@pytest.fixture
def heston_model(flat_curve: FlatCurve) -> Heston:
    """Heston model with Feller-satisfying parameters."""
    return Heston(
        initial=100.0,
        v0=0.04,
        kappa=2.0,
        theta=0.04,
        sigma=0.3,
        rho=-0.7,
        forward_curve=flat_curve,
        discount_curve=flat_curve,
    )


# =============================================================================
# CLAIMS
# =============================================================================

@pytest.fixture
def zcb_claim():
    """Zero-coupon bond paying 100 at 1.0."""
    return zero_coupon_bond(1.0, 100.0)


@pytest.fixture
def atm_call_claim():
    """ATM one-year call on 100."""
    return vanilla_option(OptionType.CALL, 100.0, 1.0)
