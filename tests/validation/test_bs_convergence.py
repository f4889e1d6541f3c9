"""
Monte Carlo convergence to closed-form Black-Scholes prices.

[T1] Under the Black model with flat curves the simulated value of a
European claim converges to its Black-Scholes price at rate 1/√N.

Each check allows four standard errors of the simulated estimate, so a
fixed seed passes with overwhelming probability.

References:
    [T1] Hull (2021) "Options, Futures, and Other Derivatives", Ch. 15
    [T1] Glasserman (2003) "Monte Carlo Methods in Financial Engineering", Ch. 3
"""

from dataclasses import dataclass

import numpy as np
import pytest

from claim_pricing.claims.builders import (
    OptionType,
    binary_option,
    forward_contract,
    vanilla_option,
)
from claim_pricing.curves.yield_curve import FlatCurve, NetCurve
from claim_pricing.models.black import Black
from claim_pricing.models.heston import Heston
from claim_pricing.pricing.black_scholes import (
    binary_price,
    black_scholes_price,
    forward_value,
)
from claim_pricing.simulation.monte_carlo import MonteCarloEngine

# =============================================================================
# Constants
# =============================================================================

SPOT = 100.0
RATE = 0.05
DIVIDEND = 0.02
VOL = 0.20
N_TRIALS = 20_000
N_SE = 4.0


@dataclass(frozen=True)
class OneStepBlack(Black):
    """Black model jumping straight to each event (the step is exact)."""

    @property
    def max_step(self) -> float:
        return 10.0


@dataclass(frozen=True)
class CoarseHeston(Heston):
    """Heston model with weekly steps."""

    @property
    def max_step(self) -> float:
        return 1.0 / 50.0


@pytest.fixture
def model() -> OneStepBlack:
    """S=100, r=5%, q=2%, σ=20%."""
    return OneStepBlack(
        initial=SPOT,
        vol=VOL,
        forward_curve=NetCurve(FlatCurve(RATE), FlatCurve(DIVIDEND)),
        discount_curve=FlatCurve(RATE),
    )


@pytest.fixture
def engine() -> MonteCarloEngine:
    return MonteCarloEngine(n_trials=N_TRIALS, seed=42, antithetic=True)


def _assert_within_se(result, expected: float) -> None:
    assert abs(result.price - expected) < N_SE * result.standard_error, (
        f"MC {result.price:.4f} ± {result.standard_error:.4f} vs closed form {expected:.4f}"
    )


# =============================================================================
# Black Model
# =============================================================================

class TestBlackConvergence:
    """[T1] Simulated Black prices match Black-Scholes."""

    @pytest.mark.validation
    @pytest.mark.parametrize("option_type", [OptionType.CALL, OptionType.PUT])
    @pytest.mark.parametrize("strike", [90.0, 100.0, 110.0])
    def test_vanilla(self, model, engine, option_type, strike):
        result = engine.price(model, vanilla_option(option_type, strike, 1.0))
        expected = black_scholes_price(SPOT, strike, RATE, DIVIDEND, VOL, 1.0, option_type)
        _assert_within_se(result, expected)

    @pytest.mark.validation
    @pytest.mark.parametrize("option_type", [OptionType.CALL, OptionType.PUT])
    def test_binary(self, model, engine, option_type):
        result = engine.price(model, binary_option(option_type, 100.0, 1.0, payout=10.0))
        expected = binary_price(SPOT, 100.0, RATE, DIVIDEND, VOL, 1.0, option_type, payout=10.0)
        _assert_within_se(result, expected)

    @pytest.mark.validation
    def test_forward(self, model, engine):
        result = engine.price(model, forward_contract(2.0, 100.0))
        _assert_within_se(result, forward_value(SPOT, 100.0, RATE, DIVIDEND, 2.0))

    @pytest.mark.validation
    def test_put_call_parity(self, model, engine):
        """[T1] C - P = S e^(-qT) - K e^(-rT), path by path."""
        call = engine.price(model, vanilla_option(OptionType.CALL, 105.0, 1.0))
        put = engine.price(model, vanilla_option(OptionType.PUT, 105.0, 1.0))
        forward = engine.price(model, forward_contract(1.0, 105.0))

        # Same seed: every path satisfies max(S-K,0) - max(K-S,0) = S-K
        np.testing.assert_allclose(
            call.trial_values - put.trial_values, forward.trial_values, atol=1e-10
        )


# =============================================================================
# Heston Model
# =============================================================================

class TestHestonConvergence:
    """[T1] Heston discounted spot is a martingale."""

    @pytest.mark.validation
    @pytest.mark.slow
    def test_forward(self):
        curve = FlatCurve(RATE)
        model = CoarseHeston(
            initial=SPOT, v0=0.04, kappa=2.0, theta=0.04, sigma=0.3, rho=-0.7,
            forward_curve=curve, discount_curve=curve,
        )
        engine = MonteCarloEngine(n_trials=4000, seed=7, antithetic=True)

        result = engine.price(model, forward_contract(0.5, 100.0))
        _assert_within_se(result, forward_value(SPOT, 100.0, RATE, 0.0, 0.5))
