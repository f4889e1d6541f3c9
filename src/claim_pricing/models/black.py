"""
Black (lognormal) single-asset model.

[T1] SDE: dS = f(t) S dt + σ S dW, f the forward rate of the forward curve
[T1] Exact step: S(t₂) = S(t₁) exp((f - σ²/2)Δt + σ√Δt Z)

Antithetic steps use -Z.

See: Glasserman (2003) "Monte Carlo Methods in Financial Engineering", 3.2
"""

from dataclasses import dataclass

import numpy as np

from claim_pricing.core.execution import MCContext
from claim_pricing.core.state import Observables
from claim_pricing.core.time import Time
from claim_pricing.curves.yield_curve import YieldCurve
from claim_pricing.models.base import Discretize


@dataclass(frozen=True)
class Black(Discretize):
    """
    Black model: one lognormal asset with deterministic curves.

    Observables: (spot,)

    Attributes
    ----------
    initial : float
        Spot at the valuation date
    vol : float
        Volatility (annualized, decimal)
    forward_curve : YieldCurve
        Curve generating the drift (e.g. rates net of dividends)
    discount_curve : YieldCurve
        Curve discounting cash flows

    Examples
    --------
    >>> model = Black(100.0, 0.2, FlatCurve(0.05), FlatCurve(0.05))
    >>> model.discount(Time(1.0))
    0.9512...
    """

    initial: float
    vol: float
    forward_curve: YieldCurve
    discount_curve: YieldCurve

    def __post_init__(self) -> None:
        """Validate parameters."""
        if self.initial <= 0:
            raise ValueError(f"CRITICAL: initial must be > 0, got {self.initial}")
        if self.vol < 0:
            raise ValueError(f"CRITICAL: vol must be >= 0, got {self.vol}")

    def initialize(self, ctx: MCContext) -> None:
        ctx.state.reset(Observables.of(self.initial), Time.zero())

    def discount(self, t: Time) -> float:
        return self.discount_curve.disc(float(t))

    def forward_gen(self, ctx: MCContext, t: Time) -> float:
        """Forward rate from the current simulated time to t."""
        return self.forward_curve.forward(float(ctx.state.time), float(t))

    def evolve_step(self, ctx: MCContext, t2: Time, antithetic: bool) -> None:
        t1 = ctx.state.time
        spot = ctx.state.observables[0]
        fwd = self.forward_gen(ctx, t2)
        dt = t1.diff(t2)

        z = ctx.rng.standard_normal()
        if antithetic:
            z = -z

        log_return = (fwd - 0.5 * self.vol**2) * dt + self.vol * np.sqrt(dt) * z
        ctx.state.advance(Observables.of(spot * np.exp(log_return)), t2)
