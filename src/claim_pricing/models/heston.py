"""
Heston stochastic volatility model.

Implements Andersen (2008) Quadratic-Exponential (QE) scheme, one step
per evolve_step:
- Exact moments of CIR variance process
- Quadratic approximation for large variance (psi <= 1.5)
- Exponential approximation for small variance (psi > 1.5)
- Correlated Brownian motions via Cholesky decomposition

[T1] Heston SDEs:
  dS = f(t) S dt + sqrt(v) S dW1
  dv = kappa(theta - v) dt + sigma sqrt(v) dW2
  dW1 dW2 = rho dt

Antithetic steps negate both normals and mirror the uniform (U -> 1 - U).

References
----------
[T1] Heston, S. L. (1993). A closed-form solution for options with stochastic
     volatility with applications to bond and currency options.
[T1] Andersen, L. B. G. (2008). Simple and efficient simulation of the Heston
     stochastic volatility model. Journal of Computational Finance, 11(3), 1-42.
"""

from dataclasses import dataclass

import numpy as np

from claim_pricing.core.execution import MCContext
from claim_pricing.core.state import Observables
from claim_pricing.core.time import Time
from claim_pricing.curves.yield_curve import YieldCurve
from claim_pricing.models.base import Discretize

# Andersen QE scheme threshold
PSI_CRITICAL = 1.5


@dataclass(frozen=True)
class Heston(Discretize):
    """
    Heston model: lognormal asset with CIR variance.

    Observables: (spot, variance)

    Attributes
    ----------
    initial : float
        Spot at the valuation date (> 0)
    v0 : float
        Initial variance (v0 > 0)
    kappa : float
        Mean reversion speed (kappa > 0)
    theta : float
        Long-run variance (theta > 0)
    sigma : float
        Volatility of volatility (sigma > 0)
    rho : float
        Correlation between asset and variance (-1 <= rho <= 1)
    forward_curve : YieldCurve
        Curve generating the drift
    discount_curve : YieldCurve
        Curve discounting cash flows

    Notes
    -----
    [T1] Feller condition: 2*kappa*theta >= sigma^2
    The QE scheme does not need it; variance is kept non-negative either way.
    """

    initial: float
    v0: float
    kappa: float
    theta: float
    sigma: float
    rho: float
    forward_curve: YieldCurve
    discount_curve: YieldCurve

    def __post_init__(self) -> None:
        """Validate Heston parameters."""
        if self.initial <= 0:
            raise ValueError(f"CRITICAL: initial must be > 0. Got: initial={self.initial}")
        if self.v0 <= 0:
            raise ValueError(
                f"CRITICAL: v0 must be > 0. Got: v0={self.v0}. "
                f"[T1] v0 is initial variance."
            )
        if self.kappa <= 0:
            raise ValueError(
                f"CRITICAL: kappa must be > 0. Got: kappa={self.kappa}. "
                f"[T1] kappa is mean reversion speed."
            )
        if self.theta <= 0:
            raise ValueError(
                f"CRITICAL: theta must be > 0. Got: theta={self.theta}. "
                f"[T1] theta is long-run variance."
            )
        if self.sigma <= 0:
            raise ValueError(
                f"CRITICAL: sigma must be > 0. Got: sigma={self.sigma}. "
                f"[T1] sigma is volatility of volatility."
            )
        if not (-1 <= self.rho <= 1):
            raise ValueError(
                f"CRITICAL: rho must be in [-1, 1]. Got: rho={self.rho}. "
                f"[T1] rho is correlation between asset and variance."
            )

    def satisfies_feller(self) -> bool:
        """[T1] Feller condition: 2*kappa*theta >= sigma^2."""
        return 2 * self.kappa * self.theta >= self.sigma**2

    def initialize(self, ctx: MCContext) -> None:
        ctx.state.reset(Observables.of(self.initial, self.v0), Time.zero())

    def discount(self, t: Time) -> float:
        return self.discount_curve.disc(float(t))

    def forward_gen(self, ctx: MCContext, t: Time) -> float:
        """Forward rate from the current simulated time to t."""
        return self.forward_curve.forward(float(ctx.state.time), float(t))

    def evolve_step(self, ctx: MCContext, t2: Time, antithetic: bool) -> None:
        t1 = ctx.state.time
        spot, v = ctx.state.observables[0], ctx.state.observables[1]
        fwd = self.forward_gen(ctx, t2)
        dt = t1.diff(t2)

        z1 = ctx.rng.standard_normal()
        z2_indep = ctx.rng.standard_normal()
        u = ctx.rng.uniform()
        if antithetic:
            z1, z2_indep, u = -z1, -z2_indep, 1.0 - u
        z2 = self.rho * z1 + np.sqrt(1 - self.rho**2) * z2_indep

        v_next = self._qe_variance_step(v, dt, z2, u)

        # Spot update [T1]
        drift = (fwd - 0.5 * v) * dt
        diffusion = np.sqrt(max(v * dt, 0.0)) * z1
        ctx.state.advance(Observables.of(spot * np.exp(drift + diffusion), v_next), t2)

    def _qe_variance_step(self, v: float, dt: float, z: float, u: float) -> float:
        """Andersen QE draw of v(t+dt) given v(t)."""
        kappa, theta, sigma = self.kappa, self.theta, self.sigma
        decay = np.exp(-kappa * dt)

        # Moments of v(t+dt) | v(t)
        m = theta + (v - theta) * decay
        s2 = (
            v * sigma**2 * decay / kappa * (1 - decay)
            + theta * sigma**2 / (2 * kappa) * (1 - decay)**2
        )
        psi = s2 / (m**2 + 1e-10)

        if psi <= PSI_CRITICAL:
            # Quadratic scheme (for large variance)
            b2 = 2 / psi - 1 + np.sqrt(2 / psi) * np.sqrt(2 / psi - 1)
            a = m / (1 + b2)
            return float(a * (np.sqrt(b2) + z)**2)

        # Exponential scheme (for small variance)
        p = (psi - 1) / (psi + 1)
        beta = (1 - p) / m
        if u <= p:
            return 0.0
        return float(np.log((1 - p) / (1 - u)) / beta)
