"""
Yield curves for discounting and forward generation.

Models take two curves: one to generate forwards (drift) and one to
discount realized cash flows. Curves take year fractions (floats).

Theory
------
[T1] Discount factor: P(t) = e^(-r(t) × t)
[T1] Forward rate: f(t₁,t₂) = ln(P(t₁)/P(t₂)) / (t₂ - t₁)
[T1] Net curve: P_net(t) = P_1(t) / P_2(t), i.e. r_net = r_1 - r_2
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

import numpy as np

from claim_pricing.config.settings import SETTINGS


class InterpolationMethod(Enum):
    """Interpolation method for yield curve."""

    LINEAR = "linear"
    LOG_LINEAR = "log_linear"


class YieldCurve(ABC):
    """
    Abstract zero-coupon yield curve.

    Subclasses implement `disc`; forward and spot rates follow from it.
    """

    @abstractmethod
    def disc(self, t: float) -> float:
        """Discount factor from the valuation date to t."""

    def forward(self, t1: float, t2: float) -> float:
        """
        Continuously compounded forward rate between t1 and t2.

        [T1] f(t₁,t₂) = ln(P(t₁)/P(t₂)) / (t₂ - t₁)

        A zero-length interval returns the instantaneous forward rate.
        """
        if t2 < t1:
            raise ValueError(f"t2 ({t2}) must be >= t1 ({t1})")
        if t2 == t1:
            t2 = t1 + SETTINGS.curves.forward_bump
        return float(np.log(self.disc(t1) / self.disc(t2)) / (t2 - t1))

    def spot(self, t: float) -> float:
        """Continuously compounded zero rate to t."""
        return self.forward(0.0, t)


@dataclass(frozen=True)
class FlatCurve(YieldCurve):
    """
    Flat curve at a single continuously compounded rate.

    Examples
    --------
    >>> FlatCurve(0.05).disc(1.0)  # e^(-0.05)
    0.9512...
    """

    rate: float

    def disc(self, t: float) -> float:
        return float(np.exp(-self.rate * t))

    def forward(self, t1: float, t2: float) -> float:
        if t2 < t1:
            raise ValueError(f"t2 ({t2}) must be >= t1 ({t1})")
        return self.rate


@dataclass(frozen=True)
class InterpolatedCurve(YieldCurve):
    """
    Zero curve through market pillars with flat extrapolation.

    Pillars may be passed as any sequence; they are stored as tuples so
    curves compare and hash by value.

    Attributes
    ----------
    maturities : tuple[float, ...]
        Pillar maturities in years, strictly increasing
    rates : tuple[float, ...]
        Zero rates at each pillar (continuous compounding)
    interpolation : InterpolationMethod
        Interpolation method for intermediate maturities
    """

    maturities: tuple[float, ...]
    rates: tuple[float, ...]
    interpolation: InterpolationMethod = InterpolationMethod.LINEAR

    def __post_init__(self) -> None:
        """Validate curve data."""
        maturities = np.asarray(self.maturities, dtype=float)
        rates = np.asarray(self.rates, dtype=float)
        if len(maturities) != len(rates):
            raise ValueError(
                f"Maturities ({len(maturities)}) and rates ({len(rates)}) "
                "must have same length"
            )
        if len(maturities) == 0:
            raise ValueError("Curve must have at least one point")
        if not np.all(np.diff(maturities) > 0):
            raise ValueError("Maturities must be strictly increasing")
        if maturities[0] <= 0:
            raise ValueError(f"Maturities must be positive, got {maturities[0]}")
        object.__setattr__(self, "maturities", tuple(maturities.tolist()))
        object.__setattr__(self, "rates", tuple(rates.tolist()))

    def get_rate(self, t: float) -> float:
        """
        Get interpolated zero rate at maturity t.

        Examples
        --------
        >>> curve = InterpolatedCurve(
        ...     maturities=np.array([1, 2, 5, 10]),
        ...     rates=np.array([0.03, 0.035, 0.04, 0.045]),
        ... )
        >>> curve.get_rate(3.0)
        0.03666...
        """
        # Extrapolation: flat at ends
        if t <= self.maturities[0]:
            return float(self.rates[0])
        if t >= self.maturities[-1]:
            return float(self.rates[-1])

        maturities = np.asarray(self.maturities)
        rates = np.asarray(self.rates)
        if self.interpolation == InterpolationMethod.LOG_LINEAR:
            # Log-linear on discount factors
            log_df = -maturities * rates
            log_df_t = np.interp(t, maturities, log_df)
            return float(-log_df_t / t)
        return float(np.interp(t, maturities, rates))

    def disc(self, t: float) -> float:
        if t <= 0:
            return 1.0
        return float(np.exp(-self.get_rate(t) * t))


@dataclass(frozen=True)
class NetCurve(YieldCurve):
    """
    Curve netted against another, e.g. a rate curve less a dividend curve.

    [T1] P_net(t) = P_curve(t) / P_less(t)
    """

    curve: YieldCurve
    less: YieldCurve

    def disc(self, t: float) -> float:
        return self.curve.disc(t) / self.less.disc(t)

    def forward(self, t1: float, t2: float) -> float:
        return self.curve.forward(t1, t2) - self.less.forward(t1, t2)
