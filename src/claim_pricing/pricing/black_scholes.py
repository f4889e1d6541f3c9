"""
Closed-form Black-Scholes reference prices.

Used to check simulated values of claims under the Black model with flat
curves: vanilla and binary options, forwards.

References
----------
[T1] Black, F., & Scholes, M. (1973). The pricing of options and corporate liabilities.
[T1] Hull, J. C. (2018). Options, Futures, and Other Derivatives (10th ed.).
"""

import numpy as np
from scipy import stats

from claim_pricing.claims.builders import OptionType


def _validate_inputs(spot: float, strike: float, volatility: float, time_to_expiry: float) -> None:
    if spot <= 0:
        raise ValueError(f"CRITICAL: spot must be > 0, got {spot}")
    if strike <= 0:
        raise ValueError(f"CRITICAL: strike must be > 0, got {strike}")
    if volatility < 0:
        raise ValueError(f"CRITICAL: volatility must be >= 0, got {volatility}")
    if time_to_expiry < 0:
        raise ValueError(f"CRITICAL: time_to_expiry must be >= 0, got {time_to_expiry}")


def _calculate_d1_d2(
    spot: float,
    strike: float,
    rate: float,
    dividend: float,
    volatility: float,
    time_to_expiry: float,
) -> tuple[float, float]:
    """
    Calculate d1 and d2 parameters.

    [T1] d1 = (ln(S/K) + (r - q + σ²/2)T) / (σ√T)
    [T1] d2 = d1 - σ√T
    """
    vol_sqrt_t = volatility * np.sqrt(time_to_expiry)
    d1 = (
        np.log(spot / strike) + (rate - dividend + 0.5 * volatility**2) * time_to_expiry
    ) / vol_sqrt_t
    return d1, d1 - vol_sqrt_t


def black_scholes_price(
    spot: float,
    strike: float,
    rate: float,
    dividend: float,
    volatility: float,
    time_to_expiry: float,
    option_type: OptionType,
) -> float:
    """
    Price European option using Black-Scholes.

    [T1] C = S*e^(-qT)*N(d1) - K*e^(-rT)*N(d2)
    [T1] P = K*e^(-rT)*N(-d2) - S*e^(-qT)*N(-d1)

    Examples
    --------
    >>> round(black_scholes_price(100, 100, 0.05, 0.02, 0.20, 1.0, OptionType.CALL), 2)
    9.23
    """
    _validate_inputs(spot, strike, volatility, time_to_expiry)
    sign = 1.0 if option_type == OptionType.CALL else -1.0

    if time_to_expiry == 0 or volatility == 0:
        forward = spot * np.exp((rate - dividend) * time_to_expiry)
        return float(np.exp(-rate * time_to_expiry) * max(sign * (forward - strike), 0.0))

    d1, d2 = _calculate_d1_d2(spot, strike, rate, dividend, volatility, time_to_expiry)
    price = sign * (
        spot * np.exp(-dividend * time_to_expiry) * stats.norm.cdf(sign * d1)
        - strike * np.exp(-rate * time_to_expiry) * stats.norm.cdf(sign * d2)
    )
    return float(price)


def binary_price(
    spot: float,
    strike: float,
    rate: float,
    dividend: float,
    volatility: float,
    time_to_expiry: float,
    option_type: OptionType,
    payout: float = 1.0,
) -> float:
    """
    Price cash-or-nothing option.

    [T1] Call: Q e^(-rT) N(d2); Put: Q e^(-rT) N(-d2)
    """
    _validate_inputs(spot, strike, volatility, time_to_expiry)
    if time_to_expiry == 0 or volatility == 0:
        raise ValueError("CRITICAL: binary_price needs volatility > 0 and time_to_expiry > 0")
    sign = 1.0 if option_type == OptionType.CALL else -1.0
    _, d2 = _calculate_d1_d2(spot, strike, rate, dividend, volatility, time_to_expiry)
    return float(payout * np.exp(-rate * time_to_expiry) * stats.norm.cdf(sign * d2))


def forward_value(
    spot: float,
    strike: float,
    rate: float,
    dividend: float,
    time_to_expiry: float,
) -> float:
    """
    Value of a long forward struck at K.

    [T1] V = S e^(-qT) - K e^(-rT)
    """
    return float(
        spot * np.exp(-dividend * time_to_expiry) - strike * np.exp(-rate * time_to_expiry)
    )
