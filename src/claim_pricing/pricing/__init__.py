"""
Closed-form reference prices.
"""

from claim_pricing.pricing.black_scholes import (
    binary_price,
    black_scholes_price,
    forward_value,
)

__all__ = ["binary_price", "black_scholes_price", "forward_value"]
