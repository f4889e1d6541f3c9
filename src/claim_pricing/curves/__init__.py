"""
Yield curves for discounting and forward generation.
"""

from claim_pricing.curves.yield_curve import (
    FlatCurve,
    InterpolatedCurve,
    InterpolationMethod,
    NetCurve,
    YieldCurve,
)

__all__ = [
    "FlatCurve",
    "InterpolatedCurve",
    "InterpolationMethod",
    "NetCurve",
    "YieldCurve",
]
