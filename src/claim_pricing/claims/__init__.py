"""
Compiled contingent claims and builders for common contracts.
"""

from claim_pricing.claims.builders import (
    OptionType,
    arithmetic_asian,
    binary_option,
    combine_all,
    fixed_cash_flow,
    fixed_coupon_bond,
    forward_contract,
    multiplier,
    short,
    specify,
    vanilla_option,
    zero_coupon_bond,
)
from claim_pricing.claims.contingent_claim import (
    CashFlow,
    ClaimEvent,
    ContingentClaim,
    PayoffGenerator,
    combine,
    insert_cash_flow,
    insert_cash_flows,
)

__all__ = [
    # Data model
    "CashFlow",
    "ClaimEvent",
    "ContingentClaim",
    "PayoffGenerator",
    "combine",
    "insert_cash_flow",
    "insert_cash_flows",
    # Builders
    "OptionType",
    "arithmetic_asian",
    "binary_option",
    "combine_all",
    "fixed_cash_flow",
    "fixed_coupon_bond",
    "forward_contract",
    "multiplier",
    "short",
    "specify",
    "vanilla_option",
    "zero_coupon_bond",
]
