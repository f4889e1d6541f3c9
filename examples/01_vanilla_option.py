#!/usr/bin/env python3
"""
Vanilla Option Valuation Demo.

Values European calls and puts under the Black model by Monte Carlo and
compares them with the closed-form Black-Scholes price.

Key Concepts:
- A claim is compiled into fixing events plus payoff generators
- The model is evolved between events in steps of at most max_step
- The estimate carries a standard error and confidence interval

Usage:
    python examples/01_vanilla_option.py             # 20,000 trials
    python examples/01_vanilla_option.py --ci        # CI mode (fewer trials)
"""

import argparse
import logging
import sys

# Add src to path if running as script
sys.path.insert(0, "src")

from claim_pricing import (
    Black,
    FlatCurve,
    MonteCarloEngine,
    NetCurve,
    OptionType,
    black_scholes_price,
    vanilla_option,
)


def value_strikes(
    strikes: list[float],
    n_trials: int,
    spot: float = 100.0,
    rate: float = 0.05,
    dividend: float = 0.02,
    volatility: float = 0.20,
    term_years: float = 1.0,
    seed: int = 42,
) -> list[tuple[float, OptionType, float, float, float]]:
    """
    Value calls and puts across strikes.

    Returns
    -------
    list[tuple]
        (strike, option type, MC price, standard error, Black-Scholes price)
    """
    model = Black(
        initial=spot,
        vol=volatility,
        forward_curve=NetCurve(FlatCurve(rate), FlatCurve(dividend)),
        discount_curve=FlatCurve(rate),
    )
    engine = MonteCarloEngine(n_trials=n_trials, seed=seed, antithetic=True)

    rows = []
    for strike in strikes:
        for option_type in (OptionType.CALL, OptionType.PUT):
            result = engine.price(model, vanilla_option(option_type, strike, term_years))
            reference = black_scholes_price(
                spot, strike, rate, dividend, volatility, term_years, option_type
            )
            rows.append((strike, option_type, result.price, result.standard_error, reference))
    return rows


def print_table(rows: list[tuple[float, OptionType, float, float, float]]) -> None:
    """Print MC vs closed form."""
    print("\n" + "=" * 60)
    print("MONTE CARLO VS BLACK-SCHOLES")
    print("=" * 60)
    print("\n  Strike  Type    MC Price    ± SE       BS Price")
    print("  " + "-" * 50)
    for strike, option_type, price, se, reference in rows:
        print(
            f"  {strike:6.1f}  {option_type.value:<5}  {price:9.4f}  {se:8.4f}  {reference:9.4f}"
        )


def main() -> int:
    parser = argparse.ArgumentParser(description="Vanilla option valuation demo")
    parser.add_argument("--ci", action="store_true", help="CI mode (fewer trials)")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    n_trials = 2_000 if args.ci else 20_000
    rows = value_strikes([90.0, 100.0, 110.0], n_trials=n_trials)
    print_table(rows)

    # Four standard errors
    failures = [row for row in rows if abs(row[2] - row[4]) > 4 * row[3]]
    if failures:
        print(f"\n{len(failures)} estimate(s) outside 4 standard errors")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
