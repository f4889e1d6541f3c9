"""
Tests for the Monte Carlo trial drivers.

Tests correctness of:
- Reproducibility from a seed
- Antithetic driver pairing and trial counts
- Parallel driver independence from the worker count
- MonteCarloEngine statistics
"""

import numpy as np
import pytest

from claim_pricing.claims.builders import forward_contract, zero_coupon_bond
from claim_pricing.claims.contingent_claim import ContingentClaim
from claim_pricing.errors import InvalidTrialCountError
from claim_pricing.simulation.monte_carlo import (
    MCResult,
    MonteCarloEngine,
    convergence_analysis,
    run_simulation,
    run_simulation_anti,
    run_simulation_parallel,
    simulate_trials_parallel,
)


class TestRunSimulation:
    """Tests for the sequential driver."""

    def test_bit_identical_for_same_seed(self, coarse_black_model, atm_call_claim):
        first = run_simulation(coarse_black_model, atm_call_claim, seed=42, trials=200)
        second = run_simulation(coarse_black_model, atm_call_claim, seed=42, trials=200)
        assert first == second

    def test_seed_changes_estimate(self, coarse_black_model, atm_call_claim):
        first = run_simulation(coarse_black_model, atm_call_claim, seed=1, trials=200)
        second = run_simulation(coarse_black_model, atm_call_claim, seed=2, trials=200)
        assert first != second

    def test_deterministic_claim(self, coarse_black_model, tolerances):
        """[T1] A fixed flow is worth D(t) × A whatever the path."""
        value = run_simulation(coarse_black_model, zero_coupon_bond(1.0, 100.0), seed=0, trials=50)
        assert value == pytest.approx(100.0 * np.exp(-0.05), abs=tolerances.deterministic)

    def test_empty_claim(self, coarse_black_model):
        assert run_simulation(coarse_black_model, ContingentClaim.empty(), seed=0, trials=3) == 0.0

    def test_zero_trials_raises(self, coarse_black_model, atm_call_claim):
        with pytest.raises(InvalidTrialCountError):
            run_simulation(coarse_black_model, atm_call_claim, seed=0, trials=0)


class TestRunSimulationAnti:
    """Tests for the antithetic driver."""

    def test_is_average_of_halves(self, coarse_black_model, atm_call_claim):
        """Mean of trials // 2 mirrored and trials // 2 plain trials, same seed."""
        anti = run_simulation_anti(coarse_black_model, atm_call_claim, seed=5, trials=101)

        mirrored = run_simulation(coarse_black_model, atm_call_claim, 5, 50, antithetic=True)
        plain = run_simulation(coarse_black_model, atm_call_claim, 5, 50, antithetic=False)
        assert anti == pytest.approx((mirrored + plain) / 2, rel=1e-15)

    def test_forward_pairs_cancel(self, coarse_black_model):
        """
        Mirrored forward payoffs nearly cancel around the mean.

        The payoff is linear in S(T), so only the convexity of exp is
        left in each pair average.
        """
        claim = forward_contract(1.0, 100.0)
        expected = 100.0 - 100.0 * np.exp(-0.05)

        anti = run_simulation_anti(coarse_black_model, claim, seed=11, trials=2000)
        assert anti == pytest.approx(expected, abs=0.5)

    @pytest.mark.parametrize("trials", [0, 1])
    def test_too_few_trials_raises(self, coarse_black_model, atm_call_claim, trials):
        with pytest.raises(InvalidTrialCountError, match="trials >= 2"):
            run_simulation_anti(coarse_black_model, atm_call_claim, seed=0, trials=trials)


class TestParallel:
    """Tests for the parallel driver."""

    @pytest.mark.parametrize("n_workers", [1, 3, 8])
    def test_identical_across_worker_counts(self, coarse_black_model, atm_call_claim, n_workers):
        reference = simulate_trials_parallel(
            coarse_black_model, atm_call_claim, seed=7, trials=40, n_workers=1
        )
        values = simulate_trials_parallel(
            coarse_black_model, atm_call_claim, seed=7, trials=40, n_workers=n_workers
        )
        np.testing.assert_array_equal(values, reference)

    def test_more_workers_than_trials(self, coarse_black_model, atm_call_claim):
        values = simulate_trials_parallel(
            coarse_black_model, atm_call_claim, seed=7, trials=3, n_workers=16
        )
        assert values.shape == (3,)

    def test_estimate_is_mean(self, coarse_black_model, atm_call_claim):
        values = simulate_trials_parallel(
            coarse_black_model, atm_call_claim, seed=3, trials=30, n_workers=2
        )
        estimate = run_simulation_parallel(
            coarse_black_model, atm_call_claim, seed=3, trials=30, n_workers=4
        )
        assert estimate == pytest.approx(values.mean(), rel=1e-14)

    def test_zero_trials_raises(self, coarse_black_model, atm_call_claim):
        with pytest.raises(InvalidTrialCountError):
            run_simulation_parallel(coarse_black_model, atm_call_claim, seed=0, trials=0)


class TestMonteCarloEngine:
    """Tests for MonteCarloEngine class."""

    def test_engine_creation(self):
        engine = MonteCarloEngine(n_trials=1000, seed=42, antithetic=True)
        assert engine.n_trials == 1000
        assert engine.seed == 42
        assert engine.antithetic is True

    def test_default_trials(self):
        assert MonteCarloEngine().n_trials == 10_000

    def test_invalid_n_trials(self):
        with pytest.raises(ValueError, match="must be > 0"):
            MonteCarloEngine(n_trials=0)

    def test_antithetic_rounds_up(self):
        assert MonteCarloEngine(n_trials=1001, antithetic=True).n_trials == 1002

    def test_result_fields(self, coarse_black_model, atm_call_claim):
        result = MonteCarloEngine(n_trials=500, seed=42).price(coarse_black_model, atm_call_claim)

        assert isinstance(result, MCResult)
        assert result.n_trials == 500
        assert result.trial_values.shape == (500,)
        assert result.price == pytest.approx(result.trial_values.mean())
        assert result.standard_error > 0
        assert result.confidence_interval[0] < result.price < result.confidence_interval[1]
        assert result.ci_width == pytest.approx(2 * 1.96 * result.standard_error)
        assert result.relative_error == pytest.approx(result.standard_error / result.price)

    def test_matches_sequential_driver(self, coarse_black_model, atm_call_claim):
        result = MonteCarloEngine(n_trials=300, seed=9).price(coarse_black_model, atm_call_claim)
        assert result.price == pytest.approx(
            run_simulation(coarse_black_model, atm_call_claim, seed=9, trials=300), rel=1e-12
        )

    def test_antithetic_pairs(self, coarse_black_model, atm_call_claim):
        """Antithetic results keep both halves and price from pair averages."""
        result = MonteCarloEngine(n_trials=400, seed=3, antithetic=True).price(
            coarse_black_model, atm_call_claim
        )

        assert result.antithetic
        assert result.n_trials == 400
        plain, mirrored = result.trial_values[:200], result.trial_values[200:]
        assert result.price == pytest.approx(((plain + mirrored) / 2).mean())

    def test_unseeded_antithetic_still_pairs(self, coarse_black_model):
        """Without a seed both halves still share one stream seed."""
        # Unpaired halves would give an SE close to the plain one
        result = MonteCarloEngine(n_trials=200, antithetic=True).price(
            coarse_black_model, forward_contract(0.25, 100.0)
        )
        plain = MonteCarloEngine(n_trials=200).price(
            coarse_black_model, forward_contract(0.25, 100.0)
        )
        assert result.standard_error < plain.standard_error

    def test_parallel_matches_itself(self, coarse_black_model, atm_call_claim):
        a = MonteCarloEngine(n_trials=60, seed=1, parallel=True, n_workers=2)
        b = MonteCarloEngine(n_trials=60, seed=1, parallel=True, n_workers=5)
        assert a.price(coarse_black_model, atm_call_claim).price == pytest.approx(
            b.price(coarse_black_model, atm_call_claim).price, rel=1e-15
        )

    def test_single_trial_se_is_nan(self, coarse_black_model, atm_call_claim):
        result = MonteCarloEngine(n_trials=1, seed=1).price(coarse_black_model, atm_call_claim)
        assert np.isnan(result.standard_error)


class TestConvergenceAnalysis:
    """Tests for convergence_analysis."""

    def test_structure(self, coarse_black_model):
        claim = forward_contract(1.0, 90.0)
        reference = 100.0 - 90.0 * np.exp(-0.05)

        analysis = convergence_analysis(
            coarse_black_model, claim, reference, trial_counts=(200, 800, 3200), seed=1
        )

        assert [r["n_trials"] for r in analysis["results"]] == [200, 800, 3200]
        # [T1] SE ~ 1/√N
        assert analysis["convergence_rate"] == pytest.approx(-0.5, abs=0.15)
