"""
Monte Carlo trial drivers.

Runs the event-merge engine for many trials and averages the results:
- run_simulation: sequential trials on one seeded random stream
- run_simulation_anti: half the trials mirrored (antithetic variates)
- run_simulation_parallel: one independent stream per trial, worker pool
- MonteCarloEngine: estimate plus standard error and confidence interval

[T1] MC converges to the true value at rate 1/√N

See: Glasserman (2003) "Monte Carlo Methods in Financial Engineering"
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
import logging
import os
import time

import numpy as np

from claim_pricing.claims.contingent_claim import ContingentClaim
from claim_pricing.config.settings import SETTINGS
from claim_pricing.core.execution import MCContext, run_mc
from claim_pricing.core.random_stream import RandomStream
from claim_pricing.core.state import SimulationState
from claim_pricing.errors import InvalidTrialCountError
from claim_pricing.models.base import Discretize
from claim_pricing.simulation.engine import simulate_state, simulate_trial, simulate_trials

logger = logging.getLogger(__name__)


def run_simulation(
    model: Discretize,
    claim: ContingentClaim,
    seed: int,
    trials: int,
    antithetic: bool = False,
) -> float:
    """
    Estimate the present value of a claim.

    Trials run in sequence on a single random stream seeded with `seed`,
    starting from an empty snapshot at time zero.

    Parameters
    ----------
    model : Discretize
        Model to simulate
    claim : ContingentClaim
        Compiled claim
    seed : int
        Random seed
    trials : int
        Number of trials (>= 1)
    antithetic : bool, default False
        Whether to use mirrored variates

    Returns
    -------
    float
        Mean discounted value over all trials

    Examples
    --------
    >>> model = Black(100.0, 0.2, FlatCurve(0.05), FlatCurve(0.05))
    >>> run_simulation(model, zero_coupon_bond(1.0, 100.0), seed=42, trials=1000)
    95.1229...
    """
    run = run_mc(
        lambda ctx: simulate_state(model, claim, trials, antithetic, ctx),
        SimulationState.initial(),
        RandomStream(seed),
    )
    return run.value


def run_simulation_anti(
    model: Discretize,
    claim: ContingentClaim,
    seed: int,
    trials: int,
) -> float:
    """
    Estimate the present value using antithetic variates.

    Runs trials // 2 trials with mirrored variates and trials // 2 without,
    both from `seed`, and averages the two estimates. Each mirrored path
    is the exact antithetic partner of a plain path.

    Raises
    ------
    InvalidTrialCountError
        If trials < 2
    """
    if trials < 2:
        raise InvalidTrialCountError(
            f"CRITICAL: antithetic simulation needs trials >= 2, got {trials}"
        )
    half = trials // 2
    mirrored = run_simulation(model, claim, seed, half, antithetic=True)
    plain = run_simulation(model, claim, seed, half, antithetic=False)
    return (mirrored + plain) / 2


def _run_trial_chunk(
    model: Discretize,
    claim: ContingentClaim,
    streams: list[RandomStream],
    antithetic: bool,
) -> np.ndarray:
    """Run one trial per stream, each on its own fresh state."""
    values = np.empty(len(streams))
    for i, stream in enumerate(streams):
        ctx = MCContext(rng=stream, state=SimulationState.initial())
        values[i] = simulate_trial(model, claim, ctx, antithetic)
    return values


def simulate_trials_parallel(
    model: Discretize,
    claim: ContingentClaim,
    seed: int,
    trials: int,
    antithetic: bool = False,
    n_workers: int | None = None,
) -> np.ndarray:
    """
    Per-trial discounted values, trials spread over a worker pool.

    Trial i draws from the i-th stream spawned from `seed`, so the values
    do not depend on the number of workers. The model is shared read-only.

    Parameters
    ----------
    model : Discretize
        Model to simulate
    claim : ContingentClaim
        Compiled claim
    seed : int
        Root random seed
    trials : int
        Number of trials (>= 1)
    antithetic : bool, default False
        Whether to use mirrored variates
    n_workers : int, optional
        Worker count (default: SETTINGS.simulation.n_workers)

    Returns
    -------
    np.ndarray
        Discounted value of each trial, shape (trials,)
    """
    if trials < 1:
        raise InvalidTrialCountError(f"CRITICAL: trials must be >= 1, got {trials}")
    claim.validate()

    if n_workers is None:
        n_workers = SETTINGS.simulation.n_workers or min(32, (os.cpu_count() or 1) + 4)
    streams = RandomStream(seed).spawn(trials)
    chunks = [
        chunk.tolist()
        for chunk in np.array_split(np.arange(trials), min(n_workers, trials))
    ]

    with ThreadPoolExecutor(max_workers=n_workers) as executor:
        futures = [
            executor.submit(
                _run_trial_chunk,
                model,
                claim,
                [streams[i] for i in chunk],
                antithetic,
            )
            for chunk in chunks
        ]
        # Collect in submission order so the trial order is preserved
        values = np.concatenate([future.result() for future in futures])

    return values


def run_simulation_parallel(
    model: Discretize,
    claim: ContingentClaim,
    seed: int,
    trials: int,
    antithetic: bool = False,
    n_workers: int | None = None,
) -> float:
    """
    Estimate the present value with independently seeded parallel trials.

    Bit-identical for any worker count given the same seed.
    """
    values = simulate_trials_parallel(model, claim, seed, trials, antithetic, n_workers)
    return float(values.sum() / trials)


@dataclass(frozen=True)
class MCResult:
    """
    Monte Carlo valuation result.

    Attributes
    ----------
    price : float
        Estimated present value (mean discounted trial value)
    standard_error : float
        Standard error of the estimate (NaN for a single sample)
    confidence_interval : tuple[float, float]
        Confidence interval at SETTINGS.simulation.confidence_z
    n_trials : int
        Number of trials used
    trial_values : np.ndarray
        Discounted value of each trial (mirrored half last when antithetic)
    antithetic : bool
        Whether antithetic pairs were used
    """

    price: float
    standard_error: float
    confidence_interval: tuple[float, float]
    n_trials: int
    trial_values: np.ndarray
    antithetic: bool = False

    @property
    def relative_error(self) -> float:
        """Relative standard error (SE / price)."""
        if abs(self.price) < 1e-10:
            return float("inf")
        return self.standard_error / abs(self.price)

    @property
    def ci_width(self) -> float:
        """Width of confidence interval."""
        return self.confidence_interval[1] - self.confidence_interval[0]


class MonteCarloEngine:
    """
    Monte Carlo valuation engine for compiled contingent claims.

    Parameters
    ----------
    n_trials : int, optional
        Number of trials (default: SETTINGS.simulation.default_trials)
    seed : int, optional
        Random seed for reproducibility
    antithetic : bool, default False
        Use antithetic variates for variance reduction
    parallel : bool, default False
        Run trials on a worker pool with one stream per trial
    n_workers : int, optional
        Worker count for parallel runs

    Examples
    --------
    >>> engine = MonteCarloEngine(n_trials=20000, seed=42, antithetic=True)
    >>> result = engine.price(model, vanilla_option(OptionType.CALL, 100.0, 1.0))
    >>> print(f"Price: {result.price:.4f} ± {result.standard_error:.4f}")
    """

    def __init__(
        self,
        n_trials: int | None = None,
        seed: int | None = None,
        antithetic: bool = False,
        parallel: bool = False,
        n_workers: int | None = None,
    ):
        if n_trials is None:
            n_trials = SETTINGS.simulation.default_trials
        if n_trials <= 0:
            raise InvalidTrialCountError(f"CRITICAL: n_trials must be > 0, got {n_trials}")

        self.n_trials = n_trials
        self.seed = seed
        self.antithetic = antithetic
        self.parallel = parallel
        self.n_workers = n_workers

        # Ensure even number for antithetic
        if antithetic and n_trials % 2 != 0:
            self.n_trials = n_trials + 1

    def price(self, model: Discretize, claim: ContingentClaim) -> MCResult:
        """
        Value a claim under a model.

        With antithetic variates the standard error is computed from the
        averages of (plain, mirrored) pairs, which are independent.

        Parameters
        ----------
        model : Discretize
            Model to simulate
        claim : ContingentClaim
            Compiled claim

        Returns
        -------
        MCResult
            Estimate with statistics
        """
        start = time.perf_counter()
        # One seed for both halves so mirrored trials pair with plain ones
        seed = self.seed if self.seed is not None else np.random.SeedSequence().entropy

        if self.antithetic:
            half = self.n_trials // 2
            plain = self._trial_values(model, claim, seed, half, antithetic=False)
            mirrored = self._trial_values(model, claim, seed, half, antithetic=True)
            trial_values = np.concatenate([plain, mirrored])
            samples = (plain + mirrored) / 2
        else:
            trial_values = self._trial_values(
                model, claim, seed, self.n_trials, antithetic=False
            )
            samples = trial_values

        result = self._compute_result(trial_values, samples)

        logger.info(
            f"Valued {len(claim)}-event claim under {type(model).__name__}: "
            f"{result.price:.6f} ± {result.standard_error:.6f} "
            f"({result.n_trials} trials, {time.perf_counter() - start:.2f}s)"
        )
        return result

    def _trial_values(
        self,
        model: Discretize,
        claim: ContingentClaim,
        seed: int,
        trials: int,
        antithetic: bool,
    ) -> np.ndarray:
        if self.parallel:
            return simulate_trials_parallel(
                model, claim, seed, trials, antithetic, self.n_workers
            )
        run = run_mc(
            lambda ctx: simulate_trials(model, claim, trials, antithetic, ctx),
            SimulationState.initial(),
            RandomStream(seed),
        )
        return run.value

    def _compute_result(self, trial_values: np.ndarray, samples: np.ndarray) -> MCResult:
        """
        Compute MC result from independent samples.

        Parameters
        ----------
        trial_values : np.ndarray
            Discounted value of every trial
        samples : np.ndarray
            Independent samples (trial values, or antithetic pair averages)

        Returns
        -------
        MCResult
            Complete MC result with statistics
        """
        price = float(samples.mean())
        if len(samples) > 1:
            se = float(samples.std(ddof=1) / np.sqrt(len(samples)))
        else:
            se = float("nan")

        z = SETTINGS.simulation.confidence_z
        return MCResult(
            price=price,
            standard_error=se,
            confidence_interval=(price - z * se, price + z * se),
            n_trials=len(trial_values),
            trial_values=trial_values,
            antithetic=self.antithetic,
        )


def convergence_analysis(
    model: Discretize,
    claim: ContingentClaim,
    reference_price: float,
    trial_counts: tuple[int, ...] = (500, 1000, 2000, 5000, 10000),
    seed: int = 42,
    antithetic: bool = False,
) -> dict:
    """
    Analyze MC convergence to a reference (e.g. analytical) price.

    [T1] MC error should converge at rate 1/√N.

    Parameters
    ----------
    model : Discretize
        Model to simulate
    claim : ContingentClaim
        Compiled claim
    reference_price : float
        Known value of the claim
    trial_counts : tuple[int, ...]
        Trial counts to test
    seed : int
        Random seed
    antithetic : bool, default False
        Use antithetic variates

    Returns
    -------
    dict
        Convergence analysis results
    """
    results = []

    for n in trial_counts:
        engine = MonteCarloEngine(n_trials=n, seed=seed, antithetic=antithetic)
        mc_result = engine.price(model, claim)

        error = abs(mc_result.price - reference_price)
        rel_error = error / abs(reference_price) if reference_price != 0 else float("inf")

        results.append(
            {
                "n_trials": mc_result.n_trials,
                "mc_price": mc_result.price,
                "reference_price": reference_price,
                "absolute_error": error,
                "relative_error": rel_error,
                "standard_error": mc_result.standard_error,
                "within_ci": mc_result.confidence_interval[0]
                <= reference_price
                <= mc_result.confidence_interval[1],
            }
        )

    return {
        "results": results,
        "convergence_rate": _estimate_convergence_rate(results),
    }


def _estimate_convergence_rate(results: list[dict]) -> float:
    """
    Estimate convergence rate of the standard error.

    [T1] Theory predicts rate = -0.5 (SE ~ 1/√N).

    Returns
    -------
    float
        Estimated convergence rate (should be ~-0.5)
    """
    # Log-log regression: log(SE) = rate * log(N) + const
    log_n = np.log([r["n_trials"] for r in results])
    log_se = np.log([r["standard_error"] + 1e-12 for r in results])

    slope, _ = np.polyfit(log_n, log_se, 1)
    return float(slope)
