"""
Model capability interface for Monte Carlo simulation.

Any model implementing `Discretize` plugs into the engine unmodified.
Models are immutable configuration; all per-trial state lives in the
MCContext passed to every method.

Minimal complete definition: initialize, discount, forward_gen, evolve_step.

[T1] evolve subdivides [t1, t2] into steps of at most max_step, so the
discretization error is controlled independently of event spacing.
"""

from abc import ABC, abstractmethod

from claim_pricing.config.settings import SETTINGS
from claim_pricing.core.execution import MCContext
from claim_pricing.core.time import Time
from claim_pricing.errors import ContractViolationError, TimeOrderError


class Discretize(ABC):
    """
    Abstract base for models on which Monte Carlo simulation can run.

    Subclasses are expected to be frozen dataclasses: one instance is
    shared read-only by every trial (and every worker) of a run.
    """

    @abstractmethod
    def initialize(self, ctx: MCContext) -> None:
        """Reset ctx.state to the model's starting snapshot at Time.zero()."""

    @abstractmethod
    def discount(self, t: Time) -> float:
        """Path-independent discount factor from the valuation date to t."""

    def discount_state(self, ctx: MCContext, t: Time) -> float:
        """
        Discount factor to t given the current trial state.

        Defaults to `discount`; override when discounting is stochastic.
        """
        return self.discount(t)

    @abstractmethod
    def forward_gen(self, ctx: MCContext, t: Time) -> float:
        """
        Model-specific forward quantity at t.

        May draw variates and read state, but never advances simulated time.
        """

    @abstractmethod
    def evolve_step(self, ctx: MCContext, t2: Time, antithetic: bool) -> None:
        """
        Advance the state from its current time to exactly t2 in one step.

        With antithetic=True the step uses the negated variates of the
        antithetic=False step.
        """

    @property
    def max_step(self) -> float:
        """Largest time increment for one evolve_step (default 1/250)."""
        return SETTINGS.simulation.default_max_step

    def evolve(self, ctx: MCContext, t2: Time, antithetic: bool = False) -> None:
        """
        Evolve the state to t2 in steps no larger than max_step.

        Parameters
        ----------
        ctx : MCContext
            Trial context; ctx.state.time is the start time t1
        t2 : Time
            Target time, t2 >= t1
        antithetic : bool, default False
            Whether to use mirrored variates

        Raises
        ------
        TimeOrderError
            If t2 is before the current simulated time
        ContractViolationError
            If evolve_step does not land the state on the requested time
        """
        t1 = ctx.state.time
        if t2 < t1:
            raise TimeOrderError(
                f"CRITICAL: cannot evolve backwards from {t1} to {t2}"
            )

        step = self.max_step
        if step <= 0:
            raise ContractViolationError(
                f"CRITICAL: {type(self).__name__}.max_step must be > 0, got {step}"
            )
        while ctx.state.time != t2:
            t1 = ctx.state.time
            target = t2 if t1.diff(t2) < step else t1.offset(step)
            if target <= t1:
                # max_step below float resolution at t1
                raise ContractViolationError(
                    f"CRITICAL: step of {step} makes no progress from {t1}"
                )
            self.evolve_step(ctx, target, antithetic)
            if ctx.state.time != target:
                raise ContractViolationError(
                    f"CRITICAL: {type(self).__name__}.evolve_step asked to reach "
                    f"{target} but left the state at {ctx.state.time}"
                )
