"""
Exception hierarchy for the valuation engine.

Two families are kept apart so callers can tell a bad input from a
broken model:

- InputValidationError: the caller handed the engine malformed input
  (unsorted claim events, a non-positive trial count). Also a ValueError.
- ContractViolationError: a precondition of the simulation loop was
  broken while running (simulated time asked to move backwards, a model
  step that did not land where it was told to).
"""


class ClaimPricingError(Exception):
    """Base class for all engine errors."""

    pass


class InputValidationError(ClaimPricingError, ValueError):
    """Raised when inputs to the engine fail validation."""

    pass


class ClaimOrderError(InputValidationError):
    """Raised when claim events are not sorted ascending by time."""

    pass


class InvalidTrialCountError(InputValidationError):
    """Raised when a simulation is asked to run fewer than one trial."""

    pass


class ContractViolationError(ClaimPricingError):
    """Raised when a simulation precondition is violated at run time."""

    pass


class TimeOrderError(ContractViolationError):
    """Raised when simulated time would have to move backwards."""

    pass
