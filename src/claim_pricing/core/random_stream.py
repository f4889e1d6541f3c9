"""
Resumable pseudorandom variate source.

Wraps a NumPy Generator (PCG64). One stream is threaded through all
trials of a sequential run; the parallel driver instead spawns one
independent child stream per trial from the run's SeedSequence.

[T1] Antithetic mirroring is done by the models (negating draws), not here.
"""

from typing import Any

import numpy as np


class RandomStream:
    """
    Mutable source of pseudorandom variates.

    Parameters
    ----------
    seed : int | np.random.SeedSequence, optional
        Seed, or a SeedSequence (for spawned children)

    Examples
    --------
    >>> rng = RandomStream(42)
    >>> z = rng.standard_normal()
    >>> saved = rng.state
    >>> rng.standard_normal() == RandomStream.from_state(saved).standard_normal()
    True
    """

    def __init__(self, seed: int | np.random.SeedSequence | None = None):
        if isinstance(seed, np.random.SeedSequence):
            self._seed_seq = seed
        else:
            self._seed_seq = np.random.SeedSequence(seed)
        self._generator = np.random.Generator(np.random.PCG64(self._seed_seq))

    @classmethod
    def from_state(cls, state: dict[str, Any]) -> "RandomStream":
        """Resume a stream from a state captured with `state`."""
        stream = cls()
        stream.state = state
        return stream

    @property
    def state(self) -> dict[str, Any]:
        """Bit-generator state; capture to resume later."""
        return self._generator.bit_generator.state

    @state.setter
    def state(self, value: dict[str, Any]) -> None:
        self._generator.bit_generator.state = value

    @property
    def generator(self) -> np.random.Generator:
        """Underlying NumPy generator, for vectorized draws."""
        return self._generator

    def standard_normal(self) -> float:
        """One N(0, 1) draw."""
        return float(self._generator.standard_normal())

    def standard_normals(self, n: int) -> np.ndarray:
        """n independent N(0, 1) draws."""
        return self._generator.standard_normal(n)

    def uniform(self) -> float:
        """One U[0, 1) draw."""
        return float(self._generator.random())

    def poisson(self, lam: float) -> int:
        """One Poisson(lam) draw."""
        return int(self._generator.poisson(lam))

    def spawn(self, n: int) -> list["RandomStream"]:
        """
        Partition into n statistically independent child streams.

        Children depend only on this stream's seed and the spawn order,
        never on how many variates have been drawn.
        """
        if n <= 0:
            raise ValueError(f"CRITICAL: n must be > 0, got {n}")
        return [RandomStream(child) for child in self._seed_seq.spawn(n)]
