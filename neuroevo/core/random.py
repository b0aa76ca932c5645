"""
Deterministic random number source.

All randomness in neuroevo flows through an explicitly owned Random instance,
never through the global `random` or `numpy.random` state. The stream is a
linear congruential generator computed with Python integers, so a given seed
yields the same sequence on every platform.
"""

import math
from dataclasses import dataclass
from typing import Callable, MutableSequence, Optional, Sequence, TypeVar

from ..errors import DomainError

T = TypeVar('T')

# LCG parameters (Numerical Recipes)
LCG_MULTIPLIER = 1664525
LCG_INCREMENT = 1013904223
LCG_MODULUS = 2 ** 32

DEFAULT_SEED = 42


def gaussian_deviate(random_fn: Callable[[], float], mean: float = 0.0, std: float = 1.0) -> float:
    """
    Single Box-Muller deviate from two draws of `random_fn`.

    Stateless counterpart of Random.random_gaussian for code that is handed a
    bare uniform source. Only the cosine deviate is used; nothing is cached.
    """
    u1 = 1.0 - random_fn()
    u2 = random_fn()
    z0 = math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)
    return z0 * std + mean


@dataclass(frozen=True)
class RandomState:
    """Snapshot of a Random instance, including the cached Gaussian spare."""
    seed: int
    current: int
    spare: Optional[float] = None
    has_spare: bool = False


class Random:
    """
    Seeded LCG producing uniform and Gaussian deviates.

    Args:
        seed: Initial seed. Defaults to 42 so unseeded runs are still reproducible.
    """

    def __init__(self, seed: Optional[int] = None):
        self.set_seed(DEFAULT_SEED if seed is None else seed)

    @property
    def seed(self) -> int:
        return self._seed

    def set_seed(self, seed: int) -> None:
        """Restart the stream from `seed` and drop any cached Gaussian spare."""
        self._seed = int(seed)
        self._current = self._seed % LCG_MODULUS
        self._spare: Optional[float] = None
        self._has_spare = False

    def _next(self) -> int:
        self._current = (LCG_MULTIPLIER * self._current + LCG_INCREMENT) % LCG_MODULUS
        return self._current

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        return self._next() / LCG_MODULUS

    def random_int(self, min_value: int, max_value: int) -> int:
        """Uniform integer in [min_value, max_value)."""
        if min_value >= max_value:
            raise DomainError(
                f"random_int requires min < max, got min={min_value}, max={max_value}"
            )
        return math.floor(self.random() * (max_value - min_value)) + min_value

    def random_gaussian(self, mean: float = 0.0, std: float = 1.0) -> float:
        """
        Normally distributed deviate via the Box-Muller transform.

        Each pair of uniform draws yields two deviates; the second is cached
        and returned by the next call.
        """
        if self._has_spare:
            self._has_spare = False
            spare, self._spare = self._spare, None
            return spare

        # Map u1 into (0, 1] so the logarithm is always defined
        u1 = 1.0 - self.random()
        u2 = self.random()
        magnitude = std * math.sqrt(-2.0 * math.log(u1))
        angle = 2.0 * math.pi * u2

        self._spare = magnitude * math.cos(angle) + mean
        self._has_spare = True
        return magnitude * math.sin(angle) + mean

    def choice(self, seq: Sequence[T]) -> T:
        """Pick one element uniformly."""
        if len(seq) == 0:
            raise DomainError("Cannot choose from an empty sequence")
        return seq[self.random_int(0, len(seq))]

    def shuffle(self, seq: MutableSequence[T]) -> MutableSequence[T]:
        """Fisher-Yates shuffle in place. Returns the same sequence for chaining."""
        for i in range(len(seq) - 1, 0, -1):
            j = self.random_int(0, i + 1)
            seq[i], seq[j] = seq[j], seq[i]
        return seq

    def get_state(self) -> RandomState:
        return RandomState(
            seed=self._seed,
            current=self._current,
            spare=self._spare,
            has_spare=self._has_spare,
        )

    def set_state(self, state: RandomState) -> None:
        """Resume the stream exactly where `state` was captured."""
        self._seed = state.seed
        self._current = state.current % LCG_MODULUS
        self._spare = state.spare
        self._has_spare = state.has_spare

    def __repr__(self) -> str:
        return f"Random(seed={self._seed})"
