"""Seedable random source for dice rolls and random selection."""

from __future__ import annotations

import random
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")


class RNGService:
    """Wraps a private ``random.Random`` so every draw in a game comes from
    one seeded stream. Same seed + same calls in the same order = same
    results.
    """

    def __init__(self, seed: Optional[int] = None):
        # Unseeded games still get a recorded seed so they can be replayed
        if seed is None:
            seed = random.SystemRandom().randrange(2 ** 32)
        self._seed = seed
        self._random = random.Random(seed)
        self._draws = 0

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def draws(self) -> int:
        """Number of values drawn so far."""
        return self._draws

    def roll_d6(self) -> int:
        self._draws += 1
        return self._random.randint(1, 6)

    def choice(self, options: Sequence[T]) -> T:
        if not options:
            raise ValueError("Cannot choose from an empty sequence")
        self._draws += 1
        return self._random.choice(options)

    def clone(self) -> RNGService:
        """Independent copy positioned at the same point of the stream."""
        new = RNGService.__new__(RNGService)
        new._seed = self._seed
        new._random = random.Random()
        new._random.setstate(self._random.getstate())
        new._draws = self._draws
        return new
