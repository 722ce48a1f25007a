"""Seeded randomness for reproducible partitioning.

This module wraps a private ``random.Random`` instance so every split
call owns its stream and never touches module-level random state.
"""

from __future__ import annotations

import random
from typing import Sequence, TypeVar

from core.errors import StrataInvalidArgumentError

T = TypeVar("T")


class SeededGenerator:
    """Private pseudorandom stream for one logical split call."""

    def __init__(self, seed: int | None = None) -> None:
        """Create a generator.

        Args:
            seed: Integer seed, or None to draw from OS entropy.

        Raises:
            StrataInvalidArgumentError: If seed is not an integer.
        """
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
            raise StrataInvalidArgumentError(
                f"Invalid seed {seed!r}: expected an integer or None."
            )
        self._seed = seed
        self._random = random.Random(seed)

    @property
    def seed(self) -> int | None:
        """Return the seed, or None for an entropy-seeded stream."""
        return self._seed

    @property
    def is_reproducible(self) -> bool:
        """Return whether repeated runs yield identical draws."""
        return self._seed is not None

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """Return a shuffled copy of items, advancing this stream.

        Args:
            items: Items to shuffle; left untouched.

        Returns:
            New list in shuffled order.
        """
        shuffled = list(items)
        self._random.shuffle(shuffled)
        return shuffled

    def fork(self) -> "SeededGenerator":
        """Return a generator restarted at this generator's seed.

        Unseeded generators return themselves so callers keep drawing
        from the same entropy stream.
        """
        if self._seed is None:
            return self
        return SeededGenerator(self._seed)


def resolve_generator(
    seed: int | None,
    generator: SeededGenerator | None,
) -> SeededGenerator:
    """Pick the generator for one split call.

    Args:
        seed: Optional seed for a fresh generator.
        generator: Optional caller-owned generator.

    Returns:
        Generator instance to thread through the call.

    Raises:
        StrataInvalidArgumentError: If both seed and generator are given.
    """
    if generator is not None:
        if seed is not None:
            raise StrataInvalidArgumentError(
                "Pass either seed or generator, not both. "
                "A generator already carries its own seed."
            )
        return generator
    return SeededGenerator(seed)
