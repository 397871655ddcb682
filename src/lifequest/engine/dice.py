"""Random number source for the LifeQuest engine.

Every random decision in the engine (hit and crit rolls, variance, loot,
mob selection, quest picks) goes through a DiceRoller so tests can seed it
and replay a fight exactly.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import TypeVar

from lifequest.core.config import get_settings
from lifequest.core.logging import get_logger


logger = get_logger(__name__)

T = TypeVar("T")


class DiceRoller:
    """Seedable random source.

    Example:
        >>> roller = DiceRoller(seed=42)
        >>> roller.chance(0.3)
        False
    """

    def __init__(self, *, seed: int | None = None) -> None:
        """Initialize the dice roller.

        Args:
            seed: Optional random seed for reproducible rolls.
        """
        self._seed = seed
        self._rng = random.Random(seed)
        logger.debug("DiceRoller initialized", seed=seed)

    @property
    def seed(self) -> int | None:
        """Seed the roller was created with."""
        return self._seed

    def random(self) -> float:
        """Uniform float in ``[0, 1)``."""
        return self._rng.random()

    def percent(self) -> float:
        """Uniform float in ``[0, 100)``."""
        return self._rng.random() * 100

    def uniform(self, low: float, high: float) -> float:
        """Uniform float in ``[low, high]``."""
        return self._rng.uniform(low, high)

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in ``[low, high]``."""
        return self._rng.randint(low, high)

    def chance(self, probability: float) -> bool:
        """True with the given probability."""
        return self._rng.random() < probability

    def choice(self, options: Sequence[T]) -> T:
        """Pick one element.

        Raises:
            IndexError: If ``options`` is empty.
        """
        return self._rng.choice(options)

    def sample(self, options: Sequence[T], count: int) -> list[T]:
        """Pick ``count`` distinct elements (fewer if the pool is smaller)."""
        return self._rng.sample(list(options), min(count, len(options)))


_default_roller: DiceRoller | None = None


def get_roller(roller: DiceRoller | None = None) -> DiceRoller:
    """Return ``roller`` or the process-wide default.

    The default is seeded from ``LIFEQUEST_GAME_RNG_SEED`` when set.
    """
    global _default_roller
    if roller is not None:
        return roller
    if _default_roller is None:
        _default_roller = DiceRoller(seed=get_settings().game.rng_seed)
    return _default_roller


def reset_default_roller() -> None:
    """Drop the default roller so the next call re-reads settings."""
    global _default_roller
    _default_roller = None


__all__ = [
    "DiceRoller",
    "get_roller",
    "reset_default_roller",
]
