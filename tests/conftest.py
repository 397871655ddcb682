"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the LifeQuest test suite.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, TypeVar

import pytest

from lifequest.engine.dice import DiceRoller


if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path

    from lifequest.models import Character, GameState, Mob
    from lifequest.storage import KeyValueStore


T = TypeVar("T")


class ScriptedRoller(DiceRoller):
    """DiceRoller returning fixed values so combat math can be asserted exactly.

    ``random`` drives ``chance``; the defaults never trigger misses, crits,
    abilities or drops, and variance rolls are neutral.
    """

    def __init__(
        self,
        *,
        random_value: float = 0.99,
        percent_value: float = 99.0,
        uniform_value: float = 1.0,
    ) -> None:
        super().__init__(seed=0)
        self.random_value = random_value
        self.percent_value = percent_value
        self.uniform_value = uniform_value

    def random(self) -> float:
        return self.random_value

    def percent(self) -> float:
        return self.percent_value

    def uniform(self, low: float, high: float) -> float:
        return self.uniform_value

    def randint(self, low: int, high: int) -> int:
        return low

    def chance(self, probability: float) -> bool:
        return self.random() < probability

    def choice(self, options: Sequence[T]) -> T:
        return options[0]

    def sample(self, options: Sequence[T], count: int) -> list[T]:
        return list(options)[: min(count, len(options))]


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache and default roller before and after each test."""
    from lifequest.core.config import clear_settings_cache
    from lifequest.engine.dice import reset_default_roller

    clear_settings_cache()
    reset_default_roller()
    yield
    clear_settings_cache()
    reset_default_roller()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "LIFEQUEST_DEBUG": "true",
        "LIFEQUEST_LOG_LEVEL": "DEBUG",
        "LIFEQUEST_MAX_SAVE_BYTES": "2048",
        "LIFEQUEST_GAME_RNG_SEED": "7",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def dice_roller() -> DiceRoller:
    """Create a DiceRoller with a fixed seed for reproducible tests.

    Returns:
        DiceRoller instance with fixed seed.
    """
    return DiceRoller(seed=42)


@pytest.fixture
def scripted_roller() -> Callable[..., DiceRoller]:
    """Factory for rollers with fixed outcomes.

    Returns:
        Callable accepting ``random_value``, ``percent_value`` and
        ``uniform_value`` keyword overrides.
    """
    return ScriptedRoller


@pytest.fixture
def now() -> datetime:
    """A fixed, timezone-aware Wednesday noon."""
    return datetime(2024, 3, 13, 12, 0, tzinfo=UTC)


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def warrior_state(now: datetime) -> GameState:
    """Freshly created level 1 Warrior with STR 17.

    Returns:
        GameState holding the new character.
    """
    from lifequest.engine.lifecycle import create_character
    from lifequest.models import ClassType, StatBonus

    return create_character("Aria", ClassType.WARRIOR, StatBonus(strength=2), now=now)


@pytest.fixture
def warrior(warrior_state: GameState) -> Character:
    """The character of ``warrior_state``."""
    return warrior_state.require_character()


@pytest.fixture
def forest_mob() -> Mob:
    """Plain floor 1 Forest mob.

    Returns:
        Mob with 40 HP, 4 ATK and 1 DEF.
    """
    from lifequest.models import DungeonBiome, Mob

    return Mob(
        id="mob-1",
        name="Rat",
        level=1,
        hp=40,
        max_hp=40,
        atk=4,
        defense=1,
        biome=DungeonBiome.FOREST,
        drops=["SKIN"],
    )


@pytest.fixture
def combat_state(warrior_state: GameState, forest_mob: Mob) -> GameState:
    """Warrior mid-fight in the Quiet Forest on the player's turn."""
    from lifequest.models import CombatTurn

    dungeon_state = warrior_state.dungeon_state.model_copy(
        update={"current_mob": forest_mob, "turn": CombatTurn.PLAYER_TURN}
    )
    return warrior_state.model_copy(
        update={"current_dungeon_id": "forest", "dungeon_state": dungeon_state}
    )


def with_character(state: GameState, **update: Any) -> GameState:
    """Return ``state`` with character fields replaced."""
    return state.with_character(state.require_character().model_copy(update=update))


@pytest.fixture
def patch_character() -> Callable[..., GameState]:
    """Helper that replaces character fields on a state."""
    return with_character


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def store(tmp_path: Path) -> KeyValueStore:
    """Create a key-value store in a temporary directory.

    Args:
        tmp_path: Pytest temporary path fixture.

    Returns:
        KeyValueStore without a quota.
    """
    from lifequest.storage import KeyValueStore

    return KeyValueStore(tmp_path / "saves" / "lifequest.db")
