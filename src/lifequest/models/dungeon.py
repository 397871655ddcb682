"""Dungeon and combat models.

Models:
    DungeonInfo: Static description of a dungeon.
    Mob: An enemy generated for one encounter.
    Buff: A one-combat modifier granted by quest moods.
    DungeonState: Encounter state persisted with the game.
"""

from __future__ import annotations

from typing import Annotated
from uuid import uuid4

from pydantic import Field

from lifequest.models.base import GameModel
from lifequest.models.enums import (
    BuffKind,
    CombatTurn,
    DungeonBiome,
    ItemRarity,
    SpecialAbility,
)


class DungeonInfo(GameModel):
    """A dungeon entry in the static registry."""

    id: str
    name: str
    biome: DungeonBiome
    min_level: Annotated[int, Field(ge=1)]
    max_level: Annotated[int, Field(ge=1)]
    difficulty_mult: Annotated[float, Field(gt=0)] = Field(default=1.0)
    description: str = Field(default="")
    effect_description: str = Field(default="")


class Mob(GameModel):
    """An enemy for a single encounter.

    Survives reloads through ``DungeonState.current_mob`` and is discarded on
    win, loss or flee.
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str
    level: Annotated[int, Field(ge=1)]
    hp: Annotated[int, Field(ge=0)]
    max_hp: Annotated[int, Field(ge=1)]
    atk: Annotated[int, Field(ge=0)]
    defense: Annotated[int, Field(ge=0)] = Field(alias="def")
    rarity: ItemRarity = Field(default=ItemRarity.COMMON)
    biome: DungeonBiome
    is_boss: bool = Field(default=False)
    is_elite: bool = Field(default=False)
    is_major_boss: bool = Field(default=False)
    special_ability: SpecialAbility | None = Field(default=None)
    drops: list[str] = Field(default_factory=list)

    @property
    def is_dead(self) -> bool:
        """Whether the mob has been defeated."""
        return self.hp <= 0

    def with_hp(self, hp: int) -> Mob:
        """Return a copy with hp clamped to ``[0, max_hp]``."""
        return self.model_copy(update={"hp": max(0, min(self.max_hp, hp))})


class Buff(GameModel):
    """A modifier that lasts for the next combat.

    ``magnitude`` is a signed fraction: +0.2 on a DAMAGE buff means 20% more
    damage dealt, -0.15 on a DEFENSE buff means 15% less damage taken.
    """

    name: str
    kind: BuffKind
    magnitude: float
    description: str = Field(default="")


class DungeonState(GameModel):
    """Persisted encounter state.

    Attributes:
        current_mob: Mob being fought, if any.
        turn: Turn machine state.
        boss_defeated: Major bosses defeated, keyed ``<dungeonId>_<floor>``.
        active_buffs: Beneficial modifiers for the next combat.
        active_debuffs: Harmful modifiers for the next combat.
    """

    current_mob: Mob | None = Field(default=None)
    turn: CombatTurn = Field(default=CombatTurn.PLAYER_TURN)
    boss_defeated: dict[str, bool] = Field(default_factory=dict)
    active_buffs: list[Buff] = Field(default_factory=list)
    active_debuffs: list[Buff] = Field(default_factory=list)

    @property
    def in_combat(self) -> bool:
        """Whether a live mob is engaged."""
        return self.current_mob is not None and not self.turn.is_terminal

    def all_modifiers(self) -> list[Buff]:
        """Buffs followed by debuffs."""
        return [*self.active_buffs, *self.active_debuffs]


__all__ = [
    "DungeonInfo",
    "Mob",
    "Buff",
    "DungeonState",
]
