"""Character models.

Models:
    Equipment: The eight fixed equipment slots.
    JournalEntry: One reflection recorded on quest completion.
    CharacterSettings: Per-character display preferences.
    Character: The player character aggregate.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal
from uuid import uuid4

from pydantic import Field, model_validator

from lifequest.core.constants import MAX_HONESTY
from lifequest.models.base import GameModel, utcnow
from lifequest.models.enums import ClassType, EquipmentSlot, Mood, ReputationType
from lifequest.models.items import Item, StatBonus, Stats


# =============================================================================
# Equipment
# =============================================================================


class Equipment(GameModel):
    """Worn items, one per slot."""

    weapon: Item | None = None
    head: Item | None = None
    body: Item | None = None
    hands: Item | None = None
    legs: Item | None = None
    ring: Item | None = None
    amulet: Item | None = None
    belt: Item | None = None

    def get(self, slot: EquipmentSlot) -> Item | None:
        """Item worn in a slot."""
        return getattr(self, slot.value)

    def with_slot(self, slot: EquipmentSlot, item: Item | None) -> Equipment:
        """Return a copy with one slot replaced."""
        return self.model_copy(update={slot.value: item})

    def worn_items(self) -> list[Item]:
        """All equipped items in slot order."""
        return [item for slot in EquipmentSlot if (item := self.get(slot)) is not None]

    @property
    def stat_bonus(self) -> StatBonus:
        """Sum of stat bonuses over every worn item."""
        total = StatBonus()
        for item in self.worn_items():
            total = total + item.stats
        return total

    @property
    def weapon_damage(self) -> int:
        """Sum of damage values over every worn item."""
        return sum(item.damage for item in self.worn_items())


# =============================================================================
# Journal & Settings
# =============================================================================


class JournalEntry(GameModel):
    """A journal line written when a quest is completed."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    date: datetime = Field(default_factory=utcnow)
    text: str
    mood: Mood = Field(default=Mood.NEUTRAL)
    reflection: str = Field(default="")
    quest_id: str | None = Field(default=None)


class CharacterSettings(GameModel):
    """Display preferences stored with the character."""

    font_size: Literal["normal", "large"] = Field(default="normal")
    high_contrast: bool = Field(default=False)


def _empty_reputation() -> dict[ReputationType, int]:
    return {rep: 0 for rep in ReputationType}


# =============================================================================
# Character
# =============================================================================


class Character(GameModel):
    """The player character.

    Invariants ``0 <= hp <= max_hp``, ``0 <= honesty <= 100`` and
    ``gold >= 0`` are checked when a character is validated (creation,
    loading, import). Engine updates use ``model_copy``, which skips
    validation, so the engine clamps these values where it computes them.

    Attributes:
        name: Character name.
        class_type: Archetype.
        level: Current level (1+).
        current_exp: Experience carried towards the next level.
        stats: Base stats without equipment.
        hp: Current hit points.
        max_hp: Maximum hit points.
        gold: Gold held.
        inventory: Ordered item slots.
        inventory_slots: Inventory capacity.
        equipment: Worn items.
        reputation: Points per reputation track.
        honesty: Integrity meter, 0 to 100.
        daily_streak: Daily quests completed in a row.
        journal: Reflections, newest first.
        settings: Display preferences.
        unlocked_recipes: Recipe ids available for crafting.
        stat_points: Unspent points earned from levelling.
        hp_regen: HP regenerated per hour outside combat.
    """

    name: str = Field(min_length=1)
    class_type: ClassType
    level: Annotated[int, Field(ge=1)] = Field(default=1)
    current_exp: Annotated[int, Field(ge=0)] = Field(default=0)
    stats: Stats
    hp: Annotated[int, Field(ge=0)]
    max_hp: Annotated[int, Field(ge=1)]
    gold: Annotated[int, Field(ge=0)] = Field(default=0)
    inventory: list[Item] = Field(default_factory=list)
    inventory_slots: Annotated[int, Field(ge=1)] = Field(default=20)
    equipment: Equipment = Field(default_factory=Equipment)
    reputation: dict[ReputationType, int] = Field(default_factory=_empty_reputation)
    honesty: Annotated[int, Field(ge=0, le=MAX_HONESTY)] = Field(default=MAX_HONESTY)
    daily_streak: Annotated[int, Field(ge=0)] = Field(default=0)
    journal: list[JournalEntry] = Field(default_factory=list)
    settings: CharacterSettings = Field(default_factory=CharacterSettings)
    unlocked_recipes: list[str] = Field(default_factory=list)
    stat_points: Annotated[int, Field(ge=0)] = Field(default=0)
    hp_regen: Annotated[int, Field(ge=0)] = Field(default=5)

    @model_validator(mode="after")
    def validate_hp_bounds(self) -> Character:
        """Ensure hp never exceeds max_hp.

        Returns:
            Self if validation passes.

        Raises:
            ValueError: If hp is above max_hp.
        """
        if self.hp > self.max_hp:
            raise ValueError(f"hp ({self.hp}) cannot exceed max_hp ({self.max_hp})")
        return self

    @property
    def effective_stats(self) -> Stats:
        """Base stats plus equipment bonuses."""
        return self.stats.plus(self.equipment.stat_bonus)

    @property
    def total_reputation(self) -> int:
        """Reputation summed over all tracks."""
        return sum(self.reputation.values())

    @property
    def free_slots(self) -> int:
        """Inventory slots still available."""
        return max(0, self.inventory_slots - len(self.inventory))

    @property
    def hp_fraction(self) -> float:
        """Current hp as a fraction of max_hp."""
        return self.hp / self.max_hp

    def find_item(self, item_id: str) -> Item | None:
        """Find an inventory slot by item id."""
        return next((item for item in self.inventory if item.id == item_id), None)


__all__ = [
    "Equipment",
    "JournalEntry",
    "CharacterSettings",
    "Character",
]
