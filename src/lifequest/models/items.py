"""Item, stat and recipe models.

Models:
    Stats: The four character stats.
    StatBonus: Additive stat modifiers carried by equipment.
    Item: An item template or an owned item instance.
    MaterialRequirement: One ingredient line of a recipe.
    Recipe: A crafting recipe.
"""

from __future__ import annotations

from typing import Annotated
from uuid import uuid4

from pydantic import Field

from lifequest.models.base import GameModel
from lifequest.models.enums import (
    ClassType,
    EquipmentSlot,
    ItemRarity,
    ItemType,
    MaterialType,
    StatName,
)


def new_item_id() -> str:
    """Generate a fresh per-copy item id."""
    return uuid4().hex


# =============================================================================
# Stats
# =============================================================================


class Stats(GameModel):
    """Base character stats.

    Field names are spelled out to avoid shadowing builtins; the storage
    aliases stay ``str``/``dex``/``int``/``vit``.
    """

    strength: Annotated[int, Field(ge=0)] = Field(default=0, alias="str")
    dexterity: Annotated[int, Field(ge=0)] = Field(default=0, alias="dex")
    intelligence: Annotated[int, Field(ge=0)] = Field(default=0, alias="int")
    vitality: Annotated[int, Field(ge=0)] = Field(default=0, alias="vit")

    def get(self, stat: StatName) -> int:
        """Read a stat by name."""
        return getattr(self, _STAT_FIELDS[stat])

    def with_stat(self, stat: StatName, value: int) -> Stats:
        """Return a copy with one stat replaced."""
        return self.model_copy(update={_STAT_FIELDS[stat]: value})

    def plus(self, bonus: StatBonus) -> Stats:
        """Return these stats with an equipment bonus applied."""
        return Stats(
            strength=max(0, self.strength + bonus.strength),
            dexterity=max(0, self.dexterity + bonus.dexterity),
            intelligence=max(0, self.intelligence + bonus.intelligence),
            vitality=max(0, self.vitality + bonus.vitality),
        )

    @property
    def total(self) -> int:
        """Sum of all four stats."""
        return self.strength + self.dexterity + self.intelligence + self.vitality


class StatBonus(GameModel):
    """Additive stat modifiers. Absent members count as zero."""

    strength: int = Field(default=0, alias="str")
    dexterity: int = Field(default=0, alias="dex")
    intelligence: int = Field(default=0, alias="int")
    vitality: int = Field(default=0, alias="vit")

    def __add__(self, other: StatBonus) -> StatBonus:
        return StatBonus(
            strength=self.strength + other.strength,
            dexterity=self.dexterity + other.dexterity,
            intelligence=self.intelligence + other.intelligence,
            vitality=self.vitality + other.vitality,
        )

    def get(self, stat: StatName) -> int:
        """Read a bonus by stat name."""
        return getattr(self, _STAT_FIELDS[stat])


_STAT_FIELDS: dict[StatName, str] = {
    StatName.STR: "strength",
    StatName.DEX: "dexterity",
    StatName.INT: "intelligence",
    StatName.VIT: "vitality",
}


# =============================================================================
# Items
# =============================================================================


class Item(GameModel):
    """An item template or an owned instance.

    Catalog templates use their catalog id as ``id``; every owned copy gets a
    fresh ``id`` and remembers the template through ``base_id``.

    Attributes:
        id: Unique id of this copy.
        base_id: Catalog template id.
        name: Display name, also the stacking and crafting key.
        type: Item kind.
        rarity: Quality tier.
        price: Shop price in gold.
        level_req: Minimum character level to equip.
        class_req: Class restriction, if any.
        stats: Stat bonus granted while equipped.
        damage: Weapon damage contributed while equipped.
        heal_amount: HP restored when drunk, for potions.
        effect: Flavour text of a special effect.
        material_type: Family of a crafting material.
        stackable: Whether copies share one slot.
        amount: Units held in this slot.
    """

    id: str = Field(default_factory=new_item_id)
    base_id: str = Field(default="")
    name: str = Field(min_length=1)
    type: ItemType
    rarity: ItemRarity = Field(default=ItemRarity.COMMON)
    price: Annotated[int, Field(ge=0)] = Field(default=0)
    level_req: Annotated[int, Field(ge=1)] = Field(default=1)
    class_req: ClassType | None = Field(default=None)
    stats: StatBonus = Field(default_factory=StatBonus)
    damage: Annotated[int, Field(ge=0)] = Field(default=0)
    heal_amount: int | None = Field(default=None)
    effect: str = Field(default="")
    material_type: MaterialType | None = Field(default=None)
    stackable: bool = Field(default=False)
    amount: Annotated[int, Field(ge=1)] = Field(default=1)

    @property
    def template_id(self) -> str:
        """Catalog id this item was created from."""
        return self.base_id or self.id

    @property
    def stack_key(self) -> tuple[str, ItemType]:
        """Identity used when merging stacks."""
        return (self.name, self.type)

    @property
    def equipment_slot(self) -> EquipmentSlot | None:
        """Slot this item is worn in, None if it cannot be equipped."""
        return EquipmentSlot.for_item_type(self.type)

    @property
    def is_healing_potion(self) -> bool:
        """Whether drinking this restores HP."""
        return self.type == ItemType.POTION and bool(self.heal_amount)

    def instantiate(self, amount: int = 1) -> Item:
        """Create an owned copy with a fresh id.

        Args:
            amount: Units in the new slot; forced to 1 for non-stackables.

        Returns:
            A new Item instance.
        """
        return self.model_copy(
            update={
                "id": new_item_id(),
                "base_id": self.template_id,
                "amount": amount if self.stackable else 1,
            }
        )

    def with_amount(self, amount: int) -> Item:
        """Return this slot with a different unit count."""
        return self.model_copy(update={"amount": amount})


class MaterialRequirement(GameModel):
    """One ingredient line of a recipe, matched by material name."""

    name: str
    count: Annotated[int, Field(ge=1)]


class Recipe(GameModel):
    """A crafting recipe.

    Attributes:
        id: Recipe id.
        result_item: Template of the crafted item.
        materials: Ingredients consumed.
        gold_cost: Gold consumed.
    """

    id: str
    result_item: Item
    materials: list[MaterialRequirement]
    gold_cost: Annotated[int, Field(ge=0)]


__all__ = [
    "Stats",
    "StatBonus",
    "Item",
    "MaterialRequirement",
    "Recipe",
    "new_item_id",
]
