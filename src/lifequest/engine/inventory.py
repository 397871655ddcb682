"""Inventory management.

Stacking, insertion and removal rules plus the equip, sell and stat
allocation actions. Character-level helpers return a new Character; actions
take and return whole game states wrapped in an ActionResult.
"""

from __future__ import annotations

from lifequest.core.constants import HP_PER_VIT
from lifequest.core.logging import get_logger
from lifequest.models.character import Character
from lifequest.models.enums import EquipmentSlot, ItemRarity, StatName
from lifequest.models.game_state import ActionResult, GameState
from lifequest.models.items import Item
from lifequest.models.progression import sell_price


logger = get_logger(__name__)


# =============================================================================
# Character Helpers
# =============================================================================


def _find_stack(inventory: list[Item], item: Item) -> int | None:
    for index, existing in enumerate(inventory):
        if existing.stackable and existing.stack_key == item.stack_key:
            return index
    return None


def add_item_to_inventory(character: Character, item: Item, count: int = 1) -> Character:
    """Add ``count`` units of ``item`` to the inventory.

    Stackable items merge into an existing slot with the same name and type,
    or open one new slot holding all units. Non-stackable items take one
    slot per unit and stop silently when the inventory is full; compare the
    result with the input to detect a partial or failed insert.

    Args:
        character: Receiving character.
        item: Template or instance to add.
        count: Units to add.

    Returns:
        The updated character (the same object if nothing fit).
    """
    if count < 1:
        return character

    inventory = list(character.inventory)
    if item.stackable:
        index = _find_stack(inventory, item)
        if index is not None:
            inventory[index] = inventory[index].with_amount(inventory[index].amount + count)
        elif len(inventory) < character.inventory_slots:
            inventory.append(item.instantiate(count))
        else:
            return character
    else:
        added = 0
        while added < count and len(inventory) < character.inventory_slots:
            inventory.append(item.instantiate())
            added += 1
        if added == 0:
            return character

    return character.model_copy(update={"inventory": inventory})


def can_add_item(character: Character, item: Item) -> bool:
    """Whether one unit of ``item`` would fit."""
    if item.stackable and _find_stack(character.inventory, item) is not None:
        return True
    return len(character.inventory) < character.inventory_slots


def remove_item_units(character: Character, item_id: str, units: int = 1) -> Character:
    """Remove units from one slot, dropping the slot when it empties."""
    inventory: list[Item] = []
    for item in character.inventory:
        if item.id != item_id:
            inventory.append(item)
        elif item.amount > units:
            inventory.append(item.with_amount(item.amount - units))
    return character.model_copy(update={"inventory": inventory})


def count_material(character: Character, name: str) -> int:
    """Units held of every slot named ``name``."""
    return sum(item.amount for item in character.inventory if item.name == name)


def consume_by_name(character: Character, name: str, units: int) -> Character:
    """Remove ``units`` spread over slots named ``name``, oldest first."""
    remaining = units
    inventory: list[Item] = []
    for item in character.inventory:
        if remaining > 0 and item.name == name:
            taken = min(item.amount, remaining)
            remaining -= taken
            if item.amount > taken:
                inventory.append(item.with_amount(item.amount - taken))
            continue
        inventory.append(item)
    return character.model_copy(update={"inventory": inventory})


# =============================================================================
# Actions
# =============================================================================


def sell_item(state: GameState, item_id: str) -> ActionResult:
    """Sell one unit of an inventory item.

    Legendary items can never be sold.
    """
    character = state.require_character()
    item = character.find_item(item_id)
    if item is None:
        return ActionResult.fail(state, "Item not found")
    if item.rarity == ItemRarity.LEGENDARY:
        return ActionResult.fail(state, "Legendary items cannot be sold")

    gold = sell_price(item.price)
    updated = remove_item_units(character, item_id)
    updated = updated.model_copy(update={"gold": updated.gold + gold})
    logger.info("Item sold", item=item.name, gold=gold)
    return ActionResult.ok(state.with_character(updated), f"Sold {item.name} for {gold} gold")


def equip_item(state: GameState, item_id: str) -> ActionResult:
    """Equip an inventory item, returning the previous one to the bag."""
    character = state.require_character()
    item = character.find_item(item_id)
    if item is None:
        return ActionResult.fail(state, "Item not found")
    slot = item.equipment_slot
    if slot is None:
        return ActionResult.fail(state, f"{item.name} cannot be equipped")
    if character.level < item.level_req:
        return ActionResult.fail(state, f"Requires level {item.level_req}")
    if item.class_req is not None and item.class_req != character.class_type:
        return ActionResult.fail(state, f"Only a {item.class_req.value} can use {item.name}")

    inventory = [existing for existing in character.inventory if existing.id != item_id]
    previous = character.equipment.get(slot)
    if previous is not None:
        inventory.append(previous)

    updated = character.model_copy(
        update={
            "inventory": inventory,
            "equipment": character.equipment.with_slot(slot, item),
        }
    )
    logger.info("Item equipped", item=item.name, slot=slot.value)
    return ActionResult.ok(state.with_character(updated), f"Equipped {item.name}")


def unequip_item(state: GameState, slot: EquipmentSlot) -> ActionResult:
    """Move the item in ``slot`` back to the inventory."""
    character = state.require_character()
    item = character.equipment.get(slot)
    if item is None:
        return ActionResult.fail(state, "Slot is empty")
    if character.free_slots == 0:
        return ActionResult.fail(state, "Inventory is full")

    updated = character.model_copy(
        update={
            "inventory": [*character.inventory, item],
            "equipment": character.equipment.with_slot(slot, None),
        }
    )
    return ActionResult.ok(state.with_character(updated), f"Unequipped {item.name}")


def allocate_stat_point(state: GameState, stat: StatName) -> ActionResult:
    """Spend one unspent stat point. VIT also raises max HP."""
    character = state.require_character()
    if character.stat_points < 1:
        return ActionResult.fail(state, "No stat points available")

    update: dict = {
        "stats": character.stats.with_stat(stat, character.stats.get(stat) + 1),
        "stat_points": character.stat_points - 1,
    }
    if stat == StatName.VIT:
        update["max_hp"] = character.max_hp + HP_PER_VIT
        update["hp"] = character.hp + HP_PER_VIT
    return ActionResult.ok(state.with_character(character.model_copy(update=update)), f"+1 {stat.value}")


__all__ = [
    "add_item_to_inventory",
    "can_add_item",
    "remove_item_units",
    "count_material",
    "consume_by_name",
    "sell_item",
    "equip_item",
    "unequip_item",
    "allocate_stat_point",
]
