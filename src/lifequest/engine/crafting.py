"""Crafting: turn materials and gold into recipe results."""

from __future__ import annotations

from lifequest.core.logging import get_logger
from lifequest.engine.inventory import add_item_to_inventory, consume_by_name, count_material
from lifequest.models.catalog import RECIPES_BY_ID
from lifequest.models.character import Character
from lifequest.models.game_state import ActionResult, GameState
from lifequest.models.items import Recipe


logger = get_logger(__name__)


def missing_materials(character: Character, recipe: Recipe) -> dict[str, int]:
    """Units still needed per material name; empty when craftable."""
    missing: dict[str, int] = {}
    for requirement in recipe.materials:
        shortfall = requirement.count - count_material(character, requirement.name)
        if shortfall > 0:
            missing[requirement.name] = shortfall
    return missing


def craft_item(state: GameState, recipe_id: str) -> ActionResult:
    """Craft one recipe result.

    The recipe must be unlocked and the character must hold the gold and
    every material. Materials are consumed before the result is added, so a
    slot freed by the last unit of a material can hold the result.
    """
    character = state.require_character()
    recipe = RECIPES_BY_ID.get(recipe_id)
    if recipe is None:
        return ActionResult.fail(state, "Unknown recipe")
    if recipe_id not in character.unlocked_recipes:
        return ActionResult.fail(state, "Recipe is not unlocked yet")
    if character.gold < recipe.gold_cost:
        return ActionResult.fail(state, "Not enough gold")
    missing = missing_materials(character, recipe)
    if missing:
        needed = ", ".join(f"{name} x{count}" for name, count in missing.items())
        return ActionResult.fail(state, f"Missing materials: {needed}")

    updated = character
    for requirement in recipe.materials:
        updated = consume_by_name(updated, requirement.name, requirement.count)
    crafted = add_item_to_inventory(updated, recipe.result_item)
    if crafted is updated:
        return ActionResult.fail(state, "Inventory is full")

    crafted = crafted.model_copy(update={"gold": crafted.gold - recipe.gold_cost})
    logger.info("Item crafted", recipe=recipe_id, item=recipe.result_item.name)
    return ActionResult.ok(state.with_character(crafted), f"Crafted {recipe.result_item.name}")


__all__ = [
    "missing_materials",
    "craft_item",
]
