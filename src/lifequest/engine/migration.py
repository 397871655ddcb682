"""Save-data migration and validation.

Raw save dictionaries are upgraded one schema version at a time, then
checked structurally, then parsed into a GameState. ``migrate_state`` is
total: it never raises, whatever it is given, and leaves anything it cannot
repair for validation to reject.

Version chain::

    (missing) -> 1.0   shop and dungeon state defaults, legacy shop keys
    1.0       -> 1.1   item amounts, stackable flags, merged stacks, hpRegen
"""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass
from typing import Any, Callable, Mapping

import pydantic

from lifequest.core.constants import (
    BASE_MAX_HP,
    CURRENT_SAVE_VERSION,
    HP_PER_VIT,
    MAX_HONESTY,
    STARTING_HP_REGEN,
    STARTING_INVENTORY_SLOTS,
    SUPPORTED_SAVE_VERSIONS,
)
from lifequest.core.exceptions import InvalidSaveError
from lifequest.core.logging import get_logger
from lifequest.models.catalog import recipes_unlocked_at
from lifequest.models.enums import (
    ClassType,
    DungeonBiome,
    ItemType,
    QuestCategory,
    ReputationType,
    SpecialAbility,
)
from lifequest.models.game_state import GameState


logger = get_logger(__name__)


LEGACY_LABELS: dict[str, str] = {
    # ClassType
    "Воин": ClassType.WARRIOR.value,
    "Маг": ClassType.MAGE.value,
    "Разведчик": ClassType.SCOUT.value,
    "Целитель": ClassType.HEALER.value,
    # ItemType
    "Оружие": ItemType.WEAPON.value,
    "Голова": ItemType.HEAD.value,
    "Тело": ItemType.BODY.value,
    "Кисти": ItemType.HANDS.value,
    "Ноги": ItemType.LEGS.value,
    "Кольцо": ItemType.RING.value,
    "Амулет": ItemType.AMULET.value,
    "Пояс": ItemType.BELT.value,
    "Зелье": ItemType.POTION.value,
    "Свиток": ItemType.SCROLL.value,
    "Еда": ItemType.FOOD.value,
    "Материал": ItemType.MATERIAL.value,
    # ReputationType
    "Героизм": ReputationType.HEROISM.value,
    "Дисциплина": ReputationType.DISCIPLINE.value,
    "Творчество": ReputationType.CREATIVITY.value,
    # DungeonBiome
    "Лес": DungeonBiome.FOREST.value,
    "Пещера": DungeonBiome.CAVE.value,
    "Болото": DungeonBiome.SWAMP.value,
    "Пустыня": DungeonBiome.DESERT.value,
    "Ледник": DungeonBiome.ICE.value,
    "Некрополь": DungeonBiome.NECROPOLIS.value,
    "Небеса": DungeonBiome.SKY.value,
    "Преисподняя": DungeonBiome.HELL.value,
    "Хаос": DungeonBiome.CHAOS.value,
    "Эфир": DungeonBiome.AETHER.value,
    # QuestCategory
    "Ежедневное": QuestCategory.DAILY.value,
    "Еженедельное": QuestCategory.WEEKLY.value,
    "Разовое": QuestCategory.ONETIME.value,
    "Событие": QuestCategory.EVENT.value,
}
"""Localized enum labels written by old saves, mapped to current values."""

_LABELLED_FIELDS = frozenset({"classType", "classReq", "type", "reputationType", "biome", "category"})

_STACKABLE_TYPES = frozenset(item_type.value for item_type in ItemType if item_type.is_stackable)

_SPECIAL_ABILITIES = frozenset(ability.value for ability in SpecialAbility)

_LEGACY_SHOP_KEYS = {
    "shopItems": "items",
    "shopDiscounts": "discounts",
    "lastShopUpdate": "lastUpdate",
    "shopVisitStreak": "visitStreak",
}


def _is_label(value: Any, labels: frozenset[str]) -> bool:
    return isinstance(value, str) and value in labels


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


# =============================================================================
# Label Translation
# =============================================================================


def translate_labels(node: Any) -> Any:
    """Replace legacy enum labels throughout a raw save tree.

    Labels are translated in enum-valued fields and in reputation keys.
    """
    if isinstance(node, list):
        return [translate_labels(child) for child in node]
    if not isinstance(node, dict):
        return node
    translated: dict[str, Any] = {}
    for key, value in node.items():
        if key in _LABELLED_FIELDS and isinstance(value, str):
            translated[key] = LEGACY_LABELS.get(value, value)
        elif key == "reputation" and isinstance(value, dict):
            translated[key] = {LEGACY_LABELS.get(rep, rep): points for rep, points in value.items()}
        else:
            translated[key] = translate_labels(value)
    return translated


# =============================================================================
# Migration Steps
# =============================================================================


@dataclass(frozen=True)
class MigrationStep:
    """One schema upgrade."""

    from_version: str | None
    to_version: str
    apply: Callable[[dict[str, Any]], None]
    description: str


def _upgrade_to_1_0(raw: dict[str, Any]) -> None:
    shop = raw.get("shopState")
    if not isinstance(shop, dict):
        shop = {}
    for legacy_key, key in _LEGACY_SHOP_KEYS.items():
        if legacy_key in raw:
            shop.setdefault(key, raw.pop(legacy_key))
    shop.setdefault("items", [])
    shop.setdefault("discounts", {})
    shop.setdefault("lastUpdate", 0)
    shop.setdefault("visitStreak", 0)
    raw["shopState"] = shop

    dungeon = raw.get("dungeonState")
    if not isinstance(dungeon, dict):
        dungeon = {}
    dungeon.setdefault("currentMob", None)
    dungeon.setdefault("bossDefeated", {})
    dungeon.setdefault("activeBuffs", [])
    dungeon.setdefault("activeDebuffs", [])
    raw["dungeonState"] = dungeon

    raw.setdefault("activeQuests", [])
    raw.setdefault("completedQuestIds", [])
    raw.setdefault("dungeonFloor", 1)
    raw.setdefault("currentDungeonId", None)
    raw.setdefault("lastDailyReset", 0)
    raw.setdefault("lastWeeklyReset", 0)


def _with_stack_fields(item: Any) -> Any:
    if not isinstance(item, dict):
        return item
    amount = item.get("amount")
    item["amount"] = max(1, int(amount)) if _is_number(amount) else 1
    item["stackable"] = _is_label(item.get("type"), _STACKABLE_TYPES)
    return item


def merge_stacks(inventory: list[Any]) -> list[Any]:
    """Merge duplicate stackable entries by name and type, keeping order.

    Entries whose name or type is not a string, or whose amount is not a
    number, are kept as they are for validation to judge.
    """
    merged: list[Any] = []
    stacks: dict[tuple[str, str], dict[str, Any]] = {}
    for item in inventory:
        if isinstance(item, dict) and item.get("stackable") is True:
            name, item_type, amount = item.get("name"), item.get("type"), item.get("amount")
            if isinstance(name, str) and isinstance(item_type, str) and _is_number(amount):
                existing = stacks.get((name, item_type))
                if existing is not None:
                    existing["amount"] += amount
                    continue
                stacks[(name, item_type)] = item
        merged.append(item)
    return merged


def _upgrade_to_1_1(raw: dict[str, Any]) -> None:
    character = raw.get("character")
    if isinstance(character, dict):
        inventory = character.get("inventory")
        if isinstance(inventory, list):
            character["inventory"] = merge_stacks([_with_stack_fields(item) for item in inventory])
        character.setdefault("hpRegen", STARTING_HP_REGEN)

    shop = raw.get("shopState")
    if isinstance(shop, dict) and isinstance(shop.get("items"), list):
        shop["items"] = [_with_stack_fields(item) for item in shop["items"]]


MIGRATIONS: tuple[MigrationStep, ...] = (
    MigrationStep(None, "1.0", _upgrade_to_1_0, "Add shop and dungeon state"),
    MigrationStep("1.0", "1.1", _upgrade_to_1_1, "Stack inventory items and add HP regeneration"),
)


# =============================================================================
# Character Defaults
# =============================================================================


def _default_stats(stats: Any) -> dict[str, Any]:
    if not isinstance(stats, dict):
        return {"str": 0, "dex": 0, "int": 0, "vit": 0}
    for key in ("str", "dex", "int", "vit"):
        if not _is_number(stats.get(key)):
            stats[key] = 0
    return stats


def _backfill_weapon_damage(item: Any) -> None:
    if not isinstance(item, dict) or item.get("type") != ItemType.WEAPON.value or "damage" in item:
        return
    stats = item.get("stats")
    if isinstance(stats, dict):
        total = sum(value for value in stats.values() if _is_number(value))
        if _is_number(total):
            item["damage"] = 2 * int(total)


def default_character_fields(character: dict[str, Any]) -> None:
    """Fill absent character fields and clamp numeric invariants in place."""
    character.setdefault("name", "Hero")
    character.setdefault("classType", ClassType.WARRIOR.value)
    character.setdefault("level", 1)
    character.setdefault("currentExp", 0)
    character["stats"] = _default_stats(character.get("stats"))
    vit = character["stats"].get("vit", 0)
    character.setdefault("maxHp", BASE_MAX_HP + vit * HP_PER_VIT)
    character.setdefault("hp", character["maxHp"])
    character.setdefault("gold", 0)
    character.setdefault("inventory", [])
    character.setdefault("inventorySlots", STARTING_INVENTORY_SLOTS)
    character.setdefault("equipment", {})
    character.setdefault("honesty", MAX_HONESTY)
    character.setdefault("dailyStreak", 0)
    character.setdefault("journal", [])
    character.setdefault("settings", {})
    character.setdefault("unlockedRecipes", [])
    character.setdefault("statPoints", 0)
    character.setdefault("hpRegen", STARTING_HP_REGEN)

    reputation = character.get("reputation")
    if not isinstance(reputation, dict):
        reputation = {}
    for rep in ReputationType:
        reputation.setdefault(rep.value, 0)
    character["reputation"] = reputation

    max_hp, hp = character["maxHp"], character["hp"]
    if _is_number(max_hp) and _is_number(hp):
        character["maxHp"] = max(1, int(max_hp))
        character["hp"] = max(0, min(character["maxHp"], int(hp)))
    if _is_number(character["gold"]):
        character["gold"] = max(0, int(character["gold"]))
    if _is_number(character["honesty"]):
        character["honesty"] = max(0, min(MAX_HONESTY, int(character["honesty"])))
    if isinstance(character["inventory"], list) and _is_number(character["inventorySlots"]):
        character["inventorySlots"] = max(int(character["inventorySlots"]), len(character["inventory"]))

    if isinstance(character["inventory"], list):
        for item in character["inventory"]:
            _backfill_weapon_damage(item)
    if isinstance(character["equipment"], dict):
        for item in character["equipment"].values():
            _backfill_weapon_damage(item)

    level = character["level"]
    if isinstance(character["unlockedRecipes"], list) and _is_number(level):
        for recipe_id in recipes_unlocked_at(int(level)):
            if recipe_id not in character["unlockedRecipes"]:
                character["unlockedRecipes"].append(recipe_id)


def _clean_dungeon_state(raw: dict[str, Any]) -> None:
    dungeon = raw.get("dungeonState")
    if not isinstance(dungeon, dict):
        return
    for key in ("activeBuffs", "activeDebuffs"):
        buffs = dungeon.get(key)
        if isinstance(buffs, list):
            # Old saves stored buffs as closures that never serialized.
            dungeon[key] = [buff for buff in buffs if isinstance(buff, dict) and "kind" in buff and "magnitude" in buff]
    mob = dungeon.get("currentMob")
    if isinstance(mob, dict) and not _is_label(mob.get("specialAbility"), _SPECIAL_ABILITIES):
        mob["specialAbility"] = None


# =============================================================================
# Public API
# =============================================================================


def migrate_state(raw: Any) -> dict[str, Any]:
    """Upgrade raw save data to the current schema.

    Never raises. The input is not modified.

    Args:
        raw: Decoded save data of any shape.

    Returns:
        A new dict in the current schema where the input allowed it.
    """
    if not isinstance(raw, Mapping):
        return {}
    state = translate_labels(copy.deepcopy(dict(raw)))

    version = state.get("version")
    if version is not None and not isinstance(version, str):
        version = str(version)
    if version is None or version in SUPPORTED_SAVE_VERSIONS:
        for step in MIGRATIONS:
            if step.from_version == version:
                logger.info("Migrating save", from_version=version, to_version=step.to_version, step=step.description)
                step.apply(state)
                version = step.to_version
        state["version"] = version

    character = state.get("character")
    if isinstance(character, dict):
        default_character_fields(character)
    _clean_dungeon_state(state)
    return state


def is_valid_game_state(raw: Any) -> bool:
    """Structural check on migrated save data.

    A state is well formed when its version is recognized, it has a
    character whose hp and maxHp are numbers, and whose stats, inventory and
    reputation have the right container types.
    """
    if not isinstance(raw, Mapping) or not _is_label(raw.get("version"), SUPPORTED_SAVE_VERSIONS):
        return False
    character = raw.get("character")
    if not isinstance(character, Mapping):
        return False
    return (
        _is_number(character.get("hp"))
        and _is_number(character.get("maxHp"))
        and isinstance(character.get("stats"), Mapping)
        and isinstance(character.get("inventory"), list)
        and isinstance(character.get("reputation"), Mapping)
    )


def parse_game_state(raw: Any, *, source: str = "unknown") -> GameState:
    """Migrate, validate and build a GameState.

    Args:
        raw: Decoded save data.
        source: Where the data came from, for error context.

    Returns:
        The parsed state at the current save version.

    Raises:
        InvalidSaveError: If the data cannot be turned into a valid state.
    """
    migrated = migrate_state(raw)
    if not is_valid_game_state(migrated):
        raise InvalidSaveError("Save data is not a valid game state", source=source)
    try:
        state = GameState.model_validate(migrated)
    except pydantic.ValidationError as exc:
        raise InvalidSaveError(
            "Save data failed schema validation",
            source=source,
            details={"errors": exc.error_count()},
        ) from exc
    if state.version != CURRENT_SAVE_VERSION:
        state = state.model_copy(update={"version": CURRENT_SAVE_VERSION})
    return state


__all__ = [
    "LEGACY_LABELS",
    "MigrationStep",
    "MIGRATIONS",
    "translate_labels",
    "merge_stacks",
    "default_character_fields",
    "migrate_state",
    "is_valid_game_state",
    "parse_game_state",
]
