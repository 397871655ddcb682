"""Game engine module for LifeQuest.

Every player-facing operation takes the current GameState and returns an
ActionResult holding the new one; the UI layer owns side effects.

Submodules:
    dice: Seedable random source
    loot: Mob and loot generation
    inventory: Stacking, equipping, selling and stat allocation
    shop: Rotating stock, discounts and purchases
    crafting: Recipe crafting
    combat: Turn-based combat resolver
    quests: Quest board resets and completion rewards
    lifecycle: Character creation and the game tick
    migration: Save-data migration and validation
    session: Authoritative state holder
    scheduler: Enemy turns and auto-combat on asyncio

Example:
    >>> from lifequest.engine import create_character, enter_dungeon, player_attack
    >>> from lifequest.models import ClassType
    >>> state = create_character("Aria", ClassType.WARRIOR)
    >>> result = enter_dungeon(state, "forest")
    >>> result = player_attack(result.state)
"""

from __future__ import annotations

# =============================================================================
# Randomness & Generation
# =============================================================================
from lifequest.engine.dice import DiceRoller, get_roller, reset_default_roller
from lifequest.engine.loot import generate_loot_for_source, generate_mob, generate_random_item

# =============================================================================
# Player Actions
# =============================================================================
from lifequest.engine.inventory import (
    add_item_to_inventory,
    allocate_stat_point,
    equip_item,
    sell_item,
    unequip_item,
)
from lifequest.engine.shop import buy_inventory_slots, buy_item, open_shop, refresh_shop
from lifequest.engine.crafting import craft_item
from lifequest.engine.combat import (
    enemy_turn,
    enter_dungeon,
    flee_dungeon,
    player_attack,
    revive,
    start_encounter,
    use_potion,
)
from lifequest.engine.quests import complete_quest, refresh_onetime_quests, refresh_quests

# =============================================================================
# Lifecycle & Persistence Boundary
# =============================================================================
from lifequest.engine.lifecycle import apply_luxury_tax, create_character, process_game_tick
from lifequest.engine.migration import is_valid_game_state, migrate_state, parse_game_state

# =============================================================================
# Runtime
# =============================================================================
from lifequest.engine.session import GameSession
from lifequest.engine.scheduler import CombatScheduler, guard_token


__all__ = [
    # Randomness & Generation
    "DiceRoller",
    "get_roller",
    "reset_default_roller",
    "generate_loot_for_source",
    "generate_mob",
    "generate_random_item",
    # Player Actions
    "add_item_to_inventory",
    "allocate_stat_point",
    "equip_item",
    "sell_item",
    "unequip_item",
    "buy_inventory_slots",
    "buy_item",
    "open_shop",
    "refresh_shop",
    "craft_item",
    "enemy_turn",
    "enter_dungeon",
    "flee_dungeon",
    "player_attack",
    "revive",
    "start_encounter",
    "use_potion",
    "complete_quest",
    "refresh_onetime_quests",
    "refresh_quests",
    # Lifecycle & Persistence Boundary
    "apply_luxury_tax",
    "create_character",
    "process_game_tick",
    "is_valid_game_state",
    "migrate_state",
    "parse_game_state",
    # Runtime
    "GameSession",
    "CombatScheduler",
    "guard_token",
]
