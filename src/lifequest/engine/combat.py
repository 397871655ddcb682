"""Turn-based combat resolver.

Encounter state machine::

    PLAYER_TURN --attack--> ENEMY_TURN --enemy_turn--> PLAYER_TURN
         |                       |
         +--> WIN (mob hp 0)     +--> LOSE (player hp 0)

Potions never pass the turn. Every function takes a GameState and returns an
ActionResult; acting out of turn is a rejected action, not an exception.
"""

from __future__ import annotations

import math

from lifequest.core.constants import (
    ABILITY_TRIGGER_CHANCE,
    BOSS_FLOOR_INTERVAL,
    CRIT_BASE_CHANCE,
    CRIT_MULTIPLIER,
    DAMAGE_VARIANCE,
    ELITE_ROLL_THRESHOLD,
    MIN_WEAPON_DAMAGE,
    POTION_BASE_HEAL,
    POTION_MAX_HP_FRACTION,
    PRIMARY_STAT_DAMAGE_FACTOR,
    REGEN_ABILITY_FRACTION,
    REVIVE_FLOOR_PENALTY,
    REVIVE_GOLD_CAP,
    REVIVE_GOLD_FRACTION,
    REVIVE_HP_FRACTION,
    VAMPIRISM_FRACTION,
    WIN_GOLD_PER_LEVEL,
    WIN_HEAL_FRACTION,
    WIN_XP_PER_LEVEL,
)
from lifequest.core.logging import get_logger
from lifequest.engine.dice import DiceRoller, get_roller
from lifequest.engine.inventory import add_item_to_inventory, remove_item_units
from lifequest.engine.loot import generate_loot_for_source, generate_mob
from lifequest.models.bestiary import BIOME_MODIFIERS, RARITY_CONFIG, get_dungeon
from lifequest.models.character import Character
from lifequest.models.dungeon import Buff, DungeonState, Mob
from lifequest.models.enums import BuffKind, CombatTurn, SpecialAbility
from lifequest.models.game_state import ActionResult, GameState
from lifequest.models.items import Item
from lifequest.models.progression import apply_level_ups


logger = get_logger(__name__)


# =============================================================================
# Formulas
# =============================================================================


def attack_power(character: Character) -> float:
    """Pre-variance attack: ``max(5, weapon damage) * (1 + primary * 0.05)``."""
    primary = character.effective_stats.get(character.class_type.primary_stat)
    weapon = max(MIN_WEAPON_DAMAGE, character.equipment.weapon_damage)
    return weapon * (1 + primary * PRIMARY_STAT_DAMAGE_FACTOR)


def crit_chance(character: Character) -> float:
    """Crit chance in percent: ``5 + dex / 3``."""
    return CRIT_BASE_CHANCE + character.effective_stats.dexterity / 3


def modifier_multiplier(modifiers: list[Buff], kind: BuffKind) -> float:
    """Combined multiplier of every buff or debuff of ``kind``."""
    multiplier = 1.0
    for modifier in modifiers:
        if modifier.kind == kind:
            multiplier *= 1 + modifier.magnitude
    return multiplier


def mitigation(defense: float) -> float:
    """Damage fraction that gets through ``defense``."""
    return 100 / (100 + defense)


def potion_heal(character: Character, potion: Item) -> int:
    """HP restored by drinking ``potion``."""
    flat = math.floor(POTION_BASE_HEAL + POTION_MAX_HP_FRACTION * character.max_hp)
    return max(potion.heal_amount or 0, flat)


# =============================================================================
# Entering & Leaving
# =============================================================================


def _boss_key(dungeon_id: str, floor: int) -> str:
    return f"{dungeon_id}_{floor}"


def start_encounter(state: GameState, *, roller: DiceRoller | None = None) -> ActionResult:
    """Spawn the mob for the current floor.

    An encounter already in progress is resumed unchanged.
    """
    if state.current_dungeon_id is None:
        return ActionResult.fail(state, "Not inside a dungeon")
    dungeon_state = state.dungeon_state
    if dungeon_state.current_mob is not None and not dungeon_state.turn.is_terminal:
        return ActionResult.ok(state, f"{dungeon_state.current_mob.name} is still here")
    if dungeon_state.turn == CombatTurn.LOSE:
        return ActionResult.fail(state, "You must revive first")

    dice = get_roller(roller)
    dungeon = get_dungeon(state.current_dungeon_id)
    floor = state.dungeon_floor
    is_boss = floor % BOSS_FLOOR_INTERVAL == 0
    is_elite = not is_boss and dice.random() > ELITE_ROLL_THRESHOLD
    mob = generate_mob(
        dungeon.biome,
        floor,
        is_boss,
        is_elite,
        dungeon.difficulty_mult,
        major_available=_boss_key(dungeon.id, floor) not in dungeon_state.boss_defeated,
        roller=dice,
    )
    updated = dungeon_state.model_copy(update={"current_mob": mob, "turn": CombatTurn.PLAYER_TURN})
    logger.info("Encounter started", dungeon=dungeon.id, floor=floor, mob=mob.name)
    return ActionResult.ok(
        state.model_copy(update={"dungeon_state": updated}),
        f"{mob.name} appears!",
        [f"Floor {floor}: {mob.name} (lvl {mob.level}, {mob.max_hp} HP)"],
    )


def enter_dungeon(
    state: GameState,
    dungeon_id: str,
    *,
    roller: DiceRoller | None = None,
) -> ActionResult:
    """Enter a dungeon and start the first encounter.

    Raises:
        CombatError: If ``dungeon_id`` is unknown.
    """
    character = state.require_character()
    dungeon = get_dungeon(dungeon_id)
    if character.level < dungeon.min_level:
        return ActionResult.fail(state, f"Requires level {dungeon.min_level}")
    if state.current_dungeon_id not in (None, dungeon_id):
        return ActionResult.fail(state, "Leave the current dungeon first")
    if state.dungeon_state.turn == CombatTurn.LOSE:
        return ActionResult.fail(state, "You must revive first")
    if character.hp == 0:
        return ActionResult.fail(state, "Too wounded to fight")

    entered = state.model_copy(update={"current_dungeon_id": dungeon_id})
    return start_encounter(entered, roller=roller)


def _exit_dungeon(state: GameState, **character_update: object) -> GameState:
    dungeon_state = state.dungeon_state.model_copy(
        update={
            "current_mob": None,
            "turn": CombatTurn.PLAYER_TURN,
            "active_buffs": [],
            "active_debuffs": [],
        }
    )
    update: dict = {"dungeon_state": dungeon_state, "current_dungeon_id": None}
    if character_update:
        update["character"] = state.require_character().model_copy(update=character_update)
    return state.model_copy(update=update)


def flee_dungeon(state: GameState) -> ActionResult:
    """Leave the dungeon. HP and floor are kept; buffs are lost."""
    if state.current_dungeon_id is None and state.dungeon_state.current_mob is None:
        return ActionResult.fail(state, "Not inside a dungeon")
    if state.dungeon_state.turn == CombatTurn.LOSE:
        return ActionResult.fail(state, "You must revive first")
    logger.info("Fled dungeon", dungeon=state.current_dungeon_id, floor=state.dungeon_floor)
    return ActionResult.ok(_exit_dungeon(state), "You escaped the dungeon")


def revive(state: GameState) -> ActionResult:
    """Recover from a defeat.

    Costs ``min(500, 20% of gold)``, restores half HP, pushes the floor back
    by up to five and exits the dungeon.
    """
    if state.dungeon_state.turn != CombatTurn.LOSE:
        return ActionResult.fail(state, "Nothing to revive from")
    character = state.require_character()
    penalty = min(REVIVE_GOLD_CAP, math.floor(character.gold * REVIVE_GOLD_FRACTION))
    hp = max(1, math.floor(character.max_hp * REVIVE_HP_FRACTION))
    floor = max(1, state.dungeon_floor - REVIVE_FLOOR_PENALTY)

    revived = _exit_dungeon(state, gold=character.gold - penalty, hp=hp)
    revived = revived.model_copy(update={"dungeon_floor": floor})
    logger.info("Revived", gold_lost=penalty, floor=floor)
    return ActionResult.ok(revived, f"Revived. Lost {penalty} gold, back to floor {floor}")


# =============================================================================
# Turns
# =============================================================================


def _active_mob(state: GameState, turn: CombatTurn) -> Mob | None:
    dungeon_state = state.dungeon_state
    if dungeon_state.current_mob is None or dungeon_state.turn != turn:
        return None
    return dungeon_state.current_mob


def player_attack(state: GameState, *, roller: DiceRoller | None = None) -> ActionResult:
    """Resolve the player's attack."""
    mob = _active_mob(state, CombatTurn.PLAYER_TURN)
    if mob is None:
        return ActionResult.fail(state, "It is not your turn")
    dice = get_roller(roller)
    character = state.require_character()
    dungeon_state = state.dungeon_state
    biome = BIOME_MODIFIERS[mob.biome]
    log: list[str] = []

    if biome.miss_chance and dice.chance(biome.miss_chance):
        log.append("You miss!")
        missed = dungeon_state.model_copy(update={"turn": CombatTurn.ENEMY_TURN})
        return ActionResult.ok(state.model_copy(update={"dungeon_state": missed}), "Miss", log)

    damage = attack_power(character) * dice.uniform(*DAMAGE_VARIANCE)
    if biome.damage_range is not None:
        damage *= dice.uniform(*biome.damage_range)
    else:
        damage *= biome.damage_mult
    damage *= modifier_multiplier(dungeon_state.all_modifiers(), BuffKind.DAMAGE)
    damage *= mitigation(mob.defense)
    is_crit = dice.percent() < crit_chance(character)
    if is_crit:
        damage *= CRIT_MULTIPLIER
    dealt = max(1, math.floor(damage))

    mob = mob.with_hp(mob.hp - dealt)
    log.append(f"{'Critical hit! ' if is_crit else ''}You deal {dealt} damage to {mob.name}")

    if mob.is_dead:
        return _resolve_win(state, mob, log, dice)

    updated = dungeon_state.model_copy(update={"current_mob": mob, "turn": CombatTurn.ENEMY_TURN})
    return ActionResult.ok(state.model_copy(update={"dungeon_state": updated}), f"-{dealt}", log)


def enemy_turn(state: GameState, *, roller: DiceRoller | None = None) -> ActionResult:
    """Resolve the mob's attack, its special ability and biome burn."""
    mob = _active_mob(state, CombatTurn.ENEMY_TURN)
    if mob is None:
        return ActionResult.fail(state, "It is not the enemy's turn")
    dice = get_roller(roller)
    character = state.require_character()
    dungeon_state = state.dungeon_state
    log: list[str] = []

    raw = mob.atk * dice.uniform(*DAMAGE_VARIANCE)
    ability = None
    if mob.special_ability is not None and dice.chance(ABILITY_TRIGGER_CHANCE):
        ability = mob.special_ability
    if ability == SpecialAbility.REGEN:
        healed = math.floor(mob.max_hp * REGEN_ABILITY_FRACTION)
        mob = mob.with_hp(mob.hp + healed)
        log.append(f"{mob.name} regenerates {healed} HP")
    elif ability == SpecialAbility.CRITICAL:
        raw *= CRIT_MULTIPLIER
        log.append(f"{mob.name} strikes a critical blow!")

    raw *= modifier_multiplier(dungeon_state.all_modifiers(), BuffKind.DEFENSE)
    raw *= mitigation(character.effective_stats.vitality * 2)
    dealt = max(1, math.floor(raw))
    hp = max(0, character.hp - dealt)
    log.append(f"{mob.name} deals {dealt} damage to you")

    if ability == SpecialAbility.VAMPIRISM:
        drained = math.floor(dealt * VAMPIRISM_FRACTION)
        mob = mob.with_hp(mob.hp + drained)
        log.append(f"{mob.name} drains {drained} HP")

    burn = math.floor(character.max_hp * BIOME_MODIFIERS[mob.biome].burn_fraction)
    if hp > 0 and burn > 0:
        hp = max(0, hp - burn)
        log.append(f"The flames burn you for {burn}")

    turn = CombatTurn.LOSE if hp == 0 else CombatTurn.PLAYER_TURN
    if turn == CombatTurn.LOSE:
        log.append("You have fallen...")
        logger.info("Player defeated", mob=mob.name, floor=state.dungeon_floor)

    updated_dungeon = dungeon_state.model_copy(update={"current_mob": mob, "turn": turn})
    return ActionResult.ok(
        state.model_copy(
            update={
                "character": character.model_copy(update={"hp": hp}),
                "dungeon_state": updated_dungeon,
            }
        ),
        f"-{dealt}",
        log,
    )


def _resolve_win(state: GameState, mob: Mob, log: list[str], dice: DiceRoller) -> ActionResult:
    character = state.require_character()
    config = RARITY_CONFIG[mob.rarity]
    gold = math.floor(mob.level * WIN_GOLD_PER_LEVEL * config.xp_mult)
    exp = math.floor(mob.level * WIN_XP_PER_LEVEL * config.xp_mult)
    log.append(f"{mob.name} is defeated! +{gold} gold, +{exp} XP")

    updated = character.model_copy(
        update={"gold": character.gold + gold, "current_exp": character.current_exp + exp}
    )
    loot = generate_loot_for_source(character, mob.level, mob.rarity, mob.biome, roller=dice)
    if loot is not None:
        with_loot = add_item_to_inventory(updated, loot, loot.amount)
        if with_loot is updated:
            log.append(f"Inventory full, {loot.name} is lost")
        else:
            log.append(f"Loot: {loot.name}")
        updated = with_loot

    heal = math.floor(updated.max_hp * WIN_HEAL_FRACTION) + updated.effective_stats.vitality
    updated = updated.model_copy(update={"hp": min(updated.max_hp, updated.hp + heal)})
    updated, levels = apply_level_ups(updated)
    for level in levels:
        log.append(f"Level up! You are now level {level}")

    defeated = dict(state.dungeon_state.boss_defeated)
    if mob.is_major_boss and state.current_dungeon_id is not None:
        defeated[_boss_key(state.current_dungeon_id, state.dungeon_floor)] = True

    dungeon_state = DungeonState(
        current_mob=None,
        turn=CombatTurn.WIN,
        boss_defeated=defeated,
        active_buffs=[],
        active_debuffs=[],
    )
    logger.info("Mob defeated", mob=mob.name, floor=state.dungeon_floor, gold=gold, exp=exp)
    return ActionResult.ok(
        state.model_copy(
            update={
                "character": updated,
                "dungeon_state": dungeon_state,
                "dungeon_floor": state.dungeon_floor + 1,
            }
        ),
        "Victory!",
        log,
    )


# =============================================================================
# Potions
# =============================================================================


def find_healing_potion(character: Character, item_id: str | None = None) -> Item | None:
    """Pick the potion to drink.

    With ``item_id`` only that potion qualifies. Otherwise the weakest
    potion that still restores the missing HP is chosen, or the strongest
    one when none does, so rare potions are not spent on scratches.
    """
    potions = [item for item in character.inventory if item.is_healing_potion]
    if item_id is not None:
        return next((item for item in potions if item.id == item_id), None)
    if not potions:
        return None
    missing = character.max_hp - character.hp
    enough = [item for item in potions if potion_heal(character, item) >= missing]
    if enough:
        return min(enough, key=lambda item: (potion_heal(character, item), item.price))
    return max(potions, key=lambda item: potion_heal(character, item))


def use_potion(state: GameState, item_id: str | None = None) -> ActionResult:
    """Drink a healing potion, ``item_id`` or the best fit for the missing HP.

    Allowed outside combat and on the player's turn. Does not pass the turn.
    """
    character = state.require_character()
    dungeon_state = state.dungeon_state
    if dungeon_state.current_mob is not None and dungeon_state.turn != CombatTurn.PLAYER_TURN:
        return ActionResult.fail(state, "You cannot drink now")
    potion = find_healing_potion(character, item_id)
    if potion is None:
        return ActionResult.fail(state, "No potions left" if item_id is None else "No such potion")
    if character.hp >= character.max_hp:
        return ActionResult.fail(state, "HP is already full")

    healed_to = min(character.max_hp, character.hp + potion_heal(character, potion))
    gained = healed_to - character.hp
    updated = remove_item_units(character, potion.id).model_copy(update={"hp": healed_to})
    return ActionResult.ok(state.with_character(updated), f"+{gained} HP", [f"You drink {potion.name} (+{gained} HP)"])


__all__ = [
    "attack_power",
    "crit_chance",
    "modifier_multiplier",
    "mitigation",
    "potion_heal",
    "start_encounter",
    "enter_dungeon",
    "flee_dungeon",
    "revive",
    "player_attack",
    "enemy_turn",
    "find_healing_potion",
    "use_potion",
]
