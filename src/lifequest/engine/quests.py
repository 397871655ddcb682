"""Quest board and reward engine.

Handles the daily, weekly and event reset policy, one-time quest batches and
honest quest completion with its rewards, streaks, journal and mood buffs.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from lifequest.core.constants import (
    COMPLETION_HONESTY_BONUS,
    DAILY_BASE_EXP,
    DAILY_BASE_GOLD,
    DAILY_QUEST_COUNT,
    DAILY_STREAK_RESET_THRESHOLD,
    EVENT_BASE_EXP,
    EVENT_BASE_GOLD,
    MAX_HONESTY,
    ONETIME_BATCH_SIZE,
    ONETIME_COOLDOWN_HOURS,
    ONETIME_EXP_PER_DIFFICULTY,
    ONETIME_GOLD_PER_DIFFICULTY,
    ONETIME_ITEM_MIN_DIFFICULTY,
    ONETIME_MAX_ACTIVE,
    STREAK_BONUS_INTERVAL,
    STREAK_HONESTY_BONUS,
    WEEKLY_BASE_EXP,
    WEEKLY_BASE_GOLD,
    WEEKLY_QUEST_COUNT,
)
from lifequest.core.logging import get_logger
from lifequest.engine.dice import DiceRoller, get_roller
from lifequest.engine.inventory import add_item_to_inventory, can_add_item
from lifequest.engine.loot import generate_random_item
from lifequest.models.character import Character, JournalEntry
from lifequest.models.dungeon import Buff, DungeonState
from lifequest.models.enums import BuffKind, ItemRarity, Mood, QuestCategory
from lifequest.models.game_state import ActionResult, GameState
from lifequest.models.progression import apply_level_ups, quest_exp, quest_gold, reputation_gain
from lifequest.models.quest_pools import (
    DAILY_QUEST_POOL,
    EVENT_DEFINITIONS,
    ONETIME_QUEST_POOL,
    WEEKLY_QUEST_POOL,
)
from lifequest.models.quests import Quest


logger = get_logger(__name__)


MOOD_BUFFS: dict[Mood, Buff] = {
    Mood.INSPIRED: Buff(
        name="Inspiration",
        kind=BuffKind.DAMAGE,
        magnitude=0.2,
        description="+20% damage in the next fight",
    ),
    Mood.NEUTRAL: Buff(
        name="Composure",
        kind=BuffKind.DEFENSE,
        magnitude=-0.15,
        description="-15% damage taken in the next fight",
    ),
}

MOOD_DEBUFFS: dict[Mood, Buff] = {
    Mood.TIRED: Buff(
        name="Exhaustion",
        kind=BuffKind.DAMAGE,
        magnitude=-0.1,
        description="-10% damage in the next fight",
    ),
}


def _stamp(now: datetime) -> int:
    return int(now.timestamp() * 1000)


# =============================================================================
# Reset Policy
# =============================================================================


def is_new_day(last_reset: datetime, now: datetime) -> bool:
    """Whether ``now`` falls on a different calendar day than ``last_reset``.

    Both are compared in the timezone of ``now``.
    """
    return last_reset.astimezone(now.tzinfo).date() != now.date()


def is_new_week(last_reset: datetime, now: datetime) -> bool:
    """Monday rollover more than a day after the reset, or over a week since."""
    elapsed = now - last_reset
    return (now.weekday() == 0 and elapsed > timedelta(days=1)) or elapsed > timedelta(days=7)


def _roll_dailies(now: datetime, dice: DiceRoller) -> list[Quest]:
    stamp = _stamp(now)
    return [
        Quest.from_template(
            dice.choice(DAILY_QUEST_POOL),
            quest_id=f"d_{stamp}_{index}",
            category=QuestCategory.DAILY,
            reward_gold=DAILY_BASE_GOLD,
            reward_exp=DAILY_BASE_EXP,
        )
        for index in range(DAILY_QUEST_COUNT)
    ]


def _roll_weeklies(level: int, now: datetime, dice: DiceRoller) -> list[Quest]:
    stamp = _stamp(now)
    return [
        Quest.from_template(
            dice.choice(WEEKLY_QUEST_POOL),
            quest_id=f"w_{stamp}_{index}",
            category=QuestCategory.WEEKLY,
            reward_gold=WEEKLY_BASE_GOLD,
            reward_exp=WEEKLY_BASE_EXP,
            reward_item=generate_random_item(level, ItemRarity.UNCOMMON, roller=dice),
        )
        for index in range(WEEKLY_QUEST_COUNT)
    ]


def _sync_events(quests: list[Quest], completed_ids: list[str], now: datetime) -> list[Quest]:
    live = {event.quest_id for event in EVENT_DEFINITIONS if event.matches(now.date())}
    synced = [
        quest for quest in quests if quest.category != QuestCategory.EVENT or quest.id in live
    ]
    active_ids = {quest.id for quest in synced}
    for event in EVENT_DEFINITIONS:
        if event.quest_id in live and event.quest_id not in active_ids and event.quest_id not in completed_ids:
            synced.append(
                Quest.from_template(
                    event.template,
                    quest_id=event.quest_id,
                    category=QuestCategory.EVENT,
                    reward_gold=EVENT_BASE_GOLD,
                    reward_exp=EVENT_BASE_EXP,
                    reward_item=event.reward_item,
                )
            )
    return synced


def refresh_quests(
    state: GameState,
    now: datetime,
    *,
    roller: DiceRoller | None = None,
) -> GameState:
    """Apply the daily, weekly and event reset policy.

    Dailies are rerolled on a new calendar day or when none are active; a
    day change that leaves five or more dailies unfinished breaks the daily
    streak. Weeklies are rerolled on a Monday rollover, after seven days or
    when none are active. Event quests appear on their calendar day unless
    already completed and leave the board once the day has passed. Ids of
    rerolled dailies and weeklies are dropped from ``completed_quest_ids``;
    one-time and event ids are kept for good.

    Args:
        state: Current state.
        now: Wall-clock time, timezone aware.
        roller: Random source for quest selection.

    Returns:
        The updated state, or ``state`` itself when nothing changed.
    """
    if state.character is None:
        return state
    dice = get_roller(roller)
    character = state.character
    quests = list(state.active_quests)
    update: dict = {}

    dailies = state.quests_in(QuestCategory.DAILY)
    if not dailies or is_new_day(state.last_daily_reset, now):
        unfinished = sum(1 for quest in dailies if not quest.completed)
        if dailies and unfinished >= DAILY_STREAK_RESET_THRESHOLD and character.daily_streak:
            logger.info("Daily streak broken", unfinished=unfinished, streak=character.daily_streak)
            character = character.model_copy(update={"daily_streak": 0})
            update["character"] = character
        quests = [quest for quest in quests if quest.category != QuestCategory.DAILY]
        quests.extend(_roll_dailies(now, dice))
        update["last_daily_reset"] = now

    if not state.quests_in(QuestCategory.WEEKLY) or is_new_week(state.last_weekly_reset, now):
        quests = [quest for quest in quests if quest.category != QuestCategory.WEEKLY]
        quests.extend(_roll_weeklies(character.level, now, dice))
        update["last_weekly_reset"] = now

    rolled = {QuestCategory.DAILY, QuestCategory.WEEKLY}
    retired = {quest.id for quest in state.active_quests if quest.category in rolled} - {quest.id for quest in quests}
    if retired:
        kept = [quest_id for quest_id in state.completed_quest_ids if quest_id not in retired]
        if len(kept) != len(state.completed_quest_ids):
            update["completed_quest_ids"] = kept

    synced = _sync_events(quests, state.completed_quest_ids, now)
    if [quest.id for quest in synced] != [quest.id for quest in state.active_quests]:
        update["active_quests"] = synced

    if not update:
        return state
    logger.debug("Quests refreshed", fields=sorted(update))
    return state.model_copy(update=update)


def refresh_onetime_quests(
    state: GameState,
    now: datetime,
    *,
    roller: DiceRoller | None = None,
) -> ActionResult:
    """Add a batch of one-time quests.

    At most five may be active; a batch adds up to three and is locked for
    two hours after the latest one-time completion.
    """
    character = state.require_character()
    active = len(state.quests_in(QuestCategory.ONETIME))
    if active >= ONETIME_MAX_ACTIVE:
        return ActionResult.fail(state, "The quest board is full")
    last = state.last_onetime_completion_at
    cooldown = timedelta(hours=ONETIME_COOLDOWN_HOURS)
    if last is not None and now - last < cooldown:
        minutes = int((last + cooldown - now).total_seconds() // 60) + 1
        return ActionResult.fail(state, f"New quests in {minutes} min")

    dice = get_roller(roller)
    stamp = _stamp(now)
    count = min(ONETIME_BATCH_SIZE, ONETIME_MAX_ACTIVE - active)
    added: list[Quest] = []
    for index, template in enumerate(dice.sample(ONETIME_QUEST_POOL, count)):
        item = None
        if template.difficulty >= ONETIME_ITEM_MIN_DIFFICULTY:
            item = generate_random_item(character.level, template.rarity, roller=dice)
        added.append(
            Quest.from_template(
                template,
                quest_id=f"ot_{stamp}_{index}",
                category=QuestCategory.ONETIME,
                reward_gold=ONETIME_GOLD_PER_DIFFICULTY * template.difficulty,
                reward_exp=ONETIME_EXP_PER_DIFFICULTY * template.difficulty,
                reward_item=item,
            )
        )

    refreshed = state.model_copy(update={"active_quests": [*state.active_quests, *added]})
    return ActionResult.ok(refreshed, f"{len(added)} new one-time quests")


# =============================================================================
# Completion
# =============================================================================


def _with_mood_modifier(dungeon_state: DungeonState, mood: Mood) -> DungeonState:
    buff = MOOD_BUFFS.get(mood)
    debuff = MOOD_DEBUFFS.get(mood)
    if buff is None and debuff is None:
        return dungeon_state
    # One modifier per name; a repeated mood refreshes it.
    buffs = [active for active in dungeon_state.active_buffs if buff is None or active.name != buff.name]
    debuffs = [active for active in dungeon_state.active_debuffs if debuff is None or active.name != debuff.name]
    if buff is not None:
        buffs.append(buff)
    if debuff is not None:
        debuffs.append(debuff)
    return dungeon_state.model_copy(update={"active_buffs": buffs, "active_debuffs": debuffs})


def _apply_streak(character: Character, quest: Quest, log: list[str]) -> Character:
    honesty = character.honesty
    streak = character.daily_streak
    if quest.category == QuestCategory.DAILY:
        streak += 1
        if streak % STREAK_BONUS_INTERVAL == 0:
            honesty += STREAK_HONESTY_BONUS
            log.append(f"{streak}-day streak! +{STREAK_HONESTY_BONUS} honesty")
    honesty = min(MAX_HONESTY, honesty + COMPLETION_HONESTY_BONUS)
    return character.model_copy(update={"daily_streak": streak, "honesty": honesty})


def complete_quest(
    state: GameState,
    quest_id: str,
    mood: Mood,
    *,
    honest: bool,
    reflection: str = "",
    now: datetime,
) -> ActionResult:
    """Complete a quest after the player declares honest completion.

    Rewards are scaled by category, mood, honesty and level. A reward item
    that cannot fit rejects the whole completion. The reported mood grants a
    buff or debuff for the next fight.

    Args:
        state: Current state.
        quest_id: Active quest to complete.
        mood: Mood reported in the reflection.
        honest: The honest-completion confirmation.
        reflection: Free text stored in the journal.
        now: Completion time.

    Returns:
        ActionResult with the rewarded state, or a rejection.
    """
    if not honest:
        return ActionResult.fail(state, "Confirm that you honestly completed the quest")
    character = state.require_character()
    quest = state.find_quest(quest_id)
    if quest is None:
        return ActionResult.fail(state, "Quest not found")
    if quest.completed:
        return ActionResult.fail(state, "Quest is already completed")
    if quest.reward_item is not None and not can_add_item(character, quest.reward_item):
        return ActionResult.fail(state, "Inventory is full, free a slot to claim the reward")

    gold = quest_gold(quest.reward_gold, quest.category, mood, character.honesty, character.level)
    exp = quest_exp(quest.reward_exp, quest.category, mood, character.level)
    reputation = dict(character.reputation)
    gained = reputation_gain(quest.reputation_type, character.honesty, mood)
    reputation[quest.reputation_type] = reputation.get(quest.reputation_type, 0) + gained
    log = [f"+{gold} gold, +{exp} XP, +{gained} {quest.reputation_type.value}"]

    entry = JournalEntry(
        date=now,
        text=f"Completed: {quest.title} ({quest.category.value})",
        mood=mood,
        reflection=reflection,
        quest_id=quest.id,
    )
    updated = character.model_copy(
        update={
            "gold": character.gold + gold,
            "current_exp": character.current_exp + exp,
            "reputation": reputation,
            "journal": [entry, *character.journal],
        }
    )
    if quest.reward_item is not None:
        updated = add_item_to_inventory(updated, quest.reward_item)
        log.append(f"Reward: {quest.reward_item.name}")
    updated = _apply_streak(updated, quest, log)
    updated, levels = apply_level_ups(updated)
    for level in levels:
        log.append(f"Level up! You are now level {level}")

    update: dict = {
        "character": updated,
        "dungeon_state": _with_mood_modifier(state.dungeon_state, mood),
        "completed_quest_ids": [*state.completed_quest_ids, quest.id]
        if quest.id not in state.completed_quest_ids
        else state.completed_quest_ids,
    }
    if quest.category == QuestCategory.ONETIME:
        update["active_quests"] = [active for active in state.active_quests if active.id != quest.id]
        update["last_onetime_completion_at"] = now
    else:
        done = quest.model_copy(update={"completed": True, "completed_at": now})
        update["active_quests"] = [done if active.id == quest.id else active for active in state.active_quests]

    logger.info("Quest completed", quest=quest.id, category=quest.category.value, gold=gold, exp=exp)
    return ActionResult.ok(state.model_copy(update=update), f"Completed! +{gold} gold +{exp} XP", log)


__all__ = [
    "MOOD_BUFFS",
    "MOOD_DEBUFFS",
    "is_new_day",
    "is_new_week",
    "refresh_quests",
    "refresh_onetime_quests",
    "complete_quest",
]
