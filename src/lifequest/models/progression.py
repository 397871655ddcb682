"""Progression formulas.

Pure functions for the XP curve, level-ups, quest reward scaling,
reputation gain and shop pricing. Nothing here touches a GameState.
"""

from __future__ import annotations

import math

from lifequest.core.constants import (
    MAX_HP_PER_LEVEL,
    QUEST_GOLD_SCALING,
    SELL_PRICE_FRACTION,
)
from lifequest.core.logging import get_logger
from lifequest.models.catalog import recipes_unlocked_at
from lifequest.models.character import Character
from lifequest.models.enums import Mood, QuestCategory, ReputationType


logger = get_logger(__name__)


# =============================================================================
# Experience Curve
# =============================================================================


def xp_to_level(level: int) -> int:
    """Experience needed to advance past ``level``.

    ``floor(150 * L + 50 * L ** 1.3)``; levels below 1 are clamped to 1.
    """
    level = max(1, level)
    return math.floor(150 * level + 50 * level**1.3)


def stat_points_for_level(level: int) -> int:
    """Stat points granted on reaching ``level``."""
    return 5 + max(1, level) // 3


def apply_level_ups(character: Character) -> tuple[Character, list[int]]:
    """Apply every level-up the character's experience pays for.

    Loops so a single large reward can grant several levels. Each level adds
    max HP, fully heals, grants stat points and unlocks recipes.

    Args:
        character: Character after experience was added.

    Returns:
        Tuple of (updated character, levels reached in order).
    """
    level = character.level
    exp = character.current_exp
    max_hp = character.max_hp
    stat_points = character.stat_points
    reached: list[int] = []

    while exp >= xp_to_level(level):
        exp -= xp_to_level(level)
        level += 1
        max_hp += MAX_HP_PER_LEVEL
        stat_points += stat_points_for_level(level)
        reached.append(level)

    if not reached:
        return character, reached

    unlocked = list(character.unlocked_recipes)
    for recipe_id in recipes_unlocked_at(level):
        if recipe_id not in unlocked:
            unlocked.append(recipe_id)

    logger.info("Level up", character=character.name, level=level, levels_gained=len(reached))
    updated = character.model_copy(
        update={
            "level": level,
            "current_exp": exp,
            "max_hp": max_hp,
            "hp": max_hp,
            "stat_points": stat_points,
            "unlocked_recipes": unlocked,
        }
    )
    return updated, reached


# =============================================================================
# Quest Rewards
# =============================================================================

MOOD_MULTIPLIERS: dict[Mood, float] = {
    Mood.INSPIRED: 1.2,
    Mood.REGRET: 0.8,
    Mood.TIRED: 1.0,
    Mood.NEUTRAL: 1.0,
}

REPUTATION_BASE: dict[ReputationType, int] = {
    ReputationType.HEROISM: 5,
    ReputationType.DISCIPLINE: 3,
    ReputationType.CREATIVITY: 5,
}


def quest_reward_scaling(level: int) -> float:
    """Level scaling applied to quest rewards (``1.15 ** level``)."""
    return QUEST_GOLD_SCALING**level


def honesty_multiplier(honesty: int) -> float:
    """Gold multiplier from honesty: 0.8 at 0, 1.0 at 100."""
    return 0.8 + honesty / 500


def mood_multiplier(mood: Mood) -> float:
    """Reward multiplier for the mood reported at completion."""
    return MOOD_MULTIPLIERS[mood]


def quest_gold(base: int, category: QuestCategory, mood: Mood, honesty: int, level: int) -> int:
    """Final gold for a completed quest."""
    weight = 1 + category.reward_weight / 5
    return math.floor(
        base * weight * mood_multiplier(mood) * honesty_multiplier(honesty) * quest_reward_scaling(level)
    )


def quest_exp(base: int, category: QuestCategory, mood: Mood, level: int) -> int:
    """Final experience for a completed quest."""
    weight = 1 + category.reward_weight / 10
    return math.floor(base * weight * mood_multiplier(mood) * quest_reward_scaling(level))


def reputation_gain(reputation_type: ReputationType, honesty: int, mood: Mood) -> int:
    """Reputation earned: ``floor(base * (1 + honesty/100) * mood)``."""
    return math.floor(REPUTATION_BASE[reputation_type] * (1 + honesty / 100) * mood_multiplier(mood))


# =============================================================================
# Prices
# =============================================================================


def sell_price(price: int) -> int:
    """Gold received when selling one unit."""
    return math.floor(price * SELL_PRICE_FRACTION)


def discounted_price(price: int, discount_pct: int) -> int:
    """Shop price after a percentage discount."""
    return math.floor(price * (1 - discount_pct / 100))


__all__ = [
    "MOOD_MULTIPLIERS",
    "REPUTATION_BASE",
    "xp_to_level",
    "stat_points_for_level",
    "apply_level_ups",
    "quest_reward_scaling",
    "honesty_multiplier",
    "mood_multiplier",
    "quest_gold",
    "quest_exp",
    "reputation_gain",
    "sell_price",
    "discounted_price",
]
