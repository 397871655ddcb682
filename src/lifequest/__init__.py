"""LifeQuest - gamified life-RPG progression and combat engine.

Real-life quests advance an RPG character who also fights procedurally
generated dungeon mobs, trades and crafts. The engine is a set of pure
functions over an immutable GameState, plus the session, scheduling and
storage collaborators needed to run it.

Example:
    >>> from lifequest import ClassType, Mood, complete_quest, create_character, process_game_tick, utcnow
    >>>
    >>> state = create_character("Aria", ClassType.SCOUT)
    >>> state = process_game_tick(state)
    >>> daily = state.active_quests[0]
    >>> result = complete_quest(state, daily.id, Mood.INSPIRED, honest=True, now=utcnow())
    >>> print(result.message)

Modules:
    core: Configuration, logging, constants and exceptions.
    models: Pydantic V2 models, catalogs and progression formulas.
    engine: Game rules, session and asyncio combat scheduling.
    storage: SQLite key-value store, save manager and debounced saver.
"""

from __future__ import annotations

# Core
from lifequest.core.config import Settings, get_settings
from lifequest.core.exceptions import InvalidSaveError, LifeQuestError, ValidationError
from lifequest.core.logging import configure_logging, get_logger

# Models
from lifequest.models import (
    ActionResult,
    Character,
    ClassType,
    GameState,
    Item,
    Mood,
    QuestCategory,
    StatBonus,
    utcnow,
)

# Engine
from lifequest.engine import (
    CombatScheduler,
    GameSession,
    complete_quest,
    create_character,
    enter_dungeon,
    player_attack,
    process_game_tick,
    use_potion,
)

# Storage
from lifequest.storage import DebouncedSaver, KeyValueStore, SaveManager


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "LifeQuestError",
    "ValidationError",
    "InvalidSaveError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "ActionResult",
    "Character",
    "ClassType",
    "GameState",
    "Item",
    "Mood",
    "QuestCategory",
    "StatBonus",
    "utcnow",
    # Engine
    "CombatScheduler",
    "GameSession",
    "complete_quest",
    "create_character",
    "enter_dungeon",
    "player_attack",
    "process_game_tick",
    "use_potion",
    # Storage
    "DebouncedSaver",
    "KeyValueStore",
    "SaveManager",
]
