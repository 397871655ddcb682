"""Root game state models.

Models:
    ShopState: Rotating shop stock and discounts.
    GameState: The versioned root aggregate that is saved and loaded.
    ActionResult: Outcome of a player action.

Every engine operation takes a GameState and returns a new one; nothing
mutates a GameState in place.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import Field

from lifequest.core.constants import CURRENT_SAVE_VERSION
from lifequest.core.exceptions import InvalidGameStateError
from lifequest.models.base import EPOCH, GameModel
from lifequest.models.character import Character
from lifequest.models.dungeon import DungeonState
from lifequest.models.enums import QuestCategory
from lifequest.models.items import Item
from lifequest.models.quests import Quest


class ShopState(GameModel):
    """Shop stock. Listed items are templates until bought.

    Attributes:
        items: Items on sale.
        discounts: Percent discount per listed item id.
        last_update: When the stock was rolled.
        visit_streak: Consecutive refreshes without a purchase.
    """

    items: list[Item] = Field(default_factory=list)
    discounts: dict[str, int] = Field(default_factory=dict)
    last_update: datetime = Field(default=EPOCH)
    visit_streak: Annotated[int, Field(ge=0)] = Field(default=0)


class GameState(GameModel):
    """The complete, versioned game state.

    Attributes:
        version: Save schema version.
        character: Player character, None before creation.
        last_daily_reset: When dailies were last rolled.
        last_weekly_reset: When weeklies were last rolled.
        shop_state: Shop stock.
        dungeon_state: Encounter state.
        dungeon_floor: Global floor counter.
        current_dungeon_id: Dungeon being explored, None outside.
        active_quests: Quests on the board.
        completed_quest_ids: Ids of completed quests still on the board, plus
            every completed one-time and event quest.
        last_onetime_completion_at: Latest one-time quest completion.
        last_regen_at: Last time out-of-combat regeneration was applied.
    """

    version: str = Field(default=CURRENT_SAVE_VERSION)
    character: Character | None = Field(default=None)
    last_daily_reset: datetime = Field(default=EPOCH)
    last_weekly_reset: datetime = Field(default=EPOCH)
    shop_state: ShopState = Field(default_factory=ShopState)
    dungeon_state: DungeonState = Field(default_factory=DungeonState)
    dungeon_floor: Annotated[int, Field(ge=1)] = Field(default=1)
    current_dungeon_id: str | None = Field(default=None)
    active_quests: list[Quest] = Field(default_factory=list)
    completed_quest_ids: list[str] = Field(default_factory=list)
    last_onetime_completion_at: datetime | None = Field(default=None)
    last_regen_at: datetime = Field(default=EPOCH)

    def require_character(self) -> Character:
        """Return the character or fail loudly.

        Raises:
            InvalidGameStateError: If no character has been created.
        """
        if self.character is None:
            raise InvalidGameStateError(
                "No character in game state",
                current_state="no_character",
                expected_states=["character_created"],
            )
        return self.character

    def with_character(self, character: Character) -> GameState:
        """Return a copy with the character replaced."""
        return self.model_copy(update={"character": character})

    def quests_in(self, category: QuestCategory) -> list[Quest]:
        """Active quests of one category."""
        return [quest for quest in self.active_quests if quest.category == category]

    def find_quest(self, quest_id: str) -> Quest | None:
        """Active quest by id."""
        return next((quest for quest in self.active_quests if quest.id == quest_id), None)


class ActionResult(GameModel):
    """Outcome of a player action.

    Failed actions return the untouched input state with ``success=False``.

    Attributes:
        state: State after the action.
        success: Whether the action took effect.
        message: Short notification for the player.
        log: Combat or event log lines, oldest first.
    """

    state: GameState
    success: bool = Field(default=True)
    message: str = Field(default="")
    log: list[str] = Field(default_factory=list)

    @classmethod
    def ok(cls, state: GameState, message: str = "", log: list[str] | None = None) -> ActionResult:
        """Successful result."""
        return cls(state=state, success=True, message=message, log=log or [])

    @classmethod
    def fail(cls, state: GameState, message: str) -> ActionResult:
        """Rejected action; ``state`` must be the unchanged input."""
        return cls(state=state, success=False, message=message)


__all__ = [
    "ShopState",
    "GameState",
    "ActionResult",
]
