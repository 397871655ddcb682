"""Quest models.

Quests carry base rewards; level, honesty, mood and category scaling are
applied when the quest is completed.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import Field

from lifequest.models.base import GameModel
from lifequest.models.enums import ItemRarity, QuestCategory, ReputationType
from lifequest.models.items import Item


class QuestTemplate(GameModel):
    """Static quest text and weighting drawn from a quest pool."""

    title: str
    description: str
    reputation_type: ReputationType
    difficulty: Annotated[int, Field(ge=1, le=6)]
    rarity: ItemRarity


class Quest(GameModel):
    """An active or completed quest.

    Attributes:
        id: Quest id; event quests use stable ids so they fire once.
        title: Short title.
        description: What to do in real life.
        category: DAILY, WEEKLY, ONETIME or EVENT.
        reputation_type: Track credited on completion.
        difficulty: 1 (trivial) to 6 (life goal).
        rarity: Display rarity.
        reward_gold: Base gold before completion scaling.
        reward_exp: Base experience before completion scaling.
        reward_item: Fixed item granted on completion.
        completed: Whether the quest is done.
        completed_at: When it was completed.
    """

    id: str
    title: str
    description: str = Field(default="")
    category: QuestCategory
    reputation_type: ReputationType = Field(default=ReputationType.HEROISM)
    difficulty: Annotated[int, Field(ge=1, le=6)] = Field(default=1)
    rarity: ItemRarity = Field(default=ItemRarity.COMMON)
    reward_gold: Annotated[int, Field(ge=0)] = Field(default=0)
    reward_exp: Annotated[int, Field(ge=0)] = Field(default=0)
    reward_item: Item | None = Field(default=None)
    completed: bool = Field(default=False)
    completed_at: datetime | None = Field(default=None)

    @classmethod
    def from_template(
        cls,
        template: QuestTemplate,
        *,
        quest_id: str,
        category: QuestCategory,
        reward_gold: int,
        reward_exp: int,
        reward_item: Item | None = None,
    ) -> Quest:
        """Build an active quest from a pool template."""
        return cls(
            id=quest_id,
            title=template.title,
            description=template.description,
            category=category,
            reputation_type=template.reputation_type,
            difficulty=template.difficulty,
            rarity=template.rarity,
            reward_gold=reward_gold,
            reward_exp=reward_exp,
            reward_item=reward_item,
        )


__all__ = [
    "QuestTemplate",
    "Quest",
]
