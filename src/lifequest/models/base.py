"""Shared pydantic configuration for LifeQuest models.

Every persisted model is frozen and uses camelCase aliases so the JSON
written to storage keeps the historical save shape (``maxHp``,
``shopState``, ``levelReq``). Python code uses snake_case names; pass
``by_alias=True`` when dumping for storage.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
"""Timestamp used for "never happened" markers."""


class GameModel(BaseModel):
    """Immutable base model with camelCase serialization aliases.

    Updates go through ``model_copy(update=...)``; nested collections are
    always rebuilt rather than mutated so older snapshots stay intact.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        use_enum_values=False,
    )

    def to_storage(self) -> dict:
        """Dump to a JSON-compatible dict using storage aliases."""
        return self.model_dump(mode="json", by_alias=True)


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


__all__ = [
    "EPOCH",
    "GameModel",
    "utcnow",
]
