"""Combat scheduling on the asyncio event loop.

Enemy turns resolve after a short delay and auto-combat plays the player's
turns on a fixed cadence. Every scheduled action carries a guard token, the
``(mob id, turn)`` pair seen when it was scheduled, and is discarded if the
session state has moved on by the time it runs.
"""

from __future__ import annotations

import asyncio
from functools import partial
from typing import Callable

from lifequest.core.config import get_settings
from lifequest.core.constants import AUTO_COMBAT_POTION_THRESHOLD
from lifequest.core.logging import get_logger
from lifequest.engine.combat import enemy_turn, find_healing_potion, player_attack, use_potion
from lifequest.engine.session import Action, GameSession
from lifequest.models.enums import CombatTurn
from lifequest.models.game_state import ActionResult, GameState


logger = get_logger(__name__)

GuardToken = tuple[str, CombatTurn]


def guard_token(state: GameState) -> GuardToken | None:
    """Identity of the current encounter step, None outside an active fight."""
    dungeon_state = state.dungeon_state
    if not dungeon_state.in_combat or dungeon_state.current_mob is None:
        return None
    return dungeon_state.current_mob.id, dungeon_state.turn


class CombatScheduler:
    """Drive enemy turns and auto-combat for one session.

    Must be used from code running inside an event loop.

    Example:
        >>> scheduler = CombatScheduler(session)
        >>> scheduler.attach()
        >>> scheduler.start_auto_combat()
    """

    def __init__(
        self,
        session: GameSession,
        *,
        auto_delay: float | None = None,
        enemy_delay: float | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            session: Session whose state is read and updated.
            auto_delay: Seconds between auto-combat actions.
            enemy_delay: Seconds before an enemy turn resolves.
        """
        settings = get_settings().game
        self.session = session
        self.auto_delay = auto_delay if auto_delay is not None else settings.auto_combat_delay
        self.enemy_delay = enemy_delay if enemy_delay is not None else settings.enemy_turn_delay
        self._auto_task: asyncio.Task[None] | None = None
        self._enemy_handle: asyncio.TimerHandle | None = None
        self._unsubscribe: Callable[[], None] | None = None
        self.log: list[str] = []

    @property
    def auto_enabled(self) -> bool:
        """Whether auto-combat is running."""
        return self._auto_task is not None and not self._auto_task.done()

    @property
    def enemy_turn_pending(self) -> bool:
        """Whether an enemy turn is scheduled."""
        return self._enemy_handle is not None

    def _dispatch(self, action: Action) -> ActionResult:
        result = self.session.dispatch(action)
        self.log.extend(result.log)
        return result

    # =========================================================================
    # Enemy Turns
    # =========================================================================

    def attach(self) -> None:
        """Schedule an enemy turn whenever the session enters ENEMY_TURN."""
        if self._unsubscribe is None:
            self._unsubscribe = self.session.subscribe(self._on_state_change)

    def detach(self) -> None:
        """Stop following session changes."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_state_change(self, state: GameState) -> None:
        if state.dungeon_state.turn == CombatTurn.ENEMY_TURN and not self.auto_enabled:
            self.schedule_enemy_turn()

    def schedule_enemy_turn(self) -> bool:
        """Resolve the pending enemy turn after ``enemy_delay`` seconds.

        Returns:
            True if a turn was scheduled.
        """
        token = guard_token(self.session.state)
        if token is None or token[1] != CombatTurn.ENEMY_TURN:
            return False
        if self._enemy_handle is not None:
            self._enemy_handle.cancel()
        self._enemy_handle = asyncio.get_running_loop().call_later(
            self.enemy_delay, self._run_enemy_turn, token
        )
        return True

    def _run_enemy_turn(self, token: GuardToken) -> None:
        self._enemy_handle = None
        if guard_token(self.session.state) != token:
            logger.debug("Stale enemy turn discarded", mob_id=token[0])
            return
        self._dispatch(partial(enemy_turn, roller=self.session.roller))

    # =========================================================================
    # Auto-Combat
    # =========================================================================

    def start_auto_combat(self) -> asyncio.Task[None]:
        """Start auto-combat, replacing any running loop."""
        self.stop_auto_combat()
        if self._enemy_handle is not None:
            self._enemy_handle.cancel()
            self._enemy_handle = None
        self._auto_task = asyncio.get_running_loop().create_task(self._auto_loop())
        logger.info("Auto-combat started", delay=self.auto_delay)
        return self._auto_task

    def stop_auto_combat(self) -> None:
        """Cancel auto-combat if it is running."""
        if self._auto_task is not None and not self._auto_task.done():
            self._auto_task.cancel()
        self._auto_task = None

    def cancel_all(self) -> None:
        """Cancel every scheduled action and stop following the session."""
        self.stop_auto_combat()
        if self._enemy_handle is not None:
            self._enemy_handle.cancel()
            self._enemy_handle = None
        self.detach()

    def _auto_step(self, state: GameState) -> None:
        if state.dungeon_state.turn == CombatTurn.ENEMY_TURN:
            self._dispatch(partial(enemy_turn, roller=self.session.roller))
            return
        character = state.require_character()
        if character.hp_fraction < AUTO_COMBAT_POTION_THRESHOLD and find_healing_potion(character) is not None:
            if self._dispatch(use_potion).success:
                return
        self._dispatch(partial(player_attack, roller=self.session.roller))

    async def _auto_loop(self) -> None:
        """Act every ``auto_delay`` seconds until the fight ends."""
        try:
            while True:
                token = guard_token(self.session.state)
                if token is None:
                    logger.info("Auto-combat finished", turn=self.session.state.dungeon_state.turn.value)
                    return
                await asyncio.sleep(self.auto_delay)
                if guard_token(self.session.state) != token:
                    logger.debug("Stale auto-combat step discarded", mob_id=token[0])
                    continue
                self._auto_step(self.session.state)
        except asyncio.CancelledError:
            logger.info("Auto-combat cancelled")
            raise


__all__ = [
    "GuardToken",
    "guard_token",
    "CombatScheduler",
]
