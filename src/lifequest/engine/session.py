"""Game session: the single owner of the authoritative GameState.

Every mutation goes through ``dispatch``: the action reads the current
state, returns a new one, and the session swaps it in and notifies
listeners. Nothing is accepted before ``initialize`` has run the load-time
luxury tax and first tick.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable

from lifequest.core.exceptions import InvalidGameStateError
from lifequest.core.logging import get_logger
from lifequest.engine.dice import DiceRoller, get_roller
from lifequest.engine.lifecycle import apply_luxury_tax, process_game_tick
from lifequest.models.game_state import ActionResult, GameState


logger = get_logger(__name__)

Listener = Callable[[GameState], None]
Action = Callable[[GameState], ActionResult]


def local_now() -> datetime:
    """Current local time, timezone aware."""
    return datetime.now().astimezone()


class GameSession:
    """Hold the current state and serialize every change to it.

    Attributes:
        roller: Random source passed to ticks.
    """

    def __init__(
        self,
        *,
        roller: DiceRoller | None = None,
        clock: Callable[[], datetime] = local_now,
    ) -> None:
        """Initialize an empty, not yet ready session.

        Args:
            roller: Random source; defaults to the process roller.
            clock: Wall clock used for ticks.
        """
        self.roller = get_roller(roller)
        self._clock = clock
        self._state = GameState()
        self._listeners: list[Listener] = []
        self._ready = False

    @property
    def state(self) -> GameState:
        """The authoritative state."""
        return self._state

    @property
    def ready(self) -> bool:
        """Whether load-time initialization has completed."""
        return self._ready

    def initialize(self, state: GameState) -> list[str]:
        """Adopt a loaded or newly created state.

        Applies the luxury tax and the first tick before the session starts
        accepting actions.

        Returns:
            Notifications produced during initialization.
        """
        messages: list[str] = []
        taxed = apply_luxury_tax(state)
        if taxed.message:
            messages.append(taxed.message)
        ticked = process_game_tick(taxed.state, self._clock(), roller=self.roller)
        self._ready = True
        self._swap(ticked, force=True)
        logger.info(
            "Session initialized",
            character=ticked.character.name if ticked.character else None,
            quests=len(ticked.active_quests),
        )
        return messages

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called after each swap.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _swap(self, state: GameState, *, force: bool = False) -> None:
        if state is self._state and not force:
            return
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    def _require_ready(self) -> None:
        if not self._ready:
            raise InvalidGameStateError(
                "Session is not initialized",
                current_state="loading",
                expected_states=["ready"],
            )

    def dispatch(self, action: Action) -> ActionResult:
        """Run an action against the current state and adopt its result.

        Raises:
            InvalidGameStateError: If the session is not initialized.
        """
        self._require_ready()
        result = action(self._state)
        if result.success:
            self._swap(result.state)
        return result

    def tick(self) -> GameState:
        """Run a game tick at the current wall-clock time.

        Raises:
            InvalidGameStateError: If the session is not initialized.
        """
        self._require_ready()
        self._swap(process_game_tick(self._state, self._clock(), roller=self.roller))
        return self._state


__all__ = [
    "Listener",
    "Action",
    "local_now",
    "GameSession",
]
