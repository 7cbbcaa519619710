"""
dynastysim/session.py
~~~~~~~~~~~~~~~~~~~~~
``GameSession`` owns the current ``GameState`` and is the single writer.

The tick and every player action run under one lock, each against a
private copy of the state. The copy is published only when the operation
finishes, so a reader calling ``session.state`` always sees a whole week
and never a partly applied action. Published states are never mutated
again.

Autosaves are handed to a daemon thread and never block the next tick.
"""

from __future__ import annotations

import logging
import random
import threading
from typing import Callable

from dynastysim import actions
from dynastysim.config_loader import SimulationConfig
from dynastysim.genesis import start_new_game
from dynastysim.models import VALID_SPEEDS, CultureId, GameState, Sex
from dynastysim.persistence import SaveStore
from dynastysim.simulation import Simulation, TickResult

logger = logging.getLogger(__name__)


def tick_interval_ms(speed: int) -> float | None:
    """Milliseconds between ticks at ``speed``; None while paused."""
    if speed not in VALID_SPEEDS:
        raise ValueError(f"speed must be one of {VALID_SPEEDS} (got {speed!r}).")
    if speed == 0:
        return None
    return 1000 / speed


class GameSession:
    def __init__(
        self,
        config: SimulationConfig | None = None,
        store: SaveStore | None = None,
        rng=None,
    ) -> None:
        self.config = config or SimulationConfig()
        self.store = store or SaveStore()
        self.rng = rng or random
        self.simulation = Simulation(self.config, self.rng)
        self._state: GameState | None = None
        self._lock = threading.Lock()
        self._autosave_threads: list[threading.Thread] = []

    # ------------------------------------------------------------------
    #  State access
    # ------------------------------------------------------------------

    @property
    def state(self) -> GameState | None:
        """The latest published snapshot. Treat it as read-only."""
        return self._state

    @property
    def is_running(self) -> bool:
        state = self._state
        return state is not None and state.speed > 0 and not state.game_over

    def _apply(self, action: Callable[[GameState], bool]) -> bool:
        """Run ``action`` on a copy and publish it only on success."""
        with self._lock:
            if self._state is None:
                return False
            draft = self._state.model_copy(deep=True)
            if not action(draft):
                return False
            self._state = draft
            return True

    # ------------------------------------------------------------------
    #  Lifecycle
    # ------------------------------------------------------------------

    def start_new_game(self, dynasty_name: str, ruler_name: str, culture: CultureId, sex: Sex) -> GameState:
        state = start_new_game(dynasty_name, ruler_name, culture, sex, self.config, self.rng)
        with self._lock:
            self._state = state
        return state

    def load_game(self) -> bool:
        loaded = self.store.load()
        if loaded is None:
            return False
        with self._lock:
            self._state = loaded
        logger.info("Loaded save at week %d.", loaded.current_week)
        return True

    def save_game(self) -> None:
        state = self._state
        if state is not None:
            self.store.save(state)

    def has_save(self) -> bool:
        return self.store.has_save()

    def delete_save(self) -> None:
        self.store.delete()

    def exit_game(self) -> None:
        with self._lock:
            self._state = None

    def set_speed(self, speed: int) -> bool:
        if speed not in VALID_SPEEDS:
            return False

        def _set(state: GameState) -> bool:
            state.speed = speed
            return True

        return self._apply(_set)

    # ------------------------------------------------------------------
    #  Time
    # ------------------------------------------------------------------

    def tick(self) -> TickResult | None:
        """Advance one week. Returns None when no game is loaded."""
        with self._lock:
            if self._state is None:
                return None
            result = self.simulation.advance_week(self._state)
            self._state = result.state
        if result.autosave_requested:
            self._autosave(result.state)
        return result

    def _autosave(self, state: GameState) -> None:
        def _run() -> None:
            try:
                self.store.save(state)
            except OSError as exc:
                logger.error("Autosave at week %d failed: %s", state.current_week, exc)

        thread = threading.Thread(target=_run, daemon=True)
        self._autosave_threads = [t for t in self._autosave_threads if t.is_alive()]
        self._autosave_threads.append(thread)
        thread.start()

    def wait_for_autosaves(self, timeout: float | None = None) -> None:
        for thread in list(self._autosave_threads):
            thread.join(timeout)

    # ------------------------------------------------------------------
    #  Player actions
    # ------------------------------------------------------------------

    def arrange_marriage(self, a_id: str, b_id: str, matrilineal: bool = False) -> bool:
        return self._apply(lambda s: actions.arrange_marriage(s, a_id, b_id, matrilineal, self.config))

    def invite_to_court(self, character_id: str) -> bool:
        return self._apply(lambda s: actions.invite_to_court(s, character_id, self.config, self.rng))

    def banish_from_court(self, character_id: str) -> bool:
        return self._apply(lambda s: actions.banish_from_court(s, character_id))

    def grant_title(self, character_id: str, title_id: str) -> bool:
        return self._apply(lambda s: actions.grant_title(s, character_id, title_id))

    def resolve_event(self, event_id: str, choice_index: int) -> bool:
        return self._apply(lambda s: actions.resolve_event(s, event_id, choice_index, self.config))
