"""TurnController: a stateful game session on top of the pure rules functions.

Holds the current snapshot plus every earlier one (for undo), and serialises
access with a single lock so one session can be shared between threads.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from creativechess.config import GameConfig
from creativechess.game import rules
from creativechess.game.errors import TurnResult
from creativechess.game.notation import Command, apply_command
from creativechess.game.registry import ActionId
from creativechess.game.state import GameState

logger = logging.getLogger("creativechess.controller")


class TurnController:
    """Drives one game: applies moves and actions, keeps history, undoes."""

    def __init__(self, seed: Optional[int] = None, config: Optional[GameConfig] = None,
                 fen: Optional[str] = None):
        self._lock = threading.Lock()
        self._config = config
        self._fen = fen
        self._state = rules.new_game(seed=seed, config=config, fen=fen)
        self._snapshots: list[GameState] = []

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def can_undo(self) -> bool:
        return bool(self._snapshots)

    def _commit(self, result: TurnResult) -> TurnResult:
        if result.ok:
            self._snapshots.append(self._state)
            self._state = result.state
        return result

    def apply_move(self, from_sq, to_sq, promotion=None) -> TurnResult:
        with self._lock:
            return self._commit(rules.apply_move(self._state, from_sq, to_sq, promotion))

    def apply_action(self, action_id, *targets) -> TurnResult:
        with self._lock:
            return self._commit(rules.apply_action(self._state, action_id, *targets))

    def play(self, command: Command) -> TurnResult:
        """Apply a parsed notation command (move or action)."""
        with self._lock:
            return self._commit(apply_command(self._state, command))

    def available_actions(self) -> list[ActionId]:
        with self._lock:
            return rules.available_actions(self._state)

    def validate_action_target(self, action_id, *targets) -> bool:
        with self._lock:
            return rules.validate_action_target(self._state, action_id, *targets)

    def undo(self) -> bool:
        """Step back one turn. Returns False if there is nothing to undo."""
        with self._lock:
            if not self._snapshots:
                return False
            self._state = self._snapshots.pop()
            logger.info("Undo to half-move %d", self._state.half_moves)
            return True

    def reset(self, seed: Optional[int] = None) -> GameState:
        with self._lock:
            self._state = rules.new_game(seed=seed, config=self._config, fen=self._fen)
            self._snapshots = []
            return self._state
