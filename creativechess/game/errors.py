"""Rejection kinds and the result type returned by turn-consuming operations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from creativechess.game.state import GameState


class MoveError(str, Enum):
    """Why a standard move was rejected."""
    ILLEGAL_MOVE = "illegal_move"
    GAME_OVER = "game_over"


class ActionError(str, Enum):
    """Why an action invocation was rejected."""
    WRONG_PHASE = "wrong_phase"
    ACTION_EXHAUSTED = "action_exhausted"
    ACTION_BLOCKED = "action_blocked"
    INVALID_TARGET = "invalid_target"
    TOO_MANY_TARGETS = "too_many_targets"
    UNKNOWN_ACTION = "unknown_action"
    GAME_OVER = "game_over"


ErrorKind = Union[MoveError, ActionError]


class RuleViolation(Exception):
    """Raised inside the rules layer when a turn must be rejected.

    Public operations catch it and turn it into a failed TurnResult, so it
    never escapes to callers of apply_move / apply_action.
    """

    def __init__(self, kind: ErrorKind, detail: str = ""):
        self.kind = kind
        self.detail = detail
        message = kind.value if not detail else f"{kind.value}: {detail}"
        super().__init__(message)


@dataclass(frozen=True)
class TurnResult:
    """Outcome of apply_move / apply_action.

    On success ``state`` is the new snapshot and ``error`` is None. On
    failure ``state`` is the untouched input state.
    """
    state: "GameState"
    error: Optional[ErrorKind] = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None
