"""Creative Chess game engine: state, effects, actions, rules, notation."""

from creativechess.game.state import GameState, TurnState
from creativechess.game.pieces import Color, Phase, Piece, PieceType
from creativechess.game.board import Square, notation_to_square, render_board, square_to_notation
from creativechess.game.errors import ActionError, MoveError, TurnResult
from creativechess.game.registry import ActionId, ActionRegistry
from creativechess.game.effects import StatusEffectStore
from creativechess.game.actions import ACTIONS, ActionSpec, TargetKind, get_action
from creativechess.game.rules import (
    new_game, reset, apply_move, apply_action, available_actions, validate_action_target,
)
from creativechess.game.controller import TurnController
from creativechess.game.notation import parse_command, command_to_text, game_to_text, text_to_game

__all__ = [
    "GameState", "TurnState", "Color", "Phase", "Piece", "PieceType",
    "Square", "notation_to_square", "render_board", "square_to_notation",
    "ActionError", "MoveError", "TurnResult",
    "ActionId", "ActionRegistry", "StatusEffectStore",
    "ACTIONS", "ActionSpec", "TargetKind", "get_action",
    "new_game", "reset", "apply_move", "apply_action", "available_actions",
    "validate_action_target", "TurnController",
    "parse_command", "command_to_text", "game_to_text", "text_to_game",
]
