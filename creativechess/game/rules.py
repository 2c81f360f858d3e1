"""Turn transitions: standard moves, creative actions, effect ticks, phase
changes and win checks.

Every public function takes a GameState and never mutates it. A successful
turn returns a TurnResult holding a new state; a rejected one returns the
input state together with the reason.
"""

from __future__ import annotations

import logging
from typing import Optional

from creativechess.config import GameConfig
from creativechess.game import win
from creativechess.game.actions import get_action, normalize_targets
from creativechess.game.board import as_square, square_to_notation
from creativechess.game.errors import ActionError, MoveError, RuleViolation, TurnResult
from creativechess.game.pieces import (
    COLOR_NAMES, PIECE_CHARS, PIECE_NAMES, Color, Phase, PieceType,
)
from creativechess.game.registry import ActionId, parse_action_id
from creativechess.game.state import GameState

logger = logging.getLogger("creativechess.rules")


def new_game(seed: Optional[int] = None, config: Optional[GameConfig] = None,
             fen: Optional[str] = None) -> GameState:
    """Fresh game: standard phase, half-move 0, every action at its initial uses."""
    state = GameState(seed=seed, config=config, fen=fen)
    logger.info("New game (seed=%s)", state.seed)
    return state


def reset(seed: Optional[int] = None, config: Optional[GameConfig] = None) -> GameState:
    """Throw the current game away and start over."""
    return new_game(seed=seed, config=config)


# ---------------------------------------------------------------------------
# Shared turn bookkeeping
# ---------------------------------------------------------------------------

def _complete_turn(state: GameState) -> None:
    """Tick effects, count the half-move, open the creative phase, check for a winner."""
    state.effects.tick()
    state.half_moves += 1

    if state.phase == Phase.STANDARD and state.half_moves >= state.config.creative_threshold:
        state.phase = Phase.CREATIVE
        logger.info("Creative phase begins after %d half-moves", state.half_moves)

    state.done, state.winner = win.evaluate(state.adapter)
    if state.done:
        if state.winner is None:
            logger.info("Game over: draw")
        else:
            logger.info("Game over: %s wins", COLOR_NAMES[state.winner])


def _coerce_promotion(promotion) -> Optional[PieceType]:
    if promotion is None or isinstance(promotion, PieceType):
        return promotion
    if isinstance(promotion, str) and promotion.upper() in PIECE_CHARS:
        return PIECE_CHARS[promotion.upper()]
    raise RuleViolation(MoveError.ILLEGAL_MOVE, f"bad promotion piece {promotion!r}")


# ---------------------------------------------------------------------------
# Standard moves
# ---------------------------------------------------------------------------

def _play_move(state: GameState, from_sq, to_sq, promotion) -> GameState:
    if state.done:
        raise RuleViolation(MoveError.GAME_OVER)
    try:
        src, dst = as_square(from_sq), as_square(to_sq)
    except ValueError as e:
        raise RuleViolation(MoveError.ILLEGAL_MOVE, str(e)) from e
    promotion = _coerce_promotion(promotion)

    mover = state.active_color
    piece = state.adapter.piece_at(src)
    if piece is None or piece.color != mover:
        raise RuleViolation(MoveError.ILLEGAL_MOVE, f"no {COLOR_NAMES[mover]} piece on {src.name}")
    if state.effects.is_frozen(piece.piece_id):
        raise RuleViolation(MoveError.ILLEGAL_MOVE, f"piece on {src.name} is frozen")
    if dst not in state.adapter.legal_destinations(src):
        raise RuleViolation(MoveError.ILLEGAL_MOVE, f"{src.name}-{dst.name} is not legal")
    rook_sq = state.adapter.castling_rook(src, dst)
    if rook_sq is not None:
        rook = state.adapter.piece_at(rook_sq)
        if rook is not None and state.effects.is_frozen(rook.piece_id):
            raise RuleViolation(MoveError.ILLEGAL_MOVE, f"rook on {rook_sq.name} is frozen")

    new = state.clone()
    outcome = new.adapter.apply_move(src, dst, promotion)
    if outcome is None:
        raise RuleViolation(MoveError.ILLEGAL_MOVE, f"{src.name}-{dst.name} is not legal")
    if outcome.captured is not None:
        new.effects.drop_piece(outcome.captured.piece_id)

    for landed in outcome.landed:
        if new.effects.trigger_trap_if_present(landed, mover):
            caught = new.adapter.remove(landed)
            new.effects.drop_piece(caught.piece_id)
            logger.info("Trap on %s captured %s", landed.name, caught.char)

    text = f"{src.name}-{dst.name}"
    if promotion is not None:
        text += f"={PIECE_NAMES[promotion]}"
    new.last_move = (src, dst)
    new.history.append(text)
    logger.info("%s plays %s", COLOR_NAMES[mover], text)
    _complete_turn(new)
    return new


def apply_move(state: GameState, from_sq, to_sq, promotion=None) -> TurnResult:
    """Play a standard chess move for the side to move.

    Squares may be ``Square`` values or algebraic strings. A pawn reaching
    the last rank promotes to ``promotion`` (queen by default).
    """
    try:
        return TurnResult(_play_move(state, from_sq, to_sq, promotion))
    except RuleViolation as e:
        logger.debug("Move rejected: %s", e)
        return TurnResult(state, e.kind, e.detail)


# ---------------------------------------------------------------------------
# Creative actions
# ---------------------------------------------------------------------------

def _check_action(state: GameState, action_id, targets: tuple) -> tuple:
    """Run every pre-execution check. Returns (spec, normalized targets)."""
    if state.done:
        raise RuleViolation(ActionError.GAME_OVER)
    parsed = parse_action_id(action_id)
    if parsed is None:
        raise RuleViolation(ActionError.UNKNOWN_ACTION, str(action_id))
    if state.phase != Phase.CREATIVE:
        raise RuleViolation(ActionError.WRONG_PHASE,
                            f"{state.half_moves_to_creative()} half-move(s) to go")
    if state.registry.remaining_uses(parsed) <= 0:
        raise RuleViolation(ActionError.ACTION_EXHAUSTED, parsed.value)

    actor = state.active_color
    if state.effects.is_action_blocked(actor):
        raise RuleViolation(ActionError.ACTION_BLOCKED, "time freeze")
    if state.registry.is_barred(parsed, actor):
        raise RuleViolation(ActionError.ACTION_BLOCKED, f"{parsed.value} was stolen")

    spec = get_action(parsed)
    normalized = normalize_targets(spec, targets)
    if not spec.validate(state, *normalized):
        raise RuleViolation(ActionError.INVALID_TARGET, spec.name)
    return spec, normalized


def _target_text(target) -> str:
    if isinstance(target, ActionId):
        return target.value
    return square_to_notation(target)


def _play_action(state: GameState, action_id, targets: tuple) -> GameState:
    spec, normalized = _check_action(state, action_id, targets)
    actor = state.active_color

    new = state.clone()
    spec.execute(new, *normalized)
    new.registry.consume(spec.action_id, actor)
    new.adapter.pass_turn()

    text = " ".join([spec.action_id.value] + [_target_text(t) for t in normalized])
    new.last_action = spec.action_id
    new.history.append(text)
    logger.info("%s uses %s", COLOR_NAMES[actor], text)
    _complete_turn(new)
    return new


def apply_action(state: GameState, action_id, *targets) -> TurnResult:
    """Spend one use of an action instead of moving.

    ``action_id`` is an ActionId or its string value. Targets are squares
    (``Square`` or algebraic text) except Job Application's second target,
    which names the action to boost.
    """
    try:
        return TurnResult(_play_action(state, action_id, targets))
    except RuleViolation as e:
        logger.debug("Action rejected: %s", e)
        return TurnResult(state, e.kind, e.detail)


def validate_action_target(state: GameState, action_id, *targets) -> bool:
    """Would ``apply_action`` with these targets pass its target checks?

    Only looks at the targets; phase, uses and time freeze are not checked.
    """
    parsed = parse_action_id(action_id)
    if parsed is None:
        return False
    spec = get_action(parsed)
    try:
        normalized = normalize_targets(spec, targets)
    except RuleViolation:
        return False
    return spec.validate(state, *normalized)


def available_actions(state: GameState) -> list[ActionId]:
    """Actions the side to move could spend this turn, in catalog order."""
    actor = state.active_color
    if state.done or state.phase != Phase.CREATIVE or state.effects.is_action_blocked(actor):
        return []
    return state.registry.usable_by(actor)


def piece_counts(state: GameState) -> dict[Color, int]:
    return {c: state.adapter.count(c) for c in Color}
