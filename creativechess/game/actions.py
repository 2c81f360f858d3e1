"""The catalog of creative-phase actions.

Each action is a (validate, execute) pair. ``validate(state, *targets)``
only inspects the state. ``execute(state, *targets)`` is called on a clone,
after validate succeeded, and mutates that clone in place. Targets arrive
already normalized (see ``normalize_targets``): squares as ``Square``,
action names as ``ActionId``.

Anything that removes an opponent piece goes through ``_strike``, which
lets a shield absorb the hit. Rubber-Band checks the shield the same way.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

from creativechess.game.board import BOARD_SIZE, Square, as_square, manhattan_distance
from creativechess.game.errors import ActionError, RuleViolation
from creativechess.game.pieces import Color, Piece, PieceType
from creativechess.game.registry import ActionId, parse_action_id

if TYPE_CHECKING:
    from creativechess.game.state import GameState

logger = logging.getLogger("creativechess.actions")

RUBBER_BAND_TURNS = 1
EMP_TURNS = 2
TIME_FREEZE_TURNS = 1
BOOST_USES = 2  # Extra uses granted by Job Application and Loot Drop
SNIPER_MIN_DISTANCE = 3
ROCKET_MAX_TARGETS = 3
ROCKET_HIT_MIN = 4  # d6 roll needed to destroy a target
ROBOT_FALLBACK = (PieceType.PAWN, PieceType.QUEEN, PieceType.KING)
_BACK_RANKS = (0, BOARD_SIZE - 1)


class TargetKind(str, Enum):
    """What an action asks the player to pick."""
    NONE = "none"
    PIECE = "piece"
    SQUARE = "square"
    AREA = "area"
    PIECE_AND_ACTION = "piece_and_action"
    TWO_PIECES = "two_pieces"
    PIECE_AND_SQUARE = "piece_and_square"
    PIECES = "pieces"


@dataclass(frozen=True)
class ActionSpec:
    action_id: ActionId
    name: str
    description: str
    target_kind: TargetKind
    validate: Callable[..., bool]
    execute: Callable[..., "GameState"]
    min_targets: int = 0
    max_targets: int = 0

    @property
    def needs_target(self) -> bool:
        return self.target_kind != TargetKind.NONE


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _opponent(state: GameState) -> Color:
    return Color(1 - state.active_color)


def _own_piece(state: GameState, sq: Square) -> Optional[Piece]:
    piece = state.adapter.piece_at(sq)
    if piece is not None and piece.color == state.active_color:
        return piece
    return None


def _enemy_piece(state: GameState, sq: Square) -> Optional[Piece]:
    piece = state.adapter.piece_at(sq)
    if piece is not None and piece.color != state.active_color:
        return piece
    return None


def _remove(state: GameState, sq: Square) -> Optional[Piece]:
    """Take a piece off the board along with all of its effects."""
    piece = state.adapter.remove(sq)
    if piece is not None:
        state.effects.drop_piece(piece.piece_id)
    return piece


def _strike(state: GameState, sq: Square) -> bool:
    """Remove the piece on ``sq`` unless its shield absorbs the hit."""
    piece = state.adapter.piece_at(sq)
    if piece is None:
        return False
    if state.effects.consume_shield_if_present(piece.piece_id):
        logger.info("Shield on %s absorbed the hit", sq.name)
        return False
    _remove(state, sq)
    return True


def _pawn_fits(piece_type: PieceType, sq: Square) -> bool:
    return piece_type != PieceType.PAWN or sq.rank not in _BACK_RANKS


# ---------------------------------------------------------------------------
# Snip: remove one enemy pawn
# ---------------------------------------------------------------------------

def _validate_snip(state: GameState, target: Square) -> bool:
    piece = _enemy_piece(state, target)
    return piece is not None and piece.piece_type == PieceType.PAWN


def _execute_snip(state: GameState, target: Square) -> GameState:
    _strike(state, target)
    return state


# ---------------------------------------------------------------------------
# Rubber-Band Shot: immobilize one enemy piece
# ---------------------------------------------------------------------------

def _validate_rubber_band(state: GameState, target: Square) -> bool:
    return _enemy_piece(state, target) is not None


def _execute_rubber_band(state: GameState, target: Square) -> GameState:
    piece = state.adapter.piece_at(target)
    if state.effects.consume_shield_if_present(piece.piece_id):
        logger.info("Shield on %s absorbed the shot", target.name)
        return state
    state.effects.freeze(piece.piece_id, RUBBER_BAND_TURNS)
    return state


# ---------------------------------------------------------------------------
# Nuke: clear enemy pieces from a 2x2 block
# ---------------------------------------------------------------------------

def nuke_block(anchor: Square) -> list[Square]:
    """The four squares of the block whose lower-left corner is ``anchor``."""
    return [Square(f, r)
            for f in range(anchor.file, anchor.file + 2)
            for r in range(anchor.rank, anchor.rank + 2)]


def _validate_nuke(state: GameState, anchor: Square) -> bool:
    return anchor.file <= BOARD_SIZE - 2 and anchor.rank <= BOARD_SIZE - 2


def _execute_nuke(state: GameState, anchor: Square) -> GameState:
    for sq in nuke_block(anchor):
        if _enemy_piece(state, sq) is not None:
            _strike(state, sq)
    return state


# ---------------------------------------------------------------------------
# Job Application: sacrifice an own piece to boost another action
# ---------------------------------------------------------------------------

def _validate_job_application(state: GameState, target: Square, boost: ActionId) -> bool:
    piece = _own_piece(state, target)
    if piece is None or piece.piece_type == PieceType.KING:
        return False
    return boost != ActionId.JOB_APPLICATION and boost in state.registry


def _execute_job_application(state: GameState, target: Square, boost: ActionId) -> GameState:
    _remove(state, target)
    state.registry.grant_uses(boost, BOOST_USES)
    return state


# ---------------------------------------------------------------------------
# Robot Proxy: an own piece pilots a robot that removes a matching enemy
# ---------------------------------------------------------------------------

def _robot_victim(state: GameState, pilot: Piece) -> Optional[Square]:
    enemies = state.adapter.pieces_of(_opponent(state))
    for wanted in (pilot.piece_type,) + ROBOT_FALLBACK:
        for piece, sq in enemies:
            if piece.piece_type == wanted:
                return sq
    return None


def _validate_robot_proxy(state: GameState, target: Square) -> bool:
    return _own_piece(state, target) is not None


def _execute_robot_proxy(state: GameState, target: Square) -> GameState:
    pilot = state.adapter.piece_at(target)
    state.effects.pilot(pilot.piece_id)
    victim = _robot_victim(state, pilot)
    if victim is None:
        logger.info("Robot piloted from %s found no target", target.name)
        return state
    _strike(state, victim)
    return state


# ---------------------------------------------------------------------------
# Swap Places: exchange two own non-king pieces
# ---------------------------------------------------------------------------

def _validate_swap_places(state: GameState, first: Square, second: Square) -> bool:
    if first == second:
        return False
    a, b = _own_piece(state, first), _own_piece(state, second)
    if a is None or b is None:
        return False
    if PieceType.KING in (a.piece_type, b.piece_type):
        return False
    return _pawn_fits(a.piece_type, second) and _pawn_fits(b.piece_type, first)


def _execute_swap_places(state: GameState, first: Square, second: Square) -> GameState:
    # Effects are keyed by piece id, so they travel with the pieces.
    state.adapter.swap(first, second)
    return state


# ---------------------------------------------------------------------------
# Shield: protect an own piece from the next action against it
# ---------------------------------------------------------------------------

def _validate_shield(state: GameState, target: Square) -> bool:
    return _own_piece(state, target) is not None


def _execute_shield(state: GameState, target: Square) -> GameState:
    state.effects.shield(state.adapter.piece_at(target).piece_id)
    return state


# ---------------------------------------------------------------------------
# EMP Blast, Time Freeze: untargeted global effects
# ---------------------------------------------------------------------------

def _always(state: GameState) -> bool:
    return True


def _execute_emp_blast(state: GameState) -> GameState:
    state.effects.set_emp_suppression(EMP_TURNS)
    return state


def _execute_time_freeze(state: GameState) -> GameState:
    state.effects.set_time_freeze(_opponent(state), TIME_FREEZE_TURNS)
    return state


# ---------------------------------------------------------------------------
# Loot Drop: two extra uses of a random remaining action
# ---------------------------------------------------------------------------

def _loot_candidates(state: GameState) -> list[ActionId]:
    return [a for a, n in state.registry.uses.items()
            if a != ActionId.LOOT_DROP and n > 0]


def _validate_loot_drop(state: GameState) -> bool:
    return bool(_loot_candidates(state))


def _execute_loot_drop(state: GameState) -> GameState:
    prize = state.rng.choice(_loot_candidates(state))
    state.registry.grant_uses(prize, BOOST_USES)
    logger.info("Loot Drop granted %d uses of %s", BOOST_USES, prize.value)
    return state


# ---------------------------------------------------------------------------
# Clone Ray: duplicate an own non-king piece onto an empty square
# ---------------------------------------------------------------------------

def _validate_clone_ray(state: GameState, source: Square, dest: Square) -> bool:
    piece = _own_piece(state, source)
    if piece is None or piece.piece_type == PieceType.KING:
        return False
    if state.adapter.piece_at(dest) is not None:
        return False
    return _pawn_fits(piece.piece_type, dest)


def _execute_clone_ray(state: GameState, source: Square, dest: Square) -> GameState:
    piece = state.adapter.piece_at(source)
    state.adapter.spawn(piece.piece_type, piece.color, dest)
    return state


# ---------------------------------------------------------------------------
# Spy Drone: steal a random action the opponent could still use
# ---------------------------------------------------------------------------

def _spy_candidates(state: GameState) -> list[ActionId]:
    opponent = _opponent(state)
    registry = state.registry
    already_used = registry.used_by(opponent)
    return [a for a in registry.uses
            if a != ActionId.SPY_DRONE
            and registry.is_usable_by(a, opponent)
            and a not in already_used]


def _validate_spy_drone(state: GameState) -> bool:
    return bool(_spy_candidates(state))


def _execute_spy_drone(state: GameState) -> GameState:
    stolen = state.rng.choice(_spy_candidates(state))
    state.registry.bar(stolen, _opponent(state))
    state.registry.unbar(stolen, state.active_color)
    logger.info("Spy Drone stole %s", stolen.value)
    return state


# ---------------------------------------------------------------------------
# Sniper Shot: remove a distant enemy piece
# ---------------------------------------------------------------------------

def _validate_sniper_shot(state: GameState, target: Square) -> bool:
    if _enemy_piece(state, target) is None:
        return False
    return any(manhattan_distance(sq, target) >= SNIPER_MIN_DISTANCE
               for _, sq in state.adapter.pieces_of(state.active_color))


def _execute_sniper_shot(state: GameState, target: Square) -> GameState:
    _strike(state, target)
    return state


# ---------------------------------------------------------------------------
# Puzzle Trap: arm an empty square
# ---------------------------------------------------------------------------

def _validate_puzzle_trap(state: GameState, target: Square) -> bool:
    return state.adapter.piece_at(target) is None and state.effects.trap_at(target) is None


def _execute_puzzle_trap(state: GameState, target: Square) -> GameState:
    state.effects.arm_trap(target, state.active_color)
    return state


# ---------------------------------------------------------------------------
# Rocket Barrage: a d6 per target, 4-6 destroys
# ---------------------------------------------------------------------------

def _validate_rocket_barrage(state: GameState, *targets: Square) -> bool:
    if not 1 <= len(targets) <= ROCKET_MAX_TARGETS:
        return False
    if len(set(targets)) != len(targets):
        return False
    return all(_enemy_piece(state, sq) is not None for sq in targets)


def _execute_rocket_barrage(state: GameState, *targets: Square) -> GameState:
    # One roll per target, left to right, hit or miss.
    for sq in targets:
        roll = state.rng.roll_d6()
        hit = roll >= ROCKET_HIT_MIN
        logger.info("Rocket at %s rolled %d (%s)", sq.name, roll, "hit" if hit else "miss")
        if hit:
            _strike(state, sq)
    return state


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

ACTIONS: dict[ActionId, ActionSpec] = {spec.action_id: spec for spec in (
    ActionSpec(ActionId.SNIP, "Snip",
               "Remove any one enemy pawn instantly.",
               TargetKind.PIECE, _validate_snip, _execute_snip, 1, 1),
    ActionSpec(ActionId.RUBBER_BAND, "Rubber-Band Shot",
               "Immobilize one enemy piece for 1 turn.",
               TargetKind.PIECE, _validate_rubber_band, _execute_rubber_band, 1, 1),
    ActionSpec(ActionId.NUKE, "Nuke",
               "Pick a 2x2 block; every enemy piece inside it is removed.",
               TargetKind.AREA, _validate_nuke, _execute_nuke, 1, 1),
    ActionSpec(ActionId.JOB_APPLICATION, "Job Application",
               "Sacrifice one of your non-king pieces to give another action 2 extra uses.",
               TargetKind.PIECE_AND_ACTION, _validate_job_application,
               _execute_job_application, 2, 2),
    ActionSpec(ActionId.ROBOT_PROXY, "Robot Proxy",
               "One of your pieces pilots a robot that removes an enemy piece of "
               "the same type (else a pawn, queen or king).",
               TargetKind.PIECE, _validate_robot_proxy, _execute_robot_proxy, 1, 1),
    ActionSpec(ActionId.SWAP_PLACES, "Swap Places",
               "Swap the squares of two of your pieces (kings excluded).",
               TargetKind.TWO_PIECES, _validate_swap_places, _execute_swap_places, 2, 2),
    ActionSpec(ActionId.SHIELD, "Shield",
               "One of your pieces ignores the next action aimed at it.",
               TargetKind.PIECE, _validate_shield, _execute_shield, 1, 1),
    ActionSpec(ActionId.EMP_BLAST, "EMP Blast",
               "Freezes and shields stop working for 2 turns.",
               TargetKind.NONE, _always, _execute_emp_blast),
    ActionSpec(ActionId.LOOT_DROP, "Loot Drop",
               "A random action that still has uses gains 2 more.",
               TargetKind.NONE, _validate_loot_drop, _execute_loot_drop),
    ActionSpec(ActionId.TIME_FREEZE, "Time Freeze",
               "Your opponent cannot use an action on their next turn.",
               TargetKind.NONE, _always, _execute_time_freeze),
    ActionSpec(ActionId.CLONE_RAY, "Clone Ray",
               "Duplicate one of your non-king pieces onto an empty square.",
               TargetKind.PIECE_AND_SQUARE, _validate_clone_ray, _execute_clone_ray, 2, 2),
    ActionSpec(ActionId.SPY_DRONE, "Spy Drone",
               "Steal a random action your opponent has not used yet.",
               TargetKind.NONE, _validate_spy_drone, _execute_spy_drone),
    ActionSpec(ActionId.SNIPER_SHOT, "Sniper Shot",
               "Remove an enemy piece at least 3 squares (Manhattan) from one of yours.",
               TargetKind.PIECE, _validate_sniper_shot, _execute_sniper_shot, 1, 1),
    ActionSpec(ActionId.PUZZLE_TRAP, "Puzzle Trap",
               "Trap an empty square; the next enemy piece to move onto it is captured.",
               TargetKind.SQUARE, _validate_puzzle_trap, _execute_puzzle_trap, 1, 1),
    ActionSpec(ActionId.ROCKET_BARRAGE, "Rocket Barrage",
               "Fire at up to 3 enemy pieces; each is destroyed on a d6 roll of 4-6.",
               TargetKind.PIECES, _validate_rocket_barrage, _execute_rocket_barrage,
               1, ROCKET_MAX_TARGETS),
)}


def get_action(action_id: ActionId) -> ActionSpec:
    return ACTIONS[action_id]


def normalize_targets(spec: ActionSpec, targets: tuple) -> tuple:
    """Check the target count and convert raw targets to Squares / ActionIds.

    Raises:
        RuleViolation: TOO_MANY_TARGETS or INVALID_TARGET.
    """
    if len(targets) > spec.max_targets:
        raise RuleViolation(ActionError.TOO_MANY_TARGETS,
                            f"{spec.name} takes at most {spec.max_targets} target(s)")
    if len(targets) < spec.min_targets:
        raise RuleViolation(ActionError.INVALID_TARGET,
                            f"{spec.name} needs {spec.min_targets} target(s)")

    normalized = []
    for i, raw in enumerate(targets):
        if spec.target_kind == TargetKind.PIECE_AND_ACTION and i == 1:
            action_id = parse_action_id(raw)
            if action_id is None:
                raise RuleViolation(ActionError.INVALID_TARGET, f"unknown action {raw!r}")
            normalized.append(action_id)
            continue
        try:
            normalized.append(as_square(raw))
        except ValueError as e:
            raise RuleViolation(ActionError.INVALID_TARGET, str(e)) from e
    return tuple(normalized)
