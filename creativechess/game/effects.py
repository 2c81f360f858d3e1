"""Status effects: frozen, shielded and piloted pieces, trapped squares,
time freeze and EMP suppression.

Per-piece effects are keyed by piece id, never by square, so they follow a
piece when it moves or is swapped. Timed effects carry a ``fresh`` flag: the
tick that ends the turn in which an effect was created only clears the flag,
so an effect of ``n`` turns is felt for exactly the next ``n`` half-moves.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from creativechess.game.board import Square
from creativechess.game.pieces import Color

logger = logging.getLogger("creativechess.effects")


@dataclass
class Frozen:
    piece_id: int
    turns_remaining: int
    fresh: bool = field(default=True, compare=False)


@dataclass(frozen=True)
class Shielded:
    piece_id: int


@dataclass(frozen=True)
class Piloted:
    piece_id: int


@dataclass(frozen=True)
class Trap:
    square: Square
    owner: Color


@dataclass
class TimeFreeze:
    target: Color
    turns_remaining: int
    fresh: bool = field(default=True, compare=False)


@dataclass
class EMPSuppressed:
    turns_remaining: int
    fresh: bool = field(default=True, compare=False)


StatusEffect = Union[Frozen, Shielded, Piloted, Trap, TimeFreeze, EMPSuppressed]
TimedEffect = Union[Frozen, TimeFreeze, EMPSuppressed]


def _count_down(effect: TimedEffect) -> bool:
    """Advance a timed effect by one turn. Returns False once it has expired."""
    if effect.fresh:
        effect.fresh = False
        return True
    effect.turns_remaining = max(0, effect.turns_remaining - 1)
    return effect.turns_remaining > 0


class StatusEffectStore:
    """All transient effects of one game."""

    def __init__(self):
        self._frozen: dict[int, Frozen] = {}
        self._shielded: dict[int, Shielded] = {}
        self._piloted: dict[int, Piloted] = {}
        self._traps: dict[Square, Trap] = {}
        self._time_freeze: dict[Color, TimeFreeze] = {}
        self._emp: Optional[EMPSuppressed] = None

    def clone(self) -> StatusEffectStore:
        return copy.deepcopy(self)

    # ------------------------------------------------------------------
    # Per-piece effects
    # ------------------------------------------------------------------

    def freeze(self, piece_id: int, turns: int) -> None:
        if turns <= 0:
            raise ValueError(f"Freeze duration must be positive, got {turns}")
        self._frozen[piece_id] = Frozen(piece_id, turns)
        logger.debug("Piece %d frozen for %d turn(s)", piece_id, turns)

    def is_frozen(self, piece_id: int) -> bool:
        if self.emp_active:
            return False
        return piece_id in self._frozen

    def shield(self, piece_id: int) -> None:
        self._shielded[piece_id] = Shielded(piece_id)

    def is_shielded(self, piece_id: int) -> bool:
        """Raw shield presence, ignoring EMP suppression."""
        return piece_id in self._shielded

    def consume_shield_if_present(self, piece_id: int) -> bool:
        """Use up the piece's shield. True means the pending action is absorbed."""
        if self.emp_active or piece_id not in self._shielded:
            return False
        del self._shielded[piece_id]
        logger.debug("Shield on piece %d absorbed an action", piece_id)
        return True

    def pilot(self, piece_id: int) -> None:
        self._piloted[piece_id] = Piloted(piece_id)

    def is_piloted(self, piece_id: int) -> bool:
        return piece_id in self._piloted

    def drop_piece(self, piece_id: int) -> None:
        """Forget every effect attached to a piece that left the board."""
        self._frozen.pop(piece_id, None)
        self._shielded.pop(piece_id, None)
        self._piloted.pop(piece_id, None)

    # ------------------------------------------------------------------
    # Traps
    # ------------------------------------------------------------------

    def arm_trap(self, square: Square, owner: Color) -> None:
        if square in self._traps:
            raise ValueError(f"Square {square.name} is already trapped")
        self._traps[square] = Trap(square, owner)

    def trap_at(self, square: Square) -> Optional[Trap]:
        return self._traps.get(square)

    def trigger_trap_if_present(self, square: Square, mover: Color) -> bool:
        """Spring a trap laid by the mover's opponent. The trap is cleared."""
        trap = self._traps.get(square)
        if trap is None or trap.owner == mover:
            return False
        del self._traps[square]
        logger.debug("Trap on %s sprung", square.name)
        return True

    # ------------------------------------------------------------------
    # Global effects
    # ------------------------------------------------------------------

    def set_time_freeze(self, color: Color, turns: int) -> None:
        if turns <= 0:
            raise ValueError(f"Time freeze duration must be positive, got {turns}")
        self._time_freeze[color] = TimeFreeze(color, turns)

    def is_action_blocked(self, color: Color) -> bool:
        return color in self._time_freeze

    def set_emp_suppression(self, turns: int) -> None:
        if turns <= 0:
            raise ValueError(f"EMP duration must be positive, got {turns}")
        self._emp = EMPSuppressed(turns)

    @property
    def emp_active(self) -> bool:
        return self._emp is not None

    # ------------------------------------------------------------------
    # Turn bookkeeping
    # ------------------------------------------------------------------

    def tick(self) -> None:
        """Count every timed effect down by one completed turn.

        Frozen timers are paused while EMP suppression is active.
        """
        if not self.emp_active:
            for piece_id in list(self._frozen):
                if not _count_down(self._frozen[piece_id]):
                    del self._frozen[piece_id]
                    logger.debug("Piece %d thawed", piece_id)

        for color in list(self._time_freeze):
            if not _count_down(self._time_freeze[color]):
                del self._time_freeze[color]

        if self._emp is not None and not _count_down(self._emp):
            self._emp = None
            logger.debug("EMP suppression ended")

    def effects(self) -> list[StatusEffect]:
        """Every active effect, suppressed ones included."""
        result: list[StatusEffect] = []
        result.extend(self._frozen.values())
        result.extend(self._shielded.values())
        result.extend(self._piloted.values())
        result.extend(self._traps.values())
        result.extend(self._time_freeze.values())
        if self._emp is not None:
            result.append(self._emp)
        return result

    def frozen_turns(self, piece_id: int) -> int:
        """Turns left on a piece's freeze (0 if not frozen)."""
        effect = self._frozen.get(piece_id)
        return effect.turns_remaining if effect else 0

    @property
    def traps(self) -> list[Trap]:
        return list(self._traps.values())
