"""Game state aggregate for Creative Chess."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from creativechess.config import GameConfig
from creativechess.game.adapter import MoveEngineAdapter
from creativechess.game.board import FROZEN_MARK, SHIELD_MARK, TRAP_MARK, Square
from creativechess.game.effects import StatusEffectStore
from creativechess.game.pieces import Color, Phase
from creativechess.game.registry import ActionId, ActionRegistry
from creativechess.game.rng import RNGService


@dataclass(frozen=True)
class TurnState:
    """Read-only summary of whose turn it is and how the game stands."""
    phase: Phase
    half_moves: int
    active_color: Color
    done: bool
    winner: Optional[Color]
    last_move: Optional[tuple[Square, Square]]


class GameState:
    """Complete game state: board, effects, action pool, RNG and turn data.

    The functions in ``creativechess.game.rules`` treat a GameState as an
    immutable snapshot: they clone it, change the clone and return that.
    """

    def __init__(self, seed: Optional[int] = None, config: Optional[GameConfig] = None,
                 fen: Optional[str] = None):
        self.config = config or GameConfig()
        self.adapter = MoveEngineAdapter(fen or self.config.start_fen,
                                         king_capture=self.config.king_capture)
        self.effects = StatusEffectStore()
        self.registry = ActionRegistry(tuple(ActionId), self.config.initial_uses)
        self.rng = RNGService(seed)
        self.phase: Phase = (Phase.CREATIVE if self.config.creative_threshold <= 0
                             else Phase.STANDARD)
        self.half_moves: int = 0
        self.done: bool = False
        self.winner: Optional[Color] = None  # None = draw if done
        self.last_move: Optional[tuple[Square, Square]] = None
        self.last_action: Optional[ActionId] = None
        self.history: list[str] = []

    def clone(self) -> GameState:
        """Return a fully independent copy of this state."""
        new = GameState.__new__(GameState)
        new.config = self.config
        new.adapter = self.adapter.copy()
        new.effects = self.effects.clone()
        new.registry = self.registry.clone()
        new.rng = self.rng.clone()
        new.phase = self.phase
        new.half_moves = self.half_moves
        new.done = self.done
        new.winner = self.winner
        new.last_move = self.last_move
        new.last_action = self.last_action
        new.history = list(self.history)
        return new

    @property
    def active_color(self) -> Color:
        return self.adapter.side_to_move()

    @property
    def seed(self) -> int:
        return self.rng.seed

    @property
    def fen(self) -> str:
        return self.adapter.serialize()

    @property
    def turn_state(self) -> TurnState:
        return TurnState(
            phase=self.phase,
            half_moves=self.half_moves,
            active_color=self.active_color,
            done=self.done,
            winner=self.winner,
            last_move=self.last_move,
        )

    def to_display_board(self) -> list[list]:
        """Convert to the format expected by render_board."""
        return self.adapter.to_display_board()

    def markers(self) -> dict[Square, str]:
        """render_board markers for trapped squares and frozen/shielded pieces."""
        marks = {trap.square: TRAP_MARK for trap in self.effects.traps}
        for color in Color:
            for piece, sq in self.adapter.pieces_of(color):
                if self.effects.is_frozen(piece.piece_id):
                    marks[sq] = FROZEN_MARK
                elif self.effects.is_shielded(piece.piece_id):
                    marks[sq] = SHIELD_MARK
        return marks

    def half_moves_to_creative(self) -> int:
        """Half-moves left before the creative phase opens (0 once open)."""
        if self.phase == Phase.CREATIVE:
            return 0
        return max(0, self.config.creative_threshold - self.half_moves)
