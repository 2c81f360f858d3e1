"""Colors, piece types, pieces and game phases."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum


class Color(IntEnum):
    WHITE = 0
    BLACK = 1


class PieceType(IntEnum):
    # Same numbering as python-chess (chess.PAWN == 1 ... chess.KING == 6)
    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6


class Phase(str, Enum):
    """Stage of the game. STANDARD only ever moves forward to CREATIVE."""
    STANDARD = "standard"
    CREATIVE = "creative"


# Map character codes to PieceType
PIECE_CHARS = {
    "P": PieceType.PAWN,
    "N": PieceType.KNIGHT,
    "B": PieceType.BISHOP,
    "R": PieceType.ROOK,
    "Q": PieceType.QUEEN,
    "K": PieceType.KING,
}
PIECE_NAMES = {v: k for k, v in PIECE_CHARS.items()}

COLOR_NAMES = {Color.WHITE: "White", Color.BLACK: "Black"}


@dataclass(frozen=True)
class Piece:
    """A piece on the board.

    ``piece_id`` is stable for the lifetime of the piece: it survives moves,
    castling, promotion and swaps, so status effects can follow the piece
    rather than the square it happens to stand on.
    """
    piece_type: PieceType
    color: Color
    piece_id: int

    @property
    def char(self) -> str:
        """Uppercase letter for White, lowercase for Black (FEN style)."""
        ch = PIECE_NAMES[self.piece_type]
        return ch if self.color == Color.WHITE else ch.lower()
