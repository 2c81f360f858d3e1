"""Board coordinates, notation helpers and text-based rendering."""

from __future__ import annotations

from typing import NamedTuple, Optional

BOARD_SIZE = 8

# File labels for notation
FILE_LABELS = "abcdefgh"
# Rank labels for notation (1-indexed, rank 0 = "1", rank 7 = "8")
RANK_LABELS = "12345678"

# Marker characters used by render_board for squares carrying effects
FROZEN_MARK = "*"
SHIELD_MARK = "#"
TRAP_MARK = "^"


class Square(NamedTuple):
    """A board coordinate. file 0 = a, rank 0 = 1."""
    file: int
    rank: int

    @property
    def name(self) -> str:
        return square_to_notation(self)


def in_bounds(file: int, rank: int) -> bool:
    return 0 <= file < BOARD_SIZE and 0 <= rank < BOARD_SIZE


def square_to_notation(sq: Square) -> str:
    """Convert a Square to algebraic notation like 'e4'."""
    return FILE_LABELS[sq.file] + RANK_LABELS[sq.rank]


def notation_to_square(text: str) -> Square:
    """Convert algebraic notation like 'e4' to a Square.

    Raises:
        ValueError: If the text is not a square on the board.
    """
    text = text.strip().lower()
    if len(text) != 2 or text[0] not in FILE_LABELS or text[1] not in RANK_LABELS:
        raise ValueError(f"Invalid square: {text!r}")
    return Square(FILE_LABELS.index(text[0]), RANK_LABELS.index(text[1]))


def as_square(value) -> Square:
    """Accept a Square, a (file, rank) pair or algebraic text.

    Raises:
        ValueError: If the value does not name an on-board square.
    """
    if isinstance(value, str):
        return notation_to_square(value)
    if isinstance(value, tuple) and len(value) == 2:
        file, rank = value
        if isinstance(file, int) and isinstance(rank, int) and in_bounds(file, rank):
            return Square(file, rank)
    raise ValueError(f"Not a board square: {value!r}")


def manhattan_distance(a: Square, b: Square) -> int:
    return abs(a.file - b.file) + abs(a.rank - b.rank)


def render_board(board, markers: Optional[dict[Square, str]] = None,
                 half_moves: Optional[int] = None, to_move: Optional[str] = None,
                 phase: Optional[str] = None) -> str:
    """Render the board as a text string.

    Args:
        board: 8x8 list of lists indexed [rank][file]. Each cell is None or
            a FEN piece character (uppercase White, lowercase Black).
        markers: Optional map of square -> single marker character drawn
            around the cell (frozen, shielded, trapped).
        half_moves: Optional half-move count for the header.
        to_move: Optional name of the side to move.
        phase: Optional phase name for the header.
    """
    markers = markers or {}
    lines = []

    if half_moves is not None:
        header = f"Half-move {half_moves}"
        if to_move:
            header += f" - {to_move} to move"
        if phase:
            header += f" ({phase} phase)"
        lines.append(header)
    lines.append("")

    lines.append("    a   b   c   d   e   f   g   h")
    lines.append("  +---+---+---+---+---+---+---+---+")

    for rank in range(BOARD_SIZE - 1, -1, -1):
        row_str = f"{rank + 1} |"
        for file in range(BOARD_SIZE):
            cell = board[rank][file]
            marker = markers.get(Square(file, rank))
            display = cell if cell is not None else " "
            if marker:
                row_str += f"{marker}{display}{marker}|"
            else:
                row_str += f" {display} |"
        row_str += f" {rank + 1}"
        lines.append(row_str)
        lines.append("  +---+---+---+---+---+---+---+---+")

    lines.append("    a   b   c   d   e   f   g   h")

    return "\n".join(lines)
