"""Boundary to the external chess rules engine (python-chess).

The adapter owns the ``chess.Board`` and a square -> piece id map. python-chess
knows nothing about piece identity, so every operation that relocates,
creates or removes a piece keeps the id map in step with the board.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import chess

from creativechess.game.board import BOARD_SIZE, Square
from creativechess.game.pieces import Color, Piece, PieceType

logger = logging.getLogger("creativechess.adapter")

_CHESS_COLORS = {Color.WHITE: chess.WHITE, Color.BLACK: chess.BLACK}
_BACK_RANKS = (0, BOARD_SIZE - 1)


def _to_index(sq: Square) -> int:
    return chess.square(sq.file, sq.rank)


def _to_square(index: int) -> Square:
    return Square(chess.square_file(index), chess.square_rank(index))


def _to_color(chess_color: bool) -> Color:
    return Color.WHITE if chess_color == chess.WHITE else Color.BLACK


@dataclass(frozen=True)
class MoveOutcome:
    """What a successful board move did.

    ``landed`` lists every square a piece arrived on: the destination, plus
    the rook's new square when castling.
    """
    moved: Piece
    captured: Optional[Piece] = None
    landed: tuple[Square, ...] = ()


class MoveEngineAdapter:
    """Piece lookup, placement, legal destinations and FEN import/export.

    Args:
        fen: Starting position. Defaults to the standard start.
        king_capture: If True, moves come from python-chess's pseudo-legal
            generator, so a king is an ordinary piece that may be left
            attacked and may be captured. If False, fully legal moves only.
    """

    def __init__(self, fen: str = chess.STARTING_FEN, king_capture: bool = True):
        self._board = chess.Board(fen)
        self.king_capture = king_capture
        self._ids: dict[int, int] = {}
        self._next_id = 1
        # Initial ids follow a1, b1, ... h8 order
        for index in sorted(self._board.piece_map()):
            self._ids[index] = self._allocate_id()

    def _allocate_id(self) -> int:
        piece_id = self._next_id
        self._next_id += 1
        return piece_id

    def copy(self) -> MoveEngineAdapter:
        new = MoveEngineAdapter.__new__(MoveEngineAdapter)
        new._board = self._board.copy(stack=False)
        new.king_capture = self.king_capture
        new._ids = dict(self._ids)
        new._next_id = self._next_id
        return new

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def piece_at(self, sq: Square) -> Optional[Piece]:
        index = _to_index(sq)
        p = self._board.piece_at(index)
        if p is None:
            return None
        return Piece(PieceType(p.piece_type), _to_color(p.color), self._ids[index])

    def pieces_of(self, color: Color) -> list[tuple[Piece, Square]]:
        """All pieces of ``color`` in a1, b1, ... h8 order."""
        result = []
        for index in chess.scan_forward(self._board.occupied_co[_CHESS_COLORS[color]]):
            sq = _to_square(index)
            result.append((self.piece_at(sq), sq))
        return result

    def count(self, color: Color) -> int:
        return chess.popcount(self._board.occupied_co[_CHESS_COLORS[color]])


    def side_to_move(self) -> Color:
        return _to_color(self._board.turn)

    def _generate(self, from_mask: int = chess.BB_ALL):
        if self.king_capture:
            return self._board.generate_pseudo_legal_moves(from_mask=from_mask)
        return self._board.generate_legal_moves(from_mask=from_mask)

    def legal_destinations(self, sq: Square) -> set[Square]:
        """Squares the piece on ``sq`` may move to (empty if it is not the
        side to move's piece)."""
        mask = chess.BB_SQUARES[_to_index(sq)]
        return {_to_square(m.to_square) for m in self._generate(mask)}

    def has_moves(self) -> bool:
        """Whether the side to move has any board move at all."""
        return any(True for _ in self._generate())

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _is_allowed(self, move: chess.Move) -> bool:
        if self.king_capture:
            return self._board.is_pseudo_legal(move)
        return self._board.is_legal(move)

    def apply_move(self, from_sq: Square, to_sq: Square,
                   promotion: Optional[PieceType] = None) -> Optional[MoveOutcome]:
        """Play a board move for the side to move.

        Pawns reaching the last rank promote to ``promotion`` (queen if not
        given). Returns None, leaving the board untouched, if the move is
        not allowed.
        """
        src, dst = _to_index(from_sq), _to_index(to_sq)
        mover = self._board.piece_at(src)
        if mover is None:
            return None
        if (promotion is None and mover.piece_type == chess.PAWN
                and chess.square_rank(dst) in _BACK_RANKS):
            promotion = PieceType.QUEEN
        move = chess.Move(src, dst, promotion=int(promotion) if promotion else None)
        if not self._is_allowed(move):
            return None

        captured_index = dst
        if self._board.is_en_passant(move):
            captured_index = dst - 8 if self._board.turn == chess.WHITE else dst + 8
        captured = None
        victim = self._board.piece_at(captured_index)
        if victim is not None and victim.color != mover.color:
            captured = self.piece_at(_to_square(captured_index))

        rook_hop = self._rook_hop(move)
        moving_id = self._ids[src]
        self._board.push(move)

        del self._ids[src]
        if captured is not None:
            del self._ids[captured_index]
        landed = [to_sq]
        if rook_hop is not None and rook_hop[0] in self._ids:
            self._ids[rook_hop[1]] = self._ids.pop(rook_hop[0])
            landed.append(_to_square(rook_hop[1]))
        self._ids[dst] = moving_id

        logger.debug("Board move %s%s (piece %d)", chess.square_name(src),
                     chess.square_name(dst), moving_id)
        return MoveOutcome(moved=self.piece_at(to_sq), captured=captured,
                           landed=tuple(landed))

    def _rook_hop(self, move: chess.Move) -> Optional[tuple[int, int]]:
        """(from, to) indices of the rook if ``move`` castles, else None."""
        if not self._board.is_castling(move):
            return None
        rank = chess.square_rank(move.from_square)
        if self._board.is_kingside_castling(move):
            return chess.square(7, rank), chess.square(5, rank)
        return chess.square(0, rank), chess.square(3, rank)

    def castling_rook(self, from_sq: Square, to_sq: Square) -> Optional[Square]:
        """Square of the rook that would travel with a castling king, else None."""
        hop = self._rook_hop(chess.Move(_to_index(from_sq), _to_index(to_sq)))
        return None if hop is None else _to_square(hop[0])

    def _check_placement(self, piece_type: PieceType, sq: Square) -> None:
        if self._board.piece_at(_to_index(sq)) is not None:
            raise ValueError(f"Square {sq.name} is occupied")
        if piece_type == PieceType.PAWN and sq.rank in _BACK_RANKS:
            raise ValueError(f"A pawn cannot stand on {sq.name}")

    def place(self, piece: Piece, sq: Square) -> None:
        """Put an existing piece (keeping its id) on an empty square."""
        self._check_placement(piece.piece_type, sq)
        index = _to_index(sq)
        self._board.set_piece_at(index, chess.Piece(int(piece.piece_type),
                                                     _CHESS_COLORS[piece.color]))
        self._ids[index] = piece.piece_id

    def spawn(self, piece_type: PieceType, color: Color, sq: Square) -> Piece:
        """Create a brand-new piece with a fresh id on an empty square."""
        self._check_placement(piece_type, sq)
        piece = Piece(piece_type, color, self._allocate_id())
        self.place(piece, sq)
        logger.debug("Spawned %s on %s (piece %d)", piece.char, sq.name, piece.piece_id)
        return piece

    def remove(self, sq: Square) -> Optional[Piece]:
        piece = self.piece_at(sq)
        if piece is None:
            return None
        index = _to_index(sq)
        self._board.remove_piece_at(index)
        del self._ids[index]
        return piece

    def swap(self, a: Square, b: Square) -> None:
        """Exchange the pieces on two occupied squares, ids included."""
        pa, pb = self.piece_at(a), self.piece_at(b)
        if pa is None or pb is None or a == b:
            raise ValueError("swap needs two distinct occupied squares")
        for piece, dest in ((pa, b), (pb, a)):
            if piece.piece_type == PieceType.PAWN and dest.rank in _BACK_RANKS:
                raise ValueError(f"A pawn cannot stand on {dest.name}")
        self.remove(a)
        self.remove(b)
        self.place(pa, b)
        self.place(pb, a)

    def pass_turn(self) -> None:
        """Hand the move to the other side without a board move."""
        if self._board.turn == chess.BLACK:
            self._board.fullmove_number += 1
        self._board.turn = not self._board.turn
        self._board.ep_square = None

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------

    def serialize(self) -> str:
        """Position as a FEN string. Piece ids are not part of FEN."""
        return self._board.fen()

    @classmethod
    def deserialize(cls, fen: str, king_capture: bool = True) -> MoveEngineAdapter:
        """Build an adapter from FEN; ids are reassigned in a1..h8 order."""
        return cls(fen, king_capture=king_capture)

    def to_display_board(self) -> list[list[Optional[str]]]:
        """8x8 grid indexed [rank][file] of FEN piece characters."""
        display: list[list[Optional[str]]] = [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]
        for index, p in self._board.piece_map().items():
            display[chess.square_rank(index)][chess.square_file(index)] = p.symbol()
        return display
