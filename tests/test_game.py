"""Unit tests for the board, pieces, engine adapter and game state."""

import chess
import pytest

from creativechess.game.adapter import MoveEngineAdapter
from creativechess.game.board import (
    BOARD_SIZE, FROZEN_MARK, SHIELD_MARK, TRAP_MARK, Square, as_square,
    manhattan_distance, notation_to_square, render_board, square_to_notation,
)
from creativechess.game.pieces import PIECE_CHARS, Color, Phase, Piece, PieceType
from creativechess.game.registry import ActionId
from creativechess.game.state import GameState
from creativechess.game import win


def sq(text):
    return notation_to_square(text)


class TestBoard:
    def test_board_size(self):
        assert BOARD_SIZE == 8

    def test_notation_conversion(self):
        assert square_to_notation(Square(0, 0)) == "a1"
        assert square_to_notation(Square(7, 7)) == "h8"
        assert square_to_notation(Square(4, 3)) == "e4"
        assert Square(4, 3).name == "e4"

    def test_notation_roundtrip(self):
        for square in (Square(f, r) for r in range(BOARD_SIZE) for f in range(BOARD_SIZE)):
            assert notation_to_square(square_to_notation(square)) == square

    @pytest.mark.parametrize("text", ["i1", "a9", "a0", "e", "e44", ""])
    def test_bad_notation(self, text):
        with pytest.raises(ValueError):
            notation_to_square(text)

    def test_as_square(self):
        assert as_square("E4") == Square(4, 3)
        assert as_square((4, 3)) == Square(4, 3)
        assert as_square(Square(1, 2)) == Square(1, 2)
        with pytest.raises(ValueError):
            as_square((8, 0))
        with pytest.raises(ValueError):
            as_square(12)

    def test_manhattan_distance(self):
        assert manhattan_distance(sq("a1"), sq("a1")) == 0
        assert manhattan_distance(sq("a1"), sq("c2")) == 3
        assert manhattan_distance(sq("h8"), sq("a1")) == 14

    def test_render_board(self):
        board = [[None] * 8 for _ in range(8)]
        board[0][3] = "K"
        text = render_board(board, markers={Square(3, 0): FROZEN_MARK},
                            half_moves=4, to_move="White", phase="standard")
        assert "*K*" in text
        assert text.startswith("Half-move 4 - White to move (standard phase)")


class TestPieces:
    def test_piece_chars(self):
        assert PIECE_CHARS["N"] == PieceType.KNIGHT
        assert Piece(PieceType.QUEEN, Color.WHITE, 1).char == "Q"
        assert Piece(PieceType.QUEEN, Color.BLACK, 2).char == "q"

    def test_piece_types_match_python_chess(self):
        assert PieceType.PAWN == chess.PAWN
        assert PieceType.KING == chess.KING


class TestAdapter:
    def test_initial_ids(self):
        adapter = MoveEngineAdapter()
        assert adapter.piece_at(sq("a1")).piece_id == 1
        assert adapter.piece_at(sq("e2")).piece_id == 13
        assert adapter.piece_at(sq("h8")).piece_id == 32
        assert adapter.piece_at(sq("e4")) is None

    def test_pieces_of_order(self):
        adapter = MoveEngineAdapter()
        white = adapter.pieces_of(Color.WHITE)
        assert len(white) == 16
        assert white[0][1] == sq("a1")
        assert white[-1][1] == sq("h2")
        assert adapter.count(Color.BLACK) == 16

    def test_id_follows_move(self):
        adapter = MoveEngineAdapter()
        outcome = adapter.apply_move(sq("e2"), sq("e4"))
        assert outcome is not None
        assert outcome.captured is None
        assert outcome.moved.piece_id == 13
        assert adapter.piece_at(sq("e4")).piece_id == 13
        assert adapter.side_to_move() == Color.BLACK

    def test_illegal_move_leaves_board(self):
        adapter = MoveEngineAdapter()
        fen = adapter.serialize()
        assert adapter.apply_move(sq("e2"), sq("e5")) is None
        assert adapter.apply_move(sq("e4"), sq("e5")) is None
        assert adapter.serialize() == fen

    def test_castling_keeps_ids(self):
        adapter = MoveEngineAdapter("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        king_id = adapter.piece_at(sq("e1")).piece_id
        rook_id = adapter.piece_at(sq("h1")).piece_id
        assert adapter.castling_rook(sq("e1"), sq("g1")) == sq("h1")
        assert adapter.castling_rook(sq("e1"), sq("c1")) == sq("a1")
        assert adapter.castling_rook(sq("e1"), sq("f1")) is None
        outcome = adapter.apply_move(sq("e1"), sq("g1"))
        assert outcome.landed == (sq("g1"), sq("f1"))
        assert adapter.piece_at(sq("g1")).piece_id == king_id
        assert adapter.piece_at(sq("f1")).piece_id == rook_id
        assert adapter.piece_at(sq("h1")) is None

    def test_promotion_defaults_to_queen(self):
        adapter = MoveEngineAdapter("4k3/P7/8/8/8/8/8/4K3 w - - 0 1")
        pawn_id = adapter.piece_at(sq("a7")).piece_id
        outcome = adapter.apply_move(sq("a7"), sq("a8"))
        assert outcome.moved.piece_type == PieceType.QUEEN
        assert outcome.moved.piece_id == pawn_id

    def test_underpromotion(self):
        adapter = MoveEngineAdapter("4k3/P7/8/8/8/8/8/4K3 w - - 0 1")
        outcome = adapter.apply_move(sq("a7"), sq("a8"), PieceType.KNIGHT)
        assert outcome.moved.piece_type == PieceType.KNIGHT

    def test_en_passant_capture(self):
        adapter = MoveEngineAdapter("4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1")
        victim_id = adapter.piece_at(sq("d5")).piece_id
        outcome = adapter.apply_move(sq("e5"), sq("d6"))
        assert outcome.captured.piece_id == victim_id
        assert adapter.piece_at(sq("d5")) is None
        assert adapter.count(Color.BLACK) == 1

    def test_king_can_be_captured(self):
        adapter = MoveEngineAdapter("4k3/p7/8/8/8/8/8/4R1K1 w - - 0 1")
        outcome = adapter.apply_move(sq("e1"), sq("e8"))
        assert outcome.captured.piece_type == PieceType.KING
        assert adapter.count(Color.BLACK) == 1

    def test_king_capture_off_uses_legal_moves(self):
        fen = "4k3/8/8/8/8/8/3r4/4K3 w - - 0 1"
        pseudo = MoveEngineAdapter(fen, king_capture=True)
        legal = MoveEngineAdapter(fen, king_capture=False)
        assert sq("d1") in pseudo.legal_destinations(sq("e1"))
        assert sq("d1") not in legal.legal_destinations(sq("e1"))
        assert sq("d2") in legal.legal_destinations(sq("e1"))

    def test_legal_destinations_only_for_side_to_move(self):
        adapter = MoveEngineAdapter()
        assert adapter.legal_destinations(sq("g1")) == {sq("f3"), sq("h3")}
        assert adapter.legal_destinations(sq("g8")) == set()

    def test_has_moves(self):
        assert MoveEngineAdapter().has_moves()
        blocked = MoveEngineAdapter("7k/8/8/8/8/p7/P7/8 w - - 0 1")
        assert not blocked.has_moves()

    def test_spawn_fresh_id(self):
        adapter = MoveEngineAdapter()
        piece = adapter.spawn(PieceType.KNIGHT, Color.WHITE, sq("e4"))
        assert piece.piece_id == 33
        assert adapter.piece_at(sq("e4")) == piece
        assert adapter.count(Color.WHITE) == 17

    def test_spawn_rejects_bad_squares(self):
        adapter = MoveEngineAdapter("4k3/8/8/8/8/8/8/4K3 w - - 0 1")
        with pytest.raises(ValueError):
            adapter.spawn(PieceType.PAWN, Color.WHITE, sq("a8"))
        with pytest.raises(ValueError):
            adapter.spawn(PieceType.PAWN, Color.BLACK, sq("a1"))
        with pytest.raises(ValueError):
            adapter.spawn(PieceType.ROOK, Color.WHITE, sq("e1"))

    def test_swap(self):
        adapter = MoveEngineAdapter()
        adapter.swap(sq("b1"), sq("c1"))
        assert adapter.piece_at(sq("b1")).piece_type == PieceType.BISHOP
        assert adapter.piece_at(sq("b1")).piece_id == 3
        assert adapter.piece_at(sq("c1")).piece_type == PieceType.KNIGHT
        assert adapter.piece_at(sq("c1")).piece_id == 2

    def test_swap_rejects_pawn_on_back_rank(self):
        adapter = MoveEngineAdapter()
        with pytest.raises(ValueError):
            adapter.swap(sq("a2"), sq("b1"))
        assert adapter.piece_at(sq("a2")).piece_type == PieceType.PAWN

    def test_remove(self):
        adapter = MoveEngineAdapter()
        piece = adapter.remove(sq("d8"))
        assert piece.piece_type == PieceType.QUEEN
        assert adapter.piece_at(sq("d8")) is None
        assert adapter.remove(sq("d4")) is None

    def test_pass_turn(self):
        adapter = MoveEngineAdapter()
        adapter.pass_turn()
        assert adapter.side_to_move() == Color.BLACK
        adapter.pass_turn()
        assert adapter.side_to_move() == Color.WHITE
        assert adapter.serialize().endswith(" 2")

    def test_serialize_roundtrip(self):
        adapter = MoveEngineAdapter()
        assert adapter.serialize() == chess.STARTING_FEN
        adapter.apply_move(sq("g1"), sq("f3"))
        restored = MoveEngineAdapter.deserialize(adapter.serialize())
        assert restored.serialize() == adapter.serialize()
        assert restored.side_to_move() == Color.BLACK

    def test_copy_is_independent(self):
        adapter = MoveEngineAdapter()
        other = adapter.copy()
        other.remove(sq("e2"))
        assert adapter.piece_at(sq("e2")) is not None

    def test_display_board(self):
        board = MoveEngineAdapter().to_display_board()
        assert board[0][4] == "K"
        assert board[7][4] == "k"
        assert board[3][3] is None


class TestGameState:
    def test_initial_state(self):
        state = GameState()
        assert state.phase == Phase.STANDARD
        assert state.half_moves == 0
        assert state.active_color == Color.WHITE
        assert not state.done
        assert state.winner is None
        assert state.last_move is None
        assert state.registry.uses == {a: 1 for a in ActionId}
        assert state.effects.effects() == []

    def test_turn_state(self):
        ts = GameState().turn_state
        assert ts.phase == Phase.STANDARD
        assert ts.active_color == Color.WHITE
        assert ts.half_moves == 0

    def test_clone(self):
        state = GameState(seed=5)
        clone = state.clone()
        clone.adapter.remove(sq("e2"))
        clone.registry.consume(ActionId.NUKE)
        clone.effects.shield(1)
        clone.history.append("e2-e4")
        clone.rng.roll_d6()
        assert state.adapter.piece_at(sq("e2")) is not None
        assert state.registry.remaining_uses(ActionId.NUKE) == 1
        assert not state.effects.is_shielded(1)
        assert state.history == []
        assert state.rng.draws == 0

    def test_markers(self):
        state = GameState()
        state.effects.freeze(state.adapter.piece_at(sq("a1")).piece_id, 1)
        state.effects.shield(state.adapter.piece_at(sq("b1")).piece_id)
        state.effects.arm_trap(sq("e4"), Color.WHITE)
        marks = state.markers()
        assert marks == {sq("a1"): FROZEN_MARK, sq("b1"): SHIELD_MARK, sq("e4"): TRAP_MARK}

    def test_half_moves_to_creative(self):
        state = GameState()
        assert state.half_moves_to_creative() == 20
        state.half_moves = 15
        assert state.half_moves_to_creative() == 5


class TestWin:
    def test_no_winner_at_start(self):
        assert win.evaluate(MoveEngineAdapter()) == (False, None)

    def test_elimination(self):
        assert win.evaluate(MoveEngineAdapter("4k3/8/8/8/8/8/8/8 w - - 0 1")) == (True, Color.BLACK)
        assert win.evaluate(MoveEngineAdapter("8/8/8/8/8/8/8/4K3 b - - 0 1")) == (True, Color.WHITE)

    def test_empty_board_is_draw(self):
        assert win.evaluate(MoveEngineAdapter("8/8/8/8/8/8/8/8 w - - 0 1")) == (True, None)

    def test_checkmate_is_not_a_win(self):
        # Fool's mate position: White is mated but still has pieces
        fen = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
        assert win.evaluate(MoveEngineAdapter(fen)) == (False, None)
