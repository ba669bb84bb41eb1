"""Tests for Position: immutable transitions, validation, snapshots."""

import pytest

from chessmentor.core.enums import CastlingRights, Color, PieceType
from chessmentor.core.errors import InvalidMove, InvalidPosition
from chessmentor.core.notation import STARTING_FEN, position_from_fen, position_to_fen
from chessmentor.core.position import Position
from chessmentor.core.types import E2, E3, E4, E5, E7, F3, G1, parse_square


class TestInitial:
    def test_matches_starting_fen(self) -> None:
        assert position_to_fen(Position.initial()) == STARTING_FEN

    def test_white_to_move(self) -> None:
        pos = Position.initial()
        assert pos.side_to_move == Color.WHITE
        assert pos.castling == CastlingRights.ALL
        assert pos.en_passant is None

    def test_twenty_legal_moves(self) -> None:
        assert len(Position.initial().legal_moves()) == 20


class TestPlay:
    def test_e2e4(self) -> None:
        start = Position.initial()
        pos = start.play(E2, E4)
        assert pos.side_to_move == Color.BLACK
        assert pos.en_passant == E3
        assert pos.halfmove_clock == 0
        assert pos.fullmove_number == 1
        assert pos.board[E4] is not None
        assert pos.board[E2] is None

    def test_original_untouched(self) -> None:
        start = Position.initial()
        start.play(E2, E4)
        assert position_to_fen(start) == STARTING_FEN
        assert start.history == ()

    def test_fullmove_increments_after_black(self) -> None:
        pos = Position.initial().play(E2, E4).play(E7, E5)
        assert pos.fullmove_number == 2
        assert pos.side_to_move == Color.WHITE

    def test_halfmove_clock_counts_quiet_moves(self) -> None:
        pos = Position.initial().play(G1, F3)
        assert pos.halfmove_clock == 1

    def test_illegal_move_rejected(self) -> None:
        with pytest.raises(InvalidMove):
            Position.initial().play(E2, E5)

    def test_wrong_color_rejected(self) -> None:
        with pytest.raises(InvalidMove):
            Position.initial().play(E7, E5)

    def test_out_of_range_square_rejected(self) -> None:
        with pytest.raises(InvalidMove):
            Position.initial().play(64, 0)

    def test_promotion_defaults_to_queen(self) -> None:
        pos = position_from_fen("4k3/P7/8/8/8/8/8/4K3 w - - 0 1")
        after = pos.play(parse_square("a7"), parse_square("a8"))
        piece = after.board[parse_square("a8")]
        assert piece is not None and piece.piece_type == PieceType.QUEEN

    def test_underpromotion(self) -> None:
        pos = position_from_fen("4k3/P7/8/8/8/8/8/4K3 w - - 0 1")
        after = pos.play(parse_square("a7"), parse_square("a8"), PieceType.KNIGHT)
        piece = after.board[parse_square("a8")]
        assert piece is not None and piece.piece_type == PieceType.KNIGHT

    def test_promotion_piece_on_normal_move_rejected(self) -> None:
        with pytest.raises(InvalidMove):
            Position.initial().play(E2, E4, PieceType.QUEEN)

    def test_king_move_drops_castling(self) -> None:
        pos = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        after = pos.play(parse_square("e1"), parse_square("f1"))
        assert after.castling == CastlingRights.BLACK_BOTH

    def test_rook_capture_drops_castling(self) -> None:
        pos = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        after = pos.play(parse_square("h1"), parse_square("h8"))
        assert not after.castling & CastlingRights.WHITE_KINGSIDE
        assert not after.castling & CastlingRights.BLACK_KINGSIDE

    def test_history_records_moves(self) -> None:
        pos = Position.initial().play(E2, E4).play(E7, E5)
        assert [r.move.uci for r in pos.history] == ["e2e4", "e7e5"]
        assert pos.start == Position.initial()


class TestValidation:
    def test_missing_king(self) -> None:
        with pytest.raises(InvalidPosition):
            position_from_fen("8/8/8/8/8/8/8/4K3 w - - 0 1")

    def test_two_kings(self) -> None:
        with pytest.raises(InvalidPosition):
            position_from_fen("4k3/8/8/8/8/8/8/3KK3 w - - 0 1")

    def test_pawn_on_back_rank(self) -> None:
        with pytest.raises(InvalidPosition):
            position_from_fen("P3k3/8/8/8/8/8/8/4K3 w - - 0 1")

    def test_side_not_to_move_in_check(self) -> None:
        with pytest.raises(InvalidPosition):
            position_from_fen("4k3/8/8/8/8/8/8/4R1K1 w - - 0 1")

    def test_bad_en_passant_square(self) -> None:
        with pytest.raises(InvalidPosition):
            position_from_fen("4k3/8/8/8/8/8/8/4K3 w - e3 0 1")


class TestSnapshot:
    def test_round_trip_with_history(self) -> None:
        pos = Position.initial().play(E2, E4).play(E7, E5).play(G1, F3)
        snapshot = pos.to_snapshot()
        assert snapshot["san"] == ["e4", "e5", "Nf3"]
        restored = Position.from_snapshot(snapshot)
        assert restored == pos
        assert len(restored.history) == 3

    def test_board_rows_start_at_rank_eight(self) -> None:
        snapshot = Position.initial().to_snapshot()
        assert snapshot["board"][0][0] == "r"
        assert snapshot["board"][7][4] == "K"

    def test_tampered_snapshot_rejected(self) -> None:
        snapshot = Position.initial().play(E2, E4).to_snapshot()
        snapshot["fen"] = STARTING_FEN
        with pytest.raises(InvalidPosition):
            Position.from_snapshot(snapshot)

    def test_malformed_snapshot_rejected(self) -> None:
        with pytest.raises(InvalidPosition):
            Position.from_snapshot({"moves": ["e2e4"]})


class TestMirror:
    def test_mirror_of_start_is_start_with_black_to_move(self) -> None:
        mirrored = Position.initial().mirror()
        assert mirrored.side_to_move == Color.BLACK
        assert mirrored.board == Position.initial().board
        assert mirrored.castling == CastlingRights.ALL

    def test_keys_differ_by_side_to_move(self) -> None:
        assert Position.initial().mirror().key != Position.initial().key
