"""Tests for FEN, SAN and PGN notation."""

import pytest

from chessmentor.core.enums import Color, GameResult, MoveFlag, PieceType
from chessmentor.core.errors import InvalidMove, InvalidPosition
from chessmentor.core.notation import (
    STARTING_FEN,
    build_pgn,
    history_to_san,
    move_to_san,
    parse_san,
    pgn_movetext_from_sans,
    pgn_result_token,
    position_from_fen,
    position_to_fen,
)
from chessmentor.core.position import Position
from chessmentor.core.types import parse_square


class TestFEN:
    @pytest.mark.parametrize(
        "fen",
        [
            STARTING_FEN,
            "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1",
            "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1",
            "8/8/4k3/8/8/4K3/8/8 w - - 37 80",
        ],
    )
    def test_round_trip(self, fen: str) -> None:
        assert position_to_fen(position_from_fen(fen)) == fen

    def test_four_field_fen_defaults_clocks(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/4K3 b - -")
        assert pos.side_to_move == Color.BLACK
        assert pos.halfmove_clock == 0
        assert pos.fullmove_number == 1

    @pytest.mark.parametrize(
        "fen",
        [
            "",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP w KQkq - 0 1",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR x KQkq - 0 1",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkz - 0 1",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - a 1",
            "rnbqkbnr/pppppppp/9/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",
        ],
    )
    def test_invalid_fen(self, fen: str) -> None:
        with pytest.raises(InvalidPosition):
            position_from_fen(fen)


class TestSAN:
    def test_pawn_push(self) -> None:
        pos = Position.initial()
        move = pos.find_move(parse_square("e2"), parse_square("e4"))
        assert move_to_san(pos, move) == "e4"

    def test_knight_move(self) -> None:
        pos = Position.initial()
        move = pos.find_move(parse_square("g1"), parse_square("f3"))
        assert move_to_san(pos, move) == "Nf3"

    def test_castling(self) -> None:
        pos = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        short = pos.find_move(parse_square("e1"), parse_square("g1"))
        long = pos.find_move(parse_square("e1"), parse_square("c1"))
        assert move_to_san(pos, short) == "O-O"
        assert move_to_san(pos, long) == "O-O-O"

    def test_file_disambiguation(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/4K3/R6R w - - 0 1")
        move = pos.find_move(parse_square("a1"), parse_square("d1"))
        assert move_to_san(pos, move) == "Rad1"

    def test_rank_disambiguation(self) -> None:
        pos = position_from_fen("R7/8/8/8/8/8/7k/R3K3 w - - 0 1")
        move = pos.find_move(parse_square("a1"), parse_square("a4"))
        assert move_to_san(pos, move) == "R1a4"

    def test_pawn_capture_and_promotion_check(self) -> None:
        pos = position_from_fen("1r2k3/P7/8/8/8/8/8/4K3 w - - 0 1")
        move = pos.find_move(parse_square("a7"), parse_square("b8"), PieceType.QUEEN)
        assert move_to_san(pos, move) == "axb8=Q+"

    def test_mate_suffix(self) -> None:
        pos = position_from_fen("rnbqkbnr/pppp1ppp/8/4p3/6P1/5P2/PPPPP2P/RNBQKBNR b KQkq - 0 2")
        move = pos.find_move(parse_square("d8"), parse_square("h4"))
        assert move_to_san(pos, move) == "Qh4#"

    def test_parse_round_trip_over_all_moves(self) -> None:
        pos = position_from_fen(
            "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"
        )
        for move in pos.legal_moves():
            assert parse_san(pos, move_to_san(pos, move)) == move

    def test_parse_castling_with_zeros(self) -> None:
        pos = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        assert parse_san(pos, "0-0").flag == MoveFlag.CASTLE_KINGSIDE

    def test_parse_ignores_annotations(self) -> None:
        move = parse_san(Position.initial(), "Nf3!?")
        assert move.to_sq == parse_square("f3")

    @pytest.mark.parametrize("san", ["e5", "Nf4", "Zz9", "O-O"])
    def test_parse_illegal(self, san: str) -> None:
        with pytest.raises(InvalidMove):
            parse_san(Position.initial(), san)

    def test_ambiguous(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/4K3/R6R w - - 0 1")
        with pytest.raises(InvalidMove):
            parse_san(pos, "Rd1")

    def test_history_to_san(self) -> None:
        pos = Position.initial()
        for san in ("e4", "e5", "Nf3", "Nc6", "Bb5"):
            pos = pos.apply_move(parse_san(pos, san))
        assert history_to_san(pos) == ["e4", "e5", "Nf3", "Nc6", "Bb5"]


class TestPGN:
    def test_result_tokens(self) -> None:
        assert pgn_result_token(GameResult.WHITE_WINS) == "1-0"
        assert pgn_result_token(GameResult.BLACK_WINS) == "0-1"
        assert pgn_result_token(GameResult.DRAW) == "1/2-1/2"
        assert pgn_result_token(GameResult.IN_PROGRESS) == "*"

    def test_movetext_numbering(self) -> None:
        text = pgn_movetext_from_sans(["e4", "e5", "Nf3"], "*")
        assert text == "1. e4 e5 2. Nf3 *"

    def test_movetext_black_first(self) -> None:
        text = pgn_movetext_from_sans(["e5", "Nf3"], "*", first_fullmove=7, black_first=True)
        assert text == "7... e5 8. Nf3 *"

    def test_comments_are_escaped(self) -> None:
        text = pgn_movetext_from_sans(["e4"], "1-0", ["good } move"])
        assert text == "1. e4 {good ] move} 1-0"

    def test_comment_length_mismatch(self) -> None:
        with pytest.raises(ValueError):
            pgn_movetext_from_sans(["e4", "e5"], "*", ["x"])

    def test_build_pgn(self) -> None:
        pgn = build_pgn({"Event": 'A "quoted" game', "Result": "*"}, ["e4"], "*")
        lines = pgn.splitlines()
        assert lines[0] == '[Event "A \\"quoted\\" game"]'
        assert lines[1] == '[Result "*"]'
        assert lines[2] == ""
        assert lines[3] == "1. e4 *"
