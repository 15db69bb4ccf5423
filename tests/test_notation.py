"""
Unit Tests for Position and Move Text

Tests for notation parsing and rendering, focusing on:
    - Loading layouts, side to move and castling fields
    - Rejecting malformed layouts with PositionFormatError
    - Round-tripping positions through text
    - Parsing and printing move text
"""

import pytest

from rookery.board import (
    STARTING_POSITION,
    Piece,
    PieceKind,
    PositionFormatError,
    Side,
    load_position,
    move_to_uci,
    parse_move,
    parse_square,
    position_to_text,
    render_board,
    starting_position,
)


class TestLoadPosition:
    """Tests for load_position."""

    def test_starting_position(self):
        position = load_position(STARTING_POSITION)
        assert position.turn == Side.LIGHT
        assert position.piece_at(parse_square("e1")) == Piece(PieceKind.KING, Side.LIGHT)
        assert position.piece_at(parse_square("d8")) == Piece(PieceKind.QUEEN, Side.DARK)
        assert sum(not p.is_empty for p in position.board) == 32
        assert position.ply == 0

    def test_dark_to_move(self):
        assert load_position("4k3/8/8/8/8/8/8/4K3 b").turn == Side.DARK

    def test_side_defaults_to_light(self):
        assert load_position("4k3/8/8/8/8/8/8/4K3").turn == Side.LIGHT

    def test_full_fen_accepted(self):
        position = load_position("rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1")
        assert position.turn == Side.DARK
        assert position.piece_at(parse_square("e4")) == Piece(PieceKind.PAWN, Side.LIGHT)

    def test_castling_inferred_from_placement(self):
        position = load_position("r3k3/8/8/8/8/8/8/4K2R w")
        assert position.castling[Side.LIGHT].kingside
        assert not position.castling[Side.LIGHT].queenside
        assert position.castling[Side.DARK].queenside
        assert not position.castling[Side.DARK].kingside

    def test_castling_field(self):
        position = load_position("r3k2r/8/8/8/8/8/8/R3K2R w Kq")
        assert position.castling[Side.LIGHT].kingside
        assert not position.castling[Side.LIGHT].queenside
        assert not position.castling[Side.DARK].kingside
        assert position.castling[Side.DARK].queenside

    def test_no_castling_field(self):
        position = load_position("r3k2r/8/8/8/8/8/8/R3K2R w -")
        for side in (Side.LIGHT, Side.DARK):
            assert not position.castling[side].kingside
            assert not position.castling[side].queenside

    def test_strict_castling_flag(self):
        assert load_position(STARTING_POSITION, strict_castling=True).strict_castling
        assert not load_position(STARTING_POSITION).strict_castling

    @pytest.mark.parametrize("text, message", [
        ("8/8/8/8/8/8/8/8/8 w", "too many ranks"),
        ("9/8/8/8/8/8/8/8 w", "overflow"),
        ("ppppppppp/8/8/8/8/8/8/8 w", "overflow"),
        ("4x3/8/8/8/8/8/8/8 w", "unknown piece"),
        ("8/8/8/8/8/8/8/7 w", "incomplete board"),
        ("7/8/8/8/8/8/8/8 w", "incomplete board"),
        ("8/8/8 w", "incomplete board"),
        ("rnbqkbnr/pppppppp/\u00b2222/8/8/8/PPPPPPPP/RNBQKBNR w", "unknown piece"),
    ])
    def test_malformed_layouts(self, text, message):
        with pytest.raises(PositionFormatError, match=message):
            load_position(text)

    def test_bad_castling_field(self):
        with pytest.raises(PositionFormatError):
            load_position("4k3/8/8/8/8/8/8/4K3 w KX")

    def test_empty_text(self):
        with pytest.raises(PositionFormatError):
            load_position("   ")

    def test_format_error_is_value_error(self):
        with pytest.raises(ValueError):
            load_position("not a position")


class TestPositionText:
    """Tests for position_to_text and render_board."""

    def test_starting_text(self):
        assert position_to_text(starting_position()) == (
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq"
        )

    @pytest.mark.parametrize("text", [
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq",
        "r3k2r/pPp2ppp/8/3q4/4N3/8/PPPP1PPP/R3K2R b Kq",
        "8/8/8/8/8/8/8/4K2k w -",
    ])
    def test_round_trip(self, text):
        position = load_position(text)
        assert position_to_text(position) == text
        assert load_position(position_to_text(position)) == position

    def test_text_tracks_moves(self):
        position = starting_position()
        position.apply(parse_move("e2e4", position))
        assert position_to_text(position) == (
            "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq"
        )

    def test_render_board(self):
        lines = render_board(starting_position()).splitlines()
        assert lines[0] == "8  r n b q k b n r"
        assert lines[3] == "5  . . . . . . . ."
        assert lines[7] == "1  R N B Q K B N R"
        assert lines[-1] == "   a b c d e f g h"

    def test_str_and_repr(self):
        position = starting_position()
        assert str(position) == render_board(position)
        assert "KQkq" in repr(position)


class TestMoveText:
    """Tests for parse_move and move_to_uci."""

    @pytest.fixture
    def position(self):
        return starting_position()

    def test_parse(self, position):
        move = parse_move("g1f3", position)
        assert move.from_square == parse_square("g1")
        assert move.to_square == parse_square("f3")
        assert move.piece == Piece(PieceKind.KNIGHT, Side.LIGHT)
        assert move.uci() == "g1f3"
        assert str(move) == "g1f3"

    @pytest.mark.parametrize("text", ["e2", "e2e", "e2e4e5", "z2e4", "e2e9"])
    def test_malformed(self, position, text):
        with pytest.raises(ValueError):
            parse_move(text, position)

    def test_empty_source(self, position):
        with pytest.raises(ValueError, match="No piece"):
            parse_move("e3e4", position)

    def test_promotion_suffix(self):
        position = load_position("4k3/P7/8/8/8/8/8/4K3 w")
        move = parse_move("a7a8q", position)
        assert move == parse_move("a7a8", position)
        assert move_to_uci(move) == "a7a8q"

    def test_underpromotion_rejected(self):
        position = load_position("4k3/P7/8/8/8/8/8/4K3 w")
        with pytest.raises(ValueError, match="queen"):
            parse_move("a7a8n", position)

    def test_suffix_on_quiet_move_rejected(self, position):
        with pytest.raises(ValueError):
            parse_move("e2e4q", position)

    def test_move_to_uci_plain(self, position):
        assert move_to_uci(parse_move("e2e4", position)) == "e2e4"
