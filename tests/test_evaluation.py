"""
Unit Tests for Evaluation Module

Tests for position evaluation functions, focusing on:
    - Material counting accuracy
    - Piece-square table correctness
    - Symmetry (mirrored position = negated evaluation)
    - Optional king safety terms
    - Side-to-move relative scores
"""

import numpy as np
import pytest

from rookery.board import PieceKind, Side, load_position, parse_square, starting_position
from rookery.evaluation import ClassicalEvaluator, Evaluator, PIECE_VALUES
from rookery.evaluation.classical import (
    KING_SAFETY_VALUE,
    KNIGHT_TABLE,
    PAWN_SHIELD_BONUS,
    PAWN_TABLE,
    square_table,
)


def mirror(text):
    """Swap colours and flip ranks of position text."""
    layout, side = text.split()[:2]
    ranks = layout.split("/")
    flipped = "/".join(rank.swapcase() for rank in reversed(ranks))
    return f"{flipped} {'b' if side == 'w' else 'w'}"


class TestClassicalEvaluator:
    """Tests for ClassicalEvaluator."""

    @pytest.fixture
    def evaluator(self):
        """Create a ClassicalEvaluator instance."""
        return ClassicalEvaluator()

    def test_is_evaluator(self, evaluator):
        assert isinstance(evaluator, Evaluator)

    def test_starting_position_is_equal(self, evaluator):
        """The starting position is symmetric, so it scores 0."""
        score = evaluator.evaluate(starting_position())
        assert score == pytest.approx(0.0, abs=1e-9)

    def test_empty_board(self, evaluator):
        assert evaluator.evaluate(load_position("8/8/8/8/8/8/8/8 w")) == 0.0

    def test_material_advantage(self, evaluator):
        """
        Dark is up a rook (LIGHT is missing the h1 rook).
        """
        position = load_position("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBN1 w")
        score = evaluator.evaluate(position)
        assert score < -4.0, f"Dark should be ahead by about a rook, got {score}"

    def test_single_piece_value(self, evaluator):
        """A lone queen on d1 is worth its material plus its table entry."""
        position = load_position("8/8/8/8/8/8/8/3Q4 w")
        expected = PIECE_VALUES[PieceKind.QUEEN] + (-5) / 10.0
        assert evaluator.evaluate(position) == pytest.approx(expected)

    def test_piece_square_tables(self, evaluator):
        """A centralised knight scores better than one on the rim."""
        edge = load_position("7k/8/8/8/8/8/8/N6K w")
        center = load_position("7k/8/8/8/4N3/8/8/7K w")
        assert evaluator.evaluate(center) > evaluator.evaluate(edge)

    def test_pawn_table_orientation(self, evaluator):
        """An advanced LIGHT pawn is worth more than one at home."""
        home = load_position("7k/8/8/8/8/8/3P4/7K w")
        advanced = load_position("7k/3P4/8/8/8/8/8/7K w")
        assert evaluator.evaluate(advanced) > evaluator.evaluate(home)

    def test_rook_prefers_seventh_rank(self, evaluator):
        """A LIGHT rook on the 7th rank outscores one on the 2nd."""
        second = load_position("7k/8/8/8/8/8/3R4/7K w")
        seventh = load_position("7k/3R4/8/8/8/8/8/7K w")
        assert evaluator.evaluate(seventh) - evaluator.evaluate(second) == pytest.approx(1.0)

    @pytest.mark.parametrize("text", [
        "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b",
        "r1bqkb1r/pppp1ppp/2n2n2/4p2Q/2B1P3/8/PPPP1PPP/RNB1K1NR w",
        "6k1/5ppp/8/8/8/8/8/R6K w",
    ])
    def test_symmetry(self, evaluator, text):
        """Mirroring the board and swapping colours negates the score."""
        score = evaluator.evaluate(load_position(text))
        mirrored = evaluator.evaluate(load_position(mirror(text)))
        assert mirrored == pytest.approx(-score, abs=1e-9)

    def test_relative_flips_for_dark(self, evaluator):
        light = load_position("6k1/5ppp/8/8/8/8/8/R6K w")
        dark = load_position("6k1/5ppp/8/8/8/8/8/R6K b")
        assert evaluator.relative(light) == pytest.approx(evaluator.evaluate(light))
        assert evaluator.relative(dark) == pytest.approx(-evaluator.evaluate(dark))

    def test_table_scale(self):
        position = load_position("8/8/8/8/4N3/8/8/8 w")
        coarse = ClassicalEvaluator(table_scale=10.0).evaluate(position)
        fine = ClassicalEvaluator(table_scale=100.0).evaluate(position)
        assert coarse == pytest.approx(PIECE_VALUES[PieceKind.KNIGHT] + 2.0)
        assert fine == pytest.approx(PIECE_VALUES[PieceKind.KNIGHT] + 0.2)

    def test_invalid_table_scale(self):
        with pytest.raises(ValueError):
            ClassicalEvaluator(table_scale=0)

    def test_repr(self, evaluator):
        assert "king_safety=False" in repr(evaluator)


class TestSquareTable:
    """Tests for table re-indexing."""

    def test_light_reads_rank_one_from_bottom_row(self):
        flat = square_table(PAWN_TABLE, Side.LIGHT)
        # e2 sits on the table's second-to-last row
        assert flat[parse_square("e2")] == PAWN_TABLE[6][4]
        assert flat[parse_square("a7")] == PAWN_TABLE[1][0]

    def test_dark_mirrors_vertically(self):
        light = square_table(KNIGHT_TABLE, Side.LIGHT)
        dark = square_table(KNIGHT_TABLE, Side.DARK)
        assert light[parse_square("b1")] == dark[parse_square("b8")]
        assert np.array_equal(light.reshape(8, 8), np.flipud(dark.reshape(8, 8)))


class TestKingSafety:
    """Tests for the optional king safety terms."""

    def test_king_material_cancels(self):
        evaluator = ClassicalEvaluator(king_safety=True)
        score = evaluator.evaluate(starting_position())
        assert score == pytest.approx(0.0, abs=1e-9)

    def test_lone_king_carries_material(self):
        evaluator = ClassicalEvaluator(king_safety=True)
        position = load_position("8/8/8/8/8/8/8/4K3 w")
        assert evaluator.evaluate(position) > KING_SAFETY_VALUE - 1.0

    def test_pawn_shield(self):
        evaluator = ClassicalEvaluator(king_safety=True)
        position = load_position("8/8/8/8/8/8/5PPP/6K1 w")
        assert evaluator.pawn_shield(position, Side.LIGHT) == pytest.approx(3 * PAWN_SHIELD_BONUS)
        assert evaluator.pawn_shield(position, Side.DARK) == 0.0

    def test_shield_improves_score(self):
        evaluator = ClassicalEvaluator(king_safety=True)
        plain = ClassicalEvaluator()
        position = load_position("6k1/8/8/8/8/8/5PPP/6K1 w")
        assert evaluator.evaluate(position) == pytest.approx(
            plain.evaluate(position) + 3 * PAWN_SHIELD_BONUS
        )
