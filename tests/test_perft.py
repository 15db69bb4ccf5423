"""
Unit Tests for Perft and the Tactical Suite

Tests for rookery.utils.testing, focusing on:
    - Perft node counts from the starting position
    - Perft agreeing with python-chess on positions the engine fully supports
    - The tactical suite being solved at a shallow depth
"""

import chess
import pytest

from rookery.board import load_position, starting_position
from rookery.search import SearchConfig
from rookery.utils import (
    STARTING_PERFT,
    SuitePosition,
    TACTICAL_POSITIONS,
    divide,
    evaluate_position,
    perft,
    run_tactical_suite,
)


def reference_perft(board, depth):
    """python-chess perft counting only queen promotions."""
    if depth == 0:
        return 1
    nodes = 0
    for move in board.legal_moves:
        if move.promotion not in (None, chess.QUEEN):
            continue
        board.push(move)
        nodes += reference_perft(board, depth - 1)
        board.pop()
    return nodes


class TestPerft:
    """Tests for perft and divide."""

    @pytest.mark.parametrize("depth", [1, 2, 3])
    def test_starting_position(self, depth):
        assert perft(starting_position(), depth) == STARTING_PERFT[depth]

    def test_depth_zero(self):
        assert perft(starting_position(), 0) == 1

    def test_position_restored(self):
        position = starting_position()
        original = position.copy()
        perft(position, 2)
        assert position == original

    def test_divide_sums_to_perft(self):
        position = starting_position()
        counts = divide(position, 2)
        assert len(counts) == 20
        assert all(count == 20 for count in counts.values())
        assert sum(counts.values()) == perft(position, 2)

    @pytest.mark.parametrize("fen", [
        "r6k/1P4pp/8/3Q4/8/2n5/6PP/6K1 w - - 0 1",
        "4r2k/8/8/8/8/8/4N3/4K3 w - - 0 1",
        "8/2P3k1/8/8/3b4/8/5p2/4R2K b - - 0 1",
    ])
    def test_matches_reference(self, fen):
        assert perft(load_position(fen), 2) == reference_perft(chess.Board(fen), 2)


class TestTacticalSuite:
    """Tests for the tactical suite runner."""

    def test_positions_load(self):
        for suite_position in TACTICAL_POSITIONS:
            position = load_position(suite_position.text)
            assert position.valid_moves(), suite_position.id

    def test_suite_solved(self):
        result = run_tactical_suite(depth=2, verbose=False)
        failed = [r.position.id for r in result['results'] if not r.correct]
        assert result['score'] == result['total'], f"Failed: {failed}"
        assert result['percentage'] == 100.0

    def test_wrong_answer_reported(self):
        suite_position = SuitePosition(
            id="T.01",
            text="6k1/5ppp/8/8/8/8/8/R6K w",
            best_moves=["a1a2"],
        )
        result = evaluate_position(suite_position, 2)
        assert result.found_move == "a1a8"
        assert not result.correct
        assert result.nodes_searched > 0
        assert result.depth == 2

    def test_no_legal_move(self):
        suite_position = SuitePosition(text="k7/2Q5/1K6/8/8/8/8/8 b", best_moves=[])
        result = evaluate_position(suite_position, 2)
        assert result.found_move == ""
        assert result.score == 0.0

    def test_verbose_output(self, capsys):
        run_tactical_suite(
            depth=2,
            config=SearchConfig(quiescence_horizon=2),
            positions=TACTICAL_POSITIONS[:1],
            verbose=True,
        )
        output = capsys.readouterr().out
        assert "TACTICAL TEST SUITE" in output
        assert "TAC.01" in output
        assert "Score: 1/1" in output

    def test_empty_suite(self):
        result = run_tactical_suite(positions=[], verbose=False)
        assert result['total'] == 0
        assert result['percentage'] == 0
