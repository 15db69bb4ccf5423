"""
Engine Testing and Benchmarking

This module provides move-generation verification and a tactical test suite
for evaluating engine performance.

Tools:
    1. Perft: counts leaf nodes of the legal move tree to a fixed depth.
       Known counts from the starting position (20, 400, 8902, ...) catch
       move generation and apply/undo bugs.

    2. Tactical suite: positions with a known best move (mates and won
       material). Every position only needs rules the engine implements
       (no en-passant, no under-promotion).

Evaluation Metrics:
    - Correct Moves: Number of positions where engine found best move
    - Time per Position: Average thinking time
    - Nodes Searched: Total nodes evaluated

References:
    - Perft: https://www.chessprogramming.org/Perft
    - Perft Results: https://www.chessprogramming.org/Perft_Results
"""

import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from rookery.board import Position, load_position
from rookery.evaluation.base import Evaluator
from rookery.search.config import SearchConfig
from rookery.search.negamax import find_best_move

# Leaf counts from the starting position, indexed by depth
STARTING_PERFT = {1: 20, 2: 400, 3: 8902, 4: 197281}


def perft(position: Position, depth: int) -> int:
    """
    Count legal move sequences of length ``depth``.

    The position is modified in place and restored before returning.

    Args:
        position: Position to count from
        depth: Number of plies

    Returns:
        Number of leaf positions
    """
    if depth == 0:
        return 1

    nodes = 0
    for move in position.valid_moves():
        if depth == 1:
            nodes += 1
            continue
        with position.pushed(move):
            nodes += perft(position, depth - 1)
    return nodes


def divide(position: Position, depth: int) -> Dict[str, int]:
    """Perft split by root move, keyed by move text."""
    counts = {}
    for move in position.valid_moves():
        with position.pushed(move):
            counts[move.uci()] = perft(position, depth - 1)
    return counts


@dataclass
class SuitePosition:
    """
    A test position with expected best move(s).

    Attributes:
        text: Position text (see rookery.board.notation)
        best_moves: List of acceptable best moves (4-character move text)
        description: Human-readable description of the position
        id: Position identifier (e.g., "TAC.01")
    """
    text: str
    best_moves: List[str]
    description: str = ""
    id: str = ""


@dataclass
class SuiteResult:
    """
    Result of testing a single position.

    Attributes:
        position: The test position
        found_move: Move the engine found (move text, '' if none)
        score: Evaluation score for the move
        correct: Whether the engine found a best move
        time_taken: Time spent searching (seconds)
        nodes_searched: Number of nodes evaluated
        depth: Search depth used
    """
    position: SuitePosition
    found_move: str
    score: float
    correct: bool
    time_taken: float
    nodes_searched: int = 0
    depth: int = 0


# ============================================================================
# Tactical Test Suite
# ============================================================================

TACTICAL_POSITIONS = [
    SuitePosition(
        id="TAC.01",
        text="6k1/5ppp/8/8/8/8/8/R6K w",
        best_moves=["a1a8"],
        description="Back-rank mate with Ra8#"
    ),
    SuitePosition(
        id="TAC.02",
        text="rnbqkbnr/pppp1ppp/8/4p3/6P1/5P2/PPPPP2P/RNBQKBNR b",
        best_moves=["d8h4"],
        description="Fool's mate with Qh4#"
    ),
    SuitePosition(
        id="TAC.03",
        text="r1bqkb1r/pppp1ppp/2n2n2/4p2Q/2B1P3/8/PPPP1PPP/RNB1K1NR w",
        best_moves=["h5f7"],
        description="Scholar's mate with Qxf7#"
    ),
    SuitePosition(
        id="TAC.04",
        text="k7/8/1K6/8/8/8/8/7R w",
        best_moves=["h1h8"],
        description="King and rook mate with Rh8#"
    ),
    SuitePosition(
        id="TAC.05",
        text="4k3/8/8/3q4/8/8/3R4/4K3 w",
        best_moves=["d2d5"],
        description="Rook wins the undefended queen"
    ),
    SuitePosition(
        id="TAC.06",
        text="4k3/8/8/8/8/8/r7/Q3K3 w",
        best_moves=["a1a2"],
        description="Queen takes the rook attacking it"
    ),
]


def evaluate_position(
    position: SuitePosition,
    depth: int,
    evaluator: Optional[Evaluator] = None,
    config: Optional[SearchConfig] = None,
    verbose: bool = False,
) -> SuiteResult:
    """
    Evaluate a single test position.

    Args:
        position: Test position to evaluate
        depth: Search depth
        evaluator: Position evaluator (default: ClassicalEvaluator)
        config: Search configuration (default: SearchConfig())
        verbose: If True, print detailed output

    Returns:
        SuiteResult with engine's move and whether it was correct
    """
    board = load_position(position.text)

    if verbose:
        print(f"\nTesting {position.id}: {position.description}")
        print(f"Position: {position.text}")
        print(f"Expected moves: {position.best_moves}")

    start_time = time.time()
    result = find_best_move(board, depth, evaluator, config)
    time_taken = time.time() - start_time

    found_move = result.move.uci() if result.move is not None else ""
    correct = found_move in position.best_moves

    if verbose:
        print(f"Engine found: {found_move or '--'} (score: {result.score:.2f})")
        print(f"Nodes searched: {result.nodes:,}")
        print(f"Time: {time_taken:.2f}s")
        print(f"Result: {'✓ CORRECT' if correct else '✗ WRONG'}")

    return SuiteResult(
        position=position,
        found_move=found_move,
        score=result.score,
        correct=correct,
        time_taken=time_taken,
        nodes_searched=result.nodes,
        depth=depth,
    )


def run_tactical_suite(
    evaluator: Optional[Evaluator] = None,
    depth: int = 3,
    config: Optional[SearchConfig] = None,
    positions: Optional[List[SuitePosition]] = None,
    verbose: bool = True,
) -> Dict[str, Any]:
    """
    Run the tactical test suite.

    Args:
        evaluator: Position evaluator (default: ClassicalEvaluator)
        depth: Search depth (default: 3)
        config: Search configuration (default: SearchConfig())
        positions: Positions to run (default: TACTICAL_POSITIONS)
        verbose: If True, print detailed results

    Returns:
        Dictionary with test results:
            - score: Number of correct positions
            - total: Total number of positions
            - percentage: Success percentage
            - results: List of SuiteResult objects
            - avg_time: Average time per position
            - total_time: Total search time
    """
    positions = positions if positions is not None else TACTICAL_POSITIONS

    if verbose:
        print("=" * 70)
        print("TACTICAL TEST SUITE")
        print("=" * 70)

    results = []
    correct_count = 0
    total_time = 0.0

    for position in positions:
        result = evaluate_position(position, depth, evaluator, config, verbose=verbose)
        results.append(result)

        if result.correct:
            correct_count += 1

        total_time += result.time_taken

    avg_time = total_time / len(positions) if positions else 0
    percentage = (correct_count / len(positions) * 100) if positions else 0

    if verbose:
        print("\n" + "=" * 70)
        print("SUMMARY")
        print("=" * 70)
        print(f"Score: {correct_count}/{len(positions)} ({percentage:.1f}%)")
        print(f"Average time: {avg_time:.2f}s")
        print(f"Total time: {total_time:.2f}s")

    return {
        'score': correct_count,
        'total': len(positions),
        'percentage': percentage,
        'results': results,
        'avg_time': avg_time,
        'total_time': total_time,
    }
