#!/usr/bin/env python3
"""
Engine Benchmark Runner

Verifies move generation with perft from the starting position, then runs
the tactical test suite at multiple depths to compare search settings.

Usage:
    python tools/run_benchmark.py [--depths 1,2,3] [--perft-depth 3] [--verbose]
"""

import sys
import argparse
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from rookery.board import starting_position
from rookery.evaluation.classical import ClassicalEvaluator
from rookery.search.config import SearchConfig
from rookery.utils.testing import STARTING_PERFT, perft, run_tactical_suite


def format_time(seconds: float) -> str:
    """Format time"""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        minutes = int(seconds // 60)
        secs = seconds % 60
        return f"{minutes}m {secs:.0f}s"


def run_perft(max_depth: int) -> bool:
    """
    Count perft from the starting position up to ``max_depth``.

    Returns:
        True if every count with a known reference value matches
    """
    print("=" * 80)
    print("PERFT - starting position")
    print("=" * 80)
    print(f"{'Depth':<8} {'Nodes':>12} {'Expected':>12} {'Time':>10}")
    print("-" * 80)

    position = starting_position()
    ok = True
    for depth in range(1, max_depth + 1):
        start_time = time.time()
        nodes = perft(position, depth)
        elapsed = time.time() - start_time

        expected = STARTING_PERFT.get(depth)
        if expected is not None and nodes != expected:
            ok = False
        expected_text = f"{expected:,}" if expected is not None else "-"
        print(f"{depth:<8} {nodes:>12,} {expected_text:>12} {format_time(elapsed):>10}")

    print("-" * 80)
    print("Perft OK" if ok else "Perft MISMATCH")
    print()
    return ok


def run_benchmark(depths: list, config: SearchConfig, king_safety: bool = False,
                  verbose: bool = False):
    """
    Run the tactical suite at multiple depths.

    Args:
        depths: List of depths to test
        config: Search configuration shared by every run
        king_safety: Enable the king-safety evaluation term
        verbose: If True, print detailed results for each position
    """
    evaluator = ClassicalEvaluator(king_safety=king_safety)

    print("=" * 80)
    print("TACTICAL BENCHMARK - Rookery Chess Engine")
    print("=" * 80)
    print(f"Evaluator: {evaluator!r}")
    print(f"Search: {config}")
    print(f"Depths: {depths}")
    print("=" * 80)
    print()

    all_results = []

    for depth in depths:
        print(f"\n{'=' * 80}")
        print(f"DEPTH {depth}")
        print("=" * 80)

        start_time = time.time()
        result = run_tactical_suite(
            evaluator=evaluator,
            depth=depth,
            config=config,
            verbose=verbose
        )
        total_time = time.time() - start_time

        total_nodes = sum(r.nodes_searched for r in result['results'])
        nodes_per_sec = total_nodes / total_time if total_time > 0 else 0

        all_results.append({
            'depth': depth,
            'score': result['score'],
            'total': result['total'],
            'percentage': result['percentage'],
            'avg_time': result['avg_time'],
            'total_time': total_time,
            'total_nodes': total_nodes,
            'nodes_per_sec': nodes_per_sec,
            'results': result['results']
        })

        print(f"\nResults at depth {depth}:")
        print(f"  Correct: {result['score']}/{result['total']} ({result['percentage']:.1f}%)")
        print(f"  Total time: {format_time(total_time)}")
        print(f"  Avg time per position: {format_time(result['avg_time'])}")
        print(f"  Total nodes: {total_nodes:,}")
        print(f"  Nodes/sec: {nodes_per_sec:,.0f}")

        failed = [r for r in result['results'] if not r.correct]
        if failed and verbose:
            print(f"\n  Failed positions:")
            for r in failed:
                print(f"    {r.position.id}: Expected {r.position.best_moves}, got {r.found_move}")

    print("\n" + "=" * 80)
    print("SUMMARY TABLE")
    print("=" * 80)
    print(f"{'Depth':<8} {'Correct':<12} {'%':<8} {'Avg Time':<12} {'Nodes/sec':<15}")
    print("-" * 80)

    for r in all_results:
        print(f"{r['depth']:<8} {r['score']}/{r['total']:<8} {r['percentage']:<7.1f}% "
              f"{format_time(r['avg_time']):<12} {r['nodes_per_sec']:>12,.0f}")

    print("=" * 80)

    position_results = {}
    for r in all_results:
        for pos_result in r['results']:
            position_results.setdefault(pos_result.position.id, []).append(pos_result.correct)

    always_failed = [pos_id for pos_id, results in position_results.items()
                     if not any(results)]

    if always_failed:
        print(f"\nPositions that failed at all depths: {', '.join(sorted(always_failed))}")

    return all_results


def main():
    parser = argparse.ArgumentParser(
        description="Run perft and the tactical suite at multiple depths"
    )
    parser.add_argument(
        "--depths",
        type=str,
        default="1,2,3",
        help="Comma-separated list of depths to test (default: 1,2,3)"
    )
    parser.add_argument(
        "--perft-depth",
        type=int,
        default=3,
        help="Deepest perft count from the starting position (default: 3, 0 to skip)"
    )
    parser.add_argument(
        "--king-safety",
        action="store_true",
        help="Enable the king-safety evaluation term"
    )
    parser.add_argument(
        "--no-lmr",
        action="store_true",
        help="Disable late move reduction"
    )
    parser.add_argument(
        "--quiescence-horizon",
        type=int,
        default=4,
        help="Capture plies searched past the horizon (default: 4)"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print detailed results for each position"
    )

    args = parser.parse_args()

    try:
        depths = [int(d.strip()) for d in args.depths.split(",")]
    except ValueError:
        print("Error: depths must be comma-separated integers")
        sys.exit(1)

    try:
        config = SearchConfig(
            quiescence_horizon=args.quiescence_horizon,
            late_move_reduction=not args.no_lmr,
        )
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    try:
        perft_ok = run_perft(args.perft_depth) if args.perft_depth > 0 else True
        run_benchmark(depths, config, king_safety=args.king_safety, verbose=args.verbose)
    except KeyboardInterrupt:
        print("\n\nBenchmark interrupted by user")
        sys.exit(1)

    print("\n" + "=" * 80)
    print("Benchmark complete!")
    print("=" * 80)

    if not perft_ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
