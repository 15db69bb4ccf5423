"""
Main entry point for running Rookery as a UCI engine.

Usage:
    python -m rookery.uci [--depth N] [--king-safety] [--log-file PATH] [--quiet]
"""

import argparse

from rookery.evaluation.classical import ClassicalEvaluator
from rookery.uci.interface import UCIEngine


def main():
    parser = argparse.ArgumentParser(description="Run Rookery as a UCI engine")
    parser.add_argument(
        "--depth",
        type=int,
        default=4,
        help="Search depth when 'go' gives none (default: 4)"
    )
    parser.add_argument(
        "--king-safety",
        action="store_true",
        help="Enable the king safety (pawn shield) evaluation term"
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Log file (default: ~/.rookery/engine.log)"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Log at INFO instead of DEBUG level"
    )
    args = parser.parse_args()

    engine = UCIEngine(
        evaluator=ClassicalEvaluator(king_safety=args.king_safety),
        default_depth=args.depth,
        debug=not args.quiet,
        log_file=args.log_file,
    )
    engine.run()


if __name__ == "__main__":
    main()
