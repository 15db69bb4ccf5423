"""
Utility functions for move-generation checks and engine benchmarks.
"""

from rookery.utils.testing import (
    STARTING_PERFT,
    SuitePosition,
    SuiteResult,
    TACTICAL_POSITIONS,
    divide,
    evaluate_position,
    perft,
    run_tactical_suite,
)

__all__ = [
    'STARTING_PERFT',
    'SuitePosition',
    'SuiteResult',
    'TACTICAL_POSITIONS',
    'divide',
    'evaluate_position',
    'perft',
    'run_tactical_suite',
]
