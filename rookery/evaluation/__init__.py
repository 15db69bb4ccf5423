"""
Evaluation Module

This module provides position evaluation functions for the engine.
The key design principle is that evaluators are SWAPPABLE - the search
works with any evaluator that implements the base interface.

Key Components:
    - Evaluator (ABC): Abstract base class defining the evaluation interface
    - ClassicalEvaluator: Material plus piece-square table evaluation

Data Flow:
    Position → evaluator.evaluate() → float (pawn units)
                                      Positive = LIGHT advantage
                                      Negative = DARK advantage
             → evaluator.relative() → float signed for the side to move
"""

from rookery.evaluation.base import Evaluator, INFINITY, MATE_SCORE
from rookery.evaluation.classical import ClassicalEvaluator, PIECE_VALUES

__all__ = ['Evaluator', 'ClassicalEvaluator', 'INFINITY', 'MATE_SCORE', 'PIECE_VALUES']
