"""
Abstract Evaluator Interface

This module defines the abstract base class for all position evaluators.
By defining a common interface, we can swap between evaluators without
modifying the search algorithm.

Key Principles:
    1. Evaluators are stateless
    2. evaluate() always returns a score from LIGHT's perspective
    3. Positive = LIGHT advantage, Negative = DARK advantage
    4. Terminal positions (mate, stalemate) are scored by the search, not here

Convention:
    - Scores are floats in pawn units (pawn = 1.00)
    - Return 0 for perfectly equal positions
    - relative() negates for DARK so the search can always maximise
"""

from abc import ABC, abstractmethod

from rookery.board import Position, Side

# Evaluation constants
INFINITY = float("inf")
MATE_SCORE = 100000.0  # Base score for checkmate, adjusted by remaining depth


class Evaluator(ABC):
    """
    Abstract base class for position evaluation.

    All evaluator implementations must inherit from this class and implement
    the evaluate() method. This ensures compatibility with the search.

    Methods:
        evaluate(position): Static score from LIGHT's perspective
        relative(position): Static score from the side to move's perspective
    """

    @abstractmethod
    def evaluate(self, position: Position) -> float:
        """
        Evaluate a position from LIGHT's perspective.

        Args:
            position: Position to evaluate

        Returns:
            float: Evaluation in pawn units
        """
        pass

    def relative(self, position: Position) -> float:
        """Evaluation signed for the side to move (negamax convention)."""
        score = self.evaluate(position)
        return score if position.turn == Side.LIGHT else -score

    def __repr__(self) -> str:
        """String representation of evaluator."""
        return f"{self.__class__.__name__}()"
