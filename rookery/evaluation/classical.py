"""
Classical Piece-Square Table Evaluation

This module implements a traditional evaluation function using:
    1. Material counting (piece values)
    2. Piece-Square Tables (positional bonuses/penalties)
    3. Optional king safety (pawn shield)

Evaluation Components:
    - Material: P=1.00, N=2.93, B=3.00, R=4.56, Q=9.05, K=0
      (K=KING_SAFETY_VALUE when king safety is enabled)
    - Position: PST bonuses divided by table_scale

Reference:
    Simplified Evaluation Function
    https://www.chessprogramming.org/Simplified_Evaluation_Function
"""

from typing import Dict, List

import numpy as np

from rookery.board import Position, PieceKind, Side
from rookery.board.movegen import KING_TARGETS
from rookery.evaluation.base import Evaluator

#fmt: off
# ============================================================================
# Material Values (pawn units)
# ============================================================================

PIECE_VALUES = {
    PieceKind.PAWN: 1.00,
    PieceKind.KNIGHT: 2.93,
    PieceKind.BISHOP: 3.00,
    PieceKind.ROOK: 4.56,
    PieceKind.QUEEN: 9.05,
    PieceKind.KING: 0.0,
}

# King material when king safety terms are enabled
KING_SAFETY_VALUE = 200.0

# Bonus per same-side pawn next to the king
PAWN_SHIELD_BONUS = 0.10

# Default divisor applied to every table entry
TABLE_SCALE = 10.0


# ============================================================================
# Piece-Square Tables (PSTs)
# ============================================================================
# Values are from LIGHT's perspective (row 0 = rank 8, row 7 = rank 1).
# For DARK pieces the table is flipped vertically.
#
# Convention: Higher values = better squares
#
# ============================================================================

# Pawn PST: Encourage central pawns, reward advanced pawns
PAWN_TABLE = np.array([
    [  0,   0,   0,   0,   0,   0,   0,   0],  # Rank 8 (promotion)
    [ 10,  10,  10,  10,  10,  10,  10,  10],  # Rank 7
    [  5,   5,  10,  25,  25,  10,   5,   5],  # Rank 6
    [  0,   0,   0,  20,  20,   0,   0,   0],  # Rank 5
    [  5,  -5, -10,   0,   0, -10,  -5,   5],  # Rank 4
    [  5,  10,  10, -20, -20,  10,  10,   5],  # Rank 3
    [ 10,  10,  20, -20, -20,  20,  10,  10],  # Rank 2
    [  0,   0,   0,   0,   0,   0,   0,   0],  # Rank 1
], dtype=np.float32)

# Knight PST: "Knights on the rim are dim"
KNIGHT_TABLE = np.array([
    [-50, -40, -30, -30, -30, -30, -40, -50],
    [-40, -20,   0,   5,   5,   0, -20, -40],
    [-30,   5,  10,  15,  15,  10,   5, -30],
    [-30,   0,  15,  20,  20,  15,   0, -30],
    [-30,   5,  15,  20,  20,  15,   5, -30],
    [-30,   0,  10,  15,  15,  10,   0, -30],
    [-40, -20,   0,   0,   0,   0, -20, -40],
    [-50, -40, -30, -30, -30, -30, -40, -50],
], dtype=np.float32)

# Bishop PST: Prefer long diagonals, avoid corners
BISHOP_TABLE = np.array([
    [-20, -10, -10, -10, -10, -10, -10, -20],
    [-10,   5,   0,   0,   0,   0,   5, -10],
    [-10,  10,  10,  10,  10,  10,  10, -10],
    [-10,   0,  10,  10,  10,  10,   0, -10],
    [-10,   5,   5,  10,  10,   5,   5, -10],
    [-10,   0,   5,  10,  10,   5,   0, -10],
    [-10,   0,   0,   0,   0,   0,   0, -10],
    [-20, -10, -10, -10, -10, -10, -10, -20],
], dtype=np.float32)

# Rook PST: Prefer the 7th rank and central files
ROOK_TABLE = np.array([
    [  0,   0,   0,   0,   0,   0,   0,   0],
    [  5,  10,  10,  10,  10,  10,  10,   5],
    [ -5,   0,   0,   0,   0,   0,   0,  -5],
    [ -5,   0,   0,   0,   0,   0,   0,  -5],
    [ -5,   0,   0,   0,   0,   0,   0,  -5],
    [ -5,   0,   0,   0,   0,   0,   0,  -5],
    [ -5,   0,   0,   0,   0,   0,   0,  -5],
    [  0,   0,   0,   5,   5,   0,   0,   0],
], dtype=np.float32)

# Queen PST: Avoid early development, prefer central control
QUEEN_TABLE = np.array([
    [-20, -10, -10,  -5,  -5, -10, -10, -20],
    [-10,   0,   5,   0,   0,   0,   0, -10],
    [-10,   5,   5,   5,   5,   5,   0, -10],
    [  0,   0,   5,   5,   5,   5,   0,  -5],
    [ -5,   0,   5,   5,   5,   5,   0,  -5],
    [-10,   0,   5,   5,   5,   5,   0, -10],
    [-10,   0,   0,   0,   0,   0,   0, -10],
    [-20, -10, -10,  -5,  -5, -10, -10, -20],
], dtype=np.float32)

# King PST (Middlegame): Stay safe, prefer castled position
KING_TABLE = np.array([
    [-30, -40, -40, -50, -50, -40, -40, -30],
    [-30, -40, -40, -50, -50, -40, -40, -30],
    [-30, -40, -40, -50, -50, -40, -40, -30],
    [-30, -40, -40, -50, -50, -40, -40, -30],
    [-20, -30, -30, -40, -40, -30, -30, -20],
    [-10, -20, -20, -20, -20, -20, -20, -10],
    [ 20,  20,   0,   0,   0,   0,  20,  20],
    [ 20,  30,  10,   0,   0,  10,  30,  20],
], dtype=np.float32)
#fmt: on

PIECE_TABLES = {
    PieceKind.PAWN: PAWN_TABLE,
    PieceKind.KNIGHT: KNIGHT_TABLE,
    PieceKind.BISHOP: BISHOP_TABLE,
    PieceKind.ROOK: ROOK_TABLE,
    PieceKind.QUEEN: QUEEN_TABLE,
    PieceKind.KING: KING_TABLE,
}


def square_table(table: np.ndarray, side: Side) -> np.ndarray:
    """
    Re-index a LIGHT-oriented (row 0 = rank 8) table by square index.

    Returns a flat array of 64 values where entry ``rank * 8 + file`` is the
    bonus for a piece of ``side`` on that square. DARK reads the table
    mirrored vertically.
    """
    oriented = np.flipud(table) if side == Side.LIGHT else table
    return oriented.reshape(64)


class ClassicalEvaluator(Evaluator):
    """
    Classical evaluation using material and piece-square tables.

    Material and table bonus are folded into one value per
    (kind, side, square) when the evaluator is built, so evaluate() is a
    single pass over the board.

    Attributes:
        king_safety: Whether the king carries KING_SAFETY_VALUE and the pawn
            shield term is applied
        table_scale: Divisor applied to every table entry
        square_values: (kind, side) -> 64 signed values
    """

    def __init__(self, king_safety: bool = False, table_scale: float = TABLE_SCALE):
        """Initialize the classical evaluator with piece-square tables."""
        if table_scale <= 0:
            raise ValueError(f"table_scale must be positive, got {table_scale}")

        self.king_safety = king_safety
        self.table_scale = table_scale

        self.square_values: Dict[tuple, List[float]] = {}
        for kind, table in PIECE_TABLES.items():
            material = PIECE_VALUES[kind]
            if kind == PieceKind.KING and king_safety:
                material = KING_SAFETY_VALUE
            for side, sign in ((Side.LIGHT, 1.0), (Side.DARK, -1.0)):
                values = material + square_table(table, side).astype(np.float64) / table_scale
                self.square_values[(kind, side)] = [sign * float(v) for v in values]

    def pawn_shield(self, position: Position, side: Side) -> float:
        """Bonus for same-side pawns adjacent to the king of ``side``."""
        king = position.king_square(side)
        if king is None:
            return 0.0
        shield = 0
        for sq in KING_TARGETS[king]:
            piece = position.board[sq]
            if piece.kind == PieceKind.PAWN and piece.side == side:
                shield += 1
        return shield * PAWN_SHIELD_BONUS

    def evaluate(self, position: Position) -> float:
        """
        Evaluate position using material + PST.

        Args:
            position: Position to evaluate

        Returns:
            float: Evaluation in pawn units (LIGHT's perspective)
        """
        square_values = self.square_values
        score = 0.0

        for sq, piece in enumerate(position.board):
            if piece.is_empty:
                continue
            score += square_values[piece][sq]

        if self.king_safety:
            score += self.pawn_shield(position, Side.LIGHT)
            score -= self.pawn_shield(position, Side.DARK)

        return score

    def __repr__(self) -> str:
        return (
            f"ClassicalEvaluator(king_safety={self.king_safety}, "
            f"table_scale={self.table_scale})"
        )
