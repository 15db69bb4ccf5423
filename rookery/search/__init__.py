"""
Search Module

This module implements the game-tree search. The algorithm is negamax with
alpha-beta pruning, extended at the horizon by a capture-only quiescence
search, with move ordering and late move reduction to prune more.

Key Components:
    - negamax: Core search algorithm with alpha-beta pruning
    - quiescence: Capture search at the horizon
    - find_best_move / choose_move: Root-level search functions
    - SearchConfig: Heuristic switches and limits
    - order_moves: MVV-LVA move ordering
"""

from rookery.search.config import SearchConfig
from rookery.search.negamax import (
    SearchResult,
    SearchStats,
    choose_move,
    find_best_move,
    negamax,
    order_moves,
    quiescence,
)

__all__ = [
    'SearchConfig',
    'SearchResult',
    'SearchStats',
    'choose_move',
    'find_best_move',
    'negamax',
    'order_moves',
    'quiescence',
]
