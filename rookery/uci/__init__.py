"""
UCI Protocol Interface

This module implements the Universal Chess Interface (UCI) protocol,
which allows the engine to communicate with chess GUIs like Arena,
En-croissant, and CuteChess.

Protocol Flow:
    GUI → "uci"
    Engine → "id name Rookery 0.1.0"
    Engine → "id author Rookery developers"
    Engine → "uciok"
    GUI → "isready"
    Engine → "readyok"
    GUI → "position startpos moves e2e4"
    GUI → "go depth 4"
    Engine → "info depth 4 score cp 25 nodes 12345 time 812 pv e7e5"
    Engine → "bestmove e7e5"

Reference:
    UCI Protocol: https://www.chessprogramming.org/UCI
"""

from rookery.uci.interface import UCIEngine

__all__ = ['UCIEngine']
