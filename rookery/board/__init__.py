"""
Board Module

This module owns the game state and the rules: piece and move types,
pseudo-legal move generation per piece kind, the legality filter, and the
text formats used to load and display positions.

Key Components:
    - Position: grid, side to move, castling rights, undo history
    - movegen: one generator per piece kind plus the shared attack map
    - load_position / position_to_text: position text in and out
    - parse_move / render_board: move text and board drawing

Data Flow:
    text → load_position() → Position → legal_moves() / valid_moves()
                                      → apply(move) / undo()
"""

from rookery.board.types import (
    EMPTY,
    CastlingRights,
    Move,
    Piece,
    PieceKind,
    Side,
    UndoRecord,
    parse_square,
    square,
    square_file,
    square_name,
    square_rank,
)
from rookery.board.position import Position
from rookery.board.movegen import attacked_squares, generate_moves
from rookery.board.notation import (
    STARTING_POSITION,
    PositionFormatError,
    load_position,
    move_to_uci,
    parse_move,
    position_to_text,
    render_board,
    starting_position,
)

__all__ = [
    'EMPTY',
    'CastlingRights',
    'Move',
    'Piece',
    'PieceKind',
    'Side',
    'UndoRecord',
    'parse_square',
    'square',
    'square_file',
    'square_name',
    'square_rank',
    'Position',
    'attacked_squares',
    'generate_moves',
    'STARTING_POSITION',
    'PositionFormatError',
    'load_position',
    'move_to_uci',
    'parse_move',
    'position_to_text',
    'render_board',
    'starting_position',
]
