"""
Position and Move Text

Conversions between text and the board types:

    load_position("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w")
        → Position
    position_to_text(position)
        → "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq"
    parse_move("e2e4", position)
        → Move(12, 28, Piece(PAWN, LIGHT))
    render_board(position)
        → multi-line board drawing

Position Text Format:
    <layout> [<side>] [<castling>] [ignored...]

    layout:   ranks 8 down to 1 separated by '/', digits for runs of empty
              squares, piece letters (uppercase = LIGHT, lowercase = DARK)
    side:     'w' for LIGHT, anything else for DARK (default: 'w')
    castling: FEN castling letters ('KQkq' subset or '-'). When omitted, a
              right is available whenever its king and rook stand on their
              home squares.

Any further fields (en-passant square, move clocks) are accepted and
ignored, so ordinary FEN strings load.
"""

from typing import Dict, List

from rookery.board.movegen import CASTLING_LANES, PROMOTION_RANK
from rookery.board.position import Position
from rookery.board.types import (
    EMPTY,
    CastlingRights,
    Move,
    Piece,
    PieceKind,
    Side,
    parse_square,
    square,
    square_name,
    square_rank,
)

STARTING_POSITION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w"

_CASTLING_LETTERS = {
    (Side.LIGHT, "kingside"): "K",
    (Side.LIGHT, "queenside"): "Q",
    (Side.DARK, "kingside"): "k",
    (Side.DARK, "queenside"): "q",
}


class PositionFormatError(ValueError):
    """Raised when position text cannot be parsed."""


def _parse_layout(layout: str) -> List[Piece]:
    board = [EMPTY] * 64
    file = 0
    rank = 7
    separators = 0

    for char in layout:
        if char == "/":
            separators += 1
            if separators > 7:
                raise PositionFormatError("Invalid position: too many ranks")
            if file != 8:
                raise PositionFormatError(
                    f"Invalid position: incomplete board (rank {rank + 1} has {file} squares)"
                )
            file = 0
            rank -= 1
            continue

        if char in "0123456789":
            run = int(char)
            if run == 0:
                raise PositionFormatError("Invalid position: empty run of zero squares")
            file += run
            if file > 8:
                raise PositionFormatError(f"Invalid position: rank {rank + 1} overflow")
            continue

        try:
            piece = Piece.from_symbol(char)
        except ValueError:
            raise PositionFormatError(f"Invalid position: unknown piece {char!r}") from None

        if file >= 8:
            raise PositionFormatError(f"Invalid position: rank {rank + 1} overflow")

        board[square(file, rank)] = piece
        file += 1

    if rank != 0 or file != 8:
        raise PositionFormatError("Invalid position: incomplete board")

    return board


def _parse_castling(field: str) -> Dict[Side, CastlingRights]:
    if field != "-" and (not field or any(char not in "KQkq" for char in field)):
        raise PositionFormatError(f"Invalid position: bad castling field {field!r}")

    return {
        side: CastlingRights(
            king_moved=False,
            kingside_rook_moved=_CASTLING_LETTERS[(side, "kingside")] not in field,
            queenside_rook_moved=_CASTLING_LETTERS[(side, "queenside")] not in field,
        )
        for side in (Side.LIGHT, Side.DARK)
    }


def _infer_castling(board: List[Piece]) -> Dict[Side, CastlingRights]:
    rights = {}
    for side, lanes in CASTLING_LANES.items():
        king_home = board[lanes[0].king_from] == Piece(PieceKind.KING, side)
        rook = Piece(PieceKind.ROOK, side)
        rights[side] = CastlingRights(
            king_moved=not king_home,
            kingside_rook_moved=board[lanes[0].rook_from] != rook,
            queenside_rook_moved=board[lanes[1].rook_from] != rook,
        )
    return rights


def load_position(text: str, strict_castling: bool = False) -> Position:
    """
    Build a Position from position text.

    The text is fully parsed before the Position is created, so a failure
    never leaves a partially loaded position behind.

    Args:
        text: Position text (see module docstring)
        strict_castling: Forbid castling out of, through or into check

    Returns:
        New Position with an empty history

    Raises:
        PositionFormatError: If the layout has more than 8 ranks, a rank
            overflows, a piece letter is unknown, the board is incomplete or
            the castling field is malformed
    """
    fields = text.split()
    if not fields:
        raise PositionFormatError("Invalid position: empty text")

    board = _parse_layout(fields[0])
    turn = Side.LIGHT if len(fields) < 2 or fields[1] == "w" else Side.DARK
    castling = _parse_castling(fields[2]) if len(fields) > 2 else _infer_castling(board)

    return Position(board, turn, castling, strict_castling=strict_castling)


def starting_position(strict_castling: bool = False) -> Position:
    return load_position(STARTING_POSITION, strict_castling=strict_castling)


def position_to_text(position: Position) -> str:
    """Inverse of ``load_position``: layout, side and castling fields."""
    ranks = []
    for rank in range(7, -1, -1):
        row = ""
        empty = 0
        for file in range(8):
            piece = position.board[square(file, rank)]
            if piece.is_empty:
                empty += 1
                continue
            if empty:
                row += str(empty)
                empty = 0
            row += piece.symbol()
        if empty:
            row += str(empty)
        ranks.append(row)

    castling = ""
    for side in (Side.LIGHT, Side.DARK):
        rights = position.castling[side]
        for wing in ("kingside", "queenside"):
            if getattr(rights, wing):
                castling += _CASTLING_LETTERS[(side, wing)]

    turn = "w" if position.turn == Side.LIGHT else "b"
    return f"{'/'.join(ranks)} {turn} {castling or '-'}"


def parse_move(text: str, position: Position) -> Move:
    """
    Parse 4-character move text such as 'e2e4' against a position.

    A fifth character 'q' (UCI promotion suffix) is accepted on pawn moves
    to the far rank; other promotion pieces are rejected because promotion
    is always to a queen.

    Raises:
        ValueError: If the text is malformed, names a square off the board,
            or the source square is empty
    """
    text = text.strip()
    if len(text) not in (4, 5):
        raise ValueError(f"Move text must be 4 characters (e.g. 'e2e4'), got {text!r}")

    from_square = parse_square(text[0:2])
    to_square = parse_square(text[2:4])

    piece = position.board[from_square]
    if piece.is_empty:
        raise ValueError(f"No piece at source square {square_name(from_square)}")

    move = Move(from_square, to_square, piece)
    if len(text) == 5:
        if text[4].lower() != "q":
            raise ValueError(f"Only queen promotion is supported, got {text!r}")
        if not position.is_promotion(move):
            raise ValueError(f"Promotion suffix on a non-promoting move: {text!r}")
    return move


def move_to_uci(move: Move) -> str:
    """Move text with the 'q' suffix UCI expects on promotions."""
    if (
        move.piece.kind == PieceKind.PAWN
        and square_rank(move.to_square) == PROMOTION_RANK[move.piece.side]
    ):
        return move.uci() + "q"
    return move.uci()


def render_board(position: Position) -> str:
    """
    Draw the board with rank 8 at the top.

        8  r n b q k b n r
        ...
        1  R N B Q K B N R

           a b c d e f g h
    """
    lines = []
    for rank in range(7, -1, -1):
        symbols = " ".join(position.board[square(file, rank)].symbol() for file in range(8))
        lines.append(f"{rank + 1}  {symbols}")
    lines.append("")
    lines.append("   a b c d e f g h")
    return "\n".join(lines)
