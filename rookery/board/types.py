"""
Core Board Types

Value types shared by the position, the move generator and the search.

Square Encoding:
    A square is a packed int ``rank * 8 + file`` in [0, 64), so that
    A1 = 0, H1 = 7, A8 = 56 and H8 = 63. ``square()``, ``square_file()`` and
    ``square_rank()`` convert between the packed and unpacked forms.

Pieces:
    A Piece is a (kind, side) pair. ``EMPTY`` is the only piece whose kind is
    NONE, and it is what an unoccupied square holds.
"""

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import NamedTuple, Optional

FILE_NAMES = "abcdefgh"
RANK_NAMES = "12345678"


class PieceKind(IntEnum):
    """Kind of a piece. NONE marks an empty square."""
    NONE = 0
    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6


class Side(IntEnum):
    """Owner of a piece. LIGHT moves first and plays up the board."""
    NONE = 0
    LIGHT = 1
    DARK = 2

    @property
    def opponent(self) -> "Side":
        if self == Side.LIGHT:
            return Side.DARK
        if self == Side.DARK:
            return Side.LIGHT
        return Side.NONE


_KIND_SYMBOLS = {
    PieceKind.PAWN: "p",
    PieceKind.KNIGHT: "n",
    PieceKind.BISHOP: "b",
    PieceKind.ROOK: "r",
    PieceKind.QUEEN: "q",
    PieceKind.KING: "k",
}
_SYMBOL_KINDS = {symbol: kind for kind, symbol in _KIND_SYMBOLS.items()}


class Piece(NamedTuple):
    """A (kind, side) pair."""
    kind: PieceKind
    side: Side

    @property
    def is_empty(self) -> bool:
        return self.kind == PieceKind.NONE

    def symbol(self) -> str:
        """
        Single-letter symbol: uppercase for LIGHT, lowercase for DARK,
        '.' for an empty square.
        """
        if self.kind == PieceKind.NONE:
            return "."
        letter = _KIND_SYMBOLS[self.kind]
        return letter.upper() if self.side == Side.LIGHT else letter

    @classmethod
    def from_symbol(cls, symbol: str) -> "Piece":
        """
        Parse a piece letter.

        Raises:
            ValueError: If the letter names no piece kind
        """
        kind = _SYMBOL_KINDS.get(symbol.lower())
        if kind is None or len(symbol) != 1:
            raise ValueError(f"Unknown piece letter: {symbol!r}")
        side = Side.LIGHT if symbol.isupper() else Side.DARK
        return cls(kind, side)


EMPTY = Piece(PieceKind.NONE, Side.NONE)


# ============================================================================
# Squares
# ============================================================================

def square(file: int, rank: int) -> int:
    """
    Pack (file, rank) into a square index.

    Args:
        file: File index (0-7) where 0 is the A-file
        rank: Rank index (0-7) where 0 is rank 1

    Returns:
        Square index (0-63)

    Raises:
        ValueError: If either coordinate is outside [0, 8)
    """
    if not (0 <= file < 8 and 0 <= rank < 8):
        raise ValueError(f"Square coordinates out of range: ({file}, {rank})")
    return rank * 8 + file


def square_file(sq: int) -> int:
    return sq & 7


def square_rank(sq: int) -> int:
    return sq >> 3


def square_name(sq: int) -> str:
    """Algebraic name of a square, e.g. 12 -> 'e2'."""
    if not 0 <= sq < 64:
        raise ValueError(f"Square index out of range: {sq}")
    return FILE_NAMES[square_file(sq)] + RANK_NAMES[square_rank(sq)]


def parse_square(name: str) -> int:
    """
    Parse an algebraic square name such as 'e4'.

    Raises:
        ValueError: If the name is malformed or off the board
    """
    if len(name) != 2:
        raise ValueError(f"Invalid square: {name!r}")
    file = FILE_NAMES.find(name[0])
    rank = RANK_NAMES.find(name[1])
    if file < 0 or rank < 0:
        raise ValueError(f"Invalid square: {name!r}")
    return square(file, rank)


SQUARES = range(64)

A1, B1, C1, D1, E1, F1, G1, H1 = range(0, 8)
A8, B8, C8, D8, E8, F8, G8, H8 = range(56, 64)


# ============================================================================
# Moves and history
# ============================================================================

class Move(NamedTuple):
    """
    A move value: source square, destination square and the moving piece.

    The captured piece is implied by whatever stands on the destination when
    the move is applied. A Move holds no reference into a Position.
    """
    from_square: int
    to_square: int
    piece: Piece

    def uci(self) -> str:
        """4-character file-rank-file-rank text, e.g. 'e2e4'."""
        return square_name(self.from_square) + square_name(self.to_square)

    def __str__(self) -> str:
        return self.uci()


@dataclass(frozen=True)
class CastlingRights:
    """
    Castling state of one side.

    Each flag records that the piece has left its home square (or, for a
    rook, been captured there). Flags are only ever set during play, never
    cleared, so rights can only narrow.
    """
    king_moved: bool = False
    kingside_rook_moved: bool = False
    queenside_rook_moved: bool = False

    @property
    def kingside(self) -> bool:
        return not (self.king_moved or self.kingside_rook_moved)

    @property
    def queenside(self) -> bool:
        return not (self.king_moved or self.queenside_rook_moved)

    def narrow(
        self,
        king_moved: bool = False,
        kingside_rook_moved: bool = False,
        queenside_rook_moved: bool = False,
    ) -> "CastlingRights":
        """Return rights with the given flags additionally set."""
        return replace(
            self,
            king_moved=self.king_moved or king_moved,
            kingside_rook_moved=self.kingside_rook_moved or kingside_rook_moved,
            queenside_rook_moved=self.queenside_rook_moved or queenside_rook_moved,
        )


NO_CASTLING = CastlingRights(True, True, True)


@dataclass
class UndoRecord:
    """
    Everything needed to reverse one applied move.

    The rook fields are only set for castling moves.
    """
    move: Move
    captured: Piece
    captured_square: int
    light_rights: CastlingRights
    dark_rights: CastlingRights
    rook_from: Optional[int] = None
    rook_to: Optional[int] = None
    rook_piece: Piece = EMPTY
