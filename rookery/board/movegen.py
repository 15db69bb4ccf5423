"""
Pseudo-Legal Move Generation

One generator per piece kind, all sharing the contract
``(position, square, piece) -> List[Move]``, dispatched through the
``GENERATORS`` table. Generated moves respect piece movement and occupancy
only; whether the mover's own king is left attacked is decided later by the
legality filter in ``Position.is_valid_move``.

The same geometry backs ``attacked_squares``, the single attack-map
computation used for check detection, legality filtering, mate/stalemate
detection and strict castling.

Rules Not Generated:
    - En-passant captures
    - Under-promotion (promotion to queen happens in Position.apply)
"""

from typing import Callable, Dict, List, NamedTuple, Optional, Set, Tuple

from rookery.board.types import (
    A1, A8, B1, B8, C1, C8, D1, D8, E1, E8, F1, F8, G1, G8, H1, H8,
    Move, Piece, PieceKind, Side, SQUARES, square_file, square_rank,
)

# ============================================================================
# Precomputed geometry
# ============================================================================

KNIGHT_OFFSETS = [(2, 1), (1, 2), (-1, 2), (-2, 1), (-2, -1), (-1, -2), (1, -2), (2, -1)]
KING_OFFSETS = [(dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1) if (dx, dy) != (0, 0)]

BISHOP_DIRECTIONS = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
ROOK_DIRECTIONS = [(1, 0), (-1, 0), (0, 1), (0, -1)]
QUEEN_DIRECTIONS = ROOK_DIRECTIONS + BISHOP_DIRECTIONS


def _jump_targets(offsets: List[Tuple[int, int]]) -> List[List[int]]:
    targets = []
    for sq in SQUARES:
        f, r = square_file(sq), square_rank(sq)
        targets.append([
            (r + dr) * 8 + (f + df)
            for df, dr in offsets
            if 0 <= f + df < 8 and 0 <= r + dr < 8
        ])
    return targets


def _rays(directions: List[Tuple[int, int]]) -> List[List[List[int]]]:
    rays = []
    for sq in SQUARES:
        per_square = []
        for df, dr in directions:
            f, r = square_file(sq) + df, square_rank(sq) + dr
            ray = []
            while 0 <= f < 8 and 0 <= r < 8:
                ray.append(r * 8 + f)
                f += df
                r += dr
            per_square.append(ray)
        rays.append(per_square)
    return rays


KNIGHT_TARGETS = _jump_targets(KNIGHT_OFFSETS)
KING_TARGETS = _jump_targets(KING_OFFSETS)
BISHOP_RAYS = _rays(BISHOP_DIRECTIONS)
ROOK_RAYS = _rays(ROOK_DIRECTIONS)
QUEEN_RAYS = _rays(QUEEN_DIRECTIONS)

# Rank a pawn starts on and the direction it advances in
PAWN_START_RANK = {Side.LIGHT: 1, Side.DARK: 6}
PAWN_DIRECTION = {Side.LIGHT: 1, Side.DARK: -1}
PROMOTION_RANK = {Side.LIGHT: 7, Side.DARK: 0}


class CastlingLane(NamedTuple):
    """Squares involved in one castling move."""
    wing: str  # 'kingside' or 'queenside', matching CastlingRights properties
    king_from: int
    king_to: int
    rook_from: int
    rook_to: int
    between: Tuple[int, ...]  # must be empty
    transit: Tuple[int, ...]  # king's start, path and landing square


CASTLING_LANES: Dict[Side, Tuple[CastlingLane, CastlingLane]] = {
    Side.LIGHT: (
        CastlingLane("kingside", E1, G1, H1, F1, (F1, G1), (E1, F1, G1)),
        CastlingLane("queenside", E1, C1, A1, D1, (B1, C1, D1), (E1, D1, C1)),
    ),
    Side.DARK: (
        CastlingLane("kingside", E8, G8, H8, F8, (F8, G8), (E8, F8, G8)),
        CastlingLane("queenside", E8, C8, A8, D8, (B8, C8, D8), (E8, D8, C8)),
    ),
}


def castling_lane(side: Side, king_from: int, king_to: int) -> Optional[CastlingLane]:
    """Lane matching a king move, or None if the move is not a castling move."""
    for lane in CASTLING_LANES.get(side, ()):
        if lane.king_from == king_from and lane.king_to == king_to:
            return lane
    return None


# ============================================================================
# Generators
# ============================================================================

def pawn_moves(position, sq: int, piece: Piece) -> List[Move]:
    """Single push, double push from the start rank, diagonal captures."""
    board = position.board
    moves = []
    direction = PAWN_DIRECTION[piece.side]
    f, r = square_file(sq), square_rank(sq)
    next_rank = r + direction
    if not 0 <= next_rank < 8:
        return moves

    forward = next_rank * 8 + f
    if board[forward].is_empty:
        moves.append(Move(sq, forward, piece))
        if r == PAWN_START_RANK[piece.side]:
            double = (next_rank + direction) * 8 + f
            if board[double].is_empty:
                moves.append(Move(sq, double, piece))

    enemy = piece.side.opponent
    for df in (-1, 1):
        if 0 <= f + df < 8:
            target = forward + df
            if board[target].side == enemy:
                moves.append(Move(sq, target, piece))

    return moves


def _jump_moves(board, sq: int, piece: Piece, targets: List[int]) -> List[Move]:
    return [Move(sq, to, piece) for to in targets if board[to].side != piece.side]


def _ray_moves(board, sq: int, piece: Piece, rays: List[List[int]]) -> List[Move]:
    moves = []
    for ray in rays:
        for to in ray:
            occupant = board[to]
            if occupant.is_empty:
                moves.append(Move(sq, to, piece))
                continue
            if occupant.side != piece.side:
                moves.append(Move(sq, to, piece))
            break
    return moves


def knight_moves(position, sq: int, piece: Piece) -> List[Move]:
    return _jump_moves(position.board, sq, piece, KNIGHT_TARGETS[sq])


def bishop_moves(position, sq: int, piece: Piece) -> List[Move]:
    return _ray_moves(position.board, sq, piece, BISHOP_RAYS[sq])


def rook_moves(position, sq: int, piece: Piece) -> List[Move]:
    return _ray_moves(position.board, sq, piece, ROOK_RAYS[sq])


def queen_moves(position, sq: int, piece: Piece) -> List[Move]:
    return _ray_moves(position.board, sq, piece, QUEEN_RAYS[sq])


def king_moves(position, sq: int, piece: Piece) -> List[Move]:
    """
    Adjacent squares plus castling.

    Castling is offered when the king stands on its home square and has not
    moved, the rook is on its home corner and has not moved, and every
    square strictly between them is empty. Whether the king is attacked on
    its way is only checked when the position uses strict castling.
    """
    moves = _jump_moves(position.board, sq, piece, KING_TARGETS[sq])
    moves.extend(castling_moves(position, sq, piece))
    return moves


def castling_moves(position, sq: int, piece: Piece) -> List[Move]:
    board = position.board
    rights = position.castling[piece.side]
    rook = Piece(PieceKind.ROOK, piece.side)
    moves = []
    attacked = None

    for lane in CASTLING_LANES[piece.side]:
        if sq != lane.king_from or not getattr(rights, lane.wing):
            continue
        if board[lane.rook_from] != rook:
            continue
        if any(not board[between].is_empty for between in lane.between):
            continue
        if position.strict_castling:
            if attacked is None:
                attacked = attacked_squares(position, piece.side.opponent)
            if any(transit in attacked for transit in lane.transit):
                continue
        moves.append(Move(sq, lane.king_to, piece))

    return moves


GENERATORS: Dict[PieceKind, Callable[..., List[Move]]] = {
    PieceKind.PAWN: pawn_moves,
    PieceKind.KNIGHT: knight_moves,
    PieceKind.BISHOP: bishop_moves,
    PieceKind.ROOK: rook_moves,
    PieceKind.QUEEN: queen_moves,
    PieceKind.KING: king_moves,
}


def piece_moves(position, sq: int) -> List[Move]:
    """Pseudo-legal moves of whatever piece stands on ``sq``."""
    piece = position.board[sq]
    if piece.is_empty:
        return []
    return GENERATORS[piece.kind](position, sq, piece)


def generate_moves(position, side: Optional[Side] = None) -> List[Move]:
    """
    Pseudo-legal moves of every occupied square, optionally for one side.

    Squares are scanned from A1 to H8.
    """
    moves = []
    for sq, piece in enumerate(position.board):
        if piece.is_empty or (side is not None and piece.side != side):
            continue
        moves.extend(GENERATORS[piece.kind](position, sq, piece))
    return moves


# ============================================================================
# Attack map
# ============================================================================

def attacked_squares(position, side: Side) -> Set[int]:
    """
    Squares attacked by ``side``.

    Pawns attack both forward diagonals whatever stands there; other pieces
    attack every square they could move or capture onto, plus the first
    blocker of each ray. Castling never attacks. A king standing on a square
    in this set is exactly a king that some pseudo-legal move of ``side``
    could capture.
    """
    board = position.board
    attacked: Set[int] = set()

    for sq, piece in enumerate(board):
        if piece.side != side:
            continue
        kind = piece.kind

        if kind == PieceKind.PAWN:
            f = square_file(sq)
            r = square_rank(sq) + PAWN_DIRECTION[side]
            if 0 <= r < 8:
                if f > 0:
                    attacked.add(r * 8 + f - 1)
                if f < 7:
                    attacked.add(r * 8 + f + 1)
        elif kind == PieceKind.KNIGHT:
            attacked.update(KNIGHT_TARGETS[sq])
        elif kind == PieceKind.KING:
            attacked.update(KING_TARGETS[sq])
        else:
            if kind == PieceKind.BISHOP:
                rays = BISHOP_RAYS[sq]
            elif kind == PieceKind.ROOK:
                rays = ROOK_RAYS[sq]
            else:
                rays = QUEEN_RAYS[sq]
            for ray in rays:
                for to in ray:
                    attacked.add(to)
                    if not board[to].is_empty:
                        break

    return attacked
