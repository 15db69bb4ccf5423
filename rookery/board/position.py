"""
Position: Game State and Move Application

A Position owns the 8x8 grid, the side to move, the castling rights of both
sides and the undo history. Moves are applied and reversed in place; every
``apply`` must be paired with exactly one ``undo`` in last-in-first-out
order. ``pushed()`` wraps such a pair and checks the pairing on exit, and the
search only ever mutates positions through it.

Move Application Rules:
    - Castling: a king moving between its home square and a castling target
      also relocates the matching rook.
    - Promotion: a pawn reaching the far rank always becomes a queen.
    - Captures overwrite the destination; the captured piece is kept for undo.
"""

from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from rookery.board.movegen import (
    CASTLING_LANES,
    PROMOTION_RANK,
    attacked_squares,
    castling_lane,
    generate_moves,
    piece_moves,
)
from rookery.board.types import (
    EMPTY,
    CastlingRights,
    Move,
    Piece,
    SQUARES,
    PieceKind,
    Side,
    UndoRecord,
    square_rank,
)


class Position:
    """
    Mutable game state.

    Attributes:
        board: 64 pieces indexed by square (EMPTY where unoccupied)
        turn: Side to move
        castling: CastlingRights per side
        history: Stack of UndoRecords, one per applied move
        strict_castling: If True, castling out of, through or into check
            is not generated
    """

    def __init__(
        self,
        board: Optional[Iterable[Piece]] = None,
        turn: Side = Side.LIGHT,
        castling: Optional[Dict[Side, CastlingRights]] = None,
        strict_castling: bool = False,
    ):
        self.board: List[Piece] = list(board) if board is not None else [EMPTY] * 64
        if len(self.board) != 64:
            raise ValueError(f"Board must have 64 squares, got {len(self.board)}")
        if turn not in (Side.LIGHT, Side.DARK):
            raise ValueError(f"Invalid side to move: {turn!r}")

        self.turn = turn
        self.castling: Dict[Side, CastlingRights] = {
            Side.LIGHT: CastlingRights(),
            Side.DARK: CastlingRights(),
        }
        if castling is not None:
            self.castling.update(castling)
        self.history: List[UndoRecord] = []
        self.strict_castling = strict_castling

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def piece_at(self, sq: int) -> Piece:
        return self.board[sq]

    def set_piece_at(self, sq: int, piece: Piece) -> None:
        self.board[sq] = piece

    @property
    def ply(self) -> int:
        """Number of moves applied and not yet undone."""
        return len(self.history)

    def king_square(self, side: Side) -> Optional[int]:
        for sq, piece in enumerate(self.board):
            if piece.kind == PieceKind.KING and piece.side == side:
                return sq
        return None

    def is_capture(self, move: Move) -> bool:
        return not self.board[move.to_square].is_empty

    def is_promotion(self, move: Move) -> bool:
        return (
            move.piece.kind == PieceKind.PAWN
            and square_rank(move.to_square) == PROMOTION_RANK[move.piece.side]
        )

    # ------------------------------------------------------------------
    # Applying and undoing moves
    # ------------------------------------------------------------------

    def apply(self, move: Move) -> None:
        """
        Apply a move and push its UndoRecord.

        The move is applied as given; use ``is_valid_move`` first when the
        move comes from outside the generator.
        """
        from_square, to_square, piece = move
        board = self.board

        record = UndoRecord(
            move=move,
            captured=board[to_square],
            captured_square=to_square,
            light_rights=self.castling[Side.LIGHT],
            dark_rights=self.castling[Side.DARK],
        )

        board[from_square] = EMPTY
        if (
            piece.kind == PieceKind.PAWN
            and square_rank(to_square) == PROMOTION_RANK[piece.side]
        ):
            board[to_square] = Piece(PieceKind.QUEEN, piece.side)
        else:
            board[to_square] = piece

        if piece.kind == PieceKind.KING:
            lane = castling_lane(piece.side, from_square, to_square)
            if lane is not None:
                record.rook_from = lane.rook_from
                record.rook_to = lane.rook_to
                record.rook_piece = board[lane.rook_from]
                board[lane.rook_to] = board[lane.rook_from]
                board[lane.rook_from] = EMPTY

        self._narrow_castling(move)
        self.history.append(record)
        self.turn = self.turn.opponent

    def _narrow_castling(self, move: Move) -> None:
        if move.piece.kind == PieceKind.KING and move.piece.side in self.castling:
            side = move.piece.side
            self.castling[side] = self.castling[side].narrow(king_moved=True)

        # A rook leaving its corner, or anything landing on it, ends that right
        for side, lanes in CASTLING_LANES.items():
            for lane in lanes:
                if lane.rook_from in (move.from_square, move.to_square):
                    flag = f"{lane.wing}_rook_moved"
                    self.castling[side] = self.castling[side].narrow(**{flag: True})

    def undo(self) -> None:
        """
        Reverse the most recently applied move.

        Raises:
            IndexError: If no move has been applied
        """
        if not self.history:
            raise IndexError("undo called with empty move history")
        record = self.history.pop()
        move = record.move

        if record.rook_from is not None:
            self.board[record.rook_from] = record.rook_piece
            self.board[record.rook_to] = EMPTY

        self.board[move.from_square] = move.piece
        self.board[record.captured_square] = record.captured

        self.castling[Side.LIGHT] = record.light_rights
        self.castling[Side.DARK] = record.dark_rights
        self.turn = self.turn.opponent

    @contextmanager
    def pushed(self, move: Move) -> Iterator["Position"]:
        """
        Apply ``move`` for the duration of a ``with`` block, then undo it.

        Raises:
            AssertionError: If the block left extra moves applied or undid
                moves it did not apply
        """
        depth = len(self.history)
        self.apply(move)
        try:
            yield self
        finally:
            assert len(self.history) == depth + 1, (
                f"unbalanced apply/undo: history depth {len(self.history)}, "
                f"expected {depth + 1}"
            )
            self.undo()

    # ------------------------------------------------------------------
    # Move generation and legality
    # ------------------------------------------------------------------

    def legal_moves(self) -> List[Move]:
        """
        Pseudo-legal moves of every occupied square, for BOTH sides.

        King safety is not checked here; see ``is_valid_move`` and
        ``valid_moves``.
        """
        return generate_moves(self)

    def moves_for(self, side: Side) -> List[Move]:
        """Pseudo-legal moves of one side."""
        return generate_moves(self, side)

    def is_in_check(self, side: Optional[Side] = None) -> bool:
        """
        Whether the king of ``side`` (default: side to move) is attacked.

        A side without a king is never in check.
        """
        if side is None:
            side = self.turn
        king = self.king_square(side)
        if king is None:
            return False
        return king in attacked_squares(self, side.opponent)

    def leaves_king_safe(self, move: Move) -> bool:
        """Apply, test the mover's king, undo."""
        with self.pushed(move):
            return not self.is_in_check(move.piece.side)

    def is_valid_move(self, move: Move) -> bool:
        """
        Full legality check for a move of the side to move.

        Rejects moves whose source square is empty or holds a piece of the
        side not on move, moves outside the piece's pseudo-legal set, and
        moves that leave the mover's king attacked. Squares off the board
        are never valid.
        """
        if move.from_square not in SQUARES or move.to_square not in SQUARES:
            return False

        piece = self.board[move.from_square]
        if piece.is_empty or piece.side != self.turn:
            return False

        for candidate in piece_moves(self, move.from_square):
            if candidate.to_square == move.to_square:
                return self.leaves_king_safe(candidate)
        return False

    def valid_moves(self) -> List[Move]:
        """Moves of the side to move that pass the legality filter."""
        return [move for move in self.moves_for(self.turn) if self.leaves_king_safe(move)]

    def has_valid_move(self) -> bool:
        """Short-circuiting form of ``bool(valid_moves())``."""
        return any(self.leaves_king_safe(move) for move in self.moves_for(self.turn))

    def is_checkmate(self) -> bool:
        return self.is_in_check() and not self.has_valid_move()

    def is_stalemate(self) -> bool:
        return not self.is_in_check() and not self.has_valid_move()

    def gives_check(self, move: Move) -> bool:
        """Whether applying ``move`` leaves the opponent in check."""
        with self.pushed(move):
            return self.is_in_check(self.turn)

    # ------------------------------------------------------------------
    # Copying and comparison
    # ------------------------------------------------------------------

    def copy(self) -> "Position":
        position = Position(
            self.board,
            self.turn,
            dict(self.castling),
            strict_castling=self.strict_castling,
        )
        position.history = list(self.history)
        return position

    def snapshot(self) -> Tuple:
        """Hashable view of squares, side to move and castling rights."""
        return (
            tuple(self.board),
            self.turn,
            self.castling[Side.LIGHT],
            self.castling[Side.DARK],
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return self.snapshot() == other.snapshot()

    __hash__ = None

    def __repr__(self) -> str:
        from rookery.board.notation import position_to_text
        return f"Position({position_to_text(self)!r})"

    def __str__(self) -> str:
        from rookery.board.notation import render_board
        return render_board(self)
