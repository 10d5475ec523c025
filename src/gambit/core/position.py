"""Position — complete game state (board + side to move + last move) with make/unmake."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from gambit.core.board import Board
from gambit.core.enums import Color, PieceType
from gambit.core.errors import InvariantViolation
from gambit.core.move import LastMove, Move
from gambit.core.move_generator import castling_rook_move, is_castling, is_en_passant
from gambit.core.piece import Piece
from gambit.core.types import Square

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MoveRecord:
    """A committed move plus what it displaced, enough to undo it."""

    move: Move
    piece: Piece
    captured: Piece | None = None
    rook: Piece | None = None
    rook_to: Square | None = None
    previous_last_move: LastMove | None = None

    @property
    def color(self) -> Color:
        return self.piece.color

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    @property
    def is_en_passant(self) -> bool:
        return self.captured is not None and self.captured.square != self.move.to_sq

    @property
    def is_castling(self) -> bool:
        return self.rook is not None

    @property
    def last_move(self) -> LastMove:
        return LastMove(
            self.piece.kind, self.piece.color, self.move.from_sq, self.move.to_sq
        )


class Position:
    """Board, side to move and last move, mutated all-or-nothing per move.

    Supports :meth:`make_move` / :meth:`unmake_move` via a history of
    :class:`MoveRecord` entries (Command pattern). Callers check legality
    first.
    """

    __slots__ = ("board", "side_to_move", "last_move", "strict_castling", "_history")

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        last_move: LastMove | None = None,
        *,
        strict_castling: bool = True,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move
        self.last_move = last_move
        self.strict_castling = strict_castling
        self._history: list[MoveRecord] = []

    # ── Core move operations ─────────────────────────────────────────────

    def make_move(self, move: Move) -> MoveRecord:
        """Commit *move*, pushing its record onto the history."""
        board = self.board
        piece = board[move.from_sq]
        if piece is None:
            raise ValueError(f"No piece on {move.from_sq}")

        capture_sq = move.to_sq
        if is_en_passant(board, piece, move.to_sq):
            capture_sq = Square(move.to_sq.file, move.from_sq.rank)
        captured = board[capture_sq]
        if captured is not None and captured.kind == PieceType.KING:
            _LOGGER.error("Move %s would capture a king:\n%r", move, board)
            raise InvariantViolation(f"Move {move} captures the {captured.color.name} king")

        rook: Piece | None = None
        rook_to: Square | None = None
        if is_castling(piece, move.to_sq):
            rook_from, rook_to = castling_rook_move(move.from_sq, move.to_sq)
            rook = board[rook_from]
            if rook is None or rook.kind != PieceType.ROOK:
                _LOGGER.error("Castling %s without a rook:\n%r", move, board)
                raise InvariantViolation(f"Castling {move} without a rook on {rook_from}")

        # Nothing below can fail, so the move applies all-or-nothing.
        if captured is not None:
            board.remove(capture_sq)
        if rook is not None and rook_to is not None:
            board.remove(rook.square)
            board.put(rook.moved_to(rook_to))

        board.remove(move.from_sq)
        placed = piece.moved_to(move.to_sq)
        if piece.kind == PieceType.PAWN and move.to_sq.rank == piece.color.promotion_rank:
            kind = move.promotion if move.promotion is not None else PieceType.QUEEN
            placed = placed.promoted(kind)
            move = Move(move.from_sq, move.to_sq, kind)
        elif move.promotion is not None:
            move = Move(move.from_sq, move.to_sq)
        board.put(placed)

        record = MoveRecord(
            move=move,
            piece=piece,
            captured=captured,
            rook=rook,
            rook_to=rook_to,
            previous_last_move=self.last_move,
        )
        self._history.append(record)
        self.last_move = record.last_move
        self.side_to_move = piece.color.opposite
        return record

    def unmake_move(self) -> MoveRecord:
        """Undo the last :meth:`make_move`."""
        if not self._history:
            _LOGGER.error("unmake_move called with an empty history")
            raise InvariantViolation("No move to unmake")

        record = self._history.pop()
        board = self.board

        board.remove(record.move.to_sq)
        if record.rook is not None and record.rook_to is not None:
            board.remove(record.rook_to)
            board.put(record.rook)
        board.put(record.piece)
        if record.captured is not None:
            board.put(record.captured)

        self.last_move = record.previous_last_move
        self.side_to_move = record.piece.color
        return record

    # ── Utilities ────────────────────────────────────────────────────────

    @property
    def history(self) -> tuple[MoveRecord, ...]:
        return tuple(self._history)

    @property
    def ply(self) -> int:
        """Number of half-moves applied so far."""
        return len(self._history)

    def last_records(self, color: Color, count: int = 2) -> list[MoveRecord]:
        """Up to *count* most recent records of *color*, newest first."""
        found: list[MoveRecord] = []
        for record in reversed(self._history):
            if record.color == color:
                found.append(record)
                if len(found) == count:
                    break
        return found

    def copy(self) -> Position:
        """Disposable copy sharing no mutable state with this one."""
        pos = Position(
            board=self.board.copy(),
            side_to_move=self.side_to_move,
            last_move=self.last_move,
            strict_castling=self.strict_castling,
        )
        pos._history = self._history.copy()
        return pos

    @classmethod
    def initial(cls, *, strict_castling: bool = True) -> Position:
        return cls(Board.initial(), Color.WHITE, strict_castling=strict_castling)

    def __repr__(self) -> str:
        return f"{self.board!r}\n{self.side_to_move.name} to move"
