"""GameStateMachine — owns the authoritative position and turn order.

Validates and executes moves, tracks check/checkmate/stalemate and
emits events via simple callbacks so the UI / opponent / tests can
subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from gambit.core.enums import PROMOTION_TYPES, Color, GameStatus, PieceType
from gambit.core.errors import InvariantViolation
from gambit.core.move import LastMove, Move
from gambit.core.piece import Piece
from gambit.core.position import MoveRecord, Position
from gambit.core.rules import Rules
from gambit.core.types import Square, is_valid_square
from gambit.game.interfaces import GamePhase, IChessGame, MoveError, MoveResult
from gambit.settings import GameSettings

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveAppliedCallback = Callable[[MoveRecord], None]
TurnChangedCallback = Callable[[Color], None]  # new side to move
GameOverCallback = Callable[[GameStatus, "Color | None"], None]  # status, winner
PromotionCallback = Callable[[Move], None]  # pending move, no kind yet


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move_applied: list[MoveAppliedCallback] = field(default_factory=list)
    on_turn_changed: list[TurnChangedCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_promotion_required: list[PromotionCallback] = field(default_factory=list)


def _as_square(sq: tuple[int, int]) -> Square | None:
    file, rank = sq
    if not is_valid_square(file, rank):
        return None
    return Square(file, rank)


# ── State machine ────────────────────────────────────────────────────────────


class GameStateMachine(IChessGame):
    """Single owner of the game's :class:`Position`.

    Every mutation goes through :meth:`execute_move` (or
    :meth:`choose_promotion`) and completes synchronously before any event
    fires. Methods are meant to be called from one thread.
    """

    __slots__ = (
        "_position",
        "_phase",
        "_status",
        "_pending_promotion",
        "_defer_promotion",
        "events",
    )

    def __init__(
        self,
        position: Position | None = None,
        *,
        settings: GameSettings | None = None,
    ) -> None:
        settings = settings if settings is not None else GameSettings()
        self._defer_promotion = settings.defer_promotion
        self.events = GameEvents()
        self._position = Position.initial()
        self._phase = GamePhase.AWAITING_MOVE
        self._status = GameStatus.ONGOING
        self._pending_promotion: Move | None = None
        self._load(
            position
            if position is not None
            else Position.initial(strict_castling=settings.strict_castling)
        )

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def side_to_move(self) -> Color:
        return self._position.side_to_move

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def is_game_over(self) -> bool:
        return self._phase == GamePhase.GAME_OVER

    @property
    def pending_promotion(self) -> Move | None:
        return self._pending_promotion

    @property
    def last_move(self) -> LastMove | None:
        return self._position.last_move

    @property
    def history(self) -> tuple[MoveRecord, ...]:
        return self._position.history

    @property
    def ply(self) -> int:
        return self._position.ply

    def snapshot(self) -> Position:
        """Disposable copy of the current position (e.g. for a search)."""
        return self._position.copy()

    # ── IChessGame impl ──────────────────────────────────────────────────

    def new_game(self, position: Position | None = None) -> None:
        """Reset to *position* (standard start by default)."""
        strict = self._position.strict_castling
        self._load(
            position if position is not None else Position.initial(strict_castling=strict)
        )
        self._emit_turn_changed()
        if self.is_game_over:
            self._emit_game_over()

    def piece_at(self, sq: tuple[int, int]) -> Piece | None:
        return self._position.board.piece_at(sq)

    def legal_moves(self, sq: tuple[int, int]) -> set[Square]:
        if self._phase != GamePhase.AWAITING_MOVE:
            return set()
        return Rules.legal_moves(self._position, sq)

    def execute_move(
        self,
        from_sq: tuple[int, int],
        to_sq: tuple[int, int],
        promotion: PieceType | None = None,
    ) -> MoveResult:
        if self._phase == GamePhase.GAME_OVER:
            return self._reject(MoveError.GAME_OVER, from_sq, to_sq)
        if self._phase == GamePhase.AWAITING_PROMOTION:
            return self._reject(MoveError.PROMOTION_PENDING, from_sq, to_sq)

        src = _as_square(from_sq)
        dst = _as_square(to_sq)
        if src is None or dst is None:
            return self._reject(MoveError.OUT_OF_BOUNDS, from_sq, to_sq)

        piece = self._position.board[src]
        if piece is None:
            return self._reject(MoveError.NO_PIECE, src, dst)
        if piece.color != self._position.side_to_move:
            return self._reject(MoveError.WRONG_SIDE, src, dst)
        if dst not in Rules.legal_moves(self._position, src):
            return self._reject(MoveError.ILLEGAL_MOVE, src, dst)

        promoting = piece.kind == PieceType.PAWN and dst.rank == piece.color.promotion_rank
        if promotion is not None and (not promoting or promotion not in PROMOTION_TYPES):
            return self._reject(MoveError.INVALID_PROMOTION, src, dst)

        if promoting and promotion is None and self._defer_promotion:
            move = Move(src, dst)
            self._pending_promotion = move
            self._phase = GamePhase.AWAITING_PROMOTION
            _LOGGER.debug("Move %s awaits a promotion choice", move)
            for cb in self.events.on_promotion_required:
                cb(move)
            return MoveResult(True)

        return self._commit(Move(src, dst, promotion))

    def choose_promotion(self, kind: PieceType) -> MoveResult:
        """Complete the pending promoting move with *kind*."""
        pending = self._pending_promotion
        if self._phase != GamePhase.AWAITING_PROMOTION or pending is None:
            return MoveResult.rejected(MoveError.NO_PENDING_PROMOTION)
        if kind not in PROMOTION_TYPES:
            return MoveResult.rejected(MoveError.INVALID_PROMOTION)

        self._pending_promotion = None
        self._phase = GamePhase.AWAITING_MOVE
        return self._commit(Move(pending.from_sq, pending.to_sq, kind))

    def cancel_promotion(self) -> bool:
        """Abandon the pending promoting move; the same side moves again."""
        if self._phase != GamePhase.AWAITING_PROMOTION:
            return False
        self._pending_promotion = None
        self._phase = GamePhase.AWAITING_MOVE
        return True

    def status(self) -> GameStatus:
        return self._status

    def winner(self) -> Color | None:
        if self._status == GameStatus.CHECKMATE:
            return self._position.side_to_move.opposite
        return None

    # ── Internal helpers ─────────────────────────────────────────────────

    def _load(self, position: Position) -> None:
        position.board.validate()
        idle = position.side_to_move.opposite
        if Rules.is_in_check(position, idle):
            _LOGGER.error(
                "%s king is capturable with %s to move:\n%r",
                idle,
                position.side_to_move,
                position.board,
            )
            raise InvariantViolation(
                f"{idle.name} is in check but {position.side_to_move.name} is to move"
            )
        self._position = position
        self._pending_promotion = None
        self._status = Rules.status(position)
        self._phase = (
            GamePhase.GAME_OVER if self._status.is_terminal else GamePhase.AWAITING_MOVE
        )

    def _commit(self, move: Move) -> MoveResult:
        record = self._position.make_move(move)
        self._status = Rules.status(self._position)
        if self._status.is_terminal:
            self._phase = GamePhase.GAME_OVER
        _LOGGER.debug(
            "%s %s %s -> %s (%s)",
            record.color,
            record.piece.kind.name.lower(),
            record.move.from_sq,
            record.move.to_sq,
            self._status.name.lower(),
        )

        for cb in self.events.on_move_applied:
            cb(record)
        self._emit_turn_changed()
        if self.is_game_over:
            self._emit_game_over()
        return MoveResult(True, record=record)

    def _reject(
        self,
        error: MoveError,
        from_sq: tuple[int, int],
        to_sq: tuple[int, int],
    ) -> MoveResult:
        _LOGGER.debug("Rejected move %s -> %s: %s", from_sq, to_sq, error.name)
        return MoveResult.rejected(error)

    def _emit_turn_changed(self) -> None:
        side = self._position.side_to_move
        for cb in self.events.on_turn_changed:
            cb(side)

    def _emit_game_over(self) -> None:
        winner = self.winner()
        if winner is not None:
            _LOGGER.info("Checkmate, %s wins", winner)
        else:
            _LOGGER.info("Stalemate, %s cannot move", self._position.side_to_move)
        for cb in self.events.on_game_over:
            cb(self._status, winner)
