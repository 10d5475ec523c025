"""Abstract interfaces for the game layer.

Collaborators (rendering, input, the AI opponent) depend on
:class:`IChessGame`, not on the concrete state machine.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gambit.core.enums import Color, GameStatus, PieceType
    from gambit.core.piece import Piece
    from gambit.core.position import MoveRecord
    from gambit.core.types import Square


# ── Game phase FSM states ────────────────────────────────────────────────────


class GamePhase(IntEnum):
    """Finite-state-machine states for a chess game."""

    AWAITING_MOVE = auto()
    AWAITING_PROMOTION = auto()  # promoting move chosen, piece kind pending
    GAME_OVER = auto()


class MoveError(IntEnum):
    """Why a move request was rejected."""

    OUT_OF_BOUNDS = auto()
    NO_PIECE = auto()
    WRONG_SIDE = auto()
    ILLEGAL_MOVE = auto()
    GAME_OVER = auto()
    PROMOTION_PENDING = auto()
    INVALID_PROMOTION = auto()
    NO_PENDING_PROMOTION = auto()


@dataclass(frozen=True, slots=True)
class MoveResult:
    """Outcome of a move request; truthy when accepted.

    An accepted request without a record is a promoting move waiting for
    its piece kind.
    """

    ok: bool
    error: MoveError | None = None
    record: MoveRecord | None = None

    def __bool__(self) -> bool:
        return self.ok

    @property
    def awaiting_promotion(self) -> bool:
        return self.ok and self.record is None

    @classmethod
    def rejected(cls, error: MoveError) -> MoveResult:
        return cls(False, error)


# ── Abstract interfaces ─────────────────────────────────────────────────────


class IChessGame(ABC):
    """What the outside world may ask of a running game."""

    @property
    @abstractmethod
    def side_to_move(self) -> Color: ...

    @abstractmethod
    def piece_at(self, sq: tuple[int, int]) -> Piece | None:
        """Piece on *sq*; ``None`` for empty or off-board squares."""

    @abstractmethod
    def legal_moves(self, sq: tuple[int, int]) -> set[Square]:
        """Legal destinations of the piece on *sq*, for highlighting."""

    @abstractmethod
    def execute_move(
        self,
        from_sq: tuple[int, int],
        to_sq: tuple[int, int],
        promotion: PieceType | None = None,
    ) -> MoveResult:
        """Commit a move. Rejections never mutate state."""

    @abstractmethod
    def status(self) -> GameStatus:
        """Status of the side to move."""

    @abstractmethod
    def winner(self) -> Color | None:
        """Winning color on checkmate, otherwise ``None``."""
