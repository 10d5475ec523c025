"""Move value objects."""

from __future__ import annotations

from dataclasses import dataclass

from gambit.core.enums import Color, PieceType
from gambit.core.types import Square

_PROMO_CHARS: dict[PieceType, str] = {
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
}


@dataclass(frozen=True, slots=True)
class Move:
    """A from/to pair with an optional promotion kind.

    Captures, en passant and castling are not flagged here; they are derived
    from the board contents when the move is executed.
    """

    from_sq: Square
    to_sq: Square
    promotion: PieceType | None = None

    def reverses(self, other: Move) -> bool:
        """Whether this move undoes *other* square-for-square."""
        return self.from_sq == other.to_sq and self.to_sq == other.from_sq

    def __str__(self) -> str:
        base = f"{self.from_sq}{self.to_sq}"
        if self.promotion is not None:
            base += _PROMO_CHARS.get(self.promotion, "")
        return base


@dataclass(frozen=True, slots=True)
class LastMove:
    """The previous committed move, kept for en passant eligibility."""

    kind: PieceType
    color: Color
    from_sq: Square
    to_sq: Square

    @property
    def is_pawn_double_step(self) -> bool:
        return (
            self.kind == PieceType.PAWN
            and self.from_sq.file == self.to_sq.file
            and abs(self.to_sq.rank - self.from_sq.rank) == 2
        )
