"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass, replace

from gambit.core.enums import Color, PieceType
from gambit.core.types import Square

# Diagram character <-> (Color, PieceType)
_CHAR_MAP: dict[str, tuple[Color, PieceType]] = {
    "P": (Color.WHITE, PieceType.PAWN),
    "N": (Color.WHITE, PieceType.KNIGHT),
    "B": (Color.WHITE, PieceType.BISHOP),
    "R": (Color.WHITE, PieceType.ROOK),
    "Q": (Color.WHITE, PieceType.QUEEN),
    "K": (Color.WHITE, PieceType.KING),
    "p": (Color.BLACK, PieceType.PAWN),
    "n": (Color.BLACK, PieceType.KNIGHT),
    "b": (Color.BLACK, PieceType.BISHOP),
    "r": (Color.BLACK, PieceType.ROOK),
    "q": (Color.BLACK, PieceType.QUEEN),
    "k": (Color.BLACK, PieceType.KING),
}

_CHARS: dict[tuple[Color, PieceType], str] = {v: k for k, v in _CHAR_MAP.items()}


@dataclass(frozen=True, slots=True)
class Piece:
    """Immutable piece record: what it is, where it stands, how often it moved.

    ``move_count`` only changes when a move is committed; simulations
    relocate a piece with :meth:`relocated`, which keeps the count.
    """

    kind: PieceType
    color: Color
    square: Square
    move_count: int = 0

    # ── Derived copies ───────────────────────────────────────────────────

    def moved_to(self, sq: Square) -> Piece:
        """Copy standing on *sq* with one more committed move."""
        return replace(self, square=sq, move_count=self.move_count + 1)

    def relocated(self, sq: Square) -> Piece:
        """Copy standing on *sq*, move count untouched."""
        return replace(self, square=sq)

    def promoted(self, kind: PieceType) -> Piece:
        """Fresh piece of *kind* on the same square with a zero move count."""
        return Piece(kind, self.color, self.square)

    # ── Serialisation ────────────────────────────────────────────────────

    def __str__(self) -> str:
        """Diagram character (uppercase = white, lowercase = black)."""
        return _CHARS[(self.color, self.kind)]

    @classmethod
    def from_char(cls, char: str, square: Square) -> Piece:
        """Create piece from diagram character, e.g. 'N' -> white knight."""
        try:
            color, kind = _CHAR_MAP[char]
        except KeyError:
            raise ValueError(f"Invalid piece character: {char!r}") from None
        return cls(kind, color, square)
