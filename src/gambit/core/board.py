"""Board - piece placement on an 8x8 grid."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from gambit.core.enums import Color, PieceType
from gambit.core.errors import InvariantViolation
from gambit.core.piece import Piece
from gambit.core.types import Square, is_valid_square

_LOGGER = logging.getLogger(__name__)

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


class Board:
    """Mutable 64-square board: a total mapping from square to optional piece.

    Pieces carry their own square; :meth:`put` keeps the two in sync.
    """

    __slots__ = ("_squares", "_king_squares")

    def __init__(self) -> None:
        self._squares: list[Piece | None] = [None] * 64
        # [color] -> king square cache (None if king missing).
        self._king_squares: list[Square | None] = [None, None]

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._squares[sq.rank * 8 + sq.file]

    def piece_at(self, sq: tuple[int, int]) -> Piece | None:
        """Bounds-checked lookup; off-board coordinates give ``None``."""
        file, rank = sq
        if not is_valid_square(file, rank):
            return None
        return self._squares[rank * 8 + file]

    def is_empty(self, sq: Square) -> bool:
        return self._squares[sq.rank * 8 + sq.file] is None

    def put(self, piece: Piece) -> Piece | None:
        """Place *piece* on its own square, returning whatever stood there."""
        sq = piece.square
        idx = sq.rank * 8 + sq.file
        old = self._squares[idx]
        if old is not None and old.kind == PieceType.KING:
            self._king_squares[int(old.color)] = None
        self._squares[idx] = piece
        if piece.kind == PieceType.KING:
            self._king_squares[int(piece.color)] = sq
        return old

    def remove(self, sq: Square) -> Piece | None:
        """Empty *sq*, returning the piece that stood there."""
        idx = sq.rank * 8 + sq.file
        old = self._squares[idx]
        if old is None:
            return None
        self._squares[idx] = None
        if old.kind == PieceType.KING and self._king_squares[int(old.color)] == sq:
            self._king_squares[int(old.color)] = None
        return old

    # -- Query helpers ------------------------------------------------------

    def pieces(self, color: Color) -> list[Piece]:
        """All of *color*'s pieces, ordered a1 ... h8."""
        return [p for p in self._squares if p is not None and p.color == color]

    def all_pieces(self) -> list[Piece]:
        return [p for p in self._squares if p is not None]

    def king(self, color: Color) -> Piece:
        """Return *color*'s king.

        Raises :class:`InvariantViolation` when it is missing, which correct
        play can never produce.
        """
        sq = self._king_squares[int(color)]
        piece = self._squares[sq.rank * 8 + sq.file] if sq is not None else None
        if piece is None or piece.kind != PieceType.KING or piece.color != color:
            _LOGGER.error("No %s king on board:\n%r", color, self)
            raise InvariantViolation(f"No {color.name} king on board")
        return piece

    def king_square(self, color: Color) -> Square:
        return self.king(color).square

    def validate(self) -> None:
        """Check the one-king-per-color invariant."""
        for color in Color:
            kings = [
                p for p in self.pieces(color) if p.kind == PieceType.KING
            ]
            if len(kings) != 1:
                _LOGGER.error(
                    "Expected one %s king, found %d:\n%r", color, len(kings), self
                )
                raise InvariantViolation(
                    f"Expected exactly one {color.name} king, found {len(kings)}"
                )

    # -- Mutation / copying -------------------------------------------------

    def copy(self) -> Board:
        b = Board()
        b._squares = self._squares.copy()
        b._king_squares = self._king_squares.copy()
        return b

    def clear(self) -> None:
        self._squares = [None] * 64
        self._king_squares = [None, None]

    # -- Factories ----------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        b = cls()
        for f in range(8):
            b.put(Piece(PieceType.PAWN, Color.WHITE, Square(f, 1)))
            b.put(Piece(PieceType.PAWN, Color.BLACK, Square(f, 6)))
        for f, kind in enumerate(_BACK_RANK):
            b.put(Piece(kind, Color.WHITE, Square(f, 0)))
            b.put(Piece(kind, Color.BLACK, Square(f, 7)))
        return b

    @classmethod
    def from_pieces(cls, pieces: Iterable[Piece]) -> Board:
        b = cls()
        for piece in pieces:
            if not b.is_empty(piece.square):
                raise ValueError(f"Two pieces on {piece.square}")
            b.put(piece)
        return b

    @classmethod
    def from_diagram(cls, diagram: str) -> Board:
        """Build a board from eight rows, rank 8 first.

        Uppercase letters are White, lowercase Black, ``.`` an empty square;
        whitespace inside a row is ignored. All pieces start with a zero
        move count::

            Board.from_diagram('''
                r...k..r
                ........
                ........
                ........
                ........
                ........
                ........
                R...K..R
            ''')
        """
        rows = ["".join(line.split()) for line in diagram.strip().splitlines()]
        rows = [row for row in rows if row]
        if len(rows) != 8:
            raise ValueError(f"Diagram must have 8 rows, got {len(rows)}")

        b = cls()
        for row_idx, row in enumerate(rows):
            if len(row) != 8:
                raise ValueError(f"Diagram row {row_idx + 1} must be 8 wide: {row!r}")
            rank = 7 - row_idx
            for file, char in enumerate(row):
                if char == ".":
                    continue
                b.put(Piece.from_char(char, Square(file, rank)))
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._squares == other._squares

    def __repr__(self) -> str:
        rows: list[str] = []
        for rank in range(7, -1, -1):
            row = []
            for file in range(8):
                p = self._squares[rank * 8 + file]
                row.append(str(p) if p else ".")
            rows.append(f"{rank + 1} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
