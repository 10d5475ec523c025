"""Square type and coordinate helpers.

A square is a ``(file, rank)`` pair, both in ``range(8)``:
    a1=(0, 0), b1=(1, 0), ..., h1=(7, 0)
    ...
    a8=(0, 7), ..., h8=(7, 7)
"""

from __future__ import annotations

from typing import NamedTuple


class Square(NamedTuple):
    """Logical board coordinate."""

    file: int
    rank: int

    @property
    def idx(self) -> int:
        """Linear index 0-63, a1=0 ... h8=63."""
        return self.rank * 8 + self.file

    @property
    def name(self) -> str:
        return square_name(self)

    def offset(self, df: int, dr: int) -> Square | None:
        """Square shifted by ``(df, dr)`` or ``None`` when off the board."""
        f = self.file + df
        r = self.rank + dr
        if 0 <= f < 8 and 0 <= r < 8:
            return Square(f, r)
        return None

    def __str__(self) -> str:
        return square_name(self)


def is_valid_square(file: int, rank: int) -> bool:
    """Check whether the coordinates are on the board."""
    return 0 <= file < 8 and 0 <= rank < 8


def square_from_index(index: int) -> Square:
    return Square(index & 7, index >> 3)


def square_name(sq: Square) -> str:
    """Human-readable name, e.g. ``Square(4, 3)`` -> ``'e4'``."""
    return chr(ord("a") + sq.file) + str(sq.rank + 1)


def parse_square(name: str) -> Square:
    """Parse square name, e.g. ``'e4'`` -> ``Square(4, 3)``."""
    if len(name) != 2 or name[0] not in "abcdefgh" or name[1] not in "12345678":
        raise ValueError(f"Invalid square name: {name!r}")
    return Square(ord(name[0]) - ord("a"), int(name[1]) - 1)


ALL_SQUARES: tuple[Square, ...] = tuple(square_from_index(i) for i in range(64))

# ── Named square constants ──────────────────────────────────────────────────

A1, B1, C1, D1, E1, F1, G1, H1 = ALL_SQUARES[0:8]
A2, B2, C2, D2, E2, F2, G2, H2 = ALL_SQUARES[8:16]
A3, B3, C3, D3, E3, F3, G3, H3 = ALL_SQUARES[16:24]
A4, B4, C4, D4, E4, F4, G4, H4 = ALL_SQUARES[24:32]
A5, B5, C5, D5, E5, F5, G5, H5 = ALL_SQUARES[32:40]
A6, B6, C6, D6, E6, F6, G6, H6 = ALL_SQUARES[40:48]
A7, B7, C7, D7, E7, F7, G7, H7 = ALL_SQUARES[48:56]
A8, B8, C8, D8, E8, F8, G8, H8 = ALL_SQUARES[56:64]
