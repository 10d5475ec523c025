"""Core domain layer — pure chess logic with zero external dependencies.

Quick start::

    from gambit.core import Position, Rules, parse_square

    pos = Position.initial()
    print(Rules.legal_moves(pos, parse_square("g1")))  # {f3, h3}
    for move in Rules.legal_move_list(pos):
        print(move)
"""

from gambit.core.board import Board
from gambit.core.enums import PROMOTION_TYPES, Color, GameStatus, PieceType
from gambit.core.errors import InvariantViolation
from gambit.core.legality import is_legal, legal_destinations, revert, simulate
from gambit.core.move import LastMove, Move
from gambit.core.move_generator import (
    attacked_squares,
    is_in_check,
    is_square_attacked,
    pseudo_moves,
)
from gambit.core.piece import Piece
from gambit.core.position import MoveRecord, Position
from gambit.core.rules import Rules
from gambit.core.types import Square, parse_square, square_name

__all__ = [
    # Enums
    "Color",
    "GameStatus",
    "PROMOTION_TYPES",
    "PieceType",
    # Types / helpers
    "Square",
    "parse_square",
    "square_name",
    # Errors
    "InvariantViolation",
    # Domain objects
    "Board",
    "LastMove",
    "Move",
    "MoveRecord",
    "Piece",
    "Position",
    "Rules",
    # Move generation / legality
    "attacked_squares",
    "is_in_check",
    "is_legal",
    "is_square_attacked",
    "legal_destinations",
    "pseudo_moves",
    "revert",
    "simulate",
]
