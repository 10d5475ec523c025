"""High-level chess rules: legal moves, check, checkmate, stalemate."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gambit.core.enums import PROMOTION_TYPES, Color, GameStatus, PieceType
from gambit.core.legality import legal_destinations
from gambit.core.move import Move
from gambit.core.move_generator import is_in_check

if TYPE_CHECKING:
    from gambit.core.position import Position
    from gambit.core.types import Square


class Rules:
    """Static rule-checker that operates on a :class:`Position`.

    Draws other than stalemate (repetition, fifty-move rule, insufficient
    material) are not detected.
    """

    @staticmethod
    def is_in_check(position: Position, color: Color | None = None) -> bool:
        side = position.side_to_move if color is None else color
        return is_in_check(position.board, side)

    @staticmethod
    def legal_moves(position: Position, sq: tuple[int, int]) -> set[Square]:
        """Legal destinations of the piece on *sq* (empty if none there)."""
        piece = position.board.piece_at(sq)
        if piece is None:
            return set()
        return legal_destinations(position, piece)

    @staticmethod
    def legal_move_list(position: Position, color: Color | None = None) -> list[Move]:
        """Every legal move of *color* in a stable order.

        Pieces a1 ... h8, destinations a1 ... h8, and one move per promotion
        kind (queen first) for pawns reaching the last rank.
        """
        side = position.side_to_move if color is None else color
        scratch = position.board.copy()
        moves: list[Move] = []
        for piece in position.board.pieces(side):
            targets = legal_destinations(position, piece, scratch=scratch)
            for to_sq in sorted(targets, key=lambda sq: sq.idx):
                if piece.kind == PieceType.PAWN and to_sq.rank == side.promotion_rank:
                    moves.extend(
                        Move(piece.square, to_sq, kind) for kind in PROMOTION_TYPES
                    )
                else:
                    moves.append(Move(piece.square, to_sq))
        return moves

    @staticmethod
    def has_legal_move(position: Position, color: Color | None = None) -> bool:
        side = position.side_to_move if color is None else color
        scratch = position.board.copy()
        return any(
            legal_destinations(position, piece, scratch=scratch)
            for piece in position.board.pieces(side)
        )

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        return Rules.status(position) == GameStatus.CHECKMATE

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        return Rules.status(position) == GameStatus.STALEMATE

    @staticmethod
    def status(position: Position) -> GameStatus:
        """Status of the side to move."""
        in_check = Rules.is_in_check(position)
        if Rules.has_legal_move(position):
            return GameStatus.CHECK if in_check else GameStatus.ONGOING
        return GameStatus.CHECKMATE if in_check else GameStatus.STALEMATE

    @staticmethod
    def winner(position: Position) -> Color | None:
        """The mating side on checkmate, otherwise ``None``."""
        if Rules.status(position) == GameStatus.CHECKMATE:
            return position.side_to_move.opposite
        return None
