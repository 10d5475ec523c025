"""Static position evaluation.

Scores are from the point of view of the side passed to
:meth:`Evaluator.evaluate`; higher is better for that side.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field

from gambit.core.board import Board
from gambit.core.enums import Color, PieceType
from gambit.core.legality import legal_destinations
from gambit.core.move_generator import attacked_squares, king_zone, pseudo_moves
from gambit.core.piece import Piece
from gambit.core.position import Position
from gambit.core.types import D4, D5, E4, E5, Square

PIECE_VALUES: dict[PieceType, int] = {
    PieceType.PAWN: 100,
    PieceType.KNIGHT: 320,
    PieceType.BISHOP: 330,
    PieceType.ROOK: 500,
    PieceType.QUEEN: 900,
    PieceType.KING: 20_000,
}

CENTER_SQUARES: frozenset[Square] = frozenset((D4, E4, D5, E5))

_DEVELOPING_KINDS = frozenset(
    (PieceType.KNIGHT, PieceType.BISHOP, PieceType.ROOK, PieceType.QUEEN)
)


@dataclass(frozen=True, slots=True)
class EvalWeights:
    """Tunable evaluator weights."""

    piece_values: dict[PieceType, int] = field(
        default_factory=lambda: dict(PIECE_VALUES)
    )
    mobility: int = 10
    center: int = 30
    development: int = 15
    king_zone_attack: int = 20
    king_zone_cover: int = 5
    threat: int = 5
    hanging_divisor: int = 2
    bad_capture_divisor: int = 2
    oscillation: int = 50


class Evaluator:
    """Weighted sum of material, mobility, centre control, development,
    king safety, threats, hanging pieces, bad captures and oscillation."""

    __slots__ = ("weights",)

    def __init__(self, weights: EvalWeights | None = None) -> None:
        self.weights = weights if weights is not None else EvalWeights()

    def evaluate(self, position: Position, color: Color) -> int:
        board = position.board
        opponent = color.opposite
        own = board.pieces(color)
        theirs = board.pieces(opponent)
        own_cover = attack_map(board, own)
        their_cover = attack_map(board, theirs)
        w = self.weights

        score = self.material(own) - self.material(theirs)
        score += w.mobility * (
            self.mobility(position, color) - self.mobility(position, opponent)
        )
        score += w.center * (self.center_count(own) - self.center_count(theirs))
        score += w.development * self.development(own)
        score += self.king_safety(board, color, own_cover, their_cover)
        score += w.threat * self.threats(position, color)
        score -= self.hanging_penalty(own, own_cover, their_cover)
        score -= self.bad_capture_penalty(position, color, their_cover)
        score -= self.oscillation_penalty(position, color)
        return score

    # ── Terms ────────────────────────────────────────────────────────────

    def material(self, pieces: Iterable[Piece]) -> int:
        values = self.weights.piece_values
        return sum(values[p.kind] for p in pieces)

    def mobility(self, position: Position, color: Color) -> int:
        """Number of legal destinations over all of *color*'s pieces."""
        scratch = position.board.copy()
        return sum(
            len(legal_destinations(position, piece, scratch=scratch))
            for piece in position.board.pieces(color)
        )

    @staticmethod
    def center_count(pieces: Iterable[Piece]) -> int:
        return sum(1 for p in pieces if p.square in CENTER_SQUARES)

    @staticmethod
    def development(pieces: Iterable[Piece]) -> int:
        """Minor and major pieces that have left their back rank."""
        return sum(
            1
            for p in pieces
            if p.kind in _DEVELOPING_KINDS and p.square.rank != p.color.back_rank
        )

    def king_safety(
        self,
        board: Board,
        color: Color,
        own_cover: Counter[Square],
        their_cover: Counter[Square],
    ) -> int:
        """Cover bonus minus attack penalty around *color*'s king."""
        king_sq = board.king_square(color)
        neighbours = king_zone(king_sq)
        w = self.weights

        attacks = their_cover[king_sq] + sum(their_cover[sq] for sq in neighbours)
        # The king itself covers each neighbour once; only other pieces count.
        cover = sum(own_cover[sq] - 1 for sq in neighbours)
        return w.king_zone_cover * cover - w.king_zone_attack * attacks

    @staticmethod
    def threats(position: Position, color: Color) -> int:
        """Own pseudo-moves landing on enemy-occupied squares."""
        board = position.board
        last_move = position.last_move if color == position.side_to_move else None
        count = 0
        for piece in board.pieces(color):
            for to_sq in pseudo_moves(board, piece, last_move):
                target = board[to_sq]
                if target is not None and target.color != color:
                    count += 1
        return count

    def hanging_penalty(
        self,
        pieces: Iterable[Piece],
        own_cover: Counter[Square],
        their_cover: Counter[Square],
    ) -> int:
        """Own non-king pieces that are attacked and undefended."""
        w = self.weights
        return sum(
            w.piece_values[p.kind] // w.hanging_divisor
            for p in pieces
            if p.kind != PieceType.KING
            and their_cover[p.square]
            and not own_cover[p.square]
        )

    def bad_capture_penalty(
        self,
        position: Position,
        color: Color,
        their_cover: Counter[Square],
    ) -> int:
        """Penalty when *color*'s latest move captured onto an attacked square."""
        recent = position.last_records(color, 1)
        if not recent or not recent[0].is_capture:
            return 0
        to_sq = recent[0].move.to_sq
        capturer = position.board[to_sq]
        if capturer is None or capturer.color != color or not their_cover[to_sq]:
            return 0
        w = self.weights
        return w.piece_values[capturer.kind] // w.bad_capture_divisor

    def oscillation_penalty(self, position: Position, color: Color) -> int:
        """Penalty when *color*'s latest move undoes its previous one."""
        recent = position.last_records(color, 2)
        if len(recent) < 2:
            return 0
        latest, previous = recent
        if latest.piece.kind == previous.piece.kind and latest.move.reverses(
            previous.move
        ):
            return self.weights.oscillation
        return 0


def attack_map(board: Board, pieces: Iterable[Piece]) -> Counter[Square]:
    """How many of *pieces* cover each square."""
    cover: Counter[Square] = Counter()
    for piece in pieces:
        cover.update(attacked_squares(board, piece))
    return cover
