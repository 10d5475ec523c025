"""Pure-Python minimax search with alpha-beta pruning."""

from __future__ import annotations

import logging

from gambit.core.enums import Color, PieceType
from gambit.core.move import Move
from gambit.core.move_generator import is_en_passant
from gambit.core.position import Position
from gambit.core.rules import Rules
from gambit.engine.evaluation import Evaluator
from gambit.engine.search import IEngine, SearchLimits, SearchResult

_LOGGER = logging.getLogger(__name__)

_INF_SCORE = 10_000_000
MATE_SCORE = 1_000_000
DRAW_SCORE = 0


class MinimaxEngine(IEngine):
    """Depth-limited minimax from a fixed side's point of view.

    The search runs on a private copy of the position with make/unmake, so
    the caller's position is never modified. With ``pruning=False`` the
    same tree is searched without alpha-beta cut-offs, which yields the
    same move and score at a higher node count.
    """

    __slots__ = ("_evaluator", "_pruning", "_nodes")

    def __init__(
        self,
        evaluator: Evaluator | None = None,
        *,
        pruning: bool = True,
    ) -> None:
        self._evaluator = evaluator if evaluator is not None else Evaluator()
        self._pruning = pruning
        self._nodes = 0

    @property
    def pruning(self) -> bool:
        return self._pruning

    def search(self, position: Position, limits: SearchLimits) -> SearchResult:
        return self.best_move(position, position.side_to_move, limits.max_depth)

    def best_move(self, position: Position, color: Color, depth: int) -> SearchResult:
        """Pick *color*'s move by searching *depth* plies.

        Ties go to the first move found under capture-first ordering.
        """
        if depth <= 0:
            raise ValueError("Search depth must be >= 1")

        self._nodes = 0
        scratch = position.copy()
        scratch.side_to_move = color

        root_moves = self._order_moves(scratch, Rules.legal_move_list(scratch))
        if not root_moves:
            score = -MATE_SCORE if Rules.is_in_check(scratch) else DRAW_SCORE
            _LOGGER.debug("No legal move for %s (score %d)", color, score)
            return SearchResult(None, score, 0, self._nodes)

        best_move: Move | None = None
        best_score = -_INF_SCORE
        alpha = -_INF_SCORE
        beta = _INF_SCORE

        for move in root_moves:
            scratch.make_move(move)
            score = self._minimax(scratch, color, depth - 1, alpha, beta, ply=1)
            scratch.unmake_move()

            if score > best_score:
                best_score = score
                best_move = move
            if self._pruning and score > alpha:
                alpha = score

        _LOGGER.debug(
            "Search %s depth=%d pruning=%s: %s score=%d nodes=%d",
            color,
            depth,
            self._pruning,
            best_move,
            best_score,
            self._nodes,
        )
        return SearchResult(best_move, best_score, depth, self._nodes)

    def _minimax(
        self,
        position: Position,
        color: Color,
        depth: int,
        alpha: int,
        beta: int,
        ply: int,
    ) -> int:
        self._nodes += 1
        if depth == 0:
            return self._evaluator.evaluate(position, color)

        moves = Rules.legal_move_list(position)
        maximizing = position.side_to_move == color
        if not moves:
            if Rules.is_in_check(position):
                # Nearer mates score further from zero.
                mate = MATE_SCORE - ply
                return -mate if maximizing else mate
            return DRAW_SCORE

        best = -_INF_SCORE if maximizing else _INF_SCORE
        for move in self._order_moves(position, moves):
            position.make_move(move)
            score = self._minimax(position, color, depth - 1, alpha, beta, ply + 1)
            position.unmake_move()

            if maximizing:
                if score > best:
                    best = score
                if self._pruning and best > alpha:
                    alpha = best
            else:
                if score < best:
                    best = score
                if self._pruning and best < beta:
                    beta = best
            if self._pruning and alpha >= beta:
                break
        return best

    def _order_moves(self, position: Position, moves: list[Move]) -> list[Move]:
        """Captures of the most valuable pieces first, stable otherwise."""
        return sorted(
            moves,
            key=lambda move: self._captured_value(position, move),
            reverse=True,
        )

    def _captured_value(self, position: Position, move: Move) -> int:
        board = position.board
        values = self._evaluator.weights.piece_values
        target = board[move.to_sq]
        if target is not None:
            return values[target.kind]
        mover = board[move.from_sq]
        if mover is not None and is_en_passant(board, mover, move.to_sq):
            return values[PieceType.PAWN]
        return 0
