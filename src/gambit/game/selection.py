"""Tap-to-select, tap-to-move input handling on logical squares."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum, auto

from gambit.core.enums import Color
from gambit.core.types import Square, is_valid_square
from gambit.game.interfaces import MoveResult
from gambit.game.machine import GameStateMachine


class SelectionOutcome(IntEnum):
    SELECTED = auto()
    DESELECTED = auto()
    MOVED = auto()
    PROMOTION_PENDING = auto()
    IGNORED = auto()


@dataclass(frozen=True, slots=True)
class Selection:
    """What a single :meth:`SelectionController.select` call did."""

    outcome: SelectionOutcome
    selected: Square | None = None
    highlights: frozenset[Square] = frozenset()
    result: MoveResult | None = None


class SelectionController:
    """Turns square picks into selections and moves.

    The first pick on a piece of a human side selects it and exposes its
    legal destinations. The next pick moves there, reselects another own
    piece, or clears the selection.
    """

    __slots__ = ("_game", "_human_colors", "_selected", "_highlights")

    def __init__(
        self,
        game: GameStateMachine,
        *,
        human_colors: Iterable[Color] = (Color.WHITE, Color.BLACK),
    ) -> None:
        self._game = game
        self._human_colors = frozenset(human_colors)
        self._selected: Square | None = None
        self._highlights: frozenset[Square] = frozenset()

    @property
    def selected(self) -> Square | None:
        return self._selected

    @property
    def highlights(self) -> frozenset[Square]:
        return self._highlights

    def clear(self) -> None:
        self._selected = None
        self._highlights = frozenset()

    def select(self, sq: tuple[int, int]) -> Selection:
        file, rank = sq
        if not is_valid_square(file, rank):
            if self._selected is None:
                return Selection(SelectionOutcome.IGNORED)
            return self._deselect()
        target = Square(file, rank)

        side = self._game.side_to_move
        if side not in self._human_colors or self._game.is_game_over:
            self.clear()
            return Selection(SelectionOutcome.IGNORED)

        if self._selected is not None and target in self._highlights:
            origin = self._selected
            self.clear()
            result = self._game.execute_move(origin, target)
            if not result:
                return Selection(SelectionOutcome.IGNORED, result=result)
            outcome = (
                SelectionOutcome.PROMOTION_PENDING
                if result.awaiting_promotion
                else SelectionOutcome.MOVED
            )
            return Selection(outcome, result=result)

        piece = self._game.piece_at(target)
        if piece is not None and piece.color == side and target != self._selected:
            self._selected = target
            self._highlights = frozenset(self._game.legal_moves(target))
            return Selection(SelectionOutcome.SELECTED, target, self._highlights)

        if self._selected is None:
            return Selection(SelectionOutcome.IGNORED)
        return self._deselect()

    def _deselect(self) -> Selection:
        self.clear()
        return Selection(SelectionOutcome.DESELECTED)
