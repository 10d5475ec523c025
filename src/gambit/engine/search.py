"""Shared engine search models and protocol."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from gambit.core.enums import Color
    from gambit.core.move import Move
    from gambit.core.position import Position


@dataclass(slots=True, frozen=True)
class SearchLimits:
    """Search constraints for a single move computation.

    Depth is the only latency control; a search always runs to completion.
    """

    max_depth: int = 3


@dataclass(slots=True, frozen=True)
class SearchResult:
    """Result produced by the engine search.

    ``best_move`` is ``None`` when the searching side has no legal move,
    i.e. it is already checkmated or stalemated.
    """

    best_move: Move | None
    score: int
    depth: int
    nodes: int


class IEngine(Protocol):
    """Protocol for engines used by the game layer."""

    def best_move(self, position: Position, color: Color, depth: int) -> SearchResult: ...

    def search(self, position: Position, limits: SearchLimits) -> SearchResult: ...
