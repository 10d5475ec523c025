"""Qt bridge to run engine search in a worker thread."""

from __future__ import annotations

import logging
import threading

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from gambit.core.position import Position
from gambit.engine.minimax import MinimaxEngine
from gambit.engine.search import IEngine, SearchLimits

_LOGGER = logging.getLogger(__name__)


class EngineWorker(QObject):
    """Thread-affine worker that computes engine moves on demand.

    A search cannot be interrupted; :meth:`discard` only marks the running
    request so its result is dropped instead of delivered. The worker thread
    is busy for the whole search, so a queued call would arrive too late:
    call :meth:`discard` directly from the owning thread.
    """

    best_move_ready = pyqtSignal(int, object, int, int)
    search_no_move = pyqtSignal(int, int)
    search_error = pyqtSignal(int, str)
    search_discarded = pyqtSignal(int)

    __slots__ = ("_discard_event", "_engine", "_limits")

    def __init__(self, *, max_depth: int = 3, engine: IEngine | None = None) -> None:
        super().__init__()
        self._engine: IEngine = engine if engine is not None else MinimaxEngine()
        self._limits = SearchLimits(max_depth=max_depth)
        self._discard_event = threading.Event()

    @property
    def limits(self) -> SearchLimits:
        return self._limits

    @pyqtSlot(object, int)
    def request_move(self, position_obj: object, request_id: int) -> None:
        """Search for the side to move in *position_obj* and emit the result."""
        if not isinstance(position_obj, Position):
            self.search_error.emit(request_id, "Engine received invalid position")
            return

        self._discard_event.clear()
        try:
            result = self._engine.search(position_obj, self._limits)
        except Exception as exc:
            _LOGGER.error("Engine search %d failed", request_id, exc_info=True)
            self.search_error.emit(request_id, str(exc))
            return

        if self._discard_event.is_set():
            self.search_discarded.emit(request_id)
            return

        if result.best_move is None:
            self.search_no_move.emit(request_id, result.score)
            return

        self.best_move_ready.emit(
            request_id,
            result.best_move,
            result.score,
            result.nodes,
        )

    @pyqtSlot()
    def discard(self) -> None:
        """Drop the result of the search in progress. Safe from any thread."""
        self._discard_event.set()

    @pyqtSlot(int)
    def set_depth(self, max_depth: int) -> None:
        """Update search depth (takes effect on the next search)."""
        self._limits = SearchLimits(max_depth=max_depth)
