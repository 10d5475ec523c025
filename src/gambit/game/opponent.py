"""AI opponent session: timed, worker-thread searches applied as moves."""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, QThread, QTimer, pyqtSignal

from gambit.core.enums import Color
from gambit.core.move import Move
from gambit.core.position import Position
from gambit.engine.qt_bridge import EngineWorker
from gambit.engine.search import IEngine
from gambit.game.machine import GameStateMachine
from gambit.settings import GameSettings

_LOGGER = logging.getLogger(__name__)


class _EngineCommandBus(QObject):
    """Signal bridge for issuing worker commands with queued delivery."""

    search_requested = pyqtSignal(object, int)
    set_depth_requested = pyqtSignal(int)


class OpponentSession:
    """Plays one color of a :class:`GameStateMachine` with the engine.

    Reacts to the turn-changed event: when the AI color is to move it waits
    the thinking delay, searches a snapshot of the position on a worker
    thread, and commits the answer through ``execute_move``. Results for a
    position that is no longer current are dropped.
    """

    _THREAD_WAIT_MS = 2000

    __slots__ = (
        "__weakref__",
        "_game",
        "_color",
        "_thinking_delay_ms",
        "_command_bus",
        "_dispatch_timer",
        "_engine_thread",
        "_engine_worker",
        "_request_id",
        "_pending_request",
        "_pending_position",
        "_pending_ply",
        "_is_shutting_down",
        "_is_started",
    )

    def __init__(
        self,
        game: GameStateMachine,
        *,
        settings: GameSettings | None = None,
        engine: IEngine | None = None,
        parent: QObject | None = None,
    ) -> None:
        settings = settings if settings is not None else GameSettings()
        self._game = game
        self._color = settings.ai_color
        self._thinking_delay_ms = settings.thinking_delay_ms

        self._command_bus = _EngineCommandBus(parent)
        self._dispatch_timer = QTimer(parent)
        self._dispatch_timer.setSingleShot(True)
        self._dispatch_timer.timeout.connect(self._emit_pending_request)

        self._engine_thread = QThread(parent)
        self._engine_worker = EngineWorker(
            max_depth=settings.search_depth, engine=engine
        )
        self._request_id = 0
        self._pending_request: int | None = None
        self._pending_position: Position | None = None
        self._pending_ply: int | None = None
        self._is_shutting_down = False
        self._is_started = False

        game.events.on_turn_changed.append(self._on_turn_changed)

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def color(self) -> Color:
        return self._color

    @property
    def is_started(self) -> bool:
        return self._is_started

    @property
    def is_thinking(self) -> bool:
        return self._pending_request is not None

    @property
    def pending_request(self) -> int | None:
        return self._pending_request

    # ── Lifecycle ────────────────────────────────────────────────────────

    def setup(self) -> None:
        """Move the worker to its thread and connect signals."""
        if self._is_started:
            return
        self._is_shutting_down = False
        self._engine_worker.moveToThread(self._engine_thread)
        self._command_bus.search_requested.connect(self._engine_worker.request_move)
        self._command_bus.set_depth_requested.connect(self._engine_worker.set_depth)
        self._engine_worker.best_move_ready.connect(self._on_best_move)
        self._engine_worker.search_no_move.connect(self._on_no_move)
        self._engine_worker.search_error.connect(self._on_error)
        self._engine_worker.search_discarded.connect(self._on_discarded)
        self._engine_thread.start()
        self._is_started = True

    def start(self) -> None:
        """Set up and, if the AI is to move right now, begin thinking."""
        self.setup()
        self.request_move()

    def shutdown(self) -> None:
        """Drop any pending search and stop the worker thread."""
        if not self._is_started:
            return
        self._is_shutting_down = True
        self.cancel()
        self._engine_thread.quit()
        self._engine_thread.wait(self._THREAD_WAIT_MS)
        self._is_started = False

    def set_depth(self, depth: int) -> None:
        """Update search depth for subsequent searches."""
        if self._is_started:
            self._command_bus.set_depth_requested.emit(depth)
            return
        self._engine_worker.set_depth(depth)

    # ── Requests ─────────────────────────────────────────────────────────

    def request_move(self) -> None:
        """Queue a search if the AI color is to move in a live game."""
        if not self._is_started or self._is_shutting_down:
            return
        if self._game.is_game_over or self._game.side_to_move != self._color:
            return

        self.cancel()
        self._request_id += 1
        self._pending_request = self._request_id
        self._pending_position = self._game.snapshot()
        self._pending_ply = self._game.ply
        _LOGGER.debug(
            "Request %d: %s to move at ply %d",
            self._request_id,
            self._color,
            self._pending_ply,
        )
        self._dispatch_timer.start(self._thinking_delay_ms)

    def cancel(self) -> None:
        """Forget the pending request; a running search result is dropped."""
        self._dispatch_timer.stop()
        had_request = self._pending_request is not None
        self._clear_pending_request()
        if had_request and self._is_started:
            self._engine_worker.discard()

    # ── Event and signal handlers ────────────────────────────────────────

    def _on_turn_changed(self, side: Color) -> None:
        if side == self._color:
            self.request_move()
        else:
            self.cancel()

    def _emit_pending_request(self) -> None:
        if self._is_shutting_down:
            return
        request_id = self._pending_request
        position = self._pending_position
        if request_id is None or position is None:
            return
        self._command_bus.search_requested.emit(position, request_id)

    def _on_best_move(
        self,
        request_id: int,
        move_obj: object,
        score: int,
        nodes: int,
    ) -> None:
        if not self._accepts(request_id):
            return
        if not isinstance(move_obj, Move):
            _LOGGER.error(
                "Request %d returned %r instead of a move", request_id, move_obj
            )
            self._clear_pending_request()
            return

        self._clear_pending_request()
        result = self._game.execute_move(
            move_obj.from_sq, move_obj.to_sq, move_obj.promotion
        )
        if not result:
            _LOGGER.warning(
                "Engine move %s rejected: %s",
                move_obj,
                result.error.name if result.error is not None else "unknown",
            )
            return
        _LOGGER.info(
            "%s plays %s (score %d, %d nodes)", self._color, move_obj, score, nodes
        )

    def _on_no_move(self, request_id: int, score: int) -> None:
        if not self._accepts(request_id):
            return
        self._clear_pending_request()
        _LOGGER.warning("Engine found no move for %s (score %d)", self._color, score)

    def _on_error(self, request_id: int, message: str) -> None:
        if self._is_shutting_down or request_id != self._pending_request:
            return
        self._clear_pending_request()
        _LOGGER.error("Engine search %d failed: %s", request_id, message)

    def _on_discarded(self, request_id: int) -> None:
        if request_id == self._pending_request:
            self._clear_pending_request()

    # ── Internal helpers ─────────────────────────────────────────────────

    def _accepts(self, request_id: int) -> bool:
        if self._is_shutting_down or request_id != self._pending_request:
            _LOGGER.debug("Ignoring result of request %d", request_id)
            return False
        if (
            self._game.is_game_over
            or self._game.side_to_move != self._color
            or self._game.ply != self._pending_ply
        ):
            _LOGGER.warning("Discarding stale result of request %d", request_id)
            self._clear_pending_request()
            return False
        return True

    def _clear_pending_request(self) -> None:
        self._pending_request = None
        self._pending_position = None
        self._pending_ply = None
