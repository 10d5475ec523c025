"""Tests for OpponentSession wiring and result handling."""

from __future__ import annotations

import weakref
from collections.abc import Callable

import pytest
from PyQt6.QtTest import QTest

from gambit.core.enums import Color
from gambit.core.move import Move
from gambit.core.types import D5, D7, E2, E4, parse_square
from gambit.game.machine import GameStateMachine
from gambit.game.opponent import OpponentSession
from gambit.settings import GameSettings

pytestmark = pytest.mark.usefixtures("qapp")


def _session(
    game: GameStateMachine | None = None,
    *,
    ai_color: Color = Color.BLACK,
    delay_ms: int = 0,
) -> tuple[GameStateMachine, OpponentSession]:
    game = game if game is not None else GameStateMachine()
    settings = GameSettings(ai_color=ai_color, search_depth=1, thinking_delay_ms=delay_ms)
    return game, OpponentSession(game, settings=settings)


def _fake_start(session: OpponentSession) -> None:
    """Mark the session started without spinning up the worker thread."""
    session._is_started = True


def _wait_for(predicate: Callable[[], bool], timeout_ms: int = 5000) -> bool:
    waited = 0
    while waited < timeout_ms:
        if predicate():
            return True
        QTest.qWait(20)
        waited += 20
    return predicate()


class TestLifecycle:
    def test_shutdown_before_setup_is_noop(self) -> None:
        _game, session = _session()
        session.shutdown()
        assert session.is_started is False

    def test_setup_twice_keeps_started_state(self) -> None:
        _game, session = _session()
        session.setup()
        session.setup()
        assert session.is_started is True
        session.shutdown()
        assert session.is_started is False

    def test_setup_connects_slots_without_weakref_error(self) -> None:
        _game, session = _session()
        assert weakref.ref(session)() is session
        session.setup()
        session.shutdown()

    def test_request_ignored_before_setup(self) -> None:
        _game, session = _session(ai_color=Color.WHITE)
        session.request_move()
        assert not session.is_thinking

    def test_set_depth_before_setup(self) -> None:
        _game, session = _session()
        session.set_depth(4)
        assert session._engine_worker.limits.max_depth == 4


class TestRequests:
    def test_turn_change_to_ai_queues_request(self) -> None:
        game, session = _session(delay_ms=1000)
        _fake_start(session)
        game.execute_move(E2, E4)
        assert session.is_thinking
        assert session._pending_ply == 1
        assert session._pending_position is not None
        assert session._pending_position.ply == 1
        session.cancel()
        assert not session.is_thinking

    def test_cancel_marks_running_search_discarded_immediately(self) -> None:
        game, session = _session(delay_ms=1000)
        _fake_start(session)
        game.execute_move(E2, E4)
        assert session.is_thinking
        session.cancel()
        # no event loop turn needed
        assert session._engine_worker._discard_event.is_set()

    def test_cancel_without_request_leaves_worker_alone(self) -> None:
        _game, session = _session(delay_ms=1000)
        _fake_start(session)
        session.cancel()
        assert not session._engine_worker._discard_event.is_set()

    def test_ai_move_hands_turn_back_to_human(self) -> None:
        game, session = _session(ai_color=Color.WHITE, delay_ms=1000)
        _fake_start(session)
        session.request_move()
        assert session.is_thinking
        request = session.pending_request
        session._on_best_move(request, Move(E2, E4), 0, 1)  # type: ignore[arg-type]
        assert game.side_to_move == Color.BLACK
        assert not session.is_thinking

    def test_no_request_when_game_over(self) -> None:
        game, session = _session(ai_color=Color.WHITE, delay_ms=1000)
        _fake_start(session)
        for src, dst in (("f2", "f3"), ("e7", "e5"), ("g2", "g4"), ("d8", "h4")):
            game.execute_move(parse_square(src), parse_square(dst))
        session.request_move()
        assert game.is_game_over
        assert not session.is_thinking

    def test_each_request_gets_a_new_id(self) -> None:
        _game, session = _session(ai_color=Color.WHITE, delay_ms=1000)
        _fake_start(session)
        session.request_move()
        first = session.pending_request
        session.request_move()
        assert session.pending_request == (first or 0) + 1
        session.cancel()


class TestResults:
    def _thinking(self) -> tuple[GameStateMachine, OpponentSession, int]:
        game, session = _session(delay_ms=1000)
        _fake_start(session)
        game.execute_move(E2, E4)
        request = session.pending_request
        assert request is not None
        return game, session, request

    def test_best_move_is_applied(self) -> None:
        game, session, request = self._thinking()
        session._on_best_move(request, Move(D7, D5), 10, 20)
        assert game.ply == 2
        assert game.piece_at(D5) is not None
        assert not session.is_thinking

    def test_result_for_old_request_is_ignored(self) -> None:
        game, session, request = self._thinking()
        session._on_best_move(request - 1, Move(D7, D5), 10, 20)
        assert game.ply == 1
        assert session.is_thinking
        session.cancel()

    def test_stale_result_is_discarded(self) -> None:
        game, session, request = self._thinking()
        session._pending_ply = 0
        session._on_best_move(request, Move(D7, D5), 10, 20)
        assert game.ply == 1
        assert not session.is_thinking

    def test_non_move_result_is_dropped(self) -> None:
        game, session, request = self._thinking()
        session._on_best_move(request, "d7d5", 10, 20)
        assert game.ply == 1
        assert not session.is_thinking

    def test_rejected_engine_move_leaves_game_unchanged(self) -> None:
        game, session, request = self._thinking()
        session._on_best_move(request, Move(D7, parse_square("d4")), 10, 20)
        assert game.ply == 1
        assert game.side_to_move == Color.BLACK

    def test_no_move_clears_request(self) -> None:
        game, session, request = self._thinking()
        session._on_no_move(request, -1_000_000)
        assert not session.is_thinking
        assert game.ply == 1

    def test_error_clears_request(self) -> None:
        _game, session, request = self._thinking()
        session._on_error(request, "boom")
        assert not session.is_thinking

    def test_discarded_clears_request(self) -> None:
        _game, session, request = self._thinking()
        session._on_discarded(request)
        assert not session.is_thinking


class TestLiveSearch:
    def test_ai_answers_human_move(self) -> None:
        game, session = _session()
        session.start()
        try:
            assert not session.is_thinking
            game.execute_move(E2, E4)
            assert _wait_for(lambda: game.ply == 2)
            assert game.side_to_move == Color.WHITE
            assert game.history[-1].color == Color.BLACK
        finally:
            session.shutdown()

    def test_ai_moves_first_as_white(self) -> None:
        game, session = _session(ai_color=Color.WHITE)
        session.start()
        try:
            assert _wait_for(lambda: game.ply == 1)
            assert game.history[0].color == Color.WHITE
        finally:
            session.shutdown()
