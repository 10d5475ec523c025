"""Game layer — state machine, selection handling and the AI opponent.

Quick start::

    from gambit.game import GameStateMachine

    game = GameStateMachine()
    game.events.on_turn_changed.append(lambda side: print(side, "to move"))
    game.execute_move((4, 1), (4, 3))  # e2-e4
"""

from gambit.game.interfaces import GamePhase, IChessGame, MoveError, MoveResult
from gambit.game.machine import GameEvents, GameStateMachine
from gambit.game.opponent import OpponentSession
from gambit.game.selection import Selection, SelectionController, SelectionOutcome

__all__ = [
    # Interfaces
    "GamePhase",
    "IChessGame",
    "MoveError",
    "MoveResult",
    # Concrete
    "GameEvents",
    "GameStateMachine",
    "OpponentSession",
    "Selection",
    "SelectionController",
    "SelectionOutcome",
]
