"""Chess engine package: evaluator, minimax search and Qt worker bridge."""

from gambit.engine.evaluation import PIECE_VALUES, EvalWeights, Evaluator
from gambit.engine.minimax import MATE_SCORE, MinimaxEngine
from gambit.engine.qt_bridge import EngineWorker
from gambit.engine.search import IEngine, SearchLimits, SearchResult

__all__ = [
    "EngineWorker",
    "EvalWeights",
    "Evaluator",
    "IEngine",
    "MATE_SCORE",
    "MinimaxEngine",
    "PIECE_VALUES",
    "SearchLimits",
    "SearchResult",
]
