"""User-configurable game settings."""

from __future__ import annotations

from dataclasses import dataclass

from gambit.core.enums import Color

MIN_SEARCH_DEPTH = 1
MAX_SEARCH_DEPTH = 6
MAX_THINKING_DELAY_MS = 3000


@dataclass
class GameSettings:
    """All user-configurable settings."""

    # Opponent
    ai_color: Color = Color.BLACK
    search_depth: int = 3  # 1-2 easy, 3-4 medium, 5-6 hard
    thinking_delay_ms: int = 1000

    # Rules
    defer_promotion: bool = False
    strict_castling: bool = True

    def __post_init__(self) -> None:
        if not MIN_SEARCH_DEPTH <= self.search_depth <= MAX_SEARCH_DEPTH:
            raise ValueError(
                f"search_depth must be in [{MIN_SEARCH_DEPTH}, {MAX_SEARCH_DEPTH}],"
                f" got {self.search_depth}"
            )
        if not 0 <= self.thinking_delay_ms <= MAX_THINKING_DELAY_MS:
            raise ValueError(
                f"thinking_delay_ms must be in [0, {MAX_THINKING_DELAY_MS}],"
                f" got {self.thinking_delay_ms}"
            )
