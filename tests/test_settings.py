"""Tests for GameSettings validation."""

import pytest

from gambit.core.enums import Color
from gambit.settings import MAX_SEARCH_DEPTH, GameSettings


class TestGameSettings:
    def test_defaults(self) -> None:
        s = GameSettings()
        assert s.ai_color == Color.BLACK
        assert s.search_depth == 3
        assert s.thinking_delay_ms == 1000
        assert s.defer_promotion is False
        assert s.strict_castling is True

    @pytest.mark.parametrize("depth", [0, MAX_SEARCH_DEPTH + 1])
    def test_depth_out_of_range(self, depth: int) -> None:
        with pytest.raises(ValueError):
            GameSettings(search_depth=depth)

    @pytest.mark.parametrize("delay", [-1, 3001])
    def test_delay_out_of_range(self, delay: int) -> None:
        with pytest.raises(ValueError):
            GameSettings(thinking_delay_ms=delay)

    def test_bounds_accepted(self) -> None:
        GameSettings(search_depth=1, thinking_delay_ms=0)
        GameSettings(search_depth=MAX_SEARCH_DEPTH, thinking_delay_ms=3000)
