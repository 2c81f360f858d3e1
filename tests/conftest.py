"""Shared test fixtures for the Creative Chess engine tests."""

import pytest

from creativechess.config import GameConfig
from creativechess.game.rules import new_game

# Actions unlocked from the first half-move
CREATIVE_NOW = GameConfig(creative_threshold=0)


@pytest.fixture
def creative_game():
    """Factory for games that are in the creative phase from the start.

    Usage: ``state = creative_game()`` or ``creative_game(fen, seed=3)``.
    """
    def _make(fen=None, seed=0):
        return new_game(seed=seed, config=CREATIVE_NOW, fen=fen)
    return _make


@pytest.fixture
def standard_game():
    return new_game(seed=0)
