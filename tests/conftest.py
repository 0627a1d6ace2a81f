"""Pytest configuration and fixtures."""

from collections.abc import Callable

import pytest

from hexchess.game.board import Board
from hexchess.game.pieces import PIECES
from hexchess.settings import get_settings


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Make every test read settings from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_board() -> Callable[[dict[int, str]], Board]:
    """Build a board from {index: code}, e.g. {18: "WR", 20: "BP"}."""

    def _make(placements: dict[int, str]) -> Board:
        board = Board.create_empty()
        for index, code in placements.items():
            board[index] = PIECES[code]
        return board

    return _make
