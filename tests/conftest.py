"""
Pytest configuration and shared fixtures.
"""
import random

import pytest

from BoardManager import BoardManager
from GameLogic import GameLogic
from Persistence import MemoryStore, PersistenceAdapter
from Settings import EASY, Difficulty


def board_with_bombs(rows, cols, bombs):
    """Board with bombs at fixed positions and adjacency already counted."""
    board = BoardManager(rows, cols)
    for r, c in bombs:
        board.cell(r, c).is_bomb = True
    board.compute_adjacency()
    return board


def game_with_bombs(rows, cols, bombs, name="custom"):
    """Active session over a hand-built board."""
    difficulty = Difficulty(name, rows, cols, len(bombs))
    return GameLogic.from_board(difficulty, board_with_bombs(rows, cols, bombs))


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def easy_game(rng) -> GameLogic:
    """Fresh 8x8 game with 10 mines, nothing placed yet."""
    return GameLogic(EASY, rng=rng)


@pytest.fixture
def corner_game() -> GameLogic:
    """3x3 board with a single mine at (0, 0)."""
    return game_with_bombs(3, 3, [(0, 0)])


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def persistence(store) -> PersistenceAdapter:
    return PersistenceAdapter(store)
