import random

import pytest

from BoardManager import BOMB, BoardManager, Cell
from conftest import board_with_bombs


def brute_force_count(board, r, c):
    count = 0
    for dr in (-1, 0, 1):
        for dc in (-1, 0, 1):
            if (dr, dc) == (0, 0):
                continue
            nr, nc = r + dr, c + dc
            if 0 <= nr < board.rows and 0 <= nc < board.cols and board.grid[nr][nc].is_bomb:
                count += 1
    return count


def test_empty_board_cells_start_blank():
    board = BoardManager(4, 6)
    assert len(board.grid) == 4
    assert all(len(row) == 6 for row in board.grid)
    for cell in board.cells():
        assert (cell.is_bomb, cell.is_revealed, cell.is_flagged, cell.neighboring_mines) == (
            False, False, False, 0)
    assert board.cell(3, 5).row == 3
    assert board.cell(3, 5).col == 5


@pytest.mark.parametrize("rows, cols", [(0, 5), (5, 0), (-1, 3)])
def test_non_positive_dimensions_rejected(rows, cols):
    with pytest.raises(ValueError):
        BoardManager(rows, cols)


def test_neighbors_are_clipped_to_the_grid():
    board = BoardManager(3, 3)
    assert sorted(board.neighbors(0, 0)) == [(0, 1), (1, 0), (1, 1)]
    assert len(board.neighbors(1, 1)) == 8
    assert len(board.neighbors(2, 1)) == 5


@pytest.mark.parametrize("seed", range(20))
def test_place_mines_exact_count_and_excluded_cell_safe(seed):
    board = BoardManager(8, 8)
    board.place_mines(10, exclude=(3, 4), rng=random.Random(seed))
    assert board.bomb_count() == 10
    assert not board.cell(3, 4).is_bomb


def test_place_mines_fills_everything_but_the_excluded_cell():
    board = BoardManager(2, 2)
    board.place_mines(3, exclude=(0, 0), rng=random.Random(0))
    assert not board.cell(0, 0).is_bomb
    assert board.bomb_count() == 3


@pytest.mark.parametrize("count", [-1, 64, 100])
def test_place_mines_rejects_impossible_counts(count):
    board = BoardManager(8, 8)
    with pytest.raises(ValueError):
        board.place_mines(count, rng=random.Random(0))


def test_place_mines_only_once():
    board = BoardManager(4, 4)
    board.place_mines(3, rng=random.Random(0))
    with pytest.raises(RuntimeError):
        board.place_mines(3, rng=random.Random(0))


@pytest.mark.parametrize("seed", range(10))
def test_adjacency_matches_brute_force(seed):
    board = BoardManager(16, 30)
    board.place_mines(99, exclude=(0, 0), rng=random.Random(seed))
    board.compute_adjacency()
    for cell in board.cells():
        if cell.is_bomb:
            assert cell.neighboring_mines == BOMB
        else:
            assert cell.neighboring_mines == brute_force_count(board, cell.row, cell.col)


def test_flood_fill_stops_at_numbered_layer():
    # A wall of bombs down column 2 splits the board in two.
    board = board_with_bombs(5, 5, [(r, 2) for r in range(5)])
    revealed = board.flood_reveal(0, 0)

    assert revealed == 10
    for cell in board.cells():
        assert cell.is_revealed == (cell.col < 2)
    assert board.cell(0, 1).neighboring_mines == 2
    assert board.cell(2, 1).neighboring_mines == 3


def test_flood_fill_from_numbered_cell_reveals_only_that_cell():
    board = board_with_bombs(5, 5, [(r, 2) for r in range(5)])
    assert board.flood_reveal(0, 3) == 1
    assert board.revealed_safe_count() == 1


def test_flood_fill_skips_flagged_cells():
    board = board_with_bombs(5, 5, [(r, 2) for r in range(5)])
    board.cell(4, 0).is_flagged = True
    assert board.flood_reveal(0, 0) == 9
    assert not board.cell(4, 0).is_revealed
    assert board.cell(4, 0).is_flagged


def test_flood_fill_is_idempotent():
    board = board_with_bombs(5, 5, [(4, 4)])
    first = board.flood_reveal(0, 0)
    assert first == 24
    assert board.flood_reveal(0, 0) == 0
    assert board.revealed_safe_count() == 24


def test_flood_fill_on_large_open_board():
    # No recursion, so a big zero region is fine.
    board = board_with_bombs(200, 200, [(199, 199)])
    assert board.flood_reveal(0, 0) == 200 * 200 - 1


def test_reveal_all_bombs():
    board = board_with_bombs(3, 3, [(0, 0), (2, 2)])
    board.cell(0, 0).is_revealed = True
    assert board.reveal_all_bombs() == 1
    assert board.cell(2, 2).is_revealed
    assert board.revealed_safe_count() == 0


def test_cell_repr_mentions_position():
    assert repr(Cell(1, 2)).startswith("Cell(1, 2,")
