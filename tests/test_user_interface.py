import pygame
import pytest

from GameLogic import BoardPhase, CellView
from Persistence import PersistenceAdapter
from Settings import storage_key
from UserInterface import (
    BOMB_GLYPH,
    FLAG_GLYPH,
    MinesweeperUI,
    board_origin,
    cell_colors,
    cell_glyph,
    coords_to_index,
    parse_args,
    status_text,
    window_size,
    footer_lines,
    CELL_GAP,
    CELL_SIZE,
    KEY_HELP,
    NUMBER_COLORS,
    RULES_TEXT,
)


@pytest.mark.parametrize("view, glyph", [
    (CellView(revealed=False, flagged=False), ""),
    (CellView(revealed=False, flagged=True), FLAG_GLYPH),
    (CellView(revealed=True, flagged=False, bomb=True), BOMB_GLYPH),
    (CellView(revealed=True, flagged=False, bomb=False, adjacent=0), ""),
    (CellView(revealed=True, flagged=False, bomb=False, adjacent=3), "3"),
])
def test_cell_glyph(view, glyph):
    assert cell_glyph(view) == glyph


def test_number_colors():
    _, foreground = cell_colors(CellView(revealed=True, flagged=False, bomb=False, adjacent=2))
    assert foreground == NUMBER_COLORS[2]


def test_status_text(corner_game):
    assert status_text(corner_game.snapshot()) == ""
    corner_game.reveal(0, 0)
    assert status_text(corner_game.snapshot()) == "Game over! You Lost!"


def test_coords_round_trip_through_layout():
    left, top = board_origin(16, 30)
    step = CELL_SIZE + CELL_GAP
    assert coords_to_index((left + 2 * step + 1, top + 5 * step + 1), 16, 30) == (5, 2)
    assert coords_to_index((left - 1, top), 16, 30) is None
    assert coords_to_index((left, top + 16 * step), 16, 30) is None


def test_window_grows_with_board():
    assert window_size(16, 30)[0] > window_size(8, 8)[0]


@pytest.fixture
def ui(persistence) -> MinesweeperUI:
    return MinesweeperUI(persistence, "easy")


def test_ui_starts_fresh_without_save(ui):
    assert ui.game.level == "easy"
    assert ui.game.phase == BoardPhase.EMPTY


def test_ui_restores_saved_board(store, persistence):
    first = MinesweeperUI(persistence, "easy")
    first.game.reveal(0, 0)
    assert storage_key("easy") in store

    second = MinesweeperUI(PersistenceAdapter(store), "easy")
    assert second.game.phase == BoardPhase.ACTIVE
    assert second.game.revealed_count == first.game.revealed_count


def test_reset_key_clears_save(store, ui):
    ui.game.reveal(0, 0)
    ui.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_r, mod=0, unicode="r"))
    assert ui.game.phase == BoardPhase.EMPTY
    assert storage_key("easy") not in store


def test_level_key_switches_board(ui):
    ui.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_3, mod=0, unicode="3"))
    assert ui.game.level == "hard"
    assert (ui.game.board.rows, ui.game.board.cols) == (16, 30)


def test_parse_args_defaults():
    args = parse_args([])
    assert args.level == "easy"
    assert args.seed is None
    assert not args.no_save


def test_parse_args_options():
    args = parse_args(["--level", "medium", "--seed", "7", "--no-save"])
    assert (args.level, args.seed, args.no_save) == ("medium", 7, True)


def test_footer_shows_rules_and_key_help(corner_game):
    rules, hint = footer_lines(corner_game.snapshot())
    assert rules == RULES_TEXT
    assert "safe squares" in rules
    assert hint == KEY_HELP


def test_footer_after_game_over(corner_game):
    corner_game.reveal(0, 0)
    rules, hint = footer_lines(corner_game.snapshot(), "You Lost!")
    assert rules == RULES_TEXT
    assert hint == "Press R to restart"


def test_footer_shows_last_message_while_playing(corner_game):
    assert footer_lines(corner_game.snapshot(), "Revealed 1 cells")[1] == "Revealed 1 cells"
