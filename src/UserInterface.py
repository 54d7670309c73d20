"""
Module: UserInterface
Description: Render the board, mine counter and game status, send user input to the input
handler and keep the saved board for each difficulty up to date.
Inputs: BoardSnapshot, pygame events
Outputs: Engine calls through InputHandler
External Sources: None
"""

import argparse
import logging
import random
import sys
from typing import Dict, List, Optional, Tuple

import pygame

from GameLogic import BoardSnapshot, CellView, GameLogic, GameStatus
from InputHandler import InputHandler, Intent
from Persistence import JsonFileStore, MemoryStore, PersistenceAdapter
from Settings import DEFAULT_LEVEL, DIFFICULTIES, default_save_file, get_difficulty

logger = logging.getLogger(__name__)

# Layout
CELL_SIZE = 30
CELL_GAP = 1
BOARD_MARGIN = 20
HEADER_HEIGHT = 120
FOOTER_HEIGHT = 60
MIN_WIDTH = 460

# Colors
BLACK = (0, 0, 0)
RED = (200, 50, 50)
BLUE = (50, 50, 200)
GREEN = (50, 200, 50)
UNREVEALED = (189, 189, 189)
REVEALED = (229, 231, 235)
BOMB_BG = (254, 202, 202)
BACKGROUND = (248, 250, 252)

NUMBER_COLORS: Dict[int, Tuple[int, int, int]] = {
    1: (0, 0, 255),
    2: (0, 128, 0),
    3: (255, 0, 0),
    4: (128, 0, 128),
    5: (128, 0, 0),
    6: (0, 128, 128),
    7: (0, 0, 0),
    8: (128, 128, 128),
}

FLAG_GLYPH = "F"
BOMB_GLYPH = "*"

KEY_HELP = "Keys: 1/E easy, 2/M medium, 3/H hard, R reset"
RULES_TEXT = "Use logic to find all safe squares without hitting any bombs!"


def cell_glyph(view: CellView) -> str:
    """Text drawn on a cell."""
    if view.flagged:
        return FLAG_GLYPH
    if not view.revealed:
        return ""
    if view.bomb:
        return BOMB_GLYPH
    if view.adjacent:
        return str(view.adjacent)
    return ""


def cell_colors(view: CellView) -> Tuple[Tuple[int, int, int], Tuple[int, int, int]]:
    """(background, foreground) for a cell."""
    if not view.revealed:
        return UNREVEALED, RED if view.flagged else BLACK
    if view.bomb:
        return BOMB_BG, BLACK
    return REVEALED, NUMBER_COLORS.get(view.adjacent or 0, BLACK)


def status_text(snapshot: BoardSnapshot) -> str:
    if not snapshot.game_over:
        return ""
    return "Game over! " + ("You Lost!" if snapshot.status == GameStatus.LOST else "You Won!")


def footer_lines(snapshot: BoardSnapshot, message: str = "") -> Tuple[str, str]:
    """Rules line and hint line shown under the board."""
    hint = "Press R to restart" if snapshot.game_over else (message or KEY_HELP)
    return RULES_TEXT, hint


def window_size(rows: int, cols: int) -> Tuple[int, int]:
    width = max(MIN_WIDTH, 2 * BOARD_MARGIN + cols * (CELL_SIZE + CELL_GAP))
    height = HEADER_HEIGHT + rows * (CELL_SIZE + CELL_GAP) + FOOTER_HEIGHT
    return width, height


def board_origin(rows: int, cols: int) -> Tuple[int, int]:
    width, _ = window_size(rows, cols)
    left = (width - cols * (CELL_SIZE + CELL_GAP)) // 2
    return left, HEADER_HEIGHT


def coords_to_index(coords: Tuple[int, int], rows: int, cols: int) -> Optional[Tuple[int, int]]:
    """Convert pixel coordinates to board indices - returns (row, col) or None."""
    left, top = board_origin(rows, cols)
    x_click, y_click = coords
    if x_click < left or y_click < top:
        return None
    col = int((x_click - left) // (CELL_SIZE + CELL_GAP))
    row = int((y_click - top) // (CELL_SIZE + CELL_GAP))
    if 0 <= row < rows and 0 <= col < cols:
        return row, col
    return None


class MinesweeperUI:
    """pygame front end for one window; owns the current session."""

    def __init__(self, persistence: PersistenceAdapter, level: str = DEFAULT_LEVEL,
                 rng: Optional[random.Random] = None) -> None:
        self.persistence = persistence
        self.rng = rng
        self.input_handler = InputHandler()
        self.screen: Optional[pygame.Surface] = None
        self.message = ""
        self.game = self.start_level(level)

    def start_level(self, level: str) -> GameLogic:
        """Restore the saved board for a level or start a fresh one."""
        difficulty = get_difficulty(level)
        game = self.persistence.load(difficulty.name, difficulty.rows, difficulty.cols,
                                     difficulty.mines, rng=self.rng)
        if game is None:
            game = GameLogic(difficulty, rng=self.rng)
            logger.info("Started a new %s game", difficulty.name)
        self.persistence.attach(difficulty.name, game)
        self.game = game
        self.message = ""
        self.input_handler.cancel_press()
        if self.screen is not None:
            self._resize()
        return game

    def reset(self) -> None:
        self.game.reset()
        self.persistence.clear(self.game.level)
        self.message = ""

    def _resize(self) -> None:
        self.screen = pygame.display.set_mode(window_size(self.game.board.rows, self.game.board.cols))

    def _finger_to_cell(self, event) -> Optional[Tuple[int, int]]:
        width, height = self.screen.get_size()
        return coords_to_index((int(event.x * width), int(event.y * height)),
                               self.game.board.rows, self.game.board.cols)

    def handle_event(self, event) -> None:
        if event.type == pygame.KEYDOWN:
            response = self.input_handler.handle_keyboard_input(self.game, event)
            if response.intent == Intent.Reset:
                self.reset()
            elif response.intent == Intent.ChangeLevel and response.level != self.game.level:
                self.start_level(response.level)
            return

        rows, cols = self.game.board.rows, self.game.board.cols
        if event.type in (pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP):
            cell = coords_to_index(event.pos, rows, cols)
        elif event.type in (pygame.FINGERDOWN, pygame.FINGERUP):
            cell = self._finger_to_cell(event)
        else:
            return

        response = self.input_handler.handle_pointer(
            self.game, event, cell, pygame.time.get_ticks(), pygame.key.get_mods()
        )
        if response.intent is not None:
            self.message = response.message

    # Rendering
    def render(self) -> None:
        snapshot = self.game.snapshot()
        self.screen.fill(BACKGROUND)
        self._render_header(snapshot)
        self._render_board(snapshot)
        self._render_footer(snapshot)

    def _render_header(self, snapshot: BoardSnapshot) -> None:
        width = self.screen.get_width()
        x = BOARD_MARGIN
        for name in DIFFICULTIES:
            color = RED if name == snapshot.level else BLACK
            label = self.label_font.render(name.capitalize(), True, color)
            self.screen.blit(label, (x, 15))
            x += label.get_width() + 20

        counter = self.hud_font.render(f"Mines Remaining: {snapshot.mines_remaining}", True, BLACK)
        self.screen.blit(counter, counter.get_rect(center=(width // 2, 55)))

        banner = status_text(snapshot)
        if banner:
            color = RED if snapshot.status == GameStatus.LOST else GREEN
            result = self.hud_font.render(banner, True, color)
            self.screen.blit(result, result.get_rect(center=(width // 2, 90)))

    def _render_board(self, snapshot: BoardSnapshot) -> None:
        left, top = board_origin(snapshot.rows, snapshot.cols)
        y = top
        for row in snapshot.cells:
            x = left
            for view in row:
                background, foreground = cell_colors(view)
                rect = pygame.Rect(x, y, CELL_SIZE, CELL_SIZE)
                pygame.draw.rect(self.screen, background, rect)
                glyph = cell_glyph(view)
                if glyph:
                    text = self.cell_font.render(glyph, True, foreground)
                    self.screen.blit(text, text.get_rect(center=rect.center))
                x += CELL_SIZE + CELL_GAP
            y += CELL_SIZE + CELL_GAP

    def _render_footer(self, snapshot: BoardSnapshot) -> None:
        width, height = self.screen.get_size()
        rules, hint = footer_lines(snapshot, self.message)
        y = height - FOOTER_HEIGHT + 15
        for line, color in ((rules, BLACK), (hint, BLUE)):
            text = self.label_font.render(line, True, color)
            self.screen.blit(text, text.get_rect(center=(width // 2, y)))
            y += 25

    def run(self) -> None:
        pygame.init()
        pygame.display.set_caption("Minesweeper")
        self.cell_font = pygame.font.SysFont("arialblack", 16)
        self.hud_font = pygame.font.SysFont("arialblack", 20)
        self.label_font = pygame.font.SysFont("arial", 14)
        self._resize()
        clock = pygame.time.Clock()

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                else:
                    self.handle_event(event)
            self.render()
            pygame.display.flip()
            clock.tick(60)

        pygame.quit()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Minesweeper")
    parser.add_argument("--level", choices=sorted(DIFFICULTIES), default=DEFAULT_LEVEL)
    parser.add_argument("--save-file", default=default_save_file(),
                        help="JSON file holding one saved board per difficulty")
    parser.add_argument("--no-save", action="store_true", help="keep saved boards in memory only")
    parser.add_argument("--seed", type=int, default=None, help="seed for mine placement")
    parser.add_argument("--log-level", default="WARNING")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    store = MemoryStore() if args.no_save else JsonFileStore(args.save_file)
    rng = random.Random(args.seed) if args.seed is not None else None
    MinesweeperUI(PersistenceAdapter(store), args.level, rng).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
