"""
Module: GameLogic
Description: Handles base game functionality and management of state: lazy mine placement,
reveals, flags, win/loss detection and change notifications for one play session.
Inputs: Difficulty, optional random source
Outputs: RevealResult, TerminalStatus, BoardSnapshot
External Sources: None
"""

import enum
import logging
import random
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from BoardManager import BoardManager
from Settings import Difficulty

logger = logging.getLogger(__name__)


class BoardPhase(enum.Enum):
    EMPTY = 0
    ACTIVE = 1
    WON = 2
    LOST = 3


class GameStatus(enum.Enum):
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


@dataclass(frozen=True)
class RevealResult:
    changed: bool
    hit_bomb: bool = False
    won: bool = False
    revealed: int = 0


@dataclass(frozen=True)
class TerminalStatus:
    game_over: bool
    status: GameStatus


@dataclass(frozen=True)
class CellView:
    """What the player is allowed to see of one cell."""

    revealed: bool
    flagged: bool
    bomb: Optional[bool] = None
    adjacent: Optional[int] = None


@dataclass(frozen=True)
class BoardSnapshot:
    level: str
    rows: int
    cols: int
    cells: Tuple[Tuple[CellView, ...], ...]
    mines_remaining: int
    game_over: bool
    status: GameStatus


Listener = Callable[["GameLogic"], None]


class GameLogic:
    def __init__(self, difficulty: Difficulty, rng: Optional[random.Random] = None) -> None:
        self.difficulty = difficulty
        self.rng = rng or random.Random()
        self._listeners: List[Listener] = []
        self._new_board()

    @classmethod
    def from_board(
        cls, difficulty: Difficulty, board: BoardManager, rng: Optional[random.Random] = None
    ) -> "GameLogic":
        """Rebuild a session around an existing grid, deriving counters and phase from it."""
        if (board.rows, board.cols) != (difficulty.rows, difficulty.cols):
            raise ValueError(
                f"Board is {board.rows}x{board.cols}, expected {difficulty.rows}x{difficulty.cols}"
            )
        game = cls(difficulty, rng)
        game.board = board
        game.revealed_count = board.revealed_safe_count()
        game.flag_count = board.flagged_count()
        game.hit_bomb = any(cell.is_bomb and cell.is_revealed for cell in board.cells())
        game.won_game = not game.hit_bomb and game.revealed_count == difficulty.safe_cells

        if game.hit_bomb:
            game.phase = BoardPhase.LOST
        elif game.won_game:
            game.phase = BoardPhase.WON
        elif board.bomb_count():
            game.phase = BoardPhase.ACTIVE
        else:
            game.phase = BoardPhase.EMPTY
        return game

    def _new_board(self) -> None:
        self.board = BoardManager(self.difficulty.rows, self.difficulty.cols)
        self.phase = BoardPhase.EMPTY
        self.revealed_count = 0
        self.flag_count = 0
        self.hit_bomb = False
        self.won_game = False

    @property
    def level(self) -> str:
        return self.difficulty.name

    @property
    def mines_remaining(self) -> int:
        """Mines minus flags; goes negative when over-flagged."""
        return self.difficulty.mines - self.flag_count

    @property
    def is_terminal(self) -> bool:
        return self.phase in (BoardPhase.WON, BoardPhase.LOST)

    # Change notifications
    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("State listener %r failed", listener)

    def reset(self) -> None:
        """Throw the board away and start again in the EMPTY phase."""
        self._new_board()
        logger.info("New %s game (%dx%d, %d mines)", self.level, self.difficulty.rows,
                    self.difficulty.cols, self.difficulty.mines)
        self._notify()

    def _activate(self, row: int, col: int) -> None:
        """First accepted reveal: lay mines around the clicked cell."""
        self.board.place_mines(self.difficulty.mines, exclude=(row, col), rng=self.rng)
        self.board.compute_adjacency()
        self.phase = BoardPhase.ACTIVE

    def reveal(self, row: int, col: int) -> RevealResult:
        """Reveal a selected cell.

        Returns:
            RevealResult: changed is False for no-op clicks (off-board, already
                revealed, flagged, or after the game ended).
        """
        if not self.board.in_bounds(row, col):
            logger.debug("Ignoring reveal outside the board at (%d, %d)", row, col)
            return RevealResult(changed=False)
        if self.is_terminal:
            return RevealResult(changed=False)

        cell = self.board.cell(row, col)
        if cell.is_revealed or cell.is_flagged:
            return RevealResult(changed=False)

        if self.phase == BoardPhase.EMPTY:
            self._activate(row, col)

        if cell.is_bomb:
            cell.is_revealed = True
            self.board.reveal_all_bombs()
            self.hit_bomb = True
            self.phase = BoardPhase.LOST
            logger.info("Hit a bomb at (%d, %d)", row, col)
            self._notify()
            return RevealResult(changed=True, hit_bomb=True)

        revealed = self.board.flood_reveal(row, col)
        self.revealed_count += revealed
        logger.debug("Revealed %d cells from (%d, %d)", revealed, row, col)

        # Win check: all non-mine cells revealed
        if self.revealed_count == self.difficulty.safe_cells:
            self.won_game = True
            self.phase = BoardPhase.WON
            logger.info("Board cleared")

        self._notify()
        return RevealResult(changed=True, won=self.won_game, revealed=revealed)

    def toggle_flag(self, row: int, col: int) -> bool:
        """Toggle flagged state. Returns True if the flag changed."""
        if not self.board.in_bounds(row, col):
            logger.debug("Ignoring flag outside the board at (%d, %d)", row, col)
            return False
        if self.is_terminal:
            return False

        cell = self.board.cell(row, col)
        if cell.is_revealed:
            return False

        cell.is_flagged = not cell.is_flagged
        self.flag_count += 1 if cell.is_flagged else -1
        logger.debug("Flag at (%d, %d) is now %s", row, col, cell.is_flagged)
        self._notify()
        return True

    def evaluate_terminal(self) -> TerminalStatus:
        if self.phase == BoardPhase.LOST:
            return TerminalStatus(game_over=True, status=GameStatus.LOST)
        if self.phase == BoardPhase.WON:
            return TerminalStatus(game_over=True, status=GameStatus.WON)
        return TerminalStatus(game_over=False, status=GameStatus.PLAYING)

    def snapshot(self) -> BoardSnapshot:
        """Read-only view of the board for rendering."""
        rows = []
        for grid_row in self.board.grid:
            views = []
            for cell in grid_row:
                if cell.is_revealed:
                    views.append(CellView(
                        revealed=True,
                        flagged=cell.is_flagged,
                        bomb=cell.is_bomb,
                        adjacent=None if cell.is_bomb else cell.neighboring_mines,
                    ))
                else:
                    views.append(CellView(revealed=False, flagged=cell.is_flagged))
            rows.append(tuple(views))

        terminal = self.evaluate_terminal()
        return BoardSnapshot(
            level=self.level,
            rows=self.board.rows,
            cols=self.board.cols,
            cells=tuple(rows),
            mines_remaining=self.mines_remaining,
            game_over=terminal.game_over,
            status=terminal.status,
        )
