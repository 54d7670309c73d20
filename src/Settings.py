"""
Module: Settings
Description: Difficulty presets and runtime configuration shared by the engine, persistence
and user interface.
Inputs: Difficulty level name
Outputs: Difficulty (rows, cols, mines)
External Sources: None
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Difficulty:
    name: str
    rows: int
    cols: int
    mines: int

    def __post_init__(self) -> None:
        if self.rows <= 0 or self.cols <= 0:
            raise ValueError(f"Board dimensions must be positive, got {self.rows}x{self.cols}")
        if not 0 <= self.mines < self.rows * self.cols:
            raise ValueError(f"Mine count {self.mines} does not fit a {self.rows}x{self.cols} board")

    @property
    def safe_cells(self) -> int:
        """Number of cells that have to be revealed to win."""
        return self.rows * self.cols - self.mines


EASY = Difficulty("easy", 8, 8, 10)
MEDIUM = Difficulty("medium", 16, 16, 40)
HARD = Difficulty("hard", 16, 30, 99)

DIFFICULTIES: Dict[str, Difficulty] = {d.name: d for d in (EASY, MEDIUM, HARD)}
DEFAULT_LEVEL = EASY.name

STORAGE_KEY_PREFIX = "minesweeper_"
SAVE_FILE_ENV = "MINESWEEPER_SAVE_FILE"
DEFAULT_SAVE_FILE = os.path.join(os.path.expanduser("~"), ".minesweeper_saves.json")


def get_difficulty(level: str) -> Difficulty:
    """Look up a preset by name, falling back to easy for unknown levels."""
    difficulty = DIFFICULTIES.get(level)
    if difficulty is None:
        logger.warning("Unknown difficulty %r, using %s", level, DEFAULT_LEVEL)
        difficulty = DIFFICULTIES[DEFAULT_LEVEL]
    return difficulty


def storage_key(level: str) -> str:
    """One saved board per difficulty."""
    return f"{STORAGE_KEY_PREFIX}{level}"


def default_save_file() -> str:
    return os.environ.get(SAVE_FILE_ENV, DEFAULT_SAVE_FILE)
