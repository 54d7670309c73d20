"""
Module: Persistence
Description: Saves and restores one board per difficulty level in a string-keyed store.
Failed writes are logged and ignored; corrupt or mismatched saves are discarded so the
player simply gets a fresh board.
Inputs: GameLogic session, difficulty level
Outputs: Restored GameLogic session or None
External Sources: None
"""

import json
import logging
import os
import random
from collections.abc import MutableMapping
from typing import Any, Dict, Iterator, Optional

from BoardManager import BoardManager
from GameLogic import GameLogic
from Settings import Difficulty, get_difficulty, storage_key

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


class MemoryStore(dict):
    """In-process store, handy for tests and for running without a save file."""


class JsonFileStore(MutableMapping):
    """String-keyed store kept as a single JSON object on disk."""

    def __init__(self, path: str) -> None:
        self.path = path
        self._data: Dict[str, str] = self._read()

    def _read(self) -> Dict[str, str]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError, RecursionError) as exc:
            logger.warning("Could not read save file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Save file %s does not hold an object, ignoring it", self.path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self) -> None:
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, self.path)

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: str) -> None:
        self._data[key] = value
        self._write()

    def __delitem__(self, key: str) -> None:
        del self._data[key]
        self._write()

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)


class CorruptStateError(ValueError):
    """Raised while decoding a saved board that cannot be trusted."""


def encode_game(game: GameLogic) -> str:
    board = game.board
    return json.dumps({
        "version": FORMAT_VERSION,
        "rows": board.rows,
        "cols": board.cols,
        "grid": [
            [
                {
                    "row": cell.row,
                    "col": cell.col,
                    "isBomb": cell.is_bomb,
                    "isRevealed": cell.is_revealed,
                    "isFlagged": cell.is_flagged,
                    "neighboringMines": cell.neighboring_mines,
                }
                for cell in grid_row
            ]
            for grid_row in board.grid
        ],
        "revealedCount": game.revealed_count,
        "flagCount": game.flag_count,
        "hitBomb": game.hit_bomb,
        "wonGame": game.won_game,
    })


def _flag(raw: Dict[str, Any], name: str) -> bool:
    value = raw.get(name, False)
    if not isinstance(value, bool):
        raise CorruptStateError(f"{name} must be a boolean, got {value!r}")
    return value


def decode_board(blob: str) -> BoardManager:
    """Rebuild a board from its saved form. Counts are recomputed, not trusted."""
    try:
        data = json.loads(blob)
    except (TypeError, ValueError, RecursionError) as exc:
        raise CorruptStateError(f"Not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise CorruptStateError("Saved state is not an object")

    grid = data.get("grid")
    if not isinstance(grid, list) or not grid or not all(isinstance(r, list) and r for r in grid):
        raise CorruptStateError("Saved state has no grid")
    rows, cols = len(grid), len(grid[0])
    if any(len(r) != cols for r in grid):
        raise CorruptStateError("Saved grid is not rectangular")

    board = BoardManager(rows, cols)
    for r, grid_row in enumerate(grid):
        for c, raw in enumerate(grid_row):
            if not isinstance(raw, dict):
                raise CorruptStateError(f"Cell ({r}, {c}) is not an object")
            cell = board.cell(r, c)
            cell.is_bomb = _flag(raw, "isBomb")
            cell.is_revealed = _flag(raw, "isRevealed")
            cell.is_flagged = _flag(raw, "isFlagged")
    board.compute_adjacency()
    return board


class PersistenceAdapter:
    """Best-effort storage of the current board for each difficulty."""

    def __init__(self, store: MutableMapping) -> None:
        self.store = store

    def save(self, level: str, game: GameLogic) -> None:
        key = storage_key(level)
        try:
            self.store[key] = encode_game(game)
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("Could not save %s game: %s", level, exc)

    def clear(self, level: str) -> None:
        key = storage_key(level)
        try:
            if key in self.store:
                del self.store[key]
        except (OSError, KeyError) as exc:
            logger.warning("Could not clear %s save: %s", level, exc)

    def _discard(self, level: str, reason: str) -> None:
        logger.warning("Discarding saved %s game: %s", level, reason)
        self.clear(level)

    def load(
        self,
        level: str,
        rows: int,
        cols: int,
        mines: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> Optional[GameLogic]:
        """Restore the saved board for a level, or None when there is nothing usable."""
        key = storage_key(level)
        blob = self.store.get(key)
        if blob is None:
            return None

        try:
            board = decode_board(blob)
        except CorruptStateError as exc:
            self._discard(level, str(exc))
            return None

        if (board.rows, board.cols) != (rows, cols):
            self._discard(level, f"grid is {board.rows}x{board.cols}, expected {rows}x{cols}")
            return None

        bombs = board.bomb_count()
        if bombs == 0 and board.revealed_safe_count() == 0:
            self._discard(level, "nothing has been played yet")
            return None

        if mines is None:
            mines = get_difficulty(level).mines
        if bombs != mines:
            self._discard(level, f"holds {bombs} mines, expected {mines}")
            return None

        difficulty = Difficulty(level, rows, cols, mines)
        game = GameLogic.from_board(difficulty, board, rng)
        logger.info("Restored %s game (%d cells revealed, %d flags)", level,
                    game.revealed_count, game.flag_count)
        return game

    def attach(self, level: str, game: GameLogic) -> None:
        """Persist the session after every change it makes."""
        game.subscribe(lambda changed: self.save(level, changed))
