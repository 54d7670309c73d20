"""
BoardManager.py
Description: Manages the grid for Minesweeper. Owns the Cell class representing each
position and the BoardManager class that lays mines, counts neighbors and flood-fills.
Inputs: Board dimensions, mine count, random source
Outputs: None
External Sources Used: None
"""

import logging
import random
from typing import Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

BOMB = -1


class Cell:
    """Represents a single cell on the Minesweeper board."""

    __slots__ = ("row", "col", "is_bomb", "is_revealed", "is_flagged", "neighboring_mines")

    def __init__(self, row: int, col: int) -> None:
        """Initialize an unrevealed, unflagged, mine-free cell at (row, col)."""
        self.row = row
        self.col = col
        self.is_bomb: bool = False
        self.is_revealed: bool = False
        self.is_flagged: bool = False
        self.neighboring_mines: int = 0

    def __repr__(self) -> str:
        return (
            f"Cell({self.row}, {self.col}, bomb={self.is_bomb}, revealed={self.is_revealed}, "
            f"flagged={self.is_flagged}, mines={self.neighboring_mines})"
        )


class BoardManager:
    """Manages the Minesweeper board."""

    def __init__(self, rows: int, cols: int) -> None:
        """Create an empty rows x cols board with no mines."""
        if rows <= 0 or cols <= 0:
            raise ValueError(f"Board dimensions must be positive, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols
        self.grid: List[List[Cell]] = [[Cell(r, c) for c in range(cols)] for r in range(rows)]

    def in_bounds(self, r: int, c: int) -> bool:
        """Check if (r, c) is within board."""
        return 0 <= r < self.rows and 0 <= c < self.cols

    def neighbors(self, r: int, c: int) -> List[Tuple[int, int]]:
        """Return a list of in-bounds neighbor coordinates around (r, c)."""
        result: List[Tuple[int, int]] = []
        for nr in range(r - 1, r + 2):
            for nc in range(c - 1, c + 2):
                if (nr, nc) == (r, c):
                    continue
                if self.in_bounds(nr, nc):
                    result.append((nr, nc))
        return result

    def cell(self, r: int, c: int) -> Cell:
        """Get cell at (r, c)."""
        return self.grid[r][c]

    def cells(self) -> Iterator[Cell]:
        """Iterate over every cell in row-major order."""
        for row in self.grid:
            yield from row

    def bomb_count(self) -> int:
        return sum(1 for cell in self.cells() if cell.is_bomb)

    def revealed_safe_count(self) -> int:
        return sum(1 for cell in self.cells() if cell.is_revealed and not cell.is_bomb)

    def flagged_count(self) -> int:
        return sum(1 for cell in self.cells() if cell.is_flagged)

    def place_mines(
        self,
        mine_count: int,
        exclude: Optional[Tuple[int, int]] = None,
        rng: Optional[random.Random] = None,
    ) -> List[Tuple[int, int]]:
        """Place mines at unique random locations; guarantee (exclude) safe if provided.

        Sampling without replacement from the candidate list keeps placement
        uniform and bounded by the size of the grid.
        """
        if self.bomb_count():
            raise RuntimeError("Mines have already been placed on this board")

        coords: List[Tuple[int, int]] = []
        for r in range(self.rows):
            for c in range(self.cols):
                if exclude is None or (r, c) != exclude:
                    coords.append((r, c))

        if not 0 <= mine_count < self.rows * self.cols or mine_count > len(coords):
            raise ValueError(f"Cannot place {mine_count} mines on a {self.rows}x{self.cols} board")

        chosen = (rng or random).sample(coords, k=mine_count)
        for rr, cc in chosen:
            self.grid[rr][cc].is_bomb = True
        logger.debug("Placed %d mines excluding %s", mine_count, exclude)
        return chosen

    def compute_adjacency(self) -> None:
        """Count bomb neighbors for every safe cell; bombs get the BOMB sentinel."""
        for cell in self.cells():
            if cell.is_bomb:
                cell.neighboring_mines = BOMB
                continue
            cell.neighboring_mines = sum(
                1 for nr, nc in self.neighbors(cell.row, cell.col) if self.grid[nr][nc].is_bomb
            )

    def flood_reveal(self, r: int, c: int) -> int:
        """Reveal (r, c) and spread through connected zero cells.

        Numbered cells are revealed but stop the spread. Flagged, revealed and
        bomb cells are left alone. Returns the number of newly revealed cells.
        """
        revealed = 0
        stack = [(r, c)]
        while stack:
            cr, cc = stack.pop()
            cell = self.grid[cr][cc]
            # is_revealed doubles as the visited marker
            if cell.is_revealed or cell.is_flagged or cell.is_bomb:
                continue
            cell.is_revealed = True
            revealed += 1

            if cell.neighboring_mines == 0:
                for nr, nc in self.neighbors(cr, cc):
                    ncell = self.grid[nr][nc]
                    if not ncell.is_revealed and not ncell.is_flagged and not ncell.is_bomb:
                        stack.append((nr, nc))
        return revealed

    def reveal_all_bombs(self) -> int:
        """Uncover every bomb on the board. Returns how many were newly shown."""
        shown = 0
        for cell in self.cells():
            if cell.is_bomb and not cell.is_revealed:
                cell.is_revealed = True
                shown += 1
        return shown
