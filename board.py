from __future__ import annotations

import logging
import random
import uuid
from collections import deque
from enum import Enum, auto
from typing import Deque, Iterable, List, Optional, Set

logger = logging.getLogger(__name__)


class MinesweeperError(RuntimeError):
    """Base class for caller-contract violations on the board."""


class BombStatusSealedError(MinesweeperError):
    """Raised when a cell's bomb status is sealed a second time."""


class BombsAlreadyPlacedError(MinesweeperError):
    """Raised when bombs are placed twice in the same game."""


class CellState(Enum):
    """Possible visible states of a cell."""
    UNTOUCHED = auto()
    FLAGGED = auto()
    OPEN = auto()


class SafeZone(Enum):
    """
    Which cells around the first click are kept free of bombs.

    ROW_AND_COLUMN drops the whole row and column through the clicked cell
    as well as its neighbours. NEIGHBORHOOD drops only the 3x3 block.
    """
    ROW_AND_COLUMN = auto()
    NEIGHBORHOOD = auto()


class Cell:
    """A single square on the Minesweeper board."""

    def __init__(self, row: int, column: int, id: str) -> None:
        self.row = row
        self.column = column
        self.id = id
        self.state = CellState.UNTOUCHED
        # None until sealed, then permanently True/False
        self._is_bomb: Optional[bool] = None

    def __repr__(self) -> str:
        return f"Cell(row={self.row}, column={self.column}, state={self.state.name})"

    @property
    def is_bomb(self) -> bool:
        return bool(self._is_bomb)

    @property
    def bomb_status_sealed(self) -> bool:
        return self._is_bomb is not None

    def seal_bomb_status(self, is_bomb: bool) -> None:
        if self._is_bomb is not None:
            raise BombStatusSealedError(
                f"Bomb status of ({self.row}, {self.column}) is already sealed."
            )
        self._is_bomb = is_bomb

    @property
    def is_open(self) -> bool:
        return self.state == CellState.OPEN

    @property
    def is_flagged(self) -> bool:
        return self.state == CellState.FLAGGED

    @property
    def is_untouched(self) -> bool:
        return self.state == CellState.UNTOUCHED

    def toggle_flagged(self) -> None:
        """Flip untouched <-> flagged. Open cells stay open."""
        if self.state == CellState.FLAGGED:
            self.state = CellState.UNTOUCHED
        elif self.state == CellState.UNTOUCHED:
            self.state = CellState.FLAGGED

    def change_flagged_state(self, flagged: bool) -> None:
        if self.is_open:
            return
        self.state = CellState.FLAGGED if flagged else CellState.UNTOUCHED

    def mark_as_open(self) -> None:
        self.state = CellState.OPEN

    def display_char(self, reveal_bombs: bool = False, surrounding_bombs: int = 0) -> str:
        """
        Character for this cell.

        - 'U' : untouched
        - 'F' : flagged
        - 'O' : open, 0 adjacent bombs
        - '1'..'8' : open, that many adjacent bombs
        - 'B' : bomb (when open or reveal_bombs=True)
        """
        if reveal_bombs and self.is_bomb:
            return "B"
        if self.state == CellState.FLAGGED:
            return "F"
        if self.state == CellState.UNTOUCHED:
            return "U"
        if self.is_bomb:
            return "B"
        return "O" if surrounding_bombs == 0 else str(surrounding_bombs)


class Board:
    """
    Rules engine for a Minesweeper grid.

    Design:
    - Cells are allocated by reset(), not by the constructor.
    - Bombs are placed once, on the first reveal, away from the clicked cell.
    - The grid is a flat row-major list; neighbours are computed from
      coordinates on demand, cells hold no references to each other.
    - Coordinates are 0-indexed: row in [0, height-1], column in [0, width-1].
    """

    def __init__(
        self,
        width: int,
        height: int,
        rng: Optional[random.Random] = None,
        safe_zone: SafeZone = SafeZone.ROW_AND_COLUMN,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("Board dimensions must be positive.")

        self.width = width
        self.height = height
        self.rng = rng or random.Random()
        self.safe_zone = safe_zone

        self.bombs_placed: bool = False
        self.cells: List[Cell] = []

    # ------------------------------------------------------------------
    # Grid helpers
    # ------------------------------------------------------------------
    def reset(self) -> None:
        """Allocate a fresh grid of untouched, unsealed cells."""
        self.bombs_placed = False
        self.cells = [
            Cell(row, column, uuid.uuid4().hex)
            for row in range(self.height)
            for column in range(self.width)
        ]
        logger.debug("Board reset to %dx%d", self.width, self.height)

    def in_bounds(self, row: int, column: int) -> bool:
        return 0 <= row < self.height and 0 <= column < self.width

    def index_of(self, row: int, column: int) -> int:
        return row * self.width + column

    def get_cell(self, row: int, column: int) -> Cell:
        if not self.in_bounds(row, column):
            raise IndexError(f"Cell ({row}, {column}) is out of bounds.")
        return self.cells[self.index_of(row, column)]

    def get_cell_by_id(self, id: str) -> Optional[Cell]:
        for cell in self.cells:
            if cell.id == id:
                return cell
        return None

    def iter_cells(self) -> Iterable[Cell]:
        """Iterate over all cells in row-major order."""
        return iter(self.cells)

    @property
    def all_open_cells(self) -> List[Cell]:
        return [cell for cell in self.cells if cell.is_open]

    def get_surrounding_cells(self, row: int, column: int) -> List[Cell]:
        """Up to 8 neighbours of (row, column), clipped to the board."""
        cells: List[Cell] = []
        for row_offset in (-1, 0, 1):
            for column_offset in (-1, 0, 1):
                if row_offset == 0 and column_offset == 0:
                    continue
                new_row, new_column = row + row_offset, column + column_offset
                if self.in_bounds(new_row, new_column):
                    cells.append(self.cells[self.index_of(new_row, new_column)])
        return cells

    def get_surrounding_cells_from_cell(self, cell: Cell) -> List[Cell]:
        return self.get_surrounding_cells(cell.row, cell.column)

    def get_surrounding_non_bomb_cells(self, cell: Cell) -> List[Cell]:
        return [x for x in self.get_surrounding_cells_from_cell(cell) if not x.is_bomb]

    def count_surrounding_bombs(self, row: int, column: int) -> int:
        return sum(1 for x in self.get_surrounding_cells(row, column) if x.is_bomb)

    def count_surrounding_bombs_from_cell(self, cell: Cell) -> int:
        return self.count_surrounding_bombs(cell.row, cell.column)

    # ------------------------------------------------------------------
    # Bomb placement
    # ------------------------------------------------------------------
    def _is_bomb_candidate(self, cell: Cell, focus_cell: Cell, excluded: Set[str]) -> bool:
        if cell.id in excluded:
            return False
        if self.safe_zone == SafeZone.ROW_AND_COLUMN:
            return cell.row != focus_cell.row and cell.column != focus_cell.column
        return True

    def place_bombs(self, focus_cell: Cell, number_of_bombs: int) -> None:
        """
        Seal every cell's bomb status, putting `number_of_bombs` bombs
        outside the safe zone around `focus_cell`.

        If there are fewer candidate cells than requested bombs, every
        candidate becomes a bomb.
        """
        if self.bombs_placed:
            raise BombsAlreadyPlacedError("Bombs have already been placed.")
        if number_of_bombs < 0:
            raise ValueError("Number of bombs must not be negative.")

        self.bombs_placed = True
        excluded = {focus_cell.id}
        excluded.update(x.id for x in self.get_surrounding_cells_from_cell(focus_cell))
        candidates = [
            cell for cell in self.cells
            if self._is_bomb_candidate(cell, focus_cell, excluded)
        ]

        sample_size = min(number_of_bombs, len(candidates))
        bomb_ids = {cell.id for cell in self.rng.sample(candidates, sample_size)}
        for cell in self.cells:
            cell.seal_bomb_status(cell.id in bomb_ids)

        if sample_size < number_of_bombs:
            logger.warning(
                "Requested %d bombs but only %d candidate cells; placed %d",
                number_of_bombs, len(candidates), sample_size,
            )
        logger.debug(
            "Placed %d bombs around first click (%d, %d)",
            sample_size, focus_cell.row, focus_cell.column,
        )

    # ------------------------------------------------------------------
    # Reveal
    # ------------------------------------------------------------------
    def try_expand_surrounding_cells(
        self,
        focus_cell: Cell,
        restrict_to_zero_bomb_neighbors_only: bool,
    ) -> None:
        """
        Breadth-first reveal starting from the non-bomb neighbours of
        `focus_cell`.

        With `restrict_to_zero_bomb_neighbors_only` the starting frontier
        keeps only neighbours that touch no bombs. Every dequeued cell is
        opened; only those touching no bombs push their neighbours.
        The focus cell itself is left to the caller.
        """
        visited: Set[str] = {focus_cell.id}
        frontier = self.get_surrounding_non_bomb_cells(focus_cell)
        if restrict_to_zero_bomb_neighbors_only:
            frontier = [
                x for x in frontier if self.count_surrounding_bombs_from_cell(x) == 0
            ]
        visited.update(x.id for x in frontier)
        queue: Deque[Cell] = deque(frontier)

        opened = 0
        while queue:
            current = queue.popleft()
            if self.count_surrounding_bombs_from_cell(current) == 0:
                for neighbor in self.get_surrounding_non_bomb_cells(current):
                    if neighbor.id in visited:
                        continue
                    queue.append(neighbor)
                    visited.add(neighbor.id)
            current.mark_as_open()
            opened += 1

        logger.debug(
            "Expanded %d cells around (%d, %d)", opened, focus_cell.row, focus_cell.column
        )

    def unveil_all_bombs(self) -> None:
        for cell in self.cells:
            if cell.is_bomb:
                cell.mark_as_open()

    def open_all_non_bomb_cells(self) -> None:
        for cell in self.cells:
            if not cell.is_bomb:
                cell.mark_as_open()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def is_board_cleared(self) -> bool:
        """
        Every bomb is flagged and no non-bomb cell carries a flag.

        Safe cells may still be untouched; they are opened once the game is won.
        """
        return all(
            (cell.is_bomb and cell.is_flagged)
            or (not cell.is_bomb and (cell.is_open or cell.is_untouched))
            for cell in self.cells
        )

    def count_bombs(self) -> int:
        return sum(1 for cell in self.cells if cell.is_bomb)

    def count_flags(self) -> int:
        return sum(1 for cell in self.cells if cell.is_flagged)

    @property
    def number_of_bombs_minus_number_of_flags(self) -> int:
        """Remaining-mine counter. Goes negative when over-flagged."""
        return self.count_bombs() - self.count_flags()

    # ------------------------------------------------------------------
    # Rendering helpers
    # ------------------------------------------------------------------
    def to_display_grid(self, reveal_bombs: bool = False) -> List[List[str]]:
        return [
            [
                self.get_cell(row, column).display_char(
                    reveal_bombs=reveal_bombs,
                    surrounding_bombs=self.count_surrounding_bombs(row, column),
                )
                for column in range(self.width)
            ]
            for row in range(self.height)
        ]

    def __str__(self) -> str:
        return self.render()

    def render(self, reveal_bombs: bool = False) -> str:
        """
        Render the board as a multiline string, e.g.:

        ________________________________
        [U][U][2][U][O][U]
        [U][F][2][U][U][U]
        ________________________________
        """
        grid = self.to_display_grid(reveal_bombs=reveal_bombs)
        border = "_" * (self.width * 3 + 2)

        lines = [border]
        for row in grid:
            lines.append("".join(f"[{char}]" for char in row))
        lines.append(border)
        return "\n".join(lines)
