from __future__ import annotations

import dataclasses
import logging
import random
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional

from board import Board, Cell, SafeZone
from solver.deduction_solver import run_solver
from solver.utils import Move

logger = logging.getLogger(__name__)


class GamePhase(Enum):
    NOT_STARTED = auto()
    IN_PROGRESS = auto()
    DEAD = auto()
    WON = auto()


class Difficulty(Enum):
    """Preset board sizes as (width, height, bombs)."""
    EASY = (10, 10, 10)
    MEDIUM = (15, 15, 40)
    HARD = (25, 25, 150)
    IMPOSSIBLE = (100, 100, 5000)

    @property
    def width(self) -> int:
        return self.value[0]

    @property
    def height(self) -> int:
        return self.value[1]

    @property
    def bombs(self) -> int:
        return self.value[2]


@dataclass
class GameConfig:
    width: int
    height: int
    bombs: int
    seed: Optional[int] = None
    safe_zone: SafeZone = SafeZone.ROW_AND_COLUMN

    @classmethod
    def from_difficulty(cls, difficulty: Difficulty, seed: Optional[int] = None) -> GameConfig:
        return cls(difficulty.width, difficulty.height, difficulty.bombs, seed=seed)


class Game:
    """
    One game session on top of a Board.

    Player intents (reveal, toggle_flag, solve) are gated by the current
    phase; anything arriving after the game ended is ignored.
    """

    def __init__(self, config: GameConfig) -> None:
        self.config = dataclasses.replace(config)
        self.rng = random.Random(config.seed) if config.seed is not None else random.Random()
        self.phase = GamePhase.NOT_STARTED
        self.board = self._new_board()

    def _new_board(self) -> Board:
        board = Board(
            self.config.width,
            self.config.height,
            rng=self.rng,
            safe_zone=self.config.safe_zone,
        )
        board.reset()
        return board

    # ------------------------------------------------------------------
    # Session control
    # ------------------------------------------------------------------
    def new_game(
        self,
        width: Optional[int] = None,
        height: Optional[int] = None,
        bombs: Optional[int] = None,
    ) -> None:
        """Rebuild the board, optionally with new dimensions or bomb count."""
        overrides = {
            name: value
            for name, value in (("width", width), ("height", height), ("bombs", bombs))
            if value is not None
        }
        self.config = dataclasses.replace(self.config, **overrides)
        self.board = self._new_board()
        self.phase = GamePhase.NOT_STARTED
        logger.info(
            "New game %dx%d with %d bombs",
            self.config.width, self.config.height, self.config.bombs,
        )

    def new_game_from_difficulty(self, difficulty: Difficulty) -> None:
        self.new_game(difficulty.width, difficulty.height, difficulty.bombs)

    @property
    def is_over(self) -> bool:
        return self.phase in (GamePhase.DEAD, GamePhase.WON)

    @property
    def remaining_bombs(self) -> int:
        return self.board.number_of_bombs_minus_number_of_flags

    # ------------------------------------------------------------------
    # Player intents
    # ------------------------------------------------------------------
    def reveal(self, row: int, column: int) -> None:
        """
        Open the cell at (row, column).

        - The first reveal places the bombs and opens a wider safe region.
        - Revealing a flagged cell removes the flag instead.
        - Revealing an open cell does nothing.
        """
        if self.is_over:
            return
        cell = self.board.get_cell(row, column)

        first_reveal = self.phase == GamePhase.NOT_STARTED
        if first_reveal:
            self.board.place_bombs(cell, self.config.bombs)
            self.phase = GamePhase.IN_PROGRESS

        if cell.is_flagged:
            cell.toggle_flagged()
            return
        if cell.is_open:
            return
        if cell.is_bomb:
            self._lose(cell)
            return

        cell.mark_as_open()
        self.board.try_expand_surrounding_cells(
            cell, restrict_to_zero_bomb_neighbors_only=not first_reveal
        )
        self._check_win()

    def toggle_flag(self, row: int, column: int) -> None:
        if self.phase != GamePhase.IN_PROGRESS:
            return
        cell = self.board.get_cell(row, column)
        if cell.is_open:
            return
        cell.toggle_flagged()
        self._check_win()

    def solve(self) -> List[Move]:
        """Run the deduction solver to a fixed point and re-evaluate the phase."""
        if self.phase != GamePhase.IN_PROGRESS:
            return []

        moves = run_solver(self.board)
        # Only reachable when the player left a flag on a safe cell.
        opened_bomb = next(
            (cell for cell in self.board.iter_cells() if cell.is_bomb and cell.is_open),
            None,
        )
        if opened_bomb is not None:
            self._lose(opened_bomb)
        else:
            self._check_win()
        return moves

    # ------------------------------------------------------------------
    # Phase transitions
    # ------------------------------------------------------------------
    def _lose(self, cell: Cell) -> None:
        self.board.unveil_all_bombs()
        self.phase = GamePhase.DEAD
        logger.info("Bomb opened at (%d, %d); game lost", cell.row, cell.column)

    def _check_win(self) -> None:
        if not self.board.bombs_placed or not self.board.is_board_cleared:
            return
        self.board.open_all_non_bomb_cells()
        self.phase = GamePhase.WON
        logger.info("Board cleared; game won")
