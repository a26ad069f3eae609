# solver/utils.py
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Literal

from board import Board, Cell

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Core data structures
# ---------------------------------------------------------------------------

ActionType = Literal["open", "flag"]


@dataclass(frozen=True)
class Move:
    """A single solver action on the board."""
    action: ActionType
    row: int
    column: int


@dataclass
class Constraint:
    """
    A constraint derived from one open cell.

    remaining  : adjacent bombs not yet accounted for by flags
    candidates : untouched (unopened, unflagged) neighbours
    """
    row: int
    column: int
    remaining: int
    candidates: List[Cell]


def build_constraint(board: Board, cell: Cell) -> Constraint:
    surrounding = board.get_surrounding_cells_from_cell(cell)
    flagged = sum(1 for x in surrounding if x.is_flagged)
    return Constraint(
        row=cell.row,
        column=cell.column,
        remaining=board.count_surrounding_bombs_from_cell(cell) - flagged,
        candidates=[x for x in surrounding if x.is_untouched],
    )


# ---------------------------------------------------------------------------
# Base solver interface
# ---------------------------------------------------------------------------

class BaseSolver(ABC):
    """
    Abstract base class for deterministic solvers.

    Typical usage:
        moves = SomeSolver().run(board)
    """

    @abstractmethod
    def cell_moves(self, board: Board, cell: Cell) -> List[Move]:
        """
        Moves that can be deduced from a single open cell.
        This method MUST NOT modify the board.
        """
        raise NotImplementedError

    def apply(self, board: Board, move: Move) -> None:
        cell = board.get_cell(move.row, move.column)
        if move.action == "open":
            cell.mark_as_open()
        elif move.action == "flag":
            cell.change_flagged_state(True)
        else:
            raise ValueError(f"Unknown action: {move.action}")

    def run_pass(self, board: Board) -> List[Move]:
        """One scan over the currently open cells, applying moves as found."""
        applied: List[Move] = []
        for cell in board.all_open_cells:
            for move in self.cell_moves(board, cell):
                self.apply(board, move)
                applied.append(move)
        return applied

    def run(self, board: Board) -> List[Move]:
        """
        Repeat passes until one makes no change.

        Returns every move applied, in order.
        """
        applied: List[Move] = []
        passes = 0
        while True:
            moves = self.run_pass(board)
            passes += 1
            if not moves:
                break
            applied.extend(moves)

        logger.debug("Solver finished after %d passes, %d moves", passes, len(applied))
        return applied
