# solver/deduction_solver.py
from __future__ import annotations

from typing import List

from board import Board, Cell
from .utils import BaseSolver, Move, build_constraint


class DeductionSolver(BaseSolver):
    """
    Local constraint solver. Never guesses.

    For each open cell with N adjacent bombs:
      F = flagged neighbours, C = untouched neighbours, R = N - |F|

      A. If R == |C| and C is non-empty, every cell in C is a bomb -> flag.
      B. If R == 0 and C is non-empty, every cell in C is safe -> open.

    Opening here is structural: it does not flood-fill. Newly opened cells
    feed the next pass instead.
    """

    def cell_moves(self, board: Board, cell: Cell) -> List[Move]:
        constraint = build_constraint(board, cell)
        if not constraint.candidates:
            return []

        if constraint.remaining == len(constraint.candidates):
            action = "flag"
        elif constraint.remaining == 0:
            action = "open"
        else:
            return []

        return [Move(action, x.row, x.column) for x in constraint.candidates]


def run_solver(board: Board) -> List[Move]:
    return DeductionSolver().run(board)
