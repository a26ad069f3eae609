from __future__ import annotations

import random
from typing import Iterable, Tuple

import pytest

from board import Board


def seeded_board(width: int, height: int, bombs: Iterable[Tuple[int, int]]) -> Board:
    """Board whose bomb layout is fixed up front instead of sampled."""
    board = Board(width, height, rng=random.Random(0))
    board.reset()
    bomb_set = set(bombs)
    for cell in board.iter_cells():
        cell.seal_bomb_status((cell.row, cell.column) in bomb_set)
    board.bombs_placed = True
    return board


@pytest.fixture
def make_board():
    return seeded_board
