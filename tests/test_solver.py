import pytest

from game import Difficulty, Game, GameConfig, GamePhase
from solver.deduction_solver import DeductionSolver, run_solver
from solver.utils import Move, build_constraint


def snapshot(board):
    return [cell.state for cell in board.iter_cells()]


def test_constraint_counts_flags_and_untouched(make_board):
    board = make_board(3, 2, bombs=[(0, 0), (0, 2)])
    board.get_cell(0, 0).toggle_flagged()
    board.get_cell(1, 0).mark_as_open()
    cell = board.get_cell(0, 1)
    cell.mark_as_open()

    constraint = build_constraint(board, cell)

    assert constraint.remaining == 1
    assert {(x.row, x.column) for x in constraint.candidates} == {(0, 2), (1, 1), (1, 2)}


def test_flags_when_remaining_bombs_fill_candidates(make_board):
    board = make_board(2, 1, bombs=[(0, 1)])
    board.get_cell(0, 0).mark_as_open()

    moves = run_solver(board)

    assert moves == [Move("flag", 0, 1)]
    assert board.get_cell(0, 1).is_flagged


def test_opens_when_no_bombs_remain(make_board):
    board = make_board(4, 1, bombs=[(0, 0)])
    board.get_cell(0, 0).toggle_flagged()
    board.get_cell(0, 1).mark_as_open()

    moves = run_solver(board)

    # (0, 3) is only reachable after (0, 2) became open on the previous pass
    assert moves == [Move("open", 0, 2), Move("open", 0, 3)]
    assert all(board.get_cell(0, c).is_open for c in (1, 2, 3))


def test_does_not_guess(make_board):
    board = make_board(3, 1, bombs=[(0, 0)])
    board.get_cell(0, 1).mark_as_open()
    before = snapshot(board)

    assert run_solver(board) == []
    assert snapshot(board) == before


def test_over_flagged_cell_yields_nothing(make_board):
    board = make_board(3, 1, bombs=[])
    board.get_cell(0, 1).mark_as_open()
    board.get_cell(0, 0).toggle_flagged()

    assert run_solver(board) == []
    assert board.get_cell(0, 2).is_untouched


def test_cell_moves_leaves_board_untouched(make_board):
    board = make_board(2, 1, bombs=[(0, 1)])
    cell = board.get_cell(0, 0)
    cell.mark_as_open()
    before = snapshot(board)

    assert DeductionSolver().cell_moves(board, cell) == [Move("flag", 0, 1)]
    assert snapshot(board) == before


def test_solver_on_fresh_board_is_a_no_op():
    game = Game(GameConfig(width=5, height=5, bombs=3))

    assert run_solver(game.board) == []


def test_solver_flags_single_corner_bomb(make_board):
    game = Game(GameConfig(width=3, height=3, bombs=1))
    game.board = make_board(3, 3, bombs=[(2, 2)])
    game.phase = GamePhase.IN_PROGRESS
    game.reveal(0, 0)
    assert sum(1 for cell in game.board.iter_cells() if cell.is_open) == 8

    moves = game.solve()

    assert moves == [Move("flag", 2, 2)]
    assert game.phase == GamePhase.WON


@pytest.mark.parametrize("difficulty", [Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD])
@pytest.mark.parametrize("seed", range(10))
def test_solver_is_sound_and_idempotent(difficulty, seed):
    game = Game(GameConfig.from_difficulty(difficulty, seed=seed))
    game.reveal(difficulty.height // 2, difficulty.width // 2)
    board = game.board

    run_solver(board)

    assert not any(cell.is_open for cell in board.iter_cells() if cell.is_bomb)
    assert not any(cell.is_flagged for cell in board.iter_cells() if not cell.is_bomb)

    before = snapshot(board)
    assert run_solver(board) == []
    assert snapshot(board) == before
