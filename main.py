# main.py

from __future__ import annotations

import argparse
import logging
from typing import List, Optional, Tuple

from board import SafeZone
from game import Difficulty, Game, GameConfig, GamePhase


# ---------------------------------------------------------------------------
# Helper functions for user input
# ---------------------------------------------------------------------------

def parse_move(user_input: str) -> Tuple[str, int, int]:
    """
    Parse a command string like:
      'o 3 4' or 'open 3 4'  -> reveal cell (row=3, column=4)
      'f 3 4' or 'flag 3 4'  -> toggle flag
      's' or 'solve'         -> run the solver
      'n' or 'new'           -> new game with the same settings
      'q' or 'quit'          -> quit

    Returns: (action, row_index, column_index) where row/column are 0-based,
    or -1 for commands without coordinates.

    Raises ValueError on bad input.
    """
    tokens = user_input.strip().split()
    if not tokens:
        raise ValueError("Empty input.")

    action_token = tokens[0].lower()
    if action_token in {"q", "quit", "exit"}:
        return ("quit", -1, -1)
    if action_token in {"s", "solve"}:
        return ("solve", -1, -1)
    if action_token in {"n", "new"}:
        return ("new", -1, -1)

    if len(tokens) != 3:
        raise ValueError("Format must be: 'o row col', 'f row col', 's', 'n' or 'q'.")

    if action_token in {"o", "open"}:
        action = "open"
    elif action_token in {"f", "flag"}:
        action = "flag"
    else:
        raise ValueError("First token must be 'o'/'open', 'f'/'flag', 's', 'n' or 'q'.")

    try:
        # User enters 1-based coordinates; convert to 0-based
        row = int(tokens[1]) - 1
        column = int(tokens[2]) - 1
    except ValueError:
        raise ValueError("Row and column must be integers.")

    return (action, row, column)


# ---------------------------------------------------------------------------
# Game setup
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Terminal Minesweeper with a deduction solver.")
    parser.add_argument(
        "--difficulty",
        type=str,
        default="easy",
        choices=[d.name.lower() for d in Difficulty],
    )
    parser.add_argument("--width", type=int, default=None, help="Overrides the preset width")
    parser.add_argument("--height", type=int, default=None, help="Overrides the preset height")
    parser.add_argument("--bombs", type=int, default=None, help="Overrides the preset bomb count")
    parser.add_argument("--seed", type=int, default=-1, help="RNG seed; <0 uses OS entropy")
    parser.add_argument(
        "--safe-zone",
        type=str,
        default="row_and_column",
        choices=[z.name.lower() for z in SafeZone],
    )
    parser.add_argument(
        "--auto",
        action="store_true",
        help="Reveal the centre cell and let the solver play",
    )
    parser.add_argument("--log-level", type=str, default="WARNING")
    return parser


def configure_game(args: argparse.Namespace) -> Game:
    config = GameConfig.from_difficulty(
        Difficulty[args.difficulty.upper()],
        seed=(None if args.seed < 0 else args.seed),
    )
    if args.width is not None:
        config.width = args.width
    if args.height is not None:
        config.height = args.height
    if args.bombs is not None:
        config.bombs = args.bombs
    config.safe_zone = SafeZone[args.safe_zone.upper()]

    print(f"\nCreating a {config.width}x{config.height} board with {config.bombs} bombs...\n")
    return Game(config)


def print_status(game: Game) -> None:
    print(game.board.render())
    print(f"Bombs remaining: {game.remaining_bombs}")


def print_outcome(game: Game) -> None:
    if game.phase == GamePhase.WON:
        print("\nAll bombs flagged. You win!")
    elif game.phase == GamePhase.DEAD:
        print("\nYou hit a bomb. Game over!")
    else:
        print("\nThe solver is stuck; no further cell can be deduced.")
    print("\nFinal board:")
    print(game.board.render(reveal_bombs=game.is_over))


# ---------------------------------------------------------------------------
# Game loops
# ---------------------------------------------------------------------------

def run_human_game(game: Game) -> None:
    print("=== Minesweeper ===")
    print("Commands:")
    print("  o r c   -> open cell at row r, column c (1-based indices)")
    print("  f r c   -> toggle flag at row r, column c")
    print("  s       -> let the solver deduce what it can")
    print("  n       -> new game")
    print("  q       -> quit")
    print()

    while True:
        print_status(game)

        if game.is_over:
            print_outcome(game)
            break

        try:
            action, row, column = parse_move(input("\nEnter your move: "))
        except ValueError as exc:
            print(f"Invalid move: {exc}")
            continue

        if action == "quit":
            print("Goodbye!")
            break
        if action == "new":
            game.new_game()
            continue
        if action == "solve":
            moves = game.solve()
            print(f"Solver applied {len(moves)} moves.")
            continue

        if not game.board.in_bounds(row, column):
            print(f"Cell ({row + 1}, {column + 1}) is out of bounds.")
            continue

        if action == "open":
            game.reveal(row, column)
        elif action == "flag":
            game.toggle_flag(row, column)


def run_auto_game(game: Game) -> None:
    print("=== Minesweeper (Solver Mode) ===")
    game.reveal(game.config.height // 2, game.config.width // 2)
    print("\nAfter the first click:")
    print_status(game)

    moves = game.solve()
    print(f"\nSolver applied {len(moves)} moves.")
    print_status(game)
    print_outcome(game)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    game = configure_game(args)
    if args.auto:
        run_auto_game(game)
    else:
        run_human_game(game)


if __name__ == "__main__":
    main()
