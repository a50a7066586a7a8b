"""
Terminal front end for the Minesweeper engine.

Usage:
    python main.py play [--width W] [--height H] [--mines N] [--seed S]
    python main.py demo [--games N] [--delay SECONDS]
"""
import argparse
import logging
import time
from typing import List, Optional

import numpy as np

from .board import BoardConfig, InvalidConfigurationError
from .engine import GameEngine
from .environment import MinesweeperEnv
from .render import render_text


logger = logging.getLogger(__name__)

HELP_TEXT = """Commands:
  r X Y   reveal cell at column X, row Y
  f X Y   toggle flag on cell
  c X Y   chord on a revealed number
  n       new game
  q       quit"""


# ============================================================================
# Interactive Play
# ============================================================================

def handle_command(engine: GameEngine, line: str) -> Optional[str]:
    """
    Apply one typed command to the engine.

    Args:
        engine: Game to act on.
        line: Raw input such as ``"r 3 4"``.

    Returns:
        Message to show the player, or None to quit.
    """
    parts = line.split()
    if not parts:
        return HELP_TEXT

    command = parts[0].lower()
    if command == "q":
        return None
    if command == "n":
        engine.reset()
        return "New game."
    if command not in ("r", "f", "c") or len(parts) != 3:
        return HELP_TEXT

    try:
        x, y = int(parts[1]), int(parts[2])
    except ValueError:
        return "Coordinates must be integers."

    actions = {
        "r": engine.reveal,
        "f": engine.toggle_flag,
        "c": engine.chord_reveal,
    }
    if not actions[command](x, y):
        return "Nothing happened."
    return ""


def new_game(args: argparse.Namespace) -> GameEngine:
    """
    Create the engine for an interactive session.

    The loss notice prints synchronously so it appears before the next
    prompt rather than from a timer thread.
    """
    config = BoardConfig(width=args.width, height=args.height, num_mines=args.mines)
    return GameEngine(
        config,
        seed=args.seed,
        on_win=lambda: print("\n*** WIN! ***"),
        on_lost=lambda: print("\n*** LOST (hit mine) ***"),
        lost_notification_delay=0,
    )


def play(args: argparse.Namespace) -> None:
    """Play an interactive game in the terminal."""
    engine = new_game(args)

    print(HELP_TEXT)
    while True:
        print()
        print(render_text(engine.get_observation(), show_axes=True))
        print(
            f"Mines left: {engine.mines_left} | "
            f"Time: {engine.elapsed:.0f}s | "
            f"Status: {engine.status.value}"
        )
        try:
            line = input("> ")
        except EOFError:
            break
        try:
            message = handle_command(engine, line)
        except InvalidConfigurationError as error:
            logger.error("Cannot start game: %s", error)
            break
        if message is None:
            break
        if message:
            print(message)


# ============================================================================
# Demo
# ============================================================================

def demo(args: argparse.Namespace) -> None:
    """Watch random valid actions play through a few games."""
    config = BoardConfig(width=args.width, height=args.height, num_mines=args.mines)
    env = MinesweeperEnv(config=config, render_mode="ansi")
    rng = np.random.default_rng(args.seed)

    wins = 0
    for game in range(args.games):
        seed = None if args.seed is None else args.seed + game
        env.reset(seed=seed)
        done = False
        step = 0

        while not done:
            valid_indices = np.flatnonzero(env.get_action_mask())
            action = int(rng.choice(valid_indices))
            _, _, terminated, truncated, info = env.step(action)
            done = terminated or truncated
            step += 1

            print(f"\n=== Game {game + 1}/{args.games} | Step {step} ===")
            print(env.render())
            time.sleep(args.delay)

        if info["game_state"] == "WIN":
            wins += 1
        logger.info("Game %d finished: %s", game + 1, info["game_state"])

    print(f"\n=== Final: {wins}/{args.games} wins ===")


# ============================================================================
# Entry Point
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    """Create the command line parser."""
    parser = argparse.ArgumentParser(description="Minesweeper in the terminal")
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    for name, help_text in (
        ("play", "Play an interactive game"),
        ("demo", "Watch random moves play"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--width", type=int, default=9, help="Board columns")
        sub.add_argument("--height", type=int, default=9, help="Board rows")
        sub.add_argument("--mines", type=int, default=10, help="Number of mines")
        sub.add_argument("--seed", type=int, default=None, help="Random seed")

    demo_parser = subparsers.choices["demo"]
    demo_parser.add_argument("--games", type=int, default=3, help="Number of games")
    demo_parser.add_argument(
        "--delay", type=float, default=0.3, help="Delay between moves"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Parse arguments and run the appropriate command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        if args.command == "play":
            play(args)
        elif args.command == "demo":
            demo(args)
        else:
            parser.print_help()
    except InvalidConfigurationError as error:
        parser.error(str(error))


if __name__ == "__main__":
    main()
