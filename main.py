#!/usr/bin/env python3
"""
Cleansweeper - Main entry point.

Usage:
    python main.py play [--height H] [--width W] [--fraction F] [--torus] [--undo]
    python main.py evaluate [--agent {random,logic}] [--games N]
    python main.py compare [--games N]
"""
import argparse
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

import numpy as np

from cleansweeper import Board, BoardConfig, Console
from agents import RandomAgent, LogicAgent
from evaluation import Evaluator


def build_config(args: argparse.Namespace) -> BoardConfig:
    """Create a board configuration from parsed arguments."""
    return BoardConfig(
        height=args.height,
        width=args.width,
        mine_fraction=args.fraction,
        torus=args.torus,
        undo=args.undo,
    )


def play(args: argparse.Namespace) -> None:
    """Play an interactive game in the terminal."""
    config = build_config(args)
    board = Board(config, np.random.default_rng(args.seed))
    console = Console(board)

    print(console.render())
    print(console.handle("h"))
    while console.running:
        try:
            line = input("> ")
        except EOFError:
            break
        message = console.handle(line)
        if console.running:
            print(console.render())
        print(message)


def make_agent(name: str, config: BoardConfig, seed=None):
    """Create an agent by name for the given board."""
    if name == "random":
        return RandomAgent(config.height, config.width, config.torus, seed=seed)
    return LogicAgent(
        config.height,
        config.width,
        config.torus,
        mine_fraction=config.mine_fraction,
        seed=seed,
    )


def evaluate(args: argparse.Namespace) -> None:
    """Evaluate a specific agent."""
    config = build_config(args)
    agent = make_agent(args.agent, config, args.seed)
    name = args.agent.capitalize()

    evaluator = Evaluator(config, num_episodes=args.games, seed=args.seed)

    print(f"\nEvaluating {name} over {args.games} games...")
    results = evaluator.evaluate(agent)

    print(f"Results for {name}:")
    print(f"  Win rate: {results['win_rate']:.1%}")
    print(f"  Avg reward: {results['avg_reward']:.2f}")
    print(f"  Avg steps: {results['avg_steps']:.1f}")
    print(f"  Avg opened: {results['avg_opened']:.1f} cells")


def compare(args: argparse.Namespace) -> None:
    """Compare all agents."""
    config = build_config(args)
    agents = {
        "Random": make_agent("random", config, args.seed),
        "Logic": make_agent("logic", config, args.seed),
    }

    evaluator = Evaluator(config, num_episodes=args.games, seed=args.seed)
    results = evaluator.compare(agents)

    print("\n" + "=" * 50)
    print("Agent Comparison Results")
    print("=" * 50)
    print(f"{'Agent':<20} {'Win Rate':<12} {'Avg Reward':<12} {'Avg Steps':<10}")
    print("-" * 50)

    for name, metrics in results.items():
        print(
            f"{name:<20} {metrics['win_rate']:>10.1%} "
            f"{metrics['avg_reward']:>10.2f} "
            f"{metrics['avg_steps']:>10.1f}"
        )


def add_board_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the board configuration flags shared by every command."""
    parser.add_argument(
        "--height", type=int, default=16, help="Height of the grid"
    )
    parser.add_argument(
        "--width", type=int, default=16, help="Width of the grid"
    )
    parser.add_argument(
        "--fraction",
        type=float,
        default=0.25,
        help="Fraction of cells which contain mines",
    )
    parser.add_argument(
        "--torus", action="store_true", help="Wrap the grid around at the edges"
    )
    parser.add_argument(
        "--undo", action="store_true", help="Allow taking back a losing move"
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Random seed"
    )


def main() -> None:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(
        description="Cleansweeper - minesweeper without guessing the first move"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    add_board_arguments(play_parser)

    # Evaluate command
    eval_parser = subparsers.add_parser("evaluate", help="Evaluate an agent")
    add_board_arguments(eval_parser)
    eval_parser.add_argument(
        "--agent",
        choices=["random", "logic"],
        default="logic",
        help="Agent to evaluate",
    )
    eval_parser.add_argument(
        "--games", type=int, default=100, help="Number of games to play"
    )

    # Compare command
    compare_parser = subparsers.add_parser("compare", help="Compare all agents")
    add_board_arguments(compare_parser)
    compare_parser.add_argument(
        "--games", type=int, default=100, help="Number of games per agent"
    )

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return

    try:
        handler = {"play": play, "evaluate": evaluate, "compare": compare}
        handler[args.command](args)
    except ValueError as error:
        parser.error(str(error))


if __name__ == "__main__":
    main()
