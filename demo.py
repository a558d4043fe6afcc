#!/usr/bin/env python3
"""Watch the Logic agent play Cleansweeper."""
import os
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))

from cleansweeper import BoardConfig, CleansweeperEnv
from agents import LogicAgent


def clear_screen():
    os.system('cls' if os.name == 'nt' else 'clear')


def demo(
    delay: float = 0.3,
    games: int = 5,
    size: int = 9,
    fraction: float = 0.2,
    torus: bool = False,
):
    """Run demo games with visualization."""
    config = BoardConfig(size, size, fraction, torus=torus)
    env = CleansweeperEnv(config=config, render_mode="ansi")
    agent = LogicAgent(size, size, torus, mine_fraction=fraction)

    shape = "torus" if torus else "board"
    print(f"{shape.capitalize()}: {size}x{size} with {fraction:.0%} mine density")
    print("Starting in 2 seconds...")
    time.sleep(2)

    wins = 0

    for game in range(games):
        obs, _ = env.reset()
        agent.reset()

        clear_screen()
        print(f"=== Game {game + 1}/{games} ===")
        print(f"Wins so far: {wins}\n")
        print(env.render())
        time.sleep(delay)

        done = False
        step = 0

        while not done:
            action = agent.select_action(obs, env.get_action_mask())
            kind, row, col = env.decode_action(action)

            obs, reward, terminated, truncated, info = env.step(action)
            done = terminated or truncated
            step += 1

            clear_screen()
            print(f"=== Game {game + 1}/{games} | Step {step} ===")
            print(f"Wins so far: {wins}")
            print(f"Last move: {'flag' if kind else 'open'} ({row}, {col})\n")
            print(env.render())

            if done:
                if info.get("game_state") == "WON":
                    wins += 1
                    print(f"\n*** WIN! ***")
                else:
                    print(f"\n*** LOST ***")

            time.sleep(delay)

        time.sleep(1.0)  # Pause between games

    print(f"\n=== Final: {wins}/{games} wins ({100*wins/games:.0f}%) ===")


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser()
    parser.add_argument("--delay", type=float, default=0.3, help="Delay between moves")
    parser.add_argument("--games", type=int, default=5, help="Number of games")
    parser.add_argument("--size", type=int, default=9, help="Board size (NxN)")
    parser.add_argument("--fraction", type=float, default=0.2, help="Mine fraction")
    parser.add_argument("--torus", action="store_true", help="Wrap around edges")
    args = parser.parse_args()

    demo(
        delay=args.delay,
        games=args.games,
        size=args.size,
        fraction=args.fraction,
        torus=args.torus,
    )
