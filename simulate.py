import argparse
import random
import sys
import time

from loguru import logger

from ludo_rules import Game, Simulator
from ludo_rules.config import config
from ludo_rules.simulator import first_movable, pick_random


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play a headless Ludo game")
    parser.add_argument("--players", type=int, default=config.NUM_PLAYERS)
    parser.add_argument("--route-length", type=int, default=config.ROUTE_LENGTH)
    parser.add_argument("--goal-count", type=int, default=config.GOAL_COUNT)
    parser.add_argument("--seed", type=int, default=config.RNG_SEED)
    parser.add_argument(
        "--max-rolls",
        type=int,
        default=config.MAX_TURNS,
        help="Stop after this many rolls if nobody has won",
    )
    parser.add_argument(
        "--random-picks",
        action="store_true",
        help="Pick a random movable piece instead of the lowest id",
    )
    parser.add_argument("--log-level", type=str, default=config.LOG_LEVEL)
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logger.remove()
    logger.add(sys.stderr, level=args.log_level.upper())

    game = Game.create(
        player_count=args.players,
        route_length=args.route_length,
        goal_count=args.goal_count,
        rng_seed=args.seed,
    )
    pick = pick_random(random.Random(args.seed)) if args.random_picks else first_movable
    simulator = Simulator(game, pick=pick, max_rolls=args.max_rolls)

    print("--- Starting headless game ---")
    for player in game.players:
        print(f"P{player.index}: {player.name}")

    start_time = time.time()
    summary = simulator.run()
    elapsed = time.time() - start_time

    print("\n--- SIMULATION COMPLETE ---")
    if summary.winner is not None:
        print(f"Winner: {game.players[summary.winner].name}")
    else:
        print("No winner (roll cap reached)")
    print(f"Rolls: {summary.rolls}")
    print(f"Turns: {summary.turns}")
    print(f"Captures: {summary.captures}")
    print(f"Simulation Time: {elapsed:.2f} seconds")


if __name__ == "__main__":
    main()
