from __future__ import annotations

import argparse
import logging
import random
from typing import List, Optional

import gymnasium as gym

import brikbrik.env  # ensure registration


logger = logging.getLogger(__name__)


def run_random(episodes: int = 5, seed: Optional[int] = None, max_steps: int = 1000) -> List[int]:
    """Play masked random episodes and return the final engine score of each."""
    env = gym.make("BrikBrik-8x8-v0")
    rng = random.Random(seed)
    scores: List[int] = []
    try:
        for episode in range(episodes):
            obs, info = env.reset(seed=None if seed is None else seed + episode)
            for _ in range(max_steps):
                # Prefer valid actions if available
                valid = info.get("valid_actions", [])
                action = rng.choice(valid) if valid else env.action_space.sample()
                obs, reward, terminated, truncated, info = env.step(action)
                if terminated or truncated:
                    break
            scores.append(int(info["score"]))
            logger.info("Episode %d finished with score %d", episode, info["score"])
    finally:
        env.close()
    return scores


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Brik Brik with a random agent")
    p.add_argument("--episodes", type=int, default=5)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--max-steps", type=int, default=1000)
    p.add_argument("--log-level", default="INFO")
    return p


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")
    scores = run_random(args.episodes, args.seed, args.max_steps)
    if scores:
        logger.info("Mean score over %d episodes: %.1f", len(scores), sum(scores) / len(scores))


if __name__ == "__main__":  # pragma: no cover
    main()
