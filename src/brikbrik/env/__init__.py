"""Gymnasium environment for Brik Brik."""

from __future__ import annotations

from gymnasium.envs.registration import register

register(
    id="BrikBrik-8x8-v0",
    entry_point="brikbrik.env.brikbrik_env:BrikBrikEnv",
)

__all__ = ["BrikBrik-8x8-v0"]
