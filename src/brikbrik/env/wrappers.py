from __future__ import annotations

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .brikbrik_env import _compute_action_mask


class FlattenDiscreteActionWrapper(gym.ActionWrapper):
    """Flattens MultiDiscrete (slot, row, col) -> Discrete(N).

    Also exposes `get_action_mask()` returning a 1D boolean mask of shape (N,).
    Order: slot, row, col (C-order flattening).
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        assert isinstance(env.action_space, spaces.MultiDiscrete)
        k, rows, cols = map(int, env.action_space.nvec)
        assert rows == cols, "Expected square grid"
        self.k = k
        self.size = rows
        self.n = int(k * self.size * self.size)
        self.action_space = spaces.Discrete(self.n)

    def _unflatten(self, idx: int) -> tuple[int, int, int]:
        col = idx % self.size
        idx //= self.size
        row = idx % self.size
        slot = idx // self.size
        return int(slot), int(row), int(col)

    def action(self, action: int):  # type: ignore[override]
        return np.array(self._unflatten(int(action)), dtype=np.int64)

    def get_action_mask(self) -> np.ndarray:
        base = self.env.unwrapped
        return _compute_action_mask(base.service, base.session).reshape(-1)

