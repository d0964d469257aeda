from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from brikbrik.errors import GameError
from brikbrik.game import GameConfig, GameService, GameSession, ShapeKind


def _compute_action_mask(service: GameService, session: GameSession) -> np.ndarray:
    size = session.grid.size
    k = service.config.pieces_per_round
    mask = np.zeros((k, size, size), dtype=np.bool_)
    if session.is_over:
        return mask
    for slot, row, col in _valid_actions(session):
        mask[slot, row, col] = True
    return mask


def _valid_actions(session: GameSession) -> List[Tuple[int, int, int]]:
    """List of (slot, row, col) placements the engine would accept."""
    actions: List[Tuple[int, int, int]] = []
    for slot, piece in enumerate(session.pieces):
        if piece is None:
            continue
        for row, col in session.grid.valid_positions(piece.matrix):
            actions.append((slot, row, col))
    return actions


class BrikBrikEnv(gym.Env):
    """Single-player environment driving the authoritative game engine.

    Action ``(slot, row, col)`` places the piece held in ``slot`` with its
    top-left corner at ``(row, col)``. Pieces are dealt already rotated, so
    there is no rotation component. A new round is dealt automatically once
    all slots are used.

    With ``resample_invalid`` set, an action outside the mask is replaced by
    a valid one drawn from ``np_random``, so it follows the reset seed.
    """

    metadata = {"render_modes": []}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        score_weight: float = 0.1,
        invalid_action_penalty: float = -0.1,
        step_penalty: float = 0.0,
        terminal_penalty: float = 0.0,
        max_episode_steps: int = 10000,
        resample_invalid: bool = False,
    ) -> None:
        super().__init__()
        self.service = GameService(config)
        self.session: GameSession = self.service.new_session("env")
        self.render_mode = None

        self.score_weight = float(score_weight)
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.step_penalty = float(step_penalty)
        self.terminal_penalty = float(terminal_penalty)
        self.max_episode_steps = int(max_episode_steps)
        self.resample_invalid = bool(resample_invalid)

        size = self.service.config.grid_size
        k = self.service.config.pieces_per_round

        # Observation space: grid (0/1) and held pieces (ShapeKind values, -1 for empty)
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=1, shape=(size, size), dtype=np.int8),
                "pieces": spaces.Box(low=-1, high=int(max(ShapeKind)), shape=(k,), dtype=np.int8),
                "pieces_remaining": spaces.Discrete(k + 1),
            }
        )

        self.action_space = spaces.MultiDiscrete((k, size, size))

        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        k = self.service.config.pieces_per_round
        pieces = np.full((k,), -1, dtype=np.int8)
        for i, piece in enumerate(self.session.pieces[:k]):
            if piece is not None:
                pieces[i] = int(piece.kind)
        return {
            "grid": self.session.grid.clone_state(),
            "pieces": pieces,
            "pieces_remaining": self.session.remaining_pieces,
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": _compute_action_mask(self.service, self.session),
            "valid_actions": [] if self.session.is_over else _valid_actions(self.session),
            "score": self.session.score,
            "steps": self._steps,
        }

    def get_action_mask(self) -> np.ndarray:
        return _compute_action_mask(self.service, self.session)

    def reset(
        self, *, seed: Optional[int] = None, options: Optional[dict] = None
    ) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.service.generator.rng.seed(seed)
        self.session = self.service.new_session("env")
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action):
        slot, row, col = map(int, action)
        reward_components: Dict[str, float] = {"step": self.step_penalty}

        resampled = False
        if self.resample_invalid and not self.session.is_over:
            valid = _valid_actions(self.session)
            if valid and (slot, row, col) not in valid:
                slot, row, col = valid[int(self.np_random.integers(len(valid)))]
                resampled = True

        piece = self.session.pieces[slot] if 0 <= slot < len(self.session.pieces) else None
        gained = 0
        lines = 0
        if piece is None or self.session.is_over:
            reward_components["invalid"] = self.invalid_action_penalty
        else:
            try:
                result = self.service.place_piece(self.session, piece.matrix, row, col)
            except GameError:
                reward_components["invalid"] = self.invalid_action_penalty
            else:
                gained = result.gained
                lines = result.lines.count
                reward_components["score"] = self.score_weight * float(gained)
                if result.needs_new_pieces:
                    self.service.replenish(self.session)

        self._steps += 1
        terminated = self.session.is_over
        truncated = self._steps >= self.max_episode_steps
        if terminated:
            reward_components["terminal"] = self.terminal_penalty

        reward = float(sum(reward_components.values()))
        obs = self._get_obs()
        info = self._get_info()
        info["reward_components"] = reward_components
        info["engine_score_delta"] = gained
        info["lines_cleared"] = lines
        info["resampled"] = resampled
        return obs, reward, terminated, truncated, info

    def close(self) -> None:
        pass
