import gymnasium as gym
import numpy as np

import brikbrik.env  # noqa: F401  (registration)
from brikbrik.env.brikbrik_env import BrikBrikEnv
from brikbrik.env.wrappers import FlattenDiscreteActionWrapper
from brikbrik.game import ShapeKind

from tests.helpers import deal


def test_reset_observation_matches_spaces():
    env = BrikBrikEnv()
    obs, info = env.reset(seed=0)
    assert env.observation_space.contains(obs)
    assert obs["pieces_remaining"] == 3
    assert info["action_mask"].shape == (3, 8, 8)
    assert info["action_mask"].any()
    assert len(info["valid_actions"]) == int(info["action_mask"].sum())


def test_valid_step_rewards_engine_score():
    env = BrikBrikEnv(score_weight=1.0)
    env.reset(seed=1)
    deal(env.session, ShapeKind.I4, ShapeKind.T, ShapeKind.I1)
    obs, reward, terminated, truncated, info = env.step((0, 0, 0))
    assert reward == 4.0
    assert info["engine_score_delta"] == 4
    assert obs["grid"][0].tolist() == [1, 1, 1, 1, 0, 0, 0, 0]
    assert obs["pieces"][0] == -1
    assert obs["pieces"][1] == int(ShapeKind.T)
    assert not terminated and not truncated


def test_invalid_step_is_penalized_without_change():
    env = BrikBrikEnv(invalid_action_penalty=-0.5)
    env.reset(seed=2)
    deal(env.session, ShapeKind.I4, None, ShapeKind.I1)
    obs, reward, _, _, info = env.step((0, 0, 7))
    assert reward == -0.5
    assert not obs["grid"].any()
    obs, reward, _, _, _ = env.step((1, 0, 0))
    assert reward == -0.5


def test_round_is_redealt_automatically():
    env = BrikBrikEnv()
    env.reset(seed=3)
    deal(env.session, ShapeKind.I1, None, None)
    obs, _, _, _, _ = env.step((0, 4, 4))
    assert obs["pieces_remaining"] == 3
    assert env.session.rounds_dealt == 2


def test_same_seed_same_first_round():
    a, b = BrikBrikEnv(), BrikBrikEnv()
    obs_a, _ = a.reset(seed=21)
    obs_b, _ = b.reset(seed=21)
    assert np.array_equal(obs_a["pieces"], obs_b["pieces"])


def test_masked_random_play_runs_to_episode_end():
    env = gym.make("BrikBrik-8x8-v0", max_episode_steps=500)
    obs, info = env.reset(seed=4)
    rng = np.random.default_rng(4)
    terminated = truncated = False
    while not (terminated or truncated):
        valid = info["valid_actions"]
        action = valid[rng.integers(len(valid))]
        obs, reward, terminated, truncated, info = env.step(action)
    assert info["score"] > 0
    if terminated:
        assert not info["action_mask"].any()


def test_flatten_wrapper_mask_matches_info():
    env = FlattenDiscreteActionWrapper(BrikBrikEnv())
    obs, info = env.reset(seed=5)
    mask = env.get_action_mask()
    assert mask.shape == (3 * 8 * 8,)
    assert np.array_equal(mask, info["action_mask"].reshape(-1))


def test_invalid_action_is_resampled_when_enabled():
    env = BrikBrikEnv(resample_invalid=True, score_weight=1.0)
    env.reset(seed=6)
    deal(env.session, ShapeKind.I4, None, None)
    obs, reward, _, _, info = env.step((0, 0, 7))
    assert info["resampled"]
    assert "invalid" not in info["reward_components"]
    assert reward == 4.0
    assert int(obs["grid"].sum()) == 4


def test_valid_action_is_not_resampled():
    env = BrikBrikEnv(resample_invalid=True)
    env.reset(seed=7)
    deal(env.session, ShapeKind.I4, None, None)
    obs, _, _, _, info = env.step((0, 3, 2))
    assert not info["resampled"]
    assert obs["grid"][3].tolist() == [0, 0, 1, 1, 1, 1, 0, 0]


def test_flatten_wrapper_unflattens_c_order():
    wrapper = FlattenDiscreteActionWrapper(BrikBrikEnv())
    assert wrapper.action(0).tolist() == [0, 0, 0]
    assert wrapper.action(8 * 8 + 8 * 2 + 3).tolist() == [1, 2, 3]
