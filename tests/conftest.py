import os
import random
import sys

import pytest

# Ensure src is on path for test imports
ROOT = os.path.dirname(os.path.dirname(__file__))
SRC = os.path.join(ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from brikbrik.game import GameConfig, GameService, PieceGenerator
from brikbrik.server import GameAPI, MemoryLeaderboard, SessionStore


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def generator(rng):
    return PieceGenerator(rng=rng)


@pytest.fixture
def service():
    return GameService(GameConfig(random_seed=42))


@pytest.fixture
def api(service):
    return GameAPI(service=service, store=SessionStore(), leaderboard=MemoryLeaderboard())
