"""Session API, session store and leaderboard around the game engine."""

from .api import GameAPI, ServerConfig
from .leaderboard import JsonFileLeaderboard, Leaderboard, LeaderboardRecord, MemoryLeaderboard
from .store import SessionStore

__all__ = [
    "GameAPI",
    "ServerConfig",
    "JsonFileLeaderboard",
    "Leaderboard",
    "LeaderboardRecord",
    "MemoryLeaderboard",
    "SessionStore",
]
