"""Game engine for Brik Brik.

Exports the core game engine and supporting classes:
- ShapeKind / BASE_SHAPES: the piece catalog, with rotation helpers
- GameGrid: live board with placement and line clearing
- SimulatedGrid: detached board copy used for generation lookahead
- ScoringRules: placement and line-clear scoring
- PieceGenerator: feasibility-biased dealing of each round's pieces
- GameService / GameSession: placement, replenishment and game-over rules
"""

from .pieces import (
    BASE_SHAPES,
    CATALOG,
    PALETTE,
    PieceInstance,
    ShapeKind,
    all_rotations,
    as_shape,
    rotate_cw,
)
from .grid import GameGrid, LineClear, SimulatedGrid, find_first_valid_position
from .rules import ScoringRules
from .generator import PieceGenerator
from .core import GameConfig, GamePhase, GameService, GameSession, PlacementResult

__all__ = [
    "BASE_SHAPES",
    "CATALOG",
    "PALETTE",
    "PieceInstance",
    "ShapeKind",
    "all_rotations",
    "as_shape",
    "rotate_cw",
    "GameGrid",
    "LineClear",
    "SimulatedGrid",
    "find_first_valid_position",
    "ScoringRules",
    "PieceGenerator",
    "GameConfig",
    "GamePhase",
    "GameService",
    "GameSession",
    "PlacementResult",
]
