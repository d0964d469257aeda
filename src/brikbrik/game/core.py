from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..errors import (
    GameError,
    GameOverError,
    InternalError,
    InvalidPieceError,
    InvalidPlacementError,
    InvalidRequestError,
    PrematureReplenishError,
)
from .generator import PieceGenerator
from .grid import GameGrid, LineClear, find_first_valid_position
from .pieces import PieceInstance, Shape, as_shape, block_count
from .rules import ScoringRules


logger = logging.getLogger(__name__)


@dataclass
class GameConfig:
    grid_size: int = 8
    pieces_per_round: int = 3
    max_generation_attempts: int = 50
    random_seed: Optional[int] = None


class GamePhase(Enum):
    ACTIVE = "active"
    OVER = "over"


@dataclass
class GameSession:
    """Plain state of one player's game; mutated only by ``GameService``.

    ``lock`` serialises requests against this session. Callers hold it for
    the whole read-modify-write of a request.
    """

    session_id: str
    grid: GameGrid
    pieces: List[Optional[PieceInstance]]
    score: int = 0
    phase: GamePhase = GamePhase.ACTIVE
    pieces_placed: int = 0
    lines_cleared_total: int = 0
    rounds_dealt: int = 0
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    @property
    def is_over(self) -> bool:
        return self.phase is GamePhase.OVER

    @property
    def remaining_pieces(self) -> int:
        return sum(1 for piece in self.pieces if piece is not None)

    def active_pieces(self) -> List[PieceInstance]:
        return [piece for piece in self.pieces if piece is not None]


@dataclass
class PlacementResult:
    slot: int
    cells: int
    lines: LineClear
    line_clear_score: int
    score: int
    game_over: bool
    needs_new_pieces: bool

    @property
    def gained(self) -> int:
        return self.cells + self.line_clear_score


class GameService:
    """Placement, replenishment and game-over rules applied to session records."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        generator: Optional[PieceGenerator] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.generator = generator or PieceGenerator(
            rng=random.Random(self.config.random_seed),
            max_attempts=self.config.max_generation_attempts,
        )

    def new_session(self, session_id: str) -> GameSession:
        grid = GameGrid(self.config.grid_size)
        session = GameSession(session_id=session_id, grid=grid, pieces=[])
        self._deal(session)
        logger.info("Created session %s", session_id)
        return session

    def _deal(self, session: GameSession) -> None:
        pieces = self.generator.generate(self.config.pieces_per_round, session.grid)
        if len(pieces) != self.config.pieces_per_round:
            raise InternalError(
                f"generator returned {len(pieces)} pieces, expected {self.config.pieces_per_round}"
            )
        session.pieces = list(pieces)
        session.rounds_dealt += 1
        self._update_phase(session)

    def is_game_over(self, session: GameSession) -> bool:
        held = session.active_pieces()
        if not held:
            return False
        return all(find_first_valid_position(session.grid, piece.matrix) is None for piece in held)

    def _update_phase(self, session: GameSession) -> None:
        if self.is_game_over(session):
            session.phase = GamePhase.OVER
            logger.info("Session %s is over with score %d", session.session_id, session.score)

    def find_slot(self, session: GameSession, matrix: Shape) -> Optional[int]:
        for idx, piece in enumerate(session.pieces):
            if piece is not None and piece.matches(matrix):
                return idx
        return None

    def place_piece(self, session: GameSession, piece: Any, row: int, col: int) -> PlacementResult:
        if session.is_over:
            raise GameOverError(session.session_id)
        try:
            matrix = as_shape(piece)
        except ValueError as exc:
            raise InvalidRequestError(f"Malformed piece: {exc}") from exc

        slot = self.find_slot(session, matrix)
        if slot is None:
            raise InvalidPieceError()
        if not session.grid.can_place(matrix, row, col):
            piece_h, piece_w = matrix.shape
            size = session.grid.size
            if row < 0 or col < 0 or row + piece_h > size or col + piece_w > size:
                reason = f"{piece_h}x{piece_w} piece out of bounds on {size}x{size} board"
            else:
                reason = "overlaps existing blocks"
            raise InvalidPlacementError(row, col, reason)

        saved = self._save(session)
        try:
            return self._apply(session, slot, matrix, row, col)
        except GameError:
            self._restore(session, saved)
            raise
        except Exception as exc:
            self._restore(session, saved)
            raise InternalError(f"placement failed: {exc}") from exc

    def _apply(self, session: GameSession, slot: int, matrix: Shape, row: int, col: int) -> PlacementResult:
        if not session.grid.place(matrix, row, col):
            raise InternalError("validated placement was refused by the grid")
        cells = block_count(matrix)
        session.score += self.rules.placement_score(cells)

        lines = session.grid.detect_full_lines()
        line_clear_score = 0
        if lines:
            line_clear_score = self.rules.score_for_lines(lines.count)
            session.score += line_clear_score
            session.grid.clear_lines(lines)
            session.lines_cleared_total += lines.count

        session.pieces[slot] = None
        session.pieces_placed += 1

        needs_new_pieces = session.remaining_pieces == 0
        if not needs_new_pieces:
            self._update_phase(session)
        return PlacementResult(
            slot=slot,
            cells=cells,
            lines=lines,
            line_clear_score=line_clear_score,
            score=session.score,
            game_over=session.is_over,
            needs_new_pieces=needs_new_pieces,
        )

    def replenish(self, session: GameSession) -> List[PieceInstance]:
        remaining = session.remaining_pieces
        if remaining:
            raise PrematureReplenishError(remaining)
        saved = self._save(session)
        try:
            self._deal(session)
        except GameError:
            self._restore(session, saved)
            raise
        except Exception as exc:
            self._restore(session, saved)
            raise InternalError(f"piece generation failed: {exc}") from exc
        return session.active_pieces()

    def snapshot(self, session: GameSession) -> Dict[str, Any]:
        return {
            "board": session.grid.to_list(),
            "score": session.score,
            "pieces": [piece.to_dict() if piece is not None else None for piece in session.pieces],
            "isGameOver": session.is_over,
        }

    def _save(self, session: GameSession) -> Dict[str, Any]:
        return {
            "grid": session.grid.clone_state(),
            "pieces": list(session.pieces),
            "score": session.score,
            "phase": session.phase,
            "pieces_placed": session.pieces_placed,
            "lines_cleared_total": session.lines_cleared_total,
            "rounds_dealt": session.rounds_dealt,
        }

    def _restore(self, session: GameSession, saved: Dict[str, Any]) -> None:
        session.grid.grid[...] = saved["grid"]
        session.pieces = saved["pieces"]
        session.score = saved["score"]
        session.phase = saved["phase"]
        session.pieces_placed = saved["pieces_placed"]
        session.lines_cleared_total = saved["lines_cleared_total"]
        session.rounds_dealt = saved["rounds_dealt"]
