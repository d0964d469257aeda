from __future__ import annotations

import logging
import random
import threading
import uuid
from typing import List, Optional, Sequence

from .grid import GameGrid, find_first_valid_position
from .pieces import BASE_SHAPES, CATALOG, PALETTE, PieceInstance, ShapeKind, Shape, all_rotations


logger = logging.getLogger(__name__)


class PieceGenerator:
    """Deals each round's pieces, biased toward a set the player can place.

    For every piece a random catalog shape is tried in each of its rotations
    (shuffled) against a detached copy of the board; the first fit is
    committed to the copy, lines included, so the next piece is chosen for the
    board the player is likely to have by then. Only the first valid position
    is used, so a dealt round is likely but not guaranteed to be placeable.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        max_attempts: int = 50,
        catalog: Sequence[ShapeKind] = CATALOG,
        palette: Sequence[str] = PALETTE,
    ) -> None:
        self.rng = rng or random.Random()
        self.max_attempts = int(max_attempts)
        self.catalog = list(catalog)
        self.palette = list(palette)
        self.last_attempts = 0
        self._lock = threading.Lock()

    def _new_piece(self, kind: ShapeKind, matrix: Shape) -> PieceInstance:
        return PieceInstance(
            kind=kind,
            matrix=matrix.copy(),
            color=self.rng.choice(self.palette),
            piece_id=str(uuid.UUID(int=self.rng.getrandbits(128), version=4)),
        )

    def generate(self, k: int, grid: GameGrid) -> List[PieceInstance]:
        with self._lock:
            return self._generate(k, grid)

    def _generate(self, k: int, grid: GameGrid) -> List[PieceInstance]:
        work = grid.detach()
        pieces: List[PieceInstance] = []
        total_attempts = 0
        for _ in range(k):
            piece: Optional[PieceInstance] = None
            attempts = 0
            while piece is None and attempts < self.max_attempts:
                kind = self.rng.choice(self.catalog)
                variants = all_rotations(BASE_SHAPES[kind])
                self.rng.shuffle(variants)
                for variant in variants:
                    position = find_first_valid_position(work, variant)
                    if position is not None:
                        piece = self._new_piece(kind, variant)
                        work.place_and_clear(variant, *position)
                        break
                attempts += 1
            total_attempts += attempts

            if piece is None:
                # Board too full for anything we tried; deal a piece that may not fit.
                kind = self.rng.choice(self.catalog)
                piece = self._new_piece(kind, BASE_SHAPES[kind])
                logger.debug("No fit after %d attempts, falling back to %s", attempts, kind.name)
            pieces.append(piece)

        self.rng.shuffle(pieces)
        self.last_attempts = total_attempts
        return pieces
