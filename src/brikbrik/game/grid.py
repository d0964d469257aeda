from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

import numpy as np

from .pieces import Shape


Position = Tuple[int, int]


@dataclass(frozen=True)
class LineClear:
    """Indices of full rows and columns found after a placement.

    A cell shared by a full row and a full column is reported in both lists;
    ``count`` therefore counts both lines.
    """

    rows: Tuple[int, ...] = ()
    cols: Tuple[int, ...] = ()

    @property
    def count(self) -> int:
        return len(self.rows) + len(self.cols)

    def __bool__(self) -> bool:
        return self.count > 0

    def to_dict(self) -> Dict[str, List[int]]:
        return {"rows": list(self.rows), "cols": list(self.cols)}


def _can_place(cells: np.ndarray, shape: Shape, row: int, col: int) -> bool:
    size = cells.shape[0]
    piece_h, piece_w = shape.shape
    if row < 0 or col < 0:
        return False
    if row + piece_h > size or col + piece_w > size:
        return False
    window = cells[row : row + piece_h, col : col + piece_w]
    return not bool(np.any((shape != 0) & (window != 0)))


def _stamp(cells: np.ndarray, shape: Shape, row: int, col: int) -> None:
    piece_h, piece_w = shape.shape
    window = cells[row : row + piece_h, col : col + piece_w]
    window[shape != 0] = 1


def _detect_full_lines(cells: np.ndarray) -> LineClear:
    rows = tuple(int(r) for r in np.flatnonzero(np.all(cells == 1, axis=1)))
    cols = tuple(int(c) for c in np.flatnonzero(np.all(cells == 1, axis=0)))
    return LineClear(rows=rows, cols=cols)


def _clear_lines(cells: np.ndarray, lines: LineClear) -> None:
    for row in lines.rows:
        cells[row, :] = 0
    for col in lines.cols:
        cells[:, col] = 0


class GameGrid:
    """Live N x N occupancy grid owned by one game session.

    Cells hold 0 (empty) or 1 (filled). ``place`` is the only entry point that
    writes a piece onto the board.
    """

    def __init__(self, size: int = 8) -> None:
        self.size = int(size)
        self.grid = np.zeros((self.size, self.size), dtype=np.int8)

    def can_place(self, shape: Shape, row: int, col: int) -> bool:
        return _can_place(self.grid, shape, row, col)

    def place(self, shape: Shape, row: int, col: int) -> bool:
        if not self.can_place(shape, row, col):
            return False
        _stamp(self.grid, shape, row, col)
        return True

    def detect_full_lines(self) -> LineClear:
        return _detect_full_lines(self.grid)

    def clear_lines(self, lines: LineClear) -> None:
        _clear_lines(self.grid, lines)

    def valid_positions(self, shape: Shape) -> List[Position]:
        """All (row, col) anchors where ``shape`` fits, row-major."""
        piece_h, piece_w = shape.shape
        return [
            (row, col)
            for row in range(self.size - piece_h + 1)
            for col in range(self.size - piece_w + 1)
            if self.can_place(shape, row, col)
        ]

    def detach(self) -> "SimulatedGrid":
        """Copy the board for lookahead; the copy never writes back."""
        return SimulatedGrid(self.grid)

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()

    def to_list(self) -> List[List[int]]:
        return self.grid.tolist()


@dataclass
class SimulatedGrid:
    """Detached copy of a board used for generation lookahead.

    Has no plain ``place``; the only mutation is ``place_and_clear``, which
    models a player placing a piece and the resulting line clears.
    """

    grid: np.ndarray = field(repr=False)

    def __post_init__(self) -> None:
        self.grid = np.array(self.grid, dtype=np.int8, copy=True)

    def can_place(self, shape: Shape, row: int, col: int) -> bool:
        return _can_place(self.grid, shape, row, col)

    def place_and_clear(self, shape: Shape, row: int, col: int) -> LineClear:
        """Same as place -> detect_full_lines -> clear_lines on this copy.

        The position must come from ``find_first_valid_position``; an invalid
        one raises ``ValueError`` rather than writing out of bounds.
        """
        if not self.can_place(shape, row, col):
            raise ValueError(f"cannot simulate placement at ({row}, {col})")
        _stamp(self.grid, shape, row, col)
        lines = _detect_full_lines(self.grid)
        _clear_lines(self.grid, lines)
        return lines


GridLike = Union[GameGrid, SimulatedGrid, np.ndarray]


def find_first_valid_position(grid: GridLike, shape: Shape) -> Optional[Position]:
    """First (row, col), scanning row-major, where ``shape`` fits on ``grid``.

    Existence query only: nothing is written.
    """
    cells = grid if isinstance(grid, np.ndarray) else grid.grid
    size = cells.shape[0]
    piece_h, piece_w = shape.shape
    for row in range(size - piece_h + 1):
        for col in range(size - piece_w + 1):
            if _can_place(cells, shape, row, col):
                return row, col
    return None
