from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, List

import numpy as np


class ShapeKind(IntEnum):
    I4 = 1
    I3 = 2
    I2 = 3
    I1 = 4
    L_LARGE = 5
    L_SMALL = 6
    L_TALL = 7
    T = 8
    Z = 9
    SQUARE3 = 10
    SQUARE2 = 11


Shape = np.ndarray


BASE_SHAPES: Dict[ShapeKind, Shape] = {
    ShapeKind.I4: np.array([[1, 1, 1, 1]], dtype=np.int8),
    ShapeKind.I3: np.array([[1, 1, 1]], dtype=np.int8),
    ShapeKind.I2: np.array([[1, 1]], dtype=np.int8),
    ShapeKind.I1: np.array([[1]], dtype=np.int8),
    ShapeKind.L_LARGE: np.array([[1, 0, 0], [1, 0, 0], [1, 1, 1]], dtype=np.int8),
    ShapeKind.L_SMALL: np.array([[1, 0], [1, 1]], dtype=np.int8),
    ShapeKind.L_TALL: np.array([[1, 0], [1, 0], [1, 1]], dtype=np.int8),
    ShapeKind.T: np.array([[0, 1, 0], [1, 1, 1]], dtype=np.int8),
    ShapeKind.Z: np.array([[1, 1, 0], [0, 1, 1]], dtype=np.int8),
    ShapeKind.SQUARE3: np.ones((3, 3), dtype=np.int8),
    ShapeKind.SQUARE2: np.ones((2, 2), dtype=np.int8),
}

CATALOG: List[ShapeKind] = list(ShapeKind)

# Cosmetic only; carries no gameplay meaning.
PALETTE = ("cyan", "blue", "orange", "yellow", "green", "purple", "red", "pink")


def as_shape(matrix: Any) -> Shape:
    """Coerce a nested list (or array) into a validated shape matrix.

    Raises ``ValueError`` when the input is not a non-empty rectangular 0/1
    matrix with at least one filled cell.
    """
    try:
        shape = np.asarray(matrix)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"piece matrix is not rectangular: {exc}") from exc
    if shape.ndim != 2 or shape.shape[0] < 1 or shape.shape[1] < 1:
        raise ValueError(f"piece matrix must be 2D and non-empty, got shape {shape.shape}")
    if shape.dtype == np.bool_:
        shape = shape.astype(np.int8)
    if not np.issubdtype(shape.dtype, np.integer):
        raise ValueError(f"piece matrix must hold integers, got {shape.dtype}")
    if not np.isin(shape, (0, 1)).all():
        raise ValueError("piece matrix cells must be 0 or 1")
    if not shape.any():
        raise ValueError("piece matrix has no filled cell")
    return shape.astype(np.int8)


def rotate_cw(shape: Shape) -> Shape:
    """Rotate 90 degrees clockwise: ``out[c][rows - 1 - r] = in[r][c]``."""
    return np.ascontiguousarray(np.rot90(shape, 1, axes=(1, 0)))


def all_rotations(shape: Shape) -> List[Shape]:
    """Structurally distinct rotations, in the order they are produced."""
    rotations: List[Shape] = []
    current = shape
    for _ in range(4):
        if not any(np.array_equal(current, existing) for existing in rotations):
            rotations.append(current)
        current = rotate_cw(current)
    return rotations


def block_count(shape: Shape) -> int:
    return int(np.count_nonzero(shape))


@dataclass(eq=False)
class PieceInstance:
    """A dealt piece: one rotation of a catalog shape plus cosmetic data.

    Only ``matrix`` matters for validation; ``color`` and ``piece_id`` are
    carried for the client.
    """

    kind: ShapeKind
    matrix: Shape
    color: str
    piece_id: str

    def matches(self, matrix: Shape) -> bool:
        return bool(np.array_equal(self.matrix, matrix))

    @property
    def cells(self) -> int:
        return block_count(self.matrix)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.piece_id,
            "kind": self.kind.name,
            "color": self.color,
            "matrix": self.matrix.tolist(),
        }
