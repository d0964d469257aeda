import numpy as np

from brikbrik.game import BASE_SHAPES, PieceInstance, ShapeKind


def make_piece(kind: ShapeKind, matrix=None, piece_id: str = "p") -> PieceInstance:
    shape = BASE_SHAPES[kind] if matrix is None else np.array(matrix, dtype=np.int8)
    return PieceInstance(kind=kind, matrix=shape.copy(), color="red", piece_id=piece_id)


def deal(session, *kinds):
    """Replace the session's slots with the given shapes (None for an empty slot)."""
    session.pieces = [
        make_piece(kind, piece_id=f"p{i}") if kind is not None else None
        for i, kind in enumerate(kinds)
    ]
