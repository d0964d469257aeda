import numpy as np
import pytest

from brikbrik.game import BASE_SHAPES, PieceInstance, ShapeKind, all_rotations, as_shape, rotate_cw


def test_catalog_has_eleven_shapes():
    assert len(BASE_SHAPES) == 11
    for shape in BASE_SHAPES.values():
        assert shape.ndim == 2
        assert shape.any()


@pytest.mark.parametrize("kind", list(ShapeKind))
def test_four_rotations_return_original(kind):
    shape = BASE_SHAPES[kind]
    rotated = shape
    for _ in range(4):
        rotated = rotate_cw(rotated)
    assert np.array_equal(rotated, shape)


@pytest.mark.parametrize(
    "kind,expected",
    [
        (ShapeKind.SQUARE3, 1),
        (ShapeKind.SQUARE2, 1),
        (ShapeKind.I1, 1),
        (ShapeKind.I2, 2),
        (ShapeKind.I3, 2),
        (ShapeKind.I4, 2),
        (ShapeKind.Z, 2),
        (ShapeKind.L_LARGE, 4),
        (ShapeKind.L_SMALL, 4),
        (ShapeKind.L_TALL, 4),
        (ShapeKind.T, 4),
    ],
)
def test_distinct_rotation_counts(kind, expected):
    assert len(all_rotations(BASE_SHAPES[kind])) == expected


def test_rotate_cw_maps_cells_clockwise():
    shape = np.array([[1, 0], [1, 0], [1, 1]], dtype=np.int8)
    rotated = rotate_cw(shape)
    assert rotated.shape == (2, 3)
    assert rotated.tolist() == [[1, 1, 1], [1, 0, 0]]


def test_all_rotations_keeps_first_produced_order():
    rotations = all_rotations(BASE_SHAPES[ShapeKind.I4])
    assert rotations[0].tolist() == [[1, 1, 1, 1]]
    assert rotations[1].tolist() == [[1], [1], [1], [1]]


def test_piece_identity_is_structural():
    a = PieceInstance(ShapeKind.T, BASE_SHAPES[ShapeKind.T], "red", "a")
    b = PieceInstance(ShapeKind.T, BASE_SHAPES[ShapeKind.T].copy(), "blue", "b")
    assert a.matches(b.matrix)
    assert not a.matches(rotate_cw(b.matrix))
    assert a.cells == 4


def test_piece_to_dict():
    piece = PieceInstance(ShapeKind.L_SMALL, BASE_SHAPES[ShapeKind.L_SMALL], "pink", "id-1")
    assert piece.to_dict() == {
        "id": "id-1",
        "kind": "L_SMALL",
        "color": "pink",
        "matrix": [[1, 0], [1, 1]],
    }


@pytest.mark.parametrize("bad", [[], [[]], [[0, 0]], [[1, 2]], [[1, 1], [1]], [1, 1], [["a"]]])
def test_as_shape_rejects_malformed(bad):
    with pytest.raises(ValueError):
        as_shape(bad)


def test_as_shape_accepts_nested_lists():
    shape = as_shape([[0, 1, 0], [1, 1, 1]])
    assert shape.dtype == np.int8
    assert np.array_equal(shape, BASE_SHAPES[ShapeKind.T])
