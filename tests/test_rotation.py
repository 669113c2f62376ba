import pytest

from linmat import (
    Matrix,
    ShapeError,
    Vec,
    get_rotation_matrix,
    get_rotation_matrix_axes,
    get_transform_matrix,
    transform_point,
)


def test_rotation_matrix_about_diagonal_axis():
    vec1 = Vec(3, [1, 0, 0])
    R = get_rotation_matrix(Vec(3, [1, 1, 0]).unit(), 180)
    vec2 = Vec.to_vec(3, R.post_mul(vec1))
    assert vec2.xyz == pytest.approx((0, 1, 0), abs=1e-12)


def test_rotation_matrix_about_z():
    R = get_rotation_matrix(Vec(3, [0, 0, 1]), 90)
    assert R.allclose(Matrix([3, 3], [0, -1, 0, 1, 0, 0, 0, 0, 1]), atol=1e-12)


def test_rotation_matrix_is_orthonormal():
    R = get_rotation_matrix(Vec(3, [1, -2, 0.5]).to_unit(), 37.5)
    assert R.post_mul(R.to_transposed()).allclose(Matrix.identity(3), atol=1e-12)
    assert R.det() == pytest.approx(1.0)


def test_zero_angle_is_identity():
    R = get_rotation_matrix(Vec(3, [0, 1, 0]), 0)
    assert R.allclose(Matrix.identity(3))


def test_composed_rotation():
    R = get_rotation_matrix_axes(0, 90, 90)
    x = Vec.to_vec(3, R @ Vec(3, [1, 0, 0]))
    z = Vec.to_vec(3, R @ Vec(3, [0, 0, 1]))
    assert x.xyz == pytest.approx((0, 1, 0), abs=1e-12)
    assert z.xyz == pytest.approx((1, 0, 0), abs=1e-12)


def test_composed_rotation_order():
    rx = get_rotation_matrix(Vec(3, [1, 0, 0]), 30)
    ry = get_rotation_matrix(Vec(3, [0, 1, 0]), -45)
    rz = get_rotation_matrix(Vec(3, [0, 0, 1]), 60)
    assert get_rotation_matrix_axes(30, -45, 60).allclose(rx @ ry @ rz)


def test_transform_matrix_layout():
    T = get_transform_matrix(Vec(3, [1, 2, 3]), Matrix.identity(3).mul_scalar(2))
    assert T == Matrix([4, 4], [
        2, 0, 0, 1,
        0, 2, 0, 2,
        0, 0, 2, 3,
        0, 0, 0, 1,
    ])


def test_transform_matrix_with_rotation():
    rotation = Matrix([3, 3], range(9))
    T = get_transform_matrix(Vec(3, [-1, -2, -3]), rotation)
    assert T.slice((0, 3), (0, 3)) == rotation
    assert T.slice(3).data.tolist() == [0, 0, 0, 1]


def test_transform_matrix_rejects_bad_rotation():
    with pytest.raises(ShapeError):
        get_transform_matrix(Vec(3, [0, 0, 0]), Matrix.identity(4))
    with pytest.raises(ShapeError):
        get_transform_matrix(Vec(3, [0, 0, 0]), Matrix([3, 3, 1]))


def test_transform_point():
    T = get_transform_matrix(Vec(3, [1, 2, 3]), Matrix.identity(3))
    assert transform_point(T, Vec(3, [1, 1, 1])) == Vec(3, [2, 3, 4])

    R = get_rotation_matrix(Vec(3, [0, 0, 1]), 90)
    T = get_transform_matrix(Vec(3, [1, 0, 0]), R)
    moved = transform_point(T, Vec(3, [1, 0, 0]))
    assert moved.xyz == pytest.approx((1, 1, 0), abs=1e-12)


def test_transform_point_rejects_bad_transform():
    with pytest.raises(ShapeError):
        transform_point(Matrix.identity(3), Vec(3, [1, 2, 3]))
