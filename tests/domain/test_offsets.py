import math

import numpy as np
import pytest

from wheelpath.domain.entities.geography import PINNED, from_points, pin, to_xy
from wheelpath.domain.errors import InvalidGeometryError
from wheelpath.domain.mechanics.mechanics_offsets import normals, offset
from wheelpath.domain.mechanics.mechanics_resamplers import resample


@pytest.fixture
def s_curve():
    th = np.linspace(0.0, 2 * math.pi, 60)
    raw = from_points(zip(th, np.sin(th)))
    center, _ = resample(raw, 0.1)
    return center


def test_offsets_are_symmetric_and_at_half_width(s_curve):
    left, right = offset(s_curve, 0.6)
    c, l, r = to_xy(s_curve), to_xy(left), to_xy(right)
    assert np.allclose(np.hypot(*(l - c).T), 0.3)
    assert np.allclose(np.hypot(*(r - c).T), 0.3)
    # center is the midpoint, so left, center, right are collinear
    assert np.allclose((l + r) / 2.0, c)


def test_normal_is_perpendicular_to_travel(s_curve):
    c = to_xy(s_curve)
    n = np.array(normals(s_curve))
    d = np.diff(c, axis=0)
    assert np.allclose((d * n[:-1]).sum(axis=1), 0.0, atol=1e-12)
    # final point uses the backward difference
    assert np.allclose(n[-1], n[-2])


def test_left_is_left_of_travel_direction():
    center = from_points([(0.0, 0.0), (1.0, 0.0), (2.0, 0.0)])
    left, right = offset(center, 1.0)
    assert all(p.y == pytest.approx(0.5) for p in left)
    assert all(p.y == pytest.approx(-0.5) for p in right)

    going_north = from_points([(0.0, 0.0), (0.0, 1.0)])
    left, _ = offset(going_north, 2.0)
    assert left[0].x == pytest.approx(-1.0)


def test_offset_keeps_tags_and_payloads():
    center = pin(from_points([(0.0, 0.0), (1.0, 0.0), (2.0, 1.0)]), [-1])
    left, right = offset(center, 0.5)
    assert left[-1].tag == right[-1].tag == PINNED
    assert left[0].tag == 0


def test_repeated_point_reuses_previous_normal():
    center = from_points([(0.0, 0.0), (1.0, 0.0), (1.0, 0.0), (2.0, 0.0)])
    n = normals(center)
    assert n[1] == n[0]
    assert all(np.isfinite(v).all() for v in np.array(n))


def test_leading_repeat_looks_ahead_for_direction():
    center = from_points([(0.0, 0.0), (0.0, 0.0), (0.0, 3.0)])
    assert normals(center)[0] == pytest.approx((-1.0, 0.0))


def test_no_direction_at_all_is_rejected():
    with pytest.raises(InvalidGeometryError):
        offset(from_points([(1.0, 1.0), (1.0, 1.0)]), 0.5)
    with pytest.raises(InvalidGeometryError):
        offset(from_points([(1.0, 1.0)]), 0.5)
