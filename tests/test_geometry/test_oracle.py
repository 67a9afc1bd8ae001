"""Tests for the boundary oracle."""

from __future__ import annotations

import numpy as np
import pytest

from philgen.geometry.oracle import (
    RasterOracle,
    WindingOracle,
    find_interior_point,
    inside,
    make_oracle,
    sample_interior_points,
)
from philgen.svg.parser import parse_outline
from tests.conftest import RING_D


def test_square_inside_and_outside(square):
    assert inside(square, (200, 200))
    assert inside(square, (101, 299))
    assert not inside(square, (50, 50))
    assert not inside(square, (301, 200))


def test_outside_bounding_rectangle_is_exterior(circle):
    assert not inside(circle, (-1000, -1000))
    assert not inside(circle, (1e9, 210))


def test_circle_corners_are_exterior(circle):
    # Inside the bounding box but outside the disc
    assert not inside(circle, (115, 115))
    assert inside(circle, (210, 210))


def test_evenodd_hole(ring):
    assert inside(ring, (100, 100))
    assert not inside(ring, (210, 210))


def test_nonzero_same_direction_fills_hole():
    # Both sub-paths wind the same way, so nonzero fills the inner square
    outline = parse_outline(RING_D, fill_rule="nonzero")
    assert inside(outline, (210, 210))


def test_nonzero_opposite_direction_cuts_hole():
    d = "M 60 60 L 360 60 L 360 360 L 60 360 Z M 160 160 L 160 260 L 260 260 L 260 160 Z"
    outline = parse_outline(d, fill_rule="nonzero")
    assert inside(outline, (100, 100))
    assert not inside(outline, (210, 210))


def test_boundary_answers_are_deterministic(square):
    oracle = WindingOracle(square)
    for point in [(100, 200), (300, 300), (200, 100)]:
        first = oracle.inside(point)
        assert all(oracle.inside(point) == first for _ in range(5))


def test_inside_many_matches_inside(circle, rng):
    oracle = WindingOracle(circle)
    pts = rng.uniform(90, 330, size=(200, 2))
    batch = oracle.inside_many(pts)
    single = np.array([oracle.inside(tuple(p)) for p in pts])
    assert np.array_equal(batch, single)


def test_raster_agrees_away_from_boundary(circle, rng):
    winding = WindingOracle(circle)
    raster = RasterOracle(circle, scale=2.0)
    pts = rng.uniform(90, 330, size=(400, 2))
    # Skip the band within 2 units of the circle edge
    dist = np.hypot(pts[:, 0] - 210, pts[:, 1] - 210)
    far = np.abs(dist - 100) > 2
    assert np.array_equal(winding.inside_many(pts[far]), raster.inside_many(pts[far]))


def test_raster_grid_is_read_only(square):
    oracle = RasterOracle(square)
    with pytest.raises(ValueError):
        oracle.grid[0, 0] = True


def test_make_oracle():
    outline = parse_outline("M 0 0 L 10 0 L 10 10 Z")
    assert isinstance(make_oracle(outline, "winding"), WindingOracle)
    assert isinstance(make_oracle(outline, "raster"), RasterOracle)
    with pytest.raises(ValueError):
        make_oracle(outline, "magic")


def test_find_interior_point_is_inside(circle, rng):
    for _ in range(20):
        assert inside(circle, find_interior_point(circle, rng))


def test_find_interior_point_falls_back_to_center(ring, rng):
    # The biased middle rectangle of the ring is entirely hole
    point = find_interior_point(ring, rng, max_attempts=50)
    assert point == ring.center


def test_find_interior_point_is_reproducible(circle):
    a = find_interior_point(circle, np.random.default_rng(7))
    b = find_interior_point(circle, np.random.default_rng(7))
    assert a == b


def test_sample_interior_points(two_blobs, rng):
    pts = sample_interior_points(two_blobs, rng, 50)
    assert pts.shape == (50, 2)
    assert WindingOracle(two_blobs).inside_many(pts).all()


def test_sample_interior_points_zero_count(square, rng):
    assert sample_interior_points(square, rng, 0).shape == (0, 2)
