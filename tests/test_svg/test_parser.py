"""Tests for the outline parser and the Outline model."""

from __future__ import annotations

import math

import numpy as np
import pytest

from philgen.errors import OutlineError
from philgen.svg.parser import parse_outline, parse_view_box
from tests.conftest import CIRCLE_D, SQUARE_D, TWO_BLOBS_D


def test_parse_square():
    outline = parse_outline(SQUARE_D)
    assert len(outline.rings) == 1
    assert outline.bounds == pytest.approx((100, 100, 200, 200))
    assert outline.area == pytest.approx(40_000)
    assert outline.center == pytest.approx((200, 200))


def test_rings_are_closed_and_frozen():
    outline = parse_outline(CIRCLE_D)
    ring = outline.rings[0]
    assert np.array_equal(ring[0], ring[-1])
    with pytest.raises(ValueError):
        ring[0, 0] = 0.0


def test_circle_sampling_density():
    outline = parse_outline(CIRCLE_D, sample_distance=0.5)
    ring = outline.rings[0]
    steps = np.hypot(*np.diff(ring, axis=0).T)
    assert steps.max() < 0.6
    assert outline.area == pytest.approx(math.pi * 100**2, rel=1e-3)


def test_compound_path_gives_one_ring_per_subpath():
    outline = parse_outline(TWO_BLOBS_D)
    assert len(outline.rings) == 2
    assert outline.area == pytest.approx(20_000)


def test_boundary_samples():
    outline = parse_outline(SQUARE_D)
    points, normals = outline.boundary_samples(40)
    assert points.shape == (40, 2)
    assert np.allclose(np.hypot(normals[:, 0], normals[:, 1]), 1.0)
    assert outline.boundary_length == pytest.approx(800)


def test_view_box():
    outline = parse_outline(SQUARE_D, view_box="0 0 420 420")
    assert outline.view_box == (0, 0, 420, 420)
    assert parse_view_box("0,0,420,420") == (0, 0, 420, 420)
    assert parse_view_box(None) is None


@pytest.mark.parametrize("text", ["0 0 420", "0 0 a b", "0 0 -5 10"])
def test_bad_view_box(text):
    with pytest.raises(OutlineError):
        parse_view_box(text)


@pytest.mark.parametrize("d", ["", "   ", "M 10 10", "M 0 0 L 0.2 0"])
def test_bad_path_data(d):
    with pytest.raises(OutlineError):
        parse_outline(d)


def test_unknown_fill_rule():
    with pytest.raises(OutlineError):
        parse_outline(SQUARE_D, fill_rule="winding")
