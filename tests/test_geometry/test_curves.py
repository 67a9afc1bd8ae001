"""Tests for the curve generator."""

from __future__ import annotations

import math

import numpy as np
import pytest

from philgen.geometry.curves import CurveKind, generate, rotate_curve

RADIAL_KINDS = [
    CurveKind.ARCHIMEDEAN,
    CurveKind.FERMAT,
    CurveKind.TIGHT,
    CurveKind.LOGARITHMIC,
    CurveKind.LITUUS,
]


@pytest.mark.parametrize("kind", list(CurveKind))
def test_every_kind_generates(kind, rng):
    curve = generate(kind, (210, 210), 100, 3.0, 200, rng)
    assert len(curve) == 200
    assert curve.points.shape == (200, 2)
    assert np.all(np.isfinite(curve.points))


@pytest.mark.parametrize("kind", list(CurveKind))
def test_parameter_is_monotone(kind, rng):
    curve = generate(kind, (0, 0), 50, 2.0, 64, rng)
    assert curve.t[0] == 0.0
    assert curve.t[-1] == 1.0
    assert np.all(np.diff(curve.t) >= 0)


def test_archimedean_starts_at_center_and_ends_at_radius(rng):
    curve = generate(CurveKind.ARCHIMEDEAN, (10, 20), 80, 3.0, 121, rng)
    assert np.allclose(curve.points[0], (10, 20))
    assert math.dist(curve.points[-1], (10, 20)) == pytest.approx(80)


@pytest.mark.parametrize("kind", RADIAL_KINDS)
def test_radial_kinds_stay_near_radius(kind, rng):
    curve = generate(kind, (0, 0), 100, 3.0, 300, rng)
    assert np.max(np.hypot(curve.points[:, 0], curve.points[:, 1])) <= 100 * 1.05 + 1e-9


def test_logarithmic_reaches_max_radius(rng):
    curve = generate(CurveKind.LOGARITHMIC, (0, 0), 100, 3.2, 400, rng)
    assert math.hypot(*curve.points[-1]) == pytest.approx(100)


def test_walk_stays_within_radius(rng):
    curve = generate(CurveKind.WALK, (50, 50), 20, 1.0, 12, rng)
    dist = np.hypot(curve.points[:, 0] - 50, curve.points[:, 1] - 50)
    assert np.all(dist <= 20 + 1e-9)
    assert curve.evaluate is None


def test_evaluate_reproduces_samples(rng):
    curve = generate(CurveKind.ROSE, (210, 210), 90, 3.0, 50, rng)
    for i in (0, 17, 49):
        assert np.allclose(curve.point_at(float(curve.t[i])), curve.points[i])


def test_point_at_interpolates_without_closed_form(rng):
    curve = generate(CurveKind.PHYLLOTAXIS, (0, 0), 30, 1.0, 10, rng)
    mid = curve.point_at((curve.t[3] + curve.t[4]) / 2)
    assert np.allclose(mid, (curve.points[3] + curve.points[4]) / 2)


def test_same_seed_same_curve():
    a = generate(CurveKind.EPITROCHOID, (0, 0), 60, 3.0, 100, np.random.default_rng(5))
    b = generate(CurveKind.EPITROCHOID, (0, 0), 60, 3.0, 100, np.random.default_rng(5))
    assert np.array_equal(a.points, b.points)


def test_degenerate_input_gives_empty_curve(rng):
    assert generate(CurveKind.ARCHIMEDEAN, (0, 0), 0, 3.0, 100, rng).is_empty
    assert generate(CurveKind.ARCHIMEDEAN, (0, 0), 50, 3.0, 1, rng).is_empty


def test_unknown_kind_rejected(rng):
    with pytest.raises(ValueError):
        generate("zigzag", (0, 0), 10, 1.0, 10, rng)


def test_kind_accepts_string(rng):
    assert generate("fermat", (0, 0), 10, 1.0, 10, rng).kind == "fermat"


def test_rotate_curve_keeps_distances(rng):
    curve = generate(CurveKind.SINEWAVE, (100, 100), 40, 2.0, 80, rng)
    turned = rotate_curve(curve, (100, 100), math.pi / 3)
    before = np.hypot(curve.points[:, 0] - 100, curve.points[:, 1] - 100)
    after = np.hypot(turned.points[:, 0] - 100, turned.points[:, 1] - 100)
    assert np.allclose(before, after)
    assert np.allclose(turned.point_at(float(turned.t[10])), turned.points[10])


def test_path_data(rng):
    curve = generate(CurveKind.ARCHIMEDEAN, (0, 0), 10, 1.0, 3, rng)
    d = curve.path_data()
    assert d.startswith("M 0 0 L")
    assert d.count("L") == 2


@pytest.mark.parametrize("kind", list(CurveKind))
def test_negative_turns_stay_finite(kind, rng):
    curve = generate(kind, (0, 0), 40, -1.0, 50, rng)
    assert np.all(np.isfinite(curve.points))


def test_lituus_negative_turns_mirrors_radius(rng):
    forward = generate(CurveKind.LITUUS, (0, 0), 40, 1.0, 50, rng)
    backward = generate(CurveKind.LITUUS, (0, 0), 40, -1.0, 50, rng)
    assert np.allclose(np.hypot(*forward.points.T), np.hypot(*backward.points.T))
