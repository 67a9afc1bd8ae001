"""Curve generator: parametric polylines around a center.

Every closed-form kind is built as a vectorised function of the parameter
t ∈ [0, 1]. Any random parameters (rose lobe count, noise phases, gear
ratios) are drawn once when the curve is generated and captured in the
function, so ``Curve.evaluate`` reproduces the exact generating curve.
"""

from __future__ import annotations

import enum
import math
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from philgen.svg.serializer import points_to_path_data
from philgen.utils.geometry import rotate_points

Point = tuple[float, float]
OffsetFn = Callable[[NDArray[np.float64]], tuple[NDArray[np.float64], NDArray[np.float64]]]

GOLDEN_ANGLE = math.pi * (3.0 - math.sqrt(5.0))


class CurveKind(str, enum.Enum):
    ARCHIMEDEAN = "archimedean"
    LOGARITHMIC = "logarithmic"
    FERMAT = "fermat"
    LITUUS = "lituus"
    ROSE = "rose"
    PHYLLOTAXIS = "phyllotaxis"
    NOISY = "noisy"
    TIGHT = "tight"
    LOOSE = "loose"
    SINEWAVE = "sinewave"
    LISSAJOUS = "lissajous"
    INVOLUTE = "involute"
    EPITROCHOID = "epitrochoid"
    HYPOTROCHOID = "hypotrochoid"
    BUNDLE = "bundle"
    WALK = "walk"


@dataclass(frozen=True, eq=False)
class Curve:
    """Open polyline with its parameter values.

    ``t`` is monotone non-decreasing in [0, 1]. ``evaluate`` is None for
    kinds without a closed form; ``point_at`` then interpolates linearly.
    """

    kind: str
    points: NDArray[np.float64]
    t: NDArray[np.float64]
    evaluate: Callable[[float], Point] | None = None

    def __len__(self) -> int:
        return len(self.points)

    @property
    def is_empty(self) -> bool:
        return len(self.points) == 0

    def point_at(self, t: float) -> Point:
        if self.evaluate is not None:
            return self.evaluate(t)
        if self.is_empty:
            raise ValueError("Empty curve has no points")
        return (
            float(np.interp(t, self.t, self.points[:, 0])),
            float(np.interp(t, self.t, self.points[:, 1])),
        )

    def path_data(self, precision: int = 2) -> str:
        return points_to_path_data(self.points, precision)


def empty_curve(kind: str) -> Curve:
    return Curve(kind=kind, points=np.empty((0, 2)), t=np.empty(0))


def generate(
    kind: CurveKind | str,
    center: Point,
    max_radius: float,
    turns: float,
    step_count: int,
    rng: np.random.Generator,
) -> Curve:
    """Sample ``step_count`` points of a curve of the given kind.

    Point i has t = i / (step_count - 1) and, for the radial kinds,
    θ = t · turns · 2π. Degenerate input (fewer than two steps or a
    non-positive radius) gives an empty curve.
    """
    kind = CurveKind(kind)
    if step_count < 2 or not (max_radius > 0) or not math.isfinite(max_radius):
        return empty_curve(kind.value)

    t = np.linspace(0.0, 1.0, step_count)
    cx, cy = float(center[0]), float(center[1])

    if kind is CurveKind.WALK:
        offsets = _walk_offsets(step_count, max_radius, rng)
        return Curve(kind=kind.value, points=offsets + (cx, cy), t=t)
    if kind is CurveKind.PHYLLOTAXIS:
        angles = np.arange(step_count) * GOLDEN_ANGLE
        r = max_radius * np.sqrt(t)
        points = np.column_stack([cx + r * np.cos(angles), cy + r * np.sin(angles)])
        return Curve(kind=kind.value, points=points, t=t)

    offset_fn = _BUILDERS[kind](max_radius, turns * 2.0 * math.pi, rng)
    dx, dy = offset_fn(t)
    points = np.column_stack([cx + dx, cy + dy])

    def evaluate(s: float) -> Point:
        ex, ey = offset_fn(np.array([s], dtype=float))
        return (cx + float(ex[0]), cy + float(ey[0]))

    return Curve(kind=kind.value, points=points, t=t, evaluate=evaluate)


def _radial(radius: Callable[[NDArray[np.float64], NDArray[np.float64]], NDArray[np.float64]], sweep: float) -> OffsetFn:
    def offsets(t: NDArray[np.float64]) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        theta = t * sweep
        r = radius(t, theta)
        return r * np.cos(theta), r * np.sin(theta)

    return offsets


def _archimedean(max_r: float, sweep: float, rng: np.random.Generator) -> OffsetFn:
    return _radial(lambda t, th: max_r * t, sweep)


def _logarithmic(max_r: float, sweep: float, rng: np.random.Generator) -> OffsetFn:
    a = min(0.75, max_r * 0.5)
    if sweep <= 0:
        return _radial(lambda t, th: a + (max_r - a) * t, sweep)
    b = math.log(max_r / a) / sweep
    return _radial(lambda t, th: a * np.exp(b * th), sweep)


def _fermat(max_r: float, sweep: float, rng: np.random.Generator) -> OffsetFn:
    return _radial(lambda t, th: max_r * np.sqrt(t), sweep)


def _lituus(max_r: float, sweep: float, rng: np.random.Generator) -> OffsetFn:
    # Swept backwards so the radius grows to max_r at t = 1.
    return _radial(lambda t, th: max_r / np.sqrt((1.0 - t) * abs(sweep) + 1.0), sweep)


def _rose(max_r: float, sweep: float, rng: np.random.Generator) -> OffsetFn:
    k = int(rng.integers(5, 9))
    return _radial(lambda t, th: t * max_r * 1.05 * (0.5 + 0.5 * np.abs(np.sin(k * th))), sweep)


def _noisy(max_r: float, sweep: float, rng: np.random.Generator) -> OffsetFn:
    p1, p2 = rng.uniform(0.0, 2.0 * math.pi, size=2)

    def radius(t: NDArray[np.float64], th: NDArray[np.float64]) -> NDArray[np.float64]:
        wobble = 0.3 * np.sin(t * 6.0 + p1) + 0.2 * np.sin(t * 11.3 + p2)
        return t * max_r * (1.0 + wobble * 0.2)

    return _radial(radius, sweep)


def _tight(max_r: float, sweep: float, rng: np.random.Generator) -> OffsetFn:
    return _radial(lambda t, th: t * max_r * 0.85, sweep)


def _loose(max_r: float, sweep: float, rng: np.random.Generator) -> OffsetFn:
    return _radial(lambda t, th: t * max_r * 1.15, sweep)


def _sinewave(max_r: float, sweep: float, rng: np.random.Generator) -> OffsetFn:
    return _radial(lambda t, th: t * max_r * (1.0 + 0.12 * np.sin(th * 2.3)), sweep)


def _lissajous(max_r: float, sweep: float, rng: np.random.Generator) -> OffsetFn:
    n = int(rng.integers(6, 11))
    m = int(rng.integers(3, 6))

    def radius(t: NDArray[np.float64], th: NDArray[np.float64]) -> NDArray[np.float64]:
        mod = 0.45 + 0.40 * np.sin(n * th + m * 0.7)
        return max_r * 0.82 * t * (0.65 + 0.35 * mod)

    return _radial(radius, sweep)


def _bundle(max_r: float, sweep: float, rng: np.random.Generator) -> OffsetFn:
    def radius(t: NDArray[np.float64], th: NDArray[np.float64]) -> NDArray[np.float64]:
        wobble = 0.12 * np.sin(7.0 * th) + 0.08 * np.cos(11.0 * th)
        return t * max_r * 0.85 * (1.0 + wobble)

    return _radial(radius, sweep)


def _involute(max_r: float, sweep: float, rng: np.random.Generator) -> OffsetFn:
    span = sweep * 0.9
    # Scaled so the last point sits at max_r.
    a = max_r / math.sqrt(1.0 + span * span)

    def offsets(t: NDArray[np.float64]) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        th = t * span
        return a * (np.cos(th) + th * np.sin(th)), a * (np.sin(th) - th * np.cos(th))

    return offsets


def _epitrochoid(max_r: float, sweep: float, rng: np.random.Generator) -> OffsetFn:
    u1, u2, u3 = rng.random(3)
    big = max_r * 0.28 * (1.0 + 0.2 * u1)
    small = big * (0.30 + 0.25 * u2)
    d = small * (0.8 + 0.6 * u3)
    k = (big + small) / small

    def offsets(t: NDArray[np.float64]) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        th = t * sweep
        return (
            (big + small) * np.cos(th) - d * np.cos(k * th),
            (big + small) * np.sin(th) - d * np.sin(k * th),
        )

    return offsets


def _hypotrochoid(max_r: float, sweep: float, rng: np.random.Generator) -> OffsetFn:
    u1, u2, u3 = rng.random(3)
    big = max_r * 0.32 * (1.0 + 0.2 * u1)
    small = big * (0.32 + 0.25 * u2)
    d = small * (0.7 + 0.5 * u3)
    k = (big - small) / small

    def offsets(t: NDArray[np.float64]) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        th = t * sweep
        return (
            (big - small) * np.cos(th) + d * np.cos(k * th),
            (big - small) * np.sin(th) - d * np.sin(k * th),
        )

    return offsets


def _walk_offsets(step_count: int, max_r: float, rng: np.random.Generator) -> NDArray[np.float64]:
    """Jittered walk drifting outwards; never farther than max_r from the start."""
    heading = rng.uniform(0.0, 2.0 * math.pi)
    angles = heading + np.concatenate([[0.0], np.cumsum(rng.normal(0.0, 0.35, step_count - 1))])
    r = np.linspace(0.0, max_r, step_count)
    return np.column_stack([r * np.cos(angles), r * np.sin(angles)])


_BUILDERS: dict[CurveKind, Callable[[float, float, np.random.Generator], OffsetFn]] = {
    CurveKind.ARCHIMEDEAN: _archimedean,
    CurveKind.LOGARITHMIC: _logarithmic,
    CurveKind.FERMAT: _fermat,
    CurveKind.LITUUS: _lituus,
    CurveKind.ROSE: _rose,
    CurveKind.NOISY: _noisy,
    CurveKind.TIGHT: _tight,
    CurveKind.LOOSE: _loose,
    CurveKind.SINEWAVE: _sinewave,
    CurveKind.LISSAJOUS: _lissajous,
    CurveKind.INVOLUTE: _involute,
    CurveKind.EPITROCHOID: _epitrochoid,
    CurveKind.HYPOTROCHOID: _hypotrochoid,
    CurveKind.BUNDLE: _bundle,
}


def rotate_curve(curve: Curve, center: Point, angle: float) -> Curve:
    """The same curve turned ``angle`` radians about ``center``."""
    if curve.is_empty:
        return curve
    points = rotate_points(curve.points, center, angle)
    evaluate = None
    if curve.evaluate is not None:
        inner = curve.evaluate

        def evaluate(s: float) -> Point:
            x, y = rotate_points(np.array([inner(s)]), center, angle)[0]
            return (float(x), float(y))

    return Curve(kind=curve.kind, points=points, t=curve.t, evaluate=evaluate)
