"""Boundary oracle: point-in-region membership against an Outline.

Two interchangeable techniques sit behind the same interface:

- WindingOracle: analytic winding-number test over the outline's rings.
- RasterOracle: coverage grid rasterized once at the outline's bounding
  resolution, sampled per point.

Both are pure functions of (outline, point): identical arguments always
give identical answers, including for points exactly on the boundary.
"""

from __future__ import annotations

import logging
import math
from typing import Protocol

import numpy as np
from numpy.typing import NDArray

from philgen.svg.outline import Outline
from philgen.utils.geometry import winding_numbers
from philgen.utils.rasterizer import grid_shape, rasterize_rings, sample_grid

logger = logging.getLogger(__name__)

Point = tuple[float, float]

ORACLE_METHODS = ("winding", "raster")

# Default biased sub-rectangle for interior point search, as fractions of
# the bounding rectangle: the middle 30% on both axes.
DEFAULT_BIAS = (0.35, 0.35, 0.65, 0.65)

# Candidates drawn per batch when searching for interior points.
_CANDIDATE_BATCH = 32


class BoundaryOracle(Protocol):
    outline: Outline

    def inside(self, point: Point) -> bool: ...

    def inside_many(self, points: NDArray[np.float64]) -> NDArray[np.bool_]: ...


class _BaseOracle:
    def __init__(self, outline: Outline) -> None:
        self.outline = outline

    def inside(self, point: Point) -> bool:
        return bool(self.inside_many(np.array([point], dtype=float))[0])

    def inside_many(self, points: NDArray[np.float64]) -> NDArray[np.bool_]:
        raise NotImplementedError

    def _in_bounds(self, pts: NDArray[np.float64]) -> NDArray[np.bool_]:
        x, y, w, h = self.outline.bounds
        return (pts[:, 0] >= x) & (pts[:, 0] <= x + w) & (pts[:, 1] >= y) & (pts[:, 1] <= y + h)


class WindingOracle(_BaseOracle):
    """Analytic test: nonzero → total winding ≠ 0, evenodd → total winding odd."""

    def inside_many(self, points: NDArray[np.float64]) -> NDArray[np.bool_]:
        pts = np.atleast_2d(np.asarray(points, dtype=float))
        result = np.zeros(len(pts), dtype=bool)
        if self.outline.is_empty or len(pts) == 0:
            return result

        in_box = self._in_bounds(pts)
        if not np.any(in_box):
            return result

        candidates = pts[in_box]
        total = np.zeros(len(candidates), dtype=np.int64)
        for ring in self.outline.rings:
            total += winding_numbers(candidates, ring)

        if self.outline.fill_rule == "evenodd":
            result[in_box] = (total % 2) != 0
        else:
            result[in_box] = total != 0
        return result


class RasterOracle(_BaseOracle):
    """Coverage grid at ``scale`` pixels per unit over the bounding rectangle."""

    def __init__(self, outline: Outline, scale: float = 1.0) -> None:
        super().__init__(outline)
        if scale <= 0:
            raise ValueError("Raster scale must be positive")
        self.scale = scale
        x, y, w, h = outline.bounds
        self.origin = (math.floor(x), math.floor(y))
        shape = grid_shape(x + w - self.origin[0], y + h - self.origin[1], scale)
        self._grid = rasterize_rings(outline.rings, self.origin, shape, scale, outline.fill_rule)
        self._grid.setflags(write=False)

    @property
    def grid(self) -> NDArray[np.bool_]:
        return self._grid

    def inside_many(self, points: NDArray[np.float64]) -> NDArray[np.bool_]:
        pts = np.atleast_2d(np.asarray(points, dtype=float))
        if self.outline.is_empty or len(pts) == 0:
            return np.zeros(len(pts), dtype=bool)
        return sample_grid(self._grid, self.origin, pts, self.scale) & self._in_bounds(pts)


def make_oracle(outline: Outline, method: str = "winding", *, raster_scale: float = 1.0) -> BoundaryOracle:
    """Build the oracle named by configuration."""
    if method == "winding":
        return WindingOracle(outline)
    if method == "raster":
        return RasterOracle(outline, scale=raster_scale)
    raise ValueError(f"Unknown oracle method: {method!r} (expected one of {ORACLE_METHODS})")


def inside(outline: Outline, point: Point) -> bool:
    """True if ``point`` lies inside ``outline`` under its fill rule."""
    return WindingOracle(outline).inside(point)


def find_interior_point(
    outline: Outline,
    rng: np.random.Generator,
    bias: tuple[float, float, float, float] = DEFAULT_BIAS,
    max_attempts: int = 800,
    oracle: BoundaryOracle | None = None,
) -> Point:
    """First interior candidate drawn from the biased sub-rectangle.

    Falls back to the bounding-rectangle center when no candidate lands
    inside within ``max_attempts``. The fallback is not an error.
    """
    oracle = oracle or WindingOracle(outline)
    x, y, w, h = outline.bounds
    fx0, fy0, fx1, fy1 = bias

    remaining = max(0, max_attempts)
    while remaining > 0:
        n = min(_CANDIDATE_BATCH, remaining)
        remaining -= n
        xs = x + w * (fx0 + rng.random(n) * (fx1 - fx0))
        ys = y + h * (fy0 + rng.random(n) * (fy1 - fy0))
        candidates = np.column_stack([xs, ys])
        hits = np.flatnonzero(oracle.inside_many(candidates))
        if len(hits):
            cx, cy = candidates[hits[0]]
            return (float(cx), float(cy))

    logger.debug("No interior point after %d attempts; using bounds center", max_attempts)
    return outline.center


def sample_interior_points(
    outline: Outline,
    rng: np.random.Generator,
    count: int,
    max_attempts_per_point: int = 120,
    oracle: BoundaryOracle | None = None,
    region: tuple[float, float, float, float] | None = None,
) -> NDArray[np.float64]:
    """Up to ``count`` uniformly drawn interior points (rejection sampling).

    ``region`` is an (x, y, width, height) rectangle to draw from; it
    defaults to the outline's bounding rectangle.
    """
    if count <= 0 or outline.is_empty:
        return np.empty((0, 2))
    oracle = oracle or WindingOracle(outline)
    x, y, w, h = region or outline.bounds

    found: list[NDArray[np.float64]] = []
    have = 0
    budget = count * max(1, max_attempts_per_point)
    while have < count and budget > 0:
        n = min(budget, max(_CANDIDATE_BATCH, (count - have) * 4))
        budget -= n
        candidates = np.column_stack([x + rng.random(n) * w, y + rng.random(n) * h])
        accepted = candidates[oracle.inside_many(candidates)]
        if len(accepted):
            found.append(accepted[: count - have])
            have += len(found[-1])

    if not found:
        return np.empty((0, 2))
    return np.vstack(found)
