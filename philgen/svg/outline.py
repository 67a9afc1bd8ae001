"""Outline: immutable closed region with its polygonal approximation."""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property

import numpy as np
from numpy.typing import NDArray
from shapely.geometry import Polygon
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union

from philgen.utils.geometry import arc_lengths, bbox, interpolate_along, vertex_normals, winding_direction

FILL_RULES = ("nonzero", "evenodd")

# Rings with less than this absolute area are dropped when building polygons.
_MIN_RING_AREA = 1e-9


@dataclass(frozen=True, eq=False)
class Outline:
    """A closed planar region.

    ``rings`` are closed N×2 arrays (first point repeated at the end), one
    per sub-path, sampled finely enough that they stand in for the exact
    curve at the clipping tolerance. Arrays are frozen on construction.
    """

    d: str
    rings: tuple[NDArray[np.float64], ...]
    fill_rule: str = "nonzero"
    view_box: tuple[float, float, float, float] | None = None

    def __post_init__(self) -> None:
        if self.fill_rule not in FILL_RULES:
            raise ValueError(f"Unknown fill rule: {self.fill_rule!r}")
        for ring in self.rings:
            ring.setflags(write=False)

    @cached_property
    def bounds(self) -> tuple[float, float, float, float]:
        """Bounding rectangle as (x, y, width, height)."""
        if not self.rings:
            return (0.0, 0.0, 0.0, 0.0)
        x0, y0, x1, y1 = bbox(np.vstack(self.rings))
        return (x0, y0, x1 - x0, y1 - y0)

    @property
    def center(self) -> tuple[float, float]:
        x, y, w, h = self.bounds
        return (x + w / 2, y + h / 2)

    @property
    def is_empty(self) -> bool:
        return not self.rings

    @cached_property
    def polygon(self) -> BaseGeometry:
        """Shapely geometry of the filled region, honouring the fill rule."""
        return _build_polygon(self.rings, self.fill_rule)

    @property
    def area(self) -> float:
        return float(self.polygon.area)

    @cached_property
    def _ring_lengths(self) -> NDArray[np.float64]:
        return np.array([arc_lengths(r)[-1] if len(r) else 0.0 for r in self.rings])

    @property
    def boundary_length(self) -> float:
        return float(np.sum(self._ring_lengths))

    def boundary_samples(self, count: int) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Evenly spaced points along the whole boundary plus unit normals there.

        Samples are distributed across rings in proportion to ring length
        and placed at the midpoints of equal arc-length intervals.
        """
        total = self.boundary_length
        if count <= 0 or total <= 0:
            return np.empty((0, 2)), np.empty((0, 2))

        positions = (np.arange(count) + 0.5) / count * total
        offsets = np.concatenate([[0.0], np.cumsum(self._ring_lengths)])
        points: list[NDArray[np.float64]] = []
        normals: list[NDArray[np.float64]] = []
        for i, ring in enumerate(self.rings):
            mask = (positions >= offsets[i]) & (positions < offsets[i + 1])
            if not np.any(mask):
                continue
            local = positions[mask] - offsets[i]
            points.append(interpolate_along(ring, local))
            normals.append(_normals_at(ring, local))
        if not points:
            return np.empty((0, 2)), np.empty((0, 2))
        return np.vstack(points), np.vstack(normals)


def _normals_at(ring: NDArray[np.float64], distances: NDArray[np.float64]) -> NDArray[np.float64]:
    """Left-hand unit normals of the ring at arc-length positions."""
    cum = arc_lengths(ring)
    normals = vertex_normals(ring)
    idx = np.clip(np.searchsorted(cum, distances, side="right") - 1, 0, len(normals) - 1)
    return normals[idx]


def _build_polygon(rings: tuple[NDArray[np.float64], ...], fill_rule: str) -> BaseGeometry:
    pieces: list[tuple[BaseGeometry, int]] = []
    for ring in rings:
        if len(ring) < 4:
            continue
        poly = Polygon(ring)
        if not poly.is_valid:
            poly = poly.buffer(0)
        if poly.is_empty or poly.area < _MIN_RING_AREA:
            continue
        pieces.append((poly, winding_direction(ring)))

    if not pieces:
        return Polygon()

    if fill_rule == "evenodd":
        geom = pieces[0][0]
        for poly, _ in pieces[1:]:
            geom = geom.symmetric_difference(poly)
        return geom

    # nonzero: rings wound like the largest one add area; opposite rings
    # cut holes where they sit inside it.
    dominant = max(pieces, key=lambda p: p[0].area)[1]
    geom = unary_union([poly for poly, sign in pieces if sign == dominant or sign == 0])
    for poly, sign in pieces:
        if sign == dominant or sign == 0:
            continue
        if geom.contains(poly.representative_point()):
            geom = geom.difference(poly)
        else:
            geom = geom.union(poly)
    return geom
