"""Region clipper: keep the parts of a curve that lie inside an outline.

All samples are classified in one batch; each interior run becomes a
Segment. Where a run begins or ends between two samples, the crossing is
located by bisection on the curve parameter and the interior side of the
final bracket is used, so a Segment never holds an exterior point.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from philgen.geometry.curves import Curve, Point
from philgen.geometry.oracle import BoundaryOracle, WindingOracle
from philgen.svg.outline import Outline
from philgen.svg.serializer import points_to_path_data

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Segment:
    """A contiguous interior piece of a curve."""

    points: NDArray[np.float64]
    t: NDArray[np.float64]
    enters_boundary: bool = False
    exits_boundary: bool = False

    def __len__(self) -> int:
        return len(self.points)

    @property
    def t_start(self) -> float:
        return float(self.t[0])

    @property
    def t_end(self) -> float:
        return float(self.t[-1])

    def path_data(self, precision: int = 2) -> str:
        return points_to_path_data(self.points, precision)


def clip(
    outline: Outline,
    curve: Curve,
    tolerance: float = 0.25,
    *,
    max_iterations: int = 24,
    min_points: int = 2,
    oracle: BoundaryOracle | None = None,
) -> list[Segment]:
    """Intersect ``curve`` with ``outline``.

    Segments come back in increasing t. Runs shorter than ``min_points``
    points (after snapping) are dropped; grazing contacts yield short
    Segments, not errors.
    """
    if curve.is_empty or outline.is_empty:
        return []
    oracle = oracle or WindingOracle(outline)

    flags = oracle.inside_many(curve.points)
    padded = np.concatenate([[0], flags.astype(np.int8), [0]])
    edges = np.flatnonzero(np.diff(padded))
    n = len(curve)

    segments: list[Segment] = []
    for start, end in zip(edges[0::2], edges[1::2]):
        pts = [tuple(p) for p in curve.points[start:end]]
        ts = list(curve.t[start:end])

        enters = start > 0
        if enters:
            p, s = _bisect(curve, oracle, start, start - 1, tolerance, max_iterations)
            if s < ts[0]:
                pts.insert(0, p)
                ts.insert(0, s)

        exits = end < n
        if exits:
            p, s = _bisect(curve, oracle, end - 1, end, tolerance, max_iterations)
            if s > ts[-1]:
                pts.append(p)
                ts.append(s)

        if len(pts) < min_points:
            logger.debug("Dropping %d-point run at t=%.4f", len(pts), ts[0])
            continue
        segments.append(
            Segment(
                points=np.asarray(pts, dtype=float),
                t=np.asarray(ts, dtype=float),
                enters_boundary=enters,
                exits_boundary=exits,
            )
        )
    return segments


def _bisect(
    curve: Curve,
    oracle: BoundaryOracle,
    inside_idx: int,
    outside_idx: int,
    tolerance: float,
    max_iterations: int,
) -> tuple[Point, float]:
    """Narrow the bracket between an interior and an exterior sample.

    Returns the interior end of the final bracket and its parameter.
    """
    t_in = float(curve.t[inside_idx])
    t_out = float(curve.t[outside_idx])
    p_in: Point = (float(curve.points[inside_idx][0]), float(curve.points[inside_idx][1]))
    p_out: Point = (float(curve.points[outside_idx][0]), float(curve.points[outside_idx][1]))

    for _ in range(max_iterations):
        if math.dist(p_in, p_out) < tolerance:
            break
        mid = (t_in + t_out) / 2.0
        p_mid = curve.point_at(mid)
        if oracle.inside(p_mid):
            t_in, p_in = mid, p_mid
        else:
            t_out, p_out = mid, p_mid
    return p_in, t_in


def clip_many(
    outline: Outline,
    curves: Iterable[Curve],
    tolerance: float = 0.25,
    *,
    max_iterations: int = 24,
    min_points: int = 2,
    oracle: BoundaryOracle | None = None,
) -> list[Segment]:
    oracle = oracle or WindingOracle(outline)
    out: list[Segment] = []
    for curve in curves:
        out.extend(
            clip(outline, curve, tolerance, max_iterations=max_iterations, min_points=min_points, oracle=oracle)
        )
    return out


def segments_to_path_data(segments: Iterable[Segment], precision: int = 2) -> str:
    """Each Segment becomes its own ``M … L …`` sub-path."""
    return " ".join(d for d in (seg.path_data(precision) for seg in segments) if d)
