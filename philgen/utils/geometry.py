"""Leaf-node geometry helpers. No engine imports."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

# Chunk size for batched point-vs-edge tests: keeps the (points × edges)
# broadcast under ~4M cells.
_BATCH_CELLS = 4_000_000


def signed_area(points: NDArray[np.float64]) -> float:
    """Shoelace formula for signed area. Positive = CCW, Negative = CW."""
    if len(points) < 3:
        return 0.0
    x = points[:, 0]
    y = points[:, 1]
    return float(0.5 * (np.sum(x[:-1] * y[1:] - x[1:] * y[:-1]) + (x[-1] * y[0] - x[0] * y[-1])))


def winding_direction(points: NDArray[np.float64]) -> int:
    """Return 1 for CCW, -1 for CW, 0 if degenerate."""
    sa = signed_area(points)
    if sa > 0:
        return 1
    elif sa < 0:
        return -1
    return 0


def bbox(points: NDArray[np.float64]) -> tuple[float, float, float, float]:
    """Compute (xmin, ymin, xmax, ymax) bounding box."""
    if len(points) == 0:
        return (0.0, 0.0, 0.0, 0.0)
    return (
        float(np.min(points[:, 0])),
        float(np.min(points[:, 1])),
        float(np.max(points[:, 0])),
        float(np.max(points[:, 1])),
    )


def arc_lengths(points: NDArray[np.float64]) -> NDArray[np.float64]:
    """Cumulative arc-length along a point sequence."""
    if len(points) == 0:
        return np.zeros(0)
    diffs = np.diff(points, axis=0)
    segment_lengths = np.sqrt(np.sum(diffs**2, axis=1))
    return np.concatenate([[0.0], np.cumsum(segment_lengths)])


def close_ring(points: NDArray[np.float64]) -> NDArray[np.float64]:
    """Return the ring with its first point repeated at the end (if not already)."""
    if len(points) == 0:
        return points
    if np.allclose(points[0], points[-1]):
        return points
    return np.vstack([points, points[:1]])


def winding_numbers(points: NDArray[np.float64], ring: NDArray[np.float64]) -> NDArray[np.int64]:
    """Winding number of every point w.r.t. one closed ring.

    ``ring`` must be closed (first == last). Upward edges include their
    start vertex and exclude their end vertex, so points exactly on the
    boundary get a deterministic answer.
    """
    pts = np.atleast_2d(np.asarray(points, dtype=float))
    result = np.zeros(len(pts), dtype=np.int64)
    if len(ring) < 4 or len(pts) == 0:
        return result

    x0 = ring[:-1, 0]
    y0 = ring[:-1, 1]
    x1 = ring[1:, 0]
    y1 = ring[1:, 1]

    step = max(1, _BATCH_CELLS // len(x0))
    for start in range(0, len(pts), step):
        chunk = pts[start : start + step]
        px = chunk[:, 0:1]
        py = chunk[:, 1:2]
        # Cross product sign: > 0 means point is left of the edge
        cross = (x1 - x0) * (py - y0) - (px - x0) * (y1 - y0)
        up = (y0 <= py) & (y1 > py) & (cross > 0)
        down = (y0 > py) & (y1 <= py) & (cross < 0)
        result[start : start + step] = np.sum(up, axis=1) - np.sum(down, axis=1)
    return result


def winding_number(point: tuple[float, float], ring: NDArray[np.float64]) -> int:
    """Compute winding number of a single point w.r.t. a closed ring.

    Non-zero → point is inside the ring.
    """
    return int(winding_numbers(np.array([point], dtype=float), ring)[0])


def vertex_normals(ring: NDArray[np.float64]) -> NDArray[np.float64]:
    """Unit normals at each vertex of a closed ring (central differences).

    The direction is the left-hand normal of travel; callers pick the side
    they need by testing membership.
    """
    pts = ring[:-1] if len(ring) > 1 and np.allclose(ring[0], ring[-1]) else ring
    if len(pts) < 2:
        return np.zeros_like(pts)
    tangents = np.roll(pts, -1, axis=0) - np.roll(pts, 1, axis=0)
    normals = np.column_stack([-tangents[:, 1], tangents[:, 0]])
    lengths = np.linalg.norm(normals, axis=1)
    lengths = np.where(lengths < 1e-12, 1.0, lengths)
    return normals / lengths[:, None]


def interpolate_along(points: NDArray[np.float64], distances: NDArray[np.float64]) -> NDArray[np.float64]:
    """Points at the given cumulative arc-length positions along a polyline."""
    cum = arc_lengths(points)
    if len(cum) == 0:
        return np.empty((0, 2))
    d = np.clip(np.asarray(distances, dtype=float), 0.0, cum[-1])
    x = np.interp(d, cum, points[:, 0])
    y = np.interp(d, cum, points[:, 1])
    return np.column_stack([x, y])


def rotate_points(points: NDArray[np.float64], center: tuple[float, float], angle: float) -> NDArray[np.float64]:
    """Rotate points by ``angle`` radians about ``center``."""
    c, s = np.cos(angle), np.sin(angle)
    rel = np.asarray(points, dtype=float) - center
    return np.column_stack([rel[:, 0] * c - rel[:, 1] * s, rel[:, 0] * s + rel[:, 1] * c]) + center
