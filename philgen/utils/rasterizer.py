"""Rasterization utilities: closed rings to a boolean coverage grid.

Pixel (r, c) of a grid with origin (ox, oy) and ``scale`` pixels per unit
covers the square whose center is (ox + (c + 0.5) / scale, oy + (r + 0.5) / scale).
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray
from skimage.draw import polygon as draw_polygon

from philgen.utils.geometry import winding_direction

# Upper bound on either grid dimension. 420×420 outlines at scale 1 are
# far below this; it only guards against runaway scale settings.
_MAX_GRID_DIM = 8192


def grid_shape(width: float, height: float, scale: float = 1.0) -> tuple[int, int]:
    """(rows, cols) needed to cover a width×height rectangle."""
    rows = max(1, math.ceil(height * scale))
    cols = max(1, math.ceil(width * scale))
    if rows > _MAX_GRID_DIM or cols > _MAX_GRID_DIM:
        raise ValueError(f"Raster {rows}×{cols} exceeds {_MAX_GRID_DIM} pixels per side")
    return rows, cols


def rasterize_rings(
    rings: tuple[NDArray[np.float64], ...] | list[NDArray[np.float64]],
    origin: tuple[float, float],
    shape: tuple[int, int],
    scale: float = 1.0,
    fill_rule: str = "nonzero",
) -> NDArray[np.bool_]:
    """Fill closed rings onto a boolean grid under the given fill rule.

    Each ring is filled with skimage.draw.polygon and accumulated with its
    orientation sign (nonzero) or toggled (evenodd).
    """
    ox, oy = origin
    winding = np.zeros(shape, dtype=np.int32)
    parity = np.zeros(shape, dtype=np.bool_)

    for ring in rings:
        if len(ring) < 4:
            continue
        rows = (ring[:, 1] - oy) * scale - 0.5
        cols = (ring[:, 0] - ox) * scale - 0.5
        rr, cc = draw_polygon(rows, cols, shape=shape)
        if len(rr) == 0:
            continue
        sign = winding_direction(ring) or 1
        winding[rr, cc] += sign
        parity[rr, cc] ^= True

    if fill_rule == "evenodd":
        return parity
    return winding != 0


def sample_grid(
    grid: NDArray[np.bool_],
    origin: tuple[float, float],
    points: NDArray[np.float64],
    scale: float = 1.0,
) -> NDArray[np.bool_]:
    """Look up grid coverage at each point; points off the grid are uncovered."""
    pts = np.atleast_2d(np.asarray(points, dtype=float))
    if len(pts) == 0:
        return np.zeros(0, dtype=bool)
    cols = np.floor((pts[:, 0] - origin[0]) * scale).astype(np.int64)
    rows = np.floor((pts[:, 1] - origin[1]) * scale).astype(np.int64)
    on_grid = (rows >= 0) & (rows < grid.shape[0]) & (cols >= 0) & (cols < grid.shape[1])
    result = np.zeros(len(pts), dtype=bool)
    result[on_grid] = grid[rows[on_grid], cols[on_grid]]
    return result
