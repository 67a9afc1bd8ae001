"""Tessellation-region intersector: Voronoi cells clipped to an outline.

Sites are sampled with the boundary oracle, cells are computed over the
outline's bounding rectangle, and each cell is intersected with the
outline polygon. The clipped pieces partition the outline interior.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from scipy.spatial import QhullError, Voronoi
from shapely.errors import GEOSException
from shapely.geometry import MultiPoint, Polygon, box
from shapely.geometry.base import BaseGeometry

from philgen.errors import TessellationError
from philgen.geometry.oracle import BoundaryOracle, WindingOracle, find_interior_point, sample_interior_points
from philgen.svg.outline import Outline
from philgen.svg.serializer import points_to_path_data

logger = logging.getLogger(__name__)

Point = tuple[float, float]

# Pieces smaller than this are slivers from floating-point noise.
_MIN_PIECE_AREA = 1e-6


@dataclass(frozen=True, eq=False)
class ClippedCell:
    site_index: int
    site: Point
    polygon: Polygon
    approximate: bool = False

    def path_data(self, precision: int = 2) -> str:
        return polygon_to_path_data(self.polygon, precision)


@dataclass(frozen=True, eq=False)
class Tessellation:
    sites: NDArray[np.float64]
    cells: tuple[ClippedCell, ...]
    approximate: bool = False

    def __len__(self) -> int:
        return len(self.cells)


def sample_sites(
    outline: Outline,
    count: int,
    rng: np.random.Generator,
    *,
    boundary_fraction: float = 0.45,
    inset: float = 3.5,
    oracle: BoundaryOracle | None = None,
    max_attempts_per_point: int = 120,
) -> NDArray[np.float64]:
    """Seed points for the tessellation, all interior, duplicates removed.

    A ``boundary_fraction`` share sits just inside the boundary (offset
    ``inset`` along the local normal) to keep edge cells small; the rest
    come from a jittered grid over the inset bounding rectangle. Any
    shortfall is filled by rejection sampling.
    """
    if count <= 0 or outline.is_empty:
        return np.empty((0, 2))
    oracle = oracle or WindingOracle(outline)
    chunks: list[NDArray[np.float64]] = []

    boundary_count = int(count * boundary_fraction)
    if boundary_count > 0:
        points, normals = outline.boundary_samples(boundary_count)
        ahead = points + normals * inset
        behind = points - normals * inset
        in_ahead = oracle.inside_many(ahead)
        in_behind = oracle.inside_many(behind)
        chosen = np.where(in_ahead[:, None], ahead, behind)
        chunks.append(chosen[in_ahead | in_behind])

    have = sum(len(c) for c in chunks)
    region = _inset_rect(outline.bounds, inset)
    remaining = count - have
    if remaining > 0:
        chunks.append(_grid_sites(region, remaining, rng, oracle))
        have = sum(len(c) for c in chunks)

    shortfall = count - have
    if shortfall > 0:
        extra = sample_interior_points(
            outline, rng, shortfall, max_attempts_per_point, oracle=oracle, region=region
        )
        chunks.append(extra)
        if len(extra) < shortfall:
            logger.debug("Site sampling short by %d; adding fallback point", shortfall - len(extra))
            chunks.append(np.array([find_interior_point(outline, rng, oracle=oracle)]))

    non_empty = [c for c in chunks if len(c)]
    if not non_empty:
        return np.empty((0, 2))
    return _dedupe(np.vstack(non_empty))


def _inset_rect(bounds: tuple[float, float, float, float], inset: float) -> tuple[float, float, float, float]:
    x, y, w, h = bounds
    if w <= 2 * inset or h <= 2 * inset:
        return bounds
    return (x + inset, y + inset, w - 2 * inset, h - 2 * inset)


def _grid_sites(
    region: tuple[float, float, float, float],
    count: int,
    rng: np.random.Generator,
    oracle: BoundaryOracle,
) -> NDArray[np.float64]:
    x, y, w, h = region
    g = math.ceil(math.sqrt(count))
    cw, ch = w / g, h / g
    rows, cols = np.divmod(np.arange(g * g), g)
    xs = x + cols * cw + rng.random(g * g) * cw * 0.85
    ys = y + rows * ch + rng.random(g * g) * ch * 0.85
    candidates = np.column_stack([xs, ys])
    return candidates[oracle.inside_many(candidates)][:count]


def _dedupe(points: NDArray[np.float64]) -> NDArray[np.float64]:
    if len(points) == 0:
        return points
    _, first = np.unique(np.round(points, 9), axis=0, return_index=True)
    return points[np.sort(first)]


def voronoi_cells(sites: NDArray[np.float64], bounds: tuple[float, float, float, float]) -> list[Polygon]:
    """Voronoi cell of every site, bounded by the rectangle.

    Sites are mirrored across the four rectangle edges so every original
    site has a finite region whose edges along the rectangle are exact.
    An entry is an empty Polygon where no finite region exists.
    """
    x, y, w, h = bounds
    frame = box(x, y, x + w, y + h)
    n = len(sites)
    if n == 0:
        return []
    if n == 1:
        return [frame]

    sx, sy = sites[:, 0], sites[:, 1]
    mirrored = np.vstack(
        [
            sites,
            np.column_stack([2 * x - sx, sy]),
            np.column_stack([2 * (x + w) - sx, sy]),
            np.column_stack([sx, 2 * y - sy]),
            np.column_stack([sx, 2 * (y + h) - sy]),
        ]
    )
    try:
        vor = Voronoi(mirrored)
    except QhullError as e:
        raise TessellationError(f"Voronoi construction failed: {e}") from e

    cells: list[Polygon] = []
    for i in range(n):
        region = vor.regions[vor.point_region[i]]
        if not region or -1 in region:
            logger.debug("Site %d has no finite Voronoi region", i)
            cells.append(Polygon())
            continue
        hull = MultiPoint(vor.vertices[region]).convex_hull
        cell = hull.intersection(frame) if isinstance(hull, Polygon) else Polygon()
        cells.append(cell if isinstance(cell, Polygon) else Polygon())
    return cells


def intersect_cells(
    outline: Outline,
    sites: NDArray[np.float64],
    cells: list[Polygon],
    *,
    exact: bool = True,
) -> list[ClippedCell]:
    """Clip each cell to the outline.

    Multi-part intersections give one ClippedCell per part. Cells that
    fail or come out empty are skipped; if none survive, the tessellation
    as a whole has failed.
    """
    if not cells:
        return []
    region = outline.polygon
    out: list[ClippedCell] = []
    skipped = 0

    for i, (site, cell) in enumerate(zip(sites, cells)):
        site_pt = (float(site[0]), float(site[1]))
        if cell.is_empty:
            skipped += 1
            continue
        if not exact:
            out.append(ClippedCell(i, site_pt, cell, approximate=True))
            continue
        try:
            piece = cell.intersection(region)
        except GEOSException as e:
            logger.debug("Cell %d intersection failed: %s", i, e)
            skipped += 1
            continue
        parts = _polygon_parts(piece)
        if not parts:
            skipped += 1
            continue
        out.extend(ClippedCell(i, site_pt, p) for p in parts)

    if skipped:
        logger.debug("Skipped %d of %d cells", skipped, len(cells))
    if not out:
        raise TessellationError(f"All {len(cells)} cells failed to intersect the outline")
    return out


def _polygon_parts(geom: BaseGeometry) -> list[Polygon]:
    if geom.is_empty:
        return []
    if isinstance(geom, Polygon):
        return [geom] if geom.area > _MIN_PIECE_AREA else []
    parts: list[Polygon] = []
    for sub in getattr(geom, "geoms", ()):
        parts.extend(_polygon_parts(sub))
    return parts


def tessellate(
    outline: Outline,
    site_count: int,
    rng: np.random.Generator,
    *,
    exact: bool = True,
    boundary_fraction: float = 0.45,
    inset: float = 3.5,
    oracle: BoundaryOracle | None = None,
) -> Tessellation:
    """Sample sites, build bounded cells and clip them to the outline.

    ``exact=False`` skips the intersection and returns the rectangle-bounded
    cells flagged approximate; callers must mask them to the outline.
    """
    sites = sample_sites(outline, site_count, rng, boundary_fraction=boundary_fraction, inset=inset, oracle=oracle)
    cells = voronoi_cells(sites, outline.bounds)
    clipped = intersect_cells(outline, sites, cells, exact=exact)
    if not exact:
        logger.info("Approximate tessellation: %d unclipped cells", len(clipped))
    return Tessellation(sites=sites, cells=tuple(clipped), approximate=not exact)


def polygon_to_path_data(polygon: Polygon, precision: int = 2) -> str:
    """Exterior plus interior rings as closed sub-paths."""
    if polygon.is_empty:
        return ""
    rings = [polygon.exterior, *polygon.interiors]
    return " ".join(points_to_path_data(np.asarray(r.coords)[:-1], precision, closed=True) for r in rings)
