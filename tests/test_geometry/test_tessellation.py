"""Tests for the tessellation-region intersector."""

from __future__ import annotations

import numpy as np
import pytest
from shapely.geometry import Polygon, box

from philgen.errors import TessellationError
from philgen.geometry.oracle import WindingOracle
from philgen.geometry.tessellation import (
    intersect_cells,
    polygon_to_path_data,
    sample_sites,
    tessellate,
    voronoi_cells,
)


def test_sites_are_interior(circle, rng):
    sites = sample_sites(circle, 120, rng)
    assert 0 < len(sites) <= 120
    assert WindingOracle(circle).inside_many(sites).all()


def test_sites_have_no_duplicates(square, rng):
    sites = sample_sites(square, 80, rng)
    assert len(np.unique(sites, axis=0)) == len(sites)


def test_voronoi_cells_cover_frame(rng):
    sites = rng.uniform(0, 100, size=(30, 2))
    cells = voronoi_cells(sites, (0, 0, 100, 100))
    assert len(cells) == 30
    assert sum(c.area for c in cells) == pytest.approx(10_000, rel=1e-6)


def test_single_site_gets_whole_frame():
    cells = voronoi_cells(np.array([[5.0, 5.0]]), (0, 0, 10, 10))
    assert cells[0].equals(box(0, 0, 10, 10))


def test_cells_lie_inside_outline(circle, rng):
    result = tessellate(circle, 150, rng)
    region = circle.polygon.buffer(1e-6)
    assert not result.approximate
    for cell in result.cells:
        assert cell.polygon.within(region)


def test_cells_cover_outline(circle, rng):
    result = tessellate(circle, 150, rng)
    total = sum(cell.polygon.area for cell in result.cells)
    assert total == pytest.approx(circle.area, rel=1e-3)


def test_evenodd_hole_is_not_covered(ring, rng):
    result = tessellate(ring, 100, rng)
    hole = box(170, 170, 250, 250)
    for cell in result.cells:
        assert cell.polygon.intersection(hole).area < 1e-6


def test_multipart_cell_is_split(two_blobs):
    # One site per blob: each cell also reaches into the other blob's frame
    sites = np.array([[90.0, 90.0], [330.0, 330.0]])
    cells = [box(40, 40, 380, 380), Polygon()]
    clipped = intersect_cells(two_blobs, sites, cells)
    assert len(clipped) == 2
    assert {c.site_index for c in clipped} == {0}


def test_all_cells_failing_raises(square):
    sites = np.array([[10.0, 10.0]])
    with pytest.raises(TessellationError):
        intersect_cells(square, sites, [box(0, 0, 20, 20)])


def test_approximate_mode_keeps_unclipped_cells(circle, rng):
    result = tessellate(circle, 60, rng, exact=False)
    assert result.approximate
    assert all(cell.approximate for cell in result.cells)
    total = sum(cell.polygon.area for cell in result.cells)
    x, y, w, h = circle.bounds
    assert total == pytest.approx(w * h, rel=1e-6)


def test_tessellation_is_reproducible(square):
    a = tessellate(square, 50, np.random.default_rng(3))
    b = tessellate(square, 50, np.random.default_rng(3))
    assert [c.path_data() for c in a.cells] == [c.path_data() for c in b.cells]


def test_polygon_to_path_data_with_hole():
    poly = box(0, 0, 10, 10).difference(box(3, 3, 6, 6))
    d = polygon_to_path_data(poly)
    assert d.count("M ") == 2
    assert d.count("Z") == 2
    assert polygon_to_path_data(Polygon()) == ""


def test_cells_do_not_overlap(circle, rng):
    cells = [cell.polygon for cell in tessellate(circle, 80, rng).cells]
    overlap = 0.0
    for i, a in enumerate(cells):
        for b in cells[i + 1:]:
            if a.intersects(b):
                overlap += a.intersection(b).area
    assert overlap == pytest.approx(0.0, abs=1e-6)
