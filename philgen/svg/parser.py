"""Outline parser: facade over svgpathtools.

Converts a path-command string (plus optional viewBox) → Outline with its
polygonal approximation populated.
"""

from __future__ import annotations

import logging
import math
import re

import numpy as np
from svgpathtools import Path, parse_path

from philgen.errors import OutlineError
from philgen.svg.outline import FILL_RULES, Outline
from philgen.utils.geometry import close_ring

logger = logging.getLogger(__name__)

_VIEWBOX_SPLIT_RE = re.compile(r"[\s,]+")

# Fewer samples than this per ring cannot enclose any area.
_MIN_RING_POINTS = 3


def parse_view_box(text: str | None) -> tuple[float, float, float, float] | None:
    """Parse "minX minY width height" (space or comma separated)."""
    if text is None or not text.strip():
        return None
    parts = _VIEWBOX_SPLIT_RE.split(text.strip())
    if len(parts) != 4:
        raise OutlineError(f"Invalid viewBox: {text!r}")
    try:
        min_x, min_y, width, height = (float(p) for p in parts)
    except ValueError as e:
        raise OutlineError(f"Invalid viewBox: {text!r}") from e
    if width <= 0 or height <= 0:
        raise OutlineError(f"Invalid viewBox dimensions: {text!r}")
    return (min_x, min_y, width, height)


def parse_outline(
    path_data: str,
    *,
    view_box: str | tuple[float, float, float, float] | None = None,
    fill_rule: str = "nonzero",
    sample_distance: float = 0.5,
) -> Outline:
    """Parse SVG path data into an Outline.

    Every continuous sub-path becomes one closed ring, sampled so that
    consecutive points are roughly ``sample_distance`` apart along the curve.
    """
    if not isinstance(path_data, str) or not path_data.strip():
        raise OutlineError("Outline path data is empty")
    if fill_rule not in FILL_RULES:
        raise OutlineError(f"Unknown fill rule: {fill_rule!r}")
    if sample_distance <= 0:
        raise ValueError("sample_distance must be positive")

    vb = parse_view_box(view_box) if isinstance(view_box, str) or view_box is None else view_box

    try:
        path = parse_path(path_data)
    except Exception as e:
        raise OutlineError(f"Failed to parse path data: {e}") from e

    rings = []
    for subpath in _split_subpaths(path):
        points = _sample_subpath(subpath, sample_distance)
        if len(points) < _MIN_RING_POINTS:
            continue
        rings.append(close_ring(np.asarray(points, dtype=float)))

    if not rings:
        raise OutlineError("Outline has no closed sub-paths")

    outline = Outline(d=path_data.strip(), rings=tuple(rings), fill_rule=fill_rule, view_box=vb)
    logger.debug(
        "Parsed outline: %d rings, %d points, bounds %s",
        len(rings),
        sum(len(r) for r in rings),
        tuple(round(v, 1) for v in outline.bounds),
    )
    return outline


def _split_subpaths(path: Path) -> list[Path]:
    """Split a compound path into separate sub-paths at M commands."""
    if not path:
        return []
    try:
        return list(path.continuous_subpaths())
    except Exception as e:
        raise OutlineError(f"Failed to split path into sub-paths: {e}") from e


def _sample_subpath(path: Path, sample_distance: float) -> list[tuple[float, float]]:
    """Sample every segment at ~sample_distance spacing (parametric, per segment)."""
    points: list[tuple[float, float]] = []
    for seg in path:
        try:
            length = float(seg.length())
        except Exception as e:
            logger.warning("Skipping unmeasurable segment %r: %s", seg, e)
            continue
        if not math.isfinite(length):
            continue
        n = max(1, math.ceil(length / sample_distance))
        for i in range(n):
            pt = seg.point(i / n)
            points.append((pt.real, pt.imag))
    if path:
        end = path[-1].end
        points.append((end.real, end.imag))
    return _dedupe_consecutive(points)


def _dedupe_consecutive(points: list[tuple[float, float]]) -> list[tuple[float, float]]:
    out: list[tuple[float, float]] = []
    for p in points:
        if out and abs(out[-1][0] - p[0]) < 1e-9 and abs(out[-1][1] - p[1]) < 1e-9:
            continue
        out.append(p)
    return out
