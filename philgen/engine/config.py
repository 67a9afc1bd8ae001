"""Generator configuration: algorithm knobs shared by every trait."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GeneratorConfig:
    """Controls geometry precision and layer validation."""

    # Region clipper
    clip_tolerance: float = 0.25
    bisect_iterations: int = 24
    min_segment_points: int = 2  # runs with fewer points are dropped

    # Outline polygonal approximation; chord error stays far below clip_tolerance
    outline_sample_distance: float = 0.5

    # Boundary oracle: "winding" (analytic) or "raster"
    oracle: str = "winding"
    raster_scale: float = 1.0
    interior_attempts: int = 800

    # Tessellation: False renders unclipped cells under a mask
    exact_clipping: bool = True
    site_inset: float = 3.5

    # Artifact checks
    max_artifact_bytes: int = 2 * 1024 * 1024
    canvas_size: int = 420
