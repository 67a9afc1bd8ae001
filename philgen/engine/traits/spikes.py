"""Spikes: the spike outline filled, then cracked and/or dotted from inside."""

from __future__ import annotations

from philgen.engine.context import LayerArtifact, TraitContext
from philgen.engine.registry import trait
from philgen.geometry.curves import CurveKind, generate
from philgen.svg.serializer import element
from philgen.utils.color import COLOR_KEY, STANDARD_COLORS, pick

MODES = ("cracks", "dots", "both")
CRACK_STEPS = 12


@trait(name="spikes", outlines=("spikesOutline",), description="Spikes with cracks and dots")
def spikes(ctx: TraitContext) -> LayerArtifact:
    rng = ctx.rng
    d = ctx.descriptor("spikesOutline").combined_path_data
    fill = COLOR_KEY[pick(STANDARD_COLORS, rng)]
    detail = COLOR_KEY[pick(STANDARD_COLORS, rng)]
    mode = pick(MODES, rng)

    parts = [element("path", {"d": d, "fill": fill, "stroke": "#000", "stroke-width": 1})]
    if mode in ("cracks", "both"):
        parts.append(element("g", {"id": "cracks"}, _cracks(ctx, detail)))
    if mode in ("dots", "both"):
        parts.append(element("g", {"id": "dots"}, _dots(ctx, detail)))
    return ctx.render(parts)


def _cracks(ctx: TraitContext, color: str) -> str:
    """Random walks from interior points, each clipped to the outline."""
    rng = ctx.rng
    count = int(rng.integers(3, 36))
    curves = [
        generate(CurveKind.WALK, ctx.interior_point("spikesOutline"), rng.uniform(8, 20), 1.0, CRACK_STEPS, rng)
        for _ in range(count)
    ]
    out = []
    for segment in ctx.clip("spikesOutline", curves):
        out.append(
            element(
                "path",
                {
                    "d": segment.path_data(),
                    "fill": "none",
                    "stroke": color,
                    "stroke-width": round(rng.uniform(0.3, 0.69), 2),
                    "stroke-opacity": round(rng.uniform(0.63, 0.9), 2),
                    "stroke-linecap": "round",
                },
            )
        )
    return "".join(out)


def _dots(ctx: TraitContext, color: str) -> str:
    rng = ctx.rng
    points = ctx.interior_points("spikesOutline", int(rng.integers(5, 30)))
    radii = rng.uniform(1, 3, size=len(points))
    return "".join(
        element("circle", {"cx": round(x, 1), "cy": round(y, 1), "r": round(r, 1), "fill": color})
        for (x, y), r in zip(points, radii)
    )
