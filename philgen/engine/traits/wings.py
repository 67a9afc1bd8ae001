"""Wings: three stacked gradient-filled layers with soft glow, drop shadows and speckles."""

from __future__ import annotations

from philgen.engine.context import LayerArtifact, TraitContext
from philgen.engine.registry import trait
from philgen.svg.serializer import element, format_number
from philgen.utils.color import color_by_number, shade

# (outline key, lightness shift, shadow offset), bottom to top
WING_LAYERS = (
    ("wingsBottomOutline", -0.18, 0.3),
    ("wingsMiddleOutline", 0.0, 0.8),
    ("wingsTopOutline", 0.18, 1.5),
)
SHADOW_OPACITY = 0.22
MIN_DOTS, MAX_DOTS = 10, 25


@trait(
    name="wings",
    outlines=tuple(key for key, _, _ in WING_LAYERS),
    description="Three-tier wings with gradients, glow and speckles",
)
def wings(ctx: TraitContext) -> LayerArtifact:
    rng = ctx.rng
    base = color_by_number(int(rng.integers(0, 69)), rng)

    glow_id = ctx.uid("wing-glow")
    defs = [_glow_filter(glow_id)]
    shadows: list[str] = []
    layers: list[str] = []

    for key, delta, offset in WING_LAYERS:
        d = ctx.descriptor(key).combined_path_data
        color = shade(base, delta)
        grad_id = ctx.uid("wing-grad")
        defs.append(
            element(
                "linearGradient",
                {"id": grad_id, "x1": "0", "y1": "0", "x2": "0", "y2": "1"},
                element("stop", {"offset": "0", "stop-color": shade(color, 0.08)})
                + element("stop", {"offset": "1", "stop-color": shade(color, -0.08)}),
            )
        )
        shadows.append(
            element(
                "path",
                {
                    "d": d,
                    "fill": "#000",
                    "opacity": SHADOW_OPACITY,
                    "transform": f"translate({format_number(offset)} {format_number(offset)})",
                },
            )
        )
        layers.append(
            element(
                "path",
                {"d": d, "fill": f"url(#{grad_id})", "stroke": shade(color, -0.25), "stroke-width": 0.6},
            )
            + _speckles(ctx, key, shade(color, -0.10))
        )

    body = element("g", {"id": "wing-shadows"}, "".join(shadows)) + element(
        "g", {"id": "wing-layers", "filter": f"url(#{glow_id})"}, "".join(layers)
    )
    return ctx.render(body, defs=defs)


def _glow_filter(filter_id: str) -> str:
    return element(
        "filter",
        {"id": filter_id, "x": "-10%", "y": "-10%", "width": "120%", "height": "120%"},
        element("feGaussianBlur", {"in": "SourceAlpha", "stdDeviation": 2.5, "result": "blur"})
        + element(
            "feColorMatrix",
            {"in": "blur", "type": "matrix", "values": "0 0 0 0 1  0 0 0 0 1  0 0 0 0 1  0 0 0 0.4 0", "result": "glow"},
        )
        + element("feMerge", {}, element("feMergeNode", {"in": "glow"}) + element("feMergeNode", {"in": "SourceGraphic"})),
    )


def _speckles(ctx: TraitContext, key: str, color: str) -> str:
    count = int(ctx.rng.integers(MIN_DOTS, MAX_DOTS + 1))
    points = ctx.interior_points(key, count)
    radii = ctx.rng.uniform(0.8, 2.4, size=len(points))
    return "".join(
        element("circle", {"cx": round(x, 1), "cy": round(y, 1), "r": round(r, 1), "fill": color, "opacity": 0.35})
        for (x, y), r in zip(points, radii)
    )
