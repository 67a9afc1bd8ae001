"""Nose: solid fill per sub-path, with shadow and highlight tints of one base color."""

from __future__ import annotations

from philgen.engine.context import LayerArtifact, TraitContext
from philgen.engine.registry import trait
from philgen.models.outline import SubPath
from philgen.svg.serializer import element
from philgen.utils.color import color_by_number, shade

TINTS = {"base": 0.0, "shadow": -0.10, "highlight": 0.10}
STROKE_SHADE = -0.22


@trait(name="nose", outlines=("noseOutline",), description="Solid nose with tinted shadow and highlight")
def nose(ctx: TraitContext) -> LayerArtifact:
    descriptor = ctx.descriptor("noseOutline")
    base = color_by_number(int(ctx.rng.integers(0, 69)), ctx.rng)
    stroke = shade(base, STROKE_SHADE)

    if descriptor.paths:
        # Shadows over the base, highlights on top
        paths = [p for kind in TINTS for p in descriptor.paths_of_type(kind)]
    else:
        paths = [SubPath(path_data=descriptor.path_data, type="base")]
    body = "".join(
        element(
            "path",
            {
                "d": p.path_data,
                "fill": shade(base, TINTS[p.type]) if TINTS[p.type] else base,
                "stroke": stroke,
                "stroke-width": 0.45,
                "fill-rule": "evenodd",
            },
        )
        for p in paths
    )
    return ctx.render(body, view_box=descriptor.view_box)
