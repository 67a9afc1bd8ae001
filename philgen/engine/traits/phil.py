"""Phil: the body, a Voronoi mosaic clipped to the body outline."""

from __future__ import annotations

from philgen.engine.context import LayerArtifact, TraitContext
from philgen.engine.registry import trait
from philgen.svg.serializer import element, outline_mask
from philgen.utils.color import COLOR_KEY, pick

SITE_COUNT = 169
BOUNDARY_FRACTION = 0.40

# Black is reserved for strokes on other layers.
_CELL_COLORS = tuple(n for n in COLOR_KEY if n != 8)


@trait(name="phil", outlines=("philOutline",), description="Body mosaic of Voronoi cells")
def phil(ctx: TraitContext) -> LayerArtifact:
    rng = ctx.rng
    outline_d = ctx.descriptor("philOutline").combined_path_data
    cell_color = COLOR_KEY[pick(_CELL_COLORS, rng)]
    stroke_color = COLOR_KEY[pick(_CELL_COLORS, rng)]

    mosaic = ctx.tessellate("philOutline", SITE_COUNT, BOUNDARY_FRACTION)
    opacities = rng.uniform(0.8, 1.0, size=len(mosaic))
    cells = "".join(
        element("path", {"d": cell.path_data(), "fill": cell_color, "fill-opacity": round(o, 2)})
        for cell, o in zip(mosaic.cells, opacities)
    )

    defs = ""
    group = {"stroke": stroke_color, "stroke-width": 0.5, "stroke-linejoin": "round"}
    if mosaic.approximate:
        mask_id = ctx.uid("phil-mask")
        defs = outline_mask(mask_id, outline_d, ctx.size)
        group["mask"] = f"url(#{mask_id})"

    body = element("g", group, cells) + element(
        "path", {"d": outline_d, "fill": "none", "stroke": cell_color, "stroke-width": 1.5}
    )
    return ctx.render(body, defs=defs, approximate=mosaic.approximate)
