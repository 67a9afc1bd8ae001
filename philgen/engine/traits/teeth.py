"""Teeth: gums underneath, then the teeth outline split into colored Voronoi cells."""

from __future__ import annotations

from philgen.engine.context import LayerArtifact, TraitContext
from philgen.engine.registry import trait
from philgen.svg.serializer import element, outline_mask
from philgen.utils.color import harmonious_palette, pick, random_hex

SITE_COUNT = 369
BOUNDARY_FRACTION = 0.45
CELL_COLORS = 3


@trait(name="teeth", outlines=("teethOutline", "gumsOutline"), description="Gums and mosaic teeth")
def teeth(ctx: TraitContext) -> LayerArtifact:
    rng = ctx.rng
    teeth_d = ctx.descriptor("teethOutline").combined_path_data
    gums_d = ctx.descriptor("gumsOutline").combined_path_data

    teeth_fill = random_hex(rng)
    gums_fill = random_hex(rng)
    palette = harmonious_palette(rng, CELL_COLORS)

    mosaic = ctx.tessellate("teethOutline", SITE_COUNT, BOUNDARY_FRACTION)
    cells = "".join(
        element("path", {"d": cell.path_data(), "fill": pick(palette, rng), "shape-rendering": "geometricPrecision"})
        for cell in mosaic.cells
    )

    defs = ""
    if mosaic.approximate:
        mask_id = ctx.uid("teeth-mask")
        defs = outline_mask(mask_id, teeth_d, ctx.size)
        cells = element("g", {"mask": f"url(#{mask_id})"}, cells)

    body = element("g", {"id": "gums"}, element("path", {"d": gums_d, "fill": gums_fill})) + element(
        "g", {"id": "teeth"}, element("path", {"d": teeth_d, "fill": teeth_fill}) + cells
    )
    return ctx.render(body, defs=defs, approximate=mosaic.approximate)
