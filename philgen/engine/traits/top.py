"""Top: a filled cap sprinkled with tiny smiley faces."""

from __future__ import annotations

from philgen.engine.context import LayerArtifact, TraitContext
from philgen.engine.registry import trait
from philgen.svg.serializer import element, format_number, outline_mask
from philgen.utils.color import colors_near, contrasting_color, random_hex, shift_hue

NUM_SMILEYS = 69
MIN_SCALE, MAX_SCALE = 0.15, 0.35


@trait(name="top", outlines=("topOutline",), description="Cap covered in tiny smileys")
def top(ctx: TraitContext) -> LayerArtifact:
    rng = ctx.rng
    d = ctx.descriptor("topOutline").combined_path_data

    base = random_hex(rng)
    stroke = contrasting_color(base)
    smile = shift_hue(base, 50)
    if smile.lower() == "#ffffff" or colors_near(smile, base):
        smile = "#111111" if stroke == "#ffffff" else "#ffffff"

    smiley_id = ctx.uid("smiley")
    mask_id = ctx.uid("top-mask")
    defs = [_smiley(smiley_id, stroke, smile), outline_mask(mask_id, d, ctx.size)]

    points = ctx.interior_points("topOutline", NUM_SMILEYS)
    rotations = rng.integers(0, 360, size=len(points))
    scales = rng.uniform(MIN_SCALE, MAX_SCALE, size=len(points))
    uses = "".join(
        element(
            "use",
            {
                "href": f"#{smiley_id}",
                "transform": f"translate({format_number(x, 1)} {format_number(y, 1)}) rotate({int(rot)}) scale({format_number(s)})",
                "opacity": 0.95,
            },
        )
        for (x, y), rot, s in zip(points, rotations, scales)
    )

    body = element("path", {"d": d, "fill": base, "stroke": stroke, "stroke-width": 0.3}) + element(
        "g", {"mask": f"url(#{mask_id})"}, uses
    )
    return ctx.render(body, defs=defs)


def _smiley(symbol_id: str, stroke: str, fill: str) -> str:
    return element(
        "symbol",
        {"id": symbol_id, "viewBox": "-10 -10 20 20", "overflow": "visible"},
        element("circle", {"cx": 0, "cy": 0, "r": 8, "fill": fill, "stroke": stroke, "stroke-width": 0.6})
        + element("circle", {"cx": -2.7, "cy": -2.2, "r": 1, "fill": stroke})
        + element("circle", {"cx": 2.7, "cy": -2.2, "r": 1, "fill": stroke})
        + element(
            "path",
            {
                "d": "M -4.4 1.8 A 4.4 4.4 0 0 0 4.4 1.8",
                "fill": "none",
                "stroke": stroke,
                "stroke-width": 0.8,
                "stroke-linecap": "round",
            },
        ),
    )
