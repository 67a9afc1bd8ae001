"""Eyes: palette-driven frame, glowing lens and a clipped spiral (or ringed) iris.

The iris center is picked inside the eye outline. Spiral styles are
generated as curves and clipped to the outline before stroking; the glow,
iris and gloss sit under an outline mask so nothing bleeds past the edge.
"""

from __future__ import annotations

from philgen.engine.context import LayerArtifact, TraitContext
from philgen.engine.registry import trait
from philgen.geometry.curves import CurveKind, generate, rotate_curve
from philgen.geometry.clipper import segments_to_path_data
from philgen.svg.serializer import element, format_number, outline_mask
from philgen.utils.color import pick

# [bright, dark A, dark B]
PALETTES = (
    ("#08090A", "#A7A2A9", "#F4F7F5"),
    ("#00FFFF", "#EEE4E1", "#E7D8C9"),
    ("#F79D5C", "#F52F57", "#A20021"),
    ("#E3EBFF", "#ECE8EF", "#4392F1"),
    ("#845A6D", "#3E1929", "#6E75A8"),
    ("#DAFFED", "#9BF3F0", "#473198"),
    ("#655A7C", "#AB92BF", "#AFC1D6"),
    ("#454851", "#73956F", "#7BAE7F"),
    ("#95F9E3", "#69EBD0", "#49D49D"),
    ("#463730", "#1F5673", "#759FBC"),
    ("#FFBC42", "#D81159", "#8F2D56"),
    ("#F1DAC4", "#A69CAC", "#474973"),
    ("#C4BBB8", "#F5B0CB", "#DC6ACF"),
)

RINGS = "rings"
IRIS_STYLES = (
    RINGS,
    CurveKind.LOGARITHMIC.value,
    CurveKind.TIGHT.value,
    CurveKind.LOOSE.value,
    CurveKind.ROSE.value,
    CurveKind.SINEWAVE.value,
    CurveKind.NOISY.value,
    CurveKind.FERMAT.value,
    CurveKind.LITUUS.value,
    CurveKind.ARCHIMEDEAN.value,
    CurveKind.EPITROCHOID.value,
    CurveKind.HYPOTROCHOID.value,
    CurveKind.INVOLUTE.value,
    CurveKind.LISSAJOUS.value,
    CurveKind.BUNDLE.value,
)

SPIRAL_STEPS = 540
BUNDLE_PHASE = 0.35

_ROUND = {"stroke-linecap": "round", "stroke-linejoin": "round"}


@trait(name="eyes", outlines=("eyesOutline", "frameOutline"), description="Framed eye with spiral iris")
def eyes(ctx: TraitContext) -> LayerArtifact:
    rng = ctx.rng
    eye_d = ctx.descriptor("eyesOutline").combined_path_data
    frame_d = ctx.descriptor("frameOutline").combined_path_data

    cx, cy = ctx.interior_point("eyesOutline")
    bright, dark_a, dark_b = pick(PALETTES, rng)
    max_r = ctx.size * rng.uniform(0.27, 0.33)
    lens_r = max_r * rng.uniform(1.05, 1.25)

    style = pick(IRIS_STYLES, rng)
    if style == RINGS:
        iris = _rings(ctx, (cx, cy), max_r, dark_a, dark_b)
    else:
        iris = _spiral(ctx, style, (cx, cy), max_r, dark_a, dark_b)

    glow_id = ctx.uid("glow")
    gloss_id = ctx.uid("gloss")
    mask_id = ctx.uid("mask")
    defs = [
        element(
            "radialGradient",
            {"id": glow_id, "gradientUnits": "userSpaceOnUse", "cx": cx, "cy": cy, "r": lens_r},
            element("stop", {"offset": "0", "stop-color": "#ffffff", "stop-opacity": 0.65})
            + element("stop", {"offset": "0.55", "stop-color": bright, "stop-opacity": 0.35})
            + element("stop", {"offset": "1", "stop-color": bright, "stop-opacity": 0}),
        ),
        element(
            "radialGradient",
            {"id": gloss_id, "cx": "50%", "cy": "50%", "r": "50%"},
            element("stop", {"offset": "0%", "stop-color": "#ffffff", "stop-opacity": 0.9})
            + element("stop", {"offset": "100%", "stop-color": "#ffffff", "stop-opacity": 0}),
        ),
        outline_mask(mask_id, eye_d, ctx.size),
    ]

    lens = element(
        "g",
        {"mask": f"url(#{mask_id})"},
        element("rect", {"x": 0, "y": 0, "width": "100%", "height": "100%", "fill": f"url(#{glow_id})"})
        + iris
        + _gloss(ctx, gloss_id, cx, cy),
    )
    body = (
        element("path", {"d": frame_d, "fill": bright})
        + lens
        + element("path", {"d": eye_d, "fill": "none", "stroke": bright, "stroke-width": 1.2, "opacity": 0.9})
    )
    return ctx.render(body, defs=defs)


def _rings(ctx: TraitContext, center: tuple[float, float], max_r: float, color_a: str, color_b: str) -> str:
    """Concentric, slightly irregular ellipses alternating between the two dark colors."""
    rng = ctx.rng
    cx, cy = center
    count = int(rng.integers(54, 73))
    base_w = rng.uniform(1.2, 1.9)
    rings = []
    for i in range(count):
        t = i / (count - 1)
        r = (0.06 + 0.94 * t) * max_r + rng.uniform(-0.25, 0.25)
        rot = rng.uniform(-8, 8)
        rings.append(
            element(
                "ellipse",
                {
                    "cx": cx,
                    "cy": cy,
                    "rx": r * (1 + rng.uniform(-0.015, 0.015)),
                    "ry": r * (1 + rng.uniform(-0.015, 0.015)),
                    "transform": f"rotate({format_number(rot)} {format_number(cx)} {format_number(cy)})",
                    "stroke": color_a if i % 2 == 0 else color_b,
                    "stroke-width": base_w * (0.85 + 0.35 * (1 - t)),
                    "opacity": 0.85 * (1 - t**1.3),
                },
            )
        )
    return element("g", {"id": "iris-rings", "fill": "none"}, "".join(rings))


def _spiral(
    ctx: TraitContext, style: str, center: tuple[float, float], max_r: float, color_a: str, color_b: str
) -> str:
    rng = ctx.rng
    turns = 2.2 if style == CurveKind.INVOLUTE.value else 3.2
    curve = generate(style, center, max_r, turns, SPIRAL_STEPS, rng)
    d = segments_to_path_data(ctx.clip("eyesOutline", [curve]))

    w_b = rng.uniform(6.0, 8.0)
    w_a = w_b * rng.uniform(0.45, 0.62)
    op_b = rng.uniform(0.28, 0.42)
    op_a = rng.uniform(0.68, 0.9)
    dash_b = f"{format_number(rng.uniform(9, 16), 1)} {format_number(rng.uniform(6, 12), 1)}"
    dash_a = f"{format_number(rng.uniform(6, 11), 1)} {format_number(rng.uniform(5, 10), 1)}"

    paths = []
    if d:
        paths.append(
            element("path", {"d": d, "stroke": color_b, "stroke-width": w_b, "opacity": op_b, "stroke-dasharray": dash_b, **_ROUND})
        )
        paths.append(
            element("path", {"d": d, "stroke": color_a, "stroke-width": w_a, "opacity": op_a, "stroke-dasharray": dash_a, **_ROUND})
        )

    if style == CurveKind.BUNDLE.value:
        # Two phase-shifted copies make the bundle read as a vortex.
        for phase, color in ((BUNDLE_PHASE, color_a), (-BUNDLE_PHASE, color_b)):
            shifted = segments_to_path_data(ctx.clip("eyesOutline", [rotate_curve(curve, center, phase)]))
            if shifted:
                paths.append(
                    element("path", {"d": shifted, "stroke": color, "stroke-width": w_a * 0.8, "opacity": op_a, **_ROUND})
                )

    return element("g", {"id": "iris-spiral", "fill": "none"}, "".join(paths))


def _gloss(ctx: TraitContext, gloss_id: str, cx: float, cy: float) -> str:
    rng = ctx.rng
    gx = cx + rng.uniform(-22, -10)
    gy = cy + rng.uniform(-18, -6)
    rot = rng.uniform(-18, 18)
    return element(
        "ellipse",
        {
            "cx": gx,
            "cy": gy,
            "rx": rng.uniform(32, 44),
            "ry": rng.uniform(18, 26),
            "fill": f"url(#{gloss_id})",
            "transform": f"rotate({format_number(rot)} {format_number(gx)} {format_number(gy)})",
            "opacity": 0.7,
        },
    )
