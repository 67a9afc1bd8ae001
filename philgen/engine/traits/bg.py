"""Background: star field, spiral galaxy arms with dust and a glowing core."""

from __future__ import annotations

import math

import numpy as np

from philgen.engine.context import LayerArtifact, TraitContext
from philgen.engine.registry import trait
from philgen.geometry.curves import CurveKind, generate, rotate_curve
from philgen.svg.serializer import element
from philgen.utils.color import color_by_number, pick, random_color_number

NUM_STARS = 369
NUM_ARMS = 6
PARTICLES_PER_ARM = 69
DUST_DENSITY = 0.0369
ARM_REACH = 0.4963  # fraction of the canvas
CORE_REACH = 0.42
CORE_STOPS = (0.6, 0.3, 0.0)

ARM_KINDS = (
    CurveKind.TIGHT,
    CurveKind.LOOSE,
    CurveKind.SINEWAVE,
    CurveKind.LOGARITHMIC,
    CurveKind.ARCHIMEDEAN,
    CurveKind.FERMAT,
    CurveKind.NOISY,
)


@trait(name="bg", description="Background: stars, spiral galaxy arms and a glowing core")
def background(ctx: TraitContext) -> LayerArtifact:
    rng = ctx.rng
    size = ctx.size

    backdrop = element("rect", {"width": "100%", "height": "100%", "fill": color_by_number(0, rng)})
    stars = _stars(ctx)
    arms = _arms(ctx)

    core_id = ctx.uid("core")
    core_color = color_by_number(0, rng)
    stops = "".join(
        element("stop", {"offset": offset, "stop-color": core_color, "stop-opacity": opacity})
        for offset, opacity in zip(("0", "0.5", "1"), CORE_STOPS)
    )
    gradient = element("radialGradient", {"id": core_id}, stops)
    core = element(
        "circle",
        {"cx": size / 2, "cy": size / 2, "r": size * CORE_REACH, "fill": f"url(#{core_id})"},
    )

    body = backdrop + element("g", {"id": "stars"}, stars) + element("g", {"id": "arms"}, arms) + core
    return ctx.render(body, defs=gradient)


def _stars(ctx: TraitContext) -> str:
    rng = ctx.rng
    color = color_by_number(random_color_number(rng), rng)
    xs = rng.random(NUM_STARS) * ctx.size
    ys = rng.random(NUM_STARS) * ctx.size
    radii = rng.random(NUM_STARS) * 1.5 + 0.5
    opacities = rng.random(NUM_STARS)
    return "".join(
        element("circle", {"cx": round(x, 1), "cy": round(y, 1), "r": round(r, 1), "fill": color, "opacity": round(o, 2)})
        for x, y, r, o in zip(xs, ys, radii, opacities)
    )


def _arms(ctx: TraitContext) -> str:
    """Particles along one curve kind, repeated at even rotations around the center."""
    rng = ctx.rng
    size = ctx.size
    center = (size / 2, size / 2)
    kind = pick(ARM_KINDS, rng)
    arm_color = color_by_number(random_color_number(rng), rng)
    dust_color = color_by_number(random_color_number(rng), rng)

    base = generate(kind, center, size * ARM_REACH, turns=2.0, step_count=PARTICLES_PER_ARM, rng=rng)
    particles: list[str] = []
    for arm in range(NUM_ARMS):
        curve = rotate_curve(base, center, 2.0 * math.pi * arm / NUM_ARMS)
        fade = 1.0 - curve.t
        opacity = np.sqrt(fade) * 0.8
        radius = fade * 3.0 + 0.5
        dust = rng.random(len(curve)) < DUST_DENSITY
        for (x, y), o, r, has_dust in zip(curve.points, opacity, radius, dust):
            cx, cy = round(x, 1), round(y, 1)
            particles.append(
                element("circle", {"cx": cx, "cy": cy, "r": round(r, 1), "fill": arm_color, "opacity": round(o, 2)})
            )
            if has_dust:
                particles.append(
                    element(
                        "circle",
                        {
                            "cx": cx,
                            "cy": cy,
                            "r": round(rng.random() * 15 + 5, 1),
                            "fill": dust_color,
                            "opacity": round(o * 0.3, 2),
                        },
                    )
                )
    return "".join(particles)
