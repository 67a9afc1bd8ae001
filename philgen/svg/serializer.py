"""Write self-contained SVG artifacts and composite documents."""

from __future__ import annotations

import base64
import html
import xml.etree.ElementTree as ET
from collections.abc import Iterable
from typing import Any

import numpy as np
from numpy.typing import NDArray

from philgen.errors import ArtifactError

SVG_NS = "http://www.w3.org/2000/svg"
CANVAS_SIZE = 420


def format_number(value: float, precision: int = 2) -> str:
    """Fixed-precision number without trailing zeros ("12.5", "3", "-0.25")."""
    text = f"{float(value):.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


def points_to_path_data(points: NDArray[np.float64], precision: int = 2, closed: bool = False) -> str:
    """Polyline → ``M x y L x y …`` path data."""
    if len(points) == 0:
        return ""
    parts = [f"M {format_number(points[0][0], precision)} {format_number(points[0][1], precision)}"]
    for x, y in points[1:]:
        parts.append(f"L {format_number(x, precision)} {format_number(y, precision)}")
    if closed:
        parts.append("Z")
    return " ".join(parts)


def unique_id(prefix: str, rng: np.random.Generator) -> str:
    """Identifier for a defs entry; drawn from the layer RNG so ids never collide across layers."""
    suffix = "".join(f"{b:02x}" for b in rng.integers(0, 256, size=6))
    return f"{prefix}-{suffix}"


def element(tag: str, attrs: dict[str, Any] | None = None, children: str = "") -> str:
    """Render one element. ``None`` attribute values are omitted."""
    attr_str = "".join(
        f' {k}="{html.escape(_attr_value(v), quote=True)}"' for k, v in (attrs or {}).items() if v is not None
    )
    if children:
        return f"<{tag}{attr_str}>{children}</{tag}>"
    return f"<{tag}{attr_str}/>"


def _attr_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (float, np.floating)):
        return format_number(value)
    return str(value)


def serialize_artifact(
    body: str | Iterable[str],
    *,
    defs: str | Iterable[str] = "",
    size: int = CANVAS_SIZE,
    view_box: tuple[float, float, float, float] | str | None = None,
) -> str:
    """Wrap layer content in a root ``<svg>`` of fixed square size.

    The root declares only the default SVG namespace and the output holds
    no external references.
    """
    if view_box is None:
        vb = f"0 0 {size} {size}"
    elif isinstance(view_box, str):
        vb = view_box
    else:
        vb = " ".join(format_number(v, 3) for v in view_box)

    body_text = body if isinstance(body, str) else "".join(body)
    defs_text = defs if isinstance(defs, str) else "".join(defs)
    head = f'<svg xmlns="{SVG_NS}" width="{size}" height="{size}" viewBox="{vb}">'
    inner = f"<defs>{defs_text}</defs>" if defs_text else ""
    return f"{head}{inner}{body_text}</svg>"


def to_data_uri(svg: str) -> str:
    encoded = base64.b64encode(svg.encode("utf-8")).decode("ascii")
    return f"data:image/svg+xml;base64,{encoded}"


def compose_document(artifacts: Iterable[str], size: int = CANVAS_SIZE) -> str:
    """Stack artifacts bottom-to-top, each embedded as a data-URI image."""
    images = [
        element("image", {"href": to_data_uri(svg), "x": 0, "y": 0, "width": size, "height": size})
        for svg in artifacts
    ]
    return serialize_artifact(images, size=size)


def validate_artifact(svg: str, max_bytes: int) -> None:
    """Raise ArtifactError unless ``svg`` is a well-formed SVG document within ``max_bytes``."""
    if not isinstance(svg, str) or not svg.strip():
        raise ArtifactError("Artifact is empty")
    size = len(svg.encode("utf-8"))
    if size > max_bytes:
        raise ArtifactError(f"Artifact is {size} bytes, limit is {max_bytes}")
    try:
        root = ET.fromstring(svg)
    except ET.ParseError as e:
        raise ArtifactError(f"Artifact is not well-formed XML: {e}") from e
    if root.tag not in (f"{{{SVG_NS}}}svg", "svg"):
        raise ArtifactError(f"Artifact root is <{root.tag}>, expected <svg>")


def outline_mask(mask_id: str, path_data: str, size: int = CANVAS_SIZE) -> str:
    """Mask showing only the inside of ``path_data``."""
    return element(
        "mask",
        {"id": mask_id, "maskUnits": "userSpaceOnUse"},
        element("rect", {"x": 0, "y": 0, "width": size, "height": size, "fill": "#000"})
        + element("path", {"d": path_data, "fill": "#fff"}),
    )
