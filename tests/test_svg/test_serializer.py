"""Tests for SVG artifact serialization."""

from __future__ import annotations

import base64
import xml.etree.ElementTree as ET

import numpy as np
import pytest

from philgen.errors import ArtifactError
from philgen.svg.serializer import (
    SVG_NS,
    compose_document,
    element,
    format_number,
    outline_mask,
    points_to_path_data,
    serialize_artifact,
    to_data_uri,
    unique_id,
    validate_artifact,
)


@pytest.mark.parametrize(
    "value,expected",
    [(12.5, "12.5"), (3.0, "3"), (-0.25, "-0.25"), (1.005, "1"), (-0.001, "0"), (7, "7")],
)
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_points_to_path_data():
    pts = np.array([[0, 0], [10.5, 2], [3, 4]], dtype=float)
    assert points_to_path_data(pts) == "M 0 0 L 10.5 2 L 3 4"
    assert points_to_path_data(pts, closed=True).endswith("Z")
    assert points_to_path_data(np.empty((0, 2))) == ""


def test_element_escapes_and_skips_none():
    out = element("text", {"x": 1.25, "title": 'a "b" <c>', "fill": None}, "hi")
    assert out == '<text x="1.25" title="a &quot;b&quot; &lt;c&gt;">hi</text>'
    assert element("rect", {"width": 10}) == '<rect width="10"/>'


def test_unique_id_is_seeded():
    a = unique_id("glow", np.random.default_rng(1))
    b = unique_id("glow", np.random.default_rng(1))
    assert a == b
    assert a.startswith("glow-")
    assert len(a) == len("glow-") + 12


def test_serialize_artifact_is_self_contained():
    svg = serialize_artifact([element("rect", {"width": 5, "height": 5})], defs=element("linearGradient", {"id": "g"}))
    root = ET.fromstring(svg)
    assert root.tag == f"{{{SVG_NS}}}svg"
    assert root.get("width") == "420"
    assert root.get("viewBox") == "0 0 420 420"
    assert root.find(f"{{{SVG_NS}}}defs") is not None
    assert "xlink" not in svg


def test_serialize_artifact_view_box():
    assert 'viewBox="-1 0 10 10"' in serialize_artifact("", view_box=(-1, 0, 10, 10), size=10)
    assert 'viewBox="0 0 420 420"' in serialize_artifact("", view_box="0 0 420 420")


def test_compose_document_stacks_in_order():
    first = serialize_artifact(element("rect", {"id": "first"}))
    second = serialize_artifact(element("rect", {"id": "second"}))
    doc = compose_document([first, second])
    images = ET.fromstring(doc).findall(f"{{{SVG_NS}}}image")
    assert len(images) == 2
    payloads = [base64.b64decode(img.get("href").split(",", 1)[1]).decode() for img in images]
    assert payloads == [first, second]


def test_to_data_uri():
    assert to_data_uri("<svg/>").startswith("data:image/svg+xml;base64,")


def test_validate_artifact():
    validate_artifact(serialize_artifact(""), 1024)
    with pytest.raises(ArtifactError):
        validate_artifact("", 1024)
    with pytest.raises(ArtifactError):
        validate_artifact("<svg", 1024)
    with pytest.raises(ArtifactError):
        validate_artifact("<html/>", 1024)
    with pytest.raises(ArtifactError):
        validate_artifact(serialize_artifact("x" * 2000), 1024)


def test_outline_mask():
    mask = outline_mask("m-1", "M 0 0 L 5 0 L 5 5 Z", 420)
    root = ET.fromstring(mask)
    assert root.get("id") == "m-1"
    assert [child.tag for child in root] == ["rect", "path"]
