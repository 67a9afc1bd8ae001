"""End-to-end generation of every bundled trait."""

from __future__ import annotations

import asyncio
import xml.etree.ElementTree as ET

import pytest

from philgen.engine.config import GeneratorConfig
from philgen.engine.pipeline import Orchestrator
from philgen.engine.registry import CANONICAL_ORDER, register_traits
from philgen.engine.store import MemoryOutlineStore
from philgen.svg.serializer import SVG_NS


@pytest.fixture(scope="module")
def orchestrator() -> Orchestrator:
    register_traits()
    return Orchestrator()


@pytest.mark.parametrize("name", CANONICAL_ORDER)
def test_trait_generates_valid_svg(orchestrator, name):
    result = asyncio.run(orchestrator.compose([name], seed=2024))
    assert result.failed == {}
    assert result.status == "single"
    root = ET.fromstring(result.export_svg())
    assert root.tag == f"{{{SVG_NS}}}svg"
    assert root.get("width") == "420"


@pytest.mark.parametrize("seed", [0, 1, 12345])
def test_full_composition(orchestrator, seed):
    result = asyncio.run(orchestrator.compose(list(reversed(CANONICAL_ORDER)), seed=seed))
    assert result.failed == {}
    assert result.layers == list(CANONICAL_ORDER)
    assert result.status == "composite"
    assert result.approximate == []


def test_composition_is_reproducible(orchestrator):
    first = asyncio.run(orchestrator.compose(["phil", "eyes", "spikes"], seed=77))
    second = asyncio.run(orchestrator.compose(["spikes", "phil", "eyes"], seed=77))
    assert first.export_svg() == second.export_svg()


def test_ids_do_not_collide_across_layers(orchestrator):
    result = asyncio.run(orchestrator.compose(list(CANONICAL_ORDER), seed=5))
    ids: list[str] = []
    for artifact in result.artifacts:
        ids.extend(el.get("id") for el in ET.fromstring(artifact.svg).iter() if el.get("id"))
    generated = [i for i in ids if "-" in i]
    assert len(generated) == len(set(generated))


def test_approximate_tessellation_is_flagged():
    register_traits()
    orch = Orchestrator(config=GeneratorConfig(exact_clipping=False))
    result = asyncio.run(orch.compose(["phil", "teeth", "nose"], seed=3))
    assert result.failed == {}
    assert result.approximate == ["phil", "teeth"]
    assert "mask=" in result.artifacts[0].svg


def test_raster_oracle_config():
    register_traits()
    orch = Orchestrator(config=GeneratorConfig(oracle="raster"))
    result = asyncio.run(orch.compose(["eyes", "spikes", "top"], seed=11))
    assert result.failed == {}
    assert result.layers == ["spikes", "eyes", "top"]


def test_nose_stacks_shadow_then_highlight():
    register_traits()
    shuffled = {
        "viewBox": "0 0 420 420",
        "paths": [
            {"type": "highlight", "pathData": "M 208 256 L 212 256 L 210 284 Z"},
            {"type": "base", "pathData": "M 202 246 L 226 246 L 214 298 Z"},
            {"type": "shadow", "pathData": "M 196 290 L 224 290 L 210 296 Z"},
        ],
    }
    orch = Orchestrator(store=MemoryOutlineStore({"noseOutline": shuffled}))
    result = asyncio.run(orch.compose(["nose"], seed=9))
    assert result.failed == {}
    drawn = [el.get("d") for el in ET.fromstring(result.single.svg).iter(f"{{{SVG_NS}}}path")]
    assert drawn == [p["pathData"] for p in (shuffled["paths"][1], shuffled["paths"][2], shuffled["paths"][0])]
