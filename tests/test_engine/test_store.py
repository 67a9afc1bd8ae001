"""Tests for outline stores and descriptor models."""

from __future__ import annotations

import asyncio
import json

import pytest

from philgen.engine.store import BUNDLED_OUTLINE_DIR, DirectoryOutlineStore, MemoryOutlineStore
from philgen.errors import OutlineError
from philgen.models.outline import OutlineDescriptor
from philgen.svg.parser import parse_outline

BUNDLED = [
    "eyesOutline",
    "frameOutline",
    "gumsOutline",
    "noseOutline",
    "philOutline",
    "spikesOutline",
    "teethOutline",
    "topOutline",
    "wingsBottomOutline",
    "wingsMiddleOutline",
    "wingsTopOutline",
]


@pytest.mark.parametrize("name", BUNDLED)
def test_bundled_outlines_parse(name):
    descriptor = asyncio.run(DirectoryOutlineStore().load(name))
    outline = parse_outline(descriptor.combined_path_data, view_box=descriptor.view_box)
    assert outline.area > 100
    x, y, w, h = outline.bounds
    assert 0 <= x and 0 <= y and x + w <= 420 and y + h <= 420


def test_bundled_dir_exists():
    assert (BUNDLED_OUTLINE_DIR / "philOutline.json").is_file()


def test_nose_has_typed_subpaths():
    descriptor = asyncio.run(DirectoryOutlineStore().load("noseOutline"))
    assert descriptor.path_data is None
    assert [p.type for p in descriptor.paths] == ["base", "shadow", "highlight"]
    assert len(descriptor.paths_of_type("shadow")) == 1
    assert descriptor.combined_path_data.count("M") == 3


def test_missing_outline():
    with pytest.raises(OutlineError):
        asyncio.run(DirectoryOutlineStore().load("noSuchOutline"))


@pytest.mark.parametrize("name", ["../secrets", "a/b", ".hidden"])
def test_invalid_names(name):
    with pytest.raises(OutlineError):
        asyncio.run(DirectoryOutlineStore().load(name))


def test_bad_json(tmp_path):
    (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(OutlineError):
        asyncio.run(DirectoryOutlineStore(tmp_path).load("broken"))


def test_descriptor_without_geometry(tmp_path):
    (tmp_path / "blank.json").write_text(json.dumps({"viewBox": "0 0 420 420"}), encoding="utf-8")
    with pytest.raises(OutlineError):
        asyncio.run(DirectoryOutlineStore(tmp_path).load("blank"))


def test_memory_store():
    store = MemoryOutlineStore({"a": {"pathData": "M 0 0 L 1 0 L 1 1 Z"}})
    store.put("b", OutlineDescriptor(path_data="M 0 0 L 2 0 L 2 2 Z"))
    assert asyncio.run(store.load("a")).path_data == "M 0 0 L 1 0 L 1 1 Z"
    assert asyncio.run(store.load("b")).path_data == "M 0 0 L 2 0 L 2 2 Z"
    with pytest.raises(OutlineError):
        asyncio.run(store.load("c"))


def test_descriptor_fill_rule():
    assert OutlineDescriptor.model_validate({"pathData": "M 0 0 L 1 0 L 1 1 Z"}).fill_rule == "nonzero"
    descriptor = OutlineDescriptor.model_validate({"pathData": "M 0 0 L 1 0 L 1 1 Z", "fillRule": "evenodd"})
    assert descriptor.fill_rule == "evenodd"
    with pytest.raises(ValueError):
        OutlineDescriptor.model_validate({"pathData": "M 0 0 L 1 0 L 1 1 Z", "fillRule": "winding"})
