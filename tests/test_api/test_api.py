"""Tests for API endpoints."""

from __future__ import annotations

import json

from fastapi.testclient import TestClient

from philgen.engine.registry import CANONICAL_ORDER
from philgen.main import app

client = TestClient(app)


def _sse_events(text: str) -> list[tuple[str, dict]]:
    events = []
    for block in text.strip().split("\n\n"):
        lines = dict(line.split(": ", 1) for line in block.splitlines())
        events.append((lines["event"], json.loads(lines["data"])))
    return events


def test_health():
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["traits_registered"] == len(CANONICAL_ORDER)


def test_list_layers():
    response = client.get("/api/layers")
    assert response.status_code == 200
    data = response.json()
    assert [layer["name"] for layer in data] == list(CANONICAL_ORDER)
    assert data[0]["index"] == 0
    assert "eyesOutline" in data[4]["outlines"]


def test_compose_composite():
    response = client.post("/api/compose", json={"layers": ["top", "bg", "phil"], "seed": 42})
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "composite"
    assert data["layers"] == ["bg", "phil", "top"]
    assert data["svg"].startswith("<svg")
    assert data["seed"] == 42
    assert data["failed"] == {}


def test_compose_is_reproducible():
    body = {"layers": ["spikes", "nose"], "seed": 9}
    first = client.post("/api/compose", json=body).json()
    second = client.post("/api/compose", json=body).json()
    assert first["svg"] == second["svg"]


def test_compose_empty_is_not_an_error():
    response = client.post("/api/compose", json={"layers": ["wat"], "seed": 1})
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "empty"
    assert data["svg"] == ""
    assert data["unknown"] == ["wat"]


def test_compose_rejects_negative_seed():
    response = client.post("/api/compose", json={"layers": ["bg"], "seed": -1})
    assert response.status_code == 422


def test_compose_with_optimizer():
    response = client.post("/api/compose", json={"layers": ["nose"], "seed": 5, "optimize": True})
    assert response.status_code == 200
    assert response.json()["status"] == "single"


def test_compose_stream():
    response = client.post("/api/compose/stream", json={"layers": ["nose", "teeth"], "seed": 3})
    assert response.status_code == 200
    events = _sse_events(response.text)
    kinds = [kind for kind, _ in events]
    assert kinds.count("progress") == 4
    assert kinds[-2:] == ["result", "done"]
    result = events[-2][1]
    assert result["layers"] == ["nose", "teeth"]


def test_single_layer():
    response = client.post("/api/layers/eyes", json={"seed": 8})
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "single"
    assert data["layers"] == ["eyes"]


def test_single_layer_without_body():
    response = client.post("/api/layers/bg")
    assert response.status_code == 200
    assert response.json()["layers"] == ["bg"]


def test_unknown_single_layer():
    response = client.post("/api/layers/hat", json={})
    assert response.status_code == 404
