"""Shared test fixtures."""

from __future__ import annotations

import numpy as np
import pytest

from philgen.svg.outline import Outline
from philgen.svg.parser import parse_outline

# Sample outlines on a 420 canvas

SQUARE_D = "M 100 100 L 300 100 L 300 300 L 100 300 Z"

# Circle of radius 100 around (210, 210), drawn as two arcs
CIRCLE_D = "M 110 210 A 100 100 0 1 0 310 210 A 100 100 0 1 0 110 210 Z"

# Outer square with an inner square hole under evenodd
RING_D = "M 60 60 L 360 60 L 360 360 L 60 360 Z M 160 160 L 260 160 L 260 260 L 160 260 Z"

# Two disjoint blobs
TWO_BLOBS_D = "M 40 40 L 140 40 L 140 140 L 40 140 Z M 280 280 L 380 280 L 380 380 L 280 380 Z"

# Thin sliver: 200 wide, 2 tall
SLIVER_D = "M 100 200 L 300 200 L 300 202 L 100 202 Z"


@pytest.fixture
def square() -> Outline:
    return parse_outline(SQUARE_D)


@pytest.fixture
def circle() -> Outline:
    return parse_outline(CIRCLE_D)


@pytest.fixture
def ring() -> Outline:
    return parse_outline(RING_D, fill_rule="evenodd")


@pytest.fixture
def two_blobs() -> Outline:
    return parse_outline(TWO_BLOBS_D)


@pytest.fixture
def sliver() -> Outline:
    return parse_outline(SLIVER_D)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)
