"""TraitContext and composition results.

TraitContext holds everything one trait generator may use: its own rng, its
parsed outlines and the generator config. Nothing in it is shared with
other layers.

ComposeResult is the outcome of one composition: surviving artifacts in
canonical order, per-layer failures and the state history.
"""

from __future__ import annotations

import enum
import time
from dataclasses import dataclass, field

import numpy as np

from philgen.engine.config import GeneratorConfig
from philgen.errors import NothingToExportError, OutlineError
from philgen.geometry.clipper import Segment, clip_many
from philgen.geometry.curves import Curve
from philgen.geometry.oracle import BoundaryOracle, Point, find_interior_point, make_oracle, sample_interior_points
from philgen.geometry.tessellation import Tessellation, tessellate
from philgen.models.outline import OutlineDescriptor
from philgen.svg.outline import Outline
from philgen.svg.serializer import compose_document, serialize_artifact, unique_id


class ComposeState(str, enum.Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    GENERATING = "generating"
    COMPOSING = "composing"
    DONE = "done"


class LayerState(str, enum.Enum):
    PENDING = "pending"
    GENERATING = "generating"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class LayerArtifact:
    """One layer's self-contained SVG."""

    name: str
    svg: str
    approximate: bool = False
    elapsed_ms: float = 0.0


@dataclass
class TraitContext:
    name: str
    rng: np.random.Generator
    config: GeneratorConfig = field(default_factory=GeneratorConfig)
    outlines: dict[str, Outline] = field(default_factory=dict)
    descriptors: dict[str, OutlineDescriptor] = field(default_factory=dict)
    _oracles: dict[str, BoundaryOracle] = field(default_factory=dict, repr=False)

    @property
    def size(self) -> int:
        return self.config.canvas_size

    def outline(self, key: str) -> Outline:
        try:
            return self.outlines[key]
        except KeyError:
            raise OutlineError(f"Trait {self.name!r} has no outline {key!r}") from None

    def descriptor(self, key: str) -> OutlineDescriptor:
        try:
            return self.descriptors[key]
        except KeyError:
            raise OutlineError(f"Trait {self.name!r} has no outline {key!r}") from None

    def oracle(self, key: str) -> BoundaryOracle:
        if key not in self._oracles:
            self._oracles[key] = make_oracle(
                self.outline(key), self.config.oracle, raster_scale=self.config.raster_scale
            )
        return self._oracles[key]

    def uid(self, prefix: str) -> str:
        return unique_id(prefix, self.rng)

    def interior_point(self, key: str) -> Point:
        return find_interior_point(
            self.outline(key), self.rng, max_attempts=self.config.interior_attempts, oracle=self.oracle(key)
        )

    def interior_points(self, key: str, count: int) -> np.ndarray:
        return sample_interior_points(self.outline(key), self.rng, count, oracle=self.oracle(key))

    def clip(self, key: str, curves: list[Curve]) -> list[Segment]:
        return clip_many(
            self.outline(key),
            curves,
            self.config.clip_tolerance,
            max_iterations=self.config.bisect_iterations,
            min_points=self.config.min_segment_points,
            oracle=self.oracle(key),
        )

    def tessellate(self, key: str, site_count: int, boundary_fraction: float) -> Tessellation:
        return tessellate(
            self.outline(key),
            site_count,
            self.rng,
            exact=self.config.exact_clipping,
            boundary_fraction=boundary_fraction,
            inset=self.config.site_inset,
            oracle=self.oracle(key),
        )

    def render(
        self,
        body: str | list[str],
        *,
        defs: str | list[str] = "",
        view_box: str | tuple[float, float, float, float] | None = None,
        approximate: bool = False,
    ) -> LayerArtifact:
        svg = serialize_artifact(body, defs=defs, size=self.size, view_box=view_box)
        return LayerArtifact(name=self.name, svg=svg, approximate=approximate)


@dataclass
class ComposeResult:
    requested: tuple[str, ...] = ()
    seed: int = 0
    artifacts: tuple[LayerArtifact, ...] = ()
    failed: dict[str, str] = field(default_factory=dict)
    unknown: list[str] = field(default_factory=list)
    layer_states: dict[str, LayerState] = field(default_factory=dict)
    history: list[ComposeState] = field(default_factory=lambda: [ComposeState.IDLE])
    canvas_size: int = 420
    elapsed_ms: float = 0.0
    started: float = field(default_factory=time.perf_counter, repr=False)

    @property
    def state(self) -> ComposeState:
        return self.history[-1]

    def advance(self, state: ComposeState) -> None:
        self.history.append(state)

    @property
    def status(self) -> str:
        """"composite", "single" or "empty" (nothing was produced; not an error)."""
        if not self.artifacts:
            return "empty"
        if len(self.artifacts) == 1:
            return "single"
        return "composite"

    @property
    def layers(self) -> list[str]:
        return [a.name for a in self.artifacts]

    @property
    def single(self) -> LayerArtifact | None:
        return self.artifacts[0] if len(self.artifacts) == 1 else None

    @property
    def approximate(self) -> list[str]:
        return [a.name for a in self.artifacts if a.approximate]

    def export_svg(self) -> str:
        if not self.artifacts:
            raise NothingToExportError("No layers produced; nothing to export")
        if self.single is not None:
            return self.single.svg
        return compose_document([a.svg for a in self.artifacts], size=self.canvas_size)
