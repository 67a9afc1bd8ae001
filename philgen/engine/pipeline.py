"""Layer orchestrator: generates requested layers concurrently and composes them.

Each layer runs in its own task: outline descriptors are awaited from the
store, then the synchronous trait generator runs in the default executor.
A failing layer is logged and recorded; its siblings carry on. Surviving
artifacts are always stacked in canonical order, whatever order they were
requested in or finished in.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
import time
from collections.abc import AsyncGenerator, Iterable
from dataclasses import replace
from typing import Any

import numpy as np

from philgen.engine.config import GeneratorConfig
from philgen.engine.context import ComposeResult, ComposeState, LayerArtifact, LayerState, TraitContext
from philgen.engine.optimizer import OptimizerChannel
from philgen.engine.registry import CANONICAL_ORDER, TraitRegistry, TraitSpec, get_registry
from philgen.engine.store import DirectoryOutlineStore, OutlineStore
from philgen.errors import ArtifactError
from philgen.models.outline import OutlineDescriptor
from philgen.svg.parser import parse_outline
from philgen.svg.serializer import validate_artifact

logger = logging.getLogger(__name__)


def layer_rng(seed: int, index: int) -> np.random.Generator:
    """Independent stream per (seed, canonical index)."""
    return np.random.default_rng(np.random.SeedSequence([seed, index]))


class Orchestrator:
    """Composes trait layers."""

    def __init__(
        self,
        registry: TraitRegistry | None = None,
        store: OutlineStore | None = None,
        config: GeneratorConfig | None = None,
        order: tuple[str, ...] = CANONICAL_ORDER,
        optimizer: OptimizerChannel | None = None,
    ) -> None:
        self.registry = registry or get_registry()
        self.store = store or DirectoryOutlineStore()
        self.config = config or GeneratorConfig()
        self.order = tuple(order)
        self.optimizer = optimizer

    def resolve(self, requested: Iterable[str]) -> tuple[list[str], list[str]]:
        """Split a request into known layers (canonical order, no duplicates) and unknown names."""
        known: set[str] = set()
        unknown: list[str] = []
        for name in requested:
            if name in self.order and self.registry.has(name):
                known.add(name)
            elif name not in unknown:
                unknown.append(name)
                logger.warning("Unknown layer %r dropped", name)
        return [n for n in self.order if n in known], unknown

    async def compose(
        self,
        requested: Iterable[str],
        seed: int | None = None,
        *,
        optimize: bool = False,
    ) -> ComposeResult:
        result, names = self._begin(requested, seed)
        tasks = [asyncio.create_task(self._run_layer(name, result, optimize)) for name in names]
        outcomes = await asyncio.gather(*tasks)
        return self._finish(result, outcomes)

    async def compose_streaming(
        self,
        requested: Iterable[str],
        seed: int | None = None,
        *,
        optimize: bool = False,
    ) -> AsyncGenerator[dict[str, Any], None]:
        """Compose, yielding a progress dict as each layer starts and settles.

        The last event has ``status == "result"`` and carries the ComposeResult.
        """
        result, names = self._begin(requested, seed)
        total = len(names)

        for name in result.unknown:
            yield _event(name, -1, total, "skipped", error="unknown layer")

        queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        outcomes: list[LayerArtifact | None] = [None] * total

        async def run(i: int, name: str) -> None:
            await queue.put(_event(name, i, total, "running"))
            artifact = await self._run_layer(name, result, optimize)
            outcomes[i] = artifact
            if artifact is None:
                await queue.put(_event(name, i, total, "error", error=result.failed.get(name, "")))
            else:
                await queue.put(_event(name, i, total, "ok", elapsed_ms=artifact.elapsed_ms))

        tasks = [asyncio.create_task(run(i, name)) for i, name in enumerate(names)]
        try:
            for _ in range(2 * total):
                yield await queue.get()
            await asyncio.gather(*tasks)
        finally:
            for task in tasks:
                task.cancel()

        yield {"status": "result", "result": self._finish(result, outcomes)}

    def _begin(self, requested: Iterable[str], seed: int | None) -> tuple[ComposeResult, list[str]]:
        requested = tuple(requested)
        if seed is None:
            seed = secrets.randbits(63)
        result = ComposeResult(requested=requested, seed=seed, canvas_size=self.config.canvas_size)
        result.advance(ComposeState.REQUESTING)

        names, unknown = self.resolve(requested)
        result.unknown = unknown
        for name in names:
            result.layer_states[name] = LayerState.PENDING

        result.advance(ComposeState.GENERATING)
        logger.info("Compose: %d layers queued (%d unknown), seed=%d", len(names), len(unknown), seed)
        return result, names

    def _finish(self, result: ComposeResult, outcomes: Iterable[LayerArtifact | None]) -> ComposeResult:
        result.advance(ComposeState.COMPOSING)
        rank = {name: i for i, name in enumerate(self.order)}
        survivors = [a for a in outcomes if a is not None]
        result.artifacts = tuple(sorted(survivors, key=lambda a: rank[a.name]))
        result.elapsed_ms = round((time.perf_counter() - result.started) * 1000, 1)
        result.advance(ComposeState.DONE)
        logger.info(
            "Compose complete: %d/%d layers (%s)",
            len(result.artifacts),
            len(result.layer_states),
            result.status,
        )
        return result

    async def _run_layer(self, name: str, result: ComposeResult, optimize: bool) -> LayerArtifact | None:
        spec = self.registry.get(name)
        result.layer_states[name] = LayerState.GENERATING
        t0 = time.perf_counter()
        try:
            descriptors = await self._load_descriptors(spec)
            loop = asyncio.get_running_loop()
            artifact = await loop.run_in_executor(None, self.generate_layer, spec, descriptors, result.seed)
            if optimize and self.optimizer is not None:
                artifact = replace(artifact, svg=await self.optimizer.optimize(artifact.svg))
        except Exception as e:
            result.failed[name] = str(e) or type(e).__name__
            result.layer_states[name] = LayerState.FAILED
            logger.warning("  layer %s FAILED: %s", name, e)
            return None

        elapsed = round((time.perf_counter() - t0) * 1000, 1)
        result.layer_states[name] = LayerState.SUCCEEDED
        if artifact.approximate:
            logger.info("  layer %s rendered in approximate mode", name)
        logger.debug("  layer %s completed in %.1fms", name, elapsed)
        return replace(artifact, elapsed_ms=elapsed)

    async def _load_descriptors(self, spec: TraitSpec) -> dict[str, OutlineDescriptor]:
        loaded = await asyncio.gather(*(self.store.load(key) for key in spec.outlines))
        return dict(zip(spec.outlines, loaded))

    def generate_layer(
        self,
        spec: TraitSpec,
        descriptors: dict[str, OutlineDescriptor],
        seed: int,
    ) -> LayerArtifact:
        """Run one trait synchronously and validate what it returns."""
        outlines = {
            key: parse_outline(
                d.combined_path_data,
                view_box=d.view_box,
                fill_rule=d.fill_rule,
                sample_distance=self.config.outline_sample_distance,
            )
            for key, d in descriptors.items()
        }
        index = self.order.index(spec.name) if spec.name in self.order else len(self.order)
        ctx = TraitContext(
            name=spec.name,
            rng=layer_rng(seed, index),
            config=self.config,
            outlines=outlines,
            descriptors=descriptors,
        )
        artifact = spec.fn(ctx)
        if not isinstance(artifact, LayerArtifact):
            raise ArtifactError(f"Trait {spec.name!r} returned {type(artifact).__name__}, not a LayerArtifact")
        validate_artifact(artifact.svg, self.config.max_artifact_bytes)
        if artifact.name != spec.name:
            artifact = replace(artifact, name=spec.name)
        return artifact


def _event(
    layer: str,
    index: int,
    total: int,
    status: str,
    *,
    elapsed_ms: float = 0.0,
    error: str = "",
) -> dict[str, Any]:
    return {
        "layer": layer,
        "index": index,
        "total": total,
        "status": status,
        "elapsed_ms": elapsed_ms,
        "error": error,
    }
