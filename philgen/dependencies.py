"""FastAPI dependency injection."""

from __future__ import annotations

from functools import lru_cache

from philgen.config import settings
from philgen.engine.optimizer import OptimizerChannel
from philgen.engine.pipeline import Orchestrator
from philgen.engine.store import DirectoryOutlineStore


@lru_cache(maxsize=1)
def get_optimizer() -> OptimizerChannel:
    return OptimizerChannel(timeout=settings.optimizer_timeout_s, precision=settings.optimizer_precision)


@lru_cache(maxsize=1)
def get_orchestrator() -> Orchestrator:
    return Orchestrator(
        store=DirectoryOutlineStore(settings.outline_dir),
        config=settings.generator_config(),
        optimizer=get_optimizer(),
    )
