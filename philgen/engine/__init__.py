"""Philgen layer engine."""

from philgen.engine.context import ComposeResult, LayerArtifact, TraitContext
from philgen.engine.pipeline import Orchestrator
from philgen.engine.registry import CANONICAL_ORDER, get_registry, register_traits, trait

__all__ = [
    "trait",
    "get_registry",
    "register_traits",
    "TraitContext",
    "LayerArtifact",
    "ComposeResult",
    "Orchestrator",
    "CANONICAL_ORDER",
]
