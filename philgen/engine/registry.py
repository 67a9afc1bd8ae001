"""Trait registry: every layer generator is a standalone function registered via decorator.

Usage:
    @trait(name="nose", outlines=("noseOutline",), description="Shaded nose")
    def nose(ctx: TraitContext) -> LayerArtifact:
        return ctx.render(...)

Adding a new trait = creating one module under philgen/engine/traits/ with
the decorator and adding its name to the canonical order.
"""

from __future__ import annotations

import importlib
import logging
import pkgutil
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from philgen.engine.context import LayerArtifact, TraitContext

logger = logging.getLogger(__name__)

# Bottom-to-top stacking order of the composite.
CANONICAL_ORDER: tuple[str, ...] = ("bg", "wings", "phil", "spikes", "eyes", "nose", "teeth", "top")

TRAITS_PACKAGE = "philgen.engine.traits"


@dataclass(frozen=True)
class TraitSpec:
    name: str
    fn: Callable[["TraitContext"], "LayerArtifact"]
    outlines: tuple[str, ...] = ()
    description: str = ""


class TraitRegistry:
    """Registry of trait generators keyed by layer name."""

    def __init__(self) -> None:
        self._traits: dict[str, TraitSpec] = {}

    def register(self, spec: TraitSpec) -> None:
        if spec.name in self._traits:
            raise ValueError(f"Duplicate trait name: {spec.name}")
        self._traits[spec.name] = spec
        logger.debug("Registered trait %s (%d outlines)", spec.name, len(spec.outlines))

    def get(self, name: str) -> TraitSpec:
        return self._traits[name]

    def has(self, name: str) -> bool:
        return name in self._traits

    def names(self) -> list[str]:
        return sorted(self._traits)

    def all(self, order: tuple[str, ...] = CANONICAL_ORDER) -> list[TraitSpec]:
        """Registered traits in stacking order; names outside ``order`` come last."""
        rank = {name: i for i, name in enumerate(order)}
        return sorted(self._traits.values(), key=lambda s: (rank.get(s.name, len(order)), s.name))

    @property
    def count(self) -> int:
        return len(self._traits)


# Module-level singleton
_registry = TraitRegistry()


def get_registry() -> TraitRegistry:
    return _registry


def trait(*, name: str, outlines: tuple[str, ...] = (), description: str = ""):
    """Decorator to register a trait generator."""

    def decorator(fn: Callable[["TraitContext"], "LayerArtifact"]):
        _registry.register(TraitSpec(name=name, fn=fn, outlines=tuple(outlines), description=description))
        return fn

    return decorator


def register_traits() -> TraitRegistry:
    """Import every trait module so @trait decorators fire."""
    package = importlib.import_module(TRAITS_PACKAGE)
    for _, module_name, _ in pkgutil.iter_modules(package.__path__):
        importlib.import_module(f"{TRAITS_PACKAGE}.{module_name}")
    return _registry
