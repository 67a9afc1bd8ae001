"""Outline stores: where traits fetch their descriptors from.

Loading is I/O, so stores are async; file reads run in the default
executor to keep the event loop free.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError

from philgen.errors import OutlineError
from philgen.models.outline import OutlineDescriptor

logger = logging.getLogger(__name__)

BUNDLED_OUTLINE_DIR = Path(__file__).resolve().parent.parent / "data" / "outlines"


class OutlineStore(Protocol):
    async def load(self, name: str) -> OutlineDescriptor: ...


def parse_descriptor(name: str, data: Any) -> OutlineDescriptor:
    try:
        return OutlineDescriptor.model_validate(data)
    except ValidationError as e:
        raise OutlineError(f"Outline {name!r} is malformed: {e.errors()[0]['msg']}") from e


class DirectoryOutlineStore:
    """Reads ``<root>/<name>.json``."""

    def __init__(self, root: str | Path | None = None) -> None:
        self.root = Path(root) if root else BUNDLED_OUTLINE_DIR

    async def load(self, name: str) -> OutlineDescriptor:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._read, name)

    def _read(self, name: str) -> OutlineDescriptor:
        if "/" in name or "\\" in name or name.startswith("."):
            raise OutlineError(f"Invalid outline name: {name!r}")
        path = self.root / f"{name}.json"
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise OutlineError(f"Outline {name!r} not found in {self.root}") from e
        except OSError as e:
            raise OutlineError(f"Failed to read outline {name!r}: {e}") from e
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise OutlineError(f"Outline {name!r} is not valid JSON: {e}") from e
        logger.debug("Loaded outline %s from %s", name, path)
        return parse_descriptor(name, data)


class MemoryOutlineStore:
    """Descriptors held in a dict (raw JSON-like mappings or models)."""

    def __init__(self, outlines: Mapping[str, OutlineDescriptor | Mapping[str, Any]] | None = None) -> None:
        self._outlines = dict(outlines or {})

    def put(self, name: str, descriptor: OutlineDescriptor | Mapping[str, Any]) -> None:
        self._outlines[name] = descriptor

    async def load(self, name: str) -> OutlineDescriptor:
        if name not in self._outlines:
            raise OutlineError(f"Outline {name!r} not found")
        value = self._outlines[name]
        if isinstance(value, OutlineDescriptor):
            return value
        return parse_descriptor(name, value)
