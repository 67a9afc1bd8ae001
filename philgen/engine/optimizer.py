"""SVG optimization pass and the request/response channel that runs it.

The pass itself is a pure text transform. The channel is a single worker
fed by an asyncio queue: every request carries a correlation id and the
worker resolves the matching future, so concurrent callers never see each
other's results. A missing or failed response degrades to the original
text; optimization is never required for correctness.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import re
from collections.abc import Callable
from typing import Any

from philgen.svg.serializer import format_number

logger = logging.getLogger(__name__)

_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_BETWEEN_TAGS_RE = re.compile(r">\s+<")
_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][-+]?\d+)?")

# Attributes whose numbers are geometry and safe to round.
_GEOMETRY_ATTRS = (
    "d", "points", "x", "y", "x1", "y1", "x2", "y2", "cx", "cy", "r", "rx", "ry",
    "fx", "fy", "stroke-width", "transform",
)
_ATTR_RE = re.compile(r'(\s(?:' + "|".join(re.escape(a) for a in _GEOMETRY_ATTRS) + r')=")([^"]*)(")')


def optimize_svg(text: str, precision: int = 1) -> str:
    """Strip comments, collapse inter-tag whitespace and round geometry numbers."""
    if "<svg" not in text:
        raise ValueError("Input is not an SVG document")

    def round_numbers(m: re.Match[str]) -> str:
        value = _NUMBER_RE.sub(lambda n: format_number(float(n.group(0)), precision), m.group(2))
        return f"{m.group(1)}{value}{m.group(3)}"

    out = _COMMENT_RE.sub("", text)
    out = _BETWEEN_TAGS_RE.sub("><", out.strip())
    return _ATTR_RE.sub(round_numbers, out)


class OptimizerChannel:
    """Single-consumer optimization channel with per-request timeout."""

    def __init__(
        self,
        timeout: float = 5.0,
        precision: int = 1,
        optimize_fn: Callable[[str, int], str] = optimize_svg,
    ) -> None:
        self.timeout = timeout
        self.precision = precision
        self._optimize_fn = optimize_fn
        self._ids = itertools.count(1)
        self._queue: asyncio.Queue[dict[str, Any]] | None = None
        self._pending: dict[int, asyncio.Future[dict[str, Any]]] = {}
        self._worker: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def start(self) -> None:
        loop = asyncio.get_running_loop()
        if self.running and self._worker.get_loop() is loop:
            return
        self._queue = asyncio.Queue()
        self._pending = {}
        self._worker = loop.create_task(self._run())
        logger.debug("Optimizer worker started")

    async def close(self) -> None:
        if self._worker is None:
            return
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None
        for fut in self._pending.values():
            if not fut.done():
                fut.cancel()
        self._pending.clear()

    async def optimize(self, text: str) -> str:
        """Optimized ``text``, or ``text`` unchanged on timeout or error."""
        self.start()
        request_id = next(self._ids)
        future: asyncio.Future[dict[str, Any]] = asyncio.get_running_loop().create_future()
        self._pending[request_id] = future
        await self._queue.put({"id": request_id, "artifactText": text})

        try:
            response = await asyncio.wait_for(future, self.timeout)
        except asyncio.TimeoutError:
            logger.warning("Optimizer request %d timed out after %.1fs; using original", request_id, self.timeout)
            return text
        finally:
            self._pending.pop(request_id, None)

        if not response.get("ok"):
            logger.warning("Optimizer request %d failed: %s; using original", request_id, response.get("error"))
            return text
        return response["optimizedText"]

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        while True:
            request = await self._queue.get()
            try:
                optimized = await loop.run_in_executor(
                    None, self._optimize_fn, request["artifactText"], self.precision
                )
                response = {"id": request["id"], "ok": True, "optimizedText": optimized}
            except Exception as e:
                response = {"id": request["id"], "ok": False, "error": str(e)}
            self._resolve(response)

    def _resolve(self, response: dict[str, Any]) -> None:
        future = self._pending.get(response["id"])
        if future is None or future.done():
            logger.debug("Dropping late optimizer response %d", response["id"])
            return
        future.set_result(response)
