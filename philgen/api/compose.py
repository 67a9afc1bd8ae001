"""POST /api/compose: generate layers and stack them into one SVG."""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from philgen.config import settings
from philgen.dependencies import get_orchestrator
from philgen.engine.context import ComposeResult
from philgen.engine.pipeline import Orchestrator
from philgen.models.requests import ComposeRequest
from philgen.models.responses import ComposeResponse

router = APIRouter()


def to_response(result: ComposeResult) -> ComposeResponse:
    return ComposeResponse(
        status=result.status,
        svg=result.export_svg() if result.artifacts else "",
        layers=result.layers,
        failed=result.failed,
        unknown=result.unknown,
        approximate=result.approximate,
        seed=result.seed,
        processing_time_ms=result.elapsed_ms,
    )


def _seed(requested: int | None) -> int | None:
    return requested if requested is not None else settings.default_seed


async def _stream_compose(orchestrator: Orchestrator, req: ComposeRequest) -> AsyncGenerator[str, None]:
    """One progress event per layer transition, then the result."""
    async for event in orchestrator.compose_streaming(req.layers, _seed(req.seed), optimize=req.optimize):
        if event["status"] == "result":
            data = to_response(event["result"]).model_dump()
            yield f"event: result\ndata: {json.dumps(data)}\n\n"
        else:
            yield f"event: progress\ndata: {json.dumps(event)}\n\n"

    yield f"event: done\ndata: {json.dumps({'type': 'done'})}\n\n"


@router.post("/compose/stream")
async def compose_stream(
    req: ComposeRequest, orchestrator: Orchestrator = Depends(get_orchestrator)
) -> StreamingResponse:
    return StreamingResponse(
        _stream_compose(orchestrator, req),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@router.post("/compose", response_model=ComposeResponse)
async def compose(req: ComposeRequest, orchestrator: Orchestrator = Depends(get_orchestrator)) -> ComposeResponse:
    result = await orchestrator.compose(req.layers, _seed(req.seed), optimize=req.optimize)
    return to_response(result)
