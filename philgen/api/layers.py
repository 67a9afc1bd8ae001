"""Layer catalogue and single-layer generation."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from philgen.api.compose import to_response
from philgen.config import settings
from philgen.dependencies import get_orchestrator
from philgen.engine.pipeline import Orchestrator
from philgen.models.requests import LayerRequest
from philgen.models.responses import ComposeResponse, LayerInfo

router = APIRouter()


@router.get("/layers", response_model=list[LayerInfo])
async def list_layers(orchestrator: Orchestrator = Depends(get_orchestrator)) -> list[LayerInfo]:
    return [
        LayerInfo(
            name=spec.name,
            index=orchestrator.order.index(spec.name) if spec.name in orchestrator.order else -1,
            outlines=list(spec.outlines),
            description=spec.description,
        )
        for spec in orchestrator.registry.all(orchestrator.order)
    ]


@router.post("/layers/{name}", response_model=ComposeResponse)
async def generate_layer(
    name: str,
    req: LayerRequest | None = None,
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> ComposeResponse:
    req = req or LayerRequest()
    if name not in orchestrator.order or not orchestrator.registry.has(name):
        raise HTTPException(status_code=404, detail=f"Unknown layer: {name}")
    seed = req.seed if req.seed is not None else settings.default_seed
    result = await orchestrator.compose([name], seed, optimize=req.optimize)
    return to_response(result)
