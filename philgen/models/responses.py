"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    traits_registered: int = 0


class LayerInfo(BaseModel):
    name: str
    index: int
    outlines: list[str] = Field(default_factory=list)
    description: str = ""


class ComposeResponse(BaseModel):
    status: str = Field(..., description='"composite", "single" or "empty"')
    svg: str = ""
    layers: list[str] = Field(default_factory=list)
    failed: dict[str, str] = Field(default_factory=dict)
    unknown: list[str] = Field(default_factory=list)
    approximate: list[str] = Field(default_factory=list)
    seed: int = 0
    processing_time_ms: float = 0.0
