"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ComposeRequest(BaseModel):
    layers: list[str] = Field(..., description="Layer names to generate, in any order")
    seed: int | None = Field(default=None, ge=0, description="Seed for reproducible output; random when omitted")
    optimize: bool = Field(default=False, description="Run each artifact through the SVG optimizer")


class LayerRequest(BaseModel):
    seed: int | None = Field(default=None, ge=0)
    optimize: bool = False
