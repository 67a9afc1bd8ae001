"""Outline descriptor models: the JSON files each trait reads its shapes from."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SubPath(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    path_data: str = Field(..., alias="pathData", min_length=1)
    type: Literal["base", "shadow", "highlight"] = "base"


class OutlineDescriptor(BaseModel):
    """``{"pathData": "...", "viewBox": "0 0 420 420", "fillRule": "evenodd", "paths": [...]}``.

    Either ``pathData`` or a non-empty ``paths`` list is required.
    ``fillRule`` decides membership of the parsed outline and defaults to nonzero.
    """

    model_config = ConfigDict(populate_by_name=True)

    path_data: str | None = Field(default=None, alias="pathData")
    view_box: str | None = Field(default=None, alias="viewBox")
    fill_rule: Literal["nonzero", "evenodd"] = Field(default="nonzero", alias="fillRule")
    paths: list[SubPath] = Field(default_factory=list)

    @model_validator(mode="after")
    def _require_geometry(self) -> OutlineDescriptor:
        if not (self.path_data and self.path_data.strip()) and not self.paths:
            raise ValueError("Outline descriptor needs pathData or paths")
        return self

    @property
    def combined_path_data(self) -> str:
        """``pathData`` if present, otherwise every sub-path joined into one compound path."""
        if self.path_data and self.path_data.strip():
            return self.path_data
        return " ".join(p.path_data for p in self.paths)

    def paths_of_type(self, kind: str) -> list[SubPath]:
        return [p for p in self.paths if p.type == kind]
