"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SelectSourceRequest(BaseModel):
    source: str = Field(..., description="Identifier of the image to decompose")


class StepRequest(BaseModel):
    steps: int = Field(default=1, ge=1, le=10_000, description="Maximum number of splits to run")
    include_boxes: bool = Field(default=False, description="Attach box layout to added fragments")
