from __future__ import annotations

from pydantic import BaseModel, Field


class GenerateImageRequest(BaseModel):
    """Request body for the generate-image endpoint."""

    baseImageUrl: str = Field(min_length=1, description="URL of the blank product image to decorate")


class ErrorBody(BaseModel):
    """JSON body returned for fetch failures and unexpected errors."""

    error: str


__all__ = [
    "GenerateImageRequest",
    "ErrorBody",
]
