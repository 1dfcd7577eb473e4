from __future__ import annotations

from typing import Dict, Type

from pydantic import BaseModel

from .http import GenerateImageRequest, ErrorBody
from .generation import (
    InlineData,
    Part,
    Content,
    GenerationConfig,
    GenerationRequest,
    EncodedImage,
)


# Registry mapping output schema filenames to models for generation
SCHEMA_MODELS: Dict[str, Type[BaseModel]] = {
    "generate_image.request.schema.json": GenerateImageRequest,
    "error.body.schema.json": ErrorBody,
    "generation.request.schema.json": GenerationRequest,
    "encoded.image.schema.json": EncodedImage,
}

__all__ = [
    "GenerateImageRequest",
    "ErrorBody",
    "InlineData",
    "Part",
    "Content",
    "GenerationConfig",
    "GenerationRequest",
    "EncodedImage",
    "SCHEMA_MODELS",
]
