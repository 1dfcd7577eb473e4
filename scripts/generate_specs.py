#!/usr/bin/env python3
"""
Generate JSON Schemas, YAML variants, and OpenAPI from Pydantic models.

Outputs under src/specs/:
 - schemas/*.json (and *.yaml)
 - openapi.yaml and openapi.json
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

try:
    import yaml  # type: ignore
except Exception as exc:  # pragma: no cover
    print("PyYAML is required: pip install pyyaml", file=sys.stderr)
    raise


ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
SPECS = SRC / "specs"
SCHEMAS_DIR = SPECS / "schemas"

sys.path.insert(0, str(ROOT))

from src.specs.models import (  # noqa: E402
    SCHEMA_MODELS,
    GenerateImageRequest,
    ErrorBody,
)


def write_json_yaml(obj: dict, json_path: Path) -> None:
    json_path.parent.mkdir(parents=True, exist_ok=True)
    with json_path.open("w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2, ensure_ascii=False)
    yaml_path = json_path.with_suffix(".yaml")
    with yaml_path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(obj, f, sort_keys=False)


def generate_model_schemas(out_dir: Path = SCHEMAS_DIR) -> None:
    for filename, model in SCHEMA_MODELS.items():
        schema = model.model_json_schema()
        write_json_yaml(schema, out_dir / filename)


def _text(description: str) -> dict:
    return {
        "description": description,
        "content": {"text/plain": {"schema": {"type": "string"}}},
    }


def build_openapi() -> dict:
    # Inline the model schemas as OpenAPI components
    components = {
        "schemas": {
            "GenerateImageRequest": GenerateImageRequest.model_json_schema(),
            "ErrorBody": ErrorBody.model_json_schema(),
        }
    }

    spec = {
        "openapi": "3.0.3",
        "info": {
            "title": "Mockup Generator Functions API",
            "version": "0.1.0",
            "description": "Composes reference art onto a product photo using the Gemini image model.",
        },
        "servers": [
            {"url": "http://localhost:7071/api", "description": "Local Functions host"}
        ],
        "paths": {
            "/generate-image": {
                "post": {
                    "summary": "Render the reference art onto the supplied product image",
                    "operationId": "generateImage",
                    "requestBody": {
                        "required": True,
                        "content": {
                            "application/json": {
                                "schema": {"$ref": "#/components/schemas/GenerateImageRequest"}
                            }
                        },
                    },
                    "responses": {
                        "200": {
                            "description": "Verbatim generateContent response from the Gemini API",
                            "content": {"application/json": {"schema": {"type": "object"}}},
                        },
                        "400": _text("Missing or invalid baseImageUrl"),
                        "405": _text("Method other than POST"),
                        "500": {
                            "description": "Misconfigured API key (text), or malformed JSON, image fetch failure or unexpected error (JSON)",
                            "content": {
                                "text/plain": {"schema": {"type": "string"}},
                                "application/json": {"schema": {"$ref": "#/components/schemas/ErrorBody"}},
                            },
                        },
                        "default": _text("Gemini API error, relayed with its status code and body"),
                    },
                }
            }
        },
        "components": components,
    }
    return spec


def generate_openapi(out_dir: Path = SPECS) -> None:
    spec = build_openapi()
    write_json_yaml(spec, out_dir / "openapi.json")


def main() -> None:
    generate_model_schemas()
    generate_openapi()
    print("Specs generated under src/specs/")


if __name__ == "__main__":
    main()
