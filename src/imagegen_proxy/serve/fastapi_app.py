"""FastAPI proxy for the FAL.ai image generation API.

Endpoints:
- POST /api/generate-image  { "prompt": "...", "num_images": 1, ... }
- GET  /api/generate-image/health

Build the app with ``create_app()``; the FAL client is constructed once and
handed in explicitly, so a missing provider URL stops startup.
"""
from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from imagegen_proxy.common.config import load_settings
from imagegen_proxy.common.errors import ValidationError
from imagegen_proxy.common.schema import (
    GenerationFailure,
    GenerationRequest,
    GenerationResponse,
)
from imagegen_proxy.common.validation import errors_from_pydantic, validate_generation_request
from imagegen_proxy.serve.fal_client import FalClient

LOGGER = logging.getLogger("imagegen_proxy.serve.app")

SERVICE_NAME = "image-generation"

DESCRIPTION = (
    "Generates images from a text prompt through the FAL.ai flux-pro model. "
    "Supports number of images, aspect ratio, safety settings and output format."
)

GENERATE_RESPONSES: dict[int | str, dict[str, Any]] = {
    200: {
        "description": "Images generated successfully",
        "content": {
            "application/json": {
                "example": {
                    "status": "success",
                    "images": [
                        {
                            "url": "https://fal.media/files/panda/0p6XD090UqfnRLH8BZwj9.jpg",
                            "width": 2752,
                            "height": 1536,
                            "content_type": "image/jpeg",
                        }
                    ],
                    "timings": {},
                    "seed": 1627638640,
                    "has_nsfw_concepts": [False],
                    "prompt": "Extreme close-up of a single tiger eye, direct frontal view.",
                }
            }
        },
    },
    400: {
        "description": "Invalid request parameters",
        "content": {
            "application/json": {
                "example": {
                    "status": "error",
                    "error": "Validation failed: {'num_images': 'Number of images must be at least 1'}",
                }
            }
        },
    },
    500: {
        "description": "Internal server error or FAL.ai API error",
        "content": {
            "application/json": {
                "example": {
                    "status": "error",
                    "error": "FAL.ai API error (HTTP 429): Rate limit exceeded",
                }
            }
        },
    },
}


def _respond(result: GenerationResponse, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=result.model_dump(mode="json", exclude_none=True))


def _validation_failed(errors: dict[str, str]) -> JSONResponse:
    exc = ValidationError(errors)
    LOGGER.warning("Validation error: %s", exc)
    return _respond(GenerationFailure(error=str(exc)), 400)


def get_fal_client(request: Request) -> FalClient:
    return request.app.state.fal_client


def create_app(client: Any = None, cfg_path: str | None = None) -> FastAPI:
    """
    Build the proxy application.

    Args:
        client: Object with an async ``generate(GenerationRequest)`` method.
            When omitted a FalClient is built from ``load_settings(cfg_path)``.
        cfg_path: Optional YAML config path used only when client is None.

    Raises:
        ConfigurationError: provider settings are missing or malformed.
    """
    if client is None:
        client = FalClient(load_settings(cfg_path))

    app = FastAPI(title="Image Generation Proxy API", description=DESCRIPTION, version="1.0.0")
    app.state.fal_client = client

    @app.exception_handler(ValidationError)
    async def _on_validation_error(_: Request, exc: ValidationError) -> JSONResponse:
        return _validation_failed(exc.errors)

    @app.exception_handler(RequestValidationError)
    async def _on_request_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
        return _validation_failed(errors_from_pydantic(exc.errors()))

    @app.exception_handler(Exception)
    async def _on_unhandled(_: Request, exc: Exception) -> JSONResponse:
        LOGGER.error("Unexpected error occurred: %s", exc, exc_info=exc)
        return _respond(GenerationFailure(error=f"An unexpected error occurred: {exc}"), 500)

    @app.post("/api/generate-image", responses=GENERATE_RESPONSES)
    async def generate_image(
        body: GenerationRequest, fal: Any = Depends(get_fal_client)
    ) -> JSONResponse:
        LOGGER.info("Received image generation request with prompt: %s", body.prompt)
        validate_generation_request(body)

        try:
            result = await fal.generate(body)
        except Exception as e:
            LOGGER.error("Unexpected error in image generation: %s", e, exc_info=True)
            result = GenerationFailure(error=f"Unexpected error: {e}")

        if result.status == "error":
            return _respond(result, 500)
        return _respond(result, 200)

    @app.get("/api/generate-image/health")
    def health() -> dict[str, str]:
        return {
            "status": "UP",
            "service": SERVICE_NAME,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return app
