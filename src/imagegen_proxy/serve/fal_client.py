"""Async forwarding client for the FAL.ai image generation API.

One POST per call to ``<api_url>/<model_id>``; the provider's answer (or its
failure) is always returned as a GenerationSuccess or GenerationFailure.
"""
from __future__ import annotations
import logging
import time
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from imagegen_proxy.common.config import FalSettings
from imagegen_proxy.common.errors import (
    ConfigurationError,
    FalApiError,
    MappingError,
    ProviderError,
    TransportError,
)
from imagegen_proxy.common.schema import (
    GenerationFailure,
    GenerationRequest,
    GenerationResponse,
    GenerationSuccess,
    ProviderResponse,
)

LOGGER = logging.getLogger("imagegen_proxy.serve.fal_client")

PAYLOAD_KEYS = (
    "prompt",
    "num_images",
    "enable_safety_checker",
    "output_format",
    "safety_tolerance",
    "aspect_ratio",
)


def build_payload(request: GenerationRequest) -> dict[str, Any]:
    """Outbound body: the six request fields, verbatim."""
    return {key: getattr(request, key) for key in PAYLOAD_KEYS}


def map_provider_response(data: Any) -> GenerationSuccess:
    """
    Decode a FAL.ai JSON body into the success variant.

    Args:
        data: Parsed JSON body.

    Raises:
        MappingError: body is not an object or a top-level field has the wrong shape.
    """
    if not isinstance(data, dict):
        raise MappingError(f"expected a JSON object, got {type(data).__name__}")
    try:
        parsed = ProviderResponse.model_validate(data)
    except PydanticValidationError as e:
        raise MappingError(e) from e
    return parsed.to_success()


class FalClient:
    """Owns the outbound FAL.ai dependency. Read-only after construction."""

    def __init__(
        self,
        settings: FalSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        LOGGER.info("FAL config - API URL: %s", settings.api_url)
        LOGGER.info("FAL config - Model ID: %s", settings.model_id)
        LOGGER.info("FAL config - API Key: %s", settings.masked_api_key())
        if not settings.api_url:
            raise ConfigurationError("FAL API URL is not configured")
        if not settings.api_key:
            LOGGER.warning("FAL API key is not configured; provider calls will be rejected")

        self._settings = settings
        self._transport = transport
        self._base_url = settings.api_url.rstrip("/")
        self._headers = {
            "Authorization": f"Key {settings.api_key}",
            "Content-Type": "application/json",
        }

    @property
    def settings(self) -> FalSettings:
        return self._settings

    @property
    def endpoint(self) -> str:
        return f"{self._base_url}/{self._settings.model_id.lstrip('/')}"

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        """Forward one request and normalize the outcome. Never raises FalApiError."""
        LOGGER.info("Generating image with prompt: %s", request.prompt)
        payload = build_payload(request)
        start = time.time()
        try:
            data = await self._post(payload)
            result = map_provider_response(data)
        except FalApiError as e:
            LOGGER.error("FAL.ai call failed: %s", e)
            return GenerationFailure(error=str(e))

        latency = int((time.time() - start) * 1000)
        LOGGER.info("FAL.ai returned %d image(s) in %d ms", len(result.images), latency)
        return result

    async def _post(self, payload: dict[str, Any]) -> Any:
        try:
            async with httpx.AsyncClient(
                headers=self._headers,
                timeout=self._settings.timeout_seconds,
                transport=self._transport,
            ) as client:
                r = await client.post(self.endpoint, json=payload)
                r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProviderError(e.response.status_code, e.response.text) from e
        except httpx.HTTPError as e:
            raise TransportError(e) from e

        try:
            return r.json()
        except ValueError as e:
            raise MappingError(e) from e
