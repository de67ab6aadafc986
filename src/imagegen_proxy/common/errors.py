"""Error types raised inside the proxy."""
from __future__ import annotations


class ImageGenProxyError(Exception):
    """Base class for all proxy errors."""


class ConfigurationError(ImageGenProxyError):
    """Required configuration is missing or malformed. Fatal at startup."""


class ValidationError(ImageGenProxyError):
    """Caller-supplied request violates field constraints."""

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        super().__init__(f"Validation failed: {self.errors}")


class FalApiError(ImageGenProxyError):
    """A single call to FAL.ai did not yield a usable response.

    ``str(exc)`` is the message returned to the caller.
    """


class ProviderError(FalApiError):
    """FAL.ai answered with a non-success HTTP status."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"FAL.ai API error (HTTP {status_code}): {body}")


class TransportError(FalApiError):
    """FAL.ai could not be reached (DNS, connect, timeout, reset)."""

    def __init__(self, cause: object) -> None:
        self.cause = cause
        super().__init__(f"Error calling FAL.ai API: {cause}")


class MappingError(FalApiError):
    """FAL.ai answered but the body was not in the expected shape."""

    def __init__(self, cause: object) -> None:
        self.cause = cause
        super().__init__(f"Error processing FAL.ai response: {cause}")
