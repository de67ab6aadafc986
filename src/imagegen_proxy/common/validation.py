"""Field checks applied to a GenerationRequest before it is forwarded."""
from __future__ import annotations
from typing import Any, Iterable

from imagegen_proxy.common.errors import ValidationError
from imagegen_proxy.common.schema import GenerationRequest

MIN_IMAGES = 1
MAX_IMAGES = 4


def collect_errors(request: GenerationRequest) -> dict[str, str]:
    """
    Check required fields of a request.

    Args:
        request: Parsed inbound request.

    Returns:
        Mapping of field name to message; empty when the request is valid.
    """
    errors: dict[str, str] = {}
    if request.prompt is None or not request.prompt.strip():
        errors["prompt"] = "Prompt is required"

    if request.num_images is None:
        errors["num_images"] = "Number of images is required"
    elif request.num_images < MIN_IMAGES:
        errors["num_images"] = f"Number of images must be at least {MIN_IMAGES}"
    elif request.num_images > MAX_IMAGES:
        errors["num_images"] = f"Number of images cannot exceed {MAX_IMAGES}"
    return errors


def validate_generation_request(request: GenerationRequest) -> GenerationRequest:
    """Return the request unchanged, or raise ValidationError listing every bad field."""
    errors = collect_errors(request)
    if errors:
        raise ValidationError(errors)
    return request


def errors_from_pydantic(details: Iterable[dict[str, Any]]) -> dict[str, str]:
    """Flatten pydantic/FastAPI error entries into a field -> message mapping.

    The leading ``body`` location segment is dropped so keys match wire names.
    """
    errors: dict[str, str] = {}
    for item in details:
        loc = [str(part) for part in item.get("loc", ()) if part != "body"]
        field = ".".join(loc) or "body"
        errors.setdefault(field, str(item.get("msg", "Invalid value")))
    return errors
