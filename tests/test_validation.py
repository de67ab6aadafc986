from __future__ import annotations

import pytest
from pydantic import ValidationError as PydanticValidationError

from imagegen_proxy.common.errors import ValidationError
from imagegen_proxy.common.schema import GenerationRequest
from imagegen_proxy.common.validation import (
    collect_errors,
    errors_from_pydantic,
    validate_generation_request,
)


def test_valid_request_passes_unchanged() -> None:
    req = GenerationRequest(prompt="A cat", num_images=4)
    assert validate_generation_request(req) is req
    assert collect_errors(req) == {}


@pytest.mark.parametrize(
    "num_images, message",
    [
        (None, "Number of images is required"),
        (0, "Number of images must be at least 1"),
        (-2, "Number of images must be at least 1"),
        (5, "Number of images cannot exceed 4"),
    ],
)
def test_num_images_bounds(num_images: int | None, message: str) -> None:
    req = GenerationRequest(prompt="A cat", num_images=num_images)
    assert collect_errors(req) == {"num_images": message}


def test_blank_prompt_and_bad_count_raise_together() -> None:
    req = GenerationRequest(prompt=" ", num_images=9)
    with pytest.raises(ValidationError) as info:
        validate_generation_request(req)
    assert info.value.errors == {
        "prompt": "Prompt is required",
        "num_images": "Number of images cannot exceed 4",
    }
    assert str(info.value).startswith("Validation failed: ")


def test_request_is_frozen() -> None:
    req = GenerationRequest(prompt="A cat", num_images=1)
    with pytest.raises(PydanticValidationError):
        req.prompt = "A dog"  # type: ignore[misc]


def test_errors_from_pydantic_strips_body_segment() -> None:
    details = [
        {"loc": ("body", "output_format"), "msg": "Input should be 'jpeg' or 'png'"},
        {"loc": ("body", "output_format"), "msg": "second message ignored"},
        {"loc": ("body",), "msg": "Field required"},
    ]
    assert errors_from_pydantic(details) == {
        "output_format": "Input should be 'jpeg' or 'png'",
        "body": "Field required",
    }
