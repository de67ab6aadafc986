"""Pydantic models for request/response types."""
from __future__ import annotations
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator, field_validator
from pydantic import ValidationError as PydanticValidationError

OutputFormat = Literal["jpeg", "png"]
SafetyTolerance = Literal["1", "2", "3"]
AspectRatio = Literal["1:1", "16:9", "9:16", "4:3", "3:4"]

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class GenerationRequest(BaseModel):
    """Inbound image generation request.

    ``prompt`` and ``num_images`` are optional at the model level so that a
    missing value reaches the handler's validation and gets a field message.
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "examples": [
                {
                    "prompt": "Extreme close-up of a single tiger eye, direct frontal view. Detailed iris and pupil.",
                    "num_images": 1,
                    "enable_safety_checker": True,
                    "output_format": "jpeg",
                    "safety_tolerance": "2",
                    "aspect_ratio": "16:9",
                },
                {
                    "prompt": "A serene mountain landscape at sunset with golden light filtering through clouds",
                    "num_images": 3,
                    "enable_safety_checker": True,
                    "output_format": "jpeg",
                    "safety_tolerance": "2",
                    "aspect_ratio": "16:9",
                },
            ]
        },
    )

    prompt: str | None = Field(default=None, description="Text prompt for image generation")
    num_images: int | None = Field(default=None, description="Number of images to generate (1-4)")
    enable_safety_checker: bool = True
    output_format: OutputFormat = "jpeg"
    safety_tolerance: SafetyTolerance = "2"
    aspect_ratio: AspectRatio = "16:9"


class GeneratedImage(BaseModel):
    """Generated image with URL and metadata."""

    model_config = ConfigDict(frozen=True)

    url: str | None = None
    width: int | None = None
    height: int | None = None
    content_type: str | None = None


class GenerationSuccess(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["success"] = "success"
    images: list[GeneratedImage] = Field(default_factory=list)
    timings: Any = None
    seed: int | None = None
    has_nsfw_concepts: list[bool | None] | None = None
    prompt: str | None = None


class GenerationFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["error"] = "error"
    error: str


GenerationResponse = Annotated[
    Union[GenerationSuccess, GenerationFailure], Field(discriminator="status")
]


class ProviderImage(BaseModel):
    """One entry of FAL.ai's ``images`` list.

    Decoding is per field: a missing or wrongly typed value becomes ``None``
    and a non-object entry becomes an empty image.
    """

    model_config = ConfigDict(extra="ignore")

    url: str | None = None
    width: int | None = Field(default=None, gt=0)
    height: int | None = Field(default=None, gt=0)
    content_type: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _tolerate_non_objects(cls, data: Any) -> Any:
        return data if isinstance(data, dict) else {}

    @field_validator("url", "width", "height", "content_type", mode="wrap")
    @classmethod
    def _drop_invalid(cls, value: Any, handler: Any) -> Any:
        try:
            return handler(value)
        except PydanticValidationError:
            return None

    def to_generated_image(self) -> GeneratedImage:
        return GeneratedImage(
            url=self.url,
            width=self.width,
            height=self.height,
            content_type=self.content_type,
        )


class ProviderResponse(BaseModel):
    """Top-level FAL.ai response body. Every field is independently optional."""

    model_config = ConfigDict(extra="ignore")

    images: list[ProviderImage] | None = None
    timings: Any = None
    seed: int | None = Field(default=None, ge=INT64_MIN, le=INT64_MAX)
    has_nsfw_concepts: list[bool | None] | None = None
    prompt: str | None = None

    def to_success(self) -> GenerationSuccess:
        return GenerationSuccess(
            images=[img.to_generated_image() for img in self.images or []],
            timings=self.timings,
            seed=self.seed,
            has_nsfw_concepts=self.has_nsfw_concepts,
            prompt=self.prompt,
        )
