"""Pydantic request and response models for the Prompt Studio API.

Models
------
GenerateImageRequest
    Payload for ``POST /api/generate-image``.
GenerateImageResponse
    Successful generation: the image as a data URI plus the prompt.
ErrorResponse
    Any failed request: a single human-readable ``error`` message.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class GenerateImageRequest(BaseModel):
    """Request body for the ``POST /api/generate-image`` endpoint.

    ``prompt`` is optional at the schema level so that a missing or blank
    prompt reaches the gateway and is reported as ``400 Prompt is required``
    rather than as a schema error.

    Attributes:
        prompt: Text description of the image to generate.
    """

    prompt: str | None = Field(
        default=None,
        description="Text prompt describing the image (must not be blank).",
    )


class GenerateImageResponse(BaseModel):
    """Response body for a successful generation.

    Attributes:
        imageUrl: Base64 data URI of the generated image.
        prompt: The prompt the image was generated from.
    """

    imageUrl: str = Field(
        ...,
        description="Image encoded as data:<mime>;base64,<payload>.",
    )
    prompt: str = Field(
        ...,
        description="Prompt used for generation.",
    )


class ErrorResponse(BaseModel):
    """Response body for a failed request."""

    error: str = Field(
        ...,
        description="Message intended to be displayed directly to the user.",
    )
