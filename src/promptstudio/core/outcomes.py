"""Outcome types returned by the image generation gateway.

A generation ends in exactly one of two request-scoped values:

- :class:`ImageResult` — the upstream returned image bytes, which are inlined
  as a base64 data URI.
- :class:`GenerationError` — something went wrong; carries the HTTP status
  and the human-readable message the client should display.

Nothing here is persisted or cached.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

DEFAULT_IMAGE_MIME = "image/png"


class ErrorKind(str, Enum):
    """Failure taxonomy surfaced to API clients."""

    INVALID_INPUT = "invalid_input"
    MISCONFIGURED = "misconfigured"
    UPSTREAM_LOADING = "upstream_loading"
    UPSTREAM_UNAUTHORIZED = "upstream_unauthorized"
    UPSTREAM_RATE_LIMITED = "upstream_rate_limited"
    UPSTREAM_ERROR = "upstream_error"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class ImageResult:
    """A successfully generated image.

    Attributes:
        image_data_uri: ``data:<mime>;base64,<payload>`` string.
        prompt: The prompt the image was generated from.
    """

    image_data_uri: str
    prompt: str

    @property
    def ok(self) -> bool:
        return True

    def to_payload(self) -> dict:
        """Return the JSON body sent to the browser."""
        return {"imageUrl": self.image_data_uri, "prompt": self.prompt}


@dataclass(frozen=True)
class GenerationError:
    """A failed generation.

    Attributes:
        status_code: HTTP status the API layer should respond with.
        message: Message intended to be displayed directly to the user.
        kind: Category from :class:`ErrorKind`.
    """

    status_code: int
    message: str
    kind: ErrorKind = field(default=ErrorKind.UNEXPECTED)

    @property
    def ok(self) -> bool:
        return False

    def to_payload(self) -> dict:
        """Return the JSON body sent to the browser."""
        return {"error": self.message}


GenerationOutcome = Union[ImageResult, GenerationError]


def image_mime_type(content_type: str | None) -> str:
    """Pick the MIME type to embed in the data URI.

    The declared content type is used only when it is an ``image/*`` type;
    parameters such as ``; charset=...`` are dropped.  Anything else falls
    back to ``image/png``.

    Args:
        content_type: Value of the upstream ``Content-Type`` header, if any.

    Returns:
        MIME type string.
    """
    mime = (content_type or "").split(";", 1)[0].strip().lower()
    if mime.startswith("image/"):
        return mime
    return DEFAULT_IMAGE_MIME


def build_data_uri(content: bytes, content_type: str | None = None) -> str:
    """Encode raw image bytes as a self-contained data URI.

    Args:
        content: Raw image bytes.
        content_type: Declared upstream content type.

    Returns:
        ``data:<mime>;base64,<payload>``

    Example:
        >>> build_data_uri(b"\\x01\\x02\\x03", "image/png")
        'data:image/png;base64,AQID'
    """
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{image_mime_type(content_type)};base64,{encoded}"
