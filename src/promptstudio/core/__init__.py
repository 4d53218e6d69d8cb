"""Core functionality for Prompt Studio.

- **StudioConfig** / **config**: Pydantic Settings configuration (``PROMPTSTUDIO_`` prefix).
- **ImageGateway**: mediates the call to the hosted text-to-image endpoint.
- **ImageResult** / **GenerationError**: the two possible outcomes of a generation.
"""

from promptstudio.core.config import StudioConfig, config
from promptstudio.core.gateway import ImageGateway, ResponseKind, classify_response
from promptstudio.core.outcomes import (
    ErrorKind,
    GenerationError,
    GenerationOutcome,
    ImageResult,
    build_data_uri,
)

__all__ = [
    "ErrorKind",
    "GenerationError",
    "GenerationOutcome",
    "ImageGateway",
    "ImageResult",
    "ResponseKind",
    "StudioConfig",
    "build_data_uri",
    "classify_response",
    "config",
]
