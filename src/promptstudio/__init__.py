"""Prompt Studio - text-to-image demo backed by a hosted inference model."""

__version__ = "0.1.0"

from promptstudio.core.config import StudioConfig, config
from promptstudio.core.gateway import ImageGateway
from promptstudio.core.outcomes import GenerationError, ImageResult

__all__ = [
    "GenerationError",
    "ImageGateway",
    "ImageResult",
    "StudioConfig",
    "config",
]
