"""Configuration management for Prompt Studio.

This module provides centralized configuration management using Pydantic Settings.
Configuration is loaded from environment variables with the PROMPTSTUDIO_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (PROMPTSTUDIO_* prefix)
2. .env file in the working directory
3. Default values defined in StudioConfig

The Hugging Face credential is the one exception to the prefix rule: it is
read from ``HF_API_TOKEN`` (the name the Hugging Face tooling uses) or from
``PROMPTSTUDIO_HF_API_TOKEN``.

Example .env file:
    HF_API_TOKEN=hf_xxxxxxxxxxxxxxxxxxxx
    PROMPTSTUDIO_REQUEST_TIMEOUT=90
    PROMPTSTUDIO_SERVER_PORT=8000

Missing Credential
------------------
A missing token does **not** prevent the application from starting.  The
gateway reports it per request as a 500 error so that the page still loads
and shows a readable message.

Global Configuration Instance
------------------------------
A global ``config`` instance is created at module import time.  The FastAPI
application hands it to :class:`~promptstudio.core.gateway.ImageGateway` on
start-up; tests construct their own instances instead.

Usage Example
-------------
    from promptstudio.core.config import config

    print(config.inference_url)
    print(config.generation_parameters())
"""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent.parent

DEFAULT_INFERENCE_URL = (
    "https://api-inference.huggingface.co/models/black-forest-labs/FLUX.1-dev"
)


class StudioConfig(BaseSettings):
    """Main configuration for Prompt Studio.

    Attributes
    ----------
    Upstream Settings:
        hf_api_token : SecretStr | None
            Bearer token for the Hugging Face Inference API
        inference_url : str
            Text-to-image inference endpoint
        request_timeout : float
            Seconds to wait for the upstream before giving up

    Generation Settings:
        image_width : int
            Requested image width in pixels
        image_height : int
            Requested image height in pixels
        guidance_scale : float
            Classifier-free guidance scale
        num_inference_steps : int
            Number of diffusion steps run by the upstream model

    Server Settings:
        server_host : str
            Bind address for uvicorn
        server_port : int
            Port for uvicorn (1024-65535)
        log_level : str
            Root logging level used by the CLI entry point
        templates_dir : Path
            Directory holding ``index.html``

    Examples
    --------
        >>> cfg = StudioConfig(hf_api_token="hf_test", _env_file=None)
        >>> cfg.generation_parameters()["num_inference_steps"]
        28
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PROMPTSTUDIO_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Upstream settings
    hf_api_token: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("hf_api_token", "HF_API_TOKEN", "PROMPTSTUDIO_HF_API_TOKEN"),
        description="Bearer token for the Hugging Face Inference API",
    )
    inference_url: str = Field(
        default=DEFAULT_INFERENCE_URL,
        description="Text-to-image inference endpoint",
    )
    request_timeout: float = Field(
        default=60.0,
        description="Seconds to wait for the upstream response",
        gt=0,
    )

    # Generation settings sent with every request
    image_width: int = Field(default=512, ge=64, le=2048)
    image_height: int = Field(default=512, ge=64, le=2048)
    guidance_scale: float = Field(
        default=3.5,
        description="Classifier-free guidance scale",
        ge=0.0,
    )
    num_inference_steps: int = Field(
        default=28,
        description="Number of diffusion steps run upstream",
        ge=1,
        le=100,
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address (0.0.0.0 for local network)",
    )
    server_port: int = Field(
        default=7860,
        description="Server port",
        ge=1024,
        le=65535,
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root logging level",
    )
    templates_dir: Path = Field(
        default=PACKAGE_DIR / "templates",
        description="Directory containing index.html",
    )

    @property
    def has_token(self) -> bool:
        """Whether a non-blank API token is configured."""
        return bool(self.hf_api_token and self.hf_api_token.get_secret_value().strip())

    def generation_parameters(self) -> dict:
        """Return the ``parameters`` object sent to the inference endpoint.

        Returns:
            Dictionary with ``height``, ``width``, ``guidance_scale`` and
            ``num_inference_steps``.
        """
        return {
            "height": self.image_height,
            "width": self.image_width,
            "guidance_scale": self.guidance_scale,
            "num_inference_steps": self.num_inference_steps,
        }


# Global configuration instance, loaded from the environment and .env file.
config = StudioConfig()
