"""Image generation gateway for the hosted text-to-image model.

This module provides :class:`ImageGateway`, the single point of contact with
the Hugging Face Inference API.  It turns a prompt into a
:class:`~promptstudio.core.outcomes.GenerationOutcome` and never lets an
exception escape.

Key Responsibilities
--------------------
- **Validation** — empty prompts and a missing API token are rejected before
  any network traffic.
- **Upstream call** — one ``POST`` with the bearer token and the fixed
  generation parameters from :class:`~promptstudio.core.config.StudioConfig`.
- **Classification** — the upstream reports "model loading" and generation
  errors as JSON bodies, sometimes with a 2xx status.  Responses are sorted
  into three kinds by :func:`classify_response` before being interpreted:

  ==================  =========================================
  ``FAILURE_STATUS``  non-2xx status, body read as text
  ``JSON_ERROR``      2xx status with a JSON content type
  ``IMAGE``           2xx status with any other content type
  ==================  =========================================

- **Error mapping** — every failure becomes a :class:`GenerationError` with a
  stable status code and message.

Concurrency
-----------
The gateway holds no per-request state.  One pooled ``httpx.AsyncClient`` is
shared by all requests; each upstream call is bounded by
``config.request_timeout``.  Failed calls are not retried: the page offers the
user a manual retry instead.

Usage
-----
::

    from promptstudio.core.config import config
    from promptstudio.core.gateway import ImageGateway

    gateway = ImageGateway(config)
    outcome = await gateway.generate("a lighthouse at dusk, oil painting")
    await gateway.aclose()
"""

from __future__ import annotations

import logging
from enum import Enum

import httpx

from promptstudio.core.config import StudioConfig
from promptstudio.core.outcomes import (
    ErrorKind,
    GenerationError,
    GenerationOutcome,
    ImageResult,
    build_data_uri,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Client-facing messages.
# ---------------------------------------------------------------------------
PROMPT_REQUIRED = "Prompt is required"
MISSING_TOKEN = "Missing Hugging Face token"
MODEL_LOADING = "Model is loading. Please wait 10-20 seconds and try again."
INVALID_TOKEN = "Invalid API token. Please check your Hugging Face configuration."
RATE_LIMITED = "Rate limit exceeded. Please wait a moment before trying again."
MODEL_ERROR_RESPONSE = "Model returned an error response"
MODEL_UNAVAILABLE = "Model is loading or unavailable. Please try again in a moment."
GENERATION_FAILED = "Failed to generate image. Please try again."

# Upstream status → (message, kind) for statuses with a dedicated message.
_STATUS_ERRORS: dict[int, tuple[str, ErrorKind]] = {
    503: (MODEL_LOADING, ErrorKind.UPSTREAM_LOADING),
    401: (INVALID_TOKEN, ErrorKind.UPSTREAM_UNAUTHORIZED),
    429: (RATE_LIMITED, ErrorKind.UPSTREAM_RATE_LIMITED),
}


class ResponseKind(str, Enum):
    """The three shapes an upstream response can take."""

    FAILURE_STATUS = "failure_status"
    JSON_ERROR = "json_error"
    IMAGE = "image"


def classify_response(response: httpx.Response) -> ResponseKind:
    """Decide how an upstream response must be interpreted.

    The status code alone is not enough: the inference API also answers with
    a 2xx status and a JSON error object while the model is warming up.

    Args:
        response: Upstream HTTP response.

    Returns:
        The :class:`ResponseKind` for the response.
    """
    if not response.is_success:
        return ResponseKind.FAILURE_STATUS
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type.lower():
        return ResponseKind.JSON_ERROR
    return ResponseKind.IMAGE


class ImageGateway:
    """Mediates text-to-image requests to the upstream inference endpoint.

    Attributes:
        _config (StudioConfig):
            Application configuration — token, endpoint URL, generation
            parameters and timeout.
        _client (httpx.AsyncClient):
            Pooled HTTP client used for every upstream call.
    """

    def __init__(
        self,
        config: StudioConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialise the gateway.

        Args:
            config: Application configuration instance.
            transport: Optional ``httpx`` transport.  Tests pass an
                ``httpx.MockTransport`` here to fake the upstream.
        """
        self._config = config
        self._client = httpx.AsyncClient(
            timeout=config.request_timeout,
            transport=transport,
        )

    # -- Public interface ---------------------------------------------------

    async def generate(self, prompt: str | None) -> GenerationOutcome:
        """Generate an image for *prompt*.

        Args:
            prompt: Text prompt entered by the user.

        Returns:
            :class:`ImageResult` on success, otherwise a
            :class:`GenerationError` describing the failure.
        """
        # --- Validating ----------------------------------------------------
        if not isinstance(prompt, str) or not prompt.strip():
            return GenerationError(400, PROMPT_REQUIRED, ErrorKind.INVALID_INPUT)
        if not self._config.has_token:
            logger.error("No Hugging Face API token configured.")
            return GenerationError(500, MISSING_TOKEN, ErrorKind.MISCONFIGURED)

        # --- Calling and classifying ---------------------------------------
        try:
            response = await self._client.post(
                self._config.inference_url,
                json=self._build_payload(prompt),
                headers=self._build_headers(),
            )
            logger.info(
                "Upstream responded with status %s (content-type: %r)",
                response.status_code,
                response.headers.get("content-type", ""),
            )
            return self._interpret(response, prompt)
        except Exception:
            logger.exception("Error generating image")
            return GenerationError(500, GENERATION_FAILED, ErrorKind.UNEXPECTED)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    # -- Request assembly ---------------------------------------------------

    def _build_payload(self, prompt: str) -> dict:
        return {
            "inputs": prompt,
            "parameters": self._config.generation_parameters(),
        }

    def _build_headers(self) -> dict[str, str]:
        token = self._config.hf_api_token.get_secret_value().strip()
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    # -- Response interpretation --------------------------------------------

    def _interpret(self, response: httpx.Response, prompt: str) -> GenerationOutcome:
        kind = classify_response(response)
        if kind is ResponseKind.FAILURE_STATUS:
            return self._from_failure_status(response)
        if kind is ResponseKind.JSON_ERROR:
            return self._from_json_error(response)
        return ImageResult(
            image_data_uri=build_data_uri(
                response.content, response.headers.get("content-type")
            ),
            prompt=prompt,
        )

    @staticmethod
    def _from_failure_status(response: httpx.Response) -> GenerationError:
        body = response.text
        logger.error("Upstream error response (%s): %s", response.status_code, body)

        known = _STATUS_ERRORS.get(response.status_code)
        if known is not None:
            message, kind = known
            return GenerationError(response.status_code, message, kind)
        return GenerationError(
            response.status_code, f"API Error: {body}", ErrorKind.UPSTREAM_ERROR
        )

    @staticmethod
    def _from_json_error(response: httpx.Response) -> GenerationError:
        """Handle a 2xx response that carries a JSON error object."""
        logger.error("Upstream returned JSON instead of an image: %s", response.text)
        try:
            data = response.json()
        except ValueError:
            logger.warning("Could not parse upstream JSON response.")
            return GenerationError(503, MODEL_UNAVAILABLE, ErrorKind.UPSTREAM_LOADING)

        error = data.get("error") if isinstance(data, dict) else None
        if not error:
            return GenerationError(503, MODEL_ERROR_RESPONSE, ErrorKind.UPSTREAM_LOADING)
        if isinstance(error, list):
            error = "; ".join(str(item) for item in error)
        return GenerationError(503, str(error), ErrorKind.UPSTREAM_LOADING)
