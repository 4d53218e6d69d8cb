"""Prompt Studio — FastAPI Application.

This module is the single entry point for the web application.  It defines
the FastAPI ``app`` instance, the REST API routes, and the ``main()`` CLI
function that launches the uvicorn server.

Architecture
------------
The application is stateless:

- **Configuration** comes from :data:`~promptstudio.core.config.config`
  (environment variables and ``.env``).
- **Image generation** is delegated to
  :class:`~promptstudio.core.gateway.ImageGateway`, created on start-up and
  stored on ``app.state``.
- **The HTML page** is served as a raw ``HTMLResponse``; the page talks to
  the API with ``fetch`` and keeps all display state in the browser.

Endpoints
---------
========  ========================  ====================================
Method    Path                      Purpose
========  ========================  ====================================
GET       ``/``                     Serve the main HTML page
GET       ``/api/config``           Model endpoint and generation params
POST      ``/api/generate-image``   Generate one image from a prompt
========  ========================  ====================================

Usage
-----
CLI (installed entry point)::

    promptstudio

Direct invocation::

    python -m promptstudio.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

from promptstudio import __version__
from promptstudio.api.models import ErrorResponse, GenerateImageRequest, GenerateImageResponse
from promptstudio.core.config import config
from promptstudio.core.gateway import PROMPT_REQUIRED, ImageGateway

logger = logging.getLogger(__name__)

TEMPLATES_DIR: Path = config.templates_dir

# ---------------------------------------------------------------------------
# Application lifecycle — gateway setup and teardown.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown lifecycle.

    On startup:
        Creates the :class:`ImageGateway` and stores it on ``app.state``.
        A missing API token is only logged; requests will report it.

    On shutdown:
        Closes the gateway's pooled HTTP client.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to the application for the duration of its lifetime.
    """
    # --- Startup -----------------------------------------------------------
    app.state.gateway = ImageGateway(config)
    if not config.has_token:
        logger.warning("HF_API_TOKEN is not set; generation requests will fail.")
    logger.info("ImageGateway initialised for %s", config.inference_url)

    yield  # Application runs here.

    # --- Shutdown ----------------------------------------------------------
    await app.state.gateway.aclose()
    logger.info("ImageGateway closed on shutdown.")


# ---------------------------------------------------------------------------
# FastAPI application instance.
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Prompt Studio",
    description="Text-to-image generation through a hosted inference model.",
    version=__version__,
    lifespan=lifespan,
)

# Allow cross-origin requests so the page can be served from a different
# port during development.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report unreadable request bodies in the same shape as other errors.

    Malformed JSON, a non-object body, or a non-string ``prompt`` all mean
    there is no usable prompt.
    """
    logger.warning("Rejected request body on %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": PROMPT_REQUIRED})


def get_gateway(request: Request) -> ImageGateway:
    """Return the application's :class:`ImageGateway` (FastAPI dependency)."""
    return request.app.state.gateway


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@app.get("/", response_class=HTMLResponse)
async def index() -> HTMLResponse:
    """Serve the main application HTML page.

    Returns:
        The HTML content of the application page.

    Raises:
        HTTPException: 404 if ``index.html`` is not found.
    """
    index_path = TEMPLATES_DIR / "index.html"
    if index_path.exists():
        return HTMLResponse(content=index_path.read_text(encoding="utf-8"))
    raise HTTPException(status_code=404, detail="index.html not found")


@app.get("/api/config")
async def get_config() -> dict:
    """Return the public generation settings.

    The token itself is never exposed; ``token_configured`` only reports
    whether one is present.

    Returns:
        Dictionary with keys ``version``, ``model_url``, ``parameters`` and
        ``token_configured``.
    """
    return {
        "version": __version__,
        "model_url": config.inference_url,
        "parameters": config.generation_parameters(),
        "token_configured": config.has_token,
    }


@app.post(
    "/api/generate-image",
    response_model=GenerateImageResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def generate_image(
    req: GenerateImageRequest,
    gateway: ImageGateway = Depends(get_gateway),
) -> JSONResponse:
    """Generate a single image from a text prompt.

    Args:
        req: Validated :class:`GenerateImageRequest` payload.
        gateway: Gateway injected by :func:`get_gateway`.

    Returns:
        ``200 {"imageUrl", "prompt"}`` on success, otherwise
        ``{"error"}`` with the status chosen by the gateway.
    """
    outcome = await gateway.generate(req.prompt)
    if outcome.ok:
        return JSONResponse(status_code=200, content=outcome.to_payload())

    logger.info("Generation failed (%s): %s", outcome.status_code, outcome.message)
    return JSONResponse(status_code=outcome.status_code, content=outcome.to_payload())


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host, port and log level from
    :data:`~promptstudio.core.config.config` (``PROMPTSTUDIO_SERVER_HOST``,
    ``PROMPTSTUDIO_SERVER_PORT``, ``PROMPTSTUDIO_LOG_LEVEL``).  Defaults to
    ``0.0.0.0:7860``.

    This function is registered as the ``promptstudio`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "promptstudio.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
