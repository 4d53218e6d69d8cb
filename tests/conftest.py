"""Shared pytest fixtures for Prompt Studio tests."""

from __future__ import annotations

from typing import Generator

import httpx
import pytest
from fastapi.testclient import TestClient

from promptstudio.api.main import app, get_gateway
from promptstudio.core.config import StudioConfig
from promptstudio.core.gateway import ImageGateway

TEST_TOKEN = "hf_test_token"

# Minimal bytes standing in for an image; the gateway never decodes them.
FAKE_IMAGE_BYTES = b"\x89PNG\r\n\x1a\nfake-image-data"


class FakeUpstream:
    """Stand-in for the inference endpoint, served through ``httpx.MockTransport``.

    Every request is recorded so tests can assert how many outbound calls
    were made and what they contained.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.error: Exception | None = None
        self.respond(content=FAKE_IMAGE_BYTES, content_type="image/png")

    def respond(
        self,
        status_code: int = 200,
        *,
        content: bytes | str = b"",
        content_type: str | None = None,
        json: object = None,
    ) -> None:
        """Set the response returned for subsequent requests."""
        headers = {"content-type": content_type} if content_type else {}
        if json is not None:
            self._response = lambda: httpx.Response(status_code, json=json)
        else:
            self._response = lambda: httpx.Response(status_code, content=content, headers=headers)

    def fail_with(self, error: Exception) -> None:
        """Raise *error* from the transport instead of responding."""
        self.error = error

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self._response()

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def call_count(self) -> int:
        return len(self.requests)


@pytest.fixture
def test_config() -> StudioConfig:
    """Create a configuration with a fake token and default generation settings.

    Returns:
        StudioConfig instance for testing (ignores any local .env file)
    """
    return StudioConfig(hf_api_token=TEST_TOKEN, _env_file=None)


@pytest.fixture
def tokenless_config(monkeypatch) -> StudioConfig:
    """Create a configuration without an API token."""
    monkeypatch.delenv("HF_API_TOKEN", raising=False)
    monkeypatch.delenv("PROMPTSTUDIO_HF_API_TOKEN", raising=False)
    return StudioConfig(_env_file=None)


@pytest.fixture
def upstream() -> FakeUpstream:
    """Fake inference endpoint that answers with a PNG by default."""
    return FakeUpstream()


@pytest.fixture
def gateway(test_config: StudioConfig, upstream: FakeUpstream) -> ImageGateway:
    """Gateway wired to the fake upstream."""
    return ImageGateway(test_config, transport=upstream.transport)


@pytest.fixture
def test_client(gateway: ImageGateway) -> Generator[TestClient, None, None]:
    """FastAPI test client whose gateway talks to the fake upstream.

    The client is not entered as a context manager, so the lifespan handler
    does not run and no real gateway is created.
    """
    app.dependency_overrides[get_gateway] = lambda: gateway
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
