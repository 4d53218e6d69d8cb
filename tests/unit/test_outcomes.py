"""Tests for promptstudio.core.outcomes — outcome types and data URI encoding."""

from __future__ import annotations

import base64

import pytest

from promptstudio.core.outcomes import (
    ErrorKind,
    GenerationError,
    ImageResult,
    build_data_uri,
    image_mime_type,
)


class TestImageMimeType:
    """Choosing the MIME type embedded in the data URI."""

    @pytest.mark.parametrize(
        ("content_type", "expected"),
        [
            ("image/jpeg", "image/jpeg"),
            ("image/webp", "image/webp"),
            ("image/png; charset=binary", "image/png"),
            ("IMAGE/PNG", "image/png"),
            ("application/octet-stream", "image/png"),
            ("text/plain", "image/png"),
            ("", "image/png"),
            (None, "image/png"),
        ],
    )
    def test_mime_resolution(self, content_type, expected):
        assert image_mime_type(content_type) == expected


class TestBuildDataUri:
    """Encoding raw bytes as a data URI."""

    def test_known_bytes(self):
        assert build_data_uri(b"\x01\x02\x03", "image/png") == "data:image/png;base64,AQID"

    def test_payload_decodes_to_input(self):
        content = bytes(range(256))
        uri = build_data_uri(content, "image/jpeg")
        header, payload = uri.split(",", 1)
        assert header == "data:image/jpeg;base64"
        assert base64.b64decode(payload) == content

    def test_empty_content(self):
        assert build_data_uri(b"") == "data:image/png;base64,"


class TestOutcomes:
    """ImageResult and GenerationError payloads."""

    def test_image_result_payload(self):
        result = ImageResult(image_data_uri="data:image/png;base64,AQID", prompt="a fox")
        assert result.ok is True
        assert result.to_payload() == {"imageUrl": "data:image/png;base64,AQID", "prompt": "a fox"}

    def test_generation_error_payload(self):
        error = GenerationError(400, "Prompt is required", ErrorKind.INVALID_INPUT)
        assert error.ok is False
        assert error.to_payload() == {"error": "Prompt is required"}

    def test_generation_error_default_kind(self):
        assert GenerationError(500, "boom").kind is ErrorKind.UNEXPECTED

    def test_outcomes_are_immutable(self):
        error = GenerationError(500, "boom")
        with pytest.raises(AttributeError):
            error.status_code = 200
