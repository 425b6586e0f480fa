"""Unit tests for the image-service client.

All HTTP traffic goes through ``httpx.MockTransport``; async calls are
driven with ``asyncio.run``.
"""

import asyncio
import json
from unittest.mock import patch

import httpx
import pytest

from ghiblix.core.client import (
    FALLBACK_ERROR_MESSAGE,
    IMAGE_TOO_LARGE_MESSAGE,
    StyleTransferClient,
    read_image_upload,
    service_error_message,
)
from ghiblix.core.errors import GenerationError, InvalidApiKeyError, ResultParseError
from ghiblix.core.prompts import DEFAULT_EDIT_INSTRUCTION


URL_RESPONSE = {"data": [{"url": "https://cdn.example.test/result.png"}]}


class TestGenerateFromText:
    """Tests for StyleTransferClient.generate_from_text."""

    def test_posts_json_to_generations(self, make_client, recorded_requests, valid_api_key):
        """Request goes to /images/generations with the documented body."""
        client = make_client(json=URL_RESPONSE)

        asyncio.run(client.generate_from_text("a cat on a roof", "1792x1024", valid_api_key))

        assert len(recorded_requests) == 1
        request = recorded_requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://images.example.test/v1/images/generations"
        assert request.headers["Authorization"] == f"Bearer {valid_api_key}"
        assert request.headers["Content-Type"].startswith("application/json")

        body = json.loads(request.content)
        assert body["model"] == "sora_image"
        assert body["n"] == 1
        assert body["size"] == "1792x1024"
        assert body["sync_mode"] is False
        assert "a cat on a roof" in body["prompt"]
        assert "Studio Ghibli" in body["prompt"]

    def test_returns_url(self, make_client, valid_api_key):
        """A direct URL in the response is returned unchanged."""
        client = make_client(json=URL_RESPONSE)

        ref = asyncio.run(client.generate_from_text("forest", "1024x1024", valid_api_key))

        assert ref == "https://cdn.example.test/result.png"

    def test_returns_inline_data(self, make_client, valid_api_key):
        """Inline base64 data becomes a data: reference."""
        client = make_client(json={"data": [{"b64_json": "QUJDRA=="}]})

        ref = asyncio.run(client.generate_from_text("forest", "1024x1024", valid_api_key))

        assert ref == "data:image/jpeg;base64,QUJDRA=="

    def test_returns_legacy_reply_data(self, make_client, valid_api_key):
        """A chat-style reply with an embedded marker is parsed."""
        reply = '![image](data:image/png;base64,iVBORw0KGgo="generated")'
        client = make_client(json={"choices": [{"message": {"content": reply}}]})

        ref = asyncio.run(client.generate_from_text("forest", "1024x1024", valid_api_key))

        assert ref == "data:image/jpeg;base64,iVBORw0KGgo="

    @pytest.mark.parametrize("key", ["", None, "sk-short", "pk-" + "x" * 48, "sk-" + "x" * 49])
    def test_invalid_key_sends_nothing(self, make_client, recorded_requests, key):
        """Missing or malformed keys fail before any request is made."""
        client = make_client(json=URL_RESPONSE)

        with pytest.raises(InvalidApiKeyError):
            asyncio.run(client.generate_from_text("forest", "1024x1024", key))

        assert recorded_requests == []

    def test_unknown_size_rejected(self, make_client, recorded_requests, valid_api_key):
        """Sizes outside the three supported resolutions are rejected locally."""
        client = make_client(json=URL_RESPONSE)

        with pytest.raises(ValueError, match="Unsupported size"):
            asyncio.run(client.generate_from_text("forest", "640x480", valid_api_key))

        assert recorded_requests == []


class TestGenerateFromImage:
    """Tests for StyleTransferClient.generate_from_image."""

    def test_posts_multipart_to_edits(
        self, make_client, recorded_requests, valid_api_key, sample_image
    ):
        """Request goes to /images/edits as multipart with all fields."""
        client = make_client(json=URL_RESPONSE)

        asyncio.run(client.generate_from_image("add glasses", sample_image, valid_api_key))

        request = recorded_requests[0]
        assert str(request.url) == "https://images.example.test/v1/images/edits"
        assert request.headers["Authorization"] == f"Bearer {valid_api_key}"
        assert request.headers["Content-Type"].startswith("multipart/form-data")

        content = request.content
        assert b'name="prompt"' in content
        assert b"add glasses" in content
        assert b'name="model"' in content
        assert b"flux-kontext-pro" in content
        assert b'name="sync_mode"' in content
        assert b"false" in content
        assert b'name="image"; filename="photo.png"' in content
        assert b"image/png" in content

    def test_blank_prompt_uses_default_instruction(
        self, make_client, recorded_requests, valid_api_key, sample_image
    ):
        """An empty edit instruction falls back to the style conversion."""
        client = make_client(json=URL_RESPONSE)

        asyncio.run(client.generate_from_image("   ", sample_image, valid_api_key))

        assert DEFAULT_EDIT_INSTRUCTION.encode() in recorded_requests[0].content

    def test_accepts_raw_bytes(self, make_client, valid_api_key, sample_image):
        """Image bytes can be passed instead of a path."""
        client = make_client(json={"data": [{"b64_json": "Wlla"}]})

        ref = asyncio.run(
            client.generate_from_image("", sample_image.read_bytes(), valid_api_key)
        )

        assert ref == "data:image/jpeg;base64,Wlla"

    def test_file_read_off_event_loop(self, make_client, valid_api_key, sample_image):
        """The upload is read in a worker thread, not on the event loop."""
        client = make_client(json=URL_RESPONSE)

        with patch("ghiblix.core.client.asyncio.to_thread", wraps=asyncio.to_thread) as to_thread:
            asyncio.run(client.generate_from_image("", sample_image, valid_api_key))

        to_thread.assert_called_once_with(read_image_upload, sample_image)

    def test_oversized_image_sends_nothing(
        self, make_client, recorded_requests, valid_api_key, oversized_image
    ):
        client = make_client(json=URL_RESPONSE)

        with pytest.raises(GenerationError, match=IMAGE_TOO_LARGE_MESSAGE):
            asyncio.run(client.generate_from_image("", oversized_image, valid_api_key))

        assert recorded_requests == []

    def test_invalid_key_sends_nothing(self, make_client, recorded_requests, sample_image):
        """Key check happens before the upload is even read."""
        client = make_client(json=URL_RESPONSE)

        with pytest.raises(InvalidApiKeyError):
            asyncio.run(client.generate_from_image("", sample_image, "sk-nope"))

        assert recorded_requests == []


class TestErrorHandling:
    """Tests for service, transport and parse failures."""

    def test_error_object_message_surfaced(self, make_client, valid_api_key):
        """``error.message`` is used as the error text."""
        client = make_client(status_code=401, json={"error": {"message": "invalid token"}})

        with pytest.raises(GenerationError) as exc_info:
            asyncio.run(client.generate_from_text("forest", "1024x1024", valid_api_key))

        assert str(exc_info.value) == "invalid token"
        assert exc_info.value.status_code == 401

    def test_error_string_surfaced(self, make_client, valid_api_key, sample_image):
        """A plain string ``error`` is used as the error text."""
        client = make_client(status_code=429, json={"error": "quota exceeded"})

        with pytest.raises(GenerationError, match="quota exceeded"):
            asyncio.run(client.generate_from_image("", sample_image, valid_api_key))

    def test_non_json_error_uses_fallback(self, make_client, valid_api_key):
        """Unreadable error bodies get the generic message with the status."""
        client = make_client(status_code=502, text="<html>Bad Gateway</html>")

        with pytest.raises(GenerationError) as exc_info:
            asyncio.run(client.generate_from_text("forest", "1024x1024", valid_api_key))

        assert str(exc_info.value) == f"{FALLBACK_ERROR_MESSAGE} (502)"
        assert not isinstance(exc_info.value, ResultParseError)

    def test_transport_error_wrapped(self, make_client, valid_api_key):
        """Connection failures become GenerationError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler=handler)

        with pytest.raises(GenerationError) as exc_info:
            asyncio.run(client.generate_from_text("forest", "1024x1024", valid_api_key))

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_unrecognised_success_body(self, make_client, valid_api_key):
        """A 200 without any known image shape is a parse error."""
        client = make_client(json={"data": [{"revised_prompt": "a cat"}]})

        with pytest.raises(ResultParseError):
            asyncio.run(client.generate_from_text("forest", "1024x1024", valid_api_key))

    def test_non_json_success_body(self, make_client, valid_api_key):
        """A 200 that is not JSON is a parse error."""
        client = make_client(text="OK")

        with pytest.raises(ResultParseError):
            asyncio.run(client.generate_from_text("forest", "1024x1024", valid_api_key))


class TestServiceErrorMessage:
    """Tests for service_error_message helper."""

    def test_blank_message_falls_back(self):
        response = httpx.Response(400, json={"error": {"message": "  "}})
        assert service_error_message(response) == f"{FALLBACK_ERROR_MESSAGE} (400)"

    def test_missing_error_field_falls_back(self):
        response = httpx.Response(500, json={"detail": "boom"})
        assert service_error_message(response) == f"{FALLBACK_ERROR_MESSAGE} (500)"


class TestReadImageUpload:
    """Tests for read_image_upload helper."""

    def test_path_upload(self, sample_image):
        filename, content, mime_type = read_image_upload(sample_image)
        assert filename == "photo.png"
        assert content == sample_image.read_bytes()
        assert mime_type == "image/png"

    def test_oversized_image(self, oversized_image):
        with pytest.raises(GenerationError, match=IMAGE_TOO_LARGE_MESSAGE):
            read_image_upload(oversized_image)

    def test_unknown_bytes(self):
        filename, _, mime_type = read_image_upload(b"not an image")
        assert filename == "image"
        assert mime_type == "application/octet-stream"


def test_default_client_uses_global_config():
    """Without arguments the client reads the global configuration."""
    from ghiblix.core.config import config

    client = StyleTransferClient()
    assert client.settings is config
    assert client.transport is None
