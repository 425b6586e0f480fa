"""Shared pytest fixtures for GhibliX tests."""

import json
import shutil
import struct
import tempfile
import zlib
from collections.abc import Callable
from pathlib import Path
from typing import Generator

import httpx
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from ghiblix.core.client import StyleTransferClient
from ghiblix.core.config import GhiblixConfig
from ghiblix.ui.models import PageSession, PageState


SAMPLE_CASES = [
    {"original": "case/a-original.jpg", "effect": "case/a-effect.png"},
    {"original": "case/b-original.jpg", "effect": "case/b-effect.png"},
]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> GhiblixConfig:
    """Create a test configuration with temporary data and static directories.

    Args:
        temp_dir: Temporary directory from fixture

    Returns:
        GhiblixConfig instance for testing
    """
    data_dir = temp_dir / "data"
    static_dir = temp_dir / "static"
    (static_dir / "js").mkdir(parents=True)
    data_dir.mkdir()

    (data_dir / "case.json").write_text(json.dumps(SAMPLE_CASES), encoding="utf-8")
    (static_dir / "js" / "slider.js").write_text("// slider binding\n", encoding="utf-8")

    return GhiblixConfig(
        api_host="https://images.example.test/v1",
        asset_host="https://assets.example.test/ghiblix/",
        data_dir=data_dir,
        static_dir=static_dir,
        _env_file=None,
    )


@pytest.fixture
def valid_api_key() -> str:
    """A key with the right prefix and exactly 51 characters."""
    key = "sk-" + "a1B2c3D4" * 6
    assert len(key) == 51
    return key


@pytest.fixture
def sample_image(temp_dir: Path) -> Path:
    """Create a small PNG on disk.

    Returns:
        Path to the image file
    """
    path = temp_dir / "photo.png"
    Image.new("RGB", (8, 8), color=(120, 180, 90)).save(path, format="PNG")
    return path


@pytest.fixture
def not_an_image(temp_dir: Path) -> Path:
    """Create a text file masquerading as an upload."""
    path = temp_dir / "notes.png"
    path.write_text("definitely not pixels", encoding="utf-8")
    return path


def _png_chunk(chunk_type: bytes, data: bytes) -> bytes:
    crc = zlib.crc32(chunk_type + data) & 0xFFFFFFFF
    return struct.pack(">I", len(data)) + chunk_type + data + struct.pack(">I", crc)


@pytest.fixture
def oversized_image(temp_dir: Path) -> Path:
    """Create a tiny PNG whose header claims 20000x20000 pixels.

    Pillow refuses to open it with ``DecompressionBombError``.
    """
    header = struct.pack(">IIBBBBB", 20000, 20000, 8, 2, 0, 0, 0)
    path = temp_dir / "huge.png"
    path.write_bytes(
        b"\x89PNG\r\n\x1a\n"
        + _png_chunk(b"IHDR", header)
        + _png_chunk(b"IDAT", zlib.compress(b""))
        + _png_chunk(b"IEND", b"")
    )
    return path


@pytest.fixture
def page_state() -> PageState:
    """Create a default page state (image mode, nothing entered)."""
    return PageState()


@pytest.fixture
def page_session() -> PageSession:
    """Create an empty page session."""
    return PageSession()


@pytest.fixture
def test_client(test_config: GhiblixConfig) -> Generator[TestClient, None, None]:
    """FastAPI TestClient for an app built from the test configuration.

    Used as a context manager so the mounted Gradio app's startup runs.
    """
    from ghiblix.api.main import create_app

    with TestClient(create_app(test_config)) as client:
        yield client


@pytest.fixture
def recorded_requests() -> list[httpx.Request]:
    """Requests seen by the mock transport, in order."""
    return []


@pytest.fixture
def make_client(
    test_config: GhiblixConfig, recorded_requests: list[httpx.Request]
) -> Callable[..., StyleTransferClient]:
    """Factory for clients backed by ``httpx.MockTransport``.

    Usage:
        client = make_client(json={"data": [{"url": "https://x/y.png"}]})
        client = make_client(status_code=401, json={"error": "nope"})
        client = make_client(handler=my_handler)
    """

    def factory(handler=None, **response_kwargs) -> StyleTransferClient:
        if handler is None:
            response_kwargs.setdefault("status_code", 200)

            def handler(request: httpx.Request) -> httpx.Response:
                return httpx.Response(**response_kwargs)

        def recording_handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return handler(request)

        return StyleTransferClient(test_config, transport=httpx.MockTransport(recording_handler))

    return factory
