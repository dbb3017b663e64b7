"""Shared pytest fixtures for Chillhouse tests."""

from __future__ import annotations

import base64
import shutil
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Generator

import httpx
import pytest
from fastapi.testclient import TestClient

from chillhouse.api.main import create_app
from chillhouse.api.uploads import StagedUpload
from chillhouse.core.config import ChillhouseConfig

SAMPLE_IMAGE = b"\x89PNG\r\n\x1a\n" + b"chillhouse-result-pixels"
SAMPLE_B64 = base64.b64encode(SAMPLE_IMAGE).decode("ascii")

UPLOAD_BYTES = b"\x89PNG\r\n\x1a\n" + b"original-photo"


class FakeUpstream:
    """Stand-in for the image-edit API, served through ``httpx.MockTransport``.

    By default every request succeeds with ``SAMPLE_B64``.  Tests change
    ``status_code``/``payload``/``text`` or install a ``responder`` to shape
    the reply, and inspect ``requests`` afterwards.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.payload: object = {"data": [{"b64_json": SAMPLE_B64}]}
        self.text: str | None = None
        self.responder: Callable[[httpx.Request], httpx.Response] | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        if self.responder is not None:
            return self.responder(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


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
def uploads_dir(temp_dir: Path) -> Path:
    return temp_dir / "uploads"


@pytest.fixture
def test_config(uploads_dir: Path) -> ChillhouseConfig:
    """Create a configured test settings instance with a temporary uploads dir."""
    return ChillhouseConfig(
        _env_file=None,
        openai_api_key="sk-test",
        system_prompt=None,
        uploads_dir=str(uploads_dir),
        upstream_base_url="https://upstream.test/v1",
    )


@pytest.fixture
def unconfigured_config(uploads_dir: Path, monkeypatch) -> ChillhouseConfig:
    """Settings with no upstream credential."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("CHILLHOUSE_OPENAI_API_KEY", raising=False)
    return ChillhouseConfig(
        _env_file=None,
        openai_api_key=None,
        uploads_dir=str(uploads_dir),
        upstream_base_url="https://upstream.test/v1",
    )


@pytest.fixture
def fake_upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def test_client(test_config, fake_upstream) -> Generator[TestClient, None, None]:
    """TestClient for an app whose upstream is ``fake_upstream``."""
    app = create_app(test_config, transport=fake_upstream.transport)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def unconfigured_client(unconfigured_config, fake_upstream) -> Generator[TestClient, None, None]:
    """TestClient for an app started without an upstream credential."""
    app = create_app(unconfigured_config, transport=fake_upstream.transport)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def staged_image(temp_dir: Path) -> StagedUpload:
    """An upload already staged on disk."""
    path = temp_dir / "staged.png"
    path.write_bytes(UPLOAD_BYTES)
    return StagedUpload(
        content=UPLOAD_BYTES,
        filename="photo.png",
        content_type="image/png",
        path=path,
    )


@pytest.fixture
def sample_image() -> bytes:
    """Raw bytes the fake upstream returns (base64-encoded) by default."""
    return SAMPLE_IMAGE


@pytest.fixture
def sample_b64() -> str:
    return SAMPLE_B64


@pytest.fixture
def upload_bytes() -> bytes:
    """Raw bytes of the image a test uploads."""
    return UPLOAD_BYTES
