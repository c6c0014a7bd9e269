"""Shared pytest fixtures for Lookalike tests."""

import asyncio
import shutil
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Generator

import httpx
import pytest
from fastapi.testclient import TestClient

from fakes import PNG_BYTES, SOURCE_IMAGE_DATA_URL, RecordingEndpoint, Responder

from lookalike.api.main import create_app
from lookalike.core.config import LookalikeConfig
from lookalike.core.models import LookalikeRequest, LookalikeResult
from lookalike.core.provider_clients import ProviderClientBase


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
def static_dir(temp_dir: Path) -> Path:
    """Create a static root with a small front-end.

    A ``secret.txt`` is written next to (not inside) the root so traversal
    tests have a real file to aim at.

    Returns:
        Path to the static root
    """
    root = temp_dir / "public"
    root.mkdir()
    (root / "index.html").write_text("<!doctype html><title>Lookalike</title>")
    (root / "app.js").write_text("console.log('lookalike');")
    (root / "style.css").write_text("body { margin: 0; }")
    (root / "logo.png").write_bytes(PNG_BYTES)
    (root / "assets").mkdir()
    (temp_dir / "secret.txt").write_text("do not serve")
    return root


@pytest.fixture
def test_config(static_dir: Path) -> LookalikeConfig:
    """Pollinations configuration pointing at a fake base URL.

    Returns:
        LookalikeConfig instance for testing
    """
    return LookalikeConfig(
        _env_file=None,
        provider="pollinations",
        pollinations_base_url="https://pollinations.test",
        pollinations_model="flux",
        pollinations_api_key="",
        static_dir=static_dir,
    )


@pytest.fixture
def openai_config(static_dir: Path) -> LookalikeConfig:
    """OpenAI Responses configuration with a test key and fake endpoint.

    Returns:
        LookalikeConfig instance for testing
    """
    return LookalikeConfig(
        _env_file=None,
        provider="openai",
        openai_responses_url="https://openai.test/v1/responses",
        openai_model="gpt-4.1",
        openai_api_key="sk-test",
        static_dir=static_dir,
    )


@pytest.fixture
def en_request() -> LookalikeRequest:
    """English request with explicit style hints."""
    return LookalikeRequest(
        image_data_url=SOURCE_IMAGE_DATA_URL,
        lang="en",
        animal_type="fox",
        traits_text="sharp eyes, warm smile",
    )


@pytest.fixture
def run_generate() -> Callable[..., tuple[LookalikeResult, RecordingEndpoint]]:
    """Run one provider ``generate()`` call against a fake endpoint.

    Returns:
        Callable ``(provider_class, config, responder, request)`` returning
        ``(result, endpoint)``.  Exceptions from ``generate()`` propagate.
    """

    def _run(
        provider_class: type[ProviderClientBase],
        config: LookalikeConfig,
        responder: Responder,
        request: LookalikeRequest,
        endpoint: RecordingEndpoint | None = None,
    ):
        endpoint = endpoint or RecordingEndpoint(responder)

        async def _generate() -> LookalikeResult:
            async with httpx.AsyncClient(transport=httpx.MockTransport(endpoint)) as http_client:
                provider = provider_class(config, http_client)
                return await provider.generate(request)

        return asyncio.run(_generate()), endpoint

    return _run


@pytest.fixture
def make_client() -> Generator[Callable[..., tuple[TestClient, RecordingEndpoint]], None, None]:
    """Build a running TestClient whose provider calls hit a fake endpoint.

    Yields:
        Callable ``(config, responder, **client_kwargs)`` returning
        ``(client, endpoint)``; keyword arguments go to ``TestClient``

    Cleanup:
        Every client is exited, which runs the app shutdown lifespan
    """
    clients: list[TestClient] = []

    def _make(config: LookalikeConfig, responder: Responder, **client_kwargs):
        endpoint = RecordingEndpoint(responder)
        client = TestClient(
            create_app(config, transport=httpx.MockTransport(endpoint)), **client_kwargs
        )
        client.__enter__()
        clients.append(client)
        return client, endpoint

    yield _make

    for client in clients:
        client.__exit__(None, None, None)
