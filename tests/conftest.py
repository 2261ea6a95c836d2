"""Shared test fixtures and configuration for autorest-azure tests.

Transports are faked with ``httpx.MockTransport`` or plain callables; nothing
here touches the network.
"""

from collections.abc import Callable, Generator
from typing import Any

import httpx
import pytest

from autorest_azure.config import PollingSettings, Settings
from autorest_azure.core.http_client import Client
from autorest_azure.core.logging import setup_logging


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom settings."""
    setup_logging(json_logs=False, log_level_name="DEBUG")


@pytest.fixture
def test_settings() -> Settings:
    """Settings with polling delays disabled."""
    return Settings(polling=PollingSettings(delay=0.0))


@pytest.fixture
def make_response() -> Callable[..., httpx.Response]:
    """Build a response whose body is still an unread, open stream."""

    def _make(
        status_code: int,
        body: bytes = b"",
        headers: dict[str, str] | None = None,
        url: str = "https://management.azure.com/resource",
    ) -> httpx.Response:
        return httpx.Response(
            status_code,
            headers=headers,
            stream=httpx.ByteStream(body),
            request=httpx.Request("GET", url),
        )

    return _make


@pytest.fixture
def mock_client(test_settings: Settings) -> Generator[Client, None, None]:
    """Client whose transport answers every request with 200."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": "Succeeded"})

    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    client = Client(http_client, settings=test_settings)
    try:
        yield client
    finally:
        http_client.close()


@pytest.fixture
def recorded_inspector() -> tuple[list[Any], Any]:
    """A response inspector that records the responses it saw."""
    seen: list[httpx.Response] = []

    def inspector(responder: Any) -> Any:
        def _respond(response: httpx.Response) -> None:
            responder(response)
            seen.append(response)

        return _respond

    return seen, inspector
