"""
Shared test fixtures for Elements SDK tests.

Provides configuration, app identities and httpx mock transports that
record every outbound request.
"""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from elements_sdk.base_client import BaseClient
from elements_sdk.config import ElementsConfig
from elements_sdk.models import ServiceAddress

APP_ID = "A1"
APP_KEY_ID = "key-id"
APP_KEY_SECRET = "s3cr3t-with:colon-and-32-bytes-minimum!!"
APP_KEY = f"{APP_KEY_ID}:{APP_KEY_SECRET}"

Handler = Callable[[httpx.Request], httpx.Response]


class RequestRecorder:
    """httpx handler that records requests and replies with a canned response."""

    def __init__(self, response: httpx.Response | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self.response = response or httpx.Response(200, text="ok")

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def mock_http_client(handler: Handler) -> httpx.AsyncClient:
    """Build an httpx client whose transport is ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def service_address() -> ServiceAddress:
    """Provide the address of a test service instance."""
    return ServiceAddress(
        host="cluster.elements.example.com",
        service_name="chat",
        service_version="v1",
        instance_id="instance-1",
    )


@pytest.fixture
def recorder() -> RequestRecorder:
    """Provide a recorder answering 200 OK."""
    return RequestRecorder()


@pytest.fixture
def base_client(service_address: ServiceAddress, recorder: RequestRecorder) -> BaseClient:
    """Provide a BaseClient wired to the recorder."""
    return BaseClient(service_address, http_client=mock_http_client(recorder))


@pytest.fixture
def base_config() -> ElementsConfig:
    """Provide a basic SDK configuration for testing."""
    return ElementsConfig(
        host="cluster.elements.example.com",
        app_id=APP_ID,
        app_key=APP_KEY,
        service_name="chat",
        service_version="v1",
        instance_id="instance-1",
    )
