"""
Pytest configuration for SmartConnect tests.

Provides settings with fast polling, a scripted fake SmartConnect server
served through ``httpx.MockTransport`` and clients wired to it.
"""

import sys
from pathlib import Path
from typing import Any, Callable, Optional, Union
from urllib.parse import parse_qsl

import httpx
import pytest


# Add the project root to sys.path so tests run without installing
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from smartconnect.core.value_objects import RegisterIdentity  # noqa: E402
from smartconnect.infrastructure.api_client import SmartConnectClient  # noqa: E402
from smartconnect.infrastructure.settings import (  # noqa: E402
    ApiSettings,
    PollingSettings,
    Settings,
)


BASE_URL = "https://api.test/POS"
POLLING_URL = "https://api.test/POS/Transaction/poll/abc123"


# =============================================================================
# Response Helpers
# =============================================================================


def poll_body(status: str, transaction_result: str, result: str = "OK") -> dict[str, Any]:
    """Body of a poll response."""
    return {
        "transactionStatus": status,
        "data": {"TransactionResult": transaction_result, "Result": result},
    }


def form(request: httpx.Request) -> dict[str, str]:
    """Decode the form-encoded body of a recorded request."""
    return dict(parse_qsl(request.content.decode()))


ScriptItem = Union[httpx.Response, Exception, Callable[[httpx.Request], httpx.Response]]


class FakeSmartConnectServer:
    """
    Scripted SmartConnect API.

    Each request consumes the next queued item: a response, an exception
    to raise, or a callable building a response. Once the queue is empty
    the ``default`` factory answers, if set.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._script: list[ScriptItem] = []
        self.default: Optional[Callable[[httpx.Request], httpx.Response]] = None

    def queue(self, *items: ScriptItem) -> "FakeSmartConnectServer":
        self._script.extend(items)
        return self

    def respond_with_json(self, status_code: int, body: Any) -> "FakeSmartConnectServer":
        return self.queue(httpx.Response(status_code, json=body))

    def always(self, status_code: int, body: Any) -> None:
        self.default = lambda request: httpx.Response(status_code, json=body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._script:
            item = self._script.pop(0)
        elif self.default is not None:
            item = self.default
        else:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")

        if isinstance(item, Exception):
            raise item
        if isinstance(item, httpx.Response):
            return item
        return item(request)


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def register() -> RegisterIdentity:
    return RegisterIdentity(
        register_id="6bd3bf1c-11cb-42ae-92c7-46ac39680166",
        register_name="Register 1",
        business_name="Demo Shop",
        vendor_name="Test POS",
    )


@pytest.fixture
def settings(register: RegisterIdentity) -> Settings:
    return Settings(
        register=register,
        api=ApiSettings(base_url=BASE_URL, request_timeout=5.0),
        polling=PollingSettings(interval=0.001, timeout=5.0),
    )


@pytest.fixture
def server() -> FakeSmartConnectServer:
    return FakeSmartConnectServer()


@pytest.fixture
def http_client(server: FakeSmartConnectServer) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(server.handler))


@pytest.fixture
def api_client(settings: Settings, http_client: httpx.AsyncClient) -> SmartConnectClient:
    return SmartConnectClient(settings.api, http_client=http_client)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
