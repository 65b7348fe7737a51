"""Pytest fixtures and test utilities for the RunHare test suite."""

import json
from typing import Any, Callable, Optional

import httpx
import pytest

from runhare import signing
from runhare.models import ConsumerResponse


MOCK_NAMESPACE = "here"
MOCK_SECRET = "secret-key"
MOCK_BASE_URL = "https://service"


# ============================================================================
# PAYLOAD FIXTURES
# ============================================================================


@pytest.fixture
def secret() -> str:
    return MOCK_SECRET


@pytest.fixture
def payload() -> dict[str, str]:
    return {"when": "now", "what": "scratch"}


# ============================================================================
# CLOCK FIXTURES
# ============================================================================


@pytest.fixture
def frozen_clock(monkeypatch):
    """
    Replace the signing clock with a controllable one.

    Yields:
        Mutable dict; set clock["now"] to move time (milliseconds)
    """
    clock = {"now": 1_700_000_000_000}
    monkeypatch.setattr(signing, "current_time_millis", lambda: clock["now"])
    yield clock


# ============================================================================
# REMOTE SERVICE MOCK FIXTURES
# ============================================================================


class MockService:
    """
    Stand-in for the event service, backed by httpx.MockTransport.

    Records every request and answers with a fixed status and body, or
    raises the configured transport error.
    """

    def __init__(
        self,
        status_code: int = 200,
        body: Optional[dict[str, Any]] = None,
        error: Optional[Exception] = None,
    ):
        self.status_code = status_code
        self.body = body if body is not None else {
            "status": "queued",
            "message": "dothis",
            "priority": "normal",
        }
        self.error = error
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last_request(self) -> httpx.Request:
        assert self.requests, "No request reached the mock service"
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last_request.content)


@pytest.fixture
def mock_service() -> MockService:
    return MockService()


@pytest.fixture
def failing_service() -> MockService:
    return MockService(error=httpx.ConnectError("failed"))


# ============================================================================
# CONSUMER HANDLER FIXTURES
# ============================================================================


@pytest.fixture
def recording_handler() -> Callable:
    """
    Async handler that records each call and reports success.

    The calls list is exposed as recording_handler.calls.
    """
    calls: list[tuple[str, Any, Any]] = []

    async def _handler(event, payload, headers):
        calls.append((event, payload, headers))
        return ConsumerResponse.success()

    _handler.calls = calls
    return _handler
