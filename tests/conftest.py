# tests/conftest.py

import json
from typing import Any, List, Optional

import httpx
import pytest

from mpesa_sdk.client import MpesaClient
from mpesa_sdk.config import ClientConfig
from mpesa_sdk.http import HttpClient, HttpResponse


TOKEN_PATH = "/v1/token/generate"


class MockApi:
    """Stands in for the M-Pesa servers behind an httpx.MockTransport.

    ``responses`` is consumed in order for every non-token call; the last entry
    is repeated once the queue runs dry. An entry is either ``(status, body)``
    or an httpx exception class, which is raised for that attempt.
    """

    def __init__(self) -> None:
        self.token_calls = 0
        self.token_requests: List[httpx.Request] = []
        self.calls: List[httpx.Request] = []
        self.responses: List[Any] = [(200, {"ResponseCode": "0"})]
        self.token_status = 200
        self.token_payload: Any = {
            "access_token": "token-123",
            "token_type": "Bearer",
            "expires_in": "3599",
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == TOKEN_PATH:
            self.token_calls += 1
            self.token_requests.append(request)
            if isinstance(self.token_payload, str):
                return httpx.Response(self.token_status, text=self.token_payload)
            return httpx.Response(self.token_status, json=self.token_payload)

        self.calls.append(request)
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, type) and issubclass(item, Exception):
            raise item("simulated failure", request=request)
        status, body = item
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))

    @property
    def attempts(self) -> int:
        return len(self.calls)

    def last_json(self) -> Optional[dict]:
        if not self.calls:
            return None
        return json.loads(self.calls[-1].content)


def fake_response(payload: Any, status_code: int = 200) -> HttpResponse:
    text = payload if isinstance(payload, str) else json.dumps(payload)
    body = None if isinstance(payload, str) else payload
    return HttpResponse(status_code=status_code, json=body, text=text)


@pytest.fixture
def cfg() -> ClientConfig:
    return ClientConfig(
        consumer_key="key123",
        consumer_secret="secret123",
        log_level="INFO",
        environment="SANDBOX",
        timeout=5,
        max_retries=3,
    )


@pytest.fixture
def api() -> MockApi:
    return MockApi()


@pytest.fixture
def http_client(cfg, api) -> HttpClient:
    return HttpClient(cfg, client=api.client())


@pytest.fixture
def mpesa(cfg, http_client) -> MpesaClient:
    return MpesaClient(cfg, http=http_client)


@pytest.fixture(autouse=True)
def sleeps(monkeypatch) -> List[float]:
    calls: List[float] = []
    monkeypatch.setattr("mpesa_sdk.http.time.sleep", lambda s: calls.append(s))
    return calls
