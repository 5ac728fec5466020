"""
Shared pytest fixtures for chapa-python tests.

HTTP never leaves the process: clients are wired to ``httpx.MockTransport``
backed by :class:`FakeChapa`, which records every request and answers from
a small route table.
"""

import json
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import parse_qsl

import httpx
import pytest

from chapa import AsyncChapaClient, ChapaClient, ChapaConfig

SECRET = "CHASECK_TEST-abc123def456ghi789"
API = "https://api.chapa.co/v1"


class FakeChapa:
    """Route table + request log standing in for api.chapa.co."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.routes: Dict[Tuple[str, str], Tuple[int, bytes, Dict[str, str]]] = {}

    def add(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        status: int = 200,
        content: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        raw = content if content is not None else json.dumps(body).encode("utf-8")
        self.routes[(method.upper(), "/v1" + path)] = (status, raw, dict(headers or {}))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json={"status": "failed", "message": f"no route {key}"})
        status, raw, headers = self.routes[key]
        return httpx.Response(status, content=raw, headers=headers)

    @property
    def last(self) -> httpx.Request:
        assert self.requests, "no request was sent"
        return self.requests[-1]


def fail_if_called(request: httpx.Request) -> httpx.Response:
    pytest.fail(f"transport must not be invoked, got {request.method} {request.url}")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's CHAPA_* variables out of every test."""
    for name in (
        "CHAPA_SECRET_KEY",
        "CHAPA_PUBLIC_KEY",
        "CHAPA_API_PUBLIC_KEY",
        "CHAPA_ENCRYPTION_KEY",
        "CHAPA_BASE_URL",
        "CHAPA_VERSION",
        "CHAPA_TIMEOUT",
        "CHAPA_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config():
    return ChapaConfig(secret_key=SECRET, encryption_key="0123456789abcdefghijklmn")


@pytest.fixture
def fake():
    return FakeChapa()


@pytest.fixture
def client(config, fake):
    with ChapaClient(config, transport=httpx.MockTransport(fake.handler)) as c:
        yield c


@pytest.fixture
def offline_client(config):
    """Client whose transport fails the test if a request ever reaches it."""
    with ChapaClient(config, transport=httpx.MockTransport(fail_if_called)) as c:
        yield c


@pytest.fixture
def make_async_client(config, fake):
    def _make(handler=None) -> AsyncChapaClient:
        return AsyncChapaClient(config, transport=httpx.MockTransport(handler or fake.handler))

    return _make


def form_fields(request: httpx.Request) -> Dict[str, str]:
    return dict(parse_qsl(request.content.decode("utf-8"), keep_blank_values=True))


def json_body(request: httpx.Request) -> Any:
    return json.loads(request.content)
