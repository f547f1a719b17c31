"""
Pytest configuration and fixtures for OnChain agent tests.
"""

import json
import os
import sys
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest
import structlog

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from common.config import Settings


MINT_ADDRESS = "6p6xgHyF7AeE6TZkSmFsko444wqoP15icUSqi2jfGiPN"


@pytest.fixture(autouse=True)
def quiet_structlog():
    """Keep log output off stdout so printed answers can be asserted."""
    structlog.configure(
        processors=[structlog.processors.KeyValueRenderer()],
        logger_factory=structlog.ReturnLoggerFactory(),
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        bitquery_api_key="test-key",
        bitquery_endpoint="https://bitquery.test/eap",
        registry_url="https://registry.test",
        http_timeout=5.0,
    )


def solana_payload(field: str, rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Wrap rows the way the analytics service returns them."""
    return {"data": {"Solana": {field: rows}}}


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    def json_bodies(self) -> List[Dict[str, Any]]:
        return [json.loads(request.content) for request in self.requests]


class FakeRegistry:
    """
    In-memory registry backend served over RecordingTransport.

    ``fail`` makes every request raise a connection error; ``broken_metadata``
    makes GET /agent/{name} answer 500.
    """

    def __init__(
        self,
        agents: Optional[Dict[str, Optional[str]]] = None,
        fail: bool = False,
        broken_metadata: bool = False,
    ):
        self.agents = dict(agents or {})
        self.fail = fail
        self.broken_metadata = broken_metadata
        self.transport = RecordingTransport(self.handle)

    @property
    def paths(self) -> List[str]:
        return [request.url.path for request in self.transport.requests]

    def handle(self, request: httpx.Request) -> httpx.Response:
        if self.fail:
            raise httpx.ConnectError("registry unreachable", request=request)

        path = request.url.path
        if request.method == "GET" and path.startswith("/exists/"):
            return httpx.Response(200, json={"exists": path.split("/")[-1] in self.agents})
        if request.method == "GET" and path.startswith("/agent/"):
            name = path.split("/")[-1]
            if self.broken_metadata:
                return httpx.Response(500)
            if name not in self.agents:
                return httpx.Response(404, json={"error": "not found"})
            return httpx.Response(200, json={"personality": self.agents[name]})
        if request.method == "GET" and path == "/agents":
            return httpx.Response(
                200,
                json=[{"name": name, "personality": p} for name, p in self.agents.items()],
            )
        if request.method == "POST" and path == "/store-agent":
            body = json.loads(request.content)
            self.agents[body["agentName"]] = body["agentDetails"].get("personality")
            return httpx.Response(201, json={"stored": True})
        return httpx.Response(404)


@pytest.fixture
def fake_registry() -> FakeRegistry:
    return FakeRegistry(agents={"satoshi": "curious", "plain": None})


@pytest.fixture
def make_analytics_transport() -> Callable[..., RecordingTransport]:
    """Build a transport answering every analytics query with one response."""

    def factory(
        payload: Any = None,
        status_code: int = 200,
        raises: Optional[Exception] = None,
    ) -> RecordingTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            if raises is not None:
                raise raises
            return httpx.Response(status_code, json=payload)

        return RecordingTransport(handler)

    return factory
