"""Pytest fixtures for Rank Relay tests."""

import asyncio
from typing import Any, AsyncGenerator, Callable

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from services.rank_relay.app.config import Settings, get_settings
from services.rank_relay.app.core.schemas import RankChangeRequest
from services.rank_relay.app.dependencies import get_upstream_transport
from services.rank_relay.app.main import app

TEST_KEY = "test-open-cloud-key"


async def never_answers(request: httpx.Request) -> httpx.Response:
    """Upstream that hangs past any attempt timeout."""
    await asyncio.sleep(30)
    return httpx.Response(200)


def refuses_connection(request: httpx.Request) -> httpx.Response:
    """Upstream that cannot be reached."""
    raise httpx.ConnectError("[Errno 111] Connection refused", request=request)


class UpstreamStub:
    """Fake upstream API that records calls and replays scripted replies.

    Each scripted reply is an HTTP status code, an httpx.Response, or a
    callable taking the request. The last reply repeats once the script runs
    out.
    """

    def __init__(self):
        self.calls: list[httpx.Request] = []
        self.replies: list[Any] = [404]

    def respond_with(self, *replies: int | httpx.Response | Callable) -> None:
        self.replies = list(replies)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        reply = self.replies[min(len(self.calls), len(self.replies)) - 1]
        if isinstance(reply, int):
            return httpx.Response(reply, json={"status": reply})
        if isinstance(reply, httpx.Response):
            return reply
        result = reply(request)
        if asyncio.iscoroutine(result):
            result = await result
        return result

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    return Settings(
        OPEN_CLOUD_KEY=TEST_KEY,
        CLOUD_API_BASE_URL="https://cloud.test",
        GROUPS_API_BASE_URL="https://groups.test/",
        UPSTREAM_TIMEOUT_SECONDS=0.1,
        LOG_JSON=False,
    )


@pytest.fixture
def upstream() -> UpstreamStub:
    """Fake upstream that rejects every call until scripted otherwise."""
    return UpstreamStub()


@pytest.fixture
def hanging_reply() -> Callable:
    """Scripted reply that outlives the attempt timeout."""
    return never_answers


@pytest.fixture
def refused_reply() -> Callable:
    """Scripted reply that fails at the transport level."""
    return refuses_connection


@pytest.fixture
def rank_change() -> RankChangeRequest:
    """Sample validated rank change."""
    return RankChangeRequest(group_id=111, user_id=222, role_id=333)


@pytest.fixture
def valid_body() -> dict:
    """Sample inbound request body."""
    return {"groupId": 111, "userId": 222, "roleId": 333}


@pytest.fixture
async def test_client(test_settings, upstream) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with settings and upstream transport overridden."""
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_upstream_transport] = lambda: upstream.transport

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()
