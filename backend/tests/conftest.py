import asyncio
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from helios.config import settings
from helios.main import create_app
from helios.schemas.location import Coordinates


class FakeChannel:
    """Records what the dispatcher sends; can be told to fail like a dropped link."""

    def __init__(self, fail: bool = False):
        self.sent: list[dict] = []
        self.fail = fail

    async def send_json(self, message: dict) -> None:
        if self.fail:
            raise ConnectionError("watch not connected")
        self.sent.append(message)


class FakeLookup:
    """Live lookup double: answers (or fails) after `delay` seconds."""

    def __init__(
        self,
        result: Coordinates | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
        available: bool = True,
    ):
        self.result = result
        self.error = error
        self.delay = delay
        self.available = available
        self.calls = 0
        self.cancelled = False

    async def locate(self) -> Coordinates:
        self.calls += 1
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def channel() -> FakeChannel:
    return FakeChannel()


@pytest.fixture
def failing_channel() -> FakeChannel:
    return FakeChannel(fail=True)


@pytest.fixture
def make_lookup():
    return FakeLookup


@pytest.fixture
def no_geolocation(monkeypatch):
    monkeypatch.setattr(settings, "GEOLOCATION_URL", "")


@pytest_asyncio.fixture
async def client() -> AsyncIterator[AsyncClient]:
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
