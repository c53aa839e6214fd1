from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from faultdemo.api import demo
from faultdemo.config import get_settings
from faultdemo.db.session import close_store, set_engine
from faultdemo.main import app
from faultdemo.observability.logging import configure_logging
from faultdemo.services.background import drain_background


@pytest.fixture(scope="session", autouse=True)
def _logging() -> None:
    configure_logging()


@pytest.fixture(autouse=True)
def test_environment() -> None:
    get_settings.cache_clear()
    set_engine(None)

    yield

    close_store()
    get_settings.cache_clear()


@pytest.fixture
def short_slow_delay(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(demo, "SLOW_DELAY_SECONDS", 0.05)


@pytest.fixture
async def api_client() -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    await drain_background()
