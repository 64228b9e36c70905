from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from fancy_gateway.core.config import settings

# Override settings for tests
settings.app_env = "development"
settings.sentry_dsn = ""

from fancy_gateway.main import app  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_dependency_overrides():
    yield
    app.dependency_overrides.clear()


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
