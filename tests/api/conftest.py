"""API fixtures: an app wired to a loaded plugin through the service container."""

import httpx
import pytest
import pytest_asyncio

from api.dependencies import set_service_container
from api.main import create_app
from services.service_container import ServiceContainer


@pytest.fixture
def app():
    return create_app(docs_enabled=False)


@pytest_asyncio.fixture
async def services(plugin):
    container = ServiceContainer.for_plugin(plugin)
    set_service_container(container)
    yield container
    set_service_container(None)


@pytest_asyncio.fixture
async def client(app, services):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
