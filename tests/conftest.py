import os

import httpx
import pytest
from fastapi.testclient import TestClient

# Ensure we default to memory backend for tests to avoid filesystem dependencies
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from todo_calendar.api.main import app  # noqa: E402
from todo_calendar.api.repositories import InMemoryRepository, get_repository  # noqa: E402
from todo_calendar.client.api_client import TodoApiClient  # noqa: E402


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def repo():
    # Fresh store per test, shared by every request of that test
    repository = InMemoryRepository()
    app.dependency_overrides[get_repository] = lambda: repository
    yield repository
    app.dependency_overrides.pop(get_repository, None)


@pytest.fixture
def client(repo):
    return TestClient(app)


@pytest.fixture
async def api(repo):
    # Client wired to the app in-process, no network involved
    async with TodoApiClient("http://testserver", timeout=5, transport=httpx.ASGITransport(app=app)) as c:
        yield c
