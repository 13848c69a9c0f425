"""
SmartTodo Backend - Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── memory_store:  InMemoryTodoStore with call counters (no database)
    ├── make_context:  Factory for DispatchContext values
    ├── dispatcher:    The real frozen dispatcher (build_dispatcher())
    ├── app:           create_app() with the store dependency overridden
    └── test_client:   HTTPX AsyncClient over ASGITransport
"""

import os

# Override settings for testing BEFORE any smarttodo imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "testing"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DISPATCH_TIMEOUT_SECONDS"] = "30"

import uuid  # noqa: E402
from typing import Dict, List, Optional  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from smarttodo.config import Settings  # noqa: E402
from smarttodo.models.todo_item import TodoItem  # noqa: E402
from smarttodo.pipeline.context import CancellationToken, DispatchContext  # noqa: E402
from smarttodo.services.registration import build_dispatcher  # noqa: E402
from smarttodo.services.todo_store import TodoStore  # noqa: E402


class InMemoryTodoStore(TodoStore):
    """
    TodoStore backed by a dict.

    Counts calls so tests can assert that rejected requests never touched
    persistence.
    """

    def __init__(self) -> None:
        self.items: Dict[uuid.UUID, TodoItem] = {}
        self.find_calls = 0
        self.add_calls = 0
        self.remove_calls = 0
        self.save_calls = 0

    async def find_by_id(self, item_id: uuid.UUID) -> Optional[TodoItem]:
        self.find_calls += 1
        return self.items.get(item_id)

    async def list_items(self, status: Optional[int] = None) -> List[TodoItem]:
        items = [i for i in self.items.values() if status is None or i.status == status]
        return sorted(items, key=lambda i: i.created_at, reverse=True)

    def add(self, item: TodoItem) -> None:
        self.add_calls += 1
        self.items[item.id] = item

    async def remove(self, item: TodoItem) -> None:
        self.remove_calls += 1
        self.items.pop(item.id, None)

    async def save_changes(self) -> None:
        self.save_calls += 1

    @property
    def touched(self) -> bool:
        return any((self.find_calls, self.add_calls, self.remove_calls, self.save_calls))


@pytest.fixture
def memory_store() -> InMemoryTodoStore:
    return InMemoryTodoStore()


@pytest.fixture
def make_context(memory_store):
    """
    Factory for DispatchContext.

    Usage:
        context = make_context(correlation_id="abc", timeout=0.1)
    """

    def _make(
        correlation_id: Optional[str] = None,
        timeout: Optional[float] = None,
        store: Optional[TodoStore] = None,
    ) -> DispatchContext:
        kwargs = {}
        if correlation_id is not None:
            kwargs["correlation_id"] = correlation_id
        return DispatchContext(
            cancellation=CancellationToken(timeout),
            store=store if store is not None else memory_store,
            **kwargs,
        )

    return _make


@pytest.fixture
def dispatcher():
    return build_dispatcher()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        environment="testing",
        log_level="WARNING",
    )


@pytest.fixture
def app(test_settings, memory_store):
    """
    Full application (middleware, dispatcher, routes) with the SQLAlchemy
    store swapped for the in-memory one.
    """
    from smarttodo.main import create_app
    from smarttodo.routes.dependencies import get_todo_store

    application = create_app(test_settings)
    application.dependency_overrides[get_todo_store] = lambda: memory_store
    return application


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
