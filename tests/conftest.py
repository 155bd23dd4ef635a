"""pytest configuration and shared fixtures.

Provides an HTTP client bound to the FastAPI app with the process-wide
schedule driver and the rules store swapped for per-test instances, plus a
bare graph fixture for the schedule tests.
"""

from collections.abc import AsyncGenerator
from pathlib import Path
from typing import cast

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from starlette.types import ASGIApp

from taskgraph.api.deps import DriverSession, get_driver_session, get_rules_store
from taskgraph.main import app
from taskgraph.services.rules_store import RulesStore
from taskgraph.services.schedule import DependencyGraph

# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "asyncio: marks tests as async (pytest-asyncio)",
    )


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def driver_session() -> DriverSession:
    """Fresh driver session, isolated from the process-wide one."""
    return DriverSession()


@pytest.fixture
def rules_store(tmp_path: Path) -> RulesStore:
    """Rules store rooted in a temporary directory."""
    return RulesStore(tmp_path / "rules")


@pytest.fixture
def graph() -> DependencyGraph:
    """Empty dependency graph."""
    return DependencyGraph()


# =============================================================================
# HTTP CLIENT FIXTURE
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def async_client(
    driver_session: DriverSession,
    rules_store: RulesStore,
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing API endpoints.

    Uses ASGI transport to test the FastAPI app without running a server.

    Example:
        async def test_validate(async_client):
            response = await async_client.post(
                "/api/v1/schedules/validate", json={"text": "A -> B"}
            )
            assert response.status_code == 200
    """
    app.dependency_overrides[get_driver_session] = lambda: driver_session
    app.dependency_overrides[get_rules_store] = lambda: rules_store

    try:
        transport = ASGITransport(app=cast("ASGIApp", app))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()

