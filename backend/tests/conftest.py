"""
RecipeBox Backend: Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: Mock AsyncSession for service unit tests
    ├── test_settings:   Settings pointing at a fresh SQLite file in tmp_path
    ├── test_app:        App built from test_settings, schema created and seeded
    ├── test_client:     HTTPX AsyncClient talking to test_app
    ├── john_headers:    Bearer headers for seeded user john_chef (id 1)
    └── maria_headers:   Bearer headers for seeded user maria_cook (id 2)

Seeded data (per test):
    users:      1 john_chef, 2 maria_cook, 3 alex_baker (password123)
    categories: 1 Breakfast, 2 Lunch, 3 Dinner, 4 Dessert, 5 Snacks
    recipes:    1 Rice (john, favorite), 2 Beans (maria), 3 Pork Chops (john)
"""

import os
import tempfile
from typing import Dict
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run before any recipebox import: the module-level settings and app
# are built from these values
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="recipebox_test_"), "import.db"
)
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["LOG_LEVEL"] = "WARNING"

from recipebox.config import Settings  # noqa: E402
from recipebox.main import create_app, initialize  # noqa: E402

TEST_SECRET = "test-secret-not-for-production"
SAMPLE_PASSWORD = "password123"


# ══════════════════════════════════════════════════════════════════════════
# Unit-Test Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.get.return_value = recipe
        await recipe_service.update_recipe(mock_db_session, 1, payload, identity)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Application Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'recipes.db'}",
        jwt_secret=TEST_SECRET,
        seed_sample_data=True,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def test_app(test_settings):
    """
    A fresh app with its own database file, schema and sample data.

    ASGITransport does not run the lifespan, so `initialize()` is called
    directly.
    """
    app = create_app(test_settings)
    await initialize(app)
    yield app
    await app.state.database.dispose()


@pytest_asyncio.fixture
async def test_client(test_app):
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def login_headers(client: AsyncClient, email: str, password: str = SAMPLE_PASSWORD) -> Dict[str, str]:
    response = await client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest_asyncio.fixture
async def john_headers(test_client) -> Dict[str, str]:
    return await login_headers(test_client, "john@recipes.com")


@pytest_asyncio.fixture
async def maria_headers(test_client) -> Dict[str, str]:
    return await login_headers(test_client, "maria@recipes.com")


@pytest.fixture
def new_recipe() -> Dict:
    """A complete, valid create payload in the Dessert category."""
    return {
        "title": "Pancakes",
        "ingredients": "flour, milk, eggs, sugar",
        "instructions": "mix, fry",
        "prep_time": 10,
        "cook_time": 15,
        "servings": 4,
        "difficulty": "easy",
        "favorite": False,
        "category_id": 4,
    }
