"""API test fixtures — FastAPI test client over the in-memory database and blob store.

Invariants:
    - get_db and get_blob_store are overridden; no real database or S3 is touched
    - auth_headers carries a token signed with the test JWT secret
"""

import pytest
from httpx import ASGITransport, AsyncClient

from portfolio_api.api.dependencies import get_blob_store, get_token_verifier
from portfolio_api.config import get_settings
from portfolio_api.infrastructure.database import get_db
from portfolio_api.main import app


@pytest.fixture
async def client(test_session_factory, blob_store):
    """FastAPI test client with DB and blob store dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    token = get_token_verifier(get_settings()).issue("admin@example.com")
    return {"Authorization": f"Bearer {token}"}
