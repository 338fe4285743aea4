import os
import uuid

# Must be set before tripchat.config is imported
TEST_DB_URL = "sqlite://:memory:"
os.environ["DATABASE_URL"] = TEST_DB_URL
os.environ["DB_GENERATE_SCHEMAS"] = "true"
os.environ["JWT_SECRET"] = "test-secret"

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from tripchat.core.db import register_db
from tripchat.main import app


@pytest_asyncio.fixture
async def client():
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB.
    Every test gets a clean in-memory SQLite database; tables are recreated from scratch.
    """
    async with register_db(app, generate_schemas=True):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
            yield async_client


@pytest_asyncio.fixture
async def auth_header_factory(client):
    """
    Helper fixture: register a fresh account and return its Authorization header and email.
    """

    async def _get_headers(email: str | None = None, password: str = "TripPass!23") -> tuple[dict[str, str], str]:
        email = email or f"user_{uuid.uuid4().hex[:6]}@example.com"
        reg = await client.post(
            "/api/auth/register",
            json={"name": "Traveller", "email": email, "password": password},
        )
        assert reg.status_code == 201, reg.text
        resp = await client.post(
            "/api/auth/login",
            json={"email": email, "password": password},
        )
        assert resp.status_code == 200, resp.text
        token = resp.json()["token"]
        return {"Authorization": f"Bearer {token}"}, email.lower()

    return _get_headers
