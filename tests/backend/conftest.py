import os
import uuid

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from app.core import db as db_module
from app.core.security import create_access_token, hash_password
from app.main import app
from app.models.caretaker import Caretaker
from app.models.user import User


TEST_DB_URL = "sqlite://:memory:"
os.environ["DATABASE_URL"] = TEST_DB_URL
db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL
# Lets the app lifespan build tables when a TestClient is used as a context manager
db_module.GENERATE_SCHEMAS = True


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


@pytest_asyncio.fixture
async def db():
    """
    Fresh database without an HTTP client, for service-level tests.
    """
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def client(db):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


@pytest_asyncio.fixture
async def create_user():
    """
    Factory fixture to create member accounts directly via ORM.
    """

    async def _create_user(name: str = "Alice", password: str = "UserPass!23") -> tuple[User, str]:
        user = await User.create(
            name=name,
            email=f"{name.lower()}_{uuid.uuid4().hex[:6]}@example.com",
            password_hash=hash_password(password),
            role="user",
        )
        return user, password

    return _create_user


@pytest_asyncio.fixture
async def create_caretaker():
    async def _create_caretaker(name: str = "Dana Reyes") -> Caretaker:
        return await Caretaker.create(
            name=name,
            role="Geriatric Nurse",
            phone="+1-555-0100",
            email=f"{uuid.uuid4().hex[:6]}@care.example.com",
            specialties=["dementia care"],
        )

    return _create_caretaker


@pytest.fixture
def auth_headers():
    """
    Authorization headers for a user, minted directly without the login endpoint.
    """

    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(str(user.id), user.role)}"}

    return _headers


@pytest.fixture
def live_client():
    """
    Synchronous TestClient with the app lifespan running, for WebSocket tests.

    All sockets opened through it share one event loop, so broadcasts
    between connections behave as in the server. Startup initializes a
    fresh in-memory database.
    """
    with TestClient(app) as test_client:
        yield test_client
