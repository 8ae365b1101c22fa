import os
import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from app.core import db as db_module
from app.core.security import hash_password
from app.main import app
from app.models.user import User


TEST_DB_URL = "sqlite://:memory:"
os.environ["DATABASE_URL"] = TEST_DB_URL
db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL

DEFAULT_PASSWORD = "Secret#123"


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
    # Use ASGITransport without lifespan parameter (not supported in all httpx versions)
    try:
        transport = ASGITransport(app=app, lifespan="off")
    except TypeError:
        # Fallback for httpx versions that don't support lifespan parameter
        transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


@pytest_asyncio.fixture
async def create_user(db):
    """
    Factory fixture to create users of any role directly via ORM.
    Counselors get a specialization and level by default.
    """

    async def _create_user(
        role: str = "client",
        password: str = DEFAULT_PASSWORD,
        name: str | None = None,
        **extra,
    ) -> tuple[User, str]:
        suffix = uuid.uuid4().hex[:6]
        fields = {
            "name": name or f"{role}_{suffix}",
            "email": f"{role}_{suffix}@example.com",
            "password_hash": hash_password(password),
            "role": role,
        }
        if role == "counselor":
            fields.setdefault("specialization", "Anxiety")
            fields.setdefault("level", "professional")
        fields.update(extra)
        user = await User.create(**fields)
        return user, password

    return _create_user


@pytest_asyncio.fixture
async def auth_header_factory(client):
    """
    Helper fixture to obtain Authorization headers via the login endpoint.
    """

    async def _get_headers(user: User, password: str = DEFAULT_PASSWORD) -> dict[str, str]:
        resp = await client.post(
            "/api/v1/auth/login",
            json={"email": user.email, "password": password, "role": user.role},
        )
        assert resp.status_code == 200, resp.text
        token = resp.json()["data"]["accessToken"]
        return {"Authorization": f"Bearer {token}"}

    return _get_headers


@pytest_asyncio.fixture
async def login_as(create_user, auth_header_factory):
    """
    Create a user of the given role and return (user, headers).
    """

    async def _login_as(role: str = "client", **extra) -> tuple[User, dict[str, str]]:
        user, password = await create_user(role=role, **extra)
        headers = await auth_header_factory(user, password)
        return user, headers

    return _login_as
