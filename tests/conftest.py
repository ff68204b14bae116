"""Pytest configuration and fixtures."""

import os

# Settings are read at import time by src.main
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("APP_SECRET_KEY", "test-secret-key-that-is-long-enough-for-validation")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("GITHUB_CLIENT_ID", "test-client-id")
os.environ.setdefault("GITHUB_CLIENT_SECRET", "test-client-secret")
os.environ.setdefault("GITHUB_CLIENT_MODE", "fake")

from collections.abc import AsyncGenerator, Awaitable, Callable  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from bs4 import BeautifulSoup  # noqa: E402
from httpx import ASGITransport, AsyncClient, Response  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from src.auth.dependencies import get_current_user, get_optional_user  # noqa: E402
from src.db.database import get_db  # noqa: E402
from src.main import app  # noqa: E402
from src.models.base import Base  # noqa: E402
from src.models.user import User  # noqa: E402
from src.services.github import GithubClient, InMemoryGithubClient, get_github_client  # noqa: E402

# Test database URL (uses SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session on a fresh in-memory database."""
    test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    test_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with test_session_maker() as session:
        yield session

    await test_engine.dispose()


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user for authenticated tests."""
    user = User(
        username="testuser",
        name="Test User",
        email="test@example.com",
        github_id=12345,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
def github_client() -> GithubClient:
    """Fake GitHub client knowing only "user"."""
    return InMemoryGithubClient()


def _override_common(db_session: AsyncSession, github_client: GithubClient) -> None:
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_github_client] = lambda: github_client


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession, github_client: GithubClient
) -> AsyncGenerator[AsyncClient, None]:
    """Create an unauthenticated test client."""
    _override_common(db_session, github_client)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def authenticated_client(
    db_session: AsyncSession, test_user: User, github_client: GithubClient
) -> AsyncGenerator[AsyncClient, None]:
    """Create an authenticated test client with a test user."""
    _override_common(db_session, github_client)

    def override_get_current_user() -> User:
        return test_user

    def override_get_optional_user() -> User:
        return test_user

    app.dependency_overrides[get_current_user] = override_get_current_user
    app.dependency_overrides[get_optional_user] = override_get_optional_user

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


def parse_html(response: Response) -> BeautifulSoup:
    """Parse an HTML response body."""
    return BeautifulSoup(response.text, "html.parser")


SubmitForm = Callable[..., Awaitable[Response]]


@pytest.fixture
def submit_form() -> SubmitForm:
    """Submit a form from a fetched page, keeping its hidden fields.

    Usage:
        response = await submit_form(client, page, "#user-profile", {"Input_UserName": "user"})
    """

    async def _submit(
        ac: AsyncClient,
        page: Response,
        selector: str,
        values: dict[str, str],
        **kwargs,
    ) -> Response:
        form = parse_html(page).select_one(selector)
        assert form is not None, f"form {selector} not found"

        data = {
            field["name"]: field.get("value", "")
            for field in form.select("input[type=hidden]")
        }
        data.update(values)
        return await ac.request(
            form.get("method", "get").upper(),
            form["action"],
            data=data,
            **kwargs,
        )

    return _submit
