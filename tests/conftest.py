"""
Pytest Configuration and Fixtures

Provides reusable async fixtures for testing the MindMeld Backend.
"""

import os
import tempfile

# Settings are read at import time; configure before importing the app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="mindmeld-uploads-"))

from typing import AsyncGenerator, Awaitable, Callable, Dict
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.deps import get_mailer
from app.core.database import Base, build_session_maker, enable_sqlite_foreign_keys, get_db
from app.core.security import create_access_token, hash_password
from app.main import app
from app.models import Category, Product, User
from app.models.enums import UserRole
from app.services.email_service import Mailer


TEST_PASSWORD = "secret123"


# ==================== Database Fixtures ====================

@pytest.fixture
def mock_async_session() -> AsyncMock:
    """
    Create a mock async database session.

    Returns:
        AsyncMock configured to behave like AsyncSession.
    """
    session = AsyncMock(spec=AsyncSession)
    session.add = lambda obj: None
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    return session


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory SQLite database with all tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return build_session_maker(engine)


@pytest_asyncio.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


# ==================== App Fixtures ====================

@pytest.fixture
def fake_mailer() -> AsyncMock:
    """Mailer stand-in that records sends and always succeeds."""
    mailer = AsyncMock(spec=Mailer)
    mailer.send.return_value = True
    mailer.send_password_reset.return_value = True
    return mailer


@pytest_asyncio.fixture
async def client(session_maker, fake_mailer) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTP client bound to the app, with the database and mailer overridden.

    Every request gets its own session on the shared in-memory database.
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: fake_mailer

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ==================== Data Factories ====================

@pytest.fixture
def make_user(session_maker) -> Callable[..., Awaitable[User]]:
    """
    Factory fixture to insert users.

    Usage:
        admin = await make_user(role=UserRole.ADMIN)
    """
    counter = {"n": 0}

    async def _make_user(
        role: UserRole = UserRole.USER,
        name: str | None = None,
        email: str | None = None,
        password: str = TEST_PASSWORD,
    ) -> User:
        counter["n"] += 1
        n = counter["n"]
        async with session_maker() as session:
            user = User(
                name=name or f"{role.value.title()} {n}",
                email=email or f"{role.value}{n}@example.com",
                password_hash=hash_password(password),
                role=role,
            )
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user

    return _make_user


@pytest.fixture
def make_product(session_maker) -> Callable[..., Awaitable[Product]]:
    """Factory fixture to insert courses directly."""
    counter = {"n": 0}

    async def _make_product(
        name: str | None = None,
        price: float = 49.0,
        category_id: int | None = None,
        is_featured: bool = False,
    ) -> Product:
        counter["n"] += 1
        n = counter["n"]
        async with session_maker() as session:
            product = Product(
                name=name or f"Course {n}",
                slug=f"course-{n}",
                price=price,
                category_id=category_id,
                is_featured=is_featured,
                tags=[],
            )
            session.add(product)
            await session.commit()
            await session.refresh(product)
            return product

    return _make_product


@pytest.fixture
def make_category(session_maker) -> Callable[..., Awaitable[Category]]:
    async def _make_category(name: str = "Technical Skills") -> Category:
        async with session_maker() as session:
            category = Category(name=name)
            session.add(category)
            await session.commit()
            await session.refresh(category)
            return category

    return _make_category


def _auth_headers(user: User) -> Dict[str, str]:
    token = create_access_token(subject=user.id, role=user.role.value)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers() -> Callable[[User], Dict[str, str]]:
    """
    Build an Authorization header carrying a fresh token.

    Usage:
        response = await client.get("/api/v1/auth/me", headers=auth_headers(user))
    """
    return _auth_headers
