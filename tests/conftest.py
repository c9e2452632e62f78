"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database, schema rebuilt for each test
- Startup and founder fixtures
- JWT token minting for authenticated tests
- HTTPX AsyncClient wired to the test session
"""
import os
import uuid
from dataclasses import dataclass
from typing import AsyncGenerator, Generator

# Must be set before the engine is created on import
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("RESEND_API_KEY", "")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session

from venture_registry.core.deps import COOKIE_NAME, get_db
from venture_registry.core.security import create_session_token
from venture_registry.db.base import Base
from venture_registry.db.models import Startup, User
from venture_registry.db.session import SessionLocal, engine
from venture_registry.main import app


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Fresh schema per test.

    App code commits freely; the tables are dropped afterwards.
    """
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


def make_user(db: Session, email: str | None = None, **fields) -> User:
    user = User(
        id=uuid.uuid4(),
        email=email or f"user-{uuid.uuid4().hex[:8]}@test.com",
        **fields,
    )
    db.add(user)
    db.flush()
    return user


@pytest.fixture(scope="function")
def user_factory(db: Session):
    """Callable creating users: user_factory(email, **fields)."""
    def _make(email: str | None = None, **fields) -> User:
        return make_user(db, email=email, **fields)
    return _make


@pytest.fixture(scope="function")
def startup(db: Session) -> Startup:
    """Create a test startup."""
    startup = Startup(id=uuid.uuid4(), name="Acme Robotics")
    db.add(startup)
    db.flush()
    return startup


@pytest.fixture(scope="function")
def other_startup(db: Session) -> Startup:
    startup = Startup(id=uuid.uuid4(), name="Other Venture")
    db.add(startup)
    db.flush()
    return startup


@pytest.fixture(scope="function")
def founder(db: Session, startup: Startup) -> User:
    """Create a founder who is a current member of startup."""
    return make_user(
        db,
        email="a-founder@test.com",
        fullname="Ada Founder",
        title="CEO",
        startup_id=startup.id,
    )


@pytest.fixture(scope="function")
def outsider(db: Session) -> User:
    """A registered user with no startup relation."""
    return make_user(db, email="outsider@test.com", fullname="Olu Outsider")


# =============================================================================
# Auth Fixtures
# =============================================================================

@dataclass
class TestAuth:
    """Test authentication context."""
    user: User
    token: str
    cookie_name: str = COOKIE_NAME

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


def auth_for(user: User) -> TestAuth:
    return TestAuth(
        user=user,
        token=create_session_token(user_id=user.id, token_version=user.token_version),
    )


@pytest.fixture(scope="function")
def auth_headers(db: Session):
    """Callable returning bearer headers for any user."""
    def _headers(user: User) -> dict[str, str]:
        db.commit()
        return auth_for(user).headers
    return _headers


@pytest.fixture(scope="function")
def test_auth(db: Session, founder: User) -> TestAuth:
    """Create JWT token for the founder."""
    db.commit()
    return auth_for(founder)


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated AsyncClient."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def authed_client(
    db: Session,
    test_auth: TestAuth,
) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient carrying the founder's session cookie."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies={test_auth.cookie_name: test_auth.token},
    ) as c:
        yield c

    app.dependency_overrides.clear()
