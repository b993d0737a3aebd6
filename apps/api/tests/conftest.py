"""
Test configuration and fixtures.

Provides:
- A fresh SQLite database per test (schema from the ORM metadata)
- Organization / campus / staff fixtures covering every role
- JWT token minting for authenticated tests
- HTTPX AsyncClient factories with cookie and CSRF header
"""
import os
import tempfile
import uuid
from dataclasses import dataclass
from typing import AsyncGenerator, Callable, Generator

# Configure before the app (and its engine/limiter) is imported
_DB_DIR = tempfile.mkdtemp(prefix="church-api-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite+pysqlite:///{_DB_DIR}/test.db")
os.environ["TESTING"] = "1"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session

from app.core.deps import COOKIE_NAME, get_db
from app.core.security import create_session_token
from app.db.base import Base
from app.db.enums import Role
from app.db.models import Location, Organization, User
from app.db.session import SessionLocal, engine
from app.main import app


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Session on a freshly created schema.

    App code commits for real (the batch get-or-create opens its own
    transactions), so isolation comes from recreating the tables.
    """
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_org(db: Session) -> Organization:
    org = Organization(
        id=uuid.uuid4(),
        name="Grace Church",
        slug=f"grace-{uuid.uuid4().hex[:8]}",
    )
    db.add(org)
    db.commit()
    return org


@pytest.fixture(scope="function")
def main_campus(db: Session, test_org: Organization) -> Location:
    location = Location(organization_id=test_org.id, name="Main Campus", slug="main")
    db.add(location)
    db.commit()
    return location


@pytest.fixture(scope="function")
def north_campus(db: Session, test_org: Organization) -> Location:
    location = Location(organization_id=test_org.id, name="North Campus", slug="north")
    db.add(location)
    db.commit()
    return location


@pytest.fixture(scope="function")
def make_user(db: Session, test_org: Organization) -> Callable[..., User]:
    """Factory for users in the test org."""

    def _make_user(
        role: Role = Role.STAFF,
        location: Location | None = None,
        can_see_all_locations: bool = False,
        name: str | None = None,
    ) -> User:
        user = User(
            id=uuid.uuid4(),
            organization_id=test_org.id,
            email=f"{role.value}-{uuid.uuid4().hex[:8]}@test.com",
            name=name or f"Test {role.value.title()}",
            role=role.value,
            can_see_all_locations=can_see_all_locations,
            default_location_id=location.id if location else None,
        )
        db.add(user)
        db.commit()
        return user

    return _make_user


@pytest.fixture(scope="function")
def owner_user(make_user, main_campus) -> User:
    return make_user(Role.OWNER, location=main_campus, name="Olivia Owner")


@pytest.fixture(scope="function")
def admin_user(make_user, main_campus) -> User:
    return make_user(Role.ADMIN, location=main_campus, name="Adam Admin")


@pytest.fixture(scope="function")
def staff_user(make_user, main_campus) -> User:
    return make_user(Role.STAFF, location=main_campus, name="Sam Staff")


# =============================================================================
# Auth Fixtures
# =============================================================================

@dataclass
class TestAuth:
    """Test authentication context."""
    user: User
    token: str
    cookie_name: str = COOKIE_NAME


def make_auth(user: User) -> TestAuth:
    token = create_session_token(
        user_id=user.id,
        org_id=user.organization_id,
        role=user.role,
        token_version=user.token_version,
    )
    return TestAuth(user=user, token=token)


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
def client_for(db: Session):
    """
    Factory for an authenticated AsyncClient (JWT cookie + CSRF header).

    Usage:
        async with client_for(staff_user) as c:
            await c.get("/prayer-requests")
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    def _client(user: User, csrf: bool = True) -> AsyncClient:
        auth = make_auth(user)
        headers = {"X-Requested-With": "XMLHttpRequest"} if csrf else {}
        return AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
            cookies={auth.cookie_name: auth.token},
            headers=headers,
        )

    yield _client

    app.dependency_overrides.clear()
