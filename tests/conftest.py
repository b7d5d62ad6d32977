"""
Pytest configuration and shared fixtures
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

import jingjai.models  # noqa: F401  (registers tables on the metadata)
from jingjai.core.security import create_access_token, get_password_hash
from jingjai.db.session import get_db
from jingjai.main import create_app
from jingjai.models.user import User, UserRole

TEST_PASSWORD = "correct-horse-battery"
# Hash once; bcrypt is deliberately slow
TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def staff_user(db):
    user = User(
        email="staff@jingjai.co",
        password=TEST_PASSWORD_HASH,
        full_name="Staff Member",
        roles=[UserRole.STAFF],
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def actor(staff_user):
    """User id recorded on writes made directly through the services."""
    return staff_user.id


@pytest.fixture
def app(db):
    app = create_app(create_tables=False)

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def anon_client(app):
    return TestClient(app)


@pytest.fixture
def auth_headers(staff_user):
    return {"Authorization": f"Bearer {create_access_token(staff_user.email)}"}


@pytest.fixture
def api(app, auth_headers):
    """TestClient authenticated as staff_user."""
    return TestClient(app, headers=auth_headers)


@pytest.fixture
def password():
    """Plain-text password of staff_user."""
    return TEST_PASSWORD
