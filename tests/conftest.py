"""
Shared fixtures.

Each test gets its own SQLite database file so the blocked_dates unique
constraint and separate sessions behave as they would against a real server.
"""

import os

# Configure before booking_admin is imported: the module-level engine reads it
os.environ.setdefault("CI", "1")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("ENVIRONMENT", "test")

from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402

from booking_admin.api.dependencies.auth import require_actor_id  # noqa: E402
from booking_admin.api.dependencies.database import get_db  # noqa: E402
from booking_admin.database import Base, build_engine  # noqa: E402
from booking_admin.main import create_app  # noqa: E402
import booking_admin.models  # noqa: E402,F401

TEST_ACTOR_ID = "admin-01"


@pytest.fixture
def test_engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'booking_admin_test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine, expire_on_commit=False)


@pytest.fixture
def db(session_factory) -> Session:
    """A fresh session for direct service/repository tests."""
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def other_db(session_factory) -> Session:
    """A second, independent session (another admin's request)."""
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def app(session_factory):
    application = create_app()

    def _override_get_db():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    application.dependency_overrides[get_db] = _override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    """Client authenticated as TEST_ACTOR_ID."""
    app.dependency_overrides[require_actor_id] = lambda: TEST_ACTOR_ID
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def anonymous_client(app) -> TestClient:
    with TestClient(app) as test_client:
        yield test_client
