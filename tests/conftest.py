"""Shared fixtures"""

import base64
import os

WEBHOOK_SECRET = "whsec_" + base64.b64encode(b"hypeshelf-test-signing-key").decode("ascii")

# Must be set before hypeshelf.config is imported
os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite://")
os.environ.setdefault("AUTH_JWT_KEY", "test-secret-key")
os.environ.setdefault("IDENTITY_WEBHOOK_SECRET", WEBHOOK_SECRET)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from hypeshelf.main import app  # noqa: E402
from hypeshelf.models import Base, Role, User  # noqa: E402
from hypeshelf.utils.auth import VerifiedIdentity, create_access_token  # noqa: E402
from hypeshelf.utils.database import get_db  # noqa: E402
from hypeshelf.utils.rate_limit import limiter  # noqa: E402


@pytest.fixture
def engine():
    """In-memory database shared by every session in a test"""

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    yield engine

    engine.dispose()


@pytest.fixture
def db_session(engine):
    """Create a test database session"""

    TestingSessionLocal = sessionmaker(bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()


@pytest.fixture
def client(engine):
    """Create a test client backed by the test database"""

    TestingSessionLocal = sessionmaker(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    limiter.reset()

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def users(db_session):
    """Two regular users and an admin"""

    alice = User(external_id="user_alice", email="alice@example.com", display_name="Alice", role=Role.USER)
    carol = User(external_id="user_carol", email="carol@example.com", display_name="Carol", role=Role.USER,
                 avatar_url="https://img.example.com/carol.png")
    admin = User(external_id="user_admin", email="admin@example.com", display_name="Admin", role=Role.ADMIN)
    db_session.add_all([alice, carol, admin])
    db_session.commit()

    return {"alice": alice, "carol": carol, "admin": admin}


@pytest.fixture
def identity():
    """Build the verified identity of a user"""

    def _identity(user: User) -> VerifiedIdentity:
        return VerifiedIdentity(external_id=user.external_id)

    return _identity


@pytest.fixture
def auth_headers():
    """Build bearer headers for an external id"""

    def _headers(external_id: str) -> dict:
        token = create_access_token(data={"sub": external_id})
        return {"Authorization": f"Bearer {token}"}

    return _headers
