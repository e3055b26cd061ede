import os
import tempfile

# Settings são lidas no import do app: configurar o ambiente antes.
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(tempfile.gettempdir(), "company_api_tests.db")
os.environ["AUTH_JWT_SECRET"] = "test-secret-0123456789abcdef0123456789abcdef0123456789abcdef"
os.environ["KAFKA_ENABLED"] = "false"
os.environ["ENV"] = "lab"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from company_api.core.errors import PublishError
from company_api.core.security import hash_password
from company_api.domain import Company, User

TEST_SECRET = os.environ["AUTH_JWT_SECRET"]
TEST_EMAIL = "dev@example.com"
TEST_PASSWORD = "dev-password"


class RecordingPublisher:
    """Guarda os eventos publicados; `fail=True` simula broker fora do ar."""

    def __init__(self, fail: bool = False):
        self.events = []
        self.fail = fail
        self.closed = False

    def publish(self, event) -> None:
        self.events.append(event)
        if self.fail:
            raise PublishError("broker unavailable")

    def close(self) -> None:
        self.closed = True


def make_company(**overrides) -> Company:
    data = dict(
        id="company-123",
        name="TechCorp",
        description="A software company",
        amount_of_employees=100,
        registered=True,
        type="Corporations",
    )
    data.update(overrides)
    return Company(**data)


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def company_store():
    from company_api.stores.company import InMemoryCompanyStore

    return InMemoryCompanyStore()


@pytest.fixture
def user():
    return User(id="user-1", name="Dev", email=TEST_EMAIL, password_hash=hash_password(TEST_PASSWORD))


@pytest.fixture
def user_store(user):
    from company_api.stores.user import InMemoryUserStore

    return InMemoryUserStore([user])


@pytest.fixture
def sql_session():
    from company_api.db import init_db

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    Session = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    db = Session()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def client(company_store, user_store, publisher):
    from company_api import deps
    from company_api.main import app

    app.dependency_overrides[deps.get_company_store] = lambda: company_store
    app.dependency_overrides[deps.get_user_store] = lambda: user_store
    app.dependency_overrides[deps.get_publisher] = lambda: publisher
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_header(client):
    resp = client.post("/api/v1/login", json={"email": TEST_EMAIL, "password": TEST_PASSWORD})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture
def new_company():
    return make_company
