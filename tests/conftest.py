import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from shop_api import settings
from shop_api.database import get_session
from shop_api.limiter import limiter
from shop_api.main import app


@pytest.fixture(name="engine")
def engine_fixture():
    # One shared in-memory database per test
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


def _client_for(engine):
    def get_session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = get_session_override
    limiter.reset()
    return TestClient(app)


@pytest.fixture(name="client")
def client_fixture(engine):
    yield _client_for(engine)
    app.dependency_overrides.clear()
    limiter.reset()


@pytest.fixture(name="broken_client")
def broken_client_fixture():
    # Database without tables: every query fails with OperationalError
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield _client_for(engine)
    app.dependency_overrides.clear()
    limiter.reset()
    engine.dispose()


@pytest.fixture(name="api")
def api_fixture():
    return settings.API_PREFIX


@pytest.fixture(name="auth_headers")
def auth_headers_fixture(client, api):
    response = client.post(f"{api}/users", json={"username": "clerk", "password": "s3cret!"})
    assert response.status_code == 201
    response = client.post(f"{api}/login", json={"username": "clerk", "password": "s3cret!"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}
